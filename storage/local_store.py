# storage/local_store.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional
import datetime as dt
import json
import logging
import os
import random
import time

logger = logging.getLogger(__name__)


# ----------------------------
# Config
# ----------------------------

@dataclass
class StoreConfig:
    data_dir: str = ".noah"
    snapshot_file: str = "noah_state.json"
    audit_file: str = "audit_log.jsonl"


# ----------------------------
# Utilities
# ----------------------------

def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _is_retryable_os_error(exc: Exception) -> bool:
    # Sync clients / antivirus briefly lock files on some desktops.
    return isinstance(exc, (PermissionError, BlockingIOError, InterruptedError))


def _with_retry(op: str, fn, attempts: int = 3, base_delay: float = 0.05):
    last_err: Optional[Exception] = None
    for i in range(max(1, attempts)):
        try:
            return fn()
        except OSError as e:
            last_err = e
            if i >= attempts - 1 or not _is_retryable_os_error(e):
                break
            delay = base_delay * (2 ** i) + random.uniform(0.0, 0.05)
            time.sleep(delay)
    raise RuntimeError(f"local store operation failed: {op}: {last_err}") from last_err


def _atomic_write_text(path: Path, text: str) -> None:
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


# ----------------------------
# Main client
# ----------------------------

class NoahLocalStore:
    """Single-user snapshot file plus a JSONL audit log, both under cfg.data_dir."""

    def __init__(self, cfg: Optional[StoreConfig] = None):
        self.cfg = cfg or StoreConfig()
        self.root = Path(self.cfg.data_dir)
        _with_retry("mkdir(data_dir)", lambda: self.root.mkdir(parents=True, exist_ok=True))

    @property
    def snapshot_path(self) -> Path:
        return self.root / self.cfg.snapshot_file

    @property
    def audit_path(self) -> Path:
        return self.root / self.cfg.audit_file

    # -------- Snapshot --------

    def load_snapshot(self) -> Optional[Dict[str, Any]]:
        """None when nothing was saved yet. Corrupt JSON raises ValueError."""
        path = self.snapshot_path
        if not path.exists():
            return None
        text = _with_retry("read(snapshot)", lambda: path.read_text(encoding="utf-8"))
        if not text.strip():
            return None
        obj = json.loads(text)
        if not isinstance(obj, dict):
            raise ValueError("snapshot file does not hold a JSON object")
        return obj

    def save_snapshot(self, doc: Dict[str, Any]) -> None:
        text = json.dumps(doc, ensure_ascii=False, indent=2)
        _with_retry("write(snapshot)", lambda: _atomic_write_text(self.snapshot_path, text))
        logger.debug("snapshot saved to %s", self.snapshot_path)

    def snapshot_exists(self) -> bool:
        return self.snapshot_path.exists()

    def quarantine_snapshot(self) -> Optional[Path]:
        """Move an unreadable snapshot aside so later saves cannot overwrite it."""
        path = self.snapshot_path
        if not path.exists():
            return None
        stamp = dt.datetime.now(dt.timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
        target = path.with_name(f"{path.name}.corrupt-{stamp}")
        _with_retry("rename(snapshot)", lambda: os.replace(path, target))
        logger.warning("unreadable snapshot moved to %s", target)
        return target

    def delete_snapshot(self) -> bool:
        path = self.snapshot_path
        if not path.exists():
            return False
        _with_retry("unlink(snapshot)", path.unlink)
        return True

    # -------- Audit log --------

    def append_audit_log(self, level: str, action: str, detail: str) -> None:
        payload = {
            "timestamp": _now_iso(),
            "level": str(level or "info"),
            "action": str(action or ""),
            "detail": str(detail or ""),
        }
        line = json.dumps(payload, ensure_ascii=False) + "\n"
        try:
            with self.audit_path.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as e:
            # Never fail main flow because audit log append failed.
            logger.warning("audit log append failed: %s", e)

    def get_recent_audit_logs(self, limit: int = 50) -> List[Dict[str, Any]]:
        path = self.audit_path
        if not path.exists():
            return []
        rows: List[Dict[str, Any]] = []
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(obj, dict):
                rows.append(obj)
        rows.sort(key=lambda r: str(r.get("timestamp", "")), reverse=True)
        return rows[: max(0, int(limit))]
