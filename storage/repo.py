# storage/repo.py
from __future__ import annotations

from typing import Any, Dict, List, Optional
import logging

from data.state_io import SnapshotError
from noah.tracker import NoahTracker

logger = logging.getLogger(__name__)


class NoahRepo:
    """
    App-level interface (backend-agnostic).
    The backend only needs load/save/delete of one snapshot document plus an audit log.
    """
    def __init__(self, backend):
        self.db = backend

    def _audit_error(self, action: str, err: Exception) -> None:
        logger.error("%s failed: %s", action, err)
        try:
            self.db.append_audit_log("error", action, str(err))
        except Exception:
            return

    # ---- snapshot ----
    def load_snapshot(self) -> Optional[Dict[str, Any]]:
        try:
            return self.db.load_snapshot()
        except Exception as e:
            self._audit_error("load_snapshot", e)
            raise RuntimeError(f"loading saved data failed: {e}") from e

    def save_snapshot(self, doc: Dict[str, Any]) -> None:
        try:
            self.db.save_snapshot(doc)
        except Exception as e:
            self._audit_error("save_snapshot", e)
            raise RuntimeError(f"saving data failed: {e}") from e

    # ---- tracker ----
    def load_tracker(self, tz=None) -> NoahTracker:
        """
        Saved state, or a fresh tracker when nothing was saved yet.
        Unparsable saved data is moved aside before raising, so the next save starts a new file.
        Read failures leave the file in place (see has_snapshot()).
        """
        try:
            doc = self.db.load_snapshot()
            if doc is None:
                return NoahTracker(tz=tz)
            return NoahTracker.from_snapshot(doc, tz=tz)
        except ValueError as e:
            # bad JSON, SnapshotError and InvalidDateKeyError are all ValueErrors
            self._audit_error("load_tracker", e)
            backup = self._set_aside_snapshot()
            kept = f" (kept as {backup.name})" if backup is not None else ""
            raise RuntimeError(f"saved data is invalid: {e}{kept}") from e
        except Exception as e:
            self._audit_error("load_tracker", e)
            raise RuntimeError(f"loading saved data failed: {e}") from e

    def _set_aside_snapshot(self):
        try:
            backup = self.db.quarantine_snapshot()
        except Exception as e:
            self._audit_error("quarantine_snapshot", e)
            return None
        if backup is not None:
            self.db.append_audit_log("warning", "quarantine_snapshot", f"unreadable snapshot kept as {backup}")
        return backup

    def has_snapshot(self) -> bool:
        """True when a snapshot file is still on disk; unknown counts as True."""
        try:
            return bool(self.db.snapshot_exists())
        except Exception:
            return True

    def save_tracker(self, tracker: NoahTracker) -> None:
        self.save_snapshot(tracker.to_snapshot())

    # ---- privacy / portability ----
    def export_user_data(self, tracker: NoahTracker) -> Dict[str, Any]:
        return tracker.to_snapshot()

    def import_user_data(self, doc: Dict[str, Any], tz=None) -> NoahTracker:
        try:
            tracker = NoahTracker.from_snapshot(doc, tz=tz)
        except (SnapshotError, ValueError) as e:
            self._audit_error("import_user_data", e)
            raise
        self.save_tracker(tracker)
        return tracker

    def delete_user_data(self, tracker: NoahTracker) -> bool:
        tracker.reset()
        try:
            removed = self.db.delete_snapshot()
        except Exception as e:
            self._audit_error("delete_user_data", e)
            raise RuntimeError(f"deleting data failed: {e}") from e
        self.db.append_audit_log("info", "delete_user_data", "snapshot removed" if removed else "nothing stored")
        return removed

    def get_recent_audit_logs(self, limit: int = 50) -> List[Dict[str, Any]]:
        try:
            return self.db.get_recent_audit_logs(limit=limit)
        except Exception:
            return []
