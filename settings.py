# settings.py
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import logging

import streamlit as st

from storage.local_store import NoahLocalStore, StoreConfig
from storage.repo import NoahRepo

logger = logging.getLogger(__name__)


# ----------------------------
# Config
# ----------------------------

@dataclass
class AppConfig:
    data_dir: str = ".noah"
    snapshot_file: str = "noah_state.json"
    audit_file: str = "audit_log.jsonl"
    timezone: str = "America/New_York"
    log_level: str = "INFO"

    @property
    def tz(self):
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("unknown timezone %r, falling back to America/New_York", self.timezone)
            return ZoneInfo("America/New_York")

    def store_config(self) -> StoreConfig:
        return StoreConfig(
            data_dir=self.data_dir,
            snapshot_file=self.snapshot_file,
            audit_file=self.audit_file,
        )


def config_from_mapping(raw: Dict[str, Any]) -> AppConfig:
    known = {f.name for f in fields(AppConfig)}
    kwargs = {k: str(v) for k, v in (raw or {}).items() if k in known and v not in (None, "")}
    return AppConfig(**kwargs)


def load_app_config() -> AppConfig:
    """
    Optional Streamlit secrets:
      [noah]
      data_dir = ".noah"
      timezone = "America/Chicago"
      log_level = "DEBUG"
    Missing secrets file or table -> defaults.
    """
    try:
        raw = dict(st.secrets["noah"]) if "noah" in st.secrets else {}
    except FileNotFoundError:
        raw = {}
    return config_from_mapping(raw)


def configure_logging(cfg: AppConfig) -> None:
    level = getattr(logging, str(cfg.log_level).upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


# ----------------------------
# Repo factory
# ----------------------------

def get_repo(cfg: AppConfig) -> NoahRepo:
    """
    Cached repo instance.
    """
    @st.cache_resource
    def _build_repo(data_dir: str, snapshot_file: str, audit_file: str) -> NoahRepo:
        store = NoahLocalStore(StoreConfig(data_dir=data_dir, snapshot_file=snapshot_file, audit_file=audit_file))
        return NoahRepo(store)

    sc = cfg.store_config()
    return _build_repo(sc.data_dir, sc.snapshot_file, sc.audit_file)
