from __future__ import annotations

import datetime as dt
import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Set

from domain.datekey import parse_display_date, parse_key, to_key
from noah.engine import DailyLogStore, UserProfile, WeightEntry, WeightSeries

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class SnapshotError(ValueError):
    """Structurally invalid snapshot document."""


@dataclass
class StateParts:
    profile: Optional[UserProfile] = None
    logs: DailyLogStore = field(default_factory=DailyLogStore)
    weights: WeightSeries = field(default_factory=WeightSeries)
    milestones_shown: Set[str] = field(default_factory=set)


# ----------------------------
# Export
# ----------------------------

def _log_to_doc(fields_: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for k, v in fields_.items():
        if k == "pill_taken_at" and isinstance(v, dt.datetime):
            out[k] = v.isoformat()
        elif k == "symptoms":
            out[k] = sorted(v)
        else:
            out[k] = v
    return out


def export_snapshot(
    profile: Optional[UserProfile],
    logs: DailyLogStore,
    weights: WeightSeries,
    milestones_shown: Set[str],
) -> Dict[str, Any]:
    """Whole app state as a plain nested dict (JSON-safe)."""
    return {
        "version": SNAPSHOT_VERSION,
        "profile": asdict(profile) if profile is not None else None,
        "daily_logs": {to_key(d): _log_to_doc(log.to_dict()) for d, log in logs.items()},
        "weights": [
            {"date": e.date, "weight": e.weight, "dose_label": e.dose_label}
            for e in weights.entries()
        ],
        "milestones_shown": sorted(milestones_shown),
    }


# ----------------------------
# Import
# ----------------------------

def _profile_from_doc(obj: Any) -> Optional[UserProfile]:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise SnapshotError("profile must be an object")
    name = str(obj.get("name", "") or "")
    return UserProfile(
        name=name,
        companion=obj.get("companion", "dog"),
        personality=obj.get("personality", "cheerful"),
        reminder_time=str(obj.get("reminder_time", "08:00") or "08:00"),
        dose_label=str(obj.get("dose_label", "") or ""),
        # Legacy exports used start_weight for the starting weight.
        current_weight=obj.get("current_weight", obj.get("start_weight", "")),
        goal_weight=obj.get("goal_weight", ""),
        onboarded_at=str(obj.get("onboarded_at", "") or ""),
    )


def _log_from_doc(day_key: str, obj: Any) -> Dict[str, Any]:
    if not isinstance(obj, dict):
        raise SnapshotError(f"daily log {day_key} must be an object")
    out = dict(obj)
    raw_ts = out.get("pill_taken_at")
    if isinstance(raw_ts, str) and raw_ts:
        try:
            out["pill_taken_at"] = dt.datetime.fromisoformat(raw_ts)
        except ValueError as e:
            raise SnapshotError(f"daily log {day_key}: bad pill_taken_at {raw_ts!r}") from e
    return out


def import_snapshot(doc: Any) -> StateParts:
    """
    Rebuild state from export_snapshot() output.
    Raises InvalidDateKeyError for bad day keys / display dates, SnapshotError for anything else malformed.
    """
    if not isinstance(doc, dict):
        raise SnapshotError("snapshot must be an object")
    version = doc.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"unsupported snapshot version: {version!r}")

    profile = _profile_from_doc(doc.get("profile"))

    raw_logs = doc.get("daily_logs") or {}
    if not isinstance(raw_logs, dict):
        raise SnapshotError("daily_logs must be an object keyed by YYYY-MM-DD")
    logs = DailyLogStore()
    for k, v in raw_logs.items():
        logs.upsert(parse_key(k), _log_from_doc(k, v))

    raw_weights = doc.get("weights") or []
    if not isinstance(raw_weights, list):
        raise SnapshotError("weights must be a list")
    entries: List[WeightEntry] = []
    for item in raw_weights:
        if not isinstance(item, dict):
            raise SnapshotError("weight entry must be an object")
        date_s = str(item.get("date", ""))
        parse_display_date(date_s)
        try:
            w = float(item.get("weight"))
        except (TypeError, ValueError) as e:
            raise SnapshotError(f"weight entry {date_s}: bad weight {item.get('weight')!r}") from e
        entries.append(WeightEntry(date=date_s, weight=w, dose_label=str(item.get("dose_label", "") or "")))

    shown = doc.get("milestones_shown") or []
    if not isinstance(shown, list):
        raise SnapshotError("milestones_shown must be a list")

    parts = StateParts(
        profile=profile,
        logs=logs,
        weights=WeightSeries(entries),
        milestones_shown={str(x) for x in shown},
    )
    logger.debug("imported snapshot: %d logs, %d weights", len(parts.logs), len(parts.weights))
    return parts


def snapshot_to_json(doc: Dict[str, Any]) -> str:
    return json.dumps(doc, ensure_ascii=False, indent=2)


def snapshot_from_json(s: str) -> Dict[str, Any]:
    try:
        obj = json.loads(s)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"snapshot is not valid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise SnapshotError("snapshot must be an object")
    return obj
