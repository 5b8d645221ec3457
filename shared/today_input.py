# shared/today_input.py
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional
import datetime as dt

from noah.engine import clamp_level, normalize_symptoms

WEIGHT_MIN_LBS = 50.0
WEIGHT_MAX_LBS = 1000.0


def parse_weight_input(s: Any) -> Optional[float]:
    """
    Form text -> pounds. Accepts "195", "195.4", "195 lbs", "195,4".
    Returns None for anything outside a plausible range.
    """
    raw = str(s or "").strip().lower()
    for suffix in ("lbs", "lb"):
        if raw.endswith(suffix):
            raw = raw[: -len(suffix)].strip()
            break
    raw = raw.replace(",", ".")
    try:
        w = float(raw)
    except ValueError:
        return None
    if not (WEIGHT_MIN_LBS <= w <= WEIGHT_MAX_LBS):
        return None
    return round(w, 1)


def parse_reminder_time(s: Any, fallback: dt.time = dt.time(8, 0)) -> dt.time:
    try:
        hh, mm = str(s).strip().split(":")
        return dt.time(int(hh), int(mm))
    except (TypeError, ValueError):
        return fallback


def checkin_payload(
    hunger_level: Any = None,
    energy_level: Any = None,
    workout: Optional[bool] = None,
    symptoms: Optional[Iterable[str]] = None,
    notes: Optional[str] = None,
) -> Dict[str, Any]:
    """
    End-of-day check-in -> partial daily log fields.
    Only answered questions are included, so the upsert keeps earlier values for the rest.
    """
    data: Dict[str, Any] = {}
    h = clamp_level(hunger_level)
    if h is not None:
        data["hunger_level"] = h
    e = clamp_level(energy_level)
    if e is not None:
        data["energy_level"] = e
    if workout is not None:
        data["workout"] = bool(workout)
    if symptoms is not None:
        data["symptoms"] = normalize_symptoms(symptoms)
    if notes is not None and str(notes).strip():
        data["notes"] = str(notes).strip()
    return data
