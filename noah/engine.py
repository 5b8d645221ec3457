# noah/engine.py
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union
import datetime as dt
import logging

from domain.datekey import as_day, display_date, parse_display_date, to_key

logger = logging.getLogger(__name__)


SYMPTOM_NONE = "None"
SYMPTOMS: Tuple[str, ...] = (
    SYMPTOM_NONE,
    "Nausea",
    "Fatigue",
    "Headache",
    "Constipation",
    "Diarrhea",
    "Heartburn",
    "Dizziness",
)

COMPANIONS: Tuple[str, ...] = ("dog", "cat", "owl", "bunny")
PERSONALITIES: Tuple[str, ...] = ("cheerful", "calm", "coach")

LEVEL_MIN = 1
LEVEL_MAX = 10


# ----------------------------
# Data models
# ----------------------------

@dataclass
class UserProfile:
    """
    Set once at onboarding.
    - current_weight is the starting weight; weights keep the raw form value and are parsed on use.
    - reminder_time is "HH:MM" and is only stored (nothing is scheduled from it).
    """
    name: str
    companion: str = "dog"
    personality: str = "cheerful"
    reminder_time: str = "08:00"
    dose_label: str = ""
    current_weight: Union[str, float] = ""
    goal_weight: Union[str, float] = ""
    onboarded_at: str = ""

    def __post_init__(self):
        self.companion = _normalize_choice(self.companion, COMPANIONS)
        self.personality = _normalize_choice(self.personality, PERSONALITIES)


@dataclass
class DailyLog:
    """One calendar day. None means the field was never set for that day."""
    pill_taken: Optional[bool] = None
    pill_taken_at: Optional[dt.datetime] = None
    weight: Optional[float] = None
    workout: Optional[bool] = None
    symptoms: Optional[Set[str]] = None
    hunger_level: Optional[int] = None
    energy_level: Optional[int] = None
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            if v is not None:
                out[f.name] = set(v) if isinstance(v, set) else v
        return out

    def is_empty(self) -> bool:
        return not self.to_dict()


LOG_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(DailyLog))


@dataclass
class WeightEntry:
    date: str            # display-formatted day, e.g. "Oct 19, 2026"
    weight: float
    dose_label: str = ""

    @property
    def day(self) -> dt.date:
        return parse_display_date(self.date)


@dataclass
class DoseChange:
    date: str
    dose: str


# ----------------------------
# Helpers
# ----------------------------

def _normalize_choice(v: Any, allowed: Tuple[str, ...]) -> str:
    raw = str(v or "").strip().lower()
    return raw if raw in allowed else allowed[0]


def _safe_float(x: Any, default: float = 0.0) -> float:
    try:
        if x is None or x == "":
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def clamp_level(v: Any) -> Optional[int]:
    if v is None or v == "":
        return None
    try:
        n = int(round(float(v)))
    except (TypeError, ValueError):
        return None
    return max(LEVEL_MIN, min(LEVEL_MAX, n))


def normalize_symptoms(symptoms: Any) -> Set[str]:
    """The "None" sentinel never coexists with a real symptom; when both arrive, the sentinel wins."""
    out = {str(s).strip() for s in (symptoms or []) if str(s).strip()}
    if SYMPTOM_NONE in out:
        return {SYMPTOM_NONE}
    return out


def toggle_symptom(current: Optional[Set[str]], symptom: str) -> Set[str]:
    """
    Interactive selection rule:
    - picking "None" clears everything else
    - picking a real symptom drops "None"
    - picking a selected symptom again deselects it
    """
    cur = set(current or set())
    s = str(symptom).strip()
    if s in cur:
        cur.discard(s)
        return cur
    if s == SYMPTOM_NONE:
        return {SYMPTOM_NONE}
    cur.discard(SYMPTOM_NONE)
    cur.add(s)
    return cur


def _coerce_log_value(name: str, v: Any) -> Any:
    if v is None:
        return None
    if name in ("pill_taken", "workout"):
        return bool(v)
    if name == "weight":
        w = _safe_float(v, 0.0)
        return w if w > 0 else None
    if name in ("hunger_level", "energy_level"):
        return clamp_level(v)
    if name == "symptoms":
        return normalize_symptoms(v)
    if name == "notes":
        return str(v)
    return v


# ----------------------------
# Daily log store
# ----------------------------

class DailyLogStore:
    """Date-keyed partial records. upsert merges field by field; nothing is ever deleted except by clear()."""

    def __init__(self, records: Optional[Dict[Any, Dict[str, Any]]] = None):
        self._records: Dict[dt.date, Dict[str, Any]] = {}
        for k, v in (records or {}).items():
            self.upsert(k, v)

    def get(self, date) -> DailyLog:
        rec = self._records.get(as_day(date))
        if not rec:
            return DailyLog()
        data = dict(rec)
        if "symptoms" in data:
            data["symptoms"] = set(data["symptoms"])
        return DailyLog(**data)

    def upsert(self, date, fields_: Dict[str, Any]) -> DailyLog:
        day = as_day(date)
        patch: Dict[str, Any] = {}
        for k, v in (fields_ or {}).items():
            if k not in LOG_FIELDS:
                logger.debug("ignoring unknown daily log field %r for %s", k, to_key(day))
                continue
            coerced = _coerce_log_value(k, v)
            if coerced is not None:
                patch[k] = coerced
        rec = self._records.setdefault(day, {})
        rec.update(patch)
        return self.get(day)

    def clear(self) -> None:
        self._records.clear()

    def dates(self) -> List[dt.date]:
        return sorted(self._records)

    def items(self) -> List[Tuple[dt.date, DailyLog]]:
        return [(d, self.get(d)) for d in self.dates()]

    def pill_count(self) -> int:
        return sum(1 for rec in self._records.values() if rec.get("pill_taken"))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, date) -> bool:
        return as_day(date) in self._records


# ----------------------------
# Streaks
# ----------------------------

def pill_streak(store: DailyLogStore, today: dt.date) -> int:
    """Consecutive pill days ending at today. No pill today means 0; one missed day ends the run."""
    count = 0
    cursor = today
    while store.get(cursor).pill_taken:
        count += 1
        cursor -= dt.timedelta(days=1)
    return count


def longest_streak(store: DailyLogStore) -> int:
    best = 0
    run = 0
    prev: Optional[dt.date] = None
    for d, log in store.items():
        if not log.pill_taken:
            run = 0
            prev = None
            continue
        run = run + 1 if prev is not None and (d - prev).days == 1 else 1
        best = max(best, run)
        prev = d
    return best


# ----------------------------
# Weight series
# ----------------------------

class WeightSeries:
    """At most one entry per display day, always sorted ascending by day."""

    def __init__(self, entries: Optional[List[WeightEntry]] = None):
        self._entries: List[WeightEntry] = []
        for e in entries or []:
            self.upsert(e.date, e.weight, e.dose_label)

    def upsert(self, display_day: Union[str, dt.date], weight: float, dose_label: str = "") -> WeightEntry:
        day = display_day if isinstance(display_day, dt.date) else parse_display_date(display_day)
        # "Oct 05, 2026" and "Oct 5, 2026" are the same day and must share one key.
        key = display_date(day)
        entry = WeightEntry(date=key, weight=float(weight), dose_label=str(dose_label or ""))

        for i, e in enumerate(self._entries):
            if e.date == key:
                self._entries[i] = entry
                break
        else:
            self._entries.append(entry)
        self._entries.sort(key=lambda e: e.day)
        return entry

    def dose_change_points(self) -> List[DoseChange]:
        out: List[DoseChange] = []
        for prev, cur in zip(self._entries, self._entries[1:]):
            if cur.dose_label != prev.dose_label:
                out.append(DoseChange(date=cur.date, dose=cur.dose_label))
        return out

    def latest(self) -> Optional[WeightEntry]:
        return self._entries[-1] if self._entries else None

    def entries(self) -> List[WeightEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WeightEntry]:
        return iter(list(self._entries))


# ----------------------------
# Weight aggregates
# ----------------------------

def start_weight(profile: Optional[UserProfile]) -> float:
    return _safe_float(getattr(profile, "current_weight", None), 0.0)


def goal_weight(profile: Optional[UserProfile]) -> float:
    return _safe_float(getattr(profile, "goal_weight", None), 0.0)


def weight_lost(profile: Optional[UserProfile], series: WeightSeries) -> float:
    latest = series.latest()
    if latest is None:
        return 0.0
    return start_weight(profile) - latest.weight


def halfway_distance(profile: Optional[UserProfile]) -> float:
    return (start_weight(profile) - goal_weight(profile)) / 2


def goal_progress(profile: Optional[UserProfile], series: WeightSeries) -> float:
    """Fraction (0..1) of the start->goal distance covered so far."""
    total = start_weight(profile) - goal_weight(profile)
    if total <= 0:
        return 0.0
    frac = weight_lost(profile, series) / total
    return max(0.0, min(1.0, frac))
