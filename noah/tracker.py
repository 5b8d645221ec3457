# noah/tracker.py
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional
import datetime as dt
import logging

from data.state_io import export_snapshot, import_snapshot
from domain.datekey import TZ, as_day, day_of, display_date
from domain.datekey import today as local_today

from .engine import (
    DailyLogStore,
    UserProfile,
    WeightSeries,
    goal_progress,
    longest_streak,
    pill_streak,
    toggle_symptom,
    weight_lost,
)
from .milestones import Achievement, evaluate
from .timer import PillTimer

logger = logging.getLogger(__name__)


class NoahTracker:
    """
    Single owner of the mutable app state.
    Every user action commits its change, then runs one milestone evaluation and records what fired.
    """

    def __init__(
        self,
        profile: Optional[UserProfile] = None,
        logs: Optional[DailyLogStore] = None,
        weights: Optional[WeightSeries] = None,
        milestones_shown: Optional[Iterable[str]] = None,
        tz: Optional[dt.tzinfo] = None,
    ):
        self.profile = profile
        self.logs = logs if logs is not None else DailyLogStore()
        self.weights = weights if weights is not None else WeightSeries()
        self.milestones_shown = set(milestones_shown or ())
        self.timer = PillTimer()
        self.tz = tz or TZ

    # ---- snapshot ----
    @classmethod
    def from_snapshot(cls, doc: Dict[str, Any], tz: Optional[dt.tzinfo] = None) -> "NoahTracker":
        parts = import_snapshot(doc)
        return cls(
            profile=parts.profile,
            logs=parts.logs,
            weights=parts.weights,
            milestones_shown=parts.milestones_shown,
            tz=tz,
        )

    def to_snapshot(self) -> Dict[str, Any]:
        return export_snapshot(self.profile, self.logs, self.weights, self.milestones_shown)

    # ---- clock ----
    def today(self, now: Optional[dt.datetime] = None) -> dt.date:
        return local_today(self.tz, now)

    # ---- onboarding ----
    @property
    def onboarded(self) -> bool:
        return self.profile is not None

    def complete_onboarding(self, profile: UserProfile, now: Optional[dt.datetime] = None) -> None:
        if not profile.onboarded_at:
            profile.onboarded_at = (now or dt.datetime.now(self.tz)).isoformat()
        self.profile = profile
        logger.info("onboarding completed for %s", profile.name or "<unnamed>")

    # ---- actions ----
    def log_pill(self, now: Optional[dt.datetime] = None) -> Optional[Achievement]:
        ts = now or dt.datetime.now(self.tz)
        day = day_of(ts, self.tz)
        self.logs.upsert(day, {"pill_taken": True, "pill_taken_at": ts})
        self.timer.start(day)
        return self.check_milestones(day)

    def log_weight(self, weight: float, date=None) -> Optional[Achievement]:
        day = as_day(date) if date is not None else self.today()
        dose = self.profile.dose_label if self.profile is not None else ""
        self.logs.upsert(day, {"weight": weight})
        self.weights.upsert(display_date(day), weight, dose)
        return self.check_milestones(self.today())

    def submit_checkin(self, fields_: Dict[str, Any], date=None) -> Optional[Achievement]:
        day = as_day(date) if date is not None else self.today()
        self.logs.upsert(day, fields_)
        return self.check_milestones(self.today())

    def toggle_symptom(self, symptom: str, date=None) -> None:
        day = as_day(date) if date is not None else self.today()
        current = self.logs.get(day).symptoms
        self.logs.upsert(day, {"symptoms": toggle_symptom(current, symptom)})

    def restart_timer(self, now: Optional[dt.datetime] = None) -> None:
        """Restart the wait from full length. The logged intake time is left as it was."""
        self.timer.start(self.today(now))

    def cancel_timer(self) -> None:
        self.timer.cancel()

    def check_milestones(self, today: Optional[dt.date] = None) -> Optional[Achievement]:
        day = today or self.today()
        ach = evaluate(self.logs, self.weights, self.profile, self.milestones_shown, day)
        if ach is not None:
            self.milestones_shown.add(ach.id)
            logger.info("milestone reached: %s", ach.id)
        return ach

    def reset(self) -> None:
        """Data deletion: back to an empty, not-onboarded state."""
        self.logs.clear()
        self.weights.clear()
        self.milestones_shown.clear()
        self.timer.cancel()
        self.timer.started_on = None
        self.profile = None
        logger.info("tracker state cleared")

    # ---- read-only summaries ----
    def streak(self, today: Optional[dt.date] = None) -> int:
        return pill_streak(self.logs, today or self.today())

    def summary(self, today: Optional[dt.date] = None) -> Dict[str, Any]:
        """Plain values for the presentation layer and the coach."""
        day = today or self.today()
        latest = self.weights.latest()
        log = self.logs.get(day)
        return {
            "name": self.profile.name if self.profile is not None else "",
            "streak": pill_streak(self.logs, day),
            "longest_streak": longest_streak(self.logs),
            "total_entries": self.logs.pill_count(),
            "pill_taken_today": bool(log.pill_taken),
            "latest_weight": latest.weight if latest is not None else None,
            "weight_lost": weight_lost(self.profile, self.weights),
            "goal_progress": goal_progress(self.profile, self.weights),
            "dose_label": self.profile.dose_label if self.profile is not None else "",
            "timer_state": self.timer.state,
        }
