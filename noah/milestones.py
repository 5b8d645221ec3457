# noah/milestones.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple
import datetime as dt

from .engine import (
    DailyLogStore,
    UserProfile,
    WeightSeries,
    halfway_distance,
    pill_streak,
    weight_lost,
)


@dataclass(frozen=True)
class MilestoneStats:
    total_pills: int
    streak: int
    weight_lost: float
    halfway_distance: float


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    message: str


@dataclass(frozen=True)
class Milestone:
    id: str
    title: str
    message: str
    predicate: Callable[[MilestoneStats], bool]

    def achievement(self) -> Achievement:
        return Achievement(id=self.id, title=self.title, message=self.message)


# Declaration order is the priority order when several fire at once.
# Streak milestones match the exact day (==); an evaluation skipped on day 7 or 30 never fires them later.
MILESTONE_CATALOG: Tuple[Milestone, ...] = (
    Milestone(
        "first-pill",
        "First pill logged",
        "You logged your very first dose. Day one is done!",
        lambda s: s.total_pills >= 1,
    ),
    Milestone(
        "seven-day-streak",
        "7-day streak",
        "A full week without missing a dose.",
        lambda s: s.streak == 7,
    ),
    Milestone(
        "thirty-day-streak",
        "30-day streak",
        "Thirty days in a row. That is a habit now.",
        lambda s: s.streak == 30,
    ),
    Milestone(
        "five-lbs",
        "5 lbs down",
        "You have lost your first 5 pounds.",
        lambda s: s.weight_lost >= 5,
    ),
    Milestone(
        "ten-lbs",
        "10 lbs down",
        "Double digits: 10 pounds lost.",
        lambda s: s.weight_lost >= 10,
    ),
    Milestone(
        "twenty-lbs",
        "20 lbs down",
        "Twenty pounds lost. Look how far you have come.",
        lambda s: s.weight_lost >= 20,
    ),
    Milestone(
        "halfway",
        "Halfway to goal",
        "You are halfway to your goal weight.",
        lambda s: s.halfway_distance > 0 and s.weight_lost >= s.halfway_distance,
    ),
)

MILESTONE_IDS: Tuple[str, ...] = tuple(m.id for m in MILESTONE_CATALOG)


def compute_stats(
    store: DailyLogStore,
    series: WeightSeries,
    profile: Optional[UserProfile],
    today: dt.date,
) -> MilestoneStats:
    return MilestoneStats(
        total_pills=store.pill_count(),
        streak=pill_streak(store, today),
        weight_lost=weight_lost(profile, series),
        halfway_distance=halfway_distance(profile),
    )


def first_unshown(stats: MilestoneStats, shown: Iterable[str]) -> Optional[Achievement]:
    seen = set(shown or ())
    for m in MILESTONE_CATALOG:
        if m.id in seen:
            continue
        if m.predicate(stats):
            return m.achievement()
    return None


def evaluate(
    store: DailyLogStore,
    series: WeightSeries,
    profile: Optional[UserProfile],
    shown: Iterable[str],
    today: dt.date,
) -> Optional[Achievement]:
    """
    Returns at most one newly earned achievement (catalog order wins), or None.
    Pure: the caller must add the returned id to its shown set before the next call.
    """
    return first_unshown(compute_stats(store, series, profile, today), shown)
