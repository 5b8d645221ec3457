from __future__ import annotations

import datetime as dt
from typing import Optional

from domain.datekey import days_back
from noah.engine import DailyLogStore, WeightSeries


def adherence_rate(store: DailyLogStore, end: dt.date, days: int = 7) -> float:
    window = days_back(end, days)
    if not window:
        return 0.0
    taken = sum(1 for d in window if store.get(d).pill_taken)
    return taken / len(window)


def weight_change_over(series: WeightSeries, end: dt.date, days: int = 7) -> Optional[float]:
    """
    Latest weight in the window minus the earliest weight in the window (negative = lost).
    None when the window holds fewer than two weigh-ins.
    """
    start = end - dt.timedelta(days=max(0, int(days)) - 1)
    inside = [e for e in series.entries() if start <= e.day <= end]
    if len(inside) < 2:
        return None
    return inside[-1].weight - inside[0].weight
