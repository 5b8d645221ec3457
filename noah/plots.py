# noah/plots.py
from __future__ import annotations

from typing import Optional
import matplotlib.pyplot as plt

from .engine import UserProfile, WeightSeries, goal_weight


def plot_weight_trend(
    series: WeightSeries,
    profile: Optional[UserProfile] = None,
    title: str = "Noah Weight Trend",
    ax: Optional[plt.Axes] = None,
):
    """
    Plot weigh-ins in date order, mark dose changes with vertical lines
    and draw the goal weight when the profile has one.
    Returns matplotlib Figure.
    """
    entries = series.entries()
    days = [e.day for e in entries]
    weights = [e.weight for e in entries]

    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    ax.plot(days, weights, marker="o", label="weight (lbs)")

    for change in series.dose_change_points():
        day = next(e.day for e in entries if e.date == change.date)
        ax.axvline(day, linestyle=":", alpha=0.6, label="_dose_change")
        ax.annotate(
            change.dose,
            xy=(day, 1.0),
            xycoords=("data", "axes fraction"),
            rotation=90,
            va="top",
            ha="right",
            fontsize=8,
        )

    goal = goal_weight(profile)
    if goal > 0:
        ax.axhline(goal, linestyle="--", alpha=0.5, label="goal")

    ax.set_title(title)
    ax.set_ylabel("Weight (lbs)")
    ax.set_xlabel("Date")
    ax.grid(True, alpha=0.2)
    fig.autofmt_xdate()
    ax.legend(loc="upper right")
    return fig
