# noah/coach.py
from __future__ import annotations

from typing import Any, Dict, List, Tuple


# Opening phrase per personality; the rest of each line is shared.
_TONE: Dict[str, Tuple[str, str]] = {
    "cheerful": ("Yay", "You've got this!"),
    "calm": ("Nice and steady", "One day at a time."),
    "coach": ("Good work", "Keep the routine tight."),
}


def _tone(personality: str) -> Tuple[str, str]:
    return _TONE.get(str(personality or "").strip().lower(), _TONE["cheerful"])


def _lbs(x: float) -> str:
    return f"{x:.1f}".rstrip("0").rstrip(".")


def daily_insights(summary: Dict[str, Any], personality: str = "cheerful") -> List[str]:
    """
    Short lines for the home screen, built only from summary values
    (streak, total_entries, weight_lost, dose_label, pill_taken_today, timer_state).
    """
    opener, closer = _tone(personality)
    streak = int(summary.get("streak", 0) or 0)
    total = int(summary.get("total_entries", 0) or 0)
    lost = float(summary.get("weight_lost", 0.0) or 0.0)
    dose = str(summary.get("dose_label", "") or "")

    insights: List[str] = []

    if not summary.get("pill_taken_today"):
        insights.append("Today's pill isn't logged yet. Take it with a sip of water on an empty stomach.")
    elif summary.get("timer_state") == "running":
        insights.append("Your pill is working. Hold off on food, drinks and other meds until the timer ends.")
    else:
        insights.append(f"{opener}! Today's dose is done. {closer}")

    if streak >= 2:
        insights.append(f"You're on a **{streak}-day streak**.")
    elif total > 0 and streak == 0:
        insights.append("Your streak starts again with today's pill. Every day counts.")

    if lost > 0:
        insights.append(f"Down **{_lbs(lost)} lbs** since you started.")
    elif lost < 0:
        insights.append("Weight moves up and down day to day. The weekly trend matters more.")

    if dose:
        insights.append(f"Current dose: {dose}.")
    return insights


_KEYWORD_REPLIES: List[Tuple[Tuple[str, ...], str]] = [
    (
        ("nausea", "nauseous", "sick", "queasy", "vomit"),
        "Nausea is common, especially after a dose increase. Smaller meals, eating slowly and "
        "stopping when you feel full usually help. If it is severe or you can't keep fluids down, "
        "contact your prescriber.",
    ),
    (
        ("timer", "wait", "eat", "coffee", "breakfast", "drink"),
        "Wait 30 minutes after your pill before eating, drinking (beyond a small sip of water) or "
        "taking other oral medicines. The timer on the home screen counts it down for you.",
    ),
    (
        ("weight", "scale", "lbs", "pounds", "plateau"),
        "Weigh in at the same time each day and look at the weekly trend rather than single days.",
    ),
    (
        ("streak", "missed", "forgot", "skip"),
        "If you missed a day, just take today's pill as usual. Don't double up.",
    ),
    (
        ("dose", "titration", "increase", "mg"),
        "Dose steps are set by your prescriber. Log your weight after each change so the timeline "
        "shows how each step is going.",
    ),
]


def reply(message: str, summary: Dict[str, Any], personality: str = "cheerful") -> str:
    """Keyword lookup reply for the chat tab. No state; falls back to a progress recap."""
    opener, closer = _tone(personality)
    text = str(message or "").lower()
    for keywords, answer in _KEYWORD_REPLIES:
        if any(k in text for k in keywords):
            return answer

    streak = int(summary.get("streak", 0) or 0)
    total = int(summary.get("total_entries", 0) or 0)
    lost = float(summary.get("weight_lost", 0.0) or 0.0)
    parts = [f"{opener}! You've logged {total} dose{'s' if total != 1 else ''}"]
    if streak:
        parts.append(f"and you're on a {streak}-day streak")
    recap = " ".join(parts) + "."
    if lost > 0:
        recap += f" You're down {_lbs(lost)} lbs."
    return f"{recap} {closer}"
