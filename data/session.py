from __future__ import annotations

import logging
from typing import Optional

import streamlit as st

from noah.milestones import Achievement
from noah.tracker import NoahTracker

logger = logging.getLogger(__name__)


def init_session_defaults() -> None:
    st.session_state.setdefault("pending_achievement", None)
    st.session_state.setdefault("chat_history", [])
    st.session_state.setdefault("load_error", "")
    st.session_state.setdefault("save_blocked", False)


def get_tracker(repo, tz=None) -> NoahTracker:
    """Tracker lives in session_state; first access loads the saved snapshot."""
    tracker = st.session_state.get("tracker")
    if tracker is None:
        try:
            tracker = repo.load_tracker(tz=tz)
        except RuntimeError as e:
            st.session_state["load_error"] = str(e)
            # invalid files were moved aside; an unreadable one is still there
            st.session_state["save_blocked"] = repo.has_snapshot()
            tracker = NoahTracker(tz=tz)
        st.session_state["tracker"] = tracker
    tracker.timer.roll_over(tracker.today())
    return tracker


def persist(repo, tracker: NoahTracker) -> bool:
    if st.session_state.get("save_blocked"):
        st.error("Saving is paused because your saved data could not be read. Try loading it again first.")
        return False
    try:
        repo.save_tracker(tracker)
        return True
    except RuntimeError as e:
        st.error(f"Saving failed: {e}")
        return False


def announce(achievement: Optional[Achievement]) -> None:
    """Queue a freshly earned milestone; shown once on the next render."""
    if achievement is not None:
        st.session_state["pending_achievement"] = achievement


def pop_announcement() -> Optional[Achievement]:
    ach = st.session_state.get("pending_achievement")
    st.session_state["pending_achievement"] = None
    return ach


def replace_tracker(tracker: NoahTracker) -> None:
    st.session_state["tracker"] = tracker
    st.session_state["pending_achievement"] = None
    st.session_state["save_blocked"] = False
    st.session_state["load_error"] = ""


def reload_tracker() -> None:
    """Drop the session tracker so the next get_tracker() reads the saved file again."""
    for k in ("tracker", "load_error", "save_blocked"):
        st.session_state.pop(k, None)
