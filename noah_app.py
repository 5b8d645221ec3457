# noah_app.py
from __future__ import annotations

import logging

import streamlit as st

from data.session import (
    announce,
    get_tracker,
    init_session_defaults,
    persist,
    pop_announcement,
    reload_tracker,
    replace_tracker,
)
from noah.components.checkin import render_evening_checkin
from noah.components.dashboard import (
    render_insights,
    render_pill_card,
    render_summary_cards,
    render_weight_card,
)
from noah.components.wizard import render_setup_wizard
from settings import configure_logging, get_repo, load_app_config
from ui.dashboard_views import render_chat, render_privacy_controls, render_progress

logger = logging.getLogger(__name__)

COMPANION_EMOJI = {"dog": "🐶", "cat": "🐱", "owl": "🦉", "bunny": "🐰"}


def render_topbar(tracker):
    profile = tracker.profile
    emoji = COMPANION_EMOJI.get(profile.companion, "💙")
    st.title(f"Hey {profile.name}! {emoji}")
    st.caption(f"{tracker.today().strftime('%A, %B %d')} · Noah, your GLP-1 companion")


def render_achievement():
    ach = pop_announcement()
    if ach is not None:
        st.balloons()
        st.success(f"🏆 **{ach.title}**: {ach.message}")


def render_profile(repo, tracker):
    p = tracker.profile
    st.subheader("Profile")
    st.write(f"- Name: **{p.name}**")
    st.write(f"- Companion: **{p.companion}** ({p.personality})")
    st.write(f"- Dose: **{p.dose_label or '-'}**")
    st.write(f"- Reminder time: **{p.reminder_time}** (stored only; Noah does not send notifications)")
    st.write(f"- Starting weight: **{p.current_weight or '-'}** · Goal: **{p.goal_weight or '-'}**")
    render_privacy_controls(repo, tracker, replace_tracker)


# ----------------------------
# Main
# ----------------------------

def main():
    st.set_page_config(page_title="Noah", page_icon="💙")
    cfg = load_app_config()
    configure_logging(cfg)
    init_session_defaults()

    repo = get_repo(cfg)
    tracker = get_tracker(repo, tz=cfg.tz)

    if st.session_state.get("load_error"):
        st.error(f"Saved data could not be loaded: {st.session_state['load_error']}")
        if st.session_state.get("save_blocked"):
            st.caption("Your saved file is still on disk and will not be overwritten until it loads.")
        if st.button("Try loading again"):
            reload_tracker()
            st.rerun()

    if not tracker.onboarded:
        render_setup_wizard(repo, tracker, persist)
        return

    render_topbar(tracker)
    render_achievement()

    tab_home, tab_progress, tab_chat, tab_profile = st.tabs(["Home", "Progress", "Chat", "Profile"])
    with tab_home:
        render_summary_cards(tracker)
        render_insights(tracker)
        st.divider()
        render_pill_card(repo, tracker, persist, announce)
        render_weight_card(repo, tracker, persist, announce)
        st.divider()
        render_evening_checkin(repo, tracker, persist, announce)
    with tab_progress:
        render_progress(tracker)
    with tab_chat:
        render_chat(tracker)
    with tab_profile:
        render_profile(repo, tracker)


if __name__ == "__main__":
    main()
