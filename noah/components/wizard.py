# noah/components/wizard.py
import datetime as dt

import streamlit as st

from noah.engine import COMPANIONS, PERSONALITIES, UserProfile
from shared.today_input import parse_weight_input


def render_setup_wizard(repo, tracker, persist_func):
    st.header("Welcome to Noah!")
    st.caption("Your personal companion for GLP-1 pill tracking. This setup runs once.")
    st.info("Noah is a tracking tool. It does not give medical advice; follow your prescriber's instructions.")

    st.subheader("Step 1: About you")
    name = st.text_input("Your name", value="")

    st.subheader("Step 2: Your companion")
    c1, c2 = st.columns(2)
    with c1:
        companion = st.selectbox("Companion", list(COMPANIONS), index=0)
    with c2:
        personality = st.selectbox("Personality", list(PERSONALITIES), index=0)

    st.subheader("Step 3: Medication")
    c3, c4 = st.columns(2)
    with c3:
        dose_label = st.text_input("Current dose", value="", placeholder="e.g. 1.5 mg")
    with c4:
        reminder = st.time_input("Daily reminder time", value=dt.time(8, 0))

    st.subheader("Step 4: Weight")
    c5, c6 = st.columns(2)
    with c5:
        current_raw = st.text_input("Current weight (lbs)", value="")
    with c6:
        goal_raw = st.text_input("Goal weight (lbs)", value="")

    if st.button("Save and start", type="primary", use_container_width=True):
        if not name.strip():
            st.error("Please enter your name.")
            return
        current = parse_weight_input(current_raw)
        goal = parse_weight_input(goal_raw)
        if current_raw.strip() and current is None:
            st.error("Current weight doesn't look right.")
            return
        if goal_raw.strip() and goal is None:
            st.error("Goal weight doesn't look right.")
            return

        profile = UserProfile(
            name=name.strip(),
            companion=companion,
            personality=personality,
            reminder_time=reminder.strftime("%H:%M"),
            dose_label=dose_label.strip(),
            current_weight="" if current is None else current,
            goal_weight="" if goal is None else goal,
        )
        tracker.complete_onboarding(profile)
        if current is not None:
            # Starting weight doubles as the first weigh-in.
            tracker.log_weight(current)
        if persist_func(repo, tracker):
            st.success("You're all set.")
            st.rerun()
