# noah/components/dashboard.py
import time

import streamlit as st

from noah.coach import daily_insights
from noah.timer import RUNNING, EXPIRED
from shared.today_input import parse_weight_input


def render_summary_cards(tracker):
    s = tracker.summary()
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Streak", f"{s['streak']} days")
    c2.metric("Doses logged", s["total_entries"])
    c3.metric("Latest weight", "-" if s["latest_weight"] is None else f"{s['latest_weight']:.1f} lbs")
    c4.metric("Lost", f"{s['weight_lost']:.1f} lbs")
    if s["goal_progress"] > 0:
        st.progress(s["goal_progress"], text=f"{s['goal_progress'] * 100:.0f}% of the way to your goal")


def render_insights(tracker):
    personality = tracker.profile.personality if tracker.profile is not None else "cheerful"
    for line in daily_insights(tracker.summary(), personality):
        st.write("- " + line)


def render_pill_card(repo, tracker, persist_func, announce_func):
    st.subheader("Today's pill")
    log = tracker.logs.get(tracker.today())
    if log.pill_taken:
        taken_at = log.pill_taken_at.strftime("%H:%M") if log.pill_taken_at else "today"
        st.success(f"Taken at {taken_at}.")
        label = "Restart 30-min timer"
    else:
        label = "I took my pill"

    if st.button(label, type="primary", use_container_width=True):
        st.session_state["timer_last_tick"] = time.monotonic()
        if log.pill_taken:
            tracker.restart_timer()
        else:
            ach = tracker.log_pill()
            if persist_func(repo, tracker):
                announce_func(ach)
        st.rerun()

    _render_timer(tracker)


@st.fragment(run_every=1)
def _render_timer(tracker):
    timer = tracker.timer
    if timer.state == RUNNING:
        # One tick per wall-clock second since the last run.
        now = time.monotonic()
        last = st.session_state.get("timer_last_tick", now)
        for _ in range(int(now - last)):
            timer.tick()
        st.session_state["timer_last_tick"] = last + int(now - last)

    if timer.state == RUNNING:
        st.progress(timer.elapsed_fraction, text=f"Wait before eating or drinking: {timer.remaining_text()}")
        if st.button("Cancel timer", key="cancel_timer"):
            tracker.cancel_timer()
            st.rerun()
    elif timer.state == EXPIRED:
        st.info("30 minutes are up. You can eat and drink now.")


def render_weight_card(repo, tracker, persist_func, announce_func):
    st.subheader("Today's weight")
    with st.form("weight_form", clear_on_submit=True):
        raw = st.text_input("Weight (lbs)", value="")
        submitted = st.form_submit_button("Save weight", use_container_width=True)
    if submitted:
        w = parse_weight_input(raw)
        if w is None:
            st.error("Please enter a weight in pounds, e.g. 195.4")
            return
        ach = tracker.log_weight(w)
        if persist_func(repo, tracker):
            announce_func(ach)
            st.rerun()
