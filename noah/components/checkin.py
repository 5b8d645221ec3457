# noah/components/checkin.py
import streamlit as st

from domain.datekey import display_date, shift_day
from noah.engine import SYMPTOMS
from shared.today_input import checkin_payload


def render_evening_checkin(repo, tracker, persist_func, announce_func):
    st.subheader("End-of-day check-in")
    st.caption("How did today go? Only what you answer is saved; earlier answers are kept.")

    today = tracker.today()
    day = min(st.session_state.get("checkin_day") or today, today)

    nav_prev, nav_day, nav_next = st.columns([1, 3, 1])
    if nav_prev.button("◀", key="checkin_prev", help="Previous day"):
        st.session_state["checkin_day"] = shift_day(day, -1, today)
        st.rerun()
    nav_day.markdown(f"**{display_date(day)}**" + (" (today)" if day == today else ""))
    if nav_next.button("▶", key="checkin_next", help="Next day", disabled=day >= today):
        st.session_state["checkin_day"] = shift_day(day, 1, today)
        st.rerun()

    existing = tracker.logs.get(day)

    st.write("Symptoms")
    cols = st.columns(4)
    for i, symptom in enumerate(SYMPTOMS):
        selected = symptom in (existing.symptoms or set())
        with cols[i % 4]:
            label = f"✓ {symptom}" if selected else symptom
            if st.button(label, key=f"symptom_{day}_{symptom}", use_container_width=True):
                tracker.toggle_symptom(symptom, day)
                persist_func(repo, tracker)
                st.rerun()

    c1, c2 = st.columns(2)
    with c1:
        hunger = st.slider("Hunger (1-10)", 1, 10, value=int(existing.hunger_level or 5), key=f"hunger_{day}")
        energy = st.slider("Energy (1-10)", 1, 10, value=int(existing.energy_level or 5), key=f"energy_{day}")
        workout = st.toggle("Worked out", value=bool(existing.workout), key=f"workout_{day}")
    with c2:
        notes = st.text_area("Notes", value=existing.notes or "", height=140, key=f"notes_{day}")

    if st.button("Save check-in", type="primary", use_container_width=True):
        payload = checkin_payload(
            hunger_level=hunger,
            energy_level=energy,
            workout=workout,
            notes=notes,
        )
        ach = tracker.submit_checkin(payload, day)
        if persist_func(repo, tracker):
            announce_func(ach)
            st.success("Check-in saved.")
            st.rerun()
