from __future__ import annotations

import json

import streamlit as st

from data.state_io import SnapshotError, snapshot_from_json
from noah.coach import reply
from noah.milestones import MILESTONE_CATALOG
from noah.plots import plot_weight_trend
from services.export_service import progress_report_pdf_bytes, snapshot_json_bytes, weights_csv_bytes
from shared.weekly_metrics import adherence_rate, weight_change_over


def render_progress(tracker):
    st.subheader("Progress")
    today = tracker.today()
    s = tracker.summary(today)
    rate = adherence_rate(tracker.logs, today, 7)
    change = weight_change_over(tracker.weights, today, 7)

    c1, c2, c3 = st.columns(3)
    c1.metric("Best streak", f"{s['longest_streak']} days")
    c2.metric("Adherence (7d)", f"{rate * 100:.0f}%")
    c3.metric("Change (7d)", "n/a" if change is None else f"{change:+.1f} lbs")

    if len(tracker.weights):
        fig = plot_weight_trend(tracker.weights, tracker.profile)
        st.pyplot(fig, clear_figure=True)
        changes = tracker.weights.dose_change_points()
        if changes:
            st.caption("Dose changes: " + ", ".join(f"{c.date} → {c.dose}" for c in changes))
    else:
        st.caption("Log your weight to see the trend here.")

    st.write("Milestones")
    for m in MILESTONE_CATALOG:
        mark = "🏆" if m.id in tracker.milestones_shown else "·"
        st.write(f"{mark} {m.title}")


def render_chat(tracker):
    st.subheader("Chat with Noah")
    personality = tracker.profile.personality if tracker.profile is not None else "cheerful"
    history = st.session_state.setdefault("chat_history", [])
    for role, text in history:
        with st.chat_message(role):
            st.write(text)

    msg = st.chat_input("Ask about nausea, the 30-min wait, your weight…")
    if msg:
        answer = reply(msg, tracker.summary(), personality)
        history.append(("user", msg))
        history.append(("assistant", answer))
        st.rerun()


def render_privacy_controls(repo, tracker, replace_tracker_func):
    st.divider()
    with st.expander("Your data", expanded=False):
        today = tracker.today()
        s = tracker.summary(today)

        st.download_button(
            "Download all data (JSON)",
            data=snapshot_json_bytes(repo.export_user_data(tracker)),
            file_name=f"noah_export_{today.isoformat()}.json",
            mime="application/json",
            use_container_width=True,
        )
        st.download_button(
            "Download weights (CSV)",
            data=weights_csv_bytes(tracker.weights),
            file_name=f"noah_weights_{today.isoformat()}.csv",
            mime="text/csv",
            use_container_width=True,
        )
        if st.button("Build progress report (PDF)", use_container_width=True):
            pdf = progress_report_pdf_bytes(
                end_date=today,
                name=s["name"],
                streak=s["streak"],
                longest_streak=s["longest_streak"],
                adherence_7d=adherence_rate(tracker.logs, today, 7),
                weight_lost=s["weight_lost"],
                weight_change_7d=weight_change_over(tracker.weights, today, 7),
                dose_label=s["dose_label"],
                milestones=[m.title for m in MILESTONE_CATALOG if m.id in tracker.milestones_shown],
                series=tracker.weights,
            )
            st.download_button(
                "Download report",
                data=pdf,
                file_name=f"noah_report_{today.isoformat()}.pdf",
                mime="application/pdf",
                use_container_width=True,
            )

        uploaded = st.file_uploader("Restore from a JSON export", type=["json"])
        if uploaded is not None and st.button("Restore", use_container_width=True):
            try:
                doc = snapshot_from_json(uploaded.getvalue().decode("utf-8"))
                restored = repo.import_user_data(doc, tz=tracker.tz)
            except (SnapshotError, ValueError, RuntimeError) as e:
                st.error(f"Restore failed: {e}")
            else:
                replace_tracker_func(restored)
                st.success("Data restored.")
                st.rerun()

        st.caption("Deleting removes your profile, logs, weights and milestones from this device.")
        confirm = st.text_input("Type DELETE to confirm", value="", key="delete_confirm")
        if st.button("Delete all my data", type="secondary", use_container_width=True):
            if confirm.strip() != "DELETE":
                st.error("Type DELETE to confirm.")
            else:
                try:
                    repo.delete_user_data(tracker)
                except RuntimeError as e:
                    st.error(str(e))
                else:
                    replace_tracker_func(tracker)
                    st.success("All data deleted.")
                    st.rerun()

        logs = repo.get_recent_audit_logs(limit=10)
        if logs:
            st.caption("Recent storage events")
            st.code(json.dumps(logs, ensure_ascii=False, indent=2), language="json")
