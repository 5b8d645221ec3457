from __future__ import annotations

import csv
import datetime as dt
import io
import json
from typing import Any, Dict

from noah.engine import WeightSeries


def snapshot_json_bytes(doc: Dict[str, Any]) -> bytes:
    return json.dumps(doc, ensure_ascii=False, indent=2).encode("utf-8")


def weights_csv_bytes(series: WeightSeries) -> bytes:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(["date", "weight_lbs", "dose"])
    for e in series.entries():
        writer.writerow([e.day.isoformat(), f"{e.weight:g}", e.dose_label])
    return buf.getvalue().encode("utf-8")


def progress_report_pdf_bytes(
    end_date: dt.date,
    name: str,
    streak: int,
    longest_streak: int,
    adherence_7d: float,
    weight_lost: float,
    weight_change_7d,
    dose_label: str,
    milestones: list,
    series: WeightSeries,
) -> bytes:
    import matplotlib.pyplot as plt
    from matplotlib.backends.backend_pdf import PdfPages

    from noah.plots import plot_weight_trend

    buf = io.BytesIO()
    change_text = "n/a" if weight_change_7d is None else f"{weight_change_7d:+.1f} lbs"

    with PdfPages(buf) as pdf:
        fig = plt.figure(figsize=(8.27, 11.69))
        ax = fig.add_axes([0.05, 0.45, 0.9, 0.5])
        ax.axis("off")
        lines = [
            "Noah Progress Report",
            f"Name: {name or '-'}",
            f"As of: {end_date.isoformat()}",
            "",
            f"Current streak: {streak} days (best {longest_streak})",
            f"Adherence (7d): {adherence_7d * 100:.0f}%",
            f"Weight lost since start: {weight_lost:.1f} lbs",
            f"Weight change (7d): {change_text}",
            f"Current dose: {dose_label or '-'}",
            "",
            "Milestones",
            ", ".join(milestones) if milestones else "none yet",
        ]
        y = 0.98
        for line in lines:
            ax.text(0.02, y, line, fontsize=11, va="top", family="DejaVu Sans")
            y -= 0.07

        if len(series):
            chart_ax = fig.add_axes([0.1, 0.08, 0.85, 0.32])
            plot_weight_trend(series, title="Weight Trend", ax=chart_ax)

        pdf.savefig(fig)
        plt.close(fig)
    return buf.getvalue()
