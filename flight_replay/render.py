from __future__ import annotations

from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np

from .domain import AircraftRecording, Procedure, ProcedureWindow


WINDOW_COLORS = {
    Procedure.TAKE_OFF: "tab:green",
    Procedure.LANDING: "tab:orange",
}


def _series(channel, *fields):
    t = channel.timestamps().astype(float) / 1000.0
    return t, [np.array([getattr(s, f) for s in channel], dtype=float) for f in fields]


def make_augmentation_figure(recording: AircraftRecording, windows: Optional[List[ProcedureWindow]] = None):
    """Stacked altitude / heading / pitch / bank / forward velocity panels with procedure windows shaded."""
    windows = windows or []

    fig, axes = plt.subplots(
        nrows=5,
        ncols=1,
        figsize=(14, 11),
        sharex=True,
        gridspec_kw={"height_ratios": [1.2, 1.0, 1.0, 1.0, 1.0]},
    )
    ax_alt, ax_hdg, ax_pitch, ax_bank, ax_vel = axes

    # --- Altitude ---
    t, (alt,) = _series(recording.position, "altitude")
    ax_alt.plot(t, alt, linewidth=2.0, label="Altitude (ft)")
    ax_alt.set_ylabel("Altitude (ft)")

    # --- Attitude ---
    t, (pitch, bank, hdg) = _series(recording.attitude, "pitch", "bank", "true_heading")
    ax_hdg.plot(t, hdg, linewidth=1.5, linestyle="none", marker=".", label="True heading (deg)")
    ax_hdg.set_ylabel("Heading (deg)")
    ax_hdg.set_ylim(0.0, 360.0)

    ax_pitch.plot(t, pitch, linewidth=2.0, label="Pitch (deg)")
    ax_pitch.axhline(0.0, linestyle="--", linewidth=1.0)
    ax_pitch.set_ylabel("Pitch (deg)")

    ax_bank.plot(t, bank, linewidth=2.0, label="Bank (deg)")
    ax_bank.axhline(0.0, linestyle="--", linewidth=1.0)
    ax_bank.set_ylabel("Bank (deg)")

    # --- Velocity ---
    t, (vz,) = _series(recording.velocity, "z")
    ax_vel.plot(t, vz, linewidth=2.0, linestyle="-.", label="Forward velocity (ft/s)")
    ax_vel.set_ylabel("Velocity (ft/s)")
    ax_vel.set_xlabel("Time (s)")

    for ax in axes:
        ax.grid(True, alpha=0.2)
        if ax.get_legend_handles_labels()[0]:
            ax.legend(loc="upper right")

    # --- Procedure windows ---
    span_alpha = 0.18
    for w in windows:
        color = WINDOW_COLORS.get(w.kind, "grey")
        for ax in axes:
            ax.axvspan(w.start / 1000.0, w.end / 1000.0, alpha=span_alpha, color=color)
        for anchor in (w.liftoff, w.flare, w.touchdown):
            if anchor is not None:
                ax_alt.axvline(anchor / 1000.0, alpha=0.4, color=color, linewidth=1.0)

    title = recording.info.aircraft_type or "Aircraft"
    fig.suptitle(f"Augmented Flight Data - {title}", y=0.995)
    fig.tight_layout(rect=(0.0, 0.0, 1.0, 0.98))
    return fig
