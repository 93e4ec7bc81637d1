"""Take-off and landing window detection and their canned state sequences."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .domain import (
    Aspect,
    AugmentationProfile,
    EngineSetting,
    Procedure,
    ProcedureWindow,
)
from .samples import (
    ENGINE_COUNT,
    AircraftHandleSample,
    EngineSample,
    LightSample,
    LightState,
    SecondaryFlightControlSample,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlapSetting:
    handle_index: int
    leading_edge: float
    trailing_edge: float


FLAPS_UP = FlapSetting(0, 0.0, 0.0)
FLAPS_TAKE_OFF = FlapSetting(1, 0.666, 0.286)

# (lead time before touchdown in ms, setting)
LANDING_FLAPS: tuple[tuple[int, FlapSetting], ...] = (
    (10 * 60_000, FLAPS_UP),
    (8 * 60_000, FlapSetting(1, 0.666, 0.286)),
    (7 * 60_000, FlapSetting(2, 0.8157, 0.4275)),
    (5 * 60_000, FlapSetting(3, 0.8157, 0.5725)),
    (4 * 60_000, FlapSetting(4, 1.0, 1.0)),
)

TAKE_OFF_LIGHTS = (
    LightState.NAVIGATION | LightState.BEACON | LightState.LANDING | LightState.STROBE
    | LightState.PANEL | LightState.RECOGNITION | LightState.WING | LightState.LOGO
)
CLIMB_LIGHTS = TAKE_OFF_LIGHTS & ~LightState.LANDING
APPROACH_LIGHTS = CLIMB_LIGHTS
LANDING_LIGHTS = APPROACH_LIGHTS | LightState.LANDING
FINAL_LIGHTS = LANDING_LIGHTS | LightState.TAXI


# -----------------------------
# Detection
# -----------------------------
def ground_contact(frame: pd.DataFrame, profile: AugmentationProfile, field_elevation_ft: float) -> np.ndarray:
    """
    Per-fix ground contact.

    Uses the recorded on_ground flags when there are any; otherwise fixes
    within ground_altitude_margin_ft of the field elevation count as on the ground.
    """
    if frame.attrs.get("ground_flags", False):
        return frame["on_ground"].to_numpy(bool)
    height = frame["alt_ft"].to_numpy(float) - field_elevation_ft
    return np.abs(height) <= profile.ground_altitude_margin_ft


def detect_take_off(frame: pd.DataFrame, profile: AugmentationProfile) -> ProcedureWindow | None:
    """
    Find the take-off window in a kinematics frame.

    Args:
        frame: Output of preprocess.kinematics
        profile: Thresholds and durations

    Returns:
        ProcedureWindow from the start of the take-off roll to the end of the
        climb-out, or None if no ground roll or no lift-off was found
    """
    if len(frame) < 2:
        return None
    ts = frame["ts"].to_numpy(np.int64)
    on_ground = ground_contact(frame, profile, float(frame["alt_ft"].iloc[0]))
    gs = frame["gs_s"].to_numpy(float)
    vs = frame["vs_s"].to_numpy(float)

    rolling = np.where(on_ground & (gs < profile.taxi_speed_threshold_kt))[0]
    if len(rolling) == 0:
        logger.debug("No ground roll found, no take-off window")
        return None
    i0 = int(rolling[0])

    airborne = np.where(~on_ground[i0 + 1:] | (vs[i0 + 1:] > profile.liftoff_climb_rate_fpm))[0]
    if len(airborne) == 0:
        logger.debug("No lift-off found after %d ms, no take-off window", ts[i0])
        return None
    liftoff = int(ts[i0 + 1 + airborne[0]])

    start = int(ts[i0])
    end = min(liftoff + profile.climb_out_duration_ms, int(ts[-1]) + 1)
    return ProcedureWindow(Procedure.TAKE_OFF, start, end, liftoff=liftoff)


def detect_landing(frame: pd.DataFrame, profile: AugmentationProfile) -> ProcedureWindow | None:
    """
    Find the landing window in a kinematics frame.

    Touchdown is the first fix on the ground after the last airborne one. It
    only counts when the aircraft sinks into it (mean smoothed vertical speed
    over touchdown_descent_ms) and slows below rollout_speed_threshold_kt at
    or after it. The approach reaches back over the descent towards it, bounded by
    approach_duration_ms. The flare is the first fix below flare_height_ft
    where the sink rate starts to decrease.
    """
    n = len(frame)
    if n < 2:
        return None
    ts = frame["ts"].to_numpy(np.int64)
    alt = frame["alt_ft"].to_numpy(float)
    vs = frame["vs_s"].to_numpy(float)
    on_ground = ground_contact(frame, profile, float(alt[-1]))

    airborne = np.where(~on_ground)[0]
    if len(airborne) == 0:
        logger.debug("Never airborne, no landing window")
        return None
    k = int(airborne[-1])
    if k == n - 1:
        logger.debug("No touchdown after the last airborne fix, no landing window")
        return None
    td = k + 1
    touchdown = int(ts[td])

    final = (ts >= touchdown - profile.touchdown_descent_ms) & (ts < touchdown)
    final[k] = True
    if float(np.mean(vs[final])) > -profile.touchdown_sink_rate_fpm:
        logger.debug("No descent into %d ms, no landing window", touchdown)
        return None
    rollout_gs = float(np.min(frame["gs_s"].to_numpy(float)[td:]))
    if rollout_gs > profile.rollout_speed_threshold_kt:
        logger.debug("Ground speed stays above %.0f kt after %d ms, no landing window", rollout_gs, touchdown)
        return None

    # walk back over the descent
    earliest = touchdown - profile.approach_duration_ms
    i = k
    while i > 0 and ts[i - 1] >= earliest and vs[i - 1] <= profile.approach_climb_tolerance_fpm:
        i -= 1

    flare_idx = td
    height = alt[i:td + 1] - alt[td]
    low = np.where(height <= profile.flare_height_ft)[0]
    if len(low):
        j = i + int(low[0])
        flare_idx = j
        for m in range(max(j, 1), td + 1):
            if vs[m] > vs[m - 1]:
                flare_idx = m
                break

    start = int(ts[i])
    end = min(touchdown + profile.rollout_duration_ms, int(ts[-1]) + 1)
    return ProcedureWindow(
        Procedure.LANDING, start, end, flare=int(ts[flare_idx]), touchdown=touchdown
    )


# -----------------------------
# Canned sequences
# -----------------------------
def _engine(ts: int, setting: EngineSetting) -> EngineSample:
    return EngineSample(
        ts,
        throttle=(setting.throttle,) * ENGINE_COUNT,
        propeller=(setting.propeller,) * ENGINE_COUNT,
        mixture=(setting.mixture,) * ENGINE_COUNT,
        starter=(False,) * ENGINE_COUNT,
        combustion=(True,) * ENGINE_COUNT,
        master_battery=True,
    )


def _flaps(ts: int, flaps: FlapSetting, spoilers: float = 0.0) -> SecondaryFlightControlSample:
    return SecondaryFlightControlSample(
        ts,
        flaps_handle_index=flaps.handle_index,
        leading_edge_flaps=flaps.leading_edge,
        trailing_edge_flaps=flaps.trailing_edge,
        spoilers_handle=spoilers,
        spoilers_position=spoilers,
    )


def _place(window: ProcedureWindow, events: list[tuple[int, object]]) -> list:
    # Schedule order is kept for equal times, so after clamping the later event wins on upsert
    ordered = sorted(enumerate(events), key=lambda e: (e[1][0], e[0]))
    out = []
    for _, (when, make) in ordered:
        out.append(make(window.clamp(when)))
    return out


def take_off_sequence(window: ProcedureWindow, profile: AugmentationProfile, aspects) -> dict[str, list]:
    """Synthesized samples per channel name for a take-off window."""
    start = window.start
    liftoff = window.liftoff if window.liftoff is not None else window.start

    plan: dict[str, list] = {
        "secondary_flight_controls": _place(window, [
            (start, lambda t: _flaps(t, FLAPS_TAKE_OFF)),
            (liftoff + profile.flaps_retract_delay_ms, lambda t: _flaps(t, FLAPS_UP)),
        ]),
        "handles": _place(window, [
            (start, lambda t: AircraftHandleSample(t, gear_down=True)),
            (liftoff + profile.gear_retract_delay_ms, lambda t: AircraftHandleSample(t, gear_down=False)),
        ]),
    }
    if Aspect.ENGINE in aspects:
        plan["engine"] = _place(window, [
            (start, lambda t: _engine(t, profile.take_off_power)),
            (liftoff + profile.climb_power_delay_ms, lambda t: _engine(t, profile.climb_power)),
        ])
    if Aspect.LIGHT in aspects:
        plan["lights"] = _place(window, [
            (start, lambda t: LightSample(t, TAKE_OFF_LIGHTS)),
            (liftoff + profile.landing_lights_off_delay_ms, lambda t: LightSample(t, CLIMB_LIGHTS)),
        ])
    return plan


def landing_sequence(window: ProcedureWindow, profile: AugmentationProfile, aspects) -> dict[str, list]:
    """Synthesized samples per channel name for a landing window."""
    touchdown = window.touchdown if window.touchdown is not None else window.end - 1
    flare = window.flare if window.flare is not None else touchdown

    flap_events = [
        (touchdown - lead, lambda t, f=setting: _flaps(t, f)) for lead, setting in LANDING_FLAPS
    ]
    flap_events.append((touchdown, lambda t: _flaps(t, LANDING_FLAPS[-1][1], spoilers=1.0)))

    plan: dict[str, list] = {
        "secondary_flight_controls": _place(window, flap_events),
        "handles": _place(window, [
            (touchdown - profile.gear_extend_lead_ms, lambda t: AircraftHandleSample(t, gear_down=True)),
            (touchdown, lambda t: AircraftHandleSample(t, gear_down=True, brake_left=1.0, brake_right=1.0)),
        ]),
    }
    if Aspect.ENGINE in aspects:
        plan["engine"] = _place(window, [
            (touchdown - profile.approach_power_lead_ms, lambda t: _engine(t, profile.approach_power)),
            (touchdown - profile.landing_power_lead_ms, lambda t: _engine(t, profile.landing_power)),
            (flare, lambda t: _engine(t, profile.idle_power)),
            (touchdown, lambda t: _engine(t, profile.reverse_power)),
        ])
    if Aspect.LIGHT in aspects:
        plan["lights"] = _place(window, [
            (touchdown - profile.approach_lights_lead_ms, lambda t: LightSample(t, APPROACH_LIGHTS)),
            (touchdown - profile.landing_lights_lead_ms, lambda t: LightSample(t, LANDING_LIGHTS)),
            (touchdown - profile.taxi_lights_lead_ms, lambda t: LightSample(t, FINAL_LIGHTS)),
        ])
    return plan
