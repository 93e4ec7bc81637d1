"""Fill in missing attitude/velocity and splice take-off and landing procedures into a recording."""

from __future__ import annotations

import dataclasses
import logging

import numpy as np

from .domain import (
    Aspect,
    Aspects,
    AircraftRecording,
    AugmentationProfile,
    Procedure,
    Procedures,
    ProcedureWindow,
    has_any,
    selection,
)
from .nav import (
    FT_PER_M,
    M_PER_FT,
    approximate_pitch_deg,
    coordinated_bank_deg,
    haversine_m,
    heading_change_deg,
    initial_bearing_deg,
    ned_to_body,
    ned_velocity,
)
from .preprocess import kinematics
from .procedures import detect_landing, detect_take_off, landing_sequence, take_off_sequence
from .replay import Access, ChannelReader
from .samples import AttitudeSample, VelocitySample

logger = logging.getLogger(__name__)

ATTITUDE_ASPECTS = (Aspect.PITCH, Aspect.BANK, Aspect.HEADING)


# -----------------------------
# Attitude and velocity
# -----------------------------
def _track(recording: AircraftRecording, timestamps: np.ndarray):
    """Latitude, longitude, altitude at the given timestamps, read through the position interpolation."""
    reader = ChannelReader(recording.position)
    fixes = [reader.value_at(int(t), Access.NO_TIME_OFFSET) for t in timestamps]
    lat = np.array([p.latitude for p in fixes], dtype=float)
    lon = np.array([p.longitude for p in fixes], dtype=float)
    alt = np.array([p.altitude for p in fixes], dtype=float)
    return lat, lon, alt


def first_movement(lat: np.ndarray, lon: np.ndarray, ts: np.ndarray, threshold_m: float) -> tuple[int, float]:
    """
    Timestamp and heading of the first move longer than threshold_m.

    Falls back to (first timestamp, 0.0) when the aircraft never moves.
    """
    dist = haversine_m(lat[:-1], lon[:-1], lat[1:], lon[1:])
    moved = np.where(dist > threshold_m)[0]
    if len(moved) == 0:
        return int(ts[0]), 0.0
    i = int(moved[0])
    return int(ts[i]), float(initial_bearing_deg(lat[i], lon[i], lat[i + 1], lon[i + 1]))


def derive_attitude(ts: np.ndarray, lat: np.ndarray, lon: np.ndarray, alt_ft: np.ndarray,
                    profile: AugmentationProfile) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Pitch, bank and true heading per fix, from consecutive fixes.

    Args:
        ts: Timestamps (ms), at least two
        lat, lon: Degrees
        alt_ft: Altitude (feet)
        profile: Movement threshold, bank limit, final pitch

    Returns:
        (pitch, bank, heading) arrays, same length as ts
    """
    n = len(ts)
    dt = np.diff(ts).astype(float) / 1000.0
    dist = haversine_m(lat[:-1], lon[:-1], lat[1:], lon[1:])

    pitch = np.zeros(n)
    bank = np.zeros(n)
    heading = np.zeros(n)

    pitch[:-1] = approximate_pitch_deg(dist, np.diff(alt_ft) * M_PER_FT)
    heading[:-1] = initial_bearing_deg(lat[:-1], lon[:-1], lat[1:], lon[1:])

    # standing still: level, pointing where the aircraft will first move
    moved_at, moved_heading = first_movement(lat, lon, ts, profile.first_movement_distance_m)
    still = np.append(ts[:-1] <= moved_at, False)
    pitch[still] = 0.0
    heading[still] = moved_heading

    # turn rate into each fix from the previous one, combined with ground speed
    if n > 2:
        turn = heading_change_deg(heading[:-2], heading[1:-1])
        safe = np.where(dt[:-1] > 0, dt[:-1], 1.0)
        rate = np.where(dt[:-1] > 0, turn / safe, 0.0)
        speed = np.where(dt[1:] > 0, dist[1:] / np.where(dt[1:] > 0, dt[1:], 1.0), 0.0)
        bank[1:-1] = coordinated_bank_deg(speed, rate, profile.max_bank_deg)
    bank[still] = 0.0

    # last fix: no next fix to look at
    heading[-1] = heading[-2]
    bank[-1] = 0.0
    pitch[-1] = profile.final_pitch_deg
    return pitch, bank, heading


def derive_velocity(ts: np.ndarray, lat: np.ndarray, lon: np.ndarray, alt_ft: np.ndarray,
                    pitch: np.ndarray, bank: np.ndarray, heading: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Body-frame (x right, y up, z forward) velocity in ft/s; the last fix repeats the previous one."""
    dt = np.diff(ts).astype(float) / 1000.0
    vn, ve, vd = ned_velocity(lat[:-1], lon[:-1], alt_ft[:-1], lat[1:], lon[1:], alt_ft[1:], dt)
    x, y, z = ned_to_body(vn, ve, vd, pitch[:-1], bank[:-1], heading[:-1])

    x = np.append(x, x[-1]) * FT_PER_M
    y = np.append(y, y[-1]) * FT_PER_M
    z = np.append(z, z[-1]) * FT_PER_M
    return x, y, z


def augment_attitude_and_velocity(recording: AircraftRecording, aspects=Aspects.ALL,
                                  profile: AugmentationProfile | None = None) -> None:
    """
    Derive attitude and body velocity from the position channel.

    Only the selected aspects are written. A channel that already holds
    recorded samples is left as it is, unless profile.overwrite_recorded is
    set; then the selected fields of its samples are recomputed at their own
    timestamps.
    """
    profile = profile or AugmentationProfile()
    aspects = selection(aspects)
    if len(recording.position) < 2:
        return

    want_attitude = has_any(aspects, ATTITUDE_ASPECTS)
    want_velocity = Aspect.VELOCITY in aspects
    attitude_recorded = len(recording.attitude) > 0
    attitude_known = attitude_recorded and not profile.overwrite_recorded
    velocity_known = len(recording.velocity) > 0 and not profile.overwrite_recorded

    if want_attitude and not attitude_known:
        ts = recording.attitude.timestamps() if len(recording.attitude) >= 2 else recording.position.timestamps()
        lat, lon, alt = _track(recording, ts)
        pitch, bank, heading = derive_attitude(ts, lat, lon, alt, profile)
        _write_attitude(recording, ts, pitch, bank, heading, aspects)
        logger.debug("Derived %d attitude samples (%s)", len(ts),
                     ", ".join(a.name.lower() for a in ATTITUDE_ASPECTS if a in aspects))
    elif want_attitude:
        logger.debug("Attitude recorded, kept as is")

    if want_velocity and not velocity_known:
        ts = recording.velocity.timestamps() if len(recording.velocity) >= 2 else recording.position.timestamps()
        lat, lon, alt = _track(recording, ts)
        # fields of a freshly written attitude channel may be placeholders
        if attitude_recorded:
            reader = ChannelReader(recording.attitude)
            att = [reader.value_at(int(t), Access.NO_TIME_OFFSET) for t in ts]
            pitch = np.array([a.pitch for a in att])
            bank = np.array([a.bank for a in att])
            heading = np.array([a.true_heading for a in att])
        else:
            pitch, bank, heading = derive_attitude(ts, lat, lon, alt, profile)
        x, y, z = derive_velocity(ts, lat, lon, alt, pitch, bank, heading)
        recording.velocity.clear()
        for t, vx, vy, vz in zip(ts, x, y, z):
            recording.velocity.append(VelocitySample(int(t), x=float(vx), y=float(vy), z=float(vz)))
        logger.debug("Derived %d velocity samples", len(ts))
    elif want_velocity:
        logger.debug("Velocity recorded, kept as is")


def _write_attitude(recording: AircraftRecording, ts, pitch, bank, heading, aspects) -> None:
    existing = {s.timestamp: s for s in recording.attitude}
    updated = []
    for t, p, b, h in zip(ts, pitch, bank, heading):
        t = int(t)
        changes = {}
        if Aspect.PITCH in aspects:
            changes["pitch"] = float(p)
        if Aspect.BANK in aspects:
            changes["bank"] = float(b)
        if Aspect.HEADING in aspects:
            changes["true_heading"] = float(h)
        base = existing.get(t, AttitudeSample(t))
        updated.append(dataclasses.replace(base, **changes))
    recording.attitude.clear()
    for sample in updated:
        recording.attitude.append(sample)


# -----------------------------
# Procedures
# -----------------------------
def _apply(recording: AircraftRecording, window: ProcedureWindow, plan: dict[str, list],
           profile: AugmentationProfile) -> None:
    # Samples synthesized by an earlier procedure do not count as recorded.
    # On a timestamp collision the landing sample wins.
    for name, samples in plan.items():
        channel = getattr(recording, name)
        origin = recording.synthesized.setdefault(name, {})
        recorded = [s for s in channel.between(window.start, window.end) if s.timestamp not in origin]
        if recorded and not profile.overwrite_recorded:
            logger.debug("%s: %s recorded inside window, kept", window.kind.name, name)
            continue

        # recorded samples and this procedure's own earlier samples make way
        channel.remove_range(window.start, window.end,
                             where=lambda s: origin.get(s.timestamp, window.kind) is window.kind)
        for t in [t for t, kind in origin.items() if kind is window.kind and window.contains(t)]:
            del origin[t]

        for sample in samples:
            if window.kind is Procedure.TAKE_OFF and origin.get(sample.timestamp) is Procedure.LANDING:
                continue
            channel.upsert(sample)
            origin[sample.timestamp] = window.kind


def _detect(frame, procedure: Procedure, profile: AugmentationProfile) -> ProcedureWindow | None:
    if procedure is Procedure.TAKE_OFF:
        return detect_take_off(frame, profile)
    return detect_landing(frame, profile)


def _plan(window: ProcedureWindow, profile: AugmentationProfile, aspects) -> dict[str, list]:
    match window.kind:
        case Procedure.TAKE_OFF:
            return take_off_sequence(window, profile, aspects)
        case Procedure.LANDING:
            return landing_sequence(window, profile, aspects)


def _augment(recording: AircraftRecording, procedures, aspects, profile) -> list[ProcedureWindow]:
    if len(recording.position) < 2:
        return []
    if not procedures:
        return []
    frame = kinematics(recording.position, profile)
    windows = []
    for procedure in (Procedure.TAKE_OFF, Procedure.LANDING):
        if procedure not in procedures:
            continue
        window = _detect(frame, procedure, profile)
        if window is None or window.is_empty:
            continue
        windows.append(window)
        logger.info("%s window %d..%d ms", procedure.name, window.start, window.end)

    for window in windows:
        _apply(recording, window, _plan(window, profile, aspects), profile)
    return windows


def augment_start_procedure(recording: AircraftRecording, aspects=Aspects.ALL,
                            profile: AugmentationProfile | None = None) -> ProcedureWindow | None:
    """Detect the take-off and splice its canned sequence in. Returns the window, if any."""
    windows = _augment(recording, Procedures.TAKE_OFF, selection(aspects), profile or AugmentationProfile())
    return windows[0] if windows else None


def augment_landing_procedure(recording: AircraftRecording, aspects=Aspects.ALL,
                              profile: AugmentationProfile | None = None) -> ProcedureWindow | None:
    """Detect the landing and splice its canned sequence in. Returns the window, if any."""
    windows = _augment(recording, Procedures.LANDING, selection(aspects), profile or AugmentationProfile())
    return windows[0] if windows else None


def augment_procedures(recording: AircraftRecording, procedures=Procedures.ALL, aspects=Aspects.ALL,
                       profile: AugmentationProfile | None = None) -> list[ProcedureWindow]:
    """
    Splice take-off and/or landing state into the recording.

    Engine samples are only synthesized with Aspect.ENGINE and light samples
    only with Aspect.LIGHT. Flaps/spoilers and gear/brakes always belong to
    a selected procedure.

    Returns:
        The procedure windows that were detected and applied
    """
    return _augment(recording, selection(procedures), selection(aspects), profile or AugmentationProfile())


def augment_aircraft_data(recording: AircraftRecording, procedures=Procedures.ALL, aspects=Aspects.ALL,
                          profile: AugmentationProfile | None = None) -> list[ProcedureWindow]:
    """Attitude and velocity first, then the procedures."""
    profile = profile or AugmentationProfile()
    augment_attitude_and_velocity(recording, aspects, profile)
    return augment_procedures(recording, procedures, aspects, profile)
