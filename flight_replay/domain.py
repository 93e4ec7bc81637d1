from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import AbstractSet, Iterable

from .samples import (
    AircraftHandleSample,
    AttitudeSample,
    Channel,
    EngineSample,
    LightSample,
    PositionSample,
    PrimaryFlightControlSample,
    SecondaryFlightControlSample,
    VelocitySample,
)


# -----------------------------
# Selectors
# -----------------------------
class Aspect(Enum):
    """One independently selectable category of derived data."""
    PITCH = auto()
    BANK = auto()
    HEADING = auto()
    VELOCITY = auto()
    ENGINE = auto()
    LIGHT = auto()


class Procedure(Enum):
    TAKE_OFF = auto()
    LANDING = auto()


class Aspects:
    """Named aspect selections. Composites are unions of their members."""
    NONE: frozenset[Aspect] = frozenset()
    PITCH = frozenset({Aspect.PITCH})
    BANK = frozenset({Aspect.BANK})
    HEADING = frozenset({Aspect.HEADING})
    VELOCITY = frozenset({Aspect.VELOCITY})
    ENGINE = frozenset({Aspect.ENGINE})
    LIGHT = frozenset({Aspect.LIGHT})
    ATTITUDE = PITCH | BANK | HEADING
    ATTITUDE_AND_VELOCITY = ATTITUDE | VELOCITY
    ALL = frozenset(Aspect)


class Procedures:
    NONE: frozenset[Procedure] = frozenset()
    TAKE_OFF = frozenset({Procedure.TAKE_OFF})
    LANDING = frozenset({Procedure.LANDING})
    ALL = frozenset(Procedure)


def selection(value) -> frozenset:
    """Accept a single Aspect/Procedure member or any iterable of them."""
    if isinstance(value, Enum):
        return frozenset({value})
    return frozenset(value)


# -----------------------------
# Configuration / "Augmentation Profile"
# -----------------------------
@dataclass(frozen=True)
class EngineSetting:
    throttle: float
    propeller: float
    mixture: float


@dataclass(frozen=True)
class AugmentationProfile:
    name: str = "Default"

    # Recorded channels are "known" and left alone unless this is set
    overwrite_recorded: bool = False

    # Attitude and velocity
    first_movement_distance_m: float = 10.0  # the first move longer than this defines the initial heading
    max_bank_deg: float = 25.0
    final_pitch_deg: float = 3.0  # nose up on the last sample (touchdown attitude)

    # Ground contact and phase detection
    ground_altitude_margin_ft: float = 50.0  # used only when no on_ground flags were recorded
    taxi_speed_threshold_kt: float = 30.0
    liftoff_climb_rate_fpm: float = 300.0
    approach_climb_tolerance_fpm: float = 200.0
    flare_height_ft: float = 50.0
    smooth_window_s: float = 5.0
    touchdown_sink_rate_fpm: float = 100.0  # mean sink rate needed over touchdown_descent_ms before touchdown
    touchdown_descent_ms: int = 30_000
    rollout_speed_threshold_kt: float = 60.0  # ground speed must drop below this at or after touchdown

    # Window lengths
    climb_out_duration_ms: int = 5 * 60_000
    approach_duration_ms: int = 10 * 60_000
    rollout_duration_ms: int = 30_000

    # Take-off schedule, relative to lift-off
    gear_retract_delay_ms: int = 5_000
    flaps_retract_delay_ms: int = 30_000
    climb_power_delay_ms: int = 2 * 60_000
    landing_lights_off_delay_ms: int = 3 * 60_000

    # Landing schedule, lead time before touchdown
    approach_lights_lead_ms: int = 8 * 60_000
    landing_lights_lead_ms: int = 6 * 60_000
    approach_power_lead_ms: int = 5 * 60_000
    taxi_lights_lead_ms: int = 4 * 60_000
    gear_extend_lead_ms: int = 3 * 60_000
    landing_power_lead_ms: int = 2 * 60_000

    # Lever settings
    take_off_power: EngineSetting = EngineSetting(throttle=1.0, propeller=1.0, mixture=1.0)
    climb_power: EngineSetting = EngineSetting(throttle=0.86, propeller=0.80, mixture=0.85)
    approach_power: EngineSetting = EngineSetting(throttle=0.86, propeller=0.60, mixture=0.85)
    landing_power: EngineSetting = EngineSetting(throttle=0.86, propeller=0.40, mixture=1.0)
    idle_power: EngineSetting = EngineSetting(throttle=0.0, propeller=0.40, mixture=1.0)
    reverse_power: EngineSetting = EngineSetting(throttle=-0.2, propeller=0.0, mixture=1.0)


# -----------------------------
# Recording
# -----------------------------
@dataclass
class AircraftInfo:
    aircraft_type: str = ""
    tail_number: str = ""
    time_offset_ms: int = 0  # added to the replay clock for this aircraft


@dataclass
class AircraftRecording:
    """One aircraft's recorded channels. Owns every channel exclusively."""
    info: AircraftInfo = field(default_factory=AircraftInfo)
    position: Channel[PositionSample] = field(default_factory=Channel)
    attitude: Channel[AttitudeSample] = field(default_factory=Channel)
    velocity: Channel[VelocitySample] = field(default_factory=Channel)
    engine: Channel[EngineSample] = field(default_factory=Channel)
    primary_flight_controls: Channel[PrimaryFlightControlSample] = field(default_factory=Channel)
    secondary_flight_controls: Channel[SecondaryFlightControlSample] = field(default_factory=Channel)
    handles: Channel[AircraftHandleSample] = field(default_factory=Channel)
    lights: Channel[LightSample] = field(default_factory=Channel)
    # channel name -> timestamp -> procedure that synthesized the sample there
    synthesized: dict[str, dict[int, Procedure]] = field(default_factory=dict, repr=False)

    CHANNEL_NAMES = (
        "position",
        "attitude",
        "velocity",
        "engine",
        "primary_flight_controls",
        "secondary_flight_controls",
        "handles",
        "lights",
    )

    def channels(self) -> dict[str, Channel]:
        return {name: getattr(self, name) for name in self.CHANNEL_NAMES}


# -----------------------------
# Procedure window
# -----------------------------
@dataclass(frozen=True)
class ProcedureWindow:
    """
    Detected take-off or landing phase, [start, end) in milliseconds.

    The anchors mark where the canned sequence is pinned: lift-off for a
    take-off, flare and touchdown for a landing.
    """
    kind: Procedure
    start: int
    end: int
    liftoff: int | None = None
    flare: int | None = None
    touchdown: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def contains(self, timestamp: int) -> bool:
        return self.start <= timestamp < self.end

    def clamp(self, timestamp: int) -> int:
        return max(self.start, min(timestamp, self.end - 1))


def has_any(selected: AbstractSet, members: Iterable) -> bool:
    return any(m in selected for m in members)
