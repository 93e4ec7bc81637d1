"""Value-at-timestamp readers over recorded channels."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Callable

from .domain import AircraftRecording
from .interpolation import (
    interpolate_hermite,
    interpolate_hermite_180,
    interpolate_hermite_360,
    interpolate_linear,
)
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
from .search import (
    DEFAULT_INTERPOLATION_WINDOW_MS,
    INFINITE_INTERPOLATION_WINDOW,
    cubic_support,
    linear_support,
    normalise_timestamp,
)

logger = logging.getLogger(__name__)


class Access(Enum):
    LINEAR = auto()           # replay: aircraft time offset, channel window
    DISCRETE_SEEK = auto()    # single jump: hint discarded, unbounded window
    CONTINUOUS_SEEK = auto()  # slider drag: unbounded window
    NO_TIME_OFFSET = auto()   # import/export: like LINEAR without the time offset


# -----------------------------
# Per-kind interpolation
# -----------------------------
def _position(p0, p1, p2, p3, mu, ts) -> PositionSample:
    return PositionSample(
        ts,
        latitude=interpolate_hermite(p0.latitude, p1.latitude, p2.latitude, p3.latitude, mu),
        # longitude has its discontinuity at the antimeridian
        longitude=interpolate_hermite_180(p0.longitude, p1.longitude, p2.longitude, p3.longitude, mu),
        altitude=interpolate_hermite(p0.altitude, p1.altitude, p2.altitude, p3.altitude, mu),
        on_ground=p1.on_ground,
    )


def _attitude(p0, p1, p2, p3, mu, ts) -> AttitudeSample:
    return AttitudeSample(
        ts,
        pitch=interpolate_hermite_180(p0.pitch, p1.pitch, p2.pitch, p3.pitch, mu),
        bank=interpolate_hermite_180(p0.bank, p1.bank, p2.bank, p3.bank, mu),
        true_heading=interpolate_hermite_360(
            p0.true_heading, p1.true_heading, p2.true_heading, p3.true_heading, mu
        ),
    )


def _velocity(p0, p1, p2, p3, mu, ts) -> VelocitySample:
    return VelocitySample(
        ts,
        x=interpolate_hermite(p0.x, p1.x, p2.x, p3.x, mu),
        y=interpolate_hermite(p0.y, p1.y, p2.y, p3.y, mu),
        z=interpolate_hermite(p0.z, p1.z, p2.z, p3.z, mu),
    )


def _levers(a, b, mu) -> tuple:
    return tuple(interpolate_linear(x, y, mu) for x, y in zip(a, b))


def _engine(p1, p2, mu, ts) -> EngineSample:
    return EngineSample(
        ts,
        throttle=_levers(p1.throttle, p2.throttle, mu),
        propeller=_levers(p1.propeller, p2.propeller, mu),
        mixture=_levers(p1.mixture, p2.mixture, mu),
        starter=p1.starter,
        combustion=p1.combustion,
        master_battery=p1.master_battery,
    )


def _primary(p1, p2, mu, ts) -> PrimaryFlightControlSample:
    return PrimaryFlightControlSample(
        ts,
        rudder=interpolate_linear(p1.rudder, p2.rudder, mu),
        elevator=interpolate_linear(p1.elevator, p2.elevator, mu),
        aileron=interpolate_linear(p1.aileron, p2.aileron, mu),
    )


def _secondary(p1, p2, mu, ts) -> SecondaryFlightControlSample:
    return SecondaryFlightControlSample(
        ts,
        flaps_handle_index=p1.flaps_handle_index,
        leading_edge_flaps=interpolate_linear(p1.leading_edge_flaps, p2.leading_edge_flaps, mu),
        trailing_edge_flaps=interpolate_linear(p1.trailing_edge_flaps, p2.trailing_edge_flaps, mu),
        spoilers_handle=interpolate_linear(p1.spoilers_handle, p2.spoilers_handle, mu),
        spoilers_position=interpolate_linear(p1.spoilers_position, p2.spoilers_position, mu),
    )


def _handles(p1, p2, mu, ts) -> AircraftHandleSample:
    return AircraftHandleSample(
        ts,
        gear_down=p1.gear_down,
        brake_left=interpolate_linear(p1.brake_left, p2.brake_left, mu),
        brake_right=interpolate_linear(p1.brake_right, p2.brake_right, mu),
        steering=interpolate_linear(p1.steering, p2.steering, mu),
        tailhook_down=p1.tailhook_down,
        canopy_open=interpolate_linear(p1.canopy_open, p2.canopy_open, mu),
        water_rudder_down=p1.water_rudder_down,
        wing_folding_left=interpolate_linear(p1.wing_folding_left, p2.wing_folding_left, mu),
        wing_folding_right=interpolate_linear(p1.wing_folding_right, p2.wing_folding_right, mu),
    )


def _lights(p1, p2, mu, ts) -> LightSample:
    return LightSample(ts, lights=p1.lights)


# kind -> (cubic?, interpolate, replay window)
_KINDS: dict[type, tuple[bool, Callable, float]] = {
    PositionSample: (True, _position, INFINITE_INTERPOLATION_WINDOW),
    AttitudeSample: (True, _attitude, INFINITE_INTERPOLATION_WINDOW),
    VelocitySample: (True, _velocity, INFINITE_INTERPOLATION_WINDOW),
    EngineSample: (False, _engine, DEFAULT_INTERPOLATION_WINDOW_MS),
    PrimaryFlightControlSample: (False, _primary, DEFAULT_INTERPOLATION_WINDOW_MS),
    SecondaryFlightControlSample: (False, _secondary, DEFAULT_INTERPOLATION_WINDOW_MS),
    AircraftHandleSample: (False, _handles, DEFAULT_INTERPOLATION_WINDOW_MS),
    LightSample: (False, _lights, DEFAULT_INTERPOLATION_WINDOW_MS),
}


class ChannelReader:
    """
    Interpolated access to one channel.

    Keeps the index of the previous hit so that forward playback only scans
    a few samples per frame.
    """

    def __init__(self, channel: Channel, time_offset_ms: int = 0, window: float | None = None):
        self.channel = channel
        self.time_offset_ms = time_offset_ms
        self._window = window
        self._hint: int | None = None
        self._current_key: tuple | None = None
        self._current = None

    def reset(self) -> None:
        self._hint = None
        self._current_key = None
        self._current = None

    def value_at(self, timestamp: int, access: Access = Access.LINEAR):
        """
        Sample at the given replay time, or None when there is no data.

        The returned sample carries the adjusted query timestamp.
        """
        offset = 0 if access is Access.NO_TIME_OFFSET else self.time_offset_ms
        adjusted = max(timestamp + offset, 0)

        key = (adjusted, access, self.channel.version)
        if key == self._current_key:
            return self._current

        first = self.channel.first()
        if first is None:
            return None
        cubic, interpolate, channel_window = _KINDS[type(first)]
        if self._window is not None:
            channel_window = self._window

        if access is Access.DISCRETE_SEEK:
            self._hint = None
        if access in (Access.DISCRETE_SEEK, Access.CONTINUOUS_SEEK):
            window = INFINITE_INTERPOLATION_WINDOW
        else:
            window = channel_window

        if cubic:
            index, support = cubic_support(self.channel, adjusted, window, self._hint)
        else:
            index, support = linear_support(self.channel, adjusted, window, self._hint)
        if index is not None:
            self._hint = index

        if support is None:
            value = None
        elif cubic:
            p0, p1, p2, p3 = support
            value = interpolate(p0, p1, p2, p3, normalise_timestamp(p1, p2, adjusted), adjusted)
        else:
            p1, p2 = support
            value = interpolate(p1, p2, normalise_timestamp(p1, p2, adjusted), adjusted)

        self._current_key = key
        self._current = value
        return value


class AircraftReader:
    """One ChannelReader per channel of a recording, sharing the aircraft time offset."""

    def __init__(self, recording: AircraftRecording):
        self.recording = recording
        offset = recording.info.time_offset_ms
        self.readers = {
            name: ChannelReader(channel, time_offset_ms=offset)
            for name, channel in recording.channels().items()
        }

    def __getitem__(self, name: str) -> ChannelReader:
        return self.readers[name]

    def state_at(self, timestamp: int, access: Access = Access.LINEAR) -> dict:
        state = {name: reader.value_at(timestamp, access) for name, reader in self.readers.items()}
        logger.debug("State at %d ms (%s): %d channels with data",
                     timestamp, access.name, sum(v is not None for v in state.values()))
        return state
