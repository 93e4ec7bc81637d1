"""Time-stamped sample records and the ordered channel that holds them."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import Flag, auto
from typing import Callable, Generic, Iterable, Iterator, TypeVar

import numpy as np


ENGINE_COUNT = 4

Levers = tuple[float, float, float, float]
Switches = tuple[bool, bool, bool, bool]

_ZERO_LEVERS: Levers = (0.0, 0.0, 0.0, 0.0)
_OFF_SWITCHES: Switches = (False, False, False, False)


# -----------------------------
# Sample kinds
# -----------------------------
# timestamp is always integer milliseconds since the start of the recording.

@dataclass(frozen=True)
class PositionSample:
    timestamp: int
    latitude: float = 0.0    # degrees
    longitude: float = 0.0   # degrees
    altitude: float = 0.0    # feet MSL
    on_ground: bool | None = None  # None: no ground contact flag was recorded


@dataclass(frozen=True)
class AttitudeSample:
    timestamp: int
    pitch: float = 0.0         # degrees, positive nose up
    bank: float = 0.0          # degrees, positive right wing down
    true_heading: float = 0.0  # degrees, [0, 360)


@dataclass(frozen=True)
class VelocitySample:
    """Body-frame velocity in feet per second."""
    timestamp: int
    x: float = 0.0  # lateral, right positive
    y: float = 0.0  # vertical, up positive
    z: float = 0.0  # longitudinal, forward positive


@dataclass(frozen=True)
class EngineSample:
    timestamp: int
    throttle: Levers = _ZERO_LEVERS    # [-1, 1], negative is reverse thrust
    propeller: Levers = _ZERO_LEVERS   # [0, 1]
    mixture: Levers = _ZERO_LEVERS     # [0, 1]
    starter: Switches = _OFF_SWITCHES
    combustion: Switches = _OFF_SWITCHES
    master_battery: bool = False


@dataclass(frozen=True)
class PrimaryFlightControlSample:
    timestamp: int
    rudder: float = 0.0
    elevator: float = 0.0
    aileron: float = 0.0


@dataclass(frozen=True)
class SecondaryFlightControlSample:
    timestamp: int
    flaps_handle_index: int = 0
    leading_edge_flaps: float = 0.0
    trailing_edge_flaps: float = 0.0
    spoilers_handle: float = 0.0
    spoilers_position: float = 0.0


@dataclass(frozen=True)
class AircraftHandleSample:
    timestamp: int
    gear_down: bool = False
    brake_left: float = 0.0
    brake_right: float = 0.0
    steering: float = 0.0
    tailhook_down: bool = False
    canopy_open: float = 0.0
    water_rudder_down: bool = False
    wing_folding_left: float = 0.0
    wing_folding_right: float = 0.0


class LightState(Flag):
    NONE = 0
    NAVIGATION = auto()
    BEACON = auto()
    LANDING = auto()
    TAXI = auto()
    STROBE = auto()
    PANEL = auto()
    RECOGNITION = auto()
    WING = auto()
    LOGO = auto()
    CABIN = auto()


@dataclass(frozen=True)
class LightSample:
    timestamp: int
    lights: LightState = LightState.NONE


S = TypeVar("S")


def _timestamp_of(sample) -> int:
    return sample.timestamp


# -----------------------------
# Channel
# -----------------------------
class Channel(Generic[S]):
    """
    Ordered sequence of samples of one kind.

    Samples are kept ascending by timestamp. Duplicate timestamps are allowed
    and keep their insertion order, which is what the interval search relies on.
    `version` changes on every mutation.
    """

    def __init__(self, samples: Iterable[S] | None = None):
        # sorted() is stable, so duplicates stay in the order they were given
        self._samples: list[S] = sorted(samples or [], key=_timestamp_of)
        self._version = 0

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[S]:
        return iter(self._samples)

    def __getitem__(self, index):
        return self._samples[index]

    def __repr__(self) -> str:
        return f"Channel({len(self._samples)} samples)"

    @property
    def version(self) -> int:
        return self._version

    def first(self) -> S | None:
        return self._samples[0] if self._samples else None

    def last(self) -> S | None:
        return self._samples[-1] if self._samples else None

    def _bounds(self, start: int, end: int) -> tuple[int, int]:
        lo = bisect.bisect_left(self._samples, start, key=_timestamp_of)
        hi = bisect.bisect_left(self._samples, end, key=_timestamp_of)
        return lo, max(lo, hi)

    def append(self, sample: S) -> None:
        """Append at the end. Raises ValueError if it would break the ordering."""
        if self._samples and sample.timestamp < self._samples[-1].timestamp:
            raise ValueError(
                f"Sample at {sample.timestamp} ms precedes last sample at {self._samples[-1].timestamp} ms"
            )
        self._samples.append(sample)
        self._version += 1

    def upsert(self, sample: S) -> None:
        """Replace the sample with the same timestamp, or insert at the ordered position."""
        i = bisect.bisect_right(self._samples, sample.timestamp, key=_timestamp_of)
        if i > 0 and self._samples[i - 1].timestamp == sample.timestamp:
            self._samples[i - 1] = sample
        else:
            self._samples.insert(i, sample)
        self._version += 1

    def between(self, start: int, end: int) -> list[S]:
        """Samples with start <= timestamp < end."""
        lo, hi = self._bounds(start, end)
        return self._samples[lo:hi]

    def remove_range(self, start: int, end: int, where: Callable[[S], bool] | None = None) -> int:
        """
        Drop samples with start <= timestamp < end, only those matching
        `where` if given. Returns how many were removed.
        """
        lo, hi = self._bounds(start, end)
        if where is None:
            kept = []
        else:
            kept = [s for s in self._samples[lo:hi] if not where(s)]
        removed = hi - lo - len(kept)
        if removed:
            self._samples[lo:hi] = kept
            self._version += 1
        return removed

    def count_in_range(self, start: int, end: int) -> int:
        lo, hi = self._bounds(start, end)
        return hi - lo

    def clear(self) -> None:
        self._samples.clear()
        self._version += 1

    def timestamps(self) -> np.ndarray:
        return np.fromiter((s.timestamp for s in self._samples), dtype=np.int64, count=len(self._samples))
