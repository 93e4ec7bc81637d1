"""
Flight Replay - Sample Interpolation and Flight Data Augmentation

Core of a flight recording/replay tool. Locates and interpolates recorded
samples at arbitrary playback times (including wrap-aware angles), and
synthesizes attitude, velocity and take-off/landing procedure state for
recordings that only carry positions.
"""

from .samples import (
    AircraftHandleSample,
    AttitudeSample,
    Channel,
    EngineSample,
    LightSample,
    LightState,
    PositionSample,
    PrimaryFlightControlSample,
    SecondaryFlightControlSample,
    VelocitySample,
)
from .domain import (
    AircraftInfo,
    AircraftRecording,
    Aspect,
    Aspects,
    AugmentationProfile,
    EngineSetting,
    Procedure,
    ProcedureWindow,
    Procedures,
)
from .search import NOT_FOUND, binary_interval_search, linear_interval_search, update_start_index
from .interpolation import (
    interpolate_hermite,
    interpolate_hermite_180,
    interpolate_hermite_360,
    interpolate_linear,
)
from .replay import Access, AircraftReader, ChannelReader
from .preprocess import channel_to_frame, kinematics, moving_average, positions_from_frame
from .procedures import detect_landing, detect_take_off
from .augment import (
    augment_aircraft_data,
    augment_attitude_and_velocity,
    augment_landing_procedure,
    augment_procedures,
    augment_start_procedure,
)
from .profiles import AIRCRAFT_PROFILES
from .pipeline import augment_frame
from .render import make_augmentation_figure

__all__ = [
    # Samples and channels
    "PositionSample",
    "AttitudeSample",
    "VelocitySample",
    "EngineSample",
    "PrimaryFlightControlSample",
    "SecondaryFlightControlSample",
    "AircraftHandleSample",
    "LightSample",
    "LightState",
    "Channel",
    # Domain models
    "AircraftInfo",
    "AircraftRecording",
    "Aspect",
    "Aspects",
    "Procedure",
    "Procedures",
    "AugmentationProfile",
    "EngineSetting",
    "ProcedureWindow",
    "AIRCRAFT_PROFILES",
    # Interval search
    "NOT_FOUND",
    "binary_interval_search",
    "linear_interval_search",
    "update_start_index",
    # Interpolation
    "interpolate_hermite",
    "interpolate_hermite_180",
    "interpolate_hermite_360",
    "interpolate_linear",
    # Replay
    "Access",
    "ChannelReader",
    "AircraftReader",
    # Preprocessing
    "positions_from_frame",
    "channel_to_frame",
    "kinematics",
    "moving_average",
    # Augmentation
    "detect_take_off",
    "detect_landing",
    "augment_attitude_and_velocity",
    "augment_start_procedure",
    "augment_landing_procedure",
    "augment_procedures",
    "augment_aircraft_data",
    # Pipeline
    "augment_frame",
    # Visualization
    "make_augmentation_figure",
]

__version__ = "0.1.0"
