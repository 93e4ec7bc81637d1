"""Pipeline orchestration: parsed position table in, augmented recording out."""

from __future__ import annotations

import logging
from typing import Optional

import pandas as pd

from .augment import augment_aircraft_data
from .domain import AircraftInfo, AircraftRecording, Aspects, AugmentationProfile, ProcedureWindow, Procedures
from .preprocess import positions_from_frame

logger = logging.getLogger(__name__)


# Type alias for augmentation result
AugmentationResult = tuple[AircraftRecording, list[ProcedureWindow]]


def augment_frame(
    positions: pd.DataFrame,
    info: Optional[AircraftInfo] = None,
    procedures=Procedures.ALL,
    aspects=Aspects.ALL,
    profile: Optional[AugmentationProfile] = None,
) -> tuple[Optional[AugmentationResult], Optional[str]]:
    """
    Build a recording from a position table and augment it.

    Orchestrates the full workflow:
    1. Build the position channel from the table
    2. Derive attitude and velocity
    3. Detect and splice take-off / landing procedures

    Args:
        positions: Parsed position table (see preprocess.positions_from_frame)
        info: Aircraft metadata, defaults to an empty AircraftInfo
        procedures: Procedures to synthesize
        aspects: Aspects to derive
        profile: Thresholds and schedule

    Returns:
        Tuple of (result, error):
        - On success: ((recording, windows), None)
        - On invalid input: (None, error_message)
    """
    try:
        channel = positions_from_frame(positions)
    except ValueError as e:
        logger.warning("Rejected position table: %s", e)
        return None, str(e)

    recording = AircraftRecording(info=info or AircraftInfo(), position=channel)
    windows = augment_aircraft_data(recording, procedures, aspects, profile or AugmentationProfile())
    return (recording, windows), None
