"""Synthetic flights shared by the augmentation tests."""

import math

import pandas as pd
import pytest

from flight_replay.domain import AircraftRecording
from flight_replay.samples import Channel, PositionSample

EARTH_R = 6371000.0
LAT0 = 64.0
LON0 = -22.6
FIELD_ELEV_FT = 100.0


def advance(lat, lon, dist_m, bearing_deg):
    """Move dist_m along bearing_deg on a locally flat earth."""
    b = math.radians(bearing_deg)
    lat2 = lat + math.degrees(dist_m * math.cos(b) / EARTH_R)
    lon2 = lon + math.degrees(dist_m * math.sin(b) / (EARTH_R * math.cos(math.radians(lat))))
    return lat2, lon2


def flight_rows(ground_flags=True, climb_s=300, descent_s=500, rollout_s=60):
    """
    One fix per second, flying due north. With the defaults:
      0..59     parked on the ground
      60..119   take-off roll, accelerating to 70 m/s
      120..419  climb at 1000 fpm to 5100 ft
      420..919  descent down to 110 ft
      920..979  roll-out on the ground
    """
    top = FIELD_ELEV_FT + climb_s * 1000.0 / 60.0
    sink = (top - FIELD_ELEV_FT) / descent_s
    climb_end = 120 + climb_s
    touchdown = climb_end + descent_s
    rows = []
    lat, lon = LAT0, LON0
    for i in range(touchdown + rollout_s):
        if i < 60:
            speed, alt, ground = 0.0, FIELD_ELEV_FT, True
        elif i < 120:
            speed, alt, ground = (i - 59) * 70.0 / 60.0, FIELD_ELEV_FT, True
        elif i < climb_end:
            speed, alt, ground = 70.0, FIELD_ELEV_FT + (1000.0 / 60.0) * (i - 119), False
        elif i < touchdown:
            speed, alt, ground = 70.0, top - sink * (i - climb_end), False
        else:
            speed, alt, ground = max(70.0 - 2.0 * (i - touchdown + 1), 5.0), FIELD_ELEV_FT, True
        rows.append({
            "timestamp": i * 1000,
            "latitude": lat,
            "longitude": lon,
            "altitude": alt,
            "on_ground": ground if ground_flags else None,
        })
        lat, lon = advance(lat, lon, speed, 0.0)
    return rows


def legs_recording(legs, start_alt_ft=FIELD_ELEV_FT, bearing_deg=0.0):
    """
    Position-only track, one fix per second.

    legs: (seconds, ground speed in m/s, vertical speed in fpm) per leg
    """
    samples = []
    lat, lon, alt, t = LAT0, LON0, start_alt_ft, 0
    for seconds, speed, vs_fpm in legs:
        for _ in range(seconds):
            samples.append(PositionSample(t * 1000, lat, lon, alt))
            lat, lon = advance(lat, lon, speed, bearing_deg)
            alt += vs_fpm / 60.0
            t += 1
    return AircraftRecording(position=Channel(samples))


def recording_from_rows(rows):
    return AircraftRecording(position=Channel(
        PositionSample(r["timestamp"], r["latitude"], r["longitude"], r["altitude"], r["on_ground"])
        for r in rows
    ))


@pytest.fixture
def flight():
    """Full take-off to landing recording with ground flags."""
    return recording_from_rows(flight_rows())


@pytest.fixture
def flight_without_ground_flags():
    return recording_from_rows(flight_rows(ground_flags=False))


@pytest.fixture
def flight_frame():
    return pd.DataFrame(flight_rows())


def turning_recording(turn_deg_per_s=3.0, speed_mps=60.0, n=40):
    """Constant-rate level turn, one fix per second."""
    samples = []
    lat, lon, heading = LAT0, LON0, 0.0
    for i in range(n):
        samples.append(PositionSample(i * 1000, lat, lon, 3000.0, False))
        lat, lon = advance(lat, lon, speed_mps, heading)
        heading = (heading + turn_deg_per_s) % 360.0
    return AircraftRecording(position=Channel(samples))


@pytest.fixture
def make_turn():
    return turning_recording


@pytest.fixture
def circuit():
    """Short circuit with ground flags: lift-off near 120 s, touchdown at 600 s."""
    return recording_from_rows(flight_rows(climb_s=180, descent_s=300, rollout_s=100))


@pytest.fixture
def make_track():
    return legs_recording


@pytest.fixture
def cruise_track():
    """Position-only: ground roll, climb to 10100 ft, ten minutes of level cruise, end of data."""
    return legs_recording([(60, 0.0, 0.0), (60, 60.0, 0.0), (600, 70.0, 1000.0), (600, 130.0, 0.0)])
