"""Tests for DataFrame adapters and signal helpers in preprocess.py"""

import numpy as np
import pandas as pd
import pytest
from io import StringIO

from flight_replay.domain import AugmentationProfile
from flight_replay.preprocess import channel_to_frame, kinematics, moving_average, positions_from_frame
from flight_replay.samples import AttitudeSample, Channel, PositionSample


class TestMovingAverage:
    """Tests for the moving_average function."""

    def test_returns_same_length(self):
        """Output array should have same length as input."""
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        for win in [1, 2, 3, 5]:
            assert len(moving_average(x, win)) == len(x)

    def test_window_one_returns_copy(self):
        x = np.array([1.0, 2.0, 3.0])
        result = moving_average(x, 1)
        np.testing.assert_array_equal(result, x)
        assert result is not x

    def test_known_values(self):
        x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
        result = moving_average(x, 3)
        assert result[1] == pytest.approx(2.0)
        assert result[2] == pytest.approx(3.0)
        assert result[3] == pytest.approx(4.0)


class TestPositionsFromFrame:
    """Tests for the positions_from_frame function."""

    @pytest.fixture
    def seconds_csv(self):
        return StringIO("""t,lat,lon,alt_m,on_ground
0.0,64.0,-22.6,30.48,1
1.0,64.001,-22.6,30.48,1
2.0,64.002,-22.6,60.96,0
""")

    def test_seconds_and_meters(self, seconds_csv):
        ch = positions_from_frame(pd.read_csv(seconds_csv))
        assert len(ch) == 3
        assert [p.timestamp for p in ch] == [0, 1000, 2000]
        assert ch[0].altitude == pytest.approx(100.0, rel=1e-4)
        assert ch[2].altitude == pytest.approx(200.0, rel=1e-4)
        assert [p.on_ground for p in ch] == [True, True, False]

    def test_millisecond_column_names(self):
        df = pd.DataFrame({
            "Timestamp": [0, 500],
            "Latitude": [1.0, 1.1],
            "Longitude": [2.0, 2.1],
            "Altitude": [1000.0, 1100.0],
        })
        ch = positions_from_frame(df)
        assert [p.timestamp for p in ch] == [0, 500]
        assert ch[1].altitude == 1100.0
        assert ch[0].on_ground is None

    def test_sorted_and_deduplicated(self):
        df = pd.DataFrame({
            "timestamp": [2000, 0, 1000, 1000, 1000],
            "lat": [3.0, 1.0, 2.0, 2.0, 9.0],
            "lon": [0.0, 0.0, 0.0, 0.0, 0.0],
            "alt_ft": [0.0, 0.0, 0.0, 0.0, 0.0],
        })
        ch = positions_from_frame(df)
        assert [p.timestamp for p in ch] == [0, 1000, 2000]
        assert ch[1].latitude == 2.0  # first fix per timestamp wins

    def test_unparseable_rows_dropped(self):
        df = pd.DataFrame({
            "timestamp": [0, 1000, 2000],
            "lat": [1.0, "n/a", 3.0],
            "lon": [0.0, 0.0, 0.0],
            "alt_ft": [0.0, 0.0, 0.0],
        })
        assert len(positions_from_frame(df)) == 2

    def test_missing_time_column(self):
        df = pd.DataFrame({"lat": [1.0], "lon": [2.0], "alt_ft": [3.0]})
        with pytest.raises(ValueError, match="No time column"):
            positions_from_frame(df)

    def test_missing_altitude_column(self):
        df = pd.DataFrame({"t": [0.0], "lat": [1.0], "lon": [2.0]})
        with pytest.raises(ValueError, match="No altitude column"):
            positions_from_frame(df)

    def test_missing_latitude_column(self):
        df = pd.DataFrame({"t": [0.0], "lon": [2.0], "alt_ft": [3.0]})
        with pytest.raises(ValueError, match="latitude/longitude"):
            positions_from_frame(df)

    def test_no_valid_rows(self):
        df = pd.DataFrame({"t": [None], "lat": [1.0], "lon": [2.0], "alt_ft": [3.0]})
        with pytest.raises(ValueError):
            positions_from_frame(df)


class TestChannelToFrame:
    """Tests for the channel_to_frame function."""

    def test_one_row_per_sample(self):
        ch = Channel([AttitudeSample(0, 1.0, 2.0, 3.0), AttitudeSample(100, 4.0, 5.0, 6.0)])
        df = channel_to_frame(ch)
        assert list(df.columns) == ["timestamp", "pitch", "bank", "true_heading"]
        assert df["bank"].tolist() == [2.0, 5.0]

    def test_empty_channel(self):
        df = channel_to_frame(Channel())
        assert len(df) == 0
        assert "timestamp" in df.columns


class TestKinematics:
    """Tests for the kinematics function."""

    @pytest.fixture
    def profile(self):
        return AugmentationProfile(smooth_window_s=1.0)

    def test_ground_and_vertical_speed(self, profile):
        # 0.001 deg of latitude per second is ~111 m/s, climbing 10 ft/s
        ch = Channel(PositionSample(i * 1000, 64.0 + 0.001 * i, -22.6, 100.0 + 10.0 * i) for i in range(10))
        df = kinematics(ch, profile)
        assert len(df) == 10
        assert df["gs_kt"].iloc[0] == pytest.approx(111.19 * 1.943844, rel=1e-3)
        np.testing.assert_allclose(df["vs_fpm"], 600.0)
        assert df.attrs["dt"] == pytest.approx(1.0)
        assert df.attrs["ground_flags"] is False

    def test_ground_flags_detected(self, profile):
        ch = Channel([PositionSample(0, on_ground=True), PositionSample(1000, on_ground=None)])
        df = kinematics(ch, profile)
        assert df.attrs["ground_flags"] is True
        assert df["on_ground"].tolist() == [True, False]

    def test_single_fix(self, profile):
        df = kinematics(Channel([PositionSample(0)]), profile)
        assert df["gs_kt"].tolist() == [0.0]
