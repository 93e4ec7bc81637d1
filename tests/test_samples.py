"""Tests for sample records and the Channel container in samples.py"""

import dataclasses

import numpy as np
import pytest

from flight_replay.samples import AttitudeSample, Channel, LightSample, LightState, PositionSample


class TestSamples:
    """Tests for the frozen sample records."""

    def test_samples_are_immutable(self):
        s = PositionSample(0, 64.0, -22.6, 100.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            s.altitude = 200.0

    def test_light_flags_combine(self):
        s = LightSample(0, LightState.NAVIGATION | LightState.BEACON)
        assert LightState.BEACON in s.lights
        assert LightState.LANDING not in s.lights


class TestChannel:
    """Tests for Channel ordering and editing."""

    def test_constructor_sorts_stably(self):
        a = AttitudeSample(10, pitch=1.0)
        b = AttitudeSample(0)
        c = AttitudeSample(10, pitch=2.0)
        ch = Channel([a, b, c])
        assert [s.timestamp for s in ch] == [0, 10, 10]
        assert ch[1] is a and ch[2] is c

    def test_append_rejects_out_of_order(self):
        ch = Channel([AttitudeSample(100)])
        ch.append(AttitudeSample(100))
        with pytest.raises(ValueError):
            ch.append(AttitudeSample(50))

    def test_upsert_replaces_equal_timestamp(self):
        ch = Channel([AttitudeSample(0), AttitudeSample(10), AttitudeSample(20)])
        ch.upsert(AttitudeSample(10, pitch=5.0))
        assert len(ch) == 3
        assert ch[1].pitch == 5.0

    def test_upsert_inserts_in_order(self):
        ch = Channel([AttitudeSample(0), AttitudeSample(20)])
        ch.upsert(AttitudeSample(10))
        ch.upsert(AttitudeSample(30))
        ch.upsert(AttitudeSample(-5))
        assert [s.timestamp for s in ch] == [-5, 0, 10, 20, 30]

    def test_remove_range_half_open(self):
        ch = Channel([AttitudeSample(t) for t in range(0, 100, 10)])
        removed = ch.remove_range(20, 50)
        assert removed == 3
        assert [s.timestamp for s in ch] == [0, 10, 50, 60, 70, 80, 90]

    def test_remove_empty_range(self):
        ch = Channel([AttitudeSample(t) for t in range(0, 100, 10)])
        assert ch.remove_range(50, 50) == 0
        assert len(ch) == 10

    def test_remove_range_with_filter(self):
        ch = Channel([AttitudeSample(t, pitch=float(t % 20)) for t in range(0, 100, 10)])
        removed = ch.remove_range(20, 60, where=lambda s: s.pitch == 0.0)
        assert removed == 2
        assert [s.timestamp for s in ch] == [0, 10, 30, 50, 60, 70, 80, 90]

    def test_between(self):
        ch = Channel([AttitudeSample(t) for t in range(0, 100, 10)])
        assert [s.timestamp for s in ch.between(15, 45)] == [20, 30, 40]
        assert ch.between(60, 50) == []

    def test_version_changes_on_every_edit(self):
        ch = Channel([AttitudeSample(0), AttitudeSample(10)])
        seen = {ch.version}
        ch.upsert(AttitudeSample(10, pitch=1.0))
        seen.add(ch.version)
        ch.append(AttitudeSample(20))
        seen.add(ch.version)
        ch.remove_range(0, 5)
        seen.add(ch.version)
        ch.clear()
        seen.add(ch.version)
        assert len(seen) == 5

    def test_count_in_range(self):
        ch = Channel([AttitudeSample(t) for t in range(0, 100, 10)])
        assert ch.count_in_range(0, 100) == 10
        assert ch.count_in_range(15, 35) == 2
        assert ch.count_in_range(200, 300) == 0

    def test_first_last_and_empty(self):
        ch = Channel()
        assert ch.first() is None and ch.last() is None
        ch.append(AttitudeSample(5))
        ch.append(AttitudeSample(7))
        assert ch.first().timestamp == 5
        assert ch.last().timestamp == 7

    def test_timestamps_array(self):
        ch = Channel([AttitudeSample(t) for t in (0, 250, 500)])
        ts = ch.timestamps()
        assert ts.dtype == np.int64
        np.testing.assert_array_equal(ts, [0, 250, 500])

    def test_clear(self):
        ch = Channel([AttitudeSample(0)])
        ch.clear()
        assert len(ch) == 0
