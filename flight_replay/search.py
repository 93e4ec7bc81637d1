"""Interval search over timestamp-ordered channels."""

from __future__ import annotations

import math
from typing import Sequence

# Sentinel for "timestamp outside the channel". Never a valid index.
NOT_FOUND = None

# Forward jumps larger than this use binary search instead of scanning from the hint
BINARY_SEARCH_THRESHOLD_MS = 3000

# Neighbours further away than this from the query are not used for interpolation
DEFAULT_INTERPOLATION_WINDOW_MS = 2000
INFINITE_INTERPOLATION_WINDOW = math.inf


def binary_interval_search(series: Sequence, timestamp: int, low_index: int, high_index: int) -> int | None:
    """
    Find the sample interval containing timestamp within [low_index, high_index].

    Args:
        series: Samples ordered by timestamp
        timestamp: Query time (ms)
        low_index: First index of the search range (inclusive)
        high_index: Last index of the search range (inclusive)

    Returns:
        The largest index i in range with series[i].timestamp <= timestamp,
        or NOT_FOUND if the timestamp lies outside
        [series[low_index].timestamp, series[high_index].timestamp] or the
        index range is invalid.
    """
    if len(series) == 0 or low_index < 0 or high_index >= len(series) or low_index > high_index:
        return NOT_FOUND
    if series[low_index].timestamp > timestamp or series[high_index].timestamp < timestamp:
        return NOT_FOUND

    # invariant: series[low].timestamp <= timestamp, and everything after high is > timestamp
    low, high = low_index, high_index
    while low < high:
        mid = (low + high + 1) // 2
        if series[mid].timestamp <= timestamp:
            low = mid
        else:
            high = mid - 1
    return low


def linear_interval_search(series: Sequence, timestamp: int, start_index: int) -> int | None:
    """Forward scan from start_index. Same result semantics as binary_interval_search."""
    n = len(series)
    if n == 0 or start_index < 0 or start_index >= n:
        return NOT_FOUND
    if series[start_index].timestamp > timestamp or series[n - 1].timestamp < timestamp:
        return NOT_FOUND

    i = start_index
    while i < n - 1 and series[i + 1].timestamp <= timestamp:
        i += 1
    return i


def update_start_index(series: Sequence, hint: int | None, timestamp: int) -> int | None:
    """
    Locate the interval for timestamp, reusing the previous result as hint.

    Small forward steps scan linearly from the hint; rewinds and jumps larger
    than BINARY_SEARCH_THRESHOLD_MS fall back to binary search. Timestamps at
    or after the last sample map to the last index.
    """
    n = len(series)
    if n == 0:
        return NOT_FOUND
    if timestamp >= series[n - 1].timestamp:
        return n - 1
    if timestamp < series[0].timestamp:
        return NOT_FOUND

    if hint is None or hint < 0 or hint >= n:
        return binary_interval_search(series, timestamp, 0, n - 1)

    hint_ts = series[hint].timestamp
    if timestamp < hint_ts:
        # rewind
        return binary_interval_search(series, timestamp, 0, hint)
    if timestamp - hint_ts > BINARY_SEARCH_THRESHOLD_MS:
        return binary_interval_search(series, timestamp, hint, n - 1)
    return linear_interval_search(series, timestamp, hint)


def normalise_timestamp(p1, p2, timestamp: int) -> float:
    """Position of timestamp between p1 and p2 as mu in [0, 1]."""
    span = p2.timestamp - p1.timestamp
    if span == 0:
        return 0.0
    mu = (timestamp - p1.timestamp) / span
    return min(max(mu, 0.0), 1.0)


def _within(sample, timestamp: int, window: float) -> bool:
    return abs(sample.timestamp - timestamp) <= window


def cubic_support(series: Sequence, timestamp: int, window: float, hint: int | None):
    """
    Bracketing samples (p0, p1, p2, p3) for cubic interpolation at timestamp.

    Returns (index, support). support is None when there is no data: an
    empty series, or a timestamp more than window after p1, the sample at
    or before it (the last sample included). Before the first sample the
    first sample is held; at the ends the neighbours are clamped. A
    neighbour further than window away from the query collapses onto p1.
    """
    if window < 0:
        raise ValueError(f"Interpolation window must be non-negative, got {window}")
    n = len(series)
    if n == 0:
        return NOT_FOUND, None

    first = series[0]
    last = series[n - 1]
    if timestamp < first.timestamp:
        return 0, (first, first, first, first)
    if timestamp >= last.timestamp:
        if timestamp - last.timestamp > window:
            return n - 1, None
        return n - 1, (last, last, last, last)

    index = update_start_index(series, hint, timestamp)
    if index is NOT_FOUND:
        return NOT_FOUND, None

    p1 = series[index]
    if timestamp - p1.timestamp > window:
        # inside a recording gap
        return index, None
    p2 = series[index + 1] if index + 1 < n else p1
    p0 = series[index - 1] if index > 0 else p1
    p3 = series[index + 2] if index + 2 < n else p2

    if not _within(p0, timestamp, window):
        p0 = p1
    if not _within(p2, timestamp, window):
        p2 = p1
        p3 = p1
    elif not _within(p3, timestamp, window):
        p3 = p2
    return index, (p0, p1, p2, p3)


def linear_support(series: Sequence, timestamp: int, window: float, hint: int | None):
    """Like cubic_support, but returns only (p1, p2)."""
    index, support = cubic_support(series, timestamp, window, hint)
    if support is None:
        return index, None
    _, p1, p2, _ = support
    return index, (p1, p2)
