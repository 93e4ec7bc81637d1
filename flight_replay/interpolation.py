"""Cubic Hermite and linear interpolation, including wrap-aware angle variants."""

from __future__ import annotations


def wrap_180(value: float) -> float:
    """Wrap an angle into [-180, 180)."""
    while value < -180.0:
        value += 360.0
    while value >= 180.0:
        value -= 360.0
    return value


def wrap_360(value: float) -> float:
    """Wrap an angle into [0, 360)."""
    while value < 0.0:
        value += 360.0
    while value >= 360.0:
        value -= 360.0
    return value


def interpolate_linear(p1: float, p2: float, mu: float) -> float:
    if mu <= 0.0:
        return p1
    if mu >= 1.0:
        return p2
    return p1 + mu * (p2 - p1)


def interpolate_hermite(p0: float, p1: float, p2: float, p3: float, mu: float,
                        tension: float = 0.0, bias: float = 0.0) -> float:
    """
    Cubic Hermite interpolation between p1 and p2.

    Tangents are taken from (p0, p2) at p1 and from (p1, p3) at p2.

    Args:
        p0, p1, p2, p3: Support values, p1 and p2 bracket the result
        mu: Normalised position between p1 (0) and p2 (1)
        tension: 1 is high, 0 normal, -1 low
        bias: 0 is even, positive towards the first segment, negative towards the other

    Returns:
        Interpolated value. Exactly p1 at mu = 0 and exactly p2 at mu = 1.
    """
    if mu == 0.0:
        return p1
    if mu == 1.0:
        return p2

    mu2 = mu * mu
    mu3 = mu2 * mu
    scale = (1.0 - tension) / 2.0
    m0 = (p1 - p0) * (1.0 + bias) * scale + (p2 - p1) * (1.0 - bias) * scale
    m1 = (p2 - p1) * (1.0 + bias) * scale + (p3 - p2) * (1.0 - bias) * scale

    a0 = 2.0 * mu3 - 3.0 * mu2 + 1.0
    a1 = mu3 - 2.0 * mu2 + mu
    a2 = mu3 - mu2
    a3 = -2.0 * mu3 + 3.0 * mu2
    return a0 * p1 + a1 * m0 + a2 * m1 + a3 * p2


def _unwrap(p0: float, p1: float, p2: float, p3: float) -> tuple[float, float, float, float]:
    # shift each point by multiples of 360 so that no step between neighbours exceeds 180
    def near(reference: float, value: float) -> float:
        while value - reference > 180.0:
            value -= 360.0
        while value - reference < -180.0:
            value += 360.0
        return value

    q0 = near(p1, p0)
    q2 = near(p1, p2)
    q3 = near(q2, p3)
    return q0, p1, q2, q3


def interpolate_hermite_180(p0: float, p1: float, p2: float, p3: float, mu: float) -> float:
    """Hermite interpolation of angles in [-180, 180), e.g. pitch, bank or longitude."""
    if mu == 0.0:
        return wrap_180(p1)
    if mu == 1.0:
        return wrap_180(p2)
    q0, q1, q2, q3 = _unwrap(p0, p1, p2, p3)
    return wrap_180(interpolate_hermite(q0, q1, q2, q3, mu))


def interpolate_hermite_360(p0: float, p1: float, p2: float, p3: float, mu: float) -> float:
    """Hermite interpolation of angles in [0, 360), e.g. true heading."""
    if mu == 0.0:
        return wrap_360(p1)
    if mu == 1.0:
        return wrap_360(p2)
    q0, q1, q2, q3 = _unwrap(p0, p1, p2, p3)
    return wrap_360(interpolate_hermite(q0, q1, q2, q3, mu))
