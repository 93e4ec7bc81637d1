import numpy as np

EARTH_R = 6371000.0  # meters
G = 9.80665  # m/s^2

FT_PER_M = 3.28084
M_PER_FT = 0.3048
KT_PER_MPS = 1.943844


def _deg2rad(x) -> np.ndarray:
    return np.deg2rad(np.asarray(x, dtype=float))


def haversine_m(lat1, lon1, lat2, lon2):
    """Great-circle distance in meters."""
    phi1 = _deg2rad(lat1)
    phi2 = _deg2rad(lat2)
    dphi = phi2 - phi1
    dlmb = _deg2rad(lon2) - _deg2rad(lon1)

    a = np.sin(dphi / 2.0) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(dlmb / 2.0) ** 2
    return 2.0 * EARTH_R * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


def initial_bearing_deg(lat1, lon1, lat2, lon2):
    """Initial great-circle bearing from point 1 to point 2, [0, 360)."""
    phi1 = _deg2rad(lat1)
    phi2 = _deg2rad(lat2)
    dlmb = _deg2rad(lon2) - _deg2rad(lon1)

    y = np.sin(dlmb) * np.cos(phi2)
    x = np.cos(phi1) * np.sin(phi2) - np.sin(phi1) * np.cos(phi2) * np.cos(dlmb)
    return np.mod(np.rad2deg(np.arctan2(y, x)), 360.0)


def heading_change_deg(from_deg, to_deg):
    """
    Signed shortest turn from one heading to another, (-180, 180].
    Positive is a right (clockwise) turn.
    """
    d = np.mod(np.asarray(to_deg, dtype=float) - np.asarray(from_deg, dtype=float), 360.0)
    return np.where(d > 180.0, d - 360.0, d)


def approximate_pitch_deg(distance_m, delta_alt_m):
    """Flight path angle from horizontal distance and altitude change; 0 when not moving."""
    distance_m = np.asarray(distance_m, dtype=float)
    delta_alt_m = np.asarray(delta_alt_m, dtype=float)
    safe = np.where(distance_m > 0.0, distance_m, 1.0)
    return np.where(distance_m > 0.0, np.rad2deg(np.arctan(delta_alt_m / safe)), 0.0)


def coordinated_bank_deg(speed_mps, turn_rate_deg_s, max_bank_deg: float):
    """
    Bank angle of a coordinated turn, tan(bank) = V * omega / g.
    Clamped to +/- max_bank_deg. Positive is right wing down.
    """
    omega = _deg2rad(turn_rate_deg_s)
    bank = np.rad2deg(np.arctan(np.asarray(speed_mps, dtype=float) * omega / G))
    return np.clip(bank, -max_bank_deg, max_bank_deg)


def ned_velocity(lat1, lon1, alt1_ft, lat2, lon2, alt2_ft, dt_s):
    """
    Finite-difference velocity (north, east, down) in m/s between two fixes.
    Local flat-earth approximation around the first fix; zero when dt_s <= 0.
    """
    lat1r = _deg2rad(lat1)
    dlat = _deg2rad(lat2) - lat1r
    # shortest way across the antimeridian
    dlon = _deg2rad((np.asarray(lon2, dtype=float) - np.asarray(lon1, dtype=float) + 180.0) % 360.0 - 180.0)

    north = EARTH_R * dlat
    east = EARTH_R * dlon * np.cos(lat1r)
    down = -(np.asarray(alt2_ft, dtype=float) - np.asarray(alt1_ft, dtype=float)) * M_PER_FT

    dt_s = np.asarray(dt_s, dtype=float)
    safe = np.where(dt_s > 0.0, dt_s, 1.0)
    valid = dt_s > 0.0
    return (
        np.where(valid, north / safe, 0.0),
        np.where(valid, east / safe, 0.0),
        np.where(valid, down / safe, 0.0),
    )


def ned_to_body(vn, ve, vd, pitch_deg, bank_deg, heading_deg):
    """
    Rotate an NED vector into body axes.

    Returns (x, y, z) as (right, up, forward), the axis order used by
    VelocitySample.
    """
    psi = _deg2rad(heading_deg)
    theta = _deg2rad(pitch_deg)
    phi = _deg2rad(bank_deg)

    cpsi, spsi = np.cos(psi), np.sin(psi)
    cth, sth = np.cos(theta), np.sin(theta)
    cph, sph = np.cos(phi), np.sin(phi)

    # aerospace body axes: u forward, v right, w down
    u = cth * cpsi * vn + cth * spsi * ve - sth * vd
    v = (sph * sth * cpsi - cph * spsi) * vn + (sph * sth * spsi + cph * cpsi) * ve + sph * cth * vd
    w = (cph * sth * cpsi + sph * spsi) * vn + (cph * sth * spsi - sph * cpsi) * ve + cph * cth * vd
    return v, -w, u
