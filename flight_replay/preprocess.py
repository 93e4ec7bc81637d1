from __future__ import annotations

import dataclasses

import numpy as np
import pandas as pd

from .domain import AugmentationProfile
from .nav import FT_PER_M, KT_PER_MPS, haversine_m
from .samples import Channel, PositionSample

# -----------------------------
# Helpers
# -----------------------------

def _normalize_col(c: str) -> str:
    return c.strip().lower().replace(" ", "").replace("_", "")

def _pick_col(df: pd.DataFrame, candidates: list[str]) -> str | None:
    # match by normalized name
    norm_map = {_normalize_col(c): c for c in df.columns}
    for cand in candidates:
        key = _normalize_col(cand)
        if key in norm_map:
            return norm_map[key]
    return None


def moving_average(x: np.ndarray, win: int) -> np.ndarray:
    """Simple moving average guaranteed to return same length as x."""
    if win <= 1:
        return x.copy()

    kernel = np.ones(win, dtype=float) / win

    left = win // 2
    right = win - 1 - left  # makes total pad = win-1
    xpad = np.pad(x, (left, right), mode="edge")

    return np.convolve(xpad, kernel, mode="valid")  # length == len(x)


# -----------------------------
# DataFrame adapters
# -----------------------------
def positions_from_frame(df: pd.DataFrame) -> Channel[PositionSample]:
    """
    Build a position channel from an already parsed table.

    Accepted columns (matched ignoring case, spaces and underscores):
      time: timestamp / t_ms (milliseconds) or t / time (seconds)
      latitude / lat, longitude / lon / lng
      altitude / alt_ft (feet) or alt_m (meters)
      on_ground (optional)

    Raises:
        ValueError: if a required column is missing or no rows remain
    """
    df = df.copy()

    ms_col = _pick_col(df, ["timestamp", "t_ms", "time_ms"])
    s_col = _pick_col(df, ["t", "time", "t_s"])
    if ms_col is not None:
        df["_ts"] = pd.to_numeric(df[ms_col], errors="coerce")
    elif s_col is not None:
        df["_ts"] = pd.to_numeric(df[s_col], errors="coerce") * 1000.0
    else:
        raise ValueError(f"No time column found. Expected 'timestamp' or 't'. Found: {list(df.columns)}")

    lat_col = _pick_col(df, ["latitude", "lat"])
    lon_col = _pick_col(df, ["longitude", "lon", "lng"])
    if lat_col is None or lon_col is None:
        raise ValueError(f"Missing latitude/longitude columns. Found columns: {list(df.columns)}")

    # altitude can be feet (alt_ft) or meters (alt_m)
    ft_col = _pick_col(df, ["altitude", "alt_ft", "alt_msl_ft"])
    m_col = _pick_col(df, ["alt_m", "alt_msl_m"])
    if ft_col is not None:
        df["_alt"] = pd.to_numeric(df[ft_col], errors="coerce")
    elif m_col is not None:
        df["_alt"] = pd.to_numeric(df[m_col], errors="coerce") * FT_PER_M
    else:
        raise ValueError(
            f"No altitude column found. Expected 'altitude', 'alt_ft' or 'alt_m'. Found: {list(df.columns)}"
        )

    df["_lat"] = pd.to_numeric(df[lat_col], errors="coerce")
    df["_lon"] = pd.to_numeric(df[lon_col], errors="coerce")
    df = df.dropna(subset=["_ts", "_lat", "_lon", "_alt"])

    # Drop only *exact* duplicate rows, then keep the first fix per timestamp
    df = df.drop_duplicates(subset=["_ts", "_lat", "_lon", "_alt"], keep="first")
    df["_ts"] = df["_ts"].round().astype("int64")
    df = df.sort_values("_ts", kind="stable").drop_duplicates(subset=["_ts"], keep="first")
    df = df.reset_index(drop=True)

    if len(df) == 0:
        raise ValueError("No valid position rows found.")

    ground_col = _pick_col(df, ["on_ground", "ground", "sim_on_ground"])
    ground = df[ground_col].tolist() if ground_col is not None else [None] * len(df)

    return Channel(
        PositionSample(
            int(ts),
            latitude=float(lat),
            longitude=float(lon),
            altitude=float(alt),
            on_ground=None if g is None or pd.isna(g) else bool(g),
        )
        for ts, lat, lon, alt, g in zip(df["_ts"], df["_lat"], df["_lon"], df["_alt"], ground)
    )


def channel_to_frame(channel: Channel) -> pd.DataFrame:
    """One row per sample, one column per field."""
    rows = [dataclasses.asdict(s) for s in channel]
    if not rows:
        return pd.DataFrame(columns=["timestamp"])
    return pd.DataFrame(rows)


def kinematics(positions: Channel[PositionSample], profile: AugmentationProfile) -> pd.DataFrame:
    """
    Per-fix kinematics of a position channel.

    Returns a DataFrame with columns:
      ts (ms), t (s), alt_ft, gs_kt, vs_fpm, gs_s, vs_s, on_ground
    and df.attrs["dt"] (median spacing, s) and df.attrs["ground_flags"]
    (True if any fix carried an on_ground flag).
    """
    ts = positions.timestamps()
    t = ts.astype(float) / 1000.0
    lat = np.array([p.latitude for p in positions], dtype=float)
    lon = np.array([p.longitude for p in positions], dtype=float)
    alt = np.array([p.altitude for p in positions], dtype=float)
    flags = [p.on_ground for p in positions]

    n = len(ts)
    gs = np.zeros(n)
    vs = np.zeros(n)
    if n >= 2:
        dt = np.diff(t)
        safe = np.where(dt > 0, dt, 1.0)
        dist = haversine_m(lat[:-1], lon[:-1], lat[1:], lon[1:])
        # forward differences, the last fix repeats the previous one
        gs[:-1] = np.where(dt > 0, dist / safe, 0.0) * KT_PER_MPS
        vs[:-1] = np.where(dt > 0, np.diff(alt) / safe, 0.0) * 60.0
        gs[-1] = gs[-2]
        vs[-1] = vs[-2]

    dts = np.diff(t)
    dts = dts[dts > 0]
    dt_med = float(np.median(dts)) if len(dts) else 1.0
    win = max(1, int(round(profile.smooth_window_s / dt_med)))

    df = pd.DataFrame({
        "ts": ts,
        "t": t,
        "alt_ft": alt,
        "gs_kt": gs,
        "vs_fpm": vs,
        "gs_s": moving_average(gs, win),
        "vs_s": moving_average(vs, win),
        "on_ground": [bool(f) for f in flags],
    })
    df.attrs["dt"] = dt_med
    df.attrs["ground_flags"] = any(f is not None for f in flags)
    return df
