from __future__ import annotations

from typing import Dict

from .domain import AugmentationProfile, EngineSetting


# Jets: no propeller or mixture, faster rotation and approach, longer roll-out.
AIRLINER = AugmentationProfile(
    name="Airliner",
    max_bank_deg=25.0,
    taxi_speed_threshold_kt=40.0,
    liftoff_climb_rate_fpm=500.0,
    flare_height_ft=30.0,
    climb_out_duration_ms=4 * 60_000,
    approach_duration_ms=12 * 60_000,
    rollout_duration_ms=45_000,
    take_off_power=EngineSetting(throttle=1.0, propeller=0.0, mixture=0.0),
    climb_power=EngineSetting(throttle=0.9, propeller=0.0, mixture=0.0),
    approach_power=EngineSetting(throttle=0.6, propeller=0.0, mixture=0.0),
    landing_power=EngineSetting(throttle=0.55, propeller=0.0, mixture=0.0),
    idle_power=EngineSetting(throttle=0.0, propeller=0.0, mixture=0.0),
    reverse_power=EngineSetting(throttle=-1.0, propeller=0.0, mixture=0.0),
)

# Light singles: shallow banks, short patterns.
PISTON_SINGLE = AugmentationProfile(
    name="Piston single",
    max_bank_deg=20.0,
    taxi_speed_threshold_kt=20.0,
    liftoff_climb_rate_fpm=200.0,
    flare_height_ft=20.0,
    climb_out_duration_ms=3 * 60_000,
    approach_duration_ms=6 * 60_000,
    rollout_duration_ms=20_000,
    gear_retract_delay_ms=0,
    reverse_power=EngineSetting(throttle=0.0, propeller=1.0, mixture=1.0),
)


AIRCRAFT_PROFILES: Dict[str, AugmentationProfile] = {
    p.name: p for p in (AugmentationProfile(), AIRLINER, PISTON_SINGLE)
}
