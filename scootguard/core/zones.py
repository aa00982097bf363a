"""
Safety zone reference data and nearest-zone lookup.
"""

from typing import Optional, Sequence, Tuple
from scootguard.common.geo import haversine_distance
from .models import SafetyZone, ZoneProximity

# USC 주변 안전 주차 구역
SAFETY_ZONES: Tuple[SafetyZone, ...] = (
    SafetyZone(
        id="usc-security",
        name="USC Department of Public Safety",
        latitude=34.0224,
        longitude=-118.2851,
        type="security",
        description=("USC Department of Public Safety - 24/7 monitored area with security "
                     "presence. Safe zone for scooter parking."),
    ),
    SafetyZone(
        id="caruso-center",
        name="Our Savior Parish & USC Caruso Catholic Center",
        latitude=34.0198,
        longitude=-118.2889,
        type="parking",
        description=("Our Savior Parish & USC Caruso Catholic Center - Well-lit area with "
                     "regular foot traffic. Recommended safe parking zone."),
    ),
)

def find_nearest_zone(lat: float, lon: float,
                      zones: Sequence[SafetyZone] = SAFETY_ZONES) -> Optional[ZoneProximity]:
    """가장 가까운 안전 구역을 찾습니다. 구역이 없으면 None."""
    best: Optional[ZoneProximity] = None

    for z in zones:
        d = haversine_distance(lat, lon, z.latitude, z.longitude)
        if best is None or d < best.distance_km:
            best = ZoneProximity(zone=z, distance_km=d)

    return best
