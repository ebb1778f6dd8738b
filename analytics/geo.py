"""GPS 위치 이동 감지."""

from __future__ import annotations

import math

from analytics.config import EARTH_RADIUS_M, MOVEMENT_THRESHOLD_M


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """두 좌표 간 대원 거리 (m)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def has_moved(
    old_lat: float | None,
    old_lon: float | None,
    new_lat: float,
    new_lon: float,
    threshold_meters: float = MOVEMENT_THRESHOLD_M,
) -> bool:
    """이전 위치 대비 threshold_meters를 초과해 이동했는지 여부.

    이전 좌표가 없으면 (최초 등록) 이동으로 보지 않는다.
    """
    if old_lat is None or old_lon is None:
        return False
    return haversine_distance(old_lat, old_lon, new_lat, new_lon) > threshold_meters
