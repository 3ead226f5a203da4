"""
Geographic utilities for GeoWeather.

This module provides the geometry kernel: great-circle distance,
golden-angle spiral generation and line/circle intersection tests.
"""

import math
from typing import TYPE_CHECKING, Iterable, Optional, Tuple

if TYPE_CHECKING:
    from geoweather.core.models import Coordinate

EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0
GOLDEN_ANGLE = math.pi * (3 - math.sqrt(5))

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    두 지점 간의 Haversine 거리를 계산합니다 (킬로미터).

    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도

    Returns:
        두 지점 간의 거리 (킬로미터)
    """
    # 도를 라디안으로 변환
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)

    # 위도와 경도의 차이
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    # Haversine 공식
    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2)
    # 부동소수 오차로 1을 넘는 경우 방지
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c

def distance(a: Optional["Coordinate"], b: Optional["Coordinate"]) -> float:
    """
    두 좌표 간의 거리를 계산합니다 (킬로미터).

    좌표 중 하나라도 없으면 예외 대신 0을 반환합니다.
    """
    if a is None or b is None:
        return 0.0
    return haversine_distance(a.lat, a.lon, b.lat, b.lon)

def path_distance(path: Iterable["Coordinate"]) -> float:
    """경로를 따라 연속된 지점 간 거리의 합을 계산합니다."""
    total = 0.0
    previous = None
    for point in path:
        if previous is not None:
            total += distance(previous, point)
        previous = point
    return total

def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))

def spiral_offset(index: int, center: "Coordinate", scale: float = 0.5) -> Tuple[float, float]:
    """
    황금각 나선의 index번째 지점을 계산합니다 (범위 보정 없음).

    Args:
        index: 나선 인덱스 (0이면 중심)
        center: 나선 중심 좌표
        scale: 반경 배율 (반경 = scale * sqrt(index))

    Returns:
        (위도, 경도)
    """
    r = scale * math.sqrt(index)
    t = index * GOLDEN_ANGLE
    return (center.lat + r * math.sin(t), center.lon + r * math.cos(t))

def spiral_point(index: int, center: "Coordinate", scale: float = 0.5) -> "Coordinate":
    """황금각 나선 지점을 유효 범위로 보정된 좌표로 반환합니다."""
    from geoweather.core.models import Coordinate

    lat, lon = spiral_offset(index, center, scale)
    return Coordinate.clamped(lat, lon)

def segment_intersects_circle(p1: "Coordinate",
                              p2: "Coordinate",
                              center: "Coordinate",
                              radius_deg: float) -> bool:
    """
    p1-p2를 지나는 직선이 원과 만나는지 확인합니다.

    선분이 아닌 무한 직선과 원 중심 사이의 수직 거리로 판단하며,
    반경은 좌표와 같은 각도 단위(도)여야 합니다.

    Args:
        p1: 시작점
        p2: 끝점
        center: 원 중심
        radius_deg: 원 반경 (도)

    Returns:
        교차하면 True
    """
    x1, y1 = p1.lat, p1.lon
    x2, y2 = p2.lat, p2.lon
    cx, cy = center.lat, center.lon

    a = y2 - y1
    b = x1 - x2
    c = x2 * y1 - x1 * y2
    norm = math.hypot(a, b)

    # 시작점과 끝점이 같으면 점-원 거리로 판단
    if norm == 0:
        return math.hypot(cx - x1, cy - y1) <= radius_deg

    return abs(a * cx + b * cy + c) / norm <= radius_deg

def km_to_degrees(km: float) -> float:
    return km / KM_PER_DEGREE

def validate_coordinates(lat: float, lon: float) -> bool:
    """
    좌표가 유효한지 확인합니다.

    Args:
        lat: 위도
        lon: 경도

    Returns:
        좌표가 유효하면 True
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
