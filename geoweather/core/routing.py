"""
Weather-aware route planning for GeoWeather.

This module builds travel paths that detour around blocking weather
events and summarizes the weather met along the final path.
"""

import math
import time
from typing import Callable, List, Optional, Sequence, Tuple

from geoweather.common.geo import (
    distance, km_to_degrees, path_distance, segment_intersects_circle
)
from geoweather.core.models import (
    Coordinate, RoutePlan, WeatherCatalog, WeatherEffect, WeatherEvent
)
from geoweather.observability import metrics
from geoweather.observability.logging_setup import get_logger
from geoweather.ports.event_store import WeatherEventStorePort

log = get_logger("geoweather.routing")

DETOUR_SAFETY_MARGIN = 1.2
CLEAR_SKIES = "Clear skies"

def blocking_events(events: Sequence[WeatherEvent], catalog: WeatherCatalog) -> List[WeatherEvent]:
    """이동을 막는 유형의 이벤트만 골라냅니다."""
    blocking = []
    for event in events:
        type_def = catalog.find(event.type_id)
        if type_def is not None and type_def.block_travel:
            blocking.append(event)
    return blocking

def detour_waypoint(origin: Coordinate, destination: Coordinate, obstacle: WeatherEvent) -> Coordinate:
    """
    장애물을 우회하는 경유지를 계산합니다.

    직선 방향에 수직으로 장애물 중심에서 반경의 1.2배 떨어진 두 지점 중
    출발지에 더 가까운 지점을 고릅니다.
    """
    safe_distance = km_to_degrees(obstacle.radius_km) * DETOUR_SAFETY_MARGIN
    bearing = math.atan2(destination.lon - origin.lon, destination.lat - origin.lat)

    candidates = []
    for perpendicular in (bearing + math.pi / 2, bearing - math.pi / 2):
        candidates.append(Coordinate.clamped(
            obstacle.center.lat + math.cos(perpendicular) * safe_distance,
            obstacle.center.lon + math.sin(perpendicular) * safe_distance,
        ))

    first, second = candidates
    return first if distance(origin, first) < distance(origin, second) else second

def weather_effects_along(path: Sequence[Coordinate],
                          events: Sequence[WeatherEvent],
                          catalog: WeatherCatalog) -> Tuple[List[WeatherEffect], float]:
    """
    경로상의 지점이 반경 안에 들어가는 모든 이벤트의 영향을 모읍니다.

    Returns:
        (영향 목록, 시간 배율) 시간 배율은 최악의 배율이며 최소 1.0
    """
    effects: List[WeatherEffect] = []
    multiplier = 1.0
    for event in events:
        type_def = catalog.find(event.type_id)
        if type_def is None:
            continue
        if any(distance(point, event.center) <= event.radius_km for point in path):
            effects.append(WeatherEffect(
                event_id=event.id,
                type_id=event.type_id,
                name=type_def.name,
                travel_time_multiplier=type_def.travel_time_multiplier,
            ))
            multiplier = max(multiplier, type_def.travel_time_multiplier)
    return effects, multiplier

def plan_route(origin: Coordinate,
               destination: Coordinate,
               events: Sequence[WeatherEvent],
               catalog: WeatherCatalog) -> RoutePlan:
    """
    활성 이벤트 목록으로 경로를 계획합니다 (부수효과 없음).

    Args:
        origin: 출발지
        destination: 도착지
        events: 활성 날씨 이벤트
        catalog: 날씨 유형 카탈로그

    Returns:
        경로, 우회 여부, 총 거리, 날씨 영향 요약
    """
    obstacles = [
        event for event in blocking_events(events, catalog)
        if segment_intersects_circle(origin, destination, event.center, km_to_degrees(event.radius_km))
    ]

    if obstacles:
        # 저장소가 돌려준 순서대로 우회
        waypoints = [detour_waypoint(origin, destination, event) for event in obstacles]
        path = [origin, *waypoints, destination]
    else:
        path = [origin, destination]

    effects, multiplier = weather_effects_along(path, events, catalog)
    avoided = [catalog.get(event.type_id).name for event in obstacles]

    return RoutePlan(
        path=path,
        detour_required=bool(obstacles),
        total_distance_km=path_distance(path),
        weather_avoided=avoided,
        weather_effects=effects,
        time_multiplier=multiplier,
        weather_description=", ".join(effect.name for effect in effects) or CLEAR_SKIES,
    )

class RoutePlanner:
    """날씨 저장소를 읽는 경로 계획기"""

    def __init__(self,
                 store: WeatherEventStorePort,
                 catalog: WeatherCatalog,
                 clock: Callable[[], float] = time.time):
        self.store = store
        self.catalog = catalog
        self.clock = clock

    async def plan(self,
                   origin: Coordinate,
                   destination: Coordinate,
                   now: Optional[float] = None) -> RoutePlan:
        """현재 활성 이벤트를 기준으로 경로를 계획합니다."""
        now = self.clock() if now is None else now
        events = await self.store.query(now)
        route = plan_route(origin, destination, events, self.catalog)

        metrics.routes_planned.labels(detour=str(route.detour_required).lower()).inc()
        if route.detour_required:
            log.info(
                f"우회 경로 계획 from:{origin.lat:.2f},{origin.lon:.2f} to:{destination.lat:.2f},{destination.lon:.2f} "
                f"avoided:{','.join(route.weather_avoided)} distance:{route.total_distance_km:.1f}km"
            )
        return route

    async def blocking_event_at(self, point: Coordinate, now: Optional[float] = None) -> Optional[WeatherEvent]:
        """좌표를 덮고 있는 첫 번째 통행 차단 이벤트를 반환합니다."""
        now = self.clock() if now is None else now
        for event in blocking_events(await self.store.query(now), self.catalog):
            if distance(point, event.center) <= event.radius_km:
                return event
        return None
