"""
Land position search for GeoWeather.

This module implements the spiral land search with its fallback chain:
start point, golden-angle spiral, regional known-good points, major
cities and a terminal coordinate accepted unconditionally.
"""

import asyncio
from typing import Awaitable, Callable, Iterator, List

from geoweather.common.geo import clamp, spiral_offset
from geoweather.core.chain import Match, Strategy, first_match
from geoweather.core.land import LandClassifier
from geoweather.core.models import Coordinate, WorldDataset
from geoweather.observability import metrics
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.resolver")

SEARCH_LAT_LIMIT = 85.0

class PositionResolver:
    """나선 탐색 기반 육지 좌표 탐색기"""

    def __init__(self,
                 classifier: LandClassifier,
                 world: WorldDataset,
                 *,
                 spiral_scale: float = 1.5,
                 pause_every: int = 10,
                 pause_sec: float = 0.2,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        """
        초기화합니다.

        Args:
            classifier: 육지 분류기
            world: 대체 좌표 목록을 담은 지리 데이터셋
            spiral_scale: 나선 반경 배율 (기본 나선보다 넓게 탐색)
            pause_every: 외부 API 보호를 위해 대기할 시도 간격
            pause_sec: 대기 시간 (초)
            sleep: 대기 함수
        """
        self.classifier = classifier
        self.world = world
        self.spiral_scale = spiral_scale
        self.pause_every = pause_every
        self.pause_sec = pause_sec
        self.sleep = sleep

    def spiral_candidates(self, start: Coordinate, max_attempts: int) -> Iterator[Coordinate]:
        """시작점 주변의 나선 후보를 생성합니다 (위도 ±85 보정)."""
        for i in range(1, max_attempts + 1):
            lat, lon = spiral_offset(i, start, self.spiral_scale)
            yield Coordinate(
                lat=clamp(lat, -SEARCH_LAT_LIMIT, SEARCH_LAT_LIMIT),
                lon=clamp(lon, -180.0, 180.0),
            )

    def regional_candidates(self, start: Coordinate) -> List[Coordinate]:
        """시작점이 속한 지역의 알려진 육지 좌표 목록"""
        candidates: List[Coordinate] = []
        for fallback in self.world.regional_fallbacks:
            if fallback.area.contains(start.lat, start.lon):
                candidates.extend(place.coordinate for place in fallback.places)
        return candidates

    def strategies(self, start: Coordinate, max_attempts: int) -> List[Strategy[Coordinate]]:
        return [
            Strategy("origin", lambda: [start]),
            Strategy(
                "spiral",
                lambda: self.spiral_candidates(start, max_attempts),
                pause_every=self.pause_every,
                pause_sec=self.pause_sec,
            ),
            Strategy("regional", lambda: self.regional_candidates(start)),
            Strategy("cities", lambda: [p.coordinate for p in self.world.city_fallbacks]),
            Strategy("terminal", lambda: [self.world.terminal_fallback.coordinate], unconditional=True),
        ]

    async def resolve(self, start: Coordinate, max_attempts: int = 100) -> Match[Coordinate]:
        """
        시작점에서 가장 가까운 육지 좌표를 탐색합니다.

        Args:
            start: 시작 좌표
            max_attempts: 나선 탐색 최대 시도 횟수

        Returns:
            채택된 좌표와 전략 이름, 시도 횟수 (항상 반환)
        """
        match = await first_match(
            self.strategies(start, max_attempts),
            self.classifier.is_coordinate_on_land,
            sleep=self.sleep,
        )
        metrics.search_strategy_used.labels(search="land_position", strategy=match.strategy).inc()

        if match.strategy == "terminal":
            log.warning(f"최종 대체 좌표 사용 start:{start.lat},{start.lon} target:{match.value.lat},{match.value.lon}")
        elif match.strategy != "origin":
            log.info(
                f"육지 좌표 찾음 start:{start.lat:.4f},{start.lon:.4f} "
                f"found:{match.value.lat:.4f},{match.value.lon:.4f} "
                f"strategy:{match.strategy} attempts:{match.attempts}"
            )
        return match

    async def find_land_position(self, start: Coordinate, max_attempts: int = 100) -> Coordinate:
        """육지 좌표를 반환합니다. 탐색 실패 시에도 대체 좌표를 반환합니다."""
        match = await self.resolve(start, max_attempts)
        return match.value
