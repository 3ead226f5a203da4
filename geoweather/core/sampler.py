"""
Collision-aware weighted random placement for GeoWeather.

This module draws random land positions from weighted regions while
keeping a minimum distance to already placed points, falling back to
curated cities and finally to a jittered point near a random city.
"""

import asyncio
import random
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence

from geoweather.common.geo import distance
from geoweather.core.chain import Match, Strategy, first_match
from geoweather.core.land import LandClassifier
from geoweather.core.models import Coordinate, Region, WorldDataset
from geoweather.observability import metrics
from geoweather.observability.logging_setup import get_logger
from geoweather.ports.positions import EntityPositionSource

log = get_logger("geoweather.sampler")

def weighted_pool(regions: Sequence[Region]) -> List[Region]:
    """각 영역을 weight 횟수만큼 반복한 추첨 풀을 만듭니다."""
    pool: List[Region] = []
    for region in regions:
        pool.extend([region] * region.weight)
    return pool

def draw_point(region: Region, rng: random.Random) -> Coordinate:
    """
    영역 안의 균일 임의 좌표를 뽑습니다.

    날짜변경선을 넘는 영역(lon_min > lon_max)은 두 구간의 폭에 비례하여
    경도를 나눠 뽑습니다.
    """
    lat = region.lat_min + rng.random() * (region.lat_max - region.lat_min)

    if region.wraps_antimeridian:
        east_span = 180.0 - region.lon_min
        west_span = region.lon_max + 180.0
        u = rng.random() * (east_span + west_span)
        lon = region.lon_min + u if u < east_span else -180.0 + (u - east_span)
    else:
        lon = region.lon_min + rng.random() * (region.lon_max - region.lon_min)

    return Coordinate.clamped(lat, lon)

def is_far_enough(candidate: Coordinate, existing: Sequence[Coordinate], min_distance_km: float) -> bool:
    """모든 기존 지점과 min_distance_km 이상 떨어져 있으면 True"""
    return all(distance(candidate, point) >= min_distance_km for point in existing)

class PlacementSampler:
    """충돌을 피하는 가중 임의 배치기"""

    def __init__(self,
                 classifier: LandClassifier,
                 world: WorldDataset,
                 *,
                 rng: Optional[random.Random] = None,
                 pause_every: int = 10,
                 pause_sec: float = 0.3,
                 jitter_deg: float = 2.5,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        """
        초기화합니다.

        Args:
            classifier: 육지 분류기
            world: 영역/도시 목록을 담은 지리 데이터셋
            rng: 난수 생성기 (테스트에서는 시드 고정)
            pause_every: 외부 API 보호를 위해 대기할 시도 간격
            pause_sec: 대기 시간 (초)
            jitter_deg: 비상 대체 좌표의 최대 흔들림 (도)
            sleep: 대기 함수
        """
        self.classifier = classifier
        self.world = world
        self.rng = rng or random.Random()
        self.pause_every = pause_every
        self.pause_sec = pause_sec
        self.jitter_deg = jitter_deg
        self.sleep = sleep

    def random_candidates(self, regions: Sequence[Region], max_attempts: int) -> Iterator[Coordinate]:
        pool = weighted_pool(regions)
        if not pool:
            return
        for _ in range(max_attempts):
            region = self.rng.choice(pool)
            yield draw_point(region, self.rng)

    def emergency_candidate(self) -> Iterator[Coordinate]:
        """임의 도시 주변 ±jitter_deg 범위의 좌표 (무조건 채택)"""
        base = self.rng.choice(self.world.placement_cities)
        spread = self.jitter_deg * 2
        yield Coordinate.clamped(
            base.lat + (self.rng.random() - 0.5) * spread,
            base.lon + (self.rng.random() - 0.5) * spread,
        )

    async def sample(self,
                     existing_points: Sequence[Coordinate],
                     regions: Optional[Sequence[Region]] = None,
                     min_distance_km: float = 50.0,
                     max_attempts: int = 100) -> Match[Coordinate]:
        """
        기존 지점과 겹치지 않는 임의 육지 좌표를 뽑습니다.

        Args:
            existing_points: 충돌 검사 대상 좌표
            regions: 후보 영역 (None이면 데이터셋의 육지 영역)
            min_distance_km: 최소 거리 (킬로미터)
            max_attempts: 임의 추첨 최대 시도 횟수

        Returns:
            채택된 좌표와 전략 이름(random / curated / emergency), 시도 횟수
        """
        regions = list(regions) if regions is not None else list(self.world.land_regions)
        existing = list(existing_points)
        relaxed_km = min_distance_km / 2

        async def valid(candidate: Coordinate) -> bool:
            # 거리 검사는 네트워크 호출이 없으므로 먼저 수행
            if not is_far_enough(candidate, existing, min_distance_km):
                return False
            return await self.classifier.is_coordinate_on_land(candidate)

        async def valid_relaxed(candidate: Coordinate) -> bool:
            if not is_far_enough(candidate, existing, relaxed_km):
                return False
            return await self.classifier.is_coordinate_on_land(candidate)

        match = await first_match(
            [
                Strategy(
                    "random",
                    lambda: self.random_candidates(regions, max_attempts),
                    pause_every=self.pause_every,
                    pause_sec=self.pause_sec,
                ),
                Strategy(
                    "curated",
                    lambda: [p.coordinate for p in self.world.placement_cities],
                    validator=valid_relaxed,
                ),
                Strategy("emergency", self.emergency_candidate, unconditional=True),
            ],
            valid,
            sleep=self.sleep,
        )
        metrics.search_strategy_used.labels(search="placement", strategy=match.strategy).inc()

        if match.strategy == "emergency":
            log.warning(f"비상 대체 좌표 사용 target:{match.value.lat:.4f},{match.value.lon:.4f} existing:{len(existing)}")
        else:
            log.info(
                f"배치 좌표 찾음 target:{match.value.lat:.4f},{match.value.lon:.4f} "
                f"strategy:{match.strategy} attempts:{match.attempts} existing:{len(existing)}"
            )
        return match

    async def sample_from(self,
                          source: EntityPositionSource,
                          regions: Optional[Sequence[Region]] = None,
                          min_distance_km: float = 50.0,
                          max_attempts: int = 100) -> Match[Coordinate]:
        """위치 소스에서 기존 좌표를 읽어 배치합니다."""
        existing = await source.list_positions()
        return await self.sample(existing, regions, min_distance_km, max_attempts)
