"""
Land/water classification for GeoWeather.

This module implements the two-stage land classifier: a rectangle
heuristic over the world dataset, optionally confirmed by an external
elevation lookup when the heuristic answers LAND.
"""

import time
from typing import AsyncIterator, Optional, Tuple

from geoweather.core.chain import Strategy, first_match
from geoweather.core.errors import LookupUnavailable
from geoweather.core.models import Coordinate, Surface, WorldDataset
from geoweather.observability import metrics
from geoweather.observability.logging_setup import get_logger
from geoweather.ports.elevation import ElevationPort

log = get_logger("geoweather.land")

DEEP_WATER_M = -50.0
SEA_LEVEL_BAND_M = 2.0

def elevation_verdict(elevation: float, heuristic: Surface) -> Surface:
    """
    고도 값으로 지표면을 판정합니다.

    Args:
        elevation: 조회된 고도 (미터)
        heuristic: 휴리스틱 판정 결과

    Returns:
        최종 판정
    """
    if elevation < DEEP_WATER_M:
        return Surface.WATER
    # 해수면 근처는 호수/해안일 수 있으므로 휴리스틱을 신뢰
    if abs(elevation) <= SEA_LEVEL_BAND_M:
        return heuristic
    return Surface.LAND if elevation > SEA_LEVEL_BAND_M else Surface.WATER

def _is_known(verdict: Optional[Surface]) -> bool:
    return verdict is not None

class LandClassifier:
    """육지/해양 분류기"""

    def __init__(self, world: WorldDataset, elevation: Optional[ElevationPort] = None):
        """
        초기화합니다.

        Args:
            world: 해양/대륙 사각형을 담은 지리 데이터셋
            elevation: 고도 조회 포트 (None이면 휴리스틱만 사용)
        """
        self.world = world
        self.elevation = elevation

    def classify_heuristic(self, lat: float, lon: float) -> Tuple[Surface, str]:
        """
        사각형 테이블만으로 지표면을 판정합니다 (네트워크 호출 없음).

        Returns:
            (판정, 근거) 근거는 polar / ocean:<이름> / exception:<이름> /
            continent / unclassified 중 하나
        """
        if abs(lat) > self.world.polar_limit_lat:
            return Surface.WATER, "polar"

        for ocean in self.world.ocean_areas:
            if ocean.contains(lat, lon):
                if any(exc.contains(lat, lon) for exc in ocean.exceptions):
                    return Surface.LAND, f"exception:{ocean.name}"
                return Surface.WATER, f"ocean:{ocean.name}"

        if any(area.contains(lat, lon) for area in self.world.continental_areas):
            return Surface.LAND, "continent"

        # 어디에도 속하지 않으면 보수적으로 바다로 판정
        return Surface.WATER, "unclassified"

    async def _confirm(self, lat: float, lon: float, heuristic: Surface) -> AsyncIterator[Optional[Surface]]:
        """고도 조회로 휴리스틱 판정을 확인합니다. 실패 시 아무것도 내지 않습니다."""
        if self.elevation is None:
            return

        started = time.perf_counter()
        try:
            value = await self.elevation.lookup(lat, lon)
        except LookupUnavailable as e:
            metrics.elevation_lookups.labels(outcome="unavailable").inc()
            log.warning(f"고도 조회 실패, 휴리스틱 사용 lat:{lat:.4f} lon:{lon:.4f} error:{e}")
            return
        except Exception as e:
            metrics.elevation_lookups.labels(outcome="error").inc()
            log.error(f"고도 조회 중 예기치 않은 오류, 휴리스틱 사용 lat:{lat:.4f} lon:{lon:.4f} error:{type(e).__name__}: {e}")
            return
        finally:
            metrics.elevation_lookup_seconds.observe(time.perf_counter() - started)

        metrics.elevation_lookups.labels(outcome="ok").inc()
        verdict = elevation_verdict(value, heuristic)
        log.debug(f"고도 확인 lat:{lat:.4f} lon:{lon:.4f} elevation:{value} verdict:{verdict.value}")
        yield verdict

    async def classify(self, lat: float, lon: float) -> Surface:
        """
        좌표의 지표면을 판정합니다. 예외를 던지지 않습니다.

        휴리스틱이 WATER이면 즉시 반환하고(네트워크 호출 없음),
        LAND이면 고도 조회로 확인한 뒤 실패 시 휴리스틱 결과를 사용합니다.

        Args:
            lat: 위도
            lon: 경도

        Returns:
            Surface.LAND 또는 Surface.WATER
        """
        heuristic, reason = self.classify_heuristic(lat, lon)
        if heuristic is Surface.WATER:
            metrics.land_classifications.labels(stage="heuristic", surface=heuristic.value).inc()
            log.debug(f"휴리스틱 판정 WATER lat:{lat:.4f} lon:{lon:.4f} reason:{reason}")
            return heuristic

        match = await first_match(
            [
                Strategy("elevation", lambda: self._confirm(lat, lon, heuristic)),
                Strategy("heuristic", lambda: [heuristic], unconditional=True),
            ],
            _is_known,
        )
        metrics.land_classifications.labels(stage=match.strategy, surface=match.value.value).inc()
        return match.value

    async def is_on_land(self, lat: float, lon: float) -> bool:
        """좌표가 육지이면 True를 반환합니다."""
        return await self.classify(lat, lon) is Surface.LAND

    async def is_coordinate_on_land(self, point: Coordinate) -> bool:
        return await self.is_on_land(point.lat, point.lon)
