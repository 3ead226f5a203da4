"""
Weather event generation for GeoWeather.

This module implements the periodic weather spawner (expire, roll per
type, place with spacing, persist, notify) and the admin operations for
creating, removing and clearing events.
"""

import random
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from geoweather.core.errors import UnknownRegion
from geoweather.core.models import (
    Coordinate, Region, WeatherCatalog, WeatherEvent, WeatherTypeDef, WorldDataset
)
from geoweather.core.sampler import PlacementSampler
from geoweather.observability import metrics
from geoweather.observability.logging_setup import get_logger
from geoweather.ports.event_store import WeatherEventStorePort
from geoweather.ports.notifier import WeatherNotifierPort

log = get_logger("geoweather.weather")

POLAR_AVOID_LAT = 60.0
NOTIFY_MIN_SEVERITY = 3
COUNTRY_JITTER_LAT = 5.0
COUNTRY_JITTER_LON = 10.0
COUNTRY_EVENT_MINUTES = 120

def min_separation_km(severity: int) -> float:
    """심각도별 활성 이벤트 간 최소 간격 (킬로미터)"""
    if severity >= 5:
        return 1500.0
    if severity >= 4:
        return 1000.0
    return 800.0

def radius_multiplier(severity: int) -> float:
    """심각도별 반경 배율"""
    if severity >= 4:
        return 6.0
    if severity >= 3:
        return 5.0
    return 4.0

def effective_probability(type_def: WeatherTypeDef,
                          active_count: int,
                          target_active: int,
                          month: int,
                          density_multiplier: float = 2.0) -> float:
    """
    이번 틱에서 해당 유형이 생성될 확률을 계산합니다.

    Args:
        type_def: 날씨 유형
        active_count: 현재 활성 이벤트 수
        target_active: 목표 밀도 (이보다 적으면 확률 증가)
        month: 현재 월 (1-12)
        density_multiplier: 목표 밀도 미달 시 배율

    Returns:
        0~1 사이 확률
    """
    probability = type_def.rarity
    if active_count < target_active:
        probability *= density_multiplier
    if month in type_def.seasonal_months:
        probability *= 2.0
    return min(1.0, probability)

def candidate_regions(type_def: WeatherTypeDef, regions: Sequence[Region]) -> List[Region]:
    """유형의 위도 선호 범위와 극지 회피 설정으로 영역을 잘라냅니다."""
    lo, hi = type_def.lat_preference or (-90.0, 90.0)
    if type_def.avoid_polar:
        lo, hi = max(lo, -POLAR_AVOID_LAT), min(hi, POLAR_AVOID_LAT)

    clipped = [r for r in (region.clip_lat(lo, hi) for region in regions) if r is not None]
    # 겹치는 영역이 없으면 전체 영역 사용
    return clipped or list(regions)

class WeatherGenerator:
    """날씨 이벤트 생성기"""

    def __init__(self,
                 store: WeatherEventStorePort,
                 sampler: PlacementSampler,
                 catalog: WeatherCatalog,
                 world: WorldDataset,
                 *,
                 notifier: Optional[WeatherNotifierPort] = None,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], float] = time.time,
                 max_active_events: int = 75,
                 target_active_events: int = 40,
                 density_multiplier: float = 2.0,
                 placement_attempts: int = 50):
        """
        초기화합니다.

        Args:
            store: 이벤트 저장소 포트
            sampler: 배치기
            catalog: 날씨 유형 카탈로그
            world: 지리 데이터셋 (영역, 국가 좌표)
            notifier: 알림 포트 (심각도 3 이상에서 호출)
            rng: 난수 생성기
            clock: 현재 시각 함수 (epoch 초)
            max_active_events: 활성 이벤트 상한
            target_active_events: 목표 밀도
            density_multiplier: 목표 밀도 미달 시 확률 배율
            placement_attempts: 이벤트당 임의 배치 시도 횟수
        """
        self.store = store
        self.sampler = sampler
        self.catalog = catalog
        self.world = world
        self.notifier = notifier
        self.rng = rng or random.Random()
        self.clock = clock
        self.max_active_events = max_active_events
        self.target_active_events = target_active_events
        self.density_multiplier = density_multiplier
        self.placement_attempts = placement_attempts

    def _new_id(self, now: float) -> str:
        return f"weather_{int(now * 1000)}_{self.rng.getrandbits(32):08x}"

    def build_event(self,
                    type_def: WeatherTypeDef,
                    center: Coordinate,
                    now: float,
                    *,
                    duration_minutes: Optional[float] = None,
                    radius_km: Optional[float] = None) -> WeatherEvent:
        """
        이벤트를 만듭니다 (저장하지 않음).

        지속시간을 지정하지 않으면 유형의 범위에서 뽑은 뒤 만료 시각을
        다시 최대 +100% 흔듭니다.
        """
        if duration_minutes is None:
            lo, hi = type_def.duration_min_range
            duration = self.rng.uniform(lo, hi) * 60
            end_time = now + duration + self.rng.random() * duration
        else:
            end_time = now + duration_minutes * 60

        return WeatherEvent(
            id=self._new_id(now),
            type_id=type_def.id,
            center=center,
            radius_km=radius_km or type_def.base_radius_km * radius_multiplier(type_def.severity),
            severity=type_def.severity,
            start_time=now,
            end_time=end_time,
        )

    async def _notify(self, event: WeatherEvent, type_def: WeatherTypeDef) -> None:
        if self.notifier is None or type_def.severity < NOTIFY_MIN_SEVERITY:
            return
        try:
            await self.notifier.notify(event, type_def)
        except Exception as e:
            # 알림 실패는 이벤트 생성에 영향을 주지 않음
            log.error(f"날씨 알림 실패 event:{event.id} type:{type_def.id} error:{str(e)}")

    async def _persist(self, event: WeatherEvent, type_def: WeatherTypeDef, origin: str) -> WeatherEvent:
        await self.store.insert(event)
        metrics.weather_events_spawned.labels(type_id=type_def.id, origin=origin).inc()
        log.info(
            f"날씨 이벤트 생성됨 type:{type_def.id} center:{event.center.lat:.2f},{event.center.lon:.2f} "
            f"radius:{event.radius_km:.0f}km duration:{(event.end_time - event.start_time) / 60:.0f}min origin:{origin}"
        )
        await self._notify(event, type_def)
        return event

    async def tick(self, now: Optional[float] = None) -> List[WeatherEvent]:
        """
        주기 실행 함수: 만료 처리 후 유형별로 한 번씩 생성 여부를 굴립니다.

        Args:
            now: 기준 시각 (epoch 초), None이면 clock 사용

        Returns:
            이번 틱에 생성된 이벤트 목록
        """
        now = self.clock() if now is None else now
        expired = await self.store.expire(now)
        if expired:
            metrics.weather_events_expired.inc(expired)
            log.info(f"만료된 날씨 이벤트 정리됨 count:{expired}")

        active = await self.store.query(now)
        created: List[WeatherEvent] = []
        if len(active) >= self.max_active_events:
            log.debug(f"활성 이벤트 상한 도달 active:{len(active)} max:{self.max_active_events}")
            metrics.weather_active_events.set(len(active))
            return created

        month = datetime.fromtimestamp(now, tz=timezone.utc).month

        for type_def in self.catalog:
            if len(active) >= self.max_active_events:
                break

            probability = effective_probability(
                type_def, len(active), self.target_active_events, month, self.density_multiplier
            )
            if self.rng.random() >= probability:
                continue

            regions = candidate_regions(type_def, self.world.land_regions)
            placement = await self.sampler.sample(
                [event.center for event in active],
                regions,
                min_distance_km=min_separation_km(type_def.severity),
                max_attempts=self.placement_attempts,
            )
            event = self.build_event(type_def, placement.value, now)
            await self._persist(event, type_def, origin="tick")
            active.append(event)
            created.append(event)

        metrics.weather_active_events.set(len(active))
        return created

    async def create_event(self,
                           type_id: str,
                           center: Coordinate,
                           duration_minutes: float = 60,
                           radius_km: Optional[float] = None,
                           now: Optional[float] = None) -> WeatherEvent:
        """
        지정 좌표에 날씨 이벤트를 만듭니다 (관리자 명령).

        Args:
            type_id: 날씨 유형 id
            center: 중심 좌표
            duration_minutes: 지속시간 (분)
            radius_km: 반경 (None이면 유형 기본 반경 × 심각도 배율)
            now: 기준 시각

        Returns:
            생성된 이벤트

        Raises:
            InvalidWeatherType: 카탈로그에 없는 유형
        """
        type_def = self.catalog.get(type_id)
        if duration_minutes <= 0:
            raise ValueError(f"지속시간은 양수여야 합니다: {duration_minutes}")
        now = self.clock() if now is None else now
        event = self.build_event(
            type_def, center, now, duration_minutes=duration_minutes, radius_km=radius_km
        )
        return await self._persist(event, type_def, origin="admin")

    async def create_in_country(self,
                                type_id: str,
                                country: str,
                                now: Optional[float] = None) -> WeatherEvent:
        """
        국가 중심 좌표 주변에 날씨 이벤트를 만듭니다.

        Raises:
            InvalidWeatherType: 카탈로그에 없는 유형
            UnknownRegion: 등록되지 않은 국가
        """
        self.catalog.get(type_id)
        place = self.world.countries.get(country.lower().strip())
        if place is None:
            raise UnknownRegion(country, self.world.countries.keys())

        center = Coordinate.clamped(
            place.lat + (self.rng.random() - 0.5) * COUNTRY_JITTER_LAT * 2,
            place.lon + (self.rng.random() - 0.5) * COUNTRY_JITTER_LON * 2,
        )
        log.info(f"국가 지정 날씨 생성 country:{place.name} type:{type_id}")
        return await self.create_event(type_id, center, COUNTRY_EVENT_MINUTES, now=now)

    async def remove_event(self, event_id: str) -> bool:
        """이벤트를 삭제합니다."""
        removed = await self.store.delete(event_id)
        if removed:
            log.info(f"날씨 이벤트 삭제됨 event:{event_id}")
        return removed

    async def clear_all(self) -> int:
        """모든 날씨 이벤트를 삭제합니다."""
        cleared = await self.store.clear()
        log.info(f"날씨 이벤트 전체 삭제 count:{cleared}")
        return cleared

    async def active_events(self, now: Optional[float] = None) -> List[WeatherEvent]:
        now = self.clock() if now is None else now
        return await self.store.query(now)
