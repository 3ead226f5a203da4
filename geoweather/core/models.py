"""
Core domain models for GeoWeather.

This module defines the core domain models using Pydantic v2
for type safety and validation.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from geoweather.core.errors import InvalidWeatherType

class Surface(str, Enum):
    """지표면 분류 결과"""
    LAND = "land"
    WATER = "water"

class Coordinate(BaseModel):
    """위경도 좌표 모델 (불변)"""
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(ge=-180, le=180, allow_inf_nan=False)

    @classmethod
    def clamped(cls, lat: float, lon: float, lat_limit: float = 90.0) -> "Coordinate":
        """범위를 벗어난 값을 잘라낸 좌표를 생성합니다."""
        return cls(
            lat=max(-lat_limit, min(lat_limit, lat)),
            lon=max(-180.0, min(180.0, lon)),
        )

    def as_tuple(self) -> Tuple[float, float]:
        return (self.lat, self.lon)

class BoundingBox(BaseModel):
    """위경도 사각형 영역 (lon_min > lon_max 이면 날짜변경선을 넘는 영역)"""
    model_config = ConfigDict(frozen=True)

    lat_min: float = Field(ge=-90, le=90)
    lat_max: float = Field(ge=-90, le=90)
    lon_min: float = Field(ge=-180, le=180)
    lon_max: float = Field(ge=-180, le=180)

    @model_validator(mode="after")
    def _check_lat_order(self):
        if self.lat_min > self.lat_max:
            raise ValueError(f"lat_min({self.lat_min}) > lat_max({self.lat_max})")
        return self

    @property
    def wraps_antimeridian(self) -> bool:
        return self.lon_min > self.lon_max

    def contains(self, lat: float, lon: float) -> bool:
        """경계를 포함하여 점이 영역 안에 있는지 확인합니다."""
        if not (self.lat_min <= lat <= self.lat_max):
            return False
        if self.wraps_antimeridian:
            return lon >= self.lon_min or lon <= self.lon_max
        return self.lon_min <= lon <= self.lon_max

class Region(BoundingBox):
    """가중치가 있는 이름 붙은 영역"""
    name: str
    weight: int = Field(default=1, ge=1)

    def clip_lat(self, lat_min: float, lat_max: float) -> Optional["Region"]:
        """위도 범위로 잘라낸 영역을 반환합니다. 겹치지 않으면 None."""
        lo = max(self.lat_min, lat_min)
        hi = min(self.lat_max, lat_max)
        if lo > hi:
            return None
        return self.model_copy(update={"lat_min": lo, "lat_max": hi})

class OceanArea(BoundingBox):
    """해양 영역 (예외 영역은 내부의 육지)"""
    name: str
    exceptions: Tuple[BoundingBox, ...] = ()

class NamedPlace(BaseModel):
    """이름 붙은 지점"""
    model_config = ConfigDict(frozen=True)

    name: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.lat, lon=self.lon)

class RegionalFallback(BaseModel):
    """시작 좌표가 특정 영역에 있을 때 시도할 지점 목록"""
    model_config = ConfigDict(frozen=True)

    name: str
    area: BoundingBox
    places: Tuple[NamedPlace, ...]

class WorldDataset(BaseModel):
    """육지/해양 판정과 배치에 쓰이는 정적 지리 데이터"""
    model_config = ConfigDict(frozen=True)

    polar_limit_lat: float = 78.0
    ocean_areas: Tuple[OceanArea, ...]
    continental_areas: Tuple[BoundingBox, ...]
    land_regions: Tuple[Region, ...]
    regional_fallbacks: Tuple[RegionalFallback, ...] = ()
    city_fallbacks: Tuple[NamedPlace, ...]
    placement_cities: Tuple[NamedPlace, ...]
    terminal_fallback: NamedPlace
    countries: Dict[str, NamedPlace] = Field(default_factory=dict)

class WeatherTypeDef(BaseModel):
    """날씨 유형 정의 (불변)"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    base_radius_km: float = Field(gt=0)
    severity: int = Field(ge=1, le=5)
    rarity: float = Field(gt=0, le=1)
    block_travel: bool = False
    travel_time_multiplier: float = Field(default=1.0, ge=0)
    duration_min_range: Tuple[float, float]
    lat_preference: Optional[Tuple[float, float]] = None
    avoid_polar: bool = False
    seasonal_months: Tuple[int, ...] = ()

    @model_validator(mode="after")
    def _check_ranges(self):
        lo, hi = self.duration_min_range
        if lo <= 0 or lo > hi:
            raise ValueError(f"잘못된 지속시간 범위: {self.duration_min_range}")
        if self.lat_preference is not None:
            lat_lo, lat_hi = self.lat_preference
            if not (-90 <= lat_lo <= lat_hi <= 90):
                raise ValueError(f"잘못된 위도 선호 범위: {self.lat_preference}")
        if any(m < 1 or m > 12 for m in self.seasonal_months):
            raise ValueError(f"잘못된 계절 월: {self.seasonal_months}")
        return self

class WeatherCatalog(BaseModel):
    """날씨 유형 카탈로그"""
    model_config = ConfigDict(frozen=True)

    types: Tuple[WeatherTypeDef, ...]

    def __iter__(self):
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)

    def find(self, type_id: str) -> Optional[WeatherTypeDef]:
        for type_def in self.types:
            if type_def.id == type_id:
                return type_def
        return None

    def get(self, type_id: str) -> WeatherTypeDef:
        """유형을 조회합니다. 없으면 InvalidWeatherType."""
        type_def = self.find(type_id)
        if type_def is None:
            raise InvalidWeatherType(type_id, [t.id for t in self.types])
        return type_def

class WeatherEvent(BaseModel):
    """활성 날씨 이벤트 (생성 후 변경 불가)"""
    model_config = ConfigDict(frozen=True)

    id: str
    type_id: str
    center: Coordinate
    radius_km: float = Field(gt=0)
    severity: int = Field(ge=1, le=5)
    start_time: float
    end_time: float
    active: bool = True

    @model_validator(mode="after")
    def _check_times(self):
        if not self.start_time < self.end_time:
            raise ValueError(f"start_time({self.start_time}) >= end_time({self.end_time})")
        return self

    def is_active_at(self, at: float) -> bool:
        return self.active and self.start_time <= at < self.end_time

class PlacedEntity(BaseModel):
    """충돌 검사에 쓰이는 배치된 엔티티 (서버, 랜드마크 등)"""
    model_config = ConfigDict(frozen=True)

    entity_id: str
    name: str = ""
    coordinate: Coordinate

class WeatherEffect(BaseModel):
    """경로상에서 만난 날씨의 영향"""
    event_id: str
    type_id: str
    name: str
    travel_time_multiplier: float

class RoutePlan(BaseModel):
    """경로 계획 결과"""
    path: List[Coordinate]
    detour_required: bool = False
    total_distance_km: float
    weather_avoided: List[str] = Field(default_factory=list)
    weather_effects: List[WeatherEffect] = Field(default_factory=list)
    time_multiplier: float = 1.0
    weather_description: str = "Clear skies"

class Relocation(BaseModel):
    """엔티티 이동 제안"""
    entity_id: str
    source: Coordinate
    target: Coordinate
    strategy: str

class ValidationReport(BaseModel):
    """일괄 위치 검증 결과"""
    total: int = 0
    fixed: int = 0
    failures: int = 0
    relocations: List[Relocation] = Field(default_factory=list)
