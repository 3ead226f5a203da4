# geoweather/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

class ElevationConfig(BaseModel):
    enabled: bool = True
    endpoint: str = "https://api.open-elevation.com/api/v1/lookup"
    timeout_sec: float = 3.0

class SearchConfig(BaseModel):
    max_attempts: int = 100
    spiral_scale: float = 1.5                 # 기본 나선(0.5)보다 넓게 탐색
    pause_every: int = 10
    pause_sec: float = 0.2

class PlacementConfig(BaseModel):
    min_distance_km: float = 50.0
    max_attempts: int = 100
    pause_every: int = 10
    pause_sec: float = 0.3
    emergency_jitter_deg: float = 2.5
    seed: int | None = None

class WeatherConfig(BaseModel):
    enabled: bool = True
    interval_sec: float = 300.0
    max_active_events: int = 75
    target_active_events: int = 40
    density_multiplier: float = 2.0
    placement_attempts: int = 50
    notify: bool = True

class ValidationConfig(BaseModel):
    batch_size: int = 5
    batch_delay_sec: float = 1.0
    max_attempts: int = 50
    entities_path: str = ""                   # 비어 있으면 시작 시 검증 생략

class StorageConfig(BaseModel):
    backend: str = "sqlite"                   # sqlite | memory
    sqlite_path: str = "/data/weather.db"

class DatasetsConfig(BaseModel):
    world_path: str | None = None             # None이면 패키지 내장 데이터
    weather_types_path: str | None = None

class Observability(BaseModel):
    http_port: int = 8099
    http_enabled: bool = True
    metrics_enabled: bool = True
    service_name: str = "GeoWeather"
    build_version: str = "0.1.0"
    build_date: str = "2026-01-01"
    log_level: str = "INFO"

class Settings(BaseModel):
    # 하위 섹션 (기본값/팩토리로 누락 방지)
    elevation: ElevationConfig = Field(default_factory=ElevationConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    placement: PlacementConfig = Field(default_factory=PlacementConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    datasets: DatasetsConfig = Field(default_factory=DatasetsConfig)
    observability: Observability = Field(default_factory=Observability)
