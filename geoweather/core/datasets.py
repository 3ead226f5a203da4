"""
Static dataset loading for GeoWeather.

The world boundary tables and the weather catalog are shipped as JSON
under ``geoweather/data`` and loaded once into immutable models that are
passed by reference into the classifier, sampler and generator.
"""

from importlib import resources
from pathlib import Path
from typing import Optional, Union

from geoweather.core.models import WeatherCatalog, WorldDataset
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.datasets")

WORLD_RESOURCE = "world.json"
WEATHER_TYPES_RESOURCE = "weather_types.json"

def _read(path: Optional[Union[str, Path]], resource: str) -> str:
    if path:
        return Path(path).read_text(encoding="utf-8")
    return resources.files("geoweather.data").joinpath(resource).read_text(encoding="utf-8")

def load_world(path: Optional[Union[str, Path]] = None) -> WorldDataset:
    """
    지리 데이터셋을 로드합니다.

    Args:
        path: JSON 파일 경로, None이면 패키지 기본 데이터 사용

    Returns:
        불변 WorldDataset
    """
    world = WorldDataset.model_validate_json(_read(path, WORLD_RESOURCE))
    log.info(
        f"지리 데이터셋 로드됨 source:{path or 'builtin'} "
        f"oceans:{len(world.ocean_areas)} continents:{len(world.continental_areas)} "
        f"regions:{len(world.land_regions)}"
    )
    return world

def load_weather_catalog(path: Optional[Union[str, Path]] = None) -> WeatherCatalog:
    """날씨 유형 카탈로그를 로드합니다."""
    catalog = WeatherCatalog.model_validate_json(_read(path, WEATHER_TYPES_RESOURCE))
    ids = [t.id for t in catalog]
    if len(ids) != len(set(ids)):
        raise ValueError(f"중복된 날씨 유형 id: {ids}")
    log.info(f"날씨 카탈로그 로드됨 source:{path or 'builtin'} types:{len(catalog)}")
    return catalog
