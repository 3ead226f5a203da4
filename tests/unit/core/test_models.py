"""
hypothesis를 활용한 models 모듈 테스트

이 모듈은 좌표, 영역, 날씨 이벤트 모델의 검증 규칙을 테스트합니다.
"""

import pytest
from hypothesis import given, strategies as st
from pydantic import ValidationError

from geoweather.core.errors import InvalidWeatherType
from geoweather.core.models import (
    BoundingBox, Coordinate, Region, WeatherCatalog, WeatherEvent, WeatherTypeDef
)


class TestCoordinate:
    """좌표 모델 테스트"""

    @given(st.floats(min_value=-90, max_value=90), st.floats(min_value=-180, max_value=180))
    def test_valid_range_accepted(self, lat, lon):
        point = Coordinate(lat=lat, lon=lon)
        assert point.as_tuple() == (lat, lon)

    @pytest.mark.parametrize("lat,lon", [(91, 0), (-91, 0), (0, 181), (0, -180.5)])
    def test_out_of_range_rejected(self, lat, lon):
        with pytest.raises(ValidationError):
            Coordinate(lat=lat, lon=lon)

    @pytest.mark.parametrize("lat,lon", [(float("nan"), 0), (0, float("inf"))])
    def test_non_finite_rejected(self, lat, lon):
        with pytest.raises(ValidationError):
            Coordinate(lat=lat, lon=lon)

    @given(st.floats(min_value=-1000, max_value=1000), st.floats(min_value=-1000, max_value=1000))
    def test_clamped_always_valid(self, lat, lon):
        point = Coordinate.clamped(lat, lon)
        assert -90 <= point.lat <= 90
        assert -180 <= point.lon <= 180

    def test_frozen(self):
        point = Coordinate(lat=1, lon=2)
        with pytest.raises(ValidationError):
            point.lat = 5


class TestBoundingBox:
    """영역 모델 테스트"""

    def test_contains_inclusive_bounds(self):
        box = BoundingBox(lat_min=0, lat_max=10, lon_min=0, lon_max=10)
        assert box.contains(0, 0)
        assert box.contains(10, 10)
        assert not box.contains(10.01, 5)

    def test_antimeridian_box(self):
        box = BoundingBox(lat_min=60, lat_max=70, lon_min=165, lon_max=-170)
        assert box.wraps_antimeridian
        assert box.contains(65, 170)
        assert box.contains(65, -175)
        assert not box.contains(65, 0)

    def test_lat_order_validated(self):
        with pytest.raises(ValidationError):
            BoundingBox(lat_min=10, lat_max=0, lon_min=0, lon_max=10)

    def test_region_clip_lat(self):
        region = Region(name="r", lat_min=-10, lat_max=50, lon_min=0, lon_max=10, weight=2)
        clipped = region.clip_lat(5, 40)
        assert (clipped.lat_min, clipped.lat_max) == (5, 40)
        assert clipped.weight == 2
        assert region.clip_lat(60, 70) is None


class TestWeatherModels:
    """날씨 모델 테스트"""

    def test_event_time_order(self):
        with pytest.raises(ValidationError):
            WeatherEvent(
                id="e", type_id="rain", center=Coordinate(lat=0, lon=0),
                radius_km=10, severity=1, start_time=100, end_time=100
            )

    def test_event_active_window_half_open(self):
        event = WeatherEvent(
            id="e", type_id="rain", center=Coordinate(lat=0, lon=0),
            radius_km=10, severity=1, start_time=100, end_time=200
        )
        assert event.is_active_at(100)
        assert event.is_active_at(199.9)
        assert not event.is_active_at(200)
        assert not event.is_active_at(99)

    def test_type_def_severity_range(self):
        with pytest.raises(ValidationError):
            WeatherTypeDef(id="x", name="X", base_radius_km=10, severity=6,
                           rarity=0.1, duration_min_range=(10, 20))

    def test_type_def_duration_range(self):
        with pytest.raises(ValidationError):
            WeatherTypeDef(id="x", name="X", base_radius_km=10, severity=1,
                           rarity=0.1, duration_min_range=(20, 10))

    def test_catalog_get_unknown(self):
        catalog = WeatherCatalog(types=(
            WeatherTypeDef(id="x", name="X", base_radius_km=10, severity=1,
                           rarity=0.1, duration_min_range=(10, 20)),
        ))
        assert catalog.get("x").name == "X"
        assert catalog.find("y") is None
        with pytest.raises(InvalidWeatherType) as exc_info:
            catalog.get("y")
        assert exc_info.value.available == ["x"]
        # KeyError로도 잡을 수 있어야 함
        with pytest.raises(KeyError):
            catalog.get("y")
