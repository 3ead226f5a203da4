"""
hypothesis를 활용한 land 모듈 테스트

이 모듈은 사각형 휴리스틱과 고도 확인 단계를 테스트합니다.
"""

import pytest
from hypothesis import given, strategies as st
from unittest.mock import AsyncMock

from geoweather.core.datasets import load_world
from geoweather.core.errors import LookupUnavailable
from geoweather.core.land import LandClassifier, elevation_verdict
from geoweather.core.models import Coordinate, Surface

WORLD = load_world()


class TestHeuristic:
    """사각형 휴리스틱 테스트"""

    @pytest.mark.parametrize("lat,lon,surface,reason", [
        (51.5074, -0.1278, Surface.LAND, "continent"),
        (40.7128, -74.0060, Surface.LAND, "continent"),
        (0.0, -160.0, Surface.WATER, "ocean:Eastern Pacific"),
        (0.0, -30.0, Surface.WATER, "ocean:Central Atlantic"),
        (41.9, 12.5, Surface.LAND, "exception:Mediterranean"),
        (35.0, 18.0, Surface.WATER, "ocean:Mediterranean"),
        (80.0, 0.0, Surface.WATER, "polar"),
        (-50.0, 175.0, Surface.WATER, "unclassified"),
        (-36.8485, 174.7633, Surface.LAND, "continent"),
    ])
    def test_known_points(self, classifier, lat, lon, surface, reason):
        assert classifier.classify_heuristic(lat, lon) == (surface, reason)

    @given(st.floats(min_value=78.0001, max_value=90), st.floats(min_value=-180, max_value=180))
    def test_polar_always_water(self, lat, lon):
        """위도 78도를 넘으면 항상 바다"""
        classifier = LandClassifier(WORLD)
        assert classifier.classify_heuristic(lat, lon)[0] is Surface.WATER
        assert classifier.classify_heuristic(-lat, lon)[0] is Surface.WATER


class TestElevationVerdict:
    """고도 판정 규칙 테스트"""

    @pytest.mark.parametrize("elevation,heuristic,expected", [
        (-100.0, Surface.LAND, Surface.WATER),
        (-50.1, Surface.LAND, Surface.WATER),
        (-10.0, Surface.LAND, Surface.WATER),
        (-2.0, Surface.LAND, Surface.LAND),
        (0.0, Surface.LAND, Surface.LAND),
        (0.0, Surface.WATER, Surface.WATER),
        (2.0, Surface.WATER, Surface.WATER),
        (2.1, Surface.WATER, Surface.LAND),
        (4000.0, Surface.LAND, Surface.LAND),
    ])
    def test_rules(self, elevation, heuristic, expected):
        assert elevation_verdict(elevation, heuristic) is expected

    @given(st.floats(max_value=-50.0001, allow_nan=False, allow_infinity=False),
           st.sampled_from([Surface.LAND, Surface.WATER]))
    def test_deep_water(self, elevation, heuristic):
        assert elevation_verdict(elevation, heuristic) is Surface.WATER

    @given(st.floats(min_value=2.0001, allow_nan=False, allow_infinity=False),
           st.sampled_from([Surface.LAND, Surface.WATER]))
    def test_above_band_is_land(self, elevation, heuristic):
        assert elevation_verdict(elevation, heuristic) is Surface.LAND


class TestClassify:
    """2단계 분류 테스트"""

    @pytest.mark.asyncio
    async def test_land_confirmed_by_elevation(self, world, fake_elevation):
        classifier = LandClassifier(world, fake_elevation)
        assert await classifier.classify(51.5074, -0.1278) is Surface.LAND
        fake_elevation.lookup.assert_awaited_once_with(51.5074, -0.1278)

    @pytest.mark.asyncio
    async def test_water_heuristic_skips_lookup(self, world, fake_elevation):
        """휴리스틱이 바다면 외부 조회를 하지 않음"""
        classifier = LandClassifier(world, fake_elevation)
        assert await classifier.classify(0.0, -160.0) is Surface.WATER
        assert await classifier.classify(85.0, 10.0) is Surface.WATER
        fake_elevation.lookup.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_deep_elevation_overrides_heuristic(self, world, fake_elevation):
        fake_elevation.lookup.return_value = -120.0
        classifier = LandClassifier(world, fake_elevation)
        assert await classifier.classify(51.5074, -0.1278) is Surface.WATER

    @pytest.mark.asyncio
    async def test_sea_level_keeps_heuristic(self, world, fake_elevation):
        fake_elevation.lookup.return_value = 0.0
        classifier = LandClassifier(world, fake_elevation)
        assert await classifier.classify(51.5074, -0.1278) is Surface.LAND

    @pytest.mark.asyncio
    async def test_lookup_failure_falls_back(self, world):
        """조회 실패 시 휴리스틱 결과 사용, 예외 없음"""
        elevation = AsyncMock()
        elevation.lookup.side_effect = LookupUnavailable("timeout")
        classifier = LandClassifier(world, elevation)
        assert await classifier.classify(51.5074, -0.1278) is Surface.LAND

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [OSError("connection reset"), RuntimeError("boom")])
    async def test_unexpected_lookup_error_falls_back(self, world, error):
        """고도 포트의 예기치 않은 예외도 휴리스틱으로 대체"""
        elevation = AsyncMock()
        elevation.lookup.side_effect = error
        classifier = LandClassifier(world, elevation)
        assert await classifier.classify(51.5074, -0.1278) is Surface.LAND
        assert await classifier.classify(0.0, -160.0) is Surface.WATER

    @pytest.mark.asyncio
    async def test_without_elevation_port(self, classifier):
        assert await classifier.is_on_land(48.8566, 2.3522)
        assert not await classifier.is_coordinate_on_land(Coordinate(lat=0, lon=-30))
