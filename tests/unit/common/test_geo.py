"""
Geometry 커널 단위 테스트

이 모듈은 거리 계산, 나선 좌표, 직선-원 교차 판정을 테스트합니다.
"""

import math
import pytest
from hypothesis import given, strategies as st

from geoweather.common.geo import (
    haversine_distance, distance, path_distance, spiral_offset, spiral_point,
    segment_intersects_circle, km_to_degrees, validate_coordinates, clamp, GOLDEN_ANGLE
)
from geoweather.core.models import Coordinate

lats = st.floats(min_value=-90, max_value=90, allow_nan=False)
lons = st.floats(min_value=-180, max_value=180, allow_nan=False)


class TestHaversine:
    """Haversine 거리 테스트"""

    def test_london_paris(self):
        """런던-파리 거리는 약 344km"""
        d = haversine_distance(51.5074, -0.1278, 48.8566, 2.3522)
        assert d == pytest.approx(344, abs=2)

    def test_same_point_is_zero(self):
        assert haversine_distance(10.0, 20.0, 10.0, 20.0) == 0.0

    def test_quarter_circumference(self):
        """적도에서 경도 90도 차이는 지구 둘레의 1/4"""
        d = haversine_distance(0, 0, 0, 90)
        assert d == pytest.approx(math.pi * 6371.0 / 2, rel=1e-9)

    @given(lats, lons, lats, lons)
    def test_symmetric_and_bounded(self, lat1, lon1, lat2, lon2):
        """거리는 대칭이며 0 이상, 반 둘레 이하"""
        d1 = haversine_distance(lat1, lon1, lat2, lon2)
        d2 = haversine_distance(lat2, lon2, lat1, lon1)
        assert d1 == pytest.approx(d2, abs=1e-6)
        assert 0.0 <= d1 <= math.pi * 6371.0 + 1e-6

    @given(lats, lons, lats, lons, lats, lons)
    def test_triangle_inequality(self, lat1, lon1, lat2, lon2, lat3, lon3):
        """d(a, c) <= d(a, b) + d(b, c)"""
        direct = haversine_distance(lat1, lon1, lat3, lon3)
        via = haversine_distance(lat1, lon1, lat2, lon2) + haversine_distance(lat2, lon2, lat3, lon3)
        # 대척점 근처의 부동소수 오차 허용
        assert direct <= via + 1e-3

    def test_distance_with_missing_coordinate(self):
        """좌표가 없으면 예외 대신 0"""
        assert distance(None, Coordinate(lat=1, lon=1)) == 0.0
        assert distance(Coordinate(lat=1, lon=1), None) == 0.0

    def test_path_distance_sums_legs(self):
        a = Coordinate(lat=0, lon=0)
        b = Coordinate(lat=0, lon=1)
        c = Coordinate(lat=0, lon=2)
        assert path_distance([a, b, c]) == pytest.approx(distance(a, b) + distance(b, c))
        assert path_distance([a]) == 0.0
        assert path_distance([]) == 0.0


class TestSpiral:
    """황금각 나선 테스트"""

    def test_index_zero_is_center(self):
        center = Coordinate(lat=10, lon=20)
        assert spiral_offset(0, center) == (10, 20)

    @given(st.integers(min_value=1, max_value=500), st.floats(min_value=0.1, max_value=3.0))
    def test_radius_grows_with_sqrt_index(self, index, scale):
        """i번째 지점은 중심에서 scale*sqrt(i) 떨어져 있음"""
        center = Coordinate(lat=0, lon=0)
        lat, lon = spiral_offset(index, center, scale)
        assert math.hypot(lat, lon) == pytest.approx(scale * math.sqrt(index), rel=1e-9)

    def test_angle_uses_golden_angle(self):
        center = Coordinate(lat=0, lon=0)
        lat, lon = spiral_offset(1, center, 1.0)
        assert lat == pytest.approx(math.sin(GOLDEN_ANGLE))
        assert lon == pytest.approx(math.cos(GOLDEN_ANGLE))

    def test_spiral_point_is_clamped(self):
        """극 근처에서도 유효 좌표를 반환"""
        center = Coordinate(lat=89.9, lon=179.9)
        for i in range(1, 50):
            point = spiral_point(i, center, 2.0)
            assert -90 <= point.lat <= 90
            assert -180 <= point.lon <= 180


class TestSegmentIntersectsCircle:
    """직선-원 교차 테스트"""

    def test_line_through_center(self):
        assert segment_intersects_circle(
            Coordinate(lat=0, lon=0), Coordinate(lat=0, lon=10), Coordinate(lat=0, lon=5), 1.0
        )

    def test_line_missing_circle(self):
        assert not segment_intersects_circle(
            Coordinate(lat=0, lon=0), Coordinate(lat=0, lon=10), Coordinate(lat=5, lon=5), 1.0
        )

    def test_tangent_counts_as_intersection(self):
        assert segment_intersects_circle(
            Coordinate(lat=0, lon=0), Coordinate(lat=0, lon=10), Coordinate(lat=2, lon=5), 2.0
        )

    def test_infinite_line_semantics(self):
        """선분 바깥쪽 연장선 위의 원도 교차로 판정"""
        assert segment_intersects_circle(
            Coordinate(lat=0, lon=0), Coordinate(lat=0, lon=10), Coordinate(lat=0, lon=50), 1.0
        )

    def test_degenerate_segment_uses_point_distance(self):
        p = Coordinate(lat=3, lon=3)
        assert segment_intersects_circle(p, p, Coordinate(lat=3, lon=4), 1.5)
        assert not segment_intersects_circle(p, p, Coordinate(lat=10, lon=10), 1.5)


class TestHelpers:
    """보조 함수 테스트"""

    def test_km_to_degrees(self):
        assert km_to_degrees(111) == pytest.approx(1.0)
        assert km_to_degrees(333) == pytest.approx(3.0)

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-5, 0, 3) == 0
        assert clamp(1, 0, 3) == 1

    def test_validate_coordinates(self):
        assert validate_coordinates(37.5, 127.0)
        assert not validate_coordinates(91, 0)
        assert not validate_coordinates(0, -181)
        assert not validate_coordinates(float("nan"), 0)
        assert not validate_coordinates(0, float("inf"))
