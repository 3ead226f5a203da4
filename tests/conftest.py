"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import pytest
import random
import tempfile
import os
from unittest.mock import AsyncMock
from geoweather.settings import Settings
from geoweather.core.datasets import load_world, load_weather_catalog
from geoweather.core.land import LandClassifier
from geoweather.core.resolver import PositionResolver
from geoweather.core.sampler import PlacementSampler
from geoweather.adapters.storage.memory import InMemoryWeatherStore


@pytest.fixture(scope="session")
def world():
    """패키지 내장 지리 데이터셋"""
    return load_world()


@pytest.fixture(scope="session")
def catalog():
    """패키지 내장 날씨 카탈로그"""
    return load_weather_catalog()


@pytest.fixture
def rng():
    """시드 고정 난수 생성기"""
    return random.Random(1234)


@pytest.fixture
def fake_elevation():
    """테스트용 고도 조회 포트 (기본 100m)"""
    port = AsyncMock()
    port.lookup.return_value = 100.0
    return port


@pytest.fixture
def classifier(world):
    """휴리스틱 전용 육지 분류기"""
    return LandClassifier(world)


@pytest.fixture
def resolver(classifier, world):
    """대기 없는 육지 좌표 탐색기"""
    return PositionResolver(classifier, world, pause_every=0, pause_sec=0.0)


@pytest.fixture
def sampler(classifier, world, rng):
    """대기 없는 배치기"""
    return PlacementSampler(classifier, world, rng=rng, pause_every=0, pause_sec=0.0)


@pytest.fixture
def memory_store():
    """메모리 이벤트 저장소"""
    return InMemoryWeatherStore()


@pytest.fixture
def temp_db_path():
    """임시 데이터베이스 파일 경로"""
    with tempfile.NamedTemporaryFile(suffix='.db', delete=False) as f:
        temp_path = f.name
    yield temp_path
    # 테스트 후 파일 정리
    if os.path.exists(temp_path):
        os.unlink(temp_path)


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.observability.log_level = "INFO"
    settings.observability.http_port = 8080
    return settings
