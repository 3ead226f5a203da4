"""
Storage Adapter 모듈 단위 테스트

이 모듈은 SQLite 및 메모리 날씨 이벤트 저장소의 기능을 테스트합니다.
"""

import os
import aiosqlite
import pytest

from geoweather.adapters.storage.memory import InMemoryWeatherStore, StaticPositionSource
from geoweather.adapters.storage.sqlite_weather import SQLiteWeatherStore
from geoweather.core.models import Coordinate, PlacedEntity, WeatherEvent

NOW = 1_750_000_000.0


def make_event(event_id, start=NOW - 60, end=NOW + 3600, lat=10.0, lon=20.0):
    return WeatherEvent(
        id=event_id, type_id="rain", center=Coordinate(lat=lat, lon=lon),
        radius_km=200, severity=1, start_time=start, end_time=end
    )


class TestSQLiteWeatherStore:
    """SQLite 날씨 이벤트 저장소 테스트"""

    @pytest.fixture
    async def store(self, temp_db_path):
        """초기화된 저장소"""
        store = SQLiteWeatherStore(temp_db_path)
        await store.init()
        return store

    @pytest.mark.asyncio
    async def test_init_creates_schema(self, store):
        assert os.path.exists(store.path)
        assert await store.get_count() == 0

    @pytest.mark.asyncio
    async def test_insert_and_query_roundtrip(self, store):
        event = make_event("e1", lat=-33.5, lon=151.25)
        await store.insert(event)
        assert await store.query(NOW) == [event]

    @pytest.mark.asyncio
    async def test_query_preserves_creation_order(self, store):
        for event_id in ("b", "a", "c"):
            await store.insert(make_event(event_id))
        assert [e.id for e in await store.query(NOW)] == ["b", "a", "c"]

    @pytest.mark.asyncio
    async def test_query_active_window(self, store):
        await store.insert(make_event("future", start=NOW + 100, end=NOW + 200))
        await store.insert(make_event("past", start=NOW - 200, end=NOW))
        await store.insert(make_event("now"))
        assert [e.id for e in await store.query(NOW)] == ["now"]

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store):
        await store.insert(make_event("dup"))
        with pytest.raises(aiosqlite.IntegrityError):
            await store.insert(make_event("dup"))

    @pytest.mark.asyncio
    async def test_expire(self, store):
        await store.insert(make_event("old", end=NOW - 1))
        await store.insert(make_event("live"))
        assert await store.expire(NOW) == 1
        assert await store.get_count() == 1

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, store):
        await store.insert(make_event("a"))
        await store.insert(make_event("b"))
        assert await store.delete("a")
        assert not await store.delete("a")
        assert await store.clear() == 1
        assert await store.get_count() == 0


class TestInMemoryWeatherStore:
    """메모리 저장소 테스트"""

    @pytest.mark.asyncio
    async def test_store_contract(self):
        store = InMemoryWeatherStore()
        await store.insert(make_event("old", end=NOW - 1))
        await store.insert(make_event("live"))

        assert [e.id for e in await store.query(NOW)] == ["live"]
        assert await store.expire(NOW) == 1
        assert len(store) == 1
        assert await store.delete("live")
        assert await store.clear() == 0

    @pytest.mark.asyncio
    async def test_duplicate_rejected(self):
        store = InMemoryWeatherStore()
        await store.insert(make_event("dup"))
        with pytest.raises(ValueError):
            await store.insert(make_event("dup"))


class TestStaticPositionSource:
    """고정 위치 소스 테스트"""

    @pytest.mark.asyncio
    async def test_list_positions(self):
        source = StaticPositionSource([
            PlacedEntity(entity_id="a", coordinate=Coordinate(lat=1, lon=2))
        ])
        source.add(PlacedEntity(entity_id="b", coordinate=Coordinate(lat=3, lon=4)))
        assert await source.list_positions() == [Coordinate(lat=1, lon=2), Coordinate(lat=3, lon=4)]
