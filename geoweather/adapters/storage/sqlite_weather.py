"""
SQLite-based weather event store for GeoWeather.

This module implements the append/expire/delete event store on top of
aiosqlite. Stored events are never updated in place.
"""

import aiosqlite
from typing import List

from geoweather.core.models import Coordinate, WeatherEvent
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.store")

# SQLite 스키마
SCHEMA = """
CREATE TABLE IF NOT EXISTS weather_events (
    id TEXT PRIMARY KEY,
    type_id TEXT NOT NULL,
    center_lat REAL NOT NULL,
    center_lon REAL NOT NULL,
    radius_km REAL NOT NULL,
    severity INTEGER NOT NULL,
    start_time REAL NOT NULL,
    end_time REAL NOT NULL,
    active INTEGER NOT NULL DEFAULT 1,
    created_seq INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_weather_end ON weather_events(end_time);
"""

COLUMNS = "id, type_id, center_lat, center_lon, radius_km, severity, start_time, end_time, active"

def _row_to_event(row) -> WeatherEvent:
    return WeatherEvent(
        id=row[0],
        type_id=row[1],
        center=Coordinate(lat=row[2], lon=row[3]),
        radius_km=row[4],
        severity=row[5],
        start_time=row[6],
        end_time=row[7],
        active=bool(row[8]),
    )

class SQLiteWeatherStore:
    """SQLite 기반 날씨 이벤트 저장소"""

    def __init__(self, path: str):
        """
        초기화합니다.

        Args:
            path: SQLite 데이터베이스 파일 경로
        """
        self.path = path
        log.info(f"SQLiteWeatherStore 초기화: {path}")

    async def init(self) -> None:
        """데이터베이스를 초기화합니다."""
        async with aiosqlite.connect(self.path) as db:
            await db.executescript(SCHEMA)
            await db.commit()
        log.info("SQLiteWeatherStore 스키마 초기화 완료")

    async def insert(self, event: WeatherEvent) -> None:
        """
        이벤트를 저장합니다.

        Raises:
            aiosqlite.IntegrityError: 같은 id가 이미 있는 경우
        """
        async with aiosqlite.connect(self.path) as db:
            await db.execute(
                f"INSERT INTO weather_events ({COLUMNS}, created_seq) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, "
                "(SELECT COALESCE(MAX(created_seq), 0) + 1 FROM weather_events))",
                (
                    event.id, event.type_id, event.center.lat, event.center.lon,
                    event.radius_km, event.severity, event.start_time, event.end_time,
                    int(event.active),
                )
            )
            await db.commit()

    async def query(self, active_at: float) -> List[WeatherEvent]:
        """
        기준 시각에 활성인 이벤트를 생성 순으로 조회합니다.

        Args:
            active_at: 기준 시각 (epoch 초)

        Returns:
            활성 이벤트 목록
        """
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute(
                f"SELECT {COLUMNS} FROM weather_events "
                "WHERE active = 1 AND start_time <= ? AND end_time > ? "
                "ORDER BY created_seq",
                (active_at, active_at)
            )
            rows = await cursor.fetchall()
        return [_row_to_event(row) for row in rows]

    async def expire(self, before: float) -> int:
        """
        종료 시각이 지난 이벤트를 정리합니다.

        Args:
            before: 기준 시각 (epoch 초)

        Returns:
            삭제된 이벤트 수
        """
        try:
            async with aiosqlite.connect(self.path) as db:
                cursor = await db.execute(
                    "DELETE FROM weather_events WHERE end_time <= ?",
                    (before,)
                )
                await db.commit()
                deleted = cursor.rowcount
                if deleted > 0:
                    log.info(f"만료된 날씨 이벤트 {deleted}개 정리됨")
                return deleted
        except Exception as e:
            log.error(f"SQLiteWeatherStore expire 오류: {e}")
            return 0

    async def delete(self, event_id: str) -> bool:
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute("DELETE FROM weather_events WHERE id = ?", (event_id,))
            await db.commit()
            return cursor.rowcount > 0

    async def clear(self) -> int:
        async with aiosqlite.connect(self.path) as db:
            cursor = await db.execute("DELETE FROM weather_events")
            await db.commit()
            return cursor.rowcount

    async def get_count(self) -> int:
        """
        현재 저장된 이벤트 수를 반환합니다.

        Returns:
            이벤트 수
        """
        try:
            async with aiosqlite.connect(self.path) as db:
                cursor = await db.execute("SELECT COUNT(*) FROM weather_events")
                result = await cursor.fetchone()
                return result[0] if result else 0
        except Exception as e:
            log.error(f"SQLiteWeatherStore get_count 오류: {e}")
            return 0
