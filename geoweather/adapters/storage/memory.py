"""
In-memory adapters for GeoWeather.

Used for tests and for running the engine without a database file.
"""

from typing import Dict, Iterable, List

from geoweather.core.models import Coordinate, PlacedEntity, WeatherEvent

class InMemoryWeatherStore:
    """메모리 기반 날씨 이벤트 저장소"""

    def __init__(self):
        # dict는 삽입 순서를 유지하므로 생성 순 조회가 보장됨
        self._events: Dict[str, WeatherEvent] = {}

    async def insert(self, event: WeatherEvent) -> None:
        if event.id in self._events:
            raise ValueError(f"중복 이벤트 id: {event.id}")
        self._events[event.id] = event

    async def query(self, active_at: float) -> List[WeatherEvent]:
        return [event for event in self._events.values() if event.is_active_at(active_at)]

    async def expire(self, before: float) -> int:
        expired = [event_id for event_id, event in self._events.items() if event.end_time <= before]
        for event_id in expired:
            del self._events[event_id]
        return len(expired)

    async def delete(self, event_id: str) -> bool:
        return self._events.pop(event_id, None) is not None

    async def clear(self) -> int:
        count = len(self._events)
        self._events.clear()
        return count

    def __len__(self) -> int:
        return len(self._events)

class StaticPositionSource:
    """고정된 엔티티 목록을 제공하는 위치 소스"""

    def __init__(self, entities: Iterable[PlacedEntity] = ()):
        self.entities: List[PlacedEntity] = list(entities)

    def add(self, entity: PlacedEntity) -> None:
        self.entities.append(entity)

    async def list_positions(self) -> List[Coordinate]:
        return [entity.coordinate for entity in self.entities]
