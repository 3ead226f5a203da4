"""
Weather event store port interface.

This module defines the protocol for weather event persistence.
Events are append/expire/delete only; stored events are never updated.
"""

from typing import List, Protocol
from geoweather.core.models import WeatherEvent

class WeatherEventStorePort(Protocol):
    """날씨 이벤트 저장소 포트 인터페이스"""

    async def insert(self, event: WeatherEvent) -> None:
        """
        이벤트를 저장합니다.

        Args:
            event: 저장할 이벤트
        """
        ...

    async def query(self, active_at: float) -> List[WeatherEvent]:
        """
        주어진 시각에 활성인 이벤트를 조회합니다.

        Args:
            active_at: 기준 시각 (epoch 초)

        Returns:
            활성 이벤트 목록 (생성 순)
        """
        ...

    async def expire(self, before: float) -> int:
        """
        종료 시각이 지난 이벤트를 삭제합니다.

        Args:
            before: 기준 시각 (epoch 초)

        Returns:
            삭제된 이벤트 수
        """
        ...

    async def delete(self, event_id: str) -> bool:
        """
        이벤트를 삭제합니다.

        Returns:
            삭제 여부
        """
        ...

    async def clear(self) -> int:
        """모든 이벤트를 삭제하고 삭제된 수를 반환합니다."""
        ...
