"""
Entity position source port interface.

This module defines the read-only protocol for positions of already
placed entities, used for collision checks during placement.
"""

from typing import List, Protocol
from geoweather.core.models import Coordinate

class EntityPositionSource(Protocol):
    """배치된 엔티티 위치 조회 포트 인터페이스"""

    async def list_positions(self) -> List[Coordinate]:
        """
        배치된 엔티티의 좌표 목록을 조회합니다.

        Returns:
            좌표 목록
        """
        ...
