"""
Elevation lookup port interface.

This module defines the protocol for the external elevation service.
"""

from typing import Protocol

class ElevationPort(Protocol):
    """고도 조회 포트 인터페이스"""

    async def lookup(self, lat: float, lon: float) -> float:
        """
        좌표의 고도를 조회합니다.

        Args:
            lat: 위도
            lon: 경도

        Returns:
            고도 (미터)

        Raises:
            LookupUnavailable: 네트워크/타임아웃/응답 오류
        """
        ...
