"""
Weather notifier port interface.

This module defines the protocol for announcing new weather events.
"""

from typing import Protocol
from geoweather.core.models import WeatherEvent, WeatherTypeDef

class WeatherNotifierPort(Protocol):
    """날씨 알림 포트 인터페이스"""

    async def notify(self, event: WeatherEvent, type_def: WeatherTypeDef) -> None:
        """
        새 날씨 이벤트를 알립니다. 실패는 호출자가 흡수합니다.

        Args:
            event: 생성된 이벤트
            type_def: 이벤트의 유형 정의
        """
        ...
