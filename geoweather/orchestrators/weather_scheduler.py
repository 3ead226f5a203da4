"""
Periodic weather scheduler for GeoWeather.

This module runs the weather generator tick on a fixed interval until
stopped. Tick failures are logged and the loop continues.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from geoweather.core.weather import WeatherGenerator
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.scheduler")

class WeatherScheduler:
    """날씨 생성 주기 실행기"""

    def __init__(self,
                 generator: WeatherGenerator,
                 interval_sec: float = 300.0,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        """
        초기화합니다.

        Args:
            generator: 날씨 생성기
            interval_sec: 틱 간격 (초)
            sleep: 대기 함수
        """
        if interval_sec <= 0:
            raise ValueError(f"interval_sec는 양수여야 합니다: {interval_sec}")
        self.generator = generator
        self.interval_sec = interval_sec
        self.sleep = sleep
        self.ticks = 0
        self.errors = 0
        self._stop: Optional[asyncio.Event] = None

    async def run_once(self) -> int:
        """
        틱을 한 번 실행합니다.

        Returns:
            생성된 이벤트 수 (실패 시 0)
        """
        self.ticks += 1
        try:
            created = await self.generator.tick()
            if created:
                log.info(f"날씨 틱 완료 tick:{self.ticks} created:{len(created)}")
            return len(created)
        except Exception as e:
            self.errors += 1
            log.error(f"날씨 틱 오류 tick:{self.ticks} error:{str(e)}")
            return 0

    async def run(self) -> None:
        """stop()이 호출될 때까지 주기적으로 틱을 실행합니다."""
        self._stop = asyncio.Event()
        log.info(f"날씨 스케줄러 시작 interval:{self.interval_sec}s")
        while not self._stop.is_set():
            await self.run_once()
            if self._stop.is_set():
                break
            await self.sleep(self.interval_sec)
        log.info(f"날씨 스케줄러 종료 ticks:{self.ticks} errors:{self.errors}")

    def stop(self) -> None:
        if self._stop is not None:
            self._stop.set()
