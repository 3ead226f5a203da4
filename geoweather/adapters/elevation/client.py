"""
Open-Elevation API client for GeoWeather.

This module provides a client for the external elevation lookup service
used to confirm heuristic land classifications.
"""

import asyncio
import math
from typing import Optional

import aiohttp

from geoweather.core.errors import LookupUnavailable
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.elevation")

DEFAULT_ENDPOINT = "https://api.open-elevation.com/api/v1/lookup"

class OpenElevationClient:
    """고도 조회 API 클라이언트"""

    def __init__(self,
                 base_url: str = DEFAULT_ENDPOINT,
                 timeout: float = 3.0,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        초기화합니다.

        Args:
            base_url: 고도 조회 엔드포인트
            timeout: 요청 타임아웃 (초)
            session: 외부에서 주입한 세션 (없으면 async with 또는 요청마다 생성)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None

        log.info(f"고도 조회 클라이언트 초기화됨 endpoint:{self.base_url} timeout:{timeout}s")

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._owns_session = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

    def build_url(self, lat: float, lon: float) -> str:
        return f"{self.base_url}?locations={lat},{lon}"

    @staticmethod
    def parse_elevation(data) -> float:
        """
        응답 JSON에서 고도를 꺼냅니다.

        Raises:
            LookupUnavailable: 형식이 맞지 않거나 숫자가 아닌 경우
        """
        try:
            elevation = data["results"][0]["elevation"]
        except (KeyError, IndexError, TypeError) as e:
            raise LookupUnavailable(f"고도 응답 형식 오류: {data!r}") from e

        # bool은 int의 하위 타입이므로 따로 제외
        if isinstance(elevation, bool) or not isinstance(elevation, (int, float)):
            raise LookupUnavailable(f"숫자가 아닌 고도 값: {elevation!r}")
        if not math.isfinite(elevation):
            raise LookupUnavailable(f"유한하지 않은 고도 값: {elevation!r}")
        return float(elevation)

    async def _fetch(self, session: aiohttp.ClientSession, url: str) -> float:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=self.timeout)) as response:
            if response.status != 200:
                raise LookupUnavailable(f"고도 API 응답 오류 status:{response.status}", status=response.status)
            data = await response.json(content_type=None)
        return self.parse_elevation(data)

    async def lookup(self, lat: float, lon: float) -> float:
        """
        좌표의 고도를 조회합니다.

        Args:
            lat: 위도
            lon: 경도

        Returns:
            고도 (미터)

        Raises:
            LookupUnavailable: 네트워크 오류, 타임아웃, 비정상 응답
        """
        url = self.build_url(lat, lon)
        try:
            if self.session is not None:
                return await self._fetch(self.session, url)
            async with aiohttp.ClientSession() as session:
                return await self._fetch(session, url)
        except LookupUnavailable:
            raise
        except asyncio.TimeoutError as e:
            raise LookupUnavailable(f"고도 API 타임아웃 ({self.timeout}s)") from e
        except (aiohttp.ClientError, ValueError) as e:
            raise LookupUnavailable(f"고도 API 요청 실패: {e}") from e
