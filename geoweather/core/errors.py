"""
Domain errors for GeoWeather.

Coordinate range errors are raised by pydantic (``ValidationError``)
when a model is constructed; the errors below cover everything else.
"""

from typing import Iterable, Optional

from pydantic import ValidationError

__all__ = [
    "GeoWeatherError",
    "LookupUnavailable",
    "SearchExhausted",
    "InvalidWeatherType",
    "UnknownRegion",
    "ValidationError",
]

class GeoWeatherError(Exception):
    """GeoWeather 예외의 기반 클래스"""

class LookupUnavailable(GeoWeatherError):
    """외부 고도 조회 실패 (네트워크, 타임아웃, 응답 파싱 오류)"""

    def __init__(self, message: str, *, status: Optional[int] = None):
        super().__init__(message)
        self.status = status

class SearchExhausted(GeoWeatherError):
    """모든 후보 전략이 실패함"""

    def __init__(self, strategies: Iterable[str], attempts: int):
        self.strategies = list(strategies)
        self.attempts = attempts
        super().__init__(
            f"후보 탐색 실패 strategies:{','.join(self.strategies)} attempts:{attempts}"
        )

class InvalidWeatherType(GeoWeatherError, KeyError):
    """카탈로그에 없는 날씨 유형"""

    def __init__(self, type_id: str, available: Iterable[str] = ()):
        self.type_id = type_id
        self.available = list(available)
        super().__init__(f"알 수 없는 날씨 유형: {type_id}")

    def __str__(self) -> str:
        return f"알 수 없는 날씨 유형: {self.type_id}"

class UnknownRegion(GeoWeatherError, KeyError):
    """등록되지 않은 국가/지역 이름"""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = sorted(available)
        super().__init__(f"알 수 없는 지역: {name}")

    def __str__(self) -> str:
        return f"알 수 없는 지역: {self.name} (사용 가능: {', '.join(self.available)})"
