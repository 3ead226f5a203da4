"""
First-match fallback chains for GeoWeather.

Land confirmation, spiral land search and random placement all follow the
same shape: an ordered list of candidate-producing strategies evaluated in
sequence until one candidate satisfies a validator predicate.
"""

import asyncio
import inspect
from contextlib import aclosing
from dataclasses import dataclass
from typing import (
    AsyncIterable, AsyncIterator, Awaitable, Callable, Generic, Iterable,
    Optional, Sequence, TypeVar, Union
)

from geoweather.core.errors import SearchExhausted
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.chain")

T = TypeVar("T")

Candidates = Union[Iterable[T], AsyncIterable[T]]
Validator = Callable[[T], Union[bool, Awaitable[bool]]]

@dataclass(frozen=True)
class Strategy(Generic[T]):
    """
    후보 생성 전략.

    Attributes:
        name: 전략 이름 (결과와 메트릭에 기록)
        candidates: 호출 시 후보 시퀀스를 만드는 함수 (동기/비동기 반복자)
        validator: 체인 기본 검증기 대신 사용할 검증기
        unconditional: True면 첫 후보를 검증 없이 채택
        pause_every: 이 횟수마다 pause_sec 만큼 대기 (0이면 대기 없음)
        pause_sec: 대기 시간 (초)
    """
    name: str
    candidates: Callable[[], Candidates]
    validator: Optional[Validator] = None
    unconditional: bool = False
    pause_every: int = 0
    pause_sec: float = 0.0

@dataclass(frozen=True)
class Match(Generic[T]):
    """체인 평가 결과"""
    value: T
    strategy: str
    attempts: int

async def _iterate(candidates: Candidates) -> AsyncIterator[T]:
    if hasattr(candidates, "__aiter__"):
        try:
            async for candidate in candidates:
                yield candidate
        finally:
            aclose = getattr(candidates, "aclose", None)
            if aclose is not None:
                await aclose()
    else:
        for candidate in candidates:
            yield candidate

async def _check(validator: Validator, candidate: T) -> bool:
    result = validator(candidate)
    if inspect.isawaitable(result):
        result = await result
    return bool(result)

async def first_match(strategies: Sequence[Strategy[T]],
                      validator: Optional[Validator] = None,
                      *,
                      sleep: Callable[[float], Awaitable[None]] = asyncio.sleep) -> Match[T]:
    """
    전략을 순서대로 평가하여 검증을 통과한 첫 후보를 반환합니다.

    Args:
        strategies: 평가할 전략 목록 (순서대로)
        validator: 기본 검증기 (전략별 validator가 우선)
        sleep: 대기 함수 (테스트에서 교체 가능)

    Returns:
        채택된 후보와 전략 이름, 누적 시도 횟수

    Raises:
        SearchExhausted: 모든 전략이 후보를 찾지 못한 경우
    """
    attempts = 0
    for strategy in strategies:
        check = strategy.validator or validator
        if check is None and not strategy.unconditional:
            raise ValueError(f"검증기가 없는 전략: {strategy.name}")

        tried = 0
        async with aclosing(_iterate(strategy.candidates())) as candidates:
            async for candidate in candidates:
                attempts += 1
                tried += 1
                if strategy.unconditional or await _check(check, candidate):
                    return Match(value=candidate, strategy=strategy.name, attempts=attempts)

                if strategy.pause_every and strategy.pause_sec > 0 and tried % strategy.pause_every == 0:
                    await sleep(strategy.pause_sec)

        log.debug(f"전략 소진 strategy:{strategy.name} tried:{tried}")

    raise SearchExhausted([s.name for s in strategies], attempts)
