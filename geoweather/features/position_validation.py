"""
Bulk position validation feature for GeoWeather.

This module checks already placed entities against the land classifier
in fixed-size concurrent batches and computes relocations for entities
found in water. Entities are never mutated; callers apply relocations.
"""

import asyncio
import csv
from typing import Awaitable, Callable, List, Optional, Sequence

from geoweather.core.land import LandClassifier
from geoweather.core.models import Coordinate, PlacedEntity, Relocation, ValidationReport
from geoweather.core.resolver import PositionResolver
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.validation")

def load_entities(path: str) -> List[PlacedEntity]:
    """
    CSV 파일에서 배치된 엔티티를 로드합니다.

    필수 컬럼은 id, lat, lon 이며 name은 선택입니다. 좌표가 잘못된 행은
    경고를 남기고 건너뜁니다.
    """
    entities: List[PlacedEntity] = []
    with open(path, newline="", encoding="utf-8") as f:
        for row_num, row in enumerate(csv.DictReader(f), start=2):
            try:
                entities.append(PlacedEntity(
                    entity_id=row["id"].strip(),
                    name=(row.get("name") or "").strip(),
                    coordinate=Coordinate(lat=float(row["lat"]), lon=float(row["lon"])),
                ))
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                log.warning(f"행 {row_num} 엔티티 변환 오류 건너뜀: {row} error:{e}")
                continue

    log.info(f"엔티티 데이터 로드됨 path:{path} count:{len(entities)}")
    return entities

class PositionValidator:
    """배치된 엔티티 위치 일괄 검증기"""

    def __init__(self,
                 classifier: LandClassifier,
                 resolver: PositionResolver,
                 *,
                 batch_size: int = 5,
                 batch_delay_sec: float = 1.0,
                 max_attempts: int = 50,
                 sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        """
        초기화합니다.

        Args:
            classifier: 육지 분류기
            resolver: 재배치 좌표 탐색기
            batch_size: 동시에 검사할 엔티티 수
            batch_delay_sec: 배치 사이 대기 시간 (초)
            max_attempts: 재배치 나선 탐색 최대 시도 횟수
            sleep: 대기 함수
        """
        if batch_size < 1:
            raise ValueError(f"batch_size는 1 이상이어야 합니다: {batch_size}")
        self.classifier = classifier
        self.resolver = resolver
        self.batch_size = batch_size
        self.batch_delay_sec = batch_delay_sec
        self.max_attempts = max_attempts
        self.sleep = sleep
        self._semaphore = asyncio.Semaphore(batch_size)

    async def check_entity(self, entity: PlacedEntity) -> Optional[Relocation]:
        """
        엔티티 하나를 검사합니다.

        Returns:
            바다 위에 있으면 재배치 정보, 육지면 None
        """
        async with self._semaphore:
            if await self.classifier.is_coordinate_on_land(entity.coordinate):
                return None

            match = await self.resolver.resolve(entity.coordinate, self.max_attempts)
            log.info(
                f"바다 위 엔티티 재배치 계산 entity:{entity.entity_id} "
                f"from:{entity.coordinate.lat:.4f},{entity.coordinate.lon:.4f} "
                f"to:{match.value.lat:.4f},{match.value.lon:.4f} strategy:{match.strategy}"
            )
            return Relocation(
                entity_id=entity.entity_id,
                source=entity.coordinate,
                target=match.value,
                strategy=match.strategy,
            )

    async def validate(self, entities: Sequence[PlacedEntity]) -> ValidationReport:
        """
        엔티티 목록을 배치 단위로 검사합니다.

        Args:
            entities: 검사할 엔티티 목록

        Returns:
            검사 수, 재배치 수, 실패 수와 재배치 목록
        """
        entities = list(entities)
        report = ValidationReport(total=len(entities))
        log.info(f"위치 일괄 검증 시작 total:{len(entities)} batch_size:{self.batch_size}")

        for start in range(0, len(entities), self.batch_size):
            batch = entities[start:start + self.batch_size]
            results = await asyncio.gather(
                *(self.check_entity(entity) for entity in batch),
                return_exceptions=True,
            )

            for entity, result in zip(batch, results):
                if isinstance(result, BaseException):
                    report.failures += 1
                    log.error(f"엔티티 검증 실패 entity:{entity.entity_id} error:{str(result)}")
                elif result is not None:
                    report.fixed += 1
                    report.relocations.append(result)

            if start + self.batch_size < len(entities) and self.batch_delay_sec > 0:
                await self.sleep(self.batch_delay_sec)

        log.info(
            f"위치 일괄 검증 완료 total:{report.total} fixed:{report.fixed} failures:{report.failures}"
        )
        return report
