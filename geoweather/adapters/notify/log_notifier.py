"""
Log-based weather notifier for GeoWeather.

This module formats new weather events into alert/advisory messages and
writes them to the log. Other channels can implement the same port.
"""

from typing import Dict

from geoweather.core.models import WeatherEvent, WeatherTypeDef
from geoweather.observability.logging_setup import get_logger

log = get_logger("geoweather.notify")

SEVERE_MIN_SEVERITY = 4

def is_severe(type_def: WeatherTypeDef) -> bool:
    """통행 차단 유형이면서 심각도 4 이상이면 심각 기상"""
    return type_def.block_travel and type_def.severity >= SEVERE_MIN_SEVERITY

def travel_warning(type_def: WeatherTypeDef) -> str:
    if type_def.block_travel:
        return "ALL TRAVEL THROUGH THIS AREA IS BLOCKED - travelers will be routed around this storm"
    slowdown = round((type_def.travel_time_multiplier - 1) * 100)
    return f"TRAVEL DELAYED - speed reduced by {slowdown}%"

def format_alert(event: WeatherEvent, type_def: WeatherTypeDef) -> Dict[str, str]:
    """
    알림 메시지를 구성합니다.

    Args:
        event: 생성된 이벤트
        type_def: 이벤트 유형

    Returns:
        headline, description, travel, details 키를 가진 딕셔너리
    """
    severe = is_severe(type_def)
    hours = round((event.end_time - event.start_time) / 3600, 1)
    return {
        "headline": f"{type_def.name.upper()} {'ALERT' if severe else 'ADVISORY'}",
        "description": type_def.description,
        "travel": travel_warning(type_def),
        "details": (
            f"severity:{type_def.severity}/5 radius:{event.radius_km:.0f}km duration:~{hours}h "
            f"center:{event.center.lat:.2f},{event.center.lon:.2f}"
        ),
    }

class LogNotifier:
    """로그로 날씨 알림을 남기는 알림기"""

    async def notify(self, event: WeatherEvent, type_def: WeatherTypeDef) -> None:
        message = format_alert(event, type_def)
        level = "WARNING" if is_severe(type_def) else "INFO"
        log.log(
            level,
            f"{message['headline']} event:{event.id} {message['details']} travel:{message['travel']}"
        )
