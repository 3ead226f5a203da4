"""
Metrics definitions for GeoWeather.

This module defines Prometheus metrics for monitoring
land classification, placement search, weather generation and routing.
"""

from prometheus_client import Counter, Gauge, Histogram

# 카운터 메트릭
land_classifications = Counter(
    "land_classifications_total",
    "Number of land/water classifications",
    ["stage", "surface"]
)

elevation_lookups = Counter(
    "elevation_lookups_total",
    "Elevation lookups issued to the external service",
    ["outcome"]
)

search_strategy_used = Counter(
    "search_strategy_used_total",
    "Which strategy of a fallback chain produced the result",
    ["search", "strategy"]
)

weather_events_spawned = Counter(
    "weather_events_spawned_total",
    "Weather events created",
    ["type_id", "origin"]
)

weather_events_expired = Counter(
    "weather_events_expired_total",
    "Weather events removed after their end time"
)

routes_planned = Counter(
    "routes_planned_total",
    "Routes planned",
    ["detour"]
)

# 히스토그램 메트릭
elevation_lookup_seconds = Histogram(
    "elevation_lookup_duration_seconds",
    "Time spent waiting for the elevation service",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 3.0, 5.0]
)

# 게이지 메트릭
weather_active_events = Gauge(
    "weather_active_events",
    "Active weather events after the last generator tick"
)
