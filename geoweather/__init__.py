"""
GeoWeather: geospatial placement and weather-aware routing engine.
"""

__version__ = "0.1.0"
