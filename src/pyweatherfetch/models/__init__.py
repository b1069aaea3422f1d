"""Typed views over provider records."""

from pyweatherfetch.models.weather import WeatherSummary

__all__ = ["WeatherSummary"]
