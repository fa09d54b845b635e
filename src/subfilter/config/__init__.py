"""Configuration package."""

from subfilter.config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
