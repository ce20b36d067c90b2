"""Configuration module for the RFQ Capacity Planner."""

from .settings import CapacitySettings, Settings, get_settings, settings

__all__ = ["CapacitySettings", "Settings", "get_settings", "settings"]
