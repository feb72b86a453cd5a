"""Configuration package for the dashgraph chart engine"""

from .settings import get_settings, clear_settings_cache, Settings

__all__ = ["get_settings", "clear_settings_cache", "Settings"]
