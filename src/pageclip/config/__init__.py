"""Configuration models and loaders for pageclip."""

from .config import Config, ExtractionSettings, FetchConfig, MonitoringConfig, WebConfig, find_config_file, settings

__all__ = [
    "Config",
    "ExtractionSettings",
    "FetchConfig",
    "MonitoringConfig",
    "WebConfig",
    "find_config_file",
    "settings",
]
