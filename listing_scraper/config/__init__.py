"""Configuration management for the listing scraper service."""

from .production import (
    ProductionConfig, DeploymentEnvironment, LogLevel,
    SystemConfig, ScalingConfig, BrowserConfig, ScraperConfig,
    get_config, reset_config
)

__all__ = [
    'ProductionConfig', 'DeploymentEnvironment', 'LogLevel',
    'SystemConfig', 'ScalingConfig', 'BrowserConfig', 'ScraperConfig',
    'get_config', 'reset_config'
]
