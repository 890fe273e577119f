"""Production configuration management for the listing scraper service.

- Environment-based configuration loading
- Browser launch and page settings
- Readiness timeouts, selectors and page size for the scraper
- Session concurrency limits
"""

from __future__ import annotations

import os
import logging
from typing import Dict, Any, Optional, List, Tuple
from dataclasses import dataclass, field
from enum import Enum


class DeploymentEnvironment(str, Enum):
    """Deployment environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels for production."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass
class SystemConfig:
    """System configuration for paths and basic settings."""
    log_root: str = "/tmp/logs"
    service_port: int = 8000
    log_level: LogLevel = LogLevel.INFO
    target_url_env: str = "AIRBNB_URL"


@dataclass
class ScalingConfig:
    """Concurrency limits for browser sessions."""
    max_concurrent_sessions: int = 2


@dataclass
class BrowserConfig:
    """Browser automation configuration."""
    headless: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    viewport_width: int = 1440
    viewport_height: int = 900
    navigation_timeout_seconds: float = 60.0
    launch_args: List[str] = field(default_factory=lambda: [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-web-security",
        "--disable-gpu",
        "--disable-dev-shm-usage",
    ])


@dataclass
class ScraperConfig:
    """Selectors, timeouts and paging for search result pages."""
    page_size: int = 18
    signal_timeout_seconds: float = 30.0
    header_timeout_seconds: float = 15.0
    listings_timeout_seconds: float = 20.0
    require_checkin: bool = True

    listing_selector: str = 'div[itemprop="itemListElement"]'
    no_results_selector: str = "main div div div div div div div div div div section h1"
    available_count_selector: str = "h1 span:nth-child(2)"

    name_selector: str = 'meta[itemprop="name"]'
    url_selector: str = 'meta[itemprop="url"]'
    rating_icon_selector: str = 'span[aria-hidden="true"] svg'
    aria_rating_selector: str = "[aria-label]"
    price_selector: str = '[data-testid="price-availability-row"] span'
    price_button_selector: str = 'button[type="button"]'
    currency_marker: str = "R$"

    # Header phrasings that mean "more results than the site will count"
    over_limit_phrases: Tuple[str, ...] = ("over 1,000", "mais de 1.000", "mil")
    over_limit_count: int = 1000


class ProductionConfig:
    """Production configuration manager."""

    def __init__(self, environment: DeploymentEnvironment = DeploymentEnvironment.PRODUCTION):
        self.environment = environment
        self._load_configuration()

    def _load_configuration(self) -> None:
        """Load configuration based on environment and environment variables."""
        self.system = SystemConfig()
        self.scaling = ScalingConfig()
        self.browser = BrowserConfig()
        self.scraper = ScraperConfig()

        if self.environment == DeploymentEnvironment.DEVELOPMENT:
            self.system.log_level = LogLevel.DEBUG

        self._load_from_environment()
        self._validate_configuration()

    def _load_from_environment(self) -> None:
        """Load configuration from environment variables."""
        # System settings
        self.system.log_root = os.getenv("LOG_ROOT", self.system.log_root)
        self.system.service_port = self._get_int_env("SERVICE_PORT", self.system.service_port)
        self.system.log_level = LogLevel(os.getenv("LOG_LEVEL", self.system.log_level.value).upper())
        self.system.target_url_env = os.getenv("TARGET_URL_ENV", self.system.target_url_env)

        # Scaling settings
        self.scaling.max_concurrent_sessions = self._get_int_env(
            "MAX_CONCURRENT_SESSIONS", self.scaling.max_concurrent_sessions
        )

        # Browser settings
        self.browser.headless = self._get_bool_env("BROWSER_HEADLESS", self.browser.headless)
        self.browser.user_agent = os.getenv("BROWSER_USER_AGENT", self.browser.user_agent)
        self.browser.navigation_timeout_seconds = self._get_float_env(
            "NAVIGATION_TIMEOUT_SECONDS", self.browser.navigation_timeout_seconds
        )

        # Scraper settings
        self.scraper.page_size = self._get_int_env("PAGE_SIZE", self.scraper.page_size)
        self.scraper.signal_timeout_seconds = self._get_float_env(
            "SIGNAL_TIMEOUT_SECONDS", self.scraper.signal_timeout_seconds
        )
        self.scraper.header_timeout_seconds = self._get_float_env(
            "HEADER_TIMEOUT_SECONDS", self.scraper.header_timeout_seconds
        )
        self.scraper.listings_timeout_seconds = self._get_float_env(
            "LISTINGS_TIMEOUT_SECONDS", self.scraper.listings_timeout_seconds
        )
        self.scraper.require_checkin = self._get_bool_env("REQUIRE_CHECKIN", self.scraper.require_checkin)
        self.scraper.currency_marker = os.getenv("CURRENCY_MARKER", self.scraper.currency_marker)

        phrases_str = os.getenv("OVER_LIMIT_PHRASES", "")
        if phrases_str:
            self.scraper.over_limit_phrases = tuple(
                p.strip().lower() for p in phrases_str.split("|") if p.strip()
            )

    def _get_bool_env(self, key: str, default: bool) -> bool:
        """Get boolean value from environment."""
        value = os.getenv(key, "").lower()
        if value in ("true", "1", "yes", "on"):
            return True
        elif value in ("false", "0", "no", "off"):
            return False
        return default

    def _get_int_env(self, key: str, default: int) -> int:
        """Get integer value from environment."""
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    def _get_float_env(self, key: str, default: float) -> float:
        """Get float value from environment."""
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    def _validate_configuration(self) -> None:
        """Validate configuration values."""
        if self.scraper.page_size < 1:
            raise ValueError("page_size must be at least 1")

        for name in ("signal_timeout_seconds", "header_timeout_seconds", "listings_timeout_seconds"):
            if getattr(self.scraper, name) <= 0:
                raise ValueError(f"{name} must be positive")

        if self.scaling.max_concurrent_sessions < 1:
            raise ValueError("max_concurrent_sessions must be at least 1")

        if self.system.service_port < 1 or self.system.service_port > 65535:
            raise ValueError("Service port must be between 1 and 65535")

    def get_configuration_summary(self) -> Dict[str, Any]:
        """Get configuration summary for logging/debugging."""
        return {
            "environment": self.environment.value,
            "service_port": self.system.service_port,
            "scaling": {
                "max_concurrent_sessions": self.scaling.max_concurrent_sessions,
            },
            "browser": {
                "headless": self.browser.headless,
                "viewport": f"{self.browser.viewport_width}x{self.browser.viewport_height}",
                "navigation_timeout_seconds": self.browser.navigation_timeout_seconds,
            },
            "scraper": {
                "page_size": self.scraper.page_size,
                "timeouts": [
                    self.scraper.signal_timeout_seconds,
                    self.scraper.header_timeout_seconds,
                    self.scraper.listings_timeout_seconds,
                ],
                "require_checkin": self.scraper.require_checkin,
                "over_limit_phrases": list(self.scraper.over_limit_phrases),
            },
        }

    def setup_logging(self, name: str = "listing_scraper") -> logging.Logger:
        """Setup service logging: console plus a dated file under log_root."""
        import datetime
        import pathlib

        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, self.system.log_level.value))
        if logger.handlers:
            return logger

        handlers: list[logging.Handler] = [logging.StreamHandler()]
        try:
            base_dir = pathlib.Path(self.system.log_root) / "listing_scraper"
            base_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(base_dir / f"{datetime.date.today().isoformat()}.log"))
        except OSError:
            # Read-only filesystems still get console output
            pass

        formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger


# Global configuration instance
_config_instance: Optional[ProductionConfig] = None


def get_config(environment: Optional[DeploymentEnvironment] = None) -> ProductionConfig:
    """Get or create global configuration instance."""
    global _config_instance

    if _config_instance is None or (environment and environment != _config_instance.environment):
        if environment is None:
            env_str = os.getenv("DEPLOYMENT_ENVIRONMENT", "production").lower()
            try:
                environment = DeploymentEnvironment(env_str)
            except ValueError:
                environment = DeploymentEnvironment.PRODUCTION

        _config_instance = ProductionConfig(environment)

    return _config_instance


def reset_config() -> None:
    """Reset global configuration instance (useful for testing)."""
    global _config_instance
    _config_instance = None
