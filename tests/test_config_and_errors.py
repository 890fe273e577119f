import pytest

from listing_scraper.config import DeploymentEnvironment, LogLevel, ProductionConfig, get_config, reset_config
from listing_scraper.reliability import (
    ErrorCategory,
    ErrorContext,
    InputError,
    ReadinessTimeout,
    UnexpectedFailure,
    classify_error,
)


def test_defaults():
    config = ProductionConfig()
    assert config.scraper.page_size == 18
    assert (config.scraper.signal_timeout_seconds,
            config.scraper.header_timeout_seconds,
            config.scraper.listings_timeout_seconds) == (30.0, 15.0, 20.0)
    assert config.browser.viewport_width == 1440
    assert "--no-sandbox" in config.browser.launch_args


def test_configuration_summary_reports_port_and_timeouts(monkeypatch):
    monkeypatch.setenv("SERVICE_PORT", "9100")
    summary = ProductionConfig().get_configuration_summary()

    assert summary["service_port"] == 9100
    assert summary["scraper"]["timeouts"] == [30.0, 15.0, 20.0]
    assert summary["browser"]["viewport"] == "1440x900"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SIGNAL_TIMEOUT_SECONDS", "12.5")
    monkeypatch.setenv("BROWSER_HEADLESS", "false")
    monkeypatch.setenv("MAX_CONCURRENT_SESSIONS", "4")
    monkeypatch.setenv("OVER_LIMIT_PHRASES", "Over 1,000|Plus de 1 000")
    monkeypatch.setenv("REQUIRE_CHECKIN", "no")

    config = ProductionConfig()

    assert config.scraper.signal_timeout_seconds == 12.5
    assert config.browser.headless is False
    assert config.scaling.max_concurrent_sessions == 4
    assert config.scraper.over_limit_phrases == ("over 1,000", "plus de 1 000")
    assert config.scraper.require_checkin is False


def test_bad_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("PAGE_SIZE", "eighteen")
    assert ProductionConfig().scraper.page_size == 18


def test_invalid_configuration_rejected(monkeypatch):
    monkeypatch.setenv("HEADER_TIMEOUT_SECONDS", "0")
    with pytest.raises(ValueError):
        ProductionConfig()


def test_development_environment_logs_debug(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    assert ProductionConfig(DeploymentEnvironment.DEVELOPMENT).system.log_level == LogLevel.DEBUG


def test_get_config_is_cached():
    reset_config()
    try:
        assert get_config() is get_config()
    finally:
        reset_config()


def test_error_taxonomy():
    assert InputError("airbnbUrl is required").category == ErrorCategory.VALIDATION

    timeout = ReadinessTimeout("header missing", phase="header", timeout_seconds=15,
                               context=ErrorContext(url="https://x.test"))
    data = timeout.to_dict()
    assert data["category"] == "timeout"
    assert data["context"]["phase"] == "header"
    assert data["context"]["url"] == "https://x.test"


@pytest.mark.parametrize("message, category", [
    ("net::ERR_NAME_NOT_RESOLVED", ErrorCategory.NAVIGATION),
    ("Target page, context or browser has been closed", ErrorCategory.BROWSER),
    ("Evaluation failed: ReferenceError", ErrorCategory.EVALUATION),
    ("something odd", ErrorCategory.UNKNOWN),
])
def test_classify_error(message, category):
    error = classify_error(RuntimeError(message))
    assert isinstance(error, UnexpectedFailure)
    assert error.category == category
    assert error.context.traceback


def test_classify_error_keeps_scraper_errors():
    original = InputError("bad")
    assert classify_error(original) is original
