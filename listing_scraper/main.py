"""Airbnb listing scraper micro-service.

This FastAPI app exposes:
- POST /scrape    to scrape one page of search results
- GET  /healthz   for liveness
- GET  /metrics   for Prometheus

Every request gets its own headless browser, closed before the response is
sent. Run with ``listing-scraper-service`` (uvicorn on ``SERVICE_PORT``).
"""

from __future__ import annotations

import time
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from .config import get_config
from .models import PageRequest, ScrapeRequest
from .observability import ScraperMetrics
from .reliability import InputError, classify_error
from .runtime import BrowserRuntime
from .tasks import AirbnbTask, validate_checkin_date
from .tasks.base import is_valid_url

config = get_config()
service_logger = config.setup_logging("listing_scraper.service")

metrics = ScraperMetrics()
browser_runtime = BrowserRuntime(
    config.browser,
    max_sessions=config.scaling.max_concurrent_sessions,
    logger=service_logger,
    metrics=metrics,
)
airbnb_task = AirbnbTask(config.scraper, config.browser, service_logger, metrics)

app = FastAPI(title="Airbnb Listing Scraper", version="1.0.0")


@app.middleware("http")
async def prometheus_middleware(request: Request, call_next):
    """Collect Prometheus metrics for each request."""
    started = time.monotonic()
    response = await call_next(request)
    metrics.record_http_request(request.method, request.url.path, response.status_code, time.monotonic() - started)
    return response


@app.on_event("startup")
async def on_startup() -> None:
    service_logger.info(f"Starting listing scraper service: {config.get_configuration_summary()}")


@app.get("/healthz")
async def healthz() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics")
async def prometheus_metrics():
    """Prometheus metrics endpoint."""
    return Response(content=metrics.export(), media_type=metrics.content_type)


def parse_scrape_request(payload: Any) -> PageRequest:
    """Validate the POST /scrape body into a PageRequest."""
    if not isinstance(payload, dict):
        raise InputError("Request body must be a JSON object")
    try:
        body = ScrapeRequest(**payload)
    except ValidationError as e:
        raise InputError(f"Invalid request body: {e.errors()[0].get('msg', 'validation error')}")

    if not body.airbnb_url:
        raise InputError("airbnbUrl is required")
    if not is_valid_url(body.airbnb_url):
        raise InputError(f"airbnbUrl is not a valid URL: {body.airbnb_url}")
    if body.page < 0:
        raise InputError("page must be a non-negative integer")
    if config.scraper.require_checkin and not validate_checkin_date(body.airbnb_url, logger=service_logger):
        raise InputError("airbnbUrl must carry a checkin date (YYYY-MM-DD) of tomorrow or later")

    return PageRequest(base_url=body.airbnb_url.strip(), page_index=body.page)


@app.post("/scrape")
async def scrape(request: Request):
    """Scrape one page of search results."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    try:
        page_request = parse_scrape_request(payload)
    except InputError as e:
        service_logger.warning(f"Rejected scrape request: {e.to_dict()}")
        return JSONResponse(status_code=400, content={"error": e.message})

    try:
        async with browser_runtime.session() as page:
            result = await airbnb_task.scrape_page(page, page_request)
    except Exception as e:
        error = classify_error(e)
        service_logger.error(f"❌ Scrape request failed: {error.to_dict()}")
        return JSONResponse(status_code=500, content={"error": error.message})

    return result.to_response()


def serve() -> None:
    """Run the service under uvicorn on the configured port."""
    uvicorn.run(app, host="0.0.0.0", port=config.system.service_port, log_level=config.system.log_level.value.lower())
