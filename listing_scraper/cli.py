"""Standalone runner: scrape one page of the URL named by an environment variable.

    AIRBNB_URL="https://www.airbnb.com.br/s/Rio/homes?checkin=2026-12-01&checkout=2026-12-05" \
        python -m listing_scraper --page 0
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional, Sequence

from .config import ProductionConfig, get_config
from .models import PageRequest, PageResult
from .runtime import BrowserRuntime
from .tasks import AirbnbTask, validate_checkin_date
from .tasks.base import is_valid_url


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Scrape one page of Airbnb search results")
    ap.add_argument("--page", type=int, default=0, help="zero-based results page (default: 0)")
    ap.add_argument("--url-env", default=None, help="environment variable holding the search URL")
    return ap.parse_args(argv)


def resolve_target_url(env_name: str, logger: logging.Logger) -> Optional[str]:
    """Read and check the target URL; None when it must not be scraped."""
    url = (os.getenv(env_name) or "").strip()
    if not url:
        logger.error(f"❌ Environment variable {env_name} is not set")
        return None
    if not is_valid_url(url):
        logger.error(f"❌ {env_name} is not a valid URL: {url!r}")
        return None
    if not validate_checkin_date(url, logger=logger):
        return None
    return url


def print_summary(result: PageResult) -> None:
    print("\n--- Final result ---")
    print(f"Header text: {result.element_text}")
    if result.loaded_count > 0:
        print(f"Available accommodations (from header): {result.available_count}")
        print(f"Accommodations loaded on the page: {result.loaded_count}")
        print(f"Status: {result.status.value}")
    else:
        print("No accommodations were loaded for this search.")
    print(json.dumps(result.summary(), indent=2, ensure_ascii=False))
    print("--------------------\n")


async def run_once(config: ProductionConfig, request: PageRequest, logger: logging.Logger) -> PageResult:
    runtime = BrowserRuntime(config.browser, max_sessions=1, logger=logger)
    task = AirbnbTask(config.scraper, config.browser, logger)
    async with runtime.session() as page:
        return await task.scrape_page(page, request)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    config = get_config()
    logger = config.setup_logging("listing_scraper.cli")

    if args.page < 0:
        logger.error("❌ --page must be a non-negative integer")
        return 1

    url = resolve_target_url(args.url_env or config.system.target_url_env, logger)
    if url is None:
        return 1

    logger.info("🚀 Starting scrape...")
    try:
        result = asyncio.run(run_once(config, PageRequest(base_url=url, page_index=args.page), logger))
    except Exception as e:
        logger.error(f"❌ Error during the main run: {e}")
        return 1

    print_summary(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
