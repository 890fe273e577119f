"""Airbnb search-results scraper: headless browser, listing extraction, HTTP API."""

__version__ = "1.0.0"
