"""
Base utilities shared by the scraping tasks.
"""
import logging
import re
import urllib.parse
from typing import Optional


def _log(logger: Optional[logging.Logger], level: str, message: str):
    """Centralized logging utility for all tasks."""
    if logger is not None:
        getattr(logger, level.lower())(message)


def is_valid_url(url: str) -> bool:
    """Absolute http(s) URL with a host."""
    if not url or not isinstance(url, str):
        return False
    try:
        parsed = urllib.parse.urlparse(url.strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace, including non-breaking spaces, to single spaces."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text.replace("\xa0", " ")).strip()
