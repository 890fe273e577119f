"""Pagination cursor understood by the search backend.

The cursor is base64 of a compact JSON object. The first page never carries
one: page 0 is requested with the bare base URL.
"""

import base64
import json
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

CURSOR_PARAM = "cursor"
DEFAULT_PAGE_SIZE = 18


def encode_cursor(page_index: int, page_size: int = DEFAULT_PAGE_SIZE) -> Optional[str]:
    """Opaque token for ``page_index``, or None for the first page."""
    if page_index < 0:
        raise ValueError("page_index must be non-negative")
    if page_index == 0:
        return None
    payload = {
        "section_offset": 0,
        "items_offset": page_size * page_index,
        "version": 1,
    }
    raw = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


def decode_cursor(token: str) -> Dict[str, Any]:
    return json.loads(base64.b64decode(token.encode("ascii")).decode("utf-8"))


def build_page_url(base_url: str, page_index: int, page_size: int = DEFAULT_PAGE_SIZE) -> str:
    """Base URL with the page cursor set; unchanged for page 0."""
    token = encode_cursor(page_index, page_size)
    if token is None:
        return base_url

    parsed = urlparse(base_url)
    query = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != CURSOR_PARAM]
    query.append((CURSOR_PARAM, token))
    return urlunparse(parsed._replace(query=urlencode(query)))
