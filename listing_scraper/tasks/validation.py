"""Check-in date validation for search URLs."""

import logging
import urllib.parse
from datetime import date, datetime, timedelta
from typing import Optional

from .base import _log


def validate_checkin_date(url: str, today: Optional[date] = None,
                          logger: Optional[logging.Logger] = None) -> bool:
    """Return True when the URL's ``checkin`` is tomorrow or later.

    ``today`` defaults to the current local date. Any missing, malformed or
    past date is reported through ``logger`` and yields False.
    """
    try:
        query = urllib.parse.urlparse(url).query
    except (TypeError, ValueError, AttributeError) as e:
        _log(logger, "error", f"❌ Could not parse URL {url!r}: {e}")
        return False

    values = urllib.parse.parse_qs(query).get("checkin")
    checkin_str = values[0].strip() if values else ""
    if not checkin_str:
        _log(logger, "error", "❌ The 'checkin' parameter was not found in the URL")
        return False

    try:
        checkin = datetime.strptime(checkin_str, "%Y-%m-%d").date()
    except ValueError:
        _log(logger, "error", f"❌ Invalid check-in date format: {checkin_str!r}. Use YYYY-MM-DD")
        return False

    tomorrow = (today or date.today()) + timedelta(days=1)
    if checkin < tomorrow:
        _log(logger, "error", f"❌ Check-in date {checkin.isoformat()} must be on or after {tomorrow.isoformat()}")
        return False

    _log(logger, "info", f"📅 Check-in date {checkin.isoformat()} is valid")
    return True
