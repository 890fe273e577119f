"""Typed entities shared by the scraper, the HTTP layer and the CLI."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ScrapeStatus(str, Enum):
    """Terminal outcome of one page scrape."""
    EXTRACTED = "extracted"            # Listing threshold met, records extracted
    PARTIAL = "partial"                # Threshold not met in time, extracted what rendered
    EMPTY = "empty"                    # Site reported no results
    HEADER_MISSING = "header_missing"  # Listings present but the count header never appeared
    TIMED_OUT = "timed_out"            # Neither listings nor no-results marker appeared
    FAILED = "failed"                  # Unexpected navigation/evaluation failure


class ListingRecord(BaseModel):
    room_id: Optional[str] = None
    title: Optional[str] = None
    total_reviews: Optional[int] = Field(None, ge=0)
    score: Optional[float] = Field(None, ge=0, le=5)
    price: Optional[float] = Field(None, ge=0)
    availables_count: Optional[int] = None
    position: int = Field(..., ge=1)


class PageRequest(BaseModel):
    base_url: str
    page_index: int = Field(0, ge=0)


class PageResult(BaseModel):
    requested_url: str
    records: List[ListingRecord] = Field(default_factory=list)
    status: ScrapeStatus = ScrapeStatus.EXTRACTED
    available_count: Optional[int] = None
    element_text: Optional[str] = None
    loaded_count: int = 0
    expected_count: Optional[int] = None
    error: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        """HTTP response body for POST /scrape."""
        return {
            "data": [record.dict() for record in self.records],
            "requestedPageUrl": self.requested_url,
            "status": self.status.value,
            "availableAccommodationsCount": self.available_count,
            "loadedListingsCount": self.loaded_count,
            "elementText": self.element_text,
        }

    def summary(self) -> Dict[str, Any]:
        """Structured summary printed by the standalone runner."""
        return {
            "requestedPageUrl": self.requested_url,
            "status": self.status.value,
            "elementText": self.element_text,
            "availableAccommodationsCount": self.available_count,
            "loadedListingsCount": self.loaded_count,
            "accommodations": [record.dict() for record in self.records],
        }


class ScrapeRequest(BaseModel):
    """Body of POST /scrape; presence of the URL is checked by the route."""
    airbnb_url: Optional[str] = Field(None, alias="airbnbUrl")
    page: int = 0
