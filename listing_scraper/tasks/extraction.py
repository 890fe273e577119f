"""
Listing field extraction from a rendered search page.

Extraction runs on an HTML snapshot of the page (``page.content()``) parsed
with BeautifulSoup, so the same snapshot always yields the same records.
Every field is optional; a listing node is skipped only when it has neither a
title nor a room id.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from ..config import ScraperConfig
from .base import clean_text

ROOM_ID_PATTERN = re.compile(r"/rooms/(\d+)")
RATING_TEXT_PATTERN = re.compile(r"(\d+[,.]\d+)\s*\(\s*(\d[\d.,]*)\s*\)")
ARIA_RATING_PATTERN = re.compile(r"(\d+[,.]\d+)\s*(?:de|out of|of|/)\s*5\b", re.IGNORECASE)
REVIEW_COUNT_PATTERN = re.compile(r"\(\s*(\d[\d.,]*)\s*\)")
PRICE_NUMBER_PATTERN = re.compile(r"\d[\d.]*(?:,\d+)?")


# ───────── text normalisation ─────────

def parse_price(text: Optional[str], currency_marker: str = "R$") -> Optional[float]:
    """'R$ 1.234,56' -> 1234.56 (dots are thousands, comma is decimal)."""
    if not text:
        return None
    stripped = clean_text(text.replace(currency_marker, " "))
    match = PRICE_NUMBER_PATTERN.search(stripped)
    if not match:
        return None
    number = match.group(0).replace(".", "").replace(",", ".")
    try:
        return float(number)
    except ValueError:
        return None


def parse_score(text: str) -> Optional[float]:
    try:
        score = float(text.replace(",", "."))
    except ValueError:
        return None
    return score if 0 <= score <= 5 else None


def parse_review_count(text: str) -> Optional[int]:
    digits = re.sub(r"[^0-9]", "", text)
    return int(digits) if digits else None


def parse_rating_text(text: Optional[str]) -> Tuple[Optional[float], Optional[int]]:
    """'4,85 (213)' -> (4.85, 213); (None, None) when the text does not match."""
    if not text:
        return None, None
    match = RATING_TEXT_PATTERN.search(text)
    if not match:
        return None, None
    return parse_score(match.group(1)), parse_review_count(match.group(2))


def extract_room_id(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    match = ROOM_ID_PATTERN.search(url)
    return match.group(1) if match else None


# ───────── rating layouts ─────────

@dataclass
class RatingReading:
    score: Optional[float] = None
    total_reviews: Optional[int] = None
    strategy: str = ""


class IconSiblingRating:
    """Star icon followed by text like '4,85 (213)'."""

    name = "icon_sibling"

    def __init__(self, icon_selector: str):
        self.icon_selector = icon_selector

    def read(self, node: Tag) -> Optional[RatingReading]:
        # Cards carry other aria-hidden icons (favourite, Superhost) before the star
        for icon in node.select(self.icon_selector):
            reading = self._read_icon(icon, node)
            if reading is not None:
                return reading
        return None

    def _read_icon(self, icon: Tag, node: Tag) -> Optional[RatingReading]:
        # The rating text is a sibling of the icon or of its wrapper span
        container = icon.parent
        for _ in range(3):
            if container is None or container is node:
                break
            score, reviews = parse_rating_text(clean_text(container.get_text(" ")))
            if score is not None:
                return RatingReading(score, reviews, self.name)
            container = container.parent
        return None


class AriaLabelRating:
    """Score inside an aria-label, review count in a separate '(213)' element.

    Only labels phrased as a rating ("4,7 de 5", "4.7 out of 5") count; price
    labels like "R$ 1.234 por noite" are skipped.
    """

    name = "aria_label"

    def __init__(self, label_selector: str, currency_marker: str = "R$"):
        self.label_selector = label_selector
        self.currency_marker = currency_marker

    def read(self, node: Tag) -> Optional[RatingReading]:
        score = None
        for element in node.select(self.label_selector):
            label = element.get("aria-label", "")
            if self.currency_marker and self.currency_marker in label:
                continue
            match = ARIA_RATING_PATTERN.search(label)
            if match:
                score = parse_score(match.group(1))
                if score is not None:
                    break
        if score is None:
            return None

        reviews = None
        for string in node.find_all(string=REVIEW_COUNT_PATTERN):
            reviews = parse_review_count(REVIEW_COUNT_PATTERN.search(string).group(1))
            if reviews is not None:
                break
        return RatingReading(score, reviews, self.name)


# ───────── extractor ─────────

@dataclass
class ExtractionResult:
    node_count: int = 0
    records: List[Dict[str, Any]] = field(default_factory=list)


class ListingExtractor:
    """Maps rendered listing nodes to listing record fields."""

    def __init__(self, config: ScraperConfig, logger: logging.Logger):
        self.config = config
        self.logger = logger
        self.rating_strategies = (
            IconSiblingRating(config.rating_icon_selector),
            AriaLabelRating(config.aria_rating_selector, config.currency_marker),
        )

    def extract(self, html: str, available_count: Optional[int] = None) -> ExtractionResult:
        soup = BeautifulSoup(html or "", "html.parser")
        nodes = soup.select(self.config.listing_selector)
        result = ExtractionResult(node_count=len(nodes))

        for index, node in enumerate(nodes):
            record = self.extract_node(node)
            if record is None:
                self.logger.debug(f"Skipping listing node {index + 1}: no title and no room id")
                continue
            record["availables_count"] = available_count
            result.records.append(record)

        self.logger.info(f"🏠 Listing nodes on screen: {result.node_count}, records extracted: {len(result.records)}")
        return result

    def extract_node(self, node: Tag) -> Optional[Dict[str, Any]]:
        title, room_id = self._identity(node)
        if title is None and room_id is None:
            return None

        rating = self._rating(node)
        return {
            "room_id": room_id,
            "title": title,
            "total_reviews": rating.total_reviews if rating else None,
            "score": rating.score if rating else None,
            "price": self._price(node),
        }

    def _identity(self, node: Tag) -> Tuple[Optional[str], Optional[str]]:
        title = None
        name_meta = node.select_one(self.config.name_selector)
        if name_meta is not None:
            title = clean_text(name_meta.get("content")) or None

        room_id = None
        url_meta = node.select_one(self.config.url_selector)
        if url_meta is not None:
            room_id = extract_room_id(url_meta.get("content"))
        if room_id is None:
            for anchor in node.select("a[href]"):
                room_id = extract_room_id(anchor.get("href"))
                if room_id:
                    break
        return title, room_id

    def _rating(self, node: Tag) -> Optional[RatingReading]:
        for strategy in self.rating_strategies:
            reading = strategy.read(node)
            if reading is not None:
                return reading
        return None

    def _price(self, node: Tag) -> Optional[float]:
        marker = self.config.currency_marker
        for element in node.select(self.config.price_selector):
            text = clean_text(element.get_text(" "))
            if marker in text:
                price = parse_price(text, marker)
                if price is not None:
                    return price

        for button in node.select(self.config.price_button_selector):
            for span in button.find_all("span"):
                text = clean_text(span.get_text(" "))
                if text.startswith(marker):
                    price = parse_price(text, marker)
                    if price is not None:
                        return price
        return None
