"""Yad2 real-estate scanner.

Reads listings from the search result pages at https://www.yad2.co.il/realestate.
The pages are rendered by Next.js, so the feed is taken from the embedded
`__NEXT_DATA__` JSON instead of the markup.
"""

import json
from typing import Any

from bs4 import BeautifulSoup
from pydantic import ValidationError as PydanticValidationError

from dirot.config import settings
from dirot.models import ScannedListing, ScanParams
from dirot.scanners.base import BaseScanner, ScanBlockedError

# Yad2 city codes
CITY_CODES: dict[str, str] = {
    "גבעתיים": "6300",
    "givatayim": "6300",
    "רמת גן": "8600",
    "ramat gan": "8600",
    "תל אביב": "5000",
    "תל אביב יפו": "5000",
    "tel aviv": "5000",
}

# Feed sections that hold listings
FEED_SECTIONS = ("private", "agency", "platinum", "yad1", "trio", "booster", "leadingBroker")

BLOCK_MARKERS = ("shieldsquare", "captcha", "are you for real")


def _rooms(item: dict[str, Any]) -> float | None:
    """Room count of a feed entry, if it is numeric."""
    rooms = (item.get("additionalDetails") or {}).get("roomsCount")
    try:
        return float(rooms) if rooms is not None else None
    except (TypeError, ValueError):
        return None


class Yad2Scanner(BaseScanner):
    """Scanner for Yad2 rent and sale listings."""

    def __init__(self, max_results: int = 10, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.max_results = max_results

    @property
    def name(self) -> str:
        """Scanner identifier."""
        return "yad2"

    @property
    def base_url(self) -> str:
        """Base URL for scanning."""
        return settings.yad2_base_url.rstrip("/")

    def search_url(self, params: ScanParams) -> str:
        """Search page for a property type."""
        section = "rent" if params.property_type == "rent" else "forsale"
        return f"{self.base_url}/{section}"

    def query_params(self, params: ScanParams, city_code: str) -> dict[str, str]:
        """Query string for one city."""
        query = {"city": city_code}
        if params.max_price is not None:
            query["maxPrice"] = str(params.max_price)
        if params.min_rooms is not None:
            query["minRooms"] = f"{params.min_rooms:g}"
        if params.max_rooms is not None:
            query["maxRooms"] = f"{params.max_rooms:g}"
        return query

    def scan(self, params: ScanParams) -> list[ScannedListing]:
        """Scan every requested area and return unique listings.

        Returns:
            At most `max_results` listings
        """
        listings: list[ScannedListing] = []
        seen_tokens: set[str] = set()

        for area in params.areas:
            city_code = CITY_CODES.get(area.strip().lower())
            if city_code is None:
                self.logger.warning("Unknown area %r, skipping", area)
                continue

            soup = self.fetch_html(self.search_url(params), self.query_params(params, city_code))
            for item in self._extract_feed(soup):
                token = str(item.get("token") or "")
                if not token or token in seen_tokens:
                    continue
                seen_tokens.add(token)

                listing = self._parse_item(item)
                if listing and self._matches(listing, item, params):
                    listings.append(listing)

        self.logger.info("Found %d listings", len(listings))
        return listings[: self.max_results]

    def _extract_feed(self, soup: BeautifulSoup) -> list[dict[str, Any]]:
        """Pull the listing dictionaries out of the embedded page data.

        Raises:
            ScanBlockedError: If the page is a bot check
        """
        script = soup.find("script", id="__NEXT_DATA__")
        if script is None or not script.string:
            text = soup.get_text(" ").lower()
            if any(marker in text for marker in BLOCK_MARKERS):
                raise ScanBlockedError("Yad2 answered with a captcha page")
            self.logger.warning("No __NEXT_DATA__ script found on the page")
            return []

        try:
            data = json.loads(script.string)
        except json.JSONDecodeError:
            self.logger.warning("Could not decode __NEXT_DATA__")
            return []

        queries = (
            data.get("props", {})
            .get("pageProps", {})
            .get("dehydratedState", {})
            .get("queries", [])
        )
        items: list[dict[str, Any]] = []
        for query in queries:
            feed = query.get("state", {}).get("data")
            if not isinstance(feed, dict):
                continue
            for section in FEED_SECTIONS:
                section_items = feed.get(section)
                if isinstance(section_items, list):
                    items.extend(i for i in section_items if isinstance(i, dict))
        return items

    def _parse_item(self, item: dict[str, Any]) -> ScannedListing | None:
        """Parse one feed entry into a listing."""
        address = item.get("address") or {}
        details = item.get("additionalDetails") or {}
        meta = item.get("metaData") or {}

        city = (address.get("city") or {}).get("text")
        neighborhood = (address.get("neighborhood") or {}).get("text")
        street = (address.get("street") or {}).get("text")
        house = address.get("house") or {}
        number = house.get("number")

        street_part = f"{street} {number}" if street and number else street
        location = ", ".join(part for part in (street_part, neighborhood, city) if part) or None

        rooms = _rooms(item)
        property_kind = (details.get("property") or {}).get("text") or "דירה"
        place = street or neighborhood or city
        if rooms and place:
            title = f"{property_kind} {rooms:g} חדרים ב{place}"
        elif place:
            title = f"{property_kind} ב{place}"
        else:
            self.logger.debug("Skipping listing %s without an address", item.get("token"))
            return None

        price = item.get("price")
        if isinstance(price, str):
            price = self.parse_price(price)

        floor = house.get("floor")
        if not isinstance(floor, (int, float)) or floor < 0:
            floor = None

        images = meta.get("images") or []
        image_url = meta.get("coverImage") or (images[0] if images else None)

        try:
            return ScannedListing(
                title=title,
                description=meta.get("description"),
                price=price,
                location=location,
                image_url=image_url,
                apartment_link=f"{self.base_url}/item/{item['token']}",
                square_meters=details.get("squareMeter"),
                floor=floor,
            )
        except PydanticValidationError as e:
            self.logger.warning("Skipping malformed listing %s: %s", item.get("token"), e)
            return None

    def _matches(self, listing: ScannedListing, item: dict[str, Any], params: ScanParams) -> bool:
        """Apply the filters again in case the site ignored some of them."""
        if params.max_price is not None and listing.price is not None:
            if listing.price > params.max_price:
                return False
        rooms = _rooms(item)
        if rooms is not None:
            if params.min_rooms is not None and rooms < params.min_rooms:
                return False
            if params.max_rooms is not None and rooms > params.max_rooms:
                return False
        return True
