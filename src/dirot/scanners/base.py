"""Base scanner class."""

import logging
import re
from abc import ABC, abstractmethod

import httpx
from bs4 import BeautifulSoup

from dirot.config import settings
from dirot.models import ScannedListing, ScanParams


class ScanBlockedError(Exception):
    """The listing site answered with a bot check instead of results."""


class BaseScanner(ABC):
    """Abstract base class for listing scanners."""

    def __init__(self, client: httpx.Client | None = None) -> None:
        """Initialize the scanner."""
        self.client = client or httpx.Client(
            timeout=settings.request_timeout,
            headers={"User-Agent": settings.user_agent},
            follow_redirects=True,
        )
        self.logger = self._get_logger()

    def _get_logger(self) -> logging.Logger:
        """Get logger for this scanner."""
        return logging.getLogger(f"dirot.scanners.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Scanner name identifier."""
        ...

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Base URL for the scanning target."""
        ...

    @abstractmethod
    def scan(self, params: ScanParams) -> list[ScannedListing]:
        """
        Collect candidate listings matching the filters.

        Args:
            params: Search filters

        Returns:
            Listings found (possibly empty)

        Raises:
            httpx.HTTPError: If a request fails
            ScanBlockedError: If the site refused to serve results
        """
        ...

    def parse_price(self, price_str: str) -> float | None:
        """
        Parse price string to float.

        Args:
            price_str: String such as "5,600 ₪"

        Returns:
            Price as float or None if parsing fails
        """
        cleaned = re.sub(r"[₪$\s,]", "", price_str)
        match = re.search(r"\d+\.?\d*", cleaned)
        if match:
            try:
                return float(match.group())
            except ValueError:
                return None
        return None

    def fetch_html(self, url: str, params: dict[str, str] | None = None) -> BeautifulSoup:
        """
        Fetch and parse HTML from a URL.

        Args:
            url: URL to fetch
            params: Query parameters

        Returns:
            BeautifulSoup object

        Raises:
            httpx.HTTPError: If request fails
        """
        response = self.client.get(url, params=params)
        response.raise_for_status()
        return BeautifulSoup(response.text, "lxml")

    def __enter__(self) -> "BaseScanner":
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit - cleanup resources."""
        self.client.close()

    def close(self) -> None:
        """Close HTTP client and cleanup resources."""
        self.client.close()
