"""Listing scanners for external real-estate sites."""

from dirot.scanners.base import BaseScanner, ScanBlockedError
from dirot.scanners.yad2 import Yad2Scanner

# Register all scanners here
SCANNERS: dict[str, type[BaseScanner]] = {
    "yad2": Yad2Scanner,
}


def get_scanner(name: str = "yad2") -> BaseScanner:
    """
    Create a scanner by name.

    Raises:
        KeyError: If no scanner has this name
    """
    return SCANNERS[name]()


__all__ = ["SCANNERS", "BaseScanner", "ScanBlockedError", "Yad2Scanner", "get_scanner"]
