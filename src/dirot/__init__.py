"""Dirot - shared apartment hunting tracker for two."""

__version__ = "0.1.0"

from dirot.models import Apartment, ApartmentDraft, ApartmentPatch, ScannedApartment

__all__ = ["Apartment", "ApartmentDraft", "ApartmentPatch", "ScannedApartment", "__version__"]
