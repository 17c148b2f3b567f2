"""Record and blob storage backends."""

from dirot.store.base import (
    APARTMENTS,
    DELETED_APARTMENTS,
    SCANNED_APARTMENTS,
    RecordStore,
    Row,
)
from dirot.store.blobs import BlobStorage, LocalBlobStorage, SupabaseBlobStorage
from dirot.store.json_store import JSONStore
from dirot.store.rest import RestStore

__all__ = [
    "APARTMENTS",
    "DELETED_APARTMENTS",
    "SCANNED_APARTMENTS",
    "BlobStorage",
    "JSONStore",
    "LocalBlobStorage",
    "RecordStore",
    "RestStore",
    "Row",
    "SupabaseBlobStorage",
]
