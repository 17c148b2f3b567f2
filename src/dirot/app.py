"""Wiring: builds every component once from the settings."""

import logging
from dataclasses import dataclass
from datetime import timedelta

from dirot.advisor import ApartmentAdvisor
from dirot.auth import AccessAuthority, AccessSession
from dirot.config import Settings, settings
from dirot.notifications import Notifier
from dirot.repository import ApartmentRepository
from dirot.scan_import import ScanImporter
from dirot.session import LocalSessionState
from dirot.store import BlobStorage, JSONStore, LocalBlobStorage, RecordStore, RestStore
from dirot.store.blobs import SupabaseBlobStorage
from dirot.viewmodel import ApartmentViewModel, ScannedViewModel

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Every long-lived component of one running application."""

    settings: Settings
    store: RecordStore
    blobs: BlobStorage
    notifier: Notifier
    authority: AccessAuthority | None
    state: LocalSessionState
    session: AccessSession
    repository: ApartmentRepository
    importer: ScanImporter
    advisor: ApartmentAdvisor
    apartments: ApartmentViewModel
    scanned: ScannedViewModel

    def close(self) -> None:
        """Wait for pending notifications and release network clients."""
        self.notifier.shutdown()
        self.advisor.close()
        self.blobs.close()
        self.store.close()

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def create_store(config: Settings) -> RecordStore:
    """Hosted store when configured, local JSON file otherwise."""
    if config.use_remote_store:
        logger.debug("Using hosted record store at %s", config.supabase_url)
        return RestStore(config.supabase_url or "", config.supabase_key or "")
    return JSONStore(config.data_dir / "dirot.json")


def create_blobs(config: Settings) -> BlobStorage:
    """Hosted storage buckets when configured, a local directory otherwise."""
    if config.use_remote_store:
        return SupabaseBlobStorage(config.supabase_url or "", config.supabase_key or "")
    return LocalBlobStorage(config.data_dir / "uploads")


def create_authority(config: Settings) -> AccessAuthority | None:
    """Access gate, or None when no shared password is configured."""
    if not config.access_password:
        return None
    return AccessAuthority(
        config.access_password,
        secret=config.token_secret,
        ttl=timedelta(hours=config.token_ttl_hours),
    )


def create_context(config: Settings | None = None, dry_run: bool = False) -> AppContext:
    """
    Build the application.

    Args:
        config: Settings to use (defaults to the global settings)
        dry_run: Log notifications instead of sending them

    Returns:
        Fully wired AppContext
    """
    config = config or settings

    store = create_store(config)
    blobs = create_blobs(config)
    notifier = Notifier(dry_run=dry_run)
    authority = create_authority(config)
    state = LocalSessionState(config.data_dir / "session.json")
    session = AccessSession(state, authority)

    repository = ApartmentRepository(
        store,
        blobs,
        notifier,
        authority,
        buckets=list(config.storage_buckets),
        couple_id=config.couple_id,
    )
    importer = ScanImporter(store, repository)
    advisor = ApartmentAdvisor(
        api_key=config.openai_api_key,
        base_url=config.openai_base_url,
        model=config.openai_model,
        vision_model=config.openai_vision_model,
    )

    apartments = ApartmentViewModel(repository, session, notifier)
    scanned = ScannedViewModel(importer, session, apartments)

    return AppContext(
        settings=config,
        store=store,
        blobs=blobs,
        notifier=notifier,
        authority=authority,
        state=state,
        session=session,
        repository=repository,
        importer=importer,
        advisor=advisor,
        apartments=apartments,
        scanned=scanned,
    )


__all__ = ["AppContext", "create_authority", "create_blobs", "create_context", "create_store"]
