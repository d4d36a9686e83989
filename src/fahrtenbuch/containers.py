"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fahrtenbuch.adapters.file_storage import FileKeyValueStorage
from fahrtenbuch.adapters.local_filesystem import LocalFileSystem
from fahrtenbuch.adapters.nominatim_geocoder import HttpxNominatimGeocoder
from fahrtenbuch.adapters.share_targets import DirectoryShareTarget, HttpxShareTarget
from fahrtenbuch.config import Settings
from fahrtenbuch.services.csv_export import CsvExporter, ShareTarget
from fahrtenbuch.services.csv_import import CsvImporter
from fahrtenbuch.services.entries import EntryStore
from fahrtenbuch.services.locations import LocationService
from fahrtenbuch.services.photos import PhotoSidecarManager


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    entry_store: EntryStore
    exporter: CsvExporter
    importer: CsvImporter
    location_service: LocationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    file_system = LocalFileSystem()
    storage = FileKeyValueStorage(resolved_settings.storage_dir)
    photos = PhotoSidecarManager(
        file_system=file_system, photos_dir=str(resolved_settings.photos_dir)
    )
    entry_store = EntryStore(
        storage=storage,
        photos=photos,
        storage_key=resolved_settings.storage_key,
    )
    http_share_target = HttpxShareTarget.create(resolved_settings.share_webhook_url)
    share_target: ShareTarget = http_share_target
    if not resolved_settings.share_webhook_url:
        share_target = DirectoryShareTarget(resolved_settings.share_outbox_dir)
    exporter = CsvExporter(
        store=entry_store,
        file_system=file_system,
        share_target=share_target,
        backup_dir=str(resolved_settings.backup_dir),
        timezone=resolved_settings.zone,
    )
    importer = CsvImporter(
        store=entry_store,
        file_system=file_system,
        timezone=resolved_settings.zone,
    )
    geocoder = HttpxNominatimGeocoder.create(
        base_url=resolved_settings.geocoder_base_url,
        user_agent=resolved_settings.geocoder_user_agent,
    )
    location_service = LocationService(geocoder)

    async def close_resources() -> None:
        await http_share_target.close()
        await geocoder.close()

    return AppContainer(
        settings=resolved_settings,
        entry_store=entry_store,
        exporter=exporter,
        importer=importer,
        location_service=location_service,
        close_resources=close_resources,
    )
