"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from fahrtenbuch.config import Settings
from fahrtenbuch.containers import AppContainer
from fahrtenbuch.services.csv_export import CsvExporter, ShareTarget
from fahrtenbuch.services.csv_import import CsvImporter
from fahrtenbuch.services.entries import EntryStore, KeyValueStorage
from fahrtenbuch.services.locations import LocationService, ReverseGeocoder
from fahrtenbuch.services.photos import FileSystem, PhotoSidecarManager

PHOTOS_DIR = "/data/photos"
BACKUP_DIR = "/data/backups"
STORAGE_KEY = "@fahrtenbuch_entries"
BERLIN = ZoneInfo("Europe/Berlin")


@dataclass
class InMemoryKeyValueStorage(KeyValueStorage):
    """In-memory key-value storage for tests."""

    values: dict[str, str] = field(default_factory=dict)
    fail_reads: bool = False
    fail_writes: bool = False
    writes: int = 0

    async def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise OSError("storage unavailable")
        await asyncio.sleep(0)
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.values[key] = value


@dataclass
class InMemoryFileSystem(FileSystem):
    """In-memory filesystem for tests."""

    files: dict[str, str] = field(default_factory=dict)
    directories: set[str] = field(default_factory=set)
    fail_copy: bool = False
    fail_write: bool = False

    async def exists(self, uri: str) -> bool:
        return uri in self.files or uri in self.directories

    async def make_directory(self, uri: str) -> None:
        self.directories.add(uri)

    async def copy(self, source_uri: str, target_uri: str) -> None:
        if self.fail_copy:
            raise OSError("copy failed")
        self.files[target_uri] = self.files[source_uri]

    async def delete(self, uri: str) -> None:
        self.files.pop(uri, None)

    async def read_text(self, uri: str) -> str:
        if uri not in self.files:
            raise FileNotFoundError(uri)
        return self.files[uri]

    async def write_text(self, uri: str, content: str) -> None:
        if self.fail_write:
            raise OSError("read-only filesystem")
        self.files[uri] = content


@dataclass
class FakeShareTarget(ShareTarget):
    """Share target that records shared files."""

    available: bool = True
    shared: list[tuple[str, str]] = field(default_factory=list)

    async def is_available(self) -> bool:
        return self.available

    async def share(self, path: str, mime_type: str) -> None:
        self.shared.append((path, mime_type))


@dataclass
class FakeReverseGeocoder(ReverseGeocoder):
    """Reverse geocoder returning fixed components."""

    components: dict[str, str] | None = field(
        default_factory=lambda: {
            "street": "Hauptstraße",
            "streetNumber": "5",
            "postalCode": "10115",
            "city": "Berlin",
        }
    )
    calls: list[tuple[float, float]] = field(default_factory=list)

    async def reverse(self, latitude: float, longitude: float) -> dict[str, str] | None:
        self.calls.append((latitude, longitude))
        return self.components


def fixed_clock() -> datetime:
    return datetime(2024, 2, 1, 9, 30, tzinfo=UTC)


def draft_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "timestamp": "2024-01-15T10:00:00Z",
        "mileage": "1000",
        "location": {"latitude": 12.3, "longitude": 45.6, "address": "Main St"},
        "photoUri": "/cache/camera/capture.jpg",
        "purpose": "Kundenbesuch",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def file_system() -> InMemoryFileSystem:
    return InMemoryFileSystem(files={"/cache/camera/capture.jpg": "jpeg-bytes"})


@pytest.fixture
def share_target() -> FakeShareTarget:
    return FakeShareTarget()


@pytest.fixture
def photos(file_system: InMemoryFileSystem) -> PhotoSidecarManager:
    return PhotoSidecarManager(file_system=file_system, photos_dir=PHOTOS_DIR)


@pytest.fixture
def entry_store(
    storage: InMemoryKeyValueStorage, photos: PhotoSidecarManager
) -> EntryStore:
    return EntryStore(storage=storage, photos=photos, storage_key=STORAGE_KEY)


@pytest.fixture
def exporter(
    entry_store: EntryStore,
    file_system: InMemoryFileSystem,
    share_target: FakeShareTarget,
) -> CsvExporter:
    return CsvExporter(
        store=entry_store,
        file_system=file_system,
        share_target=share_target,
        backup_dir=BACKUP_DIR,
        timezone=BERLIN,
        clock=fixed_clock,
    )


@pytest.fixture
def importer(entry_store: EntryStore, file_system: InMemoryFileSystem) -> CsvImporter:
    return CsvImporter(store=entry_store, file_system=file_system, timezone=BERLIN)


@pytest.fixture
def geocoder() -> FakeReverseGeocoder:
    return FakeReverseGeocoder()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=tmp_path / "data", share_outbox_dir=tmp_path / "outbox")


@pytest.fixture
def container(
    settings: Settings,
    entry_store: EntryStore,
    exporter: CsvExporter,
    importer: CsvImporter,
    geocoder: FakeReverseGeocoder,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        entry_store=entry_store,
        exporter=exporter,
        importer=importer,
        location_service=LocationService(geocoder),
        close_resources=close_resources,
    )


@pytest.fixture
def make_draft():
    return draft_payload
