"""Error taxonomy surfaced by the logbook services."""


class FahrtenbuchError(Exception):
    """Base class for logbook errors."""


class PersistenceError(FahrtenbuchError):
    """Storage read, write or parse failure."""


class PhotoRelocationError(FahrtenbuchError):
    """Copying a captured photo into durable storage failed."""


class ExportUnavailableError(FahrtenbuchError):
    """No share surface is available, or sharing the export failed."""


class ImportParseError(FahrtenbuchError):
    """The import file could not be read."""


class EntryValidationError(FahrtenbuchError):
    """An entry draft is missing required data."""


class GeocodingError(FahrtenbuchError):
    """Reverse geocoding did not produce an address."""
