"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from fahrtenbuch.api.models import (
    ExportResponse,
    ImportRequest,
    ImportResponse,
    ManualLocationRequest,
)
from fahrtenbuch.app_logging import configure_logging
from fahrtenbuch.containers import AppContainer
from fahrtenbuch.domain.errors import (
    EntryValidationError,
    ExportUnavailableError,
    FahrtenbuchError,
    GeocodingError,
    ImportParseError,
    PersistenceError,
    PhotoRelocationError,
)
from fahrtenbuch.services.entries import parse_draft

_ERROR_STATUS: dict[type[FahrtenbuchError], int] = {
    EntryValidationError: 422,
    PhotoRelocationError: 422,
    ImportParseError: status.HTTP_400_BAD_REQUEST,
    ExportUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    GeocodingError: status.HTTP_502_BAD_GATEWAY,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(FahrtenbuchError)
    async def handle_domain_error(
        request: Request, exc: FahrtenbuchError
    ) -> JSONResponse:
        status_code = _status_for(exc)
        logger.warning(
            "%s %s failed: %s: %s",
            request.method,
            request.url.path,
            type(exc).__name__,
            exc,
        )
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/entries")
    async def list_entries(request: Request) -> list[dict[str, object]]:
        """Return all entries in creation order."""
        state_container: AppContainer = request.app.state.container
        entries = await state_container.entry_store.list()
        return [entry.to_payload() for entry in entries]

    @app.post("/entries", status_code=status.HTTP_201_CREATED)
    async def create_entry(
        payload: dict[str, Any], request: Request
    ) -> dict[str, object]:
        """Validate and save a new entry."""
        state_container: AppContainer = request.app.state.container
        draft = parse_draft(payload)
        entry = await state_container.entry_store.save(draft)
        return entry.to_payload()

    @app.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(entry_id: str, request: Request) -> Response:
        """Delete an entry and its photo."""
        state_container: AppContainer = request.app.state.container
        await state_container.entry_store.delete(entry_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/export")
    async def export_entries(request: Request) -> ExportResponse:
        """Write the CSV export and hand it to the share target."""
        state_container: AppContainer = request.app.state.container
        path = await state_container.exporter.export()
        return ExportResponse(path=path)

    @app.post("/import")
    async def import_entries(body: ImportRequest, request: Request) -> ImportResponse:
        """Replace all entries with the contents of a CSV file."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.importer.import_file(body.path)
        return ImportResponse(imported=result.imported, skipped=result.skipped)

    @app.get("/locations/reverse")
    async def reverse_location(
        latitude: float, longitude: float, request: Request
    ) -> dict[str, object]:
        """Resolve coordinates into a location with an address."""
        state_container: AppContainer = request.app.state.container
        location = await state_container.location_service.resolve(latitude, longitude)
        return location.model_dump()

    @app.post("/locations/manual")
    async def manual_location(
        body: ManualLocationRequest, request: Request
    ) -> dict[str, object]:
        """Build a location from a typed address."""
        state_container: AppContainer = request.app.state.container
        location = state_container.location_service.manual(body.address)
        return location.model_dump()

    return app


def _status_for(exc: FahrtenbuchError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR
