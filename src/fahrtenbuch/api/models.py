"""Pydantic request and response models for the HTTP API."""

from pydantic import BaseModel


class ImportRequest(BaseModel):
    """Import a CSV file available on the server."""

    path: str


class ImportResponse(BaseModel):
    """Counts reported after an import."""

    imported: int
    skipped: int


class ExportResponse(BaseModel):
    """Location of the written export file."""

    path: str


class ManualLocationRequest(BaseModel):
    """Typed address used when no position is available."""

    address: str
