"""Replay ingest domain modules."""

from domain.errors import (
    DemoIngestError,
    FileTooLarge,
    IngestStage,
    ParseFailure,
    StorageConflict,
    StorageUnavailable,
)
from domain.preset import Preset, classify_preset

__all__ = [
    "DemoIngestError",
    "FileTooLarge",
    "IngestStage",
    "ParseFailure",
    "Preset",
    "StorageConflict",
    "StorageUnavailable",
    "classify_preset",
]
