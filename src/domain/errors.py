"""Typed failures surfaced by the demo ingest pipeline.

Each failure records which file was being ingested and the pipeline stage
that was active, so the caller can mark the file and pick a retry policy.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path


class IngestStage(str, Enum):
    """Pipeline stages, in execution order."""

    VALIDATING = "validating"
    PARSING = "parsing"
    DEDUPING = "deduping"
    PERSISTING_MAP = "persisting_map"
    PERSISTING_DEMO = "persisting_demo"
    PERSISTING_ALLY_TEAMS = "persisting_ally_teams"
    PERSISTING_PARTICIPANTS = "persisting_participants"
    PERSISTING_AIS = "persisting_ais"
    COMPLETE = "complete"


class DemoIngestError(Exception):
    """Base exception for a failed ingestion of one file."""

    retryable = False

    def __init__(
        self,
        message: str,
        *,
        file_path: Path | str | None = None,
        stage: IngestStage | None = None,
    ) -> None:
        super().__init__(message)
        self.file_path = None if file_path is None else Path(file_path)
        self.stage = stage

    def __str__(self) -> str:
        message = super().__str__()
        context = []
        if self.file_path is not None:
            context.append(f"file={self.file_path.name}")
        if self.stage is not None:
            context.append(f"stage={self.stage.value}")
        if not context:
            return message
        return f"{message} ({' '.join(context)})"


class FileTooLarge(DemoIngestError):
    """Raised when a replay exceeds the configured size limit."""

    def __init__(self, size_bytes: int, max_bytes: int, **kwargs) -> None:
        super().__init__(
            f"Replay is {size_bytes} bytes, limit is {max_bytes} bytes",
            **kwargs,
        )
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class ParseFailure(DemoIngestError):
    """Raised for malformed or unsupported replay records."""


class StorageConflict(DemoIngestError):
    """Raised on a unique-constraint violation, e.g. a concurrent ingest of the same game."""

    retryable = True


class StorageUnavailable(DemoIngestError):
    """Raised when the database cannot be reached or drops the connection."""

    retryable = True


__all__ = [
    "DemoIngestError",
    "FileTooLarge",
    "IngestStage",
    "ParseFailure",
    "StorageConflict",
    "StorageUnavailable",
]
