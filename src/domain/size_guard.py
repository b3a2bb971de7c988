"""Reject oversized replay files before they reach the parser."""

from __future__ import annotations

from pathlib import Path

from domain.errors import FileTooLarge, IngestStage

BYTES_PER_MIB = 1_048_576
DEFAULT_MAX_FILE_SIZE_BYTES = 20 * BYTES_PER_MIB


def check_file_size(size_bytes: int, max_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES) -> None:
    """Raise FileTooLarge when ``size_bytes`` is over the limit; the limit itself is allowed."""
    if size_bytes > max_bytes:
        raise FileTooLarge(size_bytes, max_bytes, stage=IngestStage.VALIDATING)


def ensure_file_within_limit(file_path: Path, max_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES) -> int:
    """Stat ``file_path`` and apply the size check. Returns the size in bytes."""
    size_bytes = file_path.stat().st_size
    try:
        check_file_size(size_bytes, max_bytes)
    except FileTooLarge as exc:
        exc.file_path = file_path
        raise
    return size_bytes


__all__ = [
    "BYTES_PER_MIB",
    "DEFAULT_MAX_FILE_SIZE_BYTES",
    "check_file_size",
    "ensure_file_within_limit",
]
