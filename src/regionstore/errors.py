from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class RegionStoreError(Exception):
    """Base error for region storage."""


class StorageError(RegionStoreError):
    """Raised when a region file cannot be read, parsed or replaced."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class DifferenceSaveError(StorageError):
    """Raised by backends that can only save a complete snapshot."""


class EntryDecodeError(RegionStoreError):
    """A single region entry could not be decoded. Recoverable at load time."""


class MissingValueError(EntryDecodeError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing or invalid required value '{key}'")


class UnknownRegionTypeError(EntryDecodeError):
    def __init__(self, type_tag: str):
        self.type_tag = type_tag
        super().__init__(f"Unknown region type '{type_tag}'")


class FlagConflictError(RegionStoreError):
    """Raised when two flags are registered under the same name."""
