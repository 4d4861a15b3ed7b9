"""YAML-backed storage for geometric access-control regions.

This package provides:
- Region, Domain and geometry models (cuboid, 2D polygon, global)
- A codec between the YAML tree and typed regions that drops broken
  entries with a warning instead of failing the whole load
- YamlRegionFile, a store that saves through a temporary file and an
  atomic rename, and YamlFileDriver to locate one store per world
"""

from .errors import (
    DifferenceSaveError,
    EntryDecodeError,
    FlagConflictError,
    MissingValueError,
    RegionStoreError,
    StorageError,
    UnknownRegionTypeError,
)
from .flags import Flag, FlagRegistry, State, default_registry
from .geometry import Cuboid, Global, Polygonal, RegionGeometry
from .logging_config import configure_logging
from .models import Domain, Region, RegionDifference
from .storage import FILE_HEADER, RegionDatabase, YamlFileDriver, YamlFileOptions, YamlRegionFile
from .vectors import BlockVector2, BlockVector3

__all__ = [
    "BlockVector2",
    "BlockVector3",
    "Cuboid",
    "DifferenceSaveError",
    "Domain",
    "EntryDecodeError",
    "FILE_HEADER",
    "Flag",
    "FlagConflictError",
    "FlagRegistry",
    "Global",
    "MissingValueError",
    "Polygonal",
    "Region",
    "RegionDatabase",
    "RegionDifference",
    "RegionGeometry",
    "RegionStoreError",
    "State",
    "StorageError",
    "UnknownRegionTypeError",
    "YamlFileDriver",
    "YamlFileOptions",
    "YamlRegionFile",
    "configure_logging",
    "default_registry",
]
