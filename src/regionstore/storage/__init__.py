from .base import RegionDatabase
from .driver import YamlFileDriver
from .yaml_file import FILE_HEADER, YamlFileOptions, YamlRegionFile

__all__ = [
    "RegionDatabase",
    "YamlFileDriver",
    "YamlFileOptions",
    "YamlRegionFile",
    "FILE_HEADER",
]
