from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Set, Union

import yaml

from ..codec import decode_region, encode_region
from ..diagnostics import dump_entry
from ..errors import DifferenceSaveError, EntryDecodeError, StorageError, UnknownRegionTypeError
from ..flags import FlagRegistry
from ..models import Region, RegionDifference
from ..parents import relink_parents
from ..tree import TreeNode
from .base import RegionDatabase

logger = logging.getLogger(__name__)

FILE_HEADER = (
    "#\n"
    "# Region store regions file\n"
    "#\n"
    "# WARNING: THIS FILE IS AUTOMATICALLY GENERATED. If you modify this file by\n"
    "# hand, be aware that A SINGLE MISTYPED CHARACTER CAN CORRUPT THE FILE. If\n"
    "# the region store is unable to parse the file, your regions will FAIL TO LOAD and\n"
    "# the contents of this file will reset. Please use a YAML validator such as\n"
    "# http://yaml-online-parser.appspot.com (for smaller files).\n"
    "#\n"
    "# REMEMBER TO KEEP PERIODICAL BACKUPS.\n"
    "#"
)


@dataclass
class YamlFileOptions:
    """
    Output settings for a YAML region file.

    - indent: block indentation of the written YAML (default 4)
    - temp_suffix: suffix appended to the file name for the temporary file
    - fsync: flush the temporary file to disk before it replaces the target
    - header: comment block written at the top of every saved file
    """

    indent: int = 4
    temp_suffix: str = ".tmp"
    fsync: bool = True
    header: str = FILE_HEADER


class YamlRegionFile(RegionDatabase):
    """Stores a complete region collection in one YAML file.

    Saving writes ``<file>.tmp`` beside the target and then renames it over
    the target. ``os.replace`` makes that rename atomic when both paths are
    on the same volume. If the platform refuses it (for example a target
    held open on Windows) the target is deleted and the temporary file is
    renamed in its place; a crash between those two steps leaves no target
    file, which a later load reports as an empty store.

    Callers must serialise loads and saves against the same path.
    """

    def __init__(
        self,
        name: str,
        path: Union[str, Path],
        options: Optional[YamlFileOptions] = None,
        log: Optional[logging.Logger] = None,
    ) -> None:
        if name is None:
            raise ValueError("name is required")
        if path is None:
            raise ValueError("path is required")
        self._name = name
        self.path = Path(path)
        self.options = options or YamlFileOptions()
        self.log = log or logger

    @property
    def name(self) -> str:
        return self._name

    @property
    def temp_path(self) -> Path:
        return self.path.with_name(self.path.name + self.options.temp_suffix)

    # Loading

    def load_all(self, flag_registry: FlagRegistry) -> Set[Region]:
        root = self._read_tree()
        if root is None:
            return set()

        region_data = root.get_nodes("regions")
        if region_data is None:
            return set()

        loaded: Dict[str, Region] = {}
        parent_ids: Dict[str, str] = {}

        for region_id, raw in region_data.items():
            if not isinstance(raw, dict):
                self.log.warning(
                    "Region '%s' is not a mapping and will be skipped!\n"
                    "Here is what the region data looks like:\n\n%s\n",
                    region_id,
                    dump_entry(raw),
                )
                continue

            node = TreeNode(raw)
            if node.get_string("type") is None:
                self.log.warning(
                    "Undefined region type for region '%s'!\n"
                    "Here is what the region data looks like:\n\n%s\n",
                    region_id,
                    dump_entry(raw),
                )
                continue

            try:
                region = decode_region(region_id, node, flag_registry, self.log)
            except UnknownRegionTypeError as exc:
                self.log.warning(
                    "Unknown region type '%s' for region '%s'!\n"
                    "Here is what the region data looks like:\n\n%s\n",
                    exc.type_tag,
                    region_id,
                    dump_entry(raw),
                )
                continue
            except EntryDecodeError as exc:
                self.log.warning(
                    "Failed to parse the region '%s': %s\n"
                    "Here is what the region data looks like:\n\n%s\n\n"
                    "Note: This region will disappear as a result!",
                    region_id,
                    exc,
                    dump_entry(raw),
                )
                continue

            loaded[region_id] = region
            parent_id = node.get_string("parent")
            if parent_id is not None:
                parent_ids[region_id] = parent_id

        relink_parents(loaded, parent_ids, self.log)
        self.log.debug("Loaded %d regions from %s", len(loaded), self.path)
        return set(loaded.values())

    def _read_tree(self) -> Optional[TreeNode]:
        """Parse the file. Returns None when there is no file yet."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            self.log.debug("Region file does not exist: %s", self.path)
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Failed to load region data from '{self.path}': {exc}", self.path) from exc

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise StorageError(f"Failed to load region data from '{self.path}': {exc}", self.path) from exc

        if data is None:
            return TreeNode()
        if not isinstance(data, dict):
            raise StorageError(
                f"Failed to load region data from '{self.path}': root document must be a mapping",
                self.path,
            )
        return TreeNode(data)

    # Saving

    def save_all(self, regions: Set[Region]) -> None:
        if regions is None:
            raise ValueError("regions is required")

        region_map: Dict[str, Any] = {}
        for region in sorted(regions, key=lambda r: r.id):
            if region.id in region_map:
                self.log.warning("Duplicate region id '%s'; keeping the last one", region.id)
            region_map[region.id] = encode_region(region)

        try:
            body = yaml.safe_dump(
                {"regions": region_map},
                indent=self.options.indent,
                default_flow_style=None,
                sort_keys=False,
                allow_unicode=True,
            )
        except yaml.YAMLError as exc:
            raise StorageError(f"Failed to encode region data for '{self.path}': {exc}", self.path) from exc

        self._write_temp(self.options.header + "\n" + body)
        self._replace_target()
        self.log.debug("Saved %d regions to %s", len(region_map), self.path)

    def _write_temp(self, text: str) -> None:
        tmp = self.temp_path
        try:
            tmp.parent.mkdir(parents=True, exist_ok=True)
            with tmp.open("w", encoding="utf-8", newline="\n") as fh:
                fh.write(text)
                fh.flush()
                if self.options.fsync:
                    os.fsync(fh.fileno())
        except OSError as exc:
            raise StorageError(f"Failed to write temporary regions file {tmp}: {exc}", tmp) from exc

    def _replace_target(self) -> None:
        tmp = self.temp_path
        try:
            os.replace(tmp, self.path)
            return
        except OSError as exc:
            self.log.debug("Atomic replace of %s failed (%s); deleting target first", self.path, exc)

        try:
            self.path.unlink()
        except OSError:
            self.log.debug("Could not delete %s before rename", self.path, exc_info=True)
        try:
            os.rename(tmp, self.path)
        except OSError as exc:
            target = self.path.absolute()
            raise StorageError(f"Failed to rename temporary regions file to {target}", target) from exc

    def save_changes(self, difference: RegionDifference) -> None:
        raise DifferenceSaveError("Incremental saves are not supported by the YAML region file", self.path)
