from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .yaml_file import YamlFileOptions, YamlRegionFile

logger = logging.getLogger(__name__)


class YamlFileDriver:
    """Hands out one YAML region file per store under a root directory.

    Stores live at ``<root>/worlds/<name>/<filename>``.
    """

    def __init__(
        self,
        root_dir: Union[str, Path],
        filename: str = "regions.yml",
        options: Optional[YamlFileOptions] = None,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.filename = filename
        self.options = options

    @property
    def worlds_dir(self) -> Path:
        return self.root_dir / "worlds"

    def path_for(self, name: str) -> Path:
        return self.worlds_dir / name / self.filename

    def get(self, name: str) -> YamlRegionFile:
        return YamlRegionFile(name, self.path_for(name), options=self.options)

    def get_all(self) -> List[YamlRegionFile]:
        """Return a store for every world directory that holds a region file."""
        if not self.worlds_dir.is_dir():
            return []
        stores: List[YamlRegionFile] = []
        for child in sorted(self.worlds_dir.iterdir()):
            if child.is_dir() and (child / self.filename).is_file():
                stores.append(self.get(child.name))
        logger.debug("Found %d region stores under %s", len(stores), self.worlds_dir)
        return stores
