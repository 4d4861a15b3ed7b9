from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Set

from ..flags import FlagRegistry
from ..models import Region, RegionDifference


class RegionDatabase(ABC):
    """A named store holding one complete collection of regions."""

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def load_all(self, flag_registry: FlagRegistry) -> Set[Region]:
        """Load every region. Parent links are resolved before returning."""

    @abstractmethod
    def save_all(self, regions: Set[Region]) -> None:
        """Replace the stored collection with ``regions``."""

    @abstractmethod
    def save_changes(self, difference: RegionDifference) -> None:
        """Persist only what changed.

        Raises:
            DifferenceSaveError: the backend only supports full saves; call
                :meth:`save_all` instead.
        """
