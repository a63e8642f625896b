"""
Gallery - in-memory list of worlds, newest first. Nothing is persisted.
"""

import logging
from typing import Iterable, Iterator, Optional

from world_studio.core.catalog import Catalog, get_catalog
from world_studio.core.models import WorldEntry

logger = logging.getLogger(__name__)


class Gallery:
    """Volatile collection of WorldEntry, newest first."""

    def __init__(self, worlds: Optional[Iterable[WorldEntry]] = None):
        self._worlds: list[WorldEntry] = list(worlds or [])

    @classmethod
    def with_seed_worlds(cls, catalog: Optional[Catalog] = None) -> "Gallery":
        catalog = catalog or get_catalog()
        return cls(catalog.seed_worlds)

    def __iter__(self) -> Iterator[WorldEntry]:
        return iter(self._worlds)

    def __len__(self) -> int:
        return len(self._worlds)

    @property
    def worlds(self) -> tuple[WorldEntry, ...]:
        return tuple(self._worlds)

    def add(self, world: WorldEntry) -> None:
        """Prepend a newly created world."""
        self._worlds.insert(0, world)
        logger.info(f"Gallery: added {world.id} ({world.title!r}), {len(self._worlds)} worlds")

    def get(self, world_id: str) -> Optional[WorldEntry]:
        for world in self._worlds:
            if world.id == world_id:
                return world
        return None

    def tagged(self, tag: str) -> list[WorldEntry]:
        """Worlds carrying ``tag`` (case-insensitive), newest first."""
        wanted = tag.casefold()
        return [w for w in self._worlds if any(t.casefold() == wanted for t in w.tags)]
