from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Optional

from pydantic import TypeAdapter

from .config import BASEMAPS
from .errors import UnknownSourceError
from .models import AnyTileSource, TileAddress, TileSource

logger = logging.getLogger(__name__)

_SOURCES_ADAPTER = TypeAdapter(List[AnyTileSource])


class TileSourceRegistry:
    """
    In-memory table of basemaps keyed by name, plus the active one.
    """

    def __init__(self, sources: Iterable[TileSource] = ()) -> None:
        self._sources: dict[str, TileSource] = {}
        self._active: Optional[TileSource] = None
        self._active_name: Optional[str] = None
        for source in sources:
            self.register(source)

    def register(self, name_or_source: str | TileSource, source: Optional[TileSource] = None) -> None:
        """
        register(source) keys by ``source.name``; register(name, source) uses
        the explicit name. Existing entries are overwritten in place.
        """
        if isinstance(name_or_source, TileSource):
            source = name_or_source
            name = source.name
        else:
            name = name_or_source
        if not isinstance(source, TileSource):
            raise TypeError(f"register() needs a tile source, got {source!r}")
        self._sources[name] = source
        if self._active_name == name:
            self._active = source

    @staticmethod
    def resolve_url(source: TileSource, address: TileAddress) -> str:
        return source.tile_url(address)

    def list_names(self) -> list[str]:
        return list(self._sources)

    def get(self, name: str) -> TileSource:
        try:
            return self._sources[name]
        except KeyError:
            raise UnknownSourceError(name) from None

    def activate(self, name: str) -> TileSource:
        source = self.get(name)
        self._active = source
        self._active_name = name
        logger.info("Active basemap: %s", name)
        return source

    @property
    def active(self) -> Optional[TileSource]:
        return self._active

    @property
    def active_name(self) -> Optional[str]:
        """Registry key of the active source; may differ from its ``name``."""
        return self._active_name

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)

    def __iter__(self) -> Iterator[TileSource]:
        return iter(self._sources.values())


def load_sources(raw: Iterable[dict]) -> list[TileSource]:
    """
    Validate basemap definitions (dicts tagged by ``dialect``).
    """
    return _SOURCES_ADAPTER.validate_python(list(raw))


def build_default_registry() -> TileSourceRegistry:
    return TileSourceRegistry(load_sources(BASEMAPS))
