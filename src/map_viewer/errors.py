class MapViewerError(Exception):
    """Base exception for the map viewer"""
    pass


class UnknownSourceError(MapViewerError, KeyError):
    """Basemap name is not registered"""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tile source: {self.name!r}"


class ResourceLoadError(MapViewerError):
    """Bundled resource (cursor image) missing or unreadable"""
    pass


class TileFetchError(MapViewerError):
    """A single tile could not be downloaded"""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
