from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GeoPosition(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, lat_lon: tuple[float, float]) -> "GeoPosition":
        return cls(latitude=lat_lon[0], longitude=lat_lon[1])


class TileAddress(BaseModel):
    """
    Tile column/row plus the viewer's display zoom (not the provider zoom).
    """

    x: int
    y: int
    zoom_level: int

    model_config = ConfigDict(frozen=True)


class TileSource(BaseModel, ABC):
    """
    Common part of every basemap. Abstract: subclasses pick the URL dialect.

    Display zoom is inverted relative to the provider zoom:
    ``source_zoom = max_zoom - zoom_level``.
    """

    name: str = Field(min_length=1)
    url_template: str = Field(min_length=1)
    min_zoom: int = Field(ge=0)
    max_zoom: int = Field(ge=0)
    tile_size: int = Field(default=256, gt=0)
    attribution: str = ""

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_zoom_range(self) -> "TileSource":
        if self.min_zoom > self.max_zoom:
            raise ValueError(
                f"min_zoom ({self.min_zoom}) must not exceed max_zoom ({self.max_zoom})"
            )
        return self

    def source_zoom(self, zoom_level: int) -> int:
        return self.max_zoom - zoom_level

    def clamp_zoom(self, zoom_level: int) -> int:
        return max(self.min_zoom, min(self.max_zoom, zoom_level))

    @abstractmethod
    def tile_url(self, address: TileAddress) -> str:
        ...


class PathTileSource(TileSource):
    """Provider URL as ``<base>/<z>/<x>/<y>.png``."""

    dialect: Literal["path"] = "path"

    def tile_url(self, address: TileAddress) -> str:
        z = self.source_zoom(address.zoom_level)
        return f"{self.url_template}/{z}/{address.x}/{address.y}.png"


class PlaceholderTileSource(TileSource):
    """Provider URL with literal ``{x}``, ``{y}``, ``{z}`` placeholders."""

    dialect: Literal["placeholder"] = "placeholder"

    def tile_url(self, address: TileAddress) -> str:
        z = self.source_zoom(address.zoom_level)
        return (
            self.url_template.replace("{x}", str(address.x))
            .replace("{y}", str(address.y))
            .replace("{z}", str(z))
        )


AnyTileSource = Annotated[
    Union[PathTileSource, PlaceholderTileSource],
    Field(discriminator="dialect"),
]
