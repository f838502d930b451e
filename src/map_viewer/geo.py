"""Web-Mercator helpers for the map canvas."""

from __future__ import annotations

import math
from typing import Iterator, NamedTuple

from .models import GeoPosition

MERCATOR_LAT_BOUND = 85.05112878


class VisibleTile(NamedTuple):
    x: int
    y: int
    screen_x: float
    screen_y: float


def world_size(source_zoom: int, tile_size: int) -> int:
    return tile_size * (1 << max(0, source_zoom))


def geo_to_pixel(position: GeoPosition, source_zoom: int, tile_size: int) -> tuple[float, float]:
    """
    Project a position to world pixels at ``source_zoom`` (origin top-left).
    """
    size = world_size(source_zoom, tile_size)
    lat = max(-MERCATOR_LAT_BOUND, min(MERCATOR_LAT_BOUND, position.latitude))
    x = (position.longitude + 180.0) / 360.0 * size
    sin_lat = math.sin(math.radians(lat))
    y = (0.5 - math.log((1 + sin_lat) / (1 - sin_lat)) / (4 * math.pi)) * size
    return x, y


def pixel_to_geo(x: float, y: float, source_zoom: int, tile_size: int) -> GeoPosition:
    """
    Inverse of :func:`geo_to_pixel`. Longitude wraps, latitude saturates at
    the Mercator bound.
    """
    size = world_size(source_zoom, tile_size)
    lon = x / size * 360.0 - 180.0
    lon = (lon + 180.0) % 360.0 - 180.0
    y = max(0.0, min(float(size), y))
    n = math.pi - 2.0 * math.pi * y / size
    lat = math.degrees(math.atan(math.sinh(n)))
    return GeoPosition(latitude=lat, longitude=lon)


def visible_tiles(
    center_x: float,
    center_y: float,
    width: int,
    height: int,
    source_zoom: int,
    tile_size: int,
) -> Iterator[VisibleTile]:
    """
    Tiles covering a ``width`` x ``height`` view centred on the given world
    pixel. Columns wrap around the world; rows outside the world are skipped.
    """
    if width <= 0 or height <= 0:
        return
    tiles_across = 1 << max(0, source_zoom)
    left = center_x - width / 2.0
    top = center_y - height / 2.0
    first_col = math.floor(left / tile_size)
    last_col = math.floor((left + width - 1) / tile_size)
    first_row = max(0, math.floor(top / tile_size))
    last_row = min(tiles_across - 1, math.floor((top + height - 1) / tile_size))
    for row in range(first_row, last_row + 1):
        for col in range(first_col, last_col + 1):
            yield VisibleTile(
                x=col % tiles_across,
                y=row,
                screen_x=col * tile_size - left,
                screen_y=row * tile_size - top,
            )
