#!/usr/bin/env python3
"""
Fetch the tiles of one basemap at a low zoom and assemble them into a
single PNG, e.g. to eyeball a new provider's URL dialect.

    python scripts/fetch_basemap.py OpenTopoMap --zoom-level 15
"""
import argparse
import asyncio
from io import BytesIO
from pathlib import Path

from PIL import Image

from map_viewer.models import TileAddress
from map_viewer.services.tile_fetch import build_http_client, fetch_tile
from map_viewer.tiles import build_default_registry

MAX_SOURCE_ZOOM = 3  # 8x8 tiles


async def build_mosaic(name: str, zoom_level: int) -> Image.Image:
    registry = build_default_registry()
    source = registry.get(name)
    source_zoom = source.source_zoom(zoom_level)
    if not 0 <= source_zoom <= MAX_SOURCE_ZOOM:
        raise SystemExit(
            f"zoom level {zoom_level} maps to provider zoom {source_zoom}; "
            f"use {source.max_zoom - MAX_SOURCE_ZOOM}..{source.max_zoom}"
        )
    count = 2**source_zoom
    size = source.tile_size
    composite = Image.new("RGBA", (size * count, size * count))
    async with build_http_client(4) as client:
        for x in range(count):
            for y in range(count):
                url = registry.resolve_url(source, TileAddress(x=x, y=y, zoom_level=zoom_level))
                content = await fetch_tile(client, url)
                tile = Image.open(BytesIO(content)).convert("RGBA")
                composite.paste(tile.resize((size, size)), (x * size, y * size))
                print(f"fetched {url}")
    return composite


def main() -> None:
    parser = argparse.ArgumentParser(description="Assemble a low-zoom basemap mosaic")
    parser.add_argument("basemap", help="Basemap name, e.g. OpenStreetMap")
    parser.add_argument("--zoom-level", type=int, default=15, help="Display zoom level")
    parser.add_argument("--out", type=Path, default=Path("assets/maps/world-map.png"))
    args = parser.parse_args()

    composite = asyncio.run(build_mosaic(args.basemap, args.zoom_level))
    args.out.parent.mkdir(parents=True, exist_ok=True)
    composite.save(args.out, format="PNG")
    print(f"saved {args.out.resolve()}")


if __name__ == "__main__":
    main()
