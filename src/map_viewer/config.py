import os
from pathlib import Path

from .version import __version__

APP_NAME = "Free & Open Source Map Viewer"
APP_VERSION = os.environ.get("APP_VERSION", __version__)
USER_AGENT = f"map-viewer/{APP_VERSION}"
DEFAULT_CONCURRENCY = 4
REQUEST_TIMEOUT = 30.0
CONNECT_TIMEOUT = 20.0
LOG_LEVEL = os.environ.get("MAP_VIEWER_LOG_LEVEL", "INFO").upper()

# Decoded tiles kept in memory by the map canvas.
TILE_CACHE_SIZE = 512

# Frankfurt am Main
INITIAL_CENTER = (50.11, 8.68)
INITIAL_ZOOM = 7
DEFAULT_BASEMAP = "OpenStreetMap"

BASEMAPS = [
    {
        "dialect": "path",
        "name": "OpenStreetMap",
        "url_template": "https://tile.openstreetmap.org",
        "min_zoom": 1,
        "max_zoom": 17,
        "attribution": "© OpenStreetMap contributors",
    },
    {
        "dialect": "path",
        "name": "OpenTopoMap",
        "url_template": "https://tile.opentopomap.org",
        "min_zoom": 1,
        "max_zoom": 17,
        "attribution": "© OpenStreetMap contributors, SRTM | © OpenTopoMap (CC-BY-SA)",
    },
    {
        "dialect": "placeholder",
        "name": "Satellite",
        "url_template": "https://mt1.google.com/vt/lyrs=s&x={x}&y={y}&z={z}",
        "min_zoom": 1,
        "max_zoom": 17,
        "attribution": "Imagery © Google",
    },
]

ASSETS_DIR = Path(__file__).resolve().parent / "assets"
CURSORS_DIR = ASSETS_DIR / "cursors"
