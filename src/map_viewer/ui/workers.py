from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import NamedTuple, Optional

import httpx
from PySide6.QtCore import QObject, Signal

from ..config import DEFAULT_CONCURRENCY
from ..errors import TileFetchError
from ..services.tile_fetch import build_http_client, fetch_tile

logger = logging.getLogger(__name__)


class TileKey(NamedTuple):
    source: str
    zoom_level: int
    x: int
    y: int


class TileFetchWorker(QObject):
    """
    Downloads tiles on a private asyncio loop running in a daemon thread.
    Results come back to the GUI thread through queued signals.
    """

    tile_loaded = Signal(object, object)  # TileKey, bytes
    tile_failed = Signal(object, str)

    def __init__(
        self,
        concurrency: int = DEFAULT_CONCURRENCY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__()
        self.concurrency = max(1, concurrency)
        self._transport = transport
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._ready = threading.Event()
        self._thread = threading.Thread(target=self._run, name="tile-fetch", daemon=True)

    @property
    def is_running(self) -> bool:
        return self._loop is not None

    def start(self) -> None:
        if self._thread.is_alive():
            return
        self._thread.start()
        self._ready.wait()

    def submit(self, key: TileKey, url: str) -> Optional[Future]:
        loop = self._loop
        if loop is None:
            return None
        logger.debug("Requesting tile %s from %s", key, url)
        return asyncio.run_coroutine_threadsafe(self._fetch(key, url), loop)

    def stop(self, timeout: float = 5.0) -> None:
        loop = self._loop
        self._loop = None
        if loop is None:
            return
        loop.call_soon_threadsafe(loop.stop)
        self._thread.join(timeout)

    def _run(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._semaphore = asyncio.Semaphore(self.concurrency)
        self._client = build_http_client(self.concurrency, self._transport)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.run_until_complete(self._client.aclose())
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()

    async def _fetch(self, key: TileKey, url: str) -> None:
        async with self._semaphore:
            try:
                content = await fetch_tile(self._client, url)
            except TileFetchError as exc:
                logger.warning("Tile %s/%s/%s (%s) failed: %s", key.zoom_level, key.x, key.y, key.source, exc.reason)
                self.tile_failed.emit(key, exc.reason)
                return
            except Exception as exc:
                logger.exception("Tile %s/%s/%s (%s) crashed", key.zoom_level, key.x, key.y, key.source)
                self.tile_failed.emit(key, str(exc) or exc.__class__.__name__)
                return
        self.tile_loaded.emit(key, content)
