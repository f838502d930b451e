from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Optional

from PySide6.QtCore import QRectF, Qt
from PySide6.QtGui import QColor, QPainter, QPixmap
from PySide6.QtWidgets import QWidget

from ..config import TILE_CACHE_SIZE
from ..geo import visible_tiles
from ..models import TileAddress, TileSource
from ..tiles import TileSourceRegistry
from ..viewport import (
    PointerButton,
    PointerMoved,
    PointerPressed,
    PointerReleased,
    ViewportController,
    ViewportState,
    WheelScrolled,
)
from .cursors import GRABBED_HAND, OPEN_HAND, load_cursor
from .workers import TileFetchWorker, TileKey

logger = logging.getLogger(__name__)

PLACEHOLDER_COLOR = QColor("#1f2937")

_BUTTONS = {
    Qt.MouseButton.LeftButton: PointerButton.PRIMARY,
    Qt.MouseButton.RightButton: PointerButton.SECONDARY,
}


def _pointer_button(button: Qt.MouseButton) -> PointerButton:
    return _BUTTONS.get(button, PointerButton.MIDDLE)


WHEEL_NOTCH = 120  # angleDelta units per wheel notch


def wheel_rotation(angle_delta_y: int) -> int:
    """
    Qt reports positive deltas when the wheel turns away from the user; the
    controller expects the opposite sign.
    """
    if angle_delta_y > 0:
        return -1
    if angle_delta_y < 0:
        return 1
    return 0


def wheel_notches(accumulated: int) -> tuple[int, int]:
    """
    Split an accumulated angle delta into whole notches and the remainder
    still owed to the next event. Truncates toward zero.
    """
    notches = int(accumulated / WHEEL_NOTCH)
    return notches, accumulated - notches * WHEEL_NOTCH


class MapCanvas(QWidget):
    """
    Paints the tiles of the active source for the controller's viewport and
    feeds mouse/wheel input back into the controller.
    """

    def __init__(
        self,
        controller: ViewportController,
        source: TileSource,
        worker: Optional[TileFetchWorker] = None,
        cache_size: int = TILE_CACHE_SIZE,
        source_name: Optional[str] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.controller = controller
        self.source = source
        self.source_name = source_name or source.name
        self.cache_size = max(1, cache_size)
        self._cache: OrderedDict[TileKey, QPixmap] = OrderedDict()
        self._pending: set[TileKey] = set()
        self._failed: set[TileKey] = set()
        self._zoom_level = controller.state.zoom_level
        self._wheel_accum = 0

        self.worker = worker or TileFetchWorker()
        self.worker.tile_loaded.connect(self._on_tile_loaded)
        self.worker.tile_failed.connect(self._on_tile_failed)
        self.worker.start()

        self.open_hand_cursor = load_cursor(OPEN_HAND)
        self.grabbed_hand_cursor = load_cursor(GRABBED_HAND)
        self.setCursor(self.open_hand_cursor)
        self.setMinimumSize(320, 240)

        controller.subscribe(self._on_viewport_changed)

    def set_source(self, source: TileSource, name: Optional[str] = None) -> None:
        """
        Rebind to another basemap. ``name`` is the registry key; tile cache
        keys use it, so two entries sharing a source name stay apart.
        """
        self.source = source
        self.source_name = name or source.name
        self._failed.clear()
        self.update()

    def shutdown(self) -> None:
        self.worker.stop()

    def visible_keys(self) -> list[TileKey]:
        state = self.controller.state
        return [
            TileKey(self.source_name, state.zoom_level, tile.x, tile.y)
            for tile in self._visible_tiles()
        ]

    def _visible_tiles(self):
        state = self.controller.state
        return visible_tiles(
            state.center_x,
            state.center_y,
            self.width(),
            self.height(),
            self.source.source_zoom(state.zoom_level),
            self.source.tile_size,
        )

    def _on_viewport_changed(self, state: ViewportState) -> None:
        if state.zoom_level != self._zoom_level:
            self._zoom_level = state.zoom_level
            self._failed.clear()
        self.update()

    # tiles

    def _request(self, key: TileKey) -> None:
        if key in self._pending or key in self._failed:
            return
        address = TileAddress(x=key.x, y=key.y, zoom_level=key.zoom_level)
        url = TileSourceRegistry.resolve_url(self.source, address)
        if self.worker.submit(key, url) is not None:
            self._pending.add(key)

    def _on_tile_loaded(self, key: TileKey, content: bytes) -> None:
        self._pending.discard(key)
        pixmap = QPixmap()
        if not pixmap.loadFromData(content):
            logger.warning("Tile %s could not be decoded", key)
            self._failed.add(key)
            return
        self._cache[key] = pixmap
        self._cache.move_to_end(key)
        while len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)
        if key.source == self.source_name and key.zoom_level == self.controller.state.zoom_level:
            self.update()

    def _on_tile_failed(self, key: TileKey, _message: str) -> None:
        self._pending.discard(key)
        self._failed.add(key)

    # Qt overrides

    def paintEvent(self, event) -> None:  # noqa: N802
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), PLACEHOLDER_COLOR)
            size = self.source.tile_size
            for tile in self._visible_tiles():
                key = TileKey(self.source_name, self.controller.state.zoom_level, tile.x, tile.y)
                pixmap = self._cache.get(key)
                if pixmap is None:
                    self._request(key)
                    continue
                self._cache.move_to_end(key)
                painter.drawPixmap(
                    QRectF(tile.screen_x, tile.screen_y, size, size),
                    pixmap,
                    QRectF(pixmap.rect()),
                )
        finally:
            painter.end()

    def mousePressEvent(self, event) -> None:  # noqa: N802
        pos = event.position()
        self.controller.dispatch(PointerPressed(pos.x(), pos.y(), _pointer_button(event.button())))
        if self.controller.is_panning:
            self.setCursor(self.grabbed_hand_cursor)
        event.accept()

    def mouseMoveEvent(self, event) -> None:  # noqa: N802
        pos = event.position()
        self.controller.dispatch(PointerMoved(pos.x(), pos.y()))
        event.accept()

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802
        pos = event.position()
        self.controller.dispatch(PointerReleased(pos.x(), pos.y(), _pointer_button(event.button())))
        if not self.controller.is_panning:
            self.setCursor(self.open_hand_cursor)
        event.accept()

    def wheelEvent(self, event) -> None:  # noqa: N802
        delta = event.angleDelta().y()
        if self._wheel_accum * delta < 0:
            # direction reversed, drop the partial notch
            self._wheel_accum = 0
        notches, self._wheel_accum = wheel_notches(self._wheel_accum + delta)
        rotation = wheel_rotation(notches)
        for _ in range(abs(notches)):
            self.controller.dispatch(WheelScrolled(rotation))
        event.accept()

    def closeEvent(self, event) -> None:  # noqa: N802
        self.shutdown()
        super().closeEvent(event)
