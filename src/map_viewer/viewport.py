"""
Viewport state and the controller that drives it from pointer/wheel events.

The controller works on plain event objects so that it can be used (and
tested) without a Qt event loop; ``ui.map_canvas`` does the translation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional, Union

from .geo import geo_to_pixel, pixel_to_geo
from .models import GeoPosition

logger = logging.getLogger(__name__)


class PointerButton(Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    MIDDLE = "middle"


@dataclass(frozen=True)
class PointerPressed:
    x: float
    y: float
    button: PointerButton = PointerButton.PRIMARY


@dataclass(frozen=True)
class PointerMoved:
    x: float
    y: float


@dataclass(frozen=True)
class PointerReleased:
    x: float
    y: float
    button: PointerButton = PointerButton.PRIMARY


@dataclass(frozen=True)
class WheelScrolled:
    # Negative rotation = wheel turned away from the user.
    rotation: int


ViewportEvent = Union[PointerPressed, PointerMoved, PointerReleased, WheelScrolled]


@dataclass
class ViewportState:
    center_x: float
    center_y: float
    zoom_level: int

    def copy(self) -> "ViewportState":
        return replace(self)


Listener = Callable[[ViewportState], None]


class ViewportController:
    def __init__(
        self,
        state: ViewportState,
        min_zoom: int,
        max_zoom: int,
        tile_size: int = 256,
    ) -> None:
        self.state = state
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.tile_size = tile_size
        self._anchor: Optional[tuple[float, float]] = None
        self._listeners: List[Listener] = []
        self._handlers = {
            PointerPressed: self._on_pressed,
            PointerMoved: self._on_moved,
            PointerReleased: self._on_released,
            WheelScrolled: self._on_wheel,
        }

    @property
    def source_zoom(self) -> int:
        return self.max_zoom - self.state.zoom_level

    @property
    def is_panning(self) -> bool:
        return self._anchor is not None

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: ViewportEvent) -> bool:
        """
        Apply one input event. Returns True when the state changed.
        """
        try:
            handler = self._handlers[type(event)]
        except KeyError:
            raise TypeError(f"Unsupported viewport event: {event!r}") from None
        changed = handler(event)
        if changed:
            self._notify()
        return changed

    # transitions

    def pan_begin(self, x: float, y: float) -> None:
        self._anchor = (x, y)

    def pan_move(self, x: float, y: float) -> bool:
        if self._anchor is None:
            return False
        anchor_x, anchor_y = self._anchor
        self.state.center_x += anchor_x - x
        self.state.center_y += anchor_y - y
        self._anchor = (x, y)
        return True

    def pan_end(self) -> None:
        self._anchor = None

    def zoom(self, rotation: int) -> bool:
        if rotation == 0:
            return False
        step = 1 if rotation < 0 else -1
        return self._set_zoom_level(self.state.zoom_level + step)

    def set_zoom_range(self, min_zoom: int, max_zoom: int, tile_size: Optional[int] = None) -> bool:
        """
        Adopt the zoom range (and tile size, when given) of a newly activated
        source, clamping the current level into it.
        """
        old_source_zoom = self.source_zoom
        old_tile_size = self.tile_size
        old_level = self.state.zoom_level
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        if tile_size is not None:
            self.tile_size = tile_size
        self.state.zoom_level = max(min_zoom, min(max_zoom, old_level))
        rescaled = self._rescale_center(old_source_zoom, old_tile_size)
        changed = rescaled or self.state.zoom_level != old_level
        if changed:
            self._notify()
        return changed

    def center_on(self, position: GeoPosition) -> None:
        x, y = geo_to_pixel(position, self.source_zoom, self.tile_size)
        self.state.center_x = x
        self.state.center_y = y
        self._notify()

    def center_position(self) -> GeoPosition:
        return pixel_to_geo(
            self.state.center_x, self.state.center_y, self.source_zoom, self.tile_size
        )

    # internals

    def _on_pressed(self, event: PointerPressed) -> bool:
        if event.button is PointerButton.PRIMARY:
            self.pan_begin(event.x, event.y)
        return False

    def _on_moved(self, event: PointerMoved) -> bool:
        return self.pan_move(event.x, event.y)

    def _on_released(self, event: PointerReleased) -> bool:
        if event.button is PointerButton.PRIMARY:
            self.pan_end()
        return False

    def _on_wheel(self, event: WheelScrolled) -> bool:
        return self.zoom(event.rotation)

    def _set_zoom_level(self, level: int) -> bool:
        clamped = max(self.min_zoom, min(self.max_zoom, level))
        if clamped == self.state.zoom_level:
            return False
        old_source_zoom = self.source_zoom
        self.state.zoom_level = clamped
        self._rescale_center(old_source_zoom)
        logger.debug("Zoom level %s (source zoom %s)", clamped, self.source_zoom)
        return True

    def _rescale_center(self, old_source_zoom: int, old_tile_size: Optional[int] = None) -> bool:
        factor = 2.0 ** (self.source_zoom - old_source_zoom)
        if old_tile_size is not None:
            factor *= self.tile_size / old_tile_size
        if factor == 1.0:
            return False
        self.state.center_x *= factor
        self.state.center_y *= factor
        return True

    def _notify(self) -> None:
        snapshot = self.state.copy()
        for listener in list(self._listeners):
            listener(snapshot)
