from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtGui import QColor, QFont, QPalette
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMenuBar,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from ..config import APP_NAME, APP_VERSION, DEFAULT_BASEMAP, INITIAL_CENTER, INITIAL_ZOOM
from ..errors import UnknownSourceError
from ..models import GeoPosition, TileSource
from ..tiles import TileSourceRegistry
from ..viewport import ViewportController, ViewportState
from .map_canvas import MapCanvas
from .style import BASE_STYLESHEET
from .workers import TileFetchWorker

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(
        self,
        registry: TileSourceRegistry,
        worker: Optional[TileFetchWorker] = None,
    ) -> None:
        super().__init__()
        self.registry = registry
        self.setWindowTitle(f"{APP_NAME} (v{APP_VERSION})")

        source = self._initial_source()
        self.controller = ViewportController(
            ViewportState(center_x=0.0, center_y=0.0, zoom_level=source.clamp_zoom(INITIAL_ZOOM)),
            min_zoom=source.min_zoom,
            max_zoom=source.max_zoom,
            tile_size=source.tile_size,
        )
        self.controller.center_on(GeoPosition.of(INITIAL_CENTER))

        self.build_ui(source, worker)
        self.apply_palette()
        self.build_menu()
        self.controller.subscribe(self._update_status)
        self._update_status(self.controller.state)

    def _initial_source(self) -> TileSource:
        names = self.registry.list_names()
        if not names:
            raise ValueError("No tile sources registered")
        name = DEFAULT_BASEMAP if DEFAULT_BASEMAP in self.registry else names[0]
        return self.registry.activate(name)

    def build_ui(self, source: TileSource, worker: Optional[TileFetchWorker]) -> None:
        main_widget = QWidget()
        layout = QVBoxLayout(main_widget)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.canvas = MapCanvas(
            self.controller, source, worker=worker, source_name=self.registry.active_name
        )
        layout.addWidget(self.build_control_panel())
        layout.addWidget(self.canvas, 1)
        layout.addWidget(self.build_footer(source))

        self.setCentralWidget(main_widget)
        self.resize(800, 600)

    def build_control_panel(self) -> QWidget:
        panel = QWidget()
        panel.setObjectName("controlPanel")
        row = QHBoxLayout(panel)
        row.addStretch()
        row.addWidget(QLabel("Select a base map:"))
        self.basemap_combo = QComboBox()
        self.basemap_combo.addItems(self.registry.list_names())
        self.basemap_combo.setCurrentText(self.registry.active_name)
        self.basemap_combo.currentTextChanged.connect(self.set_basemap)
        row.addWidget(self.basemap_combo)
        return panel

    def build_footer(self, source: TileSource) -> QWidget:
        footer = QWidget()
        footer.setObjectName("footer")
        row = QHBoxLayout(footer)
        row.setContentsMargins(8, 2, 8, 2)
        font = QFont("Serif", 12)

        self.attribution_label = QLabel(source.attribution)
        self.attribution_label.setObjectName("footerLabel")
        self.attribution_label.setFont(font)
        self.status_label = QLabel("")
        self.status_label.setObjectName("footerLabel")
        self.status_label.setFont(font)

        row.addWidget(self.attribution_label)
        row.addStretch()
        row.addWidget(self.status_label)
        return footer

    def build_menu(self) -> None:
        menu_bar: QMenuBar = self.menuBar()
        about_action = menu_bar.addAction("About")
        about_action.triggered.connect(self.show_about)

    def show_about(self) -> None:
        QMessageBox.information(
            self,
            "About",
            f"{APP_NAME}\nVersion: {APP_VERSION}\n"
            f"Basemaps: {', '.join(self.registry.list_names())}",
        )

    def apply_palette(self) -> None:
        palette = self.palette()
        palette.setColor(QPalette.ColorRole.Window, QColor("#0b1220"))
        palette.setColor(QPalette.ColorRole.Base, QColor("#0f172a"))
        palette.setColor(QPalette.ColorRole.Text, QColor("#e5e7eb"))
        palette.setColor(QPalette.ColorRole.WindowText, QColor("#e5e7eb"))
        palette.setColor(QPalette.ColorRole.Button, QColor("#111827"))
        palette.setColor(QPalette.ColorRole.ButtonText, QColor("#e5e7eb"))
        palette.setColor(QPalette.ColorRole.Highlight, QColor("#22d3ee"))
        palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#0b1220"))
        self.setPalette(palette)
        self.setStyleSheet(BASE_STYLESHEET)

    def set_basemap(self, name: str) -> None:
        """
        Switch the basemap; the viewport (center and zoom) is kept.
        """
        try:
            source = self.registry.activate(name)
        except UnknownSourceError as exc:
            logger.error("%s", exc)
            active_name = self.registry.active_name
            if active_name is not None:
                self.basemap_combo.blockSignals(True)
                self.basemap_combo.setCurrentText(active_name)
                self.basemap_combo.blockSignals(False)
            return
        self.canvas.set_source(source, name)
        self.controller.set_zoom_range(source.min_zoom, source.max_zoom, source.tile_size)
        self.attribution_label.setText(source.attribution)

    def _update_status(self, state: ViewportState) -> None:
        position = self.controller.center_position()
        self.status_label.setText(
            f"Zoom {state.zoom_level} | {position.latitude:.4f}, {position.longitude:.4f}"
        )

    def closeEvent(self, event) -> None:  # noqa: N802
        self.canvas.shutdown()
        super().closeEvent(event)

