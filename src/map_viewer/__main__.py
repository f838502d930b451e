import logging
import sys

from PySide6.QtWidgets import QApplication

from .config import APP_VERSION, LOG_LEVEL
from .log import setup_logging
from .tiles import build_default_registry
from .ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    setup_logging(LOG_LEVEL)
    logger.info("Starting map viewer %s", APP_VERSION)
    registry = build_default_registry()
    app = QApplication(sys.argv)
    window = MainWindow(registry)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
