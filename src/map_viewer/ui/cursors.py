import logging
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QCursor, QPixmap

from ..config import CURSORS_DIR
from ..errors import ResourceLoadError

logger = logging.getLogger(__name__)

OPEN_HAND = "open_hand"
GRABBED_HAND = "grabbed_hand"


def read_cursor(name: str, directory: Path = CURSORS_DIR, hotspot: tuple[int, int] = (0, 0)) -> QCursor:
    path = directory / f"{name}.png"
    if not path.is_file():
        raise ResourceLoadError(f"Cursor image not found: {path}")
    pixmap = QPixmap(str(path))
    if pixmap.isNull():
        raise ResourceLoadError(f"Cursor image is not a readable image: {path}")
    return QCursor(pixmap, *hotspot)


def load_cursor(
    name: str,
    fallback: Qt.CursorShape = Qt.CursorShape.ArrowCursor,
    directory: Path = CURSORS_DIR,
) -> QCursor:
    """
    Load a bundled cursor image, degrading to a built-in shape.
    """
    try:
        return read_cursor(name, directory)
    except ResourceLoadError as exc:
        logger.warning("%s; falling back to the default cursor", exc)
        return QCursor(fallback)
