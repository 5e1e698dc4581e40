"""Shared theme utilities for QBEView UI components.

This module loads the global stylesheet and tags widgets with the
object names the stylesheet targets.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
import logging

from PyQt6.QtWidgets import QApplication, QWidget

logger = logging.getLogger(__name__)

THEME_DIR = Path(__file__).resolve().parent
STYLESHEET_PATH = THEME_DIR / "styles.qss"


@lru_cache(maxsize=1)
def load_stylesheet() -> str:
    """Load and cache the global QSS stylesheet content."""

    try:
        stylesheet = STYLESHEET_PATH.read_text(encoding="utf-8")
        logger.debug("Loaded stylesheet from %s", STYLESHEET_PATH)
        return stylesheet
    except FileNotFoundError:
        logger.warning("QBEView stylesheet missing at %s", STYLESHEET_PATH)
    except OSError as exc:
        logger.error("Unable to read stylesheet %s: %s", STYLESHEET_PATH, exc)
    return ""


def apply_global_theme(app: QApplication) -> None:
    """Apply the shared stylesheet to the given QApplication."""

    stylesheet = load_stylesheet()
    if stylesheet:
        app.setStyleSheet(stylesheet)
    else:
        logger.info("No stylesheet applied; content missing or empty")


def _refresh_widget(widget: QWidget) -> None:
    """Force Qt to re-polish a widget after metadata changes."""

    style = widget.style()
    if style is None:
        return
    style.unpolish(widget)
    style.polish(widget)
    widget.update()


def apply_panel_header(widget: QWidget) -> None:
    """Tag a widget to receive the standard panel header styling."""

    if widget.objectName() != "panel_header":
        widget.setObjectName("panel_header")
    _refresh_widget(widget)
