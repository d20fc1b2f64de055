#!/usr/bin/env python3
import sys
import logging
from functools import partial

from PyQt6.QtWidgets import QApplication

from .config import APP_NAME, ConfigError, load_config
from .loader import DBSource, load
from .state import ViewState


def create_window(config, source=None):
    """Build the main window with its view state, loading the start-up database."""
    from .gui import MainWindow

    if source is None:
        source = DBSource(config.default_source)
    state = ViewState(partial(load, config=config), source=source)
    return MainWindow(state)


def main():
    """Main entry point for the GUI application."""
    try:
        config = load_config()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
        logging.error(str(e))
        sys.exit(1)
    logging.basicConfig(level=config.logging_level, format="%(levelname)s: %(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    # Create and show main window
    window = create_window(config)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
