"""
Entry point for the Photo Grid GUI.
"""
import argparse
import logging
import sys
from pathlib import Path


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="photo-grid-gui", description="Photo collage composer")
    parser.add_argument("--catalog", type=Path, help="JSON file with additional layouts")
    parser.add_argument("--log-file", type=Path, help="Write a rotating log file here")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    # Qt consumes its own arguments (e.g. -platform); leave those alone
    args, _unknown = parser.parse_known_args(argv)
    return args


def run(argv=None):
    """
    Main entry point for the GUI application.
    """
    from PySide6.QtWidgets import QApplication, QMessageBox
    from photo_grid.composer.catalog import DEFAULT_LAYOUTS, load_catalog, merge_catalogs
    from photo_grid.core.models import LayoutError
    from photo_grid.gui.main_window import MainWindow
    from photo_grid.gui.utils.logging_utils import configure_logging

    argv = sys.argv if argv is None else argv
    args = _parse_args(argv[1:])
    configure_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    app = QApplication(argv)
    app.setApplicationName("Photo Grid")
    app.setApplicationDisplayName("Photo Grid")
    app.setOrganizationName("Photo Grid")

    layouts = DEFAULT_LAYOUTS
    if args.catalog is not None:
        try:
            layouts = merge_catalogs(DEFAULT_LAYOUTS, load_catalog(args.catalog))
        except (OSError, LayoutError) as e:
            logging.getLogger(__name__).error(f"Ignoring layout catalog: {e}")
            QMessageBox.warning(None, "Layout Catalog", f"Could not load {args.catalog}:\n\n{e}")

    window = MainWindow(layouts=layouts)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
