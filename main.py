from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, Qt, QTimer
from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import MetadataVM
from app.views.handlers.dialog_handler import NO_FILES_MESSAGE, DialogHandler
from app.views.main_window import MainWindow
from infrastructure.exiftool import MetadataLoader
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def main(argv: list[str] | None = None) -> int:
    settings = JsonSettings(BASE_DIR / "settings.json")
    init_logging(settings.log_directory(), level=settings.log_level(), console=sys.stderr.isatty())

    args = list(sys.argv if argv is None else argv)
    paths = args[1:]
    logger.info("Starting with {} file(s)", len(paths))

    app = QApplication.instance()
    if app is None:
        # QtWebEngine requires shared GL contexts before the application exists.
        QCoreApplication.setAttribute(Qt.AA_ShareOpenGLContexts)
        app = QApplication(args[:1])

    dialogs = DialogHandler(on_acknowledged=app.quit)
    if not paths:
        dialogs.report(NO_FILES_MESSAGE)
        return 1

    vm = MetadataVM(paths)
    win = MainWindow(vm=vm, dialog_handler=dialogs)
    dialogs.parent = win

    loader = MetadataLoader(
        executable=settings.exiftool_executable(), arguments=settings.exiftool_arguments()
    )
    loader.loaded.connect(win.on_metadata_loaded)
    loader.failed.connect(win.on_load_failed)

    # Start inside the event loop so an early failure can still quit it.
    QTimer.singleShot(0, lambda: loader.load(paths))

    code = app.exec()
    logger.info("Exiting with code {}", code)
    return code


if __name__ == "__main__":
    raise SystemExit(main())
