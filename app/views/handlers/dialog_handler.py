"""DialogHandler: Error and about dialogs."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from PySide6.QtWidgets import QMessageBox, QWidget
from loguru import logger

from app.views.constants import APP_TITLE, APP_VERSION
from core.errors import (
    MetadataViewerError,
    SpawnFailureError,
    ToolNotFoundError,
    UnparseableMetadataError,
)

ERROR_TITLE = "Error"
NO_FILES_MESSAGE = "No files selected"
FOLDER_MESSAGE = "Unable to provide metadata for folders or unsupported files"

Presenter = Callable[[QWidget | None, str, str], object]


def describe_error(error: BaseException | str) -> str:
    """Turn a failure into the message shown to the user.

    Args:
        error: Exception raised by the pipeline, or a ready-made message

    Returns:
        str: Text for the error dialog
    """
    if isinstance(error, str):
        return error
    if isinstance(error, ToolNotFoundError):
        return f"Please install {Path(error.program).name}"
    if isinstance(error, UnparseableMetadataError):
        return FOLDER_MESSAGE
    if isinstance(error, SpawnFailureError):
        return f"Unable to run {error.argv[0]}: {error.reason}"
    if isinstance(error, MetadataViewerError):
        return str(error) or type(error).__name__
    return f"Unexpected error: {error}"


class DialogHandler:
    """Shows modal dialogs on behalf of the main window.

    After an error has been acknowledged, `on_acknowledged` runs; the
    application passes its quit slot there.
    """

    def __init__(
        self,
        parent_widget: QWidget | None = None,
        on_acknowledged: Callable[[], None] | None = None,
        presenter: Presenter | None = None,
        about_presenter: Presenter | None = None,
    ) -> None:
        """Initialize with parent widget and callbacks.

        Args:
            parent_widget: Parent widget for dialogs
            on_acknowledged: Called once the user dismissed an error dialog
            presenter: Error dialog function, `QMessageBox.critical` by default
            about_presenter: About dialog function, `QMessageBox.about` by default
        """
        self.parent = parent_widget
        self.on_acknowledged = on_acknowledged
        self._present_error = presenter or QMessageBox.critical
        self._present_about = about_presenter or QMessageBox.about

    def report(self, error: BaseException | str) -> None:
        """Show `error` in a modal dialog, then run the acknowledge callback."""
        message = describe_error(error)
        logger.error("Reporting error to user: {}", message)
        self._present_error(self.parent, ERROR_TITLE, message)
        if self.on_acknowledged is not None:
            self.on_acknowledged()

    def show_about(self) -> None:
        text = (
            f"<b>{APP_TITLE}</b> {APP_VERSION}<br>"
            "Shows the metadata of the selected files, grouped by category.<br><br>"
            "Author: Jason Webb<br>"
            "This program would not be possible without the years of work put in "
            "by Phil Harvey on ExifTool."
        )
        self._present_about(self.parent, f"About {APP_TITLE}", text)
