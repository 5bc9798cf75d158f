"""MainWindow: one metadata page per file, rebuilt on navigation.

The window owns the `UIContext` shared by the builder and every event
handler; all widgets are created from the specs in `page_specs`.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QCoreApplication
from PySide6.QtGui import QIcon, QKeySequence, QShortcut
from PySide6.QtWidgets import QMainWindow
from loguru import logger

from app.viewmodels.main_vm import MetadataVM
from app.views.builder.registry import UIContext
from app.views.builder.spec import GridChild, IconSpec, NamedPage
from app.views.builder.ui_builder import UIBuilder
from app.views.components.menu_controller import MenuController
from app.views.constants import (
    APP_ICON,
    APP_TITLE,
    FILE_ICON,
    FILE_LABEL,
    ICON_DIALOG,
    MAP_PAGE,
    METADATA_STACK,
    POPOVER_GRID,
    POPOVER_REVEAL,
    WINDOW_BORDER,
    WINDOW_MAX_HEIGHT,
    WINDOW_MIN_HEIGHT,
    WINDOW_WIDTH,
    page_name,
)
from app.views.handlers.dialog_handler import DialogHandler
from app.views.media_utils import icon_name_for_mime
from app.views.page_specs import (
    category_button_spec,
    category_page_spec,
    header_bar_spec,
    map_button_spec,
    map_page_spec,
    popover_spec,
    upper_area_spec,
)
from core.errors import ConstructionError, CoordinateFormatError
from core.models import FileMetadataRecord, GPSFix
from core.services.coordinates import build_map_uri, gps_fix_from_record


class MainWindow(QMainWindow):
    """Main application window.

    Shows the record selected in the view-model: file icon and name, then a
    stack with one page per metadata category and, when the file carries a
    GPS position, a map page. The header bar popover switches pages.
    """

    def __init__(
        self,
        vm: MetadataVM,
        dialog_handler: DialogHandler | None = None,
    ) -> None:
        """Initialize MainWindow and build the static part of the UI.

        Args:
            vm: ViewModel holding the loaded records
            dialog_handler: Handler used for error and about dialogs
        """
        super().__init__()
        self._vm = vm
        self.context = UIContext(session=self)
        self.builder = UIBuilder(self.context)
        self.dialog_handler = dialog_handler or DialogHandler(parent_widget=self)
        self.menu_controller = MenuController(self)
        self._load_failed = False

        self._setup_ui()
        self._connect_signals()
        self._setup_window_properties()

    def _setup_ui(self) -> None:
        """Build the header bar, the popover and the upper area."""
        menu = self.menu_controller.build_menu()
        header = self.builder.construct(header_bar_spec(self._vm.file_count, menu))
        self.setMenuWidget(header)

        self.builder.construct(popover_spec(anchor=self.context.widget(POPOVER_REVEAL)))

        central = self.builder.construct(upper_area_spec(self._vm.current_path()))
        w = WINDOW_BORDER
        central.setContentsMargins(w, w, w, w)
        self.setCentralWidget(central)

    def _connect_signals(self) -> None:
        self.menu_controller.connect_actions(
            {"about": self.dialog_handler.show_about, "quit": self.close}
        )
        QShortcut(QKeySequence("Alt+Left"), self).activated.connect(self.show_previous)
        QShortcut(QKeySequence("Alt+Right"), self).activated.connect(self.show_next)

    def _setup_window_properties(self) -> None:
        self.setWindowTitle(APP_TITLE)
        self.setWindowIcon(QIcon.fromTheme(APP_ICON))
        self.setFixedWidth(WINDOW_WIDTH)
        self.setMinimumHeight(WINDOW_MIN_HEIGHT)
        self.setMaximumHeight(WINDOW_MAX_HEIGHT)

    # Loader slots

    def on_metadata_loaded(self, records: list[FileMetadataRecord]) -> None:
        """Show the first record once the whole batch has been transformed."""
        self._vm.set_records(records)
        if not self._render(init=True):
            return
        self.show()

    def on_load_failed(self, error: Any) -> None:
        """Report the first failure of a batch; later ones are only logged."""
        if self._load_failed:
            logger.info("Additional load failure: {}", error)
            return
        self._load_failed = True
        self.dialog_handler.report(error)

    # Navigation, called from event handlers through the context session

    def show_next(self) -> None:
        if self._vm.next_file():
            self._render(init=False)

    def show_previous(self) -> None:
        if self._vm.previous_file():
            self._render(init=False)

    def show_page(self, name: str) -> None:
        self.context.widget(METADATA_STACK).set_visible_child_name(name)

    # Rendering

    def _render(self, init: bool) -> bool:
        try:
            self.render_page(init)
        except ConstructionError as ex:
            logger.exception("Failed to build the metadata page: {}", ex)
            QCoreApplication.exit(1)
            return False
        return True

    def render_page(self, init: bool) -> None:
        """Build the pages of the current record.

        Args:
            init: True for the first render; otherwise the pages and popover
                buttons of the previous record are torn down first.

        Raises:
            ConstructionError: if a page spec cannot be built
        """
        record = self._vm.current_record
        if record is None:
            return

        stack = self.context.widget(METADATA_STACK)
        buttons = self.context.widget(POPOVER_GRID)
        if not init:
            self.context.teardown(stack, buttons)

        self._update_file_header(record)

        row = 0
        for category, pairs in record.categories.items():
            page = NamedPage(page_name(category), category_page_spec(category, pairs))
            self.builder.apply_properties(stack, {"add_named": [page]})
            button = GridChild(category_button_spec(category), left=0, top=row)
            self.builder.apply_properties(buttons, {"attach": [button]})
            row += 1

        fix = self._gps_fix(record)
        if fix is not None:
            self.builder.apply_properties(
                stack, {"add_named": [NamedPage(MAP_PAGE, map_page_spec(build_map_uri(fix)))]}
            )
            button = GridChild(map_button_spec(), left=0, top=row)
            self.builder.apply_properties(buttons, {"attach": [button]})

        logger.info(
            "Rendered {} ({}/{}): {} page(s)",
            record.file_name,
            self._vm.index + 1,
            self._vm.file_count,
            stack.count(),
        )

    def _update_file_header(self, record: FileMetadataRecord) -> None:
        icon = icon_name_for_mime(record.mime_type)
        self.builder.apply_properties(
            self.context.widget(FILE_ICON), {"set_image": IconSpec(icon, ICON_DIALOG)}
        )
        self.builder.apply_properties(
            self.context.widget(FILE_LABEL),
            {"text": record.file_name, "toolTip": self._vm.current_path() or record.source_file},
        )

    @staticmethod
    def _gps_fix(record: FileMetadataRecord) -> GPSFix | None:
        try:
            return gps_fix_from_record(record)
        except CoordinateFormatError as ex:
            logger.warning("Skipping map for {}: {}", record.source_file, ex)
            return None
