"""Qt widgets backing each `WidgetKind`.

Containers expose the small API the structural actions rely on
(`attach`, `pack_start`, `pack_end`, `add`, `add_named`, `take_children`...).
"""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QPoint, Qt, Signal
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import (
    QBoxLayout,
    QFrame,
    QGridLayout,
    QLabel,
    QLineEdit,
    QProgressBar,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from app.views.builder.spec import WidgetKind


def _take_layout_widgets(layout: QBoxLayout | QGridLayout) -> list[QWidget]:
    children: list[QWidget] = []
    index = 0
    while index < layout.count():
        item = layout.itemAt(index)
        widget = item.widget() if item is not None else None
        if widget is None:
            index += 1
            continue
        layout.takeAt(index)
        children.append(widget)
    return children


class Grid(QWidget):
    """Children placed at explicit (column, row) cells."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._layout = QGridLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._layout.setAlignment(Qt.AlignTop)

    def attach(self, child: QWidget, left: int, top: int, width: int = 1, height: int = 1) -> None:
        self._layout.addWidget(child, top, left, height, width)

    def set_spacing(self, row: int, column: int) -> None:
        self._layout.setVerticalSpacing(row)
        self._layout.setHorizontalSpacing(column)

    def child_at(self, left: int, top: int) -> QWidget | None:
        item = self._layout.itemAtPosition(top, left)
        return item.widget() if item is not None else None

    def child_count(self) -> int:
        return self._layout.count()

    def take_children(self) -> list[QWidget]:
        return _take_layout_widgets(self._layout)


class Box(QWidget):
    """Horizontal box: `pack_start` children on the left, `pack_end` on the right."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._layout = QBoxLayout(QBoxLayout.LeftToRight, self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._start_count = 0
        self._build_center()

    def _build_center(self) -> None:
        self._layout.addStretch(1)

    def _end_index(self) -> int:
        # first slot after the center items
        return self._start_count + 1

    def pack_start(self, child: QWidget) -> None:
        self._layout.insertWidget(self._start_count, child)
        self._start_count += 1

    def pack_end(self, child: QWidget) -> None:
        self._layout.insertWidget(self._end_index(), child)

    def _fixed_widgets(self) -> tuple[QWidget, ...]:
        return ()

    def take_children(self) -> list[QWidget]:
        fixed = self._fixed_widgets()
        children = [c for c in _take_layout_widgets(self._layout) if c not in fixed]
        for widget in fixed:
            self._layout.insertWidget(1, widget)
        self._start_count = 0
        return children


class HeaderBar(Box):
    """Title bar: start children, centered title/subtitle, end children."""

    def _build_center(self) -> None:
        self._title = QLabel()
        self._title.setAlignment(Qt.AlignCenter)
        self._title.setStyleSheet("font-weight: bold;")
        self._subtitle = QLabel()
        self._subtitle.setAlignment(Qt.AlignCenter)
        self._subtitle.setStyleSheet("font-size: 0.9em;")

        self._titles = QWidget()
        column = QVBoxLayout(self._titles)
        column.setContentsMargins(0, 0, 0, 0)
        column.setSpacing(0)
        column.addWidget(self._title)
        column.addWidget(self._subtitle)

        self._layout.addStretch(1)
        self._layout.addWidget(self._titles)
        self._layout.addStretch(1)

    def _end_index(self) -> int:
        return self._start_count + 3

    def set_title(self, text: str) -> None:
        self._title.setText(text)

    def set_subtitle(self, text: str) -> None:
        self._subtitle.setText(text)

    def title(self) -> str:
        return self._title.text()

    def subtitle(self) -> str:
        return self._subtitle.text()

    def _fixed_widgets(self) -> tuple[QWidget, ...]:
        return (self._titles,)


class Stack(QStackedWidget):
    """Pages addressed by name, one visible at a time."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._pages: dict[str, QWidget] = {}

    def add_named(self, child: QWidget, name: str) -> None:
        previous = self._pages.get(name)
        if previous is not None and previous is not child:
            self.removeWidget(previous)
        self._pages[name] = child
        self.addWidget(child)

    def page(self, name: str) -> QWidget | None:
        return self._pages.get(name)

    def page_names(self) -> list[str]:
        return list(self._pages)

    def set_visible_child(self, child: QWidget) -> None:
        self.setCurrentWidget(child)

    def set_visible_child_name(self, name: str) -> None:
        page = self._pages.get(name)
        if page is not None:
            self.setCurrentWidget(page)

    def visible_child_name(self) -> str | None:
        current = self.currentWidget()
        for name, page in self._pages.items():
            if page is current:
                return name
        return None

    def take_children(self) -> list[QWidget]:
        pages = [self.widget(i) for i in range(self.count())]
        for page in pages:
            self.removeWidget(page)
        self._pages.clear()
        return pages


class ScrolledWindow(QScrollArea):
    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWidgetResizable(True)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)

    def add(self, child: QWidget) -> None:
        self.setWidget(child)


class Popover(QFrame):
    """Popup frame shown below an anchor widget. Emits `closed` when hidden."""

    closed = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent, Qt.Popup)
        self.setFrameShape(QFrame.StyledPanel)
        self._layout = QVBoxLayout(self)
        self._anchor: QWidget | None = None

    def add(self, child: QWidget) -> None:
        self._layout.addWidget(child)

    def set_relative_to(self, anchor: QWidget) -> None:
        self._anchor = anchor

    def popup(self) -> None:
        self.adjustSize()
        if self._anchor is not None:
            self.move(self._anchor.mapToGlobal(QPoint(0, self._anchor.height())))
        self.show()

    def hideEvent(self, event) -> None:  # noqa: N802 - Qt override
        super().hideEvent(event)
        self.closed.emit()


class Image(QLabel):
    """Themed icon display."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._icon_name = ""

    def set_from_icon_name(self, icon_name: str, size: int) -> None:
        self._icon_name = icon_name
        self.setPixmap(QIcon.fromTheme(icon_name).pixmap(size, size))

    def icon_name(self) -> str:
        return self._icon_name


class Spinner(QProgressBar):
    """Indeterminate busy indicator."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setTextVisible(False)
        self.setRange(0, 1)

    def start(self) -> None:
        self.setRange(0, 0)

    def stop(self) -> None:
        self.setRange(0, 1)

    def is_spinning(self) -> bool:
        return self.maximum() == 0


def _separator() -> QWidget:
    line = QFrame()
    line.setFrameShape(QFrame.HLine)
    line.setFrameShadow(QFrame.Sunken)
    return line


def _toggle_button() -> QWidget:
    button = QPushButton()
    button.setCheckable(True)
    return button


def _menu_button() -> QWidget:
    button = QToolButton()
    button.setPopupMode(QToolButton.InstantPopup)
    return button


def _web_view() -> QWidget:
    # QtWebEngine is heavy; only load it when a map page is built.
    from app.views.widgets.map_view import MapView

    return MapView()


WIDGET_FACTORIES: dict[WidgetKind, Callable[[], QWidget]] = {
    WidgetKind.BOX: Box,
    WidgetKind.BUTTON: QPushButton,
    WidgetKind.ENTRY: QLineEdit,
    WidgetKind.GRID: Grid,
    WidgetKind.HEADER_BAR: HeaderBar,
    WidgetKind.IMAGE: Image,
    WidgetKind.LABEL: QLabel,
    WidgetKind.MENU_BUTTON: _menu_button,
    WidgetKind.POPOVER: Popover,
    WidgetKind.SCROLLED_WINDOW: ScrolledWindow,
    WidgetKind.SEPARATOR: _separator,
    WidgetKind.SPINNER: Spinner,
    WidgetKind.STACK: Stack,
    WidgetKind.TOGGLE_BUTTON: _toggle_button,
    WidgetKind.WEB_VIEW: _web_view,
}
