"""Declarative widget specs for the main window, header bar and pages.

Every function returns a `WidgetSpec` tree; nothing here creates widgets.
Event handlers follow the builder's ``handler(widget, payload, context)``
convention and reach the window through ``context.session``.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFrame

from app.views.builder.spec import GridChild, IconSpec, WidgetKind, WidgetSpec
from app.views.constants import (
    APP_TITLE,
    ENTRY_WIDTH_CHARS,
    FILE_ICON,
    FILE_LABEL,
    GRID_COLUMN_SPACING,
    GRID_ROW_SPACING,
    HEADER_BAR,
    HEADER_MENU,
    HEADER_NEXT,
    HEADER_PREV,
    ICON_DIALOG,
    ICON_SMALL,
    LABEL_WIDTH_CHARS,
    MAP_CLEANUP_SCRIPT,
    MAP_PAGE,
    MAP_SPINNER,
    MAP_WEBVIEW,
    METADATA_STACK,
    POPOVER,
    POPOVER_BUTTON_WIDTH,
    POPOVER_GRID,
    POPOVER_REVEAL,
    page_name,
)
from app.views.media_utils import DEFAULT_ICON
from core.models import FILE_CATEGORY, MetadataPair
from core.services.pagination import needs_scroll

# Event handlers


def _on_previous(widget, payload, context) -> None:
    context.session.show_previous()


def _on_next(widget, payload, context) -> None:
    context.session.show_next()


def _on_reveal_toggled(widget, checked, context) -> None:
    if checked:
        context.widget(POPOVER).popup()


def _on_popover_closed(widget, payload, context) -> None:
    reveal = context.widget(POPOVER_REVEAL)
    if reveal.isChecked():
        reveal.setChecked(False)


def _open_page(target: str):
    def handler(widget, payload, context) -> None:
        context.widget(POPOVER).hide()
        context.session.show_page(target)

    return handler


def _on_map_loaded(widget, ok, context) -> None:
    context.widget(MAP_SPINNER).hide()
    widget.show()


# Window chrome


def header_bar_spec(file_count: int, menu: Any) -> WidgetSpec:
    """Header bar with popover reveal, previous/next buttons and the app menu."""
    single = file_count <= 1
    navigation = WidgetSpec(
        WidgetKind.GRID,
        {
            "name": "headerbar-pack-start",
            "attach": [
                GridChild(
                    WidgetSpec(
                        WidgetKind.TOGGLE_BUTTON,
                        {
                            "name": POPOVER_REVEAL,
                            "text": "Group",
                            "set_image": IconSpec("pan-down-symbolic", ICON_SMALL),
                            "toolTip": "Choose the metadata group to view",
                        },
                        events={"toggled": _on_reveal_toggled},
                    ),
                    left=0,
                    top=0,
                ),
                GridChild(
                    WidgetSpec(
                        WidgetKind.BUTTON,
                        {
                            "name": HEADER_PREV,
                            "set_image": IconSpec("go-previous-symbolic", ICON_SMALL),
                            "toolTip": "Go to the previous file metadata page",
                        },
                        events={"clicked": _on_previous},
                        visible=not single,
                    ),
                    left=1,
                    top=0,
                ),
                GridChild(
                    WidgetSpec(
                        WidgetKind.BUTTON,
                        {
                            "name": HEADER_NEXT,
                            "set_image": IconSpec("go-next-symbolic", ICON_SMALL),
                            "toolTip": "Go to the next file metadata page",
                        },
                        events={"clicked": _on_next},
                        visible=not single,
                    ),
                    left=2,
                    top=0,
                ),
            ],
        },
    )
    menu_button = WidgetSpec(
        WidgetKind.MENU_BUTTON,
        {
            "name": HEADER_MENU,
            "set_image": IconSpec("open-menu-symbolic", ICON_SMALL),
            "set_menu": menu,
        },
    )
    return WidgetSpec(
        WidgetKind.HEADER_BAR,
        {
            "name": HEADER_BAR,
            "set_title": APP_TITLE,
            "set_subtitle": f"{file_count} files selected",
            "set_border_width": 4,
            "pack_start": navigation,
            "pack_end": menu_button,
        },
    )


def popover_spec(anchor: Any) -> WidgetSpec:
    """Hidden popover listing one button per page, opened from `anchor`."""
    return WidgetSpec(
        WidgetKind.POPOVER,
        {
            "name": POPOVER,
            "set_border_width": 2,
            "relative_to": anchor,
            "add": WidgetSpec(
                WidgetKind.GRID,
                {"name": POPOVER_GRID, "set_spacing": (1, 0), "set_border_width": 15},
            ),
        },
        events={"closed": _on_popover_closed},
        visible=False,
    )


def upper_area_spec(tooltip: str = "") -> WidgetSpec:
    """File icon and name, a separator, then the metadata page stack."""
    file_box = WidgetSpec(
        WidgetKind.BOX,
        {
            "name": "icon-box",
            "pack_start": WidgetSpec(
                WidgetKind.IMAGE,
                {
                    "name": FILE_ICON,
                    "set_image": IconSpec(DEFAULT_ICON, ICON_DIALOG),
                    "set_border_width": 5,
                },
            ),
            "pack_end": WidgetSpec(
                WidgetKind.LABEL,
                {
                    "name": FILE_LABEL,
                    "text": "",
                    "toolTip": tooltip,
                    "set_style": "QLabel { font-size: 13pt; }",
                },
            ),
        },
    )
    return WidgetSpec(
        WidgetKind.GRID,
        {
            "name": "upper-box",
            "attach": [
                GridChild(file_box, left=0, top=0),
                GridChild(
                    WidgetSpec(WidgetKind.SEPARATOR, {"name": "file-separator"}), left=0, top=1
                ),
                GridChild(WidgetSpec(WidgetKind.STACK, {"name": METADATA_STACK}), left=0, top=2),
            ],
        },
    )


# Metadata pages


def category_rows(category: str, pairs: tuple[MetadataPair, ...]) -> list[GridChild]:
    """Label/value rows for one category."""
    rows: list[GridChild] = []
    for row, pair in enumerate(pairs):
        label = WidgetSpec(
            WidgetKind.LABEL,
            {
                "name": f"{page_name(category)}-{row}-label",
                "text": pair.label,
                "toolTip": pair.label,
                "set_width_chars": LABEL_WIDTH_CHARS,
                "set_alignment": Qt.AlignRight | Qt.AlignVCenter,
            },
        )
        value = WidgetSpec(
            WidgetKind.ENTRY,
            {
                "name": f"{page_name(category)}-{row}-value",
                "text": pair.display_value(),
                "readOnly": category == FILE_CATEGORY,
                "cursorPosition": 0,
                "set_width_chars": ENTRY_WIDTH_CHARS,
            },
        )
        rows.append(GridChild(label, left=0, top=row))
        rows.append(GridChild(value, left=1, top=row))
    return rows


def category_page_spec(category: str, pairs: tuple[MetadataPair, ...]) -> WidgetSpec:
    """Grid of rows for `category`, wrapped in a scroll area when it is long."""
    name = page_name(category)
    grid_properties: dict[str, Any] = {
        "set_spacing": (GRID_ROW_SPACING, GRID_COLUMN_SPACING),
        "attach": category_rows(category, pairs),
    }
    if not needs_scroll(len(pairs)):
        return WidgetSpec(WidgetKind.GRID, {"name": name, **grid_properties})

    return WidgetSpec(
        WidgetKind.SCROLLED_WINDOW,
        {
            "name": name,
            "set_shadow_type": QFrame.NoFrame,
            "add": WidgetSpec(WidgetKind.GRID, {"name": f"{name}-grid", **grid_properties}),
        },
    )


def page_button_spec(name: str, label: str, tooltip: str, target: str) -> WidgetSpec:
    return WidgetSpec(
        WidgetKind.BUTTON,
        {
            "name": name,
            "text": label,
            "toolTip": tooltip,
            "set_size_request": (POPOVER_BUTTON_WIDTH, -1),
        },
        events={"clicked": _open_page(target)},
    )


def category_button_spec(category: str) -> WidgetSpec:
    return page_button_spec(
        f"popopen-{category}",
        f"{category} ...",
        f"View the {category} metadata",
        page_name(category),
    )


def map_page_spec(uri: str) -> WidgetSpec:
    """Web view showing `uri`, with a spinner until the page has loaded."""
    return WidgetSpec(
        WidgetKind.GRID,
        {
            "name": MAP_PAGE,
            "attach": [
                GridChild(
                    WidgetSpec(
                        WidgetKind.WEB_VIEW,
                        {
                            "name": MAP_WEBVIEW,
                            "run_javascript": MAP_CLEANUP_SCRIPT,
                            "load_uri": uri,
                        },
                        events={"loadFinished": _on_map_loaded},
                        visible=False,
                    ),
                    left=0,
                    top=0,
                ),
                GridChild(
                    WidgetSpec(WidgetKind.SPINNER, {"name": MAP_SPINNER, "start": True}),
                    left=0,
                    top=1,
                ),
            ],
        },
    )


def map_button_spec() -> WidgetSpec:
    return page_button_spec("popopen-map", "Map ...", "View the location on a map", MAP_PAGE)
