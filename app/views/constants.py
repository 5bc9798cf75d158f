"""
UI/view constants centralized for reuse across view modules.

Widget names are the keys of the widget registry; page names double as
stack page names.
"""

from __future__ import annotations

APP_TITLE: str = "GetMetadata"
APP_VERSION: str = "1.0"
APP_ICON: str = "application-x-executable"

# Window sizing (pixels)
WINDOW_WIDTH: int = 460
WINDOW_MIN_HEIGHT: int = 700
WINDOW_MAX_HEIGHT: int = 1200
WINDOW_BORDER: int = 12

# Widget registry names
METADATA_STACK: str = "metadata-stack"
POPOVER: str = "headerbar-popwidget"
POPOVER_REVEAL: str = "headerbar-popwidget-reveal"
POPOVER_GRID: str = "popwidget-grid"
HEADER_BAR: str = "headerbar"
HEADER_PREV: str = "headerbar-prev"
HEADER_NEXT: str = "headerbar-next"
HEADER_MENU: str = "headerbar-packend-button"
FILE_ICON: str = "file-icon"
FILE_LABEL: str = "file-label"
MAP_PAGE: str = "metadata-map-grid"
MAP_WEBVIEW: str = "metadata-map-webview"
MAP_SPINNER: str = "metadata-map-spinner"

# Icon sizes
ICON_SMALL: int = 16
ICON_DIALOG: int = 48

# Category grid layout
LABEL_WIDTH_CHARS: int = 22
ENTRY_WIDTH_CHARS: int = 22
GRID_ROW_SPACING: int = 4
GRID_COLUMN_SPACING: int = 10
POPOVER_BUTTON_WIDTH: int = 160

# Hides the OpenStreetMap header and sidebar so only the map is shown.
MAP_CLEANUP_SCRIPT: str = """
(function() {
    var header = document.getElementsByTagName("header")[0];
    if (header) { header.style.display = "none"; }
    var content = document.getElementById("content");
    if (content) { content.style.top = "0px"; }
    var sidebar = document.getElementById("sidebar");
    if (sidebar) { sidebar.style.display = "none"; }
})();
"""


def page_name(category: str) -> str:
    """Stack page name for a metadata category."""
    return f"metadata-{category}"
