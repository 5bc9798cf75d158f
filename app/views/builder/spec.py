"""Declarative widget specifications and the structural action catalogue.

A `WidgetSpec` names a widget kind, an ordered property mapping, signal
handlers and the initial visibility. Property names found in
`ACTION_CATALOGUE` are parsed into typed structural actions; any other name is
a plain property assignment (`Passthrough`). Each kind accepts only the
structural properties listed in `KIND_PROPERTIES` (plus `COMMON_PROPERTIES`).

This module holds no toolkit code so specs can be built and validated without
a running application.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from core.errors import ConstructionError

NAME_PROPERTY = "name"

# handler(widget, payload, context)
EventHandler = Callable[[Any, Any, Any], Any]


class WidgetKind(str, Enum):
    """Closed set of constructible widget kinds."""

    BOX = "Box"
    BUTTON = "Button"
    ENTRY = "Entry"
    GRID = "Grid"
    HEADER_BAR = "HeaderBar"
    IMAGE = "Image"
    LABEL = "Label"
    MENU_BUTTON = "MenuButton"
    POPOVER = "Popover"
    SCROLLED_WINDOW = "ScrolledWindow"
    SEPARATOR = "Separator"
    SPINNER = "Spinner"
    STACK = "Stack"
    TOGGLE_BUTTON = "ToggleButton"
    WEB_VIEW = "WebView"


@dataclass
class WidgetSpec:
    """Declarative description of one widget, consumed once by the builder."""

    kind: WidgetKind | str
    properties: dict[str, Any] = field(default_factory=dict)
    events: dict[str, EventHandler] = field(default_factory=dict)
    visible: bool = True

    @property
    def name(self) -> str | None:
        return self.properties.get(NAME_PROPERTY)


@dataclass(frozen=True)
class GridChild:
    """A child placed in a grid cell (column `left`, row `top`)."""

    widget: Any
    left: int
    top: int
    width: int = 1
    height: int = 1


@dataclass(frozen=True)
class NamedPage:
    name: str
    widget: Any


@dataclass(frozen=True)
class IconSpec:
    icon_name: str
    size: int = 16


# Structural actions


@dataclass(frozen=True)
class Action:
    """Base class of the structural actions."""


@dataclass(frozen=True)
class AddChild(Action):
    child: Any


@dataclass(frozen=True)
class AttachChildren(Action):
    children: tuple[GridChild, ...]


@dataclass(frozen=True)
class PackStart(Action):
    child: Any


@dataclass(frozen=True)
class PackEnd(Action):
    child: Any


@dataclass(frozen=True)
class LoadUri(Action):
    uri: str


@dataclass(frozen=True)
class RunScript(Action):
    source: str


@dataclass(frozen=True)
class SetStyle(Action):
    stylesheet: str


@dataclass(frozen=True)
class SetImage(Action):
    icon: IconSpec


@dataclass(frozen=True)
class AddNamedPages(Action):
    pages: tuple[NamedPage, ...]


@dataclass(frozen=True)
class SetSizeRequest(Action):
    width: int
    height: int


@dataclass(frozen=True)
class SetTitle(Action):
    text: str


@dataclass(frozen=True)
class SetSubtitle(Action):
    text: str


@dataclass(frozen=True)
class SetWidthChars(Action):
    chars: int


@dataclass(frozen=True)
class SetBorderWidth(Action):
    width: int


@dataclass(frozen=True)
class SetShadowType(Action):
    shape: Any


@dataclass(frozen=True)
class SetAlignment(Action):
    alignment: Any


@dataclass(frozen=True)
class SetSpacing(Action):
    row: int
    column: int


@dataclass(frozen=True)
class SetMenu(Action):
    menu: Any


@dataclass(frozen=True)
class SetRelativeTo(Action):
    anchor: Any


@dataclass(frozen=True)
class StartSpinner(Action):
    pass


@dataclass(frozen=True)
class ShowAll(Action):
    pass


@dataclass(frozen=True)
class Passthrough(Action):
    """Direct property assignment for names outside the catalogue."""

    name: str
    value: Any


ACTION_TYPES: tuple[type[Action], ...] = (
    AddChild,
    AttachChildren,
    PackStart,
    PackEnd,
    LoadUri,
    RunScript,
    SetStyle,
    SetImage,
    AddNamedPages,
    SetSizeRequest,
    SetTitle,
    SetSubtitle,
    SetWidthChars,
    SetBorderWidth,
    SetShadowType,
    SetAlignment,
    SetSpacing,
    SetMenu,
    SetRelativeTo,
    StartSpinner,
    ShowAll,
    Passthrough,
)


def _grid_child(value: Any) -> GridChild:
    if isinstance(value, GridChild):
        return value
    if isinstance(value, Mapping):
        return GridChild(
            widget=value["widget"],
            left=int(value["left"]),
            top=int(value["top"]),
            width=int(value.get("width", 1)),
            height=int(value.get("height", 1)),
        )
    raise TypeError(f"not a grid child: {value!r}")


def _named_pages(value: Any) -> tuple[NamedPage, ...]:
    pages: list[NamedPage] = []
    for item in value:
        if isinstance(item, NamedPage):
            pages.append(item)
        elif isinstance(item, Mapping):
            pages.extend(NamedPage(str(name), widget) for name, widget in item.items())
        else:
            raise TypeError(f"not a named page: {item!r}")
    return tuple(pages)


def _icon(value: Any) -> IconSpec:
    if isinstance(value, IconSpec):
        return value
    if isinstance(value, Mapping):
        return IconSpec(str(value["icon_name"]), int(value.get("icon_size", 16)))
    return IconSpec(str(value))


def _script(value: Any) -> RunScript:
    if isinstance(value, str):
        return RunScript(value)
    return RunScript(str(value[0]))


def _pair(value: Sequence[int]) -> tuple[int, int]:
    first, second = value
    return int(first), int(second)


ACTION_CATALOGUE: dict[str, Callable[[Any], Action]] = {
    "add": AddChild,
    "attach": lambda v: AttachChildren(tuple(_grid_child(c) for c in v)),
    "pack_start": PackStart,
    "pack_end": PackEnd,
    "load_uri": lambda v: LoadUri(str(v)),
    "run_javascript": _script,
    "set_style": lambda v: SetStyle(str(v)),
    "set_image": lambda v: SetImage(_icon(v)),
    "add_named": lambda v: AddNamedPages(_named_pages(v)),
    "set_size_request": lambda v: SetSizeRequest(*_pair(v)),
    "set_title": lambda v: SetTitle(str(v)),
    "set_subtitle": lambda v: SetSubtitle(str(v)),
    "set_width_chars": lambda v: SetWidthChars(int(v)),
    "set_border_width": lambda v: SetBorderWidth(int(v)),
    "set_shadow_type": SetShadowType,
    "set_alignment": SetAlignment,
    "set_spacing": lambda v: SetSpacing(*_pair(v)),
    "set_menu": SetMenu,
    "relative_to": SetRelativeTo,
    "start": lambda _: StartSpinner(),
    "show_all": lambda _: ShowAll(),
}

COMMON_PROPERTIES = frozenset({"set_style", "set_size_request", "set_border_width", "show_all"})

KIND_PROPERTIES: dict[WidgetKind, frozenset[str]] = {
    WidgetKind.BOX: frozenset({"pack_start", "pack_end"}),
    WidgetKind.BUTTON: frozenset({"set_image"}),
    WidgetKind.ENTRY: frozenset({"set_width_chars", "set_alignment"}),
    WidgetKind.GRID: frozenset({"attach", "set_spacing"}),
    WidgetKind.HEADER_BAR: frozenset({"pack_start", "pack_end", "set_title", "set_subtitle"}),
    WidgetKind.IMAGE: frozenset({"set_image", "set_alignment"}),
    WidgetKind.LABEL: frozenset({"set_width_chars", "set_alignment"}),
    WidgetKind.MENU_BUTTON: frozenset({"set_image", "set_menu"}),
    WidgetKind.POPOVER: frozenset({"add", "relative_to"}),
    WidgetKind.SCROLLED_WINDOW: frozenset({"add", "set_shadow_type"}),
    WidgetKind.SEPARATOR: frozenset(),
    WidgetKind.SPINNER: frozenset({"start"}),
    WidgetKind.STACK: frozenset({"add_named"}),
    WidgetKind.TOGGLE_BUTTON: frozenset({"set_image"}),
    WidgetKind.WEB_VIEW: frozenset({"load_uri", "run_javascript"}),
}


def resolve_kind(kind: WidgetKind | str) -> WidgetKind:
    """Coerce `kind` into a `WidgetKind`, raising `ConstructionError` if unknown."""
    try:
        return WidgetKind(kind)
    except ValueError as ex:
        raise ConstructionError(f"Unknown widget kind: {kind!r}") from ex


def check_properties(kind: WidgetKind, properties: Mapping[str, Any]) -> None:
    """Reject structural properties the kind does not support."""
    allowed = KIND_PROPERTIES[kind] | COMMON_PROPERTIES
    for name in properties:
        if name in ACTION_CATALOGUE and name not in allowed:
            raise ConstructionError(f"Property {name!r} is not supported by {kind.value}")


def validate_spec(spec: WidgetSpec) -> WidgetKind:
    """Validate `spec` shallowly; nested specs are validated when built."""
    kind = resolve_kind(spec.kind)
    name = spec.name
    if name is not None and not isinstance(name, str):
        raise ConstructionError(f"Widget name must be a string, got {name!r}")
    check_properties(kind, spec.properties)
    for signal_name, handler in spec.events.items():
        if not callable(handler):
            raise ConstructionError(f"Handler for {signal_name!r} is not callable")
    return kind


def parse_property(name: str, value: Any) -> Action:
    """Turn one property entry into its structural action."""
    parser = ACTION_CATALOGUE.get(name)
    if parser is None:
        return Passthrough(name, value)
    try:
        return parser(value)
    except (KeyError, TypeError, ValueError) as ex:
        raise ConstructionError(f"Invalid argument for {name!r}: {value!r}") from ex
