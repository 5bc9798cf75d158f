"""UIBuilder: builds live Qt widgets from declarative `WidgetSpec` trees.

Construction order for every spec is fixed:

1. validate the spec and instantiate the widget for its kind;
2. register it under its ``name`` (last registration wins);
3. apply properties in mapping order through the structural action handlers,
   recursing into nested specs;
4. connect event handlers;
5. apply the initial visibility.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from PySide6.QtCore import QSize, SignalInstance
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QWidget
from loguru import logger

from app.views.builder.registry import UIContext
from app.views.builder.spec import (
    ACTION_TYPES,
    NAME_PROPERTY,
    Action,
    AddChild,
    AddNamedPages,
    AttachChildren,
    EventHandler,
    LoadUri,
    PackEnd,
    PackStart,
    Passthrough,
    RunScript,
    SetAlignment,
    SetBorderWidth,
    SetImage,
    SetMenu,
    SetRelativeTo,
    SetShadowType,
    SetSizeRequest,
    SetSpacing,
    SetStyle,
    SetSubtitle,
    SetTitle,
    SetWidthChars,
    ShowAll,
    StartSpinner,
    WidgetKind,
    WidgetSpec,
    check_properties,
    parse_property,
    resolve_kind,
    validate_spec,
)
from app.views.widgets.kinds import WIDGET_FACTORIES
from core.errors import ConstructionError

KIND_PROPERTY = "widgetKind"


class UIBuilder:
    """Constructs widgets from specs and records them in a `UIContext`."""

    def __init__(
        self,
        context: UIContext,
        factories: Mapping[WidgetKind, Callable[[], QWidget]] | None = None,
    ) -> None:
        self.context = context
        self._factories = dict(factories or WIDGET_FACTORIES)
        self._handlers: dict[type[Action], Callable[[QWidget, Any], None]] = {
            AddChild: self._add_child,
            AttachChildren: self._attach_children,
            PackStart: self._pack_start,
            PackEnd: self._pack_end,
            LoadUri: self._load_uri,
            RunScript: self._run_script,
            SetStyle: self._set_style,
            SetImage: self._set_image,
            AddNamedPages: self._add_named_pages,
            SetSizeRequest: self._set_size_request,
            SetTitle: self._set_title,
            SetSubtitle: self._set_subtitle,
            SetWidthChars: self._set_width_chars,
            SetBorderWidth: self._set_border_width,
            SetShadowType: self._set_shadow_type,
            SetAlignment: self._set_alignment,
            SetSpacing: self._set_spacing,
            SetMenu: self._set_menu,
            SetRelativeTo: self._set_relative_to,
            StartSpinner: self._start_spinner,
            ShowAll: self._show_all,
            Passthrough: self._passthrough,
        }
        missing = [t.__name__ for t in ACTION_TYPES if t not in self._handlers]
        if missing:
            raise ConstructionError(f"No handler for structural actions: {', '.join(missing)}")

    @property
    def handled_actions(self) -> frozenset[type[Action]]:
        return frozenset(self._handlers)

    # Public API

    def construct(self, spec: WidgetSpec) -> QWidget:
        """Build the widget described by `spec`, recursing into nested specs.

        Raises:
            ConstructionError: for an unknown kind, a structural property the
                kind does not support, or an unknown signal name.
        """
        kind = validate_spec(spec)
        factory = self._factories.get(kind)
        if factory is None:
            raise ConstructionError(f"No factory registered for {kind.value}")
        try:
            widget = factory()
        except ImportError as ex:
            raise ConstructionError(f"Cannot create {kind.value}: {ex}") from ex
        widget.setProperty(KIND_PROPERTY, kind.value)

        name = spec.name
        if name:
            widget.setObjectName(name)
            self.context.registry.register(name, widget)

        self._apply(widget, kind, spec.properties)
        self._connect_events(widget, spec.events)
        self._apply_visibility(widget, spec.visible)
        return widget

    def apply_properties(self, widget: QWidget, properties: Mapping[str, Any]) -> None:
        """Apply `properties` to an already built widget."""
        kind = resolve_kind(widget.property(KIND_PROPERTY))
        check_properties(kind, properties)
        self._apply(widget, kind, properties)

    # Steps

    def _apply(self, widget: QWidget, kind: WidgetKind, properties: Mapping[str, Any]) -> None:
        for prop, value in properties.items():
            if prop == NAME_PROPERTY:
                continue
            action = parse_property(prop, value)
            handler = self._handlers.get(type(action))
            if handler is None:
                raise ConstructionError(f"Unhandled action {type(action).__name__}")
            handler(widget, action)

    def _connect_events(self, widget: QWidget, events: Mapping[str, EventHandler]) -> None:
        for signal_name, handler in events.items():
            signal = getattr(widget, signal_name, None)
            if not isinstance(signal, SignalInstance):
                raise ConstructionError(
                    f"{type(widget).__name__} has no signal named {signal_name!r}"
                )
            signal.connect(self._make_slot(widget, handler))

    def _make_slot(self, widget: QWidget, handler: EventHandler) -> Callable[..., None]:
        context = self.context

        def slot(*args: Any) -> None:
            payload = args[0] if len(args) == 1 else (args or None)
            handler(widget, payload, context)

        return slot

    @staticmethod
    def _apply_visibility(widget: QWidget, visible: bool) -> None:
        # Widgets are parentless here; visible ones appear with their container.
        if not visible:
            widget.hide()

    def _resolve(self, child: Any) -> QWidget:
        if isinstance(child, WidgetSpec):
            return self.construct(child)
        if isinstance(child, QWidget):
            return child
        raise ConstructionError(f"Expected a WidgetSpec or widget, got {child!r}")

    # Structural action handlers

    def _add_child(self, widget: QWidget, action: AddChild) -> None:
        widget.add(self._resolve(action.child))

    def _attach_children(self, widget: QWidget, action: AttachChildren) -> None:
        for cell in action.children:
            child = self._resolve(cell.widget)
            widget.attach(child, cell.left, cell.top, cell.width, cell.height)

    def _pack_start(self, widget: QWidget, action: PackStart) -> None:
        widget.pack_start(self._resolve(action.child))

    def _pack_end(self, widget: QWidget, action: PackEnd) -> None:
        widget.pack_end(self._resolve(action.child))

    def _load_uri(self, widget: QWidget, action: LoadUri) -> None:
        logger.debug("Loading {} in {}", action.uri, widget.objectName())
        widget.load_uri(action.uri)

    def _run_script(self, widget: QWidget, action: RunScript) -> None:
        widget.run_javascript(action.source)

    def _set_style(self, widget: QWidget, action: SetStyle) -> None:
        widget.setStyleSheet(action.stylesheet)

    def _set_image(self, widget: QWidget, action: SetImage) -> None:
        icon = action.icon
        if hasattr(widget, "set_from_icon_name"):
            widget.set_from_icon_name(icon.icon_name, icon.size)
            return
        widget.setIcon(QIcon.fromTheme(icon.icon_name))
        widget.setIconSize(QSize(icon.size, icon.size))

    def _add_named_pages(self, widget: QWidget, action: AddNamedPages) -> None:
        for page in action.pages:
            child = self._resolve(page.widget)
            widget.add_named(child, page.name)
            self.context.registry.register(page.name, child)

    def _set_size_request(self, widget: QWidget, action: SetSizeRequest) -> None:
        # -1 keeps the natural size for that dimension
        if action.width >= 0:
            widget.setMinimumWidth(action.width)
        if action.height >= 0:
            widget.setMinimumHeight(action.height)

    def _set_title(self, widget: QWidget, action: SetTitle) -> None:
        widget.set_title(action.text)

    def _set_subtitle(self, widget: QWidget, action: SetSubtitle) -> None:
        widget.set_subtitle(action.text)

    def _set_width_chars(self, widget: QWidget, action: SetWidthChars) -> None:
        widget.setMinimumWidth(widget.fontMetrics().horizontalAdvance("x" * action.chars))

    def _set_border_width(self, widget: QWidget, action: SetBorderWidth) -> None:
        w = action.width
        layout = widget.layout()
        if layout is not None:
            layout.setContentsMargins(w, w, w, w)
        else:
            widget.setContentsMargins(w, w, w, w)

    def _set_shadow_type(self, widget: QWidget, action: SetShadowType) -> None:
        widget.setFrameShape(action.shape)

    def _set_alignment(self, widget: QWidget, action: SetAlignment) -> None:
        widget.setAlignment(action.alignment)

    def _set_spacing(self, widget: QWidget, action: SetSpacing) -> None:
        widget.set_spacing(action.row, action.column)

    def _set_menu(self, widget: QWidget, action: SetMenu) -> None:
        widget.setMenu(action.menu)

    def _set_relative_to(self, widget: QWidget, action: SetRelativeTo) -> None:
        widget.set_relative_to(self._resolve(action.anchor))

    def _start_spinner(self, widget: QWidget, action: StartSpinner) -> None:
        widget.start()

    def _show_all(self, widget: QWidget, action: ShowAll) -> None:
        widget.show()

    def _passthrough(self, widget: QWidget, action: Passthrough) -> None:
        if not widget.setProperty(action.name, action.value):
            logger.debug("Dynamic property {} set on {}", action.name, type(widget).__name__)
