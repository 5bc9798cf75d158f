"""Named widget registry and the context handed to event handlers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from PySide6.QtWidgets import QWidget
from loguru import logger


class WidgetRegistry:
    """Maps stable names to widgets. Last registration of a name wins."""

    def __init__(self) -> None:
        self._widgets: dict[str, QWidget] = {}

    def register(self, name: str, widget: QWidget) -> None:
        previous = self._widgets.get(name)
        if previous is not None and previous is not widget:
            logger.debug("Widget name re-registered: {}", name)
        self._widgets[name] = widget

    def get(self, name: str) -> QWidget:
        try:
            return self._widgets[name]
        except KeyError:
            raise KeyError(f"No widget registered as {name!r}") from None

    def get_many(self, names: Iterable[str]) -> list[QWidget]:
        return [self.get(name) for name in names]

    def names(self) -> list[str]:
        return list(self._widgets)

    def purge(self, widgets: Iterable[QWidget]) -> int:
        """Drop every entry bound to one of `widgets`; returns the count."""
        doomed = {id(w) for w in widgets}
        stale = [name for name, w in self._widgets.items() if id(w) in doomed]
        for name in stale:
            del self._widgets[name]
        return len(stale)

    def __contains__(self, name: object) -> bool:
        return name in self._widgets

    def __len__(self) -> int:
        return len(self._widgets)


class UIContext:
    """Shared state passed by reference to the builder and every handler.

    Attributes:
        registry: Name to widget mapping filled by the builder.
        session: The owning application object (window controller), so
            handlers can switch pages or trigger a rebuild.
    """

    def __init__(self, session: Any | None = None) -> None:
        self.registry = WidgetRegistry()
        self.session = session

    def widget(self, name: str) -> QWidget:
        return self.registry.get(name)

    def widgets(self, *names: str) -> list[QWidget]:
        return self.registry.get_many(names)

    def teardown(self, *containers: QWidget) -> int:
        """Destroy all children of `containers` and forget their names.

        Containers must provide `take_children()` returning the detached
        child widgets.
        """
        removed = 0
        for container in containers:
            for child in container.take_children():
                self.registry.purge([child, *child.findChildren(QWidget)])
                child.hide()
                child.deleteLater()
                removed += 1
        logger.debug("Tore down {} widget(s)", removed)
        return removed
