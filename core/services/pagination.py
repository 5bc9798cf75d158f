"""Decide when a category page needs a scrollable wrapper."""

from __future__ import annotations

WIDGETS_PER_PAIR = 2  # label + value entry
SCROLL_WIDGET_THRESHOLD = 42


def widget_count(pair_count: int) -> int:
    return pair_count * WIDGETS_PER_PAIR


def needs_scroll(pair_count: int) -> bool:
    """True when a category of `pair_count` pairs renders more than 42 widgets."""
    return widget_count(pair_count) > SCROLL_WIDGET_THRESHOLD
