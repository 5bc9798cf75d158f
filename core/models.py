"""Core domain models for extracted file metadata."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, NamedTuple

FILE_CATEGORY = "File"
FILE_NAME_LABEL = "File Name"
MIME_TYPE_LABEL = "MIME Type"


class MetadataPair(NamedTuple):
    """A single (label, value) row of a metadata category."""

    label: str
    value: Any

    def display_value(self) -> str:
        """Render the value as text; numbers are kept numeric until here."""
        if isinstance(self.value, list):
            return ", ".join(str(v) for v in self.value)
        return str(self.value)


@dataclass(frozen=True)
class FileMetadataRecord:
    """Metadata for one input file, grouped by category in tool order."""

    source_file: str
    categories: Mapping[str, tuple[MetadataPair, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        frozen = {
            name: tuple(MetadataPair(*pair) for pair in pairs)
            for name, pairs in self.categories.items()
        }
        object.__setattr__(self, "categories", MappingProxyType(frozen))

    def pairs(self, category: str) -> tuple[MetadataPair, ...]:
        """Pairs of `category`, or an empty tuple when the category is absent."""
        return self.categories.get(category, ())

    def value_of(self, category: str, label: str) -> Any | None:
        """Return the first value labelled `label` in `category`."""
        for pair in self.pairs(category):
            if pair.label == label:
                return pair.value
        return None

    @property
    def file_name(self) -> str:
        """File name reported by the tool, falling back to the source path."""
        name = self.value_of(FILE_CATEGORY, FILE_NAME_LABEL)
        if name is not None:
            return str(name)
        return Path(self.source_file).name if self.source_file else ""

    @property
    def mime_type(self) -> str | None:
        value = self.value_of(FILE_CATEGORY, MIME_TYPE_LABEL)
        return str(value) if value is not None else None


@dataclass(frozen=True)
class GPSFix:
    """A decimal-degree position."""

    latitude: float
    longitude: float
