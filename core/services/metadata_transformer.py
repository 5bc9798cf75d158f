"""Reshape raw exiftool JSON output into `FileMetadataRecord` objects.

The tool is invoked as ``exiftool -j -g -H -l <file>`` which prints a JSON
array holding one object per file. Top-level keys of that object are category
names (``File``, ``EXIF``, ``Composite``...) mapping to tag entries shaped like
``{"desc": "Image Width", "val": 4000}``.
"""

from __future__ import annotations

from collections.abc import Iterable
import json
from typing import Any

from loguru import logger

from core.errors import UnparseableMetadataError
from core.models import FileMetadataRecord, MetadataPair

EXCLUDED_CATEGORIES = frozenset({"SourceFile", "ExifTool"})


def _has_value(value: Any) -> bool:
    """True when `value` is present and not empty. Numeric zero counts as a value."""
    if value is None:
        return False
    if isinstance(value, (str, list, dict)):
        return len(value) > 0
    return True


def _category_pairs(entries: dict[str, Any]) -> tuple[MetadataPair, ...]:
    pairs: list[MetadataPair] = []
    for tag, entry in entries.items():
        if not isinstance(entry, dict) or not _has_value(entry.get("val")):
            continue
        label = entry.get("desc") or tag
        pairs.append(MetadataPair(str(label), entry["val"]))
    return tuple(pairs)


def parse_output(raw: str) -> FileMetadataRecord:
    """Parse the output of one tool invocation.

    Raises:
        UnparseableMetadataError: when `raw` is not a JSON array holding
            exactly one object (typically a directory was given).
    """
    try:
        document = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as ex:
        raise UnparseableMetadataError(f"Output is not JSON: {ex}") from ex

    if not isinstance(document, list) or len(document) != 1 or not isinstance(document[0], dict):
        raise UnparseableMetadataError("Expected a JSON array holding exactly one object")

    metadata: dict[str, Any] = document[0]
    categories: dict[str, tuple[MetadataPair, ...]] = {}
    for category, entries in metadata.items():
        if category in EXCLUDED_CATEGORIES:
            continue
        if not isinstance(entries, dict):
            logger.debug("Skipping non-object category {}", category)
            continue
        categories[category] = _category_pairs(entries)

    source_file = str(metadata.get("SourceFile", ""))
    return FileMetadataRecord(source_file=source_file, categories=categories)


def transform(raw_outputs: Iterable[str]) -> list[FileMetadataRecord]:
    """Transform every raw output, keeping input order."""
    records = [parse_output(raw) for raw in raw_outputs]
    logger.info(
        "Transformed metadata for {} file(s): {}",
        len(records),
        ", ".join(r.file_name for r in records),
    )
    return records
