"""ViewModel holding the loaded metadata records and the active file."""

from __future__ import annotations

from loguru import logger

from core.models import FileMetadataRecord


class MetadataVM:
    """Main application view-model.

    Keeps the per-file records in input order and the index of the file on
    screen. Navigation clamps to the available range.
    """

    def __init__(self, file_paths: list[str] | None = None) -> None:
        """Create a MetadataVM.

        Args:
            file_paths: Paths given on the command line, in display order.
        """
        self.file_paths: list[str] = list(file_paths or [])
        self.records: list[FileMetadataRecord] = []
        self._index = 0

    def set_records(self, records: list[FileMetadataRecord]) -> None:
        """Replace the loaded records and reset to the first file."""
        self.records = list(records)
        self._index = 0
        logger.info("Loaded {} record(s)", len(self.records))

    @property
    def file_count(self) -> int:
        """Number of files to page through."""
        return len(self.records) if self.records else len(self.file_paths)

    @property
    def index(self) -> int:
        return self._index

    @property
    def has_records(self) -> bool:
        return bool(self.records)

    @property
    def current_record(self) -> FileMetadataRecord | None:
        if not self.records:
            return None
        return self.records[self._index]

    def current_path(self) -> str:
        if self._index < len(self.file_paths):
            return self.file_paths[self._index]
        record = self.current_record
        return record.source_file if record else ""

    def next_file(self) -> bool:
        """Advance to the next file; returns False when already on the last one."""
        if self._index >= len(self.records) - 1:
            return False
        self._index += 1
        logger.debug("Showing file {}/{}", self._index + 1, len(self.records))
        return True

    def previous_file(self) -> bool:
        """Go back one file; returns False when already on the first one."""
        if self._index <= 0:
            return False
        self._index -= 1
        logger.debug("Showing file {}/{}", self._index + 1, len(self.records))
        return True
