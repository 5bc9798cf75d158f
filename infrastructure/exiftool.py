"""ExifTool invocation: command building and the load pipeline."""

from __future__ import annotations

from collections.abc import Sequence

from PySide6.QtCore import QObject, Signal
from loguru import logger

from core.errors import MetadataViewerError, UnparseableMetadataError
from core.services.metadata_transformer import transform
from infrastructure.constants import DEFAULT_ARGUMENTS, DEFAULT_EXECUTABLE
from infrastructure.process_runner import ProcessRunner


def build_commands(
    paths: Sequence[str],
    executable: str = DEFAULT_EXECUTABLE,
    arguments: Sequence[str] = DEFAULT_ARGUMENTS,
) -> list[list[str]]:
    """Return one argv per input path."""
    return [[executable, *arguments, str(path)] for path in paths]


class MetadataLoader(QObject):
    """Runs the tool for each file and transforms its output into records.

    Emits `loaded(list[FileMetadataRecord])` on success. Spawn failures and
    unparseable output are emitted on `failed(error)`; nothing is raised.
    """

    loaded = Signal(list)
    failed = Signal(object)

    def __init__(
        self,
        executable: str = DEFAULT_EXECUTABLE,
        arguments: Sequence[str] = DEFAULT_ARGUMENTS,
        runner: ProcessRunner | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._executable = executable
        self._arguments = tuple(arguments)
        self._runner = runner or ProcessRunner(self)
        self._runner.error.connect(self._on_spawn_error)
        self._runner.completed.connect(self._on_completed)

    @property
    def runner(self) -> ProcessRunner:
        return self._runner

    def load(self, paths: Sequence[str]) -> None:
        """Start extraction for `paths`; results arrive via signals."""
        commands = build_commands(paths, self._executable, self._arguments)
        logger.info("Loading metadata for {} file(s) with {}", len(paths), self._executable)
        self._runner.run(commands)

    def _on_spawn_error(self, error: MetadataViewerError) -> None:
        self.failed.emit(error)

    def _on_completed(self, outputs: list[str]) -> None:
        if self._runner.has_failures:
            logger.info("Skipping transformation: {} command(s) failed", len(self._runner.failures))
            return
        try:
            records = transform(outputs)
        except UnparseableMetadataError as ex:
            logger.error("Unparseable metadata: {}", ex)
            self.failed.emit(ex)
            return
        self.loaded.emit(records)
