"""Concurrent external command execution on the Qt event loop.

Every command runs in its own `QProcess`. Standard output is consumed line by
line as it arrives and folded into one string per command. The runner emits
`completed` once all commands have settled, with results in input order.
"""

from __future__ import annotations

import os
import shutil

from PySide6.QtCore import QObject, QProcess, Signal
from loguru import logger

from core.errors import MetadataViewerError, SpawnFailureError, ToolNotFoundError


def _decode(data) -> str:
    return bytes(data).decode("utf-8", errors="replace")


class _CommandTask(QObject):
    """One spawned command yielding text lines until its stream closes.

    Emits `lineReceived(index, line)` for every decoded line, `settled(index)`
    exactly once when the stream is exhausted, and `failed(index, error)` when
    the process could not be started (followed by `settled`).
    """

    lineReceived = Signal(int, str)
    settled = Signal(int)
    failed = Signal(int, object)

    def __init__(self, index: int, argv: list[str], parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._index = index
        self._argv = list(argv)
        self._done = False
        self._process = QProcess(self)
        self._process.setProcessChannelMode(QProcess.ProcessChannelMode.SeparateChannels)
        self._process.readyReadStandardOutput.connect(self._read_lines)
        self._process.finished.connect(self._on_finished)
        self._process.errorOccurred.connect(self._on_error)

    @property
    def argv(self) -> list[str]:
        return list(self._argv)

    def start(self) -> None:
        if not self._argv:
            self._fail(SpawnFailureError(self._argv, "empty command"))
            return
        program, *arguments = self._argv
        located = os.path.dirname(program) and os.path.exists(program)
        if shutil.which(program) is None and not located:
            # Existing paths that cannot run fail in QProcess as spawn failures.
            self._fail(ToolNotFoundError(program))
            return
        logger.debug("Spawning [{}]: {}", self._index, " ".join(self._argv))
        self._process.setProgram(program)
        self._process.setArguments(arguments)
        self._process.start()

    def _read_lines(self) -> None:
        while self._process.canReadLine():
            self.lineReceived.emit(self._index, _decode(self._process.readLine()))

    def _on_finished(self, exit_code: int, exit_status: QProcess.ExitStatus) -> None:
        self._read_lines()
        tail = self._process.readAllStandardOutput()
        if tail:
            self.lineReceived.emit(self._index, _decode(tail))

        stderr = _decode(self._process.readAllStandardError()).strip()
        if stderr:
            logger.warning("[{}] {} stderr: {}", self._index, self._argv[0], stderr)
        if exit_status != QProcess.ExitStatus.NormalExit or exit_code != 0:
            logger.warning(
                "[{}] {} exited with code {} ({})",
                self._index,
                self._argv[0],
                exit_code,
                exit_status,
            )
        self._settle()

    def _on_error(self, error: QProcess.ProcessError) -> None:
        if error == QProcess.ProcessError.FailedToStart:
            self._fail(SpawnFailureError(self._argv, self._process.errorString()))
        else:
            # Crashes and read errors still end in `finished`.
            logger.warning(
                "[{}] process error {}: {}", self._index, error, self._process.errorString()
            )

    def _fail(self, error: MetadataViewerError) -> None:
        if self._done:
            return
        self.failed.emit(self._index, error)
        self._settle()

    def _settle(self) -> None:
        if self._done:
            return
        self._done = True
        self.settled.emit(self._index)


class ProcessRunner(QObject):
    """Runs a batch of commands concurrently and joins their output.

    `completed(list[str])` carries one output string per command, in the order
    the commands were given. `error(object)` receives a `ToolNotFoundError` or
    `SpawnFailureError` as soon as a command fails to start; siblings keep
    running and the failed slot settles with an empty string.
    """

    completed = Signal(list)
    error = Signal(object)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._tasks: list[_CommandTask] = []
        self._buffers: list[list[str]] = []
        self._pending = 0
        self._failures: list[MetadataViewerError] = []

    @property
    def is_running(self) -> bool:
        return self._pending > 0

    @property
    def has_failures(self) -> bool:
        """True when any command of the last batch failed to start."""
        return bool(self._failures)

    @property
    def failures(self) -> list[MetadataViewerError]:
        return list(self._failures)

    def run(self, commands: list[list[str]]) -> None:
        """Spawn every command; `completed` fires when all have settled."""
        if self.is_running:
            raise RuntimeError("ProcessRunner is already running a batch")

        self._release_tasks()
        self._failures = []
        self._buffers = [[] for _ in commands]
        self._pending = len(commands)
        logger.info("Running {} command(s)", len(commands))

        if not commands:
            self.completed.emit([])
            return

        self._tasks = [_CommandTask(i, argv, self) for i, argv in enumerate(commands)]
        for task in self._tasks:
            task.lineReceived.connect(self._on_line)
            task.failed.connect(self._on_failed)
            task.settled.connect(self._on_settled)
        for task in list(self._tasks):
            task.start()

    def _on_line(self, index: int, line: str) -> None:
        self._buffers[index].append(line)

    def _on_failed(self, index: int, error: MetadataViewerError) -> None:
        logger.error("Command {} failed to start: {}", index, error)
        self._failures.append(error)
        self._buffers[index] = []
        self.error.emit(error)

    def _on_settled(self, index: int) -> None:
        self._pending -= 1
        logger.debug("Command {} settled, {} pending", index, self._pending)
        if self._pending == 0:
            results = ["".join(chunks) for chunks in self._buffers]
            self.completed.emit(results)

    def _release_tasks(self) -> None:
        for task in self._tasks:
            task.deleteLater()
        self._tasks = []
