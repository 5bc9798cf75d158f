"""Tests for concurrent command execution and the exiftool loader."""

import sys

import pytest

from core.errors import SpawnFailureError, ToolNotFoundError, UnparseableMetadataError
from infrastructure.exiftool import MetadataLoader
from infrastructure.process_runner import ProcessRunner

TIMEOUT_MS = 15000
MISSING_TOOL = "getmetadata-test-no-such-program"

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX exec semantics")


@pytest.fixture
def text_file(tmp_path):
    def write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def broken_tool(tmp_path) -> str:
    """An executable script whose interpreter does not exist."""
    path = tmp_path / "broken_tool"
    path.write_text("#!/nonexistent/interpreter\n", encoding="utf-8")
    path.chmod(0o755)
    return str(path)


class TestProcessRunner:
    def test_results_follow_input_order_not_completion_order(
        self, qtbot, echo_command, text_file
    ):
        runner = ProcessRunner()
        commands = [
            echo_command(text_file("slow.txt", "slow one\nslow two\n"), delay=0.8),
            echo_command(text_file("mid.txt", "mid\n"), delay=0.4),
            echo_command(text_file("fast.txt", "fast\n"), delay=0.0),
        ]

        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS) as blocker:
            runner.run(commands)

        assert blocker.args[0] == ["slow one\nslow two\n", "mid\n", "fast\n"]
        assert runner.has_failures is False
        assert runner.is_running is False

    def test_no_commands_completes_immediately(self, qtbot):
        runner = ProcessRunner()
        with qtbot.waitSignal(runner.completed, timeout=1000) as blocker:
            runner.run([])
        assert blocker.args[0] == []

    def test_empty_output_and_missing_final_newline(self, qtbot, echo_command, text_file):
        runner = ProcessRunner()
        commands = [
            echo_command(text_file("empty.txt", "")),
            echo_command(text_file("tail.txt", "line\nno newline")),
        ]
        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS) as blocker:
            runner.run(commands)
        assert blocker.args[0] == ["", "line\nno newline"]

    def test_missing_program_reports_error_and_siblings_finish(
        self, qtbot, echo_command, text_file
    ):
        runner = ProcessRunner()
        errors = []
        runner.error.connect(errors.append)
        commands = [[MISSING_TOOL, "-j", "a.jpg"], echo_command(text_file("ok.txt", "ok\n"))]

        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS) as blocker:
            runner.run(commands)

        assert blocker.args[0] == ["", "ok\n"]
        assert len(errors) == 1
        assert isinstance(errors[0], ToolNotFoundError)
        assert errors[0].program == MISSING_TOOL
        assert runner.has_failures is True

    @posix_only
    def test_program_that_cannot_start_reports_spawn_failure(
        self, qtbot, echo_command, text_file, broken_tool
    ):
        runner = ProcessRunner()
        errors = []
        runner.error.connect(errors.append)
        commands = [echo_command(text_file("ok.txt", "ok\n"), delay=0.3), [broken_tool, "a.jpg"]]

        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS) as blocker:
            runner.run(commands)

        assert blocker.args[0] == ["ok\n", ""]
        assert len(errors) == 1
        assert isinstance(errors[0], SpawnFailureError)
        assert errors[0].argv == [broken_tool, "a.jpg"]
        assert runner.has_failures is True

    @posix_only
    @pytest.mark.parametrize("kind", ["directory", "not executable"])
    def test_existing_path_that_cannot_run_is_not_reported_missing(
        self, qtbot, tmp_path, kind
    ):
        if kind == "directory":
            program = tmp_path / "tool_dir"
            program.mkdir()
        else:
            program = tmp_path / "tool.sh"
            program.write_text("#!/bin/sh\necho hi\n", encoding="utf-8")
            program.chmod(0o644)
        runner = ProcessRunner()
        errors = []
        runner.error.connect(errors.append)

        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS) as blocker:
            runner.run([[str(program)]])

        assert blocker.args[0] == [""]
        assert len(errors) == 1
        assert isinstance(errors[0], SpawnFailureError)

    def test_missing_explicit_path_is_reported_missing(self, qtbot, tmp_path):
        runner = ProcessRunner()
        errors = []
        runner.error.connect(errors.append)
        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS):
            runner.run([[str(tmp_path / "nowhere" / "exiftool")]])
        assert isinstance(errors[0], ToolNotFoundError)

    def test_one_batch_at_a_time(self, qtbot, echo_command, text_file):
        runner = ProcessRunner()
        command = echo_command(text_file("a.txt", "a\n"), delay=0.5)
        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS):
            runner.run([command])
            with pytest.raises(RuntimeError):
                runner.run([command])

    def test_runner_is_reusable(self, qtbot, echo_command, text_file):
        runner = ProcessRunner()
        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS):
            runner.run([[MISSING_TOOL]])
        assert runner.has_failures

        with qtbot.waitSignal(runner.completed, timeout=TIMEOUT_MS) as blocker:
            runner.run([echo_command(text_file("b.txt", "b\n"))])
        assert blocker.args[0] == ["b\n"]
        assert runner.has_failures is False


class TestMetadataLoader:
    @staticmethod
    def _loader(echo_tool) -> MetadataLoader:
        # build_commands appends the file path after these arguments
        return MetadataLoader(executable=sys.executable, arguments=[str(echo_tool), "0"])

    def test_loads_records_in_input_order(self, qtbot, echo_tool, metadata_file, make_document):
        paths = [
            metadata_file("second.json", make_document("second.jpg")),
            metadata_file("first.json", make_document("first.png", mime="image/png")),
        ]
        loader = self._loader(echo_tool)

        with qtbot.waitSignal(loader.loaded, timeout=TIMEOUT_MS) as blocker:
            loader.load(paths)

        records = blocker.args[0]
        assert [r.file_name for r in records] == ["second.jpg", "first.png"]
        assert records[1].mime_type == "image/png"

    def test_directory_output_is_reported(self, qtbot, echo_tool, metadata_file, make_document):
        paths = [
            metadata_file("ok.json", make_document("ok.jpg")),
            metadata_file("folder.json", make_document("a.jpg") + make_document("b.jpg")),
        ]
        loader = self._loader(echo_tool)

        with qtbot.waitSignal(loader.failed, timeout=TIMEOUT_MS) as blocker:
            with qtbot.assertNotEmitted(loader.loaded):
                loader.load(paths)
                qtbot.waitUntil(lambda: not loader.runner.is_running, timeout=TIMEOUT_MS)

        assert isinstance(blocker.args[0], UnparseableMetadataError)

    def test_missing_tool_is_reported_without_transforming(self, qtbot):
        loader = MetadataLoader(executable=MISSING_TOOL)
        with qtbot.waitSignal(loader.failed, timeout=TIMEOUT_MS) as blocker:
            with qtbot.assertNotEmitted(loader.loaded):
                loader.load(["/photos/a.jpg"])

        error = blocker.args[0]
        assert isinstance(error, ToolNotFoundError)
        assert loader.runner.has_failures

    @posix_only
    def test_tool_that_cannot_start_is_reported_without_transforming(self, qtbot, broken_tool):
        loader = MetadataLoader(executable=broken_tool)
        with qtbot.waitSignal(loader.failed, timeout=TIMEOUT_MS) as blocker:
            with qtbot.assertNotEmitted(loader.loaded):
                loader.load(["/photos/a.jpg"])
                qtbot.waitUntil(lambda: not loader.runner.is_running, timeout=TIMEOUT_MS)

        assert isinstance(blocker.args[0], SpawnFailureError)
        assert loader.runner.has_failures
