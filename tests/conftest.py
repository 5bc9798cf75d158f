"""Shared fixtures: offscreen Qt and a stand-in for the exiftool binary."""

import json
import os
from pathlib import Path
import sys

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Invoked as: python echo_tool.py <delay seconds> <path>
# Sleeps, then prints the file content verbatim, like the tool prints its JSON.
ECHO_TOOL_SOURCE = """\
import sys
import time

delay, path = float(sys.argv[1]), sys.argv[2]
time.sleep(delay)
with open(path, encoding="utf-8") as handle:
    sys.stdout.write(handle.read())
sys.stdout.flush()
"""


@pytest.fixture
def echo_tool(tmp_path) -> Path:
    script = tmp_path / "echo_tool.py"
    script.write_text(ECHO_TOOL_SOURCE, encoding="utf-8")
    return script


@pytest.fixture
def echo_command(echo_tool):
    """Build an argv that prints `path` after `delay` seconds."""

    def build(path, delay: float = 0.0) -> list[str]:
        return [sys.executable, str(echo_tool), str(delay), str(path)]

    return build


def tool_document(file_name: str, mime: str = "image/jpeg", **categories) -> list[dict]:
    """A document shaped like ``exiftool -j -g -H -l`` output for one file."""
    metadata = {
        "SourceFile": f"/photos/{file_name}",
        "ExifTool": {"ExifToolVersion": {"desc": "ExifTool Version Number", "val": 12.4}},
        "File": {
            "FileName": {"id": "FileName", "desc": "File Name", "val": file_name},
            "FileSize": {"id": "FileSize", "desc": "File Size", "val": "2.1 MB"},
            "MIMEType": {"id": "MIMEType", "desc": "MIME Type", "val": mime},
        },
    }
    metadata.update(categories)
    return [metadata]


@pytest.fixture
def metadata_file(tmp_path):
    """Write a tool document to disk and return its path as a string."""

    def write(name: str, document) -> str:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return str(path)

    return write


@pytest.fixture
def make_document():
    return tool_document
