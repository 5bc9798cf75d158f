"""Exception hierarchy shared across the core, infrastructure and UI layers."""

from __future__ import annotations


class MetadataViewerError(Exception):
    """Base exception for the application."""


class ToolNotFoundError(MetadataViewerError):
    """Raised when the extraction tool cannot be found on PATH."""

    def __init__(self, program: str) -> None:
        super().__init__(f"Program not found: {program}")
        self.program = program


class SpawnFailureError(MetadataViewerError):
    """Raised when a command exists but could not be started."""

    def __init__(self, argv: list[str], reason: str) -> None:
        super().__init__(f"Failed to start {' '.join(argv)}: {reason}")
        self.argv = list(argv)
        self.reason = reason


class UnparseableMetadataError(MetadataViewerError):
    """Raised when tool output is not a JSON array holding one object."""


class ConstructionError(MetadataViewerError):
    """Raised for a structurally invalid widget spec. Fatal."""


class CoordinateFormatError(MetadataViewerError, ValueError):
    """Raised when a GPS string does not hold exactly two coordinate groups."""
