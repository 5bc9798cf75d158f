"""Defaults shared by settings loading and the exiftool pipeline."""

DEFAULT_EXECUTABLE = "exiftool"
# JSON output, grouped by family 0, with tag ids and long (desc/val) entries.
DEFAULT_ARGUMENTS: tuple[str, ...] = ("-j", "-g", "-H", "-l")
