"""Shared helpers: warnings, human-readable sizes and file reading."""

from __future__ import annotations

import sys

BUFFER_SIZE = 1024
"""Size of the buffer that component values must fit into."""

_PREFIXES = {
    1000: ("", "k", "M", "G", "T", "P", "E", "Z", "Y"),
    1024: ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi"),
}


def warn(message: str) -> None:
    """Write a warning line to standard error."""
    sys.stderr.write(f"{message}\n")
    sys.stderr.flush()


def fmt_human(num: int | float, base: int) -> str:
    """Format ``num`` with a decimal (1000) or binary (1024) unit prefix."""
    try:
        prefixes = _PREFIXES[base]
    except KeyError:
        raise ValueError(f"fmt_human: invalid base {base!r}") from None

    scaled = float(num)
    index = 0
    while index < len(prefixes) - 1 and scaled >= base:
        scaled /= base
        index += 1
    return f"{scaled:.1f} {prefixes[index]}"


def read_file(path: str) -> str | None:
    """Return the text of ``path``, or ``None`` after warning if it cannot be read."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return handle.read()
    except OSError as exc:
        warn(f"fopen '{path}': {exc.strerror}")
        return None