"""Memory and swap usage components read from ``/proc/meminfo``."""

from __future__ import annotations

import re

from .util import fmt_human, read_file

MEMINFO = "/proc/meminfo"

_LINE = re.compile(r"^([^:\s]+):\s*(-?\d+)", re.MULTILINE)


def _trunc_div(num: int, den: int) -> int:
    """Integer division that rounds toward zero."""
    quotient = abs(num) // abs(den)
    return quotient if (num < 0) == (den < 0) else -quotient


def parse_meminfo(text: str) -> dict[str, int]:
    """Map each ``/proc/meminfo`` field name to its value in kB."""
    return {name: int(value) for name, value in _LINE.findall(text)}


def _fields(path: str, *names: str) -> tuple[int, ...] | None:
    text = read_file(path)
    if text is None:
        return None
    info = parse_meminfo(text)
    try:
        return tuple(info[name] for name in names)
    except KeyError:
        return None


def ram_free(path: str = MEMINFO) -> str | None:
    """Memory available for new allocations."""
    fields = _fields(path, "MemTotal", "MemFree", "MemAvailable")
    if fields is None:
        return None
    return fmt_human(fields[2] * 1024, 1024)


def ram_perc(path: str = MEMINFO) -> str | None:
    """Percentage of memory in use, not counting buffers and page cache."""
    fields = _fields(path, "MemTotal", "MemFree", "Buffers", "Cached")
    if fields is None:
        return None
    total, free, buffers, cached = fields
    if total == 0:
        return None
    used = (total - free) - (buffers + cached)
    return str(_trunc_div(100 * used, total))


def ram_total(path: str = MEMINFO) -> str | None:
    """Total amount of memory."""
    fields = _fields(path, "MemTotal")
    if fields is None:
        return None
    return fmt_human(fields[0] * 1024, 1024)


def ram_used(path: str = MEMINFO) -> str | None:
    """Memory in use, not counting buffers and page cache."""
    fields = _fields(path, "MemTotal", "MemFree", "Buffers", "Cached")
    if fields is None:
        return None
    total, free, buffers, cached = fields
    return fmt_human((total - free - buffers - cached) * 1024, 1024)


def swap_free(path: str = MEMINFO) -> str | None:
    """Free swap space."""
    fields = _fields(path, "SwapFree")
    if fields is None:
        return None
    return fmt_human(fields[0] * 1024, 1024)


def swap_perc(path: str = MEMINFO) -> str | None:
    """Percentage of swap in use, not counting cached swap."""
    fields = _fields(path, "SwapTotal", "SwapFree", "SwapCached")
    if fields is None:
        return None
    total, free, cached = fields
    if total == 0:
        return None
    return str(_trunc_div(100 * (total - free - cached), total))


def swap_total(path: str = MEMINFO) -> str | None:
    """Total swap space."""
    fields = _fields(path, "SwapTotal")
    if fields is None:
        return None
    return fmt_human(fields[0] * 1024, 1024)


def swap_used(path: str = MEMINFO) -> str | None:
    """Swap space in use, not counting cached swap."""
    fields = _fields(path, "SwapTotal", "SwapFree", "SwapCached")
    if fields is None:
        return None
    total, free, cached = fields
    return fmt_human((total - free - cached) * 1024, 1024)