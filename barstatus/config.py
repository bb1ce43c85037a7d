"""Status bar configuration: the entries shown and how they are formatted."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Optional

from . import memory, network, system

INTERVAL = 150
"""Time between updates in milliseconds."""

UNKNOWN_STR = "n/a"
"""Text shown when a component cannot produce a value."""

MAXLEN = 2048
"""Maximum length of the whole status line, terminator included."""

_SPEC = re.compile(r"%([%s])")

Component = Callable[..., Optional[str]]


def _format(fmt: str, value: str) -> str:
    """Expand ``%s`` to ``value`` and ``%%`` to ``%``; other ``%`` stay as written."""

    def expand(match: re.Match[str]) -> str:
        return value if match.group(1) == "s" else "%"

    return _SPEC.sub(expand, fmt)


@dataclass(frozen=True)
class Arg:
    """One status entry: a component, a format and the component's argument."""

    func: Component
    fmt: str
    argument: Optional[str] = None

    def value(self, unknown: str = UNKNOWN_STR) -> str:
        """The entry's formatted text, using ``unknown`` when there is no value."""
        if self.argument is None:
            result = self.func()
        else:
            result = self.func(self.argument)
        return _format(self.fmt, unknown if result is None else result)


def default_args() -> list[Arg]:
    """The entries of the status line, left to right."""
    return [
        Arg(system.uptime, "UPT: %s | "),
        Arg(system.run_command, "CPU: %s | ", "sb-cpuusage"),
        Arg(system.run_command, "TMP: %s | ", "sb-cputemp"),
        Arg(memory.ram_perc, "MEM: %s% | "),
        Arg(memory.swap_perc, "SWP: %s% | "),
        Arg(network.ipv4, "IP: %s | ", "wwp0s20f0u3"),
        Arg(system.run_command, "VOL: %s | ", "sb-volume"),
        Arg(system.run_command, "BAT: %s | ", "sb-battery"),
        Arg(system.datetime, "%s", "%B %d, %I:%M-%p"),
    ]