"""Command-line entry point that writes the status line periodically."""

from __future__ import annotations

import os
import shutil
import signal
import subprocess
import sys
import threading
import time
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .config import INTERVAL, MAXLEN, UNKNOWN_STR, Arg, default_args
from .util import warn

VERSION = "1.1"
PROG = "barstatus"
USAGE = f"usage: {PROG} [-v] [-s] [-1]"


class UsageError(Exception):
    """The command line is not valid."""


@dataclass(frozen=True)
class Options:
    """Parsed command-line flags."""

    to_stdout: bool = False
    once: bool = False
    version: bool = False


def parse_args(argv: Sequence[str]) -> Options:
    """Parse ``-v``, ``-s`` and ``-1``; flags may be combined as in ``-s1``."""
    to_stdout = once = False
    args = list(argv)
    index = 0
    while index < len(args) and args[index].startswith("-") and len(args[index]) > 1:
        arg = args[index]
        index += 1
        if arg == "--":
            break
        for flag in arg[1:]:
            if flag == "v":
                return Options(to_stdout, once, version=True)
            if flag == "1":
                once = True
                to_stdout = True
            elif flag == "s":
                to_stdout = True
            else:
                raise UsageError(USAGE)
    if index < len(args):
        raise UsageError(USAGE)
    return Options(to_stdout, once)


def render_status(
    entries: Iterable[Arg], unknown: str = UNKNOWN_STR, maxlen: int = MAXLEN
) -> str:
    """Join the formatted entries, cutting off where ``maxlen`` is reached."""
    status = ""
    for entry in entries:
        piece = entry.value(unknown)
        room = maxlen - len(status)
        if len(piece) >= room:
            status += piece[: max(room - 1, 0)]
            warn("vsnprintf: Output truncated")
            break
        status += piece
    return status


class _RootName:
    """Sets the name of the X root window."""

    def __init__(self) -> None:
        self._tool = shutil.which("xsetroot")
        if not os.environ.get("DISPLAY") or self._tool is None:
            raise OSError("XOpenDisplay: Failed to open display")

    def store(self, text: str) -> None:
        result = subprocess.run([self._tool, "-name", text], check=False)
        if result.returncode != 0:
            raise OSError("XStoreName: Allocation failed")

    def close(self) -> None:
        subprocess.run([self._tool, "-name", ""], check=False)


class _Signals:
    """Stops on SIGINT or SIGTERM; SIGUSR1 only cuts the current wait short."""

    def __init__(self) -> None:
        self.done = False
        self._wake = threading.Event()
        self._saved: dict[int, object] = {}

    def _handle(self, signo: int, frame: object) -> None:
        if signo != signal.SIGUSR1:
            self.done = True
        self._wake.set()

    def __enter__(self) -> "_Signals":
        for signo in (signal.SIGINT, signal.SIGTERM, signal.SIGUSR1):
            self._saved[signo] = signal.signal(signo, self._handle)
        return self

    def __exit__(self, *exc: object) -> None:
        for signo, handler in self._saved.items():
            signal.signal(signo, handler)

    def wait(self, seconds: float) -> None:
        self._wake.wait(seconds)
        self._wake.clear()


def _run(options: Options) -> int:
    entries = default_args()
    try:
        display = None if options.to_stdout else _RootName()
    except OSError as exc:
        warn(str(exc))
        return 1

    with _Signals() as signals:
        done = options.once
        while True:
            start = time.monotonic()
            status = render_status(entries, UNKNOWN_STR, MAXLEN)
            try:
                if display is None:
                    sys.stdout.write(status + "\n")
                    sys.stdout.flush()
                else:
                    display.store(status)
            except OSError as exc:
                warn(f"puts: {exc}" if display is None else str(exc))
                return 1

            if done or signals.done:
                break
            remaining = INTERVAL / 1000 - (time.monotonic() - start)
            if remaining >= 0:
                signals.wait(remaining)
            if signals.done:
                break

    if display is not None:
        display.close()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the status monitor; returns the exit status."""
    if argv is None:
        argv = sys.argv[1:]
    try:
        options = parse_args(argv)
    except UsageError as exc:
        warn(str(exc))
        return 1
    if options.version:
        warn(f"{PROG}-{VERSION}")
        return 1
    return _run(options)


if __name__ == "__main__":
    sys.exit(main())