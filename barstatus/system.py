"""Status components for general system information."""

from __future__ import annotations

import os
import pwd
import re
import socket
import subprocess
import sys
import time

from .util import BUFFER_SIZE, fmt_human, read_file, warn

ENTROPY_AVAIL = "/proc/sys/kernel/random/entropy_avail"

# fgets into the shared buffer keeps at most this many characters of a line.
_LINE_MAX = BUFFER_SIZE - 2

_UINT = re.compile(r"\s*(\d+)")


def _leading_uint(text: str | None) -> int | None:
    if text is None:
        return None
    match = _UINT.match(text)
    return int(match.group(1)) if match else None


def _chomp(line: str) -> str | None:
    cut = line.rfind("\n")
    if cut >= 0:
        line = line[:cut]
    return line or None


def cat(path: str) -> str | None:
    """Return the first line of a file, without its newline."""
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            line = handle.readline(_LINE_MAX)
    except OSError as exc:
        warn(f"fopen '{path}': {exc.strerror}")
        return None
    return _chomp(line)


def datetime(fmt: str) -> str | None:
    """Return the local time formatted with a strftime format."""
    result = time.strftime(fmt, time.localtime())
    if not result or len(result) >= BUFFER_SIZE:
        warn("strftime: Result string exceeds buffer size")
        return None
    return result


def _statvfs(path: str) -> os.statvfs_result | None:
    try:
        return os.statvfs(path)
    except OSError as exc:
        warn(f"statvfs '{path}': {exc.strerror}")
        return None


def disk_free(path: str) -> str | None:
    """Space available to unprivileged users on the filesystem at ``path``."""
    fs = _statvfs(path)
    if fs is None:
        return None
    return fmt_human(fs.f_frsize * fs.f_bavail, 1024)


def disk_perc(path: str) -> str | None:
    """Percentage of the filesystem at ``path`` that is in use."""
    fs = _statvfs(path)
    if fs is None or fs.f_blocks == 0:
        return None
    return str(int(100 * (1 - fs.f_bavail / fs.f_blocks)))


def disk_total(path: str) -> str | None:
    """Total size of the filesystem at ``path``."""
    fs = _statvfs(path)
    if fs is None:
        return None
    return fmt_human(fs.f_frsize * fs.f_blocks, 1024)


def disk_used(path: str) -> str | None:
    """Used space of the filesystem at ``path``."""
    fs = _statvfs(path)
    if fs is None:
        return None
    return fmt_human(fs.f_frsize * (fs.f_blocks - fs.f_bfree), 1024)


def entropy(path: str = ENTROPY_AVAIL) -> str | None:
    """Available kernel entropy; infinite on the BSDs."""
    if sys.platform.startswith(("openbsd", "freebsd")):
        return "\u221e"
    value = _leading_uint(read_file(path))
    return None if value is None else str(value)


def hostname() -> str | None:
    """The host name of this machine."""
    try:
        return socket.gethostname()
    except OSError as exc:
        warn(f"gethostbyname: {exc.strerror}")
        return None


def kernel_release() -> str | None:
    """The kernel release, as ``uname -r`` prints it."""
    try:
        return os.uname().release
    except OSError as exc:
        warn(f"uname: {exc.strerror}")
        return None


def load_avg() -> str | None:
    """The 1, 5 and 15 minute load averages."""
    try:
        one, five, fifteen = os.getloadavg()
    except OSError:
        warn("getloadavg: Failed to obtain load average")
        return None
    return f"{one:.2f} {five:.2f} {fifteen:.2f}"


def num_files(path: str) -> str | None:
    """Number of entries in a directory, not counting ``.`` and ``..``."""
    try:
        with os.scandir(path) as entries:
            count = sum(1 for _ in entries)
    except OSError as exc:
        warn(f"opendir '{path}': {exc.strerror}")
        return None
    return str(count)


def run_command(cmd: str) -> str | None:
    """Run a shell command and return the first line of its output."""
    try:
        proc = subprocess.Popen(
            cmd,
            shell=True,
            stdout=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        warn(f"popen '{cmd}': {exc.strerror}")
        return None
    with proc:
        line = proc.stdout.readline(_LINE_MAX)
    return _chomp(line)


def _uptime_clock() -> int:
    for name in ("CLOCK_BOOTTIME", "CLOCK_UPTIME"):
        clock = getattr(time, name, None)
        if clock is not None:
            return clock
    return time.CLOCK_MONOTONIC


def uptime() -> str | None:
    """System uptime as hours and minutes."""
    clock = _uptime_clock()
    try:
        seconds = int(time.clock_gettime(clock))
    except OSError:
        warn(f"clock_gettime {clock}")
        return None
    hours, rest = divmod(seconds, 3600)
    return f"{hours}h {rest // 60}m"


def gid() -> str:
    """Real group id of the current process."""
    return str(os.getgid())


def uid() -> str:
    """Effective user id of the current process."""
    return str(os.geteuid())


def username() -> str | None:
    """Name of the effective user."""
    euid = os.geteuid()
    try:
        return pwd.getpwuid(euid).pw_name
    except KeyError:
        warn(f"getpwuid '{euid}': no such user")
        return None


def temp(file: str) -> str | None:
    """Temperature in degrees Celsius from a millidegree sensor file."""
    value = _leading_uint(read_file(file))
    return None if value is None else str(value // 1000)