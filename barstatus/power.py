"""Battery and CPU components."""

from __future__ import annotations

import os
import re

from .util import fmt_human, read_file

POWER_SUPPLY = "/sys/class/power_supply"
CPU_FREQ = "/sys/devices/system/cpu/cpu0/cpufreq/scaling_cur_freq"
PROC_STAT = "/proc/stat"

_STATE_SYMBOLS = {
    "Charging": "+",
    "Discharging": "-",
    "Full": "o",
    "Not charging": "o",
}

_INT = re.compile(r"\s*([+-]?\d+)")
_UINT = re.compile(r"\s*(\d+)")
_STATE = re.compile(r"[a-zA-Z ]{1,12}")


def _scan(pattern: re.Pattern[str], path: str) -> int | None:
    text = read_file(path)
    if text is None:
        return None
    match = pattern.match(text)
    return int(match.group(1)) if match else None


def _state(bat: str, base: str) -> str | None:
    text = read_file(os.path.join(base, bat, "status"))
    if text is None:
        return None
    match = _STATE.match(text)
    return match.group(0) if match else None


def _pick(bat: str, base: str, *names: str) -> str | None:
    for name in names:
        path = os.path.join(base, bat, name)
        if os.access(path, os.R_OK):
            return path
    return None


def battery_perc(bat: str, base: str = POWER_SUPPLY) -> str | None:
    """Battery capacity in percent."""
    value = _scan(_INT, os.path.join(base, bat, "capacity"))
    return None if value is None else str(value)


def battery_state(bat: str, base: str = POWER_SUPPLY) -> str | None:
    """Charging state as ``+``, ``-``, ``o`` or ``?``."""
    state = _state(bat, base)
    if state is None:
        return None
    return _STATE_SYMBOLS.get(state, "?")


def battery_remaining(bat: str, base: str = POWER_SUPPLY) -> str | None:
    """Remaining time when discharging, as hours and minutes; empty otherwise."""
    state = _state(bat, base)
    if state is None:
        return None

    charge_path = _pick(bat, base, "charge_now", "energy_now")
    if charge_path is None:
        return None
    charge_now = _scan(_UINT, charge_path)
    if charge_now is None:
        return None

    if state != "Discharging":
        return ""

    current_path = _pick(bat, base, "current_now", "power_now")
    if current_path is None:
        return None
    current_now = _scan(_UINT, current_path)
    if not current_now:
        return None

    timeleft = charge_now / current_now
    hours = int(timeleft)
    minutes = int((timeleft - hours) * 60)
    return f"{hours}h {minutes}m"


def cpu_freq(path: str = CPU_FREQ) -> str | None:
    """Current frequency of the first CPU."""
    khz = _scan(_UINT, path)
    if khz is None:
        return None
    return fmt_human(khz * 1000, 1000)


class CpuMeter:
    """CPU usage between successive readings of ``/proc/stat``."""

    _FIELDS = 7  # user nice system idle iowait irq softirq

    def __init__(self, path: str = PROC_STAT) -> None:
        self.path = path
        self._previous = [0.0] * self._FIELDS

    def _read(self) -> list[float] | None:
        text = read_file(self.path)
        if text is None:
            return None
        values = []
        for token in text.split()[1 : 1 + self._FIELDS]:
            try:
                values.append(float(token))
            except ValueError:
                break
        return values if len(values) == self._FIELDS else None

    def perc(self) -> str | None:
        """Usage in percent since the previous call; ``None`` on the first."""
        current = self._read()
        if current is None:
            return None
        before, self._previous = self._previous, current
        if before[0] == 0:
            return None

        total = sum(before) - sum(current)
        if total == 0:
            return None
        busy = [0, 1, 2, 5, 6]
        used = sum(before[i] for i in busy) - sum(current[i] for i in busy)
        return str(int(100 * used / total))


_meter = CpuMeter()


def cpu_perc() -> str | None:
    """System-wide CPU usage in percent since the previous call."""
    return _meter.perc()