"""
Host metric reporters.

Each reporter picks the platform's command from the command table, runs it
and turns the text output into a display string. Failures of any kind
collapse to ``UNAVAILABLE`` so one broken tool never takes down the whole
stats response.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Callable, Dict, NamedTuple, Optional

from .commands import Operation, build
from .executor import CommandExecutor
from .platforms import Platform, PlatformProfile

logger = logging.getLogger(__name__)

UNAVAILABLE = "N/A"


class CpuSummary(NamedTuple):
    """Where the usage token lives in `top -bn1` output."""
    marker: str
    head: Optional[int]  # only search the first N lines
    ignore_case: bool
    suffix: str


_CPU_SUMMARY = {
    # %Cpu(s):  3.1 us,  1.0 sy, ...
    Platform.LINUX: CpuSummary("Cpu(s)", None, False, "%"),
    # CPU:   2% usr   1% sys ...
    Platform.ALPINE: CpuSummary("CPU:", None, False, ""),
    # toybox: 800%cpu   5%user   0%nice ... on the fourth line, the
    # process header below it also mentions CPU
    Platform.TERMUX: CpuSummary("cpu", 4, True, ""),
}


@dataclass
class SystemStats:
    uptime: str = UNAVAILABLE
    temperature: str = UNAVAILABLE
    cpu_usage: str = UNAVAILABLE
    memory_usage: str = UNAVAILABLE
    disk_usage: str = UNAVAILABLE

    def to_dict(self) -> Dict[str, str]:
        return {
            "uptime": self.uptime,
            "temperature": self.temperature,
            "cpuUsage": self.cpu_usage,
            "memoryUsage": self.memory_usage,
            "diskUsage": self.disk_usage,
        }


def parse_thermal_zone(text: str) -> str:
    milli = int(text.strip())
    return f"{milli / 1000.0:.1f}C"


def parse_battery_temperature(text: str) -> str:
    # termux-battery-status already reports Celsius; the reading is passed through
    value = json.loads(text)["temperature"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"unexpected temperature {value!r}")
    return f"{value}C"


def parse_cpu(text: str, layout: CpuSummary) -> str:
    lines = text.splitlines()
    if layout.head is not None:
        lines = lines[: layout.head]
    marker = layout.marker.lower() if layout.ignore_case else layout.marker
    for line in lines:
        haystack = line.lower() if layout.ignore_case else line
        if marker in haystack:
            return f"{line.split()[1]}{layout.suffix}"
    raise ValueError(f"no line containing {layout.marker!r}")


def parse_free(text: str) -> str:
    """`free -m` second row: total in column 2, used in column 3."""
    fields = text.splitlines()[1].split()
    total = int(fields[1])
    used = int(fields[2])
    return f"{used}/{total}MB ({used * 100 / total:.1f}%)"


def parse_df(text: str) -> str:
    # Long device names make df wrap the data row onto a second line
    fields = " ".join(text.splitlines()[1:]).split()
    size, used, percent = fields[1], fields[2], fields[4]
    return f"{used}/{size} ({percent})"


class MetricReporter:
    def __init__(self, profile: PlatformProfile, executor: CommandExecutor) -> None:
        self.profile = profile
        self.executor = executor

    def _report(self, operation: Operation, parse: Callable[[str], str]) -> str:
        try:
            value = parse(self.executor.run(build(operation, self.profile.platform)))
        except Exception as e:  # noqa: BLE001 - every failure maps to the sentinel
            logger.debug("%s unavailable: %s", operation.value, e)
            return UNAVAILABLE
        return value or UNAVAILABLE

    def uptime(self) -> str:
        return self._report(Operation.UPTIME, str.strip)

    def temperature(self) -> str:
        if self.profile.platform is Platform.TERMUX:
            return self._report(Operation.TEMPERATURE, parse_battery_temperature)
        return self._report(Operation.TEMPERATURE, parse_thermal_zone)

    def cpu_usage(self) -> str:
        layout = _CPU_SUMMARY[self.profile.platform]
        return self._report(Operation.CPU, lambda text: parse_cpu(text, layout))

    def memory_usage(self) -> str:
        return self._report(Operation.MEMORY, parse_free)

    def disk_usage(self) -> str:
        return self._report(Operation.DISK, parse_df)

    def collect(self) -> SystemStats:
        return SystemStats(
            uptime=self.uptime(),
            temperature=self.temperature(),
            cpu_usage=self.cpu_usage(),
            memory_usage=self.memory_usage(),
            disk_usage=self.disk_usage(),
        )
