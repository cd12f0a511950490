"""
Command templates for every (operation, platform) pair.

All platform branching for external tools lives in this table. Templates are
argument vectors; operations that take a package name get it appended as its
own argument by `build()`.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Tuple

from .platforms import Platform


class Operation(str, Enum):
    UPTIME = "uptime"
    TEMPERATURE = "temperature"
    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    PACKAGE_LIST = "package-list"
    PACKAGE_INSTALL = "package-install"
    PACKAGE_UNINSTALL = "package-uninstall"
    SERVICE_LIST = "service-list"
    PROCESS_LIST = "process-list"
    LIFECYCLE_START = "start"
    LIFECYCLE_STOP = "stop"
    LIFECYCLE_RESTART = "restart"


THERMAL_ZONE = "/sys/class/thermal/thermal_zone0/temp"

_L, _A, _T = Platform.LINUX, Platform.ALPINE, Platform.TERMUX

COMMANDS: Dict[Tuple[Operation, Platform], Tuple[str, ...]] = {
    # Busybox and Termux uptime have no pretty flag
    (Operation.UPTIME, _L): ("uptime", "-p"),
    (Operation.UPTIME, _A): ("uptime",),
    (Operation.UPTIME, _T): ("uptime",),

    (Operation.TEMPERATURE, _L): ("cat", THERMAL_ZONE),
    (Operation.TEMPERATURE, _A): ("cat", THERMAL_ZONE),
    (Operation.TEMPERATURE, _T): ("termux-battery-status",),

    (Operation.CPU, _L): ("top", "-bn1"),
    (Operation.CPU, _A): ("top", "-bn1"),
    (Operation.CPU, _T): ("top", "-bn1"),

    (Operation.MEMORY, _L): ("free", "-m"),
    (Operation.MEMORY, _A): ("free", "-m"),
    (Operation.MEMORY, _T): ("free", "-m"),

    (Operation.DISK, _L): ("df", "-h", "/"),
    (Operation.DISK, _A): ("df", "-h", "/"),
    (Operation.DISK, _T): ("df", "-h", "/"),

    (Operation.PACKAGE_LIST, _L): ("dpkg", "-l"),
    (Operation.PACKAGE_LIST, _A): ("apk", "info"),
    (Operation.PACKAGE_LIST, _T): ("pkg", "list-installed"),

    (Operation.PACKAGE_INSTALL, _L): ("apt-get", "install", "-y"),
    (Operation.PACKAGE_INSTALL, _A): ("apk", "add"),
    (Operation.PACKAGE_INSTALL, _T): ("pkg", "install", "-y"),

    (Operation.PACKAGE_UNINSTALL, _L): ("apt-get", "remove", "-y"),
    (Operation.PACKAGE_UNINSTALL, _A): ("apk", "del"),
    (Operation.PACKAGE_UNINSTALL, _T): ("pkg", "uninstall", "-y"),

    (Operation.SERVICE_LIST, _L): (
        "systemctl", "list-units", "--type=service", "--state=running", "--no-pager", "--no-legend",
    ),
    (Operation.SERVICE_LIST, _A): ("rc-status", "-s"),
    # Termux has no service manager; process names stand in
    (Operation.SERVICE_LIST, _T): ("ps", "aux"),

    (Operation.PROCESS_LIST, _L): ("ps", "aux"),
    (Operation.PROCESS_LIST, _A): ("ps", "aux"),
    (Operation.PROCESS_LIST, _T): ("ps", "aux"),

    # Lifecycle actions only acknowledge for now on every platform
    (Operation.LIFECYCLE_START, _L): ("echo", "Start command received"),
    (Operation.LIFECYCLE_START, _A): ("echo", "Start command received"),
    (Operation.LIFECYCLE_START, _T): ("echo", "Start command received"),
    (Operation.LIFECYCLE_STOP, _L): ("echo", "Stop command received"),
    (Operation.LIFECYCLE_STOP, _A): ("echo", "Stop command received"),
    (Operation.LIFECYCLE_STOP, _T): ("echo", "Stop command received"),
    (Operation.LIFECYCLE_RESTART, _L): ("echo", "Restart command received"),
    (Operation.LIFECYCLE_RESTART, _A): ("echo", "Restart command received"),
    (Operation.LIFECYCLE_RESTART, _T): ("echo", "Restart command received"),
}


def build(operation: Operation, platform: Platform, argument: Optional[str] = None) -> List[str]:
    """Return the argv for `operation` on `platform`, with `argument` appended if given."""
    argv = list(COMMANDS[(operation, platform)])
    if argument is not None:
        argv.append(argument)
    return argv
