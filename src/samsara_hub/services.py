"""Running service enumeration."""
from __future__ import annotations

import logging
from typing import List

from .commands import Operation, build
from .errors import ExecutionError
from .executor import CommandExecutor
from .platforms import Platform, PlatformProfile

logger = logging.getLogger(__name__)

MAX_SERVICES = 20

# Header names of the command column: procps and busybox print COMMAND,
# toybox prints CMD or ARGS depending on the -o fields
_COMMAND_HEADERS = ("COMMAND", "CMD", "ARGS")


def first_column(text: str) -> List[str]:
    names = []
    for line in text.splitlines():
        fields = line.split()
        if fields:
            names.append(fields[0])
    return names


def _command_column(header: List[str]) -> int:
    for index, name in enumerate(header):
        if name.upper() in _COMMAND_HEADERS:
            return index
    return len(header) - 1


def process_names(text: str) -> List[str]:
    """Sorted, de-duplicated command names from `ps` output.

    The command column is located from the header row, since busybox `ps`
    ignores `aux` and prints only PID, USER, TIME and COMMAND.
    """
    lines = text.splitlines()
    if not lines:
        return []
    column = _command_column(lines[0].split())
    if column < 0:
        return []
    names = set()
    for line in lines[1:]:
        # the command itself may contain spaces, so split only up to it
        fields = line.split(None, column)
        if len(fields) > column and fields[column].strip():
            names.add(fields[column].split()[0])
    return sorted(names)


class ServiceLister:
    def __init__(self, profile: PlatformProfile, executor: CommandExecutor) -> None:
        self.profile = profile
        self.executor = executor

    def _processes(self) -> List[str]:
        return process_names(self.executor.run(build(Operation.PROCESS_LIST, self.profile.platform)))

    def _collect(self) -> List[str]:
        platform = self.profile.platform
        if platform is Platform.TERMUX:
            return self._processes()
        if platform is Platform.ALPINE:
            try:
                return first_column(self.executor.run(build(Operation.SERVICE_LIST, platform)))
            except ExecutionError as e:
                logger.debug("rc-status unavailable, falling back to process list: %s", e)
                return self._processes()
        return first_column(self.executor.run(build(Operation.SERVICE_LIST, platform)))

    def list(self) -> List[str]:
        try:
            names = self._collect()
        except Exception as e:  # noqa: BLE001 - listing degrades to an empty result
            logger.warning("Service listing failed: %s", e)
            return []
        return names[:MAX_SERVICES]
