"""Lifecycle actions (start/stop/restart) posted from the dashboard."""
from __future__ import annotations

import logging
from enum import Enum

from .commands import Operation, build
from .errors import InvalidActionError
from .executor import CommandExecutor
from .platforms import PlatformProfile

logger = logging.getLogger(__name__)


class Action(str, Enum):
    START = "start"
    STOP = "stop"
    RESTART = "restart"


_OPERATIONS = {
    Action.START: Operation.LIFECYCLE_START,
    Action.STOP: Operation.LIFECYCLE_STOP,
    Action.RESTART: Operation.LIFECYCLE_RESTART,
}


def parse_action(value: object) -> Action:
    if not isinstance(value, str):
        raise InvalidActionError(value)
    try:
        return Action(value)
    except ValueError:
        raise InvalidActionError(value) from None


class CommandDispatcher:
    def __init__(self, profile: PlatformProfile, executor: CommandExecutor) -> None:
        self.profile = profile
        self.executor = executor

    def execute(self, action: object) -> Action:
        """Validate `action`, then run the platform's command for it.

        Every platform currently maps to an acknowledgement placeholder;
        ExecutionError propagates to the caller.
        """
        action = parse_action(action)
        self.executor.run(build(_OPERATIONS[action], self.profile.platform))
        logger.info("Command executed: %s", action.value)
        return action
