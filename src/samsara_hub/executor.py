"""Run external commands and hand back their stdout."""
from __future__ import annotations

import logging
import subprocess
from typing import Optional, Sequence

from .errors import ExecutionError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class CommandExecutor:
    """
    Single-attempt subprocess runner.

    Commands are argument vectors and never go through a shell, so values
    taken from requests cannot smuggle in extra commands. Either the full
    stdout is returned or ExecutionError is raised.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def run(self, argv: Sequence[str], timeout: Optional[float] = None) -> str:
        argv = list(argv)
        limit = self.timeout if timeout is None else timeout
        logger.debug("Running %s (timeout %.0fs)", argv, limit)
        try:
            completed = subprocess.run(
                argv,
                check=False,
                capture_output=True,
                text=True,
                timeout=limit,
            )
        except subprocess.TimeoutExpired as e:
            raise ExecutionError(argv, reason=f"timed out after {limit:.0f}s") from e
        except OSError as e:
            raise ExecutionError(argv, reason=e.strerror or str(e)) from e

        if completed.returncode != 0:
            raise ExecutionError(argv, returncode=completed.returncode, stderr=completed.stderr or "")
        return completed.stdout
