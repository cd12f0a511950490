"""Exceptions raised by the host facade and mapped to HTTP statuses by the server."""
from __future__ import annotations

from typing import Optional, Sequence


class SamsaraError(Exception):
    """Base class for every error this package raises on purpose."""


class ExecutionError(SamsaraError):
    """An external command could not be spawned, timed out, or exited non-zero."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
        reason: str = "",
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        self.reason = reason
        detail = reason or f"exit status {returncode}"
        if stderr:
            detail = f"{detail}: {stderr.strip()[:200]}"
        super().__init__(f"{' '.join(self.argv)!r} failed ({detail})")


class InvalidActionError(SamsaraError, ValueError):
    """Lifecycle action outside start/stop/restart."""

    def __init__(self, action: object) -> None:
        self.action = action
        super().__init__(f"invalid command: {action!r}")


class InvalidPackageNameError(SamsaraError, ValueError):
    def __init__(self, name: object) -> None:
        self.name = name
        super().__init__(f"invalid package name: {name!r}")


class ExhaustedPortsError(SamsaraError):
    """Every candidate port was already in use."""

    def __init__(self, candidates: Sequence[int]) -> None:
        self.candidates = list(candidates)
        if self.candidates:
            span = f"{self.candidates[0]}-{self.candidates[-1]}"
        else:
            span = "none"
        super().__init__(f"All candidate ports are currently in use ({span})")
