"""Runtime settings read from the environment; CLI flags override them in `__main__`."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from .executor import DEFAULT_TIMEOUT
from .packages import DEFAULT_PACKAGE_TIMEOUT
from .ports import DEFAULT_BASE_PORT, DEFAULT_PORT_ATTEMPTS, MAX_PORT_ATTEMPTS

logger = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).with_name("public")


def _int_env(environ: Mapping[str, str], *names: str) -> Optional[int]:
    """First of `names` that is set, parsed as int; None if unset or not numeric."""
    for name in names:
        raw = environ.get(name)
        if not raw:
            continue
        try:
            return int(raw.strip())
        except ValueError:
            logger.warning("Ignoring non-numeric %s=%r", name, raw)
            return None
    return None


def _float_env(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default
    return value if value > 0 else default


def resolve_base_port(value: Optional[int]) -> int:
    if value is not None and 0 < value < 65536:
        return value
    return DEFAULT_BASE_PORT


def resolve_port_attempts(value: Optional[int]) -> int:
    if value is not None and value > 0:
        return min(value, MAX_PORT_ATTEMPTS)
    return DEFAULT_PORT_ATTEMPTS


@dataclass
class Settings:
    host: str = "127.0.0.1"
    base_port: int = DEFAULT_BASE_PORT
    port_attempts: int = DEFAULT_PORT_ATTEMPTS
    public_dir: Path = field(default_factory=lambda: PUBLIC_DIR)
    command_timeout: float = DEFAULT_TIMEOUT
    package_timeout: float = DEFAULT_PACKAGE_TIMEOUT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            environ = os.environ
        public_dir = environ.get("SAMSARA_PUBLIC_DIR")
        return cls(
            host=environ.get("SAMSARA_HOST") or "127.0.0.1",
            base_port=resolve_base_port(_int_env(environ, "SAMSARA_PORT", "PORT")),
            port_attempts=resolve_port_attempts(_int_env(environ, "SAMSARA_PORT_ATTEMPTS")),
            public_dir=Path(public_dir) if public_dir else PUBLIC_DIR,
            command_timeout=_float_env(environ, "SAMSARA_COMMAND_TIMEOUT", DEFAULT_TIMEOUT),
            package_timeout=_float_env(environ, "SAMSARA_PACKAGE_TIMEOUT", DEFAULT_PACKAGE_TIMEOUT),
        )
