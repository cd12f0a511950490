"""
Host platform detection.

The profile is computed once at startup and handed to every component that
needs it; nothing in the package re-detects mid-run.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ALPINE_MARKER = Path("/etc/alpine-release")
TERMUX_PREFIX = "/data/data/com.termux/files/usr"
DEFAULT_PREFIX = "/usr"


class Platform(str, Enum):
    LINUX = "linux"
    ALPINE = "alpine"
    TERMUX = "termux"


# (package manager, service manager) per platform
_MANAGERS = {
    Platform.LINUX: ("apt-get", "systemctl"),
    Platform.ALPINE: ("apk", "rc-service"),
    Platform.TERMUX: ("pkg", "termux-services"),
}


@dataclass(frozen=True)
class PlatformProfile:
    platform: Platform
    prefix: str
    package_manager: str
    service_manager: str

    @classmethod
    def for_platform(cls, platform: Platform, prefix: Optional[str] = None) -> "PlatformProfile":
        if prefix is None:
            prefix = TERMUX_PREFIX if platform is Platform.TERMUX else DEFAULT_PREFIX
        package_manager, service_manager = _MANAGERS[platform]
        return cls(
            platform=platform,
            prefix=prefix,
            package_manager=package_manager,
            service_manager=service_manager,
        )

    def to_dict(self) -> dict:
        return {
            "platform": self.platform.value,
            "prefix": self.prefix,
            "packageManager": self.package_manager,
            "serviceManager": self.service_manager,
        }


def _marker_present(path: Path) -> bool:
    try:
        return path.is_file() and path.stat().st_size > 0
    except OSError:
        return False


def _override(environ: Mapping[str, str]) -> Optional[Platform]:
    raw = environ.get("SAMSARA_PLATFORM", "").strip().lower()
    if not raw:
        return None
    try:
        return Platform(raw)
    except ValueError:
        logger.warning("Ignoring unknown SAMSARA_PLATFORM value %r", raw)
        return None


def detect(
    environ: Optional[Mapping[str, str]] = None,
    alpine_marker: Path = ALPINE_MARKER,
) -> PlatformProfile:
    """Pick the host platform: override, then Termux marker, then Alpine release file."""
    if environ is None:
        environ = os.environ
    prefix = environ.get("SAMSARA_PREFIX") or None

    platform = _override(environ)
    if platform is None:
        if environ.get("TERMUX_VERSION"):
            platform = Platform.TERMUX
        elif _marker_present(alpine_marker):
            platform = Platform.ALPINE
        else:
            platform = Platform.LINUX

    profile = PlatformProfile.for_platform(platform, prefix)
    logger.debug("Detected platform profile: %s", profile)
    return profile
