"""Installed-package listing and install/uninstall through the platform package manager."""
from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass
from typing import List, Optional

from .commands import Operation, build
from .errors import ExecutionError, InvalidPackageNameError
from .executor import CommandExecutor
from .platforms import Platform, PlatformProfile

logger = logging.getLogger(__name__)

MAX_PACKAGES = 50
DEFAULT_PACKAGE_TIMEOUT = 600.0

# dpkg -l prints a five-line legend and column header before the first package
_DPKG_HEADER_LINES = 5

# Debian, Alpine and Termux names: alnum start, then alnum and . + - _ :
# (":" covers multiarch names such as libc6:amd64)
_PACKAGE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9.+_:-]{0,127}$")


@dataclass
class PackageRecord:
    name: str
    version: str = ""
    # Not populated by any package manager yet
    description: str = ""
    installed: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


def validate_package_name(name: object) -> str:
    if not isinstance(name, str) or not _PACKAGE_NAME.match(name):
        raise InvalidPackageNameError(name)
    return name


def parse_dpkg(text: str) -> List[PackageRecord]:
    records = []
    for line in text.splitlines()[_DPKG_HEADER_LINES:]:
        fields = line.split()
        if len(fields) < 2:
            continue
        # columns: status, name, version, arch, description
        version = fields[2] if len(fields) > 2 else ""
        records.append(PackageRecord(name=fields[1], version=version))
    return records


def parse_apk_info(text: str) -> List[PackageRecord]:
    return [PackageRecord(name=line.strip()) for line in text.splitlines() if line.strip()]


def parse_pkg_list(text: str) -> List[PackageRecord]:
    # bash/stable,now 5.2.26 aarch64 [installed]
    records = []
    for line in text.splitlines():
        if "/" not in line:
            # "Listing..." banner
            continue
        name = line.split("/", 1)[0].strip()
        if name:
            records.append(PackageRecord(name=name))
    return records


_PARSERS = {
    Platform.LINUX: parse_dpkg,
    Platform.ALPINE: parse_apk_info,
    Platform.TERMUX: parse_pkg_list,
}


class PackageManager:
    def __init__(
        self,
        profile: PlatformProfile,
        executor: CommandExecutor,
        timeout: Optional[float] = DEFAULT_PACKAGE_TIMEOUT,
    ) -> None:
        self.profile = profile
        self.executor = executor
        self.timeout = timeout

    def list(self) -> List[PackageRecord]:
        """Up to MAX_PACKAGES installed packages in the manager's order; [] on failure."""
        platform = self.profile.platform
        try:
            output = self.executor.run(build(Operation.PACKAGE_LIST, platform))
            records = _PARSERS[platform](output)
        except Exception as e:  # noqa: BLE001 - listing degrades to an empty result
            logger.warning("Package listing failed: %s", e)
            return []
        return records[:MAX_PACKAGES]

    def _change(self, operation: Operation, name: object) -> str:
        name = validate_package_name(name)
        argv = build(operation, self.profile.platform, name)
        try:
            self.executor.run(argv, timeout=self.timeout)
        except ExecutionError:
            logger.error("%s failed for package %s", operation.value, name)
            raise
        logger.info("%s succeeded for package %s", operation.value, name)
        return name

    def install(self, name: object) -> str:
        return self._change(Operation.PACKAGE_INSTALL, name)

    def uninstall(self, name: object) -> str:
        return self._change(Operation.PACKAGE_UNINSTALL, name)
