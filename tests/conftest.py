from typing import Dict, List, Optional, Union

import pytest

from samsara_hub import create_app
from samsara_hub.config import Settings
from samsara_hub.errors import ExecutionError
from samsara_hub.platforms import Platform, PlatformProfile

Output = Union[str, BaseException]


class FakeExecutor:
    """Stands in for CommandExecutor: canned stdout keyed by full argv or program name."""

    def __init__(self, outputs: Optional[Dict[object, Output]] = None, fail: bool = False) -> None:
        self.outputs = dict(outputs or {})
        self.fail = fail
        self.calls: List[List[str]] = []
        self.timeouts: List[Optional[float]] = []

    def run(self, argv, timeout=None) -> str:
        argv = list(argv)
        self.calls.append(argv)
        self.timeouts.append(timeout)
        if self.fail:
            raise ExecutionError(argv, returncode=1, stderr="simulated failure")
        for key in (tuple(argv), argv[0]):
            if key in self.outputs:
                out = self.outputs[key]
                if isinstance(out, BaseException):
                    raise out
                return out
        raise ExecutionError(argv, reason="No such file or directory")


def profile_for(platform: Platform) -> PlatformProfile:
    return PlatformProfile.for_platform(platform)


@pytest.fixture(params=list(Platform), ids=lambda p: p.value)
def any_profile(request) -> PlatformProfile:
    return profile_for(request.param)


@pytest.fixture
def linux_profile() -> PlatformProfile:
    return profile_for(Platform.LINUX)


@pytest.fixture
def public_dir(tmp_path):
    (tmp_path / "index.html").write_text("<html>dashboard</html>")
    (tmp_path / "docs.html").write_text("<html>docs</html>")
    (tmp_path / "forums.html").write_text("<html>forums</html>")
    (tmp_path / "Global.css").write_text("body {}")
    (tmp_path / "index.js").write_text("console.log('hub');")
    (tmp_path / "WebUi.svg").write_text("<svg></svg>")
    return tmp_path


@pytest.fixture
def make_client(public_dir):
    def _make(executor: FakeExecutor, platform: Platform = Platform.LINUX):
        app = create_app(
            profile=profile_for(platform),
            executor=executor,
            settings=Settings(public_dir=public_dir),
        )
        return app.test_client()

    return _make
