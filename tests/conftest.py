"""
pytest configuration and shared fixtures for appforge tests.

Fixtures
--------
target_dir : Path
    Path to a not-yet-created ``my-app`` directory inside tmp_path.

request_npm / request_yarn : ProjectRequest
    Requests for ``target_dir`` with each package manager.

fake_installer : FakeInstaller
    Records install calls instead of running npm or yarn.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from appforge import log
from appforge.models import InstallPlan, ProjectRequest


class FakeInstaller:
    """
    Stand-in for ``SubprocessInstaller``.

    Each call is recorded as ``(root, plan)``. If ``errors`` is given, the
    n-th call raises ``errors[n]`` when that entry is not None.
    """

    def __init__(self, errors: list[Exception | None] | None = None) -> None:
        self.calls: list[tuple[Path, InstallPlan]] = []
        self.errors = list(errors or [])
        self.descriptor_seen: list[bool] = []

    def install(self, root: Path, plan: InstallPlan) -> None:
        index = len(self.calls)
        self.calls.append((root, plan))
        self.descriptor_seen.append((root / "package.json").exists())
        if index < len(self.errors) and self.errors[index] is not None:
            raise self.errors[index]


@pytest.fixture(autouse=True)
def reset_log_level() -> None:
    """Keep log level changes from leaking between tests."""
    log.set_level("info")


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Target directory for a new app; not created yet."""
    return tmp_path / "my-app"


@pytest.fixture
def request_npm(target_dir: Path) -> ProjectRequest:
    return ProjectRequest(target_path=target_dir)


@pytest.fixture
def request_yarn(target_dir: Path) -> ProjectRequest:
    return ProjectRequest(target_path=target_dir, use_yarn=True)


@pytest.fixture
def fake_installer() -> FakeInstaller:
    return FakeInstaller()


@pytest.fixture
def make_installer() -> type[FakeInstaller]:
    """The FakeInstaller class, for tests that script failures."""
    return FakeInstaller


# =============================================================================
# pytest Configuration
# =============================================================================

def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring external tools like git"
    )
