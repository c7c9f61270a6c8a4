"""
Tests for appforge.installer
============================

npm and yarn are never actually run; ``subprocess.run`` and DNS lookups are
patched.

Test Organization
-----------------
- TestBuildInstallCommand: argv for each manager and flag combination
- TestBuildInstallPlans: Group order and flags
- TestSubprocessInstaller: Exit status → error mapping
- TestGetOnline: Registry and proxy resolution
"""

import socket
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from appforge.config import ScaffoldSettings
from appforge.errors import CommandFailedError, DownloadError
from appforge.installer import (
    INSTALL_ENV,
    SubprocessInstaller,
    build_install_command,
    build_install_plans,
    get_online,
    get_proxy,
    is_network_failure,
)
from appforge.models import InstallFlags, InstallPlan


ROOT = Path("/work/my-app")


def completed(returncode: int = 0, stdout: str = "", stderr: str = "") -> MagicMock:
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


# =============================================================================
# Command Construction Tests
# =============================================================================

class TestBuildInstallCommand:
    """Tests for build_install_command."""

    def test_npm_runtime(self) -> None:
        plan = InstallPlan(dependencies=("react", "next"))

        assert build_install_command(ROOT, plan) == [
            "npm", "install", "--save", "--save-exact", "--loglevel", "error",
            "react", "next",
        ]

    def test_npm_dev(self) -> None:
        plan = InstallPlan(dependencies=("eslint",), flags=InstallFlags(dev=True))

        assert build_install_command(ROOT, plan)[:3] == ["npm", "install", "--save-dev"]

    def test_yarn_online(self) -> None:
        plan = InstallPlan(dependencies=("react",), flags=InstallFlags(use_yarn=True))

        assert build_install_command(ROOT, plan) == [
            "yarnpkg", "add", "--exact", "--cwd", str(ROOT), "react",
        ]

    def test_yarn_offline_dev(self) -> None:
        plan = InstallPlan(
            dependencies=("eslint",),
            flags=InstallFlags(use_yarn=True, is_online=False, dev=True),
        )

        assert build_install_command(ROOT, plan) == [
            "yarnpkg", "add", "--exact", "--offline", "--cwd", str(ROOT), "--dev",
            "eslint",
        ]

    def test_npm_ignores_offline(self) -> None:
        plan = InstallPlan(dependencies=("react",), flags=InstallFlags(is_online=False))

        assert "--offline" not in build_install_command(ROOT, plan)


class TestBuildInstallPlans:
    """Tests for build_install_plans."""

    def test_runtime_then_dev(self) -> None:
        settings = ScaffoldSettings()
        runtime, development = build_install_plans(
            settings, InstallFlags(use_yarn=True, is_online=False)
        )

        assert runtime.dependencies == settings.dependencies
        assert runtime.flags == InstallFlags(use_yarn=True, is_online=False, dev=False)
        assert development.dependencies == settings.dev_dependencies
        assert development.flags == InstallFlags(use_yarn=True, is_online=False, dev=True)


# =============================================================================
# Subprocess Installer Tests
# =============================================================================

class TestSubprocessInstaller:
    """Tests for SubprocessInstaller.install."""

    def test_success(self) -> None:
        plan = InstallPlan(dependencies=("react",))

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.return_value = completed(0)
            SubprocessInstaller().install(ROOT, plan)

        args, kwargs = mock_run.call_args
        assert args[0] == build_install_command(ROOT, plan)
        assert kwargs["cwd"] == ROOT
        assert kwargs["stderr"] == subprocess.PIPE
        assert kwargs["errors"] == "replace"
        for key, value in INSTALL_ENV.items():
            assert kwargs["env"][key] == value

    def test_network_failure_raises_download_error(self) -> None:
        plan = InstallPlan(dependencies=("react",))

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.return_value = completed(
                1, stderr="npm ERR! code ENOTFOUND\nnpm ERR! errno ENOTFOUND\n"
            )
            with pytest.raises(DownloadError) as exc_info:
                SubprocessInstaller().install(ROOT, plan)

        assert exc_info.value.command == " ".join(build_install_command(ROOT, plan))

    def test_other_failure_raises_command_failed(self) -> None:
        plan = InstallPlan(dependencies=("does-not-exist",))

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.return_value = completed(1, stderr="npm ERR! 404 Not Found\n")
            with pytest.raises(CommandFailedError) as exc_info:
                SubprocessInstaller().install(ROOT, plan)

        assert not isinstance(exc_info.value, DownloadError)
        assert exc_info.value.command.startswith("npm install --save")

    def test_missing_executable(self) -> None:
        plan = InstallPlan(dependencies=("react",), flags=InstallFlags(use_yarn=True))

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError("yarnpkg")
            with pytest.raises(CommandFailedError) as exc_info:
                SubprocessInstaller().install(ROOT, plan)

        assert exc_info.value.command.startswith("yarnpkg add --exact")

    def test_offline_notice(self, capsys: pytest.CaptureFixture[str]) -> None:
        plan = InstallPlan(
            dependencies=("react",),
            flags=InstallFlags(use_yarn=True, is_online=False),
        )

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.return_value = completed(0)
            SubprocessInstaller().install(ROOT, plan)

        assert "You appear to be offline." in capsys.readouterr().out

    def test_undecodable_stderr_still_classified(self) -> None:
        plan = InstallPlan(dependencies=("react",))
        garbled = b"npm ERR! code ENOTFOUND \xff\xfe".decode("utf-8", errors="replace")

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.return_value = completed(1, stderr=garbled)
            with pytest.raises(DownloadError):
                SubprocessInstaller().install(ROOT, plan)

    @pytest.mark.parametrize(
        ("stderr", "expected"),
        [
            ("getaddrinfo EAI_AGAIN registry.npmjs.org", True),
            ("error An unexpected error occurred: ... ETIMEDOUT", True),
            ("There appears to be trouble with your network connection.", True),
            ("npm ERR! code E404", False),
            ("", False),
        ],
    )
    def test_is_network_failure(self, stderr: str, expected: bool) -> None:
        assert is_network_failure(stderr) is expected


# =============================================================================
# Connectivity Tests
# =============================================================================

class TestGetOnline:
    """Tests for get_online and get_proxy."""

    def test_registry_resolves(self) -> None:
        with patch("appforge.installer.socket.gethostbyname", return_value="1.2.3.4"):
            assert get_online("registry.yarnpkg.com") is True

    def test_offline_without_proxy(self) -> None:
        with (
            patch(
                "appforge.installer.socket.gethostbyname",
                side_effect=socket.gaierror,
            ),
            patch("appforge.installer.get_proxy", return_value=None),
        ):
            assert get_online("registry.yarnpkg.com") is False

    def test_falls_back_to_proxy(self) -> None:
        def resolve(host: str) -> str:
            if host == "proxy.corp":
                return "10.0.0.1"
            raise socket.gaierror(host)

        with (
            patch("appforge.installer.socket.gethostbyname", side_effect=resolve),
            patch(
                "appforge.installer.get_proxy",
                return_value="http://proxy.corp:8080",
            ),
        ):
            assert get_online("registry.yarnpkg.com") is True

    def test_proxy_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("https_proxy", "http://proxy.corp:3128")

        assert get_proxy() == "http://proxy.corp:3128"

    def test_proxy_from_npm(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("https_proxy", raising=False)
        monkeypatch.delenv("HTTPS_PROXY", raising=False)

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.return_value = completed(0, stdout="http://npm-proxy:80\n")
            assert get_proxy() == "http://npm-proxy:80"

        assert mock_run.call_args.kwargs["errors"] == "replace"

    def test_npm_proxy_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("https_proxy", raising=False)
        monkeypatch.delenv("HTTPS_PROXY", raising=False)

        with patch("appforge.installer.subprocess.run") as mock_run:
            mock_run.return_value = completed(0, stdout="null\n")
            assert get_proxy() is None

    def test_npm_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("https_proxy", raising=False)
        monkeypatch.delenv("HTTPS_PROXY", raising=False)

        with patch("appforge.installer.subprocess.run", side_effect=FileNotFoundError):
            assert get_proxy() is None
