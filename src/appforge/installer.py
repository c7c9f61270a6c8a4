"""
appforge.installer - Dependency Installation via npm or yarn
============================================================

The pipeline installs two dependency groups in sequence (runtime, then
development) through a ``DependencyInstaller``. The default implementation
shells out to ``npm`` or ``yarnpkg``; tests substitute a fake.

Failure Mapping
---------------
Installer failures are split into two categories:

- ``DownloadError``: the registry could not be reached. The caller may offer
  a retry.
- ``CommandFailedError``: anything else, including a missing executable.

Both carry the full command line so the top-level handler can report which
command failed.

Command Lines
-------------
npm::

    npm install --save|--save-dev --save-exact --loglevel error <packages>

yarn::

    yarnpkg add --exact [--offline] --cwd <root> [--dev] <packages>
"""

from __future__ import annotations

import os
import socket
import subprocess
import sys
from pathlib import Path
from typing import Protocol
from urllib.parse import urlsplit

from rich.console import Console

from appforge import log
from appforge.config import ScaffoldSettings
from appforge.errors import CommandFailedError, DownloadError
from appforge.models import InstallFlags, InstallPlan, PackageManager


console = Console()

# stderr fragments npm and yarn print when the registry is unreachable
NETWORK_ERROR_MARKERS: tuple[str, ...] = (
    "ENOTFOUND",
    "EAI_AGAIN",
    "ETIMEDOUT",
    "ECONNREFUSED",
    "ECONNRESET",
    "ENETUNREACH",
    "getaddrinfo",
    "network",
)

INSTALL_ENV: dict[str, str] = {
    "ADBLOCK": "1",
    "NODE_ENV": "development",
    "DISABLE_OPENCOLLECTIVE": "1",
}


class DependencyInstaller(Protocol):
    """Installs one dependency group into an app directory."""

    def install(self, root: Path, plan: InstallPlan) -> None: ...


# =============================================================================
# Command Construction
# =============================================================================


def build_install_command(root: Path, plan: InstallPlan) -> list[str]:
    """
    Build the argument vector for one install.

    Parameters
    ----------
    root : Path
        App directory; yarn receives it through ``--cwd``.

    plan : InstallPlan
        Packages and flags for this group.

    Returns
    -------
    list[str]
        argv, executable first.

    Examples
    --------
    >>> plan = InstallPlan(dependencies=("react",), flags=InstallFlags(dev=True))
    >>> build_install_command(Path("/app"), plan)
    ['npm', 'install', '--save-dev', '--save-exact', '--loglevel', 'error', 'react']
    """
    flags = plan.flags
    if flags.use_yarn:
        args = [PackageManager.YARN.command, "add", "--exact"]
        if not flags.is_online:
            args.append("--offline")
        args.extend(["--cwd", str(root)])
        if flags.dev:
            args.append("--dev")
    else:
        args = [
            PackageManager.NPM.command,
            "install",
            "--save-dev" if flags.dev else "--save",
            "--save-exact",
            "--loglevel",
            "error",
        ]
    args.extend(plan.dependencies)
    return args


def build_install_plans(
    settings: ScaffoldSettings, flags: InstallFlags
) -> tuple[InstallPlan, InstallPlan]:
    """Return the runtime plan and the development plan, in install order."""
    runtime = InstallPlan(
        dependencies=settings.dependencies,
        flags=flags.model_copy(update={"dev": False}),
    )
    development = InstallPlan(
        dependencies=settings.dev_dependencies,
        flags=flags.model_copy(update={"dev": True}),
    )
    return runtime, development


def is_network_failure(stderr: str) -> bool:
    return any(marker in stderr for marker in NETWORK_ERROR_MARKERS)


# =============================================================================
# Subprocess Installer
# =============================================================================


class SubprocessInstaller:
    """Runs npm or yarn as a child process."""

    def install(self, root: Path, plan: InstallPlan) -> None:
        """
        Install ``plan`` into ``root``.

        Installer progress streams to the terminal; stderr is captured so a
        failure can be classified, then echoed.

        Raises
        ------
        DownloadError
            If the installer reports a network failure.
        CommandFailedError
            If the executable is missing or exits non-zero for any other
            reason.
        """
        args = build_install_command(root, plan)
        command = " ".join(args)

        if plan.flags.use_yarn and not plan.flags.is_online:
            console.print("[yellow]You appear to be offline.[/]")
            console.print("[yellow]Falling back to the local Yarn cache.[/]")
            console.print()

        log.debug(f"Running: {command}")

        try:
            completed = subprocess.run(
                args,
                cwd=root,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                check=False,
                env={**os.environ, **INSTALL_ENV},
            )
        except FileNotFoundError as e:
            raise CommandFailedError(command, detail=str(e)) from e

        if completed.returncode == 0:
            return

        stderr = completed.stderr or ""
        if stderr:
            sys.stderr.write(stderr)

        if is_network_failure(stderr):
            raise DownloadError(command, detail=stderr.strip())
        raise CommandFailedError(command, detail=stderr.strip())


# =============================================================================
# Connectivity Probe
# =============================================================================


def _resolves(host: str) -> bool:
    try:
        socket.gethostbyname(host)
    except (socket.gaierror, UnicodeError):
        return False
    return True


def get_proxy() -> str | None:
    """
    Find the HTTPS proxy npm would use.

    Checks ``https_proxy``/``HTTPS_PROXY`` first, then asks npm.
    """
    for key in ("https_proxy", "HTTPS_PROXY"):
        value = os.environ.get(key, "").strip()
        if value:
            return value

    try:
        completed = subprocess.run(
            ["npm", "config", "get", "https-proxy"],
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except FileNotFoundError:
        return None

    proxy = completed.stdout.strip()
    if completed.returncode != 0 or proxy in {"", "null", "undefined"}:
        return None
    return proxy


def get_online(registry_host: str) -> bool:
    """
    Return True if the package registry (or the configured proxy) resolves.

    Only a DNS lookup is performed; no connection is opened.
    """
    if _resolves(registry_host):
        return True

    proxy = get_proxy()
    if not proxy:
        return False

    hostname = urlsplit(proxy).hostname
    return bool(hostname) and _resolves(hostname)
