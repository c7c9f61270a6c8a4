"""
appforge.git - Repository Initialization
========================================

Creates a git repository with an initial commit in the new app. This step is
optional: if git is missing or any command fails, the app is still usable,
so failures are reported as ``False`` rather than raised.

An app created inside an existing git or Mercurial checkout is left alone;
nesting a second repository there would only get in the way.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from appforge import log


INITIAL_COMMIT_MESSAGE = "Initial commit from appforge"

# Used only when the user has no git identity configured.
_FALLBACK_IDENTITY = {
    "GIT_AUTHOR_NAME": "appforge",
    "GIT_AUTHOR_EMAIL": "appforge@example.com",
    "GIT_COMMITTER_NAME": "appforge",
    "GIT_COMMITTER_EMAIL": "appforge@example.com",
}


def _run(args: list[str], cwd: Path, env: dict[str, str] | None = None) -> None:
    subprocess.run(args, cwd=cwd, capture_output=True, check=True, env=env)


def _succeeds(args: list[str], cwd: Path) -> bool:
    try:
        _run(args, cwd)
    except (subprocess.CalledProcessError, FileNotFoundError):
        return False
    return True


def is_in_git_repository(root: Path) -> bool:
    return _succeeds(["git", "rev-parse", "--is-inside-work-tree"], root)


def is_in_mercurial_repository(root: Path) -> bool:
    return _succeeds(["hg", "--cwd", ".", "root"], root)


def _has_identity(root: Path) -> bool:
    return _succeeds(["git", "config", "user.email"], root)


def try_git_init(root: Path) -> bool:
    """
    Initialize a git repository in ``root`` and commit the generated files.

    Parameters
    ----------
    root : Path
        Root directory of the new app.

    Returns
    -------
    bool
        True if a repository was created and committed. False if git is
        unavailable, ``root`` is already under version control, or a
        command failed. A partially initialized ``.git`` directory is
        removed before returning False.
    """
    did_init = False
    try:
        _run(["git", "--version"], root)

        if is_in_git_repository(root) or is_in_mercurial_repository(root):
            log.debug("Already inside a repository; skipping git init")
            return False

        _run(["git", "init"], root)
        did_init = True

        # HEAD is unborn here; point it at main whatever init.defaultBranch says.
        _run(["git", "symbolic-ref", "HEAD", "refs/heads/main"], root)
        _run(["git", "add", "-A"], root)

        env = None if _has_identity(root) else {**os.environ, **_FALLBACK_IDENTITY}
        _run(["git", "commit", "-m", INITIAL_COMMIT_MESSAGE], root, env=env)

        return True

    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        log.debug(f"git initialization failed: {e}")
        if did_init:
            shutil.rmtree(root / ".git", ignore_errors=True)
        return False
