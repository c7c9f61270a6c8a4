"""
appforge.paths - Target Directory Checks
========================================

Before anything is written, the target must be somewhere we are allowed to
create files, and it must not already hold a project we would overwrite.

The check runs in three steps:

    1. The parent directory must be writable (nothing is created otherwise)
    2. The target directory is created if missing (idempotent)
    3. The target may only contain entries from ``ALLOWED_FILES``

Allow-list
----------
A directory is still considered fresh if it only holds version-control
metadata, editor/IDE settings, a license, documentation stubs, CI config or
leftover package-manager logs. Anything else is a conflict. IntelliJ module
files (``*.iml``) are always allowed.
"""

from __future__ import annotations

import os
from pathlib import Path

from appforge import log
from appforge.errors import FolderNotEmptyError, PathNotWritableError
from appforge.models import ProjectRequest


ALLOWED_FILES: frozenset[str] = frozenset({
    ".DS_Store",
    ".git",
    ".gitattributes",
    ".gitignore",
    ".gitlab-ci.yml",
    ".hg",
    ".hgcheck",
    ".hgignore",
    ".idea",
    ".npmignore",
    ".travis.yml",
    "LICENSE",
    "Thumbs.db",
    "docs",
    "mkdocs.yml",
    "npm-debug.log",
    "yarn-debug.log",
    "yarn-error.log",
})

ALLOWED_SUFFIXES: tuple[str, ...] = (".iml",)

# Written by an interrupted install; tolerated when the run is retried.
RESUMABLE_FILES: frozenset[str] = frozenset({
    "node_modules",
    "package-lock.json",
    "package.json",
    "yarn.lock",
})


def is_writeable(directory: Path) -> bool:
    """Return True if the current user can create entries in ``directory``."""
    return os.access(directory, os.W_OK)


def ensure_directory(root: Path) -> Path:
    """Create ``root`` and any missing parents. Safe to call repeatedly."""
    root.mkdir(parents=True, exist_ok=True)
    return root


def is_allowed(entry: str, extra: frozenset[str] = frozenset()) -> bool:
    return (
        entry in ALLOWED_FILES
        or entry in extra
        or entry.endswith(ALLOWED_SUFFIXES)
    )


def find_conflicts(root: Path, extra: frozenset[str] = frozenset()) -> list[Path]:
    """
    List entries of ``root`` that could collide with generated files.

    Parameters
    ----------
    root : Path
        Existing directory to inspect.

    extra : frozenset[str]
        Additional names to accept.

    Returns
    -------
    list[Path]
        Conflicting entries sorted by name; empty when the directory is
        fresh enough to scaffold into.
    """
    return sorted(
        (entry for entry in root.iterdir() if not is_allowed(entry.name, extra)),
        key=lambda p: p.name,
    )


def check_target(request: ProjectRequest, resume: bool = False) -> Path:
    """
    Validate and prepare the target directory.

    Parameters
    ----------
    request : ProjectRequest
        The run's request; only ``target_path`` is used.

    resume : bool, default=False
        Also accept ``RESUMABLE_FILES`` left by a previous attempt.

    Returns
    -------
    Path
        The target directory, which now exists.

    Raises
    ------
    PathNotWritableError
        If the parent cannot be written. Nothing is created in that case.
    FolderNotEmptyError
        If the target holds entries outside the allow-list.
    """
    root = request.target_path

    if not is_writeable(request.parent_dir):
        raise PathNotWritableError(request.parent_dir)

    ensure_directory(root)
    log.debug(f"Target directory ready: {root}")

    conflicts = find_conflicts(root, RESUMABLE_FILES if resume else frozenset())
    if conflicts:
        raise FolderNotEmptyError(request.project_name, conflicts)

    return root
