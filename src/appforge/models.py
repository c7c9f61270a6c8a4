"""
appforge.models - Pydantic Models for the Scaffolding Pipeline
==============================================================

This module defines the values that flow through the pipeline. Every stage
receives what it needs as a parameter; nothing is kept in module-level state.

Architecture Notes
------------------
    ProjectRequest (input, immutable for the run)
    ├── target_path: Path
    └── use_yarn: bool  ──► PackageManager

    ProjectDescriptor (package.json)
    ├── name      (validated against npm naming rules)
    ├── private   (always true)
    └── scripts   (dev, build, start, lint)

    InstallPlan (one per dependency group)
    ├── dependencies: tuple[str, ...]
    └── flags: InstallFlags
        ├── use_yarn
        ├── is_online
        └── dev

    RunState (RecoveryController states)

Usage Example
-------------
>>> from pathlib import Path
>>> request = ProjectRequest(target_path=Path("my-app"))
>>> request.project_name
'my-app'
>>> request.package_manager
<PackageManager.NPM: 'npm'>
"""

from __future__ import annotations

import json
import os
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from appforge.naming import validate_project_name


# =============================================================================
# Enumerations
# =============================================================================


class PackageManager(str, Enum):
    """
    Package managers the installer knows how to drive.

    NPM is the default; YARN is selected with ``--use-yarn``.

    Examples
    --------
    >>> PackageManager.YARN.command
    'yarnpkg'
    >>> PackageManager.NPM.run_prefix
    'npm run '
    """

    NPM = "npm"
    YARN = "yarn"

    @property
    def command(self) -> str:
        """Executable invoked for installs."""
        return "yarnpkg" if self is PackageManager.YARN else "npm"

    @property
    def display(self) -> str:
        """Name shown to the user in messages."""
        return self.value

    @property
    def run_prefix(self) -> str:
        """
        Prefix for running a package.json script.

        yarn runs scripts directly (``yarn dev``) while npm needs
        ``npm run dev``.
        """
        return "yarn " if self is PackageManager.YARN else "npm run "


class RunState(str, Enum):
    """States of the retry state machine in :mod:`appforge.recovery`."""

    RUNNING = "running"
    RECOVERABLE_FAILURE = "recoverable_failure"
    RETRYING = "retrying"
    TERMINAL_FAILURE = "terminal_failure"
    DONE = "done"


# =============================================================================
# Request
# =============================================================================


class ProjectRequest(BaseModel):
    """
    Resolved user input for one run.

    Attributes
    ----------
    target_path : Path
        Directory the app is created in. Relative paths are resolved
        against the current working directory on construction.

    use_yarn : bool
        Select yarn instead of npm.

    Examples
    --------
    >>> request = ProjectRequest(target_path=Path("/tmp/my-app"), use_yarn=True)
    >>> request.project_name
    'my-app'
    >>> request.package_manager.display
    'yarn'
    """

    model_config = ConfigDict(frozen=True)

    target_path: Path = Field(description="Absolute path of the app directory")
    use_yarn: bool = Field(
        default=False,
        description="Install dependencies with yarn instead of npm",
    )

    @field_validator("target_path")
    @classmethod
    def make_absolute(cls, v: Path) -> Path:
        """Normalize the target to an absolute path without following links."""
        return Path(os.path.abspath(v.expanduser()))

    @property
    def project_name(self) -> str:
        """Basename of the target directory, used as the package name."""
        return self.target_path.name

    @property
    def parent_dir(self) -> Path:
        return self.target_path.parent

    @property
    def package_manager(self) -> PackageManager:
        return PackageManager.YARN if self.use_yarn else PackageManager.NPM


# =============================================================================
# Project Descriptor
# =============================================================================


class ProjectDescriptor(BaseModel):
    """
    Contents of the generated ``package.json``.

    The name is checked against npm naming rules at construction, so an
    invalid descriptor can never be written to disk.

    Attributes
    ----------
    name : str
        npm package name (the target directory's basename).

    private : Literal[True]
        Always true; starter apps are never published.

    scripts : dict[str, str]
        Lifecycle scripts, in insertion order.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    private: Literal[True] = True
    scripts: dict[str, str] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        validation = validate_project_name(v)
        if not validation.valid:
            msg = f"Invalid project name '{v}': " + "; ".join(validation.problems)
            raise ValueError(msg)
        return v

    def to_json(self) -> str:
        """
        Serialize as pretty-printed JSON with a trailing newline.

        Keys appear in the order ``name``, ``private``, ``scripts`` so the
        file diffs cleanly across runs.
        """
        return json.dumps(self.model_dump(), indent=2) + os.linesep


# =============================================================================
# Install Plans
# =============================================================================


class InstallFlags(BaseModel):
    """Options passed to the installer for one dependency group."""

    model_config = ConfigDict(frozen=True)

    use_yarn: bool = False
    is_online: bool = True
    dev: bool = False


class InstallPlan(BaseModel):
    """
    One dependency group to install.

    The pipeline runs two plans, runtime first and development second.
    Package order is preserved and duplicates are dropped so the descriptor
    comes out the same on every run.

    Examples
    --------
    >>> plan = InstallPlan(dependencies=("react", "next", "react"))
    >>> plan.dependencies
    ('react', 'next')
    >>> plan.is_empty
    False
    """

    model_config = ConfigDict(frozen=True)

    dependencies: tuple[str, ...] = ()
    flags: InstallFlags = Field(default_factory=InstallFlags)

    @field_validator("dependencies")
    @classmethod
    def dedupe(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(name.strip() for name in v if name.strip()))

    @property
    def is_empty(self) -> bool:
        return not self.dependencies

    @property
    def label(self) -> str:
        """Heading used when listing the group to the user."""
        return "devDependencies" if self.flags.dev else "dependencies"
