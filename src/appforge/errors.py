"""
appforge.errors - Exception Taxonomy
====================================

Every stage of the pipeline raises one of these instead of exiting the
process. The single top-level handler in :mod:`appforge.recovery` decides
what to print and which exit code to use.

Hierarchy
---------
    AppforgeError
    ├── ScaffoldValidationError
    │   ├── InvalidProjectNameError
    │   ├── PathNotWritableError
    │   ├── FolderNotEmptyError
    │   └── TemplateNotFoundError
    └── CommandFailedError
        └── DownloadError

Validation errors are always fatal and are raised before any dependency is
installed. ``DownloadError`` is the only
recoverable category: it triggers one retry offer.
"""

from __future__ import annotations

from pathlib import Path


class AppforgeError(Exception):
    """Base class for all appforge errors."""


# =============================================================================
# Validation Errors
# =============================================================================


class ScaffoldValidationError(AppforgeError):
    """
    A precondition failed before any dependency was installed.

    Subclasses expose ``reasons``, the itemized lines shown to the user.
    """

    @property
    def reasons(self) -> list[str]:
        return []


class InvalidProjectNameError(ScaffoldValidationError):
    """The project name violates npm naming rules."""

    def __init__(self, name: str, problems: list[str]) -> None:
        self.name = name
        self.problems = list(problems)
        super().__init__(
            f'Could not create a project called "{name}" '
            "because of npm naming restrictions:"
        )

    @property
    def reasons(self) -> list[str]:
        return self.problems


class PathNotWritableError(ScaffoldValidationError):
    """The parent of the target directory cannot be written to."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            "The application path is not writable, please check folder "
            "permissions and try again."
        )

    @property
    def reasons(self) -> list[str]:
        return ["It is likely you do not have write permissions for this folder."]


class FolderNotEmptyError(ScaffoldValidationError):
    """The target directory holds files that could be overwritten."""

    def __init__(self, name: str, conflicts: list[Path]) -> None:
        self.name = name
        self.conflicts = list(conflicts)
        super().__init__(
            f"The directory {name} contains files that could conflict:"
        )

    @property
    def reasons(self) -> list[str]:
        return [
            f"{path.name}/" if path.is_dir() else path.name
            for path in self.conflicts
        ]


class TemplateNotFoundError(ScaffoldValidationError):
    """The configured template is not bundled with appforge."""

    def __init__(self, template: str, available: list[str] | None = None) -> None:
        self.template = template
        self.available = sorted(available or [])
        super().__init__(f"Template '{template}' is not bundled with appforge.")

    @property
    def reasons(self) -> list[str]:
        if not self.available:
            return []
        return [f"Available templates: {', '.join(self.available)}"]


# =============================================================================
# Subprocess Errors
# =============================================================================


class CommandFailedError(AppforgeError):
    """
    A named external command exited unsuccessfully.

    Attributes
    ----------
    command : str
        The full command line that was invoked, e.g.
        ``"npm install --save --save-exact --loglevel error react"``.
    """

    def __init__(self, command: str, detail: str | None = None) -> None:
        self.command = command
        self.detail = detail
        super().__init__(f"{command} has failed.")


class DownloadError(CommandFailedError):
    """
    The installer could not reach the package registry.

    This is the only failure the pipeline recovers from, by offering one
    retry.
    """
