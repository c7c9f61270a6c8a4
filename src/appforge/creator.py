"""
appforge.creator - The Scaffolding Pipeline
===========================================

This module runs one attempt at creating an app. Stages run strictly in
order, and each must succeed before the next starts:

    1. Validate the project name (npm naming rules) and the template
    2. Validate and create the target directory
    3. Write package.json
    4. Install runtime dependencies
    5. Install development dependencies
    6. Copy the template files
    7. Initialize a git repository (optional, never fails the run)

Nothing here exits the process. Validation problems and installer failures
are raised as :mod:`appforge.errors` exceptions; :mod:`appforge.recovery`
decides whether to retry and what exit code to use.

Usage Example
-------------
>>> from pathlib import Path
>>> from appforge.creator import create_app
>>> from appforge.models import ProjectRequest
>>>
>>> result = create_app(ProjectRequest(target_path=Path("my-app")))
>>> result.files_created[0].name
'package.json'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from appforge import log
from appforge.config import ScaffoldSettings
from appforge.descriptor import build_descriptor, write_descriptor
from appforge.errors import InvalidProjectNameError
from appforge.git import try_git_init
from appforge.installer import (
    DependencyInstaller,
    SubprocessInstaller,
    build_install_plans,
    get_online,
)
from appforge.materializer import copy_template, template_root
from appforge.models import InstallFlags, PackageManager, ProjectRequest
from appforge.naming import validate_project_name
from appforge.paths import check_target


console = Console()


# =============================================================================
# Result Data Class
# =============================================================================


@dataclass
class CreationResult:
    """
    Outcome of a successful pipeline run.

    Attributes
    ----------
    project_path : Path
        Absolute path of the new app.

    project_name : str
        Name written to package.json.

    package_manager : PackageManager
        Manager used for installs; drives the next-steps commands.

    files_created : list[Path]
        package.json followed by every template file.

    git_initialized : bool
        Whether a repository and initial commit were created.

    warnings : list[str]
        Non-fatal problems.
    """

    project_path: Path
    project_name: str
    package_manager: PackageManager
    files_created: list[Path] = field(default_factory=list)
    git_initialized: bool = False
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# Pipeline
# =============================================================================


def check_project_name(request: ProjectRequest) -> None:
    """
    Raises
    ------
    InvalidProjectNameError
        If the target's basename isn't a valid npm package name.
    """
    validation = validate_project_name(request.project_name)
    if not validation.valid:
        raise InvalidProjectNameError(request.project_name, validation.problems)


def create_app(
    request: ProjectRequest,
    *,
    settings: ScaffoldSettings | None = None,
    installer: DependencyInstaller | None = None,
    init_git: bool = True,
    verbose: bool = True,
    resume: bool = False,
) -> CreationResult:
    """
    Run the scaffolding pipeline once.

    Parameters
    ----------
    request : ProjectRequest
        Where to create the app and with which package manager.

    settings : ScaffoldSettings | None
        Dependency groups, template and registry host. Defaults apply when
        omitted.

    installer : DependencyInstaller | None
        Installer to use; defaults to running npm/yarn as subprocesses.

    init_git : bool, default=True
        Attempt to create a git repository after copying the template.

    verbose : bool, default=True
        Print progress to the console.

    resume : bool, default=False
        Accept files left in the target by an earlier, failed attempt.

    Returns
    -------
    CreationResult
        Details of what was created.

    Raises
    ------
    InvalidProjectNameError, TemplateNotFoundError
        Before anything touches the filesystem.
    PathNotWritableError, FolderNotEmptyError
        Before package.json is written.
    DownloadError
        If the installer cannot reach the registry.
    CommandFailedError
        If the installer fails for any other reason.
    """
    settings = settings or ScaffoldSettings()
    installer = installer or SubprocessInstaller()
    manager = request.package_manager

    # Step 1-2: Gates
    check_project_name(request)
    template_root(settings.template)
    root = check_target(request, resume=resume)

    result = CreationResult(
        project_path=root,
        project_name=request.project_name,
        package_manager=manager,
    )

    if verbose:
        console.print(f"Creating a new Next.js app in [green]{escape(str(root))}[/].")
        console.print()
        console.print(f"[bold]Using {manager.display}.[/]")

    # Step 3: package.json
    descriptor = build_descriptor(request.project_name)
    result.files_created.append(write_descriptor(root, descriptor))

    # Step 4-5: Dependencies
    is_online = not request.use_yarn or get_online(settings.registry_host)
    log.debug(f"Registry reachable: {is_online}")
    flags = InstallFlags(use_yarn=request.use_yarn, is_online=is_online)

    for plan in build_install_plans(settings, flags):
        if plan.is_empty:
            log.debug(f"No {plan.label} to install")
            continue

        if verbose:
            console.print()
            console.print(f"Installing {plan.label}:")
            for dependency in plan.dependencies:
                console.print(f"- [cyan]{dependency}[/]")
            console.print()

        installer.install(root, plan)

    # Step 6: Template
    if verbose:
        console.print()
    result.files_created.extend(copy_template(root, request, settings.template))
    log.debug(f"Copied template '{settings.template}'")

    # Step 7: Git
    if init_git:
        result.git_initialized = try_git_init(root)
        if result.git_initialized:
            if verbose:
                console.print("Initialized a git repository.")
                console.print()
        else:
            message = "Git repository was not initialized."
            result.warnings.append(message)
            log.warning(message)

    return result


# =============================================================================
# Next Steps
# =============================================================================


def display_path(project_path: Path, cwd: Path | None = None) -> str:
    """
    Path to show in ``cd`` instructions.

    The bare name when the app sits directly in the working directory,
    otherwise the full path.
    """
    cwd = cwd or Path.cwd()
    if project_path.parent == cwd:
        return project_path.name
    return str(project_path)


def print_next_steps(result: CreationResult, cwd: Path | None = None) -> None:
    """Print the success message and the commands to run next."""
    manager = result.package_manager
    run = manager.run_prefix
    cd_path = display_path(result.project_path, cwd)

    console.print(
        f"[green]Success![/] Created {result.project_name} at {escape(str(result.project_path))}"
    )
    console.print("Inside that directory, you can run several commands:")
    console.print()
    console.print(f"[cyan]  {run}dev[/]")
    console.print("    Starts the development server.")
    console.print()
    console.print(f"[cyan]  {run}build[/]")
    console.print("    Builds the app for production.")
    console.print()
    console.print(f"[cyan]  {manager.display} start[/]")
    console.print("    Runs the built app in production mode.")
    console.print()
    console.print("We suggest that you begin by typing:")
    console.print()
    console.print(f"[cyan]  cd[/] {escape(cd_path)}")
    console.print(f"  [cyan]{run}dev[/]")
    console.print()
