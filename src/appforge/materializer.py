"""
appforge.materializer - Template Copying
========================================

Copies a bundled template tree into the new app, keeping its directory
layout and renaming files according to ``RENAME_RULES``.

Rename Rules
------------
Templates store hidden files without their leading dot, and the readme under
a placeholder name, because packaging tools treat those names specially.
The table maps them back:

    gitignore           → .gitignore
    eslintrc.json       → .eslintrc.json
    README-template.md  → README.md

Every other name passes through unchanged. No output name is also an input
name, so applying the rules twice gives the same result as applying them
once.

Copy Semantics
--------------
Files are written one at a time. A failure midway leaves the files copied so
far in place; the target was validated as fresh, so there is nothing of the
user's to lose. Existing files at a destination are overwritten.
"""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path, PurePosixPath

from jinja2 import Environment, PackageLoader, select_autoescape

from appforge import __version__, log
from appforge.errors import TemplateNotFoundError
from appforge.models import ProjectRequest


# =============================================================================
# Rename Rules
# =============================================================================

HIDDEN_FILE_PREFIX = "."

HIDDEN_FILES: tuple[str, ...] = ("gitignore", "eslintrc.json")

RENAME_RULES: dict[str, str] = {
    **{name: HIDDEN_FILE_PREFIX + name for name in HIDDEN_FILES},
    "README-template.md": "README.md",
}

JINJA_SUFFIX = ".j2"


def rename(filename: str) -> str:
    """
    Map a template filename to its name in the generated app.

    Examples
    --------
    >>> rename("gitignore")
    '.gitignore'
    >>> rename("README-template.md")
    'README.md'
    >>> rename("index.tsx")
    'index.tsx'
    """
    return RENAME_RULES.get(filename, filename)


def output_path(relative: PurePosixPath) -> PurePosixPath:
    """Destination path for a template file: drop ``.j2``, then rename."""
    name = relative.name
    if name.endswith(JINJA_SUFFIX):
        name = name[: -len(JINJA_SUFFIX)]
    return relative.with_name(rename(name))


# =============================================================================
# Template Discovery
# =============================================================================


def create_jinja_env() -> Environment:
    """
    Create the Jinja2 environment for ``.j2`` template files.

    Autoescaping is off; these are source and markdown files, not HTML
    pages.
    """
    return Environment(
        loader=PackageLoader("appforge", "templates"),
        autoescape=select_autoescape([]),
        keep_trailing_newline=True,
    )


def template_root(template: str) -> Traversable:
    """
    Locate a bundled template tree.

    Raises
    ------
    TemplateNotFoundError
        If no directory with that name ships in ``appforge.templates``.
    """
    root = resources.files("appforge.templates") / template
    if not root.is_dir():
        raise TemplateNotFoundError(template, available_templates())
    return root


def available_templates() -> list[str]:
    """Names of the bundled templates, sorted."""
    return sorted(
        child.name
        for child in resources.files("appforge.templates").iterdir()
        if child.is_dir() and child.name != "__pycache__"
    )


def iter_template_files(
    node: Traversable, prefix: PurePosixPath = PurePosixPath()
) -> list[PurePosixPath]:
    """Relative paths of every file under ``node``, sorted."""
    files: list[PurePosixPath] = []
    for child in node.iterdir():
        relative = prefix / child.name
        if child.is_dir():
            if child.name != "__pycache__":
                files.extend(iter_template_files(child, relative))
        else:
            files.append(relative)
    return sorted(files)


# =============================================================================
# Copying
# =============================================================================


def copy_template(
    root: Path,
    request: ProjectRequest,
    template: str = "default",
) -> list[Path]:
    """
    Copy a bundled template into ``root``.

    Parameters
    ----------
    root : Path
        Destination directory (the new app).

    request : ProjectRequest
        The run's request, used for the ``.j2`` rendering context.

    template : str, default="default"
        Name of the bundled template.

    Returns
    -------
    list[Path]
        Absolute paths of the files written, in copy order.

    Raises
    ------
    TemplateNotFoundError
        If the template doesn't exist.
    OSError
        If a file cannot be written.
    """
    source = template_root(template)
    env = create_jinja_env()
    context = {
        "project_name": request.project_name,
        "package_manager": request.package_manager,
        "appforge_version": __version__,
    }

    written: list[Path] = []
    for relative in iter_template_files(source):
        destination = root / Path(*output_path(relative).parts)
        destination.parent.mkdir(parents=True, exist_ok=True)

        if relative.name.endswith(JINJA_SUFFIX):
            jinja_template = env.get_template(f"{template}/{relative.as_posix()}")
            destination.write_text(
                jinja_template.render(**context), encoding="utf-8"
            )
        else:
            destination.write_bytes(source.joinpath(*relative.parts).read_bytes())

        log.trace(f"  {relative} -> {destination.relative_to(root)}")
        written.append(destination)

    return written
