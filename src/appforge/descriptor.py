"""
appforge.descriptor - package.json Synthesis
============================================

The descriptor is written before any dependency is installed: npm and yarn
both update an existing ``package.json`` in place with the exact versions
they resolve.
"""

from __future__ import annotations

from pathlib import Path

from appforge import log
from appforge.models import ProjectDescriptor


DESCRIPTOR_FILENAME = "package.json"

# Lifecycle scripts every generated app ships with.
SCRIPTS: dict[str, str] = {
    "dev": "next dev",
    "build": "next build",
    "start": "next start",
    "lint": "next lint",
}


def build_descriptor(name: str) -> ProjectDescriptor:
    """
    Create the descriptor for a new app.

    Raises
    ------
    pydantic.ValidationError
        If ``name`` is not a valid npm package name.
    """
    return ProjectDescriptor(name=name, private=True, scripts=dict(SCRIPTS))


def write_descriptor(root: Path, descriptor: ProjectDescriptor) -> Path:
    """Write ``package.json`` into ``root`` and return its path."""
    path = root / DESCRIPTOR_FILENAME
    # to_json() already ends with os.linesep; write it untranslated.
    path.write_text(descriptor.to_json(), encoding="utf-8", newline="")
    log.debug(f"Wrote {path}")
    return path
