"""
appforge.config - Scaffolding Settings
======================================

Settings that shape what gets installed and copied. Defaults produce a
Next.js + Tailwind + Recoil TypeScript app; a TOML file can override them.

Example ``appforge.toml``
-------------------------
```toml
[appforge]
dependencies = ["react", "react-dom", "next"]
dev_dependencies = ["typescript", "@types/react"]
registry_host = "registry.npmjs.org"
```

Environment
-----------
APPFORGE_REGISTRY_HOST
    Overrides ``registry_host`` used for the connectivity check.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


DEFAULT_DEPENDENCIES: tuple[str, ...] = ("react", "react-dom", "next", "recoil")

DEFAULT_DEV_DEPENDENCIES: tuple[str, ...] = (
    "eslint",
    "eslint-config-next",
    "typescript",
    "@types/react",
    "@types/node",
    "autoprefixer",
    "postcss",
    "tailwindcss",
)

DEFAULT_REGISTRY_HOST = "registry.yarnpkg.com"


class ScaffoldSettings(BaseModel):
    """
    Settings for one scaffolding run.

    Attributes
    ----------
    template : str
        Name of the bundled template directory to copy.

    dependencies : tuple[str, ...]
        Runtime packages, installed first.

    dev_dependencies : tuple[str, ...]
        Development packages, installed second.

    registry_host : str
        Host resolved to decide whether yarn should run offline.

    Examples
    --------
    >>> settings = ScaffoldSettings()
    >>> settings.dependencies[:2]
    ('react', 'react-dom')
    >>> ScaffoldSettings(dependencies=["next", " next ", "react"]).dependencies
    ('next', 'react')
    """

    template: str = Field(
        default="default",
        description="Bundled template to copy into the new app",
    )
    dependencies: tuple[str, ...] = Field(
        default=DEFAULT_DEPENDENCIES,
        description="Runtime dependencies, in install order",
    )
    dev_dependencies: tuple[str, ...] = Field(
        default=DEFAULT_DEV_DEPENDENCIES,
        description="Development dependencies, in install order",
    )
    registry_host: str = Field(
        default=DEFAULT_REGISTRY_HOST,
        description="Registry host used for the connectivity check",
    )

    @field_validator("dependencies", "dev_dependencies")
    @classmethod
    def normalize_packages(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Strip names and drop duplicates, keeping first-seen order."""
        return tuple(dict.fromkeys(name.strip() for name in v if name.strip()))

    @field_validator("template", "registry_host")
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = "Value cannot be empty."
            raise ValueError(msg)
        return v

    @classmethod
    def from_toml(cls, path: Path) -> ScaffoldSettings:
        """
        Load settings from a TOML file.

        Values may sit at the top level or under an ``[appforge]`` table.

        Raises
        ------
        FileNotFoundError
            If the file doesn't exist.
        ValidationError
            If the file has invalid values.
        """
        import tomli

        with open(path, "rb") as f:
            data = tomli.load(f)

        return cls(**data.get("appforge", data))


def load_settings(path: Path | None = None) -> ScaffoldSettings:
    """
    Build the settings for a run.

    Reads ``path`` when given, otherwise starts from defaults, then applies
    ``APPFORGE_REGISTRY_HOST`` from the environment.
    """
    settings = ScaffoldSettings.from_toml(path) if path else ScaffoldSettings()

    registry_host = os.environ.get("APPFORGE_REGISTRY_HOST", "").strip()
    if registry_host:
        settings = settings.model_copy(update={"registry_host": registry_host})

    return settings
