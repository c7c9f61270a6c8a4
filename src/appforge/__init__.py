"""
appforge - Next.js App Scaffolder
=================================

A CLI tool that bootstraps a ready-to-run Next.js application: it writes a
``package.json``, installs dependencies with npm or yarn, copies the built-in
starter template and initializes a git repository.

Quick Start
-----------
```bash
# Install appforge
pip install appforge

# Create a new app interactively
appforge new

# Or with options
appforge new my-app --use-yarn
```

Example
-------
>>> from pathlib import Path
>>> from appforge import ProjectRequest, create_app
>>> result = create_app(ProjectRequest(target_path=Path("my-app")))
>>> result.project_name
'my-app'

Architecture
------------
The package is organized into these main modules:

- ``cli``: Typer-based command line interface
- ``creator``: The scaffolding pipeline (validation → install → copy → git)
- ``recovery``: Retry state machine and top-level error handler
- ``naming``: npm package-name validation
- ``paths``: Target directory checks
- ``descriptor``: ``package.json`` synthesis
- ``installer``: npm/yarn dependency installation
- ``materializer``: Template copying and rename rules
- ``git``: Best-effort repository initialization
- ``models``: Pydantic models for requests, descriptors and install plans
- ``config``: Settings loaded from TOML

License
-------
MIT License - see LICENSE file for details.
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__author__ = "Technical-1"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from appforge.creator import create_app
from appforge.errors import CommandFailedError, DownloadError
from appforge.models import PackageManager, ProjectDescriptor, ProjectRequest
from appforge.naming import validate_project_name
from appforge.recovery import RecoveryController


__all__ = [
    "CommandFailedError",
    "DownloadError",
    "PackageManager",
    "ProjectDescriptor",
    "ProjectRequest",
    "RecoveryController",
    "__author__",
    "__version__",
    "create_app",
    "validate_project_name",
]
