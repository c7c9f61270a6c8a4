"""
appforge.templates - Bundled App Templates
==========================================

Each subdirectory is a template tree copied verbatim into a new app by
:mod:`appforge.materializer`. Only ``default`` ships today: a TypeScript
Next.js app with Tailwind CSS and Recoil.

File Naming Convention
----------------------
- Files that must be hidden in the output are stored without their leading
  dot (``gitignore``, ``eslintrc.json``) so packaging tools don't skip them
- ``README-template.md`` becomes ``README.md``
- Files ending in ``.j2`` are Jinja2 templates; the suffix is dropped

Template Context
----------------
``.j2`` files receive:

    project_name : str
        Name of the new app

    package_manager : PackageManager
        npm or yarn, for script examples

    appforge_version : str
        Version of appforge for attribution
"""
