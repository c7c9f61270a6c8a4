"""
appforge.naming - npm Package Name Validation
=============================================

The generated app's directory name becomes the ``name`` field of its
``package.json``, so it must be something npm would accept for a new
package. The rules follow npm's own validator:

- non-empty, no leading period or underscore, no surrounding whitespace
- not a blacklisted name (``node_modules``, ``favicon.ico``)
- URL-safe, optionally scoped as ``@scope/name``
- not the name of a Node.js core module
- at most 214 characters
- lowercase only
- none of the characters ``~'!()*``

All problems are collected rather than stopping at the first one, so the
user sees everything that needs fixing at once. Hard errors come first and
npm's legacy-name warnings after them; the name prompt shows only the first.

Example
-------
>>> validate_project_name("my-app").valid
True
>>> validate_project_name("My App").problems
['name can only contain URL-friendly characters', 'name can no longer contain capital letters']
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import quote


MAX_NAME_LENGTH = 214

BLACKLISTED_NAMES = frozenset({"node_modules", "favicon.ico"})

# Node.js built-in modules; npm refuses new packages that shadow them.
CORE_MODULE_NAMES = frozenset({
    "assert", "async_hooks", "buffer", "child_process", "cluster", "console",
    "constants", "crypto", "dgram", "diagnostics_channel", "dns", "domain",
    "events", "fs", "http", "http2", "https", "inspector", "module", "net",
    "os", "path", "perf_hooks", "process", "punycode", "querystring",
    "readline", "repl", "stream", "string_decoder", "sys", "timers", "tls",
    "trace_events", "tty", "url", "util", "v8", "vm", "wasi",
    "worker_threads", "zlib",
})

_SPECIAL_CHARACTERS = re.compile(r"[~'!()*]")
_SCOPED_NAME = re.compile(r"^(?:@([^/]+?)/)?([^/]+?)$")

# Characters encodeURIComponent leaves untouched besides alphanumerics.
_URL_SAFE = "-_.!~*'()"


@dataclass
class NameValidation:
    """
    Outcome of validating a project name.

    Attributes
    ----------
    valid : bool
        True when no problems were found.

    problems : list[str]
        Human-readable descriptions, in rule order.
    """

    valid: bool
    problems: list[str] = field(default_factory=list)


def _is_url_safe(value: str) -> bool:
    return quote(value, safe=_URL_SAFE) == value


def validate_project_name(name: str) -> NameValidation:
    """
    Check a candidate project name against npm naming rules.

    Parameters
    ----------
    name : str
        Candidate name, usually the basename of the target directory.

    Returns
    -------
    NameValidation
        ``valid`` plus every problem found.
    """
    problems: list[str] = []

    if not name:
        problems.append("name length must be greater than zero")
        return NameValidation(valid=False, problems=problems)

    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.strip() != name:
        problems.append("name cannot contain leading or trailing spaces")

    if name.lower() in BLACKLISTED_NAMES:
        problems.append(f"{name} is a blacklisted name")

    if not _is_url_safe(name):
        match = _SCOPED_NAME.match(name)
        scoped_ok = (
            match is not None
            and match.group(1) is not None
            and _is_url_safe(match.group(1))
            and _is_url_safe(match.group(2))
        )
        if not scoped_ok:
            problems.append("name can only contain URL-friendly characters")

    if name.lower() in CORE_MODULE_NAMES:
        problems.append(f"{name} is a core module name")

    if len(name) > MAX_NAME_LENGTH:
        problems.append(
            f"name can no longer contain more than {MAX_NAME_LENGTH} characters"
        )
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if _SPECIAL_CHARACTERS.search(name.split("/")[-1]):
        problems.append(
            'name can no longer contain special characters ("~\'!()*")'
        )

    return NameValidation(valid=not problems, problems=problems)
