"""
Tests for appforge.descriptor
=============================

Tests cover descriptor construction and the exact on-disk format.
"""

import json
import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from appforge.descriptor import SCRIPTS, build_descriptor, write_descriptor


class TestBuildDescriptor:
    """Tests for build_descriptor."""

    def test_fields(self) -> None:
        descriptor = build_descriptor("my-app")

        assert descriptor.name == "my-app"
        assert descriptor.private is True
        assert list(descriptor.scripts) == ["dev", "build", "start", "lint"]

    def test_scripts_are_next_commands(self) -> None:
        descriptor = build_descriptor("my-app")

        assert descriptor.scripts == {
            "dev": "next dev",
            "build": "next build",
            "start": "next start",
            "lint": "next lint",
        }

    def test_scripts_are_copied(self) -> None:
        descriptor = build_descriptor("my-app")

        assert descriptor.scripts is not SCRIPTS

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(ValidationError, match="capital letters"):
            build_descriptor("MyApp")


class TestWriteDescriptor:
    """Tests for write_descriptor."""

    def test_writes_package_json(self, tmp_path: Path) -> None:
        path = write_descriptor(tmp_path, build_descriptor("my-app"))

        assert path == tmp_path / "package.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data == {
            "name": "my-app",
            "private": True,
            "scripts": dict(SCRIPTS),
        }

    def test_pretty_printed_with_trailing_newline(self, tmp_path: Path) -> None:
        path = write_descriptor(tmp_path, build_descriptor("my-app"))
        raw = path.read_bytes().decode("utf-8")

        assert raw.endswith("}" + os.linesep)
        assert raw.startswith('{\n  "name": "my-app",\n  "private": true,')

    def test_output_is_stable(self, tmp_path: Path) -> None:
        first = write_descriptor(tmp_path, build_descriptor("my-app")).read_bytes()
        second = write_descriptor(tmp_path, build_descriptor("my-app")).read_bytes()

        assert first == second
