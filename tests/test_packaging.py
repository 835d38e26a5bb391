"""Tests for the integration manifest and project metadata.

These tests run WITHOUT Home Assistant dependencies.
"""

import json
from pathlib import Path
import tomllib

ROOT = Path(__file__).parent.parent
MANIFEST = ROOT / "custom_components" / "homeworks_serial" / "manifest.json"


class TestManifest:
    """Tests for manifest.json."""

    def test_requirements_are_serial_stack(self):
        manifest = json.loads(MANIFEST.read_text())

        names = [req.split(">")[0].split("=")[0] for req in manifest["requirements"]]

        assert names == ["pyserial", "pyserial-asyncio"]

    def test_domain(self):
        manifest = json.loads(MANIFEST.read_text())
        assert manifest["domain"] == "homeworks_serial"
        assert manifest["loggers"] == ["pyhwserial"]


class TestProjectMetadata:
    """Tests for pyproject.toml."""

    def test_readme(self):
        project = tomllib.loads((ROOT / "pyproject.toml").read_text())["project"]

        assert project["readme"] == "README.md"
        assert (ROOT / project["readme"]).is_file()
