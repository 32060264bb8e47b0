"""
Unit tests for project metadata
"""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


class TestPyproject:
    """Test cases for pyproject.toml."""

    def _project(self):
        with open(PYPROJECT, "rb") as f:
            return tomllib.load(f)["project"]

    def test_no_requirements_document_as_readme(self):
        """Test the package description is not the requirements document."""
        assert self._project().get("readme") != "SPEC_FULL.md"

    def test_runtime_and_test_dependencies(self):
        """Test the Bedrock stack is required and pytest is in the test extra."""
        project = self._project()

        assert any(dep.startswith("boto3") for dep in project["dependencies"])
        assert any(dep.startswith("pytest") for dep in project["optional-dependencies"]["test"])
