"""Pytest fixtures for census-join tests."""

import ast
import re
from pathlib import Path

import geopandas as gpd
import pytest
from shapely.geometry import Polygon


# =============================================================================
# Import enforcement: tests should only use the public API
# =============================================================================

# Allowed import patterns for census_join
# - "census_join" (the public API)
# - "census_join.cli" or "census_join.cli.commands" (CLI testing is allowed)
ALLOWED_IMPORT_PATTERNS = [
    r"^census_join$",  # Public API root
    r"^census_join\.cli(\..+)?$",  # CLI module and submodules
]


def _is_allowed_import(module_name: str) -> bool:
    """Check if a census_join import is allowed."""
    if not module_name.startswith("census_join"):
        return True  # Not a census_join import, always allowed
    return any(re.match(pattern, module_name) for pattern in ALLOWED_IMPORT_PATTERNS)


def _check_file_imports(filepath: Path) -> list[str]:
    """Check a test file for disallowed internal imports.

    Returns list of error messages for any violations found.
    """
    try:
        content = filepath.read_text()
        tree = ast.parse(content)
    except (SyntaxError, UnicodeDecodeError):
        return []  # Skip files that can't be parsed

    errors = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if not _is_allowed_import(alias.name):
                    errors.append(
                        f"{filepath}:{node.lineno}: "
                        f"Internal import not allowed: 'import {alias.name}'. "
                        f"Use 'from census_join import ...' instead."
                    )
        elif isinstance(node, ast.ImportFrom):
            if node.module and not _is_allowed_import(node.module):
                names = ", ".join(a.name for a in node.names)
                errors.append(
                    f"{filepath}:{node.lineno}: "
                    f"Internal import not allowed: 'from {node.module} import {names}'. "
                    f"Use 'from census_join import ...' instead."
                )
    return errors


def pytest_collect_file(parent, file_path):
    """Check test files for internal imports during collection."""
    if file_path.suffix == ".py" and file_path.name.startswith("test_"):
        errors = _check_file_imports(file_path)
        if errors:
            # Raise an error during collection to fail fast
            error_msg = "\n".join(errors)
            pytest.fail(
                f"\n\nInternal import violations detected:\n{error_msg}\n\n"
                "Tests should only import from the public API:\n"
                "  - from census_join import Geoid, GeoLevel, ...\n"
                "  - from census_join.cli.commands import cli  (for CLI tests)\n"
            )


@pytest.fixture
def square():
    """Build a unit-square polygon offset by (x, y)."""

    def build(x: float = 0.0, y: float = 0.0) -> Polygon:
        return Polygon([(x, y), (x + 1, y), (x + 1, y + 1), (x, y + 1)])

    return build


@pytest.fixture
def sample_tracts(square):
    """Create sample census tract polygons for Jefferson County, CO."""
    return gpd.GeoDataFrame(
        {
            "GEOID": ["08059009838", "08059009839", "08059012000"],
            "STATEFP": ["08", "08", "08"],
            "COUNTYFP": ["059", "059", "059"],
            "TRACTCE": ["009838", "009839", "012000"],
        },
        geometry=[square(0, 0), square(1, 0), square(2, 0)],
        crs="EPSG:4269",
    )
