"""Pytest configuration and fixtures for routeshift tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def input_dir(fixtures_dir: Path) -> Path:
    """Return the path to the sample pages-router project."""
    return (fixtures_dir / "input").resolve()


@pytest.fixture
def pages_dir(input_dir: Path) -> Path:
    """Return the pages directory of the sample project."""
    return input_dir / "pages"


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample .routeshift.yml configuration file."""
    content = """version: 1
log_level: debug

scanner:
  exclude_patterns:
    - node_modules
    - legacy

output:
  indent: 4
"""
    file_path = temp_dir / ".routeshift.yml"
    file_path.write_text(content)
    return file_path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove routeshift environment overrides for testing."""
    monkeypatch.delenv("ROUTESHIFT_LOG_LEVEL", raising=False)
