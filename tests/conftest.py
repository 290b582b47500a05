"""
Pytest configuration and shared fixtures for jinja-udf tests.
"""

import sys
from collections.abc import Callable, Generator, Sequence
from pathlib import Path
from typing import Any

import pytest
import yaml

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jinja_udf.logging import reset_loggers  # noqa: E402
from jinja_udf.template import (  # noqa: E402
    JinjaRenderingService,
    RenderingService,
    RenderResult,
)

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def tests_dir() -> Path:
    """Return the tests directory."""
    return Path(__file__).parent


@pytest.fixture(scope="session")
def fixtures_dir(tests_dir: Path) -> Path:
    """Return the fixtures directory."""
    return tests_dir / "fixtures"


@pytest.fixture(scope="session")
def configs_dir(fixtures_dir: Path) -> Path:
    """Return the config fixtures directory."""
    return fixtures_dir / "configs"


@pytest.fixture(scope="session")
def templates_dir(fixtures_dir: Path) -> Path:
    """Return the template fixtures directory."""
    return fixtures_dir / "templates"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def test_config_path(configs_dir: Path) -> Path:
    """Return path to test configuration file."""
    return configs_dir / "test-config.yaml"


@pytest.fixture(scope="session")
def test_config(test_config_path: Path) -> dict[str, Any]:
    """Load test configuration."""
    if test_config_path.exists():
        with test_config_path.open() as f:
            return yaml.safe_load(f)
    return {}


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logger_state() -> Generator[None, None, None]:
    """Reset logger state before and after each test."""
    reset_loggers()
    yield
    reset_loggers()


# =============================================================================
# Rendering Service Fixtures
# =============================================================================


class RecordingRenderingService(RenderingService):
    """Rendering service that records calls and answers from a function.

    ``respond`` maps (expression, context_json) to a RenderResult. The
    default echoes the expression back as an OK result.
    """

    def __init__(
        self,
        respond: Callable[[str, str], RenderResult] | None = None,
    ):
        super().__init__()
        self.respond = respond or (lambda expression, _context: RenderResult.ok(expression))
        self.calls: list[tuple[str, str, str, bool, tuple[str, ...]]] = []
        self.released: list[RenderResult] = []

    def _render(
        self,
        expression: str,
        context_json: str,
        template_path: str,
        autoescape: bool,
        autoescape_extensions: Sequence[str],
    ) -> RenderResult:
        self.calls.append(
            (expression, context_json, template_path, autoescape, tuple(autoescape_extensions))
        )
        return self.respond(expression, context_json)

    def release(self, result: RenderResult) -> None:
        super().release(result)
        self.released.append(result)


@pytest.fixture
def recording_service() -> RecordingRenderingService:
    """Rendering service that echoes expressions and records every call."""
    return RecordingRenderingService()


@pytest.fixture
def jinja_service() -> JinjaRenderingService:
    """Fresh Jinja2 rendering service."""
    return JinjaRenderingService()


# =============================================================================
# Markers Configuration
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "integration: Tests against a live DuckDB connection")
