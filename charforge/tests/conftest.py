"""
Test configuration and fixtures for the CharForge test suite.

Environment variables are set before any application import so that
module-level configuration (Argon2 parameters, fastapi-users backend) loads
with test values.
"""

import os
import random
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="charforge-tests-"))

os.environ.setdefault("SERVER_PORT", "54731")
os.environ.setdefault("SERVER_HOST", "127.0.0.1")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR / 'charforge_unit.db'}"
os.environ.setdefault("CHARFORGE_JWT_SECRET", "test-jwt-secret-key-for-testing-only")
os.environ.setdefault("LOGGING_ENVIRONMENT", "unit_test")
os.environ.setdefault("LOGGING_DISABLE_LOGGING", "true")
os.environ.setdefault("CATALOG_BASE_URL", "http://catalog.test")
# Cheap hashing keeps auth tests fast
os.environ.setdefault("ARGON2_TIME_COST", "1")
os.environ.setdefault("ARGON2_MEMORY_COST", "1024")

# Imports must come after environment variables to prevent config loading failures
from charforge.config import reset_config  # noqa: E402
from charforge.structured_logging.enhanced_logging_config import get_logger  # noqa: E402

logger = get_logger(__name__)

pytest_plugins = [
    "charforge.tests.fixtures.catalog",
    "charforge.tests.fixtures.database",
    "charforge.tests.fixtures.api",
]


@pytest.fixture(autouse=True)
def reset_config_singleton() -> Generator[None, None, None]:
    """Reset the config cache before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture(autouse=True)
def deterministic_random_seed() -> Generator[None, None, None]:
    """Set deterministic random seed for reproducible tests."""
    random.seed(42)
    yield


@pytest.fixture
def test_logger() -> Any:
    """Provide a logger for tests."""
    return get_logger(__name__)


def pytest_collection_modifyitems(config: Any, items: list[Any]) -> None:  # pylint: disable=unused-argument
    """Auto-mark tests under unit/ with @pytest.mark.unit."""
    for item in items:
        file_path = str(item.fspath)
        if "/unit/" in file_path or "\\unit\\" in file_path:
            item.add_marker(pytest.mark.unit)
