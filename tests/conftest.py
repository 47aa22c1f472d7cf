"""Shared fixtures for the schemata test suite."""
import pytest

from schemata.core.config import get_settings
from schemata.core.logging import configure_logging


@pytest.fixture(scope="session", autouse=True)
def _logging():
    configure_logging(level="DEBUG")


@pytest.fixture
def unknown_keys_policy(monkeypatch):
    """Set SCHEMATA_UNKNOWN_KEYS for schemas built inside the test."""

    def set_policy(value: str) -> None:
        monkeypatch.setenv("SCHEMATA_UNKNOWN_KEYS", value)
        get_settings.cache_clear()

    yield set_policy
    get_settings.cache_clear()


def codes(result) -> list[str]:
    """Issue codes of a Failure, in order."""
    return [issue.code.value for issue in result.issues]


def paths(result) -> list[str]:
    """Serialized issue paths of a Failure, in order."""
    return [issue.field_path for issue in result.issues]
