"""
Root test configuration and fixtures for validate_query.

Note: sys.path manipulation is handled here to ensure imports work correctly.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path to allow imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from validate_query.params import ParameterStore  # noqa: E402
from validate_query.settings import get_settings  # noqa: E402


class RecordingSink:
    """Log sink that records every call as (level, message)."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def debug(self, msg: str) -> None:
        self.calls.append(("debug", msg))

    def info(self, msg: str) -> None:
        self.calls.append(("info", msg))

    def warning(self, msg: str) -> None:
        self.calls.append(("warning", msg))

    def error(self, msg: str) -> None:
        self.calls.append(("error", msg))

    def critical(self, msg: str) -> None:
        self.calls.append(("critical", msg))


@pytest.fixture
def sink() -> RecordingSink:
    """A log sink that records calls instead of logging."""
    return RecordingSink()


@pytest.fixture
def params() -> ParameterStore:
    """Parameter store holding one single-valued and one multi-valued parameter."""
    return ParameterStore([("pet_id", "7"), ("color", "red"), ("color", "blue")])


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test see settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after tests that reconfigure logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
