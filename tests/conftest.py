"""
Pytest configuration and shared fixtures for windowsfix tests.

This module provides common fixtures and utilities used across all test modules.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional

import pytest

# Keep the developer's real settings file out of the test run.
os.environ.setdefault(
    "WINDOWSFIX_SETTINGS_PATH",
    str(Path(tempfile.gettempdir()) / "windowsfix-tests" / "settings.json"),
)

from loguru import logger  # noqa: E402

from windowsfix.actions.base import TERMINATE_ACTION, Action  # noqa: E402
from windowsfix.menu.model import MenuItem, MenuState, initial_state  # noqa: E402


# ==============================================================================
# Action Fakes
# ==============================================================================


class FakeAction(Action):
    """Records invocations; the test decides when (and whether) to deliver."""

    def __init__(self, name: str = "fake", outcome=None) -> None:
        self.name = name
        self.outcome = outcome
        self.delivers: List = []

    def invoke(self, deliver) -> Optional[object]:
        self.delivers.append(deliver)
        if self.outcome is not None:
            deliver(self.outcome)
        return None


# ==============================================================================
# Menu Fixtures
# ==============================================================================


def make_items(count: int = 4, **overrides) -> tuple:
    items = [
        MenuItem(
            label=f"Task {i}",
            action=FakeAction(f"task-{i}"),
            in_progress_text=f"Running task {i}...",
            **overrides,
        )
        for i in range(count)
    ]
    items.append(MenuItem(label="Exit", action=TERMINATE_ACTION, affects_busy_flag=False, terminal=True))
    return tuple(items)


@pytest.fixture
def menu_items() -> tuple:
    """Four fake actions followed by the terminal Exit item."""
    return make_items()


@pytest.fixture
def start_state(menu_items) -> MenuState:
    return initial_state(menu_items)


# ==============================================================================
# System Fixtures
# ==============================================================================


@pytest.fixture
def mock_subprocess_run(mocker):
    """
    Fixture providing a mock for subprocess.run.

    Every call succeeds unless the test changes ``return_value`` or
    ``side_effect``.

    Returns:
        Mock object for subprocess.run
    """
    mock = mocker.patch("subprocess.run")
    mock.return_value = mocker.Mock(returncode=0, stdout="", stderr="")
    return mock


@pytest.fixture
def on_windows(monkeypatch):
    """Pretend the host is Windows for platform-gated actions."""
    monkeypatch.setattr("windowsfix.actions.system_utils.is_windows", lambda: True)


@pytest.fixture
def sleep_calls() -> list:
    """Pass ``sleep_calls.append`` as ``sleep=`` to record delays instead of waiting."""
    return []


# ==============================================================================
# Logging Fixtures
# ==============================================================================


@pytest.fixture
def log_records():
    """Collect loguru records emitted during the test."""
    records: list = []
    handler_id = logger.add(lambda message: records.append(message.record), level="TRACE")
    yield records
    logger.remove(handler_id)
