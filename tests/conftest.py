# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests (SQLite-backed services and API routing)
"""

from collections.abc import Generator

import pytest

from silveredge.core.config import clear_settings_cache
from silveredge.infrastructure.events import reset_event_bus


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses a database)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# Global State
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_globals() -> Generator[None, None, None]:
    """Give every test a fresh event bus and settings."""
    reset_event_bus()
    clear_settings_cache()
    yield
    reset_event_bus()
    clear_settings_cache()


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_student_id() -> str:
    """Provide a sample student ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440001"


@pytest.fixture
def sample_class_id() -> str:
    """Provide a sample class ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440002"


@pytest.fixture
def sample_course_id() -> str:
    """Provide a sample course ID for testing."""
    return "550e8400-e29b-41d4-a716-446655440003"
