"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest

from app.domain.entities.machine import Machine


@pytest.fixture
def monday():
    """Midnight at the start of a Monday."""
    return datetime(2026, 10, 19)


@pytest.fixture
def machines():
    return [
        Machine(id="M1", code="CNC-01", name="Lathe", location="Hall A"),
        Machine(id="M2", code="CNC-02", name="Mill", location="Hall A"),
        Machine(id="M3", code="PRS-01", name="Press", location="Hall B"),
    ]
