"""Pytest configuration to make the project root importable.

This ensures that ``import models`` and similar absolute imports work when
tests are run from the repository root or other locations.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

CONFIG_VARS = (
    "CONCURRENCY_BUDGET",
    "MAX_WORKERS",
    "FALLBACK_BUDGET_MULTIPLIER",
    "STRICT_RESOURCE_PROBE",
    "SHOW_PROGRESS",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    """Keep a developer's .env / shell settings out of the tests."""
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
