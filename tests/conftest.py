"""
Shared pytest configuration and fixtures for all tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path to enable importing project modules
# This allows tests to import from 'core' and 'sql' without installation
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests - isolated function-level tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interactions")
    config.addinivalue_line("markers", "smoke: Smoke tests - basic functionality checks")
    config.addinivalue_line("markers", "edge_case: Edge case tests - boundary conditions")
    config.addinivalue_line("markers", "regression: Regression tests - previously fixed bugs")


FROZEN_NOW = "2024-05-01 12:30:00"


@pytest.fixture
def frozen_clock(monkeypatch):
    """Pin the timestamp used by insert/update stamping."""
    monkeypatch.setattr(
        "sql.query_builder.current_timestamp",
        lambda timestamp_format=None: FROZEN_NOW
    )
    return FROZEN_NOW


@pytest.fixture
def builder():
    """Fresh QueryBuilder with default settings, independent of the environment."""
    from core.config import BuilderConfig
    from sql.query_builder import QueryBuilder

    return QueryBuilder(BuilderConfig())
