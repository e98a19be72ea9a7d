"""
Pytest configuration and shared fixtures for allowlist tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")

make_entitlements = _common.make_entitlements
make_multi_asset_entitlements = _common.make_multi_asset_entitlements
make_tree = _common.make_tree
make_coordinator = _common.make_coordinator


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def binary_tree():
    """Provide the alice=100 / bob=50 binary-scheme tree."""
    return make_tree()


@pytest.fixture
def multi_asset_tree():
    """Provide a three-beneficiary multi-asset tree."""
    from allowlist.schemas.leaf import LeafScheme
    return make_tree(make_multi_asset_entitlements(), scheme=LeafScheme.MULTI_ASSET)


@pytest.fixture
def coordinator_setup(binary_tree):
    """Provide (coordinator, transfer, events) over the binary tree."""
    return make_coordinator(binary_tree)


@pytest.fixture(autouse=True)
def _reset_default_config():
    """Keep the process-wide default config from leaking between tests."""
    from allowlist.config import set_default_config
    yield
    set_default_config(None)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
