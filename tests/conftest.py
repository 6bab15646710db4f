"""
Pytest configuration and shared fixtures for CREATE4 plan tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Isolates tests from CREATE4_* environment variables and config files
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

from fixtures import make_plan_spec, make_sample_spec  # noqa: E402
from create4.deploy.create3 import InMemoryCreate3Deployer  # noqa: E402
from create4.plan.builder import build_plan_from_spec  # noqa: E402


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def sample_spec():
    """Provide the reference two-chain spec."""
    return make_sample_spec()


@pytest.fixture
def sample_plan(sample_spec):
    """Provide the plan built from the reference spec."""
    return build_plan_from_spec(sample_spec)


@pytest.fixture
def wrap_spec():
    """Two-leaf plan (10, 25) whose last leaf wraps back to 10."""
    return make_plan_spec(chain_ids=(10, 25))


@pytest.fixture
def deployer():
    """Provide an in-memory CREATE3 deployer for a fixed factory."""
    return InMemoryCreate3Deployer("0x" + "ab" * 20)


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run in an empty directory with no CREATE4_* variables or HOME config."""
    for name in ("LOG_LEVEL", "LOG_FILE", "DEBUG", "FACTORY", "PRETTY"):
        monkeypatch.delenv(f"CREATE4_{name}", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
