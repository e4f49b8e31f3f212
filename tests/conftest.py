"""
Pytest configuration and fixtures for affiliate_empire tests.
"""

import tempfile
from pathlib import Path

import pytest

from affiliate_empire.compliance import FtcDisclosureService, FtcDisclosureValidator
from affiliate_empire.config import Config
from affiliate_empire.integrations import RetryPolicy
from affiliate_empire.secrets import EnvSecretStore, SecretsResolver


AMAZON_DISCLOSURE = "As an Amazon Associate, I earn from qualifying purchases."


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def validator():
    return FtcDisclosureValidator()


@pytest.fixture
def disclosure_service():
    return FtcDisclosureService()


@pytest.fixture
def fast_policy():
    """Retry policy with no backoff delay."""
    return RetryPolicy(backoff_multiplier=0, backoff_min=0, backoff_max=0)


@pytest.fixture
def empty_config():
    """Config isolated from the process environment."""
    return Config(environ={})


@pytest.fixture
def make_resolver():
    """Build a SecretsResolver over an in-memory environment."""
    def _make(env=None):
        env = dict(env or {})
        return SecretsResolver(store=EnvSecretStore(environ=env), env=env)
    return _make


@pytest.fixture
def sample_blog_post():
    return (
        f"{AMAZON_DISCLOSURE}\n\n"
        "# Best Blenders of the Year\n\n"
        "We tested a dozen blenders over three months. The Ninja BN701 came out on "
        "top for smoothies, crushed ice and frozen fruit, while staying easy to clean."
    )


@pytest.fixture
def undisclosed_text():
    return "This blender is amazing and you should buy it today. It crushes ice in seconds."
