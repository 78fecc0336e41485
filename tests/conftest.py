import pytest

from hostbridge.config import reset_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test starts from settings read from its own environment."""
    reset_settings()
    yield
    reset_settings()
