"""
Shared test fixtures and configuration.
"""

import pytest

from pacgate.core.models.settings import EnvSnapshot, Settings


@pytest.fixture
def settings() -> Settings:
    """Settings for an ordinary, unprivileged user."""
    return Settings(env=EnvSnapshot(euid=1000, user="alice"))


@pytest.fixture
def sudo_settings() -> Settings:
    """Settings for a user elevated through sudo."""
    return Settings(env=EnvSnapshot(euid=0, user="root", sudo_user="alice"))


@pytest.fixture
def root_settings() -> Settings:
    """Settings for the true root account."""
    return Settings(env=EnvSnapshot(euid=0, user="root"))
