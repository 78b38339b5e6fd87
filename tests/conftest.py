"""Shared test fixtures."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from userstore.domain.user.core.entities.user import User
from userstore.infrastructure.user.repository_factory import reset_user_repository

# Load .env.test for local overrides (e.g. a real MONGODB_URI)
env_test_path = Path(__file__).parent.parent / ".env.test"
if env_test_path.exists():
    load_dotenv(env_test_path, override=True)


@pytest.fixture(autouse=True)
def reset_repository_singleton():
    """Reset the factory singleton around each test."""
    reset_user_repository()
    yield
    reset_user_repository()


@pytest.fixture
def sample_user() -> User:
    """Unsaved user with an application-level user_id."""
    return User.create(first_name="A", last_name="B", email="a@x.com", user_id="u1")
