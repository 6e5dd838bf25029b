import os

import pytest

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["ENV"] = "test"
os.environ.setdefault("SECRET_KEY", "test-secret")

from om_intel.db.init_db import init_db
from om_intel.main import app


@pytest.fixture(autouse=True)
def _reset_database():
    init_db(drop_all=True)
    yield


@pytest.fixture(autouse=True)
def _clear_dependency_overrides():
    yield
    app.dependency_overrides.clear()
