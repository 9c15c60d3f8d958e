import pytest

from scholar_chronicle.db import init_db


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary store path for tests."""
    db_path = str(tmp_path / "test_store.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    """A temporary store with its slots table created."""
    init_db(tmp_db)
    return tmp_db


@pytest.fixture
def make_state(tmp_db):
    """Build and load an AppState on the temporary store."""
    from scholar_chronicle.state import AppState

    def _make():
        return AppState(tmp_db).load()
    return _make


@pytest.fixture
def app_state(make_state):
    return make_state()
