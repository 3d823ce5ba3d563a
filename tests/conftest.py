import pytest

from santagate import create_app
from santagate.config import Settings
from santagate.models import ExchangeState
from santagate.storage import FileStateStore, StateStore, StorageError


class ScriptedShuffle:
    """Random source whose shuffles return pre-set orders, one per call."""

    def __init__(self, orders):
        self.orders = [list(o) for o in orders]
        self.calls = 0

    def shuffle(self, items):
        self.calls += 1
        items[:] = self.orders.pop(0)


class MemoryStore(StateStore):
    name = "memory"

    def __init__(self, state=None, fail_save=False):
        self.state = state or ExchangeState()
        self.fail_save = fail_save
        self.saves = 0

    def load(self):
        return self.state

    def save(self, state):
        if self.fail_save:
            raise StorageError("disk full")
        self.saves += 1
        self.state = state


@pytest.fixture
def settings(tmp_path):
    return Settings(state_file=str(tmp_path / "state.json"))


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def file_store(settings):
    return FileStateStore(settings.state_file)
