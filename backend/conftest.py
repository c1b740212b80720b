"""Root conftest: load test environment variables, configure structlog, shared fixtures."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import configure_structlog
from shared.storage import LocalBlobStore
from tally.logic.game import create_session
from tally.logic.presets import PRESET_LIBRARY, find_preset
from tally.session.persistence import StatePersistence

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

# Route structlog through stdlib logging so caplog sees domain log events.
configure_structlog()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Prevent context leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def preset_by_id():
    def _lookup(preset_id: str):
        preset = find_preset(PRESET_LIBRARY, preset_id)
        assert preset is not None, preset_id
        return preset

    return _lookup


@pytest.fixture
def table_tennis(preset_by_id):
    return preset_by_id("table-tennis")


@pytest.fixture
def table_tennis_session(table_tennis):
    return create_session(table_tennis, ["A", "B"])


@pytest.fixture
def persistence(tmp_path):
    return StatePersistence(LocalBlobStore(tmp_path / "data"))
