import pytest

from notes_cli.db import DB

LONG_NOTE = (
    "Volcanoes erupt molten rock from deep magma chambers. "
    "Glaciers carve valleys as ice slowly moves downhill. "
    "Coral reefs shelter thousands of marine species. "
    "Volcanoes also release ash and gas into the atmosphere."
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("NOTES_CONFIG", "NOTES_DB_PATH", "NOTES_LOG_LEVEL", "NOTES_LOG_PATH",
                "NOTES_DEFAULT_SENTENCES", "NOTES_AUTO_SUMMARIZE", "NOTES_CORS_ORIGINS",
                "NOTES_LIST_LIMIT"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "notes.db"


@pytest.fixture
def db(db_path):
    store = DB(db_path)
    yield store
    store.close()
