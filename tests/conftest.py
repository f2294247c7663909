"""Shared fixtures: a throwaway SQLite library and a canned-page fetcher."""

import pytest
from sqlmodel import create_engine

from mangashelf.db import session as db_session
from mangashelf.db.init_db import init_db


class FakeFetcher:
    """Serves canned HTML per URL; anything else raises like a dead proxy."""

    def __init__(self, pages=None, error=None):
        self.pages = dict(pages or {})
        self.error = error
        self.calls = []

    async def fetch_text(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        if url not in self.pages:
            raise ConnectionError(f"no canned page for {url}")
        return self.pages[url]


@pytest.fixture
def library_db(tmp_path, monkeypatch):
    """Point the session module at a fresh database file for the test."""
    engine = create_engine(f"sqlite:///{tmp_path / 'library.db'}", echo=False)
    monkeypatch.setattr(db_session, "engine", engine)
    init_db()
    yield engine
    engine.dispose()


@pytest.fixture
def make_fetcher():
    return FakeFetcher
