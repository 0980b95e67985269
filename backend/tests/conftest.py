"""Shared fixtures: a catalog built from the fake source, and an API client."""

import pytest

from catalog_builder import build_catalog
from catalog_db import open_catalog
from fakes import FakeMusicBrainzSource


@pytest.fixture
def fake_source():
    return FakeMusicBrainzSource()


@pytest.fixture
def catalog_path(tmp_path, fake_source):
    path = tmp_path / 'catalog.db'
    build_catalog(fake_source, path, page_size=2)
    return path


@pytest.fixture
def catalog(catalog_path):
    conn = open_catalog(catalog_path)
    yield conn
    conn.close()


@pytest.fixture
def client(catalog_path):
    from app import create_app

    app = create_app(catalog_path)
    app.testing = True
    return app.test_client()
