#!/usr/bin/env python3
"""
Catalog Database - the SQLite file produced by each extraction run

The catalog is built from scratch on every run and never modified after it has
been promoted, so readers open it read-only and need no locking.

Tables:
- artist: MBID and display name
- artist_credit: credit ids shared by release groups and releases
- artist_credit_name: ordered credited names per credit (credit_id, position)
- release_group: title, credit, canonical release and CAA URLs
- release: title, owning release group, credit and CAA URL
- release_group_release: every release group / release membership
"""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE TABLE artist (
    mbid TEXT PRIMARY KEY,
    name TEXT NOT NULL
);

CREATE TABLE artist_credit (
    credit_id INTEGER PRIMARY KEY
);

CREATE TABLE artist_credit_name (
    credit_id INTEGER NOT NULL REFERENCES artist_credit (credit_id),
    artist_mbid TEXT NOT NULL REFERENCES artist (mbid),
    name TEXT NOT NULL,
    join_phrase TEXT NOT NULL DEFAULT '',
    position INTEGER NOT NULL,
    UNIQUE (credit_id, position)
);

CREATE INDEX artist_credit_name_artist_mbid ON artist_credit_name (artist_mbid);

CREATE TABLE release_group (
    mbid TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    artist_credit_id INTEGER NOT NULL,
    canonical_release_mbid TEXT,
    caa_url TEXT NOT NULL,
    canonical_release_caa_url TEXT
);

CREATE INDEX release_group_artist_credit_id ON release_group (artist_credit_id);

CREATE TABLE release (
    mbid TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    release_group_mbid TEXT NOT NULL,
    artist_credit_id INTEGER NOT NULL,
    caa_url TEXT NOT NULL
);

CREATE INDEX release_release_group_mbid ON release (release_group_mbid);

CREATE TABLE release_group_release (
    release_group_mbid TEXT NOT NULL,
    release_mbid TEXT NOT NULL,
    PRIMARY KEY (release_group_mbid, release_mbid)
);
"""

CATALOG_TABLES = (
    'artist',
    'artist_credit',
    'artist_credit_name',
    'release_group',
    'release',
    'release_group_release',
)


def create_catalog(path) -> sqlite3.Connection:
    """
    Create an empty catalog database at path

    Any existing file at path is removed first; parent directories are created.

    Args:
        path: Location of the new SQLite file

    Returns:
        Open sqlite3 connection with the schema applied
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        logger.info(f"Removing existing catalog file {path}")
        path.unlink()

    conn = sqlite3.connect(str(path))
    conn.executescript(SCHEMA_SQL)
    logger.debug(f"Catalog schema created at {path}")
    return conn


def open_catalog(path) -> sqlite3.Connection:
    """
    Open a finished catalog read-only

    Rows are returned as sqlite3.Row so columns can be read by name.

    Raises:
        sqlite3.OperationalError: If the file does not exist or is unreadable
    """
    uri = Path(path).resolve().as_uri() + '?mode=ro'
    conn = sqlite3.connect(uri, uri=True)
    conn.row_factory = sqlite3.Row
    return conn


def count_rows(conn: sqlite3.Connection) -> dict:
    """Row count per catalog table"""
    return {
        table: conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        for table in CATALOG_TABLES
    }
