#!/usr/bin/env python3
"""
Database Utilities - Source (PostgreSQL) and Catalog (SQLite) connections

Source mode (extraction scripts):
    One psycopg connection to the MusicBrainz PostgreSQL database per run,
    opened before the first query and always closed when the run ends.

Catalog mode (Flask lookup API):
    One read-only SQLite connection per request, stored on flask.g and
    closed on app context teardown.
"""

import logging
from contextlib import contextmanager

import psycopg
from psycopg.rows import dict_row
from flask import current_app, g

from catalog_db import open_catalog

logger = logging.getLogger(__name__)


# ============================================================================
# SOURCE MODE (Extraction)
# ============================================================================

def _create_source_connection(conninfo):
    """
    Create a connection to the MusicBrainz database

    Autocommit keeps session-scoped temporary tables alive across queries
    without holding one transaction open for the whole run.

    Returns:
        psycopg connection
    """
    try:
        conn = psycopg.connect(
            conninfo,
            row_factory=dict_row,
            autocommit=True,
            prepare_threshold=None
        )
        logger.debug("Source database connection created")
        return conn
    except psycopg.OperationalError as e:
        logger.error(f"Failed to connect to source database: {e}")
        raise


@contextmanager
def get_source_connection(conninfo):
    """
    Open the source connection for one extraction run

    The connection is closed on exit whether or not the run succeeded.

    Args:
        conninfo: PostgreSQL connection string (MB_PG_URL)

    Returns:
        psycopg connection (context manager)
    """
    conn = _create_source_connection(conninfo)
    try:
        yield conn
    finally:
        try:
            conn.close()
            logger.debug("Source database connection closed")
        except Exception as close_error:
            logger.error(f"Error closing source connection: {close_error}")


# ============================================================================
# CATALOG MODE (Lookup API)
# ============================================================================

def get_catalog_db():
    """
    Read-only connection to the served catalog for the current request

    Returns:
        sqlite3 connection with sqlite3.Row rows
    """
    if 'catalog_db' not in g:
        g.catalog_db = open_catalog(current_app.config['CATALOG_DB_PATH'])
    return g.catalog_db


def close_catalog_db(exception=None):
    """Close the request's catalog connection, if one was opened"""
    conn = g.pop('catalog_db', None)
    if conn is not None:
        conn.close()
