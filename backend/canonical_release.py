#!/usr/bin/env python3
"""
Canonical Release Selection

Every release group gets exactly one canonical release, chosen by:
1. Status 'Official' before any other status (or no status)
2. Earliest release date: year, then month, then day, unknown parts last
3. Lowest MusicBrainz internal release id

The picks are materialized in the source session as the temporary table
canonical_release(release_group_mbid, release_mbid), indexed on
release_group_mbid, and joined by the release group copy pass.

Two strategies build the table:
- window: a single ROW_NUMBER() query evaluated by PostgreSQL
- stream: releases are streamed ordered by release group and ranked here with
  canonical_release_key(); per-group cardinality is small
"""

import logging
from itertools import groupby
from typing import Iterable, Iterator, Tuple

logger = logging.getLogger(__name__)

PREFERRED_STATUS = 'Official'

CANONICAL_TABLE = 'canonical_release'

WINDOW_SQL = """
    CREATE TEMP TABLE canonical_release AS
    SELECT release_group_mbid, release_mbid FROM (
        SELECT
            rg.gid AS release_group_mbid,
            r.gid AS release_mbid,
            ROW_NUMBER() OVER (
                PARTITION BY rg.id
                ORDER BY
                    COALESCE(rs.name = %(status)s, false) DESC,
                    r.date_year NULLS LAST,
                    r.date_month NULLS LAST,
                    r.date_day NULLS LAST,
                    r.id
            ) AS rn
        FROM release_group rg
        JOIN release r ON r.release_group = rg.id
        LEFT JOIN release_status rs ON rs.id = r.status
    ) ranked
    WHERE rn = 1
"""

CREATE_EMPTY_SQL = """
    CREATE TEMP TABLE canonical_release (
        release_group_mbid UUID NOT NULL,
        release_mbid UUID NOT NULL
    )
"""

STREAM_SQL = """
    SELECT
        rg.gid AS release_group_mbid,
        r.gid AS release_mbid,
        rs.name AS status_name,
        r.date_year,
        r.date_month,
        r.date_day,
        r.id
    FROM release r
    JOIN release_group rg ON rg.id = r.release_group
    LEFT JOIN release_status rs ON rs.id = r.status
    ORDER BY rg.id
"""

INDEX_SQL = (
    "CREATE INDEX canonical_release_release_group_mbid "
    "ON canonical_release (release_group_mbid)"
)


def _nulls_last(value):
    return (value is None, value if value is not None else 0)


def canonical_release_key(release: dict) -> tuple:
    """
    Sort key ranking releases of one release group; the smallest key wins

    Args:
        release: dict with status_name, date_year, date_month, date_day, id
    """
    return (
        release.get('status_name') != PREFERRED_STATUS,
        _nulls_last(release.get('date_year')),
        _nulls_last(release.get('date_month')),
        _nulls_last(release.get('date_day')),
        release['id'],
    )


def pick_canonical_releases(releases: Iterable[dict]) -> Iterator[Tuple[str, str]]:
    """
    Choose the canonical release of each release group

    Args:
        releases: Release rows with release_group_mbid and release_mbid plus
            the canonical_release_key() fields. Rows of one release group
            must be contiguous.

    Yields:
        (release_group_mbid, release_mbid) per release group
    """
    for release_group_mbid, group in groupby(releases, key=lambda r: r['release_group_mbid']):
        best = min(group, key=canonical_release_key)
        yield release_group_mbid, best['release_mbid']


def create_canonical_release_table(conn, strategy: str = 'window', buffer_size: int = 5000) -> None:
    """
    Build the canonical_release temporary table in the source session

    Args:
        conn: psycopg connection (dict rows) to the MusicBrainz database
        strategy: 'window' or 'stream'
        buffer_size: Picks inserted per statement by the stream strategy
    """
    logger.info(f"Resolving canonical releases ({strategy} strategy)...")

    if strategy == 'window':
        with conn.cursor() as cur:
            cur.execute(WINDOW_SQL, {'status': PREFERRED_STATUS})
    elif strategy == 'stream':
        _stream_canonical_releases(conn, buffer_size)
    else:
        raise ValueError(f"Unknown canonical release strategy: {strategy}")

    with conn.cursor() as cur:
        cur.execute(INDEX_SQL)
        cur.execute(f"SELECT COUNT(*) AS picked FROM {CANONICAL_TABLE}")
        picked = cur.fetchone()['picked']

    logger.info(f"✓ Canonical releases resolved for {picked:,} release groups")


def _stream_canonical_releases(conn, buffer_size: int = 5000) -> None:
    insert_sql = "INSERT INTO canonical_release (release_group_mbid, release_mbid) VALUES (%s, %s)"

    with conn.transaction():
        with conn.cursor() as cur:
            cur.execute(CREATE_EMPTY_SQL)

            # Server-side cursor so the release table is never held in memory
            with conn.cursor(name='canonical_release_stream') as source:
                source.itersize = 10000
                source.execute(STREAM_SQL)

                buffer = []
                for pick in pick_canonical_releases(source):
                    buffer.append(pick)
                    if len(buffer) >= buffer_size:
                        cur.executemany(insert_sql, buffer)
                        buffer = []
                if buffer:
                    cur.executemany(insert_sql, buffer)
