#!/usr/bin/env python3
"""
Catalog Lookups

Read-only queries against a finished catalog, shaped into the JSON entities
served by the lookup API. All functions take an open sqlite3 connection with
sqlite3.Row rows and an already lower-cased MBID, and return None when the
entity is absent.

Artist credits are always returned ordered by position so clients can rebuild
the credited name, e.g. "Artist A feat. Artist B".
"""

import logging
from typing import List, Optional

logger = logging.getLogger(__name__)


def fetch_artist_credit(conn, credit_id: int) -> List[dict]:
    """Credited names for one artist credit, ordered by position"""
    rows = conn.execute(
        """
        SELECT credit_id, artist_mbid, name, join_phrase, position
        FROM artist_credit_name
        WHERE credit_id = ?
        ORDER BY position
        """,
        (credit_id,)
    ).fetchall()
    return [dict(row) for row in rows]


def fetch_artist(conn, mbid: str) -> Optional[dict]:
    """
    Artist with representative cover art

    The images come from the first release group (by MBID) credited to the
    artist; both are None when the artist has no release groups.
    """
    artist = conn.execute(
        "SELECT mbid, name FROM artist WHERE mbid = ?", (mbid,)
    ).fetchone()
    if artist is None:
        return None

    image_row = conn.execute(
        """
        SELECT rg.caa_url AS release_group_url,
               rg.canonical_release_caa_url AS release_url
        FROM release_group rg
        JOIN artist_credit_name acn ON acn.credit_id = rg.artist_credit_id
        WHERE acn.artist_mbid = ?
        ORDER BY rg.mbid
        LIMIT 1
        """,
        (mbid,)
    ).fetchone()

    return {
        'mbid': artist['mbid'],
        'name': artist['name'],
        'images': {
            'release_group': image_row['release_group_url'] if image_row else None,
            'release': image_row['release_url'] if image_row else None,
        }
    }


def fetch_release_group(conn, mbid: str) -> Optional[dict]:
    row = conn.execute(
        """
        SELECT mbid, title, artist_credit_id, caa_url, canonical_release_caa_url
        FROM release_group
        WHERE mbid = ?
        """,
        (mbid,)
    ).fetchone()
    if row is None:
        return None

    return {
        'mbid': row['mbid'],
        'title': row['title'],
        'artist_credit': fetch_artist_credit(conn, row['artist_credit_id']),
        'images': {
            'release_group': row['caa_url'],
            'release': row['canonical_release_caa_url'],
        }
    }


def fetch_release(conn, mbid: str) -> Optional[dict]:
    row = conn.execute(
        """
        SELECT mbid, title, release_group_mbid, artist_credit_id, caa_url
        FROM release
        WHERE mbid = ?
        """,
        (mbid,)
    ).fetchone()
    if row is None:
        return None

    return {
        'mbid': row['mbid'],
        'title': row['title'],
        'release_group_mbid': row['release_group_mbid'],
        'artist_credit': fetch_artist_credit(conn, row['artist_credit_id']),
        'images': {
            'release': row['caa_url'],
        }
    }


def _found(fetch, conn, mbids):
    results = []
    for mbid in mbids:
        entity = fetch(conn, mbid)
        if entity is not None:
            results.append(entity)
    return results


def fetch_batch(conn, artist_mbids=(), release_group_mbids=(), release_mbids=()) -> dict:
    """
    Look up several entities of each kind at once

    Missing MBIDs are left out of the result lists; they are not errors.
    Results keep the order of the requested MBIDs.
    """
    return {
        'artists': _found(fetch_artist, conn, artist_mbids),
        'release_groups': _found(fetch_release_group, conn, release_group_mbids),
        'releases': _found(fetch_release, conn, release_mbids),
    }
