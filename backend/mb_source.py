#!/usr/bin/env python3
"""
MusicBrainz Source Reader

Keyset-paginated reads from the MusicBrainz PostgreSQL database. Each fetch
method returns one page of rows strictly after the given watermark, ordered by
the watermark key, so the copier can resume exactly where the last page ended.

Watermarks:
- artist, artist_credit, release_group, release: internal numeric id
- artist_credit_name: (artist_credit, position), compared as a row value
"""

import logging
from typing import List, Tuple

from canonical_release import create_canonical_release_table

logger = logging.getLogger(__name__)


class MusicBrainzSource:
    """Page reader over one open psycopg connection (dict rows)"""

    def __init__(self, conn, canonical_strategy: str = 'window'):
        self.conn = conn
        self.canonical_strategy = canonical_strategy

    def _fetch(self, query: str, params: tuple) -> List[dict]:
        with self.conn.cursor() as cur:
            cur.execute(query, params)
            return cur.fetchall()

    def prepare_canonical_releases(self) -> None:
        """Materialize canonical_release for the release group pass"""
        create_canonical_release_table(self.conn, self.canonical_strategy)

    def fetch_artists(self, last_id: int, limit: int) -> List[dict]:
        return self._fetch(
            "SELECT id, gid, name FROM artist WHERE id > %s ORDER BY id LIMIT %s",
            (last_id, limit)
        )

    def fetch_artist_credits(self, last_id: int, limit: int) -> List[dict]:
        return self._fetch(
            "SELECT id FROM artist_credit WHERE id > %s ORDER BY id LIMIT %s",
            (last_id, limit)
        )

    def fetch_artist_credit_names(self, last_key: Tuple[int, int], limit: int) -> List[dict]:
        last_credit_id, last_position = last_key
        return self._fetch(
            """
            SELECT
                acn.artist_credit AS credit_id,
                a.gid AS artist_mbid,
                acn.name,
                acn.join_phrase,
                acn.position
            FROM artist_credit_name acn
            JOIN artist a ON a.id = acn.artist
            WHERE (acn.artist_credit, acn.position) > (%s, %s)
            ORDER BY acn.artist_credit, acn.position
            LIMIT %s
            """,
            (last_credit_id, last_position, limit)
        )

    def fetch_release_groups(self, last_id: int, limit: int) -> List[dict]:
        return self._fetch(
            """
            SELECT
                rg.id,
                rg.gid AS mbid,
                rg.name AS title,
                rg.artist_credit AS artist_credit_id,
                cr.release_mbid AS canonical_release_mbid
            FROM release_group rg
            LEFT JOIN canonical_release cr ON cr.release_group_mbid = rg.gid
            WHERE rg.id > %s
            ORDER BY rg.id
            LIMIT %s
            """,
            (last_id, limit)
        )

    def fetch_releases(self, last_id: int, limit: int) -> List[dict]:
        return self._fetch(
            """
            SELECT
                r.id,
                r.gid AS mbid,
                r.name AS title,
                rg.gid AS release_group_mbid,
                r.artist_credit AS artist_credit_id
            FROM release r
            JOIN release_group rg ON rg.id = r.release_group
            WHERE r.id > %s
            ORDER BY r.id
            LIMIT %s
            """,
            (last_id, limit)
        )
