#!/usr/bin/env python3
"""
Catalog Builder - full extraction from MusicBrainz into a fresh catalog file

Run order:
1. canonical_release temp table in the source session
2. artist -> artist_credit -> artist_credit_name -> release_group -> release

The catalog is written to a timestamped temporary file in the output directory
and renamed to catalog.db only after every pass has committed. A failed or
cancelled run deletes the temporary file and leaves any previous catalog.db
untouched.
"""

import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from caa_utils import release_group_url, release_url
from catalog_db import create_catalog
from config import ExtractConfig
from table_copier import CopyPass, copy_table

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    path: Path
    row_counts: Dict[str, int]


def _mbid(value):
    # psycopg returns uuid.UUID for gid columns
    return None if value is None else str(value)


# ============================================================================
# PAGE INSERTS
# ============================================================================

def insert_artists(target, rows: List[dict]) -> None:
    target.executemany(
        "INSERT INTO artist (mbid, name) VALUES (?, ?)",
        [(_mbid(row['gid']), row['name']) for row in rows]
    )


def insert_artist_credits(target, rows: List[dict]) -> None:
    target.executemany(
        "INSERT INTO artist_credit (credit_id) VALUES (?)",
        [(row['id'],) for row in rows]
    )


def insert_artist_credit_names(target, rows: List[dict]) -> None:
    target.executemany(
        """
        INSERT INTO artist_credit_name (credit_id, artist_mbid, name, join_phrase, position)
        VALUES (?, ?, ?, ?, ?)
        """,
        [
            (row['credit_id'], _mbid(row['artist_mbid']), row['name'],
             row['join_phrase'] or '', row['position'])
            for row in rows
        ]
    )


def release_group_values(row: dict) -> tuple:
    """Catalog column values for one release group, including both CAA URLs"""
    mbid = _mbid(row['mbid'])
    canonical_mbid = _mbid(row.get('canonical_release_mbid'))
    return (
        mbid,
        row['title'],
        row['artist_credit_id'],
        canonical_mbid,
        release_group_url(mbid),
        release_url(canonical_mbid) if canonical_mbid else None,
    )


def insert_release_groups(target, rows: List[dict]) -> None:
    target.executemany(
        """
        INSERT INTO release_group (mbid, title, artist_credit_id, canonical_release_mbid,
                                   caa_url, canonical_release_caa_url)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [release_group_values(row) for row in rows]
    )


def insert_releases(target, rows: List[dict]) -> None:
    releases = []
    memberships = []
    for row in rows:
        mbid = _mbid(row['mbid'])
        release_group_mbid = _mbid(row['release_group_mbid'])
        releases.append((mbid, row['title'], release_group_mbid,
                         row['artist_credit_id'], release_url(mbid)))
        memberships.append((release_group_mbid, mbid))

    target.executemany(
        """
        INSERT INTO release (mbid, title, release_group_mbid, artist_credit_id, caa_url)
        VALUES (?, ?, ?, ?, ?)
        """,
        releases
    )
    target.executemany(
        "INSERT INTO release_group_release (release_group_mbid, release_mbid) VALUES (?, ?)",
        memberships
    )


# ============================================================================
# ORCHESTRATION
# ============================================================================

def build_copy_passes(source) -> List[CopyPass]:
    """The five copy passes in dependency order"""
    return [
        CopyPass('artist', source.fetch_artists,
                 lambda row: row['id'], insert_artists),
        CopyPass('artist_credit', source.fetch_artist_credits,
                 lambda row: row['id'], insert_artist_credits),
        CopyPass('artist_credit_name', source.fetch_artist_credit_names,
                 lambda row: (row['credit_id'], row['position']), insert_artist_credit_names,
                 start=(0, -1)),
        CopyPass('release_group', source.fetch_release_groups,
                 lambda row: row['id'], insert_release_groups),
        CopyPass('release', source.fetch_releases,
                 lambda row: row['id'], insert_releases),
    ]


def build_catalog(source, output_path, page_size: int, stop_event=None) -> Dict[str, int]:
    """
    Extract the full dataset from source into a new catalog at output_path

    Args:
        source: MusicBrainzSource (or any object with the same fetch methods)
        output_path: Catalog file to create (replaced if present)
        page_size: Rows per page
        stop_event: Optional threading.Event checked between pages

    Returns:
        Dict of table name -> rows copied
    """
    target = create_catalog(output_path)
    try:
        source.prepare_canonical_releases()

        row_counts = {}
        for copy_pass in build_copy_passes(source):
            row_counts[copy_pass.name] = copy_table(copy_pass, target, page_size, stop_event)
        return row_counts
    finally:
        target.close()


@contextmanager
def open_musicbrainz_source(config: ExtractConfig):
    """MusicBrainzSource over a fresh source connection, closed on exit"""
    from db_utils import get_source_connection
    from mb_source import MusicBrainzSource

    with get_source_connection(config.source_url) as conn:
        yield MusicBrainzSource(conn, config.canonical_strategy)


def _discard(path: Path) -> None:
    for candidate in (path, path.with_name(path.name + '-journal')):
        if candidate.exists():
            candidate.unlink()
            logger.info(f"Removed incomplete build file {candidate}")


def run_extraction(config: ExtractConfig, stop_event=None,
                   open_source=open_musicbrainz_source) -> BuildResult:
    """
    Build the catalog into a temporary file and promote it to config.final_path

    Args:
        config: Extraction settings
        stop_event: Optional threading.Event checked between pages
        open_source: Context manager factory yielding a source for config

    Returns:
        BuildResult with the promoted path and per-table row counts
    """
    config.output_dir.mkdir(parents=True, exist_ok=True)
    temp_path = config.output_dir / f"catalog-{int(time.time() * 1000)}.db"
    logger.info(f"Building catalog into {temp_path}")

    try:
        with open_source(config) as source:
            row_counts = build_catalog(source, temp_path, config.batch_size, stop_event)
    except BaseException:
        _discard(temp_path)
        raise

    os.replace(temp_path, config.final_path)
    logger.info(f"✓ Catalog promoted to {config.final_path}")
    return BuildResult(path=config.final_path, row_counts=row_counts)
