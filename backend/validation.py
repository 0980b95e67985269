#!/usr/bin/env python3
"""
Catalog Validation

Re-reads sampled entities from a finished catalog and checks that each one
exists and that its stored CAA URLs still equal the URLs derived from its
MBID. Nothing is ever corrected; the result is a report.

Failure reasons:
- missing: no row for the MBID
- release_group_caa_url / release_caa_url: stored URL differs from the template
- canonical_release_caa_url: canonical release URL differs from the template
- canonical_release_group: canonical release is not a member of the group
"""

import logging
from dataclasses import asdict, dataclass
from typing import Iterable, List, Optional

from caa_utils import release_group_url, release_url

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    mbid: str
    type: str
    ok: bool
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        result = asdict(self)
        if self.reason is None:
            del result['reason']
        return result


def validate_artist(conn, mbid: str) -> ValidationResult:
    row = conn.execute("SELECT mbid FROM artist WHERE mbid = ?", (mbid,)).fetchone()
    if row is None:
        return ValidationResult(mbid, 'artist', False, 'missing')
    return ValidationResult(mbid, 'artist', True)


def validate_release_group(conn, mbid: str) -> ValidationResult:
    row = conn.execute(
        """
        SELECT mbid, caa_url, canonical_release_mbid, canonical_release_caa_url
        FROM release_group
        WHERE mbid = ?
        """,
        (mbid,)
    ).fetchone()
    if row is None:
        return ValidationResult(mbid, 'release_group', False, 'missing')

    if row['caa_url'] != release_group_url(row['mbid']):
        return ValidationResult(mbid, 'release_group', False, 'release_group_caa_url')

    canonical_mbid = row['canonical_release_mbid']
    if canonical_mbid:
        if row['canonical_release_caa_url'] != release_url(canonical_mbid):
            return ValidationResult(mbid, 'release_group', False, 'canonical_release_caa_url')

        member = conn.execute(
            """
            SELECT 1 FROM release_group_release
            WHERE release_group_mbid = ? AND release_mbid = ?
            """,
            (row['mbid'], canonical_mbid)
        ).fetchone()
        if member is None:
            return ValidationResult(mbid, 'release_group', False, 'canonical_release_group')

    return ValidationResult(mbid, 'release_group', True)


def validate_release(conn, mbid: str) -> ValidationResult:
    row = conn.execute("SELECT mbid, caa_url FROM release WHERE mbid = ?", (mbid,)).fetchone()
    if row is None:
        return ValidationResult(mbid, 'release', False, 'missing')
    if row['caa_url'] != release_url(row['mbid']):
        return ValidationResult(mbid, 'release', False, 'release_caa_url')
    return ValidationResult(mbid, 'release', True)


def validate_samples(conn,
                     artist_mbids: Iterable[str] = (),
                     release_group_mbids: Iterable[str] = (),
                     release_mbids: Iterable[str] = ()) -> List[ValidationResult]:
    """
    Validate every sampled MBID

    Args:
        conn: Read-only catalog connection (sqlite3.Row rows)
        artist_mbids, release_group_mbids, release_mbids: Lower-case samples

    Returns:
        One ValidationResult per sample, artists first
    """
    results = [validate_artist(conn, mbid) for mbid in artist_mbids]
    results += [validate_release_group(conn, mbid) for mbid in release_group_mbids]
    results += [validate_release(conn, mbid) for mbid in release_mbids]

    for result in results:
        if not result.ok:
            logger.warning(f"✗ {result.type} {result.mbid}: {result.reason}")
    return results


def build_report(results: List[ValidationResult]) -> dict:
    """JSON-ready report: every result plus the failure count"""
    return {
        'results': [result.to_dict() for result in results],
        'failures': sum(1 for result in results if not result.ok),
    }
