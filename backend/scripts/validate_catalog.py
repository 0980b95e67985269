#!/usr/bin/env python3
"""
Validate sampled entities in a finished catalog

Checks that each sampled MBID exists and that its stored cover art URLs match
the URLs derived from its MBID. Prints a JSON report and exits 1 if any
sample fails.

Environment:
    CATALOG_DB_PATH              Catalog file (default: out/catalog.db)
    SAMPLE_ARTIST_MBID           Comma-separated artist MBIDs
    SAMPLE_RELEASE_GROUP_MBID    Comma-separated release group MBIDs
    SAMPLE_RELEASE_MBID          Comma-separated release MBIDs

Usage:
    python scripts/validate_catalog.py --release-group 1b022e01-4da6-387b-8658-8678046e4cef
    SAMPLE_RELEASE_MBID=... python scripts/validate_catalog.py --db out/catalog.db
"""

import json
import os

from script_base import ScriptBase, run_script

from catalog_db import open_catalog
from config import DEFAULT_CATALOG_DB_PATH
from utils.helpers import parse_mbid_list
from validation import build_report, validate_samples


def main() -> bool:
    script = ScriptBase(
        name="validate_catalog",
        description="Validate sampled entities in a finished catalog"
    )
    script.add_catalog_db_arg()
    script.add_debug_arg()
    script.parser.add_argument('--artist', help='Comma-separated artist MBIDs')
    script.parser.add_argument('--release-group', help='Comma-separated release group MBIDs')
    script.parser.add_argument('--release', help='Comma-separated release MBIDs')

    args = script.parse_args()

    db_path = args.db or os.environ.get('CATALOG_DB_PATH', DEFAULT_CATALOG_DB_PATH)
    artist_mbids = parse_mbid_list(args.artist or os.environ.get('SAMPLE_ARTIST_MBID'))
    release_group_mbids = parse_mbid_list(
        args.release_group or os.environ.get('SAMPLE_RELEASE_GROUP_MBID')
    )
    release_mbids = parse_mbid_list(args.release or os.environ.get('SAMPLE_RELEASE_MBID'))

    script.print_header()
    script.logger.info(f"Catalog: {db_path}")

    conn = open_catalog(db_path)
    try:
        results = validate_samples(conn, artist_mbids, release_group_mbids, release_mbids)
    finally:
        conn.close()

    report = build_report(results)
    print(json.dumps(report, indent=2))

    script.print_summary({
        'samples_checked': len(results),
        'failures': report['failures'],
    })
    return report['failures'] == 0


if __name__ == "__main__":
    run_script(main)
