#!/usr/bin/env python3
"""
Build the cover catalog from the MusicBrainz database

Extracts artists, artist credits, release groups and releases into a fresh
SQLite catalog, promotes it to <OUT_DIR>/catalog.db and optionally imports it
into the hosted D1 database.

Environment:
    MB_PG_URL            MusicBrainz PostgreSQL connection string (required)
    OUT_DIR              Output directory (default: out)
    BATCH_SIZE           Rows per page (default: 5000)
    CANONICAL_STRATEGY   window (default) or stream
    D1_DATABASE          Destination D1 database (required with --deploy)

Usage:
    python scripts/build_catalog.py
    python scripts/build_catalog.py --batch-size 10000 --output-dir /data/out
    python scripts/build_catalog.py --deploy
"""

import signal
import threading

from script_base import ScriptBase, run_script

from catalog_builder import run_extraction
from config import CANONICAL_STRATEGIES, ConfigError, load_extract_config
from deploy import import_catalog


def main() -> bool:
    script = ScriptBase(
        name="build_catalog",
        description="Build the cover catalog from the MusicBrainz database",
        epilog="""
Examples:
  # Build into out/catalog.db
  python scripts/build_catalog.py

  # Build and import into the hosted D1 database
  D1_DATABASE=catalog python scripts/build_catalog.py --deploy
        """
    )
    script.add_batch_size_arg()
    script.add_output_dir_arg()
    script.add_debug_arg()
    script.parser.add_argument(
        '--canonical-strategy',
        choices=CANONICAL_STRATEGIES,
        help='How canonical releases are ranked (default: CANONICAL_STRATEGY env or window)'
    )
    script.parser.add_argument(
        '--deploy',
        action='store_true',
        help='Import the finished catalog into D1 with wrangler'
    )
    script.parser.add_argument(
        '--database',
        help='Destination D1 database (default: D1_DATABASE env)'
    )

    args = script.parse_args()

    try:
        config = load_extract_config(
            require_database=args.deploy,
            batch_size=args.batch_size,
            output_dir=args.output_dir,
            database_name=args.database,
            canonical_strategy=args.canonical_strategy,
        )
    except ConfigError as e:
        script.logger.error(f"Configuration error: {e}")
        return False

    script.print_header({"DEPLOY": args.deploy})
    script.logger.info(f"Output directory: {config.output_dir}")
    script.logger.info(f"Batch size: {config.batch_size:,}")

    # Honoured between pages; an in-flight page always completes
    stop_event = threading.Event()

    def request_stop(signum, frame):
        script.logger.warning("Stop requested, finishing current page...")
        stop_event.set()

    signal.signal(signal.SIGTERM, request_stop)

    result = run_extraction(config, stop_event)

    if args.deploy:
        import_catalog(config.database_name, result.path)

    stats = {f"{table}_rows": f"{count:,}" for table, count in result.row_counts.items()}
    stats['catalog'] = str(result.path)
    script.print_summary(stats)
    return True


if __name__ == "__main__":
    run_script(main)
