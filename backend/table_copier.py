#!/usr/bin/env python3
"""
Paginated Table Copier

Copies one source table into the catalog a page at a time:

    watermark = start
    loop:
        rows = fetch_page(watermark, page_size)
        if no rows: stop
        insert_page(target, rows)        # one SQLite transaction per page
        watermark = watermark_of(rows[-1])

The watermark only advances after the page has been committed. An empty page
is the only way the loop ends; any fetch or insert error propagates.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """Base class for extraction run failures"""


class ExtractionCancelled(ExtractionError):
    """Raised between pages when the run has been asked to stop"""


@dataclass
class CopyPass:
    """
    One table's copy definition

    Attributes:
        name: Table name used in logs and run statistics
        fetch_page: (watermark, page_size) -> list of source rows
        watermark_of: source row -> watermark for the next page
        insert_page: (target connection, rows) -> None
        start: Watermark before the first row
    """
    name: str
    fetch_page: Callable[[Any, int], List[dict]]
    watermark_of: Callable[[dict], Any]
    insert_page: Callable[[Any, List[dict]], None]
    start: Any = 0


def copy_table(copy_pass: CopyPass, target, page_size: int,
               stop_event=None) -> int:
    """
    Run one CopyPass to completion

    Args:
        copy_pass: Table definition
        target: sqlite3 connection to the catalog being built
        page_size: Maximum rows per page (>= 1)
        stop_event: Optional threading.Event; checked before each page

    Returns:
        Number of source rows copied

    Raises:
        ExtractionCancelled: If stop_event was set between pages
    """
    if page_size < 1:
        raise ValueError(f"page_size must be at least 1, got {page_size}")

    logger.info(f"Copying {copy_pass.name}...")
    start_time = time.time()

    watermark = copy_pass.start
    copied = 0
    pages = 0

    while True:
        if stop_event is not None and stop_event.is_set():
            raise ExtractionCancelled(
                f"Cancelled while copying {copy_pass.name} after {copied:,} rows"
            )

        rows = copy_pass.fetch_page(watermark, page_size)
        if not rows:
            break

        with target:
            copy_pass.insert_page(target, rows)

        watermark = copy_pass.watermark_of(rows[-1])
        copied += len(rows)
        pages += 1
        logger.debug(f"  {copy_pass.name}: page {pages} committed, {copied:,} rows, watermark {watermark}")

    elapsed = time.time() - start_time
    logger.info(f"✓ {copy_pass.name}: {copied:,} rows in {pages} pages ({elapsed:.1f}s)")
    return copied
