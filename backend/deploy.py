#!/usr/bin/env python3
"""
Catalog Deployment

Ships a finished catalog file to the hosted Cloudflare D1 database with
`wrangler d1 import <database> <file> --remote`. Wrangler's output goes
straight to the console; a non-zero exit status is fatal.
"""

import logging
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

WRANGLER_BIN = 'wrangler'


class DeployError(Exception):
    """Raised when the import tool cannot be run or exits non-zero"""

    def __init__(self, message, returncode=None):
        super().__init__(message)
        self.returncode = returncode


def import_catalog(database_name: str, file_path, wrangler_bin: str = WRANGLER_BIN) -> None:
    """
    Import a catalog file into a D1 database

    Args:
        database_name: Destination D1 database name
        file_path: Local catalog file
        wrangler_bin: Wrangler executable

    Raises:
        DeployError: If wrangler is missing or exits non-zero
    """
    command = [wrangler_bin, 'd1', 'import', database_name, str(Path(file_path)), '--remote']
    logger.info(f"Importing {file_path} into D1 database {database_name}...")

    try:
        result = subprocess.run(command)
    except OSError as e:
        raise DeployError(f"Could not run {wrangler_bin}: {e}") from e

    if result.returncode != 0:
        raise DeployError(f"wrangler exited with code {result.returncode}",
                          returncode=result.returncode)

    logger.info(f"✓ Imported catalog into {database_name}")
