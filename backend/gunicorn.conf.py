# gunicorn.conf.py
# Gunicorn configuration file for the lookup API (gunicorn app:app)

import logging
import os

# Logging
accesslog = '-'  # Log to stdout
errorlog = '-'   # Log to stderr
loglevel = 'info'

# Worker configuration
# The catalog is read-only, so workers share it without coordination
workers = int(os.environ.get('WEB_CONCURRENCY', 2))
worker_class = 'sync'
timeout = 30

bind = f"0.0.0.0:{os.environ.get('PORT', '5001')}"

# Server mechanics
daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None

# Hooks
def post_worker_init(worker):
    """
    Called after a worker has been forked and initialized.
    Reports which catalog file the worker will read.
    """
    logger = logging.getLogger(__name__)
    catalog_path = os.environ.get('CATALOG_DB_PATH', 'out/catalog.db')
    if os.path.exists(catalog_path):
        logger.info(f"Worker PID {os.getpid()} serving catalog {catalog_path}")
    else:
        logger.warning(f"Worker PID {os.getpid()}: catalog {catalog_path} does not exist yet")
