"""
Catalog Lookup API
A read-only Flask API over the promoted MusicBrainz cover catalog
"""

from flask import Flask, request, jsonify
from flask_cors import CORS
import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from config import configure_logging, init_app_config
import db_utils as db_tools

logger = configure_logging()

READ_METHODS = ('GET',)


def method_not_allowed():
    response = jsonify({'error': 'Method Not Allowed'})
    response.status_code = 405
    response.headers['Allow'] = ', '.join(READ_METHODS)
    return response


def create_app(catalog_path=None):
    """
    Create the lookup API

    Args:
        catalog_path: Catalog file to serve (default: CATALOG_DB_PATH env)
    """
    app = Flask(__name__)
    CORS(app, methods=list(READ_METHODS))
    init_app_config(app, catalog_path)

    from routes import register_blueprints
    register_blueprints(app)

    app.teardown_appcontext(db_tools.close_catalog_db)

    # Runs before routing errors are raised, so every path answers 405 alike
    @app.before_request
    def reject_writes():
        if request.method not in READ_METHODS:
            return method_not_allowed()
        return None

    # Request/response logging
    @app.before_request
    def log_request():
        """Log incoming requests"""
        logger.info(f"{request.method} {request.path}")

    @app.after_request
    def log_response(response):
        """Log response status"""
        logger.info(f"{request.method} {request.path} - {response.status_code}")
        return response

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'error': 'Not Found'}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return method_not_allowed()

    @app.errorhandler(500)
    def handle_internal_error(error):
        logger.error(f"Unhandled error on {request.method} {request.path}: {error}")
        return jsonify({'error': 'Internal Server Error'}), 500

    logger.info(f"Lookup API serving catalog {app.config['CATALOG_DB_PATH']} (PID {os.getpid()})")
    return app


app = create_app()


if __name__ == '__main__':
    # Running directly with 'python app.py' (not gunicorn)
    logger.info("Starting Flask application directly (not gunicorn)...")
    app.run(debug=True, host='0.0.0.0', port=int(os.environ.get('PORT', 5001)))
