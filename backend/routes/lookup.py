# routes/lookup.py
"""
Lookup API Routes - read-only access to the promoted catalog

Endpoints:
- GET /artist/<mbid>
- GET /release-group/<mbid>
- GET /release/<mbid>
- GET /batch?artist_mbid=a,b&release_group_mbid=c&release_mbid=d

MBIDs are matched case-insensitively. Unknown single entities return 404
{"error": "Not Found"}; unknown MBIDs in a batch are simply left out.
"""
from flask import Blueprint, jsonify, request
import logging
import catalog_lookup
from db_utils import get_catalog_db
from utils.helpers import normalize_mbid, parse_mbid_list

logger = logging.getLogger(__name__)
lookup_bp = Blueprint('lookup', __name__)


def not_found():
    return jsonify({'error': 'Not Found'}), 404


def _entity_response(entity):
    if entity is None:
        return not_found()
    return jsonify(entity)


@lookup_bp.route('/artist/<mbid>', methods=['GET'])
def get_artist(mbid):
    """Artist with representative cover art"""
    return _entity_response(catalog_lookup.fetch_artist(get_catalog_db(), normalize_mbid(mbid)))


@lookup_bp.route('/release-group/<mbid>', methods=['GET'])
def get_release_group(mbid):
    """Release group with ordered artist credit and cover art"""
    return _entity_response(
        catalog_lookup.fetch_release_group(get_catalog_db(), normalize_mbid(mbid))
    )


@lookup_bp.route('/release/<mbid>', methods=['GET'])
def get_release(mbid):
    """Release with ordered artist credit and cover art"""
    return _entity_response(catalog_lookup.fetch_release(get_catalog_db(), normalize_mbid(mbid)))


@lookup_bp.route('/batch', methods=['GET'])
def get_batch():
    """Several artists, release groups and releases in one call"""
    batch = catalog_lookup.fetch_batch(
        get_catalog_db(),
        artist_mbids=parse_mbid_list(request.args.get('artist_mbid')),
        release_group_mbids=parse_mbid_list(request.args.get('release_group_mbid')),
        release_mbids=parse_mbid_list(request.args.get('release_mbid')),
    )
    logger.debug(
        f"Batch lookup: {len(batch['artists'])} artists, "
        f"{len(batch['release_groups'])} release groups, {len(batch['releases'])} releases"
    )
    return jsonify(batch)
