# utils/json_provider.py
from flask.json.provider import DefaultJSONProvider

class CatalogJSONProvider(DefaultJSONProvider):
    """JSON provider that keeps entity fields in query order and emits UTF-8"""
    sort_keys = False
    ensure_ascii = False
