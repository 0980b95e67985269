# utils/helpers.py
def normalize_mbid(mbid):
    """Case-fold an MBID to the catalog's lower-case form"""
    return mbid.strip().lower()


def parse_mbid_list(value):
    """Split a comma-separated MBID list, dropping blanks"""
    if not value:
        return []
    return [normalize_mbid(entry) for entry in value.split(',') if entry.strip()]
