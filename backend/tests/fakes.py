"""
In-memory stand-in for MusicBrainzSource plus a small sample dataset.

The fake applies the same keyset rules as the SQL in mb_source.py: rows
strictly after the watermark, ordered by the watermark key, at most `limit`.
"""

from canonical_release import pick_canonical_releases

ARTIST_QUEEN = '0383dadf-2a4e-4d10-a46a-e9e041da8eb3'
ARTIST_BOWIE = '5441c29d-3602-4898-b1a1-b77fa23b8e50'
ARTIST_UNRELEASED = 'c0b2500e-0cef-4130-869d-732b23ed9df5'

RG_NEWS = '1b022e01-4da6-387b-8658-8678046e4cef'
RG_PRESSURE = '7c3218d7-75e0-4e8c-971f-f097b6c308c5'
RG_NO_RELEASES = 'e5c8b9d7-0001-4c4c-9a6f-000000000003'
RG_UNDATED = 'f1a0c2b4-0002-4d4d-8b7e-000000000004'

R_NEWS_PROMO = '0a1b2c3d-1000-4000-8000-000000000001'
R_NEWS_OFFICIAL = '0a1b2c3d-1001-4000-8000-000000000002'
R_PRESSURE_FEB = '0a1b2c3d-1002-4000-8000-000000000003'
R_PRESSURE_JAN = '0a1b2c3d-1003-4000-8000-000000000004'
R_UNDATED_LOW_ID = '0a1b2c3d-1004-4000-8000-000000000005'
R_UNDATED_HIGH_ID = '0a1b2c3d-1005-4000-8000-000000000006'


def sample_dataset():
    """Source rows keyed by MusicBrainz table name"""
    return {
        'artist': [
            {'id': 2, 'gid': ARTIST_BOWIE, 'name': 'David Bowie'},
            {'id': 1, 'gid': ARTIST_QUEEN, 'name': 'Queen'},
            {'id': 3, 'gid': ARTIST_UNRELEASED, 'name': 'Nobody Yet'},
        ],
        'artist_credit': [{'id': 10}, {'id': 11}, {'id': 12}],
        'artist_credit_name': [
            {'artist_credit': 10, 'position': 0, 'artist': 1, 'name': 'Queen', 'join_phrase': ''},
            {'artist_credit': 11, 'position': 1, 'artist': 2, 'name': 'David Bowie', 'join_phrase': ''},
            {'artist_credit': 11, 'position': 0, 'artist': 1, 'name': 'Queen', 'join_phrase': ' & '},
            {'artist_credit': 12, 'position': 0, 'artist': 2, 'name': 'Bowie', 'join_phrase': ''},
        ],
        'release_group': [
            {'id': 100, 'gid': RG_NEWS, 'name': 'News of the World', 'artist_credit': 10},
            {'id': 101, 'gid': RG_PRESSURE, 'name': 'Under Pressure', 'artist_credit': 11},
            {'id': 102, 'gid': RG_NO_RELEASES, 'name': 'Unreleased Sessions', 'artist_credit': 12},
            {'id': 103, 'gid': RG_UNDATED, 'name': 'Bootlegs', 'artist_credit': 10},
        ],
        'release': [
            {'id': 1000, 'gid': R_NEWS_PROMO, 'name': 'News of the World', 'release_group': 100,
             'artist_credit': 10, 'status': 'Promotion',
             'date_year': 1999, 'date_month': None, 'date_day': None},
            {'id': 1001, 'gid': R_NEWS_OFFICIAL, 'name': 'News of the World', 'release_group': 100,
             'artist_credit': 10, 'status': 'Official',
             'date_year': 2001, 'date_month': None, 'date_day': None},
            {'id': 1002, 'gid': R_PRESSURE_FEB, 'name': 'Under Pressure', 'release_group': 101,
             'artist_credit': 11, 'status': 'Official',
             'date_year': 2001, 'date_month': 2, 'date_day': None},
            {'id': 1003, 'gid': R_PRESSURE_JAN, 'name': 'Under Pressure', 'release_group': 101,
             'artist_credit': 11, 'status': 'Official',
             'date_year': 2001, 'date_month': 1, 'date_day': 15},
            {'id': 1005, 'gid': R_UNDATED_HIGH_ID, 'name': 'Bootlegs', 'release_group': 103,
             'artist_credit': 10, 'status': None,
             'date_year': None, 'date_month': None, 'date_day': None},
            {'id': 1004, 'gid': R_UNDATED_LOW_ID, 'name': 'Bootlegs', 'release_group': 103,
             'artist_credit': 10, 'status': None,
             'date_year': None, 'date_month': None, 'date_day': None},
        ],
    }


def keyset_page(rows, key, after, limit):
    return [row for row in sorted(rows, key=key) if key(row) > after][:limit]


class FakeMusicBrainzSource:
    """Implements the MusicBrainzSource fetch methods over plain dicts"""

    def __init__(self, dataset=None):
        self.data = dataset if dataset is not None else sample_dataset()
        self.canonical = None
        self.requests = []

    def _artist_gid(self, artist_id):
        return next(a['gid'] for a in self.data['artist'] if a['id'] == artist_id)

    def _release_group(self, release_group_id):
        return next(rg for rg in self.data['release_group'] if rg['id'] == release_group_id)

    def prepare_canonical_releases(self):
        releases = sorted(self.data['release'], key=lambda r: r['release_group'])
        ranked = [
            {
                'release_group_mbid': self._release_group(r['release_group'])['gid'],
                'release_mbid': r['gid'],
                'status_name': r['status'],
                'date_year': r['date_year'],
                'date_month': r['date_month'],
                'date_day': r['date_day'],
                'id': r['id'],
            }
            for r in releases
        ]
        self.canonical = dict(pick_canonical_releases(ranked))

    def fetch_artists(self, last_id, limit):
        self.requests.append(('artist', last_id, limit))
        return keyset_page(self.data['artist'], lambda r: r['id'], last_id, limit)

    def fetch_artist_credits(self, last_id, limit):
        self.requests.append(('artist_credit', last_id, limit))
        return keyset_page(self.data['artist_credit'], lambda r: r['id'], last_id, limit)

    def fetch_artist_credit_names(self, last_key, limit):
        self.requests.append(('artist_credit_name', last_key, limit))
        page = keyset_page(
            self.data['artist_credit_name'],
            lambda r: (r['artist_credit'], r['position']),
            tuple(last_key),
            limit
        )
        return [
            {
                'credit_id': r['artist_credit'],
                'artist_mbid': self._artist_gid(r['artist']),
                'name': r['name'],
                'join_phrase': r['join_phrase'],
                'position': r['position'],
            }
            for r in page
        ]

    def fetch_release_groups(self, last_id, limit):
        if self.canonical is None:
            raise AssertionError("canonical releases must be prepared before release groups")
        self.requests.append(('release_group', last_id, limit))
        page = keyset_page(self.data['release_group'], lambda r: r['id'], last_id, limit)
        return [
            {
                'id': rg['id'],
                'mbid': rg['gid'],
                'title': rg['name'],
                'artist_credit_id': rg['artist_credit'],
                'canonical_release_mbid': self.canonical.get(rg['gid']),
            }
            for rg in page
        ]

    def fetch_releases(self, last_id, limit):
        self.requests.append(('release', last_id, limit))
        page = keyset_page(self.data['release'], lambda r: r['id'], last_id, limit)
        return [
            {
                'id': r['id'],
                'mbid': r['gid'],
                'title': r['name'],
                'release_group_mbid': self._release_group(r['release_group'])['gid'],
                'artist_credit_id': r['artist_credit'],
            }
            for r in page
        ]
