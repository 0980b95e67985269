"""Tests for canonical release ranking and the temp table builder."""

from unittest.mock import MagicMock

import pytest

from canonical_release import (
    CREATE_EMPTY_SQL,
    INDEX_SQL,
    PREFERRED_STATUS,
    STREAM_SQL,
    WINDOW_SQL,
    canonical_release_key,
    create_canonical_release_table,
    pick_canonical_releases,
)


def release(mbid, release_id, status='Official', year=None, month=None, day=None, group='rg-1'):
    return {
        'release_group_mbid': group,
        'release_mbid': mbid,
        'status_name': status,
        'date_year': year,
        'date_month': month,
        'date_day': day,
        'id': release_id,
    }


def picks(releases):
    return dict(pick_canonical_releases(releases))


class TestCanonicalReleaseKey:
    def test_official_beats_earlier_promotion(self):
        releases = [
            release('promo', 1, status='Promotion', year=1999),
            release('official', 2, year=2001),
        ]
        assert picks(releases) == {'rg-1': 'official'}

    def test_official_beats_missing_status(self):
        releases = [
            release('unknown', 1, status=None, year=1990),
            release('official', 2, year=2001),
        ]
        assert picks(releases) == {'rg-1': 'official'}

    def test_earlier_full_date_wins_over_partial_date(self):
        releases = [
            release('feb', 1, year=2001, month=2),
            release('jan-15', 2, year=2001, month=1, day=15),
        ]
        assert picks(releases) == {'rg-1': 'jan-15'}

    def test_unknown_day_sorts_after_known_day(self):
        releases = [
            release('no-day', 1, year=2001, month=1),
            release('day-31', 2, year=2001, month=1, day=31),
        ]
        assert picks(releases) == {'rg-1': 'day-31'}

    def test_any_year_beats_missing_year(self):
        releases = [
            release('undated', 1),
            release('late', 2, year=2020),
        ]
        assert picks(releases) == {'rg-1': 'late'}

    def test_undated_releases_fall_back_to_lowest_id(self):
        releases = [
            release('high', 9, status=None),
            release('low', 3, status=None),
            release('mid', 5, status=None),
        ]
        assert picks(releases) == {'rg-1': 'low'}

    def test_key_prefers_preferred_status(self):
        official = release('a', 1, status=PREFERRED_STATUS)
        bootleg = release('b', 1, status='Bootleg')
        assert canonical_release_key(official) < canonical_release_key(bootleg)


class TestPickCanonicalReleases:
    def test_one_pick_per_contiguous_group(self):
        releases = [
            release('a1', 4, group='rg-a', year=2000),
            release('a2', 2, group='rg-a', year=1999),
            release('b1', 7, group='rg-b'),
        ]
        assert list(pick_canonical_releases(releases)) == [('rg-a', 'a2'), ('rg-b', 'b1')]

    def test_empty_input(self):
        assert list(pick_canonical_releases([])) == []


class TestCreateCanonicalReleaseTable:
    @pytest.fixture
    def conn(self):
        conn = MagicMock()
        cur = conn.cursor.return_value.__enter__.return_value
        cur.fetchone.return_value = {'picked': 3}
        return conn

    def test_window_strategy_runs_ranked_query_and_index(self, conn):
        create_canonical_release_table(conn, 'window')

        cur = conn.cursor.return_value.__enter__.return_value
        executed = [call.args[0] for call in cur.execute.call_args_list]
        assert executed[0] == WINDOW_SQL
        assert cur.execute.call_args_list[0].args[1] == {'status': PREFERRED_STATUS}
        assert INDEX_SQL in executed

    def test_stream_strategy_inserts_picks_in_batches(self):
        rows = [
            release('a-promo', 1, status='Promotion', year=1999, group='rg-a'),
            release('a-official', 2, year=2001, group='rg-a'),
            release('b-only', 3, status=None, group='rg-b'),
            release('c-late', 5, year=2010, group='rg-c'),
            release('c-early', 4, year=2005, group='rg-c'),
        ]

        cur = MagicMock()
        cur.fetchone.return_value = {'picked': 3}
        source = MagicMock()
        source.__iter__.return_value = iter(rows)

        def cursor(name=None):
            cm = MagicMock()
            cm.__enter__.return_value = source if name else cur
            return cm

        conn = MagicMock()
        conn.cursor.side_effect = cursor

        create_canonical_release_table(conn, 'stream', buffer_size=2)

        conn.transaction.assert_called_once_with()
        source.execute.assert_called_once_with(STREAM_SQL)

        executed = [call.args[0] for call in cur.execute.call_args_list]
        assert executed[0] == CREATE_EMPTY_SQL
        assert INDEX_SQL in executed

        batches = [call.args[1] for call in cur.executemany.call_args_list]
        assert batches == [
            [('rg-a', 'a-official'), ('rg-b', 'b-only')],
            [('rg-c', 'c-early')],
        ]

    def test_unknown_strategy_rejected(self, conn):
        with pytest.raises(ValueError):
            create_canonical_release_table(conn, 'guess')
