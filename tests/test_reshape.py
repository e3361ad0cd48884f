"""
Unit tests for schedule reshaping.
"""
import os
import sys
import unittest

import pandas as pd

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.nfl_editorial_analysis.data.reshape import (
    attach_aggregates,
    games_to_participants,
    qb_season_aggregates,
)


class TestGamesToParticipants(unittest.TestCase):
    """Two-team rows become one row per side."""

    def setUp(self):
        self.games = pd.DataFrame({
            'date': pd.to_datetime(['2019-09-05', '2019-09-08', '2019-09-15']),
            'season': [2019, 2019, 2019],
            'week': [1, 1, 2],
            'neutral': [0, 1, 0],
            'playoff': [False, False, False],
            'team1': ['CHI', 'DAL', 'CHI'],
            'team2': ['GB', 'NYG', 'DEN'],
            'score1': [3, 35, 17],
            'score2': [10, 17, 17],
            'qb1': ['Trubisky', 'Prescott', 'Trubisky'],
            'qb2': ['Rodgers', 'Manning', 'Flacco'],
            'qb1_game_value': [40.0, 310.0, 120.0],
            'qb2_game_value': [150.0, 90.0, 100.0],
            'elo1_pre': [1550.0, 1530.0, 1545.0],
            'elo2_pre': [1500.0, 1460.0, 1480.0],
        })

    def test_two_rows_per_game(self):
        parts = games_to_participants(self.games)

        self.assertEqual(len(parts), 6)
        self.assertEqual(parts.groupby('game_id').size().tolist(), [2, 2, 2])
        self.assertEqual(parts['game_id'].iloc[0], '20190905_GB_CHI')

    def test_perspective_columns(self):
        parts = games_to_participants(self.games).set_index(['game_id', 'team'])

        chi = parts.loc[('20190905_GB_CHI', 'CHI')]
        gb = parts.loc[('20190905_GB_CHI', 'GB')]
        self.assertEqual(chi['opponent'], 'GB')
        self.assertEqual(chi['qb'], 'Trubisky')
        self.assertEqual(chi['opp_qb'], 'Rodgers')
        self.assertEqual(chi['points_for'], 3)
        self.assertEqual(gb['points_for'], 10)
        self.assertEqual(gb['qb_game_value'], 150.0)
        self.assertEqual(gb['team_elo_pre'], 1500.0)
        self.assertTrue(chi['is_home'])
        self.assertFalse(gb['is_home'])

    def test_neutral_site_has_no_home_team(self):
        parts = games_to_participants(self.games)
        neutral = parts[parts['game_id'] == '20190908_NYG_DAL']
        self.assertFalse(neutral['is_home'].any())

    def test_outcomes(self):
        parts = games_to_participants(self.games).set_index(['game_id', 'team'])
        self.assertEqual(parts.loc[('20190905_GB_CHI', 'CHI'), 'win'], 0.0)
        self.assertEqual(parts.loc[('20190905_GB_CHI', 'GB'), 'win'], 1.0)
        # tie
        self.assertEqual(parts.loc[('20190915_DEN_CHI', 'CHI'), 'win'], 0.5)
        self.assertEqual(parts.loc[('20190915_DEN_CHI', 'DEN'), 'win'], 0.5)

    def test_unplayed_game_has_no_outcome(self):
        games = self.games.copy()
        games['score1'] = games['score1'].astype(float)
        games['score2'] = games['score2'].astype(float)
        games.loc[0, ['score1', 'score2']] = float('nan')
        parts = games_to_participants(games).set_index(['game_id', 'team'])

        self.assertTrue(pd.isna(parts.loc[('20190905_GB_CHI', 'CHI'), 'win']))
        self.assertTrue(pd.isna(parts.loc[('20190905_GB_CHI', 'GB'), 'win']))
        self.assertEqual(parts.loc[('20190908_NYG_DAL', 'DAL'), 'win'], 1.0)

    def test_optional_columns_skipped(self):
        parts = games_to_participants(self.games)
        self.assertNotIn('win_prob', parts.columns)
        self.assertNotIn('qb_elo_pre', parts.columns)

    def test_missing_required_columns(self):
        with self.assertRaises(ValueError):
            games_to_participants(self.games.drop(columns=['score2']))


class TestAttachAggregates(unittest.TestCase):

    def setUp(self):
        self.parts = pd.DataFrame({
            'qb': ['A', 'A', 'B', 'C'],
            'season': [2019, 2019, 2019, 2019],
            'qb_game_value': [10.0, 20.0, 5.0, 7.0],
            'win': [1.0, 0.0, 1.0, 0.5],
        })

    def test_join_back(self):
        aggs = qb_season_aggregates(self.parts)
        merged = attach_aggregates(self.parts, aggs, on=['qb', 'season'])

        self.assertEqual(len(merged), len(self.parts))
        a_rows = merged[merged['qb'] == 'A']
        self.assertTrue((a_rows['season_starts'] == 2).all())
        self.assertTrue((a_rows['season_mean_value'] == 15.0).all())
        self.assertTrue((a_rows['season_win_rate'] == 0.5).all())

    def test_duplicate_aggregate_keys_rejected(self):
        aggs = pd.DataFrame({'qb': ['A', 'A'], 'season': [2019, 2019], 'x': [1, 2]})
        with self.assertRaises(ValueError):
            attach_aggregates(self.parts, aggs, on=['qb', 'season'])

    def test_missing_key_rejected(self):
        aggs = pd.DataFrame({'qb': ['A'], 'x': [1]})
        with self.assertRaises(ValueError):
            attach_aggregates(self.parts, aggs, on=['qb', 'season'])

    def test_overlapping_columns_rejected(self):
        aggs = pd.DataFrame({'qb': ['A'], 'season': [2019], 'win': [1.0]})
        with self.assertRaises(ValueError):
            attach_aggregates(self.parts, aggs, on=['qb', 'season'])


if __name__ == '__main__':
    unittest.main()
