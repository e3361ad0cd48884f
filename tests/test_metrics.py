"""
Unit tests for metrics and correlation helpers.
"""
import os
import sys
import unittest

import numpy as np
import pandas as pd

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.nfl_editorial_analysis.analysis.correlation import correlate, team_season_summary
from src.nfl_editorial_analysis.utils.metrics import (
    percentile_rank,
    regression_metrics,
    train_test_split_by_season,
)


class TestRegressionMetrics(unittest.TestCase):

    def test_perfect_fit(self):
        metrics = regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])
        self.assertAlmostEqual(metrics['r2'], 1.0)
        self.assertAlmostEqual(metrics['rmse'], 0.0)
        self.assertAlmostEqual(metrics['mae'], 0.0)

    def test_constant_offset(self):
        metrics = regression_metrics([1.0, 2.0, 3.0], [2.0, 3.0, 4.0])
        self.assertAlmostEqual(metrics['rmse'], 1.0)
        self.assertAlmostEqual(metrics['mean_residual'], -1.0)

    def test_shape_mismatch(self):
        with self.assertRaises(ValueError):
            regression_metrics([1.0, 2.0], [1.0])


class TestSplitsAndRanks(unittest.TestCase):

    def test_split_by_season(self):
        df = pd.DataFrame({'season': [2018, 2019, 2020, 2020], 'x': range(4)})
        train, test = train_test_split_by_season(df, train_seasons=[2018, 2019],
                                                 test_seasons=[2020])
        self.assertEqual(len(train), 2)
        self.assertEqual(len(test), 2)

    def test_overlapping_split_rejected(self):
        df = pd.DataFrame({'season': [2018, 2019]})
        with self.assertRaises(ValueError):
            train_test_split_by_season(df, train_seasons=[2018, 2019], test_seasons=[2019])

    def test_percentile_rank(self):
        pct = percentile_rank(pd.Series([10.0, 30.0, 20.0, 40.0]))
        self.assertEqual(pct.tolist(), [25.0, 75.0, 50.0, 100.0])


class TestCorrelation(unittest.TestCase):

    def setUp(self):
        x = np.linspace(0.4, 0.7, 12)
        self.df = pd.DataFrame({'pass_rate': x, 'poe': 2.0 * x + 1.0})

    def test_pearson_perfect_line(self):
        result = correlate(self.df, 'pass_rate', 'poe')
        self.assertAlmostEqual(result.r, 1.0)
        self.assertAlmostEqual(result.slope, 2.0)
        self.assertAlmostEqual(result.intercept, 1.0)
        self.assertEqual(result.n, 12)
        self.assertEqual(result.as_dict()['method'], 'pearson')

    def test_spearman_uses_ranks(self):
        df = self.df.assign(poe=np.exp(self.df['pass_rate'] * 10))
        result = correlate(df, 'pass_rate', 'poe', method='spearman')
        self.assertAlmostEqual(result.r, 1.0)

    def test_negative_association(self):
        df = self.df.assign(poe=-self.df['poe'])
        self.assertLess(correlate(df, 'pass_rate', 'poe').r, 0)

    def test_incomplete_rows_dropped(self):
        df = self.df.copy()
        df.loc[0, 'poe'] = np.nan
        self.assertEqual(correlate(df, 'pass_rate', 'poe').n, 11)

    def test_too_few_rows(self):
        with self.assertRaises(ValueError):
            correlate(self.df.head(2), 'pass_rate', 'poe')

    def test_unknown_method(self):
        with self.assertRaises(KeyError):
            correlate(self.df, 'pass_rate', 'poe', method='kendall')

    def test_unknown_column(self):
        with self.assertRaises(ValueError):
            correlate(self.df, 'pass_rate', 'epa')


class TestTeamSeasonSummary(unittest.TestCase):

    def test_summary(self):
        drives = pd.DataFrame({
            'posteam': ['KC', 'KC', 'HOU', 'HOU'],
            'season': [2020] * 4,
            'drive_points': [7, 0, 3, 0],
            'expected_points': [2.0, 2.0, 1.0, 1.0],
            'points_over_expected': [5.0, -2.0, 2.0, -1.0],
            'early_down_plays': [4, 2, 0, 0],
            'early_down_passes': [3, 0, 0, 0],
        })
        summary = team_season_summary(drives).set_index('posteam')

        self.assertEqual(summary.loc['KC', 'drives'], 2)
        self.assertAlmostEqual(summary.loc['KC', 'points_over_expected'], 1.5)
        self.assertAlmostEqual(summary.loc['KC', 'early_down_pass_rate'], 0.5)
        self.assertTrue(np.isnan(summary.loc['HOU', 'early_down_pass_rate']))

    def test_requires_residuals(self):
        with self.assertRaises(ValueError):
            team_season_summary(pd.DataFrame({'posteam': ['KC'], 'season': [2020]}))


if __name__ == '__main__':
    unittest.main()
