"""Utils module for NFL editorial analysis."""

from .metrics import percentile_rank, regression_metrics, train_test_split_by_season

__all__ = ['percentile_rank', 'regression_metrics', 'train_test_split_by_season']
