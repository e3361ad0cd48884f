"""
Metrics utilities for NFL editorial analysis.
"""
from __future__ import annotations

from typing import Dict, List, Tuple, cast

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score


def regression_metrics(y_true, y_pred) -> Dict[str, float]:
    """Return r2, rmse and mae for a fitted regression."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Shape mismatch: {y_true.shape} vs {y_pred.shape}")
    return {
        "r2":   float(r2_score(y_true, y_pred)),
        "rmse": float(np.sqrt(mean_squared_error(y_true, y_pred))),
        "mae":  float(mean_absolute_error(y_true, y_pred)),
        "mean_residual": float(np.mean(y_true - y_pred)),
    }


def percentile_rank(values: pd.Series) -> pd.Series:
    """0-100 percentile of each value within the series (higher is better)."""
    return (values.rank(pct=True, method="average") * 100).round(1)


def train_test_split_by_season(
    df: pd.DataFrame,
    *,
    train_seasons: List[int],
    test_seasons: List[int],
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Leakage-free season split used across the package.

    Parameters
    ----------
    df : DataFrame with a 'season' column
    train_seasons : seasons to assign to the training fold
    test_seasons  : seasons to assign to the test   fold
    """
    overlap = set(train_seasons) & set(test_seasons)
    if overlap:
        raise ValueError(f"Seasons in both folds: {sorted(overlap)}")
    train = cast(pd.DataFrame, df[df["season"].isin(train_seasons)].copy())
    test  = cast(pd.DataFrame, df[df["season"].isin(test_seasons)].copy())
    return train, test
