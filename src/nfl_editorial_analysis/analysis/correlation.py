"""
Team-level residual summaries and correlation tests.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm
from scipy import stats

logger = logging.getLogger(__name__)

CORRELATION_METHODS = ("pearson", "spearman")


@dataclass
class CorrelationResult:
    """Correlation coefficient plus the OLS line of y on x."""
    x: str
    y: str
    method: str
    r: float
    p_value: float
    n: int
    slope: float
    intercept: float

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)


def team_season_summary(
    drives: pd.DataFrame,
    group_cols: Sequence[str] = ("posteam", "season"),
) -> pd.DataFrame:
    """
    Per team-season drive count, mean points over expected and early-down pass rate.

    ``drives`` must already carry ``points_over_expected``.
    """
    group_cols = list(group_cols)
    needed = group_cols + ["points_over_expected", "expected_points", "drive_points",
                           "early_down_plays", "early_down_passes"]
    missing = [c for c in needed if c not in drives.columns]
    if missing:
        raise ValueError(f"Drive table is missing columns: {missing}")

    summary = (
        drives.groupby(group_cols)
        .agg(
            drives=("drive_points", "size"),
            points_per_drive=("drive_points", "mean"),
            expected_points=("expected_points", "mean"),
            points_over_expected=("points_over_expected", "mean"),
            early_down_plays=("early_down_plays", "sum"),
            early_down_passes=("early_down_passes", "sum"),
        )
        .reset_index()
    )
    plays = summary["early_down_plays"].replace(0, np.nan)
    summary["early_down_pass_rate"] = summary["early_down_passes"] / plays
    return summary


def correlate(
    df: pd.DataFrame,
    x: str,
    y: str,
    method: str = "pearson",
) -> CorrelationResult:
    """
    Correlate two columns over their complete rows.

    Args:
        df: Table holding both columns
        x: Explanatory column (regression slope is dy/dx)
        y: Response column
        method: 'pearson' or 'spearman'
    """
    if method not in CORRELATION_METHODS:
        raise KeyError(f"Unknown correlation method {method!r}; choose from {CORRELATION_METHODS}")
    absent = [c for c in (x, y) if c not in df.columns]
    if absent:
        raise ValueError(f"Columns not found: {absent}")

    data = df[[x, y]].dropna().astype(float)
    if len(data) < 3:
        raise ValueError(f"Need at least 3 complete rows to correlate, got {len(data)}")

    if method == "pearson":
        r, p = stats.pearsonr(data[x], data[y])
    else:
        r, p = stats.spearmanr(data[x], data[y])

    ols = sm.OLS(data[y], sm.add_constant(data[x], has_constant="add")).fit()

    result = CorrelationResult(
        x=x,
        y=y,
        method=method,
        r=float(r),
        p_value=float(p),
        n=int(len(data)),
        slope=float(ols.params[x]),
        intercept=float(ols.params["const"]),
    )
    logger.info("%s r(%s, %s) = %.3f (p = %.3g, n = %d)", method, x, y, result.r, result.p_value, result.n)
    return result
