"""
Expected points per drive from starting field position and clock.

The spline variant fits an additive model (one B-spline basis per feature,
then ordinary least squares), which plays the role of a GAM with fixed
smoothness. The linear variant is the straight-line baseline.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.linear_model import LinearRegression
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import SplineTransformer

from src.nfl_editorial_analysis.config import config
from src.nfl_editorial_analysis.utils.metrics import regression_metrics

logger = logging.getLogger(__name__)

MODEL_KINDS = ("spline", "linear")


class ExpectedPointsModel:
    """Regression of drive points on start yardline and time left in the half."""

    def __init__(
        self,
        kind: str = config.EP_MODEL_KIND,
        *,
        features: Optional[Sequence[str]] = None,
        target: Optional[str] = None,
        n_knots: int = config.EP_SPLINE_KNOTS,
        degree: int = config.EP_SPLINE_DEGREE,
    ):
        if kind not in MODEL_KINDS:
            raise KeyError(f"Unknown model kind {kind!r}; choose from {MODEL_KINDS}")
        if n_knots < 2:
            raise ValueError("n_knots must be >= 2")
        self.kind = kind
        self.features: List[str] = list(features or config.COLUMN_LISTS["drive_features"])
        self.target: str = target or config.COLUMN_LISTS["y_variable"][0]
        self.n_knots = n_knots
        self.degree = degree
        self.pipeline_: Optional[Pipeline] = None

    def _make_pipeline(self) -> Pipeline:
        if self.kind == "spline":
            transformers = [
                (f"{col}_spline",
                 SplineTransformer(n_knots=self.n_knots, degree=self.degree,
                                   extrapolation="constant", include_bias=False),
                 [col])
                for col in self.features
            ]
        else:
            transformers = [("linear_passthrough", "passthrough", self.features)]

        ct = ColumnTransformer(
            transformers=transformers,
            remainder="drop",
            verbose_feature_names_out=False,
        )
        return Pipeline(steps=[("basis", ct), ("ols", LinearRegression())])

    def _check_columns(self, df: pd.DataFrame, with_target: bool) -> None:
        cols = self.features + ([self.target] if with_target else [])
        missing = [c for c in cols if c not in df.columns]
        if missing:
            raise ValueError(f"Drive table is missing columns: {missing}")

    def fit(self, drives: pd.DataFrame) -> "ExpectedPointsModel":
        self._check_columns(drives, with_target=True)
        data = drives.dropna(subset=self.features + [self.target])
        if len(data) < len(self.features) + 2:
            raise ValueError(f"Not enough drives to fit ({len(data)})")

        self.pipeline_ = self._make_pipeline()
        self.pipeline_.fit(data[self.features], data[self.target].astype(float))
        logger.info("Fitted %s expected-points model on %d drives", self.kind, len(data))
        return self

    def predict(self, drives: pd.DataFrame) -> np.ndarray:
        if self.pipeline_ is None:
            raise ValueError("Model not fitted – call fit() first.")
        self._check_columns(drives, with_target=False)
        return self.pipeline_.predict(drives[self.features])

    def residualize(self, drives: pd.DataFrame) -> pd.DataFrame:
        """Add ``expected_points`` and ``points_over_expected`` columns."""
        self._check_columns(drives, with_target=True)
        out = drives.dropna(subset=self.features).copy()
        out["expected_points"] = self.predict(out)
        out["points_over_expected"] = out[self.target] - out["expected_points"]
        return out

    def evaluate(self, drives: pd.DataFrame) -> Dict[str, float]:
        data = drives.dropna(subset=self.features + [self.target])
        metrics = regression_metrics(data[self.target], self.predict(data))
        metrics["n"] = float(len(data))
        return metrics

    def expected_points_curve(
        self,
        yardlines: Optional[Sequence[float]] = None,
        half_seconds: Sequence[float] = (1800, 900, 120),
    ) -> pd.DataFrame:
        """Prediction grid over yardline for a few clock values."""
        if set(self.features) != {"yardline_100", "half_seconds_remaining"}:
            raise ValueError("Curve grid needs the default yardline/clock features")
        if yardlines is None:
            yardlines = np.arange(1, 100)
        grid = pd.DataFrame(
            [(y, s) for s in half_seconds for y in yardlines],
            columns=["yardline_100", "half_seconds_remaining"],
        )
        grid["expected_points"] = self.predict(grid)
        return grid
