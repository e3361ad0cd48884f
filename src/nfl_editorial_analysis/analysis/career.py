"""
Era-adjusted career aggregation.

Every game value is measured against the median of everyone who played in the
same period (season-week), then accumulated per entity in chronological order.
Period rankings give the share of weeks an entity was the best, top-3 or top-5
performer.
"""
from __future__ import annotations

import hashlib
import json
import logging
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from src.nfl_editorial_analysis.config import config
from src.nfl_editorial_analysis.data.schema import ParticipantSchema, QB_SCHEMA
from src.nfl_editorial_analysis.utils.metrics import percentile_rank

logger = logging.getLogger(__name__)


def drop_incomplete(df: pd.DataFrame, schema: ParticipantSchema = QB_SCHEMA) -> pd.DataFrame:
    """Remove records with no entity or no raw value."""
    schema.assert_in_dataframe(df)
    mask = df[schema.entity].notna() & df[schema.value].notna()
    dropped = int((~mask).sum())
    if dropped:
        logger.warning("Dropped %d records missing %s or %s", dropped, schema.entity, schema.value)
    return df.loc[mask].copy()


def adjust_for_era(df: pd.DataFrame, schema: ParticipantSchema = QB_SCHEMA) -> pd.DataFrame:
    """
    Subtract the period median from each raw value.

    Adds ``period_median`` and ``adjusted_value``.
    """
    schema.assert_in_dataframe(df)
    df = df.copy()
    df["period_median"] = df.groupby(schema.period_cols)[schema.value].transform("median")
    df["adjusted_value"] = df[schema.value] - df["period_median"]
    return df


def accumulate_careers(df: pd.DataFrame, schema: ParticipantSchema = QB_SCHEMA) -> pd.DataFrame:
    """
    Running career totals per entity, in period order.

    Adds ``games_played`` (1, 2, …) and ``career_value`` (cumulative
    ``adjusted_value``).
    """
    if "adjusted_value" not in df.columns:
        raise ValueError("adjusted_value missing – call adjust_for_era() first")

    df = df.sort_values([schema.entity] + schema.sort_cols, kind="mergesort").copy()
    grouped = df.groupby(schema.entity, sort=False)
    df["games_played"] = grouped.cumcount() + 1
    df["career_value"] = grouped["adjusted_value"].cumsum()
    return df


def rank_within_period(
    df: pd.DataFrame,
    schema: ParticipantSchema = QB_SCHEMA,
    top_k: Sequence[int] = config.TOP_K,
) -> pd.DataFrame:
    """
    Rank raw values inside each period, best first.

    Tied entities all take the highest (worst) rank of their tie group, so two
    players sharing the best value are both ranked 2 and neither is a top-1.
    """
    schema.assert_in_dataframe(df)
    df = df.copy()
    df["period_rank"] = (
        df.groupby(schema.period_cols)[schema.value]
        .rank(ascending=False, method="max")
    )
    for k in top_k:
        df[f"top_{k}"] = df["period_rank"] <= k
    return df


def summarize_careers(
    df: pd.DataFrame,
    schema: ParticipantSchema = QB_SCHEMA,
    *,
    top_k: Sequence[int] = config.TOP_K,
    min_games: int = 0,
) -> pd.DataFrame:
    """
    One row per entity: games, cumulative adjusted value, win rate and top-K rates.

    Sorted by ``career_value`` descending with a 1-based ``rank``.
    """
    needed = ["adjusted_value"] + [f"top_{k}" for k in top_k]
    absent = [c for c in needed if c not in df.columns]
    if absent:
        raise ValueError(f"Missing derived columns {absent} – run adjust/rank steps first")

    aggs: Dict[str, Tuple[str, str]] = {
        "games": (schema.value, "size"),
        "career_value": ("adjusted_value", "sum"),
        "value_per_game": ("adjusted_value", "mean"),
        "raw_value_per_game": (schema.value, "mean"),
        "win_rate": (schema.outcome, "mean"),
    }
    for k in top_k:
        aggs[f"top_{k}_rate"] = (f"top_{k}", "mean")
    if "season" in df.columns:
        aggs["first_season"] = ("season", "min")
        aggs["last_season"] = ("season", "max")

    summary = df.groupby(schema.entity).agg(**aggs).reset_index()
    if min_games:
        before = len(summary)
        summary = summary.loc[summary["games"] >= min_games].copy()
        logger.info("Kept %d of %d entities with >= %d games", len(summary), before, min_games)

    summary = summary.sort_values("career_value", ascending=False, kind="mergesort")
    summary["rank"] = summary["career_value"].rank(ascending=False, method="min").astype(int)
    summary["career_value_pct"] = percentile_rank(summary["career_value"])
    return summary.reset_index(drop=True)


class CareerAnalyzer:
    """Runs era adjustment, career accumulation, period ranking and the summary."""

    def __init__(self, schema: ParticipantSchema = QB_SCHEMA):
        self.MIN_GAMES: Optional[int] = None
        self.TOP_K: Optional[Tuple[int, ...]] = None
        self.schema = schema

        self.game_level_: Optional[pd.DataFrame] = None
        self.summary_: Optional[pd.DataFrame] = None

        self.update_config(min_games=config.MIN_CAREER_GAMES, top_k=config.TOP_K)

    def update_config(self,
                      min_games: Optional[int] = None,
                      top_k: Optional[Sequence[int]] = None,
                      schema: Optional[ParticipantSchema] = None):
        """
        Update analysis configuration.

        Args:
            min_games: Minimum records for an entity to appear in the summary
            top_k: Cut-offs for the per-period top-K flags
            schema: Column roles of the input table
        """
        if min_games is not None:
            self.MIN_GAMES = min_games
        if top_k is not None:
            self.TOP_K = tuple(sorted(set(int(k) for k in top_k)))
        if schema is not None:
            self.schema = schema

    def _validate_config(self):
        """Validate that required configuration is set."""
        missing = []
        if self.MIN_GAMES is None:
            missing.append("MIN_GAMES")
        if not self.TOP_K:
            missing.append("TOP_K")
        if missing:
            raise ValueError(f"Configuration not set. Please call update_config() first. Missing: {missing}")
        if self.MIN_GAMES < 0 or any(k < 1 for k in self.TOP_K):
            raise ValueError("MIN_GAMES must be >= 0 and every TOP_K >= 1")

    def run(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
        """
        Full pipeline on a participant table.

        Returns:
            (game-level frame with derived columns, one-row-per-entity summary)
        """
        self._validate_config()
        schema = self.schema

        games = drop_incomplete(df, schema)
        games = adjust_for_era(games, schema)
        games = rank_within_period(games, schema, self.TOP_K)
        games = accumulate_careers(games, schema)

        summary = summarize_careers(games, schema, top_k=self.TOP_K, min_games=self.MIN_GAMES)

        self.game_level_ = games
        self.summary_ = summary
        logger.info(
            "Career analysis complete: %d records, %d entities in summary",
            len(games), len(summary),
        )
        return games, summary

    def get_summary(self) -> pd.DataFrame:
        if self.summary_ is None:
            raise ValueError("No results available – call run() first")
        return self.summary_

    def career_curves(self, entities: Optional[Sequence[str]] = None) -> pd.DataFrame:
        """Game-level (games_played, career_value) paths for the given entities."""
        if self.game_level_ is None:
            raise ValueError("No results available – call run() first")
        if entities is None:
            entities = self.get_summary()[self.schema.entity].head(config.TOP_N_CAREERS).tolist()
        cols = [self.schema.entity, "games_played", "career_value"] + self.schema.period_cols
        curves = self.game_level_.loc[self.game_level_[self.schema.entity].isin(entities), cols]
        return curves.reset_index(drop=True)

    def signature_hash(self) -> str:
        """Short SHA-1 of the configuration, for naming cached outputs."""
        config_dict = {
            "min_games": self.MIN_GAMES,
            "top_k": list(self.TOP_K or ()),
            "entity": self.schema.entity,
            "period": self.schema.period_cols,
            "value": self.schema.value,
            "outcome": self.schema.outcome,
        }
        raw = json.dumps(config_dict, sort_keys=True).encode()
        return hashlib.sha1(raw).hexdigest()[:8]
