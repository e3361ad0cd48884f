"""
Chart and sanity-check utilities for the editorial articles.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from src.nfl_editorial_analysis.analysis.correlation import CorrelationResult
from src.nfl_editorial_analysis.config import config
from src.nfl_editorial_analysis.data.schema import ParticipantSchema, QB_SCHEMA

logger = logging.getLogger(__name__)

plt.rcParams.update({
    "figure.figsize": (12, 7),
    "axes.spines.top": False,
    "axes.spines.right": False,
})
sns.set_palette("husl")


def _save(fig: plt.Figure, savefig: Optional[Path]) -> None:
    plt.tight_layout()
    if savefig:
        fig.savefig(savefig, dpi=config.DPI, bbox_inches="tight")
        logger.info("Saved figure → %s", savefig)


# ─────────────────────── career charts ────────────────────────
def career_trajectories(
    curves: pd.DataFrame,
    *,
    entity: str = QB_SCHEMA.entity,
    savefig: Optional[Path] = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Cumulative era-adjusted value against games played, one line per entity."""
    fig, ax = plt.subplots(figsize=config.FIGURE_SIZE)
    sns.lineplot(data=curves, x="games_played", y="career_value", hue=entity,
                 linewidth=2, ax=ax)
    ax.axhline(0, color="grey", linestyle="--", linewidth=1)
    ax.set_title("Cumulative Value Over Median Starter")
    ax.set_xlabel("Career starts")
    ax.set_ylabel("Career value (above weekly median)")
    ax.legend(title="", loc="upper left", fontsize=9)
    _save(fig, savefig)
    return curves, fig


def top_k_rates(
    summary: pd.DataFrame,
    *,
    entity: str = QB_SCHEMA.entity,
    top_n: int = config.TOP_N_CAREERS,
    top_k: Sequence[int] = config.TOP_K,
    savefig: Optional[Path] = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Share of starts each leader finished as the week's top-1/3/5."""
    rate_cols = [f"top_{k}_rate" for k in top_k]
    leaders = summary.head(top_n)
    long = leaders.melt(id_vars=[entity], value_vars=rate_cols,
                        var_name="cutoff", value_name="rate")
    long["cutoff"] = long["cutoff"].str.replace("_rate", "").str.replace("_", "-").str.title()

    fig, ax = plt.subplots(figsize=config.FIGURE_SIZE)
    sns.barplot(data=long, x="rate", y=entity, hue="cutoff", ax=ax)
    ax.set_title(f"How Often the Top {top_n} Careers Led the Week")
    ax.set_xlabel("Share of starts")
    ax.set_ylabel("")
    ax.set_xlim(0, 1)
    _save(fig, savefig)
    return long, fig


def era_baseline(
    game_level: pd.DataFrame,
    *,
    schema: ParticipantSchema = QB_SCHEMA,
    savefig: Optional[Path] = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Season average of the weekly median raw value (the drift being removed)."""
    if "period_median" not in game_level.columns:
        raise ValueError("period_median missing – run the career analysis first")

    by_season = (
        game_level.groupby("season")
        .agg(weekly_median=("period_median", "mean"),
             raw_mean=(schema.value, "mean"))
        .reset_index()
    )

    fig, ax = plt.subplots(figsize=(12, 5))
    ax.plot(by_season["season"], by_season["weekly_median"], marker="o", linewidth=2,
            label="Weekly median")
    ax.plot(by_season["season"], by_season["raw_mean"], linestyle="--", color="orange",
            label="Mean")
    ax.set_title("League Baseline by Season")
    ax.set_ylabel("Game value")
    ax.legend()
    _save(fig, savefig)
    return by_season, fig


# ─────────────────── expected points charts ───────────────────
def expected_points_curve(
    curve: pd.DataFrame,
    *,
    savefig: Optional[Path] = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Expected drive points by starting yardline, one line per clock value."""
    fig, ax = plt.subplots(figsize=(12, 6))
    sns.lineplot(data=curve, x="yardline_100", y="expected_points",
                 hue="half_seconds_remaining", palette="viridis", linewidth=2, ax=ax)
    ax.invert_xaxis()
    ax.set_title("Expected Points by Starting Field Position")
    ax.set_xlabel("Yards from opponent end zone")
    ax.set_ylabel("Expected points")
    ax.legend(title="Seconds left in half")
    _save(fig, savefig)
    return curve, fig


def residual_correlation(
    table: pd.DataFrame,
    x: str,
    y: str,
    *,
    result: Optional[CorrelationResult] = None,
    label_col: Optional[str] = "posteam",
    savefig: Optional[Path] = None,
) -> Tuple[pd.DataFrame, plt.Figure]:
    """Scatter of y against x with the OLS line and r in the title."""
    data = table.dropna(subset=[x, y])

    fig, ax = plt.subplots(figsize=(10, 7))
    ax.scatter(data[x], data[y], alpha=0.6, color="darkblue")
    if result is not None:
        xs = np.linspace(data[x].min(), data[x].max(), 50)
        ax.plot(xs, result.intercept + result.slope * xs, "r--", linewidth=2)
        ax.set_title(f"{y} vs {x} ({result.method} r = {result.r:.2f}, n = {result.n})")
    else:
        ax.set_title(f"{y} vs {x}")
    if label_col and label_col in data.columns and len(data) <= 64:
        for _, row in data.iterrows():
            ax.annotate(str(row[label_col]), (row[x], row[y]), fontsize=7, alpha=0.7)
    ax.axhline(0, color="grey", linewidth=1)
    ax.set_xlabel(x)
    ax.set_ylabel(y)
    _save(fig, savefig)
    return data, fig


# ─────────────────────── sanity guards ────────────────────────
def quick_sanity_checks(
    game_level: pd.DataFrame,
    *,
    schema: ParticipantSchema = QB_SCHEMA,
    tol: float = 1e-9,
) -> None:
    """
    Assert the invariants of the career table.

    * one row per entity per game, and per period
    * per-period median of adjusted_value is zero
    * games_played runs 1, 2, … without gaps
    * final career_value equals the entity's summed adjusted_value
    """
    key = [schema.entity, "game_id"] if "game_id" in game_level.columns \
        else [schema.entity] + schema.sort_cols
    dupes = int(game_level.duplicated(subset=key).sum())
    if dupes:
        raise AssertionError(f"{dupes} duplicate participant-game rows on {key}")

    period_key = [schema.entity] + schema.period_cols
    repeats = int(game_level.duplicated(subset=period_key).sum())
    if repeats:
        raise AssertionError(f"{repeats} entities appear more than once per period on {period_key}")

    medians = game_level.groupby(schema.period_cols)["adjusted_value"].median()
    worst = float(medians.abs().max()) if len(medians) else 0.0
    if worst > tol:
        raise AssertionError(f"Period median of adjusted value is {worst:.3g}, expected 0")

    ordered = game_level.sort_values([schema.entity, "games_played"])
    grouped = ordered.groupby(schema.entity)
    first = grouped["games_played"].min()
    steps = grouped["games_played"].diff().dropna()
    if (first != 1).any() or (steps != 1).any():
        raise AssertionError("games_played is not a 1-based consecutive count per entity")

    final = grouped["career_value"].last()
    total = grouped["adjusted_value"].sum()
    if not np.allclose(final.to_numpy(), total.to_numpy(), atol=1e-6):
        raise AssertionError("Final career_value does not equal summed adjusted_value")

    logger.info("Sanity checks passed for %d rows", len(game_level))
