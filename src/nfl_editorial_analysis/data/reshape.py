"""
Schedule reshaping: one row per game → one row per participant per game.

The Elo game log stores both teams (and their starting quarterbacks) on a
single row with ``1``/``2`` suffixed columns. Every per-entity statistic
downstream needs those split into two perspective rows.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# output column -> (column for side 1, column for side 2)
SIDE_COLUMNS: Dict[str, Tuple[str, str]] = {
    "team":           ("team1", "team2"),
    "opponent":       ("team2", "team1"),
    "points_for":     ("score1", "score2"),
    "points_against": ("score2", "score1"),
    "qb":             ("qb1", "qb2"),
    "opp_qb":         ("qb2", "qb1"),
    "qb_game_value":  ("qb1_game_value", "qb2_game_value"),
    "team_elo_pre":   ("elo1_pre", "elo2_pre"),
    "qb_elo_pre":     ("qbelo1_pre", "qbelo2_pre"),
    "win_prob":       ("elo_prob1", "elo_prob2"),
}
REQUIRED_SIDE_COLUMNS = ("team", "opponent", "points_for", "points_against")
SHARED_COLUMNS = ["game_id", "date", "season", "week", "playoff", "neutral"]


def _game_ids(games: pd.DataFrame) -> pd.Series:
    """Stable id: YYYYMMDD_<team2>_<team1> (team1 is the listed home side)."""
    if "game_id" in games.columns:
        return games["game_id"].astype(str)
    dates = pd.to_datetime(games["date"]).dt.strftime("%Y%m%d")
    return dates + "_" + games["team2"].astype(str) + "_" + games["team1"].astype(str)


def games_to_participants(
    games: pd.DataFrame,
    side_map: Optional[Mapping[str, Tuple[str, str]]] = None,
) -> pd.DataFrame:
    """
    Split each two-team game row into two participant rows.

    Args:
        games: Game log with ``team1``/``team2``, ``score1``/``score2`` and
            optionally the QB and Elo columns listed in ``SIDE_COLUMNS``.
        side_map: Override of ``SIDE_COLUMNS``.

    Returns:
        DataFrame with 2 × len(games) rows, sorted by game then home side first.
    """
    side_map = dict(SIDE_COLUMNS if side_map is None else side_map)

    missing = [
        src for out in REQUIRED_SIDE_COLUMNS for src in side_map.get(out, (out, out))
        if src not in games.columns
    ]
    if missing:
        raise ValueError(f"Game log is missing required columns: {sorted(set(missing))}")

    usable = {
        out: cols for out, cols in side_map.items()
        if cols[0] in games.columns and cols[1] in games.columns
    }
    skipped = sorted(set(side_map) - set(usable))
    if skipped:
        logger.info("Participant columns not available in game log: %s", skipped)

    base = games.reset_index(drop=True).copy()
    base["game_id"] = _game_ids(base)
    shared = [c for c in SHARED_COLUMNS if c in base.columns]
    neutral = (
        base["neutral"].fillna(0).astype(bool)
        if "neutral" in base.columns
        else pd.Series(False, index=base.index)
    )

    frames: List[pd.DataFrame] = []
    for side in (0, 1):
        frame = base[shared].copy()
        for out, cols in usable.items():
            frame[out] = base[cols[side]].to_numpy()
        frame["is_home"] = (side == 0) & ~neutral.to_numpy()
        frame["side"] = side + 1
        frames.append(frame)

    participants = pd.concat(frames, ignore_index=True)
    scored = participants["points_for"].notna() & participants["points_against"].notna()
    outcome = np.select(
        [
            participants["points_for"] > participants["points_against"],
            participants["points_for"] == participants["points_against"],
        ],
        [1.0, 0.5],
        default=0.0,
    )
    # unplayed games have no outcome
    participants["win"] = np.where(scored, outcome, np.nan)

    participants = (
        participants.sort_values(["game_id", "side"], kind="mergesort")
        .reset_index(drop=True)
    )
    logger.info("Reshaped %d games into %d participant rows", len(base), len(participants))
    return participants


def attach_aggregates(
    participants: pd.DataFrame,
    aggregates: pd.DataFrame,
    on: Sequence[str],
) -> pd.DataFrame:
    """
    Left-join a computed aggregate table back onto participant rows.

    Each participant row must match at most one aggregate row.
    """
    on = list(on)
    for name, frame in (("participants", participants), ("aggregates", aggregates)):
        absent = [c for c in on if c not in frame.columns]
        if absent:
            raise ValueError(f"Join keys {absent} missing from {name}")

    overlap = (set(participants.columns) & set(aggregates.columns)) - set(on)
    if overlap:
        raise ValueError(f"Aggregate columns already present on participants: {sorted(overlap)}")

    merged = participants.merge(aggregates, on=on, how="left", validate="many_to_one")
    value_cols = [c for c in aggregates.columns if c not in on]
    unmatched = merged[value_cols].isna().all(axis=1).sum() if value_cols else 0
    if unmatched:
        logger.warning("%d participant rows found no aggregate match on %s", unmatched, on)
    return merged


def qb_season_aggregates(participants: pd.DataFrame) -> pd.DataFrame:
    """Per-QB-season starts, mean game value and win rate."""
    return (
        participants.dropna(subset=["qb"])
        .groupby(["qb", "season"])
        .agg(
            season_starts=("win", "size"),
            season_mean_value=("qb_game_value", "mean"),
            season_win_rate=("win", "mean"),
        )
        .reset_index()
    )
