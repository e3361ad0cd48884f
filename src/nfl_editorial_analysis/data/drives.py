"""
Collapse play-by-play into one row per offensive drive.
"""
import logging
from typing import Dict, Optional, Tuple

import pandas as pd

from src.nfl_editorial_analysis.config import config

logger = logging.getLogger(__name__)

DRIVE_KEYS = ["game_id", "posteam", "fixed_drive"]
REQUIRED_PBP_COLS = DRIVE_KEYS + [
    "season", "fixed_drive_result", "yardline_100", "half_seconds_remaining",
]


def drive_points(results: pd.Series, points: Optional[Dict[str, int]] = None) -> pd.Series:
    """Points for the offense by drive result; unlisted results score 0."""
    points = config.DRIVE_POINTS if points is None else points
    return results.map(points).fillna(0).astype(int)


def build_drives(pbp: pd.DataFrame) -> pd.DataFrame:
    """
    One row per (game_id, posteam, fixed_drive).

    Start state is taken from the drive's first play with both field position
    and clock.
    Early-down pass counts are carried along for team-level summaries.
    """
    missing = [c for c in REQUIRED_PBP_COLS if c not in pbp.columns]
    if missing:
        raise ValueError(f"Play-by-play is missing columns: {missing}")

    plays = pbp.dropna(subset=["posteam", "fixed_drive", "yardline_100"]).copy()
    plays = plays.sort_values(["game_id", "fixed_drive"], kind="mergesort")

    if {"down", "play_type", "pass"}.issubset(plays.columns):
        early = plays["down"].isin(config.EARLY_DOWNS) & plays["play_type"].isin(["pass", "run"])
        plays["early_down_play"] = early.astype(int)
        plays["early_down_pass"] = (early & (plays["pass"] == 1)).astype(int)
    else:
        plays["early_down_play"] = 0
        plays["early_down_pass"] = 0

    aggs: Dict[str, Tuple[str, str]] = {
        "n_plays": ("yardline_100", "size"),
        "early_down_plays": ("early_down_play", "sum"),
        "early_down_passes": ("early_down_pass", "sum"),
    }
    counts = plays.groupby(DRIVE_KEYS, sort=False).agg(**aggs).reset_index()

    # field position and clock both come from the same (first complete) play
    start_cols = ["season", "yardline_100", "half_seconds_remaining", "fixed_drive_result"]
    start_cols += [c for c in ("week", "defteam", "game_seconds_remaining") if c in plays.columns]
    starts = (
        plays.dropna(subset=["half_seconds_remaining"])
        .groupby(DRIVE_KEYS, sort=False)
        .head(1)[DRIVE_KEYS + start_cols]
    )

    drives = starts.merge(counts, on=DRIVE_KEYS, how="left", validate="one_to_one")
    drives = drives.reset_index(drop=True)
    drives["drive_points"] = drive_points(drives["fixed_drive_result"])

    logger.info(
        "Built %d drives from %d plays (%.2f points per drive)",
        len(drives), len(pbp), drives["drive_points"].mean() if len(drives) else float("nan"),
    )
    return drives
