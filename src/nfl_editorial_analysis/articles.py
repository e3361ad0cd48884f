"""
End-to-end runs of the two articles.

* QB careers – era-adjusted cumulative value from the Elo game log
* Points over expected – drive-level expected points, residualized and
  correlated with early-down pass rate
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import pandas as pd

from src.nfl_editorial_analysis.analysis.career import CareerAnalyzer
from src.nfl_editorial_analysis.analysis.correlation import (
    CorrelationResult,
    correlate,
    team_season_summary,
)
from src.nfl_editorial_analysis.config import config
from src.nfl_editorial_analysis.data.drives import build_drives
from src.nfl_editorial_analysis.data.loader import EloDataLoader, PlayByPlayLoader
from src.nfl_editorial_analysis.data.reshape import (
    attach_aggregates,
    games_to_participants,
    qb_season_aggregates,
)
from src.nfl_editorial_analysis.eda import (
    career_trajectories,
    era_baseline,
    expected_points_curve,
    quick_sanity_checks,
    residual_correlation,
    top_k_rates,
)
from src.nfl_editorial_analysis.models.expected_points import ExpectedPointsModel
from src.nfl_editorial_analysis.utils.metrics import train_test_split_by_season

# ───────────────────── configuration ────────────────────────────
logger = logging.getLogger(__name__)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)s │ %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def run_qb_career_article(
    elo_path: Optional[Path | str] = None,
    *,
    games: Optional[pd.DataFrame] = None,
    output_dir: Path | str = config.OUTPUT_DIR,
    min_games: int = config.MIN_CAREER_GAMES,
    min_season: int = config.MIN_SEASON,
    include_playoffs: bool = config.INCLUDE_PLAYOFFS,
) -> pd.DataFrame:
    """
    QB career leaderboard from the Elo game log.

    Pass ``games`` to skip loading (it is filtered and week-numbered here).
    """
    output_dir = Path(output_dir)
    figures = output_dir / "figures"
    figures.mkdir(parents=True, exist_ok=True)

    print("── Section 1 Load Elo Games ──")
    loader = EloDataLoader()
    if games is None:
        games = loader.load_elo(elo_path)
    games = loader.filter_games(games, min_season=min_season, include_playoffs=include_playoffs)
    games = loader.add_week_numbers(games)

    print("── Section 2 One Row per QB Start ──")
    participants = games_to_participants(games)
    participants = attach_aggregates(participants, qb_season_aggregates(participants),
                                     on=["qb", "season"])

    print("── Section 3 Era Adjustment & Careers ──")
    analyzer = CareerAnalyzer()
    analyzer.update_config(min_games=min_games)
    game_level, summary = analyzer.run(participants)

    print("── Section 4 Charts ──")
    figs = [
        career_trajectories(analyzer.career_curves(), savefig=figures / "qb_career_value.png")[1],
        top_k_rates(summary, savefig=figures / "qb_top_k_rates.png")[1],
        era_baseline(game_level, savefig=figures / "qb_era_baseline.png")[1],
    ]
    for fig in figs:
        plt.close(fig)

    print("── Section 5 Sanity Checks ──")
    quick_sanity_checks(game_level)

    out = output_dir / config.QB_LEADERBOARD_FILE.name
    summary.to_csv(out, index=False)
    logger.info("Leaderboard saved → %s (%d QBs, config %s)", out, len(summary),
                analyzer.signature_hash())
    print(summary.head(config.TOP_N_CAREERS).to_string(index=False))
    return summary


def season_folds(
    seasons: Optional[Sequence[int]] = None,
    train_seasons: Optional[Sequence[int]] = None,
    test_seasons: Optional[Sequence[int]] = None,
) -> Tuple[List[int], List[int], List[int]]:
    """
    Resolve (seasons, train, test) for the expected points fit.

    With only `seasons` given, the latest season is held out and the rest train
    the model. With nothing given, the configured folds are used.
    """
    if seasons and train_seasons is None and test_seasons is None:
        seasons = sorted(set(int(s) for s in seasons))
        if len(seasons) == 1:
            return seasons, seasons, []
        return seasons, seasons[:-1], seasons[-1:]

    train = list(train_seasons if train_seasons is not None else config.EP_TRAIN_SEASONS)
    test = list(test_seasons if test_seasons is not None else config.EP_TEST_SEASONS)
    return list(seasons or sorted(set(train) | set(test))), train, test


def run_points_over_expected_article(
    seasons: Optional[Sequence[int]] = None,
    *,
    pbp_path: Optional[Path | str] = None,
    pbp: Optional[pd.DataFrame] = None,
    output_dir: Path | str = config.OUTPUT_DIR,
    train_seasons: Optional[Sequence[int]] = None,
    test_seasons: Optional[Sequence[int]] = None,
    model_kind: str = config.EP_MODEL_KIND,
) -> Tuple[CorrelationResult, pd.DataFrame]:
    """
    Fit drive expected points, residualize, and correlate team POE with pass rate.

    Returns the correlation result and the team-season table.
    """
    seasons, train_seasons, test_seasons = season_folds(seasons, train_seasons, test_seasons)

    output_dir = Path(output_dir)
    figures = output_dir / "figures"
    figures.mkdir(parents=True, exist_ok=True)

    print("── Section 1 Load Play-by-Play ──")
    if pbp is None:
        pbp = PlayByPlayLoader().load_pbp(seasons, filepath=pbp_path)

    print("── Section 2 Build Drives ──")
    drives = build_drives(pbp)

    print("── Section 3 Expected Points Model ──")
    train, test = train_test_split_by_season(drives, train_seasons=train_seasons,
                                             test_seasons=test_seasons)
    model = ExpectedPointsModel(kind=model_kind).fit(train)
    logger.info("Train fit: %s", model.evaluate(train))
    if len(test):
        logger.info("Holdout fit: %s", model.evaluate(test))
    else:
        logger.warning("No drives in test seasons %s – skipping holdout evaluation", test_seasons)

    print("── Section 4 Points Over Expected ──")
    residuals = model.residualize(drives)
    teams = team_season_summary(residuals)
    result = correlate(teams, "early_down_pass_rate", "points_over_expected")

    print("── Section 5 Charts ──")
    figs = [
        expected_points_curve(model.expected_points_curve(),
                              savefig=figures / "expected_points_curve.png")[1],
        residual_correlation(teams, "early_down_pass_rate", "points_over_expected",
                             result=result, label_col=None,
                             savefig=figures / "poe_vs_pass_rate.png")[1],
    ]
    for fig in figs:
        plt.close(fig)

    out = output_dir / config.TEAM_POE_FILE.name
    teams.to_csv(out, index=False)
    logger.info("Team table saved → %s (%d team-seasons)", out, len(teams))
    return result, teams


# ─────────────────────────── CLI ───────────────────────────
def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run the NFL editorial analyses.")
    parser.add_argument("article", choices=["qb-careers", "points-over-expected", "all"])
    parser.add_argument("--elo-path", type=Path, default=None)
    parser.add_argument("--pbp-path", type=Path, default=None)
    parser.add_argument("--output-dir", type=Path, default=config.OUTPUT_DIR)
    parser.add_argument("--min-games", type=int, default=config.MIN_CAREER_GAMES)
    parser.add_argument("--seasons", type=int, nargs="+", default=None,
                        help="Play-by-play seasons; the latest one is held out")
    args = parser.parse_args(argv)

    if args.article in ("qb-careers", "all"):
        run_qb_career_article(args.elo_path, output_dir=args.output_dir,
                              min_games=args.min_games)
    if args.article in ("points-over-expected", "all"):
        result, _ = run_points_over_expected_article(args.seasons,
                                                     pbp_path=args.pbp_path,
                                                     output_dir=args.output_dir)
        print(result.as_dict())


if __name__ == "__main__":
    main()
