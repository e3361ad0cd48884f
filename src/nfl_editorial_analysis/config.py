"""
Configuration module for the NFL editorial analysis package.
Contains all constants, paths, and configuration parameters.
"""
from pathlib import Path
from typing import Dict, List, Tuple


class Config:
    """Main configuration class for the NFL editorial analysis package."""

    # Base paths - relative to the project root so they work locally and in CI
    _CONFIG_DIR = Path(__file__).parent.parent.parent  # Go up to project root
    PROJECT_ROOT = _CONFIG_DIR.resolve()

    DATA_DIR = PROJECT_ROOT / "data"
    RAW_DATA_DIR = DATA_DIR / "raw"
    PROCESSED_DATA_DIR = DATA_DIR / "processed"
    OUTPUT_DIR = PROJECT_ROOT / "output"
    FIGURES_DIR = OUTPUT_DIR / "figures"

    # Public sources
    ELO_URL = "https://projects.fivethirtyeight.com/nfl-api/nfl_elo.csv"
    PBP_URL_TEMPLATE = (
        "https://github.com/nflverse/nflverse-data/releases/download/"
        "pbp/play_by_play_{season}.csv.gz"
    )

    # Local caches
    ELO_FILE = RAW_DATA_DIR / "nfl_elo.csv"
    PBP_FILE = RAW_DATA_DIR / "play_by_play.csv"
    QB_LEADERBOARD_FILE = OUTPUT_DIR / "qb_career_leaderboard.csv"
    TEAM_POE_FILE = OUTPUT_DIR / "team_points_over_expected.csv"

    # QB career analysis
    MIN_SEASON = 1970
    INCLUDE_PLAYOFFS = True
    MIN_CAREER_GAMES = 50
    TOP_K: Tuple[int, ...] = (1, 3, 5)
    WEEK_LENGTH_DAYS = 7
    WEEK_START_WEEKDAY = 1  # Tuesday; Monday night stays with its Sunday

    # Points per drive outcome, from the offense's point of view
    DRIVE_POINTS: Dict[str, int] = {
        "Touchdown": 7,
        "Field goal": 3,
        "Opp touchdown": -7,
        "Safety": -2,
    }

    # Expected points model
    EP_MODEL_KIND = "spline"
    EP_SPLINE_KNOTS = 6
    EP_SPLINE_DEGREE = 3
    EP_TRAIN_SEASONS: List[int] = list(range(2015, 2022))
    EP_TEST_SEASONS: List[int] = [2022, 2023]
    EARLY_DOWNS: Tuple[int, ...] = (1, 2)

    # Visualization settings
    FIGURE_SIZE = (12, 8)
    DPI = 150
    TOP_N_CAREERS = 10

    @classmethod
    def ensure_directories(cls):
        """Create all required directories if they don't exist."""
        for dir_path in [cls.RAW_DATA_DIR, cls.PROCESSED_DATA_DIR,
                         cls.OUTPUT_DIR, cls.FIGURES_DIR]:
            dir_path.mkdir(parents=True, exist_ok=True)


# Create global config instance
config = Config()

# ───────────────────────── Column catalogue ─────────────────────────
# Single source of truth for column roles
COLUMN_LISTS: Dict[str, List[str]] = {
    "game_shared": ["game_id", "date", "season", "week", "playoff", "neutral"],
    "participant": [
        "team", "opponent", "qb", "opp_qb", "is_home",
        "points_for", "points_against", "qb_game_value",
        "team_elo_pre", "qb_elo_pre", "win_prob", "win",
    ],
    "pbp": [
        "game_id", "season", "week", "posteam", "defteam", "fixed_drive",
        "fixed_drive_result", "yardline_100", "half_seconds_remaining",
        "game_seconds_remaining", "down", "play_type", "pass",
    ],
    "drive_features": ["yardline_100", "half_seconds_remaining"],
    "y_variable": ["drive_points"],
}

# Attach COLUMN_LISTS onto the config instance for ease of use
config.COLUMN_LISTS = COLUMN_LISTS

if __name__ == "__main__":
    print("NFL Editorial Analysis Configuration")
    print("=" * 40)
    print(f"Data directory: {config.DATA_DIR}")
    print(f"Elo source: {config.ELO_URL}")
    print(f"Min season: {config.MIN_SEASON}")
    print(f"Top-K flags: {config.TOP_K}")
    print(f"Drive points: {config.DRIVE_POINTS}")

    config.ensure_directories()
    print("******* Configuration loaded and directories created!")
