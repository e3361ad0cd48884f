"""
Data loading module for NFL editorial analysis.
Handles loading of the Elo game log and nflverse play-by-play tables.
"""
import logging
import warnings
from pathlib import Path
from typing import Iterable, Optional, Union

import pandas as pd

from src.nfl_editorial_analysis.config import config

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _normalize_playoff(col: pd.Series) -> pd.Series:
    """Playoff marker is a round code ('w', 'd', 'c', 's') or blank; older files use 0/1."""
    if pd.api.types.is_numeric_dtype(col):
        return col.fillna(0).astype(bool)
    text = col.fillna("").astype(str).str.strip()
    return ~text.isin(["", "0", "False", "nan"])


class EloDataLoader:
    """Loads the game-level Elo table (two teams and two starting QBs per row)."""

    def __init__(self):
        """Initialize the data loader."""
        self.elo_df: Optional[pd.DataFrame] = None

    def load_elo(self, filepath: Optional[PathLike] = None) -> pd.DataFrame:
        """
        Load the Elo game log.

        Args:
            filepath: Optional local CSV path. When omitted the cached copy under
                data/raw is used if present, otherwise the public URL.

        Returns:
            DataFrame with one row per game
        """
        if filepath is None:
            source: PathLike = config.ELO_FILE if config.ELO_FILE.exists() else config.ELO_URL
        else:
            source = Path(filepath)
            if not source.exists():
                raise FileNotFoundError(f"Elo data file not found: {source}")

        df = pd.read_csv(source, parse_dates=["date"])
        if "playoff" in df.columns:
            df["playoff"] = _normalize_playoff(df["playoff"])
        else:
            df["playoff"] = False

        self.elo_df = df
        logger.info("Loaded %d games from %s", len(df), source)
        return df

    def filter_games(
        self,
        df: pd.DataFrame,
        *,
        min_season: Optional[int] = None,
        include_playoffs: Optional[bool] = None,
        completed_only: bool = True,
    ) -> pd.DataFrame:
        """
        Restrict the game log to the seasons and game types being analysed.

        Args:
            min_season: First season kept (defaults to config.MIN_SEASON)
            include_playoffs: Keep postseason games (defaults to config.INCLUDE_PLAYOFFS)
            completed_only: Drop scheduled games that have no final score yet
        """
        min_season = config.MIN_SEASON if min_season is None else min_season
        include_playoffs = config.INCLUDE_PLAYOFFS if include_playoffs is None else include_playoffs

        mask = df["season"] >= min_season
        if not include_playoffs and "playoff" in df.columns:
            mask &= ~_normalize_playoff(df["playoff"])
        if completed_only:
            mask &= df["score1"].notna() & df["score2"].notna()

        filtered = df.loc[mask].copy()
        logger.info(
            "Filtered games: kept %d of %d (season >= %d, playoffs=%s)",
            len(filtered), len(df), min_season, include_playoffs,
        )
        return filtered

    @staticmethod
    def add_week_numbers(df: pd.DataFrame) -> pd.DataFrame:
        """
        Derive a within-season week index from game dates.

        Weeks run Tuesday through Monday. Week 1 is the one holding the
        season's first game; every following block is one week, playoffs
        included.
        """
        df = df.copy()
        df["date"] = pd.to_datetime(df["date"])
        season_start = df.groupby("season")["date"].transform("min").dt.normalize()
        offset = (season_start.dt.weekday - config.WEEK_START_WEEKDAY) % config.WEEK_LENGTH_DAYS
        week_one = season_start - pd.to_timedelta(offset, unit="D")
        days = (df["date"] - week_one).dt.days
        df["week"] = (days // config.WEEK_LENGTH_DAYS + 1).astype(int)
        return df

    def load_complete_dataset(self, filepath: Optional[PathLike] = None) -> pd.DataFrame:
        """Load, filter and week-number the Elo games in one call."""
        df = self.load_elo(filepath)
        df = self.filter_games(df)
        df = self.add_week_numbers(df)
        self.elo_df = df
        return df

    def get_data_summary(self) -> dict:
        """
        Get summary statistics of loaded data.

        Returns:
            Dictionary with data summary information
        """
        if self.elo_df is None:
            raise ValueError("No data loaded. Call load_elo() first.")

        df = self.elo_df
        qbs = pd.concat([df.get("qb1", pd.Series(dtype=object)),
                         df.get("qb2", pd.Series(dtype=object))]).dropna()
        summary = {
            'total_games': len(df),
            'unique_seasons': sorted(df['season'].unique()),
            'playoff_games': int(df['playoff'].sum()),
            'unique_teams': pd.concat([df['team1'], df['team2']]).nunique(),
            'unique_qbs': qbs.nunique(),
            'date_range': (df['date'].min(), df['date'].max()),
        }
        return summary


class PlayByPlayLoader:
    """Loads nflverse play-by-play, restricted to the columns the drive model uses."""

    def __init__(self):
        self.pbp_df: Optional[pd.DataFrame] = None
        self.columns = config.COLUMN_LISTS["pbp"]

    def _read(self, source: PathLike) -> pd.DataFrame:
        wanted = set(self.columns)
        return pd.read_csv(source, usecols=lambda c: c in wanted, low_memory=False)

    def load_pbp(
        self,
        seasons: Iterable[int],
        filepath: Optional[PathLike] = None,
    ) -> pd.DataFrame:
        """
        Load play-by-play rows for the requested seasons.

        Args:
            seasons: Seasons to keep
            filepath: Optional local CSV (all seasons in one file)

        Returns:
            DataFrame with one row per play
        """
        seasons = sorted(set(int(s) for s in seasons))
        if not seasons:
            raise ValueError("At least one season is required")

        if filepath is not None:
            path = Path(filepath)
            if not path.exists():
                raise FileNotFoundError(f"Play-by-play file not found: {path}")
            df = self._read(path)
        elif config.PBP_FILE.exists():
            df = self._read(config.PBP_FILE)
        else:
            frames = []
            for season in seasons:
                url = config.PBP_URL_TEMPLATE.format(season=season)
                logger.info("Downloading play-by-play for %d", season)
                frames.append(self._read(url))
            df = pd.concat(frames, ignore_index=True)

        df = df.loc[df["season"].isin(seasons)].copy()
        missing = [c for c in self.columns if c not in df.columns]
        if missing:
            warnings.warn(f"Play-by-play is missing columns: {missing}")

        self.pbp_df = df
        logger.info("Loaded %d plays for seasons %s", len(df), seasons)
        return df


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    loader = EloDataLoader()

    try:
        games = loader.load_complete_dataset()
        print(games.head())
        summary = loader.get_data_summary()
        print(f"Total games: {summary['total_games']:,}")
        print(f"Unique QBs: {summary['unique_qbs']}")
        print(f"Seasons: {summary['unique_seasons'][0]}-{summary['unique_seasons'][-1]}")
        print("******* EloDataLoader run complete!")
    except (OSError, ValueError) as e:
        print(f"------------- Error loading Elo data: {e}")
        print("Note: This is expected if the data source is unreachable.")
