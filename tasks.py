# tasks.py  ── invoke ≥2.2
from invoke import task, Context  # type: ignore
from typing import Optional

import pathlib
import shutil


BASE_ENV = pathlib.Path(__file__).parent
OUTPUT_DIR = BASE_ENV / "output"


@task(
    help={
        "elo_path": "Local copy of nfl_elo.csv (defaults to data/raw or the public URL)",
        "min_games": "Minimum career starts for the leaderboard",
    }
)
def qb_careers(c: Context, elo_path: Optional[str] = None, min_games: int = 50) -> None:
    """Build the era-adjusted QB career leaderboard and its charts."""
    cmd = f"python -m src.nfl_editorial_analysis.articles qb-careers --min-games {min_games}"
    if elo_path:
        cmd += f" --elo-path {elo_path}"
    c.run(cmd, pty=False)


@task(
    help={
        "pbp_path": "Local play-by-play CSV (defaults to data/raw or nflverse downloads)",
        "seasons": "Comma-separated seasons, e.g. 2021,2022,2023 (latest is held out)",
    }
)
def points_over_expected(c: Context, pbp_path: Optional[str] = None,
                         seasons: Optional[str] = None) -> None:
    """Fit drive expected points and correlate team residuals with pass rate."""
    cmd = "python -m src.nfl_editorial_analysis.articles points-over-expected"
    if pbp_path:
        cmd += f" --pbp-path {pbp_path}"
    if seasons:
        cmd += " --seasons " + " ".join(s.strip() for s in seasons.split(","))
    c.run(cmd, pty=False)


@task(pre=[qb_careers, points_over_expected])
def articles(c: Context) -> None:
    """Run every article end to end."""
    print(f"\n📊 Outputs written to {OUTPUT_DIR}")


@task(help={"k": "Only run tests matching this expression"})
def test(c: Context, k: Optional[str] = None) -> None:
    """Run the unit tests."""
    cmd = "pytest -q tests"
    if k:
        cmd += f" -k '{k}'"
    c.run(cmd, pty=False)


@task
def clean(c: Context) -> None:
    """Remove generated leaderboards and figures."""
    if OUTPUT_DIR.exists():
        shutil.rmtree(OUTPUT_DIR)
        print(f"🗑️  Removed {OUTPUT_DIR}")
    else:
        print(f"⏭️  Nothing to remove at {OUTPUT_DIR}")
