"""Analysis module for NFL editorial analysis."""

from .career import CareerAnalyzer
from .correlation import CorrelationResult, correlate, team_season_summary

__all__ = ['CareerAnalyzer', 'CorrelationResult', 'correlate', 'team_season_summary']
