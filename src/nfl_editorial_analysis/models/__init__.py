"""Models module for NFL editorial analysis."""

from .expected_points import ExpectedPointsModel

__all__ = ['ExpectedPointsModel']
