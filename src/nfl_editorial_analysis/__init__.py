"""
NFL Editorial Analysis Package
Data pipelines, models and charts behind the football analytics articles.
"""

__version__ = "1.0.0"
__author__ = "NFL Analytics Team"

# Import main classes for easy access
from .config import config
from .data.loader import EloDataLoader, PlayByPlayLoader
from .analysis.career import CareerAnalyzer
from .models.expected_points import ExpectedPointsModel

__all__ = [
    'config',
    'EloDataLoader',
    'PlayByPlayLoader',
    'CareerAnalyzer',
    'ExpectedPointsModel',
]
