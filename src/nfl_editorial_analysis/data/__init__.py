"""
Data module for NFL editorial analysis.
"""

from .loader import EloDataLoader, PlayByPlayLoader
from .schema import ParticipantSchema, QB_SCHEMA

__all__ = ['EloDataLoader', 'PlayByPlayLoader', 'ParticipantSchema', 'QB_SCHEMA']
