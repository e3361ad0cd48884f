"""
ParticipantSchema – canonical column roles for era adjustment & career stats.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ParticipantSchema:
    """Names the columns of a per-participant-per-period table."""
    entity:  str             = "qb"
    period:  Tuple[str, ...] = ("season", "week")
    value:   str             = "qb_game_value"
    outcome: str             = "win"
    order:   Optional[str]   = "date"    # tie-breaker inside a period

    # ───── convenience helpers ────────────────────────────────────
    @property
    def period_cols(self) -> List[str]:
        return list(self.period)

    @property
    def sort_cols(self) -> List[str]:
        """Chronological ordering inside one entity's history."""
        cols = self.period_cols
        if self.order and self.order not in cols:
            cols = cols + [self.order]
        return cols

    @property
    def required(self) -> List[str]:
        return [self.entity] + self.sort_cols + [self.value, self.outcome]

    def assert_in_dataframe(self, df) -> None:
        """Raise if any declared column is missing from df.columns."""
        missing = [c for c in self.required if c not in df.columns]
        if missing:
            raise ValueError(f"ParticipantSchema mismatch – missing cols: {missing}")


QB_SCHEMA = ParticipantSchema()
