"""Match category derived from team and participant counts."""

from __future__ import annotations

from enum import Enum


class Preset(str, Enum):
    DUEL = "duel"
    TEAM = "team"
    FFA = "ffa"


def classify_preset(ally_team_count: int, participant_count: int) -> Preset:
    """Classify a match from its ally team count and players-plus-AIs count.

    The ally team count wins: three or more ally teams is always ``ffa``.
    Anything with two or fewer participants, including one-sided practice
    games, falls through to ``duel``.
    """
    if ally_team_count > 2:
        return Preset.FFA
    if participant_count > 2:
        return Preset.TEAM
    return Preset.DUEL


__all__ = ["Preset", "classify_preset"]
