"""Unit tests for match preset classification."""

from __future__ import annotations

import pytest

from domain.preset import Preset, classify_preset


@pytest.mark.parametrize(
    ("ally_team_count", "participant_count", "expected"),
    [
        (3, 2, Preset.FFA),
        (4, 16, Preset.FFA),
        (2, 4, Preset.TEAM),
        (2, 3, Preset.TEAM),
        (2, 2, Preset.DUEL),
        (2, 1, Preset.DUEL),
        (1, 1, Preset.DUEL),
        (1, 2, Preset.DUEL),
    ],
)
def test_classify_preset_table(ally_team_count: int, participant_count: int, expected: Preset) -> None:
    assert classify_preset(ally_team_count, participant_count) is expected


def test_ally_team_count_takes_precedence_over_participants() -> None:
    assert classify_preset(3, 1) is Preset.FFA


def test_preset_values_are_stored_strings() -> None:
    assert [preset.value for preset in Preset] == ["duel", "team", "ffa"]
