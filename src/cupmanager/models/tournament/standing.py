"""Standings table row."""

# Cup Manager
# Copyright (C) 2025  Cup Manager developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass
from typing import Any, Dict

from cupmanager.constants import DRAW_POINTS, LOSS_POINTS, WIN_POINTS
from cupmanager.models.participant import Participant


@dataclass
class Standing:
    """Aggregated results of one participant.

    Standings are derived from completed matches on demand and never stored.

    Attributes
    ----------
    participant : Participant
    points : int
        3 per win, 1 per draw.
    wins, draws, losses : int
    goals_for, goals_against : int
    games_played : int
    """

    participant: Participant
    points: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0
    games_played: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def add_result(self, scored: int, conceded: int) -> None:
        """Accumulate one completed match from this participant's side."""
        self.games_played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.wins += 1
            self.points += WIN_POINTS
        elif scored == conceded:
            self.draws += 1
            self.points += DRAW_POINTS
        else:
            self.losses += 1
            self.points += LOSS_POINTS

    def to_dict(self) -> Dict[str, Any]:
        """Serialize standing to dictionary (for display and export)."""
        return {
            "participant": self.participant.to_dict(),
            "points": self.points,
            "wins": self.wins,
            "draws": self.draws,
            "losses": self.losses,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "goal_difference": self.goal_difference,
            "games_played": self.games_played,
        }
