"""Standings calculation for tournaments.

This module aggregates completed matches into a ranked table.
"""

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

import functools
from typing import Dict, Iterable, List, Optional

from cupmanager.constants import (
    DEFAULT_TIEBREAK_ORDER,
    TB_GOAL_DIFFERENCE,
    TB_GOALS_FOR,
    TB_WINS,
    TIEBREAK_NAMES,
)
from cupmanager.exceptions import InvalidConfigurationException
from cupmanager.models import Match, Participant, Standing
from cupmanager.utils import setup_logger

logger = setup_logger(__name__)


class StandingsCalculator:
    """Calculates the standings table from completed matches.

    Ranking order:
    - Points (3 per win, 1 per draw)
    - Configured tiebreaks, by default goal difference then goals for
    - Name (case-insensitive), then id, so equal rows always sort the same way
    """

    def __init__(self, tiebreak_order: Optional[List[str]] = None) -> None:
        order = (
            list(tiebreak_order)
            if tiebreak_order is not None
            else list(DEFAULT_TIEBREAK_ORDER)
        )
        unknown = [key for key in order if key not in TIEBREAK_NAMES]
        if unknown:
            raise InvalidConfigurationException(
                f"Unknown tiebreak keys: {', '.join(unknown)}"
            )
        self.tiebreak_order = order

    def calculate(
        self, participants: Iterable[Participant], matches: Iterable[Match]
    ) -> List[Standing]:
        """Build the ranked table.

        Args:
            participants: Everyone who gets a row, even without games
            matches: Matches to aggregate; only completed ones count

        Returns:
            Standings sorted best to worst
        """
        table: Dict[str, Standing] = {p.id: Standing(participant=p) for p in participants}

        for match in matches:
            if not match.completed:
                continue
            id_a, id_b = match.participant_ids
            if id_a in table:
                table[id_a].add_result(match.score_a, match.score_b)
            if id_b in table:
                table[id_b].add_result(match.score_b, match.score_a)

        return sorted(
            table.values(),
            key=functools.cmp_to_key(self._compare_standings),
            reverse=True,
        )

    def _tiebreak_value(self, standing: Standing, key: str) -> int:
        if key == TB_GOAL_DIFFERENCE:
            return standing.goal_difference
        if key == TB_GOALS_FOR:
            return standing.goals_for
        if key == TB_WINS:
            return standing.wins
        return 0

    def _compare_standings(self, s1: Standing, s2: Standing) -> int:
        """Compare two rows for standings order.

        Returns:
            1 if s1 ranks higher, -1 if s2 ranks higher, 0 if equal
        """
        if s1.points != s2.points:
            return 1 if s1.points > s2.points else -1

        for tb_key in self.tiebreak_order:
            tb1 = self._tiebreak_value(s1, tb_key)
            tb2 = self._tiebreak_value(s2, tb_key)
            if tb1 != tb2:
                return 1 if tb1 > tb2 else -1

        # Alphabetical order ranks higher
        name1 = s1.participant.name.casefold()
        name2 = s2.participant.name.casefold()
        if name1 != name2:
            return 1 if name1 < name2 else -1

        id1, id2 = s1.participant.id, s2.participant.id
        if id1 != id2:
            return 1 if id1 < id2 else -1

        return 0
