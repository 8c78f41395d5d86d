"""Result recording and validation for tournaments.

This module handles recording match results with proper validation and error checking.
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

from datetime import datetime
from typing import Optional

from cupmanager.exceptions import MatchNotFoundException, MatchStateException
from cupmanager.models import Match, Tournament
from cupmanager.utils import setup_logger, utc_now
from cupmanager.utils.validation import validate_score_strict

from .progression_engine import ProgressionEngine

logger = setup_logger(__name__)


class ResultRecorder:
    """Handles recording and validating match results.

    This class is responsible for:
    - Recording first results on playable matches
    - Correcting results of completed matches
    - Validating scores and match state
    - Running bracket progression after every change

    Both operations return a new tournament; the one passed in is untouched.
    """

    def __init__(self, progression: Optional[ProgressionEngine] = None) -> None:
        self.progression = progression or ProgressionEngine()

    def record_result(
        self,
        tournament: Tournament,
        match_id: str,
        score_a: int,
        score_b: int,
        now: Optional[datetime] = None,
    ) -> Tournament:
        """Record the first result of a match.

        Args:
            tournament: Tournament owning the match
            match_id: Match to score
            score_a: Goals for slot A
            score_b: Goals for slot B
            now: Timestamp to record (current UTC time if None)

        Returns:
            The updated tournament

        Raises:
            MatchNotFoundException: If the match does not exist
            InvalidResultException: If a score is not a non-negative integer
            MatchStateException: If the match is already completed or still
                has a pending slot
        """
        match = self._get_match(tournament, match_id)
        score_a, score_b = self._validate_scores(score_a, score_b)

        if match.completed:
            raise MatchStateException(
                f"Match {match.describe()} already has a result; edit it instead"
            )
        if not match.is_ready:
            raise MatchStateException(
                f"Match {match.describe()} is waiting for its participants"
            )

        return self._apply(tournament, match, score_a, score_b, now)

    def edit_result(
        self,
        tournament: Tournament,
        match_id: str,
        score_a: int,
        score_b: int,
        now: Optional[datetime] = None,
    ) -> Tournament:
        """Correct the result of a completed match.

        Later-round matches that were already played keep their participants;
        only matches still waiting for a result are re-resolved.

        Raises:
            MatchNotFoundException: If the match does not exist
            InvalidResultException: If a score is not a non-negative integer
            MatchStateException: If the match has no result to edit
        """
        match = self._get_match(tournament, match_id)
        score_a, score_b = self._validate_scores(score_a, score_b)

        if not match.completed:
            raise MatchStateException(
                f"Cannot edit {match.describe()}: it has not been played"
            )

        return self._apply(tournament, match, score_a, score_b, now)

    def _get_match(self, tournament: Tournament, match_id: str) -> Match:
        match = tournament.get_match(match_id)
        if match is None:
            raise MatchNotFoundException(
                f"Match {match_id} not found in tournament '{tournament.name}'"
            )
        return match

    def _validate_scores(self, score_a: int, score_b: int):
        return validate_score_strict(score_a), validate_score_strict(score_b)

    def _apply(
        self,
        tournament: Tournament,
        match: Match,
        score_a: int,
        score_b: int,
        now: Optional[datetime],
    ) -> Tournament:
        timestamp = now or utc_now()
        scored = match.with_result(score_a, score_b, played_at=timestamp)
        logger.debug(f"Recorded: {scored.describe()}")
        updated = tournament.replace_match(scored)
        return self.progression.advance(updated, now=timestamp)
