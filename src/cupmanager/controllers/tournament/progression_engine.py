"""Bracket progression for tournaments.

This module resolves pending slots once the matches or standings they depend
on are settled, and decides when a tournament is finished and who won it.
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

from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional, Set

from cupmanager.constants import STAGE_FINAL
from cupmanager.models import (
    Match,
    Participant,
    PendingMatchLoser,
    PendingMatchWinner,
    PendingRank,
    PendingSlot,
    Resolved,
    Slot,
    Standing,
    Tournament,
    TournamentFormat,
    TournamentStatus,
)
from cupmanager.utils import setup_logger, utc_now

from .match_generator import group_stage_rounds
from .standings_calculator import StandingsCalculator

logger = setup_logger(__name__)


class ProgressionEngine:
    """Advances a tournament after its match list changes.

    This class is responsible for:
    - Filling rank slots of the hybrid semifinals once the group stage ends
    - Filling winner and loser slots from completed feeder matches
    - Detecting matches that can no longer be played (blocked)
    - Marking the tournament completed and naming the champion

    Completed matches are never rewritten, so editing an early result does
    not undo later rounds that were already played.
    """

    def __init__(
        self, standings_calculator: Optional[StandingsCalculator] = None
    ) -> None:
        self.standings_calculator = standings_calculator or StandingsCalculator()

    # ========== Queries ==========

    def group_stage_rounds(self, tournament: Tournament) -> Optional[int]:
        """Group-stage round count ``G`` for hybrid tournaments, else None."""
        if tournament.format != TournamentFormat.HYBRID:
            return None
        return group_stage_rounds(len(tournament.participants))

    def group_matches(self, tournament: Tournament) -> List[Match]:
        rounds = self.group_stage_rounds(tournament)
        if rounds is None:
            return list(tournament.matches)
        return [m for m in tournament.matches if m.round is not None and m.round <= rounds]

    def group_standings(self, tournament: Tournament) -> List[Standing]:
        """Table over the group stage only (the whole league otherwise)."""
        return self.standings_calculator.calculate(
            tournament.participants, self.group_matches(tournament)
        )

    def playable_matches(self, tournament: Tournament) -> List[Match]:
        """Uncompleted matches with two real participants."""
        return [m for m in tournament.matches if not m.completed and m.is_ready]

    def blocked_matches(self, tournament: Tournament) -> List[Match]:
        """Matches that cannot progress without editing an earlier result.

        A match is blocked when it is uncompleted and one of its pending slots
        depends on a match that ended without a winner (or is blocked itself),
        or on a rank the field cannot fill. A deciding final that ended in a
        draw is blocked as well.
        """
        dead: Set[str] = set()
        blocked: List[Match] = []
        num_participants = len(tournament.participants)
        by_id = {m.id: m for m in tournament.matches}

        def is_dead(slot: Slot) -> bool:
            if slot.is_resolved:
                return False
            if isinstance(slot, PendingRank):
                return slot.rank > num_participants
            feeder = by_id.get(slot.match_id)
            if feeder is None or feeder.id in dead:
                return True
            return feeder.completed and feeder.winner is None

        for match in sorted(tournament.matches, key=_schedule_order):
            if match.completed:
                if match.stage == STAGE_FINAL and match.winner is None:
                    blocked.append(match)
                continue
            if is_dead(match.slot_a) or is_dead(match.slot_b):
                dead.add(match.id)
                blocked.append(match)
        return blocked

    def is_blocked(self, tournament: Tournament) -> bool:
        """Started, unfinished, and nothing left to play."""
        if tournament.status != TournamentStatus.IN_PROGRESS or not tournament.matches:
            return False
        return not self.playable_matches(tournament) and bool(
            self.blocked_matches(tournament)
        )

    def champion(self, tournament: Tournament) -> Optional[Participant]:
        """Winner of a tournament whose every match is completed, else None."""
        if not tournament.matches or not all(m.completed for m in tournament.matches):
            return None

        if tournament.format == TournamentFormat.ROUND_ROBIN:
            standings = self.group_standings(tournament)
            return standings[0].participant if standings else None

        if tournament.format == TournamentFormat.SINGLE_ELIMINATION:
            last_round = max(m.round or 0 for m in tournament.matches)
            for match in tournament.matches_in_round(last_round):
                if match.winner is not None:
                    return match.winner
            return None

        final_round = self.group_stage_rounds(tournament) + 2
        for match in tournament.matches_in_round(final_round):
            if match.stage == STAGE_FINAL:
                return match.winner
        return None

    # ========== Progression ==========

    def advance(
        self, tournament: Tournament, now: Optional[datetime] = None
    ) -> Tournament:
        """Resolve whatever can be resolved and refresh the completion state.

        Args:
            tournament: Tournament whose match list just changed
            now: Completion timestamp to use (current UTC time if None)

        Returns:
            The updated tournament (the same object if nothing changed)
        """
        if not tournament.matches:
            return tournament

        if tournament.format == TournamentFormat.ROUND_ROBIN:
            updated = tournament
        elif tournament.format == TournamentFormat.SINGLE_ELIMINATION:
            updated = self._resolve(tournament, lambda match: True)
        elif tournament.format == TournamentFormat.HYBRID:
            updated = self._advance_hybrid(tournament)
        else:
            raise NotImplementedError(
                f"Progression for format '{tournament.format}' is not implemented"
            )

        return self._refresh_completion(updated, now)

    def _advance_hybrid(self, tournament: Tournament) -> Tournament:
        """Fill semifinals from the group table, then the final round."""
        group_rounds = self.group_stage_rounds(tournament)
        semifinal_round = group_rounds + 1
        final_round = semifinal_round + 1

        group_complete = all(m.completed for m in self.group_matches(tournament))
        ranking: Optional[List[Standing]] = None
        if group_complete:
            ranking = self.group_standings(tournament)
            logger.debug(
                "Group stage complete, standings: "
                + ", ".join(f"{s.participant.name} ({s.points} pts)" for s in ranking)
            )

        semifinals = tournament.matches_in_round(semifinal_round)
        semifinals_complete = bool(semifinals) and all(m.completed for m in semifinals)

        def ready_for_resolution(match: Match) -> bool:
            if match.round == semifinal_round:
                return group_complete
            if match.round == final_round:
                return semifinals_complete
            return False

        return self._resolve(tournament, ready_for_resolution, ranking)

    def _resolve(
        self,
        tournament: Tournament,
        ready: Callable[[Match], bool],
        ranking: Optional[List[Standing]] = None,
    ) -> Tournament:
        """Re-derive the pending slots of every uncompleted match that is ready."""
        by_id: Dict[str, Match] = {m.id: m for m in tournament.matches}
        changed = False
        matches: List[Match] = []

        for match in tournament.matches:
            if match.completed or not (match.source_a or match.source_b) or not ready(match):
                matches.append(match)
                continue

            slot_a = self._resolve_source(match.source_a, by_id, ranking) or match.slot_a
            slot_b = self._resolve_source(match.source_b, by_id, ranking) or match.slot_b
            updated = match.with_slots(slot_a, slot_b)
            if updated is not match:
                changed = True
                logger.info(
                    f"Round {match.round} match {match.sequence} is now: "
                    f"{updated.describe()}"
                )
            matches.append(updated)

        if not changed:
            return tournament
        return tournament.with_matches(matches)

    def _resolve_source(
        self,
        source: Optional[PendingSlot],
        by_id: Dict[str, Match],
        ranking: Optional[List[Standing]],
    ) -> Optional[Slot]:
        """Current occupant for a generated reference, or the reference itself."""
        if source is None:
            return None

        if isinstance(source, PendingRank):
            if ranking is None or source.rank > len(ranking):
                return source
            return Resolved(ranking[source.rank - 1].participant)

        feeder = by_id.get(source.match_id)
        if feeder is None or not feeder.completed:
            return source
        if isinstance(source, PendingMatchWinner):
            participant = feeder.winner
        elif isinstance(source, PendingMatchLoser):
            participant = feeder.loser
        else:
            return source
        return Resolved(participant) if participant is not None else source

    def _refresh_completion(
        self, tournament: Tournament, now: Optional[datetime]
    ) -> Tournament:
        """Set status, winner and completion time from the match list."""
        champion = self.champion(tournament)

        if champion is not None:
            if tournament.is_completed and tournament.completed_at is not None:
                completed_at = tournament.completed_at
            else:
                completed_at = now or utc_now()
                logger.info(
                    f"Tournament '{tournament.name}' completed, champion: {champion.name}"
                )
            return replace(
                tournament,
                status=TournamentStatus.COMPLETED,
                winner=champion,
                completed_at=completed_at,
            )

        if tournament.is_completed:
            logger.warning(
                f"Tournament '{tournament.name}' has no champion after an edit, "
                "returning it to in progress"
            )
        if self.is_blocked(replace(tournament, status=TournamentStatus.IN_PROGRESS)):
            logger.warning(
                f"Tournament '{tournament.name}' is blocked: no playable match left"
            )
        if (
            tournament.status == TournamentStatus.IN_PROGRESS
            and tournament.winner is None
            and tournament.completed_at is None
        ):
            return tournament
        return replace(
            tournament,
            status=TournamentStatus.IN_PROGRESS,
            winner=None,
            completed_at=None,
        )


def _schedule_order(match: Match):
    return (match.round or 0, match.sequence or 0)
