"""Match schedule generation for tournaments.

This module turns a participant list and a format into the ordered list of
matches for a tournament. Matches whose participants are not known yet get
pending slots that the progression engine resolves later.
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

import itertools
import random
import uuid
from typing import Iterable, List, Optional, Sequence

from cupmanager.constants import (
    EVEN_GROUP_STAGE_ROUNDS,
    MIN_HYBRID_PARTICIPANTS,
    MIN_PARTICIPANTS,
    STAGE_FINAL,
    STAGE_GROUP,
    STAGE_KNOCKOUT,
    STAGE_LEAGUE,
    STAGE_SEMIFINAL,
    STAGE_THIRD_PLACE,
)
from cupmanager.exceptions import ParticipantCountException
from cupmanager.models import (
    Match,
    Participant,
    PendingMatchLoser,
    PendingMatchWinner,
    PendingRank,
    Resolved,
    Slot,
    TournamentFormat,
)
from cupmanager.type_hints import IdFactory, RoundSchedule, RoundWithBye
from cupmanager.utils import setup_logger

logger = setup_logger(__name__)


# ========== Scheduling primitives ==========


def group_stage_rounds(num_participants: int) -> int:
    """Number of group-stage rounds in the hybrid format.

    Odd fields play one round per participant (each sits out once), even
    fields play a fixed three rounds.
    """
    if num_participants % 2:
        return num_participants
    return EVEN_GROUP_STAGE_ROUNDS


def elimination_rounds(num_participants: int) -> int:
    """``ceil(log2(n))``: rounds needed to reduce ``n`` entries to one."""
    return (num_participants - 1).bit_length()


def league_schedule(num_participants: int) -> RoundSchedule:
    """Every unordered pair ``(i, j)`` with ``i < j``, outer index first."""
    return tuple(itertools.combinations(range(num_participants), 2))


def rotation_round(num_participants: int, round_index: int) -> RoundWithBye:
    """One round of an odd-sized round robin with a rotating bye.

    In round ``r`` (0-based) participant ``r mod n`` sits out and the others
    are paired symmetrically around it: ``(r + k, r - k)``. Since ``n`` is
    odd, every pair meets in exactly one of the ``n`` rounds.

    Args:
        num_participants: Odd field size
        round_index: 0-based round index

    Returns:
        Tuple of (pairings, bye index)
    """
    n = num_participants
    bye = round_index % n
    pairings = tuple(((bye + k) % n, (bye - k) % n) for k in range(1, n // 2 + 1))
    return pairings, bye


def circle_round(num_participants: int, round_index: int) -> RoundSchedule:
    """One round of an even-sized round robin (circle method).

    The last participant is fixed and meets the participant that would sit
    out of the odd rotation over the others.
    """
    pivot = num_participants - 1
    pairings, bye = rotation_round(pivot, round_index)
    return ((bye, pivot),) + pairings


# ========== Generator ==========


class MatchGenerator:
    """Generates the match schedule for a tournament format.

    The generator is pure apart from its random source, which is injected so
    schedules are reproducible in tests::

        generator = MatchGenerator(random.Random(42))
        matches = generator.generate(tournament.id, tournament.participants,
                                     TournamentFormat.HYBRID)
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        """Initialize the generator.

        Args:
            rng: Random source used for shuffling; a fresh unseeded one if None
            id_factory: Callable returning new match ids (uuid4 by default)
        """
        self.random = rng if rng is not None else random.Random()
        self._new_id = id_factory or (lambda: str(uuid.uuid4()))

    @classmethod
    def seeded(cls, seed: Optional[int]) -> "MatchGenerator":
        """Build a generator with ``random.Random(seed)``."""
        return cls(random.Random(seed) if seed is not None else random.Random())

    def generate(
        self,
        tournament_id: str,
        participants: Iterable[Participant],
        tournament_format: TournamentFormat,
    ) -> List[Match]:
        """Generate every match of a tournament.

        Args:
            tournament_id: Owner of the generated matches
            participants: Entrants in stable input order
            tournament_format: Format to schedule

        Returns:
            Matches ordered by sequence number

        Raises:
            ParticipantCountException: If the field is too small for the format
            NotImplementedError: If the format is not supported
        """
        field = list(participants)
        if len(field) < MIN_PARTICIPANTS:
            raise ParticipantCountException(
                f"Tournament must have at least {MIN_PARTICIPANTS} participants"
            )

        tournament_format = TournamentFormat(tournament_format)
        builder = _ScheduleBuilder(tournament_id, self._new_id)

        if tournament_format == TournamentFormat.ROUND_ROBIN:
            self._generate_round_robin(builder, field)
        elif tournament_format == TournamentFormat.SINGLE_ELIMINATION:
            self._generate_single_elimination(builder, field)
        elif tournament_format == TournamentFormat.HYBRID:
            self._generate_hybrid(builder, field)
        else:
            raise NotImplementedError(
                f"Format '{tournament_format}' is not implemented"
            )

        logger.info(
            f"Generated {len(builder.matches)} matches for {len(field)} participants "
            f"({tournament_format.value})"
        )
        return builder.matches

    def _shuffled(self, field: Sequence[Participant]) -> List[Participant]:
        shuffled = list(field)
        self.random.shuffle(shuffled)
        return shuffled

    def _generate_round_robin(
        self, builder: "_ScheduleBuilder", field: List[Participant]
    ) -> None:
        """Create one match per pair, all in round 1, in input order."""
        for i, j in league_schedule(len(field)):
            builder.add(Resolved(field[i]), Resolved(field[j]), 1, STAGE_LEAGUE)

    def _generate_single_elimination(
        self, builder: "_ScheduleBuilder", field: List[Participant]
    ) -> None:
        """Create a bracket from one random draw.

        Each round pairs the previous round's entries by position. An entry is
        either a pending match winner or a participant holding a bye. The odd
        entry out moves on without playing and opens the next round, so it
        meets the first winner there and never takes two byes in a row.
        """
        shuffled = self._shuffled(field)
        total_rounds = elimination_rounds(len(shuffled))

        entries: List[Slot] = [Resolved(p) for p in shuffled]
        for round_number in range(1, total_rounds + 1):
            stage = STAGE_FINAL if round_number == total_rounds else STAGE_KNOCKOUT
            next_entries: List[Slot] = []
            for k in range(0, len(entries) - 1, 2):
                match = builder.add(entries[k], entries[k + 1], round_number, stage)
                next_entries.append(PendingMatchWinner(match.id))
            if len(entries) % 2:
                bye = entries[-1]
                logger.info(f"Round {round_number}: bye for {bye.label}")
                next_entries.insert(0, bye)
            entries = next_entries

    def _generate_hybrid(
        self, builder: "_ScheduleBuilder", field: List[Participant]
    ) -> None:
        """Create a single group stage followed by a four-way knockout."""
        if len(field) < MIN_HYBRID_PARTICIPANTS:
            raise ParticipantCountException(
                f"Group and knockout format needs at least "
                f"{MIN_HYBRID_PARTICIPANTS} participants"
            )

        shuffled = self._shuffled(field)
        n = len(shuffled)
        group_rounds = group_stage_rounds(n)

        for round_index in range(group_rounds):
            if n % 2:
                pairings, bye = rotation_round(n, round_index)
                logger.debug(
                    f"Group round {round_index + 1}: bye for {shuffled[bye].name}"
                )
            else:
                pairings = circle_round(n, round_index)
            for i, j in pairings:
                builder.add(
                    Resolved(shuffled[i]),
                    Resolved(shuffled[j]),
                    round_index + 1,
                    STAGE_GROUP,
                )

        semifinal_round = group_rounds + 1
        final_round = semifinal_round + 1
        semifinal_1 = builder.add(
            PendingRank(1), PendingRank(4), semifinal_round, STAGE_SEMIFINAL
        )
        semifinal_2 = builder.add(
            PendingRank(2), PendingRank(3), semifinal_round, STAGE_SEMIFINAL
        )
        builder.add(
            PendingMatchLoser(semifinal_1.id),
            PendingMatchLoser(semifinal_2.id),
            final_round,
            STAGE_THIRD_PLACE,
        )
        builder.add(
            PendingMatchWinner(semifinal_1.id),
            PendingMatchWinner(semifinal_2.id),
            final_round,
            STAGE_FINAL,
        )


class _ScheduleBuilder:
    """Accumulates matches and hands out sequence numbers."""

    def __init__(self, tournament_id: str, new_id: IdFactory):
        self.tournament_id = tournament_id
        self._new_id = new_id
        self._sequence = itertools.count(1)
        self.matches: List[Match] = []

    def add(self, slot_a: Slot, slot_b: Slot, round_number: int, stage: str) -> Match:
        match = Match(
            id=self._new_id(),
            tournament_id=self.tournament_id,
            slot_a=slot_a,
            slot_b=slot_b,
            round=round_number,
            sequence=next(self._sequence),
            stage=stage,
            source_a=None if slot_a.is_resolved else slot_a,
            source_b=None if slot_b.is_resolved else slot_b,
        )
        self.matches.append(match)
        return match
