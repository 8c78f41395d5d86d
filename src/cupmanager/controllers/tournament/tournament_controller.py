"""Engine-facing tournament operations.

The controller owns the in-memory list of tournaments, persists every change
through a :class:`~cupmanager.storage.TournamentRepository` and reports
failures through its error slot instead of raising.
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
from typing import Callable, Iterable, List, Optional, Union

from cupmanager.constants import MIN_PARTICIPANTS
from cupmanager.controllers.base import ErrorReportingController
from cupmanager.exceptions import (
    MatchNotFoundException,
    ParticipantCountException,
    TournamentAlreadyStartedException,
    TournamentNotFoundException,
    ValidationException,
)
from cupmanager.models import Match, Participant, Standing, Tournament, TournamentFormat
from cupmanager.storage import TournamentRepository
from cupmanager.utils import setup_logger, utc_now
from cupmanager.utils.validation import validate_name_strict

from .match_generator import MatchGenerator
from .progression_engine import ProgressionEngine
from .result_recorder import ResultRecorder
from .standings_calculator import StandingsCalculator

logger = setup_logger(__name__)


class TournamentController(ErrorReportingController):
    """Creates, starts, scores and deletes tournaments.

    This class is responsible for:
    - Validating new tournaments (name, field size)
    - Generating the schedule when a tournament starts
    - Recording and editing results through the :class:`ResultRecorder`
    - Keeping the repository and the in-memory list in sync
    - Tracking the active tournament

    Repository writes happen before the in-memory list is updated, so a
    failed save leaves the controller exactly as it was.
    """

    def __init__(
        self,
        repository: TournamentRepository,
        generator: Optional[MatchGenerator] = None,
        recorder: Optional[ResultRecorder] = None,
        standings_calculator: Optional[StandingsCalculator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the controller.

        Args:
            repository: Where tournaments and the active pointer are stored
            generator: Schedule generator (unseeded by default)
            recorder: Result recorder; built around ``standings_calculator``
                if None
            standings_calculator: Table used for standings and rank slots
            clock: Returns the current time; UTC now by default
        """
        super().__init__()
        self.repository = repository
        self.standings_calculator = standings_calculator or StandingsCalculator()
        self.generator = generator or MatchGenerator()
        self.recorder = recorder or ResultRecorder(
            ProgressionEngine(self.standings_calculator)
        )
        self.clock = clock or utc_now
        self._tournaments: List[Tournament] = []
        self._active_id: Optional[str] = None

    @property
    def progression(self) -> ProgressionEngine:
        return self.recorder.progression

    # ========== State ==========

    @property
    def tournaments(self) -> List[Tournament]:
        return list(self._tournaments)

    @property
    def active_tournament(self) -> Optional[Tournament]:
        if self._active_id is None:
            return None
        return self._find(self._active_id)

    def load(self) -> Optional[List[Tournament]]:
        """Read all tournaments and the active pointer from the repository."""

        def load() -> List[Tournament]:
            tournaments = self.repository.load_tournaments()
            active = self.repository.get_active_tournament()
            self._tournaments = tournaments
            self._active_id = active.id if active is not None else None
            logger.info(f"Loaded {len(tournaments)} tournaments")
            return self.tournaments

        return self._attempt("load tournaments", load)

    def get_tournament(self, tournament_id: str) -> Optional[Tournament]:
        return self._find(tournament_id)

    # ========== Lifecycle ==========

    def create_tournament(
        self,
        name: str,
        tournament_format: Union[TournamentFormat, str],
        participants: Iterable[Participant],
    ) -> Optional[Tournament]:
        """Create a tournament in setup and make it the active one.

        Args:
            name: Display name, trimmed and unique ignoring case
            tournament_format: Format or its stored identifier
            participants: Snapshot of the entrants

        Returns:
            The new tournament, or None on failure (see :attr:`error`)
        """

        def create() -> Tournament:
            trimmed = validate_name_strict(
                name, (t.name for t in self._tournaments), "tournament"
            )
            field = list(participants)
            if len(field) < MIN_PARTICIPANTS:
                raise ParticipantCountException(
                    f"Tournament must have at least {MIN_PARTICIPANTS} participants"
                )
            try:
                fmt = TournamentFormat(tournament_format)
            except ValueError as e:
                raise ValidationException(
                    f"Unknown tournament format: {tournament_format!r}"
                ) from e

            tournament = replace(
                Tournament.create(trimmed, fmt, field), created_at=self.clock()
            )
            self.repository.set_active_tournament(tournament)
            self._tournaments.append(tournament)
            self._active_id = tournament.id
            logger.info(
                f"Created tournament '{tournament.name}' ({fmt.value}) "
                f"with {len(field)} participants"
            )
            return tournament

        return self._attempt("create tournament", create)

    def start_tournament(self, tournament_id: str) -> Optional[Tournament]:
        """Generate the schedule of a tournament still in setup."""

        def start() -> Tournament:
            tournament = self._require(tournament_id)
            if tournament.is_started:
                raise TournamentAlreadyStartedException(
                    f"Tournament '{tournament.name}' has already started"
                )
            matches = self.generator.generate(
                tournament.id, tournament.participants, tournament.format
            )
            started = self.progression.advance(tournament.started(matches), self.clock())
            self._store(started)
            logger.info(f"Started tournament '{started.name}'")
            return started

        return self._attempt("start tournament", start)

    def delete_tournament(self, tournament_id: str) -> Optional[Tournament]:
        """Delete a tournament; clears the active pointer if it was active."""

        def delete() -> Tournament:
            tournament = self._require(tournament_id)
            self.repository.delete_tournament(tournament_id)
            self._tournaments = [t for t in self._tournaments if t.id != tournament_id]
            if self._active_id == tournament_id:
                self._active_id = None
            logger.info(f"Deleted tournament '{tournament.name}'")
            return tournament

        return self._attempt("delete tournament", delete)

    def set_active_tournament(self, tournament: Optional[Tournament]) -> bool:
        """Select the active tournament (None clears it). Returns success."""

        def activate() -> bool:
            self.repository.set_active_tournament(tournament)
            if tournament is None:
                self._active_id = None
            else:
                self._upsert(tournament)
                self._active_id = tournament.id
            return True

        return bool(self._attempt("set active tournament", activate))

    def update_tournament(self, tournament: Tournament) -> Optional[Tournament]:
        """Persist an externally modified tournament."""

        def update() -> Tournament:
            self._store(tournament)
            return tournament

        return self._attempt("update tournament", update)

    # ========== Results ==========

    def record_result(
        self, match_id: str, score_a: int, score_b: int
    ) -> Optional[Tournament]:
        """Record the first result of a match in any loaded tournament.

        Returns:
            The updated tournament, or None on failure (see :attr:`error`)
        """

        def record() -> Tournament:
            tournament = self._owner_of(match_id)
            updated = self.recorder.record_result(
                tournament, match_id, score_a, score_b, now=self.clock()
            )
            self._store(updated)
            return updated

        return self._attempt("record result", record)

    def edit_result(
        self, match_id: str, score_a: int, score_b: int
    ) -> Optional[Tournament]:
        """Correct the result of a completed match in any loaded tournament."""

        def edit() -> Tournament:
            tournament = self._owner_of(match_id)
            updated = self.recorder.edit_result(
                tournament, match_id, score_a, score_b, now=self.clock()
            )
            self._store(updated)
            return updated

        return self._attempt("edit result", edit)

    # ========== Derived views ==========

    def standings(
        self, tournament: Optional[Tournament] = None, group_stage_only: bool = False
    ) -> List[Standing]:
        """League table of a tournament (the active one if None).

        By default every completed match counts, knockout games included.
        With ``group_stage_only`` a hybrid tournament is ranked on its group
        stage alone, which is the table its semifinals are seeded from.
        """
        tournament = tournament or self.active_tournament
        if tournament is None:
            return []
        if group_stage_only:
            return self.progression.group_standings(tournament)
        return self.standings_calculator.calculate(
            tournament.participants, tournament.matches
        )

    def playable_matches(self, tournament: Optional[Tournament] = None) -> List[Match]:
        tournament = tournament or self.active_tournament
        if tournament is None:
            return []
        return self.progression.playable_matches(tournament)

    def is_blocked(self, tournament: Optional[Tournament] = None) -> bool:
        tournament = tournament or self.active_tournament
        return tournament is not None and self.progression.is_blocked(tournament)

    # ========== Helpers ==========

    def _find(self, tournament_id: str) -> Optional[Tournament]:
        for tournament in self._tournaments:
            if tournament.id == tournament_id:
                return tournament
        return None

    def _require(self, tournament_id: str) -> Tournament:
        tournament = self._find(tournament_id)
        if tournament is None:
            raise TournamentNotFoundException(f"Tournament {tournament_id} not found")
        return tournament

    def _owner_of(self, match_id: str) -> Tournament:
        """Tournament holding ``match_id``, looking at the active one first."""
        active = self.active_tournament
        candidates = ([active] if active else []) + [
            t for t in self._tournaments if active is None or t.id != active.id
        ]
        for tournament in candidates:
            if tournament.get_match(match_id) is not None:
                return tournament
        raise MatchNotFoundException(f"Match {match_id} not found")

    def _store(self, tournament: Tournament) -> None:
        self.repository.save_tournament(tournament)
        self._upsert(tournament)

    def _upsert(self, tournament: Tournament) -> None:
        for index, existing in enumerate(self._tournaments):
            if existing.id == tournament.id:
                self._tournaments[index] = tournament
                return
        self._tournaments.append(tournament)
