"""Roster controller for managing the participants available to tournaments."""

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

from typing import List, Optional

from cupmanager.constants import DEFAULT_ROSTER_NAMES
from cupmanager.controllers.base import ErrorReportingController
from cupmanager.exceptions import ParticipantNotFoundException
from cupmanager.models import Participant
from cupmanager.storage import TournamentRepository
from cupmanager.utils import setup_logger
from cupmanager.utils.validation import validate_name_strict

logger = setup_logger(__name__)


class RosterController(ErrorReportingController):
    """Adds, renames and removes roster participants.

    Tournaments keep their own participant snapshot, so roster edits never
    change a tournament that was already created.
    """

    def __init__(self, repository: TournamentRepository) -> None:
        super().__init__()
        self.repository = repository
        self._participants: List[Participant] = []

    @property
    def participants(self) -> List[Participant]:
        return list(self._participants)

    def get_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self._participants:
            if participant.id == participant_id:
                return participant
        return None

    def load(self) -> Optional[List[Participant]]:
        def load() -> List[Participant]:
            self._participants = self.repository.load_roster()
            logger.info(f"Loaded {len(self._participants)} participants")
            return self.participants

        return self._attempt("load roster", load)

    def add_participant(
        self, name: str, avatar: Optional[str] = None
    ) -> Optional[Participant]:
        """Add a participant with a trimmed, case-insensitively unique name."""

        def add() -> Participant:
            trimmed = validate_name_strict(
                name, (p.name for p in self._participants), "participant"
            )
            participant = Participant.create(trimmed, avatar)
            self.repository.save_participant(participant)
            self._participants.append(participant)
            logger.info(f"Added participant '{participant.name}'")
            return participant

        return self._attempt("add participant", add)

    def rename_participant(
        self, participant_id: str, name: str
    ) -> Optional[Participant]:
        def rename() -> Participant:
            current = self._require(participant_id)
            trimmed = validate_name_strict(
                name,
                (p.name for p in self._participants if p.id != participant_id),
                "participant",
            )
            renamed = current.renamed(trimmed)
            self.repository.save_participant(renamed)
            self._participants = [
                renamed if p.id == participant_id else p for p in self._participants
            ]
            logger.info(f"Renamed participant '{current.name}' to '{renamed.name}'")
            return renamed

        return self._attempt("rename participant", rename)

    def delete_participant(self, participant_id: str) -> Optional[Participant]:
        def delete() -> Participant:
            participant = self._require(participant_id)
            self.repository.delete_participant(participant_id)
            self._participants = [
                p for p in self._participants if p.id != participant_id
            ]
            logger.info(f"Deleted participant '{participant.name}'")
            return participant

        return self._attempt("delete participant", delete)

    def initialize_default_roster(self) -> List[Participant]:
        """Seed the default names when the roster is empty.

        Returns:
            The roster after seeding (unchanged if it already had entries)
        """
        if self._participants:
            return self.participants
        logger.info("Roster is empty, adding default participants")
        for name in DEFAULT_ROSTER_NAMES:
            self.add_participant(name)
        return self.participants

    def _require(self, participant_id: str) -> Participant:
        participant = self.get_participant(participant_id)
        if participant is None:
            raise ParticipantNotFoundException(
                f"Participant {participant_id} not found"
            )
        return participant
