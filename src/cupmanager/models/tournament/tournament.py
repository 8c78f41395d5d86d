"""Tournament data class and its enumerations."""

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

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from cupmanager.models.participant import Participant
from cupmanager.utils import parse_datetime, utc_now

from .match import Match


class TournamentFormat(str, Enum):
    """Supported competition formats (values are the stored identifiers)."""

    ROUND_ROBIN = "league"
    SINGLE_ELIMINATION = "knockout"
    HYBRID = "champions"


class TournamentStatus(str, Enum):
    """Tournament lifecycle."""

    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Tournament:
    """A competition among a snapshot of participants.

    Tournaments are immutable values; every operation returns an updated
    copy so callers holding an older snapshot are unaffected.

    Attributes
    ----------
    id : str
        Unique identifier.
    name : str
        Display name, unique across tournaments ignoring case.
    format : TournamentFormat
        Competition format.
    participants : tuple of Participant
        Roster snapshot taken at creation.
    matches : tuple of Match
        Schedule in sequence order. Empty until the tournament starts.
    status : TournamentStatus
        ``setup`` until matches are generated, then ``in_progress``,
        then ``completed``.
    winner : Participant or None
        Champion once completed.
    created_at : datetime
    completed_at : datetime or None
    """

    id: str
    name: str
    format: TournamentFormat
    participants: Tuple[Participant, ...] = ()
    matches: Tuple[Match, ...] = ()
    status: TournamentStatus = TournamentStatus.SETUP
    winner: Optional[Participant] = None
    created_at: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        name: str,
        tournament_format: TournamentFormat,
        participants: Iterable[Participant],
    ) -> "Tournament":
        """Build a new tournament in ``setup`` with no matches."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            format=TournamentFormat(tournament_format),
            participants=tuple(participants),
        )

    # ========== Queries ==========

    @property
    def is_started(self) -> bool:
        return self.status != TournamentStatus.SETUP or bool(self.matches)

    @property
    def is_completed(self) -> bool:
        return self.status == TournamentStatus.COMPLETED

    @property
    def rounds(self) -> List[int]:
        """Distinct round numbers in ascending order."""
        return sorted({m.round for m in self.matches if m.round is not None})

    def get_match(self, match_id: str) -> Optional[Match]:
        for match in self.matches:
            if match.id == match_id:
                return match
        return None

    def matches_in_round(self, round_number: int) -> List[Match]:
        return [m for m in self.matches if m.round == round_number]

    def matches_in_stage(self, stage: str) -> List[Match]:
        return [m for m in self.matches if m.stage == stage]

    # ========== Copy-on-write updates ==========

    def with_matches(self, matches: Iterable[Match]) -> "Tournament":
        return replace(self, matches=tuple(matches))

    def replace_match(self, match: Match) -> "Tournament":
        """Return a copy with the match of the same id swapped for ``match``."""
        return self.with_matches(
            match if existing.id == match.id else existing
            for existing in self.matches
        )

    def started(self, matches: Iterable[Match]) -> "Tournament":
        """Return a copy holding the generated schedule, now in progress."""
        return replace(
            self, matches=tuple(matches), status=TournamentStatus.IN_PROGRESS
        )

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "format": self.format.value,
            "participants": [p.to_dict() for p in self.participants],
            "matches": [m.to_dict() for m in self.matches],
            "status": self.status.value,
            "winner": self.winner.to_dict() if self.winner else None,
            "created_at": self.created_at,
            "completed_at": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Deserialize tournament from dictionary."""
        winner = data.get("winner")
        return cls(
            id=data["id"],
            name=data.get("name", "Untitled Tournament"),
            format=TournamentFormat(data["format"]),
            participants=tuple(
                Participant.from_dict(p) for p in data.get("participants", [])
            ),
            matches=tuple(Match.from_dict(m) for m in data.get("matches", [])),
            status=TournamentStatus(data.get("status", TournamentStatus.SETUP.value)),
            winner=Participant.from_dict(winner) if winner else None,
            created_at=parse_datetime(data.get("created_at")) or utc_now(),
            completed_at=parse_datetime(data.get("completed_at")),
        )
