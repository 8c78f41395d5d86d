"""Match data class."""

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

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from cupmanager.constants import ELIMINATION_STAGES, STAGE_LEAGUE
from cupmanager.models.participant import Participant
from cupmanager.utils import parse_datetime

from .slot import (
    PendingSlot,
    Slot,
    slot_from_dict,
    slot_participant,
    slot_to_dict,
)


@dataclass(frozen=True)
class Match:
    """Represents a single match between two slots.

    Attributes
    ----------
    id : str
        Unique match identifier.
    tournament_id : str
        Owning tournament.
    slot_a, slot_b : Slot
        Current occupants. A slot is either ``Resolved`` or a pending
        reference (rank, match winner, match loser).
    score_a, score_b : int or None
        Goals scored by each side once a result exists.
    winner : Participant or None
        Higher scorer of a completed match; None for a draw.
    completed : bool
        Whether a result has been recorded.
    round : int or None
        Format-specific round number.
    sequence : int or None
        Position of the match within the tournament schedule.
    played_at : datetime or None
        When the result was recorded or last edited.
    stage : str
        Stage key (see ``cupmanager.constants``).
    source_a, source_b : PendingSlot or None
        Reference each slot was generated with. Kept after resolution so a
        slot can be resolved again when an upstream result is edited.
    """

    id: str
    tournament_id: str
    slot_a: Slot
    slot_b: Slot
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    winner: Optional[Participant] = None
    completed: bool = False
    round: Optional[int] = None
    sequence: Optional[int] = None
    played_at: Optional[datetime] = None
    stage: str = STAGE_LEAGUE
    source_a: Optional[PendingSlot] = None
    source_b: Optional[PendingSlot] = None

    def __post_init__(self) -> None:
        if self.completed:
            if not self.is_ready:
                raise ValueError(
                    f"Match {self.id} cannot be completed while a slot is pending"
                )
            if self.score_a is None or self.score_b is None:
                raise ValueError(f"Completed match {self.id} is missing a score")

    # ========== Properties ==========

    @property
    def participant_a(self) -> Optional[Participant]:
        return slot_participant(self.slot_a)

    @property
    def participant_b(self) -> Optional[Participant]:
        return slot_participant(self.slot_b)

    @property
    def is_ready(self) -> bool:
        """Both slots hold real participants."""
        return self.slot_a.is_resolved and self.slot_b.is_resolved

    @property
    def is_draw(self) -> bool:
        return self.completed and self.score_a == self.score_b

    @property
    def is_elimination(self) -> bool:
        return self.stage in ELIMINATION_STAGES

    @property
    def loser(self) -> Optional[Participant]:
        """Non-winning participant of a decided match."""
        if not self.completed or self.winner is None:
            return None
        if self.participant_a and self.participant_a.id == self.winner.id:
            return self.participant_b
        return self.participant_a

    @property
    def participant_ids(self) -> Tuple[Optional[str], Optional[str]]:
        a, b = self.participant_a, self.participant_b
        return (a.id if a else None, b.id if b else None)

    # ========== Copy-on-write updates ==========

    def with_result(
        self, score_a: int, score_b: int, played_at: datetime
    ) -> "Match":
        """Return a completed copy with scores and the derived winner."""
        if score_a > score_b:
            winner = self.participant_a
        elif score_b > score_a:
            winner = self.participant_b
        else:
            winner = None
        return replace(
            self,
            score_a=score_a,
            score_b=score_b,
            winner=winner,
            completed=True,
            played_at=played_at,
        )

    def with_slots(self, slot_a: Slot, slot_b: Slot) -> "Match":
        """Return a copy with new occupants (no-op if unchanged)."""
        if slot_a == self.slot_a and slot_b == self.slot_b:
            return self
        return replace(self, slot_a=slot_a, slot_b=slot_b)

    def describe(self) -> str:
        """Short human-readable summary, e.g. ``'Nacho 2-1 Pelao'``."""
        if self.completed:
            return (
                f"{self.slot_a.label} {self.score_a}-{self.score_b} {self.slot_b.label}"
            )
        return f"{self.slot_a.label} vs {self.slot_b.label}"

    # ========== Serialization ==========

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "tournament_id": self.tournament_id,
            "slot_a": slot_to_dict(self.slot_a),
            "slot_b": slot_to_dict(self.slot_b),
            "score_a": self.score_a,
            "score_b": self.score_b,
            "winner": self.winner.to_dict() if self.winner else None,
            "completed": self.completed,
            "round": self.round,
            "sequence": self.sequence,
            "played_at": self.played_at,
            "stage": self.stage,
            "source_a": slot_to_dict(self.source_a),
            "source_b": slot_to_dict(self.source_b),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        winner = data.get("winner")
        return cls(
            id=data["id"],
            tournament_id=data["tournament_id"],
            slot_a=slot_from_dict(data["slot_a"]),
            slot_b=slot_from_dict(data["slot_b"]),
            score_a=data.get("score_a"),
            score_b=data.get("score_b"),
            winner=Participant.from_dict(winner) if winner else None,
            completed=data.get("completed", False),
            round=data.get("round"),
            sequence=data.get("sequence"),
            played_at=parse_datetime(data.get("played_at")),
            stage=data.get("stage", STAGE_LEAGUE),
            source_a=slot_from_dict(data.get("source_a")),
            source_b=slot_from_dict(data.get("source_b")),
        )
