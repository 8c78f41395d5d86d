"""Match slots: a concrete participant or a reference still to be resolved."""

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
from typing import Any, Dict, Optional, Union

from cupmanager.models.participant import Participant

SLOT_PARTICIPANT = "participant"
SLOT_RANK = "rank"
SLOT_WINNER = "winner"
SLOT_LOSER = "loser"


@dataclass(frozen=True)
class Resolved:
    """A slot bound to a real participant."""

    participant: Participant

    is_resolved = True

    @property
    def label(self) -> str:
        return self.participant.name


@dataclass(frozen=True)
class PendingRank:
    """A slot filled by the participant at ``rank`` (1-based) of the group table."""

    rank: int

    is_resolved = False

    @property
    def label(self) -> str:
        return f"Group #{self.rank}"


@dataclass(frozen=True)
class PendingMatchWinner:
    """A slot filled by the winner of another match."""

    match_id: str

    is_resolved = False

    @property
    def label(self) -> str:
        return f"Winner of {self.match_id[:8]}"


@dataclass(frozen=True)
class PendingMatchLoser:
    """A slot filled by the loser of another match."""

    match_id: str

    is_resolved = False

    @property
    def label(self) -> str:
        return f"Loser of {self.match_id[:8]}"


PendingSlot = Union[PendingRank, PendingMatchWinner, PendingMatchLoser]
Slot = Union[Resolved, PendingSlot]


def slot_participant(slot: Slot) -> Optional[Participant]:
    """Participant held by ``slot``, or None while it is pending."""
    if isinstance(slot, Resolved):
        return slot.participant
    return None


def slot_to_dict(slot: Optional[Slot]) -> Optional[Dict[str, Any]]:
    """Serialize a slot to a tagged dictionary."""
    if slot is None:
        return None
    if isinstance(slot, Resolved):
        return {"kind": SLOT_PARTICIPANT, "participant": slot.participant.to_dict()}
    if isinstance(slot, PendingRank):
        return {"kind": SLOT_RANK, "rank": slot.rank}
    if isinstance(slot, PendingMatchWinner):
        return {"kind": SLOT_WINNER, "match_id": slot.match_id}
    if isinstance(slot, PendingMatchLoser):
        return {"kind": SLOT_LOSER, "match_id": slot.match_id}
    raise TypeError(f"Unknown slot type: {type(slot).__name__}")


def slot_from_dict(data: Optional[Dict[str, Any]]) -> Optional[Slot]:
    """Deserialize a slot from its tagged dictionary."""
    if data is None:
        return None
    kind = data.get("kind")
    if kind == SLOT_PARTICIPANT:
        return Resolved(Participant.from_dict(data["participant"]))
    if kind == SLOT_RANK:
        return PendingRank(int(data["rank"]))
    if kind == SLOT_WINNER:
        return PendingMatchWinner(data["match_id"])
    if kind == SLOT_LOSER:
        return PendingMatchLoser(data["match_id"])
    raise ValueError(f"Unknown slot kind: {kind!r}")
