from cupmanager.models.participant import Participant
from cupmanager.models.tournament import (
    Match,
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

__all__ = [
    "Participant",
    "Match",
    "Slot",
    "PendingSlot",
    "Resolved",
    "PendingRank",
    "PendingMatchWinner",
    "PendingMatchLoser",
    "Standing",
    "Tournament",
    "TournamentFormat",
    "TournamentStatus",
]
