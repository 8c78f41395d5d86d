from cupmanager.models.tournament.match import Match
from cupmanager.models.tournament.slot import (
    PendingMatchLoser,
    PendingMatchWinner,
    PendingRank,
    PendingSlot,
    Resolved,
    Slot,
)
from cupmanager.models.tournament.standing import Standing
from cupmanager.models.tournament.tournament import (
    Tournament,
    TournamentFormat,
    TournamentStatus,
)

__all__ = [
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
