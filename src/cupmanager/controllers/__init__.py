from cupmanager.controllers.roster import RosterController
from cupmanager.controllers.tournament import TournamentController

__all__ = ["RosterController", "TournamentController"]
