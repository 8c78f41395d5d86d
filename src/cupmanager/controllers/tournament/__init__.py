from cupmanager.controllers.tournament.match_generator import (
    MatchGenerator,
    circle_round,
    elimination_rounds,
    group_stage_rounds,
    league_schedule,
    rotation_round,
)
from cupmanager.controllers.tournament.progression_engine import ProgressionEngine
from cupmanager.controllers.tournament.result_recorder import ResultRecorder
from cupmanager.controllers.tournament.standings_calculator import StandingsCalculator
from cupmanager.controllers.tournament.tournament_controller import (
    TournamentController,
)

__all__ = [
    "MatchGenerator",
    "StandingsCalculator",
    "ProgressionEngine",
    "ResultRecorder",
    "TournamentController",
    "group_stage_rounds",
    "elimination_rounds",
    "league_schedule",
    "rotation_round",
    "circle_round",
]
