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

# --- Constants ---
SAVE_FILE_EXTENSION = ".json"

# Storage namespace (one key-value entry holds the whole application state)
STORAGE_KEY = "cup_manager"
APP_DIR_NAME = "CupManager"

# Match outcome points
WIN_POINTS = 3
DRAW_POINTS = 1
LOSS_POINTS = 0

# Minimum field sizes
MIN_PARTICIPANTS = 2
MIN_HYBRID_PARTICIPANTS = 4

# Hybrid format
EVEN_GROUP_STAGE_ROUNDS = 3

# Match stages
STAGE_LEAGUE = "league"
STAGE_GROUP = "group"
STAGE_KNOCKOUT = "knockout"
STAGE_SEMIFINAL = "semifinal"
STAGE_THIRD_PLACE = "third_place"
STAGE_FINAL = "final"

STAGE_NAMES = {
    STAGE_LEAGUE: "League",
    STAGE_GROUP: "Group Stage",
    STAGE_KNOCKOUT: "Knockout",
    STAGE_SEMIFINAL: "Semifinal",
    STAGE_THIRD_PLACE: "Third Place",
    STAGE_FINAL: "Final",
}

# Stages where a match winner feeds a later slot
ELIMINATION_STAGES = frozenset(
    {STAGE_KNOCKOUT, STAGE_SEMIFINAL, STAGE_THIRD_PLACE, STAGE_FINAL}
)

# Tiebreaker keys (points always rank first)
TB_GOAL_DIFFERENCE = "goal_difference"
TB_GOALS_FOR = "goals_for"
TB_WINS = "wins"

TIEBREAK_NAMES = {
    TB_GOAL_DIFFERENCE: "Goal Difference",
    TB_GOALS_FOR: "Goals For",
    TB_WINS: "Wins",
}

DEFAULT_TIEBREAK_ORDER = [TB_GOAL_DIFFERENCE, TB_GOALS_FOR]

# Roster seeded on first run when no participants exist
DEFAULT_ROSTER_NAMES = ["Nacho", "Pelao", "Tancio", "Benjamin", "Migue", "Basti"]

# Environment variables
ENV_LOG_LEVEL = "CUPMANAGER_LOG_LEVEL"
ENV_DATA_DIR = "CUPMANAGER_DATA_DIR"
ENV_SEED = "CUPMANAGER_SEED"
