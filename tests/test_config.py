import os
from pathlib import Path

import pytest

from cupmanager.config import ManagerConfig, build_controllers, get_default_data_dir
from cupmanager.constants import STORAGE_KEY, TB_WINS
from cupmanager.exceptions import InvalidConfigurationException
from cupmanager.models import TournamentFormat


def test_defaults():
    config = ManagerConfig()
    assert config.storage_dir is None
    assert config.storage_key == STORAGE_KEY
    assert config.seed is None
    assert config.tiebreak_order == ["goal_difference", "goals_for"]


def test_from_env_reads_data_dir_and_seed(tmp_path):
    config = ManagerConfig.from_env(
        {"CUPMANAGER_DATA_DIR": str(tmp_path), "CUPMANAGER_SEED": "42"}
    )
    assert config.storage_dir == tmp_path
    assert config.seed == 42


def test_from_env_rejects_bad_seed():
    with pytest.raises(InvalidConfigurationException):
        ManagerConfig.from_env({"CUPMANAGER_SEED": "forty-two"})


@pytest.mark.skipif(os.name == "nt", reason="XDG layout only applies off Windows")
def test_default_data_dir_follows_xdg(tmp_path):
    assert get_default_data_dir({"XDG_DATA_HOME": str(tmp_path)}) == tmp_path / "CupManager"
    assert ManagerConfig.from_env({"XDG_DATA_HOME": str(tmp_path)}).storage_dir == (
        tmp_path / "CupManager"
    )


def test_unknown_tiebreak_rejected():
    with pytest.raises(InvalidConfigurationException):
        ManagerConfig(tiebreak_order=["coin_toss"])


def test_empty_storage_key_rejected():
    with pytest.raises(InvalidConfigurationException):
        ManagerConfig(storage_key="")


def test_dict_round_trip(tmp_path):
    config = ManagerConfig(storage_dir=tmp_path, seed=3, tiebreak_order=[TB_WINS])
    restored = ManagerConfig.from_dict(config.to_dict())

    assert restored == config
    assert isinstance(restored.storage_dir, Path)


def test_build_controllers_in_memory():
    roster, tournaments = build_controllers(ManagerConfig(seed=1))
    players = roster.initialize_default_roster()

    tournament = tournaments.create_tournament("Cup", TournamentFormat.HYBRID, players)
    started = tournaments.start_tournament(tournament.id)
    assert len(started.matches) == 13


def test_build_controllers_persist_to_disk(tmp_path):
    config = ManagerConfig(storage_dir=tmp_path, seed=1)
    roster, tournaments = build_controllers(config)
    players = roster.initialize_default_roster()
    tournaments.create_tournament("Cup", TournamentFormat.ROUND_ROBIN, players)

    assert (tmp_path / "cup_manager.json").exists()
    roster_again, tournaments_again = build_controllers(config)
    assert len(roster_again.participants) == 6
    assert tournaments_again.active_tournament.name == "Cup"


def test_seeded_controllers_draw_the_same_schedule(tmp_path):
    def draw():
        roster, tournaments = build_controllers(ManagerConfig(seed=5))
        players = roster.initialize_default_roster()
        tournament = tournaments.create_tournament(
            "Cup", TournamentFormat.SINGLE_ELIMINATION, players
        )
        started = tournaments.start_tournament(tournament.id)
        return [
            tuple(p.name if p else None for p in (m.participant_a, m.participant_b))
            for m in started.matches
        ]

    assert draw() == draw()
