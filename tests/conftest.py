import itertools
import random
from datetime import datetime, timezone

import pytest

from cupmanager.controllers.tournament import (
    MatchGenerator,
    ProgressionEngine,
    ResultRecorder,
    TournamentController,
)
from cupmanager.models import Participant, Tournament, TournamentFormat
from cupmanager.storage import InMemoryKeyValueStore, KeyValueTournamentRepository

FIXED_TIME = datetime(2025, 3, 1, 18, 30, tzinfo=timezone.utc)


def make_participants(*names):
    return [
        Participant(id=f"p{i}", name=name, created_at=FIXED_TIME)
        for i, name in enumerate(names, start=1)
    ]


def make_generator(seed=7):
    counter = itertools.count(1)
    return MatchGenerator(random.Random(seed), id_factory=lambda: f"m{next(counter)}")


def start(tournament_format, participants, seed=7):
    """A started tournament with a reproducible schedule."""
    tournament = Tournament.create("Test Cup", tournament_format, participants)
    matches = make_generator(seed).generate(
        tournament.id, tournament.participants, tournament.format
    )
    return tournament.started(matches)


def play_all(recorder, tournament, strength):
    """Play every playable match; the lower strength rank wins 1-0."""
    while True:
        playable = recorder.progression.playable_matches(tournament)
        if not playable:
            return tournament
        for match in playable:
            a, b = match.participant_a, match.participant_b
            score = (1, 0) if strength[a.id] < strength[b.id] else (0, 1)
            tournament = recorder.record_result(
                tournament, match.id, *score, now=FIXED_TIME
            )


@pytest.fixture
def four_players():
    return make_participants("Ana", "Bruno", "Carla", "Diego")


@pytest.fixture
def five_players():
    return make_participants("Ana", "Bruno", "Carla", "Diego", "Elena")


@pytest.fixture
def recorder():
    return ResultRecorder(ProgressionEngine())


@pytest.fixture
def repository():
    return KeyValueTournamentRepository(InMemoryKeyValueStore())


@pytest.fixture
def controller(repository):
    return TournamentController(
        repository, generator=make_generator(), clock=lambda: FIXED_TIME
    )


@pytest.fixture
def hybrid(four_players):
    return start(TournamentFormat.HYBRID, four_players)
