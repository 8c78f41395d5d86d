from datetime import timedelta

import pytest

from conftest import FIXED_TIME, make_participants, play_all, start
from cupmanager.constants import (
    STAGE_FINAL,
    STAGE_GROUP,
    STAGE_SEMIFINAL,
    STAGE_THIRD_PLACE,
)
from cupmanager.models import (
    PendingMatchWinner,
    Resolved,
    Tournament,
    TournamentFormat,
    TournamentStatus,
)

LATER = FIXED_TIME + timedelta(days=1)
STRENGTH = {"p1": 1, "p2": 2, "p3": 3, "p4": 4, "p5": 5}


def _play(recorder, tournament, match_id, strength=STRENGTH):
    match = tournament.get_match(match_id)
    a, b = match.participant_a, match.participant_b
    score = (1, 0) if strength[a.id] < strength[b.id] else (0, 1)
    return recorder.record_result(tournament, match_id, *score, now=FIXED_TIME)


def _play_group(recorder, tournament):
    for match in tournament.matches_in_stage(STAGE_GROUP):
        tournament = _play(recorder, tournament, match.id)
    return tournament


# ========== Single elimination ==========


def test_knockout_winners_fill_the_final(recorder, four_players):
    t = start(TournamentFormat.SINGLE_ELIMINATION, four_players)
    sf1, sf2, final = t.matches

    t = recorder.record_result(t, sf1.id, 2, 0, now=FIXED_TIME)
    pending_final = t.get_match(final.id)
    assert pending_final.slot_a == Resolved(sf1.participant_a)
    assert pending_final.slot_b == PendingMatchWinner(sf2.id)

    t = recorder.record_result(t, sf2.id, 1, 3, now=FIXED_TIME)
    assert t.get_match(final.id).participant_b == sf2.participant_b
    assert t.status == TournamentStatus.IN_PROGRESS

    t = recorder.record_result(t, final.id, 0, 1, now=FIXED_TIME)
    assert t.status == TournamentStatus.COMPLETED
    assert t.winner == sf2.participant_b
    assert t.completed_at == FIXED_TIME


def test_knockout_bye_meets_the_first_winner(recorder):
    t = start(TournamentFormat.SINGLE_ELIMINATION, make_participants("A", "B", "C"))
    first, final = t.matches
    assert isinstance(final.slot_a, Resolved)
    assert final.slot_b == PendingMatchWinner(first.id)

    assert recorder.progression.playable_matches(t) == [first]
    t = recorder.record_result(t, first.id, 3, 2, now=FIXED_TIME)
    assert t.get_match(final.id).is_ready
    assert t.get_match(final.id).participant_b == first.participant_a

    t = recorder.record_result(t, final.id, 0, 2, now=FIXED_TIME)
    assert t.is_completed
    assert t.winner == first.participant_a


def test_knockout_bye_plays_the_second_round(recorder, five_players):
    t = start(TournamentFormat.SINGLE_ELIMINATION, five_players)
    first_round = {pid for m in t.matches_in_round(1) for pid in m.participant_ids}
    (bye_id,) = {p.id for p in five_players} - first_round

    t = play_all(recorder, t, STRENGTH)

    played = [m.round for m in t.matches if bye_id in m.participant_ids]
    assert min(played) == 2
    assert t.is_completed
    assert t.winner.id == "p1"


def test_knockout_draw_blocks_the_next_round(recorder, four_players):
    engine = recorder.progression
    t = start(TournamentFormat.SINGLE_ELIMINATION, four_players)
    sf1, sf2, final = t.matches

    t = recorder.record_result(t, sf1.id, 1, 1, now=FIXED_TIME)
    t = recorder.record_result(t, sf2.id, 2, 0, now=FIXED_TIME)

    assert t.get_match(sf1.id).winner is None
    assert engine.playable_matches(t) == []
    assert [m.id for m in engine.blocked_matches(t)] == [final.id]
    assert engine.is_blocked(t)
    assert t.status == TournamentStatus.IN_PROGRESS
    assert t.winner is None

    t = recorder.edit_result(t, sf1.id, 2, 1, now=FIXED_TIME)
    assert t.get_match(final.id).is_ready
    assert not engine.is_blocked(t)


def test_edit_re_resolves_unplayed_downstream_match(recorder, four_players):
    t = start(TournamentFormat.SINGLE_ELIMINATION, four_players)
    sf1, _, final = t.matches

    t = recorder.record_result(t, sf1.id, 2, 0, now=FIXED_TIME)
    assert t.get_match(final.id).participant_a == sf1.participant_a

    t = recorder.edit_result(t, sf1.id, 0, 2, now=FIXED_TIME)
    assert t.get_match(final.id).participant_a == sf1.participant_b


def test_edit_after_completion_keeps_played_rounds(recorder, four_players):
    t = start(TournamentFormat.SINGLE_ELIMINATION, four_players)
    sf1, sf2, final = t.matches
    t = recorder.record_result(t, sf1.id, 2, 0, now=FIXED_TIME)
    t = recorder.record_result(t, sf2.id, 2, 0, now=FIXED_TIME)
    t = recorder.record_result(t, final.id, 1, 0, now=FIXED_TIME)
    champion = t.winner

    t = recorder.edit_result(t, sf1.id, 0, 3, now=LATER)

    assert t.get_match(sf1.id).winner == sf1.participant_b
    assert t.get_match(sf1.id).played_at == LATER
    assert t.get_match(final.id).participant_a == sf1.participant_a
    assert t.status == TournamentStatus.COMPLETED
    assert t.winner == champion
    assert t.completed_at == FIXED_TIME


def test_editing_the_final_changes_or_removes_the_champion(recorder, four_players):
    t = start(TournamentFormat.SINGLE_ELIMINATION, four_players)
    sf1, sf2, final = t.matches
    for match_id in (sf1.id, sf2.id, final.id):
        t = recorder.record_result(t, match_id, 1, 0, now=FIXED_TIME)
    final_match = t.get_match(final.id)

    t = recorder.edit_result(t, final.id, 0, 1, now=LATER)
    assert t.winner == final_match.participant_b
    assert t.completed_at == FIXED_TIME

    t = recorder.edit_result(t, final.id, 1, 1, now=LATER)
    assert t.status == TournamentStatus.IN_PROGRESS
    assert t.winner is None
    assert t.completed_at is None
    assert recorder.progression.is_blocked(t)


# ========== Round robin ==========


def test_league_champion_tops_the_table(recorder, four_players):
    t = start(TournamentFormat.ROUND_ROBIN, four_players)
    t = _play(recorder, t, t.matches[0].id)
    assert t.status == TournamentStatus.IN_PROGRESS
    assert recorder.progression.champion(t) is None

    t = play_all(recorder, t, STRENGTH)
    assert t.status == TournamentStatus.COMPLETED
    assert t.winner.id == "p1"


# ========== Hybrid ==========


def test_hybrid_semifinals_wait_for_the_group_stage(recorder, hybrid):
    group = hybrid.matches_in_stage(STAGE_GROUP)
    t = hybrid
    for match in group[:-1]:
        t = _play(recorder, t, match.id)
    assert not any(m.is_ready for m in t.matches_in_stage(STAGE_SEMIFINAL))

    t = _play(recorder, t, group[-1].id)
    sf1, sf2 = t.matches_in_stage(STAGE_SEMIFINAL)
    assert sf1.participant_ids == ("p1", "p4")
    assert sf2.participant_ids == ("p2", "p3")


def test_hybrid_final_round_waits_for_both_semifinals(recorder, hybrid):
    t = _play_group(recorder, hybrid)
    sf1, sf2 = t.matches_in_stage(STAGE_SEMIFINAL)

    t = _play(recorder, t, sf1.id)
    (third,) = t.matches_in_stage(STAGE_THIRD_PLACE)
    (final,) = t.matches_in_stage(STAGE_FINAL)
    assert not third.is_ready
    assert not final.is_ready

    t = _play(recorder, t, sf2.id)
    (third,) = t.matches_in_stage(STAGE_THIRD_PLACE)
    (final,) = t.matches_in_stage(STAGE_FINAL)
    assert third.participant_ids == ("p4", "p3")
    assert final.participant_ids == ("p1", "p2")
    assert final.round == 5

    t = _play(recorder, t, final.id)
    assert t.status == TournamentStatus.IN_PROGRESS

    t = _play(recorder, t, third.id)
    assert t.status == TournamentStatus.COMPLETED
    assert t.winner.id == "p1"


def test_hybrid_odd_field_final_is_in_round_g_plus_two(recorder, five_players):
    t = start(TournamentFormat.HYBRID, five_players)
    t = play_all(recorder, t, STRENGTH)

    (final,) = t.matches_in_stage(STAGE_FINAL)
    assert final.round == 7
    assert t.rounds == [1, 2, 3, 4, 5, 6, 7]
    assert t.status == TournamentStatus.COMPLETED
    assert t.winner.id == "p1"


def test_group_edit_reseeds_unplayed_semifinals(recorder, hybrid):
    t = _play_group(recorder, hybrid)
    (p3_vs_p4,) = [
        m for m in t.matches_in_stage(STAGE_GROUP) if set(m.participant_ids) == {"p3", "p4"}
    ]
    score = (1, 0) if p3_vs_p4.participant_a.id == "p4" else (0, 1)

    t = recorder.edit_result(t, p3_vs_p4.id, *score, now=FIXED_TIME)

    sf1, sf2 = t.matches_in_stage(STAGE_SEMIFINAL)
    assert sf1.participant_ids == ("p1", "p3")
    assert sf2.participant_ids == ("p2", "p4")


def test_drawn_semifinal_blocks_the_final_round(recorder, hybrid):
    engine = recorder.progression
    t = _play_group(recorder, hybrid)
    sf1, sf2 = t.matches_in_stage(STAGE_SEMIFINAL)

    t = recorder.record_result(t, sf1.id, 2, 2, now=FIXED_TIME)
    t = _play(recorder, t, sf2.id)

    blocked_stages = sorted(m.stage for m in engine.blocked_matches(t))
    assert blocked_stages == [STAGE_FINAL, STAGE_THIRD_PLACE]
    assert engine.is_blocked(t)
    assert t.status == TournamentStatus.IN_PROGRESS


def test_drawn_final_leaves_tournament_blocked(recorder, hybrid):
    engine = recorder.progression
    t = _play_group(recorder, hybrid)
    for semifinal in t.matches_in_stage(STAGE_SEMIFINAL):
        t = _play(recorder, t, semifinal.id)
    (third,) = t.matches_in_stage(STAGE_THIRD_PLACE)
    (final,) = t.matches_in_stage(STAGE_FINAL)

    t = _play(recorder, t, third.id)
    t = recorder.record_result(t, final.id, 1, 1, now=FIXED_TIME)

    assert all(m.completed for m in t.matches)
    assert engine.champion(t) is None
    assert [m.id for m in engine.blocked_matches(t)] == [final.id]
    assert engine.is_blocked(t)
    assert t.status == TournamentStatus.IN_PROGRESS


# ========== Engine basics ==========


def test_advance_without_matches_is_a_no_op(recorder, four_players):
    t = Tournament.create("Setup Cup", TournamentFormat.HYBRID, four_players)
    assert recorder.progression.advance(t) is t


@pytest.mark.parametrize("tournament_format", list(TournamentFormat))
def test_advance_is_idempotent(recorder, four_players, tournament_format):
    t = play_all(recorder, start(tournament_format, four_players), STRENGTH)
    assert recorder.progression.advance(t, now=LATER) == t


def test_group_stage_rounds_only_for_hybrid(recorder, four_players):
    engine = recorder.progression
    assert engine.group_stage_rounds(start(TournamentFormat.HYBRID, four_players)) == 3
    assert engine.group_stage_rounds(start(TournamentFormat.ROUND_ROBIN, four_players)) is None
