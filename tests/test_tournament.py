from itertools import combinations

from petverse.battle.tournament import schedule_rounds


def _pairs(matches):
    return {frozenset((m.home, m.away)) for m in matches if not m.is_bye}


def test_even_field_meets_everyone_once():
    matches = schedule_rounds(4)
    assert len(matches) == 6
    assert {m.round for m in matches} == {1, 2, 3}
    assert _pairs(matches) == {frozenset(p) for p in combinations(range(4), 2)}


def test_each_player_plays_once_per_round():
    matches = schedule_rounds(6)
    for rnd in range(1, 6):
        players = [p for m in matches if m.round == rnd for p in (m.home, m.away)]
        assert sorted(players) == list(range(6))


def test_odd_field_gets_byes():
    matches = schedule_rounds(5)
    byes = [m for m in matches if m.is_bye]
    assert len(byes) == 5
    assert _pairs(matches) == {frozenset(p) for p in combinations(range(5), 2)}
    sitting_out = sorted(m.home if m.away is None else m.away for m in byes)
    assert sitting_out == list(range(5))


def test_too_few_players():
    assert schedule_rounds(0) == []
    assert schedule_rounds(1) == []
