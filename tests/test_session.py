import random

from petverse.battle.core import BattleCore
from petverse.battle.models import BaseStats, EffectCategory, Marker, Pet, StatusName
from petverse.battle.session import BattleSession, Team


def _pet(name, type_="EARTH", hp=200, dmg=30, **kw):
    return Pet(name=name, type=type_, level=5, stats=BaseStats(hp=hp, dmg=dmg), **kw)


class FixedRng:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def _session(player, opponent, seed=1, **kw):
    return BattleSession(Team(player), Team(opponent), BattleCore(rng=random.Random(seed)), **kw)


def test_team_wires_members():
    a, b = _pet("A"), _pet("B")
    team = Team([a, b])
    assert a.team is team.members and b.team is team.members


def test_stunned_pet_recovers_instead():
    player, opponent = _pet("Boulder"), _pet("Pebble")
    player.status_effects.append(Marker(name=StatusName.STUN, duration=1, category=EffectCategory.STUN))
    session = _session([player], [opponent])
    session.step("attack", "attack")
    record = session.history[-1]
    assert record.player_action == "recover"
    assert record.result == "lose"
    assert any("can't move" in m for m in record.messages)


def test_ability_stun_holds_defender_next_turn():
    player, opponent = _pet("Sprout", ability="tremor"), _pet("Pebble")
    session = BattleSession(Team([player]), Team([opponent]), BattleCore(rng=FixedRng(0.0)))
    session.step("ability", "defend")
    assert session.history[-1].ability == "Tremor"
    assert not opponent.has_status(StatusName.STUN)

    session.step("attack", "attack")
    record = session.history[-1]
    assert record.opponent_action == "recover"
    assert record.result == "win"
    assert "Pebble can't move (stun)!" in record.messages

    session.step("attack", "attack")
    assert session.history[-1].opponent_action == "attack"


def test_silenced_pet_attacks_instead():
    player, opponent = _pet("Boulder", ability="stone_skin"), _pet("Pebble")
    player.status_effects.append(Marker(name=StatusName.SILENCE, duration=2, category=EffectCategory.DEBUFF))
    session = _session([player], [opponent])
    session.step("ability", "defend")
    record = session.history[-1]
    assert record.player_action == "attack"
    assert record.ability is None
    assert player.ability_cooldowns.get("stone_skin", 0) == 0


def test_fainted_active_is_switched():
    first, second = _pet("First", current_hp=0), _pet("Second")
    session = _session([first, second], [_pet("Foe")])
    session.step("defend", "defend")
    assert session.player.active() is second
    assert "Second steps in!" in session.history[-1].messages


def test_run_auto_terminates_within_cap():
    player = [_pet("Gust", "AIR", ability="gale_force"), _pet("Boulder", ability="stone_skin")]
    opponent = [_pet("Umbra", "DARK", ability="soul_drain"), _pet("Mire", "WATER", ability="whirlpool")]
    session = _session(player, opponent, seed=11, max_turns=60)
    outcome = session.run_auto()
    assert outcome in {"PLAYER_WIN", "PLAYER_LOSS", "STALEMATE"}
    assert 0 < session.turn_counter <= 60
    assert len(session.history) == session.turn_counter


def test_turn_cap_is_a_stalemate():
    session = _session([_pet("Wall", hp=100000)], [_pet("Rock", hp=100000)], max_turns=3)
    assert session.run_auto() == "STALEMATE"
    assert session.turn_counter == 3
    assert session.winners() == []
    assert session.rewards({"coins": 10, "experience": 1}) is None


def test_defeated_opponent_is_a_win():
    session = _session([_pet("Boulder")], [_pet("Foe", current_hp=0)])
    assert session.step() is None
    assert session.outcome() == "PLAYER_WIN"
    rewards = session.rewards({"coins": 10, "experience": 1})
    assert rewards.coins == 10


def test_same_seed_same_battle():
    def play(seed):
        s = _session([_pet("A", "FIRE", ability="flame_burst")], [_pet("B", "WATER", ability="tidal_mend")],
                     seed=seed, max_turns=40)
        s.run_auto()
        return [(r.player_action, r.opponent_action, r.damage) for r in s.history]
    assert play(5) == play(5)
