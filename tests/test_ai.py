import random

import pytest

from petverse.battle.ai import action_weights, generate_smart_attack
from petverse.battle.models import Action, BaseStats, Pet


class FixedRng:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


def _pet(name="Umbra", hp=100, current_hp=None, ability=None):
    return Pet(name=name, type="DARK", stats=BaseStats(hp=hp), current_hp=current_hp, ability=ability)


def test_base_weights():
    assert action_weights(_pet(), _pet("Foe")) == pytest.approx([0.6, 0.2, 0.2])


def test_low_hp_turns_defensive():
    assert action_weights(_pet(current_hp=20), _pet("Foe", current_hp=10)) == pytest.approx([0.3, 0.5, 0.2])


def test_weak_opponent_turns_aggressive():
    assert action_weights(_pet(), _pet("Foe", current_hp=29)) == pytest.approx([0.8, 0.1, 0.1])


def test_ready_ability_reserves_share():
    weights = action_weights(_pet(ability="soul_drain"), _pet("Foe"))
    assert weights == pytest.approx([0.42, 0.14, 0.14, 0.3])
    assert sum(weights) == pytest.approx(1.0)


def test_ability_on_cooldown_is_not_offered():
    pet = _pet(ability="soul_drain")
    pet.ability_cooldowns["soul_drain"] = 2
    assert len(action_weights(pet, _pet("Foe"))) == 3


@pytest.mark.parametrize("draw,expected", [
    (0.0, Action.ATTACK),
    (0.7, Action.DEFEND),
    (0.95, Action.PARRY),
])
def test_cumulative_pick(draw, expected):
    assert generate_smart_attack(_pet(), _pet("Foe"), rng=FixedRng(draw)) == expected


def test_ability_picked_from_top_of_range():
    assert generate_smart_attack(_pet(ability="soul_drain"), _pet("Foe"), rng=FixedRng(0.9)) == Action.ABILITY


def test_no_ability_never_chosen_without_one():
    rng = random.Random(7)
    picks = {generate_smart_attack(_pet(), _pet("Foe"), rng=rng) for _ in range(200)}
    assert Action.ABILITY not in picks
    assert picks == {Action.ATTACK, Action.DEFEND, Action.PARRY}
