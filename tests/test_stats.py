import pytest

from petverse.battle.models import BaseStats, Pet
from petverse.battle.stats import get_effective_stats, round_half_up, technique_damage_multiplier


def _pet(**kw):
    stats = BaseStats(hp=100, dmg=50, range=10.0, spa=1.0, crit_chance=0.1, money_bonus=0.2)
    return Pet(name="Gust", type="AIR", stats=stats, **kw)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4) == 2
    assert round_half_up(0.125, 2) == pytest.approx(0.13)


def test_no_technique_returns_copy():
    pet = _pet()
    eff = get_effective_stats(pet)
    assert eff == pet.stats
    assert eff is not pet.stats


def test_leveled_technique_applies_level_multiplier():
    pet = _pet(technique="Sturdy", technique_level=2)
    eff = get_effective_stats(pet)
    assert eff.dmg == 54
    assert pet.stats.dmg == 50


def test_rate_fields_rounded_to_two_decimals():
    pet = _pet(technique="Scoped", technique_level=2)
    assert get_effective_stats(pet).range == pytest.approx(10.8)


def test_missing_level_uses_highest():
    pet = _pet(technique="Scoped", technique_level=9)
    assert get_effective_stats(pet).range == pytest.approx(11.0)


def test_unknown_technique_is_identity():
    pet = _pet(technique="Nonexistent")
    assert get_effective_stats(pet) == pet.stats
    assert technique_damage_multiplier(pet) == 1.0


def test_technique_damage_multiplier():
    assert technique_damage_multiplier(_pet(technique="Overlord")) == pytest.approx(5.25)
