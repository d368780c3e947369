from petverse.battle.models import (
    PERMANENT_DURATION, BaseStats, DamageOverTime, EffectCategory, Marker, Pet, StatModifier,
    StatusName, status_effect_from_dict,
)


def test_pet_starts_at_full_hp_and_clamps():
    pet = Pet(name="Cinder", type="FIRE", stats=BaseStats(hp=120))
    assert pet.current_hp == 120
    over = Pet(name="Cinder", type="FIRE", stats=BaseStats(hp=120), current_hp=500)
    assert over.current_hp == 120
    low = Pet(name="Cinder", type="FIRE", stats=BaseStats(hp=120), current_hp=-5, level=0)
    assert low.current_hp == 0
    assert low.level == 1
    assert low.is_defeated()


def test_take_damage_and_heal_report_actual_change():
    pet = Pet(name="Ripple", type="WATER", stats=BaseStats(hp=100), current_hp=30)
    assert pet.take_damage(50) == 30
    assert pet.current_hp == 0
    assert pet.heal(150) == 100
    assert pet.current_hp == 100


def test_status_effect_to_dict_uses_camel_case():
    burn = DamageOverTime(name=StatusName.BURN, duration=3, damage_per_turn=4)
    assert burn.to_dict() == {"name": "burn", "duration": 3, "type": "damage", "damagePerTurn": 4}


def test_status_effect_from_dict_rebuilds_variant():
    se = status_effect_from_dict({"name": "defense_down", "duration": 2, "type": "debuff",
                                  "defenseMultiplier": 0.7})
    assert isinstance(se, StatModifier)
    assert se.defense_multiplier == 0.7
    assert se.category == EffectCategory.DEBUFF


def test_slow_speed_reduction_alias():
    se = status_effect_from_dict({"name": "slow", "duration": 2, "type": "debuff", "speedReduction": 0.7})
    assert isinstance(se, StatModifier)
    assert se.speed_multiplier == 0.7


def test_unknown_status_becomes_marker():
    se = status_effect_from_dict({"name": "mystery", "duration": 1})
    assert isinstance(se, Marker)
    assert se.name == "mystery"
    assert se.category == EffectCategory.DEBUFF


def test_permanent_duration_flag():
    se = Marker(name=StatusName.BATTLE_RESET_READY, duration=PERMANENT_DURATION, category=EffectCategory.BUFF)
    assert se.is_permanent


def test_fallen_teammates_counts_team():
    a = Pet(name="A", type="LIGHT", stats=BaseStats(hp=50))
    b = Pet(name="B", type="LIGHT", stats=BaseStats(hp=50), current_hp=0)
    c = Pet(name="C", type="LIGHT", stats=BaseStats(hp=50), current_hp=0)
    team = [a, b, c]
    a.team = team
    assert a.fallen_teammates() == 2
    assert Pet(name="Solo", type="DARK", stats=BaseStats(hp=10)).fallen_teammates() == 0
