import pytest

from petverse.battle.models import AbilityType, EffectKind
from petverse.data import catalog


def test_six_elements():
    assert set(catalog.all_types()) == {"FIRE", "WATER", "EARTH", "AIR", "LIGHT", "DARK"}
    assert catalog.get_type("fire")["strengths"] == ["AIR"]
    assert catalog.get_type(None) is None


def test_ability_lookup():
    ability = catalog.get_ability("flame_burst")
    assert ability.element == "FIRE"
    assert ability.effect == EffectKind.BURN
    assert ability.effect_chance == pytest.approx(0.4)
    assert ability.type == AbilityType.OFFENSIVE
    assert catalog.get_ability("missing") is None
    assert catalog.get_ability(None) is None


def test_ability_params_are_snake_case():
    assert catalog.get_ability("ember_barrage").params["hit_count"] == 3


def test_plain_ability_has_no_effect():
    ability = catalog.get_ability("radiant_beam")
    assert ability.effect is None
    assert ability.effect_chance is None


def test_abilities_by_element_follow_type_order():
    names = [a.name for a in catalog.abilities_by_element("fire")]
    assert names[:2] == ["Flame Burst", "Eternal Flame"]
    assert all(a.element == "FIRE" for a in catalog.abilities_by_element("FIRE"))
    assert catalog.abilities_by_element("metal") == []


def test_every_effect_kind_is_in_catalog():
    used = {a.effect for a in catalog.all_abilities().values() if a.effect is not None}
    assert used == set(EffectKind)


def test_technique_multipliers():
    assert catalog.technique_multipliers("Scoped", 2).range == pytest.approx(1.08)
    assert catalog.technique_multipliers("scoped", 7).range == pytest.approx(1.1)
    assert catalog.technique_multipliers("Elemental Master").dot_duration == pytest.approx(2.5)
    unknown = catalog.technique_multipliers("Nope")
    assert unknown.dmg is None and not unknown.one_placement


def test_one_placement_techniques():
    for name in ("Overlord", "Avatar", "Glitched"):
        assert catalog.is_one_placement_technique(name)
    assert not catalog.is_one_placement_technique("Sturdy")
    assert not catalog.is_one_placement_technique(None)


def test_technique_validity():
    assert catalog.is_valid_technique("Scoped")
    assert catalog.is_valid_technique("Scoped", 3)
    assert not catalog.is_valid_technique("Scoped", 4)
    assert catalog.is_valid_technique("Golden", 5)
    assert not catalog.is_valid_technique("Plasma")


def test_technique_info():
    assert catalog.get_technique_info("Scoped", 2) == ("Scoped 2", "Range +8%")
    assert catalog.get_technique_info("Scoped") == ("Scoped 3", "Range +10%")
    assert catalog.get_technique_info("Golden") == ("Golden", "Money +12.5%")
    assert catalog.get_technique_info("Plasma") is None


def test_missing_or_broken_catalog_file(tmp_path):
    from petverse.core.errors import CatalogLoadError
    with pytest.raises(CatalogLoadError):
        catalog._read_json(tmp_path / "absent.json")
    broken = tmp_path / "broken.json"
    broken.write_text("[1, 2")
    with pytest.raises(CatalogLoadError) as err:
        catalog._read_json(broken)
    assert err.value.path == str(broken)
