import pytest

from petverse.battle.factory import pet_from_document, pet_to_document, team_from_documents
from petverse.battle.models import DamageOverTime, StatusName
from petverse.core.errors import ValidationError


def _doc(**extra):
    doc = {"name": "Cinder", "type": "fire", "level": 7,
           "stats": {"hp": 120, "dmg": 30, "critChance": 0.1, "moneyBonus": 0.05}}
    doc.update(extra)
    return doc


def test_minimal_document():
    pet = pet_from_document(_doc())
    assert pet.type == "FIRE"
    assert pet.level == 7
    assert pet.current_hp == 120
    assert pet.stats.crit_chance == 0.1
    assert pet.stats.money_bonus == 0.05
    assert pet.technique_level == 1


def test_status_effects_and_cooldowns_restored():
    pet = pet_from_document(_doc(
        _id="abc123",
        currentHP=40,
        statusEffects=[{"name": "burn", "duration": 2, "type": "damage", "damagePerTurn": 5}],
        abilityCooldowns={"flame_burst": 2},
    ))
    assert pet.id == "abc123"
    assert pet.current_hp == 40
    assert isinstance(pet.status_effects[0], DamageOverTime)
    assert pet.status_effects[0].name == StatusName.BURN
    assert pet.ability_cooldowns == {"flame_burst": 2}


@pytest.mark.parametrize("missing", ["name", "type", "stats"])
def test_missing_required_field(missing):
    doc = _doc()
    del doc[missing]
    with pytest.raises(ValidationError) as err:
        pet_from_document(doc)
    assert err.value.field == missing


def test_missing_hp():
    with pytest.raises(ValidationError):
        pet_from_document(_doc(stats={"dmg": 10}))


def test_bad_stat_value():
    with pytest.raises(ValidationError):
        pet_from_document(_doc(stats={"hp": "lots"}))


def test_to_document_uses_camel_case():
    pet = pet_from_document(_doc(technique="Sturdy", techniqueLevel=2, currentHP=50))
    doc = pet_to_document(pet)
    assert doc["currentHP"] == 50
    assert doc["techniqueLevel"] == 2
    assert doc["stats"]["critChance"] == 0.1
    assert doc["statusEffects"] == []
    assert "id" not in doc


def test_team_from_documents():
    team = team_from_documents([_doc(), _doc(name="Ember")])
    assert [p.name for p in team] == ["Cinder", "Ember"]
