"""Factory helpers for building Pet instances from stored pet documents.

Documents use camelCase keys (``currentHP``, ``techniqueLevel``,
``statusEffects``, ``abilityCooldowns``...). Shared across the battle
service, the CLI demos and tests.
"""
from __future__ import annotations
from typing import Any, Dict, List, Mapping, Sequence

from petverse.core.errors import ValidationError
from .models import BaseStats, Pet, status_effect_from_dict

_STAT_KEYS = {
    "dmg": "dmg",
    "hp": "hp",
    "range": "range",
    "spa": "spa",
    "critChance": "crit_chance",
    "critDamage": "crit_damage",
    "moneyBonus": "money_bonus",
    "cooldown": "cooldown",
}

def stats_from_document(doc: Mapping[str, Any]) -> BaseStats:
    if "hp" not in doc:
        raise ValidationError("stats.hp", "missing")
    kwargs: Dict[str, Any] = {}
    for key, attr in _STAT_KEYS.items():
        if key in doc and doc[key] is not None:
            kwargs[attr] = doc[key]
    try:
        kwargs["hp"] = int(kwargs["hp"])
        if "dmg" in kwargs:
            kwargs["dmg"] = int(kwargs["dmg"])
        return BaseStats(**kwargs)
    except (TypeError, ValueError) as e:
        raise ValidationError("stats", str(e)) from e

def pet_from_document(doc: Mapping[str, Any]) -> Pet:
    for key in ("name", "type", "stats"):
        if not doc.get(key):
            raise ValidationError(key, "missing")
    stats = stats_from_document(doc["stats"])
    try:
        effects = [status_effect_from_dict(se) for se in doc.get("statusEffects") or []]
    except (TypeError, ValueError) as e:
        raise ValidationError("statusEffects", str(e)) from e
    pet_id = doc.get("id", doc.get("_id"))
    return Pet(
        id=str(pet_id) if pet_id is not None else None,
        name=str(doc["name"]),
        type=str(doc["type"]).upper(),
        stats=stats,
        level=int(doc.get("level", 1) or 1),
        current_hp=doc.get("currentHP"),
        technique=doc.get("technique") or None,
        technique_level=int(doc.get("techniqueLevel", 1) or 1),
        ability=doc.get("ability") or None,
        status_effects=effects,
        ability_cooldowns={str(k): int(v) for k, v in (doc.get("abilityCooldowns") or {}).items()},
    )

def pet_to_document(pet: Pet) -> Dict[str, Any]:
    s = pet.stats
    stats: Dict[str, Any] = {
        "dmg": s.dmg, "hp": s.hp, "range": s.range, "spa": s.spa,
        "critChance": s.crit_chance, "critDamage": s.crit_damage, "moneyBonus": s.money_bonus,
    }
    if s.cooldown is not None:
        stats["cooldown"] = s.cooldown
    doc: Dict[str, Any] = {
        "name": pet.name,
        "type": pet.type,
        "level": pet.level,
        "stats": stats,
        "currentHP": pet.current_hp,
        "technique": pet.technique,
        "techniqueLevel": pet.technique_level,
        "ability": pet.ability,
        "statusEffects": [se.to_dict() for se in pet.status_effects],
        "abilityCooldowns": dict(pet.ability_cooldowns),
    }
    if pet.id is not None:
        doc["id"] = pet.id
    return doc

def team_from_documents(docs: Sequence[Mapping[str, Any]]) -> List[Pet]:
    return [pet_from_document(d) for d in docs]

__all__ = ["pet_from_document", "pet_to_document", "stats_from_document", "team_from_documents"]
