"""Static catalog loader: element types, techniques and abilities.

The JSON documents under ``petverse/assets/catalog`` are read once and
cached. Lookups never raise for unknown names; they return ``None`` (or an
identity multiplier set) so the combat math can degrade gracefully.
"""
from __future__ import annotations
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from petverse.battle.models import (
    Ability, AbilityType, EffectKind, MultiplierSet, Technique, TechniqueLevel,
)
from petverse.core.errors import CatalogLoadError
from petverse.core.logging import logger
from petverse.core.paths import ABILITIES_FILE, TECHNIQUES_FILE, TYPES_FILE


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise CatalogLoadError(str(path), "file not found")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogLoadError(str(path), str(e)) from e

# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

@lru_cache(maxsize=None)
def all_types() -> Dict[str, Dict[str, Any]]:
    data = _read_json(TYPES_FILE)
    return {k.upper(): v for k, v in data.items()}

def get_type(name: Optional[str]) -> Optional[Dict[str, Any]]:
    if not name:
        return None
    return all_types().get(name.upper())

# ---------------------------------------------------------------------------
# Abilities
# ---------------------------------------------------------------------------

def _effect_kind(raw: Any, ability_id: str) -> Optional[EffectKind]:
    if not raw:
        return None
    try:
        return EffectKind(str(raw).upper())
    except ValueError:
        logger.warn("UnknownEffectKind", ability=ability_id, effect=raw)
        return None

def _ability_from_dict(doc: Dict[str, Any]) -> Ability:
    aid = str(doc["id"])
    params = {
        "hit_count" if k == "hitCount" else k: float(v)
        for k, v in (doc.get("params") or {}).items()
    }
    chance = doc.get("effectChance")
    return Ability(
        id=aid,
        name=doc.get("name", aid),
        element=str(doc.get("element", "")).upper(),
        power=int(doc.get("power", 0) or 0),
        type=AbilityType(str(doc.get("type", "OFFENSIVE")).upper()),
        cooldown=int(doc.get("cooldown", 1) or 0),
        effect=_effect_kind(doc.get("effect"), aid),
        effect_chance=float(chance) if chance is not None else None,
        params=params,
        tier=doc.get("tier", "COMMON"),
        description=doc.get("description", ""),
    )

@lru_cache(maxsize=None)
def all_abilities() -> Dict[str, Ability]:
    """Every ability keyed by id (element sets flattened)."""
    data = _read_json(ABILITIES_FILE)
    out: Dict[str, Ability] = {}
    for element_set in data.values():
        for doc in element_set.values():
            try:
                ability = _ability_from_dict(doc)
            except (KeyError, ValueError, TypeError) as e:
                raise CatalogLoadError(str(ABILITIES_FILE), f"bad ability {doc!r}: {e}") from e
            out[ability.id] = ability
    return out

def get_ability(ability_id: Optional[str]) -> Optional[Ability]:
    if not ability_id:
        return None
    return all_abilities().get(ability_id)

def abilities_by_element(element: str) -> List[Ability]:
    """Abilities listed on the element's type entry, in catalog order."""
    type_doc = get_type(element)
    if not type_doc:
        return []
    by_name = {a.name.lower(): a for a in all_abilities().values()}
    return [by_name[n.lower()] for n in type_doc.get("abilities", []) if n.lower() in by_name]

# ---------------------------------------------------------------------------
# Techniques
# ---------------------------------------------------------------------------

def _technique_from_dict(doc: Dict[str, Any]) -> Technique:
    levels = tuple(
        TechniqueLevel(
            level=int(lv["level"]),
            multipliers=MultiplierSet.from_dict(lv.get("multipliers", {})),
            chance=float(lv.get("chance", 0)),
            effect=lv.get("effect", ""),
        )
        for lv in doc.get("levels", [])
    )
    return Technique(
        name=doc["name"],
        levels=levels,
        multipliers=MultiplierSet.from_dict(doc.get("multipliers", {})),
        chance=float(doc.get("chance", 0)),
        effect=doc.get("effect", ""),
    )

@lru_cache(maxsize=None)
def all_techniques() -> Dict[str, Technique]:
    data = _read_json(TECHNIQUES_FILE)
    try:
        techniques = [_technique_from_dict(d) for d in data]
    except (KeyError, ValueError, TypeError) as e:
        raise CatalogLoadError(str(TECHNIQUES_FILE), str(e)) from e
    return {t.name.lower(): t for t in techniques}

def get_technique(name: Optional[str]) -> Optional[Technique]:
    if not name:
        return None
    return all_techniques().get(name.lower())

def technique_multipliers(name: Optional[str], level: int = 1) -> MultiplierSet:
    """Multipliers for ``name`` at ``level``; identity for unknown techniques."""
    tech = get_technique(name)
    if tech is None:
        return MultiplierSet()
    return tech.multipliers_for(level)

def is_one_placement_technique(name: Optional[str]) -> bool:
    tech = get_technique(name)
    return bool(tech and tech.one_placement)

def is_valid_technique(name: Optional[str], level: Optional[int] = None) -> bool:
    tech = get_technique(name)
    if tech is None:
        return False
    if level is None or not tech.levels:
        return True
    return any(lv.level == level for lv in tech.levels)

def get_technique_info(name: Optional[str], level: Optional[int] = None) -> Optional[Tuple[str, str]]:
    """(display name, effect text) for a technique, level-qualified when leveled."""
    tech = get_technique(name)
    if tech is None:
        return None
    if tech.levels:
        chosen = next((lv for lv in tech.levels if lv.level == level), None)
        if chosen is None:
            chosen = max(tech.levels, key=lambda lv: lv.level)
        return f"{tech.name} {chosen.level}", chosen.effect
    return tech.name, tech.effect

def clear_cache():
    for fn in (all_types, all_abilities, all_techniques):
        fn.cache_clear()

__all__ = [
    "all_types", "get_type", "all_abilities", "get_ability", "abilities_by_element",
    "all_techniques", "get_technique", "technique_multipliers", "is_one_placement_technique",
    "is_valid_technique", "get_technique_info", "clear_cache",
]
