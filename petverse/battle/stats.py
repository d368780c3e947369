"""Effective stat resolution (base stats x technique multipliers)."""
from __future__ import annotations
from dataclasses import replace
import math

from petverse.data import catalog
from .models import BaseStats, Pet

_RATE_FIELDS = ("spa", "range", "crit_chance", "crit_damage", "money_bonus")


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def get_effective_stats(pet: Pet) -> BaseStats:
    """Return the pet's stats with its technique applied for the current level.

    Never mutates ``pet``; a pet without a (known) technique gets a copy of
    its base stats.
    """
    base = pet.stats
    if not pet.technique:
        return replace(base)
    mult = catalog.technique_multipliers(pet.technique, pet.technique_level or 1)
    changes = {}
    if mult.dmg is not None:
        changes["dmg"] = int(round_half_up(base.dmg * mult.dmg))
    if mult.cooldown is not None and base.cooldown is not None:
        changes["cooldown"] = int(round_half_up(base.cooldown * mult.cooldown))
    for name in _RATE_FIELDS:
        factor = getattr(mult, name)
        if factor is not None:
            changes[name] = round_half_up(getattr(base, name) * factor, 2)
    return replace(base, **changes)


def technique_damage_multiplier(pet: Pet) -> float:
    return catalog.technique_multipliers(pet.technique, pet.technique_level or 1).dmg or 1.0


__all__ = ["get_effective_stats", "technique_damage_multiplier", "round_half_up"]
