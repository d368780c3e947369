"""Opponent action selection.

Weighted random pick over attack/defend/parry, nudged by HP thresholds; a
ready ability reserves a fixed share of the probability mass.
"""
from __future__ import annotations
import random
from typing import List, Optional

from petverse.data import catalog
from .actions import can_use_ability
from .models import Action, Pet

_RNG = random.Random()

LOW_HP = 0.3
ABILITY_WEIGHT = 0.3

BASE_WEIGHTS = (0.6, 0.2, 0.2)
DEFENSIVE_WEIGHTS = (0.3, 0.5, 0.2)
AGGRESSIVE_WEIGHTS = (0.8, 0.1, 0.1)


def _ability_ready(pet: Pet) -> bool:
    if not pet.ability:
        return False
    return can_use_ability(pet, catalog.get_ability(pet.ability))


def action_weights(pet: Pet, opponent: Pet) -> List[float]:
    """Weights for [attack, defend, parry] (plus ability when ready)."""
    weights = list(BASE_WEIGHTS)
    if (pet.current_hp or 0) < pet.max_hp * LOW_HP:
        weights = list(DEFENSIVE_WEIGHTS)
    elif (opponent.current_hp or 0) < opponent.max_hp * LOW_HP:
        weights = list(AGGRESSIVE_WEIGHTS)
    if _ability_ready(pet):
        weights = [w * (1 - ABILITY_WEIGHT) for w in weights]
        weights.append(ABILITY_WEIGHT)
    return weights


def generate_smart_attack(pet: Pet, opponent: Pet, rng: Optional[random.Random] = None) -> Action:
    rng = rng or _RNG
    choices = [Action.ATTACK, Action.DEFEND, Action.PARRY, Action.ABILITY]
    draw = rng.random()
    cumulative = 0.0
    for action, weight in zip(choices, action_weights(pet, opponent)):
        cumulative += weight
        if draw <= cumulative:
            return action
    return Action.ATTACK


__all__ = ["generate_smart_attack", "action_weights"]
