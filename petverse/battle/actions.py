"""Action outcome matrix and action pools."""
from __future__ import annotations
from typing import Dict, List, Optional

from petverse.data import catalog
from .models import Action, Ability, Outcome, Pet

A = Action
_MATRIX: Dict[Action, Dict[Action, Outcome]] = {
    A.ATTACK: {
        A.ATTACK: Outcome.BOTH_DAMAGED, A.DEFEND: Outcome.WIN, A.PARRY: Outcome.LOSE,
        A.ABILITY: Outcome.WIN, A.RECOVER: Outcome.WIN,
    },
    A.DEFEND: {
        A.ATTACK: Outcome.LOSE, A.DEFEND: Outcome.TIE, A.PARRY: Outcome.WIN,
        A.ABILITY: Outcome.LOSE, A.RECOVER: Outcome.TIE,
    },
    A.PARRY: {
        A.ATTACK: Outcome.WIN, A.DEFEND: Outcome.LOSE, A.PARRY: Outcome.BOTH_DAMAGED,
        A.ABILITY: Outcome.WIN, A.RECOVER: Outcome.WIN,
    },
    A.ABILITY: {
        A.ATTACK: Outcome.LOSE, A.DEFEND: Outcome.WIN, A.PARRY: Outcome.LOSE,
        A.ABILITY: Outcome.BOTH_DAMAGED, A.RECOVER: Outcome.WIN,
    },
    A.RECOVER: {
        A.ATTACK: Outcome.LOSE, A.DEFEND: Outcome.TIE, A.PARRY: Outcome.LOSE,
        A.ABILITY: Outcome.LOSE, A.RECOVER: Outcome.TIE,
    },
}

BASIC_ACTIONS = [A.ATTACK.value, A.DEFEND.value, A.PARRY.value, A.ABILITY.value]
_WEIGHTED_ACTIONS = ["attack", "attack", "defend", "defend", "parry", "parry", "ability"]


def _as_action(value) -> Optional[Action]:
    try:
        return Action(value)
    except ValueError:
        return None


def determine_battle_result(player_action: str, opponent_action: str) -> Outcome:
    """Outcome from the player's side; unknown pairs count as both damaged."""
    a, b = _as_action(player_action), _as_action(opponent_action)
    if a is None or b is None:
        return Outcome.BOTH_DAMAGED
    return _MATRIX[a].get(b, Outcome.BOTH_DAMAGED)


def can_use_ability(pet: Pet, ability: Optional[Ability]) -> bool:
    if ability is None:
        return False
    return not pet.ability_cooldowns.get(ability.id, 0) > 0


def get_available_actions(pet: Pet) -> List[str]:
    # A ready ability is listed twice; clients read the trailing entry.
    available = list(BASIC_ACTIONS)
    if pet.ability and can_use_ability(pet, catalog.get_ability(pet.ability)):
        available.append(A.ABILITY.value)
    return available


def get_weighted_actions() -> List[str]:
    return list(_WEIGHTED_ACTIONS)


__all__ = [
    "determine_battle_result", "can_use_ability", "get_available_actions",
    "get_weighted_actions", "BASIC_ACTIONS",
]
