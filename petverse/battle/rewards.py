"""Post-battle rewards, team validation and recovery."""
from __future__ import annotations
from dataclasses import dataclass
import math
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Union

from petverse.data import catalog
from .models import Pet
from .stats import get_effective_stats


@dataclass(frozen=True)
class BattleRewards:
    coins: int
    experience: int
    bonus_multiplier: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"coins": self.coins, "experience": self.experience, "bonusMultiplier": self.bonus_multiplier}


@dataclass(frozen=True)
class TeamValidation:
    valid: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


def calculate_battle_rewards(base_reward: Union[BattleRewards, Mapping[str, Any]],
                             winning_pets: Iterable[Pet]) -> BattleRewards:
    """Scale coins by the winners' summed money bonus; experience is unscaled."""
    if isinstance(base_reward, BattleRewards):
        coins, experience = base_reward.coins, base_reward.experience
    else:
        coins = int(base_reward.get("coins", 0))
        experience = int(base_reward.get("experience", 0))
    multiplier = 1.0
    for pet in winning_pets:
        multiplier += get_effective_stats(pet).money_bonus or 0
    return BattleRewards(coins=math.floor(coins * multiplier), experience=experience,
                         bonus_multiplier=multiplier)


def validate_battle_team(pets: Sequence[Pet]) -> TeamValidation:
    solo = [p for p in pets if p.technique and catalog.is_one_placement_technique(p.technique)]
    if solo and len(pets) > 1:
        pet = solo[0]
        return TeamValidation(
            False,
            f'Pet "{pet.name}" has {pet.technique} technique and must battle alone (ONE PLACEMENT)',
        )
    return TeamValidation(True)


def recover_pets(*pets: Pet):
    """Full HP and no statuses; cooldowns are left alone."""
    for pet in pets:
        pet.current_hp = pet.max_hp
        pet.status_effects = []


__all__ = ["BattleRewards", "TeamValidation", "calculate_battle_rewards", "validate_battle_team", "recover_pets"]
