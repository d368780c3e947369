"""Turn orchestration.

``BattleCore.evaluate_turn`` resolves one turn between two pets whose
outcome (win / lose / tie / both damaged) has already been decided by the
caller. It computes damage, applies it, runs ability effects and advances
cooldowns and status durations, mutating both pets in place.
"""
from __future__ import annotations
import random
from typing import Callable, Optional, Sequence

from petverse.core.logging import logger
from petverse.data import catalog
from . import actions, ai, effects, rewards
from .damage import calculate_ability_damage, calculate_regular_damage
from .models import Ability, Action, Outcome, Pet, TurnContext, TurnResult
from .stats import get_effective_stats


class BattleCore:
    def __init__(self, rng: Optional[random.Random] = None, message_cb: Optional[Callable[[str], None]] = None):
        self.rng = rng or random.Random()
        self.message_cb = message_cb

    def _msg(self, text: str):
        if self.message_cb: self.message_cb(text)
        else: logger.debug("BattleMessage", text=text)

    # ------------------------------------------------------------------
    # Cooldowns
    # ------------------------------------------------------------------
    def can_use_ability(self, pet: Pet, ability: Optional[Ability]) -> bool:
        return actions.can_use_ability(pet, ability)

    def use_ability(self, pet: Pet, ability: Ability):
        pet.ability_cooldowns[ability.id] = ability.cooldown or 1

    def process_cooldowns(self, pet: Pet):
        for aid, turns in pet.ability_cooldowns.items():
            if turns > 0:
                pet.ability_cooldowns[aid] = turns - 1

    # ------------------------------------------------------------------
    # HP changes
    # ------------------------------------------------------------------
    def apply_damage(self, target: Pet, amount: int):
        if amount <= 0:
            return
        was_standing = not target.is_defeated()
        target.take_damage(amount)
        self._msg(f"{target.name} took {amount} damage.")
        if was_standing and target.is_defeated():
            self._msg(f"{target.name} fainted!")

    def _ready_ability(self, pet: Pet, action: str) -> Optional[Ability]:
        if action != Action.ABILITY or not pet.ability:
            return None
        ability = catalog.get_ability(pet.ability)
        if ability is None or not self.can_use_ability(pet, ability):
            return None
        return ability

    # ------------------------------------------------------------------
    # Turn
    # ------------------------------------------------------------------
    def evaluate_turn(self, player: Pet, opponent: Pet, player_action: str, opponent_action: str,
                      result: str) -> TurnResult:
        player_stats = get_effective_stats(player)
        opponent_stats = get_effective_stats(opponent)

        ability: Optional[Ability] = None
        user: Optional[str] = None
        if player_action == Action.ABILITY and player.ability:
            ability = self._ready_ability(player, player_action)
            if ability is not None:
                user = "player"
                damage = calculate_ability_damage(ability, player, opponent, player_stats, rng=self.rng)
                self.use_ability(player, ability)
            else:
                damage = calculate_regular_damage(player_stats, player, opponent, player_action,
                                                  opponent_action, rng=self.rng)
        elif opponent_action == Action.ABILITY and opponent.ability:
            ability = self._ready_ability(opponent, opponent_action)
            if ability is not None:
                user = "opponent"
                damage = calculate_ability_damage(ability, opponent, player, opponent_stats, rng=self.rng)
                self.use_ability(opponent, ability)
            else:
                damage = calculate_regular_damage(opponent_stats, opponent, player, opponent_action,
                                                  player_action, rng=self.rng)
        else:
            damage = calculate_regular_damage(player_stats, player, opponent, player_action,
                                              opponent_action, rng=self.rng)
        damage = max(0, int(damage))

        if ability is not None:
            self._msg(f"{player.name if user == 'player' else opponent.name} used {ability.name}!")

        if result == Outcome.WIN:
            self.apply_damage(opponent, damage)
        elif result == Outcome.LOSE:
            self.apply_damage(player, damage)
        elif result == Outcome.BOTH_DAMAGED:
            self.apply_damage(opponent, damage)
            self.apply_damage(player, damage)
        player.clamp_hp()
        opponent.clamp_hp()

        context = TurnContext(damage=damage)
        if ability is not None and ability.effect is not None:
            if user == "player":
                attacker, defender, stats = player, opponent, player_stats
            else:
                attacker, defender, stats = opponent, player, opponent_stats
            if effects.apply_ability_effect(ability, attacker, defender, context, stats, rng=self.rng):
                self._msg(f"{ability.name} triggered {ability.effect.value.replace('_', ' ').lower()}!")
            if context.instant_kill:
                self._msg(f"{defender.name} was struck down instantly!")

        self.process_cooldowns(player)
        self.process_cooldowns(opponent)
        for pet in (player, opponent):
            for name, delta in effects.tick_status_effects(pet, rng=self.rng):
                if delta < 0:
                    self._msg(f"{pet.name} is hurt by {name.replace('_', ' ')} ({delta}).")
                else:
                    self._msg(f"{pet.name} restored {delta} HP from {name.replace('_', ' ')}.")

        logger.debug("TurnResolved", player=player.name, opponent=opponent.name,
                     player_action=str(getattr(player_action, "value", player_action)),
                     opponent_action=str(getattr(opponent_action, "value", opponent_action)),
                     result=str(getattr(result, "value", result)), damage=damage,
                     ability=ability.id if ability else None)
        return TurnResult(
            player=player,
            opponent=opponent,
            damage=damage,
            player_action=player_action,
            opponent_action=opponent_action,
            result=result,
            ability_used=ability,
            ability_user=user,
            context=context,
        )

    def evaluate_player_battle(self, player: Pet, opponent: Pet, player_action: str) -> TurnResult:
        """AI picks the opponent's action, the matrix decides, then the turn runs."""
        opponent_action = ai.generate_smart_attack(opponent, player, rng=self.rng)
        result = actions.determine_battle_result(player_action, opponent_action)
        return self.evaluate_turn(player, opponent, player_action, opponent_action, result)

    def recover(self, pets: Sequence[Pet]):
        rewards.recover_pets(*pets)


__all__ = ["BattleCore"]
