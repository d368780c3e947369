"""Higher-level battle session orchestration for team battles.

Runs repeated turns on top of :class:`BattleCore` until one team has no
standing pets or the turn cap is reached. Control statuses are enforced
here: a stunned, sleeping or delayed pet stands still (its action becomes
``recover``) and a silenced pet's ability choice becomes a plain attack.
One-turn controls applied by an ability tick away inside the turn that
applied them, so the session holds them per pet until that pet next acts.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from petverse.core.logging import logger
from .actions import determine_battle_result
from .ai import generate_smart_attack
from .core import BattleCore
from .models import Action, Pet, StatusName, TurnResult
from .rewards import BattleRewards, calculate_battle_rewards

DEFAULT_MAX_TURNS = 100

_IMMOBILIZING = (StatusName.STUN, StatusName.SLEEP, StatusName.TURN_DELAY)


@dataclass
class Team:
    members: List[Pet]
    active_index: int = 0

    def __post_init__(self):
        for m in self.members:
            m.team = self.members

    def active(self) -> Pet:
        return self.members[self.active_index]

    def has_available(self) -> bool:
        return any((m.current_hp or 0) > 0 for m in self.members)

    def auto_switch_if_fainted(self) -> Optional[Pet]:
        if (self.active().current_hp or 0) > 0:
            return None
        for i, m in enumerate(self.members):
            if (m.current_hp or 0) > 0:
                self.active_index = i
                return m
        return None


@dataclass
class TurnRecord:
    """Snapshot of one resolved turn, for logs and rendering."""
    number: int
    player: str
    opponent: str
    player_type: str
    opponent_type: str
    player_action: str
    opponent_action: str
    result: str
    damage: int
    ability: Optional[str]
    player_hp: Tuple[int, int]
    opponent_hp: Tuple[int, int]
    player_status: List[str] = field(default_factory=list)
    opponent_status: List[str] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)


def _status_names(pet: Pet) -> List[str]:
    return [str(getattr(se.name, "value", se.name)) for se in pet.status_effects]


def _plain(value: Any) -> str:
    return str(getattr(value, "value", value))


class BattleSession:
    def __init__(self, player: Team, opponent: Team, core: Optional[BattleCore] = None, *,
                 max_turns: int = DEFAULT_MAX_TURNS, battle_id: Optional[str] = None):
        self.player = player
        self.opponent = opponent
        self.core = core or BattleCore()
        self.max_turns = max_turns
        self.battle_id = battle_id or "battle"
        self.turn_counter = 0
        self.log: List[str] = []
        self.history: List[TurnRecord] = []
        self._turn_messages: List[str] = []
        self._held: Dict[int, StatusName] = {}
        self._log = logger.bind(battle_id=self.battle_id)

        def _capture(msg: str):
            self.log.append(msg)
            self._turn_messages.append(msg)
        self.core.message_cb = _capture

    def is_over(self) -> bool:
        return (not self.player.has_available()) or (not self.opponent.has_available())

    def _constrain(self, pet: Pet, action: str) -> str:
        name = self._held.pop(id(pet), None)
        if name is None:
            name = next((n for n in _IMMOBILIZING if pet.has_status(n)), None)
        if name is not None:
            self.core._msg(f"{pet.name} can't move ({name.value.replace('_', ' ')})!")
            return Action.RECOVER.value
        if action == Action.ABILITY and pet.has_status(StatusName.SILENCE):
            self.core._msg(f"{pet.name} is silenced and attacks instead!")
            return Action.ATTACK.value
        return action

    def step(self, player_action: Optional[str] = None,
             opponent_action: Optional[str] = None) -> Optional[TurnResult]:
        self._turn_messages = []
        for team in (self.player, self.opponent):
            switched = team.auto_switch_if_fainted()
            if switched is not None:
                self.core._msg(f"{switched.name} steps in!")
        if self.is_over():
            return None
        p, o = self.player.active(), self.opponent.active()
        rng = self.core.rng
        pa = _plain(player_action or generate_smart_attack(p, o, rng=rng))
        oa = _plain(opponent_action or generate_smart_attack(o, p, rng=rng))
        pa = self._constrain(p, pa)
        oa = self._constrain(o, oa)
        result = determine_battle_result(pa, oa)
        turn = self.core.evaluate_turn(p, o, pa, oa, result)
        self.turn_counter += 1
        if turn.context.controlled:
            target = o if turn.ability_user == "player" else p
            self._held[id(target)] = turn.context.controlled[-1]

        if turn.ability_used is not None:
            self._log.info("AbilityUsed", turn=self.turn_counter, ability=turn.ability_used.id,
                           user=turn.ability_user)
        for pet in (p, o):
            if pet.is_defeated():
                self._log.info("PetDefeated", turn=self.turn_counter, pet=pet.name)
        self.history.append(TurnRecord(
            number=self.turn_counter,
            player=p.name, opponent=o.name,
            player_type=p.type, opponent_type=o.type,
            player_action=pa, opponent_action=oa,
            result=_plain(result),
            damage=turn.damage,
            ability=turn.ability_used.name if turn.ability_used else None,
            player_hp=(p.current_hp or 0, p.max_hp),
            opponent_hp=(o.current_hp or 0, o.max_hp),
            player_status=_status_names(p),
            opponent_status=_status_names(o),
            messages=list(self._turn_messages),
        ))
        return turn

    def run_auto(self, max_turns: Optional[int] = None) -> str:
        if max_turns is not None:
            self.max_turns = max_turns
        while not self.is_over() and self.turn_counter < self.max_turns:
            self.step()
        outcome = self.outcome()
        self._log.info("BattleFinished", outcome=outcome, turns=self.turn_counter)
        return outcome

    def outcome(self) -> str:
        if self.player.has_available() and not self.opponent.has_available():
            return "PLAYER_WIN"
        if self.opponent.has_available() and not self.player.has_available():
            return "PLAYER_LOSS"
        if not self.player.has_available() and not self.opponent.has_available():
            return "STALEMATE"
        if self.turn_counter >= self.max_turns:
            return "STALEMATE"
        return "ONGOING"

    def winners(self) -> List[Pet]:
        outcome = self.outcome()
        if outcome == "PLAYER_WIN":
            return list(self.player.members)
        if outcome == "PLAYER_LOSS":
            return list(self.opponent.members)
        return []

    def rewards(self, base: Union[BattleRewards, Mapping[str, Any]]) -> Optional[BattleRewards]:
        """Rewards for the winning team; None while undecided or on a stalemate."""
        winners = self.winners()
        if not winners:
            return None
        return calculate_battle_rewards(base, winners)


__all__ = ["BattleSession", "Team", "TurnRecord", "DEFAULT_MAX_TURNS"]
