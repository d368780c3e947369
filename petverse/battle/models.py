"""Battle domain model.

Pets (combatants), catalog entries (abilities, techniques), the status
effect variants the effect engine pushes onto pets, and the per-turn
context/result records.

Status effects are one dataclass per payload shape. ``to_dict`` produces the
camelCase document form used by stored pets and downstream formatters;
``status_effect_from_dict`` rebuilds the right variant from it.
"""
from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

PERMANENT_DURATION = 999


class Action(str, Enum):
    ATTACK = "attack"
    DEFEND = "defend"
    PARRY = "parry"
    ABILITY = "ability"
    RECOVER = "recover"


class Outcome(str, Enum):
    WIN = "win"
    LOSE = "lose"
    TIE = "tie"
    BOTH_DAMAGED = "both damaged"


class EffectCategory(str, Enum):
    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"
    STUN = "stun"


class AbilityType(str, Enum):
    OFFENSIVE = "OFFENSIVE"
    DEFENSIVE = "DEFENSIVE"
    SUPPORT = "SUPPORT"
    UTILITY = "UTILITY"


class EffectKind(str, Enum):
    # damage over time
    BURN = "BURN"
    PERMANENT_BURN = "PERMANENT_BURN"
    DOT = "DOT"
    DAMAGE_OVER_TIME = "DAMAGE_OVER_TIME"
    ESCALATING_DOT = "ESCALATING_DOT"
    # healing
    HEAL = "HEAL"
    FULL_HEAL = "FULL_HEAL"
    HEAL_OVER_TIME = "HEAL_OVER_TIME"
    # stat modifiers
    DEFENSE_UP = "DEFENSE_UP"
    DEFENSE_DOWN = "DEFENSE_DOWN"
    ATTACK_DOWN = "ATTACK_DOWN"
    SLOW = "SLOW"
    SPEED_UP = "SPEED_UP"
    EVASION_UP = "EVASION_UP"
    ACCURACY_DOWN = "ACCURACY_DOWN"
    STAT_REDUCTION = "STAT_REDUCTION"
    PERMANENT_STAT_REDUCTION = "PERMANENT_STAT_REDUCTION"
    DAMAGE_REDUCTION = "DAMAGE_REDUCTION"
    DAMAGE_IMMUNITY = "DAMAGE_IMMUNITY"
    IMMORTALITY = "IMMORTALITY"
    BARRIER = "BARRIER"
    HEALING_REDUCTION = "HEALING_REDUCTION"
    HEAL_REVERSAL = "HEAL_REVERSAL"
    DAMAGE_AMPLIFICATION = "DAMAGE_AMPLIFICATION"
    TRANSFORMATION = "TRANSFORMATION"
    BATTLE_RESET = "BATTLE_RESET"
    # control
    STUN = "STUN"
    SLEEP = "SLEEP"
    CONFUSION = "CONFUSION"
    TURN_DELAY = "TURN_DELAY"
    SILENCE = "SILENCE"
    # removal
    CLEANSE = "CLEANSE"
    BUFF_REMOVAL = "BUFF_REMOVAL"
    RANDOM_DEBUFF = "RANDOM_DEBUFF"
    # team
    RESURRECTION = "RESURRECTION"
    # meta
    LIFE_STEAL = "LIFE_STEAL"
    EXECUTE = "EXECUTE"
    SCALING_DAMAGE = "SCALING_DAMAGE"
    MULTI_HIT = "MULTI_HIT"
    INSTANT_KILL = "INSTANT_KILL"
    TRUE_DAMAGE = "TRUE_DAMAGE"
    DEFENSE_IGNORE = "DEFENSE_IGNORE"
    TYPE_ADVANTAGE = "TYPE_ADVANTAGE"
    CRITICAL_GUARANTEE = "CRITICAL_GUARANTEE"


class StatusName(str, Enum):
    BURN = "burn"
    PERMANENT_BURN = "permanent_burn"
    DAMAGE_OVER_TIME = "damage_over_time"
    ESCALATING_DOT = "escalating_dot"
    HEAL_OVER_TIME = "heal_over_time"
    STUN = "stun"
    SLEEP = "sleep"
    CONFUSION = "confusion"
    TURN_DELAY = "turn_delay"
    SILENCE = "silence"
    DEFENSE_UP = "defense_up"
    DEFENSE_DOWN = "defense_down"
    ATTACK_DOWN = "attack_down"
    SLOW = "slow"
    SPEED_UP = "speed_up"
    EVASION_UP = "evasion_up"
    ACCURACY_DOWN = "accuracy_down"
    STAT_REDUCTION = "stat_reduction"
    PERMANENT_STAT_REDUCTION = "permanent_stat_reduction"
    DAMAGE_REDUCTION = "damage_reduction"
    DAMAGE_IMMUNITY = "damage_immunity"
    IMMORTALITY = "immortality"
    BARRIER = "barrier"
    HEALING_REDUCTION = "healing_reduction"
    HEAL_REVERSAL = "heal_reversal"
    DAMAGE_AMPLIFICATION = "damage_amplification"
    TRANSFORMATION = "transformation"
    CRITICAL_GUARANTEE = "critical_guarantee"
    RESURRECTION_BOOST = "resurrection_boost"
    BATTLE_RESET_READY = "battle_reset_ready"


# ---------------------------------------------------------------------------
# Status effects
# ---------------------------------------------------------------------------

def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")

def _snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()

def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


@dataclass
class StatusEffect:
    name: StatusName
    duration: int
    category: EffectCategory

    @property
    def is_permanent(self) -> bool:
        return self.duration >= PERMANENT_DURATION

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": _plain(self.name),
            "duration": self.duration,
            "type": _plain(self.category),
        }
        for f in fields(self)[3:]:
            data[_camel(f.name)] = getattr(self, f.name)
        return data


@dataclass
class DamageOverTime(StatusEffect):
    category: EffectCategory = EffectCategory.DAMAGE
    damage_per_turn: int = 0


@dataclass
class EscalatingDamage(StatusEffect):
    category: EffectCategory = EffectCategory.DAMAGE
    base_damage: int = 0
    current_turn: int = 0


@dataclass
class HealOverTime(StatusEffect):
    category: EffectCategory = EffectCategory.HEAL
    heal_per_turn: int = 0


@dataclass
class StatModifier(StatusEffect):
    attack_multiplier: float = 1.0
    defense_multiplier: float = 1.0
    speed_multiplier: float = 1.0


@dataclass
class Confusion(StatusEffect):
    category: EffectCategory = EffectCategory.DEBUFF
    self_damage_chance: float = 0.3


@dataclass
class TurnDelay(StatusEffect):
    category: EffectCategory = EffectCategory.DEBUFF
    turns_delayed: int = 1


@dataclass
class DamageReduction(StatusEffect):
    category: EffectCategory = EffectCategory.BUFF
    damage_reduction: float = 0.5


@dataclass
class EvasionBonus(StatusEffect):
    category: EffectCategory = EffectCategory.BUFF
    evasion_bonus: float = 0.5


@dataclass
class AccuracyReduction(StatusEffect):
    category: EffectCategory = EffectCategory.DEBUFF
    accuracy_reduction: float = 0.6


@dataclass
class HealingReduction(StatusEffect):
    category: EffectCategory = EffectCategory.DEBUFF
    healing_reduction: float = 0.8


@dataclass
class DamageAmplification(StatusEffect):
    category: EffectCategory = EffectCategory.DEBUFF
    damage_taken_multiplier: float = 1.2


@dataclass
class Transformation(StatusEffect):
    category: EffectCategory = EffectCategory.BUFF
    evasion_bonus: float = 0.4
    critical_chance: float = 0.3


@dataclass
class CriticalGuarantee(StatusEffect):
    category: EffectCategory = EffectCategory.BUFF
    guaranteed_critical: bool = True


@dataclass
class Marker(StatusEffect):
    """Payload-free status (stun, sleep, silence, immunity, ...)."""


_VARIANT_BY_NAME: Dict[str, Type[StatusEffect]] = {
    "burn": DamageOverTime,
    "permanent_burn": DamageOverTime,
    "damage_over_time": DamageOverTime,
    "escalating_dot": EscalatingDamage,
    "heal_over_time": HealOverTime,
    "defense_up": StatModifier,
    "defense_down": StatModifier,
    "attack_down": StatModifier,
    "slow": StatModifier,
    "speed_up": StatModifier,
    "stat_reduction": StatModifier,
    "permanent_stat_reduction": StatModifier,
    "resurrection_boost": StatModifier,
    "confusion": Confusion,
    "turn_delay": TurnDelay,
    "damage_reduction": DamageReduction,
    "barrier": DamageReduction,
    "evasion_up": EvasionBonus,
    "accuracy_down": AccuracyReduction,
    "healing_reduction": HealingReduction,
    "damage_amplification": DamageAmplification,
    "transformation": Transformation,
    "critical_guarantee": CriticalGuarantee,
}

# Older documents stored slow as a bare speed reduction factor.
_KEY_ALIASES = {"speed_reduction": "speed_multiplier"}


def status_effect_from_dict(data: Mapping[str, Any]) -> StatusEffect:
    raw_name = str(data.get("name", ""))
    try:
        name: Any = StatusName(raw_name)
    except ValueError:
        name = raw_name
    cls = _VARIANT_BY_NAME.get(raw_name, Marker)
    known = {f.name for f in fields(cls)}
    kwargs: Dict[str, Any] = {"name": name, "duration": int(data.get("duration", 0))}
    raw_category = data.get("type") or data.get("category")
    if raw_category:
        kwargs["category"] = EffectCategory(raw_category)
    elif cls is Marker or cls is StatModifier:
        kwargs["category"] = EffectCategory.DEBUFF
    for key, value in data.items():
        attr = _KEY_ALIASES.get(_snake(key), _snake(key))
        if attr in known and attr not in ("name", "duration", "category"):
            kwargs[attr] = value
    return cls(**kwargs)


# ---------------------------------------------------------------------------
# Catalog entries
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MultiplierSet:
    dmg: Optional[float] = None
    spa: Optional[float] = None
    range: Optional[float] = None
    cooldown: Optional[float] = None
    crit_chance: Optional[float] = None
    crit_damage: Optional[float] = None
    money_bonus: Optional[float] = None
    dot_duration: Optional[float] = None
    dot_damage: Optional[float] = None
    one_placement: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MultiplierSet":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            attr = _snake(key)
            if attr in known:
                kwargs[attr] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class TechniqueLevel:
    level: int
    multipliers: MultiplierSet
    chance: float = 0.0
    effect: str = ""


@dataclass(frozen=True)
class Technique:
    name: str
    levels: Tuple[TechniqueLevel, ...] = ()
    multipliers: MultiplierSet = field(default_factory=MultiplierSet)
    chance: float = 0.0
    effect: str = ""

    def multipliers_for(self, level: int) -> MultiplierSet:
        """Multiplier set for ``level``; the highest defined level when absent."""
        if not self.levels:
            return self.multipliers
        for lv in self.levels:
            if lv.level == level:
                return lv.multipliers
        return max(self.levels, key=lambda lv: lv.level).multipliers

    @property
    def one_placement(self) -> bool:
        if self.multipliers.one_placement:
            return True
        return any(lv.multipliers.one_placement for lv in self.levels)


@dataclass(frozen=True)
class Ability:
    id: str
    name: str
    element: str
    power: int = 0
    type: AbilityType = AbilityType.OFFENSIVE
    cooldown: int = 1
    effect: Optional[EffectKind] = None
    effect_chance: Optional[float] = None
    params: Mapping[str, float] = field(default_factory=dict)
    tier: str = "COMMON"
    description: str = ""


# ---------------------------------------------------------------------------
# Combatants
# ---------------------------------------------------------------------------

@dataclass
class BaseStats:
    hp: int
    dmg: int = 10
    range: float = 0.0
    spa: float = 1.0           # seconds per attack
    crit_chance: float = 0.0
    crit_damage: float = 1.5
    money_bonus: float = 0.0
    cooldown: Optional[int] = None


@dataclass
class Pet:
    name: str
    type: str
    stats: BaseStats
    level: int = 1
    current_hp: Optional[int] = None  # None means full HP
    technique: Optional[str] = None
    technique_level: int = 1
    ability: Optional[str] = None
    status_effects: List[StatusEffect] = field(default_factory=list)
    ability_cooldowns: Dict[str, int] = field(default_factory=dict)
    id: Optional[str] = None
    # Sibling combatants for team-wide effects; may include this pet.
    team: Optional[List["Pet"]] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.level < 1:
            self.level = 1
        if self.current_hp is None:
            self.current_hp = self.max_hp
        self.clamp_hp()

    @property
    def max_hp(self) -> int:
        return int(self.stats.hp)

    def clamp_hp(self):
        self.current_hp = max(0, min(int(self.current_hp or 0), self.max_hp))

    def is_defeated(self) -> bool:
        return (self.current_hp or 0) <= 0

    def hp_ratio(self) -> float:
        return (self.current_hp or 0) / self.max_hp if self.max_hp > 0 else 0.0

    def take_damage(self, amount: int) -> int:
        old = int(self.current_hp or 0)
        self.current_hp = max(0, old - int(amount))
        return old - self.current_hp

    def heal(self, amount: int) -> int:
        old = int(self.current_hp or 0)
        self.current_hp = min(self.max_hp, old + int(amount))
        return self.current_hp - old

    def has_status(self, name: str) -> bool:
        return any(se.name == name for se in self.status_effects)

    def fallen_teammates(self) -> int:
        if not self.team:
            return 0
        return sum(1 for p in self.team if (p.current_hp or 0) <= 0)


# ---------------------------------------------------------------------------
# Per-turn records
# ---------------------------------------------------------------------------

@dataclass
class TurnContext:
    """Flags written by the effect engine during one turn.

    ``damage`` is the damage already dealt this turn (read by life steal).
    ``controlled`` lists the stun, sleep and delay statuses pushed onto the
    defender; they tick away before the turn ends, so :class:`BattleSession`
    reads this list to hold the defender still on its next action.

    The multiplier and meta flags (``scaling_multiplier``, ``execute_multiplier``,
    ``multi_hit``, ``hit_count``, ``true_damage``, ``ignore_defense``,
    ``type_advantage``) are advisory. Effects run after damage has been dealt,
    so these only describe what the ability did; the engine never reapplies them.
    ``instant_kill`` is the exception and is narrated by :class:`BattleCore`.
    """
    damage: int = 0
    scaling_multiplier: Optional[float] = None
    execute_multiplier: Optional[float] = None
    multi_hit: bool = False
    hit_count: int = 1
    instant_kill: bool = False
    true_damage: bool = False
    ignore_defense: bool = False
    type_advantage: bool = False
    controlled: List[StatusName] = field(default_factory=list)


@dataclass
class TurnResult:
    player: Pet
    opponent: Pet
    damage: int
    player_action: str
    opponent_action: str
    result: str
    ability_used: Optional[Ability] = None
    ability_user: Optional[str] = None   # "player" | "opponent"
    context: TurnContext = field(default_factory=TurnContext)

    @property
    def instant_kill(self) -> bool:
        return self.context.instant_kill


__all__ = [
    "PERMANENT_DURATION", "Action", "Outcome", "EffectCategory", "AbilityType", "EffectKind",
    "StatusName", "StatusEffect", "DamageOverTime", "EscalatingDamage", "HealOverTime",
    "StatModifier", "Confusion", "TurnDelay", "DamageReduction", "EvasionBonus",
    "AccuracyReduction", "HealingReduction", "DamageAmplification", "Transformation",
    "CriticalGuarantee", "Marker", "status_effect_from_dict", "MultiplierSet",
    "TechniqueLevel", "Technique", "Ability", "BaseStats", "Pet", "TurnContext", "TurnResult",
]
