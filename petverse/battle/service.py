"""Battle service: validate teams, run a session, pay rewards.

Takes stored pet documents, returns a :class:`BattleResult` with the
updated documents for the caller to persist. Demo battles are registered by
id for the CLI.
"""
from __future__ import annotations
import random
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, TypedDict

from petverse.core.logging import logger
from petverse.system.settings import Settings
from .core import BattleCore
from .factory import pet_to_document, team_from_documents
from .rewards import BattleRewards, validate_battle_team
from .session import BattleSession, Team

Outcome = Literal["PLAYER_WIN", "PLAYER_LOSS", "STALEMATE", "ONGOING", "INVALID_TEAM"]


class BattleResult(TypedDict):
    outcome: Outcome
    battle_id: str
    turns: int
    rewards: Optional[Dict[str, Any]]
    error: Optional[str]
    player_team: List[Dict[str, Any]]
    opponent_team: List[Dict[str, Any]]


class _DemoBattle(TypedDict):
    player: List[Dict[str, Any]]
    opponent: List[Dict[str, Any]]
    reward: Dict[str, int]


def _pet(name: str, type_: str, level: int, dmg: int, hp: int, **extra: Any) -> Dict[str, Any]:
    stats = {"dmg": dmg, "hp": hp, "range": 10, "spa": 1.0,
             "critChance": extra.pop("critChance", 0.1), "critDamage": 1.5,
             "moneyBonus": extra.pop("moneyBonus", 0.0)}
    return {"name": name, "type": type_, "level": level, "stats": stats, **extra}


_BATTLE_DEMOS: Dict[str, _DemoBattle] = {
    "tutorial_duel": _DemoBattle(
        player=[_pet("Cinder", "FIRE", 10, 50, 220, ability="flame_burst", technique="Sturdy", techniqueLevel=2)],
        opponent=[_pet("Ripple", "WATER", 10, 45, 240, ability="tidal_mend")],
        reward={"coins": 100, "experience": 50},
    ),
    "team_clash": _DemoBattle(
        player=[
            _pet("Gust", "AIR", 12, 40, 200, ability="gale_force", technique="Shining", moneyBonus=0.1),
            _pet("Boulder", "EARTH", 12, 38, 260, ability="stone_skin"),
            _pet("Halo", "LIGHT", 12, 30, 210, ability="dawn_rebirth"),
        ],
        opponent=[
            _pet("Umbra", "DARK", 12, 42, 220, ability="soul_drain"),
            _pet("Scorch", "FIRE", 11, 44, 200, ability="wildfire"),
            _pet("Mire", "WATER", 12, 36, 250, ability="whirlpool"),
        ],
        reward={"coins": 250, "experience": 120},
    ),
    "overlord_solo": _DemoBattle(
        player=[_pet("Tyrant", "DARK", 20, 35, 300, ability="death_mark", technique="Overlord", critChance=0.05)],
        opponent=[
            _pet("Sprout", "EARTH", 18, 30, 220, ability="tremor"),
            _pet("Zephyr", "AIR", 18, 32, 200, ability="piercing_wind"),
        ],
        reward={"coins": 400, "experience": 200},
    ),
    "overlord_team": _DemoBattle(
        player=[
            _pet("Tyrant", "DARK", 20, 35, 300, ability="death_mark", technique="Overlord", critChance=0.05),
            _pet("Shade", "DARK", 18, 30, 200, ability="soul_drain"),
        ],
        opponent=[_pet("Sprout", "EARTH", 18, 30, 220, ability="tremor")],
        reward={"coins": 300, "experience": 150},
    ),
}


def demo_ids() -> List[str]:
    return sorted(_BATTLE_DEMOS)


class BattleService:
    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings
        self.last_session: Optional[BattleSession] = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = Settings.load()
        return self._settings

    def _make_core(self, seed: Optional[int]) -> BattleCore:
        if seed is None:
            seed = self.settings.data.seed
        return BattleCore(rng=random.Random(seed) if seed is not None else random.Random())

    def start(self, battle_id: str, *, seed: Optional[int] = None, max_turns: Optional[int] = None) -> BattleResult:
        demo = _BATTLE_DEMOS.get(battle_id)
        if demo is None:
            raise KeyError(f"Unknown demo battle: {battle_id}")
        return self.run(demo["player"], demo["opponent"], battle_id=battle_id,
                        base_reward=demo["reward"], seed=seed, max_turns=max_turns)

    def run(self, player_docs: Sequence[Mapping[str, Any]], opponent_docs: Sequence[Mapping[str, Any]], *,
            battle_id: str = "battle", base_reward: Optional[Mapping[str, Any]] = None,
            seed: Optional[int] = None, max_turns: Optional[int] = None) -> BattleResult:
        player = team_from_documents(player_docs)
        opponent = team_from_documents(opponent_docs)
        log = logger.bind(battle_id=battle_id)
        for side, team in (("player", player), ("opponent", opponent)):
            check = validate_battle_team(team)
            if not check.valid:
                log.warn("TeamRejected", side=side, error=check.error)
                return {
                    "outcome": "INVALID_TEAM", "battle_id": battle_id, "turns": 0, "rewards": None,
                    "error": check.error,
                    "player_team": [pet_to_document(p) for p in player],
                    "opponent_team": [pet_to_document(p) for p in opponent],
                }

        cap = max_turns if max_turns is not None else self.settings.data.max_turns
        log.info("BattleStart", player=len(player), opponent=len(opponent), max_turns=cap)
        session = BattleSession(Team(player), Team(opponent), self._make_core(seed),
                                max_turns=cap, battle_id=battle_id)
        outcome = session.run_auto()
        self.last_session = session
        if self.settings.data.debug:
            for line in session.log:
                log.info("BattleNarration", text=line)

        rewards: Optional[BattleRewards] = None
        if base_reward is not None:
            rewards = session.rewards(base_reward)
        return {
            "outcome": outcome,  # type: ignore[typeddict-item]
            "battle_id": battle_id,
            "turns": session.turn_counter,
            "rewards": rewards.to_dict() if rewards else None,
            "error": None,
            "player_team": [pet_to_document(p) for p in player],
            "opponent_team": [pet_to_document(p) for p in opponent],
        }

