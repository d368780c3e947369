"""Round-robin tournament scheduling (circle method)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Match:
    round: int
    home: Optional[int]
    away: Optional[int]

    @property
    def is_bye(self) -> bool:
        return self.home is None or self.away is None


def schedule_rounds(num_players: int) -> List[Match]:
    """Every player meets every other player exactly once.

    Player 0 stays fixed while the rest rotate. An odd field gets a ``None``
    slot; whoever draws it sits the round out.
    """
    if num_players < 2:
        return []
    players: List[Optional[int]] = list(range(num_players))
    if num_players % 2:
        players.append(None)
    n = len(players)
    schedule: List[Match] = []
    for rnd in range(1, n):
        for i in range(n // 2):
            schedule.append(Match(rnd, players[i], players[n - 1 - i]))
        players.insert(1, players.pop())
    return schedule


__all__ = ["Match", "schedule_rounds"]
