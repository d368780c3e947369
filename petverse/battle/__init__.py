"""
Battle engine package.
Modules:
- models.py (pets, abilities, techniques, status effects)
- stats.py / damage.py (effective stats, damage math)
- actions.py / ai.py (outcome matrix, opponent choice)
- effects.py (ability effects, status ticking)
- core.py / session.py / service.py (turn, battle loop, service facade)
"""
from .service import BattleService
__all__ = ["BattleService"]
