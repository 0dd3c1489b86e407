"""
Battle module - turn-based combat between creature teams.

Provides:
- The battle state machine (turns, switching, escape, victory, XP)
- Battle events for presentation layers
- The battle manager (creation from trainer rosters, narration)
"""

from critters.battle.battle import (
    Battle,
    BattleState,
    BattleEvent,
    AttackOutcome,
)
from critters.battle.manager import (
    BattleManager,
    ManagerEvent,
    effectiveness_text,
)

__all__ = [
    # Battle
    "Battle",
    "BattleState",
    "BattleEvent",
    "AttackOutcome",
    # Manager
    "BattleManager",
    "ManagerEvent",
    "effectiveness_text",
]
