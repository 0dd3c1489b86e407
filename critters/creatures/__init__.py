"""
Creatures module - the battling aggregate and random generation.
"""

from critters.creatures.creature import (
    Creature,
    CreatureId,
    AttackResult,
)
from critters.creatures.generator import (
    CreatureGenerator,
    WILD_NAMES,
)

__all__ = [
    "Creature",
    "CreatureId",
    "AttackResult",
    "CreatureGenerator",
    "WILD_NAMES",
]
