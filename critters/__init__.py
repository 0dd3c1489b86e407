"""
Critters - turn-based creature battle core.

Provides game-specific modules built on top of the engine:
- Elements (type roster and effectiveness chart)
- Components (statistics, skill effects)
- Progression (skills, skill trees)
- Creatures (the battling aggregate, random generation)
- Battle (turn state machine, manager)
- Trainers (rosters, human and heuristic controllers)
- Game (orchestration)
"""

__version__ = "0.1.0"

from critters.config import BattleRules, DEFAULT_RULES
from critters.elements import (
    TypeTag,
    TypeRoster,
    TypeChart,
    EffectivenessTable,
    default_chart,
    load_type_chart,
)
from critters.creatures import Creature, CreatureId, CreatureGenerator
from critters.battle import Battle, BattleState, BattleEvent, BattleManager, ManagerEvent
from critters.trainers import (
    Trainer,
    TrainerId,
    HumanController,
    HeuristicController,
    Strategy,
)
from critters.game import GameManager

__all__ = [
    # Config
    "BattleRules",
    "DEFAULT_RULES",
    # Elements
    "TypeTag",
    "TypeRoster",
    "TypeChart",
    "EffectivenessTable",
    "default_chart",
    "load_type_chart",
    # Creatures
    "Creature",
    "CreatureId",
    "CreatureGenerator",
    # Battle
    "Battle",
    "BattleState",
    "BattleEvent",
    "BattleManager",
    "ManagerEvent",
    # Trainers
    "Trainer",
    "TrainerId",
    "HumanController",
    "HeuristicController",
    "Strategy",
    # Game
    "GameManager",
]
