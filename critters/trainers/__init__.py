"""
Trainers module - rosters and battle decision makers.

Provides:
- Trainer rosters (team limits, healing, defeat check)
- The TrainerController interface with human and heuristic variants
- Skill and matchup scoring used by the heuristic AI
"""

from critters.trainers.trainer import (
    Trainer,
    TrainerId,
    TrainerController,
    HumanController,
    KEEP_CURRENT,
)
from critters.trainers.ai import (
    HeuristicController,
    Strategy,
    score_skill,
    score_matchup,
)

__all__ = [
    # Trainer
    "Trainer",
    "TrainerId",
    "TrainerController",
    "HumanController",
    "KEEP_CURRENT",
    # AI
    "HeuristicController",
    "Strategy",
    "score_skill",
    "score_matchup",
]
