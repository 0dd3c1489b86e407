"""
Heuristic opponent AI - skill and creature selection by scoring.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Optional, Sequence

from critters.config import DEFAULT_RULES, BattleRules
from critters.creatures.creature import Creature
from critters.elements import EffectivenessTable
from critters.progression.skills import Skill
from critters.trainers.trainer import KEEP_CURRENT, TrainerController

logger = logging.getLogger(__name__)

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 10

# Matchup scoring
LEVEL_WEIGHT = 5
HEALTH_WEIGHT = 100
ADVANTAGE_WEIGHT = 50
DISADVANTAGE_WEIGHT = 30
SPEED_BONUS = 20


class Strategy(Enum):
    """
    Decision profiles, from cautious to aggressive.

    RANDOM picks moves blindly and rarely retreats; INTELLIGENT always
    takes the best-scoring move and retreats eagerly when hurt.
    """
    RANDOM = "random"
    BALANCED = "balanced"
    INTELLIGENT = "intelligent"

    @property
    def switch_chance(self) -> float:
        """Chance to request a switch when health is low."""
        return _SWITCH_CHANCE[self]


_SWITCH_CHANCE = {
    Strategy.RANDOM: 0.1,
    Strategy.BALANCED: 0.3,
    Strategy.INTELLIGENT: 0.7,
}


def difficulty_scale(difficulty: int) -> float:
    """+5% per difficulty level on top of a 0.5 base."""
    return 0.5 + difficulty * 0.05


def score_skill(skill: Skill, enemy: Creature, table: EffectivenessTable, difficulty: int) -> float:
    """
    How attractive ``skill`` is against ``enemy``.

    power * effectiveness * 2 + level * 5 - cost * 3, scaled by difficulty.
    """
    effectiveness = table.combined([skill.type], enemy.stats.types)
    score = skill.power * effectiveness * 2
    score += skill.level * 5
    score -= skill.action_point_cost * 3
    return score * difficulty_scale(difficulty)


def score_matchup(mine: Creature, enemy: Creature, table: EffectivenessTable) -> float:
    """
    How well ``mine`` fares against ``enemy``.

    Level and remaining health, plus a bonus or penalty for every
    type pairing, plus a flat bonus for being faster.
    """
    score = mine.stats.level * LEVEL_WEIGHT + mine.stats.health_fraction * HEALTH_WEIGHT

    for my_type in mine.stats.types:
        for enemy_type in enemy.stats.types:
            effectiveness = table.effectiveness(my_type, enemy_type)
            if effectiveness > 1.0:
                score += ADVANTAGE_WEIGHT * effectiveness
            elif effectiveness < 1.0:
                score -= DISADVANTAGE_WEIGHT * (1.0 - effectiveness)

    if mine.stats.speed > enemy.stats.speed:
        score += SPEED_BONUS
    return score


class HeuristicController(TrainerController):
    """
    Computer-controlled trainer decisions.

    Usage:
        ai = HeuristicController(difficulty=7, strategy=Strategy.INTELLIGENT, rng=random.Random(3))
        skill = ai.choose_action(own, enemy)
        if skill is None:
            ...  # switch requested
    """

    def __init__(
        self,
        difficulty: int = 5,
        strategy: Strategy = Strategy.BALANCED,
        rng: Optional[random.Random] = None,
        rules: Optional[BattleRules] = None,
    ):
        self.difficulty = difficulty
        self.strategy = strategy
        self.rng = rng or random.Random()
        self.rules = rules or DEFAULT_RULES

    @property
    def difficulty(self) -> int:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, value: int) -> None:
        self._difficulty = max(MIN_DIFFICULTY, min(MAX_DIFFICULTY, value))

    def choose_action(self, own: Creature, enemy: Creature) -> Optional[Skill]:
        """
        Pick a skill, or None to ask for a switch.

        Badly hurt creatures roll the strategy's switch chance first.
        None is also returned when no equipped skill is affordable.
        """
        if own.stats.health < own.stats.max_health * self.rules.low_health_ratio:
            if self.rng.random() < self.strategy.switch_chance:
                logger.debug(f"{own.name} is low on health, requesting a switch")
                return None

        available = [s for s in own.active_skills if s.can_use(own.current_action_points)]
        if not available:
            return None

        if self.strategy == Strategy.INTELLIGENT:
            return self._best_skill(available, enemy, own)
        if self.strategy == Strategy.BALANCED and self.rng.random() < 0.5:
            return self._best_skill(available, enemy, own)
        return self.rng.choice(available)

    def _best_skill(self, available: list[Skill], enemy: Creature, own: Creature) -> Skill:
        # max() keeps the first of equal scores
        best = max(available, key=lambda s: score_skill(s, enemy, own.chart.table, self.difficulty))
        logger.debug(f"{own.name} picks {best.name} against {enemy.name}")
        return best

    def choose_creature(
        self,
        team: Sequence[Creature],
        current: Optional[Creature],
        enemy: Creature,
    ) -> int:
        """
        Index of the creature to send out.

        Keeps a healthy current creature (KEEP_CURRENT); otherwise picks a
        living one (at random for RANDOM, best matchup for the others).
        """
        if current is not None and current.is_alive:
            return KEEP_CURRENT

        living = [i for i, c in enumerate(team) if c.is_alive]
        if not living:
            return KEEP_CURRENT

        if self.strategy == Strategy.RANDOM:
            return self.rng.choice(living)
        return max(living, key=lambda i: score_matchup(team[i], enemy, team[i].chart.table))
