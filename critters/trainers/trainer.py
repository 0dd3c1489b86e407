"""
Trainers - creature rosters and the controllers that make their decisions.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, NewType, Optional, Sequence

from critters.config import DEFAULT_RULES, BattleRules
from critters.creatures.creature import Creature
from critters.elements import TypeTag
from critters.progression.skills import Skill

logger = logging.getLogger(__name__)

TrainerId = NewType('TrainerId', str)

# choose_creature result meaning "keep the current creature"
KEEP_CURRENT = -1


class TrainerController(ABC):
    """
    Decision maker for one side of a battle.

    Returning None from ``choose_action`` asks the battle loop for a
    creature switch instead of an attack.
    """

    @abstractmethod
    def choose_action(self, own: Creature, enemy: Creature) -> Optional[Skill]:
        """Pick a skill for ``own`` to use on ``enemy`` (None = switch)."""
        pass

    @abstractmethod
    def choose_creature(
        self,
        team: Sequence[Creature],
        current: Optional[Creature],
        enemy: Creature,
    ) -> int:
        """Index into ``team`` to send out, or KEEP_CURRENT."""
        pass


ActionCallback = Callable[[Creature, Creature], Optional[Skill]]
CreatureCallback = Callable[[Sequence[Creature], Optional[Creature], Creature], int]


class HumanController(TrainerController):
    """Defers every decision to the presentation layer's callbacks."""

    def __init__(
        self,
        on_choose_action: Optional[ActionCallback] = None,
        on_choose_creature: Optional[CreatureCallback] = None,
    ):
        self.on_choose_action = on_choose_action
        self.on_choose_creature = on_choose_creature

    def choose_action(self, own: Creature, enemy: Creature) -> Optional[Skill]:
        if self.on_choose_action is None:
            return None
        return self.on_choose_action(own, enemy)

    def choose_creature(
        self,
        team: Sequence[Creature],
        current: Optional[Creature],
        enemy: Creature,
    ) -> int:
        if self.on_choose_creature is None:
            return KEEP_CURRENT
        return self.on_choose_creature(team, current, enemy)


class Trainer:
    """
    A trainer and their ordered creature roster.

    Attributes:
        id: Trainer identifier
        name: Display name
        controller: Who makes this trainer's battle decisions
        is_gym_leader: Gym leaders carry extra creatures
        creatures: Roster, in send-out order
    """

    def __init__(
        self,
        trainer_id: TrainerId,
        name: str,
        controller: Optional[TrainerController] = None,
        is_gym_leader: bool = False,
        rules: Optional[BattleRules] = None,
    ):
        self.id = trainer_id
        self.name = name
        self.controller = controller or HumanController()
        self.is_gym_leader = is_gym_leader
        self.rules = rules or DEFAULT_RULES
        self.creatures: list[Creature] = []

    @property
    def max_creatures(self) -> int:
        bonus = self.rules.gym_leader_team_bonus if self.is_gym_leader else 0
        return self.rules.max_team_size + bonus

    def add_creature(self, creature: Creature) -> bool:
        """
        Add a creature to the roster.

        Returns:
            False if the roster is full or already holds it
        """
        if len(self.creatures) >= self.max_creatures:
            logger.warning(f"{self.name}'s roster is full ({self.max_creatures})")
            return False
        if creature in self.creatures:
            return False
        self.creatures.append(creature)
        return True

    def remove_creature(self, creature: Creature) -> bool:
        if creature not in self.creatures:
            return False
        self.creatures.remove(creature)
        return True

    def active_creatures(self) -> list[Creature]:
        """Creatures still able to fight."""
        return [c for c in self.creatures if c.is_alive]

    def is_defeated(self) -> bool:
        return not self.active_creatures()

    def heal_all_creatures(self) -> None:
        for creature in self.creatures:
            creature.heal_fully()

    def average_level(self) -> float:
        if not self.creatures:
            return 0.0
        return sum(c.level for c in self.creatures) / len(self.creatures)

    def creatures_of_type(self, type_tag: TypeTag) -> list[Creature]:
        return [c for c in self.creatures if type_tag in c.types]

    def best_creature_against(self, type_tag: TypeTag) -> Optional[Creature]:
        """
        Living creature whose own types hit ``type_tag`` hardest.

        Ties keep roster order.

        Returns:
            The creature, or None when nobody can fight
        """
        best: Optional[Creature] = None
        best_multiplier = 0.0
        for creature in self.active_creatures():
            multiplier = creature.chart.combined(creature.types, [type_tag])
            if best is None or multiplier > best_multiplier:
                best, best_multiplier = creature, multiplier
        return best

    def choose_action(self, own: Creature, enemy: Creature) -> Optional[Skill]:
        return self.controller.choose_action(own, enemy)

    def choose_creature(self, team: Sequence[Creature], current: Optional[Creature], enemy: Creature) -> int:
        return self.controller.choose_creature(team, current, enemy)
