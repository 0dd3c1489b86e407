"""
Skills - usable moves with their own experience curve and effects.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, NewType, Optional

from critters.components.effects import SkillEffect
from critters.elements import EffectivenessTable, TypeTag

if TYPE_CHECKING:
    from critters.creatures.creature import Creature

logger = logging.getLogger(__name__)

SkillId = NewType('SkillId', str)

# Skill XP bonuses
HEAVY_HIT_RATIO = 0.5
HEAVY_HIT_BONUS = 10
SUPER_EFFECTIVE_BONUS = 5
TARGET_LEVEL_BONUS_CAP = 10

# Level-up scaling
POWER_GROWTH = 0.1
THRESHOLD_GROWTH = 1.2
COST_DISCOUNT_EVERY = 5
MIN_COST = 1


class SkillCategory(Enum):
    """Skill categories."""
    PHYSICAL = auto()
    SPECIAL = auto()
    STATUS = auto()


@dataclass(eq=False)
class Skill:
    """
    A move a creature can use in battle.

    Two skills are equal when their ids match, regardless of level.

    Attributes:
        id: Skill identifier
        name: Display name
        type: Elemental type of the move
        power: Base power
        accuracy: Hit accuracy (0-100)
        action_point_cost: AP spent per use
        category: Physical, special or status
        description: Flavor text
        effects: Effect templates applied to the target on use
        level: Skill level
        experience: XP toward next skill level
        experience_to_next: XP needed for next skill level
        evolutions: Skills this one can evolve into
    """
    id: SkillId
    name: str
    type: TypeTag
    power: int
    accuracy: int
    action_point_cost: int
    category: SkillCategory = SkillCategory.PHYSICAL
    description: str = ""
    effects: list[SkillEffect] = field(default_factory=list)
    level: int = 1
    experience: int = 0
    experience_to_next: int = 100
    evolutions: list[Skill] = field(default_factory=list)

    def __post_init__(self):
        self.accuracy = max(0, min(100, self.accuracy))
        self.action_point_cost = max(0, self.action_point_cost)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Skill):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def can_use(self, current_action_points: int) -> bool:
        return current_action_points >= self.action_point_cost

    def add_effect(self, effect: SkillEffect) -> None:
        self.effects.append(effect)

    # -- Experience -------------------------------------------------------

    def gain_experience(
        self,
        base_amount: int,
        target: Creature,
        damage_dealt: int,
        table: EffectivenessTable,
    ) -> bool:
        """
        Award XP for a use against ``target``.

        Args:
            base_amount: XP before bonuses
            target: Creature the skill was used on
            damage_dealt: Damage that use inflicted
            table: Chart used for the super-effective bonus

        Returns:
            True if the skill levelled up
        """
        gained = base_amount + self._bonus_experience(target, damage_dealt, table)
        self.experience += gained

        if self.experience >= self.experience_to_next:
            self._level_up()
            return True
        return False

    def _bonus_experience(self, target: Creature, damage_dealt: int, table: EffectivenessTable) -> int:
        bonus = 0
        if damage_dealt > target.stats.max_health * HEAVY_HIT_RATIO:
            bonus += HEAVY_HIT_BONUS
        if table.combined([self.type], target.stats.types) > 1.0:
            bonus += SUPER_EFFECTIVE_BONUS
        bonus += min(TARGET_LEVEL_BONUS_CAP, target.stats.level // 5)
        return bonus

    def _level_up(self) -> None:
        self.experience -= self.experience_to_next
        self.level += 1
        self.power += int(self.power * POWER_GROWTH)
        self.accuracy = min(100, self.accuracy + 1)
        if self.level % COST_DISCOUNT_EVERY == 0 and self.action_point_cost > MIN_COST:
            self.action_point_cost -= 1
        self.experience_to_next = int(self.experience_to_next * THRESHOLD_GROWTH)
        logger.info(f"Skill {self.name} reached level {self.level}")

    # -- Evolution --------------------------------------------------------

    def add_evolution_option(self, evolution: Skill) -> None:
        self.evolutions.append(evolution)

    def available_evolutions(self, required_level: int) -> list[Skill]:
        """Evolution options, or nothing until the skill reaches ``required_level``."""
        if self.level >= required_level:
            return list(self.evolutions)
        return []

    def evolve(self, index: int) -> Optional[Skill]:
        """
        Produce the evolved skill at ``index``.

        The result is a fresh copy carrying this skill's level and XP.

        Returns:
            The evolved skill, or None for an invalid index
        """
        if not 0 <= index < len(self.evolutions):
            return None
        evolved = self.evolutions[index].clone()
        evolved.level = self.level
        evolved.experience = self.experience
        return evolved

    def clone(self) -> Skill:
        """Independent copy: effect templates are copied, evolution options are shared."""
        return Skill(
            id=self.id,
            name=self.name,
            type=self.type,
            power=self.power,
            accuracy=self.accuracy,
            action_point_cost=self.action_point_cost,
            category=self.category,
            description=self.description,
            effects=[effect.clone() for effect in self.effects],
            level=self.level,
            experience=self.experience,
            experience_to_next=self.experience_to_next,
            evolutions=list(self.evolutions),
        )
