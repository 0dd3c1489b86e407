"""
Creature statistics - pools, attributes, types and level progression.
"""

from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Optional, Sequence

from pydantic import Field, model_validator

from engine.core.component import Component
from critters.elements import TypeTag

logger = logging.getLogger(__name__)

MAX_TYPES = 2

# Threshold growth: next = current + THRESHOLD_STEP * new_level
THRESHOLD_STEP = 20

# (current, maximum) field pairs kept in range
_POOLS = (
    ("health", "max_health"),
    ("vitality", "max_vitality"),
    ("vital_energy", "max_vital_energy"),
)


class Attribute(Enum):
    """Core attributes that can carry temporary modifiers."""
    STRENGTH = "strength"
    CONSTITUTION = "constitution"
    SPIRIT = "spirit"
    MENTAL = "mental"
    SPEED = "speed"


class Modifier(Component):
    """
    A timed attribute modifier.

    Attributes:
        delta: Signed amount added to the base attribute
        remaining_turns: Turns left before it expires
    """
    delta: int = 0
    remaining_turns: int = 0


class Statistics(Component):
    """
    Levelable stat block owned by exactly one creature.

    Base attributes are stored as ``base_*`` fields; the matching
    properties (``strength``, ``speed``...) include active modifiers.

    Attributes:
        level: Current level (>= 1)
        experience: XP accumulated toward the next level
        experience_to_next: XP needed for the next level
        health / max_health: Hit point pool
        vitality / max_vitality: Physical stamina pool
        vital_energy / max_vital_energy: Spiritual energy pool
        types: Primary type, then optional secondary type
        modifiers: Active timed modifiers by attribute
    """
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    experience_to_next: int = Field(default=100, ge=1)

    health: int = 50
    max_health: int = Field(default=50, ge=1)
    vitality: int = 30
    max_vitality: int = Field(default=30, ge=0)
    vital_energy: int = 20
    max_vital_energy: int = Field(default=20, ge=0)

    base_strength: int = 10
    base_constitution: int = 10
    base_spirit: int = 10
    base_mental: int = 10
    base_speed: int = 10

    types: list[TypeTag] = Field(default_factory=list, max_length=MAX_TYPES)
    modifiers: dict[Attribute, Modifier] = Field(default_factory=dict)

    @model_validator(mode='after')
    def _clamp_pools(self) -> Statistics:
        """Keep every pool within [0, max], on init and on every assignment."""
        # Written through __dict__ so the clamp does not re-trigger validation
        for current, maximum in _POOLS:
            value = getattr(self, current)
            self.__dict__[current] = max(0, min(value, getattr(self, maximum)))
        return self

    # -- Attributes -------------------------------------------------------

    def get(self, attribute: Attribute) -> int:
        """Base value plus any active modifier."""
        base = getattr(self, f"base_{attribute.value}")
        modifier = self.modifiers.get(attribute)
        return base + (modifier.delta if modifier else 0)

    @property
    def strength(self) -> int:
        return self.get(Attribute.STRENGTH)

    @property
    def constitution(self) -> int:
        return self.get(Attribute.CONSTITUTION)

    @property
    def spirit(self) -> int:
        return self.get(Attribute.SPIRIT)

    @property
    def mental(self) -> int:
        return self.get(Attribute.MENTAL)

    @property
    def speed(self) -> int:
        return self.get(Attribute.SPEED)

    def add_temporary_modifier(self, attribute: Attribute, delta: int, turns: int) -> None:
        """
        Register a timed modifier, replacing any existing one on the attribute.

        Args:
            attribute: Attribute to modify
            delta: Signed change
            turns: Duration in turns (<= 0 is ignored)
        """
        if turns <= 0:
            return
        self.modifiers[attribute] = Modifier(delta=delta, remaining_turns=turns)

    def update_modifiers(self) -> None:
        """Tick every modifier once and drop the expired ones."""
        for attribute in list(self.modifiers):
            modifier = self.modifiers[attribute]
            modifier.remaining_turns -= 1
            if modifier.remaining_turns <= 0:
                del self.modifiers[attribute]

    # -- Health -----------------------------------------------------------

    @property
    def health_fraction(self) -> float:
        """Health as a fraction of max (0-1)."""
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health

    def take_damage(self, amount: int) -> int:
        """
        Lose health, never going below zero.

        Returns:
            Health actually lost
        """
        lost = max(0, min(amount, self.health))
        self.health -= lost
        return lost

    def heal(self, amount: int) -> int:
        """
        Restore health, capped at max.

        Returns:
            Health actually restored
        """
        before = self.health
        self.health = min(self.health + max(0, amount), self.max_health)
        return self.health - before

    def set_health(self, value: int) -> None:
        self.health = max(0, min(value, self.max_health))

    def restore_all(self) -> None:
        """Refill every pool."""
        self.health = self.max_health
        self.vitality = self.max_vitality
        self.vital_energy = self.max_vital_energy

    # -- Types ------------------------------------------------------------

    @property
    def primary_type(self) -> Optional[TypeTag]:
        return self.types[0] if self.types else None

    @property
    def secondary_type(self) -> Optional[TypeTag]:
        return self.types[1] if len(self.types) > 1 else None

    def add_type(self, tag: TypeTag) -> bool:
        """
        Add a type.

        Returns:
            False if already present or the creature has two types
        """
        if tag in self.types or len(self.types) >= MAX_TYPES:
            return False
        self.types.append(tag)
        return True

    def generate_random_secondary_type(
        self,
        available: Sequence[TypeTag],
        rng: random.Random,
    ) -> Optional[TypeTag]:
        """
        Pick a random secondary type different from the primary.

        Returns:
            The added type, or None if there was nothing to add
        """
        if len(self.types) != 1:
            return None
        candidates = [tag for tag in available if tag != self.types[0]]
        if not candidates:
            return None
        chosen = rng.choice(candidates)
        self.types.append(chosen)
        return chosen

    # -- Progression ------------------------------------------------------

    def gain_experience(self, amount: int, rng: Optional[random.Random] = None) -> bool:
        """
        Add experience, levelling up at most once per call.

        A single call that would cross two thresholds still only levels
        once; the surplus stays banked for the next call.

        Args:
            amount: XP to add
            rng: Source for attribute growth variance

        Returns:
            True if a level-up happened
        """
        self.experience += max(0, amount)
        if self.experience >= self.experience_to_next:
            self._level_up(rng or random.Random())
            return True
        return False

    def _level_up(self, rng: random.Random) -> None:
        self.experience -= self.experience_to_next
        self.level += 1
        self.experience_to_next += THRESHOLD_STEP * self.level

        self.max_health += 5 + self.base_constitution // 2
        self.max_vitality += 3 + self.base_spirit // 3
        self.max_vital_energy += 2 + self.base_mental // 2
        self.restore_all()

        for attribute in Attribute:
            field_name = f"base_{attribute.value}"
            setattr(self, field_name, getattr(self, field_name) + 1 + rng.randint(0, 1))

        logger.debug(f"Reached level {self.level}, next at {self.experience_to_next} XP")
