"""
Skill effects - mechanical consequences a skill can apply to a creature.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Optional

from critters.components.statistics import Attribute

if TYPE_CHECKING:
    from critters.creatures.creature import Creature

logger = logging.getLogger(__name__)


class EffectKind(Enum):
    """What an effect does when it lands."""
    DAMAGE = auto()
    HEALING = auto()
    STAT_BOOST = auto()
    STAT_REDUCE = auto()
    STATUS_EFFECT = auto()
    FIELD_EFFECT = auto()


class AffectedStat(Enum):
    """Stat an effect targets."""
    HEALTH = auto()
    STRENGTH = auto()
    CONSTITUTION = auto()
    SPIRIT = auto()
    MENTAL = auto()
    SPEED = auto()
    ACTION_POINTS = auto()

    @property
    def attribute(self) -> Optional[Attribute]:
        """Matching core attribute, if this stat is one."""
        return _STAT_ATTRIBUTES.get(self)


_STAT_ATTRIBUTES = {
    AffectedStat.STRENGTH: Attribute.STRENGTH,
    AffectedStat.CONSTITUTION: Attribute.CONSTITUTION,
    AffectedStat.SPIRIT: Attribute.SPIRIT,
    AffectedStat.MENTAL: Attribute.MENTAL,
    AffectedStat.SPEED: Attribute.SPEED,
}


@dataclass
class SkillEffect:
    """
    One effect a skill may apply.

    Skills hold templates; every application works on a clone so each
    target tracks its own remaining duration.

    Attributes:
        id: Effect identifier
        name: Display name (also the stacking key on a creature)
        kind: What the effect does
        duration: Remaining turns (0 = instantaneous)
        intensity: Magnitude (damage, healing, stat delta, AP amount)
        affected_stat: Stat targeted by boosts/reductions
        chance: Probability in [0, 1] that the effect lands
    """
    id: str
    name: str
    kind: EffectKind
    duration: int = 0
    intensity: int = 0
    affected_stat: Optional[AffectedStat] = None
    chance: float = 1.0

    def __post_init__(self):
        self.duration = max(0, self.duration)
        self.chance = max(0.0, min(1.0, self.chance))

    @property
    def is_instant(self) -> bool:
        return self.duration == 0

    def apply(self, target: Creature, rng: random.Random) -> bool:
        """
        Roll against ``chance`` and apply the effect.

        Args:
            target: Creature receiving the effect
            rng: Random source for the chance roll

        Returns:
            True if the effect landed
        """
        if rng.random() >= self.chance:
            logger.debug(f"{self.name} missed {target.name}")
            return False

        if self.kind == EffectKind.DAMAGE:
            target.take_damage(self.intensity)
        elif self.kind == EffectKind.HEALING:
            target.stats.heal(self.intensity)
        elif self.kind == EffectKind.STAT_BOOST:
            self._modify_stat(target, self.intensity)
        elif self.kind == EffectKind.STAT_REDUCE:
            self._modify_stat(target, -self.intensity)
        # STATUS_EFFECT and FIELD_EFFECT only need bookkeeping on the holder

        logger.debug(f"{self.name} ({self.kind.name}) landed on {target.name}")
        return True

    def _modify_stat(self, target: Creature, delta: int) -> None:
        if self.affected_stat is None:
            return

        if self.affected_stat == AffectedStat.ACTION_POINTS:
            if delta >= 0:
                target.restore_action_points(delta)
            else:
                target.reduce_action_points(-delta)
            return

        if self.affected_stat == AffectedStat.HEALTH:
            if delta >= 0:
                target.stats.heal(delta)
            else:
                target.take_damage(-delta)
            return

        target.stats.add_temporary_modifier(self.affected_stat.attribute, delta, self.duration)

    def update_duration(self) -> None:
        """Tick one turn off the duration (stops at 0)."""
        if self.duration > 0:
            self.duration -= 1

    def is_expired(self) -> bool:
        return self.duration == 0

    def clone(self) -> SkillEffect:
        return replace(self)
