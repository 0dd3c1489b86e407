"""
Creature components - stat blocks and skill effects.

Statistics is a Pydantic model (validated on assignment, deep-cloneable).
SkillEffect is a plain dataclass cloned per target.
"""

from critters.components.statistics import (
    Statistics,
    Attribute,
    Modifier,
    MAX_TYPES,
)
from critters.components.effects import (
    SkillEffect,
    EffectKind,
    AffectedStat,
)

__all__ = [
    # Statistics
    "Statistics",
    "Attribute",
    "Modifier",
    "MAX_TYPES",
    # Effects
    "SkillEffect",
    "EffectKind",
    "AffectedStat",
]
