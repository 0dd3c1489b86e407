"""
Progression module - skills and skill trees.

Provides:
- Skills with their own XP curve, effects and evolutions
- Per-creature skill trees (unlock DAG built from the primary type)
"""

from critters.progression.skills import (
    Skill,
    SkillCategory,
    SkillId,
)
from critters.progression.skill_tree import (
    SkillTree,
    SkillNode,
    NodeId,
)

__all__ = [
    # Skills
    "Skill",
    "SkillCategory",
    "SkillId",
    # Trees
    "SkillTree",
    "SkillNode",
    "NodeId",
]
