"""
Creatures - the aggregate that owns stats, a skill tree and combat state.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import NewType, Optional

from critters.components.effects import SkillEffect
from critters.components.statistics import Statistics
from critters.config import DEFAULT_RULES, BattleRules
from critters.elements import TypeChart, TypeTag, default_chart
from critters.progression.skill_tree import NodeId, SkillTree
from critters.progression.skills import Skill, SkillId

logger = logging.getLogger(__name__)

CreatureId = NewType('CreatureId', str)

# Skill XP per use: BASE_SKILL_XP + damage * DAMAGE_XP_RATIO
BASE_SKILL_XP = 5
DAMAGE_XP_RATIO = 0.1
SKILL_LEVEL_DAMAGE_BONUS = 0.05


@dataclass
class AttackResult:
    """
    Outcome of one attack resolution.

    Attributes:
        performed: False if the attack was rejected (nothing changed)
        damage: Damage dealt to the defender
        effectiveness: Type multiplier that was applied
        skill: The equipped skill instance that was used
        skill_leveled: Whether the skill levelled up from this use
    """
    performed: bool
    damage: int = 0
    effectiveness: float = 1.0
    skill: Optional[Skill] = None
    skill_leveled: bool = False


class Creature:
    """
    A battling creature.

    Owns its Statistics and SkillTree exclusively; battles only hold
    references to it.

    Usage:
        fire = chart.roster.require("Fire")
        pyro = Creature(CreatureId("c1"), "Pyro", fire, rng=random.Random(7))
        pyro.unlock_skill_node(NodeId("node_basic_attack"))
        pyro.equip_skill(SkillId("skill_basic_fire"))
    """

    def __init__(
        self,
        creature_id: CreatureId,
        name: str,
        primary_type: TypeTag,
        stats: Optional[Statistics] = None,
        chart: Optional[TypeChart] = None,
        rules: Optional[BattleRules] = None,
        rng: Optional[random.Random] = None,
    ):
        self.id = creature_id
        self.name = name
        self.chart = chart or default_chart()
        self.rules = rules or DEFAULT_RULES
        self.rng = rng or random.Random()

        self.stats = stats or Statistics()
        if not self.stats.types:
            self.stats.types.append(primary_type)
        self.skill_tree = SkillTree.for_type(primary_type)

        self.active_skills: list[Skill] = []
        self.active_effects: list[SkillEffect] = []
        self.max_action_points = self.rules.base_action_points
        self.current_action_points = self.max_action_points
        self.skill_points = self.rules.starting_skill_points

    def __repr__(self) -> str:
        return (
            f"Creature({self.id!r}, {self.name!r}, lv={self.stats.level}, "
            f"hp={self.stats.health}/{self.stats.max_health})"
        )

    # -- State ------------------------------------------------------------

    @property
    def level(self) -> int:
        return self.stats.level

    @property
    def types(self) -> list[TypeTag]:
        return self.stats.types

    @property
    def is_dead(self) -> bool:
        return self.stats.health <= 0

    @property
    def is_alive(self) -> bool:
        return not self.is_dead

    def unlocked_node_ids(self) -> list[NodeId]:
        return [node.id for node in self.skill_tree.unlocked_nodes()]

    def equipped_skill_ids(self) -> list[SkillId]:
        return [skill.id for skill in self.active_skills]

    def get_equipped(self, skill_id: SkillId) -> Optional[Skill]:
        for skill in self.active_skills:
            if skill.id == skill_id:
                return skill
        return None

    # -- Combat -----------------------------------------------------------

    def attack(self, target: Creature, skill: Skill) -> int:
        """
        Use an equipped skill on ``target``.

        Returns:
            Damage dealt (0 also when the attack was rejected)
        """
        return self.resolve_attack(target, skill).damage

    def resolve_attack(self, target: Creature, skill: Skill) -> AttackResult:
        """
        Resolve an attack in full, or not at all.

        Rejected (no AP spent, no effects, no XP) when the skill is not
        equipped or the creature lacks the action points.

        Args:
            target: Defending creature
            skill: Skill to use (matched by id against equipped skills)

        Returns:
            AttackResult describing what happened
        """
        equipped = self.get_equipped(skill.id)
        if equipped is None:
            logger.warning(f"{self.name} tried to use unequipped skill {skill.id}")
            return AttackResult(performed=False)
        if not equipped.can_use(self.current_action_points):
            logger.warning(
                f"{self.name} lacks AP for {equipped.name} "
                f"({self.current_action_points}/{equipped.action_point_cost})"
            )
            return AttackResult(performed=False)

        self.current_action_points -= equipped.action_point_cost

        effectiveness = self.chart.combined(self.stats.types, target.stats.types)

        constitution = target.stats.constitution
        if constitution <= 0:
            logger.warning(f"{target.name} has constitution {constitution}, clamping to 1")
            constitution = 1

        base_damage = (equipped.power * max(0, self.stats.strength)) // constitution
        level_bonus = int(base_damage * equipped.level * SKILL_LEVEL_DAMAGE_BONUS)
        damage = int((base_damage + level_bonus) * effectiveness)

        target.take_damage(damage)

        for effect in equipped.effects:
            target.apply_effect(effect.clone(), rng=self.rng)

        leveled = equipped.gain_experience(
            BASE_SKILL_XP + int(damage * DAMAGE_XP_RATIO),
            target,
            damage,
            self.chart.table,
        )

        logger.debug(
            f"{self.name} used {equipped.name} on {target.name}: "
            f"base={base_damage} bonus={level_bonus} x{effectiveness} -> {damage}"
        )
        return AttackResult(
            performed=True,
            damage=damage,
            effectiveness=effectiveness,
            skill=equipped,
            skill_leveled=leveled,
        )

    def take_damage(self, amount: int) -> int:
        return self.stats.take_damage(amount)

    def apply_effect(self, effect: SkillEffect, rng: Optional[random.Random] = None) -> bool:
        """
        Apply an effect and, if it lasts, track it.

        An active effect with the same name is replaced instead of stacked.

        Returns:
            True if the effect landed
        """
        if not effect.apply(self, rng or self.rng):
            return False
        if effect.is_instant:
            return True

        for i, active in enumerate(self.active_effects):
            if active.name == effect.name:
                self.active_effects[i] = effect
                return True
        self.active_effects.append(effect)
        return True

    def update_effects(self) -> None:
        """Advance effects and modifiers by one turn, dropping expired ones."""
        for effect in self.active_effects:
            effect.update_duration()
        self.active_effects = [e for e in self.active_effects if not e.is_expired()]
        self.stats.update_modifiers()

    # -- Action points ----------------------------------------------------

    def restore_action_points(self, amount: int) -> int:
        before = self.current_action_points
        self.current_action_points = min(self.max_action_points, self.current_action_points + max(0, amount))
        return self.current_action_points - before

    def reduce_action_points(self, amount: int) -> int:
        before = self.current_action_points
        self.current_action_points = max(0, self.current_action_points - max(0, amount))
        return before - self.current_action_points

    def restore_all_action_points(self) -> None:
        self.current_action_points = self.max_action_points

    def recalculate_max_action_points(self) -> None:
        """Max AP grows with speed and spirit; current AP is clamped to it."""
        self.max_action_points = (
            self.rules.base_action_points
            + self.stats.speed // 10
            + self.stats.spirit // 15
        )
        self.current_action_points = min(self.current_action_points, self.max_action_points)

    # -- Skills -----------------------------------------------------------

    def unlock_skill_node(self, node_id: NodeId) -> bool:
        """
        Unlock a skill-tree node, spending one skill point.

        Returns:
            False if no points are left or the tree refuses the unlock
        """
        if self.skill_points <= 0:
            return False
        if not self.skill_tree.unlock(node_id, self.skill_points):
            return False

        self.skill_points -= 1
        logger.info(f"{self.name} unlocked {node_id} ({self.skill_points} points left)")
        return True

    def equip_skill(self, skill_id: SkillId) -> bool:
        """
        Equip an unlocked skill.

        Returns:
            False if the skill is locked, already equipped, or slots are full
        """
        if len(self.active_skills) >= self.rules.max_equipped_skills:
            return False
        if self.get_equipped(skill_id) is not None:
            return False
        if not self.skill_tree.is_skill_unlocked(skill_id):
            return False

        self.active_skills.append(self.skill_tree.find_skill(skill_id))
        return True

    def unequip_skill(self, skill_id: SkillId) -> bool:
        skill = self.get_equipped(skill_id)
        if skill is None:
            return False
        self.active_skills.remove(skill)
        return True

    def replace_skill(self, old_skill_id: SkillId, new_skill_id: SkillId) -> bool:
        """Swap an equipped skill for an unlocked one, keeping its slot."""
        old = self.get_equipped(old_skill_id)
        if old is None or self.get_equipped(new_skill_id) is not None:
            return False
        if not self.skill_tree.is_skill_unlocked(new_skill_id):
            return False

        self.active_skills[self.active_skills.index(old)] = self.skill_tree.find_skill(new_skill_id)
        return True

    # -- Progression ------------------------------------------------------

    def gain_experience(self, amount: int) -> bool:
        leveled = self.stats.gain_experience(amount, self.rng)
        if leveled:
            logger.info(f"{self.name} grew to level {self.stats.level}")
        return leveled

    def on_level_up(self) -> None:
        self.skill_points += self.rules.skill_points_per_level

    def heal_fully(self) -> None:
        """Restore pools and AP, and clear lingering effects."""
        self.stats.restore_all()
        self.stats.modifiers.clear()
        self.active_effects.clear()
        self.restore_all_action_points()
