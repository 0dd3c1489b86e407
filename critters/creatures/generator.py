"""
Random creature generation for wild encounters and NPC rosters.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from critters.config import DEFAULT_RULES, BattleRules
from critters.creatures.creature import Creature, CreatureId
from critters.elements import TypeChart, TypeTag, default_chart

logger = logging.getLogger(__name__)

WILD_NAMES = ("Wilder", "Ferocio", "Sauvana", "Nativo", "Wildy")


class CreatureGenerator:
    """
    Builds ready-to-fight creatures at a given level.

    All choices (type, growth, extra skills) come from the injected
    random source, so a seeded generator always yields the same creatures.
    """

    def __init__(
        self,
        chart: Optional[TypeChart] = None,
        rules: Optional[BattleRules] = None,
        rng: Optional[random.Random] = None,
    ):
        self.chart = chart or default_chart()
        self.rules = rules or DEFAULT_RULES
        self.rng = rng or random.Random()

    def generate(
        self,
        creature_id: CreatureId,
        name: str,
        level: int,
        primary_type: Optional[TypeTag] = None,
    ) -> Creature:
        """
        Create a creature at ``level``.

        Args:
            creature_id: Identifier for the new creature
            name: Display name
            level: Target level (values below 1 are treated as 1)
            primary_type: Fixed primary type; random when omitted

        Returns:
            Creature with root skills unlocked, a few extra unlocks for
            higher levels, and up to a full set of equipped skills
        """
        primary = primary_type or self.rng.choice(self.chart.roster.all())
        creature = Creature(creature_id, name, primary, chart=self.chart, rules=self.rules, rng=self.rng)

        # Feeding exactly the current threshold levels up once per call
        for _ in range(max(1, level) - 1):
            if creature.gain_experience(creature.stats.experience_to_next):
                creature.on_level_up()
        creature.recalculate_max_action_points()
        creature.restore_all_action_points()

        for node in creature.skill_tree.root_nodes():
            creature.unlock_skill_node(node.id)

        frontier = creature.skill_tree.available_nodes()
        for _ in range(min(creature.level // 3, len(frontier))):
            if not frontier:
                break
            node = self.rng.choice(frontier)
            creature.unlock_skill_node(node.id)
            frontier = creature.skill_tree.available_nodes()

        for skill in creature.skill_tree.unlocked_skills()[:self.rules.max_equipped_skills]:
            creature.equip_skill(skill.id)

        logger.debug(
            f"Generated {name} ({primary.name}) lv{creature.level} "
            f"with {', '.join(creature.equipped_skill_ids())}"
        )
        return creature

    def generate_wild(self, creature_id: CreatureId, area_level: int) -> Creature:
        """A wild creature around ``area_level`` (one level either way)."""
        level = max(1, area_level + self.rng.randint(0, 2) - 1)
        name = self.rng.choice(WILD_NAMES)
        return self.generate(creature_id, name, level)
