import os
import sys
import random
import pytest

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

from critters.components import Statistics
from critters.creatures import Creature, CreatureId
from critters.elements import default_chart
from critters.progression import Skill, SkillCategory, SkillId, SkillNode, NodeId


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def rng():
    """Seeded random source so every run replays identically."""
    return random.Random(1234)


@pytest.fixture
def chart():
    return default_chart()


@pytest.fixture
def roster(chart):
    return chart.roster


@pytest.fixture
def make_creature(chart, rng):
    """
    Factory for creatures with explicit stats.

    Usage:
        pyro = make_creature("Pyro", "Fire", base_strength=15)
    """
    counter = iter(range(1, 10_000))

    def _make(name="Critter", type_name="Fire", secondary=None, **stat_overrides):
        stats = Statistics(**stat_overrides)
        creature = Creature(
            CreatureId(f"c{next(counter)}"),
            name,
            chart.roster.require(type_name),
            stats=stats,
            chart=chart,
            rng=rng,
        )
        if secondary:
            creature.stats.add_type(chart.roster.require(secondary))
        return creature

    return _make


@pytest.fixture
def grant_skill():
    """
    Give a creature an arbitrary skill: adds it to the tree, unlocks and equips it.

    Usage:
        skill = grant_skill(pyro, power=20, cost=2)
    """
    def _grant(creature, skill_id="skill_test", power=20, cost=2, type_tag=None, effects=None, **kwargs):
        skill = Skill(
            id=SkillId(skill_id),
            name=kwargs.pop("name", skill_id.replace("_", " ").title()),
            type=type_tag or creature.stats.primary_type,
            power=power,
            accuracy=kwargs.pop("accuracy", 100),
            action_point_cost=cost,
            category=kwargs.pop("category", SkillCategory.PHYSICAL),
            effects=list(effects or []),
            **kwargs,
        )
        node_id = NodeId(f"node_{skill_id}")
        creature.skill_tree.add_node(SkillNode(id=node_id, skill=skill, cost=0))
        assert creature.skill_tree.unlock(node_id, available_points=0)
        assert creature.equip_skill(skill.id)
        return creature.get_equipped(skill.id)

    return _grant
