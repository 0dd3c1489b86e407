"""
Skill trees - per-creature DAG of unlockable skills.

Nodes live in an arena keyed by NodeId; edges are stored as id lists
(children forward, prerequisites back), so the tree owns every node and
nothing holds object references across nodes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import NewType, Optional

from critters.components.effects import AffectedStat, EffectKind, SkillEffect
from critters.elements import TypeTag
from critters.progression.skills import Skill, SkillCategory, SkillId

logger = logging.getLogger(__name__)

NodeId = NewType('NodeId', str)


@dataclass
class SkillNode:
    """
    A node in a skill tree.

    Attributes:
        id: Node identifier
        skill: The skill this node grants
        cost: Skill points required to unlock
        unlocked: Whether the owner has unlocked it
        children: Nodes this one leads to
        prerequisites: Nodes that must be unlocked first
    """
    id: NodeId
    skill: Skill
    cost: int = 0
    unlocked: bool = False
    children: list[NodeId] = field(default_factory=list)
    prerequisites: list[NodeId] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return not self.prerequisites


class SkillTree:
    """
    Unlock graph for one creature.

    Usage:
        tree = SkillTree.for_type(fire)
        tree.unlock(NodeId("node_basic_attack"), available_points=3)
    """

    def __init__(self, primary_type: TypeTag):
        self.primary_type = primary_type
        self._nodes: dict[NodeId, SkillNode] = {}
        self._roots: list[NodeId] = []

    @classmethod
    def for_type(cls, primary_type: TypeTag) -> SkillTree:
        """Build the standard tree for a primary type (deterministic)."""
        tree = cls(primary_type)
        _populate(tree, primary_type)
        return tree

    # -- Construction -----------------------------------------------------

    def add_node(self, node: SkillNode, parent: Optional[NodeId] = None) -> None:
        """
        Insert a node, as a root or under ``parent``.

        Raises:
            ValueError: Duplicate node id or unknown parent
        """
        if node.id in self._nodes:
            raise ValueError(f"Duplicate skill node: {node.id}")
        if parent is not None and parent not in self._nodes:
            raise ValueError(f"Unknown parent node: {parent}")

        self._nodes[node.id] = node
        if parent is None:
            self._roots.append(node.id)
        else:
            self._nodes[parent].children.append(node.id)
            node.prerequisites.append(parent)

    # -- Queries ----------------------------------------------------------

    def get_node(self, node_id: NodeId) -> Optional[SkillNode]:
        return self._nodes.get(node_id)

    def nodes(self) -> list[SkillNode]:
        return list(self._nodes.values())

    def root_nodes(self) -> list[SkillNode]:
        return [self._nodes[node_id] for node_id in self._roots]

    def prerequisites_met(self, node: SkillNode) -> bool:
        return all(self._nodes[p].unlocked for p in node.prerequisites)

    def available_nodes(self) -> list[SkillNode]:
        """Locked nodes whose prerequisites are all unlocked (the unlock frontier)."""
        return [
            node for node in self._nodes.values()
            if not node.unlocked and self.prerequisites_met(node)
        ]

    def unlocked_nodes(self) -> list[SkillNode]:
        return [node for node in self._nodes.values() if node.unlocked]

    def unlocked_skills(self) -> list[Skill]:
        return [node.skill for node in self.unlocked_nodes()]

    def find_skill(self, skill_id: SkillId) -> Optional[Skill]:
        """Look up any skill in the tree, locked or not."""
        for node in self._nodes.values():
            if node.skill.id == skill_id:
                return node.skill
        return None

    def is_skill_unlocked(self, skill_id: SkillId) -> bool:
        return any(node.skill.id == skill_id for node in self.unlocked_nodes())

    # -- Unlocking --------------------------------------------------------

    def can_unlock(self, node_id: NodeId, available_points: int) -> bool:
        node = self._nodes.get(node_id)
        if node is None or node.unlocked:
            return False
        if available_points < node.cost:
            return False
        return self.prerequisites_met(node)

    def unlock(self, node_id: NodeId, available_points: int) -> bool:
        """
        Unlock a node.

        Spending points is the caller's job; the tree only checks them.

        Args:
            node_id: Node to unlock
            available_points: Points the owner can spend

        Returns:
            False if the node is unknown, already unlocked, too expensive,
            or has a locked prerequisite
        """
        if not self.can_unlock(node_id, available_points):
            logger.debug(f"Cannot unlock {node_id} with {available_points} points")
            return False

        self._nodes[node_id].unlocked = True
        return True

    # -- Layout -----------------------------------------------------------

    def depth(self, node_id: NodeId) -> int:
        """
        Longest prerequisite chain from a root (roots are depth 0).

        Raises:
            KeyError: Unknown node
        """
        node = self._nodes[node_id]
        if node.is_root:
            return 0
        return 1 + max(self.depth(p) for p in node.prerequisites)

    def layout(self) -> dict[int, list[NodeId]]:
        """Node ids grouped by depth, in insertion order within each row."""
        rows: dict[int, list[NodeId]] = {}
        for node_id in self._nodes:
            rows.setdefault(self.depth(node_id), []).append(node_id)
        return dict(sorted(rows.items()))

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes


# -- Standard tree ----------------------------------------------------------

def _node(node_id: str, skill: Skill, cost: int) -> SkillNode:
    return SkillNode(id=NodeId(node_id), skill=skill, cost=cost)


def _populate(tree: SkillTree, primary: TypeTag) -> None:
    key = primary.key
    name = primary.name
    status_name = primary.status_name or f"{name} Status"

    basic_attack = Skill(
        id=SkillId(f"skill_basic_{key}"),
        name="Basic Attack",
        description="A simple attack that costs little energy.",
        type=primary, power=5, accuracy=95, action_point_cost=1,
        category=SkillCategory.PHYSICAL,
    )
    basic_defense = Skill(
        id=SkillId(f"skill_defense_{key}"),
        name="Basic Defense",
        description="Temporarily hardens the body.",
        type=primary, power=0, accuracy=100, action_point_cost=1,
        category=SkillCategory.STATUS,
        effects=[SkillEffect(
            id="effect_def_boost", name="Shield", kind=EffectKind.STAT_BOOST,
            duration=3, intensity=5, affected_stat=AffectedStat.CONSTITUTION, chance=1.0,
        )],
    )
    type_attack = Skill(
        id=SkillId(f"skill_{key}_1"),
        name=f"{name} Strike",
        description=f"A basic {name} attack.",
        type=primary, power=15, accuracy=90, action_point_cost=2,
        category=SkillCategory.SPECIAL,
    )
    status_skill = Skill(
        id=SkillId(f"skill_status_{key}"),
        name=status_name,
        description=f"Inflicts {status_name.lower()}.",
        type=primary, power=5, accuracy=85, action_point_cost=2,
        category=SkillCategory.STATUS,
        effects=[SkillEffect(
            id=f"effect_{key}_status", name=status_name, kind=EffectKind.STATUS_EFFECT,
            duration=3, intensity=5, affected_stat=AffectedStat.HEALTH, chance=0.7,
        )],
    )

    tree.add_node(_node("node_basic_attack", basic_attack, 0))
    tree.add_node(_node("node_basic_defense", basic_defense, 0))
    tree.add_node(_node(f"node_{key}_1", type_attack, 1))
    tree.add_node(_node(f"node_status_{key}", status_skill, 2), parent=NodeId("node_basic_attack"))

    # One branch per root, chosen by the root skill's category
    for root in tree.root_nodes():
        if root.skill.category == SkillCategory.PHYSICAL:
            _physical_branch(tree, root.id, primary)
        elif root.skill.category == SkillCategory.SPECIAL:
            _special_branch(tree, root.id, primary)
        elif root.skill.category == SkillCategory.STATUS:
            _status_branch(tree, root.id, primary)


def _physical_branch(tree: SkillTree, parent: NodeId, primary: TypeTag) -> None:
    power_strike = Skill(
        id=SkillId("skill_physical_improved"), name="Power Strike",
        description="A heavier, less accurate physical blow.",
        type=primary, power=30, accuracy=80, action_point_cost=3,
        category=SkillCategory.PHYSICAL,
    )
    quick_attack = Skill(
        id=SkillId("skill_physical_quick"), name="Quick Attack",
        description="A light, cheap strike.",
        type=primary, power=10, accuracy=95, action_point_cost=1,
        category=SkillCategory.PHYSICAL,
    )
    tree.add_node(_node("node_physical_improved", power_strike, 3), parent=parent)
    tree.add_node(_node("node_physical_quick", quick_attack, 2), parent=parent)


def _special_branch(tree: SkillTree, parent: NodeId, primary: TypeTag) -> None:
    key, name = primary.key, primary.name
    advanced = Skill(
        id=SkillId(f"skill_{key}_2"), name=f"{name} Blast",
        description=f"A stronger {name} attack.",
        type=primary, power=25, accuracy=85, action_point_cost=3,
        category=SkillCategory.SPECIAL,
    )
    wave = Skill(
        id=SkillId(f"skill_{key}_area"), name=f"{name} Wave",
        description=f"A {name} attack that sweeps the field.",
        type=primary, power=20, accuracy=80, action_point_cost=4,
        category=SkillCategory.SPECIAL,
    )
    tree.add_node(_node(f"node_{key}_2", advanced, 4), parent=parent)
    tree.add_node(_node(f"node_{key}_area", wave, 5), parent=parent)


def _status_branch(tree: SkillTree, parent: NodeId, primary: TypeTag) -> None:
    focus = Skill(
        id=SkillId("skill_self_buff"), name="Focus",
        description="Raises strength and speed for a few turns.",
        type=primary, power=0, accuracy=100, action_point_cost=2,
        category=SkillCategory.STATUS,
        effects=[
            SkillEffect(
                id="effect_str_boost", name="Strength Up", kind=EffectKind.STAT_BOOST,
                duration=3, intensity=7, affected_stat=AffectedStat.STRENGTH, chance=1.0,
            ),
            SkillEffect(
                id="effect_spd_boost", name="Speed Up", kind=EffectKind.STAT_BOOST,
                duration=3, intensity=5, affected_stat=AffectedStat.SPEED, chance=1.0,
            ),
        ],
    )
    restoration = Skill(
        id=SkillId("skill_healing"), name="Restoration",
        description="Restores some health.",
        type=primary, power=0, accuracy=100, action_point_cost=3,
        category=SkillCategory.STATUS,
        effects=[SkillEffect(
            id="effect_healing", name="Heal", kind=EffectKind.HEALING,
            duration=0, intensity=15, affected_stat=AffectedStat.HEALTH, chance=1.0,
        )],
    )
    tree.add_node(_node("node_self_buff", focus, 3), parent=parent)
    tree.add_node(_node("node_healing", restoration, 4), parent=parent)
