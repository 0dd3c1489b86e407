"""
Game manager - top-level orchestration of rosters, encounters and AI turns.

This is the only layer that substitutes defaults for failed lookups
(e.g. an unknown type name falls back to the roster's first type).
"""

from __future__ import annotations

import itertools
import logging
import random
from typing import Optional

from engine.core.events import EventBus
from critters.battle.battle import AttackOutcome, Battle
from critters.battle.manager import BattleManager
from critters.config import DEFAULT_RULES, BattleRules
from critters.creatures.creature import Creature, CreatureId
from critters.creatures.generator import CreatureGenerator
from critters.elements import TypeChart, TypeTag, default_chart
from critters.progression.skills import Skill
from critters.trainers.ai import score_skill
from critters.trainers.trainer import KEEP_CURRENT, Trainer, TrainerController, TrainerId

logger = logging.getLogger(__name__)


class GameManager:
    """
    Wires the battle core together for a front-end.

    Usage:
        game = GameManager(Trainer(TrainerId("player"), "Ash"), rng=random.Random(42))
        game.player.add_creature(game.generate_random_creature(CreatureId("c1"), "Pyro", 5))
        battle = game.start_wild_battle(area_level=3)
    """

    def __init__(
        self,
        player: Trainer,
        chart: Optional[TypeChart] = None,
        rules: Optional[BattleRules] = None,
        events: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
    ):
        self.player = player
        self.chart = chart or default_chart()
        self.rules = rules or DEFAULT_RULES
        self.rng = rng or random.Random()
        self.events = events or EventBus()

        self.generator = CreatureGenerator(self.chart, self.rules, self.rng)
        self.battle_manager = BattleManager(self.events, self.rules, self.rng)
        self.npcs: dict[TrainerId, Trainer] = {}
        self._wild_ids = itertools.count(1)

    # -- Lookups ----------------------------------------------------------

    def resolve_type(self, name: str) -> TypeTag:
        """Type by name, falling back to the first known type."""
        tag = self.chart.roster.get(name)
        if tag is None:
            tag = self.chart.roster.first()
            logger.warning(f"Unknown type '{name}', using {tag.name}")
        return tag

    def register_npc(self, trainer: Trainer) -> None:
        self.npcs[trainer.id] = trainer

    # -- Creatures and battles --------------------------------------------

    def generate_random_creature(
        self,
        creature_id: CreatureId,
        name: str,
        level: int,
        type_name: Optional[str] = None,
    ) -> Creature:
        primary = self.resolve_type(type_name) if type_name else None
        return self.generator.generate(creature_id, name, level, primary)

    def start_wild_battle(self, area_level: int) -> Optional[Battle]:
        wild = self.generator.generate_wild(CreatureId(f"wild_{next(self._wild_ids)}"), area_level)
        logger.info(f"A wild {wild.name} (lv{wild.level}) appears")
        return self.battle_manager.create_wild_battle(self.player, wild)

    def start_trainer_battle(self, opponent_id: TrainerId) -> Optional[Battle]:
        """
        Battle a registered NPC.

        Returns:
            The battle, or None for an unknown trainer or empty rosters
        """
        opponent = self.npcs.get(opponent_id)
        if opponent is None:
            logger.warning(f"Unknown trainer: {opponent_id}")
            return None
        return self.battle_manager.create_battle(self.player, opponent)

    # -- Turn driving -----------------------------------------------------

    def run_ai_turn(self, battle: Battle, controller: TrainerController) -> AttackOutcome | bool:
        """
        Let ``controller`` act for whichever side is to move.

        A requested switch goes to the controller's pick among the other
        living creatures; if there is none, or the pick is out of range,
        the best affordable skill is used instead. An attack that deals
        no damage forfeits the turn so the opponent can move.

        Returns:
            The attack outcome, or the switch result
        """
        team = battle.team_a if battle.is_team_a_turn else battle.team_b
        own, enemy = battle.active_creature, battle.opponent_creature

        skill = controller.choose_action(own, enemy)
        if skill is not None:
            return self._attack_or_pass(battle, skill)

        bench = [c for c in team if c.is_alive and c is not own]
        if bench:
            pick = controller.choose_creature(bench, None, enemy)
            if 0 <= pick < len(bench):
                index = team.index(bench[pick])
                return battle.switch_creature_a(index) if battle.is_team_a_turn else battle.switch_creature_b(index)
            if pick != KEEP_CURRENT:
                logger.warning(f"Ignoring switch to bench slot {pick} of {len(bench)}")

        affordable = [s for s in own.active_skills if s.can_use(own.current_action_points)]
        if not affordable:
            logger.warning(f"{own.name} has no usable skill and no one to switch to")
            battle.pass_turn()
            return AttackOutcome(performed=False)
        fallback = max(affordable, key=lambda s: score_skill(s, enemy, self.chart.table, 1))
        return self._attack_or_pass(battle, fallback)

    @staticmethod
    def _attack_or_pass(battle: Battle, skill: Skill) -> AttackOutcome:
        outcome = battle.execute_attack(skill)
        if not outcome and not battle.is_over:
            battle.pass_turn()
        return outcome
