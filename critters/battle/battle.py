"""
Battle - the turn state machine between two teams of creatures.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Sequence

from engine.core.events import EventBus
from critters.config import DEFAULT_RULES, BattleRules
from critters.creatures.creature import Creature, CreatureId
from critters.progression.skills import Skill

logger = logging.getLogger(__name__)


class BattleState(Enum):
    """State of the battle."""
    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    TEAM_A_VICTORY = auto()
    TEAM_B_VICTORY = auto()
    ESCAPED = auto()
    DRAW = auto()

    @property
    def is_terminal(self) -> bool:
        return self not in (BattleState.NOT_STARTED, BattleState.IN_PROGRESS)


class BattleEvent(Enum):
    """Battle notifications, published in order on the battle's EventBus."""
    BATTLE_START = auto()       # battle
    TURN_START = auto()         # battle, is_team_a_turn, turn, creature
    ATTACK_PERFORMED = auto()   # battle, attacker, defender, skill, damage, effectiveness, skill_leveled
    CREATURE_DEFEATED = auto()  # battle, creature
    CREATURE_SWITCHED = auto()  # battle, old, new, is_team_a
    BATTLE_END = auto()         # battle, result


@dataclass
class AttackOutcome:
    """
    What ``Battle.execute_attack`` did.

    Truthy when the attack was performed, which takes damage > 0.
    """
    performed: bool
    damage: int = 0
    effectiveness: float = 1.0
    defender_defeated: bool = False

    def __bool__(self) -> bool:
        return self.performed


class Battle:
    """
    Turn-based battle between team A (the player side) and team B.

    Creatures are borrowed, not owned: they outlive the battle and keep
    their damage, XP and levels afterwards.

    Usage:
        battle = Battle(player_team, wild_team, events=bus, rng=random.Random(1))
        battle.start()
        while battle.state == BattleState.IN_PROGRESS:
            battle.execute_attack(battle.active_creature.active_skills[0])
    """

    def __init__(
        self,
        team_a: Sequence[Creature],
        team_b: Sequence[Creature],
        events: Optional[EventBus] = None,
        rules: Optional[BattleRules] = None,
        rng: Optional[random.Random] = None,
    ):
        if not team_a or not team_b:
            raise ValueError("Both teams need at least one creature")

        self.events = events or EventBus()
        self.rules = rules or DEFAULT_RULES
        self.rng = rng or random.Random()

        self._team_a: list[Creature] = list(team_a)
        self._team_b: list[Creature] = list(team_b)
        self.active_a: Creature = self._team_a[0]
        self.active_b: Creature = self._team_b[0]

        self.state = BattleState.NOT_STARTED
        self.current_turn = 0
        self.is_team_a_turn = True
        self.experience_awarded: dict[CreatureId, int] = {}

    # -- Accessors --------------------------------------------------------

    @property
    def team_a(self) -> list[Creature]:
        return list(self._team_a)

    @property
    def team_b(self) -> list[Creature]:
        return list(self._team_b)

    @property
    def active_creature(self) -> Creature:
        """Creature whose turn it is."""
        return self.active_a if self.is_team_a_turn else self.active_b

    @property
    def opponent_creature(self) -> Creature:
        return self.active_b if self.is_team_a_turn else self.active_a

    @property
    def is_wild(self) -> bool:
        return len(self._team_b) == 1

    @property
    def is_over(self) -> bool:
        return self.state.is_terminal

    # -- Lifecycle --------------------------------------------------------

    def start(self) -> bool:
        """
        Begin the battle; the faster active creature moves first (ties go to A).

        Returns:
            False if the battle was already started
        """
        if self.state != BattleState.NOT_STARTED:
            logger.warning(f"Battle already started (state={self.state.name})")
            return False

        self.active_a = self._team_a[0]
        self.active_b = self._team_b[0]
        self.state = BattleState.IN_PROGRESS
        self.is_team_a_turn = self.active_a.stats.speed >= self.active_b.stats.speed

        logger.info(
            f"Battle started: {self.active_a.name} vs {self.active_b.name}, "
            f"{'A' if self.is_team_a_turn else 'B'} moves first"
        )
        self.events.publish(BattleEvent.BATTLE_START, battle=self)
        self._start_next_turn()
        return True

    def _start_next_turn(self) -> None:
        self.current_turn += 1

        creature = self.active_creature
        creature.restore_action_points(self.rules.action_points_per_turn)
        creature.update_effects()

        logger.debug(f"Turn {self.current_turn}: {creature.name} ({creature.current_action_points} AP)")
        self.events.publish(
            BattleEvent.TURN_START,
            battle=self,
            is_team_a_turn=self.is_team_a_turn,
            turn=self.current_turn,
            creature=creature,
        )

    def _pass_turn(self) -> None:
        self.is_team_a_turn = not self.is_team_a_turn
        self._start_next_turn()

    # -- Actions ----------------------------------------------------------

    def execute_attack(self, skill: Skill) -> AttackOutcome:
        """
        The active creature uses ``skill`` on the opposing active creature.

        A knockout triggers an automatic replacement from the defender's
        roster; with nobody left the attacker's team wins immediately and
        no further turn starts.

        Args:
            skill: Equipped skill of the creature whose turn it is

        Returns:
            AttackOutcome, falsy when no damage was dealt. The turn only
            passes on damage.
        """
        if self.state != BattleState.IN_PROGRESS:
            logger.warning(f"Attack attempted while battle is {self.state.name}")
            return AttackOutcome(performed=False)

        attacker_is_a = self.is_team_a_turn
        attacker = self.active_creature
        defender = self.opponent_creature

        result = attacker.resolve_attack(defender, skill)
        if result.damage <= 0:
            # Immune targets and zero-power skills leave the turn where it is
            if result.performed:
                logger.debug(f"{attacker.name}'s {skill.name} dealt no damage, turn stays with {attacker.name}")
            return AttackOutcome(performed=False, effectiveness=result.effectiveness)

        self.events.publish(
            BattleEvent.ATTACK_PERFORMED,
            battle=self,
            attacker=attacker,
            defender=defender,
            skill=result.skill,
            damage=result.damage,
            effectiveness=result.effectiveness,
            skill_leveled=result.skill_leveled,
        )
        outcome = AttackOutcome(
            performed=True,
            damage=result.damage,
            effectiveness=result.effectiveness,
        )

        if defender.is_dead:
            outcome.defender_defeated = True
            self.events.publish(BattleEvent.CREATURE_DEFEATED, battle=self, creature=defender)

            replaced = self.switch_to_next_creature_b() if attacker_is_a else self.switch_to_next_creature_a()
            if not replaced:
                self.end_battle(BattleState.TEAM_A_VICTORY if attacker_is_a else BattleState.TEAM_B_VICTORY)
                return outcome

        self._pass_turn()
        return outcome

    def switch_creature_a(self, index: int) -> bool:
        return self._switch(self._team_a, index, is_team_a=True)

    def switch_creature_b(self, index: int) -> bool:
        return self._switch(self._team_b, index, is_team_a=False)

    def _switch(self, team: list[Creature], index: int, is_team_a: bool) -> bool:
        """
        Bring ``team[index]`` in.

        A voluntary switch (current creature still standing) is only
        allowed on that team's turn and uses the turn up. Replacing a
        knocked-out creature is free.
        """
        if self.state != BattleState.IN_PROGRESS:
            return False
        if not 0 <= index < len(team) or team[index].is_dead:
            logger.warning(f"Invalid switch to slot {index} for team {'A' if is_team_a else 'B'}")
            return False

        old = self.active_a if is_team_a else self.active_b
        if team[index] is old:
            logger.warning(f"{old.name} is already in battle")
            return False
        voluntary = not old.is_dead
        if voluntary and is_team_a != self.is_team_a_turn:
            logger.warning(f"Team {'A' if is_team_a else 'B'} cannot switch on the opponent's turn")
            return False

        if is_team_a:
            self.active_a = team[index]
        else:
            self.active_b = team[index]

        self.events.publish(
            BattleEvent.CREATURE_SWITCHED,
            battle=self,
            old=old,
            new=team[index],
            is_team_a=is_team_a,
        )

        if voluntary:
            self._pass_turn()
        return True

    def switch_to_next_creature_a(self) -> bool:
        """Switch team A to its first living, non-active creature."""
        return self._switch_to_next(self._team_a, self.active_a, self.switch_creature_a)

    def switch_to_next_creature_b(self) -> bool:
        return self._switch_to_next(self._team_b, self.active_b, self.switch_creature_b)

    @staticmethod
    def _switch_to_next(team: list[Creature], active: Creature, switch) -> bool:
        for i, creature in enumerate(team):
            if creature.is_alive and creature is not active:
                return switch(i)
        return False

    def escape_chance(self) -> float:
        """Chance for team A to flee, from the active creatures' speeds."""
        factor = self.active_a.stats.speed - self.active_b.stats.speed + self.rules.escape_speed_offset
        return min(self.rules.escape_chance_max, max(self.rules.escape_chance_min, factor / 100))

    def try_escape(self) -> bool:
        """
        Team A tries to flee.

        Only possible against a single opponent (wild encounters). A
        failed attempt still uses up team A's turn.

        Returns:
            True if the battle ended in escape
        """
        if self.state != BattleState.IN_PROGRESS or not self.is_team_a_turn:
            return False
        if not self.is_wild:
            logger.debug("Cannot escape from a trainer battle")
            return False

        if self.rng.random() < self.escape_chance():
            self.end_battle(BattleState.ESCAPED)
            return True

        self._pass_turn()
        return False

    def pass_turn(self) -> bool:
        """
        The side to move gives up its turn.

        Lets a driver move on when the active creature has no way to
        deal damage this turn.

        Returns:
            False unless the battle is in progress
        """
        if self.state != BattleState.IN_PROGRESS:
            return False
        logger.debug(f"{self.active_creature.name} passes turn {self.current_turn}")
        self._pass_turn()
        return True

    def end_battle(self, result: BattleState) -> None:
        """
        Finish the battle with ``result``.

        No-op unless the battle is in progress. Victories award XP to
        the winning team.
        """
        if self.state != BattleState.IN_PROGRESS or not result.is_terminal:
            return

        self.state = result
        if result == BattleState.TEAM_A_VICTORY:
            self._distribute_experience(self._team_a, self._team_b)
        elif result == BattleState.TEAM_B_VICTORY:
            self._distribute_experience(self._team_b, self._team_a)

        logger.info(f"Battle ended after {self.current_turn} turns: {result.name}")
        self.events.publish(BattleEvent.BATTLE_END, battle=self, result=result)

    def _distribute_experience(self, winners: list[Creature], losers: list[Creature]) -> None:
        base_xp = (
            sum(c.stats.level for c in losers) * self.rules.xp_per_loser_level
            + self.current_turn * self.rules.xp_per_turn
        )
        recipients = [c for c in winners if c.is_alive]
        if not recipients:
            return

        share = base_xp // len(recipients)
        for creature in recipients:
            bonus = self.rules.active_creature_xp_bonus if creature in (self.active_a, self.active_b) else 0
            self.experience_awarded[creature.id] = share + bonus
            if creature.gain_experience(share + bonus):
                creature.on_level_up()
