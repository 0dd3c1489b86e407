"""
Battle manager - creates battles from trainer rosters and narrates them.
"""

from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import Optional

from engine.core.events import Event, EventBus
from critters.battle.battle import Battle, BattleEvent, BattleState
from critters.config import DEFAULT_RULES, BattleRules
from critters.creatures.creature import Creature
from critters.trainers.trainer import Trainer

logger = logging.getLogger(__name__)


class ManagerEvent(Enum):
    """Battle manager notifications for presentation layers."""
    BATTLE_CREATED = auto()    # battle
    BATTLE_COMPLETED = auto()  # battle, result
    MESSAGE = auto()           # text


_END_MESSAGES = {
    BattleState.TEAM_A_VICTORY: "You won the battle!",
    BattleState.TEAM_B_VICTORY: "You lost the battle...",
    BattleState.ESCAPED: "You got away safely!",
    BattleState.DRAW: "The battle ended in a draw.",
}


def effectiveness_text(effectiveness: float, defender: Creature) -> str:
    """Commentary for a type multiplier ('' when unremarkable)."""
    if effectiveness > 1.5:
        return "It's super effective! "
    if 0 < effectiveness < 0.5:
        return "It's not very effective... "
    if effectiveness == 0:
        return f"It doesn't affect {defender.name}... "
    return ""


class BattleManager:
    """
    Builds battles and turns their events into readable messages.

    Battles created here publish on the manager's EventBus, so one
    subscription covers both raw battle events and manager events.

    Usage:
        manager = BattleManager(rng=random.Random(4))
        manager.events.subscribe(ManagerEvent.MESSAGE, lambda e: print(e["text"]), weak=False)
        battle = manager.create_wild_battle(player, wild)
        battle.start()
    """

    def __init__(
        self,
        events: Optional[EventBus] = None,
        rules: Optional[BattleRules] = None,
        rng: Optional[random.Random] = None,
    ):
        self.events = events or EventBus()
        self.rules = rules or DEFAULT_RULES
        self.rng = rng or random.Random()
        self.current_battle: Optional[Battle] = None
        self.messages: list[str] = []

        self.events.subscribe_many(BattleEvent, self._on_battle_event)

    # -- Creation ---------------------------------------------------------

    def create_battle(self, player: Trainer, opponent: Trainer) -> Optional[Battle]:
        """
        Start a trainer battle from both trainers' conscious creatures.

        Returns:
            The (unstarted) battle, or None if either side has no one able to fight
        """
        player_team = player.active_creatures()
        opponent_team = opponent.active_creatures()
        if not player_team or not opponent_team:
            self._message("Cannot start the battle: a trainer has no creatures able to fight.")
            return None
        return self._register(Battle(player_team, opponent_team, events=self.events, rules=self.rules, rng=self.rng))

    def create_wild_battle(self, player: Trainer, wild_creature: Creature) -> Optional[Battle]:
        player_team = player.active_creatures()
        if not player_team:
            self._message("Cannot start the battle: you have no creatures able to fight.")
            return None
        return self._register(Battle(player_team, [wild_creature], events=self.events, rules=self.rules, rng=self.rng))

    def _register(self, battle: Battle) -> Battle:
        self.current_battle = battle
        self.events.publish(ManagerEvent.BATTLE_CREATED, battle=battle)
        return battle

    # -- Narration --------------------------------------------------------

    def _message(self, text: str) -> None:
        self.messages.append(text)
        logger.debug(text)
        self.events.publish(ManagerEvent.MESSAGE, text=text)

    def _on_battle_event(self, event: Event) -> None:
        battle: Battle = event["battle"]
        if battle is not self.current_battle:
            return

        if event.type == BattleEvent.BATTLE_START:
            self._message("The battle begins!")

        elif event.type == BattleEvent.TURN_START:
            creature: Creature = event["creature"]
            owner = "your" if event["is_team_a_turn"] else "the opponent's"
            self._message(
                f"It's {owner} {creature.name}'s turn "
                f"(AP: {creature.current_action_points}/{creature.max_action_points})"
            )

        elif event.type == BattleEvent.ATTACK_PERFORMED:
            attacker, defender, skill = event["attacker"], event["defender"], event["skill"]
            self._message(
                f"{attacker.name} uses {skill.name}! "
                f"{effectiveness_text(event['effectiveness'], defender)}"
                f"{defender.name} loses {event['damage']} HP!"
            )
            if event.get("skill_leveled"):
                self._message(f"{skill.name} grew to level {skill.level}!")

        elif event.type == BattleEvent.CREATURE_DEFEATED:
            self._message(f"{event['creature'].name} fainted!")

        elif event.type == BattleEvent.CREATURE_SWITCHED:
            side = "Your team" if event["is_team_a"] else "The opposing team"
            self._message(f"{side} switches out. {event['old'].name} returns and {event['new'].name} steps in!")

        elif event.type == BattleEvent.BATTLE_END:
            result: BattleState = event["result"]
            self._message(_END_MESSAGES.get(result, "The battle is over."))
            self.events.publish(ManagerEvent.BATTLE_COMPLETED, battle=battle, result=result)
            self.current_battle = None
