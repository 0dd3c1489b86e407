"""
Battle Demo: AI vs AI

Demonstrates:
- Random creature generation
- Trainer rosters
- Heuristic AI on both sides
- Battle narration through the event bus
- Experience after victory

Run: python demos/battle_demo.py [seed]
"""

import sys
import random
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from critters.battle import ManagerEvent
from critters.creatures import CreatureId
from critters.game import GameManager
from critters.trainers import HeuristicController, Strategy, Trainer, TrainerId

MAX_ACTIONS = 500


def build_game(seed: int) -> GameManager:
    player = Trainer(TrainerId("player"), "Ash")
    game = GameManager(player, rng=random.Random(seed))

    for i, (name, type_name) in enumerate([("Pyro", "Fire"), ("Aqua", "Water"), ("Volt", "Electric")]):
        player.add_creature(game.generate_random_creature(CreatureId(f"player_{i}"), name, 6, type_name))

    rival = Trainer(TrainerId("gary"), "Gary", is_gym_leader=True)
    for i, name in enumerate(["Rex", "Shade", "Gale"]):
        rival.add_creature(game.generate_random_creature(CreatureId(f"gary_{i}"), name, 6))
    game.register_npc(rival)
    return game


def main():
    """Run one trainer battle between two AI controllers."""
    logging.basicConfig(level=logging.WARNING)
    seed = int(sys.argv[1]) if len(sys.argv) > 1 else 7

    game = build_game(seed)
    game.events.subscribe(ManagerEvent.MESSAGE, lambda e: print(e["text"]), weak=False)

    print("Battle Demo")
    print("=" * 50)
    for creature in game.player.creatures + game.npcs[TrainerId("gary")].creatures:
        types = "/".join(t.name for t in creature.types)
        print(f"  {creature.name:<8} lv{creature.level} {types:<16} {', '.join(s.name for s in creature.active_skills)}")
    print("=" * 50)

    battle = game.start_trainer_battle(TrainerId("gary"))
    if battle is None:
        return
    battle.start()

    controllers = {
        True: HeuristicController(difficulty=7, strategy=Strategy.INTELLIGENT, rng=game.rng),
        False: HeuristicController(difficulty=5, strategy=Strategy.BALANCED, rng=game.rng),
    }
    for _ in range(MAX_ACTIONS):
        if battle.is_over:
            break
        game.run_ai_turn(battle, controllers[battle.is_team_a_turn])

    print("=" * 50)
    print(f"Result: {battle.state.name} after {battle.current_turn} turns")
    for creature_id, xp in battle.experience_awarded.items():
        print(f"  {creature_id} gained {xp} XP")


if __name__ == "__main__":
    main()
