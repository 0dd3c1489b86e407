import pytest
from critters.config import BattleRules
from critters.trainers import Trainer, TrainerId, HumanController, KEEP_CURRENT


def test_roster_limit(make_creature):
    trainer = Trainer(TrainerId("ash"), "Ash")
    for i in range(6):
        assert trainer.add_creature(make_creature(f"C{i}"))

    assert not trainer.add_creature(make_creature("Extra"))
    assert len(trainer.creatures) == 6


def test_gym_leader_carries_more(make_creature):
    leader = Trainer(TrainerId("brock"), "Brock", is_gym_leader=True)
    assert leader.max_creatures == 8

    for i in range(8):
        assert leader.add_creature(make_creature(f"C{i}"))
    assert not leader.add_creature(make_creature("Extra"))


def test_custom_rules_change_limits():
    rules = BattleRules(max_team_size=3, gym_leader_team_bonus=1)
    assert Trainer(TrainerId("a"), "A", rules=rules).max_creatures == 3
    assert Trainer(TrainerId("b"), "B", is_gym_leader=True, rules=rules).max_creatures == 4


def test_same_creature_added_once(make_creature):
    trainer = Trainer(TrainerId("ash"), "Ash")
    pyro = make_creature("Pyro")

    assert trainer.add_creature(pyro)
    assert not trainer.add_creature(pyro)
    assert trainer.remove_creature(pyro)
    assert not trainer.remove_creature(pyro)


def test_active_creatures_and_defeat(make_creature):
    trainer = Trainer(TrainerId("ash"), "Ash")
    a, b = make_creature("A"), make_creature("B")
    trainer.add_creature(a)
    trainer.add_creature(b)

    a.take_damage(999)
    assert trainer.active_creatures() == [b]
    assert not trainer.is_defeated()

    b.take_damage(999)
    assert trainer.is_defeated()

    trainer.heal_all_creatures()
    assert trainer.active_creatures() == [a, b]
    assert a.stats.health == a.stats.max_health


def test_human_controller_defers_to_callbacks(make_creature, grant_skill):
    own, enemy = make_creature("Own"), make_creature("Enemy")
    skill = grant_skill(own)
    calls = []

    def pick_action(mine, theirs):
        calls.append((mine, theirs))
        return skill

    controller = HumanController(on_choose_action=pick_action, on_choose_creature=lambda team, cur, e: 1)
    trainer = Trainer(TrainerId("ash"), "Ash", controller=controller)

    assert trainer.choose_action(own, enemy) is skill
    assert calls == [(own, enemy)]
    assert trainer.choose_creature([own, enemy], own, enemy) == 1


def test_human_controller_without_callbacks(make_creature):
    own, enemy = make_creature("Own"), make_creature("Enemy")
    controller = HumanController()

    assert controller.choose_action(own, enemy) is None
    assert controller.choose_creature([own], own, enemy) == KEEP_CURRENT


def test_average_level(make_creature):
    trainer = Trainer(TrainerId("ash"), "Ash")
    assert trainer.average_level() == 0.0

    trainer.add_creature(make_creature("A", level=2))
    trainer.add_creature(make_creature("B", level=5))
    assert trainer.average_level() == 3.5


def test_creatures_of_type(make_creature, roster):
    trainer = Trainer(TrainerId("ash"), "Ash")
    pyro = make_creature("Pyro", "Fire")
    aqua = make_creature("Aqua", "Water")
    steam = make_creature("Steam", "Water", secondary="Fire")
    for creature in (pyro, aqua, steam):
        trainer.add_creature(creature)

    assert trainer.creatures_of_type(roster.require("Fire")) == [pyro, steam]
    assert trainer.creatures_of_type(roster.require("Ground")) == []


def test_best_creature_against(make_creature, roster):
    trainer = Trainer(TrainerId("ash"), "Ash")
    assert trainer.best_creature_against(roster.require("Fire")) is None

    pyro = make_creature("Pyro", "Fire")
    aqua = make_creature("Aqua", "Water")
    splash = make_creature("Splash", "Water")
    for creature in (pyro, aqua, splash):
        trainer.add_creature(creature)

    # Water beats Fire; the first of equal matches wins
    assert trainer.best_creature_against(roster.require("Fire")) is aqua

    aqua.take_damage(999)
    assert trainer.best_creature_against(roster.require("Fire")) is splash
