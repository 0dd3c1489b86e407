import random
import pytest
from engine.core.events import EventBus
from critters.battle import Battle, BattleState, BattleEvent
from critters.components import AffectedStat, EffectKind, SkillEffect
from critters.config import BattleRules


@pytest.fixture
def fighter(make_creature, grant_skill):
    """Creature with one equipped skill; returns (creature, skill)."""
    def _make(name, type_name="Fire", power=10, cost=2, **stats):
        creature = make_creature(name, type_name, **stats)
        skill = grant_skill(creature, skill_id=f"skill_{name.lower()}", power=power, cost=cost)
        return creature, skill
    return _make


@pytest.fixture
def recorder(event_bus):
    seen = []
    event_bus.subscribe_many(BattleEvent, seen.append, weak=False)
    return seen


def test_empty_team_rejected(make_creature):
    with pytest.raises(ValueError):
        Battle([], [make_creature("Solo")])
    with pytest.raises(ValueError):
        Battle([make_creature("Solo")], [])


def test_faster_creature_moves_first(make_creature):
    slow = make_creature("Slow", base_speed=5)
    fast = make_creature("Fast", base_speed=20)

    battle = Battle([slow], [fast])
    assert battle.start()

    assert battle.state == BattleState.IN_PROGRESS
    assert not battle.is_team_a_turn
    assert battle.active_creature is fast
    assert battle.current_turn == 1


def test_speed_tie_goes_to_team_a(make_creature):
    battle = Battle([make_creature("A")], [make_creature("B")])
    battle.start()

    assert battle.is_team_a_turn


def test_start_only_once(make_creature):
    battle = Battle([make_creature("A")], [make_creature("B")])
    assert battle.start()
    assert not battle.start()
    assert battle.current_turn == 1


def test_attack_passes_the_turn(fighter, event_bus, recorder):
    pyro, skill = fighter("Pyro")
    target, _ = fighter("Target", max_health=200, health=200)
    battle = Battle([pyro], [target], events=event_bus)
    battle.start()

    outcome = battle.execute_attack(skill)

    assert outcome
    assert outcome.damage > 0
    assert not outcome.defender_defeated
    assert not battle.is_team_a_turn
    assert battle.current_turn == 2
    assert [e.type for e in recorder] == [
        BattleEvent.BATTLE_START,
        BattleEvent.TURN_START,
        BattleEvent.ATTACK_PERFORMED,
        BattleEvent.TURN_START,
    ]
    attack = recorder[2]
    assert attack["attacker"] is pyro
    assert attack["defender"] is target
    assert attack["damage"] == outcome.damage
    assert recorder[3]["creature"] is target


def test_turn_start_restores_action_points(fighter):
    pyro, skill = fighter("Pyro", cost=3)
    target, other = fighter("Target", cost=1, max_health=500, health=500)
    battle = Battle([pyro], [target])
    battle.start()

    battle.execute_attack(skill)
    assert pyro.current_action_points == 7

    battle.execute_attack(other)
    assert pyro.current_action_points == 9


def test_rejected_attack_keeps_the_turn(fighter):
    pyro, skill = fighter("Pyro", cost=4)
    target, _ = fighter("Target")
    battle = Battle([pyro], [target])
    battle.start()
    pyro.current_action_points = 1

    outcome = battle.execute_attack(skill)

    assert not outcome
    assert battle.is_team_a_turn
    assert battle.current_turn == 1
    assert target.stats.health == 50


def test_immune_defender_keeps_the_turn(fighter, event_bus, recorder):
    sparky, skill = fighter("Sparky", "Electric")
    rocky, _ = fighter("Rocky", "Ground")
    battle = Battle([sparky], [rocky], events=event_bus)
    battle.start()

    outcome = battle.execute_attack(skill)

    assert not outcome
    assert outcome.damage == 0
    assert outcome.effectiveness == 0.0
    assert battle.is_team_a_turn
    assert battle.current_turn == 1
    assert [e.type for e in recorder] == [BattleEvent.BATTLE_START, BattleEvent.TURN_START]


def test_status_skill_keeps_the_turn(fighter, grant_skill, event_bus, recorder):
    pyro, _ = fighter("Pyro")
    target, _ = fighter("Target")
    shield = SkillEffect(
        id="effect_shield", name="Shield", kind=EffectKind.STAT_BOOST,
        duration=3, intensity=5, affected_stat=AffectedStat.CONSTITUTION,
    )
    guard = grant_skill(pyro, skill_id="skill_guard", power=0, cost=1, effects=[shield])
    battle = Battle([pyro], [target], events=event_bus)
    battle.start()

    outcome = battle.execute_attack(guard)

    assert not outcome
    assert battle.is_team_a_turn
    assert battle.current_turn == 1
    assert BattleEvent.ATTACK_PERFORMED not in [e.type for e in recorder]


def test_effects_tick_only_on_their_holders_turn(fighter, grant_skill):
    sprout, vine_whip = fighter("Sprout", "Nature", cost=1, base_speed=20)
    leafy = SkillEffect(id="effect_leafy", name="Leafy", kind=EffectKind.STATUS_EFFECT, duration=2)
    seed = grant_skill(sprout, skill_id="skill_seed", power=10, cost=1, effects=[leafy])
    target, tackle = fighter("Target", "Fire", cost=1, base_speed=5)
    battle = Battle([sprout], [target])
    battle.start()
    assert battle.is_team_a_turn

    battle.execute_attack(seed)
    # Target's own turn has started: one tick
    assert [e.duration for e in target.active_effects] == [1]

    battle.execute_attack(tackle)
    # Sprout's turn: Target's effect is left alone
    assert battle.is_team_a_turn
    assert [e.duration for e in target.active_effects] == [1]

    battle.execute_attack(vine_whip)
    # Target's next turn: ticked to 0 and dropped
    assert not battle.is_team_a_turn
    assert target.active_effects == []


def test_pass_turn(fighter, event_bus, recorder):
    pyro, _ = fighter("Pyro")
    target, _ = fighter("Target")
    battle = Battle([pyro], [target], events=event_bus)

    assert not battle.pass_turn()

    battle.start()
    assert battle.pass_turn()
    assert not battle.is_team_a_turn
    assert battle.current_turn == 2
    assert recorder[-1].type == BattleEvent.TURN_START
    assert recorder[-1]["creature"] is target

    battle.end_battle(BattleState.DRAW)
    assert not battle.pass_turn()


def test_knockout_of_last_creature_ends_battle(fighter, event_bus, recorder):
    brute, skill = fighter("Brute", power=50, base_strength=100)
    victim, _ = fighter("Victim")
    battle = Battle([brute], [victim], events=event_bus)
    battle.start()

    outcome = battle.execute_attack(skill)

    assert outcome.defender_defeated
    assert battle.state == BattleState.TEAM_A_VICTORY
    assert battle.is_over
    # No turn flip after the final blow
    assert battle.is_team_a_turn
    assert battle.current_turn == 1
    assert [e.type for e in recorder] == [
        BattleEvent.BATTLE_START,
        BattleEvent.TURN_START,
        BattleEvent.ATTACK_PERFORMED,
        BattleEvent.CREATURE_DEFEATED,
        BattleEvent.BATTLE_END,
    ]
    assert recorder[-1]["result"] == BattleState.TEAM_A_VICTORY


def test_knockout_brings_in_replacement(fighter, event_bus, recorder):
    brute, skill = fighter("Brute", power=50, base_strength=100)
    first, _ = fighter("First")
    second, _ = fighter("Second")
    battle = Battle([brute], [first, second], events=event_bus)
    battle.start()

    battle.execute_attack(skill)

    assert battle.state == BattleState.IN_PROGRESS
    assert battle.active_b is second
    # Exactly one flip: the replacement moves next
    assert not battle.is_team_a_turn
    assert battle.current_turn == 2
    assert [e.type for e in recorder][2:] == [
        BattleEvent.ATTACK_PERFORMED,
        BattleEvent.CREATURE_DEFEATED,
        BattleEvent.CREATURE_SWITCHED,
        BattleEvent.TURN_START,
    ]
    switched = recorder[4]
    assert switched["old"] is first
    assert switched["new"] is second
    assert not switched["is_team_a"]


def test_team_b_can_win(fighter):
    weak, weak_skill = fighter("Weak", base_speed=1)
    brute, skill = fighter("Brute", power=50, base_strength=100, base_speed=30)
    battle = Battle([weak], [brute])
    battle.start()

    battle.execute_attack(skill)

    assert battle.state == BattleState.TEAM_B_VICTORY


def test_voluntary_switch_uses_the_turn(make_creature, event_bus, recorder):
    lead, bench = make_creature("Lead"), make_creature("Bench")
    foe = make_creature("Foe")
    battle = Battle([lead, bench], [foe], events=event_bus)
    battle.start()

    assert battle.switch_creature_a(1)

    assert battle.active_a is bench
    assert not battle.is_team_a_turn
    assert battle.current_turn == 2
    assert [e.type for e in recorder][-2:] == [BattleEvent.CREATURE_SWITCHED, BattleEvent.TURN_START]


def test_invalid_switches(make_creature):
    lead, bench, fainted = make_creature("Lead"), make_creature("Bench"), make_creature("Fainted")
    fainted.take_damage(999)
    foe = make_creature("Foe")
    battle = Battle([lead, bench, fainted], [foe])

    # Not started yet
    assert not battle.switch_creature_a(1)

    battle.start()
    assert not battle.switch_creature_a(5)
    assert not battle.switch_creature_a(-1)
    assert not battle.switch_creature_a(2)
    assert not battle.switch_creature_a(0)
    # Team B may not switch on team A's turn
    assert not battle.switch_creature_b(0)

    assert battle.active_a is lead
    assert battle.is_team_a_turn
    assert battle.current_turn == 1


def test_escape_chance_from_speeds(make_creature):
    even = Battle([make_creature("A")], [make_creature("B")])
    assert even.escape_chance() == pytest.approx(0.3)

    fast = Battle([make_creature("A", base_speed=200)], [make_creature("B")])
    assert fast.escape_chance() == 0.95

    slow = Battle([make_creature("A", base_speed=1)], [make_creature("B", base_speed=90)])
    assert slow.escape_chance() == 0.1


def test_escape_rate_matches_chance(make_creature):
    runner, wild = make_creature("Runner"), make_creature("Wild")
    rng = random.Random(2024)
    trials = 3000

    escapes = 0
    for _ in range(trials):
        battle = Battle([runner], [wild], rng=rng)
        battle.start()
        escapes += battle.try_escape()

    assert escapes / trials == pytest.approx(0.3, abs=0.04)


def test_failed_escape_uses_the_turn(make_creature):
    never = BattleRules(escape_chance_min=0.0, escape_chance_max=0.0)
    battle = Battle([make_creature("A")], [make_creature("B")], rules=never, rng=random.Random(1))
    battle.start()

    assert not battle.try_escape()
    assert battle.state == BattleState.IN_PROGRESS
    assert not battle.is_team_a_turn

    # Only team A may run, and only on its turn
    assert not battle.try_escape()
    assert battle.current_turn == 2


def test_successful_escape(make_creature, event_bus, recorder):
    always = BattleRules(escape_chance_min=1.0, escape_chance_max=1.0)
    a, b = make_creature("A"), make_creature("B")
    battle = Battle([a], [b], events=event_bus, rules=always, rng=random.Random(1))
    battle.start()

    assert battle.try_escape()
    assert battle.state == BattleState.ESCAPED
    assert recorder[-1].type == BattleEvent.BATTLE_END
    assert battle.experience_awarded == {}
    assert a.stats.experience == 0


def test_no_escape_from_trainer_battles(make_creature):
    always = BattleRules(escape_chance_min=1.0, escape_chance_max=1.0)
    battle = Battle([make_creature("A")], [make_creature("B"), make_creature("C")], rules=always)
    battle.start()

    assert not battle.try_escape()
    assert battle.state == BattleState.IN_PROGRESS
    assert battle.is_team_a_turn
    assert battle.current_turn == 1


def test_victory_experience_split(make_creature):
    lead, partner = make_creature("Lead"), make_creature("Partner")
    foes = [make_creature("Foe1", level=4), make_creature("Foe2", level=6)]
    battle = Battle([lead, partner], foes)
    battle.start()
    battle.current_turn = 4

    battle.end_battle(BattleState.TEAM_A_VICTORY)

    # (4 + 6) * 5 + 4 * 2 = 58, split two ways, +10 for the active creature
    assert battle.experience_awarded == {lead.id: 39, partner.id: 29}
    assert lead.stats.experience == 39
    assert partner.stats.experience == 29
    assert foes[0].stats.experience == 0


def test_fainted_winners_get_no_experience(make_creature):
    lead, fainted = make_creature("Lead"), make_creature("Fainted")
    battle = Battle([lead, fainted], [make_creature("Foe", level=10)])
    battle.start()
    fainted.take_damage(999)

    battle.end_battle(BattleState.TEAM_A_VICTORY)

    # 10 * 5 + 1 * 2 = 52, one recipient, +10 active bonus
    assert battle.experience_awarded == {lead.id: 62}
    assert fainted.stats.experience == 0


def test_victory_experience_can_level_up(make_creature):
    lead = make_creature("Lead")
    battle = Battle([lead], [make_creature("Boss", level=20)])
    battle.start()

    battle.end_battle(BattleState.TEAM_A_VICTORY)

    assert lead.level == 2
    assert lead.skill_points == 5


def test_end_battle_is_idempotent(make_creature, event_bus, recorder):
    lead = make_creature("Lead")
    battle = Battle([lead], [make_creature("Foe")], events=event_bus)
    battle.start()

    battle.end_battle(BattleState.DRAW)
    battle.end_battle(BattleState.TEAM_A_VICTORY)

    assert battle.state == BattleState.DRAW
    assert [e.type for e in recorder].count(BattleEvent.BATTLE_END) == 1
    assert lead.stats.experience == 0


def test_end_battle_requires_terminal_result(make_creature):
    battle = Battle([make_creature("A")], [make_creature("B")])
    battle.start()

    battle.end_battle(BattleState.IN_PROGRESS)

    assert battle.state == BattleState.IN_PROGRESS


def test_finished_battle_rejects_actions(fighter):
    pyro, skill = fighter("Pyro")
    battle = Battle([pyro, fighter("Bench")[0]], [fighter("Foe")[0]])
    battle.start()
    battle.end_battle(BattleState.DRAW)

    assert not battle.execute_attack(skill)
    assert pyro.current_action_points == 10
    assert not battle.switch_creature_a(1)
    assert not battle.try_escape()


def test_team_accessors_return_copies(make_creature):
    a, b = make_creature("A"), make_creature("B")
    battle = Battle([a], [b])

    battle.team_a.clear()

    assert battle.team_a == [a]
    assert battle.is_wild
