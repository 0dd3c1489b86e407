"""
Battle rules - tunable constants shared by creatures, battles and trainers.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BattleRules(BaseModel):
    """
    Game balance constants.

    Attributes:
        base_action_points: Action point maximum before speed/spirit bonuses
        action_points_per_turn: AP restored to a creature when its turn starts
        max_equipped_skills: Equipped skill slots per creature
        starting_skill_points: Unassigned skill points a new creature gets
        skill_points_per_level: Skill points awarded on level-up
        max_team_size: Creatures a trainer can carry
        gym_leader_team_bonus: Extra slots for gym leaders
        escape_chance_min: Lower clamp for the escape roll
        escape_chance_max: Upper clamp for the escape roll
        escape_speed_offset: Added to the speed difference before scaling
        xp_per_loser_level: Battle XP per level of each defeated creature
        xp_per_turn: Battle XP per elapsed turn
        active_creature_xp_bonus: Flat XP for the creature that finished the fight
        low_health_ratio: Health fraction under which the AI considers switching
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    base_action_points: int = Field(default=10, ge=1)
    action_points_per_turn: int = Field(default=2, ge=0)
    max_equipped_skills: int = Field(default=4, ge=1)
    starting_skill_points: int = Field(default=3, ge=0)
    skill_points_per_level: int = Field(default=2, ge=0)
    max_team_size: int = Field(default=6, ge=1)
    gym_leader_team_bonus: int = Field(default=2, ge=0)
    escape_chance_min: float = Field(default=0.1, ge=0.0, le=1.0)
    escape_chance_max: float = Field(default=0.95, ge=0.0, le=1.0)
    escape_speed_offset: int = 30
    xp_per_loser_level: int = Field(default=5, ge=0)
    xp_per_turn: int = Field(default=2, ge=0)
    active_creature_xp_bonus: int = Field(default=10, ge=0)
    low_health_ratio: float = Field(default=0.2, ge=0.0, le=1.0)

    @model_validator(mode='after')
    def _check_escape_bounds(self) -> BattleRules:
        if self.escape_chance_min > self.escape_chance_max:
            raise ValueError(
                f"escape_chance_min ({self.escape_chance_min}) exceeds "
                f"escape_chance_max ({self.escape_chance_max})"
            )
        return self


DEFAULT_RULES = BattleRules()
