# ABOUTME: Immutable character creation session and the per-type step sequences
# ABOUTME: Defines wizard steps, their completion predicates, and collected roll data

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from warband_engine.core.character import CharacterType
from warband_engine.rules.equipment import Equipment
from warband_engine.rules.result_parser import Delta


class WizardStep(Enum):
    """Steps of the character creation wizard"""
    NAME = "name"
    ORIGIN = "origin"
    BACKGROUND = "background"
    CAPABILITIES = "capabilities"
    MENTALITY = "mentality"
    POSSESSIONS = "possessions"
    TRAINING = "training"
    SKILLS = "skills"
    EQUIPMENT = "equipment"
    SUMMARY = "summary"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Steps that draw one d20 roll against the chosen background's table
ROLL_STEPS = (
    WizardStep.CAPABILITIES,
    WizardStep.MENTALITY,
    WizardStep.POSSESSIONS,
    WizardStep.TRAINING,
)

STEP_SEQUENCES: Dict[CharacterType, Tuple[WizardStep, ...]] = {
    CharacterType.HERO: (
        WizardStep.NAME,
        WizardStep.ORIGIN,
        WizardStep.BACKGROUND,
        WizardStep.CAPABILITIES,
        WizardStep.MENTALITY,
        WizardStep.POSSESSIONS,
        WizardStep.TRAINING,
        WizardStep.SKILLS,
        WizardStep.EQUIPMENT,
        WizardStep.SUMMARY,
    ),
    # Followers are always the baseline origin and never roll on background tables
    CharacterType.FOLLOWER: (
        WizardStep.NAME,
        WizardStep.EQUIPMENT,
        WizardStep.SUMMARY,
    ),
}


@dataclass(frozen=True)
class RollRecord:
    """
    A resolved background table roll.

    Attributes:
        roll: The d20 result
        result: Display text of the matched entry
        delta: Structured bonuses of the matched entry
    """
    roll: int
    result: str
    delta: Optional[Delta] = None


@dataclass(frozen=True)
class SkillRoll:
    """A resolved d100 skill table roll"""
    roll: int
    skill: str


@dataclass(frozen=True)
class CreationSession:
    """
    Transient state of one character creation.

    Sessions are never mutated: every builder operation returns a new
    session (or the same one when the operation is refused). A session
    is discarded on completion or cancellation and is never persisted.
    """
    character_type: CharacterType
    step_index: int = 0
    name: str = ""
    origin: Optional[str] = None
    background: Optional[str] = None

    capabilities: Optional[RollRecord] = None
    mentality: Optional[RollRecord] = None
    possessions: Optional[RollRecord] = None
    training: Optional[RollRecord] = None

    # Running totals folded in from the roll deltas
    bonus_xp: int = 0
    bonus_will: int = 0
    bonus_luck: int = 0
    gold: int = 0
    granted_item: Optional[str] = None
    skill_quota: int = 0
    skill_rolls: Tuple[SkillRoll, ...] = ()

    selected_equipment: Tuple[Equipment, ...] = ()

    @property
    def steps(self) -> Tuple[WizardStep, ...]:
        return STEP_SEQUENCES[self.character_type]

    @property
    def step(self) -> WizardStep:
        return self.steps[self.step_index]

    @property
    def is_hero(self) -> bool:
        return self.character_type == CharacterType.HERO

    @property
    def at_summary(self) -> bool:
        return self.step == WizardStep.SUMMARY

    @property
    def rolled_skills(self) -> Tuple[str, ...]:
        return tuple(skill_roll.skill for skill_roll in self.skill_rolls)

    @property
    def skills_remaining(self) -> int:
        return max(0, self.skill_quota - len(self.skill_rolls))

    def roll_for(self, step: WizardStep) -> Optional[RollRecord]:
        """Get the recorded roll for one of the four background table steps."""
        if step not in ROLL_STEPS:
            raise KeyError(f"{step.value} is not a roll step")
        return getattr(self, step.value)

    @property
    def has_background_rolls(self) -> bool:
        return any(self.roll_for(step) is not None for step in ROLL_STEPS)

    def has_equipment(self, item: Equipment) -> bool:
        return item in self.selected_equipment

    def evolve(self, **changes: Any) -> "CreationSession":
        return replace(self, **changes)


def _always(session: CreationSession) -> bool:
    return True


def _rolled(step: WizardStep) -> Callable[[CreationSession], bool]:
    def predicate(session: CreationSession) -> bool:
        return session.roll_for(step) is not None
    return predicate


STEP_PREDICATES: Dict[WizardStep, Callable[[CreationSession], bool]] = {
    # A blank name is replaced with a default when the character is assembled
    WizardStep.NAME: _always,
    WizardStep.ORIGIN: lambda session: session.origin is not None,
    WizardStep.BACKGROUND: lambda session: session.background is not None,
    WizardStep.CAPABILITIES: _rolled(WizardStep.CAPABILITIES),
    WizardStep.MENTALITY: _rolled(WizardStep.MENTALITY),
    WizardStep.POSSESSIONS: _rolled(WizardStep.POSSESSIONS),
    WizardStep.TRAINING: _rolled(WizardStep.TRAINING),
    WizardStep.SKILLS: lambda session: len(session.skill_rolls) == session.skill_quota,
    WizardStep.EQUIPMENT: _always,
    WizardStep.SUMMARY: _always,
}


def step_complete(session: CreationSession, step: Optional[WizardStep] = None) -> bool:
    """
    Check a step's completion predicate.

    Args:
        session: Session to check
        step: Step to check (defaults to the session's current step)

    Returns:
        True if the step is satisfied
    """
    return STEP_PREDICATES[step or session.step](session)
