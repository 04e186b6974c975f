# ABOUTME: Character creation rule engine driving the step-by-step wizard
# ABOUTME: Pure session transitions for selections, table rolls, equipment limits, and completion

import logging
from typing import Dict, List, Optional

from warband_engine.core.character import Character, CharacterType
from warband_engine.core.character_factory import CharacterFactory
from warband_engine.core.creation_session import (
    ROLL_STEPS,
    CreationSession,
    RollRecord,
    SkillRoll,
    WizardStep,
    step_complete
)
from warband_engine.core.dice import DiceRoller
from warband_engine.core.warband import Warband
from warband_engine.rules.equipment import Equipment, EquipmentCatalog
from warband_engine.rules.loader import DataLoader
from warband_engine.rules.result_parser import MentalityDelta, PossessionsDelta, TrainingDelta
from warband_engine.rules.tables import Background, resolve, skill_for_roll


logger = logging.getLogger(__name__)

BACKGROUND_DIE = 20
SKILL_DIE = 100


class WarbandFullError(ValueError):
    """Raised when starting a hero for a warband already at its hero cap."""


class IncompleteCharacterError(RuntimeError):
    """Raised when complete() is called before every creation step is satisfied."""


class CharacterBuilder:
    """
    Rule engine for creating heroes and followers.

    The builder holds the game tables and the random source. It never holds
    session state. Each operation takes a CreationSession and returns the next
    one. A refused operation (advancing past an incomplete step, rolling
    twice, exceeding an equipment limit) returns the very same session
    object and logs a warning. Nothing is raised for these.

    Heroes: name -> origin -> background -> 4 background rolls -> skills
    -> equipment -> summary. Followers: name -> equipment -> summary.
    """

    def __init__(
        self,
        data_loader: Optional[DataLoader] = None,
        dice_roller: Optional[DiceRoller] = None,
        factory: Optional[CharacterFactory] = None
    ):
        """
        Initialize the builder and load the game tables.

        Args:
            data_loader: DataLoader for the rule tables
            dice_roller: Random source (creates new if not provided)
            factory: CharacterFactory used by complete()
        """
        self.data_loader = data_loader or DataLoader()
        self.dice_roller = dice_roller or DiceRoller()
        self.factory = factory or CharacterFactory()

        self.origins: List[str] = self.data_loader.load_origins()
        self.baseline_origin: str = self.data_loader.load_baseline_origin()
        self.backgrounds: Dict[str, Background] = self.data_loader.load_backgrounds()
        self.skill_table = self.data_loader.load_skill_table()
        self.catalogs: Dict[str, EquipmentCatalog] = self.data_loader.load_equipment_catalogs()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_session(
        self,
        character_type: CharacterType,
        warband: Optional[Warband] = None
    ) -> CreationSession:
        """
        Begin creating a character.

        Args:
            character_type: Hero or follower
            warband: Warband the character is for (checked against the hero cap)

        Returns:
            New session at the first step

        Raises:
            WarbandFullError: If a hero is requested and the warband is full
        """
        if character_type == CharacterType.HERO and warband is not None and not warband.can_add_hero():
            raise WarbandFullError(
                f"Warband '{warband.name}' already has {len(warband.heroes)}/{warband.max_heroes} heroes"
            )

        if character_type == CharacterType.FOLLOWER:
            session = CreationSession(character_type=character_type, origin=self.baseline_origin)
        else:
            session = CreationSession(character_type=character_type)

        self._log_step("START", session)
        return session

    def complete(self, session: CreationSession) -> Character:
        """
        Assemble the finished character.

        Args:
            session: Session at the summary step

        Returns:
            Immutable Character

        Raises:
            IncompleteCharacterError: If the session is not at summary or any step is unsatisfied
        """
        if not session.at_summary:
            raise IncompleteCharacterError(
                f"Cannot create character from step '{session.step.value}'"
            )

        missing = self.missing_steps(session)
        if missing:
            raise IncompleteCharacterError(
                f"Incomplete steps: {', '.join(step.value for step in missing)}"
            )

        character = self.factory.assemble(session)
        self._log_step("COMPLETE", session, character=character.name)
        return character

    def missing_steps(self, session: CreationSession) -> List[WizardStep]:
        """List steps in the session's sequence whose predicates do not hold."""
        return [step for step in session.steps if not self.step_satisfied(session, step)]

    def step_satisfied(self, session: CreationSession, step: Optional[WizardStep] = None) -> bool:
        """
        Check a step against its predicate and the loaded tables.

        The session predicates only see the session. The origin and background
        steps also need the origin list and the background's valid origins.
        """
        step = step or session.step
        if not step_complete(session, step):
            return False
        if step == WizardStep.ORIGIN:
            return session.origin in self.origins
        if step == WizardStep.BACKGROUND:
            background = self.backgrounds.get(session.background)
            return background is not None and background.is_valid_for(session.origin)
        return True

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def can_advance(self, session: CreationSession) -> bool:
        """Check whether the current step is satisfied and a next step exists."""
        return (
            session.step_index < len(session.steps) - 1
            and self.step_satisfied(session)
        )

    def advance(
        self,
        session: CreationSession,
        selection: Optional[str] = None
    ) -> CreationSession:
        """
        Apply an optional selection to the current step, then move forward.

        The selection is the name for the name step, the origin for the
        origin step, and the background name for the background step. It is
        ignored on every other step.

        Args:
            session: Current session
            selection: Input for the current step

        Returns:
            Session at the next step, or the (possibly updated) session
            unchanged in position if the step is not satisfied
        """
        if selection is not None:
            session = self._apply_selection(session, selection)

        if session.at_summary:
            return self._refuse(session, "already at the final step")
        if not self.can_advance(session):
            return self._refuse(session, f"cannot advance past incomplete step '{session.step.value}'")

        advanced = session.evolve(step_index=session.step_index + 1)
        self._log_step("ADVANCE", advanced)
        return advanced

    def back(self, session: CreationSession) -> CreationSession:
        """
        Move to the previous step, keeping everything already collected.

        Returns:
            Session at the previous step (unchanged at the first step)
        """
        if session.step_index == 0:
            return session

        previous = session.evolve(step_index=session.step_index - 1)
        self._log_step("BACK", previous)
        return previous

    def _apply_selection(self, session: CreationSession, selection: str) -> CreationSession:
        if session.step == WizardStep.NAME:
            return self.set_name(session, selection)
        if session.step == WizardStep.ORIGIN:
            return self.select_origin(session, selection)
        if session.step == WizardStep.BACKGROUND:
            return self.select_background(session, selection)
        return session

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def set_name(self, session: CreationSession, name: str) -> CreationSession:
        """Set the character name (blank names are filled in at assembly)."""
        return session.evolve(name=name.strip())

    def available_backgrounds(self, origin: Optional[str]) -> List[Background]:
        """Backgrounds valid for an origin, in table order."""
        if origin is None:
            return []
        return [bg for bg in self.backgrounds.values() if bg.is_valid_for(origin)]

    def select_origin(self, session: CreationSession, origin: str) -> CreationSession:
        """
        Choose the hero's origin.

        A previously chosen background that is not valid for the new origin is
        cleared. The origin is locked once any background roll is recorded.
        """
        if not session.is_hero:
            return self._refuse(session, "followers always use the baseline origin")
        if origin not in self.origins:
            return self._refuse(session, f"unknown origin '{origin}'")
        if session.has_background_rolls and origin != session.origin:
            return self._refuse(session, "origin is locked after background rolls")

        background = session.background
        if background is not None and not self.backgrounds[background].is_valid_for(origin):
            background = None

        return session.evolve(origin=origin, background=background)

    def select_background(self, session: CreationSession, name: str) -> CreationSession:
        """
        Choose the hero's background from those valid for the selected origin.

        The background is locked once any background roll is recorded.
        """
        if not session.is_hero:
            return self._refuse(session, "followers have no background")
        if session.origin is None:
            return self._refuse(session, "choose an origin before a background")

        background = self.backgrounds.get(name)
        if background is None or not background.is_valid_for(session.origin):
            return self._refuse(session, f"background '{name}' is not available to {session.origin}")
        if session.has_background_rolls and name != session.background:
            return self._refuse(session, "background is locked after background rolls")

        return session.evolve(background=name)

    # ------------------------------------------------------------------
    # Rolls
    # ------------------------------------------------------------------

    def roll_capabilities(self, session: CreationSession) -> CreationSession:
        return self._roll_background_table(session, WizardStep.CAPABILITIES)

    def roll_mentality(self, session: CreationSession) -> CreationSession:
        return self._roll_background_table(session, WizardStep.MENTALITY)

    def roll_possessions(self, session: CreationSession) -> CreationSession:
        return self._roll_background_table(session, WizardStep.POSSESSIONS)

    def roll_training(self, session: CreationSession) -> CreationSession:
        return self._roll_background_table(session, WizardStep.TRAINING)

    def roll_current_step(self, session: CreationSession) -> CreationSession:
        """Roll for whichever roll step (background table or skill) the session is on."""
        if session.step == WizardStep.SKILLS:
            return self.roll_skill(session)
        if session.step in ROLL_STEPS:
            return self._roll_background_table(session, session.step)
        return self._refuse(session, f"nothing to roll on step '{session.step.value}'")

    def _roll_background_table(self, session: CreationSession, step: WizardStep) -> CreationSession:
        """
        Draw one d20, resolve it on the background's table and fold in the delta.

        XP accumulates across mentality and training. Will, Luck, gold, the
        granted item and the skill quota are set by the one roll producing them.
        """
        if session.step != step:
            return self._refuse(session, f"cannot roll {step.value} while on step '{session.step.value}'")
        if session.background is None:
            return self._refuse(session, "no background selected")
        if session.roll_for(step) is not None:
            return self._refuse(session, f"{step.value} has already been rolled")

        table = self.backgrounds[session.background].table(step.value)
        roll = self.dice_roller.roll_die(BACKGROUND_DIE)
        entry = resolve(table, roll)
        if entry is None:
            # Tables are validated at load time, so this only happens with bad data
            return self._refuse(session, f"no {step.value} entry for roll {roll}")

        record = RollRecord(roll=roll, result=entry.value, delta=entry.delta)
        changes = {step.value: record}
        delta = entry.delta

        if isinstance(delta, MentalityDelta):
            changes.update(
                bonus_xp=session.bonus_xp + delta.xp,
                bonus_will=delta.will,
                bonus_luck=delta.luck
            )
        elif isinstance(delta, PossessionsDelta):
            changes.update(gold=delta.gold, granted_item=delta.item)
        elif isinstance(delta, TrainingDelta):
            changes.update(
                skill_quota=delta.skills,
                bonus_xp=session.bonus_xp + delta.xp
            )

        rolled = session.evolve(**changes)
        logger.debug(f"{session.background} {step.value}: rolled {roll} -> {entry.value}")
        self._log_step("ROLL", rolled, table=step.value, roll=roll, result=entry.value)
        return rolled

    def roll_skill(self, session: CreationSession) -> CreationSession:
        """
        Draw one d100 on the skill table and append the skill.

        Refused once the number of rolled skills reaches the training quota.
        """
        if session.step != WizardStep.SKILLS:
            return self._refuse(session, f"cannot roll skills while on step '{session.step.value}'")
        if len(session.skill_rolls) >= session.skill_quota:
            return self._refuse(session, f"all {session.skill_quota} skill roll(s) already made")

        roll = self.dice_roller.roll_die(SKILL_DIE)
        skill = skill_for_roll(self.skill_table, roll)

        rolled = session.evolve(skill_rolls=session.skill_rolls + (SkillRoll(roll=roll, skill=skill),))
        self._log_step("SKILL", rolled, roll=roll, skill=skill)
        return rolled

    # ------------------------------------------------------------------
    # Equipment
    # ------------------------------------------------------------------

    def catalog_for(self, session: CreationSession) -> EquipmentCatalog:
        """The starter-kit catalog for the session's character type."""
        return self.catalogs[session.character_type.value]

    def can_select(self, session: CreationSession, item: Equipment) -> bool:
        """Check whether toggling item would add it (it is absent and within limits)."""
        if session.has_equipment(item):
            return False
        return self.catalog_for(session).can_add(session.selected_equipment, item)

    def toggle_equipment(self, session: CreationSession, item: Equipment) -> CreationSession:
        """
        Add the item if absent, remove it if present (matched by name).

        Removing is always allowed. Adding is refused (a no-op) when the item
        is not in the catalog or any of its selection groups is full.
        """
        if session.step != WizardStep.EQUIPMENT:
            return self._refuse(session, f"cannot change equipment on step '{session.step.value}'")

        if session.has_equipment(item):
            remaining = tuple(e for e in session.selected_equipment if e != item)
            return session.evolve(selected_equipment=remaining)

        if not self.catalog_for(session).can_add(session.selected_equipment, item):
            return self._refuse(session, f"cannot add '{item.name}': selection limit reached or not in catalog")

        return session.evolve(selected_equipment=session.selected_equipment + (item,))

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    def _refuse(self, session: CreationSession, reason: str) -> CreationSession:
        logger.warning(f"Refused {session.character_type.value} creation action: {reason}")
        return session

    def _log_step(self, action: str, session: CreationSession, **details) -> None:
        from warband_engine.utils.logging_config import get_logging_config
        logging_config = get_logging_config()
        if logging_config:
            logging_config.log_creation_step(
                action=action,
                character_type=session.character_type.value,
                step=session.step.value,
                **details
            )
