# ABOUTME: Interactive character creation wizard for heroes and followers
# ABOUTME: Drives CharacterBuilder sessions step by step with Back/Cancel navigation

from typing import Callable, Dict, List, Optional

from rich.markup import escape

from warband_engine.core.character import Character, CharacterType
from warband_engine.core.character_factory import DEFAULT_NAMES
from warband_engine.core.character_builder import (
    BACKGROUND_DIE,
    SKILL_DIE,
    CharacterBuilder,
    WarbandFullError
)
from warband_engine.core.creation_session import CreationSession, WizardStep
from warband_engine.core.warband_vault import WarbandVault
from warband_engine.rules.equipment import Equipment
from warband_engine.ui.rich_ui import (
    console,
    create_character_sheet_table,
    print_banner,
    print_choice_menu,
    print_error,
    print_message,
    print_roll_result,
    print_section,
    print_status_message
)


class CharacterCreationWizard:
    """
    Multi-step wizard for creating one warband member.

    Each step handler shows its screen, updates self.session through the
    builder and returns a navigation result: "next", "back", "cancel" or
    "create". The builder decides whether a step may be left; the wizard
    only reports refusals to the user.

    Nothing is written to the vault unless the user confirms on the summary
    screen. Cancelling at any step discards the session.
    """

    def __init__(
        self,
        builder: CharacterBuilder,
        vault: WarbandVault,
        warband_id: str,
        character_type: CharacterType
    ):
        """
        Initialize the character creation wizard.

        Args:
            builder: Character rule engine
            vault: Warband storage the finished character is appended to
            warband_id: Warband receiving the character
            character_type: Hero or follower
        """
        self.builder = builder
        self.vault = vault
        self.warband_id = warband_id
        self.character_type = character_type
        self.session: Optional[CreationSession] = None

        self._handlers: Dict[WizardStep, Callable[[], str]] = {
            WizardStep.NAME: self._step_name,
            WizardStep.ORIGIN: self._step_origin,
            WizardStep.BACKGROUND: self._step_background,
            WizardStep.CAPABILITIES: self._step_background_roll,
            WizardStep.MENTALITY: self._step_background_roll,
            WizardStep.POSSESSIONS: self._step_background_roll,
            WizardStep.TRAINING: self._step_background_roll,
            WizardStep.SKILLS: self._step_skills,
            WizardStep.EQUIPMENT: self._step_equipment,
            WizardStep.SUMMARY: self._step_summary,
        }

    def run(self) -> Optional[Character]:
        """
        Run the wizard until the character is created or the user cancels.

        Returns:
            The created Character (already stored), or None if cancelled
        """
        warband = self.vault.get_warband(self.warband_id)
        if warband is None:
            print_error(f"Warband not found: {self.warband_id}")
            return None

        try:
            self.session = self.builder.start_session(self.character_type, warband)
        except WarbandFullError as e:
            print_error(str(e))
            return None

        print_banner(f"Create {self.character_type.label}", version="", color="cyan")

        while True:
            console.print()
            step = self.session.step
            print_section(f"Step {self.session.step_index + 1}/{len(self.session.steps)}: {step.label}")

            result = self._handlers[step]()

            if result == "next":
                advanced = self.builder.advance(self.session)
                if advanced is self.session:
                    print_status_message("Finish this step before continuing", "warning")
                self.session = advanced
            elif result == "back":
                if self.session.step_index == 0:
                    print_status_message("Already at first step", "warning")
                self.session = self.builder.back(self.session)
            elif result == "cancel":
                print_status_message(f"{self.character_type.label} creation cancelled", "warning")
                self.session = None
                return None
            elif result == "create":
                return self._finalize_character()

    def _finalize_character(self) -> Character:
        """Assemble the character and append it to the warband."""
        character = self.builder.complete(self.session)
        self.vault.append_character(self.warband_id, character)
        print_status_message(f"✓ {character.name} joined the warband", "success")
        self.session = None
        return character

    def _get_navigation_choice(self, allow_back: bool = True) -> str:
        """Ask whether to continue, go back or cancel."""
        prompt = "[bold cyan][Enter] Continue"
        if allow_back:
            prompt += ", [B]ack"
        prompt += ", [C]ancel:[/bold cyan] "

        while True:
            choice = console.input(prompt).strip().lower()
            if choice == "":
                return "next"
            if choice == "b" and allow_back:
                return "back"
            if choice == "c":
                return "cancel"
            print_error("Invalid choice.")

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _step_name(self) -> str:
        """Enter a name (blank keeps the default)."""
        default = DEFAULT_NAMES[self.character_type]
        if self.character_type == CharacterType.FOLLOWER:
            print_message(
                "[dim]Followers are always Human and have simplified stats. "
                "They don't receive background bonuses.[/dim]"
            )

        current = self.session.name or default
        name = console.input(f"[bold cyan]Character Name [{escape(current)}]:[/bold cyan] ").strip()
        if name:
            self.session = self.builder.set_name(self.session, name)

        return self._get_navigation_choice(allow_back=False)

    def _choose_from_list(self, title: str, labels: List[str]) -> int:
        """
        Show a numbered list and read a choice.

        Returns:
            Zero-based index, -1 for back, -2 for cancel
        """
        options = [{"number": str(i), "text": label} for i, label in enumerate(labels, 1)]
        options.append({"number": "B", "text": "Back"})
        options.append({"number": "C", "text": "Cancel"})
        print_choice_menu(title, options)

        while True:
            choice = console.input(f"[bold cyan]Choose [1-{len(labels)}], [B] or [C]:[/bold cyan] ").strip().lower()
            if choice == "b":
                return -1
            if choice == "c":
                return -2
            try:
                idx = int(choice) - 1
                if 0 <= idx < len(labels):
                    return idx
                print_error(f"Please enter a number between 1 and {len(labels)}")
            except ValueError:
                print_error("Please enter a valid number")

    def _step_origin(self) -> str:
        origins = self.builder.origins
        idx = self._choose_from_list("Choose Origin", origins)
        if idx == -1:
            return "back"
        if idx == -2:
            return "cancel"

        updated = self.builder.select_origin(self.session, origins[idx])
        if updated is self.session and self.session.origin != origins[idx]:
            print_error("Origin can't be changed after background rolls")
        else:
            print_status_message(f"✓ Origin: {origins[idx]}", "success")
        self.session = updated
        return "next"

    def _step_background(self) -> str:
        backgrounds = self.builder.available_backgrounds(self.session.origin)
        labels = [f"{bg.name} ({bg.description})" for bg in backgrounds]
        idx = self._choose_from_list(f"Backgrounds for {self.session.origin}", labels)
        if idx == -1:
            return "back"
        if idx == -2:
            return "cancel"

        chosen = backgrounds[idx].name
        updated = self.builder.select_background(self.session, chosen)
        if updated is self.session and self.session.background != chosen:
            print_error("Background can't be changed after background rolls")
        else:
            print_status_message(f"✓ Background: {chosen}", "success")
        self.session = updated
        return "next"

    def _step_background_roll(self) -> str:
        """Roll once on the background table for the current step."""
        step = self.session.step
        record = self.session.roll_for(step)

        if record is None:
            table = self.builder.backgrounds[self.session.background].table(step.value)
            rows = "\n".join(f"{entry.min}-{entry.max}: {entry.value}" for entry in table)
            print_message(f"[dim]{rows}[/dim]")

            while True:
                choice = console.input("[bold cyan][R]oll d20, [B]ack, [C]ancel:[/bold cyan] ").strip().lower()
                if choice == "r":
                    break
                if choice == "b":
                    return "back"
                if choice == "c":
                    return "cancel"
                print_error("Invalid choice.")

            self.session = self.builder.roll_current_step(self.session)
            record = self.session.roll_for(step)

        print_roll_result(step.label, record.roll, BACKGROUND_DIE, record.result)
        return self._get_navigation_choice()

    def _step_skills(self) -> str:
        """Roll on the skill table as many times as training allows."""
        if self.session.skill_quota == 0:
            print_message("Training granted no skill rolls.")

        while self.session.skills_remaining > 0:
            print_message(f"Skill rolls remaining: {self.session.skills_remaining}")
            choice = console.input("[bold cyan][R]oll d100, [B]ack, [C]ancel:[/bold cyan] ").strip().lower()
            if choice == "r":
                self.session = self.builder.roll_skill(self.session)
                last = self.session.skill_rolls[-1]
                print_roll_result("Skill", last.roll, SKILL_DIE, last.skill)
            elif choice == "b":
                return "back"
            elif choice == "c":
                return "cancel"
            else:
                print_error("Invalid choice.")

        for skill in self.session.rolled_skills:
            print_message(f"• {skill}")

        return self._get_navigation_choice()

    def _show_equipment(self, numbered: List[Equipment]) -> None:
        catalog = self.builder.catalog_for(self.session)
        for group in catalog.groups:
            selected = group.count_selected(self.session.selected_equipment)
            options = []
            for item in group.items:
                if item not in numbered:
                    numbered.append(item)
                number = numbered.index(item) + 1
                mark = "[green]✓[/green]" if self.session.has_equipment(item) else " "
                options.append({"number": str(number), "text": f"{mark} {item.name} ({item.category.value})"})
            print_choice_menu(f"{group.label} ({selected}/{group.limit})", options)

    def _step_equipment(self) -> str:
        """Toggle starter-kit items on and off within the selection limits."""
        while True:
            numbered: List[Equipment] = []
            self._show_equipment(numbered)

            choice = console.input(
                "[bold cyan]Toggle item number, [D]one, [B]ack, [C]ancel:[/bold cyan] "
            ).strip().lower()

            if choice == "d":
                return "next"
            if choice == "b":
                return "back"
            if choice == "c":
                return "cancel"

            try:
                idx = int(choice) - 1
            except ValueError:
                print_error("Please enter a valid number")
                continue
            if not 0 <= idx < len(numbered):
                print_error(f"Please enter a number between 1 and {len(numbered)}")
                continue

            item = numbered[idx]
            updated = self.builder.toggle_equipment(self.session, item)
            if updated is self.session:
                print_status_message(f"Can't add {item.name}: selection limit reached", "warning")
            self.session = updated

    def _step_summary(self) -> str:
        """Preview the finished character and confirm."""
        preview = self.builder.factory.assemble(self.session)
        console.print(create_character_sheet_table(preview))

        while True:
            choice = console.input(
                f"[bold cyan][Y] Create {self.character_type.label}, [B]ack, [C]ancel:[/bold cyan] "
            ).strip().lower()
            if choice in ("y", "yes"):
                return "create"
            if choice == "b":
                return "back"
            if choice == "c":
                return "cancel"
            print_error("Please enter Y, B or C")
