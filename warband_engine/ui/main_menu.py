# ABOUTME: Main menu for warband management
# ABOUTME: Lists, creates and deletes warbands and manages each roster's heroes and followers

from typing import Optional

import questionary
from rich.markup import escape

from warband_engine.core.character import Character, CharacterType
from warband_engine.core.character_builder import CharacterBuilder
from warband_engine.core.warband import DEFAULT_MAX_HEROES, Warband
from warband_engine.core.warband_vault import WarbandVault
from warband_engine.ui.character_wizard import CharacterCreationWizard
from warband_engine.ui.rich_ui import (
    console,
    create_character_sheet_table,
    create_roster_table,
    create_warband_list_table,
    print_banner,
    print_choice_menu,
    print_error,
    print_section,
    print_status_message
)


CANCEL_CHOICE = "Cancel"


class MainMenu:
    """
    Main menu of the warband builder.

    Handles:
    - Warband list, creation and deletion
    - Roster display for one warband
    - Adding heroes (up to the warband's cap) and followers
    - Removing characters
    - Renaming a warband and changing its hero cap
    """

    def __init__(
        self,
        vault: Optional[WarbandVault] = None,
        builder: Optional[CharacterBuilder] = None
    ):
        """
        Initialize the main menu.

        Args:
            vault: WarbandVault instance (creates default if not provided)
            builder: CharacterBuilder instance (creates default if not provided)
        """
        self.vault = vault or WarbandVault()
        self.builder = builder or CharacterBuilder()

    def show(self) -> Optional[str]:
        """
        Display the main menu and read a choice.

        Returns:
            "open", "new", "delete", "exit", or None if invalid
        """
        print_banner()
        console.print()

        options = [
            {"number": "1", "text": "Open Warband"},
            {"number": "2", "text": "New Warband"},
            {"number": "3", "text": "Delete Warband"},
            {"number": "4", "text": "Exit"}
        ]
        print_choice_menu("Main Menu", options)
        console.print()

        choice = console.input("[bold cyan]Choose an option [1-4]:[/bold cyan] ").strip()

        choice_map = {
            "1": "open",
            "2": "new",
            "3": "delete",
            "4": "exit"
        }
        return choice_map.get(choice)

    def run(self) -> None:
        """Run the main menu loop until the user exits."""
        while True:
            choice = self.show()

            if choice == "exit":
                print_status_message("Farewell, warband leader!", "info")
                return
            if choice == "open":
                warband = self.select_warband()
                if warband:
                    self.manage_warband(warband.id)
            elif choice == "new":
                warband = self.create_warband()
                if warband:
                    self.manage_warband(warband.id)
            elif choice == "delete":
                self.delete_warband()
            else:
                print_error("Invalid choice. Please select 1-4.")

    # ------------------------------------------------------------------
    # Warbands
    # ------------------------------------------------------------------

    def select_warband(self) -> Optional[Warband]:
        """
        Show every stored warband and let the user pick one.

        Returns:
            Selected Warband, or None if cancelled or none exist
        """
        warbands = self.vault.list_warbands()
        if not warbands:
            print_status_message("No warbands yet. Create one first.", "warning")
            return None

        console.print()
        console.print(create_warband_list_table(warbands))

        user_input = console.input(
            f"[bold cyan]Select warband [1-{len(warbands)}] or [B]ack:[/bold cyan] "
        ).strip()
        if user_input.lower() in ["b", "back", ""]:
            return None

        try:
            choice_num = int(user_input)
        except ValueError:
            print_error("Invalid input. Please enter a number or 'B' for back.")
            return None

        if 1 <= choice_num <= len(warbands):
            return warbands[choice_num - 1]

        print_error("Invalid choice. Please select a valid warband number.")
        return None

    def _read_max_heroes(self, default: int) -> Optional[int]:
        raw = console.input(f"[bold cyan]Max heroes [{default}]:[/bold cyan] ").strip()
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError:
            print_error("Max heroes must be a number")
            return None
        if value < 1:
            print_error("Max heroes must be at least 1")
            return None
        return value

    def create_warband(self) -> Optional[Warband]:
        """
        Prompt for a name and hero cap and store a new warband.

        Returns:
            The new Warband, or None if input was invalid
        """
        console.print()
        print_section("New Warband")

        name = console.input("[bold cyan]Warband name:[/bold cyan] ").strip()
        if not name:
            print_error("Warband name cannot be empty")
            return None

        max_heroes = self._read_max_heroes(DEFAULT_MAX_HEROES)
        if max_heroes is None:
            return None

        warband = self.vault.create_warband(name, max_heroes)
        print_status_message(f"✓ Warband '{warband.name}' created", "success")
        return warband

    def delete_warband(self) -> bool:
        """
        Pick a warband and delete it after confirmation.

        Returns:
            True if a warband was deleted
        """
        warband = self.select_warband()
        if warband is None:
            return False

        confirm = console.input(
            f"[bold red]Delete '{warband.name}' and all {len(warband)} characters? [y/N]:[/bold red] "
        ).strip().lower()
        if confirm not in ["y", "yes"]:
            print_status_message("Deletion cancelled", "info")
            return False

        self.vault.delete_warband(warband.id)
        print_status_message(f"✓ Warband '{warband.name}' deleted", "success")
        return True

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def manage_warband(self, warband_id: str) -> None:
        """Show one warband's roster and its actions until the user goes back."""
        while True:
            warband = self.vault.get_warband(warband_id)
            if warband is None:
                print_error("Warband no longer exists")
                return

            console.print()
            console.print(create_roster_table(warband))

            options = [
                {"number": "1", "text": "Add Hero" if warband.can_add_hero() else "[dim]Add Hero (warband full)[/dim]"},
                {"number": "2", "text": "Add Follower"},
                {"number": "3", "text": "View Character"},
                {"number": "4", "text": "Remove Character"},
                {"number": "5", "text": "Rename Warband"},
                {"number": "6", "text": "Change Max Heroes"},
                {"number": "7", "text": "Back"}
            ]
            print_choice_menu(warband.name, options)

            choice = console.input("[bold cyan]Choose an option [1-7]:[/bold cyan] ").strip()

            if choice == "1":
                self.add_character(warband_id, CharacterType.HERO)
            elif choice == "2":
                self.add_character(warband_id, CharacterType.FOLLOWER)
            elif choice == "3":
                self.view_character(warband)
            elif choice == "4":
                self.remove_character(warband)
            elif choice == "5":
                self.rename_warband(warband)
            elif choice == "6":
                self.change_max_heroes(warband)
            elif choice == "7":
                return
            else:
                print_error("Invalid choice. Please select 1-7.")

    def add_character(self, warband_id: str, character_type: CharacterType) -> Optional[Character]:
        """Run the creation wizard for a hero or follower."""
        wizard = CharacterCreationWizard(self.builder, self.vault, warband_id, character_type)
        return wizard.run()

    def _pick_character(self, warband: Warband, prompt: str) -> Optional[Character]:
        members = warband.heroes + warband.followers
        if not members:
            print_status_message("This warband has no characters yet.", "warning")
            return None

        choices = [
            questionary.Choice(
                title=f"{character.name} ({character.character_type.label}, {character.origin})",
                value=character
            )
            for character in members
        ]
        choices.append(questionary.Choice(title=CANCEL_CHOICE, value=CANCEL_CHOICE))

        try:
            result = questionary.select(prompt, choices=choices, use_arrow_keys=True).ask()
        except (EOFError, KeyboardInterrupt):
            return None

        if result is None or result == CANCEL_CHOICE:
            return None
        return result

    def view_character(self, warband: Warband) -> None:
        character = self._pick_character(warband, "Which character?")
        if character is not None:
            console.print(create_character_sheet_table(character))

    def remove_character(self, warband: Warband) -> bool:
        """
        Pick a character and remove it from the warband after confirmation.

        Returns:
            True if a character was removed
        """
        character = self._pick_character(warband, "Remove which character?")
        if character is None:
            print_status_message("Cancelled.", "warning")
            return False

        confirm = console.input(
            f"[bold red]Remove {character.name} from {warband.name}? [y/N]:[/bold red] "
        ).strip().lower()
        if confirm not in ["y", "yes"]:
            print_status_message("Removal cancelled", "info")
            return False

        removed = self.vault.remove_character(warband.id, character.id, character.character_type)
        if removed:
            print_status_message(f"✓ {character.name} left the warband", "success")
        else:
            print_error(f"{character.name} is not in this warband")
        return removed

    def rename_warband(self, warband: Warband) -> None:
        name = console.input(f"[bold cyan]New name [{escape(warband.name)}]:[/bold cyan] ").strip()
        if not name or name == warband.name:
            return

        warband.name = name
        self.vault.update_warband(warband)
        print_status_message(f"✓ Warband renamed to '{name}'", "success")

    def change_max_heroes(self, warband: Warband) -> None:
        """Change the hero cap. It can't go below the heroes already recruited."""
        max_heroes = self._read_max_heroes(warband.max_heroes)
        if max_heroes is None or max_heroes == warband.max_heroes:
            return

        if max_heroes < len(warband.heroes):
            print_error(
                f"{warband.name} already has {len(warband.heroes)} heroes; "
                f"remove some before lowering the cap to {max_heroes}"
            )
            return

        warband.max_heroes = max_heroes
        self.vault.update_warband(warband)
        print_status_message(f"✓ Max heroes set to {max_heroes}", "success")
