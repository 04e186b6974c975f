# ABOUTME: Rich UI utilities for enhanced terminal display
# ABOUTME: Provides reusable rich components for menus, rosters, and character sheets

from typing import List, Optional, Dict
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.align import Align
from rich.style import Style
from rich import box

from warband_engine.core.character import Character
from warband_engine.core.warband import Warband


console = Console()


def init_console(debug_mode: bool = False) -> Console:
    """
    Tee the shared console to the debug log file when debug mode is on.

    The console object itself is kept so modules that imported it keep
    printing to the same place.

    Args:
        debug_mode: Whether debug logging is enabled

    Returns:
        The shared console
    """
    from warband_engine.utils.logging_config import get_logging_config, init_logging

    logging_config = get_logging_config() or init_logging(debug_mode)
    if logging_config.debug_enabled:
        console.file = logging_config.create_console().file
    return console


def print_banner(title: str = "Five Leagues Warband Builder", version: str = "0.1.0", color: str = "blue") -> None:
    """Display a styled banner with title and optional version.

    Args:
        title: Banner title
        version: Optional version string
        color: Color scheme (blue, green, cyan, magenta)
    """
    text = title
    if version:
        text += f"\nVersion {version}"

    panel = Panel(
        Align.center(text),
        style=Style(color=color, bold=True),
        expand=False,
        box=box.DOUBLE,
        padding=(1, 3)
    )
    console.print(panel)


def print_status_message(message: str, message_type: str = "info") -> None:
    """Print a styled status message.

    Args:
        message: Message text
        message_type: Type of message (info, success, warning, error)
    """
    colors = {
        "info": "blue",
        "success": "green",
        "warning": "yellow",
        "error": "red",
    }

    symbols = {
        "info": "ℹ",
        "success": "✓",
        "warning": "⚠",
        "error": "✗",
    }

    color = colors.get(message_type, colors["info"])
    symbol = symbols.get(message_type, "•")
    style = Style(color=color, bold=(message_type == "error"))

    console.print(f"[{color}]{symbol}[/{color}] {message}", style=style)


def print_error(message: str, error: Optional[Exception] = None) -> None:
    """Print an error message with optional exception details.

    Args:
        message: Error message
        error: Optional exception for details
    """
    console.print(f"[bold red]✗ ERROR:[/bold red] {message}")
    if error:
        console.print(f"[dim red]{str(error)}[/dim red]")


def print_section(title: str, content: str = "") -> None:
    """Print a formatted section with title and optional content."""
    panel = Panel(
        content,
        title=f"[bold cyan]{title}[/bold cyan]",
        style="cyan",
        expand=False
    )
    console.print(panel)


def print_choice_menu(title: str, options: List[Dict[str, str]]) -> None:
    """Print a formatted choice menu.

    Args:
        title: Menu title
        options: List of dicts with 'number' and 'text' keys
    """
    content = ""
    for opt in options:
        num = opt.get("number", "")
        text = opt.get("text", "")
        content += f"[bold cyan]{num}.[/bold cyan] {text}\n"

    panel = Panel(
        content.rstrip(),
        title=f"[bold yellow]{title}[/bold yellow]",
        style="yellow",
        expand=False
    )
    console.print(panel)


def print_message(message: str) -> None:
    console.print(message)


def print_roll_result(table: str, roll: int, die: int, result: str) -> None:
    """Show a table roll and what it produced."""
    console.print(
        f"[bold magenta]🎲 {table}:[/bold magenta] rolled [bold]{roll}[/bold] on d{die} → [green]{result}[/green]"
    )


def create_warband_list_table(warbands: List[Warband]) -> Table:
    """Create a styled table listing stored warbands.

    Args:
        warbands: Warbands to list

    Returns:
        Formatted Rich Table
    """
    table = Table(title="WARBANDS", style="cyan", show_header=True, header_style="bold magenta")
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Heroes", justify="center")
    table.add_column("Followers", justify="center")
    table.add_column("Updated", style="dim")

    for i, warband in enumerate(warbands, 1):
        hero_color = "yellow" if not warband.can_add_hero() else "green"
        table.add_row(
            str(i),
            warband.name,
            f"[{hero_color}]{len(warband.heroes)}/{warband.max_heroes}[/{hero_color}]",
            str(len(warband.followers)),
            warband.updated_at[:16].replace("T", " ")
        )

    return table


def create_roster_table(warband: Warband) -> Table:
    """Create a styled roster table with every hero and follower.

    Args:
        warband: Warband to display

    Returns:
        Formatted Rich Table
    """
    table = Table(
        title=f"{warband.name.upper()} ({len(warband.heroes)}/{warband.max_heroes} heroes)",
        style="green",
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Type", style="dim")
    table.add_column("Origin / Background")
    table.add_column("AGI", justify="center")
    table.add_column("SPD", justify="center")
    table.add_column("CS", justify="center")
    table.add_column("TGH", justify="center")
    table.add_column("WILL", justify="center")
    table.add_column("LUCK", justify="center")
    table.add_column("ARM", justify="center")
    table.add_column("XP", justify="right")
    table.add_column("Gold", justify="right")

    for i, character in enumerate(warband.heroes + warband.followers, 1):
        stats = character.stats
        name_style = "bold yellow" if character.is_hero else "white"
        mystic = " ✦" if character.is_mystic else ""
        table.add_row(
            str(i),
            f"[{name_style}]{character.name}[/{name_style}]{mystic}",
            character.character_type.value,
            f"{character.origin} / {character.background}" if character.is_hero else character.origin,
            str(stats.agility),
            stats.speed,
            str(stats.combat_skill),
            str(stats.toughness),
            str(stats.will),
            str(stats.luck),
            str(character.armor_score),
            str(character.xp),
            str(character.gold)
        )

    return table


def create_character_sheet_table(character: Character) -> Table:
    """Create a styled table for a single character sheet.

    Args:
        character: Character to display

    Returns:
        Formatted Rich Table
    """
    table = Table(title="CHARACTER SHEET", style="magenta", show_header=False)
    table.add_column("Attribute", style="bold cyan", width=20)
    table.add_column("Value", style="white")

    stats = character.stats
    table.add_row("Name", character.name)
    table.add_row("Type", character.character_type.label)
    table.add_row("Origin", character.origin)
    table.add_row("Background", character.background)
    if character.is_mystic:
        table.add_row("Mystic", "Yes")

    table.add_row("", "")
    table.add_row("Agility", str(stats.agility))
    table.add_row("Speed", stats.speed)
    table.add_row("Combat Skill", str(stats.combat_skill))
    table.add_row("Toughness", str(stats.toughness))
    table.add_row("Casting", str(stats.casting))
    table.add_row("Will", str(stats.will))
    table.add_row("Luck", str(stats.luck))
    table.add_row("Armor", str(character.armor_score))

    table.add_row("", "")
    table.add_row("XP", str(character.xp))
    table.add_row("Gold Marks", str(character.gold))
    table.add_row("Skills", "\n".join(character.skills) or "—")
    table.add_row("Equipment", ", ".join(item.name for item in character.equipment) or "—")
    if character.notes:
        table.add_row("Notes", character.notes)

    return table
