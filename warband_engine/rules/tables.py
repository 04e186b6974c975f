# ABOUTME: Roll table types and range lookup for background and skill tables
# ABOUTME: Resolves a die roll to the single table entry whose range contains it

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, TypeVar, Protocol

from warband_engine.rules.result_parser import Delta


BACKGROUND_TABLES = ("capabilities", "mentality", "possessions", "training")


class RangedEntry(Protocol):
    min: int
    max: int


E = TypeVar("E", bound=RangedEntry)


@dataclass(frozen=True)
class RollTableEntry:
    """
    One row of a background roll table.

    Attributes:
        min: Lowest roll (inclusive) that selects this entry
        max: Highest roll (inclusive) that selects this entry
        value: Display text, e.g. "+1 Will & +1 Luck"
        delta: Structured bonuses parsed from value at load time
    """
    min: int
    max: int
    value: str
    delta: Optional[Delta] = None


@dataclass(frozen=True)
class SkillTableEntry:
    """One row of the d100 skill table."""
    min: int
    max: int
    skill: str


@dataclass(frozen=True)
class Background:
    """
    A hero creation template with its four d20 roll tables.

    An empty valid_origins tuple means the background is open to every origin.
    """
    name: str
    description: str
    valid_origins: Tuple[str, ...] = ()
    capabilities: Tuple[RollTableEntry, ...] = ()
    mentality: Tuple[RollTableEntry, ...] = ()
    possessions: Tuple[RollTableEntry, ...] = ()
    training: Tuple[RollTableEntry, ...] = ()

    def is_valid_for(self, origin: str) -> bool:
        """Check whether a character of this origin may take the background."""
        return not self.valid_origins or origin in self.valid_origins

    def table(self, table_kind: str) -> Tuple[RollTableEntry, ...]:
        """
        Get one of the four roll tables by name.

        Raises:
            KeyError: If table_kind is not a background table
        """
        if table_kind not in BACKGROUND_TABLES:
            raise KeyError(f"Unknown roll table: {table_kind}")
        return getattr(self, table_kind)


def resolve(table: Sequence[E], roll: int) -> Optional[E]:
    """
    Find the entry whose [min, max] range contains the roll.

    Tables are scanned in order and the first match wins.

    Args:
        table: Ordered table entries
        roll: Die result

    Returns:
        Matching entry, or None if no range contains the roll
    """
    for entry in table:
        if entry.min <= roll <= entry.max:
            return entry
    return None


def skill_for_roll(skill_table: Sequence[SkillTableEntry], roll: int) -> str:
    """
    Look up the skill description for a d100 roll.

    Returns:
        Skill text, or "Unknown skill" if the roll is outside the table
    """
    entry = resolve(skill_table, roll)
    return entry.skill if entry else "Unknown skill"


def validate_table(table: Sequence[RangedEntry], sides: int, name: str = "table") -> None:
    """
    Check that a table covers 1..sides with no gaps or overlaps.

    Args:
        table: Ordered table entries
        sides: Die size the table is rolled with (20 or 100)
        name: Table name used in error messages

    Raises:
        ValueError: If the table is empty, has a gap, overlaps, or leaves the die range
    """
    if not table:
        raise ValueError(f"{name}: table is empty")

    ordered: List[RangedEntry] = sorted(table, key=lambda e: e.min)
    expected = 1
    for entry in ordered:
        if entry.min > entry.max:
            raise ValueError(f"{name}: inverted range {entry.min}-{entry.max}")
        if entry.min < expected:
            raise ValueError(f"{name}: range {entry.min}-{entry.max} overlaps a previous entry")
        if entry.min > expected:
            raise ValueError(f"{name}: no entry covers roll {expected}")
        expected = entry.max + 1

    if expected != sides + 1:
        raise ValueError(f"{name}: entries end at {expected - 1}, expected {sides}")
