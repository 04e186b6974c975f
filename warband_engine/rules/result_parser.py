# ABOUTME: Parsers that turn background roll table text into structured deltas
# ABOUTME: Handles capability, mentality, training, and possessions result strings

import re
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class CapabilityDelta:
    """
    Stat increments granted by a capabilities roll.

    Each field is 0 or 1. A capabilities entry never grants more than +1 to
    any single stat.
    """
    agility: int = 0
    combat_skill: int = 0
    speed_base: int = 0
    toughness: int = 0
    casting: int = 0


@dataclass(frozen=True)
class MentalityDelta:
    """Will, Luck and XP bonuses granted by a mentality roll."""
    xp: int = 0
    will: int = 0
    luck: int = 0


@dataclass(frozen=True)
class TrainingDelta:
    """Number of skill table rolls and XP granted by a training roll."""
    skills: int = 0
    xp: int = 0


@dataclass(frozen=True)
class PossessionsDelta:
    """Gold and (at most one) item granted by a possessions roll."""
    gold: int = 0
    item: Optional[str] = None


Delta = Union[CapabilityDelta, MentalityDelta, TrainingDelta, PossessionsDelta]


WILL_PATTERN = re.compile(r'\+(\d+)\s*will')
LUCK_PATTERN = re.compile(r'\+(\d+)\s*luck')
XP_PATTERN = re.compile(r'\+(\d+)\s*xp')
GOLD_PATTERN = re.compile(r'(\d+)\s*gold\s*marks?')

# First matching phrase wins. "basic weapon" is checked before
# "fine basic weapon", so "Fine basic weapon" resolves to "Basic weapon".
ITEM_PRIORITY = [
    ("quality weapon", "Quality weapon"),
    ("basic weapon", "Basic weapon"),
    ("fine basic weapon", "Fine basic weapon"),
    ("mystic item", "Mystic Item"),
    ("valuable item", "Valuable Item"),
    ("fine armor", "Fine armor"),
    ("item", "Item"),
]


def _capture(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0


def parse_capability_result(result: str) -> CapabilityDelta:
    """
    Parse a capabilities entry such as "Speed and Combat Skill increase".

    "All stats" grants +1 to agility, combat skill, speed and toughness.
    Casting is never included in "all stats".

    Args:
        result: Entry text from a capabilities table

    Returns:
        CapabilityDelta with the matched stat increments
    """
    lower = result.lower()

    if "all stats" in lower:
        return CapabilityDelta(agility=1, combat_skill=1, speed_base=1, toughness=1)

    return CapabilityDelta(
        agility=1 if "agility" in lower else 0,
        combat_skill=1 if "combat skill" in lower else 0,
        speed_base=1 if "speed" in lower else 0,
        toughness=1 if "toughness" in lower else 0,
        casting=1 if "casting" in lower else 0
    )


def parse_mentality_result(result: str) -> MentalityDelta:
    """
    Parse a mentality entry such as "+1 Will & +1 Luck".

    Args:
        result: Entry text from a mentality table

    Returns:
        MentalityDelta; missing captures default to 0
    """
    lower = result.lower()
    return MentalityDelta(
        xp=_capture(XP_PATTERN, lower),
        will=_capture(WILL_PATTERN, lower),
        luck=_capture(LUCK_PATTERN, lower)
    )


def parse_training_result(result: str) -> TrainingDelta:
    """
    Parse a training entry such as "2 Skills" or "+1 XP".

    Args:
        result: Entry text from a training table

    Returns:
        TrainingDelta with the skill roll count and XP bonus
    """
    lower = result.lower()

    if "2 skills" in lower:
        skills = 2
    elif "skill" in lower:
        skills = 1
    else:
        skills = 0

    return TrainingDelta(skills=skills, xp=_capture(XP_PATTERN, lower))


def parse_possessions_result(result: str) -> PossessionsDelta:
    """
    Parse a possessions entry such as "2 Gold Marks" or "Quality weapon".

    Args:
        result: Entry text from a possessions table

    Returns:
        PossessionsDelta with gold and the granted item name (or None)
    """
    lower = result.lower()
    item = None
    for phrase, item_name in ITEM_PRIORITY:
        if phrase in lower:
            item = item_name
            break

    return PossessionsDelta(gold=_capture(GOLD_PATTERN, lower), item=item)


PARSERS = {
    "capabilities": parse_capability_result,
    "mentality": parse_mentality_result,
    "possessions": parse_possessions_result,
    "training": parse_training_result,
}


def parse_result(table_kind: str, result: str) -> Delta:
    """
    Parse entry text with the parser for the given table kind.

    Args:
        table_kind: One of "capabilities", "mentality", "possessions", "training"
        result: Entry text

    Returns:
        The structured delta for that table kind

    Raises:
        KeyError: If table_kind is not a background table
    """
    if table_kind not in PARSERS:
        raise KeyError(f"Unknown roll table: {table_kind}")
    return PARSERS[table_kind](result)
