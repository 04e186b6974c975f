# ABOUTME: Dice rolling system for Five Leagues character creation
# ABOUTME: Handles dice notation parsing and the d20/d100 table rolls

import re
import random
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class DiceRoll:
    """
    Represents the result of a dice roll.

    Attributes:
        rolls: Individual die results
        modifier: Numeric modifier added to the roll
        notation: Original dice notation string (e.g., "1d20", "d100")
    """
    rolls: List[int]
    modifier: int
    notation: str

    @property
    def total(self) -> int:
        """Sum of all dice plus the modifier."""
        return sum(self.rolls) + self.modifier

    def __str__(self) -> str:
        """String representation of the dice roll"""
        return f"{self.notation}: {self.rolls} + {self.modifier} = {self.total}"


class DiceRoller:
    """
    Handles dice rolling with standard notation.

    Supports:
    - Standard notation: 1d20, 2d6, 1d100, etc.
    - Modifiers: 1d20+1, 2d6-2
    - Implicit single die: d20 (treated as 1d20)

    The character builder only needs roll_die(), which draws one
    uniformly distributed integer in [1, sides].
    """

    # Regex pattern for parsing dice notation: NdS+M or NdS-M
    DICE_PATTERN = re.compile(r'^(\d*)d(\d+)(([+-])(\d+))?$', re.IGNORECASE)

    def __init__(self, seed: Optional[int] = None):
        """
        Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible results (mainly for testing)
        """
        if seed is not None:
            self.random = random.Random(seed)
        else:
            self.random = random.Random()

    def roll(self, notation: str) -> DiceRoll:
        """
        Roll dice according to standard notation.

        Args:
            notation: Dice notation string (e.g., "1d20", "d100", "2d6+3")

        Returns:
            DiceRoll object containing rolls, modifier, and total

        Raises:
            ValueError: If notation is invalid
        """
        count, sides, modifier = self._parse_notation(notation)

        rolls = [self._roll_die(sides) for _ in range(count)]

        result = DiceRoll(rolls=rolls, modifier=modifier, notation=notation)

        # Log the roll if debug mode is enabled
        from warband_engine.utils.logging_config import get_logging_config
        logging_config = get_logging_config()
        if logging_config:
            logging_config.log_dice_roll(
                notation=notation,
                rolls=rolls,
                modifier=modifier,
                total=result.total
            )

        return result

    def roll_die(self, sides: int) -> int:
        """
        Roll one die and return its face.

        Args:
            sides: Number of sides (20 for background tables, 100 for skills)

        Returns:
            Random integer between 1 and sides (inclusive)

        Raises:
            ValueError: If sides is less than 1
        """
        if sides < 1:
            raise ValueError(f"Die must have at least one side: {sides}")
        return self.roll(f"1d{sides}").total

    def _parse_notation(self, notation: str) -> tuple[int, int, int]:
        """
        Parse dice notation string into components.

        Args:
            notation: Dice notation string (e.g., "2d6+3")

        Returns:
            Tuple of (count, sides, modifier)

        Raises:
            ValueError: If notation is invalid
        """
        if not notation:
            raise ValueError("Dice notation cannot be empty")

        match = self.DICE_PATTERN.match(notation.strip())
        if not match:
            raise ValueError(f"Invalid dice notation: {notation}")

        # Extract count (default to 1 if not specified, e.g., "d20")
        count_str = match.group(1)
        count = int(count_str) if count_str else 1

        sides = int(match.group(2))
        if count < 1 or sides < 1:
            raise ValueError(f"Invalid dice notation: {notation}")

        modifier = 0
        if match.group(3):
            sign = match.group(4)
            value = int(match.group(5))
            modifier = value if sign == '+' else -value

        return count, sides, modifier

    def _roll_die(self, sides: int) -> int:
        return self.random.randint(1, sides)
