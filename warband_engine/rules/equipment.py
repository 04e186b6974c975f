# ABOUTME: Equipment items, starter-kit catalogs, and per-group selection limits
# ABOUTME: Enforces how many items of each group a hero or follower may pick

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Tuple


class EquipmentCategory(Enum):
    """Equipment categories shown on the roster"""
    MELEE = "melee"
    RANGED = "ranged"
    ARMOR = "armor"
    CURRENCY = "currency"
    MISC = "misc"
    MYSTIC = "mystic"


@dataclass(frozen=True)
class Equipment:
    """
    A piece of equipment carried by a character.

    Two items are the same item when their names match; category and
    range flag do not take part in equality.
    """
    name: str
    category: EquipmentCategory = field(compare=False)
    range_flag: bool = field(default=False, compare=False)

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {"name": self.name, "type": self.category.value}
        if self.range_flag:
            data["rangeFlag"] = True
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "Equipment":
        category = data.get("type", data.get("category", "misc"))
        return cls(
            name=str(data["name"]),
            category=EquipmentCategory(category),
            range_flag=bool(data.get("rangeFlag", data.get("range_flag", False)))
        )


ARMOR_VALUES = {
    "Partial armor": 1,
    "Light armor": 2,
    "Full armor": 3,
    "Helmet": 1,
    "Shield": 1,
}


def calculate_armor_score(equipment: Iterable[Equipment]) -> int:
    """
    Sum the armor contribution of every owned piece.

    Partial armor +1, Light armor +2, Full armor +3, Helmet +1, Shield +1.
    Each item instance counts once.
    """
    return sum(ARMOR_VALUES.get(item.name, 0) for item in equipment)


def granted_item(name: str) -> Equipment:
    """
    Build the equipment record for an item granted by a possessions roll.

    Anything with "weapon" in its name is a melee weapon, everything else is misc.
    """
    category = EquipmentCategory.MELEE if "weapon" in name.lower() else EquipmentCategory.MISC
    return Equipment(name=name, category=category)


@dataclass(frozen=True)
class SelectionGroup:
    """
    A named group of catalog items with a maximum number of picks.

    Attributes:
        name: Group key, e.g. "quality_weapons"
        items: Items that belong to the group
        limit: Maximum number of group items that may be selected at once
    """
    name: str
    items: Tuple[Equipment, ...]
    limit: int

    def __contains__(self, item: Equipment) -> bool:
        return item in self.items

    def count_selected(self, selected: Iterable[Equipment]) -> int:
        return sum(1 for item in selected if item in self.items)

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


class EquipmentCatalog:
    """
    The starter kit available to one character type.

    Handles:
    - Listing selection groups in display order
    - Finding items by name
    - Checking whether one more item may be added to a selection
    """

    def __init__(self, groups: List[SelectionGroup]):
        self.groups = groups

    @property
    def items(self) -> List[Equipment]:
        """All distinct items in catalog order."""
        seen: List[Equipment] = []
        for group in self.groups:
            for item in group.items:
                if item not in seen:
                    seen.append(item)
        return seen

    def find(self, name: str) -> Equipment | None:
        """Find an item by name (case-insensitive)."""
        for item in self.items:
            if item.name.lower() == name.lower():
                return item
        return None

    def groups_for(self, item: Equipment) -> List[SelectionGroup]:
        return [group for group in self.groups if item in group]

    def can_add(self, selected: Iterable[Equipment], item: Equipment) -> bool:
        """
        Check whether item may be added to the current selection.

        An item outside the catalog can never be added. Otherwise every
        group the item belongs to must still be below its limit.

        Args:
            selected: Items already selected
            item: Item the user wants to add

        Returns:
            True if adding the item keeps every group within its limit
        """
        groups = self.groups_for(item)
        if not groups:
            return False

        selected = list(selected)
        return all(group.count_selected(selected) < group.limit for group in groups)
