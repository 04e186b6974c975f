# ABOUTME: Data loader for reading Five Leagues game tables from JSON
# ABOUTME: Loads origins, backgrounds, the skill table, and equipment catalogs

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from warband_engine.rules.equipment import (
    Equipment,
    EquipmentCatalog,
    EquipmentCategory,
    SelectionGroup
)
from warband_engine.rules.result_parser import parse_result
from warband_engine.rules.tables import (
    BACKGROUND_TABLES,
    Background,
    RollTableEntry,
    SkillTableEntry,
    validate_table
)


logger = logging.getLogger(__name__)


class DataLoader:
    """
    Loads game content from JSON files.

    Responsible for reading the origin list, background roll tables, the d100
    skill table and the starter-kit catalogs from the data directory and
    converting them into rule objects. Every roll table is checked for full
    coverage when it is loaded, so a malformed table fails here rather than
    in the middle of character creation.
    """

    def __init__(self, data_path: Path | None = None):
        """
        Initialize the data loader.

        Args:
            data_path: Path to the rule set directory (defaults to warband_engine/data/borderlands)
        """
        if data_path is None:
            self.data_path = Path(__file__).parent.parent / "data" / "borderlands"
        else:
            self.data_path = Path(data_path)

    def _read(self, filename: str) -> Dict[str, Any]:
        path = self.data_path / filename
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def load_origins(self) -> List[str]:
        """
        Load the list of character origins.

        Returns:
            Origin names in display order
        """
        return list(self._read("origins.json")["origins"])

    def load_baseline_origin(self) -> str:
        """Origin given to characters that never choose one (followers)."""
        return self._read("origins.json")["baseline"]

    def load_backgrounds(self) -> Dict[str, Background]:
        """
        Load all background definitions.

        Each table entry gets its structured delta attached here, parsed once
        from the entry text.

        Returns:
            Dictionary mapping background names to Background objects

        Raises:
            ValueError: If any roll table has gaps or overlaps
        """
        data = self._read("backgrounds.json")
        sides = data.get("die", 20)

        backgrounds: Dict[str, Background] = {}
        for bg_data in data["backgrounds"]:
            tables = {}
            for kind in BACKGROUND_TABLES:
                entries = tuple(
                    RollTableEntry(
                        min=row["min"],
                        max=row["max"],
                        value=row["value"],
                        delta=parse_result(kind, row["value"])
                    )
                    for row in bg_data.get(kind, [])
                )
                validate_table(entries, sides, name=f"{bg_data['name']} {kind}")
                tables[kind] = entries

            background = Background(
                name=bg_data["name"],
                description=bg_data.get("description", ""),
                valid_origins=tuple(bg_data.get("valid_origins") or ()),
                **tables
            )
            backgrounds[background.name] = background

        logger.debug(f"Loaded {len(backgrounds)} backgrounds from {self.data_path}")
        return backgrounds

    def load_skill_table(self) -> List[SkillTableEntry]:
        """
        Load the d100 skill table.

        Raises:
            ValueError: If the table does not cover 1-100 exactly once
        """
        data = self._read("skills.json")
        table = [
            SkillTableEntry(min=row["min"], max=row["max"], skill=row["skill"])
            for row in data["skills"]
        ]
        validate_table(table, data.get("die", 100), name="skills")
        return table

    def load_equipment_catalogs(self) -> Dict[str, EquipmentCatalog]:
        """
        Load the starter-kit catalogs for each character type.

        Returns:
            Dictionary mapping character type ("hero", "follower") to its catalog

        Raises:
            KeyError: If a catalog group has no selection limit
        """
        data = self._read("equipment.json")
        limits = data["limits"]

        catalogs: Dict[str, EquipmentCatalog] = {}
        for character_type in ("hero", "follower"):
            groups = []
            for group_name, items in data[character_type].items():
                if group_name not in limits[character_type]:
                    raise KeyError(f"No selection limit for {character_type} group '{group_name}'")
                groups.append(SelectionGroup(
                    name=group_name,
                    items=tuple(self._build_item(item) for item in items),
                    limit=limits[character_type][group_name]
                ))
            catalogs[character_type] = EquipmentCatalog(groups)

        return catalogs

    @staticmethod
    def _build_item(item_data: Dict[str, Any]) -> Equipment:
        return Equipment(
            name=item_data["name"],
            category=EquipmentCategory(item_data["category"]),
            range_flag=item_data.get("range_flag", False)
        )
