# ABOUTME: Warband vault storing every roster in a single JSON document
# ABOUTME: Handles warband CRUD and appending/removing characters with read-modify-write saves

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from warband_engine.core.character import Character, CharacterType
from warband_engine.core.warband import DEFAULT_MAX_HEROES, Warband


logger = logging.getLogger(__name__)

# Current warband vault version
VAULT_VERSION = "1.0.0"

VAULT_PATH_ENV = "WARBAND_VAULT_PATH"


def default_vault_path() -> Path:
    """Vault location: $WARBAND_VAULT_PATH, else ~/.five_leagues/warbands.json."""
    env_path = os.getenv(VAULT_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / ".five_leagues" / "warbands.json"


class WarbandVault:
    """
    Stores all warbands in one warbands.json file.

    Every write loads the whole document, changes it, and writes it back.
    Only one creation wizard runs at a time, so no locking is done.
    """

    def __init__(self, vault_path: Optional[Path] = None):
        """
        Initialize warband vault.

        Args:
            vault_path: Path to warbands.json (defaults to default_vault_path())
        """
        if vault_path is None:
            vault_path = default_vault_path()

        self.vault_path = Path(vault_path)
        self.vault_path.parent.mkdir(parents=True, exist_ok=True)

        if not self.vault_path.exists():
            self._initialize_vault()

    def _initialize_vault(self) -> None:
        """Create empty vault file with proper structure."""
        vault_data = {
            "version": VAULT_VERSION,
            "created_at": datetime.now().isoformat(),
            "warbands": []
        }
        self._save_vault(vault_data)

    def _load_vault(self) -> Dict[str, Any]:
        """
        Load vault data from disk.

        Raises:
            ValueError: If vault file is corrupted
        """
        try:
            with open(self.vault_path, 'r', encoding='utf-8') as f:
                vault_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupted vault file: {e}")

        if not isinstance(vault_data, dict) or "warbands" not in vault_data:
            raise ValueError("Invalid vault file: missing 'warbands'")

        return vault_data

    def _save_vault(self, vault_data: Dict[str, Any]) -> None:
        with open(self.vault_path, 'w', encoding='utf-8') as f:
            json.dump(vault_data, f, indent=2, ensure_ascii=False)

    def _log_change(self, warband: str, action: str, details: str = "") -> None:
        logger.info(f"{warband}: {action} {details}".rstrip())

        from warband_engine.utils.logging_config import get_logging_config
        logging_config = get_logging_config()
        if logging_config:
            logging_config.log_roster_change(warband, action, details)

    # ------------------------------------------------------------------
    # Warbands
    # ------------------------------------------------------------------

    def list_warbands(self) -> List[Warband]:
        """
        Load every stored warband.

        Returns:
            Warbands in creation order
        """
        vault_data = self._load_vault()
        return [Warband.from_dict(data) for data in vault_data["warbands"]]

    def get_warband(self, warband_id: str) -> Optional[Warband]:
        """
        Load one warband by id.

        Returns:
            Warband, or None if not found
        """
        vault_data = self._load_vault()
        for data in vault_data["warbands"]:
            if data["id"] == warband_id:
                return Warband.from_dict(data)
        return None

    def create_warband(self, name: str, max_heroes: int = DEFAULT_MAX_HEROES) -> Warband:
        """
        Create and store an empty warband.

        Args:
            name: Warband name
            max_heroes: Hero cap

        Returns:
            The new Warband

        Raises:
            ValueError: If the name is blank or max_heroes is below 1
        """
        name = name.strip()
        if not name:
            raise ValueError("Warband name cannot be empty")
        if max_heroes < 1:
            raise ValueError(f"Max heroes must be at least 1: {max_heroes}")

        warband = Warband(name=name, max_heroes=max_heroes)

        vault_data = self._load_vault()
        vault_data["warbands"].append(warband.to_dict())
        self._save_vault(vault_data)

        self._log_change(warband.name, "created", f"max heroes {max_heroes}")
        return warband

    def update_warband(self, warband: Warband) -> Warband:
        """
        Replace a stored warband and refresh its updated_at timestamp.

        Args:
            warband: Edited warband (matched by id)

        Returns:
            The warband with its new timestamp

        Raises:
            FileNotFoundError: If the warband doesn't exist
        """
        vault_data = self._load_vault()

        for i, data in enumerate(vault_data["warbands"]):
            if data["id"] == warband.id:
                warband.updated_at = datetime.now().isoformat()
                vault_data["warbands"][i] = warband.to_dict()
                self._save_vault(vault_data)
                self._log_change(warband.name, "updated")
                return warband

        raise FileNotFoundError(f"Warband not found: {warband.id}")

    def delete_warband(self, warband_id: str) -> bool:
        """
        Delete a warband and all its characters.

        Returns:
            True if the warband was deleted, False if not found
        """
        vault_data = self._load_vault()
        remaining = [data for data in vault_data["warbands"] if data["id"] != warband_id]

        if len(remaining) == len(vault_data["warbands"]):
            return False

        vault_data["warbands"] = remaining
        self._save_vault(vault_data)
        self._log_change(warband_id, "deleted")
        return True

    # ------------------------------------------------------------------
    # Characters
    # ------------------------------------------------------------------

    def _require_warband(self, warband_id: str) -> Warband:
        warband = self.get_warband(warband_id)
        if warband is None:
            raise FileNotFoundError(f"Warband not found: {warband_id}")
        return warband

    def append_character(self, warband_id: str, character: Character) -> Warband:
        """
        Add a finished character to the hero or follower list of a warband.

        Args:
            warband_id: Target warband
            character: Character from the creation wizard

        Returns:
            Updated warband

        Raises:
            FileNotFoundError: If the warband doesn't exist
        """
        warband = self._require_warband(warband_id)
        warband.add_character(character)
        self._log_change(warband.name, f"added {character.character_type.value}", character.name)
        return self.update_warband(warband)

    def update_character(self, warband_id: str, character: Character) -> Warband:
        """
        Replace an edited character (matched by id).

        Raises:
            FileNotFoundError: If the warband or character doesn't exist
        """
        warband = self._require_warband(warband_id)
        if not warband.replace_character(character):
            raise FileNotFoundError(f"Character not found: {character.id}")
        return self.update_warband(warband)

    def remove_character(
        self,
        warband_id: str,
        character_id: str,
        character_type: CharacterType
    ) -> bool:
        """
        Remove a character from a warband.

        Returns:
            True if a character was removed, False if the id was not in that list

        Raises:
            FileNotFoundError: If the warband doesn't exist
        """
        warband = self._require_warband(warband_id)
        if not warband.remove_character(character_id, character_type):
            return False

        self._log_change(warband.name, f"removed {character_type.value}", character_id)
        self.update_warband(warband)
        return True
