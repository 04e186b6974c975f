# ABOUTME: Warband roster holding a capped list of heroes and a list of followers
# ABOUTME: Handles membership, hero capacity checks, and document (de)serialization

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from warband_engine.core.character import Character, CharacterType


DEFAULT_MAX_HEROES = 10


def _now() -> str:
    return datetime.now().isoformat()


@dataclass
class Warband:
    """
    A named collection of heroes and followers.

    The hero cap is a creation policy: the character builder refuses to start
    a new hero once len(heroes) reaches max_heroes. Stored rosters are not
    trimmed if the cap is later lowered.
    """
    name: str
    max_heroes: int = DEFAULT_MAX_HEROES
    heroes: List[Character] = field(default_factory=list)
    followers: List[Character] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    def can_add_hero(self) -> bool:
        """Check whether another hero fits under the cap."""
        return len(self.heroes) < self.max_heroes

    def members(self, character_type: CharacterType) -> List[Character]:
        """Get the hero or follower list."""
        return self.heroes if character_type == CharacterType.HERO else self.followers

    def add_character(self, character: Character) -> None:
        """Append a character to the list matching its type."""
        self.members(character.character_type).append(character)

    def replace_character(self, character: Character) -> bool:
        """
        Swap in an edited character with the same id.

        Returns:
            True if a character was replaced, False if the id was not found
        """
        members = self.members(character.character_type)
        for i, existing in enumerate(members):
            if existing.id == character.id:
                members[i] = character
                return True
        return False

    def remove_character(self, character_id: str, character_type: CharacterType) -> bool:
        """
        Remove a character by id from the given list.

        Returns:
            True if a character was removed, False if not found
        """
        members = self.members(character_type)
        remaining = [c for c in members if c.id != character_id]
        removed = len(remaining) != len(members)
        members[:] = remaining
        return removed

    def get_character(self, character_id: str) -> Optional[Character]:
        for character in self.heroes + self.followers:
            if character.id == character_id:
                return character
        return None

    @property
    def total_xp(self) -> int:
        return sum(hero.xp for hero in self.heroes)

    @property
    def total_gold(self) -> int:
        return sum(c.gold for c in self.heroes + self.followers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "maxHeroes": self.max_heroes,
            "heroes": [c.to_dict() for c in self.heroes],
            "followers": [c.to_dict() for c in self.followers],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Warband":
        return cls(
            id=data["id"],
            name=data["name"],
            max_heroes=data.get("maxHeroes", DEFAULT_MAX_HEROES),
            heroes=[Character.from_dict(c) for c in data.get("heroes", [])],
            followers=[Character.from_dict(c) for c in data.get("followers", [])],
            created_at=data.get("createdAt", _now()),
            updated_at=data.get("updatedAt", _now())
        )

    def __len__(self) -> int:
        return len(self.heroes) + len(self.followers)

    def __str__(self) -> str:
        return f"{self.name} ({len(self.heroes)}/{self.max_heroes} heroes, {len(self.followers)} followers)"
