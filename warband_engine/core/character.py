# ABOUTME: Finished character records for heroes and followers
# ABOUTME: Holds stats, skills, equipment, XP and gold, plus roster (de)serialization

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Tuple

from warband_engine.rules.equipment import Equipment, calculate_armor_score


class CharacterType(Enum):
    """The two kinds of warband members"""
    HERO = "hero"
    FOLLOWER = "follower"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Stats:
    """
    Character profile.

    Every new character starts from the same base profile; background rolls
    add to it during creation.
    """
    agility: int = 1
    speed_base: int = 4
    dash_bonus: str = "+3"
    combat_skill: int = 0
    toughness: int = 3
    casting: int = 0
    will: int = 0
    luck: int = 0

    @property
    def speed(self) -> str:
        """Speed as printed on the roster, e.g. "4/+3"."""
        return f"{self.speed_base}/{self.dash_bonus}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agility": self.agility,
            "speedBase": self.speed_base,
            "dashBonus": self.dash_bonus,
            "combatSkill": self.combat_skill,
            "toughness": self.toughness,
            "casting": self.casting,
            "will": self.will,
            "luck": self.luck
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Stats":
        base = cls()
        return cls(
            agility=data.get("agility", base.agility),
            speed_base=data.get("speedBase", base.speed_base),
            dash_bonus=data.get("dashBonus", base.dash_bonus),
            combat_skill=data.get("combatSkill", base.combat_skill),
            toughness=data.get("toughness", base.toughness),
            casting=data.get("casting", base.casting),
            will=data.get("will", base.will),
            luck=data.get("luck", base.luck)
        )


BASE_STATS = Stats()


@dataclass(frozen=True)
class Character:
    """
    A finished hero or follower.

    Characters are created once, at the end of the creation wizard, and are
    not mutated afterwards. Roster edits produce a new record through
    with_changes().
    """
    name: str
    origin: str
    background: str
    character_type: CharacterType
    stats: Stats = field(default_factory=Stats)
    skills: Tuple[str, ...] = ()
    equipment: Tuple[Equipment, ...] = ()
    xp: int = 0
    gold: int = 0
    notes: str = ""
    is_mystic: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def is_hero(self) -> bool:
        return self.character_type == CharacterType.HERO

    @property
    def armor_score(self) -> int:
        """Protective value of all owned armor pieces."""
        return calculate_armor_score(self.equipment)

    def with_changes(self, **changes: Any) -> "Character":
        """Return a copy with the given fields replaced (id is kept)."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the roster document format."""
        return {
            "id": self.id,
            "name": self.name,
            "origin": self.origin,
            "background": self.background,
            "characterType": self.character_type.value,
            "isMystic": self.is_mystic,
            "stats": self.stats.to_dict(),
            "skills": list(self.skills),
            "equipment": [item.to_dict() for item in self.equipment],
            "xp": self.xp,
            "gold": self.gold,
            "notes": self.notes
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Character":
        """
        Rebuild a character from the roster document format.

        Raises:
            KeyError: If a required field is missing
            ValueError: If the character type is unknown
        """
        return cls(
            id=data["id"],
            name=data["name"],
            origin=data["origin"],
            background=data["background"],
            character_type=CharacterType(data["characterType"]),
            is_mystic=data.get("isMystic", False),
            stats=Stats.from_dict(data.get("stats", {})),
            skills=tuple(data.get("skills", [])),
            equipment=tuple(Equipment.from_dict(item) for item in data.get("equipment", [])),
            xp=data.get("xp", 0),
            gold=data.get("gold", 0),
            notes=data.get("notes", "")
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.origin} {self.background} {self.character_type.value})"
