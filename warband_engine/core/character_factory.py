# ABOUTME: Character assembly from a finished creation session
# ABOUTME: Applies capability bonuses to base stats and builds the final equipment list

from typing import List

from warband_engine.core.character import BASE_STATS, Character, CharacterType, Stats
from warband_engine.core.creation_session import CreationSession
from warband_engine.rules.equipment import Equipment, granted_item
from warband_engine.rules.result_parser import CapabilityDelta


FOLLOWER_BACKGROUND = "Townsfolk"
FOLLOWER_NOTES = "Follower - simplified stats"
MYSTIC_BACKGROUND = "Mystic"

DEFAULT_NAMES = {
    CharacterType.HERO: "Unnamed Hero",
    CharacterType.FOLLOWER: "Unnamed Follower",
}


class CharacterFactory:
    """
    Builds the immutable Character at the end of the creation wizard.

    Handles:
    - Applying the single capabilities roll to the base profile
    - Setting Will and Luck from the mentality roll
    - Adding the item granted by the possessions roll (heroes only)
    - Follower defaults (no XP, gold, skills or background bonuses)
    """

    @staticmethod
    def compute_final_stats(session: CreationSession) -> Stats:
        """
        Calculate the final profile for a session.

        Capability increments are added to the base values once. Will and
        Luck are set (not added) to the mentality bonuses.

        Args:
            session: Creation session

        Returns:
            Final Stats
        """
        if not session.is_hero:
            return BASE_STATS

        bonuses = CapabilityDelta()
        if session.capabilities is not None and isinstance(session.capabilities.delta, CapabilityDelta):
            bonuses = session.capabilities.delta

        return Stats(
            agility=BASE_STATS.agility + bonuses.agility,
            speed_base=BASE_STATS.speed_base + bonuses.speed_base,
            dash_bonus=BASE_STATS.dash_bonus,
            combat_skill=BASE_STATS.combat_skill + bonuses.combat_skill,
            toughness=BASE_STATS.toughness + bonuses.toughness,
            casting=BASE_STATS.casting + bonuses.casting,
            will=session.bonus_will,
            luck=session.bonus_luck
        )

    @staticmethod
    def build_equipment(session: CreationSession) -> List[Equipment]:
        """
        Final equipment list: the selected items plus any granted item.

        Args:
            session: Creation session

        Returns:
            Equipment in selection order, granted item last
        """
        equipment = list(session.selected_equipment)
        if session.is_hero and session.granted_item:
            equipment.append(granted_item(session.granted_item))
        return equipment

    @staticmethod
    def resolve_name(session: CreationSession) -> str:
        """Entered name, or a type-appropriate default when blank."""
        return session.name.strip() or DEFAULT_NAMES[session.character_type]

    def assemble(self, session: CreationSession) -> Character:
        """
        Produce the finished character for a session.

        This does not check step completion; CharacterBuilder.complete()
        does that before calling here.

        Args:
            session: Creation session at the summary step

        Returns:
            New Character with a fresh id
        """
        if session.is_hero:
            return Character(
                name=self.resolve_name(session),
                origin=session.origin,
                background=session.background,
                character_type=CharacterType.HERO,
                is_mystic=session.background == MYSTIC_BACKGROUND,
                stats=self.compute_final_stats(session),
                skills=session.rolled_skills,
                equipment=tuple(self.build_equipment(session)),
                xp=session.bonus_xp,
                gold=session.gold,
                notes=""
            )

        return Character(
            name=self.resolve_name(session),
            origin=session.origin,
            background=FOLLOWER_BACKGROUND,
            character_type=CharacterType.FOLLOWER,
            is_mystic=False,
            stats=self.compute_final_stats(session),
            skills=(),
            equipment=tuple(self.build_equipment(session)),
            xp=0,
            gold=0,
            notes=FOLLOWER_NOTES
        )
