# ABOUTME: Tests for the character creation state machine
# ABOUTME: Covers step gates, background and skill rolls, equipment limits, and completion

import logging

import pytest

from warband_engine.core.character import CharacterType
from warband_engine.core.character_builder import IncompleteCharacterError, WarbandFullError
from warband_engine.core.creation_session import STEP_SEQUENCES, WizardStep
from warband_engine.core.warband import Warband
from warband_engine.rules.equipment import EquipmentCategory


def hero_at(builder, step: WizardStep, origin="Human", background="Townsfolk"):
    """Drive a new hero session forward until it reaches the given step."""
    session = builder.start_session(CharacterType.HERO)
    while session.step != step:
        if session.step == WizardStep.ORIGIN:
            session = builder.select_origin(session, origin)
        elif session.step == WizardStep.BACKGROUND:
            session = builder.select_background(session, background)
        elif session.step in (
            WizardStep.CAPABILITIES, WizardStep.MENTALITY,
            WizardStep.POSSESSIONS, WizardStep.TRAINING
        ):
            session = builder.roll_current_step(session)
        elif session.step == WizardStep.SKILLS:
            while session.skills_remaining:
                session = builder.roll_skill(session)
        advanced = builder.advance(session)
        assert advanced is not session, f"stuck at {session.step}"
        session = advanced
    return session


class TestSessionStart:
    """Test starting hero and follower sessions"""

    def test_hero_sequence(self, builder):
        session = builder.start_session(CharacterType.HERO)
        assert session.step == WizardStep.NAME
        assert session.steps == STEP_SEQUENCES[CharacterType.HERO]
        assert len(session.steps) == 10
        assert session.origin is None

    def test_follower_sequence(self, builder):
        session = builder.start_session(CharacterType.FOLLOWER)
        assert session.steps == (WizardStep.NAME, WizardStep.EQUIPMENT, WizardStep.SUMMARY)
        assert session.origin == "Human"

    def test_full_warband_refuses_hero(self, builder):
        warband = Warband(name="Tiny", max_heroes=1)
        warband.add_character(builder.complete(hero_at(builder, WizardStep.SUMMARY)))

        with pytest.raises(WarbandFullError):
            builder.start_session(CharacterType.HERO, warband)

    def test_full_warband_still_takes_followers(self, builder):
        warband = Warband(name="Tiny", max_heroes=1)
        warband.add_character(builder.complete(hero_at(builder, WizardStep.SUMMARY)))

        session = builder.start_session(CharacterType.FOLLOWER, warband)
        assert session.character_type == CharacterType.FOLLOWER


class TestNavigation:
    """Test advance/back gates"""

    def test_name_is_optional(self, builder):
        session = builder.start_session(CharacterType.HERO)
        assert builder.advance(session).step == WizardStep.ORIGIN

    def test_advance_with_selection(self, builder):
        session = builder.start_session(CharacterType.HERO)
        session = builder.advance(session, "Aldric")
        session = builder.advance(session, "Human")
        session = builder.advance(session, "Noble")
        assert session.name == "Aldric"
        assert session.background == "Noble"
        assert session.step == WizardStep.CAPABILITIES

    @pytest.mark.parametrize("step", [
        WizardStep.ORIGIN,
        WizardStep.BACKGROUND,
        WizardStep.CAPABILITIES,
        WizardStep.MENTALITY,
        WizardStep.POSSESSIONS,
        WizardStep.TRAINING,
    ])
    def test_advance_refused_at_incomplete_gate(self, builder, step):
        session = hero_at(builder, step)
        assert builder.advance(session) is session
        assert not builder.can_advance(session)

    def test_advance_refused_until_skills_rolled(self, make_builder):
        # Townsfolk: capabilities 1, mentality 1, possessions 1, training 8 (2 skills)
        builder = make_builder(1, 1, 1, 8, 30, 60)
        session = hero_at(builder, WizardStep.SKILLS)
        assert session.skill_quota == 2
        assert builder.advance(session) is session

        session = builder.roll_skill(session)
        assert builder.advance(session) is session

        session = builder.roll_skill(session)
        assert builder.advance(session).step == WizardStep.EQUIPMENT

    def test_zero_skill_quota_passes(self, make_builder):
        builder = make_builder(1, 1, 1, 15)
        session = hero_at(builder, WizardStep.SKILLS)
        assert session.skill_quota == 0
        assert builder.advance(session).step == WizardStep.EQUIPMENT

    def test_advance_refused_at_summary(self, builder):
        session = hero_at(builder, WizardStep.SUMMARY)
        assert builder.advance(session) is session

    def test_refusal_logged(self, builder, caplog):
        session = hero_at(builder, WizardStep.ORIGIN)
        with caplog.at_level(logging.WARNING, logger="warband_engine.core.character_builder"):
            builder.advance(session)
        assert "incomplete step 'origin'" in caplog.text

    def test_back_keeps_data(self, builder):
        session = hero_at(builder, WizardStep.MENTALITY)
        rolled = session.capabilities

        session = builder.back(session)
        session = builder.back(session)
        assert session.step == WizardStep.BACKGROUND
        assert session.capabilities == rolled

        session = builder.advance(session)
        assert session.step == WizardStep.CAPABILITIES
        assert session.capabilities == rolled

    def test_back_at_first_step(self, builder):
        session = builder.start_session(CharacterType.HERO)
        assert builder.back(session) is session


class TestSelections:
    """Test origin and background selection"""

    def test_unknown_origin(self, builder):
        session = hero_at(builder, WizardStep.ORIGIN)
        assert builder.select_origin(session, "Dwarf") is session

    def test_backgrounds_for_origin(self, builder):
        assert [bg.name for bg in builder.available_backgrounds("Preen")] == ["Mystic"]
        assert len(builder.available_backgrounds("Human")) == 5
        assert builder.available_backgrounds(None) == []

    def test_invalid_background_for_origin(self, builder):
        session = hero_at(builder, WizardStep.BACKGROUND, origin="Feral")
        assert builder.select_background(session, "Townsfolk") is session
        assert builder.select_background(session, "Mystic").background == "Mystic"

    def test_origin_change_clears_invalid_background(self, builder):
        session = hero_at(builder, WizardStep.BACKGROUND)
        session = builder.select_background(session, "Zealot")
        session = builder.select_origin(session, "Dusklings")
        assert session.origin == "Dusklings"
        assert session.background is None

    def test_origin_change_keeps_valid_background(self, builder):
        session = hero_at(builder, WizardStep.BACKGROUND)
        session = builder.select_background(session, "Mystic")
        session = builder.select_origin(session, "Halflings")
        assert session.background == "Mystic"

    def test_origin_and_background_locked_after_roll(self, builder):
        session = hero_at(builder, WizardStep.CAPABILITIES)
        session = builder.roll_capabilities(session)

        assert builder.select_origin(session, "Feral") is session
        assert builder.select_background(session, "Noble") is session

    def test_follower_has_no_origin_choice(self, builder):
        session = builder.start_session(CharacterType.FOLLOWER)
        assert builder.select_origin(session, "Preen") is session
        assert builder.select_background(session, "Mystic") is session


class TestRolls:
    """Test background table and skill rolls"""

    def test_roll_records_result(self, make_builder):
        builder = make_builder(2)
        session = hero_at(builder, WizardStep.CAPABILITIES)
        session = builder.roll_capabilities(session)
        assert session.capabilities.roll == 2
        assert session.capabilities.result == "Agility increase"

    def test_reroll_refused(self, make_builder):
        builder = make_builder(2, 20)
        session = hero_at(builder, WizardStep.CAPABILITIES)
        session = builder.roll_capabilities(session)
        assert builder.roll_capabilities(session) is session
        assert session.capabilities.roll == 2

    def test_roll_wrong_step_refused(self, builder):
        session = hero_at(builder, WizardStep.CAPABILITIES)
        assert builder.roll_mentality(session) is session
        assert builder.roll_skill(session) is session

    def test_nothing_to_roll_on_name(self, builder):
        session = builder.start_session(CharacterType.HERO)
        assert builder.roll_current_step(session) is session

    def test_mentality_sets_will_and_luck(self, make_builder):
        # Zealot mentality 19-20: +1 Will & +1 Luck
        builder = make_builder(1, 20)
        session = hero_at(builder, WizardStep.MENTALITY, background="Zealot")
        session = builder.roll_mentality(session)
        assert (session.bonus_will, session.bonus_luck, session.bonus_xp) == (1, 1, 0)

    def test_xp_accumulates_across_mentality_and_training(self, make_builder):
        # Townsfolk mentality 10 (+1 XP), training 15 (+1 XP)
        builder = make_builder(1, 10, 1, 15)
        session = hero_at(builder, WizardStep.SKILLS)
        assert session.bonus_xp == 2

    def test_possessions_gold(self, make_builder):
        builder = make_builder(1, 1, 8)
        session = hero_at(builder, WizardStep.TRAINING)
        assert session.gold == 2
        assert session.granted_item is None

    def test_skill_quota_enforced(self, make_builder):
        builder = make_builder(1, 1, 1, 1, 55, 99)
        session = hero_at(builder, WizardStep.SKILLS)
        session = builder.roll_skill(session)
        assert session.rolled_skills[0].startswith("Intuition")
        assert builder.roll_skill(session) is session

    def test_mystic_named_skill(self, make_builder):
        # Mystic training 1-5: "Alchemy skill" grants one roll
        builder = make_builder(1, 1, 1, 3)
        session = hero_at(builder, WizardStep.SKILLS, origin="Preen", background="Mystic")
        assert session.skill_quota == 1


class TestEquipment:
    """Test starter-kit selection"""

    def test_toggle_idempotent(self, builder):
        session = hero_at(builder, WizardStep.EQUIPMENT)
        warhammer = builder.catalog_for(session).find("Warhammer")

        toggled = builder.toggle_equipment(session, warhammer)
        assert toggled.has_equipment(warhammer)

        untoggled = builder.toggle_equipment(toggled, warhammer)
        assert untoggled.selected_equipment == session.selected_equipment

    def test_third_quality_weapon_refused(self, builder):
        session = hero_at(builder, WizardStep.EQUIPMENT)
        catalog = builder.catalog_for(session)
        for name in ("Warhammer", "Longbow"):
            session = builder.toggle_equipment(session, catalog.find(name))

        crossbow = catalog.find("Crossbow")
        assert not builder.can_select(session, crossbow)
        assert builder.toggle_equipment(session, crossbow) is session
        assert [item.name for item in session.selected_equipment] == ["Warhammer", "Longbow"]

    def test_limit_frees_after_removal(self, builder):
        session = hero_at(builder, WizardStep.EQUIPMENT)
        catalog = builder.catalog_for(session)
        session = builder.toggle_equipment(session, catalog.find("Light armor"))
        assert not builder.can_select(session, catalog.find("Full armor"))

        session = builder.toggle_equipment(session, catalog.find("Light armor"))
        assert builder.can_select(session, catalog.find("Full armor"))

    def test_follower_caps(self, builder):
        session = builder.advance(builder.start_session(CharacterType.FOLLOWER))
        catalog = builder.catalog_for(session)

        session = builder.toggle_equipment(session, catalog.find("Dagger"))
        assert builder.toggle_equipment(session, catalog.find("Sling")) is session

        session = builder.toggle_equipment(session, catalog.find("Partial armor"))
        assert builder.toggle_equipment(session, catalog.find("Light armor")) is session
        assert len(session.selected_equipment) == 2

    def test_follower_cannot_take_hero_items(self, builder):
        hero_catalog = builder.catalogs["hero"]
        session = builder.advance(builder.start_session(CharacterType.FOLLOWER))
        assert builder.toggle_equipment(session, hero_catalog.find("Warhammer")) is session

    def test_toggle_outside_equipment_step(self, builder):
        session = builder.start_session(CharacterType.FOLLOWER)
        dagger = builder.catalogs["follower"].find("Dagger")
        assert builder.toggle_equipment(session, dagger) is session


class TestCompletion:
    """Test assembling the finished character"""

    def test_complete_before_summary_raises(self, builder):
        session = hero_at(builder, WizardStep.EQUIPMENT)
        with pytest.raises(IncompleteCharacterError):
            builder.complete(session)

    def test_complete_with_missing_rolls_raises(self, builder):
        # Forced to summary without going through advance()
        session = builder.start_session(CharacterType.HERO).evolve(step_index=9)
        assert session.at_summary
        assert WizardStep.ORIGIN in builder.missing_steps(session)
        with pytest.raises(IncompleteCharacterError, match="origin"):
            builder.complete(session)

    def test_background_not_valid_for_origin_blocks_advance(self, builder):
        session = hero_at(builder, WizardStep.BACKGROUND, origin="Feral")
        session = session.evolve(background="Noble")

        assert not builder.can_advance(session)
        assert builder.advance(session) is session

    def test_complete_with_background_not_valid_for_origin_raises(self, builder):
        session = hero_at(builder, WizardStep.SUMMARY)
        session = session.evolve(origin="Feral")

        assert builder.missing_steps(session) == [WizardStep.BACKGROUND]
        with pytest.raises(IncompleteCharacterError, match="background"):
            builder.complete(session)

    def test_townsfolk_hero(self, make_builder):
        """Human Townsfolk rolling 2, 10, 13, 5 and skill 15"""
        builder = make_builder(2, 10, 13, 5, 15)
        session = builder.start_session(CharacterType.HERO)
        session = builder.advance(session, "Mara")
        session = builder.advance(session, "Human")
        session = builder.advance(session, "Townsfolk")

        for step in (WizardStep.CAPABILITIES, WizardStep.MENTALITY, WizardStep.POSSESSIONS, WizardStep.TRAINING):
            assert session.step == step
            session = builder.advance(builder.roll_current_step(session))

        assert session.skill_quota == 1
        session = builder.advance(builder.roll_skill(session))
        assert session.step == WizardStep.EQUIPMENT

        shield = builder.catalog_for(session).find("Shield")
        session = builder.advance(builder.toggle_equipment(session, shield))

        hero = builder.complete(session)

        assert hero.name == "Mara"
        assert hero.origin == "Human"
        assert hero.background == "Townsfolk"
        assert hero.is_hero
        assert hero.stats.agility == 2
        assert hero.stats.speed == "4/+3"
        assert hero.stats.combat_skill == 0
        assert hero.stats.toughness == 3
        assert hero.stats.will == 0
        assert hero.stats.luck == 0
        assert hero.xp == 1
        assert hero.gold == 0
        assert len(hero.skills) == 1
        assert hero.skills[0].startswith("Crafting")
        assert [item.name for item in hero.equipment] == ["Shield", "Quality weapon"]
        assert hero.equipment[-1].category == EquipmentCategory.MELEE
        assert hero.armor_score == 1
        assert not hero.is_mystic

    def test_follower(self, builder):
        session = builder.start_session(CharacterType.FOLLOWER)
        session = builder.advance(session)
        catalog = builder.catalog_for(session)
        session = builder.toggle_equipment(session, catalog.find("Staff"))
        session = builder.toggle_equipment(session, catalog.find("Light armor"))
        session = builder.advance(session)

        follower = builder.complete(session)

        assert follower.name == "Unnamed Follower"
        assert follower.character_type == CharacterType.FOLLOWER
        assert follower.origin == "Human"
        assert follower.background == "Townsfolk"
        assert follower.xp == 0
        assert follower.gold == 0
        assert follower.skills == ()
        assert follower.notes == "Follower - simplified stats"
        assert [item.name for item in follower.equipment] == ["Staff", "Light armor"]
        assert follower.armor_score == 2

    def test_mystic_flag(self, make_builder):
        builder = make_builder(8, 1, 1, 15)
        session = hero_at(builder, WizardStep.SUMMARY, origin="Fey-blood", background="Mystic")
        hero = builder.complete(session)
        assert hero.is_mystic
        assert hero.stats.casting == 1
        assert hero.stats.will == 2
        assert hero.gold == 1

    def test_each_completion_gets_new_id(self, builder):
        session = hero_at(builder, WizardStep.SUMMARY)
        assert builder.complete(session).id != builder.complete(session).id
