"""Unit tests for MainMenu"""

from unittest.mock import Mock, patch

import pytest

from warband_engine.core.character import Character, CharacterType
from warband_engine.ui.main_menu import MainMenu


@pytest.fixture
def menu(vault, builder):
    return MainMenu(vault=vault, builder=builder)


@pytest.fixture
def hero():
    return Character(name="Aldric", origin="Human", background="Noble", character_type=CharacterType.HERO)


def select_choice(index):
    """Stand-in for questionary.select that answers with one of the real choices."""
    def select(prompt, choices, **kwargs):
        return Mock(ask=Mock(return_value=choices[index].value))
    return select


class TestMainMenu:
    """Test top-level menu choices"""

    @patch('warband_engine.ui.main_menu.console')
    def test_show_choices(self, mock_console, menu):
        for raw, expected in [("1", "open"), ("2", "new"), ("3", "delete"), ("4", "exit"), ("9", None)]:
            mock_console.input.return_value = raw
            assert menu.show() == expected

    @patch('warband_engine.ui.main_menu.console')
    def test_run_exits(self, mock_console, menu):
        mock_console.input.side_effect = ["4"]
        menu.run()
        assert mock_console.input.call_count == 1

    @patch('warband_engine.ui.main_menu.console')
    def test_run_creates_and_opens_warband(self, mock_console, menu, vault):
        mock_console.input.side_effect = [
            "2", "Grey Company", "3",   # new warband with 3 heroes
            "7",                        # back from roster
            "4",                        # exit
        ]
        menu.run()

        warbands = vault.list_warbands()
        assert [(w.name, w.max_heroes) for w in warbands] == [("Grey Company", 3)]


class TestWarbandManagement:
    """Test warband create/select/delete"""

    @patch('warband_engine.ui.main_menu.console')
    def test_create_default_cap(self, mock_console, menu):
        mock_console.input.side_effect = ["Grey Company", ""]
        warband = menu.create_warband()
        assert warband.max_heroes == 10

    @patch('warband_engine.ui.main_menu.console')
    def test_create_blank_name(self, mock_console, menu, vault):
        mock_console.input.side_effect = [""]
        assert menu.create_warband() is None
        assert vault.list_warbands() == []

    @patch('warband_engine.ui.main_menu.console')
    def test_create_bad_cap(self, mock_console, menu, vault):
        mock_console.input.side_effect = ["Grey Company", "0"]
        assert menu.create_warband() is None
        assert vault.list_warbands() == []

    @patch('warband_engine.ui.main_menu.console')
    def test_select_warband(self, mock_console, menu, vault):
        vault.create_warband("First")
        second = vault.create_warband("Second")
        mock_console.input.return_value = "2"
        assert menu.select_warband().id == second.id

    @patch('warband_engine.ui.main_menu.console')
    def test_select_back(self, mock_console, menu, vault):
        vault.create_warband("First")
        mock_console.input.return_value = "b"
        assert menu.select_warband() is None

    @patch('warband_engine.ui.main_menu.console')
    def test_select_none_stored(self, mock_console, menu):
        assert menu.select_warband() is None
        mock_console.input.assert_not_called()

    @patch('warband_engine.ui.main_menu.console')
    def test_delete_confirmed(self, mock_console, menu, vault):
        vault.create_warband("Doomed")
        mock_console.input.side_effect = ["1", "y"]
        assert menu.delete_warband()
        assert vault.list_warbands() == []

    @patch('warband_engine.ui.main_menu.console')
    def test_delete_declined(self, mock_console, menu, vault):
        vault.create_warband("Spared")
        mock_console.input.side_effect = ["1", "n"]
        assert not menu.delete_warband()
        assert len(vault.list_warbands()) == 1


class TestRosterActions:
    """Test roster management actions"""

    @patch('warband_engine.ui.main_menu.CharacterCreationWizard')
    @patch('warband_engine.ui.main_menu.console')
    def test_add_hero_runs_wizard(self, mock_console, mock_wizard_cls, menu, vault):
        warband = vault.create_warband("Grey Company")
        mock_console.input.side_effect = ["1", "7"]

        menu.manage_warband(warband.id)

        mock_wizard_cls.assert_called_once_with(menu.builder, vault, warband.id, CharacterType.HERO)
        mock_wizard_cls.return_value.run.assert_called_once()

    @patch('warband_engine.ui.main_menu.CharacterCreationWizard')
    @patch('warband_engine.ui.main_menu.console')
    def test_add_follower_runs_wizard(self, mock_console, mock_wizard_cls, menu, vault):
        warband = vault.create_warband("Grey Company")
        mock_console.input.side_effect = ["2", "7"]

        menu.manage_warband(warband.id)

        assert mock_wizard_cls.call_args[0][3] == CharacterType.FOLLOWER

    @patch('warband_engine.ui.main_menu.questionary')
    @patch('warband_engine.ui.main_menu.console')
    def test_remove_character(self, mock_console, mock_questionary, menu, vault, hero):
        warband = vault.create_warband("Grey Company")
        warband = vault.append_character(warband.id, hero)
        mock_questionary.select.return_value.ask.return_value = hero
        mock_console.input.return_value = "y"

        assert menu.remove_character(warband)
        assert vault.get_warband(warband.id).heroes == []

    @patch('warband_engine.ui.main_menu.questionary')
    @patch('warband_engine.ui.main_menu.console')
    def test_remove_cancelled(self, mock_console, mock_questionary, menu, vault, hero):
        warband = vault.append_character(vault.create_warband("Grey Company").id, hero)
        mock_questionary.select.return_value.ask.return_value = None

        assert not menu.remove_character(warband)
        assert len(vault.get_warband(warband.id).heroes) == 1
        mock_console.input.assert_not_called()

    @patch('warband_engine.ui.main_menu.console')
    def test_cancel_choice_in_view(self, mock_console, menu, vault, hero):
        warband = vault.append_character(vault.create_warband("Grey Company").id, hero)

        with patch('warband_engine.ui.main_menu.questionary.select', side_effect=select_choice(-1)):
            menu.view_character(warband)

        mock_console.print.assert_not_called()

    @patch('warband_engine.ui.main_menu.console')
    def test_cancel_choice_in_remove(self, mock_console, menu, vault, hero):
        warband = vault.append_character(vault.create_warband("Grey Company").id, hero)

        with patch('warband_engine.ui.main_menu.questionary.select', side_effect=select_choice(-1)):
            assert not menu.remove_character(warband)

        mock_console.input.assert_not_called()
        assert len(vault.get_warband(warband.id).heroes) == 1

    @patch('warband_engine.ui.main_menu.console')
    def test_character_choice_in_view(self, mock_console, menu, vault, hero):
        warband = vault.append_character(vault.create_warband("Grey Company").id, hero)

        with patch('warband_engine.ui.main_menu.questionary.select', side_effect=select_choice(0)):
            menu.view_character(warband)

        mock_console.print.assert_called_once()

    @patch('warband_engine.ui.main_menu.questionary')
    def test_remove_from_empty_warband(self, mock_questionary, menu, vault):
        warband = vault.create_warband("Empty")
        assert not menu.remove_character(warband)
        mock_questionary.select.assert_not_called()

    @patch('warband_engine.ui.main_menu.console')
    def test_rename(self, mock_console, menu, vault):
        warband = vault.create_warband("Old Name")
        mock_console.input.return_value = "New Name"
        menu.rename_warband(warband)
        assert vault.get_warband(warband.id).name == "New Name"

    @patch('warband_engine.ui.main_menu.console')
    def test_change_max_heroes(self, mock_console, menu, vault):
        warband = vault.create_warband("Grey Company")
        mock_console.input.return_value = "6"
        menu.change_max_heroes(warband)
        assert vault.get_warband(warband.id).max_heroes == 6

    @patch('warband_engine.ui.main_menu.print_error')
    @patch('warband_engine.ui.main_menu.console')
    def test_cap_not_below_hero_count(self, mock_console, mock_error, menu, vault, hero):
        warband = vault.create_warband("Grey Company")
        for i in range(2):
            warband = vault.append_character(warband.id, hero.with_changes(id=f"hero-{i}"))
        mock_console.input.return_value = "1"

        menu.change_max_heroes(warband)

        mock_error.assert_called_once()
        assert vault.get_warband(warband.id).max_heroes == 10
