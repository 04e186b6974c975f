# ABOUTME: Shared pytest fixtures for the warband builder test suite
# ABOUTME: Provides scripted dice, a real-data builder, and a temporary vault

from pathlib import Path
from unittest.mock import Mock

import pytest

from warband_engine.core.character_builder import CharacterBuilder
from warband_engine.core.dice import DiceRoller
from warband_engine.core.warband_vault import WarbandVault
from warband_engine.rules.loader import DataLoader
from warband_engine.utils.logging_config import reset_logging


def scripted_dice(*faces: int) -> Mock:
    """A DiceRoller stand-in whose roll_die returns the given faces in order."""
    dice = Mock(spec=DiceRoller)
    dice.roll_die.side_effect = list(faces)
    return dice


@pytest.fixture(autouse=True)
def clean_logging():
    """Drop any global logging config a test created."""
    yield
    reset_logging()


@pytest.fixture(scope="session")
def data_loader():
    return DataLoader()


@pytest.fixture
def builder(data_loader):
    """Builder over the real game tables with a seeded roller."""
    return CharacterBuilder(data_loader=data_loader, dice_roller=DiceRoller(seed=42))


@pytest.fixture
def make_builder(data_loader):
    """Factory for builders whose dice return a fixed script of faces."""
    def _make(*faces: int) -> CharacterBuilder:
        return CharacterBuilder(data_loader=data_loader, dice_roller=scripted_dice(*faces))
    return _make


@pytest.fixture
def vault_path(tmp_path) -> Path:
    return tmp_path / "warbands.json"


@pytest.fixture
def vault(vault_path):
    return WarbandVault(vault_path=vault_path)
