"""
Unit tests for DataLoader.

Tests cover:
- Loading origins, backgrounds, skills and equipment from package data
- Loading from an alternate data directory
- Rejecting malformed tables
"""

import json
import shutil
from pathlib import Path

import pytest

from warband_engine.rules.loader import DataLoader
from warband_engine.rules.result_parser import MentalityDelta


@pytest.fixture
def data_copy(tmp_path):
    """A writable copy of the packaged game data."""
    source = Path(DataLoader().data_path)
    target = tmp_path / "borderlands"
    shutil.copytree(source, target)
    return target


def rewrite(path: Path, mutate) -> None:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    mutate(data)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f)


class TestDataLoader:
    """Test loading the packaged game data"""

    def test_origins(self, data_loader):
        assert data_loader.load_origins() == [
            "Human", "Fey-blood", "Dusklings", "Feral", "Halflings", "Preen"
        ]

    def test_baseline_origin(self, data_loader):
        assert data_loader.load_baseline_origin() == "Human"

    def test_backgrounds(self, data_loader):
        backgrounds = data_loader.load_backgrounds()
        assert set(backgrounds) == {"Townsfolk", "Zealot", "Frontier", "Mystic", "Noble"}
        zealot = backgrounds["Zealot"]
        assert zealot.valid_origins == ("Human",)
        assert zealot.mentality[-1].value == "+1 Will & +1 Luck"
        assert zealot.mentality[-1].delta == MentalityDelta(will=1, luck=1)

    def test_skill_table(self, data_loader):
        table = data_loader.load_skill_table()
        assert len(table) == 10
        assert table[0].min == 1
        assert table[-1].max == 100

    def test_equipment_catalogs(self, data_loader):
        catalogs = data_loader.load_equipment_catalogs()
        assert set(catalogs) == {"hero", "follower"}


class TestAlternateData:
    """Test loading from a different directory"""

    def test_custom_path(self, data_copy):
        rewrite(data_copy / "origins.json", lambda d: d["origins"].append("Giant"))
        loader = DataLoader(data_path=data_copy)
        assert loader.load_origins()[-1] == "Giant"

    def test_table_gap_rejected(self, data_copy):
        def break_table(data):
            data["backgrounds"][0]["capabilities"][0]["max"] = 2

        rewrite(data_copy / "backgrounds.json", break_table)
        with pytest.raises(ValueError, match="Townsfolk capabilities"):
            DataLoader(data_path=data_copy).load_backgrounds()

    def test_skill_overlap_rejected(self, data_copy):
        rewrite(data_copy / "skills.json", lambda d: d["skills"][1].update({"min": 10}))
        with pytest.raises(ValueError, match="overlaps"):
            DataLoader(data_path=data_copy).load_skill_table()

    def test_missing_limit(self, data_copy):
        rewrite(data_copy / "equipment.json", lambda d: d["limits"]["hero"].pop("shields"))
        with pytest.raises(KeyError):
            DataLoader(data_path=data_copy).load_equipment_catalogs()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DataLoader(data_path=tmp_path).load_origins()
