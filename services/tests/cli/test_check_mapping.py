"""Tests for the mapping check command."""

import json
from pathlib import Path

from hrconnect.cli.check_mapping import check


class TestCheckMapping:
    async def test_clean_mapping(self, tmp_path: Path, org_rows):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps(org_rows))
        assert await check(str(path)) == 0

    async def test_dropped_rows(self, tmp_path: Path, org_rows):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps([*org_rows, {"storeId": "S9"}]))
        assert await check(str(path)) == 2

    async def test_unreadable_mapping(self, tmp_path: Path):
        assert await check(str(tmp_path / "missing.json")) == 1

    async def test_not_an_array(self, tmp_path: Path):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps({"rows": []}))
        assert await check(str(path)) == 1

    async def test_invalid_optional_field_warns(self, tmp_path: Path, org_rows):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps([*org_rows, {"storeId": "S9", "areaManagerId": "A1", "hrbpId": True}]))
        assert await check(str(path)) == 2
