"""Tests for building the Role table."""

from hrconnect.access.catalog import Directory
from hrconnect.access.indexer import HierarchyIndex, build_index
from hrconnect.access.registry import build_role_table
from hrconnect.access.resolver import can_access_am, can_access_store
from hrconnect.access.roles import RoleKind
from hrconnect.mapping.ingester import ingest_records


def _table(rows, **kwargs):
    index = build_index(ingest_records(rows).records)
    return build_role_table(index, Directory(), **kwargs)


class TestAreaManagerRoles:
    def test_am_sees_every_store_it_manages(self, north_rows):
        table = _table(north_rows)
        role = table["A1"]
        assert role.kind == RoleKind.AREA_MANAGER
        assert role.allowed_store_ids == {"S1", "S2"}
        assert role.allowed_am_ids == {"A1"}

    def test_am_scope_matches_records(self, org_rows):
        table = _table(org_rows)
        for role in table.of_kind(RoleKind.AREA_MANAGER):
            expected = {r["storeId"] for r in org_rows if r["areaManagerId"] == role.identity_id}
            assert role.allowed_store_ids == expected
            assert role.allowed_am_ids == {role.identity_id}

    def test_am_region_when_stores_agree(self, org_rows):
        table = _table(org_rows)
        assert table["A1"].region == "North"

    def test_am_hr_dimension_unrestricted(self, north_rows):
        table = _table(north_rows)
        assert table["A1"].hr_personnel.unrestricted


class TestHrbpRoles:
    def test_hrbp_sees_its_rows(self, north_rows):
        table = _table(north_rows)
        role = table["H1"]
        assert role.kind == RoleKind.HRBP
        assert role.allowed_store_ids == {"S1"}
        assert role.allowed_am_ids == {"A1"}
        assert role.allowed_hr_ids == {"H1"}
        assert role.region == "North"


class TestRegionalHrRoles:
    def test_regional_hr_scoped_to_its_rows(self, north_rows):
        rows = [
            *north_rows,
            {"storeId": "S3", "areaManagerId": "A2", "regionalHrId": "G1", "region": "South"},
        ]
        table = _table(rows)
        role = table["G1"]
        assert role.kind == RoleKind.REGIONAL_HR
        assert role.allowed_am_ids == {"A2"}
        assert can_access_am(role, "A1") is False

    def test_regional_hr_includes_subordinate_hrbps(self, org_rows):
        table = _table(org_rows)
        role = table["G1"]
        expected = {r["hrbpId"] for r in org_rows if r.get("regionalHrId") == "G1" and r.get("hrbpId")}
        assert expected <= role.allowed_hr_ids
        assert "G1" in role.allowed_hr_ids
        assert role.allowed_store_ids == {"S3", "S4"}


class TestGlobalRoles:
    def test_lms_head_is_wildcard(self, org_rows):
        table = _table(org_rows)
        role = table["LMS1"]
        assert role.kind == RoleKind.LMS_HEAD
        assert role.allowed_store_ids == frozenset()
        assert role.is_global
        assert can_access_store(role, "anything") is True

    def test_hr_head_is_global(self, org_rows):
        assert _table(org_rows)["HEAD1"].is_global

    def test_admin_always_present(self):
        table = _table([], admin_identity="root", admin_display_name="Root")
        assert list(table) == ["root"]
        assert table["root"].kind == RoleKind.ADMIN
        assert table["root"].display_name == "Root"


class TestSeniorOverride:
    def test_known_identity_widened_keeps_kind(self, north_rows):
        table = _table(north_rows, senior_identities=["H1"])
        role = table["H1"]
        assert role.kind == RoleKind.HRBP
        assert role.is_global
        assert can_access_store(role, "S2")

    def test_unknown_identity_becomes_admin(self, north_rows):
        table = _table(north_rows, senior_identities=["H541"])
        role = table["H541"]
        assert role.kind == RoleKind.ADMIN
        assert role.is_global
        assert role.display_name == "User H541"


class TestRoleTable:
    def test_first_role_wins_for_shared_identity(self):
        rows = [
            {"storeId": "S1", "areaManagerId": "X1"},
            {"storeId": "S2", "areaManagerId": "A2", "hrbpId": "X1"},
        ]
        table = _table(rows)
        assert table["X1"].kind == RoleKind.AREA_MANAGER
        assert table["X1"].allowed_store_ids == {"S1"}

    def test_unknown_identity_absent(self, north_rows):
        assert _table(north_rows).get("NOBODY") is None

    def test_rebuild_is_idempotent(self, org_rows):
        first = _table(org_rows, senior_identities=["H1"])
        second = _table(org_rows, senior_identities=["H1"])
        assert dict(first) == dict(second)

    def test_display_names_from_directory(self, org_index: HierarchyIndex, directory: Directory):
        table = build_role_table(org_index, directory)
        assert table["A1"].display_name == "Asha Menon"
        assert table["A3"].display_name == "User A3"
