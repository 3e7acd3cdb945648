"""Tests for the HR -> Area Manager -> Store cascade."""

import pytest

from hrconnect.access.cascade import CascadeResolver, CascadeSelection
from hrconnect.access.catalog import Catalog, Directory
from hrconnect.access.indexer import HierarchyIndex
from hrconnect.access.registry import build_role_table
from hrconnect.access.resolver import can_access_store
from hrconnect.access.roles import RoleTable


@pytest.fixture
def roles(org_index: HierarchyIndex, directory: Directory) -> RoleTable:
    return build_role_table(org_index, directory)


@pytest.fixture
def cascade(org_index: HierarchyIndex, directory: Directory) -> CascadeResolver:
    return CascadeResolver(org_index, Catalog.from_index(org_index, directory))


def _ids(options) -> list[str]:
    return [option.id for option in options]


class TestOptions:
    def test_hrbp_sees_only_its_area_manager(self, cascade, roles):
        assert _ids(cascade.options_for_am("H1", roles["H1"])) == ["A1"]

    def test_hrbp_cannot_pick_other_hr(self, cascade, roles):
        assert cascade.options_for_am("G1", roles["H1"]) == []

    def test_regional_hr_sees_subordinate_hrbp_subtree(self, cascade, roles):
        assert _ids(cascade.options_for_am("H3", roles["G1"])) == ["A3"]
        assert _ids(cascade.options_for_am("G1", roles["G1"])) == ["A2", "A3"]

    def test_regional_hr_hr_options(self, cascade, roles):
        assert _ids(cascade.options_for_hr(roles["G1"])) == ["G1", "H3"]

    def test_global_viewer_sees_full_catalog(self, cascade, roles):
        head = roles["HEAD1"]
        assert _ids(cascade.options_for_am("H1", head)) == ["A1", "A2", "A3"]
        assert len(cascade.options_for_store(None, head)) == 4

    def test_area_manager_without_hr(self, cascade, roles):
        assert _ids(cascade.options_for_am(None, roles["A1"])) == ["A1"]

    def test_hr_required_for_scoped_viewer(self, cascade, roles):
        assert cascade.options_for_am(None, roles["H1"]) == []

    def test_area_manager_outside_hr_subtree(self, cascade, roles):
        assert cascade.options_for_am("G1", roles["A1"]) == []

    def test_store_options_follow_area_manager(self, cascade, roles):
        assert _ids(cascade.options_for_store("A1", roles["A1"])) == ["S1", "S2"]
        assert _ids(cascade.options_for_store("A1", roles["H1"])) == ["S1"]
        assert cascade.options_for_store("A2", roles["A1"]) == []
        assert cascade.options_for_store(None, roles["A1"]) == []

    def test_every_offered_store_is_accessible(self, cascade, roles):
        for role in roles.values():
            for hr in cascade.options_for_hr(role):
                for am in cascade.options_for_am(hr.id, role):
                    for store in cascade.options_for_store(am.id, role):
                        assert can_access_store(role, store.id), (role.identity_id, store.id)


class TestSelection:
    def test_changing_hr_clears_unreachable_area_manager(self, cascade, roles):
        selection = CascadeSelection(hr_id="G1", am_id="A2", store_id="S3")
        updated = cascade.select_hr(selection, "H3", roles["G1"])
        assert updated == CascadeSelection(hr_id="H3")

    def test_changing_hr_keeps_reachable_selection(self, cascade, roles):
        selection = CascadeSelection(hr_id="G1", am_id="A3", store_id="S4")
        updated = cascade.select_hr(selection, "H3", roles["G1"])
        assert updated == CascadeSelection(hr_id="H3", am_id="A3", store_id="S4")

    def test_clearing_hr_clears_everything(self, cascade, roles):
        selection = CascadeSelection(hr_id="H1", am_id="A1", store_id="S1")
        assert cascade.select_hr(selection, None, roles["H1"]) == CascadeSelection()

    def test_unknown_area_manager_clears_store(self, cascade, roles):
        selection = CascadeSelection(hr_id="H1", am_id="A1", store_id="S1")
        updated = cascade.select_am(selection, "A404", roles["H1"])
        assert updated.am_id == "A404"
        assert updated.store_id is None

    def test_changing_area_manager_keeps_valid_store(self, cascade, roles):
        head = roles["HEAD1"]
        selection = CascadeSelection(hr_id="H1", am_id="A1", store_id="S2")
        assert cascade.select_am(selection, "A1", head).store_id == "S2"

    def test_clearing_area_manager_clears_store(self, cascade, roles):
        selection = CascadeSelection(hr_id="H1", am_id="A1", store_id="S1")
        assert cascade.select_am(selection, None, roles["H1"]) == CascadeSelection(hr_id="H1")

    def test_select_store(self, cascade):
        selection = CascadeSelection(hr_id="H1", am_id="A1")
        assert cascade.select_store(selection, "S1").store_id == "S1"

    def test_area_manager_requires_hr_for_scoped_viewer(self, cascade, roles):
        selected = cascade.select_am(CascadeSelection(), "A1", roles["H1"])
        assert selected == CascadeSelection()

    def test_area_manager_without_hr_for_unscoped_viewer(self, cascade, roles):
        selected = cascade.select_am(CascadeSelection(), "A1", roles["A1"])
        assert selected.am_id == "A1"
