"""Cascading HR -> Area Manager -> Store selection.

Each field's options depend on the field above it and on the viewer's Role.
Changing a field never keeps a downstream value that the new options no
longer contain. Singleton option lists are returned as-is; auto-filling them
is the form's decision.
"""

from dataclasses import dataclass, replace

from hrconnect.access.catalog import AreaManager, Catalog, HRPerson, Store
from hrconnect.access.indexer import HierarchyIndex
from hrconnect.access.resolver import can_access_am, can_access_hr, can_access_store
from hrconnect.access.roles import Role
from hrconnect.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CascadeSelection:
    hr_id: str | None = None
    am_id: str | None = None
    store_id: str | None = None


class CascadeResolver:
    def __init__(self, index: HierarchyIndex, catalog: Catalog) -> None:
        self._index = index
        self._catalog = catalog

    def options_for_hr(self, role: Role) -> list[HRPerson]:
        return [hr for hr in self._catalog.hr_personnel if can_access_hr(role, hr.id)]

    def options_for_am(self, hr_id: str | None, role: Role) -> list[AreaManager]:
        """Area managers selectable once ``hr_id`` is chosen.

        A viewer with unrestricted AM visibility gets the whole AM catalog,
        not the chosen HR's subtree. ``hr_id=None`` is only meaningful for
        viewers without HR scoping (plain area managers).
        """
        if role.area_managers.unrestricted:
            return list(self._catalog.area_managers)

        if hr_id is None:
            if not role.hr_personnel.unrestricted:
                return []
            candidates = role.area_managers.ids
        elif not can_access_hr(role, hr_id):
            return []
        else:
            candidates = self._index.ams_under_hr(hr_id)

        return [
            am
            for am in self._catalog.area_managers
            if am.id in candidates and can_access_am(role, am.id)
        ]

    def options_for_store(self, am_id: str | None, role: Role) -> list[Store]:
        if role.stores.unrestricted:
            return list(self._catalog.stores)
        if am_id is None or not can_access_am(role, am_id):
            return []

        candidates = self._index.stores_by_am.get(am_id, frozenset())
        return [
            store
            for store in self._catalog.stores
            if store.id in candidates and can_access_store(role, store.id)
        ]

    def select_hr(self, selection: CascadeSelection, hr_id: str | None, role: Role) -> CascadeSelection:
        if hr_id is None:
            return CascadeSelection()

        am_id = selection.am_id
        if am_id is not None and am_id not in {am.id for am in self.options_for_am(hr_id, role)}:
            am_id = None
        store_id = selection.store_id if am_id is not None else None
        if store_id is not None and store_id not in {s.id for s in self.options_for_store(am_id, role)}:
            store_id = None

        if (am_id, store_id) != (selection.am_id, selection.store_id):
            logger.debug(
                "HR change reset downstream selection",
                hr=hr_id,
                cleared_am=am_id is None and selection.am_id is not None,
                cleared_store=store_id is None and selection.store_id is not None,
            )
        return CascadeSelection(hr_id=hr_id, am_id=am_id, store_id=store_id)

    def select_am(self, selection: CascadeSelection, am_id: str | None, role: Role) -> CascadeSelection:
        if am_id is None:
            return replace(selection, am_id=None, store_id=None)

        # HR-scoped viewers pick an HR first
        if selection.hr_id is None and not role.hr_personnel.unrestricted:
            logger.debug("Area manager selected before HR, ignored", am=am_id, viewer=role.identity_id)
            return replace(selection, am_id=None, store_id=None)

        store_id = selection.store_id
        if store_id is not None and store_id not in {s.id for s in self.options_for_store(am_id, role)}:
            store_id = None
        return replace(selection, am_id=am_id, store_id=store_id)

    def select_store(self, selection: CascadeSelection, store_id: str | None) -> CascadeSelection:
        return replace(selection, store_id=store_id)
