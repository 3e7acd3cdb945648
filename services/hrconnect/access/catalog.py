"""Selectable entity catalogs and the people directory.

The catalog turns the hierarchy index into the store, area manager and HR
personnel lists the survey and dashboard forms offer, sorted by name.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from hrconnect.access.indexer import HierarchyIndex
from hrconnect.access.roles import RoleKind

UNKNOWN_REGION = "Unknown"


class Directory:
    """Display names for identity ids."""

    def __init__(self, names: Mapping[str, str] | None = None) -> None:
        self._names = MappingProxyType(dict(names or {}))

    def display_name(self, identity_id: str) -> str:
        return self._names.get(identity_id) or f"User {identity_id}"


@dataclass(frozen=True)
class Store:
    id: str
    name: str
    region: str | None = None


@dataclass(frozen=True)
class AreaManager:
    id: str
    name: str
    region: str | None = None


@dataclass(frozen=True)
class HRPerson:
    id: str
    name: str
    kind: RoleKind
    region: str | None = None


def _by_name(items: Iterable) -> tuple:
    return tuple(sorted(items, key=lambda item: (item.name.casefold(), item.id)))


class Catalog:
    def __init__(
        self,
        stores: Iterable[Store],
        area_managers: Iterable[AreaManager] = (),
        hr_personnel: Iterable[HRPerson] = (),
        index: HierarchyIndex | None = None,
    ) -> None:
        self.stores: tuple[Store, ...] = _by_name(stores)
        self.area_managers: tuple[AreaManager, ...] = _by_name(area_managers)
        self.hr_personnel: tuple[HRPerson, ...] = _by_name(hr_personnel)
        self._index = index or HierarchyIndex()
        self._stores_by_id = {store.id: store for store in self.stores}
        self._ams_by_id = {am.id: am for am in self.area_managers}

    @classmethod
    def from_index(cls, index: HierarchyIndex, directory: Directory) -> "Catalog":
        stores = [
            Store(id=store_id, name=index.store_name[store_id], region=index.store_region[store_id])
            for store_id in index.store_am
        ]
        area_managers = [
            AreaManager(id=am_id, name=directory.display_name(am_id), region=index.region_of.get(am_id))
            for am_id in index.area_managers
        ]

        # An id listed under several HR fields keeps its most local kind
        hr_personnel: dict[str, HRPerson] = {}
        for kind, ids in (
            (RoleKind.HRBP, index.hrbps),
            (RoleKind.REGIONAL_HR, index.regional_hrs),
            (RoleKind.HR_HEAD, index.hr_heads),
            (RoleKind.LMS_HEAD, index.lms_heads),
        ):
            for hr_id in ids:
                if hr_id not in hr_personnel:
                    hr_personnel[hr_id] = HRPerson(
                        id=hr_id,
                        name=directory.display_name(hr_id),
                        kind=kind,
                        region=index.region_of.get(hr_id),
                    )
        return cls(stores, area_managers, hr_personnel.values(), index=index)

    def store(self, store_id: str) -> Store | None:
        return self._stores_by_id.get(store_id)

    def area_manager(self, am_id: str) -> AreaManager | None:
        return self._ams_by_id.get(am_id)

    @property
    def regions(self) -> list[str]:
        return sorted({store.region for store in self.stores if store.region})

    def detect_region(
        self,
        store_id: str | None = None,
        am_id: str | None = None,
        hr_id: str | None = None,
    ) -> str:
        """Region to stamp on a submission.

        Tries the store first, then the area manager, then the HR person.
        """
        if store_id:
            store = self.store(store_id)
            if store is not None and store.region:
                return store.region
        if am_id and self._index.region_of.get(am_id):
            return self._index.region_of[am_id]
        if hr_id and self._index.region_of.get(hr_id):
            return self._index.region_of[hr_id]
        return UNKNOWN_REGION
