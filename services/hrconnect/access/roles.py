"""Role types.

A Role is the visibility an identity has over stores, area managers and HR
personnel. Roles are immutable; a rebuilt table replaces the old one.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from enum import StrEnum
from types import MappingProxyType

from hrconnect.access.scope import Scope


class RoleKind(StrEnum):
    ADMIN = "admin"
    AREA_MANAGER = "area_manager"
    HRBP = "hrbp"
    REGIONAL_HR = "regional_hr"
    HR_HEAD = "hr_head"
    LMS_HEAD = "lms_head"


# Kinds that always see everything
GLOBAL_KINDS: frozenset[RoleKind] = frozenset(
    {RoleKind.ADMIN, RoleKind.HR_HEAD, RoleKind.LMS_HEAD}
)


@dataclass(frozen=True)
class Role:
    identity_id: str
    display_name: str
    kind: RoleKind
    stores: Scope
    area_managers: Scope
    hr_personnel: Scope
    region: str | None = None

    @classmethod
    def global_role(cls, identity_id: str, display_name: str, kind: RoleKind) -> "Role":
        return cls(
            identity_id=identity_id,
            display_name=display_name,
            kind=kind,
            stores=Scope.all(),
            area_managers=Scope.all(),
            hr_personnel=Scope.all(),
        )

    # Empty-means-everything views, for callers that still expect plain id sets

    @property
    def allowed_store_ids(self) -> frozenset[str]:
        return self.stores.ids

    @property
    def allowed_am_ids(self) -> frozenset[str]:
        return self.area_managers.ids

    @property
    def allowed_hr_ids(self) -> frozenset[str]:
        return self.hr_personnel.ids

    @property
    def is_global(self) -> bool:
        return (
            self.stores.unrestricted
            and self.area_managers.unrestricted
            and self.hr_personnel.unrestricted
        )

    def with_global_visibility(self) -> "Role":
        return replace(
            self,
            stores=Scope.all(),
            area_managers=Scope.all(),
            hr_personnel=Scope.all(),
        )

    def as_wire(self) -> dict:
        return {
            "identityId": self.identity_id,
            "displayName": self.display_name,
            "kind": str(self.kind),
            "region": self.region,
            "global": self.is_global,
            "stores": self.stores.as_wire(),
            "areaManagers": self.area_managers.as_wire(),
            "hrPersonnel": self.hr_personnel.as_wire(),
        }


class RoleTable(Mapping[str, Role]):
    """Read-only identity -> Role lookup, in emission order."""

    def __init__(self, roles: Mapping[str, Role]) -> None:
        self._roles = MappingProxyType(dict(roles))

    def __getitem__(self, identity_id: str) -> Role:
        return self._roles[identity_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._roles)

    def __len__(self) -> int:
        return len(self._roles)

    def of_kind(self, kind: RoleKind) -> list[Role]:
        return [role for role in self._roles.values() if role.kind == kind]
