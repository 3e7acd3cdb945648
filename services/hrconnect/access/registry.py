"""Role registry.

Materializes the Role table from the hierarchy index:

1. the fixed system admin role (global)
2. one area_manager role per AM (its own stores, itself as the only AM)
3. one hrbp role per HRBP (stores and AMs on its rows, itself as HR)
4. one regional_hr role per regional HR (as HRBP, plus subordinate HRBPs)
5. hr_head / lms_head roles (global)

then the senior allow-list override, strictly last, so no per-kind step
can narrow a senior identity again.
"""

from collections.abc import Iterable

from hrconnect.access.catalog import Directory
from hrconnect.access.indexer import HierarchyIndex
from hrconnect.access.roles import Role, RoleKind, RoleTable
from hrconnect.access.scope import Scope
from hrconnect.logging_config import get_logger

logger = get_logger(__name__)


def _emit(roles: dict[str, Role], role: Role) -> None:
    """Add a role unless the identity already has one (first emitted wins)."""
    existing = roles.get(role.identity_id)
    if existing is not None:
        logger.debug(
            "Identity already has a role, keeping the first",
            identity=role.identity_id,
            kept=str(existing.kind),
            skipped=str(role.kind),
        )
        return
    roles[role.identity_id] = role


def _common_region(index: HierarchyIndex, store_ids: Iterable[str]) -> str | None:
    regions = {index.store_region.get(store_id) for store_id in store_ids}
    if len(regions) == 1:
        return regions.pop()
    return None


def apply_senior_override(
    roles: dict[str, Role],
    senior_identities: Iterable[str],
    directory: Directory,
) -> None:
    """Grant global visibility to every senior identity, in place."""
    for identity_id in senior_identities:
        existing = roles.get(identity_id)
        if existing is None:
            roles[identity_id] = Role.global_role(
                identity_id, directory.display_name(identity_id), RoleKind.ADMIN
            )
        elif not existing.is_global:
            roles[identity_id] = existing.with_global_visibility()
            logger.debug("Senior override widened role", identity=identity_id, kind=str(existing.kind))


def build_role_table(
    index: HierarchyIndex,
    directory: Directory,
    *,
    admin_identity: str = "admin001",
    admin_display_name: str = "System Admin",
    senior_identities: Iterable[str] = (),
) -> RoleTable:
    """Build the full Role table from one hierarchy index."""
    roles: dict[str, Role] = {}

    _emit(roles, Role.global_role(admin_identity, admin_display_name, RoleKind.ADMIN))

    for am_id in sorted(index.area_managers):
        store_ids = index.stores_by_am.get(am_id, frozenset())
        _emit(
            roles,
            Role(
                identity_id=am_id,
                display_name=directory.display_name(am_id),
                kind=RoleKind.AREA_MANAGER,
                stores=Scope.only(store_ids),
                area_managers=Scope.only({am_id}),
                # AM rows carry no HR dimension, so HR visibility stays unrestricted
                hr_personnel=Scope.all(),
                region=_common_region(index, store_ids),
            ),
        )

    for hrbp_id in sorted(index.hrbps):
        _emit(
            roles,
            Role(
                identity_id=hrbp_id,
                display_name=directory.display_name(hrbp_id),
                kind=RoleKind.HRBP,
                stores=Scope.only(index.stores_by_hrbp.get(hrbp_id, frozenset())),
                area_managers=Scope.only(index.ams_by_hrbp.get(hrbp_id, frozenset())),
                hr_personnel=Scope.only({hrbp_id}),
                region=index.region_of.get(hrbp_id),
            ),
        )

    for regional_id in sorted(index.regional_hrs):
        subordinates = index.hrbps_by_regional_hr.get(regional_id, frozenset())
        _emit(
            roles,
            Role(
                identity_id=regional_id,
                display_name=directory.display_name(regional_id),
                kind=RoleKind.REGIONAL_HR,
                stores=Scope.only(index.stores_by_regional_hr.get(regional_id, frozenset())),
                area_managers=Scope.only(index.ams_by_regional_hr.get(regional_id, frozenset())),
                hr_personnel=Scope.only({regional_id} | subordinates),
                region=index.region_of.get(regional_id),
            ),
        )

    for kind, ids in ((RoleKind.HR_HEAD, index.hr_heads), (RoleKind.LMS_HEAD, index.lms_heads)):
        for identity_id in sorted(ids):
            _emit(roles, Role.global_role(identity_id, directory.display_name(identity_id), kind))

    apply_senior_override(roles, senior_identities, directory)

    logger.info(
        "Role table built",
        roles=len(roles),
        **{str(kind): sum(1 for r in roles.values() if r.kind == kind) for kind in RoleKind},
    )
    return RoleTable(roles)
