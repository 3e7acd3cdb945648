"""Hardcoded roles and stores for degraded (offline) mode.

Used when the mapping table cannot be loaded, so a local instance still has
an admin, one area manager and one HRBP to exercise the dashboards with.
The mapped stores are kept as mapping rows and go through the normal index,
so the cascade works offline; the roles themselves stay hardcoded.
"""

from hrconnect.access.catalog import Catalog, Directory, Store
from hrconnect.access.indexer import HierarchyIndex, build_index
from hrconnect.access.registry import apply_senior_override
from hrconnect.access.roles import Role, RoleKind, RoleTable
from hrconnect.access.scope import Scope
from hrconnect.mapping.ingester import ingest_records

FALLBACK_AM_ID = "H1766"
FALLBACK_HRBP_ID = "H3578"

FALLBACK_STORES: tuple[Store, ...] = (
    Store(id="S027", name="Defence Colony", region="North"),
    Store(id="S037", name="Khan Market", region="North"),
    Store(id="S049", name="Connaught Place", region="North"),
    Store(id="S055", name="Kalkaji", region="North"),
    Store(id="S039", name="Sector 07", region="North"),
    Store(id="S042", name="Sector 35", region="North"),
    Store(id="S062", name="Panchkula", region="North"),
    Store(id="S122", name="Jubilee Walk Mohali", region="North"),
    Store(id="S024", name="Deer Park", region="North"),
    Store(id="S035", name="GK 1", region="North"),
    Store(id="S072", name="Kailash Colony", region="North"),
    Store(id="S028", name="Saket", region="North"),
    Store(id="S038", name="Vatika Business Park", region="North"),
    Store(id="S073", name="Golf Course", region="North"),
    Store(id="S113", name="Hauz Khas", region="North"),
    Store(id="S120", name="Janakpuri", region="North"),
    Store(id="S142", name="Green Park", region="North"),
    Store(id="S141", name="Paschim Vihar", region="North"),
)

_STORE_NAMES = {store.id: store.name for store in FALLBACK_STORES}

# Store -> AM links for the stores the fallback roles can see; all under HRBP H3578
FALLBACK_ROWS: tuple[dict[str, str], ...] = tuple(
    {
        "storeId": store_id,
        "storeName": _STORE_NAMES[store_id],
        "region": "North",
        "areaManagerId": am_id,
        "hrbpId": FALLBACK_HRBP_ID,
    }
    for store_id, am_id in (
        ("S027", FALLBACK_AM_ID),
        ("S037", FALLBACK_AM_ID),
        ("S049", FALLBACK_AM_ID),
        ("S055", FALLBACK_AM_ID),
        ("S039", "H2396"),
        ("S042", "H2396"),
    )
)


def fallback_role_table(
    directory: Directory,
    *,
    admin_identity: str = "admin001",
    admin_display_name: str = "System Admin",
    senior_identities: tuple[str, ...] | list[str] = (),
) -> RoleTable:
    roles: dict[str, Role] = {
        admin_identity: Role.global_role(admin_identity, admin_display_name, RoleKind.ADMIN),
        FALLBACK_AM_ID: Role(
            identity_id=FALLBACK_AM_ID,
            display_name=directory.display_name(FALLBACK_AM_ID),
            kind=RoleKind.AREA_MANAGER,
            stores=Scope.only({"S027", "S037", "S049", "S055"}),
            area_managers=Scope.only({FALLBACK_AM_ID}),
            hr_personnel=Scope.only({FALLBACK_HRBP_ID}),
            region="North",
        ),
        FALLBACK_HRBP_ID: Role(
            identity_id=FALLBACK_HRBP_ID,
            display_name=directory.display_name(FALLBACK_HRBP_ID),
            kind=RoleKind.HRBP,
            stores=Scope.only({"S027", "S037", "S049", "S055", "S039", "S042"}),
            area_managers=Scope.only({FALLBACK_AM_ID, "H2396"}),
            hr_personnel=Scope.only({FALLBACK_HRBP_ID}),
            region="North",
        ),
    }
    apply_senior_override(roles, senior_identities, directory)
    return RoleTable(roles)


def fallback_index() -> HierarchyIndex:
    return build_index(ingest_records(FALLBACK_ROWS).records)


def fallback_catalog(
    directory: Directory | None = None,
    index: HierarchyIndex | None = None,
) -> Catalog:
    """Every fallback store, with the people from the fallback rows."""
    if index is None:
        index = fallback_index()
    people = Catalog.from_index(index, directory or Directory())
    return Catalog(FALLBACK_STORES, people.area_managers, people.hr_personnel, index=index)
