"""Role, visibility and cascade endpoints for the dashboard and survey forms.

Endpoints:
    GET  /api/v1/me                                 viewer's role
    GET  /api/v1/roles/{identity_id}                any role (global viewers only)
    GET  /api/v1/access/stores/{store_id}           point visibility checks
    GET  /api/v1/access/area-managers/{am_id}
    GET  /api/v1/access/hr-personnel/{hr_id}
    GET  /api/v1/options/hr-personnel               cascade option lists
    GET  /api/v1/options/area-managers?hrId=
    GET  /api/v1/options/stores?amId=
    POST /api/v1/cascade                            apply one field change
    GET  /api/v1/stores?region=                     dashboard store filter
    GET  /api/v1/regions                            dashboard region filter
    GET  /api/v1/regions/detect                     region for a submission
"""

from enum import StrEnum

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from pydantic import BaseModel, ConfigDict, Field

from hrconnect.access.cascade import CascadeSelection
from hrconnect.access.catalog import AreaManager, HRPerson, Store
from hrconnect.access.resolver import can_access_am, can_access_hr, can_access_store
from hrconnect.api.dependencies import Viewer, get_viewer
from hrconnect.config import settings
from hrconnect.logging_config import get_logger

router = APIRouter(prefix=settings.api_prefix, tags=["access"])
logger = get_logger(__name__)


class CascadeField(StrEnum):
    HR = "hr"
    AREA_MANAGER = "am"
    STORE = "store"


class SelectionBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hr_id: str | None = Field(default=None, alias="hrId")
    am_id: str | None = Field(default=None, alias="amId")
    store_id: str | None = Field(default=None, alias="storeId")


class CascadeChange(BaseModel):
    selection: SelectionBody = Field(default_factory=SelectionBody)
    field: CascadeField
    value: str | None = None


def _store_json(store: Store) -> dict:
    return {"id": store.id, "name": store.name, "region": store.region}


def _am_json(am: AreaManager) -> dict:
    return {"id": am.id, "name": am.name, "region": am.region}


def _hr_json(hr: HRPerson) -> dict:
    return {"id": hr.id, "name": hr.name, "kind": str(hr.kind), "region": hr.region}


def _selection_json(selection: CascadeSelection) -> dict:
    return {"hrId": selection.hr_id, "amId": selection.am_id, "storeId": selection.store_id}


@router.get("/me")
async def show_viewer(viewer: Viewer = Depends(get_viewer)) -> dict:
    return {"data": viewer.role.as_wire(), "degraded": viewer.snapshot.degraded}


@router.get("/roles/{identity_id}")
async def show_role(
    identity_id: str = Path(...),
    viewer: Viewer = Depends(get_viewer),
) -> dict:
    if not viewer.role.is_global and identity_id != viewer.identity_id:
        logger.info("Role lookup denied", viewer=viewer.identity_id, target=identity_id)
        raise HTTPException(status_code=403, detail="Only global roles can inspect other roles")

    role = viewer.snapshot.get_role(identity_id)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")
    return {"data": role.as_wire(), "degraded": viewer.snapshot.degraded}


@router.get("/access/stores/{store_id}")
async def check_store(store_id: str = Path(...), viewer: Viewer = Depends(get_viewer)) -> dict:
    return {
        "allowed": can_access_store(viewer.role, store_id),
        "known": viewer.snapshot.catalog.store(store_id) is not None,
    }


@router.get("/access/area-managers/{am_id}")
async def check_area_manager(am_id: str = Path(...), viewer: Viewer = Depends(get_viewer)) -> dict:
    return {
        "allowed": can_access_am(viewer.role, am_id),
        "known": viewer.snapshot.catalog.area_manager(am_id) is not None,
    }


@router.get("/access/hr-personnel/{hr_id}")
async def check_hr(hr_id: str = Path(...), viewer: Viewer = Depends(get_viewer)) -> dict:
    return {
        "allowed": can_access_hr(viewer.role, hr_id),
        "known": any(hr.id == hr_id for hr in viewer.snapshot.catalog.hr_personnel),
    }


@router.get("/options/hr-personnel")
async def hr_options(viewer: Viewer = Depends(get_viewer)) -> dict:
    options = viewer.snapshot.cascade.options_for_hr(viewer.role)
    return {"data": [_hr_json(hr) for hr in options]}


@router.get("/options/area-managers")
async def area_manager_options(
    hr_id: str | None = Query(default=None, alias="hrId"),
    viewer: Viewer = Depends(get_viewer),
) -> dict:
    options = viewer.snapshot.cascade.options_for_am(hr_id, viewer.role)
    return {"data": [_am_json(am) for am in options]}


@router.get("/options/stores")
async def store_options(
    am_id: str | None = Query(default=None, alias="amId"),
    viewer: Viewer = Depends(get_viewer),
) -> dict:
    options = viewer.snapshot.cascade.options_for_store(am_id, viewer.role)
    return {"data": [_store_json(store) for store in options]}


@router.post("/cascade")
async def apply_cascade_change(change: CascadeChange, viewer: Viewer = Depends(get_viewer)) -> dict:
    """Apply one field change and return the reconciled selection with fresh options."""
    cascade = viewer.snapshot.cascade
    role = viewer.role
    current = CascadeSelection(
        hr_id=change.selection.hr_id,
        am_id=change.selection.am_id,
        store_id=change.selection.store_id,
    )

    match change.field:
        case CascadeField.HR:
            selection = cascade.select_hr(current, change.value, role)
        case CascadeField.AREA_MANAGER:
            selection = cascade.select_am(current, change.value, role)
        case CascadeField.STORE:
            selection = cascade.select_store(current, change.value)

    return {
        "selection": _selection_json(selection),
        "options": {
            "areaManagers": [_am_json(am) for am in cascade.options_for_am(selection.hr_id, role)],
            "stores": [_store_json(s) for s in cascade.options_for_store(selection.am_id, role)],
        },
    }


@router.get("/stores")
async def list_stores(
    region: str | None = Query(default=None),
    viewer: Viewer = Depends(get_viewer),
) -> dict:
    stores = [
        store
        for store in viewer.snapshot.catalog.stores
        if can_access_store(viewer.role, store.id) and (region is None or store.region == region)
    ]
    return {"data": [_store_json(store) for store in stores]}


@router.get("/regions")
async def list_regions(viewer: Viewer = Depends(get_viewer)) -> dict:
    if viewer.role.region:
        return {"data": [viewer.role.region]}
    return {"data": viewer.snapshot.catalog.regions}


@router.get("/regions/detect")
async def detect_region(
    store_id: str | None = Query(default=None, alias="storeId"),
    am_id: str | None = Query(default=None, alias="amId"),
    hr_id: str | None = Query(default=None, alias="hrId"),
    viewer: Viewer = Depends(get_viewer),
) -> dict:
    region = viewer.snapshot.catalog.detect_region(store_id=store_id, am_id=am_id, hr_id=hr_id)
    return {"region": region}
