"""FastAPI dependencies for viewer identity and access snapshots.

The viewer identity is an opaque id passed as a query parameter by the
routing layer (``userId``, ``id`` or ``user``, first match wins). A request
without one is served as the default admin identity. This is a visibility
convenience, not authentication.
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status

from hrconnect.access.roles import Role
from hrconnect.config import settings
from hrconnect.logging_config import get_logger
from hrconnect.mapping import get_repository
from hrconnect.mapping.repository import AccessSnapshot, MappingRepository

logger = get_logger(__name__)


@dataclass
class Viewer:
    """The requesting identity resolved against the current snapshot."""

    identity_id: str
    role: Role
    snapshot: AccessSnapshot


def resolve_identity(request: Request) -> str:
    for param in settings.access.identity_params:
        value = request.query_params.get(param, "").strip()
        if value:
            return value
    return settings.access.default_identity


async def get_snapshot(
    repository: MappingRepository = Depends(get_repository),
) -> AccessSnapshot:
    return await repository.wait_ready()


async def get_viewer(
    identity_id: str = Depends(resolve_identity),
    snapshot: AccessSnapshot = Depends(get_snapshot),
) -> Viewer:
    role = snapshot.get_role(identity_id)
    if role is None:
        logger.info("Unknown viewer identity", identity=identity_id, degraded=snapshot.degraded)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f'Access denied: user ID "{identity_id}" not found or not authorized',
        )
    return Viewer(identity_id=identity_id, role=role, snapshot=snapshot)
