"""
Mapping table loading for the HR Connect access service.

Provides init_mapping() / close_mapping() for app lifespan and
get_repository() as a FastAPI dependency.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from hrconnect.config import MappingBackend, Settings, settings
from hrconnect.logging_config import get_logger
from hrconnect.mapping.protocol import MappingSource

if TYPE_CHECKING:
    from hrconnect.mapping.repository import MappingRepository

logger = get_logger(__name__)

# Module-level repository and its in-flight initial load
_repository: MappingRepository | None = None
_load_task: asyncio.Task | None = None


def build_source(cfg: Settings) -> MappingSource:
    """Create the configured mapping source."""
    match cfg.mapping.backend:
        case MappingBackend.FILE:
            from hrconnect.mapping.filesystem import FileMappingSource

            return FileMappingSource(cfg.mapping.file.path)

        case MappingBackend.HTTP:
            from hrconnect.mapping.remote import HttpMappingSource

            return HttpMappingSource(
                url=cfg.mapping.http.url,
                timeout_seconds=cfg.mapping.http.timeout_seconds,
                headers=cfg.mapping.http.headers,
            )


def build_repository(cfg: Settings, source: MappingSource | None = None) -> MappingRepository:
    # Deferred: the access package imports mapping.ingester, which runs this module first
    from hrconnect.access.catalog import Directory
    from hrconnect.mapping.repository import MappingRepository

    return MappingRepository(
        source or build_source(cfg),
        Directory(cfg.directory.display_names),
        admin_identity=cfg.access.admin_identity,
        admin_display_name=cfg.access.admin_display_name,
        senior_identities=cfg.access.senior_identities,
        ready_timeout_seconds=cfg.mapping.ready_timeout_seconds,
    )


async def init_mapping(source: MappingSource | None = None) -> MappingRepository:
    """Create the repository and start the initial load in the background.

    Called during app startup (lifespan). Readers await
    ``MappingRepository.wait_ready()``.
    """
    global _repository, _load_task  # noqa: PLW0603
    _repository = build_repository(settings, source)
    _load_task = asyncio.create_task(_repository.load())
    logger.info("Mapping load started", backend=str(settings.mapping.backend))
    return _repository


async def close_mapping() -> None:
    """Cancel a pending load and close the source.

    Called during app shutdown (lifespan).
    """
    global _repository, _load_task  # noqa: PLW0603
    if _load_task is not None:
        if not _load_task.done():
            _load_task.cancel()
            try:
                await _load_task
            except asyncio.CancelledError:
                pass
        elif not _load_task.cancelled() and _load_task.exception() is not None:
            logger.error("Mapping load task failed", error=repr(_load_task.exception()))
    _load_task = None

    if _repository is not None:
        await _repository.close()
        _repository = None
        logger.info("Mapping repository closed")


def get_repository() -> MappingRepository:
    """FastAPI dependency that returns the mapping repository.

    Raises RuntimeError if the repository has not been initialized.
    """
    if _repository is None:
        raise RuntimeError("Mapping repository not initialized, call init_mapping() first")
    return _repository


def get_repository_or_none() -> MappingRepository | None:
    """Return the repository if initialized, otherwise None."""
    return _repository
