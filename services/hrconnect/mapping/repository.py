"""Mapping repository.

Owns the one-shot load of the mapping table and the immutable access
snapshot built from it. Readers await a single readiness barrier instead of
polling; a rebuild swaps the whole snapshot reference, so a reader sees
either the old snapshot or the new one.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from hrconnect.access.cascade import CascadeResolver
from hrconnect.access.catalog import Catalog, Directory
from hrconnect.access.fallback import fallback_catalog, fallback_index, fallback_role_table
from hrconnect.access.indexer import HierarchyIndex, build_index
from hrconnect.access.registry import build_role_table
from hrconnect.access.roles import Role, RoleTable
from hrconnect.logging_config import get_logger
from hrconnect.mapping.ingester import IngestDiagnostic, ingest_records
from hrconnect.mapping.protocol import MappingSource, MappingSourceError

logger = get_logger(__name__)


class LoadState(StrEnum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class AccessSnapshot:
    """Everything derived from one load of the mapping table."""

    roles: RoleTable
    index: HierarchyIndex
    catalog: Catalog
    cascade: CascadeResolver
    diagnostics: tuple[IngestDiagnostic, ...] = field(default_factory=tuple)
    degraded: bool = False

    def get_role(self, identity_id: str) -> Role | None:
        return self.roles.get(identity_id)


class MappingRepository:
    def __init__(
        self,
        source: MappingSource,
        directory: Directory | None = None,
        *,
        admin_identity: str = "admin001",
        admin_display_name: str = "System Admin",
        senior_identities: Iterable[str] = (),
        ready_timeout_seconds: float = 5.0,
    ) -> None:
        self._source = source
        self._directory = directory or Directory()
        self._admin_identity = admin_identity
        self._admin_display_name = admin_display_name
        self._senior_identities = tuple(senior_identities)
        self._ready_timeout_seconds = ready_timeout_seconds

        self._state = LoadState.LOADING
        self._snapshot: AccessSnapshot | None = None
        self._fallback: AccessSnapshot | None = None
        self._ready = asyncio.Event()

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def snapshot(self) -> AccessSnapshot | None:
        """The current snapshot, or None while the first load is in flight."""
        return self._snapshot

    def rebuild(self, raw_rows: Iterable[Any]) -> AccessSnapshot:
        """Full rebuild from raw rows; replaces the current snapshot."""
        result = ingest_records(raw_rows)
        index = build_index(result.records)
        catalog = Catalog.from_index(index, self._directory)
        roles = build_role_table(
            index,
            self._directory,
            admin_identity=self._admin_identity,
            admin_display_name=self._admin_display_name,
            senior_identities=self._senior_identities,
        )
        snapshot = AccessSnapshot(
            roles=roles,
            index=index,
            catalog=catalog,
            cascade=CascadeResolver(index, catalog),
            diagnostics=result.diagnostics,
        )
        self._snapshot = snapshot
        self._state = LoadState.READY
        self._ready.set()
        return snapshot

    def fallback_snapshot(self) -> AccessSnapshot:
        """Degraded snapshot with the hardcoded offline roles."""
        if self._fallback is None:
            index = fallback_index()
            catalog = fallback_catalog(self._directory, index)
            self._fallback = AccessSnapshot(
                roles=fallback_role_table(
                    self._directory,
                    admin_identity=self._admin_identity,
                    admin_display_name=self._admin_display_name,
                    senior_identities=self._senior_identities,
                ),
                index=index,
                catalog=catalog,
                cascade=CascadeResolver(index, catalog),
                degraded=True,
            )
        return self._fallback

    def _fail(self) -> AccessSnapshot:
        self._snapshot = self.fallback_snapshot()
        self._state = LoadState.FAILED
        self._ready.set()
        return self._snapshot

    async def load(self) -> AccessSnapshot:
        """Fetch the mapping table once and build the snapshot.

        A source failure is not fatal: the repository switches to the
        degraded fallback snapshot and reports state ``failed``. Any other
        error does the same, then propagates.
        """
        try:
            raw_rows = await self._source.fetch()
            snapshot = self.rebuild(raw_rows)
        except MappingSourceError as e:
            logger.error("Mapping load failed, using fallback roles", error=str(e))
            return self._fail()
        except Exception:
            logger.exception("Mapping load crashed, using fallback roles")
            self._fail()
            raise
        except BaseException:
            # Cancelled: release waiters, they fall back on their own
            self._ready.set()
            raise

        logger.info(
            "Mapping loaded",
            roles=len(snapshot.roles),
            stores=len(snapshot.catalog.stores),
            dropped=sum(1 for d in snapshot.diagnostics if d.dropped),
        )
        return snapshot

    async def wait_ready(self, timeout: float | None = None) -> AccessSnapshot:
        """Await the initial load, bounded by ``timeout`` seconds.

        Returns the degraded fallback snapshot if the load does not finish
        in time.
        """
        if timeout is None:
            timeout = self._ready_timeout_seconds
        try:
            await asyncio.wait_for(self._ready.wait(), timeout)
        except TimeoutError:
            logger.warning("Mapping not ready, serving fallback roles", timeout=timeout)
            return self.fallback_snapshot()
        return self._snapshot or self.fallback_snapshot()

    async def close(self) -> None:
        await self._source.close()
