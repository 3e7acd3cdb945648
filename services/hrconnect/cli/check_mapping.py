"""
Validate a mapping table and summarize the roles it produces.

Run via: python -m hrconnect.cli.check_mapping [PATH]

With PATH, reads that JSON file; otherwise uses the configured mapping
source (HRCONNECT_MAPPING__BACKEND etc.).

Exit codes:
  0 - loaded, no rows dropped
  1 - mapping could not be loaded
  2 - loaded, but some rows were dropped or had invalid fields
"""

import asyncio
import sys

from hrconnect.access.roles import RoleKind
from hrconnect.config import settings
from hrconnect.logging_config import configure_logging, get_logger
from hrconnect.mapping import build_repository
from hrconnect.mapping.filesystem import FileMappingSource
from hrconnect.mapping.protocol import MappingSourceError

logger = get_logger("hrconnect.check_mapping")


async def check(path: str | None = None) -> int:
    source = FileMappingSource(path) if path else None
    try:
        repository = build_repository(settings, source)
    except MappingSourceError as e:
        logger.error("Mapping source misconfigured", error=str(e))
        return 1

    try:
        await repository.load()
    finally:
        await repository.close()

    snapshot = repository.snapshot
    if snapshot is None or snapshot.degraded:
        logger.error("Mapping could not be loaded", backend=str(settings.mapping.backend), path=path)
        return 1

    for diagnostic in snapshot.diagnostics:
        logger.warning(
            "Dropped row" if diagnostic.dropped else "Discarded invalid fields",
            row=diagnostic.row_index,
            store_id=diagnostic.store_id,
            reason=diagnostic.reason,
        )

    logger.info(
        "Mapping OK",
        stores=len(snapshot.catalog.stores),
        regions=snapshot.catalog.regions,
        dropped=sum(1 for d in snapshot.diagnostics if d.dropped),
        warnings=len(snapshot.diagnostics),
        **{str(kind): len(snapshot.roles.of_kind(kind)) for kind in RoleKind},
    )
    return 2 if snapshot.diagnostics else 0


def main() -> None:
    configure_logging(json_logs=False, log_level=settings.log_level)
    path = sys.argv[1] if len(sys.argv) > 1 else None
    sys.exit(asyncio.run(check(path)))


if __name__ == "__main__":
    main()
