"""Mapping source backed by a local JSON file."""

import json
from pathlib import Path
from typing import Any

import aiofiles

from hrconnect.logging_config import get_logger
from hrconnect.mapping.protocol import MappingSourceError, ensure_rows

logger = get_logger(__name__)


class FileMappingSource:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def fetch(self) -> list[dict[str, Any]]:
        try:
            async with aiofiles.open(self._path, encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            raise MappingSourceError(f"Cannot read mapping file {self._path}: {e}") from e

        try:
            payload = json.loads(content)
        except json.JSONDecodeError as e:
            raise MappingSourceError(f"Mapping file {self._path} is not valid JSON: {e}") from e

        rows = ensure_rows(payload, str(self._path))
        logger.debug("Mapping file read", path=str(self._path), rows=len(rows))
        return rows

    async def close(self) -> None:
        pass
