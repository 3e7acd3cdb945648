"""
Mapping source protocol.

A mapping source delivers the raw mapping table (a JSON array of row
objects) in one shot. Backends satisfy the protocol structurally.
"""

from typing import Any, Protocol, runtime_checkable


class MappingSourceError(Exception):
    """Raised when the mapping table cannot be fetched or decoded."""


@runtime_checkable
class MappingSource(Protocol):
    async def fetch(self) -> list[dict[str, Any]]:
        """Fetch every raw mapping row.

        Raises:
            MappingSourceError: If the source is unreachable or the payload
                is not a JSON array.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the source."""
        ...


def ensure_rows(payload: Any, origin: str) -> list[dict[str, Any]]:
    """Check that a decoded payload is a list of rows."""
    if not isinstance(payload, list):
        raise MappingSourceError(
            f"Mapping payload from {origin} is {type(payload).__name__}, expected a JSON array"
        )
    return payload
