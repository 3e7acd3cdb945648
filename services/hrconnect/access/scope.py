"""Visibility scopes.

A role sees a dimension (stores, area managers, HR personnel) either in full
or restricted to a set of ids. The two cases are tagged explicitly so that
"sees everything" can never be mistaken for "sees an empty set".
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class Scope:
    unrestricted: bool
    ids: frozenset[str] = frozenset()

    @classmethod
    def all(cls) -> "Scope":
        return _ALL

    @classmethod
    def only(cls, ids: Iterable[str]) -> "Scope":
        return cls(unrestricted=False, ids=frozenset(ids))

    def allows(self, entity_id: str) -> bool:
        return self.unrestricted or entity_id in self.ids

    def as_wire(self) -> dict:
        """Serialize for API responses; ids are sorted for stable output."""
        if self.unrestricted:
            return {"kind": "all", "ids": []}
        return {"kind": "restricted", "ids": sorted(self.ids)}


_ALL = Scope(unrestricted=True)
