"""Point access checks against a Role.

Total functions: they never raise and never check that the queried id exists
in the mapping table, so callers can tell "not found" apart from "not allowed".
"""

from collections.abc import Callable, Iterable
from typing import TypeVar

from hrconnect.access.roles import Role

T = TypeVar("T")


def can_access_store(role: Role, store_id: str) -> bool:
    return role.stores.allows(store_id)


def can_access_am(role: Role, am_id: str) -> bool:
    return role.area_managers.allows(am_id)


def can_access_hr(role: Role, hr_id: str) -> bool:
    return role.hr_personnel.allows(hr_id)


def filter_visible(role: Role, rows: Iterable[T], store_of: Callable[[T], str]) -> list[T]:
    """Keep the rows (e.g. survey submissions) whose store the role can see."""
    return [row for row in rows if can_access_store(role, store_of(row))]
