"""Inverse indices over the mapping table.

One linear pass over the ingested records. The hierarchy below regional HR
is only AM -> HRBP -> regional HR, and every link is carried on the store
row itself, so set-union per row captures it without any graph traversal.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field

from hrconnect.logging_config import get_logger
from hrconnect.mapping.ingester import MappingRecord

logger = get_logger(__name__)


@dataclass(frozen=True)
class HierarchyIndex:
    """Read-only lookups built from one load of the mapping table."""

    store_am: dict[str, str] = field(default_factory=dict)
    store_name: dict[str, str] = field(default_factory=dict)
    store_region: dict[str, str | None] = field(default_factory=dict)

    stores_by_am: dict[str, frozenset[str]] = field(default_factory=dict)
    stores_by_hrbp: dict[str, frozenset[str]] = field(default_factory=dict)
    ams_by_hrbp: dict[str, frozenset[str]] = field(default_factory=dict)
    stores_by_regional_hr: dict[str, frozenset[str]] = field(default_factory=dict)
    ams_by_regional_hr: dict[str, frozenset[str]] = field(default_factory=dict)
    hrbps_by_regional_hr: dict[str, frozenset[str]] = field(default_factory=dict)

    # Last write wins when rows disagree
    region_of: dict[str, str] = field(default_factory=dict)

    area_managers: frozenset[str] = frozenset()
    hrbps: frozenset[str] = frozenset()
    regional_hrs: frozenset[str] = frozenset()
    hr_heads: frozenset[str] = frozenset()
    lms_heads: frozenset[str] = frozenset()

    @property
    def store_ids(self) -> frozenset[str]:
        return frozenset(self.store_am)

    def is_org_wide_hr(self, identity_id: str) -> bool:
        return identity_id in self.hr_heads or identity_id in self.lms_heads

    def ams_under_hr(self, hr_id: str) -> frozenset[str]:
        """Area managers reachable from an HR identity.

        HR and LMS heads are organization-wide and reach every AM.
        """
        if self.is_org_wide_hr(hr_id):
            return self.area_managers
        return self.ams_by_hrbp.get(hr_id, frozenset()) | self.ams_by_regional_hr.get(
            hr_id, frozenset()
        )


def _freeze(index: dict[str, set[str]]) -> dict[str, frozenset[str]]:
    return {key: frozenset(values) for key, values in index.items()}


def build_index(records: Iterable[MappingRecord]) -> HierarchyIndex:
    """Build every inverse index in a single pass over the records."""
    store_am: dict[str, str] = {}
    store_name: dict[str, str] = {}
    store_region: dict[str, str | None] = {}
    stores_by_am: dict[str, set[str]] = defaultdict(set)
    stores_by_hrbp: dict[str, set[str]] = defaultdict(set)
    ams_by_hrbp: dict[str, set[str]] = defaultdict(set)
    stores_by_regional_hr: dict[str, set[str]] = defaultdict(set)
    ams_by_regional_hr: dict[str, set[str]] = defaultdict(set)
    hrbps_by_regional_hr: dict[str, set[str]] = defaultdict(set)
    region_of: dict[str, str] = {}
    hr_heads: set[str] = set()
    lms_heads: set[str] = set()

    count = 0
    for record in records:
        count += 1
        store_id = record.store_id
        am_id = record.area_manager_id

        store_am[store_id] = am_id
        store_name.setdefault(store_id, record.store_name)
        store_region.setdefault(store_id, record.region)
        stores_by_am[am_id].add(store_id)

        if record.hrbp_id is not None:
            stores_by_hrbp[record.hrbp_id].add(store_id)
            ams_by_hrbp[record.hrbp_id].add(am_id)

        if record.regional_hr_id is not None:
            stores_by_regional_hr[record.regional_hr_id].add(store_id)
            ams_by_regional_hr[record.regional_hr_id].add(am_id)
            if record.hrbp_id is not None:
                hrbps_by_regional_hr[record.regional_hr_id].add(record.hrbp_id)

        if record.hr_head_id is not None:
            hr_heads.add(record.hr_head_id)
        if record.lms_head_id is not None:
            lms_heads.add(record.lms_head_id)

        if record.region:
            for identity_id in (
                am_id,
                record.hrbp_id,
                record.regional_hr_id,
                record.hr_head_id,
                record.lms_head_id,
            ):
                if identity_id is not None:
                    region_of[identity_id] = record.region

    index = HierarchyIndex(
        store_am=store_am,
        store_name=store_name,
        store_region=store_region,
        stores_by_am=_freeze(stores_by_am),
        stores_by_hrbp=_freeze(stores_by_hrbp),
        ams_by_hrbp=_freeze(ams_by_hrbp),
        stores_by_regional_hr=_freeze(stores_by_regional_hr),
        ams_by_regional_hr=_freeze(ams_by_regional_hr),
        hrbps_by_regional_hr=_freeze(hrbps_by_regional_hr),
        region_of=region_of,
        area_managers=frozenset(stores_by_am),
        hrbps=frozenset(stores_by_hrbp),
        regional_hrs=frozenset(stores_by_regional_hr),
        hr_heads=frozenset(hr_heads),
        lms_heads=frozenset(lms_heads),
    )
    logger.debug(
        "Hierarchy index built",
        records=count,
        stores=len(store_am),
        area_managers=len(index.area_managers),
        hrbps=len(index.hrbps),
        regional_hrs=len(index.regional_hrs),
    )
    return index
