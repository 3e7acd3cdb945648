"""Mapping table ingestion.

Validates raw mapping rows (one per store) into closed ``MappingRecord``
values. Rows without a store id or area manager id are dropped and reported
as diagnostics. An optional field of the wrong type is discarded (the row is
kept) and also reported. Nothing else is checked or deduplicated.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from hrconnect.logging_config import get_logger

logger = get_logger(__name__)

# Keys whose failure drops the row (wire alias and field name)
_REQUIRED_KEYS = frozenset({"storeId", "store_id", "areaManagerId", "area_manager_id"})
_STORE_NAME_KEYS = ("locationName", "storeDisplayName", "storeName", "store_name")


@dataclass(frozen=True)
class MappingRecord:
    """One store and its escalation chain.

    Optional HR ids are ``None`` when the row has no such person. An empty
    string is a present (if odd) id and is kept as-is.
    """

    store_id: str
    store_name: str
    region: str | None
    area_manager_id: str
    hrbp_id: str | None = None
    regional_hr_id: str | None = None
    hr_head_id: str | None = None
    lms_head_id: str | None = None


@dataclass(frozen=True)
class IngestDiagnostic:
    """A row that was dropped, or kept with some optional fields discarded."""

    row_index: int
    reason: str
    store_id: str | None = None
    dropped: bool = True


@dataclass(frozen=True)
class IngestResult:
    records: tuple[MappingRecord, ...]
    diagnostics: tuple[IngestDiagnostic, ...]

    @property
    def dropped_count(self) -> int:
        return sum(1 for d in self.diagnostics if d.dropped)


class RawMappingRow(BaseModel):
    """Wire shape of a mapping row as served by the mapping sheet."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    store_id: str = Field(alias="storeId", min_length=1)
    store_name: str = Field(
        default="",
        validation_alias=AliasChoices(*_STORE_NAME_KEYS),
    )
    region: str | None = None
    area_manager_id: str = Field(alias="areaManagerId", min_length=1)
    hrbp_id: str | None = Field(default=None, alias="hrbpId")
    regional_hr_id: str | None = Field(default=None, alias="regionalHrId")
    hr_head_id: str | None = Field(default=None, alias="hrHeadId")
    lms_head_id: str | None = Field(default=None, alias="lmsHeadId")

    def to_record(self) -> MappingRecord:
        return MappingRecord(
            store_id=self.store_id,
            store_name=self.store_name or self.store_id,
            region=self.region or None,
            area_manager_id=self.area_manager_id,
            hrbp_id=self.hrbp_id,
            regional_hr_id=self.regional_hr_id,
            hr_head_id=self.hr_head_id,
            lms_head_id=self.lms_head_id,
        )


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error["loc"]) or "row"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def _parse_row(row: Any) -> tuple[RawMappingRow, str | None]:
    """Validate one row; invalid optional fields are discarded, not fatal.

    Returns the parsed row and, if fields were discarded, why.
    """
    try:
        return RawMappingRow.model_validate(row), None
    except ValidationError as e:
        errors = e.errors()
        bad_keys = {error["loc"][0] for error in errors if error["loc"]}
        if bad_keys & set(_STORE_NAME_KEYS):
            bad_keys |= set(_STORE_NAME_KEYS)
        if (
            not isinstance(row, dict)
            or any(not error["loc"] for error in errors)
            or bad_keys & _REQUIRED_KEYS
        ):
            raise
        cleaned = {key: value for key, value in row.items() if key not in bad_keys}
        return RawMappingRow.model_validate(cleaned), _describe(e)


def ingest_records(raw_rows: Iterable[Any]) -> IngestResult:
    """Parse raw mapping rows, keeping ingestion order.

    Args:
        raw_rows: Decoded JSON objects, one per store.

    Returns:
        Typed records plus one diagnostic per dropped row or discarded
        optional field set.
    """
    records: list[MappingRecord] = []
    diagnostics: list[IngestDiagnostic] = []

    for index, row in enumerate(raw_rows):
        try:
            parsed, problem = _parse_row(row)
        except ValidationError as e:
            store_id = row.get("storeId") if isinstance(row, dict) else None
            diagnostic = IngestDiagnostic(
                row_index=index,
                reason=_describe(e),
                store_id=str(store_id) if store_id not in (None, "") else None,
            )
            diagnostics.append(diagnostic)
            logger.warning(
                "Dropped malformed mapping record",
                row=index,
                store_id=diagnostic.store_id,
                reason=diagnostic.reason,
            )
            continue

        if problem is not None:
            diagnostics.append(
                IngestDiagnostic(row_index=index, reason=problem, store_id=parsed.store_id, dropped=False)
            )
            logger.warning(
                "Ignored invalid optional mapping fields",
                row=index,
                store_id=parsed.store_id,
                reason=problem,
            )
        records.append(parsed.to_record())

    dropped = sum(1 for d in diagnostics if d.dropped)
    logger.info("Mapping records ingested", accepted=len(records), dropped=dropped)
    return IngestResult(records=tuple(records), diagnostics=tuple(diagnostics))
