"""Tests for mapping row ingestion."""

from hrconnect.mapping.ingester import MappingRecord, ingest_records


class TestIngestRecords:
    def test_valid_row(self):
        result = ingest_records(
            [
                {
                    "storeId": "S1",
                    "storeName": "Connaught Place",
                    "region": "North",
                    "areaManagerId": "A1",
                    "hrbpId": "H1",
                    "regionalHrId": "G1",
                    "hrHeadId": "HEAD1",
                    "lmsHeadId": "LMS1",
                }
            ]
        )
        assert result.diagnostics == ()
        assert result.records == (
            MappingRecord(
                store_id="S1",
                store_name="Connaught Place",
                region="North",
                area_manager_id="A1",
                hrbp_id="H1",
                regional_hr_id="G1",
                hr_head_id="HEAD1",
                lms_head_id="LMS1",
            ),
        )

    def test_optional_hr_fields_default_to_none(self):
        result = ingest_records([{"storeId": "S1", "areaManagerId": "A1"}])
        record = result.records[0]
        assert record.hrbp_id is None
        assert record.regional_hr_id is None
        assert record.hr_head_id is None
        assert record.lms_head_id is None

    def test_missing_store_id_dropped(self):
        result = ingest_records([{"areaManagerId": "A1"}, {"storeId": "S2", "areaManagerId": "A2"}])
        assert [r.store_id for r in result.records] == ["S2"]
        assert result.dropped_count == 1
        assert result.diagnostics[0].row_index == 0
        assert "storeId" in result.diagnostics[0].reason

    def test_missing_area_manager_dropped_with_store_id(self):
        result = ingest_records([{"storeId": "S9"}])
        assert result.records == ()
        assert result.diagnostics[0].store_id == "S9"

    def test_blank_required_field_dropped(self):
        result = ingest_records([{"storeId": "  ", "areaManagerId": "A1"}])
        assert result.records == ()
        assert result.dropped_count == 1

    def test_non_object_row_dropped(self):
        result = ingest_records(["not a row", {"storeId": "S1", "areaManagerId": "A1"}])
        assert len(result.records) == 1
        assert result.diagnostics[0].store_id is None

    def test_store_name_aliases(self):
        result = ingest_records(
            [
                {"storeId": "S1", "areaManagerId": "A1", "locationName": "Saket"},
                {"storeId": "S2", "areaManagerId": "A1", "storeDisplayName": "GK 1"},
                {"storeId": "S3", "areaManagerId": "A1"},
            ]
        )
        assert [r.store_name for r in result.records] == ["Saket", "GK 1", "S3"]

    def test_numeric_ids_coerced(self):
        result = ingest_records([{"storeId": 27, "areaManagerId": 1766}])
        assert result.records[0].store_id == "27"
        assert result.records[0].area_manager_id == "1766"

    def test_empty_region_becomes_none(self):
        result = ingest_records([{"storeId": "S1", "areaManagerId": "A1", "region": ""}])
        assert result.records[0].region is None

    def test_unknown_fields_ignored(self):
        result = ingest_records([{"storeId": "S1", "areaManagerId": "A1", "city": "Delhi"}])
        assert len(result.records) == 1

    def test_order_preserved(self):
        rows = [{"storeId": f"S{i}", "areaManagerId": "A1"} for i in range(5)]
        result = ingest_records(rows)
        assert [r.store_id for r in result.records] == ["S0", "S1", "S2", "S3", "S4"]

    def test_invalid_optional_field_discarded_row_kept(self):
        result = ingest_records(
            [{"storeId": "S1", "areaManagerId": "A1", "hrbpId": True, "regionalHrId": "G1"}]
        )
        record = result.records[0]
        assert record.hrbp_id is None
        assert record.regional_hr_id == "G1"
        assert result.dropped_count == 0
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].dropped is False
        assert result.diagnostics[0].store_id == "S1"
        assert "hrbpId" in result.diagnostics[0].reason

    def test_invalid_store_name_falls_back_to_id(self):
        result = ingest_records([{"storeId": "S1", "areaManagerId": "A1", "storeName": ["Saket"]}])
        assert result.records[0].store_name == "S1"
        assert result.dropped_count == 0

    def test_invalid_required_field_still_dropped(self):
        result = ingest_records([{"storeId": "S1", "areaManagerId": True, "hrbpId": "H1"}])
        assert result.records == ()
        assert result.dropped_count == 1
