"""
Top-level test configuration for HR Connect.
"""

import os

import pytest

# Ensure test-friendly defaults
os.environ.setdefault("HRCONNECT_CONFIG_FILE", "/nonexistent/hrconnect.yaml")
os.environ.setdefault("HRCONNECT_JSON_LOGS", "false")
os.environ.setdefault("HRCONNECT_LOG_LEVEL", "DEBUG")

from hrconnect.access.catalog import Directory  # noqa: E402
from hrconnect.access.indexer import HierarchyIndex, build_index  # noqa: E402
from hrconnect.mapping.ingester import ingest_records  # noqa: E402


@pytest.fixture
def north_rows() -> list[dict]:
    """Two North stores under one AM, each with its own HRBP."""
    return [
        {"storeId": "S1", "storeName": "Connaught Place", "areaManagerId": "A1", "hrbpId": "H1", "region": "North"},
        {"storeId": "S2", "storeName": "Khan Market", "areaManagerId": "A1", "hrbpId": "H2", "region": "North"},
    ]


@pytest.fixture
def org_rows(north_rows: list[dict]) -> list[dict]:
    """North rows plus a South store under a regional HR, and the org-wide heads."""
    return [
        *north_rows,
        {"storeId": "S3", "storeName": "Indiranagar", "areaManagerId": "A2", "regionalHrId": "G1", "region": "South"},
        {
            "storeId": "S4",
            "storeName": "Koramangala",
            "areaManagerId": "A3",
            "hrbpId": "H3",
            "regionalHrId": "G1",
            "hrHeadId": "HEAD1",
            "lmsHeadId": "LMS1",
            "region": "South",
        },
    ]


@pytest.fixture
def directory() -> Directory:
    return Directory({"A1": "Asha Menon", "A2": "Bilal Khan", "H1": "Chitra Rao", "G1": "Dev Patel"})


@pytest.fixture
def org_index(org_rows: list[dict]) -> HierarchyIndex:
    return build_index(ingest_records(org_rows).records)
