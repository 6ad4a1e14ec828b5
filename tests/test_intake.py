"""
Unit tests for file intake: classification, ingestion and upload reading.
"""

import base64
import io

import pytest
from fastapi import UploadFile
from pydantic import ValidationError
from starlette.datastructures import Headers

from pmis_control_pipeline.app.intake import (
    IntakeError,
    classify,
    ingest,
    parse_file_type,
    read_upload,
)
from pmis_control_pipeline.app.schemas import FileCategory, FileType


@pytest.mark.parametrize("declared_type", list(FileType))
def test_classify_is_total(declared_type):
    assert classify(declared_type) in (FileCategory.SCHEDULE, FileCategory.FINANCIAL)
    assert classify(declared_type) == classify(declared_type)


def test_schedule_types_are_schedule():
    assert classify(FileType.SCHEDULE_BASELINE) == FileCategory.SCHEDULE
    assert classify(FileType.PROJECT_SCHEDULE_ACTUALS) == FileCategory.SCHEDULE
    assert classify(FileType.WORK_PERFORMANCE_DATA) == FileCategory.SCHEDULE


def test_non_schedule_types_are_financial():
    # Risk Register and Other are grouped with financial data for readiness purposes
    assert classify(FileType.COST_BASELINE) == FileCategory.FINANCIAL
    assert classify(FileType.RISK_REGISTER) == FileCategory.FINANCIAL
    assert classify(FileType.OTHER) == FileCategory.FINANCIAL


def test_ingest_encodes_and_stamps():
    raw = b"%PDF-1.7 cost baseline"
    f = ingest(raw, FileType.COST_BASELINE, "baseline.pdf", "application/pdf")

    assert base64.b64decode(f.base64_data) == raw
    assert f.size == len(raw)
    assert f.category == FileCategory.FINANCIAL
    assert f.mime_type == "application/pdf"
    assert f.id


def test_ingest_generates_unique_ids():
    a = ingest(b"x", FileType.OTHER, "a.txt", "text/plain")
    b = ingest(b"x", FileType.OTHER, "a.txt", "text/plain")
    assert a.id != b.id


def test_ingest_keeps_declared_size():
    f = ingest(b"abc", FileType.OTHER, "a.txt", "text/plain", size=1024)
    assert f.size == 1024


def test_ingest_blank_mime_type_is_none():
    f = ingest(b"abc", FileType.OTHER, "a.bin", "")
    assert f.mime_type is None


def test_ingest_unreadable_raises():
    with pytest.raises(IntakeError):
        ingest(None, FileType.COST_BASELINE, "broken.pdf", "application/pdf")


def test_ingest_empty_keeps_record_without_payload():
    f = ingest(b"", FileType.COST_BASELINE, "empty.pdf", "application/pdf")

    assert f.name == "empty.pdf"
    assert f.size == 0
    assert f.base64_data is None
    assert f.mime_type == "application/pdf"


def test_project_file_is_frozen():
    f = ingest(b"abc", FileType.OTHER, "a.txt", "text/plain")
    with pytest.raises(ValidationError):
        f.name = "changed.txt"


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Cost Baseline", FileType.COST_BASELINE),
        ("COST_BASELINE", FileType.COST_BASELINE),
        ("project_schedule_actuals", FileType.PROJECT_SCHEDULE_ACTUALS),
        ("  Risk Register ", FileType.RISK_REGISTER),
    ],
)
def test_parse_file_type(value, expected):
    assert parse_file_type(value) == expected


def test_parse_file_type_unknown():
    with pytest.raises(IntakeError):
        parse_file_type("Invoice")


@pytest.mark.asyncio
async def test_read_upload_uses_content_type():
    upload = UploadFile(
        file=io.BytesIO(b"a,b\n1,2\n"),
        filename="actuals.csv",
        headers=Headers({"content-type": "text/csv"}),
    )
    f = await read_upload(upload, FileType.ACTUAL_COST_REPORT)

    assert f.name == "actuals.csv"
    assert f.mime_type == "text/csv"
    assert f.size == 8
    assert f.type == FileType.ACTUAL_COST_REPORT


@pytest.mark.asyncio
async def test_read_upload_guesses_missing_content_type():
    upload = UploadFile(file=io.BytesIO(b"%PDF-1.4"), filename="plan.pdf")
    f = await read_upload(upload, FileType.FINANCIAL_PLAN)
    assert f.mime_type == "application/pdf"


@pytest.mark.asyncio
async def test_read_upload_accepts_empty_file():
    upload = UploadFile(file=io.BytesIO(b""), filename="empty.csv")

    f = await read_upload(upload, FileType.SCHEDULE_BASELINE)

    assert f.size == 0
    assert f.base64_data is None
    assert f.mime_type == "text/csv"
