"""
Pytest configuration and fixtures.
"""

import json
from datetime import datetime

import pytest

from pmis_control_pipeline.app.intake import ingest
from pmis_control_pipeline.app.schemas import FileType


OK_REPORT = {
    "executiveSummary": "Project is slightly behind schedule and on budget.",
    "metrics": [
        {"label": "SPI", "value": "0.92", "status": "warning", "trend": "down"},
        {"label": "CPI", "value": 1.03, "status": "good"},
    ],
    "chartData": [
        {"name": "Jan", "planned": 100, "actual": 95},
        {"name": "Feb", "planned": 200, "actual": 180, "forecast": 190},
    ],
    "forecasts": ["EAC: $1.2M"],
    "risks": ["Supplier delay on steel package"],
    "recommendations": ["Fast-track foundation works."],
    "changeRequests": [
        {
            "id": "CR-001",
            "title": "Re-sequence steel erection",
            "description": "Move erection ahead of cladding.",
            "priority": "High",
            "reason": "Recover 2 weeks of float.",
        }
    ],
    "dataReadinessScore": 85,
}


@pytest.fixture
def make_file():
    """Factory for ProjectFile records with realistic content."""

    def _make(declared_type=FileType.SCHEDULE_BASELINE, name=None, content=b"Task,Start,Finish\nA,2026-01-01,2026-02-01\n",
              mime_type="text/csv"):
        return ingest(content, declared_type, name or f"{declared_type.name.lower()}.csv", mime_type)

    return _make


@pytest.fixture
def ok_report_text():
    return json.dumps(OK_REPORT)


@pytest.fixture
def fixed_date():
    return datetime(2026, 10, 19, 9, 30)


@pytest.fixture
def ok_report():
    return dict(OK_REPORT)
