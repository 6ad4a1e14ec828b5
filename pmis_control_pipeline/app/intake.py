"""
File intake: turn an uploaded document into a ProjectFile.

Rationale:
- Classification into SCHEDULE / FINANCIAL only drives the dashboard readiness indicators.
- Payloads are base64-encoded once here so the request builder can attach them as-is.
- An unreadable upload raises IntakeError; no partial record is ever created.
- A zero-byte upload is kept (listed in the prompt) but carries no payload, so it is never attached.
"""

import base64
import logging
import mimetypes
import uuid
from datetime import datetime
from typing import Optional

from fastapi import UploadFile

from .schemas import FileCategory, FileType, ProjectFile

logger = logging.getLogger(__name__)

SCHEDULE_TYPES = frozenset({
    FileType.SCHEDULE_BASELINE,
    FileType.PROJECT_SCHEDULE_ACTUALS,
    FileType.WORK_PERFORMANCE_DATA,
})


class IntakeError(Exception):
    """Raised when an upload cannot be turned into a ProjectFile."""


def classify(declared_type: FileType) -> FileCategory:
    """Map a declared type to its coarse category. Anything that is not schedule data counts as financial."""
    if declared_type in SCHEDULE_TYPES:
        return FileCategory.SCHEDULE
    return FileCategory.FINANCIAL


def parse_file_type(value: str) -> FileType:
    """Accept either the display label ("Cost Baseline") or the enum name ("COST_BASELINE")."""
    value = (value or "").strip()
    try:
        return FileType(value)
    except ValueError:
        pass
    try:
        return FileType[value.upper()]
    except KeyError:
        raise IntakeError(f"Unknown file type: {value!r}")


def ingest(
    raw_bytes: Optional[bytes],
    declared_type: FileType,
    name: str,
    mime_type: Optional[str],
    size: Optional[int] = None,
) -> ProjectFile:
    """
    Build a new ProjectFile from raw content.
    Generates a fresh id and timestamp; the content is base64-encoded for transport.
    """
    if raw_bytes is None:
        raise IntakeError(f"Could not read file {name!r}")

    return ProjectFile(
        id=uuid.uuid4().hex,
        name=name,
        type=declared_type,
        category=classify(declared_type),
        upload_date=datetime.now(),
        size=size if size is not None else len(raw_bytes),
        base64_data=base64.b64encode(raw_bytes).decode("ascii") or None,
        mime_type=mime_type or None,
    )


async def read_upload(upload: UploadFile, declared_type: FileType) -> ProjectFile:
    """Read a FastAPI UploadFile and ingest it under the given declared type."""
    name = upload.filename or "upload"
    try:
        raw = await upload.read()
    except OSError as e:
        raise IntakeError(f"Could not read file {name!r}: {e}")

    mime_type = upload.content_type
    if not mime_type or mime_type == "application/octet-stream":
        guessed, _ = mimetypes.guess_type(name)
        mime_type = guessed or mime_type

    project_file = ingest(raw, declared_type, name, mime_type, size=len(raw))
    logger.info(f"Ingested {name} as {declared_type.value} ({project_file.size} bytes, {project_file.mime_type})")
    return project_file
