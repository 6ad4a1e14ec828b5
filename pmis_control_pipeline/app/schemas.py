"""
Pydantic request/response models.

Rationale:
- Define explicit contracts for uploaded files, the Gemini request and the report it returns.
- Wire names are camelCase (what the model emits and the frontend reads);
  Python code uses snake_case attributes. Both are accepted on input.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AppMode(str, Enum):
    DASHBOARD = "DASHBOARD"
    SCHEDULE_CONTROL = "SCHEDULE_CONTROL"
    FINANCIAL_CONTROL = "FINANCIAL_CONTROL"
    INTEGRATED_CONTROL = "INTEGRATED_CONTROL"


class FileCategory(str, Enum):
    SCHEDULE = "SCHEDULE"
    FINANCIAL = "FINANCIAL"
    COMMON = "COMMON"


class FileType(str, Enum):
    SCHEDULE_BASELINE = "Schedule Baseline"
    PROJECT_SCHEDULE_ACTUALS = "Project Schedule (Actuals)"
    WORK_PERFORMANCE_DATA = "Work Performance Data"
    COST_BASELINE = "Cost Baseline"
    ACTUAL_COST_REPORT = "Actual Cost Report"
    FINANCIAL_PLAN = "Financial Management Plan"
    RISK_REGISTER = "Risk Register"
    OTHER = "Other"


class AnalysisPhase(str, Enum):
    IDLE = "IDLE"
    ANALYZING = "ANALYZING"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectFile(CamelModel):
    """One uploaded artifact. Never mutated after intake."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str
    type: FileType
    category: FileCategory
    upload_date: datetime
    size: int
    base64_data: Optional[str] = None
    mime_type: Optional[str] = None


class FileSummary(CamelModel):
    """A ProjectFile without its payload, for listings."""

    id: str
    name: str
    type: FileType
    category: FileCategory
    upload_date: datetime
    size: int
    mime_type: Optional[str] = None

    @classmethod
    def from_file(cls, f: ProjectFile) -> "FileSummary":
        return cls(
            id=f.id,
            name=f.name,
            type=f.type,
            category=f.category,
            upload_date=f.upload_date,
            size=f.size,
            mime_type=f.mime_type,
        )


class AnalysisMetric(CamelModel):
    label: str
    # whichever the service sent: "1.05", 1.05 and 12 are all kept as-is
    value: Union[int, float, str]
    status: Literal["good", "warning", "critical", "neutral"]
    trend: Optional[Literal["up", "down", "stable"]] = None
    unit: Optional[str] = None


class ChartDataPoint(CamelModel):
    name: str
    planned: float
    actual: float
    forecast: Optional[float] = None


class ChangeRequest(CamelModel):
    id: str = ""
    title: str
    description: str = ""
    priority: Literal["High", "Medium", "Low"]
    reason: str = ""


class AnalysisResult(CamelModel):
    mode: AppMode
    timestamp: datetime
    executive_summary: str
    metrics: List[AnalysisMetric]
    chart_data: List[ChartDataPoint]
    forecasts: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    recommendations: List[str]
    change_requests: List[ChangeRequest] = Field(default_factory=list)
    data_readiness_score: float


class Attachment(CamelModel):
    mime_type: str
    data: str


class AnalysisRequest(CamelModel):
    """Everything needed for one Gemini call, built by request_builder.build_request."""

    mode: AppMode
    model_variant: str
    prompt_text: str
    attachments: List[Attachment] = Field(default_factory=list)
    response_schema: Dict[str, Any]
    extra_config: Dict[str, Any] = Field(default_factory=dict)


# ---- API payloads ----

class ModeInfo(CamelModel):
    mode: AppMode
    title: str
    description: str
    file_types: List[FileType]


class ModeUpdate(CamelModel):
    mode: AppMode


class DashboardState(CamelModel):
    mode: AppMode
    phase: AnalysisPhase
    files: List[FileSummary]
    readiness: Dict[FileCategory, bool]
    can_analyze: bool
    result: Optional[AnalysisResult] = None


class AnalyzeResponse(CamelModel):
    started: bool
    result: Optional[AnalysisResult] = None
