"""
Build the Gemini request for an analysis run.

Flow:
1. Pick the model variant for the mode (deep reasoning for integrated control, fast otherwise)
2. Assemble the prompt: persona, mode, file listing, five-step task list, mode focus, fallback note
3. Attach every file that carries both content and a MIME type
4. Attach the response schema and generation config
"""

from typing import Dict, List, Sequence

from . import config
from .schemas import AnalysisRequest, AppMode, Attachment, FileType, ModeInfo, ProjectFile

# Gemini structured-output schema (OpenAPI subset, upper-case type names).
ANALYSIS_SCHEMA: Dict = {
    "type": "OBJECT",
    "properties": {
        "executiveSummary": {
            "type": "STRING",
            "description": "A high-level summary of the project status based on PMBOK 8th Ed.",
        },
        "metrics": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "label": {"type": "STRING"},
                    "value": {"type": "STRING"},
                    "status": {"type": "STRING", "enum": ["good", "warning", "critical", "neutral"]},
                    "trend": {"type": "STRING", "enum": ["up", "down", "stable"]},
                },
                "required": ["label", "value", "status"],
            },
        },
        "chartData": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING", "description": "Time period or Milestone"},
                    "planned": {"type": "NUMBER"},
                    "actual": {"type": "NUMBER"},
                    "forecast": {"type": "NUMBER"},
                },
                "required": ["name", "planned", "actual"],
            },
        },
        "forecasts": {"type": "ARRAY", "items": {"type": "STRING"}},
        "risks": {"type": "ARRAY", "items": {"type": "STRING"}},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
        "changeRequests": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "id": {"type": "STRING"},
                    "title": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "priority": {"type": "STRING", "enum": ["High", "Medium", "Low"]},
                    "reason": {"type": "STRING"},
                },
                "required": ["title", "priority"],
            },
        },
        "dataReadinessScore": {
            "type": "NUMBER",
            "description": "Score from 0 to 100 indicating data completeness",
        },
    },
    "required": ["executiveSummary", "metrics", "chartData", "recommendations", "dataReadinessScore"],
}

PERSONA = "You are a Senior Project Manager and PMIS AI Module expert in PMBOK Guide 8th Edition."

TASK_STEPS = [
    "Validate data completeness (Data Readiness Score).",
    "Calculate variances (SV, CV) and Indices (SPI, CPI) based on the ACTUAL data in the files.",
    "Forecast trends (EAC, ETC).",
    "Recommend corrective actions.",
    "Identify if Change Requests are needed.",
]

MODE_INSTRUCTIONS = [
    "- If SCHEDULE_CONTROL: Focus on Critical Path, Schedule Variance (SV), Schedule Performance Index (SPI).",
    "- If FINANCIAL_CONTROL: Focus on Earned Value (EV), Cost Variance (CV), Cost Performance Index (CPI), EAC.",
    "- If INTEGRATED_CONTROL: Correlate Schedule delays to Cost impacts. Use \"Thinking\" to deep dive "
    "into the relationship between delayed milestones and burn rate.",
]

SIMULATION_NOTE = (
    "Note: If files are missing or unreadable, simulate a realistic scenario based on the file type names provided."
)

MODE_CATALOG: Dict[AppMode, ModeInfo] = {
    AppMode.DASHBOARD: ModeInfo(
        mode=AppMode.DASHBOARD,
        title="Project Command Center",
        description="Overview of project artifacts and system readiness.",
        file_types=[],
    ),
    AppMode.SCHEDULE_CONTROL: ModeInfo(
        mode=AppMode.SCHEDULE_CONTROL,
        title="Schedule Control (3.3)",
        description="Compare actual progress against approved baselines to forecast completion.",
        file_types=[FileType.SCHEDULE_BASELINE, FileType.PROJECT_SCHEDULE_ACTUALS, FileType.WORK_PERFORMANCE_DATA],
    ),
    AppMode.FINANCIAL_CONTROL: ModeInfo(
        mode=AppMode.FINANCIAL_CONTROL,
        title="Financial Control (4.4)",
        description="Monitor cost variances, analyze Earned Value, and manage reserves.",
        file_types=[FileType.COST_BASELINE, FileType.ACTUAL_COST_REPORT, FileType.FINANCIAL_PLAN],
    ),
    AppMode.INTEGRATED_CONTROL: ModeInfo(
        mode=AppMode.INTEGRATED_CONTROL,
        title="Integrated Control",
        description="Deep analysis of schedule delays impacts on cost and funding requirements.",
        file_types=[
            FileType.SCHEDULE_BASELINE,
            FileType.COST_BASELINE,
            FileType.PROJECT_SCHEDULE_ACTUALS,
            FileType.ACTUAL_COST_REPORT,
        ],
    ),
}


def select_model(mode: AppMode) -> str:
    """Integrated control needs the deep-reasoning model; everything else runs on the fast one."""
    if mode == AppMode.INTEGRATED_CONTROL:
        return config.deep_model()
    return config.fast_model()


def _format_file_listing(files: Sequence[ProjectFile]) -> str:
    # Date format matches e.g. "Mon Oct 19 2026"
    return "\n".join(
        f"- [{f.type.value}] {f.name} (Uploaded: {f.upload_date.strftime('%a %b %d %Y')})"
        for f in files
    )


def build_prompt(mode: AppMode, files: Sequence[ProjectFile]) -> str:
    steps = "\n".join(f"{i}. {step}" for i, step in enumerate(TASK_STEPS, start=1))
    return (
        f"{PERSONA}\n\n"
        f"Operational Mode: {mode.value}\n\n"
        "Analyze the attached project files (documents, data sheets).\n\n"
        f"CONTEXT FILES:\n{_format_file_listing(files)}\n\n"
        "TASK:\n"
        "Generate a strictly formatted JSON report.\n"
        f"{steps}\n\n"
        "SPECIFIC MODE INSTRUCTIONS:\n"
        + "\n".join(MODE_INSTRUCTIONS)
        + f"\n\n{SIMULATION_NOTE}\n"
    )


def build_attachments(files: Sequence[ProjectFile]) -> List[Attachment]:
    """One inline attachment per file with content; files lacking data or MIME type are skipped."""
    return [
        Attachment(mime_type=f.mime_type, data=f.base64_data)
        for f in files
        if f.base64_data and f.mime_type
    ]


def build_extra_config(mode: AppMode) -> Dict:
    extra: Dict = {"response_mime_type": "application/json"}
    if mode == AppMode.INTEGRATED_CONTROL:
        extra["thinking_budget"] = config.thinking_budget()
    return extra


def build_request(mode: AppMode, files: Sequence[ProjectFile]) -> AnalysisRequest:
    """
    Compose the full analysis request for a mode and file set.
    An empty file set still yields a valid request; the simulation note covers it.
    """
    return AnalysisRequest(
        mode=mode,
        model_variant=select_model(mode),
        prompt_text=build_prompt(mode, files),
        attachments=build_attachments(files),
        response_schema=ANALYSIS_SCHEMA,
        extra_config=build_extra_config(mode),
    )
