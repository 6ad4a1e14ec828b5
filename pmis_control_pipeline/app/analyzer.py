"""
Analysis client: one Gemini call per run, always returning an AnalysisResult.

Flow:
1. Send the built request through the transport (llm_client.call_llm by default)
2. Parse the response text as one JSON object
3. Overlay the run's mode and timestamp and validate into AnalysisResult
4. On ANY failure (transport, empty body, bad JSON, schema mismatch) log it and
   return the fixed fallback result instead of raising
"""

import json
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict

from .llm_client import call_llm
from .schemas import AnalysisRequest, AnalysisResult, AppMode

logger = logging.getLogger(__name__)

Transport = Callable[[AnalysisRequest], Awaitable[str]]

FALLBACK_SUMMARY = "Analysis failed due to API error. Please check your API key and file formats."
FALLBACK_RECOMMENDATIONS = ("Check API connectivity.", "Ensure files are PDF, CSV, or Text.")


def _parse_payload(text: str) -> Dict[str, Any]:
    """The response body must be a single JSON object; anything else is a contract violation."""
    payload = json.loads(text)
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def fallback_result(mode: AppMode) -> AnalysisResult:
    return AnalysisResult(
        mode=mode,
        timestamp=datetime.now(),
        executive_summary=FALLBACK_SUMMARY,
        metrics=[],
        chart_data=[],
        forecasts=[],
        risks=[],
        recommendations=list(FALLBACK_RECOMMENDATIONS),
        change_requests=[],
        data_readiness_score=0,
    )


async def analyze(request: AnalysisRequest, transport: Transport = call_llm) -> AnalysisResult:
    """
    Run one analysis request.

    Args:
        request: Output of request_builder.build_request
        transport: Coroutine function sending the request and returning raw text

    Returns:
        The parsed report, or the fallback report if anything went wrong.
    """
    try:
        response = await transport(request)
        if not response:
            raise RuntimeError("No response from AI")
        logger.debug(f"LLM raw response: {response[:1000]}")

        payload = _parse_payload(response)
        # mode and timestamp belong to this run, not to whatever the model echoed back
        payload.update({"mode": request.mode, "timestamp": datetime.now()})
        result = AnalysisResult.model_validate(payload)
    except Exception as e:
        logger.error(f"Gemini analysis error ({request.mode.value}): {type(e).__name__}: {e}")
        return fallback_result(request.mode)

    logger.info(
        f"Analysis complete for {request.mode.value}: readiness={result.data_readiness_score}, "
        f"{len(result.metrics)} metrics, {len(result.change_requests)} change requests"
    )
    return result
