"""
Minimal LLM client wrapper using Google Gemini.

Rationale:
- Use the google-genai SDK: it carries structured output and thinking budgets.
- Keep interface tiny: call_llm(request) -> str.
- No retries / no fallback here; analyzer.analyze owns the fallback.
"""

import base64
import copy
import logging

from google import genai
from google.genai import types

from .config import get_api_key
from .schemas import AnalysisRequest

logger = logging.getLogger(__name__)


def _build_contents(request: AnalysisRequest) -> list:
    parts = [types.Part.from_text(text=request.prompt_text)]
    for attachment in request.attachments:
        parts.append(
            types.Part.from_bytes(
                data=base64.b64decode(attachment.data),
                mime_type=attachment.mime_type,
            )
        )
    return [types.Content(role="user", parts=parts)]


def _build_config(request: AnalysisRequest) -> types.GenerateContentConfig:
    extra = request.extra_config
    thinking = None
    if extra.get("thinking_budget"):
        thinking = types.ThinkingConfig(thinking_budget=extra["thinking_budget"])
    return types.GenerateContentConfig(
        response_mime_type=extra.get("response_mime_type", "application/json"),
        # the SDK rewrites schema dicts in place
        response_schema=copy.deepcopy(request.response_schema),
        thinking_config=thinking,
    )


async def call_llm(request: AnalysisRequest) -> str:
    """
    Send one analysis request to Gemini and return the raw response text.
    """
    # Load API key lazily (after main.py loads .env)
    api_key = get_api_key()
    if not api_key:
        raise RuntimeError("GEMINI_API_KEY or API_KEY must be set in environment")

    try:
        logger.info(
            f"Calling {request.model_variant} for {request.mode.value} "
            f"with {len(request.attachments)} attachment(s)"
        )
        # closes the underlying HTTP session when the call returns or fails
        async with genai.Client(api_key=api_key).aio as client:
            response = await client.models.generate_content(
                model=request.model_variant,
                contents=_build_contents(request),
                config=_build_config(request),
            )
        result = response.text
    except Exception as e:
        raise RuntimeError(f"Gemini API error: {str(e)}")

    if not result:
        raise RuntimeError("Gemini returned empty response")

    return result
