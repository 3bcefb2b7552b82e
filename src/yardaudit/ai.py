"""Generative AI calls: document unit extraction and report writing.

The AI client is created explicitly with :func:`create_ai_client` and
passed to whatever needs it.  Without an API key the factory returns
``None`` so callers can treat the feature as unavailable.
"""

from __future__ import annotations

import dataclasses
import json
import logging
import re
from typing import Any

from google import genai
from google.genai import types

from yardaudit._redact import redact_for_log
from yardaudit.config import AuditConfig
from yardaudit.exceptions import (
    AuditConfigError,
    DocumentProcessingError,
    EmptyReportError,
    ReportGenerationError,
)

_logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def _dump_contents(contents: Any) -> Any:
    items = contents if isinstance(contents, list) else [contents]
    return [item.model_dump(exclude_none=True) if isinstance(item, types.Part) else item for item in items]


def build_extraction_prompt(yard_name: str) -> str:
    return f"""
I am performing an inventory audit at the "{yard_name}" yard.
Analyze the provided inventory document/image.

Task: Extract all 'Unit IDs' (e.g., GST 01-01, GHM 08-01, etc.) that are listed as being PRESENT at this yard.

Rules for determining "Present":
1. If the 'Location' column says "YARD", count it as present.
2. If the 'Location' column explicitly says "{yard_name}", count it as present.
3. EXCLUDE units listed at other locations (e.g., "Texas", "New Mexico", "Repair", "Returning").

Return ONLY a JSON array of strings containing the Unit IDs found.
Example format: ["GST 01-01", "GHM 08-02"]
Do not include markdown formatting.
""".strip()


def parse_unit_id_list(text: str | None) -> list[str]:
    """Parse a model reply into unit ids.

    Markdown code fences are stripped; an empty reply means no units.

    Raises
    ------
    ValueError
        If the reply is not a JSON array.
    """
    cleaned = _CODE_FENCE.sub("", text or "").strip()
    if not cleaned:
        return []
    parsed = json.loads(cleaned)
    if not isinstance(parsed, list):
        raise ValueError(f"expected a JSON array, got {type(parsed).__name__}")
    return [str(item).strip() for item in parsed if item is not None and str(item).strip()]


class AuditAiClient:
    """Thin wrapper around a ``google.genai`` client.

    Parameters
    ----------
    client : genai.Client
        SDK client.  Only ``client.aio.models.generate_content`` is used,
        so tests may pass any object with that shape.
    model : str
        Model name sent with every request.
    """

    def __init__(self, client: Any, *, model: str) -> None:
        self._client = client
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def _generate(self, contents: Any) -> str:
        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug(
                "generate_content model=%s contents=%s", self._model, redact_for_log(_dump_contents(contents))
            )
        response = await self._client.aio.models.generate_content(model=self._model, contents=contents)
        return response.text or ""

    async def extract_present_unit_ids(self, data: bytes, mime_type: str, yard_name: str) -> list[str]:
        """Ask the model which units the document lists as present at *yard_name*.

        Raises
        ------
        DocumentProcessingError
            If the call fails or the reply is not a JSON array.
        """
        _logger.debug("Extracting unit ids from %s document (%d bytes)", mime_type, len(data))
        contents = [
            types.Part.from_bytes(data=data, mime_type=mime_type),
            build_extraction_prompt(yard_name),
        ]
        try:
            text = await self._generate(contents)
        except Exception as exc:
            raise DocumentProcessingError(f"Document extraction call failed: {exc}") from exc

        try:
            unit_ids = parse_unit_id_list(text)
        except ValueError as exc:
            raise DocumentProcessingError(f"Unexpected extraction reply: {text[:200]}") from exc

        _logger.debug("Model reported %d unit id(s)", len(unit_ids))
        return unit_ids

    async def generate_report(self, prompt: str) -> str:
        """Return the model's report text for *prompt*.

        Raises
        ------
        ReportGenerationError
            If the call fails.
        EmptyReportError
            If the model returns no text.
        """
        try:
            text = await self._generate(prompt)
        except Exception as exc:
            raise ReportGenerationError(f"Report generation call failed: {exc}") from exc
        if not text.strip():
            raise EmptyReportError("Model returned an empty report")
        return text


def create_ai_client(config: AuditConfig) -> AuditAiClient | None:
    """Build an AI client from *config*, or ``None`` when no API key is set.

    Raises
    ------
    AuditConfigError
        If the SDK rejects the configuration.
    """
    api_key = (config.gemini_api_key or "").strip()
    if not api_key:
        _logger.warning("Gemini API key is missing; AI features are disabled")
        return None
    _logger.debug("Creating Gemini client with %s", redact_for_log(dataclasses.asdict(config)))
    try:
        client = genai.Client(api_key=api_key)
    except ValueError as exc:
        raise AuditConfigError(f"Could not create the Gemini client: {exc}") from exc
    return AuditAiClient(client, model=config.gemini_model)
