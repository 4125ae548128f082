"""
LLM providers queried for state filing data.

Transport and API failures propagate to the caller; an answer that holds
no readable JSON object comes back as None.
"""
import json
import re
from typing import Optional

import httpx
import structlog
from openai import OpenAI

from parafort.config import config
from .models import GeminiAnswer, OpenAIAnswer

logger = structlog.get_logger()

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def extract_json(text: Optional[str]) -> Optional[dict]:
    """First-brace to last-brace span of a free-text answer, parsed."""
    if not text:
        return None
    match = _JSON_OBJECT.search(text)
    if not match:
        return None
    try:
        data = json.loads(match.group())
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _mask(key: str) -> dict:
    # Security log: only prefix and suffix
    return {"prefix": f"{key[:6]}...", "suffix": f"...{key[-4:]}"}


def openai_prompt(state: str, entity_type: str) -> str:
    return f"""As a legal compliance expert, provide EXACT and CURRENT information for {state} {entity_type}:

1. Formation/Filing Fee: What is the exact state government filing fee for forming a {entity_type} in {state}? (in USD)
2. Annual Report Requirement: Is an annual report required? (Yes/No)
3. If YES to annual reports:
   - Annual filing fee (in USD)
   - Filing frequency (annual/biennial)
   - Due date/deadline
   - Late fee penalty

Respond in JSON format:
{{
  "state": "{state}",
  "entityType": "{entity_type}",
  "formationFee": number,
  "annualReportRequired": boolean,
  "annualFilingFee": number or 0,
  "frequency": "annual/biennial/none",
  "dueDate": "specific date or none",
  "lateFee": number or 0,
  "notes": "brief compliance notes",
  "source": "official state source or regulation"
}}

IMPORTANT: Only provide information from official state sources. Be extremely accurate as this is for a legal services business."""


def gemini_prompt(state: str, entity_type: str) -> str:
    return f"""As a legal compliance expert, verify the following for {state} {entity_type} business formation:

1. What is the exact state filing fee for forming a {entity_type} in {state}?
2. Are annual reports required for {entity_type} in {state}?
3. If annual reports are required, what is the fee and frequency?
4. What are the specific due dates and penalties?

Provide response in JSON format with exact fees, requirements, and official sources.
Focus on accuracy - this is for a legal services business requiring precise compliance information.

{{
  "state": "{state}",
  "entityType": "{entity_type}",
  "formationFee": "exact USD amount",
  "annualReportRequired": true/false,
  "annualFilingDetails": {{
    "fee": "USD amount or 0",
    "frequency": "annual/biennial/none",
    "dueDate": "specific date",
    "penalty": "late fee amount"
  }},
  "officialSource": "state website or regulation"
}}"""


class OpenAIStateClient:
    """Chat completion in JSON mode, low temperature for factual answers."""

    def __init__(self, api_key: str = None, model: str = None, client=None):
        api_key = api_key or config.OPENAI_API_KEY
        if client is None and not api_key:
            raise ValueError("OPENAI_API_KEY is not configured")
        if api_key:
            logger.info("OpenAI Key Status", **_mask(api_key))
        self.client = client or OpenAI(api_key=api_key)
        self.model = model or config.OPENAI_MODEL

    def verify(self, state: str, entity_type: str) -> Optional[OpenAIAnswer]:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": openai_prompt(state, entity_type)}],
            response_format={"type": "json_object"},
            temperature=0.1,
        )
        data = extract_json(response.choices[0].message.content)
        if data is None:
            logger.warning("OpenAI answer without JSON", state=state, entity_type=entity_type)
            return None
        return OpenAIAnswer.model_validate(data)


class GeminiStateClient:
    """Gemini generateContent over REST; the JSON object is cut out of the free-text reply."""

    def __init__(self, api_key: str = None, model: str = None, timeout: float = 60):
        self.api_key = api_key or config.GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY is not configured")
        logger.info("Gemini Key Status", **_mask(self.api_key))
        self.model = model or config.GEMINI_MODEL
        self.timeout = timeout

    def verify(self, state: str, entity_type: str) -> Optional[GeminiAnswer]:
        payload = {
            "contents": [{"parts": [{"text": gemini_prompt(state, entity_type)}]}],
            "generationConfig": {"temperature": 0.1},
        }
        response = httpx.post(
            GEMINI_URL.format(model=self.model),
            params={"key": self.api_key},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()

        text = _candidate_text(response.json())
        data = extract_json(text)
        if data is None:
            logger.warning("Gemini answer without JSON", state=state, entity_type=entity_type)
            return None
        return GeminiAnswer.model_validate(data)


def _candidate_text(body: dict) -> Optional[str]:
    candidates = body.get("candidates") or []
    if not candidates:
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts) or None
