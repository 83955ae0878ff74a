"""
Gemini generateContent client with model and API version fallback
"""

import asyncio
import logging
from http import HTTPStatus
from typing import List, Optional

import httpx

from learnify.config import DEFAULT_GEMINI_MODEL

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"
FALLBACK_MODELS = [
    "gemini-1.5-flash-002",
    "gemini-1.5-flash-001",
    "gemini-1.5-pro-002",
    "gemini-1.5-pro-001",
    "gemini-1.0-pro",
]
API_VERSIONS = ["v1beta"]
REQUEST_TIMEOUT_SECONDS = 30.0

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topP": 0.95,
    "candidateCount": 1,
    "maxOutputTokens": 1024,
}


class GeminiError(Exception):
    """Any failure talking to Gemini, str(error) is safe to show the user"""


class GeminiAPIError(GeminiError):
    def __init__(self, version: str, status_code: int, status: str = "", message: str = ""):
        self.version = version or API_VERSIONS[0]
        self.status_code = status_code
        self.status = status
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        status = self.status
        if not status:
            try:
                status = HTTPStatus(self.status_code).phrase
            except ValueError:
                status = ""
        if self.message:
            return f"gemini API error ({self.version} {self.status_code} {status}): {self.message}"
        return f"gemini API error ({self.version} {self.status_code} {status})"

    @property
    def allows_fallback(self) -> bool:
        """Model missing or unable to generate content, try the next candidate"""
        if self.status_code == 404:
            return True
        return "not supported for generatecontent" in self.message.lower()

    @classmethod
    def from_response(cls, version: str, response: httpx.Response) -> "GeminiAPIError":
        try:
            error = (response.json() or {}).get("error") or {}
        except ValueError:
            error = {}
        if error.get("code") or error.get("message"):
            return cls(version, response.status_code, error.get("status", ""), error.get("message", ""))
        return cls(version, response.status_code, message=f"status {response.status_code}")


def candidate_models(preferred: Optional[str]) -> List[str]:
    """Preferred model first, then the fallbacks, without duplicates"""
    models = []
    for model in [preferred or ""] + FALLBACK_MODELS:
        model = model.strip()
        if model and model not in models:
            models.append(model)
    return models


def extract_text(payload: dict) -> str:
    """
    Text of the first candidate that has any

    Raises:
        GeminiError: prompt blocked, safety refusal or empty response
    """
    block_reason = (payload.get("promptFeedback") or {}).get("blockReason")
    if block_reason:
        raise GeminiError(f"gemini blocked the prompt ({block_reason.lower()})")

    for candidate in payload.get("candidates") or []:
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts).strip()
        if text:
            return text
        if (candidate.get("finishReason") or "").upper() == "SAFETY":
            raise GeminiError("gemini refused to answer due to safety settings")

    raise GeminiError("gemini returned an empty response")


class GeminiClient:
    """
    Tries each candidate model and API version until one answers

    Only "model not found" style errors move on to the next candidate. Any
    other error is raised immediately.
    """
    def __init__(self, preferred_model: str = DEFAULT_GEMINI_MODEL,
                 transport: Optional[httpx.AsyncBaseTransport] = None,
                 timeout: float = REQUEST_TIMEOUT_SECONDS):
        self.models = candidate_models(preferred_model)
        self.transport = transport
        self.timeout = timeout

    async def generate(self, api_key: str, message: str) -> str:
        last_error: Optional[GeminiError] = None
        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            for model in self.models:
                for version in API_VERSIONS:
                    try:
                        return await self._generate_once(client, api_key, message, model, version)
                    except GeminiAPIError as e:
                        if not e.allows_fallback:
                            raise
                        logger.warning("Gemini model %s (%s) unavailable, trying next: %s", model, version, e)
                        last_error = e

        if last_error is not None:
            raise last_error
        raise GeminiError("gemini returned an empty response")

    async def _generate_once(self, client: httpx.AsyncClient, api_key: str, message: str,
                             model: str, version: str) -> str:
        url = f"{GEMINI_BASE_URL}/{version}/models/{model}:generateContent"
        payload = {
            "contents": [{"role": "user", "parts": [{"text": message}]}],
            "generationConfig": GENERATION_CONFIG,
        }
        # Caps the whole attempt, body download included
        try:
            response = await asyncio.wait_for(
                client.post(url, params={"key": api_key}, json=payload),
                self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise GeminiError(f"gemini transport error: request timed out ({e.__class__.__name__})")
        except httpx.RequestError as e:
            raise GeminiError(f"gemini transport error: {e}")

        if response.status_code >= 400:
            raise GeminiAPIError.from_response(version, response)

        try:
            data = response.json()
        except ValueError as e:
            raise GeminiError(f"gemini parse error: {e}")
        return extract_text(data or {})
