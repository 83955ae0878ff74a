import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from learnify.ai.gemini_client import GeminiClient, GeminiError
from learnify.auth.permissions import Identity, get_current_identity
from learnify.config import Settings, get_settings
from learnify.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI Tutor"])


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    api_key: Optional[str] = Field(None, alias="apiKey")


class ChatResponse(BaseModel):
    response: str


def get_gemini_client(request: Request) -> GeminiClient:
    """Gemini client dependency"""
    return request.app.state.gemini


@router.post("/chat", response_model=ChatResponse)
async def chat(
    data: ChatRequest,
    identity: Identity = Depends(get_current_identity),
    settings: Settings = Depends(get_settings),
    gemini: GeminiClient = Depends(get_gemini_client),
):
    """
    Forward a message to Gemini and return its answer
    A per-request apiKey overrides the configured key
    """
    message = data.message.strip()
    if not message:
        raise ValidationError("message is required")

    api_key = (data.api_key or "").strip() or settings.gemini_api_key
    if not api_key:
        raise UpstreamError("AI provider key is not configured")

    try:
        answer = await gemini.generate(api_key, message)
    except GeminiError as e:
        logger.error("AI chat failed for user %s: %s", identity.user_id, e)
        raise UpstreamError(str(e))
    return ChatResponse(response=answer)
