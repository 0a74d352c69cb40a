import os
import logging
from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.dependencies import get_llm_client, get_preferences
from llm.llm_client import LLMClient
from reminder_ai.models import Preferences

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(prefs: Preferences = Depends(get_preferences)) -> dict:
    """Health check; does not call the model endpoint."""
    return {
        "status": "healthy",
        "provider": os.getenv("LLM_PROVIDER", "jan"),
        "api_url": prefs.api_url,
        "reminder_list": prefs.reminder_list,
    }


@router.get("/models")
async def list_models(client: LLMClient = Depends(get_llm_client)) -> dict:
    """Models advertised by the endpoint (empty when it is unreachable)."""
    models = await client.list_models()
    return {"models": models, "default_model": client.model}


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
