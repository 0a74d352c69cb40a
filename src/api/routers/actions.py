import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.dependencies import get_llm_client, get_text_extractor
from api.routers.reminders import to_http_error
from extraction.document_text import DocumentTextExtractor
from llm.llm_client import LLMClient
from reminder_ai.files import normalize_path
from text_actions.quick_actions import (
    QUICK_ACTIONS,
    process_documents,
    run_quick_action,
    summarize_documents,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class ActionIn(BaseModel):
    text: str


class DocumentPromptIn(BaseModel):
    paths: List[str]
    prompt: Optional[str] = None


@router.get("/actions")
async def list_actions() -> dict:
    return {
        "actions": [
            {"id": a.id, "title": a.title, "description": a.description}
            for a in QUICK_ACTIONS.values()
        ]
    }


@router.post("/actions/{action_id}")
async def run_action(
    action_id: str, payload: ActionIn, client: LLMClient = Depends(get_llm_client)
) -> dict:
    if action_id not in QUICK_ACTIONS:
        raise HTTPException(status_code=404, detail=f"Unknown action: {action_id}")
    try:
        result = await run_quick_action(client, action_id, payload.text)
    except Exception as e:
        logger.error(f"Action '{action_id}' failed: {e}")
        raise to_http_error(e)
    return {"action": action_id, "result": result}


@router.post("/documents/process")
async def process(
    payload: DocumentPromptIn, client: LLMClient = Depends(get_llm_client)
) -> dict:
    """Summarize documents, or run a custom prompt over them when one is given."""
    paths = [normalize_path(p) for p in payload.paths if p.strip()]
    if not paths:
        raise HTTPException(status_code=400, detail="Please select at least one document")
    try:
        if payload.prompt is None:
            result = await summarize_documents(client, paths)
        else:
            result = await process_documents(client, paths, payload.prompt)
    except Exception as e:
        logger.error(f"Document processing failed: {e}")
        raise to_http_error(e)
    return {"documents": len(paths), "result": result}


@router.post("/documents/text")
async def document_text(
    payload: DocumentPromptIn,
    extractor: DocumentTextExtractor = Depends(get_text_extractor),
) -> dict:
    """Locally extracted text per document; failures come back as `ERROR: ...` strings."""
    paths = [normalize_path(p) for p in payload.paths if p.strip()]
    if not paths:
        raise HTTPException(status_code=400, detail="Please select at least one document")
    return {"documents": await extractor.extract_many(paths)}
