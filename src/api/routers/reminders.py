import logging
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from api.backend import BackendAPI, NoTasksExtracted
from api.dependencies import get_backend
from api.metrics import (
    REMINDERS_CREATED_TOTAL,
    REQUEST_LATENCY_SECONDS,
    REQUESTS_TOTAL,
    TASKS_EXTRACTED_TOTAL,
)
from extraction.errors import ExtractionError
from integration.reminders_store import ReminderStoreError
from llm.errors import LLMAPIError, LLMConnectionError, LLMError

router = APIRouter()
logger = logging.getLogger(__name__)


class TextIn(BaseModel):
    text: str
    list_name: Optional[str] = None
    create: bool = True


class DocumentsIn(BaseModel):
    paths: List[str]
    list_name: Optional[str] = None
    create: bool = True


def to_http_error(e: Exception) -> HTTPException:
    """Map core failures onto HTTP statuses for the caller."""
    if isinstance(e, LLMConnectionError):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, LLMAPIError):
        return HTTPException(
            status_code=502,
            detail={"message": str(e), "status_code": e.status_code},
        )
    if isinstance(e, NoTasksExtracted):
        return HTTPException(status_code=422, detail={"message": str(e), "failures": e.failures})
    if isinstance(e, (ExtractionError, LLMError)):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, ReminderStoreError):
        return HTTPException(
            status_code=502, detail={"message": str(e), "created_ids": e.created_ids}
        )
    if isinstance(e, (ValueError, OSError)):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=500, detail="Unknown error occurred")


def _record(endpoint: str, status: str, start: float, result: Optional[dict] = None) -> None:
    # Prometheus counters (best-effort)
    try:
        REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)
        if result:
            TASKS_EXTRACTED_TOTAL.inc(result.get("tasks_processed", 0))
            REMINDERS_CREATED_TOTAL.inc(len(result.get("reminder_ids", [])))
    except Exception:
        pass


@router.post("/reminders/text")
async def create_from_text(payload: TextIn, backend: BackendAPI = Depends(get_backend)) -> dict:
    start = time.time()
    logger.info(f"Received reminder text: {payload.text[:50]}...")
    try:
        result = await backend.submit_text(
            payload.text, list_name=payload.list_name, create=payload.create
        )
    except Exception as e:
        logger.error(f"Error creating reminder: {e}")
        _record("/reminders/text", "failed", start)
        raise to_http_error(e)

    _record("/reminders/text", "processed", start, result)
    return {"status": "processed", **result}


@router.post("/reminders/documents")
async def create_from_documents(
    payload: DocumentsIn, backend: BackendAPI = Depends(get_backend)
) -> dict:
    start = time.time()
    logger.info(f"Processing {len(payload.paths)} document(s)")
    try:
        result = await backend.submit_documents(
            payload.paths, list_name=payload.list_name, create=payload.create
        )
    except Exception as e:
        logger.error(f"Error processing documents: {e}")
        _record("/reminders/documents", "failed", start)
        raise to_http_error(e)

    status = "partial" if result.get("failures") else "processed"
    _record("/reminders/documents", status, start, result)
    return {"status": status, **result}
