import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, List, Optional

from extraction.document_text import DocumentTextExtractor, TextExtractor
from extraction.errors import ExtractionError
from extraction.prompts import (
    PROMPT_VERSION,
    DOCUMENT_USER_PROMPT,
    DateContext,
    build_document_prompt,
    build_document_text_user_prompt,
    build_reminder_prompt,
    build_text_user_prompt,
    is_simple_input,
)
from extraction.response_parser import parse_task_response
from llm.errors import FailureKind, LLMError, classify_failure
from llm.llm_client import LLMClient
from reminder_ai.models import Message, Task

logger = logging.getLogger(__name__)

# Plain-text extraction runs cooler and shorter than the user's defaults.
TEXT_TEMPERATURE = 0.1
TEXT_MAX_TOKENS = 1500


@dataclass
class DocumentResult:
    path: str
    tasks: List[Task] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TaskExtractor:
    """Turns free text or a document into validated tasks.

    Documents are first sent to the model as attachments; if the model rejects
    multimodal input, the document's text is extracted locally and sent as a
    plain prompt instead. No retries and no caching across calls.
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        text_extractor: Optional[TextExtractor] = None,
        today: Optional[Callable[[], date]] = None,
        on_fallback: Optional[Callable[[str], None]] = None,
    ):
        self.llm = llm_client or LLMClient()
        self.text_extractor = text_extractor or DocumentTextExtractor()
        self._today = today or date.today
        self._on_fallback = on_fallback

    def _date_context(self) -> DateContext:
        return DateContext.for_today(self._today())

    async def extract(self, text: str) -> List[Task]:
        ctx = self._date_context()
        logger.info(f'[extract] Input: "{text}"')
        logger.info(f"[extract] Model: {self.llm.model or 'default'}")
        logger.info(f"[extract] Today: {ctx.today_str} (prompts {PROMPT_VERSION})")
        logger.debug(f"[extract] Simple input: {is_simple_input(text)}")

        messages = [
            Message.system(build_reminder_prompt(text, ctx)),
            Message.user(build_text_user_prompt(text)),
        ]
        try:
            response = await self.llm.complete(
                messages, temperature=TEXT_TEMPERATURE, max_tokens=TEXT_MAX_TOKENS
            )
        except LLMError as e:
            logger.error(f"[extract] Error: {e}")
            raise
        return parse_task_response(response, "extract")

    async def extract_document(self, path: str) -> List[Task]:
        ctx = self._date_context()
        system_prompt = build_document_prompt(ctx)
        logger.info(f"[extract_document] Processing: {path}")
        logger.info(f"[extract_document] Model: {self.llm.model or 'default'}")

        try:
            logger.info("[extract_document] Attempting native document processing...")
            response = await self.llm.complete_with_document(
                path, DOCUMENT_USER_PROMPT, system_prompt
            )
        except LLMError as e:
            if classify_failure(e) is not FailureKind.CAPABILITY:
                logger.error(f"[extract_document] Error: {e}")
                raise
            logger.info(
                "[extract_document] Model doesn't support document input, falling back to text extraction..."
            )
            if self._on_fallback is not None:
                self._on_fallback(path)
            response = await self._extract_via_text(path, system_prompt)

        return parse_task_response(response, "extract_document")

    async def _extract_via_text(self, path: str, system_prompt: str) -> str:
        document_text = await self.text_extractor.extract_text(path)
        logger.info(f"[extract_document] Extracted {len(document_text)} chars of text")
        messages = [
            Message.system(system_prompt),
            Message.user(build_document_text_user_prompt(document_text)),
        ]
        return await self.llm.complete(messages)

    async def extract_documents(self, paths: Iterable[str]) -> List[DocumentResult]:
        """Process documents one at a time, in order.

        Every path is attempted; a failure is recorded on its result and the
        caller decides what to do with it.
        """
        results: List[DocumentResult] = []
        for path in paths:
            try:
                tasks = await self.extract_document(path)
                results.append(DocumentResult(path=path, tasks=tasks))
            except (ExtractionError, LLMError, OSError) as e:
                logger.error(f"[extract_documents] Failed for {path}: {e}")
                results.append(DocumentResult(path=path, error=str(e)))
        return results
