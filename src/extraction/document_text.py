"""
Document text extraction.

Used when the model cannot read a document natively. PDFs go through the
text layer first (pdfplumber) and fall back to OCR (pdf2image + Tesseract);
images go straight to OCR.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence

from extraction.errors import DocumentExtractionError
from reminder_ai.files import working_copy

logger = logging.getLogger(__name__)

MAX_TEXT_CHARS = 50_000
TRUNCATION_MARKER = "\n\n[... truncated ...]"
EXTRACT_TIMEOUT_S = float(os.getenv("DOCUMENT_EXTRACT_TIMEOUT_S", "60"))

IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif"}

# Homebrew (Apple Silicon, Intel) and system locations
TESSERACT_PATHS = [
    "/opt/homebrew/bin/tesseract",
    "/usr/local/bin/tesseract",
    "/usr/bin/tesseract",
]
POPPLER_PATHS = [
    "/opt/homebrew/bin",
    "/usr/local/bin",
]

Strategy = Callable[[Path], str]


class TextExtractor(Protocol):
    async def extract_text(self, path: str) -> str: ...


def truncate_text(text: str, max_chars: int = MAX_TEXT_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    logger.info(f"Truncating from {len(text)} to {max_chars} chars")
    return text[:max_chars] + TRUNCATION_MARKER


def _configure_tesseract() -> None:
    import pytesseract

    for candidate in TESSERACT_PATHS:
        if os.path.exists(candidate):
            pytesseract.pytesseract.tesseract_cmd = candidate
            return


def _poppler_path() -> Optional[str]:
    for candidate in POPPLER_PATHS:
        if os.path.exists(os.path.join(candidate, "pdftoppm")):
            return candidate
    return None


def extract_with_pdfplumber(path: Path) -> str:
    """Text layer of a PDF; fails for image-only (scanned) documents."""
    import pdfplumber

    pages: List[str] = []
    with pdfplumber.open(path) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                pages.append(page_text)

    text = "\n".join(pages).strip()
    if not text:
        raise DocumentExtractionError("No text in PDF - may be image-based")
    return text


def extract_with_ocr(path: Path, timeout_s: float = EXTRACT_TIMEOUT_S) -> str:
    """Render PDF pages to images and OCR them."""
    import pytesseract
    from pdf2image import convert_from_path

    _configure_tesseract()
    images = convert_from_path(str(path), timeout=timeout_s, poppler_path=_poppler_path())
    if not images:
        raise DocumentExtractionError("No images generated from PDF")

    pages = []
    for img in images:
        page_text = pytesseract.image_to_string(img, timeout=timeout_s)
        if page_text.strip():
            pages.append(page_text)

    text = "\n".join(pages).strip()
    if not text:
        raise DocumentExtractionError("No text recognized via OCR")
    return text


def extract_image_with_ocr(path: Path, timeout_s: float = EXTRACT_TIMEOUT_S) -> str:
    import pytesseract
    from PIL import Image

    _configure_tesseract()
    with Image.open(path) as img:
        text = pytesseract.image_to_string(img, timeout=timeout_s).strip()
    if not text:
        raise DocumentExtractionError("No text recognized via OCR")
    return text


class DocumentTextExtractor:
    """Layered text extraction with a hard timeout per attempt.

    Strategies are tried in order; the first non-empty result wins. A timeout
    ends the whole extraction instead of moving on to the next strategy.
    """

    def __init__(
        self,
        pdf_strategies: Optional[Sequence[Strategy]] = None,
        image_strategies: Optional[Sequence[Strategy]] = None,
        timeout_s: float = EXTRACT_TIMEOUT_S,
        max_chars: int = MAX_TEXT_CHARS,
    ):
        self.pdf_strategies = list(pdf_strategies or (extract_with_pdfplumber, extract_with_ocr))
        self.image_strategies = list(image_strategies or (extract_image_with_ocr,))
        self.timeout_s = timeout_s
        self.max_chars = max_chars

    def _strategies_for(self, path: Path) -> List[Strategy]:
        suffix = path.suffix.lower()
        if suffix == ".pdf":
            return self.pdf_strategies
        if suffix in IMAGE_SUFFIXES:
            return self.image_strategies
        raise DocumentExtractionError(f"Unsupported document type: {path.name}")

    async def extract_text(self, path: str) -> str:
        logger.info(f"Extracting text from: {path}")
        strategies = self._strategies_for(Path(path))

        with working_copy(path) as working:
            for strategy in strategies:
                name = getattr(strategy, "__name__", repr(strategy))
                try:
                    text = await asyncio.wait_for(
                        asyncio.to_thread(strategy, working), timeout=self.timeout_s
                    )
                except asyncio.TimeoutError:
                    logger.error(f"{name} timed out after {self.timeout_s}s")
                    raise DocumentExtractionError(
                        f"Text extraction timed out after {self.timeout_s:.0f}s"
                    )
                except Exception as e:
                    logger.warning(f"{name} failed: {e}")
                    continue

                if text and text.strip():
                    text = truncate_text(text.strip(), self.max_chars)
                    logger.info(f"Extracted {len(text)} chars via {name}")
                    return text
                logger.warning(f"{name} returned no text")

        logger.error(f"All extraction methods failed for {path}")
        raise DocumentExtractionError(
            "Failed to extract text from document. Make sure Tesseract is installed for OCR support."
        )

    async def extract_many(self, paths: Iterable[str]) -> Dict[str, str]:
        """Sequentially extract several documents; failures become `ERROR: ...` entries."""
        results: Dict[str, str] = {}
        for path in paths:
            try:
                results[path] = await self.extract_text(path)
            except DocumentExtractionError as e:
                logger.error(f"Extraction failed for {path}: {e}")
                results[path] = f"ERROR: {e}"
        return results
