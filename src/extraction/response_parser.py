"""
Tolerant parsing of model responses into validated tasks.

Models wrap their JSON in prose, markdown fences or return a bare object
instead of an array. The response goes through a short chain of text stages,
each returning the next candidate string or None when it does not apply.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from extraction.errors import NoValidTasksError, ResponseParseError
from reminder_ai.models import Task

logger = logging.getLogger(__name__)

Stage = Callable[[str], Optional[str]]

_CODE_FENCE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_ARRAY_START = re.compile(r"\[\s*\{")
_ARRAY_GREEDY = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")
_decoder = json.JSONDecoder()


def strip_code_fence(text: str) -> Optional[str]:
    """Inner content of the first ``` fenced block (optionally tagged json)."""
    match = _CODE_FENCE.search(text)
    if match is None:
        return None
    return match.group(1).strip()


def find_json_array(text: str) -> Optional[str]:
    """First `[ {...} ]` shaped substring.

    Prefers a span that actually decodes to a list; otherwise returns the
    greedy regex match and lets the JSON stage report the failure.
    """
    for match in _ARRAY_START.finditer(text):
        try:
            value, end = _decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        if isinstance(value, list):
            return text[match.start():end]
    greedy = _ARRAY_GREEDY.search(text)
    return greedy.group(0) if greedy else None


def find_json_object(text: str) -> Optional[str]:
    """First balanced `{...}` (string-aware)."""
    start = text.find("{")
    while start != -1:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end]
        start = text.find("{", start + 1)
    return None


def _balanced_end(text: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def wrap_first_object(text: str) -> Optional[str]:
    obj = find_json_object(text)
    return f"[{obj}]" if obj is not None else None


def extract_json_candidate(raw: str, context: str = "parse") -> str:
    text = raw.strip()

    fenced = strip_code_fence(text)
    if fenced is not None:
        text = fenced
        logger.info(f"[{context}] Extracted from code block")

    stages: List[tuple[str, Stage]] = [
        ("Found JSON array", find_json_array),
        ("Wrapped single object in array", wrap_first_object),
    ]
    for label, stage in stages:
        candidate = stage(text)
        if candidate is not None:
            logger.info(f"[{context}] {label}")
            return candidate
    return text


def validate_task(candidate: Any, context: str = "parse") -> Optional[Task]:
    """Return a Task, or None when the candidate has to be dropped.

    Only a missing/blank title (or an unusable structure) drops a record;
    bad dates are cleared by the Task model itself.
    """
    if not isinstance(candidate, dict):
        logger.warning(f"[{context}] Skipping non-object entry: {candidate!r}")
        return None
    title = candidate.get("title")
    if not isinstance(title, str) or not title.strip():
        logger.warning(f"[{context}] Skipping entry without title")
        return None
    try:
        return Task.model_validate(candidate)
    except ValidationError as e:
        logger.warning(f"[{context}] Skipping invalid entry: {e}")
        return None


def parse_task_response(raw: str, context: str = "parse") -> List[Task]:
    """Turn a raw model response into a non-empty list of tasks.

    Raises ResponseParseError when no JSON can be recovered and
    NoValidTasksError when nothing survives validation.
    """
    json_str = extract_json_candidate(raw, context)
    logger.info(f"[{context}] Parsing JSON: {json_str[:300]}...")

    try:
        result = json.loads(json_str)
    except json.JSONDecodeError:
        logger.error(f"[{context}] JSON parse failed")
        logger.error(f"[{context}] Attempted: {json_str[:500]}")
        raise ResponseParseError()

    candidates = result if isinstance(result, list) else [result]

    tasks = [t for t in (validate_task(c, context) for c in candidates) if t is not None]
    if not tasks:
        raise NoValidTasksError()

    logger.info(f"[{context}] Success: {len(tasks)} task(s) extracted")
    for i, task in enumerate(tasks, start=1):
        amount = f"${task.amount}" if task.amount else "none"
        logger.info(
            f'[{context}]   {i}. "{task.title}" due:{task.due_date or "none"} amount:{amount}'
        )
    return tasks
