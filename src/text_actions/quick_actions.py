from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

from llm.llm_client import LLMClient
from reminder_ai.models import Message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuickAction:
    id: str
    title: str
    prompt: str
    description: str


QUICK_ACTIONS: Dict[str, QuickAction] = {
    a.id: a
    for a in [
        QuickAction("summarize", "Summarize", "Summarize this text concisely:", "Create a brief summary"),
        QuickAction(
            "improve",
            "Improve Writing",
            "Improve the writing of this text while maintaining its meaning:",
            "Enhance clarity and flow",
        ),
        QuickAction(
            "grammar",
            "Fix Grammar",
            "Fix any grammar and spelling errors in this text:",
            "Correct errors and typos",
        ),
        QuickAction(
            "professional",
            "Make Professional",
            "Rewrite this text in a professional tone:",
            "Convert to business language",
        ),
        QuickAction(
            "casual",
            "Make Casual",
            "Rewrite this text in a casual, friendly tone:",
            "Simplify and lighten the tone",
        ),
        QuickAction(
            "expand",
            "Expand",
            "Expand on this text with more details and examples:",
            "Add more information",
        ),
        QuickAction(
            "shorten",
            "Shorten",
            "Make this text more concise while keeping key points:",
            "Reduce length",
        ),
        QuickAction("explain", "Explain", "Explain this text in simple terms:", "Simplify complex concepts"),
        QuickAction("translate-spanish", "Translate to Spanish", "Translate this text to Spanish:", "Convert to Spanish"),
        QuickAction(
            "bullet-points",
            "Convert to Bullet Points",
            "Convert this text into clear bullet points:",
            "Create a bulleted list",
        ),
    ]
}

SUMMARIZE_DOCUMENT_PROMPT = (
    "Summarize this document concisely. Include the main points, key information, "
    "and any important details."
)


def format_for_display(text: str) -> str:
    return re.sub(r"\n\n+", "\n\n", text.strip())


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


async def run_quick_action(client: LLMClient, action_id: str, text: str) -> str:
    """Apply one of the canned prompts to `text`. Raises KeyError for unknown ids."""
    action = QUICK_ACTIONS[action_id]
    if not text.strip():
        raise ValueError("No text to process")
    logger.info(f"Running quick action '{action.id}' on {len(text)} chars")
    response = await client.complete([Message.user(f"{action.prompt}\n\n{text}")])
    return format_for_display(response)


async def process_documents(client: LLMClient, paths: Sequence[str], prompt: str) -> str:
    """Run one prompt over each document in turn and join the answers.

    With several documents each answer gets a `## <file name>` header and the
    sections are separated by horizontal rules.
    """
    if not prompt.strip():
        raise ValueError("Please enter a prompt")

    sections: List[str] = []
    for path in paths:
        result = await client.complete_with_document(path, prompt)
        if len(paths) > 1:
            sections.append(f"## {Path(path).name}\n\n{result}")
        else:
            sections.append(result)
    return "\n\n---\n\n".join(sections)


async def summarize_documents(client: LLMClient, paths: Sequence[str]) -> str:
    return await process_documents(client, paths, SUMMARIZE_DOCUMENT_PROMPT)
