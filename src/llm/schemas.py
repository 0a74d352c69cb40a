from __future__ import annotations
from typing import Optional, List
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Optional[str] = None
    content: Optional[str] = None
    # Reasoning-tuned models may put the answer here instead of `content`.
    reasoning_content: Optional[str] = None

    def effective_text(self) -> str:
        if self.content and self.content.strip():
            return self.content
        return self.reasoning_content or ""


class ChatChoice(BaseModel):
    message: ChatMessage
    finish_reason: Optional[str] = None
    index: Optional[int] = None


class Usage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    choices: List[ChatChoice] = Field(default_factory=list)
    usage: Optional[Usage] = None


class ModelInfo(BaseModel):
    id: str


class ModelList(BaseModel):
    data: List[ModelInfo] = Field(default_factory=list)
