from __future__ import annotations

import logging
import re
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MIN_DUE_YEAR = 2020
MAX_DUE_YEAR = 2100

RepeatInterval = Literal["daily", "weekly", "monthly", "yearly"]
REPEAT_INTERVALS = {"daily", "weekly", "monthly", "yearly"}
TRUE_VALUES = {"true", "yes", "y", "1"}
FALSE_VALUES = {"false", "no", "n", "0"}


class Task(BaseModel):
    """One reminder / payment obligation extracted from a model response.

    Field names follow the JSON the model is asked to produce (``dueDate``,
    ``dueTime``...), python attributes are snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    title: str = Field(..., min_length=1)
    notes: Optional[str] = None
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    due_time: Optional[str] = Field(default=None, alias="dueTime")
    amount: Optional[float] = None
    repeat_interval: Optional[RepeatInterval] = Field(default=None, alias="repeatInterval")
    is_invoice: Optional[bool] = Field(default=None, alias="isInvoice")
    is_bill: Optional[bool] = Field(default=None, alias="isBill")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v

    @field_validator("due_date", mode="before")
    @classmethod
    def clear_bad_due_date(cls, v: Any) -> Optional[str]:
        # A bad date never drops the task, it only clears the field.
        if v is None or v == "":
            return None
        if not isinstance(v, str) or not DATE_PATTERN.match(v):
            logger.warning(f"Invalid date format: {v}, removing")
            return None
        year = int(v.split("-")[0])
        if year < MIN_DUE_YEAR or year > MAX_DUE_YEAR:
            logger.warning(f"Unreasonable year: {year}, removing date")
            return None
        return v

    @field_validator("due_time", "notes", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v)
        return v if v.strip() else None

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, v: Any) -> Optional[float]:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return float(v)
        cleaned = str(v).replace("$", "").replace(",", "").strip()
        try:
            return float(cleaned)
        except ValueError:
            logger.warning(f"Unparseable amount: {v}, removing")
            return None

    @field_validator("is_invoice", "is_bill", mode="before")
    @classmethod
    def parse_flag(cls, v: Any) -> Optional[bool]:
        if v is None or isinstance(v, bool):
            return v
        lowered = str(v).strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        if lowered:
            logger.warning(f"Unparseable flag: {v}, removing")
        return None

    @field_validator("repeat_interval", mode="before")
    @classmethod
    def known_interval(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v2 = str(v).strip().lower()
        if v2 not in REPEAT_INTERVALS:
            if v2:
                logger.warning(f"Unknown repeat interval: {v}, removing")
            return None
        return v2

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageUrl(BaseModel):
    url: str


class ImageUrlPart(BaseModel):
    type: Literal["image_url"] = "image_url"
    image_url: ImageUrl


MessageContent = Union[str, List[Union[TextPart, ImageUrlPart]]]


class Message(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: MessageContent

    @classmethod
    def system(cls, text: str) -> "Message":
        return cls(role="system", content=text)

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(role="user", content=text)


DEFAULT_API_URL = "http://localhost:1337/v1/chat/completions"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000
DEFAULT_REMINDER_LIST = "To Do"


class Preferences(BaseModel):
    """User-level settings for the local model endpoint and the reminders list."""

    api_url: str = DEFAULT_API_URL
    api_key: str = ""
    default_model: str = ""
    temperature: float = Field(DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    max_tokens: int = Field(DEFAULT_MAX_TOKENS, gt=0)
    reminder_list: str = DEFAULT_REMINDER_LIST

    @field_validator("api_url", mode="before")
    @classmethod
    def default_api_url(cls, v: Any) -> str:
        return str(v).strip() if v and str(v).strip() else DEFAULT_API_URL

    @field_validator("reminder_list", mode="before")
    @classmethod
    def default_list(cls, v: Any) -> str:
        return str(v).strip() if v and str(v).strip() else DEFAULT_REMINDER_LIST

    @field_validator("temperature", mode="before")
    @classmethod
    def parse_temperature(cls, v: Any) -> float:
        try:
            value = float(str(v).strip())
        except (TypeError, ValueError):
            return DEFAULT_TEMPERATURE
        if not 0.0 <= value <= 1.0:
            logger.warning(f"Temperature {value} out of range, using {DEFAULT_TEMPERATURE}")
            return DEFAULT_TEMPERATURE
        return value

    @field_validator("max_tokens", mode="before")
    @classmethod
    def parse_max_tokens(cls, v: Any) -> int:
        try:
            value = int(str(v).strip())
        except (TypeError, ValueError):
            return DEFAULT_MAX_TOKENS
        if value <= 0:
            logger.warning(f"max_tokens {value} must be positive, using {DEFAULT_MAX_TOKENS}")
            return DEFAULT_MAX_TOKENS
        return value

    @property
    def models_url(self) -> str:
        base = self.api_url.rstrip("/")
        if base.endswith("/chat/completions"):
            base = base[: -len("/chat/completions")]
        return f"{base}/models"
