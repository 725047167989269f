from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.schemas import InputError

DEFAULT_TASK_TITLE = "Contract Review & Renegotiation Task"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

class EffortLevel(str, Enum):
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"


class TaskConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    due_date: date = Field(default_factory=date.today)
    status: str = "Not started"
    assignee_email: Optional[str] = None
    priority: Priority = Priority.HIGH
    task_type: Tuple[str, ...] = ("Polish",)  # multi-select; caller order, no duplicates
    effort_level: EffortLevel = EffortLevel.MEDIUM
    include_draft: bool = False
    title: str = DEFAULT_TASK_TITLE

    @field_validator("status", "title")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()

    @field_validator("assignee_email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        if not v:
            return None
        if "@" not in v:
            raise ValueError(f"not an email address: {v!r}")
        return v

    @field_validator("task_type", mode="before")
    @classmethod
    def dedupe_task_types(cls, v):
        if isinstance(v, str):
            v = [v]
        seen = []
        for name in v:
            name = str(name).strip()
            if name and name not in seen:
                seen.append(name)
        if not seen:
            raise ValueError("at least one task type is required")
        return tuple(seen)

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "TaskConfig":
        """Build a config from loose caller input, dropping unset (None) options."""
        options = {k: v for k, v in (options or {}).items() if v is not None}
        try:
            return cls(**options)
        except ValidationError as e:
            raise InputError(f"Invalid task configuration: {e}") from e
