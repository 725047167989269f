# core/schemas.py

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator

MAX_FRAGMENT_LENGTH = 400
TRUNCATION_MARKER = "..."
MAX_BLOCK_TEXT_LENGTH = 2000


# --- Custom Exceptions for Schema Errors ---
class SchemaValidationError(ValueError):
    """Raised when a schema validation fails."""
    pass

class InputError(ValueError):
    """Raised for empty document text or malformed caller configuration."""
    pass


def truncate_text(text: str, limit: int = MAX_FRAGMENT_LENGTH) -> str:
    """First `limit` characters of `text`, with a marker when anything was cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


class ParseFailureReason(str, Enum):
    CHUNK_UNPARSEABLE = "ChunkUnparseable"
    EMPTY_ARRAY = "EmptyArray"
    NO_STRUCTURE_FOUND = "NoStructureFound"

class AnalysisOutcome(str, Enum):
    SUCCESS = "Success"
    FAILURE = "Failure"


# --- Findings ---
class RiskyClause(BaseModel):
    """A contract clause the model flagged, with its risk and a remediation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["risky_clause"] = "risky_clause"
    clause: str
    risk: str
    suggestion: str

    @field_validator("clause", "risk", "suggestion", mode="before")
    @classmethod
    def must_be_non_blank(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise SchemaValidationError("clause, risk and suggestion must be non-empty strings.")
        return v.strip()

class NonContractNote(BaseModel):
    """Why the document was not treated as a contract (or a parser placeholder)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["non_contract_note"] = "non_contract_note"
    reason: str
    summary: str = ""
    reason_code: Optional[ParseFailureReason] = None

class UnparsedFragment(BaseModel):
    """Original reply text kept when a record could not be decoded."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["unparsed_fragment"] = "unparsed_fragment"
    raw_text: str
    reason_code: ParseFailureReason = ParseFailureReason.CHUNK_UNPARSEABLE

    @field_validator("raw_text", mode="before")
    @classmethod
    def bound_length(cls, v):
        return truncate_text(str(v))


Finding = Annotated[
    Union[RiskyClause, NonContractNote, UnparsedFragment],
    Field(discriminator="kind"),
]

_finding_adapter = TypeAdapter(Finding)


def finding_from_dict(data: Dict[str, Any]) -> Union[RiskyClause, NonContractNote, UnparsedFragment]:
    """Rebuild a finding from its `model_dump()`."""
    return _finding_adapter.validate_python(data)


class AnalysisResult(BaseModel):
    """
    Outcome of one document submission:
      – outcome: Success / Failure
      – message: human-readable status
      – findings: ordered findings, None iff the analysis failed
    """

    model_config = ConfigDict(frozen=True)

    outcome: AnalysisOutcome
    message: str
    findings: Optional[Tuple[Finding, ...]] = None

    @model_validator(mode="after")
    def findings_match_outcome(self):
        if self.outcome is AnalysisOutcome.FAILURE and self.findings is not None:
            raise SchemaValidationError("A failed analysis carries no findings.")
        if self.outcome is AnalysisOutcome.SUCCESS and not self.findings:
            raise SchemaValidationError("A successful analysis needs at least one finding.")
        return self

    @classmethod
    def success(cls, findings: List[Finding], message: str = "Analysis completed") -> "AnalysisResult":
        return cls(outcome=AnalysisOutcome.SUCCESS, message=message, findings=tuple(findings))

    @classmethod
    def failure(cls, message: str) -> "AnalysisResult":
        return cls(outcome=AnalysisOutcome.FAILURE, message=message, findings=None)

    @property
    def succeeded(self) -> bool:
        return self.outcome is AnalysisOutcome.SUCCESS

    @property
    def risky_clauses(self) -> List[RiskyClause]:
        return [f for f in self.findings or () if isinstance(f, RiskyClause)]


# --- Task record content ---
class BlockType(str, Enum):
    HEADING = "heading_2"
    PARAGRAPH = "paragraph"
    BULLETED_LIST_ITEM = "bulleted_list_item"

class ContentBlock(BaseModel):
    """One node of the page body sent to the tracking service."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    block_type: BlockType
    segments: Tuple[str, ...] = Field(..., min_length=1)

    @field_validator("segments")
    @classmethod
    def segments_fit_block_limit(cls, v):
        for segment in v:
            if len(segment) > MAX_BLOCK_TEXT_LENGTH:
                raise SchemaValidationError(
                    f"Block text segments are limited to {MAX_BLOCK_TEXT_LENGTH} characters, got {len(segment)}."
                )
        return v

    @property
    def text(self) -> str:
        return "".join(self.segments)

    def to_notion(self) -> Dict[str, Any]:
        key = self.block_type.value
        return {
            "object": "block",
            "type": key,
            key: {
                "rich_text": [
                    {"type": "text", "text": {"content": segment}}
                    for segment in self.segments
                ]
            },
        }

class TaskRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    children: Tuple[ContentBlock, ...]
    properties: Dict[str, Any]

    def notion_children(self) -> List[Dict[str, Any]]:
        return [block.to_notion() for block in self.children]


# --- Submission reporting ---
class TaskCreationStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    created: bool
    message: str
    page_id: Optional[str] = None
    url: Optional[str] = None


class ReviewSubmission(BaseModel):
    """Analysis result plus the secondary draft/task statuses reported beside it."""

    model_config = ConfigDict(frozen=True)

    analysis: AnalysisResult
    draft: Optional[str] = None
    draft_error: Optional[str] = None
    task: Optional[TaskCreationStatus] = None
