"""
response_parser.py
Turns a free-text model reply into an ordered, non-empty list of findings.

Extraction cascade, each step only tried when the previous one produced nothing:
  1. decode the first bracket-delimited array in the reply;
  2. recover record-like chunks one by one;
  3. fall back to a single placeholder note carrying the start of the reply.
"""
import json
import logging
import re
from itertools import islice
from typing import Any, List, Optional

from pydantic import ValidationError

from core.schemas import (
    Finding, NonContractNote, ParseFailureReason, RiskyClause, UnparsedFragment,
    truncate_text,
)

logger = logging.getLogger(__name__)

RECORD_ARRAY_START = re.compile(r"\[\s*\{")
MAX_ARRAY_CANDIDATES = 20
RECORD_PATTERN = re.compile(r"\{[\s\S]*?(?=,\s*\{|\]\s*(?:```)?\s*\Z|\Z)")
FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
TRAILING_NOISE = re.compile(r"(?:\s|```|\])+\Z")

UNPARSEABLE_REASON = "Unable to parse response"
EMPTY_REASON = "Analysis returned empty"
NOT_A_CONTRACT_REASON = "Document is not a contract"
UNRECOGNIZED_ENTRY_REASON = "Unrecognized analysis entry"
UNSTRUCTURED_ENTRY_REASON = "Unstructured analysis entry"

_NOTHING = object()


def parse_findings(raw_reply: Optional[str]) -> List[Finding]:
    """
    Parse a model reply into findings.

    Never raises and never returns an empty list: whatever cannot be decoded is
    kept as an UnparsedFragment or summarized in a single NonContractNote.
    """
    raw_reply = raw_reply or ""
    try:
        array = _decode_array(raw_reply)
        if array is not _NOTHING:
            if array:
                return [_finding_from_element(element) for element in array]
            logger.warning("Model returned an empty analysis array")
            return [_placeholder(raw_reply, EMPTY_REASON, ParseFailureReason.EMPTY_ARRAY)]

        logger.warning("No decodable JSON array in reply, recovering records. Raw reply: %s", raw_reply)
        recovered = _recover_records(raw_reply)
        if recovered:
            return recovered

        logger.warning("No structure found in reply. Raw reply: %s", raw_reply)
        return [_placeholder(raw_reply, UNPARSEABLE_REASON, ParseFailureReason.NO_STRUCTURE_FOUND)]

    except Exception as e:
        logger.error("Unexpected parser failure: %s. Raw reply: %s", e, raw_reply, exc_info=True)
        return [_placeholder(raw_reply, UNPARSEABLE_REASON, ParseFailureReason.NO_STRUCTURE_FOUND)]


def _placeholder(raw_reply: str, reason: str, code: ParseFailureReason) -> NonContractNote:
    return NonContractNote(reason=reason, summary=truncate_text(raw_reply), reason_code=code)


# --- Step 1: whole array ---
def _decode_array(raw_reply: str) -> Any:
    """The first array in the reply as a list, or _NOTHING when none decodes."""
    start, end = raw_reply.find("["), raw_reply.rfind("]")
    if start == -1 or end < start:
        return _NOTHING

    candidate = FENCE_PATTERN.sub("", raw_reply[start:end + 1]).strip()
    value = _loads(candidate)
    if isinstance(value, list):
        return value

    # Prose around the array (possibly with its own brackets): take the first
    # array of records that decodes on its own.
    decoder = json.JSONDecoder()
    for match in islice(RECORD_ARRAY_START.finditer(raw_reply), MAX_ARRAY_CANDIDATES):
        try:
            value, _ = decoder.raw_decode(raw_reply, match.start())
        except (ValueError, RecursionError):
            continue
        if isinstance(value, list) and any(isinstance(item, dict) for item in value):
            return value
    return _NOTHING


def _finding_from_element(element: Any) -> Finding:
    if not isinstance(element, dict):
        return NonContractNote(
            reason=UNSTRUCTURED_ENTRY_REASON,
            summary=truncate_text(_as_text(element)),
        )

    risky = _risky_clause(element)
    if risky:
        return risky

    if element.get("isContract") is False:
        return NonContractNote(
            reason=_as_text(element.get("reason")) or NOT_A_CONTRACT_REASON,
            summary=_as_text(element.get("summary")),
        )

    if "clause" in element:
        # Clause without a complete risk/suggestion pair is never treated as risky.
        return UnparsedFragment(raw_text=_dump(element), reason_code=ParseFailureReason.CHUNK_UNPARSEABLE)

    reason = next(
        (_as_text(element.get(key)) for key in ("reason", "error", "message") if _as_text(element.get(key))),
        UNRECOGNIZED_ENTRY_REASON,
    )
    return NonContractNote(reason=reason, summary=truncate_text(_dump(element)))


# --- Step 2: record-by-record ---
def _recover_records(raw_reply: str) -> List[Finding]:
    findings: List[Finding] = []
    for chunk in RECORD_PATTERN.findall(raw_reply):
        chunk = TRAILING_NOISE.sub("", chunk)
        fixed = chunk if chunk.endswith("}") else chunk + "}"
        record = _loads(fixed)
        risky = _risky_clause(record) if isinstance(record, dict) else None
        if risky:
            findings.append(risky)
        else:
            logger.debug("Unparseable record chunk: %s", chunk)
            findings.append(UnparsedFragment(raw_text=chunk, reason_code=ParseFailureReason.CHUNK_UNPARSEABLE))
    return findings


# --- helpers ---
def _risky_clause(record: dict) -> Optional[RiskyClause]:
    try:
        return RiskyClause(
            clause=record.get("clause"),
            risk=record.get("risk"),
            suggestion=record.get("suggestion"),
        )
    except ValidationError:
        return None


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return _NOTHING


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return _dump(value)


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)
