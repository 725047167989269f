"""
name_heuristics.py
Best-effort guesses for the names used in a renegotiation draft.

Fallback order for the counterpart: document text, then the first risky clause,
then DEFAULT_COUNTERPART. For the author: the email's local part, then DEFAULT_AUTHOR.
"""
import re
from typing import Iterable, Optional

from core.schemas import RiskyClause

DEFAULT_COUNTERPART = "the company"
DEFAULT_AUTHOR = "your team"

# Two or more capitalized words on the same line, e.g. "Acme Widgets Limited".
CAPITALIZED_PHRASE = re.compile(r"\b[A-Z][a-z]+(?:[ \t]+[A-Z][a-z]+)+\b")


def find_capitalized_phrase(text: Optional[str]) -> Optional[str]:
    if not text:
        return None
    match = CAPITALIZED_PHRASE.search(text)
    return match.group(0) if match else None


def infer_counterpart_name(findings: Iterable, document_text: Optional[str] = None) -> str:
    name = find_capitalized_phrase(document_text)
    if name:
        return name
    first_risky = next((f for f in findings if isinstance(f, RiskyClause)), None)
    if first_risky:
        name = find_capitalized_phrase(first_risky.clause)
        if name:
            return name
    return DEFAULT_COUNTERPART


def infer_author_name(email: Optional[str]) -> str:
    """'jane.doe@example.com' -> 'Jane Doe'."""
    if not email or "@" not in email:
        return DEFAULT_AUTHOR
    local_part = email.strip().split("@", 1)[0]
    tokens = [t for t in local_part.split(".") if t]
    if not tokens:
        return DEFAULT_AUTHOR
    return " ".join(t[:1].upper() + t[1:] for t in tokens)
