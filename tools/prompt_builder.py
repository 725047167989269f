"""
prompt_builder.py
Fixed instruction templates for the two model tasks: contract risk analysis and
renegotiation-draft writing. Pure functions; document text and findings are
embedded verbatim.
"""
from typing import Iterable
from langchain_core.prompts import PromptTemplate

from core.schemas import RiskyClause

ANALYSIS_TEMPLATE = PromptTemplate.from_template(
    """You are a legal expert who reviews contracts and documents for freelancers and startups.
Analyze the following text and determine whether it is a contract.

If it is a contract, identify every potentially risky clause. For each one, give a brief
plain-English explanation of the risk and suggest an improvement, as an object with
exactly the keys "clause", "risk" and "suggestion".

If it is not a contract, return a single object with the keys "isContract" (set to false),
"reason" (why it is not a contract) and "summary" (the document's purpose or content).

Your entire reply must be ONE JSON array of such objects, for example:
[{{"clause": "...", "risk": "...", "suggestion": "..."}}]
Do not add any text before or after the array.

Text to Analyze:
{document_text}
Response:"""
)

DRAFT_TEMPLATE = PromptTemplate.from_template(
    """You are a professional contract negotiation advisor. Below are the clauses flagged in a contract review with {counterpart_name}:
{findings_summary}

Draft a friendly, professional email proposing a renegotiation meeting with {counterpart_name}.
Do not include or invent a specific date; instead, suggest scheduling a convenient time in the near future.
Write the email from {author_name}.
Include next steps to address these clauses in plain language, keeping the tone genuine and collaborative."""
)

NO_RISKY_CLAUSES_LINE = "No specific risky clauses were identified."


def build_analysis_prompt(document_text: str) -> str:
    return ANALYSIS_TEMPLATE.format(document_text=document_text.strip())


def render_findings_summary(findings: Iterable) -> str:
    """One numbered line per risky clause; other findings are left out."""
    lines = [
        f"{i}. Clause: {f.clause} | Risk: {f.risk} | Suggestion: {f.suggestion}"
        for i, f in enumerate((f for f in findings if isinstance(f, RiskyClause)), start=1)
    ]
    return "\n".join(lines) or NO_RISKY_CLAUSES_LINE


def build_draft_prompt(findings: Iterable, counterpart_name: str, author_name: str) -> str:
    return DRAFT_TEMPLATE.format(
        counterpart_name=counterpart_name,
        author_name=author_name,
        findings_summary=render_findings_summary(findings),
    )
