"""
content_assembler.py
Builds the page body and property map of a review task for the tracking service.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from core.interfaces import ITaskTracker
from core.schemas import (
    MAX_BLOCK_TEXT_LENGTH, BlockType, ContentBlock, RiskyClause, TaskRecord,
)
from core.task import TaskConfig

logger = logging.getLogger(__name__)

MEETING_HEADING = "Renegotiation Meeting Schedule"
CLAUSES_HEADING = "Contract Clauses To Review"
PLACEHOLDER_DRAFT = (
    "Meeting scheduled: Please review the proposed contract revisions and schedule a follow-up meeting."
)


def chunk_text(text: str, size: int = MAX_BLOCK_TEXT_LENGTH) -> List[str]:
    """Consecutive slices of at most `size` characters; joining them gives `text` back."""
    if size <= 0:
        raise ValueError("size must be positive")
    return [text[i:i + size] for i in range(0, len(text), size)]


def render_clause_item(finding: RiskyClause) -> str:
    return f"Clause: {finding.clause}. Risk: {finding.risk}. Suggestion: {finding.suggestion}"


def _heading(text: str) -> ContentBlock:
    return ContentBlock(block_type=BlockType.HEADING, segments=(text,))


class ContentAssembler:
    def __init__(self, directory: Optional[ITaskTracker] = None):
        """
        Args:
            directory: tracking-service client used to resolve the assignee email
        """
        self.directory = directory

    def build_children(self, findings: Iterable, draft: Optional[str] = None) -> List[ContentBlock]:
        children = [_heading(MEETING_HEADING)]
        children.extend(
            ContentBlock(block_type=BlockType.PARAGRAPH, segments=(chunk,))
            for chunk in chunk_text(draft or PLACEHOLDER_DRAFT)
        )
        children.append(_heading(CLAUSES_HEADING))
        # Only risky clauses have clause/risk/suggestion to list.
        children.extend(
            ContentBlock(
                block_type=BlockType.BULLETED_LIST_ITEM,
                segments=tuple(chunk_text(render_clause_item(f))),
            )
            for f in findings
            if isinstance(f, RiskyClause)
        )
        return children

    def resolve_assignees(self, email: Optional[str]) -> List[Dict[str, str]]:
        """People entries for the assignee; empty when unset, unknown or unreachable."""
        if not email:
            return []
        if self.directory is None:
            logger.warning("No directory configured; leaving assignee %s unresolved", email)
            return []
        try:
            user_id = self.directory.find_user_id_by_email(email)
        except Exception as e:
            logger.warning("Assignee lookup for %s failed: %s", email, e, exc_info=True)
            return []
        if not user_id:
            logger.warning("No workspace user matches %s; task will be unassigned", email)
            return []
        return [{"object": "user", "id": user_id}]

    def build_properties(self, config: TaskConfig) -> Dict[str, Any]:
        return {
            "Task name": {"title": [{"text": {"content": config.title}}]},
            "Status": {"status": {"name": config.status}},
            "Assignee": {"people": self.resolve_assignees(config.assignee_email)},
            "Due date": {"date": {"start": config.due_date.isoformat()}},
            "Priority": {"select": {"name": config.priority.value}},
            "Task type": {"multi_select": [{"name": name} for name in config.task_type]},
            "Effort level": {"select": {"name": config.effort_level.value}},
        }

    def assemble(self, findings: Iterable, config: TaskConfig, draft: Optional[str] = None) -> TaskRecord:
        findings = list(findings)
        children = self.build_children(findings, draft)
        properties = self.build_properties(config)
        logger.info("Assembled task record with %d block(s)", len(children))
        return TaskRecord(children=tuple(children), properties=properties)
