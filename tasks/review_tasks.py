# tasks/review_tasks.py
import logging
from typing import Iterable, Optional

from core.interfaces import ITaskTracker
from core.schemas import TaskCreationStatus
from core.task import TaskConfig
from tools.content_assembler import ContentAssembler
from tools.task_tracker import TaskTrackerError

logger = logging.getLogger(__name__)


class ReviewTaskFactory:
    def __init__(self, tracker: ITaskTracker, assembler: Optional[ContentAssembler] = None):
        self.tracker = tracker
        self.assembler = assembler or ContentAssembler(directory=tracker)

    def create_review_task(
        self, findings: Iterable, config: TaskConfig, draft: Optional[str] = None
    ) -> TaskCreationStatus:
        record = self.assembler.assemble(findings, config, draft)
        try:
            page = self.tracker.create_page(record.notion_children(), record.properties)
        except TaskTrackerError as e:
            logger.error("Task creation failed: %s", e)
            return TaskCreationStatus(created=False, message=f"Task creation failed: {e}")
        return TaskCreationStatus(
            created=True,
            message="Task created",
            page_id=page.get("id"),
            url=page.get("url"),
        )
