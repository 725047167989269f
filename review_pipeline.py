# review_pipeline.py
import logging
from typing import Any, Mapping, Optional

from agents.contract_analyst import ContractAnalystAgent
from agents.model_invoker import InvocationError
from agents.negotiation_strategist import NegotiationStrategistAgent
from core.schemas import AnalysisResult, InputError, ReviewSubmission, TaskCreationStatus
from core.task import TaskConfig
from tasks.review_tasks import ReviewTaskFactory

logger = logging.getLogger(__name__)


class ContractReviewPipeline:
    """
    Runs one document submission through its stages:
      1. analysis (always)
      2. negotiation draft (when requested)
      3. task record in the tracking service (when requested)

    A stage failing never changes the output of the stages before it.
    """

    def __init__(
        self,
        analyst: ContractAnalystAgent,
        strategist: NegotiationStrategistAgent,
        task_factory: Optional[ReviewTaskFactory] = None,
    ):
        self.analyst = analyst
        self.strategist = strategist
        self.task_factory = task_factory

    def submit(
        self,
        document_text: str,
        task_options: Optional[Mapping[str, Any]] = None,
        requester_email: Optional[str] = None,
        create_task: bool = False,
    ) -> ReviewSubmission:
        try:
            self.analyst.validate_document(document_text)
            config = TaskConfig.from_options(task_options)
        except InputError as e:
            logger.warning("Rejected submission: %s", e)
            return ReviewSubmission(analysis=AnalysisResult.failure(str(e)))

        analysis = self.analyst.analyze(document_text)
        if not analysis.succeeded:
            return ReviewSubmission(analysis=analysis)

        draft, draft_error = None, None
        if config.include_draft:
            author_email = config.assignee_email or requester_email
            try:
                draft = self.strategist.synthesize_draft(analysis.findings, author_email, document_text)
            except InvocationError as e:
                logger.error("Draft generation failed: %s (%s)", e.message, e.detail)
                draft_error = f"Draft generation failed: {e.message}"

        task = None
        if create_task:
            task = self._create_task(analysis, config, draft)

        return ReviewSubmission(analysis=analysis, draft=draft, draft_error=draft_error, task=task)

    def _create_task(self, analysis: AnalysisResult, config: TaskConfig, draft: Optional[str]) -> TaskCreationStatus:
        if self.task_factory is None:
            return TaskCreationStatus(created=False, message="Task tracking is not configured")
        return self.task_factory.create_review_task(analysis.findings, config, draft)
