# main.py
import sys
import json
from typing import Optional

from agents.contract_analyst import ContractAnalystAgent
from agents.model_invoker import GeminiModelInvoker
from agents.negotiation_strategist import NegotiationStrategistAgent
from core.config import Settings
from review_pipeline import ContractReviewPipeline
from tasks.review_tasks import ReviewTaskFactory
from tools.task_tracker import NotionTaskTracker


def initialize_system(settings: Optional[Settings] = None) -> ContractReviewPipeline:
    settings = settings or Settings.from_env()

    # Clients are built once and shared by every submission
    invoker = GeminiModelInvoker(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        temperature=settings.model_temperature,
        max_output_tokens=settings.model_max_output_tokens,
        timeout_ms=settings.model_timeout_ms,
    )
    task_factory = None
    if settings.task_tracking_enabled:
        tracker = NotionTaskTracker(
            token=settings.notion_token,
            database_id=settings.notion_database_id,
            timeout_s=settings.notion_timeout_s,
            notion_version=settings.notion_version,
        )
        task_factory = ReviewTaskFactory(tracker)

    return ContractReviewPipeline(
        analyst=ContractAnalystAgent(invoker, timeout_ms=settings.model_timeout_ms),
        strategist=NegotiationStrategistAgent(invoker, timeout_ms=settings.model_timeout_ms),
        task_factory=task_factory,
    )


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python main.py <contract.txt> [assignee email]")
        sys.exit(2)

    with open(sys.argv[1], "r", encoding="utf-8") as f:
        text = f.read()
    email = sys.argv[2] if len(sys.argv) > 2 else None

    pipeline = initialize_system()
    result = pipeline.submit(
        text,
        task_options={"assignee_email": email, "include_draft": True},
        requester_email=email,
        create_task=pipeline.task_factory is not None,
    )
    print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
