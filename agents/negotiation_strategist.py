import logging
from typing import Iterable, Optional

from core.interfaces import IModelInvoker
from tools.name_heuristics import infer_author_name, infer_counterpart_name
from tools.prompt_builder import build_draft_prompt

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - [STRATEGIST] %(message)s',
    handlers=[
        logging.FileHandler("negotiation_strategist.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


class NegotiationStrategistAgent:
    def __init__(self, invoker: IModelInvoker, timeout_ms: int = 15000):
        """
        Initialize negotiation strategist with required components

        Args:
            invoker: model client shared across submissions
            timeout_ms: per-call timeout for the draft prompt
        """
        self.invoker = invoker
        self.timeout_ms = timeout_ms

    def synthesize_draft(
        self,
        findings: Iterable,
        assignee_email: Optional[str] = None,
        document_text: Optional[str] = None,
    ) -> str:
        """
        Write a renegotiation email for the flagged clauses.

        Args:
            findings: Findings from the analysis stage
            assignee_email: Used to sign the email
            document_text: Used to guess the counterpart's name

        Returns:
            The model's draft, as prose

        Raises:
            InvocationError: If the model call fails
        """
        findings = list(findings)
        counterpart = infer_counterpart_name(findings, document_text)
        author = infer_author_name(assignee_email)
        logger.info("Drafting renegotiation email to %s from %s", counterpart, author)

        prompt = build_draft_prompt(findings, counterpart, author)
        draft = self.invoker.invoke(prompt, timeout_ms=self.timeout_ms)
        return draft.strip()
