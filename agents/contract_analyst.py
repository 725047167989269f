import logging
from typing import Any, Dict, List
from langchain_core.runnables import RunnableLambda, RunnableSequence

from core.interfaces import IModelInvoker
from core.schemas import AnalysisResult, Finding, InputError
from tools.prompt_builder import build_analysis_prompt
from tools.response_parser import parse_findings
from agents.model_invoker import InvocationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - [ANALYST] %(message)s',
    handlers=[
        logging.FileHandler("contract_analyst.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


class ContractAnalystAgent:
    def __init__(self, invoker: IModelInvoker, timeout_ms: int = 15000):
        """
        Args:
            invoker: model client shared across submissions
            timeout_ms: per-call timeout for the analysis prompt
        """
        self.invoker = invoker
        self.timeout_ms = timeout_ms

        # prompt -> model -> findings
        self.chain: RunnableSequence = (
            RunnableLambda(self._prepare_prompt)
            | RunnableLambda(self._call_model)
            | RunnableLambda(self._parse_response)
        )

    @staticmethod
    def validate_document(document_text: Any) -> str:
        if not isinstance(document_text, str) or not document_text.strip():
            raise InputError("Invalid input: Text must be a non-empty string")
        return document_text

    def _prepare_prompt(self, input_dict: Dict[str, Any]) -> str:
        return build_analysis_prompt(input_dict["document_text"])

    def _call_model(self, prompt: str) -> str:
        return self.invoker.invoke(prompt, timeout_ms=self.timeout_ms)

    def _parse_response(self, raw: str) -> List[Finding]:
        findings = parse_findings(raw)
        logger.info("Parsed %d finding(s) from model reply", len(findings))
        return findings

    def analyze(self, document_text: str) -> AnalysisResult:
        """
        Classify a document and list its risky clauses.

        Raises:
            InputError: if the text is empty, before any remote call

        Model failures are reported as a Failure result rather than raised.
        """
        self.validate_document(document_text)
        logger.info("Analyzing document (%d characters)", len(document_text))
        try:
            findings = self.chain.invoke({"document_text": document_text})
        except InvocationError as e:
            logger.error("Analysis failed: %s (%s)", e.message, e.detail)
            return AnalysisResult.failure(e.message)
        return AnalysisResult.success(findings)
