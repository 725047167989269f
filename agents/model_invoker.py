import os
import hashlib
import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from enum import Enum
from typing import Any, Optional
from langchain_google_genai import ChatGoogleGenerativeAI
from dotenv import load_dotenv

from core.interfaces import IModelInvoker

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - [INVOKER] %(message)s',
    handlers=[
        logging.FileHandler("model_invoker.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_OUTPUT_TOKENS = 4000
DEFAULT_TIMEOUT_MS = 15000


# --- Custom Exceptions ---
class MissingAPIKeyError(RuntimeError):
    """Raised when required API keys are missing"""
    pass

class InvocationErrorKind(str, Enum):
    TIMEOUT = "Timeout"
    INVALID_CREDENTIAL = "InvalidCredential"
    QUOTA_EXCEEDED = "QuotaExceeded"
    EMPTY_RESPONSE = "EmptyResponse"
    UNKNOWN = "Unknown"

ERROR_MESSAGES = {
    InvocationErrorKind.TIMEOUT: "API request timed out",
    InvocationErrorKind.INVALID_CREDENTIAL: "Invalid API key",
    InvocationErrorKind.QUOTA_EXCEEDED: "API quota exceeded",
    InvocationErrorKind.EMPTY_RESPONSE: "API returned no valid response candidates",
    InvocationErrorKind.UNKNOWN: "Unknown error occurred",
}

class InvocationError(RuntimeError):
    """Raised for model service failures; `kind` says which one"""

    def __init__(self, kind: InvocationErrorKind, detail: Optional[str] = None):
        self.kind = kind
        self.detail = detail
        super().__init__(ERROR_MESSAGES[kind])

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self.kind]


_ERROR_MARKERS = (
    (InvocationErrorKind.INVALID_CREDENTIAL, ("api_key_invalid", "api key not valid", "invalid api key", "unauthenticated", "permission_denied")),
    (InvocationErrorKind.QUOTA_EXCEEDED, ("quota", "resource_exhausted", "rate limit", "429")),
    (InvocationErrorKind.TIMEOUT, ("timed out", "timeout", "deadline exceeded")),
)


def classify_error(error: BaseException) -> InvocationErrorKind:
    text = f"{type(error).__name__}: {error}".lower()
    for kind, markers in _ERROR_MARKERS:
        if any(marker in text for marker in markers):
            return kind
    return InvocationErrorKind.UNKNOWN


def prompt_identity(prompt: str) -> str:
    """Short stable tag for log lines, so a failing prompt can be matched later."""
    return f"{hashlib.sha1(prompt.encode('utf-8')).hexdigest()[:12]}/{len(prompt)}ch"


def response_text(response: Any) -> str:
    """Text of a chat model reply; content may be a string or a list of parts."""
    content = getattr(response, "content", response)
    if isinstance(content, list):
        content = "".join(
            part if isinstance(part, str) else str(part.get("text", ""))
            for part in content
            if isinstance(part, (str, dict))
        )
    return content if isinstance(content, str) else ""


class GeminiModelInvoker(IModelInvoker):
    """
    One-shot Gemini calls guarded by a timeout.

    The call runs on a worker thread; when the timer wins, the call is
    abandoned (never awaited or retried) and a Timeout error is raised.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        llm: Optional[Any] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens
        self.timeout_ms = timeout_ms
        if llm is None:
            self.api_key = self._validate_api_key(api_key)
            llm = self._create_llm()
        self.llm = llm

    def _validate_api_key(self, api_key: Optional[str]) -> str:
        """Ensure required API key exists"""
        api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not api_key:
            logger.error("Missing GEMINI_API_KEY in environment")
            raise MissingAPIKeyError("GEMINI_API_KEY not found in environment variables")
        return api_key

    def _create_llm(self) -> ChatGoogleGenerativeAI:
        """Create LLM with validated config; retries are left to callers"""
        return ChatGoogleGenerativeAI(
            model=self.model,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            google_api_key=self.api_key,
            timeout=self.timeout_ms / 1000,
            max_retries=0,
        )

    def invoke(self, prompt: str, timeout_ms: Optional[int] = None) -> str:
        """
        Send a single prompt and return the reply text.

        Raises:
            InvocationError: on timeout, provider errors or an empty reply
        """
        timeout_ms = timeout_ms or self.timeout_ms
        identity = prompt_identity(prompt)
        logger.info("Invoking %s for prompt %s (timeout %sms)", self.model, identity, timeout_ms)

        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self.llm.invoke, prompt)
            response = future.result(timeout=timeout_ms / 1000)
        except FuturesTimeoutError:
            logger.error("Model call for prompt %s timed out after %sms", identity, timeout_ms)
            raise InvocationError(InvocationErrorKind.TIMEOUT, f"no reply after {timeout_ms}ms")
        except Exception as e:
            kind = classify_error(e)
            logger.error("Model call for prompt %s failed (%s): %s", identity, kind.value, e, exc_info=True)
            raise InvocationError(kind, str(e)) from e
        finally:
            executor.shutdown(wait=False)

        text = response_text(response)
        if not text.strip():
            logger.error("Model returned no usable output for prompt %s", identity)
            raise InvocationError(InvocationErrorKind.EMPTY_RESPONSE)
        logger.debug("Raw LLM response for %s: %s", identity, text)
        return text
