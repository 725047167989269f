"""Tests for the timeout-guarded model invoker (fake LLM, no network)."""

from __future__ import annotations

import time

import pytest

from agents.model_invoker import (
    GeminiModelInvoker, InvocationError, InvocationErrorKind, MissingAPIKeyError,
    classify_error, prompt_identity,
)


class TestInvoke:
    def test_returns_reply_text(self, fake_llm) -> None:
        llm = fake_llm(reply='[{"clause": "A"}]')
        invoker = GeminiModelInvoker(llm=llm)
        assert invoker.invoke("analyze this") == '[{"clause": "A"}]'
        assert llm.prompts == ["analyze this"]

    def test_joins_content_parts(self, fake_llm) -> None:
        llm = fake_llm(reply=[{"type": "text", "text": "Hello "}, "world"])
        assert GeminiModelInvoker(llm=llm).invoke("p") == "Hello world"

    def test_timeout_abandons_call(self, fake_llm) -> None:
        invoker = GeminiModelInvoker(llm=fake_llm(reply="late", delay=1.0))
        started = time.monotonic()
        with pytest.raises(InvocationError) as exc:
            invoker.invoke("p", timeout_ms=50)
        assert exc.value.kind is InvocationErrorKind.TIMEOUT
        assert exc.value.message == "API request timed out"
        assert time.monotonic() - started < 0.9

    def test_empty_reply(self, fake_llm) -> None:
        with pytest.raises(InvocationError) as exc:
            GeminiModelInvoker(llm=fake_llm(reply="   ")).invoke("p")
        assert exc.value.kind is InvocationErrorKind.EMPTY_RESPONSE

    def test_non_text_reply_is_empty(self, fake_llm) -> None:
        with pytest.raises(InvocationError) as exc:
            GeminiModelInvoker(llm=fake_llm(reply=None)).invoke("p")
        assert exc.value.kind is InvocationErrorKind.EMPTY_RESPONSE

    def test_provider_error_is_classified(self, fake_llm) -> None:
        error = ValueError("400 API key not valid. Please pass a valid API key. [reason: API_KEY_INVALID]")
        with pytest.raises(InvocationError) as exc:
            GeminiModelInvoker(llm=fake_llm(error=error)).invoke("p")
        assert exc.value.kind is InvocationErrorKind.INVALID_CREDENTIAL
        assert exc.value.__cause__ is error

    def test_single_call_no_retry(self, fake_llm) -> None:
        llm = fake_llm(error=RuntimeError("boom"))
        with pytest.raises(InvocationError):
            GeminiModelInvoker(llm=llm).invoke("p")
        assert len(llm.prompts) == 1

    def test_missing_api_key(self, monkeypatch) -> None:
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with pytest.raises(MissingAPIKeyError):
            GeminiModelInvoker(api_key=None)


class TestClassifyError:
    @pytest.mark.parametrize(
        "error, kind",
        [
            (RuntimeError("API_KEY_INVALID"), InvocationErrorKind.INVALID_CREDENTIAL),
            (RuntimeError("429 Resource has been exhausted (e.g. check quota)."), InvocationErrorKind.QUOTA_EXCEEDED),
            (RuntimeError("504 Deadline Exceeded"), InvocationErrorKind.TIMEOUT),
            (RuntimeError("boom"), InvocationErrorKind.UNKNOWN),
        ],
    )
    def test_kinds(self, error: Exception, kind: InvocationErrorKind) -> None:
        assert classify_error(error) is kind

    def test_unknown_message(self) -> None:
        assert InvocationError(InvocationErrorKind.UNKNOWN).message == "Unknown error occurred"


def test_prompt_identity_is_stable() -> None:
    assert prompt_identity("abc") == prompt_identity("abc")
    assert prompt_identity("abc") != prompt_identity("abd")
    assert prompt_identity("abc").endswith("/3ch")
