"""Shared fakes for the contract review tests (no network, no real model)."""

from __future__ import annotations

import time
from datetime import date
from types import SimpleNamespace
from typing import Any

import pytest

from core.interfaces import IModelInvoker, ITaskTracker
from core.schemas import NonContractNote, RiskyClause, UnparsedFragment, ParseFailureReason
from core.task import TaskConfig


class FakeLLM:
    """Stands in for a LangChain chat model: `invoke(prompt)` returns an object with `.content`."""

    def __init__(self, reply: Any = "", error: Exception | None = None, delay: float = 0.0) -> None:
        self.reply = reply
        self.error = error
        self.delay = delay
        self.prompts: list[str] = []

    def invoke(self, prompt: str) -> SimpleNamespace:
        self.prompts.append(prompt)
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return SimpleNamespace(content=self.reply)


class FakeInvoker(IModelInvoker):
    """Returns queued replies in order; queued exceptions are raised instead."""

    def __init__(self, replies: list[Any] | None = None) -> None:
        self.replies = list(replies or [])
        self.calls: list[tuple[str, int | None]] = []

    def invoke(self, prompt: str, timeout_ms: int | None = None) -> str:
        self.calls.append((prompt, timeout_ms))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeTracker(ITaskTracker):
    def __init__(
        self,
        users: dict[str, str] | None = None,
        lookup_error: Exception | None = None,
        create_error: Exception | None = None,
    ) -> None:
        self.users = users or {}
        self.lookup_error = lookup_error
        self.create_error = create_error
        self.lookups: list[str] = []
        self.pages: list[dict[str, Any]] = []

    def find_user_id_by_email(self, email: str) -> str | None:
        self.lookups.append(email)
        if self.lookup_error:
            raise self.lookup_error
        return self.users.get(email)

    def create_page(self, children: list[dict[str, Any]], properties: dict[str, Any]) -> dict[str, Any]:
        if self.create_error:
            raise self.create_error
        self.pages.append({"children": children, "properties": properties})
        return {"id": f"page-{len(self.pages)}", "url": f"https://notion.so/page-{len(self.pages)}"}


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def fake_invoker():
    return FakeInvoker


@pytest.fixture
def fake_tracker():
    return FakeTracker


@pytest.fixture
def analysis_reply() -> str:
    """A well-formed reply wrapped in prose and a code fence."""
    return (
        "Here is my review of the agreement.\n"
        "```json\n"
        "[\n"
        '  {"clause": "Termination", "risk": "30-day notice favors vendor", "suggestion": "Require 60-day notice"},\n'
        '  {"clause": "Liability", "risk": "Unlimited liability for the client", "suggestion": "Cap liability at fees paid"}\n'
        "]\n"
        "```"
    )


@pytest.fixture
def sample_findings() -> list:
    return [
        RiskyClause(clause="Termination", risk="30-day notice favors vendor", suggestion="Require 60-day notice"),
        NonContractNote(reason="Unrecognized analysis entry", summary="{}"),
        RiskyClause(clause="Liability", risk="Unlimited liability", suggestion="Cap liability at fees paid"),
        UnparsedFragment(raw_text='{"clause": "Fees"', reason_code=ParseFailureReason.CHUNK_UNPARSEABLE),
    ]


@pytest.fixture
def task_config() -> TaskConfig:
    return TaskConfig(due_date=date(2025, 3, 15))


@pytest.fixture
def contract_text() -> str:
    return (
        "SERVICES AGREEMENT\n"
        "This agreement is entered into by Northwind Traders and the Client.\n"
        "1. Termination. Either party may terminate on 30 days notice.\n"
        "2. Liability. The Client's liability is unlimited.\n"
    )
