from typing import Dict, List, Sequence, Union

import pytest

from ai_orch.common.errors import RateLimitedError, RequestFailedError
from ai_orch.common.models import Message, ModelDescriptor
from ai_orch.engine.registry import ModelRegistry


class StubProvider:
    """Scripted adapter: each model id maps to a reply string or an exception.

    Model ids missing from the script answer with "ok:<model_id>".
    """

    def __init__(self, script: Dict[str, Union[str, Exception]] = None):
        self.script = dict(script or {})
        self.calls: List[str] = []
        self.received: List[Sequence[Message]] = []

    async def ask(self, messages, model_id):
        self.calls.append(model_id)
        self.received.append(messages)
        outcome = self.script.get(model_id, f"ok:{model_id}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_models(count: int, provider: str = "stub") -> List[ModelDescriptor]:
    return [
        ModelDescriptor(id=f"m{i}", provider=provider, label=f"Model {i}", priority=i + 1)
        for i in range(count)
    ]


@pytest.fixture
def stub_provider_cls():
    return StubProvider


@pytest.fixture
def rate_limited():
    return lambda: RateLimitedError("too many requests")


@pytest.fixture
def request_failed():
    return lambda: RequestFailedError("HTTP 500: boom")


@pytest.fixture
def registry_of():
    """Builds a registry of `n` stub-family models m0..m{n-1} with ascending priority."""
    return lambda n, provider="stub": ModelRegistry(make_models(n, provider))


@pytest.fixture
def conversation():
    return [
        Message(role="system", content="You are an expert programmer."),
        Message(role="user", content="Hi"),
    ]
