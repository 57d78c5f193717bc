"""
Pytest configuration and fixtures for promptcast tests.
"""

import os
import sys
from pathlib import Path
from typing import Any, List, Optional

import pytest
from openai.types.chat import ChatCompletion

# Add src directory to path for imports
src_dir = Path(__file__).parent.parent / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))


@pytest.fixture
def openai_api_key() -> Optional[str]:
    """Fixture for OpenAI API key."""
    return os.getenv("OPENAI_API_KEY")


@pytest.fixture
def skip_if_no_openai_key(openai_api_key):
    """Fixture to skip tests if OpenAI API key is not available."""
    if not openai_api_key:
        pytest.skip("OPENAI_API_KEY not set, skipping test")


def _completion(
    arguments: Optional[str] = None,
    *,
    content: Optional[str] = None,
    name: str = "answer",
    legacy: bool = False,
    model: str = "gpt-3.5-turbo",
) -> ChatCompletion:
    message: dict[str, Any] = {"role": "assistant", "content": content}
    finish_reason = "stop"
    if arguments is not None and legacy:
        message["function_call"] = {"name": name, "arguments": arguments}
        finish_reason = "function_call"
    elif arguments is not None:
        message["tool_calls"] = [
            {
                "id": "call_1",
                "type": "function",
                "function": {"name": name, "arguments": arguments},
            }
        ]
        finish_reason = "tool_calls"
    return ChatCompletion.model_validate(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1700000000,
            "model": model,
            "choices": [{"index": 0, "finish_reason": finish_reason, "message": message}],
            "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
        }
    )


@pytest.fixture
def completion():
    """Factory for real SDK ``ChatCompletion`` objects carrying a function call."""
    return _completion


class _Completions:
    def __init__(self, outcomes: List[Any]):
        self.outcomes = list(outcomes)
        self.calls: List[dict] = []

    def _next(self, kwargs: dict) -> Any:
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class _AsyncCompletions(_Completions):
    async def create(self, **kwargs):
        return self._next(kwargs)


class _SyncCompletions(_Completions):
    def create(self, **kwargs):
        return self._next(kwargs)


class FakeOpenAI:
    """Stand-in for ``AsyncOpenAI``/``OpenAI`` exposing ``chat.completions.create``.

    *outcomes* are returned (or raised) in order; the last one repeats.
    """

    def __init__(self, *outcomes: Any, sync: bool = False):
        completions_cls = _SyncCompletions if sync else _AsyncCompletions
        self.completions = completions_cls(list(outcomes))
        self.chat = self

    @property
    def calls(self) -> List[dict]:
        return self.completions.calls


@pytest.fixture
def fake_openai():
    """Factory for fake OpenAI clients."""
    return FakeOpenAI
