"""Tests for the chat completion wrapper."""

from types import SimpleNamespace

import pytest

from llm import ChatModel


class FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(content):
    completions = FakeCompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_complete_passes_limits():
    client, completions = _client("  Sure, what's your address?  ")
    model = ChatModel(model="gpt-4o-mini", client=client)
    messages = [{"role": "user", "content": "hi"}]

    assert model.complete(messages, max_tokens=256, temperature=0.3) == "Sure, what's your address?"
    assert completions.kwargs == {
        "model": "gpt-4o-mini",
        "messages": messages,
        "max_tokens": 256,
        "temperature": 0.3,
    }


@pytest.mark.parametrize("content", ["", None, "   "])
def test_empty_reply_raises(content):
    client, _ = _client(content)
    with pytest.raises(RuntimeError, match="empty reply"):
        ChatModel(client=client).complete([{"role": "user", "content": "hi"}])
