from types import SimpleNamespace

import pytest

from director_studio.agent import llm
from director_studio.services.local_storage import MemoryLocalStorage
from director_studio.services.prompt_library import reset_prompt_loader


class FakeCompletions:
    """Stands in for ``client.chat.completions``; replies are consumed in order.

    A reply that is an exception instance is raised instead of returned.
    """

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **params):
        self.calls.append(params)
        if not self.replies:
            raise RuntimeError("No fake reply queued")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


@pytest.fixture
def fake_llm(monkeypatch):
    """Patch the OpenAI client factory; call with the replies to serve."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")

    def install(*replies):
        completions = FakeCompletions(replies)
        client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
        monkeypatch.setattr(llm, "_make_client", lambda: client)
        return completions

    return install


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def storage():
    return MemoryLocalStorage()


@pytest.fixture(autouse=True)
def fresh_prompt_loader():
    reset_prompt_loader()
    yield
    reset_prompt_loader()


SAMPLE_LYRICS = """[Verse 1]
I walk alone beneath the night
The city hums a broken tune
I chase the glow of neon light
And sing my secrets to the moon

[Chorus]
Hold on, hold on to the fire
Hold on, hold on to the fire
We rise up higher and higher
Hold on, hold on to the fire
"""


@pytest.fixture
def sample_lyrics():
    return SAMPLE_LYRICS
