from types import SimpleNamespace

import pytest

import backend.providers as providers
from backend.config import Settings
from backend.providers import GeminiProvider, OpenAIProvider, _response_text, build_provider


class FakeGenaiClient:
    def __init__(self, api_key=None, http_options=None):
        self.api_key = api_key
        self.http_options = http_options
        self.calls = []
        self.models = SimpleNamespace(generate_content=self._generate_content)

    def _generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        return SimpleNamespace(text='{"itinerary": "x", "places": []}')


@pytest.fixture
def fake_genai(monkeypatch):
    monkeypatch.setattr(providers.genai, "Client", FakeGenaiClient)


def test_no_credentials_means_no_provider():
    assert build_provider(Settings()) is None


@pytest.mark.parametrize("name", ["gemini", "openai"])
def test_explicit_provider_without_its_key(name):
    assert build_provider(Settings(ai_provider=name, gemini_api_key="", openai_api_key="")) is None


def test_unknown_provider():
    assert build_provider(Settings(ai_provider="llama", gemini_api_key="g")) is None


def test_gemini_preferred_when_both_keys_set(fake_genai):
    provider = build_provider(Settings(gemini_api_key="g", openai_api_key="o", timeout_sec=5))
    assert isinstance(provider, GeminiProvider)
    assert provider.client.api_key == "g"
    assert provider.client.http_options.timeout == 5000


def test_explicit_openai():
    provider = build_provider(Settings(ai_provider="openai", gemini_api_key="g", openai_api_key="sk-test"))
    assert isinstance(provider, OpenAIProvider)
    assert provider.model == "gpt-4o-mini"


def test_client_construction_failure(monkeypatch):
    def broken(*args, **kwargs):
        raise ValueError("bad key")

    monkeypatch.setattr(providers.genai, "Client", broken)
    assert build_provider(Settings(gemini_api_key="g")) is None


def test_gemini_generate(fake_genai):
    provider = GeminiProvider("g", "gemini-2.5-flash", temperature=0.3)
    assert provider.generate("plan a trip") == '{"itinerary": "x", "places": []}'
    call = provider.client.calls[0]
    assert call["model"] == "gemini-2.5-flash"
    assert call["contents"] == "plan a trip"
    assert call["config"].temperature == 0.3


def test_openai_generate():
    provider = OpenAIProvider("sk-test", "gpt-4o-mini")
    seen = {}

    def create(**kwargs):
        seen.update(kwargs)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="hello"))])

    provider.client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    assert provider.generate("plan a trip") == "hello"
    assert seen["messages"] == [{"role": "user", "content": "plan a trip"}]

    provider.client.chat.completions.create = lambda **kw: SimpleNamespace(choices=[])
    assert provider.generate("plan a trip") == ""


def test_response_text_reads_candidate_parts():
    part = SimpleNamespace(text="from parts")
    resp = SimpleNamespace(text="", candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])
    assert _response_text(resp) == "from parts"
    assert _response_text(None) == ""
    assert _response_text(SimpleNamespace(text=None, candidates=[])) == ""
