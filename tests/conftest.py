import pytest

from backend.service import ItineraryService


class FakeProvider:
    name = "fake"
    model = "fake-model"

    def __init__(self, text=""):
        self.text = text
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        return self.text


class FailingProvider:
    name = "failing"
    model = "fake-model"

    def generate(self, prompt):
        raise RuntimeError("quota exceeded")


class RecordingDiagnostics:
    def __init__(self):
        self.records = []

    def record_parse_failure(self, raw, extracted, sanitized, error):
        self.records.append({"raw": raw, "extracted": extracted, "sanitized": sanitized, "error": error})


@pytest.fixture
def fake_provider():
    return FakeProvider('{"itinerary": "## Day 1\\n- Fushimi Inari", "places": []}')


@pytest.fixture
def diagnostics():
    return RecordingDiagnostics()


@pytest.fixture
def service(fake_provider, diagnostics):
    return ItineraryService(provider=fake_provider, diagnostics=diagnostics)


@pytest.fixture
def trip_body():
    return {
        "startCity": "Osaka",
        "destination": "Kyoto",
        "dates": "2025-04-01 - 2025-04-03",
        "interests": "temples, food",
        "style": "Relaxed",
    }
