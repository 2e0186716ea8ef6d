import backend.service as service_module
from backend.service import GENERATION_ERROR, INVALID_BODY_ERROR, NOT_CONFIGURED_ERROR, ItineraryService

from .conftest import FailingProvider, FakeProvider


def test_generate_returns_recovered_result(service, fake_provider, trip_body):
    status, body = service.generate(trip_body)
    assert status == 200
    assert body == {"itinerary": "## Day 1\n- Fushimi Inari", "places": []}
    assert len(fake_provider.prompts) == 1
    assert "Destination: Kyoto" in fake_provider.prompts[0]


def test_unparseable_completion_falls_back(diagnostics, trip_body):
    service = ItineraryService(FakeProvider("I'm sorry, I can't help with that."), diagnostics)
    status, body = service.generate(trip_body)
    assert status == 200
    assert body == {"itinerary": "I'm sorry, I can't help with that.", "places": []}
    assert len(diagnostics.records) == 1


def test_unconfigured_service_skips_recovery(monkeypatch, trip_body):
    calls = []
    monkeypatch.setattr(service_module, "recover_itinerary", lambda *a, **kw: calls.append(a))

    service = ItineraryService(provider=None)
    assert not service.configured
    assert service.generate(trip_body) == (503, {"error": NOT_CONFIGURED_ERROR})
    assert calls == []


def test_invalid_body(service):
    assert service.generate(None) == (400, {"error": INVALID_BODY_ERROR})
    assert service.generate(["Kyoto"]) == (400, {"error": INVALID_BODY_ERROR})


def test_provider_failure_is_a_generic_error(trip_body, caplog):
    service = ItineraryService(FailingProvider())
    assert service.generate(trip_body) == (500, {"error": GENERATION_ERROR})
    assert "quota exceeded" in caplog.text
    assert "'destination': 'Kyoto'" in caplog.text
