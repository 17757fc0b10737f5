import asyncio

import pytest

from plantpal.agent.core import GeminiDiagnoser, make_client
from plantpal.agent.deps import SymptomRequest
from plantpal.errors import EmptyResponse, MalformedResponse, MissingApiKey, TransportError
from plantpal.vision.images import encode_image


def test_diagnose_sends_envelope_and_parses_reply(fake_client, report_json):
    factory, models = fake_client(text=report_json)
    diagnoser = GeminiDiagnoser(client_factory=factory, model="gemini-2.5-flash")

    report = asyncio.run(diagnoser.diagnose(SymptomRequest("leaves yellow with brown spots")))

    assert report.possible_diseases[0].disease_name == "Septoria Leaf Spot"
    assert len(models.calls) == 1
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-flash"
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].http_options.timeout == int(diagnoser.timeout * 1000)
    parts = call["contents"][0].parts
    assert len(parts) == 1
    assert "leaves yellow with brown spots" in parts[0].text


def test_image_is_sent_before_text(fake_client, report_json, jpeg_bytes):
    factory, models = fake_client(text=report_json)
    request = SymptomRequest("spots", image=encode_image(jpeg_bytes))

    asyncio.run(GeminiDiagnoser(client_factory=factory).diagnose(request))

    parts = models.calls[0]["contents"][0].parts
    assert parts[0].inline_data.data == jpeg_bytes
    assert parts[1].text


@pytest.mark.parametrize("text", ["", "  ", None])
def test_empty_reply(fake_client, text):
    factory, _ = fake_client(text=text)
    with pytest.raises(EmptyResponse):
        asyncio.run(GeminiDiagnoser(client_factory=factory).diagnose(SymptomRequest("spots")))


def test_malformed_reply(fake_client):
    factory, _ = fake_client(text='{"summary": "ok"}')
    with pytest.raises(MalformedResponse):
        asyncio.run(GeminiDiagnoser(client_factory=factory).diagnose(SymptomRequest("spots")))


def test_transport_errors_are_translated_and_not_retried(fake_client):
    factory, models = fake_client(exc=ConnectionRefusedError("connection refused"))

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(GeminiDiagnoser(client_factory=factory).diagnose(SymptomRequest("spots")))

    assert isinstance(excinfo.value.__cause__, ConnectionRefusedError)
    assert len(models.calls) == 1


def test_slow_model_times_out(fake_client, report_json):
    factory, _ = fake_client(text=report_json, delay=0.3)
    diagnoser = GeminiDiagnoser(client_factory=factory, timeout=0.01)

    with pytest.raises(TransportError):
        asyncio.run(diagnoser.diagnose(SymptomRequest("spots")))


def test_missing_api_key_is_fatal(monkeypatch):
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    with pytest.raises(MissingApiKey):
        GeminiDiagnoser()


def real_client_factory(base_url):
    return lambda: make_client(api_key="test-key", base_url=base_url)


def test_real_client_survives_repeated_event_loops(gemini_stub):
    diagnoser = GeminiDiagnoser(client_factory=real_client_factory(gemini_stub.url))

    first = asyncio.run(diagnoser.diagnose(SymptomRequest("spots")))
    second = asyncio.run(diagnoser.diagnose(SymptomRequest("more spots")))

    assert first == second
    assert len(gemini_stub.hits) == 2
    assert ":generateContent" in gemini_stub.hits[0]


def test_refused_connection_becomes_transport_error(closed_port_url):
    diagnoser = GeminiDiagnoser(client_factory=real_client_factory(closed_port_url), timeout=5)

    with pytest.raises(TransportError):
        asyncio.run(diagnoser.diagnose(SymptomRequest("spots")))
