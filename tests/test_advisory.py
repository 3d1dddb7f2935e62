"""Gemini gateway request building, response parsing and failures."""

import json
from typing import Any, Dict, List

import httpx
import pytest

from clinic_backend.errors import AdvisoryError
from clinic_backend.models.patient import Patient
from clinic_backend.services.advisory import AdvisoryGateway

PATIENT = Patient(
    id="p1",
    name="Aarav Sharma",
    age=45,
    gender="Male",
    condition="Joint Pain (Arthritis)",
    history="",
    last_visit="05/15/2024",
)


def _gateway(handler, requests: List[httpx.Request]) -> AdvisoryGateway:
    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return AdvisoryGateway(
        api_key="test-key",
        model="test-model",
        doctor_name="Dr. Rachitha",
        transport=httpx.MockTransport(record),
    )


def _text_payload(text: str, **candidate: Any) -> Dict[str, Any]:
    return {"candidates": [{"content": {"parts": [{"text": text}]}, **candidate}]}


@pytest.mark.anyio
async def test_search_returns_content_and_grounding_sources() -> None:
    requests: List[httpx.Request] = []
    payload = _text_payload(
        "**Ashwagandha** is an adaptogen.",
        groundingMetadata={
            "groundingChunks": [
                {"web": {"uri": "https://example.org/a", "title": "Herb guide"}},
                {"web": {"uri": "https://example.org/b"}},
                {"web": {"title": "No link"}},
                {"retrievedContext": {}},
            ]
        },
    )
    gateway = _gateway(lambda request: httpx.Response(200, json=payload), requests)

    result = await gateway.search("ashwagandha")

    assert result.content == "**Ashwagandha** is an adaptogen."
    assert [(item.title, item.uri) for item in result.sources] == [
        ("Herb guide", "https://example.org/a"),
        ("Source", "https://example.org/b"),
    ]

    request = requests[0]
    assert request.url.path.endswith("/models/test-model:generateContent")
    assert request.headers["x-goog-api-key"] == "test-key"
    body = json.loads(request.content)
    assert body["tools"] == [{"google_search": {}}]
    assert "generationConfig" not in body
    assert body["contents"][0]["parts"][0]["text"].endswith("about: ashwagandha")


@pytest.mark.anyio
async def test_patient_prompts_use_per_feature_temperature() -> None:
    requests: List[httpx.Request] = []
    gateway = _gateway(lambda request: httpx.Response(200, json=_text_payload("ok")), requests)

    assert await gateway.patient_insight(PATIENT) == "ok"
    assert await gateway.dosha_analysis(PATIENT) == "ok"
    assert await gateway.wellness_plan(PATIENT) == "ok"

    bodies = [json.loads(request.content) for request in requests]
    temperatures = [body["generationConfig"]["temperature"] for body in bodies]
    assert temperatures == [0.5, 0.3, 0.6]
    assert all("tools" not in body for body in bodies)
    assert "Medical History: Not provided" in bodies[0]["contents"][0]["parts"][0]["text"]
    assert "Age: 45" in bodies[2]["contents"][0]["parts"][0]["text"]
    assert "Dr. Rachitha" in bodies[0]["systemInstruction"]["parts"][0]["text"]


@pytest.mark.anyio
@pytest.mark.parametrize(
    "method, message",
    [
        ("patient_insight", "Failed to get insights from the AI assistant."),
        ("dosha_analysis", "Failed to get Prakriti analysis."),
        ("wellness_plan", "Failed to generate a wellness plan."),
    ],
)
async def test_service_errors_raise_use_case_message(method: str, message: str) -> None:
    gateway = _gateway(lambda request: httpx.Response(500, text="boom"), [])

    with pytest.raises(AdvisoryError) as excinfo:
        await getattr(gateway, method)(PATIENT)

    assert str(excinfo.value) == message


@pytest.mark.anyio
async def test_transport_failure_on_search_raises_retrieval_error() -> None:
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    gateway = _gateway(fail, [])

    with pytest.raises(AdvisoryError, match="Failed to fetch data"):
        await gateway.search("triphala")


@pytest.mark.anyio
async def test_empty_response_is_a_failure() -> None:
    gateway = _gateway(lambda request: httpx.Response(200, json={"candidates": []}), [])

    with pytest.raises(AdvisoryError):
        await gateway.dosha_analysis(PATIENT)


@pytest.mark.anyio
async def test_stub_mode_without_api_key() -> None:
    gateway = AdvisoryGateway(api_key=None, model="test-model")

    assert gateway.use_stub
    plan = await gateway.wellness_plan(PATIENT)
    result = await gateway.search("neem")

    assert plan.startswith("### Dietary Suggestions")
    assert "neem" in result.content
    assert result.sources == []
