"""Gemini client for the Ayurvedic advisory features."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from textwrap import dedent
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel

from clinic_backend.errors import AdvisoryError
from clinic_backend.models.patient import Patient

LOGGER = logging.getLogger(__name__)


class SearchSource(BaseModel):
    """Web page cited by a grounded search answer."""

    title: str
    uri: str


class SearchResponse(BaseModel):
    """Search answer text and its cited sources."""

    content: str
    sources: List[SearchSource]


@dataclass(frozen=True)
class UseCase:
    """Prompt settings and failure message for one advisory feature."""

    name: str
    system_instruction: str
    error_message: str
    temperature: Optional[float] = None
    grounded: bool = False


SEARCH = UseCase(
    name="search",
    system_instruction=(
        "You are an expert Ayurvedic assistant. Your task is to respond to user "
        "queries about Ayurvedic treatments, herbs, or concepts. Use the provided "
        "Google Search results to give up-to-date and accurate information. "
        "Format your response in clean Markdown."
    ),
    error_message=(
        "Failed to fetch data from Google Search/Ayurvedic knowledge base. "
        "Please check your connection."
    ),
    grounded=True,
)

INSIGHT = UseCase(
    name="insight",
    system_instruction=dedent(
        """
        You are an Ayurvedic expert providing a high-level summary and general
        pointers for a qualified practitioner based on a patient's condition and
        history. Your response should be concise, professional, and supportive.
        - Briefly summarize the key points from the patient's data.
        - Suggest general Ayurvedic concepts or areas of focus (e.g., "balancing
          Vata dosha") that may be relevant.
        - DO NOT provide a diagnosis or specific medical advice.
        - Frame the response as helpful notes for {doctor}.
        """
    ).strip(),
    error_message="Failed to get insights from the AI assistant.",
    temperature=0.5,
)

DOSHA = UseCase(
    name="dosha",
    system_instruction=(
        "Identify the most likely dominant Dosha (Vata, Pitta, or Kapha) imbalance "
        "based on symptoms. Provide a brief explanation. Start with "
        '"Vata Dominant:", "Pitta Dominant:", or "Kapha Dominant:". '
        "This is theoretical for a practitioner."
    ),
    error_message="Failed to get Prakriti analysis.",
    temperature=0.3,
)

WELLNESS_PLAN = UseCase(
    name="wellness-plan",
    system_instruction=dedent(
        """
        You are an expert Ayurvedic assistant creating a structured wellness plan
        for {doctor} to review.
        Use "###" for headings: ### Dietary Suggestions, ### Lifestyle
        Adjustments, ### Herbal Considerations.
        Focus on foundational Ayurvedic principles. Be professional and supportive.
        """
    ).strip(),
    error_message="Failed to generate a wellness plan.",
    temperature=0.6,
)


class AdvisoryGateway:
    """Facade over the Generative Language API with an offline stub mode."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        *,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        doctor_name: str = "the practitioner",
        use_stub: bool = False,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key or ""
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.doctor_name = doctor_name
        self.use_stub = use_stub or not self.api_key
        self._timeout = timeout_seconds
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def search(self, query: str) -> SearchResponse:
        """Grounded knowledge search returning Markdown text and sources."""

        prompt = f"Find comprehensive Ayurvedic information about: {query.strip()}"
        payload = await self._generate(SEARCH, prompt)
        return SearchResponse(
            content=self._require_text(SEARCH, payload),
            sources=self._extract_sources(payload),
        )

    async def patient_insight(self, patient: Patient) -> str:
        prompt = dedent(
            f"""
            Assistant notes for:
            - Presenting Condition: {patient.condition}
            - Medical History: {patient.history or 'Not provided'}
            """
        ).strip()
        payload = await self._generate(INSIGHT, prompt)
        return self._require_text(INSIGHT, payload)

    async def dosha_analysis(self, patient: Patient) -> str:
        prompt = dedent(
            f"""
            Analyze Prakriti:
            - Presenting Condition: {patient.condition}
            - Medical History: {patient.history or 'Not provided'}
            """
        ).strip()
        payload = await self._generate(DOSHA, prompt)
        return self._require_text(DOSHA, payload)

    async def wellness_plan(self, patient: Patient) -> str:
        prompt = dedent(
            f"""
            Wellness plan for:
            - Condition: {patient.condition}
            - History: {patient.history or 'Not provided'}
            - Age: {patient.age}
            - Gender: {patient.gender}
            """
        ).strip()
        payload = await self._generate(WELLNESS_PLAN, prompt)
        return self._require_text(WELLNESS_PLAN, payload)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _generate(self, use_case: UseCase, prompt: str) -> Dict[str, Any]:
        LOGGER.info(
            "Advisory request: use_case=%s use_stub=%s model=%s",
            use_case.name,
            self.use_stub,
            self.model,
        )

        if self.use_stub:
            return self._stub_payload(use_case, prompt)

        body = self._build_request(use_case, prompt)
        try:
            async with self._http_client() as client:
                response = await client.post(
                    f"/models/{self.model}:generateContent",
                    json=body,
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            LOGGER.error(
                "Advisory call failed: use_case=%s status=%s body=%s",
                use_case.name,
                exc.response.status_code,
                exc.response.text[:500],
            )
            raise AdvisoryError(use_case.error_message) from exc
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.error("Advisory call failed: use_case=%s error=%s", use_case.name, exc)
            raise AdvisoryError(use_case.error_message) from exc

        LOGGER.debug(
            "Advisory raw output (truncated): %s", json.dumps(payload)[:500]
        )
        return payload

    def _http_client(self) -> httpx.AsyncClient:
        headers = {
            "x-goog-api-key": self.api_key,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    def _build_request(self, use_case: UseCase, prompt: str) -> Dict[str, Any]:
        instruction = use_case.system_instruction.format(doctor=self.doctor_name)
        body: Dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": instruction}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if use_case.temperature is not None:
            body["generationConfig"] = {"temperature": use_case.temperature}
        if use_case.grounded:
            body["tools"] = [{"google_search": {}}]
        return body

    @staticmethod
    def _first_candidate(payload: Dict[str, Any]) -> Dict[str, Any]:
        candidates = payload.get("candidates") or []
        if candidates and isinstance(candidates[0], dict):
            return candidates[0]
        return {}

    @classmethod
    def _require_text(cls, use_case: UseCase, payload: Dict[str, Any]) -> str:
        parts = (cls._first_candidate(payload).get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            LOGGER.error("Advisory response empty: use_case=%s", use_case.name)
            raise AdvisoryError(use_case.error_message)
        return text

    @classmethod
    def _extract_sources(cls, payload: Dict[str, Any]) -> List[SearchSource]:
        metadata = cls._first_candidate(payload).get("groundingMetadata") or {}
        sources: List[SearchSource] = []
        for chunk in metadata.get("groundingChunks") or []:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if not web or not web.get("uri"):
                continue
            sources.append(SearchSource(title=web.get("title") or "Source", uri=web["uri"]))
        return sources

    @staticmethod
    def _stub_payload(use_case: UseCase, prompt: str) -> Dict[str, Any]:
        """Deterministic offline response shaped like the real API."""

        if use_case is WELLNESS_PLAN:
            text = (
                "### Dietary Suggestions\nFavour warm, freshly cooked meals.\n"
                "### Lifestyle Adjustments\nKeep regular sleep and meal times.\n"
                "### Herbal Considerations\nDiscuss suitable herbs with the practitioner.\n"
            )
        else:
            summary = prompt.splitlines()[0] if prompt else ""
            text = f"[offline {use_case.name}] {summary}"

        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}
