"""Gemini image generation over the Generative Language REST API."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from logo_forge.common.exceptions import GenerationUpstreamError
from logo_forge.generation.prompts import enhance_prompt

logger = logging.getLogger(__name__)


@dataclass
class ReferenceImage:
    """Base64 image the user uploaded to steer a refinement round."""

    data: str
    mime_type: str = "image/png"


@dataclass
class GeneratedImage:
    """Base64 image payload returned by the provider."""

    data: str
    mime_type: str = "image/png"


class GeminiImageClient:
    """Calls ``models/{model}:generateContent`` and returns the first image part."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash-image-preview",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http_client = http_client

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy-init httpx.AsyncClient."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout)
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    def build_payload(
        self, prompt: str, reference_images: Optional[list[ReferenceImage]] = None,
    ) -> dict[str, Any]:
        has_reference = bool(reference_images)
        parts: list[dict[str, Any]] = [{"text": enhance_prompt(prompt, has_reference)}]
        if has_reference:
            # The model refines a single image; extra uploads are ignored.
            first = reference_images[0]
            parts.append({"inlineData": {"mimeType": first.mime_type, "data": first.data}})
        return {"contents": [{"parts": parts}]}

    async def generate(
        self, prompt: str, reference_images: Optional[list[ReferenceImage]] = None,
    ) -> GeneratedImage:
        """Generate one logo image.

        Raises GenerationUpstreamError on HTTP, transport or response-shape
        failures; the caller decides how to degrade.
        """
        if not self.configured:
            raise GenerationUpstreamError("Gemini API key not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        client = self._get_http_client()
        try:
            resp = await client.post(
                url,
                json=self.build_payload(prompt, reference_images),
                headers={"x-goog-api-key": self.api_key},
            )
        except httpx.TimeoutException as e:
            raise GenerationUpstreamError(f"Gemini request timed out: {e}") from e
        except httpx.HTTPError as e:
            raise GenerationUpstreamError(f"Gemini request failed: {e}") from e

        if resp.status_code != 200:
            logger.warning("Gemini returned HTTP %d", resp.status_code)
            raise GenerationUpstreamError(
                f"Gemini returned HTTP {resp.status_code}", status=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError as e:
            raise GenerationUpstreamError("Gemini returned invalid JSON") from e

        image = extract_image(body)
        if image is None:
            raise GenerationUpstreamError("Gemini response contained no image data")
        return image


def extract_image(body: Any) -> Optional[GeneratedImage]:
    """First inline image in a generateContent response, or None."""
    if not isinstance(body, dict):
        return None
    candidates = body.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    for part in parts:
        if not isinstance(part, dict):
            continue
        inline = part.get("inlineData") or part.get("inline_data")
        if inline and inline.get("data"):
            return GeneratedImage(
                data=inline["data"],
                mime_type=inline.get("mimeType") or inline.get("mime_type") or "image/png",
            )
    return None
