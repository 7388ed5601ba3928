"""Fan a prompt batch out to the image provider and collect one URL per prompt."""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from logo_forge.common.exceptions import GenerationUpstreamError, InvalidRequestError
from logo_forge.generation.placeholder import placeholder_url
from logo_forge.generation.provider import GeminiImageClient, ReferenceImage
from logo_forge.generation.storage import ImageStore

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    logos: list[str] = field(default_factory=list)
    succeeded: int = 0
    failed: int = 0

    @property
    def all_failed(self) -> bool:
        return self.succeeded == 0


def validate_prompts(prompts: list[str], max_prompts: int) -> list[str]:
    if not prompts:
        raise InvalidRequestError("Prompts array is required")
    if len(prompts) > max_prompts:
        raise InvalidRequestError(f"Maximum {max_prompts} prompts allowed")
    if any(not isinstance(p, str) or not p.strip() for p in prompts):
        raise InvalidRequestError("Prompts must be non-empty strings")
    return prompts


class GenerationDispatcher:
    """Runs one provider call per prompt, concurrently.

    A failed, timed-out or unconfigured call yields a placeholder for that slot,
    so a batch always returns exactly as many URLs as prompts, in order.
    """

    def __init__(
        self,
        client: GeminiImageClient,
        store: ImageStore,
        timeout: float = 60.0,
        max_prompts: int = 5,
    ):
        self.client = client
        self.store = store
        self.timeout = timeout
        self.max_prompts = max_prompts

    async def _generate_one(
        self,
        index: int,
        prompt: str,
        reference_images: Optional[list[ReferenceImage]],
    ) -> tuple[str, bool]:
        if not self.client.configured:
            return placeholder_url(prompt, "demo"), False
        try:
            image = await asyncio.wait_for(
                self.client.generate(prompt, reference_images), timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Logo %d timed out after %.1fs", index + 1, self.timeout)
            return placeholder_url(prompt, "timeout"), False
        except GenerationUpstreamError as e:
            logger.warning("Logo %d failed upstream: %s", index + 1, e.message)
            return placeholder_url(prompt, e.reason), False
        except Exception:
            logger.exception("Unexpected error generating logo %d", index + 1)
            return placeholder_url(prompt, "api-error"), False
        # Decoding and the file write stay off the event loop
        return await asyncio.to_thread(self.store.save, image), True

    async def dispatch(
        self,
        prompts: list[str],
        reference_images: Optional[list[ReferenceImage]] = None,
    ) -> BatchResult:
        validate_prompts(prompts, self.max_prompts)
        if not self.client.configured:
            logger.warning("Gemini API key not set, returning placeholder images")

        started = time.monotonic()
        tasks = [
            asyncio.ensure_future(self._generate_one(i, prompt, reference_images))
            for i, prompt in enumerate(prompts)
        ]
        # Shielded so an abandoned request lets in-flight calls finish; the
        # CancelledError still reaches the caller, which then charges nothing.
        results = await asyncio.shield(asyncio.gather(*tasks))

        succeeded = sum(1 for _, ok in results if ok)
        logger.info(
            "Generated %d/%d logos in %dms",
            succeeded, len(prompts), int((time.monotonic() - started) * 1000),
        )
        return BatchResult(
            logos=[url for url, _ in results],
            succeeded=succeeded,
            failed=len(results) - succeeded,
        )
