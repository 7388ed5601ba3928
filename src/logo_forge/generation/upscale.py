"""Logo upscaling with Real-ESRGAN on Replicate."""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

import httpx
import replicate
from replicate.exceptions import ModelError, ReplicateError

from logo_forge.common.exceptions import UpscaleProviderError

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 4


@dataclass
class UpscaleResult:
    original_url: str
    upscaled_url: str
    scale: int
    processing_time_ms: int


def output_url(output: Any) -> Optional[str]:
    """URL from a prediction output: a string, a FileOutput or a list of either."""
    if isinstance(output, (list, tuple)):
        output = output[0] if output else None
    if output is None:
        return None
    if isinstance(output, str):
        return output or None
    url = getattr(output, "url", None)
    return str(url) if url else None


class ReplicateUpscaler:
    """Runs the configured upscaling model and returns the hosted result URL."""

    def __init__(
        self,
        api_token: str,
        model: str,
        timeout: float = 120.0,
        client: Optional[replicate.Client] = None,
    ):
        self.api_token = api_token
        self.model = model
        self.timeout = timeout
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.api_token) or self._client is not None

    def _get_client(self) -> replicate.Client:
        """Lazy-init replicate.Client."""
        if self._client is None:
            self._client = replicate.Client(api_token=self.api_token)
        return self._client

    async def upscale(self, image_url: str, scale: int = DEFAULT_SCALE) -> UpscaleResult:
        """Upscale one image.

        Raises UpscaleProviderError when the provider is unconfigured, times
        out, rejects the prediction or returns no image.
        """
        if not self.configured:
            raise UpscaleProviderError("Upscaling is not configured", configured=False)

        started = time.monotonic()
        try:
            output = await asyncio.wait_for(
                self._get_client().async_run(
                    self.model,
                    input={"image": image_url, "scale": scale, "face_enhance": False},
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise UpscaleProviderError(f"Upscaling timed out after {self.timeout:.0f}s") from e
        except ModelError as e:
            raise UpscaleProviderError(f"Upscaling model failed: {e}") from e
        except ReplicateError as e:
            status = getattr(e, "status", None)
            logger.warning("Replicate rejected upscale (status %s): %s", status, e)
            raise UpscaleProviderError(f"Upscaling failed: {e}", status=status) from e
        except httpx.HTTPError as e:
            raise UpscaleProviderError(f"Upscaling request failed: {e}") from e

        upscaled = output_url(output)
        if not upscaled:
            raise UpscaleProviderError("Upscaling returned no image")

        elapsed = int((time.monotonic() - started) * 1000)
        logger.info("Upscaled logo %dx in %dms", scale, elapsed)
        return UpscaleResult(
            original_url=image_url,
            upscaled_url=upscaled,
            scale=scale,
            processing_time_ms=elapsed,
        )
