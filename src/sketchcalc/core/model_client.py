"""Generative model access for SketchCalc.

This module hides the upstream multimodal model behind a narrow capability
interface, :class:`ModelClient`, so that the request handler and the
response normalizer never touch the Gemini SDK directly.

Capability
----------
``await client.generate(prompt, image_data) -> str``

- ``prompt`` is the fully rendered instruction text.
- ``image_data`` is the base64 body of the drawing (no data-URI prefix).
- The return value is whatever text the model produced; it is NOT expected
  to be valid JSON.

Any failure, including an undecodable image payload, surfaces as
:class:`~sketchcalc.core.errors.UpstreamError`.  Calls are never retried
and never cached.

Usage
-----
::

    from sketchcalc.core.model_client import GeminiModelClient

    client = GeminiModelClient(api_key="...", model_name="gemini-2.0-flash")
    text = await client.generate(prompt, image_data)

Tests substitute a small :class:`ModelClient` subclass that returns canned
text, so no network access is needed.
"""

from __future__ import annotations

import base64
import logging
from abc import ABC, abstractmethod

from google import genai
from google.genai import types

from sketchcalc.core.errors import UpstreamError

logger = logging.getLogger(__name__)

# Drawings are always submitted as PNG; the canvas front-end exports PNG.
IMAGE_MIME_TYPE = "image/png"


class ModelClient(ABC):
    """Abstract capability: submit prompt text plus an image, receive text."""

    @abstractmethod
    async def generate(self, prompt: str, image_data: str) -> str:
        """Run a single completion.

        Args:
            prompt: Instruction text.
            image_data: Base64-encoded image body.

        Returns:
            The raw completion text.

        Raises:
            UpstreamError: If the model call fails for any reason.
        """


class GeminiModelClient(ModelClient):
    """:class:`ModelClient` backed by the ``google-genai`` SDK.

    The SDK client is created once with the injected API key and reused
    for every request; it holds no per-request state.
    """

    def __init__(self, api_key: str, model_name: str) -> None:
        self.model_name = model_name
        self._client = genai.Client(api_key=api_key)
        logger.info(f"Initialized Gemini client for model {model_name}")

    async def generate(self, prompt: str, image_data: str) -> str:
        try:
            image_bytes = base64.b64decode(image_data)
            response = await self._client.aio.models.generate_content(
                model=self.model_name,
                contents=[
                    prompt,
                    types.Part.from_bytes(data=image_bytes, mime_type=IMAGE_MIME_TYPE),
                ],
            )
            text = response.text
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise UpstreamError(str(e)) from e

        return text or ""
