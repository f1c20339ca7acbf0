"""OpenAI-compatible vision extractor.

Works with OpenAI, OpenRouter, and any OpenAI-compatible API
by setting a custom base_url.
"""

from __future__ import annotations

import json
import logging
import re

from docsnap.domain.models import Frame
from docsnap.extractor.base import ExtractionError, TextExtractor
from docsnap.utils.imaging import fit_for_vision_model, numpy_to_base64_png

logger = logging.getLogger(__name__)

DOCUMENT_SYSTEM_PROMPT = """You are reading a printed paper document through a phone or webcam photograph.

Transcribe all readable text, top to bottom, preserving line breaks.
For text too small or blurry to read, write "[unreadable]".
Do not describe the image or add commentary.

Respond ONLY with JSON:
{
    "text": "all readable text"
}"""


class OpenAIExtractor(TextExtractor):
    """Extracts document text using a vision chat completion."""

    backend = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        base_url: str | None = None,
        max_tokens: int = 2048,
        system_prompt: str | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._max_tokens = max_tokens
        self._system_prompt = system_prompt or DOCUMENT_SYSTEM_PROMPT
        self._client = None

    @property
    def model(self) -> str:
        return self._model

    async def _ensure_client(self) -> None:
        """Lazily initialize the OpenAI async client."""
        if self._client is not None:
            return
        from openai import AsyncOpenAI

        kwargs = {"api_key": self._api_key}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        self._client = AsyncOpenAI(**kwargs)
        logger.info("Initialized OpenAI client (model=%s, base_url=%s)", self._model, self._base_url)

    async def extract(self, frame: Frame) -> str:
        """Transcribe a document photograph using the vision API."""
        await self._ensure_client()
        b64_image = numpy_to_base64_png(fit_for_vision_model(frame.image))

        messages = [
            {"role": "system", "content": self._system_prompt},
            {
                "role": "user",
                "content": [
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:image/png;base64,{b64_image}",
                            "detail": "high",
                        },
                    },
                    {
                        "type": "text",
                        "text": "Transcribe the text on this document.",
                    },
                ],
            },
        ]

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                max_tokens=self._max_tokens,
                messages=messages,
            )
        except Exception as e:
            raise ExtractionError(f"OpenAI API call failed: {e}", backend=self.backend) from e

        raw_text = response.choices[0].message.content or ""
        logger.debug("Extractor raw response: %s", raw_text[:200])
        return self._parse_response(raw_text)

    def _parse_response(self, raw_response: str) -> str:
        """Pull the transcription out of a model response.

        Models do not always honour the JSON instruction, so a reply
        without a usable ``text`` field is returned verbatim.
        """
        body = raw_response.strip()
        if not body:
            raise ExtractionError("Empty response from model", backend=self.backend)

        fenced = _FENCE_RE.search(body)
        if fenced:
            body = fenced.group(1).strip()

        obj = _OBJECT_RE.search(body)
        if obj is None:
            return body

        data = _loads_lenient(obj.group(0))
        if not isinstance(data, dict) or "text" not in data:
            logger.warning("Extractor reply has no JSON text field, using raw reply")
            return body
        return str(data["text"]).strip()

    async def health_check(self) -> bool:
        """Check if the API is reachable."""
        try:
            await self._ensure_client()
            await self._client.models.list()
            return True
        except Exception as e:
            logger.warning("Health check failed: %s", e)
            return False


_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_BAD_ESCAPE_RE = re.compile(r'\\(?!["\\/bfnrtu])')


def _loads_lenient(candidate: str) -> object | None:
    """json.loads that doubles stray backslashes (e.g. Windows paths) on a retry."""
    for attempt in (candidate, _BAD_ESCAPE_RE.sub(r"\\\\", candidate)):
        try:
            return json.loads(attempt)
        except json.JSONDecodeError:
            continue
    return None
