import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"

# SDK-style config keys that live at the top level of the REST request.
_TOP_LEVEL_CONFIG_KEYS = ("tools", "toolConfig", "safetySettings", "cachedContent")


class GeminiError(Exception):
    """The upstream model call failed or returned something unusable."""


def build_request(contents: Any, config: dict | None = None) -> dict:
    """Turn SDK-style ``contents`` + ``config`` into a generateContent REST body."""
    if isinstance(contents, str):
        contents = [{"role": "user", "parts": [{"text": contents}]}]
    elif isinstance(contents, dict):
        contents = [contents]

    payload: dict[str, Any] = {"contents": contents}
    generation_config: dict[str, Any] = {}
    for key, value in (config or {}).items():
        if key == "systemInstruction":
            payload[key] = {"parts": [{"text": value}]} if isinstance(value, str) else value
        elif key in _TOP_LEVEL_CONFIG_KEYS:
            payload[key] = value
        else:
            generation_config[key] = value
    if generation_config:
        payload["generationConfig"] = generation_config
    return payload


def extract_text(response: dict) -> str:
    """Text of the first candidate, joined across its parts."""
    try:
        parts = response["candidates"][0]["content"]["parts"]
        return "".join(part.get("text", "") for part in parts)
    except (KeyError, IndexError, TypeError) as exc:
        raise GeminiError(f"Unexpected Gemini response shape: {exc!r}") from exc


def _chunk_text(chunk: dict) -> str:
    # Stream chunks may carry only usage metadata or a finish reason.
    candidates = chunk.get("candidates") or []
    if not candidates:
        return ""
    parts = candidates[0].get("content", {}).get("parts", [])
    return "".join(part.get("text", "") for part in parts)


class GeminiClient:
    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.headers = {
            "x-goog-api-key": api_key,
            "Content-Type": "application/json",
        }

    # -- Low-level helpers --

    def _model_url(self, model: str, method: str) -> str:
        return f"{self.base_url}/models/{model}:{method}"

    # -- Model calls --

    async def generate_content(self, model: str, contents: Any, config: dict | None = None) -> dict:
        """Run a single generateContent call and return the provider's JSON as-is."""
        logger.debug("generateContent model=%s", model)
        try:
            response = await self._client.post(
                self._model_url(model, "generateContent"),
                headers=self.headers,
                json=build_request(contents, config),
            )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise GeminiError(f"Gemini API returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GeminiError(f"Gemini API request failed: {exc!r}") from exc
        except ValueError as exc:
            raise GeminiError("Gemini API returned malformed JSON") from exc

    async def stream_content(self, model: str, contents: Any, config: dict | None = None) -> AsyncIterator[str]:
        """Yield text deltas from streamGenerateContent as they arrive."""
        logger.debug("streamGenerateContent model=%s", model)
        try:
            async with self._client.stream(
                "POST",
                self._model_url(model, "streamGenerateContent"),
                params={"alt": "sse"},
                headers=self.headers,
                json=build_request(contents, config),
            ) as response:
                response.raise_for_status()
                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if not data:
                        continue
                    delta = _chunk_text(json.loads(data))
                    if delta:
                        yield delta
        except httpx.HTTPStatusError as exc:
            raise GeminiError(f"Gemini API returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GeminiError(f"Gemini stream failed: {exc!r}") from exc
        except ValueError as exc:
            raise GeminiError("Gemini stream returned malformed JSON") from exc

    async def close(self):
        """Close the underlying HTTP client."""
        await self._client.aclose()
