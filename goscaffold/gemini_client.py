"""Async client for the Gemini ``generateContent`` REST API.

Wraps a single structured-output call with proper error handling and a
structured response. The client never raises for transport problems: every
outcome comes back as a ``GeminiResponse`` whose ``success`` flag tells the
caller what happened.

Typical usage::

    client = GeminiClient(api_key="...")
    resp = await client.generate("List three colours", response_schema={"type": "ARRAY"})
    print(resp.text)
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field


class GeminiResponse(BaseModel):
    """Structured response from a Gemini generation call."""

    text: str = Field(default="", description="Generated text")
    model: str = Field(default="", description="Model that produced the response")
    finish_reason: str = Field(default="", description="Why the model stopped")
    success: bool = Field(default=True, description="Whether the request succeeded")
    error: str | None = Field(default=None, description="Error message on failure")


class GeminiClient:
    """Async client for the Gemini REST API.

    Uses ``httpx.AsyncClient`` for non-blocking HTTP. One call to
    :meth:`generate` issues exactly one request.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "gemini-3-pro-preview",
        timeout: Optional[float] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and credentials."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"x-goog-api-key": self.api_key},
            timeout=httpx.Timeout(self.timeout),
        )

    @staticmethod
    def _build_payload(prompt: str, response_schema: dict[str, Any] | None) -> dict:
        payload: dict = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if response_schema is not None:
            payload["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }
        return payload

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Concatenate the text parts of the first candidate.

        Missing candidates or parts yield an empty string.
        """
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

    @staticmethod
    def _extract_finish_reason(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        return candidates[0].get("finishReason", "")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate(
        self,
        prompt: str,
        response_schema: dict[str, Any] | None = None,
    ) -> GeminiResponse:
        """Generate content for *prompt*.

        Args:
            prompt: The user prompt.
            response_schema: Optional schema; when given the reply is
                constrained to JSON matching it.

        Returns:
            A ``GeminiResponse`` with the generated text or an error.
        """
        payload = self._build_payload(prompt, response_schema)

        try:
            async with self._client() as client:
                response = await client.post(
                    f"/models/{self.model}:generateContent", json=payload
                )
                response.raise_for_status()
                data = response.json()
                return GeminiResponse(
                    text=self._extract_text(data),
                    model=data.get("modelVersion", self.model),
                    finish_reason=self._extract_finish_reason(data),
                    success=True,
                )
        except httpx.ConnectError:
            return GeminiResponse(
                model=self.model,
                success=False,
                error=f"Cannot connect to Gemini at {self.base_url}.",
            )
        except httpx.TimeoutException:
            if self.timeout is None:
                message = "Request to Gemini timed out."
            else:
                message = f"Request to Gemini timed out after {self.timeout}s."
            return GeminiResponse(model=self.model, success=False, error=message)
        except httpx.HTTPStatusError as exc:
            return GeminiResponse(
                model=self.model,
                success=False,
                error=f"Gemini returned HTTP {exc.response.status_code}: {exc.response.text[:500]}",
            )
        except Exception as exc:  # noqa: BLE001
            return GeminiResponse(
                model=self.model,
                success=False,
                error=f"Unexpected error during Gemini generate: {exc}",
            )
