"""Remote project generation.

``ProjectGenerator`` is the typed client between a ``ProjectConfiguration``
and the remote model: it renders the request, performs exactly one call and
decodes the reply into ``GeneratedFileRecord`` values. Every failure, whatever
its cause, surfaces as a ``GenerationError`` carrying the same generic
message; the underlying cause is kept on ``kind`` and ``detail``.
"""

from __future__ import annotations

import os
from enum import Enum
from typing import Optional, Protocol

from pydantic import TypeAdapter, ValidationError
from rich.markup import escape

from goscaffold.config import GeminiConfig
from goscaffold.gemini_client import GeminiClient
from goscaffold.models import GeneratedFileRecord, ProjectConfiguration
from goscaffold.request_builder import build_request
from goscaffold.utils import print_error

GENERIC_FAILURE_MESSAGE = "Failed to generate project. Please try again."

_RECORDS = TypeAdapter(list[GeneratedFileRecord])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GenerationErrorKind(str, Enum):
    """Internal classification of a failed generation."""
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    EMPTY_RESPONSE = "empty_response"
    RESPONSE_SHAPE = "response_shape"


class GenerationError(Exception):
    """Raised when a generation cannot produce a list of files.

    ``str(error)`` is always the generic user-facing message.
    """

    def __init__(
        self,
        kind: GenerationErrorKind,
        detail: str = "",
        message: str = GENERIC_FAILURE_MESSAGE,
    ) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(message)


# ---------------------------------------------------------------------------
# Generator interface
# ---------------------------------------------------------------------------


class Generator(Protocol):
    """Anything that can turn a configuration into generated files."""

    async def generate(self, config: ProjectConfiguration) -> list[GeneratedFileRecord]:
        ...


def parse_records(raw_text: str) -> list[GeneratedFileRecord]:
    """Decode the model's raw reply into file records.

    Surrounding whitespace is ignored. Empty text, invalid JSON and anything
    other than an array of ``{path, content}`` string objects raise
    ``GenerationError``.
    """
    text = raw_text.strip()
    if not text:
        raise GenerationError(GenerationErrorKind.EMPTY_RESPONSE, "Model returned no text")
    try:
        return _RECORDS.validate_json(text)
    except ValidationError as exc:
        raise GenerationError(
            GenerationErrorKind.RESPONSE_SHAPE,
            f"Reply does not match the file schema: {exc.error_count()} error(s)",
        ) from exc


class ProjectGenerator:
    """Generates project files through the Gemini API.

    Attributes:
        settings: Endpoint, model and credential settings.
    """

    def __init__(self, settings: Optional[GeminiConfig] = None) -> None:
        self.settings = settings or GeminiConfig()

    def _read_api_key(self) -> str:
        api_key = os.environ.get(self.settings.api_key_env, "")
        if not api_key:
            raise GenerationError(
                GenerationErrorKind.CONFIGURATION,
                f"Environment variable {self.settings.api_key_env} is not set",
            )
        return api_key

    def _client(self, api_key: str) -> GeminiClient:
        return GeminiClient(
            api_key=api_key,
            base_url=self.settings.url,
            model=self.settings.model,
            timeout=self.settings.timeout,
        )

    async def generate(self, config: ProjectConfiguration) -> list[GeneratedFileRecord]:
        """Generate the files for *config* with a single remote call.

        Raises:
            GenerationError: On any failure; no partial result is returned.
        """
        try:
            request = build_request(config)
            client = self._client(self._read_api_key())
            response = await client.generate(
                request.instruction, response_schema=request.output_schema
            )
            if not response.success:
                raise GenerationError(GenerationErrorKind.TRANSPORT, response.error or "")
            return parse_records(response.text)
        except GenerationError as exc:
            print_error(f"Error calling Gemini API ({exc.kind.value}): {escape(exc.detail)}")
            raise
