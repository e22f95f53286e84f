"""Shared pytest fixtures for the GoScaffold test suite.

Provides reusable fixtures for:
- The reference project configuration
- Canned Gemini replies
- A patched ``httpx.AsyncClient`` returning those replies
- An in-memory ``Generator`` for session tests
"""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from goscaffold.generator import GenerationError, GenerationErrorKind
from goscaffold.models import Architecture, GeneratedFileRecord, ProjectConfiguration


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_config() -> ProjectConfiguration:
    """The configuration the front-end starts with."""
    return ProjectConfiguration(
        project_name="my-go-app",
        module_name="github.com/username/my-go-app",
        architecture=Architecture.STANDARD,
        features=["rest", "env"],
    )


@pytest.fixture
def api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Provide a Gemini credential through the environment."""
    monkeypatch.setenv("API_KEY", "test-key")
    return "test-key"


# ---------------------------------------------------------------------------
# Gemini replies
# ---------------------------------------------------------------------------

SAMPLE_FILES: list[dict[str, str]] = [
    {"path": "go.mod", "content": "module github.com/username/my-go-app\n\ngo 1.22\n"},
    {
        "path": "cmd/my-go-app/main.go",
        "content": 'package main\n\nimport "fmt"\n\nfunc main() {\n\tfmt.Println("hello")\n}\n',
    },
    {"path": "README.md", "content": "# my-go-app\n"},
]


def make_gemini_payload(text: str, finish_reason: str = "STOP") -> dict[str, Any]:
    """Build a ``generateContent`` response body carrying *text*."""
    return {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": finish_reason,
            }
        ],
        "modelVersion": "gemini-3-pro-preview",
    }


def make_mock_http_client(payload: dict[str, Any] | None = None, side_effect: Any = None):
    """Return an ``AsyncMock`` standing in for ``httpx.AsyncClient``."""
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = payload or {}
    mock_response.raise_for_status = MagicMock()

    mock_client = AsyncMock()
    if side_effect is not None:
        mock_client.post = AsyncMock(side_effect=side_effect)
    else:
        mock_client.post = AsyncMock(return_value=mock_response)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def sample_reply_text() -> str:
    return json.dumps(SAMPLE_FILES)


@pytest.fixture
def mock_gemini(sample_reply_text: str):
    """Patch httpx.AsyncClient so Gemini calls return ``SAMPLE_FILES``.

    Usage:
        def test_something(mock_gemini):
            with mock_gemini as client_cls:
                ...
    """
    mock_client = make_mock_http_client(make_gemini_payload(sample_reply_text))
    return patch("httpx.AsyncClient", return_value=mock_client)


# ---------------------------------------------------------------------------
# In-memory generator
# ---------------------------------------------------------------------------

class FakeGenerator:
    """``Generator`` double that replays queued outcomes.

    Each queued item is either a list of records (success) or an exception
    (failure). Received configurations are kept in ``calls``.
    """

    def __init__(self, *outcomes: Any) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[ProjectConfiguration] = []

    async def generate(self, config: ProjectConfiguration) -> list[GeneratedFileRecord]:
        self.calls.append(config)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return list(outcome)


@pytest.fixture
def sample_records() -> list[GeneratedFileRecord]:
    return [GeneratedFileRecord(**item) for item in SAMPLE_FILES]


@pytest.fixture
def transport_failure() -> GenerationError:
    return GenerationError(GenerationErrorKind.TRANSPORT, "Cannot connect to Gemini")
