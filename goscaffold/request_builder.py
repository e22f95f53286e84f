"""Prompt and response-schema construction for project generation.

Turns a ``ProjectConfiguration`` into the natural-language instruction sent to
the model and the structured schema the reply must follow. Everything here is
pure: no I/O and no randomness, so equal configurations always produce equal
requests.
"""

from __future__ import annotations

import textwrap
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from goscaffold.models import Architecture, ProjectConfiguration

_LAYOUT_GUIDANCE = (
    "Follow the standard Go project layout (e.g., cmd/, internal/, pkg/) "
    'if the architecture is "Standard" or "Clean".'
)

_CONVENTIONS = textwrap.dedent("""\
    Ensure code is idiomatic and uses recent Go features (1.21+).
    Include a go.mod file and a useful README.md.""")

# Gemini schema dialect: upper-case type names.
_OUTPUT_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "path": {
                "type": "STRING",
                "description": "The relative file path including directory structure.",
            },
            "content": {
                "type": "STRING",
                "description": "The full content of the file.",
            },
        },
        "required": ["path", "content"],
    },
}


class GenerationRequest(BaseModel):
    """The instruction text plus the schema constraining the reply."""

    model_config = ConfigDict(frozen=True)

    instruction: str = Field(..., description="Natural-language prompt")
    output_schema: dict[str, Any] = Field(..., description="Response shape constraint")


def _format_features(features: list[str]) -> str:
    """Comma-join feature identifiers; an empty selection renders as an empty string."""
    return ", ".join(features)


def output_schema() -> dict[str, Any]:
    """Return a fresh copy of the array-of-files response schema."""
    items = _OUTPUT_SCHEMA["items"]
    return {
        "type": _OUTPUT_SCHEMA["type"],
        "items": {
            "type": items["type"],
            "properties": {name: dict(prop) for name, prop in items["properties"].items()},
            "required": list(items["required"]),
        },
    }


def build_instruction(config: ProjectConfiguration) -> str:
    """Render the prompt for *config*."""
    architecture = Architecture(config.architecture)
    lines = [
        "Generate a complete idiomatic Go project structure for the following configuration:",
        f"- Project Name: {config.project_name}",
        f"- Go Module Name: {config.module_name}",
        f"- Architecture: {architecture.value}",
        f"- Selected Features: {_format_features(config.sorted_features)}",
        "",
        "Please provide a list of files with their relative paths and full source code content.",
        _LAYOUT_GUIDANCE,
        _CONVENTIONS,
    ]
    return "\n".join(lines)


def build_request(config: ProjectConfiguration) -> GenerationRequest:
    """Build the full generation request for *config*."""
    return GenerationRequest(
        instruction=build_instruction(config),
        output_schema=output_schema(),
    )
