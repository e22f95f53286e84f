"""GoScaffold configuration.

Typed settings for the remote model endpoint, the export directory and the
starting project configuration. All settings use Pydantic v2 models so they
are validated at construction time and serialise to/from JSON or environment
variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from goscaffold.models import ProjectConfiguration


class GeminiConfig(BaseModel):
    """Connection settings for the Gemini ``generateContent`` endpoint."""

    url: str = Field(default="https://generativelanguage.googleapis.com/v1beta")
    model: str = Field(default="gemini-3-pro-preview")
    api_key_env: str = Field(
        default="API_KEY", description="Environment variable holding the API key"
    )
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Per-request timeout in seconds; None waits indefinitely"
    )


class Config(BaseModel):
    """Global GoScaffold configuration.

    Created once by the CLI entry point and passed to the generator and the
    session.
    """

    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    output_dir: Path = Field(default=Path("./generated"))
    project: ProjectConfiguration = Field(default_factory=ProjectConfiguration)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            GOSCAFFOLD_GEMINI_URL, GOSCAFFOLD_MODEL, GOSCAFFOLD_API_KEY_ENV,
            GOSCAFFOLD_TIMEOUT, GOSCAFFOLD_OUTPUT_DIR.
        """
        gemini_kwargs: dict[str, Any] = {}
        if os.environ.get("GOSCAFFOLD_GEMINI_URL"):
            gemini_kwargs["url"] = os.environ["GOSCAFFOLD_GEMINI_URL"]
        if os.environ.get("GOSCAFFOLD_MODEL"):
            gemini_kwargs["model"] = os.environ["GOSCAFFOLD_MODEL"]
        if os.environ.get("GOSCAFFOLD_API_KEY_ENV"):
            gemini_kwargs["api_key_env"] = os.environ["GOSCAFFOLD_API_KEY_ENV"]
        if os.environ.get("GOSCAFFOLD_TIMEOUT"):
            gemini_kwargs["timeout"] = float(os.environ["GOSCAFFOLD_TIMEOUT"])

        return cls(
            gemini=GeminiConfig(**gemini_kwargs),
            output_dir=Path(os.environ.get("GOSCAFFOLD_OUTPUT_DIR", "./generated")),
        )
