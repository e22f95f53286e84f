"""Pydantic v2 models for GoScaffold.

Defines the project configuration a user edits, the file records returned by
the remote generator, and the immutable generation state consumed by the
front-end.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Architecture(str, Enum):
    """Layout style of the generated Go project."""
    STANDARD = "Standard"
    CLEAN = "Clean"
    FLAT = "Flat"

    @property
    def display_name(self) -> str:
        return ARCHITECTURE_CATALOG[self][0]

    @property
    def description(self) -> str:
        return ARCHITECTURE_CATALOG[self][1]


class GenerationPhase(str, Enum):
    """Lifecycle phase of a generation."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ARCHITECTURE_CATALOG: dict[Architecture, tuple[str, str]] = {
    Architecture.STANDARD: (
        "Standard Layout",
        "GitHub standard project layout (cmd/, internal/, pkg/)",
    ),
    Architecture.CLEAN: (
        "Clean Architecture",
        "Domain-driven design with layers (domain, usecase, delivery)",
    ),
    Architecture.FLAT: (
        "Flat Structure",
        "Simple, flat file structure for small projects",
    ),
}

# Feature toggles offered to the user: identifier -> display name.
FEATURE_CATALOG: dict[str, str] = {
    "sql": "SQL Database (GORM)",
    "rest": "REST API (Gin)",
    "grpc": "gRPC Support",
    "docker": "Docker & Compose",
    "env": "Env Configuration",
    "testing": "Unit Testing Setup",
}


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------

class ProjectConfiguration(BaseModel):
    """User-editable description of the project to generate.

    ``features`` is a set: ordering is irrelevant and duplicates collapse.
    Instances are frozen, so every edit produces a new configuration.
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(default="my-go-app", description="Project name")
    module_name: str = Field(
        default="github.com/username/my-go-app", description="Go module path"
    )
    architecture: Architecture = Field(
        default=Architecture.STANDARD, description="Project layout style"
    )
    features: frozenset[str] = Field(
        default_factory=lambda: frozenset({"rest", "env"}),
        description="Selected feature identifiers",
    )

    @field_validator("features", mode="before")
    @classmethod
    def _normalise_features(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple, set, frozenset)):
            cleaned = []
            for item in value:
                if not isinstance(item, str) or not item.strip():
                    raise ValueError(f"Invalid feature identifier: {item!r}")
                cleaned.append(item.strip())
            return frozenset(cleaned)
        return value

    @property
    def sorted_features(self) -> list[str]:
        """Feature identifiers in a stable order."""
        return sorted(self.features)


# ---------------------------------------------------------------------------
# Generated output
# ---------------------------------------------------------------------------

class GeneratedFileRecord(BaseModel):
    """One ``path``/``content`` pair returned by the generator."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    path: str = Field(..., description="The relative file path including directory structure.")
    content: str = Field(..., description="The full content of the file.")


class GenerationState(BaseModel):
    """Snapshot of the generation lifecycle.

    Never mutated in place: the reducer functions in ``goscaffold.state``
    return a fresh instance for every transition.
    """

    model_config = ConfigDict(frozen=True)

    phase: GenerationPhase = Field(default=GenerationPhase.IDLE)
    files: tuple[GeneratedFileRecord, ...] = Field(default=())
    error_message: Optional[str] = Field(default=None)

    @model_validator(mode="after")
    def _check_error_matches_phase(self) -> "GenerationState":
        if self.phase is GenerationPhase.FAILED and not self.error_message:
            raise ValueError("A failed state requires an error message")
        if self.phase is not GenerationPhase.FAILED and self.error_message is not None:
            raise ValueError("Only a failed state may carry an error message")
        return self

    @property
    def is_generating(self) -> bool:
        return self.phase is GenerationPhase.IN_FLIGHT

    @property
    def is_authoritative(self) -> bool:
        """True when ``files`` belongs to the latest completed generation."""
        return self.phase is GenerationPhase.SUCCEEDED

    def find_file(self, path: str) -> Optional[GeneratedFileRecord]:
        """Return the record stored under *path*, if any."""
        for record in self.files:
            if record.path == path:
                return record
        return None
