"""GoScaffold -- Go project generation backed by a remote language model.

Usage::

    from goscaffold import GenerationSession, ProjectGenerator

    session = GenerationSession(ProjectGenerator())
    state = await session.generate()
    for record in state.files:
        print(record.path)
"""

from goscaffold.generator import GenerationError, ProjectGenerator
from goscaffold.models import (
    Architecture,
    GeneratedFileRecord,
    GenerationPhase,
    GenerationState,
    ProjectConfiguration,
)
from goscaffold.request_builder import build_request
from goscaffold.session import ConfigurationStore, GenerationSession

__all__ = [
    "Architecture",
    "ConfigurationStore",
    "GeneratedFileRecord",
    "GenerationError",
    "GenerationPhase",
    "GenerationSession",
    "GenerationState",
    "ProjectConfiguration",
    "ProjectGenerator",
    "build_request",
]
