"""Session-level state for a GoScaffold front-end.

``ConfigurationStore`` holds the project configuration being edited.
``GenerationSession`` owns the one ``GenerationState`` of a session and drives
it through a generation cycle using any ``Generator`` implementation.

Usage::

    session = GenerationSession(ProjectGenerator())
    session.config_store.toggle_feature("docker")
    state = await session.generate()
    if state.phase is GenerationPhase.SUCCEEDED:
        print(session.selected_file.content)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Any, Optional

from rich.markup import escape

from goscaffold.generator import GENERIC_FAILURE_MESSAGE, GenerationError, Generator
from goscaffold.models import (
    Architecture,
    GeneratedFileRecord,
    GenerationPhase,
    GenerationState,
    ProjectConfiguration,
)
from goscaffold.state import (
    generation_failed,
    generation_succeeded,
    initial_state,
    start_generation,
)
from goscaffold.utils import print_error

StateListener = Callable[[GenerationState], None]


# ---------------------------------------------------------------------------
# Configuration Store
# ---------------------------------------------------------------------------


class ConfigurationStore:
    """Holds the current ``ProjectConfiguration``.

    Every edit validates and swaps in a new configuration value; invalid
    edits raise ``pydantic.ValidationError`` and leave the store unchanged.
    """

    def __init__(self, config: Optional[ProjectConfiguration] = None) -> None:
        self._config = config or ProjectConfiguration()

    @property
    def config(self) -> ProjectConfiguration:
        return self._config

    def _replace(self, **changes: Any) -> ProjectConfiguration:
        data = self._config.model_dump()
        data.update(changes)
        self._config = ProjectConfiguration.model_validate(data)
        return self._config

    def set_project_name(self, name: str) -> ProjectConfiguration:
        return self._replace(project_name=name)

    def set_module_name(self, module: str) -> ProjectConfiguration:
        return self._replace(module_name=module)

    def set_architecture(self, architecture: Architecture | str) -> ProjectConfiguration:
        return self._replace(architecture=Architecture(architecture))

    def set_features(self, features: Iterable[str]) -> ProjectConfiguration:
        return self._replace(features=list(features))

    def toggle_feature(self, feature: str) -> ProjectConfiguration:
        """Add *feature* if absent, remove it if present."""
        if feature in self._config.features:
            return self._replace(features=list(self._config.features - {feature}))
        return self._replace(features=[*self._config.features, feature])


# ---------------------------------------------------------------------------
# Generation Session
# ---------------------------------------------------------------------------


class GenerationSession:
    """Drives generations for a single user session.

    Attributes:
        generator: Provider used for remote generation.
        config_store: The configuration being edited.
        state: Current generation state; replaced wholesale on each transition.
        selected_path: Path of the file the user is viewing, if any.
    """

    def __init__(
        self,
        generator: Generator,
        config: Optional[ProjectConfiguration] = None,
    ) -> None:
        self.generator = generator
        self.config_store = ConfigurationStore(config)
        self.state: GenerationState = initial_state()
        self.selected_path: Optional[str] = None
        self._listeners: list[StateListener] = []

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _set_state(self, state: GenerationState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    async def generate(self) -> GenerationState:
        """Run one generation cycle for the current configuration.

        While a generation is already in flight this returns the current
        state without issuing another remote call.
        """
        if self.state.phase is GenerationPhase.IN_FLIGHT:
            return self.state

        self._set_state(start_generation(self.state))
        try:
            files = await self.generator.generate(self.config_store.config)
        except GenerationError as exc:
            self._set_state(generation_failed(self.state, str(exc)))
            return self.state
        except asyncio.CancelledError:
            self._set_state(generation_failed(self.state, GENERIC_FAILURE_MESSAGE))
            raise
        except Exception as exc:
            print_error(f"Generator raised unexpectedly: {escape(repr(exc))}")
            self._set_state(generation_failed(self.state, GENERIC_FAILURE_MESSAGE))
            return self.state

        self._set_state(generation_succeeded(self.state, files))
        if self.state.files:
            self.selected_path = self.state.files[0].path
        return self.state

    @property
    def selected_file(self) -> Optional[GeneratedFileRecord]:
        if self.selected_path is None:
            return None
        return self.state.find_file(self.selected_path)

    def select_file(self, path: str) -> GeneratedFileRecord:
        """Select the file stored under *path*.

        Raises:
            KeyError: If no stored file has that path.
        """
        record = self.state.find_file(path)
        if record is None:
            raise KeyError(path)
        self.selected_path = path
        return record
