"""Generation state machine.

Pure transition functions over the immutable ``GenerationState``::

    idle ──start──> in_flight ──succeeded──> succeeded ──start──> in_flight ...
                         └────────failed───> failed    ──start──> in_flight ...

There is no terminal state. Each function returns a new state value and
never touches its input.
"""

from __future__ import annotations

from collections.abc import Iterable

from goscaffold.models import GeneratedFileRecord, GenerationPhase, GenerationState


class StateTransitionError(Exception):
    """Raised when a completion arrives for a state that is not in flight."""

    def __init__(self, phase: GenerationPhase, event: str) -> None:
        self.phase = phase
        self.event = event
        super().__init__(f"Cannot apply '{event}' in phase '{phase.value}'")


def initial_state() -> GenerationState:
    return GenerationState()


def start_generation(state: GenerationState) -> GenerationState:
    """Enter ``in_flight``, clearing the error but keeping prior files.

    A state that is already in flight is returned unchanged: overlapping
    requests are ignored rather than queued.
    """
    if state.phase is GenerationPhase.IN_FLIGHT:
        return state
    return GenerationState(phase=GenerationPhase.IN_FLIGHT, files=state.files)


def generation_succeeded(
    state: GenerationState, files: Iterable[GeneratedFileRecord]
) -> GenerationState:
    """Store *files* (replacing any previous set) and enter ``succeeded``."""
    if state.phase is not GenerationPhase.IN_FLIGHT:
        raise StateTransitionError(state.phase, "succeeded")
    return GenerationState(phase=GenerationPhase.SUCCEEDED, files=tuple(files))


def generation_failed(state: GenerationState, message: str) -> GenerationState:
    """Record *message* and enter ``failed``; stored files stay as they were."""
    if state.phase is not GenerationPhase.IN_FLIGHT:
        raise StateTransitionError(state.phase, "failed")
    return GenerationState(
        phase=GenerationPhase.FAILED, files=state.files, error_message=message
    )
