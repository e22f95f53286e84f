"""Unit tests for the session layer (goscaffold.session).

Tests cover:
- ConfigurationStore edits and validation
- GenerationSession.generate success / failure cycles
- First-file selection and select_file()
- Listener notification
- Overlapping generate() calls while in flight
"""

from __future__ import annotations

import asyncio

import pytest
from pydantic import ValidationError

from goscaffold.generator import GENERIC_FAILURE_MESSAGE
from goscaffold.models import (
    Architecture,
    GeneratedFileRecord,
    GenerationPhase,
    GenerationState,
    ProjectConfiguration,
)
from goscaffold.session import ConfigurationStore, GenerationSession
from tests.conftest import FakeGenerator


# ---------------------------------------------------------------------------
# ConfigurationStore
# ---------------------------------------------------------------------------


class TestConfigurationStore:
    @pytest.mark.unit
    def test_default_configuration(self):
        assert ConfigurationStore().config == ProjectConfiguration()

    @pytest.mark.unit
    def test_edits_replace_value(self):
        store = ConfigurationStore()
        before = store.config
        store.set_project_name("billing")
        store.set_module_name("github.com/acme/billing")
        store.set_architecture("Clean")

        assert before.project_name == "my-go-app"
        assert store.config.project_name == "billing"
        assert store.config.module_name == "github.com/acme/billing"
        assert store.config.architecture is Architecture.CLEAN

    @pytest.mark.unit
    def test_toggle_feature(self):
        store = ConfigurationStore()
        store.toggle_feature("docker")
        assert store.config.features == frozenset({"rest", "env", "docker"})
        store.toggle_feature("rest")
        assert store.config.features == frozenset({"env", "docker"})

    @pytest.mark.unit
    def test_set_features_deduplicates(self):
        store = ConfigurationStore()
        store.set_features(["sql", "sql", "grpc"])
        assert store.config.features == frozenset({"sql", "grpc"})

    @pytest.mark.unit
    def test_invalid_edit_leaves_store_unchanged(self):
        store = ConfigurationStore()
        before = store.config
        with pytest.raises(ValueError):
            store.set_architecture("Hexagonal")
        with pytest.raises(ValidationError):
            store.set_features(["rest", ""])
        assert store.config == before


# ---------------------------------------------------------------------------
# GenerationSession
# ---------------------------------------------------------------------------


class TestGenerationSession:
    @pytest.mark.unit
    def test_starts_idle(self):
        session = GenerationSession(FakeGenerator())
        assert session.state == GenerationState()
        assert session.selected_file is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success(self, sample_records):
        generator = FakeGenerator(sample_records)
        session = GenerationSession(generator)

        state = await session.generate()

        assert state.phase is GenerationPhase.SUCCEEDED
        assert state.files == tuple(sample_records)
        assert state.error_message is None
        assert generator.calls == [ProjectConfiguration()]
        assert session.selected_file == sample_records[0]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reference_example(self, sample_config):
        record = GeneratedFileRecord(path="go.mod", content="module ...")
        session = GenerationSession(FakeGenerator([record]), sample_config)

        state = await session.generate()

        assert state.phase is GenerationPhase.SUCCEEDED
        assert state.files == (record,)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_keeps_previous_files(self, sample_records, transport_failure):
        session = GenerationSession(FakeGenerator(sample_records, transport_failure))
        await session.generate()

        state = await session.generate()

        assert state.phase is GenerationPhase.FAILED
        assert state.error_message == GENERIC_FAILURE_MESSAGE
        assert state.files == tuple(sample_records)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retry_after_failure_clears_error(self, sample_records, transport_failure):
        session = GenerationSession(FakeGenerator(transport_failure, sample_records))
        await session.generate()
        state = await session.generate()
        assert state.phase is GenerationPhase.SUCCEEDED
        assert state.error_message is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_uses_current_configuration(self, sample_records):
        generator = FakeGenerator(sample_records)
        session = GenerationSession(generator)
        session.config_store.set_architecture(Architecture.FLAT)
        await session.generate()
        assert generator.calls[0].architecture is Architecture.FLAT

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_result_selects_nothing(self):
        session = GenerationSession(FakeGenerator([]))
        state = await session.generate()
        assert state.phase is GenerationPhase.SUCCEEDED
        assert session.selected_path is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_listeners_see_every_transition(self, sample_records):
        session = GenerationSession(FakeGenerator(sample_records, sample_records))
        seen: list[GenerationPhase] = []
        unsubscribe = session.subscribe(lambda state: seen.append(state.phase))

        await session.generate()
        unsubscribe()
        await session.generate()

        assert seen == [GenerationPhase.IN_FLIGHT, GenerationPhase.SUCCEEDED]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_overlapping_generate_is_ignored(self, sample_records):
        release = asyncio.Event()

        class SlowGenerator(FakeGenerator):
            async def generate(self, config):
                self.calls.append(config)
                await release.wait()
                return sample_records

        generator = SlowGenerator()
        session = GenerationSession(generator)

        first = asyncio.create_task(session.generate())
        await asyncio.sleep(0)
        assert session.state.phase is GenerationPhase.IN_FLIGHT

        second = await session.generate()
        assert second.phase is GenerationPhase.IN_FLIGHT

        release.set()
        final = await first
        assert final.phase is GenerationPhase.SUCCEEDED
        assert len(generator.calls) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unexpected_exception_fails_and_recovers(self, sample_records):
        session = GenerationSession(FakeGenerator(RuntimeError("provider bug"), sample_records))

        state = await session.generate()
        assert state.phase is GenerationPhase.FAILED
        assert state.error_message == GENERIC_FAILURE_MESSAGE

        state = await session.generate()
        assert state.phase is GenerationPhase.SUCCEEDED
        assert state.files == tuple(sample_records)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancelled_generation_does_not_stay_in_flight(self, sample_records):
        started = asyncio.Event()

        class HangingGenerator(FakeGenerator):
            async def generate(self, config):
                started.set()
                await asyncio.Event().wait()

        session = GenerationSession(HangingGenerator())
        task = asyncio.create_task(session.generate())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.state.phase is GenerationPhase.FAILED
        session.generator = FakeGenerator(sample_records)
        state = await session.generate()
        assert state.phase is GenerationPhase.SUCCEEDED


class TestSelectFile:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_select_by_path(self, sample_records):
        session = GenerationSession(FakeGenerator(sample_records))
        await session.generate()

        record = session.select_file("README.md")

        assert record == sample_records[2]
        assert session.selected_file == sample_records[2]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_path(self, sample_records):
        session = GenerationSession(FakeGenerator(sample_records))
        await session.generate()
        with pytest.raises(KeyError):
            session.select_file("missing.go")
        assert session.selected_path == sample_records[0].path
