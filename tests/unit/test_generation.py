"""Unit tests for GenerationPipeline.

Tests cover:
- Status transitions on success and failure
- WorldEntry assembly
- Error message defaults
- Rejection of re-entrant and invalid requests
"""

import asyncio

import pytest

from world_studio.core.errors import (
    ConfigurationError,
    ErrorKind,
    FormatError,
    GenerationError,
    PipelineBusyError,
    TransportError,
)
from world_studio.core.generation import DEFAULT_ERROR_MESSAGE
from world_studio.core.models import GenerationStatus, Lore
from tests.mocks.provider import DEFAULT_IMAGE, DEFAULT_LORE


@pytest.fixture
def statuses(pipeline) -> list[GenerationStatus]:
    """Record every status the pipeline moves through."""
    seen: list[GenerationStatus] = []
    pipeline.add_listener(seen.append)
    return seen


class TestGenerationSuccess:
    """Successful runs."""

    @pytest.mark.asyncio
    async def test_status_sequence(self, pipeline, statuses) -> None:
        """Idle -> Thinking -> Painting -> Completed."""
        assert pipeline.status == GenerationStatus.IDLE

        await pipeline.generate("a city under a frozen waterfall", "Cyberpunk")

        assert statuses == [
            GenerationStatus.THINKING,
            GenerationStatus.PAINTING,
            GenerationStatus.COMPLETED,
        ]
        assert pipeline.status == GenerationStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_world_entry_fields(self, pipeline, mock_provider) -> None:
        world = await pipeline.generate("  a city under a frozen waterfall  ", "Oil Painting")

        assert world.id == "world-1"
        assert world.title == DEFAULT_LORE.title
        assert world.description == DEFAULT_LORE.description
        assert world.image_url == DEFAULT_IMAGE
        assert world.author == "You"
        assert world.tags == ["Oil Painting", "AI Generated"]
        assert world.is_ai_generated is True
        assert world.likes == 0
        assert pipeline.result == world
        assert pipeline.error is None

    @pytest.mark.asyncio
    async def test_calls_are_sequential_and_keyed(self, pipeline, mock_provider) -> None:
        """Lore gets the trimmed idea; the image gets the lore's visual prompt."""
        await pipeline.generate("  floating lanterns  ", "Watercolor")

        methods = [call.method for call in mock_provider.call_history]
        assert methods == ["generate_lore", "generate_image"]
        assert mock_provider.calls("generate_lore")[0].args == {
            "idea": "floating lanterns",
            "style": "Watercolor",
        }
        assert (
            mock_provider.calls("generate_image")[0].args["visual_prompt"]
            == DEFAULT_LORE.visual_prompt
        )

    @pytest.mark.asyncio
    async def test_new_run_after_completion(self, pipeline) -> None:
        first = await pipeline.generate("first idea", "Abstract")
        second = await pipeline.generate("second idea", "Abstract")

        assert first.id != second.id
        assert pipeline.result == second


class TestGenerationFailure:
    """Failed runs end in Error with a message and no entry."""

    @pytest.mark.asyncio
    async def test_lore_failure_never_paints(self, pipeline, mock_provider, statuses) -> None:
        mock_provider.lore = TransportError("Provider unavailable")

        with pytest.raises(GenerationError) as exc_info:
            await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        assert exc_info.value.kind == ErrorKind.TRANSPORT
        assert statuses == [GenerationStatus.THINKING, GenerationStatus.ERROR]
        assert pipeline.status == GenerationStatus.ERROR
        assert pipeline.error == "Provider unavailable"
        assert pipeline.result is None
        mock_provider.assert_called("generate_image", times=0)

    @pytest.mark.asyncio
    async def test_image_failure(self, pipeline, mock_provider, statuses) -> None:
        mock_provider.image = FormatError("No image generated")

        with pytest.raises(GenerationError) as exc_info:
            await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        assert exc_info.value.kind == ErrorKind.FORMAT
        assert statuses[-2:] == [GenerationStatus.PAINTING, GenerationStatus.ERROR]
        assert pipeline.error == "No image generated"
        assert pipeline.result is None

    @pytest.mark.asyncio
    async def test_empty_image_is_a_failure(self, pipeline, mock_provider) -> None:
        mock_provider.image = ""

        with pytest.raises(GenerationError):
            await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        assert pipeline.status == GenerationStatus.ERROR

    @pytest.mark.asyncio
    async def test_blank_visual_prompt_never_paints(self, pipeline, mock_provider) -> None:
        mock_provider.lore = Lore(title="T", description="D", visual_prompt="  ")

        with pytest.raises(GenerationError):
            await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        mock_provider.assert_called("generate_image", times=0)

    @pytest.mark.asyncio
    async def test_error_without_message_uses_default(self, pipeline, mock_provider) -> None:
        mock_provider.lore = RuntimeError()

        with pytest.raises(GenerationError):
            await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        assert pipeline.error == DEFAULT_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_configuration_error_propagates(self, pipeline, mock_provider) -> None:
        mock_provider.lore = ConfigurationError("GEMINI_API_KEY environment variable is required")

        with pytest.raises(ConfigurationError):
            await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        assert pipeline.status == GenerationStatus.ERROR

    @pytest.mark.asyncio
    async def test_retry_after_error_clears_error(self, pipeline, mock_provider) -> None:
        mock_provider.lore = TransportError("offline")
        with pytest.raises(GenerationError):
            await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        mock_provider.lore = DEFAULT_LORE
        world = await pipeline.generate("a drowned cathedral", "Dark Fantasy")

        assert pipeline.status == GenerationStatus.COMPLETED
        assert pipeline.error is None
        assert pipeline.result == world


class TestGenerationGuards:
    """Requests rejected before any state change."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("idea", ["", "   ", "\n\t"])
    async def test_blank_idea_rejected(self, pipeline, mock_provider, idea) -> None:
        with pytest.raises(ValueError):
            await pipeline.generate(idea, "Cyberpunk")

        assert pipeline.status == GenerationStatus.IDLE
        assert mock_provider.call_history == []

    @pytest.mark.asyncio
    async def test_unknown_style_rejected(self, pipeline, mock_provider) -> None:
        with pytest.raises(ValueError):
            await pipeline.generate("a glacier library", "Vaporwave")

        assert pipeline.status == GenerationStatus.IDLE
        assert mock_provider.call_history == []

    @pytest.mark.asyncio
    async def test_second_request_while_thinking_is_rejected(
        self, pipeline, mock_provider, statuses
    ) -> None:
        """A re-entrant call does not disturb the in-flight run."""
        mock_provider.lore_gate = asyncio.Event()

        first = asyncio.create_task(pipeline.generate("first idea", "Cyberpunk"))
        while pipeline.status != GenerationStatus.THINKING:
            await asyncio.sleep(0)

        with pytest.raises(PipelineBusyError):
            await pipeline.generate("second idea", "Pixel Art")

        assert pipeline.status == GenerationStatus.THINKING

        mock_provider.lore_gate.set()
        world = await first

        assert world.tags[0] == "Cyberpunk"
        assert statuses == [
            GenerationStatus.THINKING,
            GenerationStatus.PAINTING,
            GenerationStatus.COMPLETED,
        ]
        mock_provider.assert_called("generate_lore", times=1)

    @pytest.mark.asyncio
    async def test_listener_errors_do_not_break_pipeline(self, pipeline) -> None:
        def broken_listener(status):
            raise RuntimeError("listener failed")

        pipeline.add_listener(broken_listener)

        await pipeline.generate("a glacier library", "Solarpunk")

        assert pipeline.status == GenerationStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_removed_listener_is_not_notified(self, pipeline) -> None:
        seen = []
        pipeline.add_listener(seen.append)
        pipeline.remove_listener(seen.append)

        await pipeline.generate("a glacier library", "Solarpunk")

        assert seen == []
