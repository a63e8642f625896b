"""
Shared pytest fixtures for World Studio tests.

This module provides:
- catalog: the bundled studio catalog
- mock_provider: scripted WorldProvider double
- pipeline / workspace: core objects wired to the mock provider
- Custom markers for test categorization
"""

from __future__ import annotations

import pytest

from world_studio.core.catalog import Catalog, get_catalog
from world_studio.core.generation import GenerationPipeline
from world_studio.core.models import DraftPayload
from world_studio.core.workspace import Workspace
from tests.mocks.provider import MockProvider


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: marks tests as end-to-end tests requiring a real provider"
    )


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def catalog() -> Catalog:
    return get_catalog()


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def pipeline(mock_provider: MockProvider, catalog: Catalog) -> GenerationPipeline:
    counter = iter(range(1, 1000))
    return GenerationPipeline(
        mock_provider, catalog=catalog, id_factory=lambda: f"world-{next(counter)}"
    )


@pytest.fixture
def workspace(pipeline: GenerationPipeline, catalog: Catalog) -> Workspace:
    return Workspace(pipeline, catalog=catalog)


@pytest.fixture
def sample_draft() -> DraftPayload:
    return DraftPayload(
        title="Lantern Reef",
        description="A coral reef lit by drifting paper lanterns.",
        style="Watercolor",
        reasoning="Soft light suits the calm mood you described.",
    )


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove provider settings from the environment."""
    for var in (
        "LLM_PROVIDER",
        "LLM_MODEL",
        "STUDIO_LLM_MODEL",
        "STUDIO_IMAGE_MODEL",
        "STUDIO_IMAGE_ASPECT_RATIO",
        "STUDIO_LANGUAGE",
        "GEMINI_API_KEY",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "OLLAMA_BASE_URL",
    ):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
