"""
Studio settings - provider selection and credentials read from the environment.
"""

import os
import logging
from dataclasses import dataclass

from dotenv import load_dotenv

from world_studio.core.errors import ConfigurationError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_ASPECT_RATIO = "4:3"
DEFAULT_LANGUAGE = "English"

# Environment variable holding the credential for each provider
API_KEY_VARS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


@dataclass(frozen=True)
class Settings:
    """Snapshot of the studio configuration."""
    provider: str = "gemini"
    model: str = DEFAULT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    language: str = DEFAULT_LANGUAGE
    api_key: str | None = None
    gemini_api_key: str | None = None
    ollama_base_url: str = "http://localhost:11434"

    def model_string(self) -> str:
        """Get the full model string for LiteLLM"""
        # LiteLLM uses prefixed model names for some providers
        if self.provider == "gemini":
            return f"gemini/{self.model}"
        elif self.provider == "anthropic":
            return f"anthropic/{self.model}"
        elif self.provider == "ollama":
            return f"ollama/{self.model}"
        else:
            # OpenAI doesn't need a prefix
            return self.model

    def require_api_key(self) -> None:
        """
        Fail fast when a needed credential is missing.

        Text generation needs the key of the selected provider (Ollama needs
        none). Image generation always goes through Gemini.

        Raises:
            ConfigurationError: if a credential is missing
        """
        key_var = API_KEY_VARS.get(self.provider)
        if key_var and not self.api_key:
            raise ConfigurationError(f"{key_var} environment variable is required")
        if not self.gemini_api_key:
            raise ConfigurationError(
                "GEMINI_API_KEY environment variable is required for image generation"
            )


def load_settings() -> Settings:
    """Build settings from the environment (and .env, if present)."""
    provider = os.getenv("LLM_PROVIDER", "gemini")
    model = os.getenv("STUDIO_LLM_MODEL") or os.getenv("LLM_MODEL") or DEFAULT_MODEL
    key_var = API_KEY_VARS.get(provider)

    settings = Settings(
        provider=provider,
        model=model,
        image_model=os.getenv("STUDIO_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
        aspect_ratio=os.getenv("STUDIO_IMAGE_ASPECT_RATIO", DEFAULT_ASPECT_RATIO),
        language=os.getenv("STUDIO_LANGUAGE", DEFAULT_LANGUAGE),
        api_key=os.getenv(key_var) if key_var else None,
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
    )

    logger.debug(
        f"Settings loaded: provider={settings.provider}, model={settings.model}, "
        f"image_model={settings.image_model}, language={settings.language}"
    )
    return settings
