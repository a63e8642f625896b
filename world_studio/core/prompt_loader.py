"""
Prompt Loader - Loads studio prompts from text files with hot reloading support.

Prompts are organized in subdirectories of prompts/:
- lore/ - Lore generation (title, description, visual prompt)
- enhance/ - Idea rewriting and random concepts
- architect/ - Architect chat persona and draft protocol
- suggestions/ - Follow-up suggestion requests

Templates use str.format placeholders such as {language} and {styles}.
"""

import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class PromptLoader:
    """Loads and caches prompts from text files with hot reloading support."""

    def __init__(self, prompts_dir: Optional[Path] = None):
        """
        Initialize the prompt loader.

        Args:
            prompts_dir: Directory containing prompt files. If None, uses the
                        prompts/ directory next to this module.
        """
        if prompts_dir is None:
            prompts_dir = Path(__file__).parent / "prompts"

        self.prompts_dir = Path(prompts_dir)
        self._cache: dict[str, str] = {}
        self._file_timestamps: dict[str, float] = {}

    def _get_prompt_path(self, category: str, filename: str) -> Path:
        return self.prompts_dir / category / filename

    def _read_prompt_file(self, category: str, filename: str) -> str:
        """Read a prompt file and cache its timestamp."""
        path = self._get_prompt_path(category, filename)
        content = path.read_text(encoding="utf-8")
        self._file_timestamps[f"{category}/{filename}"] = path.stat().st_mtime
        return content

    def get_prompt(self, category: str, filename: str, reload: bool = False) -> str:
        """
        Get a prompt from cache or file.

        Args:
            category: Subdirectory name (e.g., 'lore', 'architect')
            filename: Prompt filename (e.g., 'system_message.txt')
            reload: If True, force reload from file even if cached

        Returns:
            Prompt content as string
        """
        cache_key = f"{category}/{filename}"
        path = self._get_prompt_path(category, filename)

        needs_reload = reload or cache_key not in self._cache

        # Hot reload: check if file has been modified since last load
        if not needs_reload and path.exists():
            if path.stat().st_mtime > self._file_timestamps.get(cache_key, 0):
                needs_reload = True
                logger.info(f"Hot reloading modified prompt: {cache_key}")

        if needs_reload:
            if path.exists():
                logger.debug(f"Loading prompt: {cache_key}")
                self._cache[cache_key] = self._read_prompt_file(category, filename)
            elif cache_key in self._cache:
                logger.warning(f"Prompt file deleted but using cached version: {cache_key}")
            else:
                raise FileNotFoundError(
                    f"Prompt file not found: {path}\n"
                    f"Expected location: {self.prompts_dir}/{category}/{filename}"
                )

        return self._cache[cache_key]

    def render(self, category: str, filename: str, **values: str) -> str:
        """Load a prompt template and fill in its placeholders."""
        return self.get_prompt(category, filename).format(**values).strip()


# Global instance - created on first use
_loader: Optional[PromptLoader] = None


def get_loader() -> PromptLoader:
    """Get the global prompt loader instance."""
    global _loader
    if _loader is None:
        _loader = PromptLoader()
    return _loader
