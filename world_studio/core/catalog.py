"""
Catalog - studio constants (styles, seed worlds, canned texts) from studio.yaml.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from world_studio.core.models import Suggestion, WorldEntry

logger = logging.getLogger(__name__)


def _get_catalog_path() -> Path:
    """Get path to the catalog file bundled with world_studio."""
    return Path(__file__).parent / "data" / "studio.yaml"


@dataclass(frozen=True)
class Catalog:
    """Configuration constants of the studio."""
    styles: tuple[str, ...]
    default_style: str
    self_author: str
    ai_tag: str
    architect_greeting: str
    architect_failure: str
    starter_suggestions: tuple[Suggestion, ...] = ()
    fallback_suggestions: tuple[Suggestion, ...] = ()
    seed_worlds: tuple[WorldEntry, ...] = field(default_factory=tuple)

    def is_valid_style(self, style: str) -> bool:
        return style in self.styles

    @classmethod
    def from_dict(cls, data: dict) -> "Catalog":
        styles = tuple(data["styles"])
        default_style = data.get("default_style", styles[0])
        if default_style not in styles:
            raise ValueError(f"Default style '{default_style}' is not in the style list")

        return cls(
            styles=styles,
            default_style=default_style,
            self_author=data.get("self_author", "You"),
            ai_tag=data.get("ai_tag", "AI Generated"),
            architect_greeting=data["architect_greeting"],
            architect_failure=data["architect_failure"],
            starter_suggestions=tuple(
                Suggestion(**item) for item in data.get("starter_suggestions", [])
            ),
            fallback_suggestions=tuple(
                Suggestion(**item) for item in data.get("fallback_suggestions", [])
            ),
            seed_worlds=tuple(
                WorldEntry(**item) for item in data.get("seed_worlds", [])
            ),
        )


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """Load a catalog from YAML."""
    catalog_path = path or _get_catalog_path()
    if not catalog_path.exists():
        raise FileNotFoundError(f"Catalog file not found: {catalog_path}")

    with open(catalog_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    catalog = Catalog.from_dict(data)
    logger.debug(
        f"Catalog loaded from {catalog_path}: {len(catalog.styles)} styles, "
        f"{len(catalog.seed_worlds)} seed worlds"
    )
    return catalog


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Get the bundled catalog (loaded once)."""
    return load_catalog()
