"""Unit tests for the Gallery and bundled catalog."""

from pathlib import Path

import pytest

from world_studio.core.catalog import load_catalog
from world_studio.core.gallery import Gallery
from world_studio.core.models import WorldEntry


def _world(world_id: str, tags: list[str]) -> WorldEntry:
    return WorldEntry(
        id=world_id,
        title=f"World {world_id}",
        description="Somewhere else.",
        image_url="data:image/png;base64,AAAA",
        author="You",
        tags=tags,
        is_ai_generated=True,
    )


class TestGallery:
    def test_seed_worlds(self, catalog) -> None:
        gallery = Gallery.with_seed_worlds(catalog)

        assert len(gallery) == 6
        assert [w.id for w in gallery] == ["1", "2", "3", "4", "5", "6"]
        assert gallery.worlds[0].title == "Neon Rain"

    def test_add_prepends(self, catalog) -> None:
        gallery = Gallery.with_seed_worlds(catalog)
        new = _world("fresh", ["Watercolor", "AI Generated"])

        gallery.add(new)

        assert len(gallery) == 7
        assert gallery.worlds[0] == new

    def test_get(self) -> None:
        gallery = Gallery([_world("a", []), _world("b", [])])

        assert gallery.get("b").title == "World b"
        assert gallery.get("missing") is None

    def test_tagged_is_case_insensitive(self) -> None:
        gallery = Gallery([
            _world("a", ["Cyberpunk", "AI Generated"]),
            _world("b", ["Watercolor"]),
        ])

        assert [w.id for w in gallery.tagged("ai generated")] == ["a"]
        assert gallery.tagged("Pixel Art") == []


class TestCatalog:
    def test_bundled_catalog(self, catalog) -> None:
        assert len(catalog.styles) == 10
        assert catalog.default_style == "Cinematic Realistic"
        assert catalog.is_valid_style(catalog.default_style)
        assert not catalog.is_valid_style("cyberpunk")

    def test_default_style_must_be_listed(self, tmp_path: Path) -> None:
        path = tmp_path / "studio.yaml"
        path.write_text(
            "styles: [Cyberpunk]\n"
            "default_style: Watercolor\n"
            "architect_greeting: hi\n"
            "architect_failure: oops\n",
            encoding="utf-8",
        )

        with pytest.raises(ValueError):
            load_catalog(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_catalog(tmp_path / "nope.yaml")
