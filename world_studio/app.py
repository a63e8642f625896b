"""
World Studio - Main TUI Application

Browse the gallery of worlds, or draft a new one with the World Architect.
"""
from textual.app import App
from textual.binding import Binding

from world_studio.core.gallery import Gallery
from world_studio.core.provider import WorldProvider
from world_studio.screens.gallery import GalleryScreen


class WorldStudioApp(App):
    """World Studio TUI Application."""

    CSS = """
    Screen {
        background: $surface;
    }

    .title {
        text-align: center;
        text-style: bold;
        color: $primary;
        margin: 1 0;
    }

    .error {
        color: $error;
        margin: 1 0;
    }

    .info-text {
        color: $text-muted;
        margin: 1 0;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("d", "toggle_dark", "Dark Mode"),
        Binding("escape", "go_back", "Back"),
        Binding("1", "go_gallery", "Explore", show=False),
        Binding("2", "go_create", "Create World", show=False),
    ]

    TITLE = "World Studio"
    SUB_TITLE = "Explore and create AI-generated worlds"

    def __init__(self, provider: WorldProvider, gallery: Gallery | None = None):
        """Initialize the app.

        Args:
            provider: Remote provider shared by all screens
            gallery: Worlds to show, defaults to the seed worlds
        """
        super().__init__()
        self.provider = provider
        self.gallery = gallery or Gallery.with_seed_worlds()

    def on_mount(self) -> None:
        """Show the gallery on startup."""
        self.push_screen(GalleryScreen())

    def action_go_back(self) -> None:
        if len(self.screen_stack) > 2:
            self.pop_screen()

    def action_go_gallery(self) -> None:
        """Return to the gallery (the bottom screen)."""
        while len(self.screen_stack) > 2:
            self.pop_screen()

    def action_go_create(self) -> None:
        """Open the studio on top of the gallery."""
        from world_studio.screens.studio import StudioScreen

        while len(self.screen_stack) > 2:
            self.pop_screen()
        self.push_screen(StudioScreen())
