"""
Gallery Screen - Browse the worlds created so far, newest first.
"""
from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Static

from world_studio.core.models import WorldEntry


def _image_label(image_url: str) -> str:
    """Short description of an image reference (data URIs are huge)."""
    if image_url.startswith("data:"):
        mime_type = image_url[5:].split(";", 1)[0]
        return f"inline {mime_type} image ({len(image_url) // 1024} KB)"
    return image_url


class GalleryScreen(Screen):
    """Table of worlds with a detail pane."""

    CSS = """
    #gallery-container {
        padding: 1 2;
        height: 100%;
    }

    #gallery-header {
        height: auto;
        margin-bottom: 1;
    }

    #gallery-header Static {
        width: 1fr;
    }

    #tag-filter {
        width: 30;
    }

    #worlds-table {
        height: 1fr;
        border: thick $primary;
    }

    #world-detail {
        height: auto;
        min-height: 8;
        background: $panel;
        border: thick $secondary;
        padding: 1 2;
        margin-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="gallery-container"):
            with Horizontal(id="gallery-header"):
                yield Static(
                    "[bold cyan]Explore the Unknown[/]\n"
                    "[dim]Worlds from every corner of the imagination.[/]",
                    id="gallery-title",
                )
                yield Input(placeholder="Filter by tag...", id="tag-filter")
                yield Button("Create your world →", id="create", variant="primary")

            with Vertical():
                yield DataTable(id="worlds-table", cursor_type="row")
                yield Static("", id="world-detail")

        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#worlds-table", DataTable)
        table.add_columns("Title", "Author", "Tags", "Likes", "AI")
        self.refresh_worlds()

    def on_screen_resume(self) -> None:
        """A world may have been added while the studio was open."""
        self.refresh_worlds()

    def refresh_worlds(self) -> None:
        """Rebuild the table from the gallery."""
        table = self.query_one("#worlds-table", DataTable)
        table.clear()

        tag = self.query_one("#tag-filter", Input).value.strip()
        worlds = self.app.gallery.tagged(tag) if tag else list(self.app.gallery)
        for world in worlds:
            table.add_row(
                world.title,
                world.author,
                ", ".join(world.tags),
                str(world.likes),
                "✨" if world.is_ai_generated else "",
                key=world.id,
            )

        if worlds:
            self._show_detail(worlds[0])
        elif tag:
            self.query_one("#world-detail", Static).update(f"[dim]No worlds tagged '{escape(tag)}'.[/]")
        else:
            self._show_detail(None)

    def _show_detail(self, world: WorldEntry | None) -> None:
        detail = self.query_one("#world-detail", Static)
        if world is None:
            detail.update("[dim]No worlds yet. Create the first one![/]")
            return

        detail.update(
            f"[bold]{world.title}[/]  [dim]by {world.author}[/]\n\n"
            f"{world.description}\n\n"
            f"[dim]Image: {_image_label(world.image_url)}[/]"
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "tag-filter":
            self.refresh_worlds()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        if event.row_key is None or event.row_key.value is None:
            return
        self._show_detail(self.app.gallery.get(event.row_key.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "create":
            self.app.action_go_create()
