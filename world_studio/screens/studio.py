"""
Studio Screen - Workspace form plus the World Architect chat.

Uses Textual workers for the remote calls to keep the UI responsive.
"""
from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Input, Select, Static, TextArea
from textual.worker import Worker, WorkerState

from world_studio.core.architect import ArchitectConversation, Transcript, TurnEventKind
from world_studio.core.catalog import get_catalog
from world_studio.core.errors import StudioError
from world_studio.core.generation import GenerationPipeline
from world_studio.core.models import ChatRole, DraftPayload, GenerationStatus
from world_studio.core.suggestions import SuggestionRefresher
from world_studio.core.workspace import Workspace

STATUS_TEXT = {
    GenerationStatus.IDLE: "[dim]Ready.[/]",
    GenerationStatus.THINKING: "[cyan]Conceiving the lore...[/]",
    GenerationStatus.PAINTING: "[magenta]Painting the world...[/]",
    GenerationStatus.COMPLETED: "[green]✓ World created![/]",
    GenerationStatus.ERROR: "[red]✗ Generation failed.[/]",
}


class StudioScreen(Screen):
    """Screen for creating a new world."""

    CSS = """
    #studio {
        height: 100%;
    }

    #workspace {
        width: 1fr;
        padding: 1 2;
        border: thick $primary;
    }

    #architect {
        width: 1fr;
        padding: 1 2;
        border: thick $secondary;
    }

    #idea {
        height: 8;
    }

    #idea.flash {
        border: thick $success;
    }

    .button-row {
        height: auto;
        margin: 1 0;
    }

    .button-row Button {
        margin-right: 1;
    }

    #chat-log {
        height: 1fr;
        background: $panel;
        padding: 0 1;
    }

    #suggestions {
        height: auto;
    }

    #suggestions Button {
        margin-right: 1;
    }

    #generation-error {
        color: $error;
    }
    """

    BINDINGS = [
        ("escape", "go_back", "Back"),
    ]

    def __init__(self):
        super().__init__()
        self.workspace: Workspace | None = None
        self.conversation: ArchitectConversation | None = None
        self.refresher: SuggestionRefresher | None = None
        self.transcript = Transcript()
        self._latest_draft: DraftPayload | None = None

    def compose(self) -> ComposeResult:
        catalog = get_catalog()
        yield Header()

        with Horizontal(id="studio"):
            with Vertical(id="workspace"):
                yield Static("[bold]🪄 World Studio[/]", classes="title")
                yield Static("Describe your world:")
                yield TextArea(id="idea", tab_behavior="focus")
                yield Static("Visual style:")
                yield Select(
                    [(style, style) for style in catalog.styles],
                    id="style",
                    value=catalog.default_style,
                    allow_blank=False,
                )

                with Horizontal(classes="button-row"):
                    yield Button("🎲 Enhance / Inspire", id="enhance")
                    yield Button("✨ Generate World", id="generate", variant="primary")

                yield Static("", id="generation-status")
                yield Static("", id="generation-error")

            with Vertical(id="architect"):
                yield Static("[bold]🤖 World Architect[/]", classes="title")
                with VerticalScroll(id="chat-log"):
                    yield Static("", id="chat-text")
                yield Horizontal(id="suggestions")

                with Horizontal(classes="button-row"):
                    yield Button("⬅ Apply draft", id="apply-draft", variant="success", disabled=True)
                    yield Button("New conversation", id="new-chat")

                yield Input(placeholder="Talk to the architect...", id="chat-input")

        yield Footer()

    def on_mount(self) -> None:
        """Create the session objects and show the greeting."""
        provider = self.app.provider
        pipeline = GenerationPipeline(provider)
        pipeline.add_listener(self._on_status_changed)

        self.workspace = Workspace(pipeline)
        self.conversation = ArchitectConversation(provider)
        self.refresher = SuggestionRefresher(provider)

        self.transcript.append(self.conversation.greeting())
        self._render_chat()
        self._update_controls()
        self._refresh_suggestions("")
        self.query_one("#idea", TextArea).focus()

    def on_unmount(self) -> None:
        """Stop status updates once the widgets are gone."""
        if self.workspace:
            self.workspace.pipeline.remove_listener(self._on_status_changed)

    def action_go_back(self) -> None:
        self.app.pop_screen()

    # --- Workspace ---

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if event.text_area.id == "idea" and self.workspace:
            self.workspace.idea = event.text_area.text
            self._update_controls()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id != "style" or not self.workspace:
            return
        if event.value == self.workspace.style:
            return
        try:
            self.workspace.set_style(str(event.value))
        except (ValueError, StudioError) as e:
            self.notify(str(e), severity="warning")
            event.select.value = self.workspace.style

    def _set_idea(self, text: str) -> None:
        self.query_one("#idea", TextArea).load_text(text)
        self.workspace.idea = text

    def _on_status_changed(self, status: GenerationStatus) -> None:
        self.query_one("#generation-status", Static).update(STATUS_TEXT[status])
        self._update_controls()

    def _update_controls(self) -> None:
        workspace = self.workspace
        if workspace is None:
            return
        self.query_one("#generate", Button).disabled = not workspace.can_generate
        self.query_one("#enhance", Button).disabled = not workspace.can_enhance
        self.query_one("#style", Select).disabled = not workspace.can_change_style
        self.query_one("#generation-error", Static).update(escape(workspace.error or ""))

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "generate":
            self.run_worker(
                self.workspace.generate(),
                name="world_generation",
                group="generation",
                exit_on_error=False,
            )
        elif button_id == "enhance":
            message = "Polishing your idea..."
            if not self.workspace.idea.strip():
                message = "Conjuring a random idea..."
            self.query_one("#generation-status", Static).update(f"[cyan]{message}[/]")
            self.query_one("#enhance", Button).disabled = True
            self.run_worker(
                self.workspace.enhance(), name="enhance", group="generation", exit_on_error=False
            )
        elif button_id == "apply-draft" and self._latest_draft:
            self._apply_draft(self._latest_draft)
        elif button_id == "new-chat":
            self._new_conversation()
        elif button_id and button_id.startswith("suggestion-"):
            index = int(button_id.split("-", 1)[1])
            suggestions = self.refresher.current
            if index < len(suggestions):
                chat_input = self.query_one("#chat-input", Input)
                chat_input.value = suggestions[index].prompt
                chat_input.focus()

    def _apply_draft(self, draft: DraftPayload) -> None:
        style_applied = self.workspace.apply_draft(draft)
        self._set_idea(draft.description)
        if style_applied:
            self.query_one("#style", Select).value = draft.style

        idea = self.query_one("#idea", TextArea)
        idea.add_class("flash")
        self.set_timer(0.8, lambda: idea.remove_class("flash"))
        self.notify(f"Applied draft '{draft.title}'", severity="information")

    # --- Architect ---

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "chat-input":
            return
        text = event.value.strip()
        if not text or self.conversation.is_sending:
            return
        event.input.value = ""
        self.run_worker(
            self._send_worker(text), name="architect_reply", group="architect", exit_on_error=False
        )

    async def _send_worker(self, text: str) -> str:
        """Stream one architect reply into the transcript."""
        reply = ""
        async for event in self.conversation.send(text):
            self.transcript.apply(event)
            if event.kind == TurnEventKind.COMPLETED:
                reply = event.turn.content
            self._render_chat()
        return reply

    def _new_conversation(self) -> None:
        if self.conversation.is_sending:
            self.notify("Wait for the architect to finish replying", severity="warning")
            return
        self.conversation.reset()
        self.transcript = Transcript([self.conversation.greeting()])
        self._render_chat()
        self._refresh_suggestions("")

    def _render_chat(self) -> None:
        """Re-render every turn, re-parsing drafts from the latest text."""
        lines = []
        latest_draft = None
        for turn in self.transcript:
            if turn.role == ChatRole.USER:
                lines.append(f"[bold cyan]You:[/] {escape(turn.content)}")
                continue

            parsed = turn.parsed()
            text = parsed.clean_text or "[dim]…[/]"
            lines.append(f"[bold magenta]Architect:[/] {escape(text) if parsed.clean_text else text}")
            if parsed.draft:
                latest_draft = parsed.draft
                lines.append(
                    f"  [reverse] WORLD BLUEPRINT [/] [bold]{escape(parsed.draft.title)}[/] "
                    f"[dim]({escape(parsed.draft.style)})[/]\n"
                    f"  [italic]{escape(parsed.draft.description)}[/]"
                )

        self._latest_draft = latest_draft
        self.query_one("#chat-text", Static).update("\n\n".join(lines))
        self.query_one("#apply-draft", Button).disabled = latest_draft is None
        self.query_one("#chat-log", VerticalScroll).scroll_end(animate=False)

    def _refresh_suggestions(self, context: str) -> None:
        self.run_worker(
            self._suggestions_worker(context),
            name="suggestions",
            group="suggestions",
            exclusive=True,
            exit_on_error=False,
        )

    async def _suggestions_worker(self, context: str) -> None:
        suggestions = await self.refresher.refresh(context)
        if suggestions is None:
            return

        container = self.query_one("#suggestions", Horizontal)
        await container.remove_children()
        await container.mount_all(
            Button(f"💡 {s.label}", id=f"suggestion-{i}")
            for i, s in enumerate(suggestions)
        )

    # --- Worker results ---

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        name = event.worker.name
        if not event.worker.is_finished:
            return

        if name == "world_generation":
            self._update_controls()
            if event.state == WorkerState.SUCCESS:
                world = event.worker.result
                self.app.gallery.add(world)
                self.notify(f"World '{world.title}' created!", severity="information")
                self.app.pop_screen()
            elif event.state == WorkerState.ERROR:
                error_msg = self.workspace.error or str(event.worker.error)
                self.notify(f"Generation failed: {error_msg}", severity="error")

        elif name == "enhance":
            self.query_one("#generation-status", Static).update(
                STATUS_TEXT[self.workspace.status]
            )
            if event.state == WorkerState.SUCCESS and event.worker.result:
                self._set_idea(self.workspace.idea)
            elif event.state == WorkerState.SUCCESS:
                self.notify(self.workspace.error or "Enhancement failed", severity="error")
            elif event.state == WorkerState.ERROR:
                self.notify(f"Enhancement failed: {event.worker.error}", severity="error")
            self._update_controls()

        elif name == "architect_reply":
            if event.state == WorkerState.SUCCESS and event.worker.result:
                self._refresh_suggestions(event.worker.result)
            elif event.state == WorkerState.ERROR:
                self.notify(f"Architect error: {event.worker.error}", severity="error")
