"""NiceGUI chat interface consuming the streamed UI message protocol."""

import html
import os

from nicegui import ui

from chatstream.models.messages import (
    FilePart,
    ReasoningPart,
    SourceDocumentPart,
    SourceUrlPart,
    TextPart,
    UIMessage,
)
from chatstream.models.schemas import ChatStatus
from chatstream.provider.config import AVAILABLE_MODELS
from chatstream.ui.client import stream_chat_response
from chatstream.ui.formatting import (
    is_image,
    source_document_label,
    source_url_label,
    usage_label,
)
from chatstream.ui.session import ChatSession

TEMPERATURE_RANGE = (0.0, 1.0, 0.05)
MAX_TOKENS_RANGE = (1000, 20000, 100)

CUSTOM_CSS = """
<style>
    body { background: #eef1f5; min-height: 100vh; }

    .chat-wrapper {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }

    .sidebar { background: #f8fafc; border-right: 1px solid #e5e7eb; }
    .sidebar-title { font-weight: 600; font-size: 1.1rem; }

    .user-message {
        background: #2563eb;
        color: white;
        border-radius: 16px 16px 4px 16px;
        align-self: flex-end;
    }
    .ai-message {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 16px 16px 16px 4px;
        align-self: flex-start;
    }
    .message-header { font-size: 0.75rem; font-weight: 600; opacity: 0.8; }

    .reasoning {
        background: #fffbeb;
        border-left: 3px solid #f59e0b;
        color: #78350f;
        font-size: 0.75rem;
        padding: 0.5rem;
        white-space: pre-wrap;
    }
    .source-link a, .source-document { color: #4f46e5; font-size: 0.8rem; }
    .message-image { max-width: 320px; border-radius: 8px; }
    .token-usage { font-size: 0.7rem; color: #6b7280; }
    .loading-message { color: #6b7280; font-style: italic; }
</style>
"""


def render_parts(message: UIMessage) -> None:
    """Render the parts of one message into the current container.

    Citations come first, followed by text, reasoning, and images in stream
    order. Part kinds without a renderer are skipped.
    """
    urls = [p for p in message.parts if isinstance(p, SourceUrlPart)]
    documents = [p for p in message.parts if isinstance(p, SourceDocumentPart)]
    if urls or documents:
        with ui.row().classes("gap-1"):
            for part in urls:
                link = (
                    f'[<a href="{html.escape(part.url, quote=True)}" target="_blank" '
                    f'rel="noopener noreferrer">{html.escape(source_url_label(part))}</a>]'
                )
                ui.html(link, sanitize=False).classes("source-link")
            for index, part in enumerate(documents):
                label = html.escape(source_document_label(part, index))
                ui.html(f"[<span>{label}</span>]", sanitize=False).classes("source-document")

    for part in message.parts:
        match part:
            case TextPart() if message.role == "user":
                ui.label(part.text).classes("whitespace-pre-wrap text-sm")
            case TextPart():
                ui.markdown(part.text).classes("text-sm")
            case ReasoningPart():
                ui.html(f"<pre>{html.escape(part.text)}</pre>", sanitize=False).classes(
                    "reasoning"
                )
            case FilePart() if is_image(part):
                ui.image(part.url).classes("message-image")

    if usage := usage_label(message):
        ui.label(usage).classes("token-usage")


def build_chat_page() -> None:
    """Build the chat interface into the current page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()

    messages_container: ui.column
    scroll_area: ui.scroll_area
    loading_label: ui.label
    error_label: ui.label
    input_field: ui.input
    send_btn: ui.button
    sidebar: ui.column
    toggle_btn: ui.button
    views: list[ui.column] = []

    def render_message(msg: UIMessage) -> ui.column:
        is_user = msg.role == "user"
        bubble = "user-message" if is_user else "ai-message"
        with ui.column().classes(f"max-w-[80%] gap-1 px-4 py-3 {bubble}"):
            ui.label("👤 Tu" if is_user else "🤖 AI").classes("message-header")
            with ui.column().classes("w-full gap-2") as content:
                render_parts(msg)
        return content

    def scroll_to_bottom() -> None:
        scroll_area.scroll_to(percent=1.0)

    def refresh_messages() -> None:
        messages_container.clear()
        views.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Inizia una conversazione").classes("text-lg text-gray-400")
            else:
                views.extend(render_message(msg) for msg in session.messages)
        scroll_to_bottom()

    def refresh_last_message() -> None:
        if len(views) != len(session.messages):
            refresh_messages()
            return
        views[-1].clear()
        with views[-1]:
            render_parts(session.messages[-1])
        scroll_to_bottom()

    def update_controls() -> None:
        ready = session.is_ready
        loading_label.set_visibility(not ready)
        input_field.set_enabled(ready)
        send_btn.set_enabled(ready and bool((input_field.value or "").strip()))
        error_label.set_text(f"Errore: {session.error}" if session.error else "")
        error_label.set_visibility(session.status == ChatStatus.ERROR)

    async def send_message() -> None:
        request = session.submit(input_field.value or "")
        if request is None:
            return

        input_field.value = ""
        update_controls()
        refresh_messages()

        async for chunk in stream_chat_response(request):
            session.apply(chunk)
            refresh_last_message()

        session.complete()
        if session.status == ChatStatus.ERROR and session.error:
            ui.notify(session.error, type="negative")
        update_controls()
        refresh_last_message()

    def new_chat() -> None:
        if not session.is_ready:
            return
        session.new_chat()
        update_controls()
        refresh_messages()

    def toggle_sidebar() -> None:
        sidebar.set_visibility(not sidebar.visible)
        toggle_btn.set_text("◀" if sidebar.visible else "▶")

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.row().classes("w-full max-w-6xl mx-auto chat-wrapper no-wrap gap-0").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Sidebar
        with ui.column().classes("sidebar w-80 h-full p-4 gap-4") as sidebar:
            ui.label("Impostazioni").classes("sidebar-title")

            ui.label("System Prompt:").classes("text-sm font-medium")
            ui.textarea(placeholder="Inserisci il prompt di sistema...").props(
                "outlined rows=6"
            ).classes("w-full").bind_value(session.settings, "system_prompt")

            low, high, step = TEMPERATURE_RANGE
            ui.label().bind_text_from(
                session.settings, "temperature", lambda v: f"Temperature: {v}"
            ).classes("text-sm font-medium")
            ui.slider(min=low, max=high, step=step).bind_value(session.settings, "temperature")

            low, high, step = MAX_TOKENS_RANGE
            ui.label().bind_text_from(
                session.settings, "max_output_tokens", lambda v: f"Max Tokens: {v}"
            ).classes("text-sm font-medium")
            ui.slider(min=low, max=high, step=step).bind_value(
                session.settings, "max_output_tokens", forward=int
            )

            ui.label("Modello:").classes("text-sm font-medium")
            ui.select(list(AVAILABLE_MODELS)).props("outlined dense").classes(
                "w-full"
            ).bind_value(session.settings, "model")

        # Main chat area
        with ui.column().classes("flex-grow h-full gap-0"):
            with ui.row().classes("w-full px-4 py-3 items-center justify-between border-b"):
                toggle_btn = ui.button("◀", on_click=toggle_sidebar).props("flat dense")
                toggle_btn.tooltip("Mostra o nascondi impostazioni")
                with ui.row().classes("items-center gap-3"):
                    ui.label().bind_text_from(
                        session, "session_id", lambda s: s[:8].upper()
                    ).classes("text-xs text-gray-500 font-mono")
                    ui.button(icon="add", on_click=new_chat).props("flat round")

            with ui.scroll_area().classes("flex-grow w-full bg-gray-50") as scroll_area:
                with ui.column().classes("w-full p-5 gap-4"):
                    messages_container = ui.column().classes("w-full gap-4")
                    loading_label = ui.label("Caricamento...").classes("loading-message")
                    error_label = ui.label().classes("text-sm text-red-600")

            with ui.row().classes("w-full p-4 gap-3 items-center bg-white border-t no-wrap"):
                input_field = (
                    ui.input(
                        placeholder="Scrivi un messaggio...",
                        on_change=lambda _: update_controls(),
                    )
                    .props("outlined dense")
                    .classes("flex-grow")
                    .on("keydown.enter", send_message)
                    .mark("message-input")
                )
                send_btn = (
                    ui.button("Invia", on_click=send_message).props("unelevated").mark("send")
                )

    refresh_messages()
    update_controls()


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    build_chat_page()


def main() -> None:
    ui.run(
        title="Chat AI",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("UI_PORT", "8080")),
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "chatstream-secret"),
        reload=False,
    )


if __name__ == "__main__":
    main()
