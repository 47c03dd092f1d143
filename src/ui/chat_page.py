"""NiceGUI chat page: PDF upload, question answering, and saved sessions."""

import logging
import os

import httpx
from nicegui import app, events, ui

from src.agent.relay import API_BASE_URL, REQUEST_TIMEOUT, RelayCompletionClient
from src.chat.controller import ConversationController, local_now
from src.chat.history import HistoryStore
from src.chat.sessions import (
    available_dates,
    filter_sessions_by_date,
    group_sessions_by_date,
    session_excerpt,
    session_preview,
    session_started_at,
)
from src.chat.state import ChatState
from src.models import Document, Message, Role, Session
from src.models.schemas import PDFUploadResponse
from src.parsing.pdf_parser import PDFValidationError, validate_upload

logger = logging.getLogger(__name__)

APP_TITLE = os.getenv("APP_TITLE", "Buddi")
EXTRACTION_FAILED_TEXT = "Failed to process PDF. Please try again."

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: linear-gradient(135deg, #f5f3ff 0%, #ecfeff 100%); min-height: 100vh; }

    .panel {
        background: white;
        border-radius: 16px;
        box-shadow: 0 2px 10px rgba(0, 0, 0, 0.08);
    }

    .title-gradient {
        background: linear-gradient(90deg, #4f46e5, #9333ea, #db2777);
        -webkit-background-clip: text;
        color: transparent;
    }

    .message-user {
        background: linear-gradient(135deg, #ec4899 0%, #f43f5e 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border: 1px solid #e5e7eb;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #9333ea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .session-active { border-color: #8b5cf6 !important; background: #ede9fe; }
</style>
"""


async def upload_to_api(filename: str, content: bytes, content_type: str | None) -> Document:
    """Send an upload to the /upload/pdf endpoint and build the Document.

    Raises:
        PDFValidationError: If the server rejects the file as invalid.
        httpx.HTTPError: If extraction fails for any other reason.
    """
    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT) as client:
        response = await client.post(
            f"{API_BASE_URL}/upload/pdf",
            files={"file": (filename, content, content_type or "application/pdf")},
        )
    if response.status_code in (400, 413):
        raise PDFValidationError(
            response.json().get("detail", EXTRACTION_FAILED_TEXT),
            too_large=response.status_code == 413,
        )
    response.raise_for_status()

    result = PDFUploadResponse.model_validate(response.json())
    return Document(
        name=result.filename,
        extracted_text=result.text,
        uploaded_at=local_now(),
        pages=result.pages,
    )


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    messages_container: ui.column
    document_container: ui.column
    stats_container: ui.column
    history_container: ui.column
    input_field: ui.input
    send_btn: ui.button
    new_chat_btn: ui.button

    history_filter: dict[str, str] = {"date": ""}

    def on_change(state: ChatState) -> None:
        refresh_all()

    controller = ConversationController(
        completion_client=RelayCompletionClient(),
        history_store=HistoryStore(app.storage.user),
        on_change=on_change,
    )

    # === Rendering ===

    def render_message(msg: Message) -> None:
        is_user = msg.role == Role.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user ml-12" if is_user else "message-assistant mr-12"

        with ui.row().classes(f"w-full {align} gap-2 items-end"):
            if not is_user:
                ui.icon("smart_toy").classes("text-2xl text-violet-500")
            with ui.column().classes("max-w-[75%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if is_user:
                        ui.label(msg.text).classes("text-sm whitespace-pre-wrap")
                    else:
                        ui.markdown(msg.text).classes("text-sm leading-relaxed")
                ui.label(msg.created_at.strftime("%I:%M %p")).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                ui.icon("person").classes("text-2xl text-pink-500")

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start gap-2 items-end"):
            ui.icon("smart_toy").classes("text-2xl text-violet-500")
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label("Thinking...").classes("text-sm text-gray-500 italic")

    def refresh_messages() -> None:
        state = controller.state
        messages_container.clear()
        with messages_container:
            if not state.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Ready to chat with your PDF!").classes("text-lg text-gray-500")
                    ui.label(
                        "Upload a PDF document and start asking questions about its content."
                    ).classes("text-sm text-gray-400")
            else:
                for msg in state.messages:
                    render_message(msg)
            if state.is_loading:
                render_typing_indicator()

    def refresh_document() -> None:
        document = controller.state.document
        document_container.clear()
        with document_container:
            if document is None:
                upload_widget.set_visibility(True)
                return
            upload_widget.set_visibility(False)
            with ui.row().classes("w-full items-center justify-between gap-2"):
                with ui.row().classes("items-center gap-2"):
                    ui.icon("picture_as_pdf").classes("text-3xl text-orange-500")
                    with ui.column().classes("gap-0"):
                        ui.label(document.name).classes("text-sm font-medium break-all")
                        ui.label(
                            f"Uploaded {document.uploaded_at.strftime('%d %b %Y')}"
                            f" · {document.pages} pages"
                        ).classes("text-xs text-gray-500")
                ui.button(icon="close", on_click=clear_document).props("flat round dense")

    def refresh_stats() -> None:
        stats = controller.statistics
        rows = [
            ("Current Messages", str(stats.message_count)),
            ("Document", "Loaded" if stats.document_loaded else "None"),
            ("Status", "Processing..." if stats.is_loading else "Ready"),
            ("Total Sessions", str(stats.total_sessions)),
        ]
        stats_container.clear()
        with stats_container:
            for name, value in rows:
                with ui.row().classes("w-full justify-between"):
                    ui.label(name).classes("text-sm text-emerald-700")
                    ui.label(value).classes("text-sm font-semibold text-emerald-900")
        new_chat_btn.set_visibility(stats.message_count > 0)

    def render_session(session: Session) -> None:
        active = session.id == controller.state.session_id
        started = session_started_at(session)
        with ui.element("div").classes(
            "w-full border rounded-lg p-2" + (" session-active" if active else "")
        ):
            with ui.row().classes("w-full items-start justify-between no-wrap gap-2"):
                with ui.column().classes("gap-0 min-w-0"):
                    ui.label(session.topic).classes("text-sm font-medium truncate")
                    with ui.row().classes("gap-2 text-xs text-gray-500"):
                        if started is not None:
                            ui.label(started.strftime("%I:%M %p"))
                        if session.document_name:
                            ui.label(session.document_name).classes("truncate")
                    ui.label(session_preview(session)).classes("text-xs text-gray-400")
                ui.button(
                    "Load", on_click=lambda s=session: load_session(s)
                ).props("dense unelevated color=deep-purple-5 size=sm")
            lines, remaining = session_excerpt(session)
            if lines:
                with ui.expansion("Show messages").props("dense").classes("w-full text-xs"):
                    for role, text in lines:
                        with ui.row().classes("gap-2 no-wrap text-xs"):
                            speaker = "You" if role == Role.USER else "AI"
                            ui.label(f"{speaker}:").classes("font-medium text-violet-700")
                            ui.label(text).classes("text-violet-600 break-words")
                    if remaining:
                        ui.label(f"+{remaining} more messages").classes("text-xs italic text-violet-500")

    def refresh_history() -> None:
        sessions = controller.state.history
        history_container.clear()
        with history_container:
            if not sessions:
                ui.label("No chat history yet").classes("text-sm text-gray-400")
                return

            options = {"": "All Dates"}
            options.update({d.isoformat(): d.strftime("%d %b %Y") for d in available_dates(sessions)})
            if history_filter["date"] not in options:
                history_filter["date"] = ""

            ui.select(
                options,
                label="Filter by Date",
                value=history_filter["date"],
                on_change=lambda e: set_history_filter(e.value),
            ).classes("w-full")

            selected = history_filter["date"]
            day = next((d for d in available_dates(sessions) if d.isoformat() == selected), None)
            if day is None:
                groups = group_sessions_by_date(sessions)
            else:
                groups = {day: filter_sessions_by_date(sessions, day)}
            for group_day, group in groups.items():
                ui.label(group_day.strftime("%d %B %Y")).classes(
                    "text-xs font-semibold text-violet-700 mt-2"
                )
                for session in group:
                    render_session(session)

    def refresh_all() -> None:
        refresh_messages()
        refresh_document()
        refresh_stats()
        refresh_history()
        if controller.state.document is None:
            input_field.props("placeholder='Upload a PDF to start chatting...'")
        else:
            input_field.props("placeholder='Ask a question about your PDF...'")
        send_btn.set_enabled(controller.state.document is not None and not controller.state.is_loading)

    # === Actions ===

    def set_history_filter(value: str | None) -> None:
        history_filter["date"] = value or ""
        refresh_history()

    def clear_document() -> None:
        controller.clear_document()

    def load_session(session: Session) -> None:
        controller.load_session(session)
        if controller.state.document is None and session.document_name:
            ui.notify(
                f"Upload {session.document_name} again to continue this chat",
                type="info",
            )

    def new_chat() -> None:
        controller.new_chat()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        upload_error.set_visibility(False)
        filename = e.file.name
        content_type = e.file.content_type
        content = await e.file.read()
        upload_widget.reset()

        try:
            validate_upload(filename, content_type, len(content))
            document = await upload_to_api(filename, content, content_type)
        except PDFValidationError as err:
            show_upload_error(str(err))
            return
        except (httpx.HTTPError, ValueError) as err:
            logger.warning(f"Failed to extract {filename}: {err}")
            show_upload_error(EXTRACTION_FAILED_TEXT)
            return

        controller.upload_document(document)

    def show_upload_error(message: str) -> None:
        upload_error.set_text(message)
        upload_error.set_visibility(True)

    async def send_message() -> None:
        text = input_field.value or ""
        if not text.strip() or controller.state.is_loading:
            return
        input_field.value = ""
        await controller.send_message(text)

    # === UI Layout ===
    with ui.column().classes("w-full max-w-6xl mx-auto p-4 md:p-8 gap-6"):
        # Header
        with ui.column().classes("w-full items-center gap-1"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("description").classes("text-4xl text-indigo-500")
                ui.label(APP_TITLE).classes("text-3xl font-bold title-gradient")
            ui.label(
                "Upload your PDF documents and have conversations about their content."
            ).classes("text-gray-600")

        with ui.row().classes("w-full gap-6 items-start no-wrap max-lg:flex-wrap"):
            # Left column
            with ui.column().classes("w-full lg:w-1/3 gap-6"):
                with ui.column().classes("panel w-full p-5 gap-3"):
                    ui.label("Document Upload").classes("text-lg font-semibold text-orange-800")
                    upload_widget = (
                        ui.upload(
                            label="Upload your PDF (max 10MB)",
                            on_upload=handle_upload,
                            auto_upload=True,
                            max_files=1,
                        )
                        .props("accept=.pdf,application/pdf flat bordered")
                        .classes("w-full")
                    )
                    document_container = ui.column().classes("w-full")
                    upload_error = ui.label().classes("text-sm text-red-600")
                    upload_error.set_visibility(False)

                with ui.column().classes("panel w-full p-5 gap-3"):
                    ui.label("Chat Statistics").classes("text-lg font-semibold text-emerald-800")
                    stats_container = ui.column().classes("w-full gap-1")
                    new_chat_btn = (
                        ui.button("Start New Chat", on_click=new_chat)
                        .props("unelevated color=teal")
                        .classes("w-full")
                    )

                with ui.expansion("Chat History", icon="history").classes("panel w-full"):
                    history_container = ui.column().classes("w-full gap-2")

            # Chat column
            with ui.column().classes("panel w-full lg:w-2/3 gap-0").style("height: 600px"):
                with (
                    ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                    ui.column().classes("w-full p-5"),
                ):
                    messages_container = ui.column().classes("w-full gap-4")

                with ui.row().classes("w-full p-4 gap-3 items-center no-wrap border-t"):
                    input_field = (
                        ui.input()
                        .props("outlined dense rounded")
                        .classes("flex-grow")
                        .on("keydown.enter", send_message)
                    )
                    send_btn = ui.button(icon="send", on_click=send_message).props(
                        "round unelevated color=pink"
                    )

    refresh_all()


def main() -> None:
    ui.run(
        title=APP_TITLE,
        port=int(os.getenv("UI_PORT", "8080")),
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "buddi-secret"),
    )


if __name__ == "__main__":
    main()
