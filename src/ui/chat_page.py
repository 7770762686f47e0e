"""NiceGUI tutor chat interface with SSE streaming support."""

import html

from nicegui import app, events, ui

from src.billing.config import get_billing_config
from src.billing.limits import has_reached_limit, limit_message, remaining_messages
from src.history.store import ChatHistoryStore
from src.models.schemas import Attachment, AttachmentKind, ChatMessage, UserSession
from src.parsing.attachments import AttachmentError, format_file_size, process_file
from src.ui.chat_service import ChatServiceClient, ChatServiceError
from src.ui.formatting import format_response

SESSION_KEY = "session"

SPEECH_JS = """
(() => {
    const Recognition = window.SpeechRecognition || window.webkitSpeechRecognition;
    if (!Recognition) {
        emitEvent('speech_unsupported');
        return;
    }
    const recognition = new Recognition();
    recognition.lang = 'en-US';
    recognition.continuous = false;
    recognition.interimResults = false;
    recognition.onresult = (event) => emitEvent('speech_result', event.results[0][0].transcript);
    recognition.onerror = (event) => emitEvent('speech_error', event.error);
    recognition.start();
})();
"""

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f7fb; min-height: 100vh; }

    .app-container {
        background: white;
        border-radius: 24px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.08);
        overflow: hidden;
    }

    .header { background: #0a1172; }

    .message-user {
        background: #0a1172;
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: white;
        border: 1px solid #e5e7eb;
        color: #0a1172;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #9ca3af;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.15s; }
    .typing-dot:nth-child(3) { animation-delay: 0.3s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .history-item { border-radius: 16px; cursor: pointer; }
    .history-item.selected { background: #0a1172; color: white; }

    .limit-banner { border: 4px solid #fb923c; border-radius: 24px; }

    .message-assistant table { border-collapse: collapse; margin: 0.5rem 0; }
    .message-assistant th, .message-assistant td {
        border: 1px solid #d1d5db; padding: 0.25rem 0.5rem;
    }
    .message-assistant th { background: #f3f4f6; }
    .message-assistant b { font-weight: 600; }
</style>
"""


class ChatSession:
    """Manages chat state for one open page."""

    def __init__(self) -> None:
        self.messages: list[ChatMessage] = []
        self.thread_id: str | None = None
        self.pending_attachments: list[Attachment] = []
        self.is_streaming: bool = False

    def add_message(self, text: str, is_user: bool, attachments: list[Attachment] | None = None) -> None:
        self.messages.append(
            ChatMessage(text=text, is_user=is_user, attachments=attachments or [])
        )

    def reset(self) -> None:
        self.messages.clear()
        self.thread_id = None
        self.pending_attachments.clear()


def current_user() -> UserSession | None:
    """Signed-in user stored in the browser-backed user storage."""
    data = app.storage.user.get(SESSION_KEY)
    if not data:
        return None
    return UserSession.model_validate(data)


def render_user_text(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


@ui.page("/login")
def login_page() -> None:
    """Demo sign-in page."""
    ui.add_head_html(CUSTOM_CSS)
    client = ChatServiceClient()

    async def submit() -> None:
        try:
            user = await client.sign_in(email.value or "", password.value or "")
        except ChatServiceError as e:
            ui.notify(str(e), type="negative")
            return
        if user is None:
            ui.notify("Please enter an email and password", type="negative")
            return
        app.storage.user[SESSION_KEY] = user.model_dump(by_alias=True)
        ui.navigate.to("/")

    with ui.column().classes("w-full min-h-screen items-center justify-center"):
        with ui.card().classes("w-full max-w-sm p-6 gap-4"):
            ui.label("Sign in to your AI Tutor").classes("text-xl font-semibold text-[#0a1172]")
            email = ui.input("Email").props("type=email outlined").classes("w-full")
            password = (
                ui.input("Password", password=True)
                .props("outlined")
                .classes("w-full")
                .on("keydown.enter", submit)
            )
            ui.button("Sign In", on_click=submit).props("unelevated rounded").classes(
                "w-full bg-[#0a1172] text-white"
            )


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    user = current_user()
    if user is None:
        ui.navigate.to("/login")
        return

    ui.add_head_html(CUSTOM_CSS)
    client = ChatServiceClient()
    store = ChatHistoryStore(app.storage.user)
    limit = get_billing_config().free_message_limit
    session = ChatSession()

    messages_container: ui.column
    history_container: ui.column
    attachments_row: ui.row
    limit_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button
    new_chat_btn: ui.button

    def limit_reached() -> bool:
        return has_reached_limit(store.load_message_count(), user.is_premium, limit)

    def render_message(msg: ChatMessage) -> None:
        align = "justify-end" if msg.is_user else "justify-start"
        bubble = "message-user" if msg.is_user else "message-assistant"

        with ui.row().classes(f"w-full {align}"):
            with ui.element("div").classes(f"max-w-[80%] px-6 py-3 {bubble}"):
                if msg.is_user:
                    content = render_user_text(msg.text)
                else:
                    content = format_response(msg.text)
                ui.html(content, sanitize=False).classes("text-sm leading-relaxed")
                for attachment in msg.attachments:
                    icon = "image" if attachment.kind == AttachmentKind.IMAGE else "description"
                    with ui.row().classes("items-center gap-1 text-xs opacity-80"):
                        ui.icon(icon)
                        ui.label(attachment.name)

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("school").classes("text-5xl text-gray-300")
                    ui.label("What can I help you with today?").classes("text-lg text-gray-400")
            else:
                for msg in session.messages:
                    render_message(msg)

    def refresh_history() -> None:
        history_container.clear()
        items = store.load_history()
        with history_container:
            if not items:
                ui.label("You will see recent chats here").classes(
                    "text-gray-500 text-center w-full py-8"
                )
            for item in items:
                selected = " selected" if item.id == session.thread_id else ""
                ui.label(item.title).classes(
                    f"history-item{selected} w-full p-3 text-[15px] font-medium line-clamp-2"
                ).on("click", lambda _, item_id=item.id: open_thread(item_id))

    def refresh_limit() -> None:
        reached = limit_reached()
        limit_container.clear()
        with limit_container:
            if reached:
                with ui.column().classes("limit-banner w-full p-6 items-center text-center"):
                    ui.label(f"You've reached {limit}-message limit!").classes(
                        "text-2xl font-bold text-blue-900"
                    )
                    ui.label(limit_message(user.stripe_status)).classes("text-gray-600")
            elif not user.is_premium:
                left = remaining_messages(store.load_message_count(), user.is_premium, limit)
                ui.label(f"{left} free messages left").classes("text-xs text-gray-400")

        input_field.set_enabled(not reached and not session.is_streaming)
        send_btn.set_enabled(not reached and not session.is_streaming)
        new_chat_btn.set_enabled(not reached)
        if reached:
            input_field.props('placeholder="Please upgrade to continue chatting"')

    def refresh_attachments() -> None:
        attachments_row.clear()
        with attachments_row:
            for attachment in session.pending_attachments:
                ui.chip(
                    f"{attachment.name} ({format_file_size(attachment.size or 0)})",
                    removable=True,
                    on_value_change=lambda _, a=attachment: remove_attachment(a),
                ).props("dense")

    def remove_attachment(attachment: Attachment) -> None:
        if attachment in session.pending_attachments:
            session.pending_attachments.remove(attachment)
        refresh_attachments()

    def open_thread(thread_id: str) -> None:
        if session.is_streaming:
            return
        thread = store.get_thread(thread_id)
        if thread is None:
            return
        session.reset()
        session.thread_id = thread.id
        for exchange in thread.messages:
            session.add_message(exchange.question, is_user=True)
            session.add_message(exchange.answer, is_user=False)
        refresh_messages()
        refresh_history()

    def new_chat() -> None:
        if session.is_streaming:
            return
        session.reset()
        refresh_messages()
        refresh_history()
        refresh_attachments()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        try:
            content = await e.file.read()
            attachment = process_file(e.file.name, e.file.content_type, content)
        except AttachmentError as err:
            ui.notify(str(err), type="negative")
            return
        session.pending_attachments.append(attachment)
        refresh_attachments()

    def render_status_indicator() -> ui.row:
        with ui.row().classes("w-full justify-start") as row:
            with ui.element("div").classes("message-assistant px-6 py-4"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")
        return row

    async def send_message() -> None:
        text = (input_field.value or "").strip()
        if not text or session.is_streaming or limit_reached():
            return

        input_field.value = ""
        session.is_streaming = True
        send_btn.disable()
        input_field.disable()

        session.add_message(text, is_user=True, attachments=list(session.pending_attachments))
        session.pending_attachments.clear()
        refresh_attachments()
        refresh_messages()

        with messages_container:
            status_row = render_status_indicator()

        accumulated = ""
        response_html: ui.html | None = None

        def on_chunk(content: str) -> None:
            nonlocal accumulated, response_html
            if response_html is None:
                status_row.delete()
                with messages_container, ui.row().classes("w-full justify-start"):
                    with ui.element("div").classes("max-w-[80%] px-6 py-3 message-assistant"):
                        response_html = ui.html("", sanitize=False).classes(
                            "text-sm leading-relaxed"
                        )
            accumulated += content
            response_html.set_content(format_response(accumulated))

        def on_complete() -> None:
            session.add_message(accumulated, is_user=False)
            thread = store.record_exchange(text, accumulated, thread_id=session.thread_id)
            session.thread_id = thread.id
            store.increment_message_count()
            finish()

        def on_error(error: str) -> None:
            if response_html is None:
                status_row.delete()
            # Drop the unanswered question so it is not resent as context
            session.messages.pop()
            finish()
            ui.notify(error, type="negative")
            with messages_container:
                ui.label(error).classes(
                    "w-full bg-red-50 border border-red-200 text-red-700 px-4 py-3 rounded-lg"
                )

        def finish() -> None:
            session.is_streaming = False
            refresh_messages()
            refresh_history()
            refresh_limit()

        await client.stream_chat_response(session.messages, on_chunk, on_complete, on_error)

    def start_speech() -> None:
        ui.run_javascript(SPEECH_JS)

    def on_speech_result(e: events.GenericEventArguments) -> None:
        transcript = str(e.args or "").strip()
        if transcript:
            current = (input_field.value or "").strip()
            input_field.value = f"{current} {transcript}".strip()

    def sign_out() -> None:
        app.storage.user.pop(SESSION_KEY, None)
        ui.navigate.to("/login")

    ui.on("speech_result", on_speech_result)
    ui.on("speech_error", lambda e: ui.notify(f"Speech recognition error: {e.args}", type="warning"))
    ui.on(
        "speech_unsupported",
        lambda: ui.notify("Speech recognition is not supported in this browser", type="warning"),
    )

    # === UI Layout ===
    with ui.row().classes("w-full min-h-screen p-4 gap-4 no-wrap"):
        # Sidebar
        with ui.column().classes("w-80 gap-4").style("height: calc(100vh - 2rem)"):
            with ui.row().classes("w-full app-container p-4 items-center justify-between"):
                with ui.column().classes("gap-0"):
                    ui.label(user.name).classes("text-sm font-medium text-gray-700")
                    tier = "Premium" if user.is_premium else user.stripe_status
                    ui.label(tier).classes("text-xs text-gray-400")
                ui.button("Sign Out", on_click=sign_out).props("flat dense no-caps")
            with ui.scroll_area().classes("flex-grow w-full app-container"):
                history_container = ui.column().classes("w-full gap-2 p-2")
            new_chat_btn = (
                ui.button("Start a New Chat", icon="arrow_forward", on_click=new_chat)
                .props("unelevated rounded no-caps")
                .classes("w-full bg-[#0a1172] text-white")
            )

        # Chat
        with ui.column().classes("flex-grow app-container").style("height: calc(100vh - 2rem)"):
            with ui.row().classes("w-full header px-5 py-4 items-center"):
                ui.icon("school").classes("text-white text-3xl")
                ui.label("Your Personal AI Tutor, Available 24/7").classes(
                    "text-lg font-semibold text-white"
                )

            with (
                ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                ui.column().classes("w-full p-5"),
            ):
                messages_container = ui.column().classes("w-full gap-4")

            limit_container = ui.column().classes("w-full px-4")

            attachments_row = ui.row().classes("w-full px-4 gap-2")
            with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t no-wrap"):
                ui.upload(on_upload=handle_upload, auto_upload=True, multiple=True).props(
                    'flat dense accept="image/*,.txt,.pdf,.md"'
                ).classes("w-32")
                ui.button(icon="mic", on_click=start_speech).props("round flat")
                input_field = (
                    ui.textarea(placeholder="What can I help you with today?")
                    .props("autogrow outlined dense rows=1 rounded")
                    .classes("flex-grow")
                    .on("keydown.enter.prevent", send_message)
                )
                send_btn = (
                    ui.button(icon="send", on_click=send_message)
                    .props("round unelevated")
                    .classes("bg-[#0a1172] text-white")
                )

    refresh_messages()
    refresh_history()
    refresh_limit()

