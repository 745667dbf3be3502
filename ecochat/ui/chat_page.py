"""NiceGUI chat interface with a session history sidebar."""

import logging

from nicegui import app, ui

from ecochat.chat.engine import ChatEngine
from ecochat.chat.session_list import SessionList
from ecochat.chat.titles import display_title
from ecochat.config import get_chat_config
from ecochat.errors import ChatValidationError
from ecochat.models.schemas import ChatMessage, DeliveryStatus, MessageRole
from ecochat.persistence.http import HttpGateway

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f4f8f4; min-height: 100vh; }

    .header { background: linear-gradient(135deg, #2f9e44 0%, #0b7285 100%); }

    .message-user {
        background: linear-gradient(135deg, #2f9e44 0%, #0b7285 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #eef3ee;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-failed { outline: 1px dashed #e03131; }

    .avatar-user { background: linear-gradient(135deg, #2f9e44 0%, #0b7285 100%); }
    .avatar-assistant { background: #6b7280; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #2f9e44;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.15s; }
    .typing-dot:nth-child(3) { animation-delay: 0.3s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .session-active { background: #d3f9d8; }
</style>
"""


@ui.page("/")
def chat_page() -> None:
    """Main chat page: sidebar with chat history, message list and input."""
    ui.add_head_html(CUSTOM_CSS)
    config = get_chat_config()
    owner_id = config.owner_id or app.storage.browser.get("id")
    gateway = HttpGateway(config.api_base_url, owner_id, timeout=config.request_timeout)
    ui.context.client.on_disconnect(gateway.aclose)

    messages_container: ui.column
    sessions_container: ui.column
    input_field: ui.textarea

    def notify_error(text: str) -> None:
        with messages_container:
            ui.notify(text, type="negative")

    def refresh() -> None:
        refresh_messages()
        refresh_sessions()

    sessions = SessionList(gateway, owner_id, on_change=lambda: refresh_sessions(),
                           on_error=notify_error)
    engine = ChatEngine(
        gateway,
        owner_id,
        reply_delay=config.reply_delay,
        title_max_length=config.title_max_length,
        session_list=sessions,
        on_change=refresh,
        on_error=notify_error,
    )

    def render_avatar(is_user: bool) -> None:
        css = "avatar-user" if is_user else "avatar-assistant"
        icon = "person" if is_user else "recycling"
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_message(msg: ChatMessage) -> None:
        is_user = msg.role is MessageRole.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        if msg.status is DeliveryStatus.FAILED:
            bubble += " message-failed"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(False)
            with ui.column().classes("max-w-[70%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    ui.label(msg.content).classes("text-sm leading-relaxed whitespace-pre-wrap")
                stamp = msg.timestamp.astimezone().strftime("%I:%M %p")
                if msg.status is DeliveryStatus.FAILED:
                    stamp += " · not saved"
                ui.label(stamp).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(True)

    def render_typing_indicator() -> None:
        with ui.row().classes("w-full justify-start gap-3 items-end"):
            render_avatar(False)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("gap-1"):
                    for _ in range(3):
                        ui.element("div").classes("typing-dot")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if engine.is_loading:
                ui.spinner(size="lg").classes("self-center text-green-700")
                return
            if not engine.messages:
                with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                    ui.icon("forum").classes("text-5xl text-gray-300")
                    ui.label("Start a conversation").classes("text-lg text-gray-400")
            for msg in engine.messages:
                render_message(msg)
            if engine.is_typing:
                render_typing_indicator()

    def refresh_sessions() -> None:
        sessions_container.clear()
        with sessions_container:
            if sessions.loading:
                ui.label("Loading...").classes("p-4 text-sm text-gray-400")
                return
            if not sessions.sessions:
                ui.label("No chats yet").classes("p-4 text-sm text-gray-400")
                return
            for record in sessions.sessions:
                active = "session-active" if record.id == engine.session_id else ""
                with ui.row().classes(
                    f"w-full items-center justify-between rounded px-2 py-1 {active}"
                ):
                    ui.button(
                        display_title(record.title),
                        icon="chat",
                        on_click=lambda _, sid=record.id: engine.select_session(sid),
                    ).props("flat no-caps align=left").classes("flex-grow text-sm")
                    ui.button(
                        icon="delete",
                        on_click=lambda _, sid=record.id: engine.delete_session(sid),
                    ).props("flat round dense size=sm color=grey")

    def send_message() -> None:
        text = input_field.value or ""
        try:
            engine.send_message(text)
        except ChatValidationError:
            return
        input_field.value = ""

    def new_chat() -> None:
        engine.start_new_session()

    # === UI Layout ===
    with ui.left_drawer(value=True).classes("bg-white border-r p-4"):
        ui.button("New Chat", icon="add", on_click=new_chat).props("unelevated").classes(
            "w-full bg-green-700 text-white"
        )
        ui.label("Chat History").classes("text-xs font-medium text-gray-500 mt-4")
        sessions_container = ui.column().classes("w-full gap-1")

    with ui.header().classes("header px-5 py-3 items-center"):
        ui.icon("recycling").classes("text-white text-3xl")
        ui.label("EcoChat Assistant").classes("text-lg font-semibold text-white")

    with ui.column().classes("w-full max-w-3xl mx-auto").style("height: calc(100vh - 6rem)"):
        with (
            ui.scroll_area().classes("flex-grow w-full"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(
                    placeholder="Ask me about recycling, waste sorting, or sustainability..."
                )
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            ui.button(icon="send", on_click=send_message).props("round unelevated color=green-8")
        ui.label("Sortify can make mistakes. Consider checking important information.").classes(
            "text-xs text-gray-400 self-center"
        )

    refresh()
    ui.timer(0, sessions.refresh, once=True)


def main() -> None:
    config = get_chat_config()
    logger.info(f"Chat UI using session store at {config.api_base_url}")
    ui.run(title="EcoChat Assistant", port=8080, reload=False,
           storage_secret="ecochat-secret")


if __name__ in {"__main__", "__mp_main__"}:
    main()
