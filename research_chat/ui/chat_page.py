"""NiceGUI chat interface driving the conversation controller in-process."""

from nicegui import events, ui

from research_chat.api.dependencies import get_controller_registry
from research_chat.attachments.encoder import (
    MAX_ATTACHMENT_SIZE,
    MAX_ATTACHMENT_SIZE_MB,
    AttachmentRejectedError,
    AttachmentSlot,
)
from research_chat.chat.controller import ConversationController, TurnRejectedError
from research_chat.models.schemas import Message, MessageRole, TurnStatus
from research_chat.ui.markdown import citations_to_html, markdown_to_html

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<link href="https://fonts.googleapis.com/icon?family=Material+Icons" rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #0b1120; min-height: 100vh; }

    .app-container {
        background: #0f172a;
        border: 1px solid #1e293b;
        border-radius: 12px;
        box-shadow: 0 2px 12px rgba(0, 0, 0, 0.4);
        overflow: hidden;
    }

    .header { background: linear-gradient(135deg, #c2410c 0%, #4338ca 100%); }

    .message-user {
        background: linear-gradient(135deg, #4338ca 0%, #6d28d9 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-system {
        background: #fee2e2;
        color: #991b1b;
        border: 1px solid #fca5a5;
        border-radius: 8px;
    }

    .avatar-user { background: linear-gradient(135deg, #4338ca 0%, #6d28d9 100%); }
    .avatar-assistant { background: #c2410c; }
    .avatar-system { background: #b91c1c; }

    .typing-dot {
        width: 8px; height: 8px;
        background: #c2410c;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .input-box {
        background: #020617;
        border: 1px solid #334155;
        border-radius: 12px;
        transition: border-color 0.2s;
    }
    .input-box:focus-within { border-color: #c2410c; }

    .send-btn { background: linear-gradient(135deg, #c2410c 0%, #4338ca 100%) !important; }

    /* Markdown styling */
    .message-assistant strong { font-weight: 600; }
    .message-assistant em { font-style: italic; }
    .message-assistant pre { margin: 0.5rem 0; }
    .message-assistant code { font-family: 'Menlo', 'Monaco', monospace; }
    .message-assistant ul, .message-assistant ol { margin: 0.5rem 0; }
    .message-assistant a { color: #4f46e5; }
</style>
"""

_AVATARS = {
    MessageRole.USER: ("avatar-user", "person"),
    MessageRole.ASSISTANT: ("avatar-assistant", "travel_explore"),
    MessageRole.SYSTEM: ("avatar-system", "error"),
}

_STATUS_TEXT = {
    TurnStatus.THINKING: "Searching and validating sources...",
    TurnStatus.STREAMING: "Writing report...",
}


def render_content(message: Message) -> str:
    """Render a message body as HTML for its bubble."""
    if message.role == MessageRole.USER:
        return markdown_to_html(message.content) if message.content else ""
    return markdown_to_html(message.content) + citations_to_html(message.grounding_chunks)


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)

    registry = get_controller_registry()
    controller: ConversationController = registry.create()
    staged = AttachmentSlot()

    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button
    reset_btn: ui.button
    upload: ui.upload
    attachment_chip: ui.row

    def render_avatar(role: MessageRole) -> None:
        css, icon = _AVATARS[role]
        avatar_classes = f"w-9 h-9 rounded-full flex items-center justify-center {css}"
        with ui.element("div").classes(avatar_classes):
            ui.icon(icon).classes("text-white text-lg")

    def render_message(msg: Message) -> ui.html:
        is_user = msg.role == MessageRole.USER
        align = "justify-end" if is_user else "justify-start"
        bubble = f"message-{msg.role.value}"

        with ui.row().classes(f"w-full {align} gap-3 items-end"):
            if not is_user:
                render_avatar(msg.role)
            with ui.column().classes("max-w-[80%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if msg.attachment is not None:
                        with ui.row().classes("items-center gap-1 text-xs opacity-80"):
                            ui.icon("attach_file").classes("text-sm")
                            ui.label(f"Image attached ({msg.attachment.mime_type})")
                    body = ui.html(render_content(msg), sanitize=False).classes(
                        "text-sm leading-relaxed"
                    )
                ui.label(msg.timestamp.astimezone().strftime("%I:%M %p")).classes(
                    f"text-[10px] text-gray-400 {'self-end' if is_user else 'self-start'}"
                )
            if is_user:
                render_avatar(msg.role)
        return body

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            for msg in controller.messages:
                render_message(msg)

    def render_status_indicator(status_text: str) -> ui.row:
        """Render status indicator with animated dots and status text."""
        with ui.row().classes("w-full justify-start gap-3 items-end") as row:
            render_avatar(MessageRole.ASSISTANT)
            with ui.element("div").classes("message-assistant px-4 py-3"):
                with ui.row().classes("items-center gap-2"):
                    with ui.row().classes("gap-1"):
                        for _ in range(3):
                            ui.element("div").classes("typing-dot")
                    ui.label(status_text).classes("text-sm text-gray-500 italic")
        return row

    def refresh_attachment_chip() -> None:
        attachment_chip.set_visibility(not staged.is_empty)

    def clear_attachment() -> None:
        staged.clear()
        upload.reset()
        refresh_attachment_chip()

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        try:
            staged.stage(content, e.file.content_type)
        except AttachmentRejectedError as err:
            ui.notify(str(err), type="negative")
        upload.reset()
        refresh_attachment_chip()

    def handle_rejected() -> None:
        clear_attachment()
        ui.notify(
            f"File is too large. Maximum size: {MAX_ATTACHMENT_SIZE_MB}MB",
            type="negative",
        )

    async def send_message() -> None:
        text = input_field.value or ""
        if not controller.can_submit(text, staged.attachment):
            return

        attachment = staged.take()
        input_field.value = ""
        refresh_attachment_chip()
        send_btn.disable()
        reset_btn.disable()

        status_row: ui.row | None = None
        response_html: ui.html | None = None
        try:
            async for update in controller.stream_turn(text, attachment):
                if update.status == TurnStatus.THINKING:
                    refresh_messages()
                    with messages_container:
                        status_row = render_status_indicator(_STATUS_TEXT[update.status])
                elif update.status == TurnStatus.STREAMING:
                    if status_row is not None:
                        status_row.delete()
                        status_row = None
                    if response_html is None:
                        with messages_container:
                            response_html = render_message(update.message)
                    else:
                        response_html.set_content(render_content(update.message))
        except TurnRejectedError as err:
            ui.notify(str(err), type="warning")
        finally:
            send_btn.enable()
            reset_btn.enable()
            refresh_messages()

        if controller.status == TurnStatus.ERROR:
            ui.notify("The agent failed to answer. Try again.", type="negative")

    def new_chat() -> None:
        try:
            registry.reset(controller.session_id)
        except TurnRejectedError as err:
            ui.notify(str(err), type="warning")
            return
        clear_attachment()
        refresh_messages()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-4xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.icon("travel_explore").classes("text-white text-3xl")
                with ui.column().classes("gap-0"):
                    ui.label("Research Validator").classes("text-lg font-semibold text-white")
                    ui.label("Vision & Reputation Mode").classes("text-[10px] text-white/70")
            with ui.row().classes("items-center gap-3"):
                with ui.element("div").classes(
                    "bg-white/20 rounded-full px-3 py-1 flex items-center gap-2"
                ):
                    ui.icon("tag").classes("text-white/80 text-sm")
                    ui.label().bind_text_from(
                        controller, "session_id", lambda s: (s or "")[:8].upper()
                    ).classes("text-xs text-white/80 font-mono")
                reset_btn = ui.button(icon="delete_sweep", on_click=new_chat).props(
                    "flat round color=white"
                ).tooltip("Clear and start a new session")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")
            refresh_messages()

        # Staged attachment
        with ui.row().classes("w-full px-4 pt-2 items-center gap-2 text-xs") as attachment_chip:
            ui.icon("attach_file").classes("text-indigo-400")
            ui.label("Image attached (vision ready)").classes("text-indigo-400 font-mono")
            ui.button(icon="close", on_click=clear_attachment).props("flat dense round size=sm")
        refresh_attachment_chip()

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end border-t border-slate-800"):
            upload = (
                ui.upload(
                    on_upload=handle_upload,
                    on_rejected=handle_rejected,
                    max_file_size=MAX_ATTACHMENT_SIZE,
                    auto_upload=True,
                )
                .props('accept="image/*" flat dense')
                .classes("w-40")
            )
            with ui.element("div").classes("flex-grow input-box px-3 py-2"):
                input_field = (
                    ui.textarea(placeholder="Enter a URL or a query. Attach a scan to analyse it.")
                    .props("autogrow borderless dense rows=1 dark")
                    .classes("w-full")
                    .on("keydown.enter.prevent", send_message)
                )
            send_btn = (
                ui.button(icon="send", on_click=send_message)
                .props("round unelevated")
                .classes("send-btn")
            )


def main() -> None:
    ui.run(title="Research Validator", port=8080, reload=False)


if __name__ == "__main__":
    main()
