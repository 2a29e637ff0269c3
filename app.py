import argparse

import gradio as gr

from clients.journal_api import journal_api
from logging_config import get_logger, setup_logging
from logic.logic_state import default_dashboard_state
from logic.logic_entries import FEED_COLUMNS
from logic.logic_dashboard import (
    add_goal_begin_action,
    apply_job_action,
    batch_begin_action,
    cancel_delete_action,
    chat_apply_action,
    chat_begin_action,
    chat_fetch_action,
    close_chat_action,
    close_note_action,
    confirm_delete_begin_action,
    create_entry_begin_action,
    delete_goal_begin_action,
    enter_demo_action,
    exit_session_action,
    feed_select_action,
    health_status_action,
    open_chat_action,
    refresh_begin_action,
    request_delete_action,
    run_job_action,
    sign_in_action,
)

from dash_board import CHAT_EMPTY_TXT, FEED_EMPTY_TXT, FEED_HELP_TXT, LANDING_TXT

logger = get_logger(__name__)


with gr.Blocks(title="MindScribe") as demo:
    # Per-session state
    dashboard_state = gr.State(default_dashboard_state())
    chat_request_state = gr.State(None)
    chat_reply_state = gr.State(None)

    # ========== Landing panel ==========
    with gr.Column(visible=True) as landing_panel:
        gr.Markdown(LANDING_TXT)
        with gr.Row():
            sign_in_btn = gr.Button("Get Started", variant="primary")
            demo_btn = gr.Button("Try Demo Mode")
        landing_info = gr.Markdown("")

    # ========== Dashboard panel ==========
    with gr.Column(visible=False) as dashboard_panel:
        with gr.Row():
            greeting = gr.Markdown("# Hello, Writer.")
            with gr.Column(scale=0, min_width=220):
                open_chat_btn = gr.Button("✨ AI Insight")
                refresh_btn = gr.Button("↻ Refresh", variant="secondary")
                exit_btn = gr.Button("Exit", variant="secondary")

        goal_ticker = gr.Markdown("")

        with gr.Accordion("🎯 Targets", open=False):
            with gr.Row():
                goal_input = gr.Textbox(label="Add new goal", placeholder="ADD NEW GOAL...", scale=4)
                add_goal_btn = gr.Button("＋ Add", scale=1)
            with gr.Row():
                goal_picker = gr.Dropdown(label="Goal", choices=[], scale=4)
                delete_goal_btn = gr.Button("🗑 Delete goal", variant="stop", scale=1)

        mood_chart = gr.LinePlot(
            x="date",
            y="score",
            y_lim=[0, 10],
            title="Emotional Velocity",
            visible=False,
        )

        # Write
        entry_input = gr.Textbox(
            label="Write",
            placeholder="What are you thinking right now?",
            lines=6,
        )
        publish_btn = gr.Button("Publish Entry", variant="primary")

        # Feed
        gr.Markdown(FEED_HELP_TXT)
        feed_empty = gr.Markdown(FEED_EMPTY_TXT, visible=True)
        feed = gr.Dataframe(headers=FEED_COLUMNS, interactive=False, wrap=True)

        with gr.Row(visible=False) as dock:
            dock_label = gr.Markdown("**0 SELECTED**")
            analyze_btn = gr.Button("Run Analysis", variant="primary")

        with gr.Row():
            delete_entry_picker = gr.Dropdown(label="Entry", choices=[], scale=4)
            delete_entry_btn = gr.Button("🗑 Delete entry", variant="stop", scale=1)

        with gr.Row(visible=False) as confirm_panel:
            gr.Markdown("**Delete this entry?**")
            confirm_yes_btn = gr.Button("Yes, delete", variant="stop")
            confirm_no_btn = gr.Button("Cancel")

        # Expanded AI note
        with gr.Column(visible=False) as note_panel:
            gr.Markdown("### ✒️ AI Analysis")
            note_text = gr.Markdown("")
            close_note_btn = gr.Button("Close")

        # Chat
        with gr.Column(visible=False) as chat_panel:
            gr.Markdown("## AI Assistant")
            gr.Markdown(CHAT_EMPTY_TXT)
            chatbot = gr.Chatbot(label="Conversation", type="messages")
            chat_input = gr.Textbox(label="Ask a question...", lines=1)
            with gr.Row():
                chat_send_btn = gr.Button("Send", variant="primary")
                close_chat_btn = gr.Button("Close")

    api_status = gr.Markdown("")

    # Order matches logic_dashboard.render_dashboard()
    DASHBOARD_OUTPUTS = [
        greeting,
        goal_ticker,
        mood_chart,
        feed,
        feed_empty,
        dock,
        dock_label,
        analyze_btn,
        publish_btn,
        delete_entry_picker,
        confirm_panel,
        goal_picker,
        chatbot,
        chat_panel,
        note_panel,
        note_text,
    ]

    # ====== Event bindings ======

    def bind_job(trigger, begin_fn, inputs, extra_outputs=()):
        """begin on the live state -> run the job over the network -> apply to the live state"""
        job_state = gr.State(None)
        outcome_state = gr.State(None)
        trigger(
            begin_fn,
            inputs=inputs,
            outputs=[dashboard_state, job_state] + list(extra_outputs) + DASHBOARD_OUTPUTS,
        ).then(
            run_job_action,
            inputs=[job_state],
            outputs=[outcome_state, job_state],
        ).then(
            apply_job_action,
            inputs=[dashboard_state, outcome_state],
            outputs=[dashboard_state, outcome_state] + DASHBOARD_OUTPUTS,
        )

    demo.load(health_status_action, inputs=None, outputs=[api_status])

    # Session
    panel_outputs = [landing_info, landing_panel, dashboard_panel]
    bind_job(demo_btn.click, enter_demo_action, [dashboard_state], panel_outputs)
    bind_job(sign_in_btn.click, sign_in_action, [dashboard_state], panel_outputs)
    exit_btn.click(
        exit_session_action,
        inputs=[dashboard_state],
        outputs=[dashboard_state] + panel_outputs + DASHBOARD_OUTPUTS,
    )
    bind_job(refresh_btn.click, refresh_begin_action, [dashboard_state])

    # Entries: clear the input first, post and reload afterwards
    bind_job(publish_btn.click, create_entry_begin_action, [entry_input, dashboard_state], [entry_input])

    feed.select(
        feed_select_action,
        inputs=[dashboard_state],
        outputs=[dashboard_state] + DASHBOARD_OUTPUTS,
    )

    delete_entry_btn.click(
        request_delete_action,
        inputs=[dashboard_state, delete_entry_picker],
        outputs=[dashboard_state] + DASHBOARD_OUTPUTS,
    )
    bind_job(confirm_yes_btn.click, confirm_delete_begin_action, [dashboard_state])
    confirm_no_btn.click(
        cancel_delete_action,
        inputs=[dashboard_state],
        outputs=[dashboard_state] + DASHBOARD_OUTPUTS,
    )

    # Batch analysis
    bind_job(analyze_btn.click, batch_begin_action, [dashboard_state])

    close_note_btn.click(
        close_note_action,
        inputs=[dashboard_state],
        outputs=[dashboard_state] + DASHBOARD_OUTPUTS,
    )

    # Goals: the input is cleared before the post goes out
    for trigger in (add_goal_btn.click, goal_input.submit):
        bind_job(trigger, add_goal_begin_action, [goal_input, dashboard_state], [goal_input])

    bind_job(delete_goal_btn.click, delete_goal_begin_action, [dashboard_state, goal_picker])

    # Chat: show the user's message, then wait for the reply
    open_chat_btn.click(
        open_chat_action,
        inputs=[dashboard_state],
        outputs=[dashboard_state] + DASHBOARD_OUTPUTS,
    )
    close_chat_btn.click(
        close_chat_action,
        inputs=[dashboard_state],
        outputs=[dashboard_state] + DASHBOARD_OUTPUTS,
    )

    for trigger in (chat_send_btn.click, chat_input.submit):
        trigger(
            chat_begin_action,
            inputs=[chat_input, dashboard_state],
            outputs=[dashboard_state, chat_request_state, chat_input] + DASHBOARD_OUTPUTS,
        ).then(
            chat_fetch_action,
            inputs=[chat_request_state],
            outputs=[chat_reply_state],
        ).then(
            chat_apply_action,
            inputs=[dashboard_state, chat_request_state, chat_reply_state],
            outputs=[dashboard_state] + DASHBOARD_OUTPUTS,
        )


def _parse_auth(value: str | None):
    if not value:
        return None
    username, sep, password = value.partition(":")
    if not sep or not username:
        raise SystemExit("--auth expects USER:PASSWORD")
    return [(username, password)]


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="MindScribe journaling dashboard")
    parser.add_argument("--api-url", type=str, default=None, help="Journal API base URL")
    parser.add_argument("--auth", type=str, default=None, help="USER:PASSWORD for signed-in mode")
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--share", action="store_true")
    args = parser.parse_args(argv)

    setup_logging()

    if args.api_url:
        journal_api.client.base_url = args.api_url.rstrip("/")
    logger.info("Using Journal API at %s", journal_api.base_url)

    demo.launch(
        server_port=args.port,
        share=args.share,
        auth=_parse_auth(args.auth),
    )


if __name__ == "__main__":
    main()
