"""
lektor chat command - Ask follow-up questions about a saved result.
"""

import sys

from rich.console import Console

from cli.helpers import build_runtime, report_error
from tutor.history import parse_entry
from tutor.render import render_chat, render_view


def cmd_chat(args):
    runtime = build_runtime(args, component="chat")
    if runtime.history is None:
        print("✗ chat needs history access")
        sys.exit(1)

    try:
        try:
            entry = parse_entry(runtime.history.get(args.entry_id))
        except KeyError:
            print(f"✗ History entry not found: {args.entry_id}")
            sys.exit(1)
        except ValueError as e:
            print(f"✗ History entry {args.entry_id} is malformed: {e}")
            sys.exit(1)

        console = Console()
        session = runtime.session
        view = session.load_history_item(entry)
        console.print(render_view(view))

        if args.message:
            _ask(console, session, args.message)
            return

        console.print("[dim]Ask a question (empty line or Ctrl-D to quit)[/dim]")
        while True:
            try:
                message = input("› ")
            except EOFError:
                break
            if not message.strip():
                break
            _ask(console, session, message)
    finally:
        runtime.logger.close()


def _ask(console: Console, session, message: str):
    reply = session.send_chat(message)
    report_error(session.error)
    if reply is not None:
        console.print(render_chat([reply]))


def setup_chat_parser(subparsers):
    chat_parser = subparsers.add_parser('chat', help='Chat about a saved correction or explanation')
    chat_parser.add_argument('entry_id', help='History entry id (see: lektor history list)')
    chat_parser.add_argument('message', nargs='?', help='Single question (omit for an interactive chat)')
    chat_parser.add_argument('--provider', help='LLM provider name from config.yaml')
    chat_parser.add_argument('--verbose', '-v', action='store_true', help='Log to the console as well')
    chat_parser.set_defaults(func=cmd_chat)
