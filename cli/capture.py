"""
lektor capture command - Feed captured text through the tutor.

Reads stdin (a clipboard pipe, a shortcut daemon, ...) and processes each
capture one at a time, the way the global shortcuts of a desktop host do.
"""

import sys

from rich.console import Console

from cli.helpers import build_runtime, read_text
from tutor.capture import CaptureDispatcher
from tutor.render import render_view
from tutor.session import CORRECTION, MODES, ExplanationView


def cmd_capture(args):
    text = read_text(None)
    if args.lines:
        captures = [line for line in text.splitlines() if line.strip()]
    else:
        captures = [text] if text.strip() else []

    if not captures:
        print("✗ Nothing captured on stdin")
        sys.exit(1)

    runtime = build_runtime(args, component="capture")
    console = Console()
    session = runtime.session

    def handle(captured: str, mode: str):
        view = session.submit(captured, mode)
        if session.error is not None:
            console.print(f"[red]✗ {session.error.message}[/red]")
            session.dismiss_error()
            return
        if view is not None:
            console.print(render_view(view, expand_all=isinstance(view, ExplanationView)))

    dispatcher = CaptureDispatcher(handle, logger=runtime.logger.child("capture")).start()
    try:
        for captured in captures:
            dispatcher.deliver(captured, args.mode)
        dispatcher.stop()
        dispatcher.join()
    finally:
        runtime.logger.close()


def setup_capture_parser(subparsers):
    capture_parser = subparsers.add_parser('capture', help='Process captured text from stdin')
    capture_parser.add_argument('--mode', choices=MODES, default=CORRECTION, help='What to do with each capture')
    capture_parser.add_argument('--lines', action='store_true', help='Treat every non-empty line as its own capture')
    capture_parser.add_argument('--provider', help='LLM provider name from config.yaml')
    capture_parser.add_argument('--no-save', action='store_true', help='Do not write results to history')
    capture_parser.add_argument('--verbose', '-v', action='store_true', help='Log to the console as well')
    capture_parser.set_defaults(func=cmd_capture)
