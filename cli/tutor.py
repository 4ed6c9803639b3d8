"""
lektor correct / explain commands - Run one text through the model.
"""

import json
import sys

from rich.console import Console

from cli.helpers import build_runtime, read_text, report_error
from tutor.render import render_view
from tutor.session import CORRECTION, EXPLANATION, ExplanationView


def _run(args, mode: str):
    text = read_text(args.text)
    if not text.strip():
        print("✗ Nothing to do: input text is empty")
        sys.exit(1)

    runtime = build_runtime(args)
    try:
        view = runtime.session.submit(text, mode)
        report_error(runtime.session.error)
        if view is None:
            sys.exit(1)

        if args.json:
            print(json.dumps({
                'entry_id': view.entry_id,
                'mode': mode,
                'result': view.result.model_dump(mode='json', by_alias=True),
            }, indent=2, ensure_ascii=False))
            return

        console = Console()
        expand_all = isinstance(view, ExplanationView) and not args.collapsed
        console.print(render_view(view, expand_all=expand_all))
        if view.entry_id:
            console.print(f"[dim]Saved as {view.entry_id}[/dim]")
    finally:
        runtime.logger.close()


def cmd_correct(args):
    _run(args, CORRECTION)


def cmd_explain(args):
    _run(args, EXPLANATION)


def _add_common_arguments(parser):
    parser.add_argument('text', nargs='?', help="Text to process ('-' or omitted: read stdin)")
    parser.add_argument('--provider', help='LLM provider name from config.yaml (default: defaults.llm_provider)')
    parser.add_argument('--no-save', action='store_true', help='Do not write the result to history')
    parser.add_argument('--json', action='store_true', help='Output the raw result as JSON')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log to the console as well')


def setup_tutor_parser(subparsers):
    correct_parser = subparsers.add_parser('correct', help='Correct a text and explain the mistakes')
    _add_common_arguments(correct_parser)
    correct_parser.set_defaults(func=cmd_correct, collapsed=False)

    explain_parser = subparsers.add_parser('explain', help='Annotate a text sentence by sentence')
    _add_common_arguments(explain_parser)
    explain_parser.add_argument('--collapsed', action='store_true', help='Only show highlighted sentences, not every annotation')
    explain_parser.set_defaults(func=cmd_explain)
