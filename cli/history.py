"""
lektor history commands - List, show and delete saved results.
"""

import json
import sys

from rich.console import Console

from cli.helpers import open_history, page_size
from tutor.history import LANGUAGE_FILTERS, parse_entries, parse_entry
from tutor.render import render_history_table, render_view
from tutor.session import build_entry_view


def cmd_history_list(args):
    store = open_history(args)
    page = store.query(args.limit or page_size(), before=args.before, language=args.language)
    entries = parse_entries(page.entries, store.logger)

    if args.json:
        print(json.dumps({
            'entries': [e.model_dump(mode='json') for e in entries],
            'has_more': page.has_more,
            'cursor': page.cursor,
        }, indent=2, ensure_ascii=False))
        return

    if not entries:
        print("No history yet." if args.language in (None, 'all') else f"No '{args.language}' entries found.")
        return

    console = Console()
    console.print(render_history_table(entries))
    if page.has_more:
        console.print(f"[dim]More entries: lektor history list --before {page.cursor}[/dim]")


def cmd_history_show(args):
    store = open_history(args)
    try:
        entry = parse_entry(store.get(args.entry_id))
    except KeyError:
        print(f"✗ History entry not found: {args.entry_id}")
        sys.exit(1)
    except ValueError as e:
        print(f"✗ History entry {args.entry_id} is malformed: {e}")
        sys.exit(1)

    Console().print(render_view(build_entry_view(entry), expand_all=True))


def cmd_history_delete(args):
    if not args.yes:
        response = input(f"Delete {args.entry_id}? (yes/no): ").strip().lower()
        if response != 'yes':
            print("Cancelled.")
            return

    store = open_history(args)
    if store.delete(args.entry_id):
        print(f"✓ Deleted {args.entry_id}")
    else:
        print(f"✗ History entry not found: {args.entry_id}")
        sys.exit(1)


def setup_history_parser(subparsers):
    history_parser = subparsers.add_parser('history', help='Browse saved results')
    history_subparsers = history_parser.add_subparsers(dest='history_command', help='History command')
    history_subparsers.required = True

    list_parser = history_subparsers.add_parser('list', help='List saved results, newest first')
    list_parser.add_argument('--limit', type=int, help='Page size (15-20, default: defaults.history_page_size)')
    list_parser.add_argument('--before', help='Cursor from a previous page')
    list_parser.add_argument('--language', choices=LANGUAGE_FILTERS, default='all', help='Language filter')
    list_parser.add_argument('--json', action='store_true', help='Output as JSON')
    list_parser.set_defaults(func=cmd_history_list)

    show_parser = history_subparsers.add_parser('show', help='Show one saved result')
    show_parser.add_argument('entry_id', help='History entry id')
    show_parser.set_defaults(func=cmd_history_show)

    delete_parser = history_subparsers.add_parser('delete', help='Delete one saved result')
    delete_parser.add_argument('entry_id', help='History entry id')
    delete_parser.add_argument('--yes', '-y', action='store_true', help='Skip confirmation')
    delete_parser.set_defaults(func=cmd_history_delete)
