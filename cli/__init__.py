import argparse
import cli.config
from cli.tutor import setup_tutor_parser
from cli.chat import setup_chat_parser
from cli.history import setup_history_parser
from cli.capture import setup_capture_parser
from cli.serve import setup_serve_parser


def create_parser():
    parser = argparse.ArgumentParser(
        prog='lektor',
        description='Lektor - Corrections and sentence-by-sentence explanations for English and German',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Configuration (run first!)
  lektor init                             # Create config.yaml
  lektor init --migrate                   # Copy OPENROUTER_API_KEY into config.yaml
  lektor config show
  lektor config set defaults.llm_provider claude-sonnet
  lektor config set api_keys.openrouter sk-or-...

  # Tutor
  lektor correct "I have went to the store yesterday."
  lektor explain "Das ist nicht mein Bier."
  pbpaste | lektor explain -
  lektor correct --json --no-save "Ich habe gegangen."

  # History and follow-up questions
  lektor history list --language de
  lektor history show 1730000000000-ab12cd34
  lektor history delete 1730000000000-ab12cd34 -y
  lektor chat 1730000000000-ab12cd34 "Why not 'went'?"

  # Clipboard capture (one capture at a time)
  pbpaste | lektor capture --mode explanation

  # Web frontend
  lektor serve
  lektor serve --port 8080 --host 0.0.0.0
"""
    )

    subparsers = parser.add_subparsers(dest='command', help='Command')
    subparsers.required = True

    cli.config.setup_parser(subparsers)
    setup_tutor_parser(subparsers)
    setup_chat_parser(subparsers)
    setup_history_parser(subparsers)
    setup_capture_parser(subparsers)
    setup_serve_parser(subparsers)

    return parser


def main(argv=None):
    parser = create_parser()
    args = parser.parse_args(argv)
    args.func(args)
