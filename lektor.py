#!/usr/bin/env python3
"""
Lektor CLI - Corrections and explanations for English and German texts

Commands:
  Tutor:
    lektor correct <text>          Correct a text, show the diff and notes
    lektor explain <text>          Annotate a text sentence by sentence
    lektor chat <id> [question]    Ask follow-up questions about a saved result
    lektor capture --mode <m>      Process captured text from stdin

  History:
    lektor history list            Saved results, newest first
    lektor history show <id>       Show one saved result
    lektor history delete <id>     Delete one saved result

  Setup:
    lektor init                    Create config.yaml
    lektor config show|set         Inspect or change configuration
    lektor serve                   Start the web frontend
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from cli import main


if __name__ == '__main__':
    main()
