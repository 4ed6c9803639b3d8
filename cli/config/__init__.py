"""
Config CLI commands.

Commands for managing the Lektor configuration file.
"""

from cli.config.init import cmd_init
from cli.config.show import cmd_config_show
from cli.config.set import cmd_config_set


def setup_parser(subparsers):
    """Setup config command parser."""
    # lektor init
    init_parser = subparsers.add_parser(
        'init',
        help='Create config.yaml with default providers'
    )
    init_parser.add_argument(
        '--migrate',
        action='store_true',
        help='Copy OPENROUTER_API_KEY from the environment into config.yaml'
    )
    init_parser.add_argument(
        '--force',
        action='store_true',
        help='Overwrite existing config'
    )
    init_parser.set_defaults(func=cmd_init)

    # lektor config ...
    config_parser = subparsers.add_parser(
        'config',
        help='Manage configuration'
    )
    config_subparsers = config_parser.add_subparsers(
        dest='config_command',
        help='Config command'
    )
    config_subparsers.required = True

    # lektor config show
    show_parser = config_subparsers.add_parser(
        'show',
        help='Show configuration'
    )
    show_parser.add_argument(
        '--json',
        action='store_true',
        help='Output as JSON'
    )
    show_parser.add_argument(
        '--reveal-keys',
        action='store_true',
        help='Show API key values (default: hidden)'
    )
    show_parser.set_defaults(func=cmd_config_show)

    # lektor config set <key> <value>
    set_parser = config_subparsers.add_parser(
        'set',
        help='Set a configuration value'
    )
    set_parser.add_argument(
        'key',
        help='Config key (e.g., defaults.llm_provider, api_keys.openrouter)'
    )
    set_parser.add_argument(
        'value',
        help='Value to set'
    )
    set_parser.set_defaults(func=cmd_config_set)


__all__ = [
    'setup_parser',
    'cmd_init',
    'cmd_config_show',
    'cmd_config_set',
]
