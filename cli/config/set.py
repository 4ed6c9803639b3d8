"""
lektor config set command - Set configuration values.
"""

import json

from infra.config import ConfigManager, get_storage_root, reload_config


def cmd_config_set(args):
    manager = ConfigManager(get_storage_root())

    if not manager.exists():
        print(f"✗ No config found at: {manager.config_path}")
        print("  Run 'lektor init' to create one")
        return

    parsed_value = _parse_value(args.value)

    try:
        config = manager.set_value(args.key, parsed_value)
    except ValueError as e:
        print(f"✗ Failed to set {args.key}: {e}")
        return

    reload_config()
    print(f"✓ Set {args.key} = {parsed_value}")

    result = config.model_dump()
    for part in args.key.split('.'):
        result = result.get(part, {})
    print(f"  Current value: {result}")


def _parse_value(value: str):
    """
    Parse a string value into appropriate Python type.

    Handles:
    - Numbers (int, float)
    - Booleans (true, false)
    - JSON arrays and objects
    - Strings (default)
    """
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False

    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        pass

    if value.startswith('[') or value.startswith('{'):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value
