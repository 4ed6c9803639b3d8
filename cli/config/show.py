"""
lektor config show command - Display configuration.
"""

import json

from infra.config import ConfigManager, get_storage_root


def cmd_config_show(args):
    manager = ConfigManager(get_storage_root())

    if not manager.exists():
        print(f"✗ No config found at: {manager.config_path}")
        print("  Run 'lektor init' to create one")
        return

    config = manager.load()

    if args.json:
        data = config.model_dump()
        if not args.reveal_keys:
            data['api_keys'] = {
                k: _mask_key(config.resolve_api_key(k)) for k in data['api_keys']
            }
        print(json.dumps(data, indent=2, default=str))
        return

    print(f"\n📋 Lektor Configuration")
    print(f"   Path: {manager.config_path}\n")

    print("API Keys:")
    for key_name in config.api_keys:
        resolved = config.resolve_api_key(key_name)
        if args.reveal_keys:
            display = resolved or "(not set)"
        else:
            display = _mask_key(resolved)
        print(f"  {key_name}: {display}")

    print("\nLLM providers:")
    for name, provider in config.llm_providers.items():
        marker = "★" if name == config.defaults.llm_provider else " "
        print(f"  {marker} {name}: type={provider.type} model={provider.model} temperature={provider.temperature}")

    print("\nDefaults:")
    print(f"  llm_provider: {config.defaults.llm_provider}")
    print(f"  history_page_size: {config.defaults.history_page_size}")
    print(f"  max_retries: {config.defaults.max_retries}")
    print()


def _mask_key(value: str) -> str:
    """Mask an API key for display."""
    if not value:
        return "(not set)"
    if len(value) <= 8:
        return "****"
    return value[:4] + "..." + value[-4:]
