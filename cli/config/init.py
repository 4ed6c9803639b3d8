"""
lektor init command - Create the configuration file.
"""

import os

from infra.config import ConfigManager, LektorConfig, get_storage_root, reload_config


def cmd_init(args):
    storage_root = get_storage_root()
    manager = ConfigManager(storage_root)

    if manager.exists() and not args.force:
        print(f"✗ Config already exists at: {manager.config_path}")
        print("  Use --force to overwrite")
        return

    config = LektorConfig.with_defaults()

    if args.migrate:
        value = os.getenv('OPENROUTER_API_KEY')
        if value:
            config.api_keys['openrouter'] = value
            print("  Migrated API key: openrouter")
        else:
            print("  No OPENROUTER_API_KEY found in environment")

    manager.save(config)
    reload_config()
    print(f"✓ Created config at: {manager.config_path}")

    print("\nConfiguration summary:")
    print(f"  Storage root: {storage_root}")
    print(f"  Default LLM provider: {config.defaults.llm_provider}")
    print(f"  History page size: {config.defaults.history_page_size}")

    print("\nAPI keys:")
    for key_name, value in config.api_keys.items():
        if config.resolve_api_key(key_name):
            print(f"  ✓ {key_name}: configured")
        else:
            print(f"  ○ {key_name}: not set (using {value})")

    print("\nLLM providers:")
    for name, provider in config.llm_providers.items():
        print(f"  {name}: {provider.type} ({provider.model})")
