#!/usr/bin/env python3
"""
Configuration Management Module for DAMM Fee Tracker
Handles loading, saving, defaults and environment overrides of the tracker configuration

Version: 1.0.0
Developer: 8roku8.hl
"""

import copy
import json
import os

from .blockchain import parse_pubkey
from .constants import CONFIG_FILE, DEFAULT_CONFIG, ENV_OVERRIDES, TOKEN_SIDES
from .errors import ConfigError
from .utils import validate_pair_configs


def load_config(config_path=CONFIG_FILE, environ=None):
    """Load configuration from JSON file, create default if doesn't exist"""
    if not os.path.exists(config_path):
        print("⚙️  Configuration file not found. Creating default config...")
        save_config(DEFAULT_CONFIG, config_path)
        print(f"✅ Created {config_path}")
        print("📝 Please review the configuration (pairs, idl_path) and run again.")
        return None

    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        print(f"❌ Error reading config file: {e}")
        return None

    # Update config with any missing default values
    updated = update_config_with_defaults(config)
    if updated:
        save_config(config, config_path)
        print("📝 Updated configuration with new settings")

    # Environment overrides are applied after saving so secrets stay out of the file
    apply_env_overrides(config, environ)
    return config


def save_config(config, config_path=CONFIG_FILE):
    """Save configuration to JSON file"""
    try:
        with open(config_path, 'w') as f:
            json.dump(config, f, indent=4)
    except OSError as e:
        print(f"❌ Error saving config: {e}")


def update_config_with_defaults(config):
    """Update configuration with any missing default values"""
    updated = False

    def update_nested_dict(target, source):
        nonlocal updated
        for key, value in source.items():
            if key not in target:
                target[key] = copy.deepcopy(value)
                updated = True
            elif isinstance(value, dict) and isinstance(target[key], dict):
                update_nested_dict(target[key], value)

    update_nested_dict(config, DEFAULT_CONFIG)
    return updated


def apply_env_overrides(config, environ=None):
    """Override config values from environment variables (RPC_URL, GSHEET_ID, ...)"""
    environ = os.environ if environ is None else environ
    applied = []
    for env_name, path in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if not value:
            continue
        target = config
        for key in path[:-1]:
            target = target.setdefault(key, {})
        target[path[-1]] = value
        applied.append(env_name)
    return applied


def validate_config(config):
    """Validate configuration and return True if valid"""
    if not config.get("rpc_url"):
        print(f"❌ RPC URL not set. Please edit {CONFIG_FILE} or set RPC_URL")
        return False

    try:
        parse_pubkey(config.get("program_id", ""))
    except ConfigError as e:
        print(f"❌ Invalid program_id: {e}")
        return False

    if config.get("token_side") not in TOKEN_SIDES:
        print(f"❌ token_side must be one of {', '.join(TOKEN_SIDES)}, got {config.get('token_side')!r}")
        return False

    decimals = config.get("token_decimals")
    if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
        print(f"❌ token_decimals must be a non-negative integer, got {decimals!r}")
        return False

    if not config.get("pairs"):
        print(f"❌ No pairs configured. Please edit {CONFIG_FILE}")
        print("💡 Add entries to the 'pairs' array with 'name', 'pool' and 'position' fields")
        return False

    valid_pairs = []
    for pair in validate_pair_configs(config["pairs"]):
        try:
            parse_pubkey(pair["pool"])
            parse_pubkey(pair["position"])
        except ConfigError as e:
            print(f"⚠️  Skipping pair {pair['name']}: {e}")
            continue
        valid_pairs.append(pair)

    if len(valid_pairs) == 0:
        print(f"❌ No valid pairs found. Please check your configuration in {CONFIG_FILE}")
        return False

    config["pairs"] = valid_pairs
    return True
