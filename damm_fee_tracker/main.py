#!/usr/bin/env python3
"""
DAMM Fee Tracker - Main Entry Point
Daily snapshot of unclaimed fees for Meteora DAMM v2 LP positions

Usage:
    damm-fee-snapshot
    damm-fee-snapshot --config my_config.json --debug
    damm-fee-snapshot --dry-run

Version: 1.0.0
Developer: 8roku8.hl
"""

import argparse
import sys
import traceback

from .config import load_config, validate_config
from .constants import CONFIG_FILE
from .display import DisplayManager, console
from .errors import FeeTrackerError
from .fee_snapshot import FeeSnapshotRunner


def get_args(argv=None):
    parser = argparse.ArgumentParser(description="Snapshot unclaimed DAMM v2 LP fees")
    parser.add_argument("--config", default=CONFIG_FILE, help="Path to the JSON config file")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--no-sheet", action="store_true", help="Skip the Google Sheet update")
    parser.add_argument("--dry-run", action="store_true", help="Compute and print only, write nothing")
    return parser.parse_args(argv)


def main(argv=None):
    """Run one snapshot; returns the process exit code"""
    args = get_args(argv)

    try:
        config = load_config(args.config)
        if config is None:
            return 1

        if args.debug:
            config["display_settings"]["debug_mode"] = True

        display = DisplayManager(config)
        display.print_header()

        if not validate_config(config):
            display.print_status("❌ Configuration validation failed", "red")
            return 1

        runner = FeeSnapshotRunner(config, display=display)
        runner.run(
            write_csv=not args.dry_run,
            write_sheet=not (args.dry_run or args.no_sheet),
        )

        display.print_status("Daily run completed.", "bold green")
        return 0

    except FeeTrackerError as e:
        console.print(f"[red]❌ {e}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Snapshot interrupted by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"\n[red]❌ Unexpected error: {e}[/red]")
        traceback.print_exc()
        return 1


def run():
    """Console script entry point"""
    sys.exit(main())


if __name__ == "__main__":
    run()
