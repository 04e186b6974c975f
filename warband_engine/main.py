# ABOUTME: Main entry point for the Five Leagues warband builder
# ABOUTME: Parses arguments, sets up logging and storage, and runs the main menu

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from warband_engine.core.character_builder import CharacterBuilder
from warband_engine.core.dice import DiceRoller
from warband_engine.core.warband_vault import WarbandVault
from warband_engine.ui.main_menu import MainMenu
from warband_engine.ui.rich_ui import (
    console,
    init_console,
    print_error,
    print_status_message
)
from warband_engine.utils.logging_config import get_logging_config, init_logging


VERSION = "0.1.0"

DEBUG_ENV = "WARBAND_DEBUG"


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Five Leagues from the Borderlands warband builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  warband-builder                          # Start the builder
  warband-builder --vault ./warbands.json  # Use a different roster file
  warband-builder --seed 42                # Reproducible dice
  warband-builder --debug                  # Enable debug logging
        """
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help=f"Enable debug mode with file logging and detailed error traces (or set {DEBUG_ENV}=1)"
    )

    parser.add_argument(
        "--vault",
        type=Path,
        help="Path to the warband vault file (default: $WARBAND_VAULT_PATH or ~/.five_leagues/warbands.json)"
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Seed the dice roller for reproducible characters"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Five Leagues Warband Builder v{VERSION}"
    )

    return parser.parse_args(argv)


def debug_requested(args: argparse.Namespace) -> bool:
    return args.debug or os.getenv(DEBUG_ENV, "").strip() == "1"


def main(argv=None) -> None:
    """
    Main entry point.

    Flow:
        1. Load environment variables
        2. Parse command-line arguments
        3. Initialize debug logging (if enabled)
        4. Open the warband vault and load the rule tables
        5. Run the main menu
    """
    load_dotenv()

    args = parse_arguments(argv)
    debug = debug_requested(args)

    init_logging(debug_enabled=debug)
    init_console(debug_mode=debug)

    if debug:
        logging_config = get_logging_config()
        if logging_config and logging_config.get_log_file_path():
            print_status_message(
                f"Debug mode enabled. Logging to: {logging_config.get_log_file_path()}",
                "info"
            )

    try:
        vault = WarbandVault(args.vault)
        builder = CharacterBuilder(dice_roller=DiceRoller(seed=args.seed))

        menu = MainMenu(vault=vault, builder=builder)
        menu.run()

    except KeyboardInterrupt:
        console.print("\n")
        print_status_message("Interrupted. Your warbands are saved.", "info")
        sys.exit(0)
    except Exception as e:
        if debug:
            raise
        print_error(str(e))
        print_status_message("Use --debug flag for detailed error information.", "info")
        sys.exit(1)


if __name__ == "__main__":
    main()
