"""
HashVault Package Main Entry Point

This module serves as the main entry point when the package is run as a module
using `python -m hashvault`. It delegates to the Typer application.
"""

import logging
import sys

from hashvault.cli.common.error_handler import handle_cli_error
from hashvault.cli.typer_app import app
from hashvault.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the CLI, mapping anything that escapes it to an exit code."""
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Command interrupted by user")
        sys.exit(CLIDefaults.EXIT_INTERRUPTED)
    except SystemExit:  # pylint: disable=try-except-raise
        # Preserve exit codes
        raise
    except Exception as e:  # noqa: BLE001  # pylint: disable=broad-exception-caught
        sys.exit(handle_cli_error(e, "hashvault-main"))


if __name__ == "__main__":
    main()
