"""
DexVault Package Main Entry Point

Runs the CLI when the package is executed with ``python -m dexvault``.
"""

import logging
import sys

from dexvault.cli.common.error_handler import handle_cli_error
from dexvault.cli.typer_app import app
from dexvault.shared.constants import CLIDefaults

logger = logging.getLogger(__name__)


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        logger.info("Command interrupted by user")
        sys.exit(CLIDefaults.EXIT_CANCELLED)
    except SystemExit:
        raise
    except Exception as e:  # noqa: BLE001
        sys.exit(handle_cli_error(e, "dexvault-main"))
