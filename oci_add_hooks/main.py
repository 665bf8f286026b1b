#!/usr/bin/env python3
import sys
from oci_add_hooks.runtime_handler import RuntimeHandler
from oci_add_hooks.utils.logging import logger

def main():
    """
    Main entry point for the oci-add-hooks runtime wrapper.
    Adds hooks to the bundle config, then runs the real runtime.
    """
    try:
        handler = RuntimeHandler()
        exit_code = handler.intercept_command(sys.argv)
        handler.logger.info("Command processing completed with exit code: %d", exit_code)
        sys.exit(exit_code)
    except Exception as e:
        logger.error(f"Fatal error: {str(e)}")
        sys.exit(1)

if __name__ == "__main__":
    main()
