import logging
from typing import List, Optional
from oci_add_hooks.wrapper_command_parser import WrapperCommandParser
from oci_add_hooks.bundle_handler.config_handler import BundleConfigHandler
from oci_add_hooks.process_supervisor import ProcessSupervisor
from oci_add_hooks.utils.constants import COMMIT, EXIT_CODE_FAILURE, EXIT_CODE_SUCCESS, LOGGER_NAME, VERSION
from oci_add_hooks.utils.errors import ConfigError, RuntimeNotFoundError, UsageError
from oci_add_hooks.utils.logging import logger as default_logger, setup_logger

class RuntimeHandler:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self.parser = WrapperCommandParser()
        self.set_logger(logger or default_logger)

    def set_logger(self, logger: logging.Logger) -> None:
        """Use logger here and in every collaborator."""
        self.logger = logger
        self.config_handler = BundleConfigHandler(logger)
        self.supervisor = ProcessSupervisor(logger)

    def _print_version(self) -> int:
        print(f"version: {VERSION}")
        print(f"commit: {COMMIT}")
        return EXIT_CODE_SUCCESS

    def _setup_logging(self, log_path: str) -> bool:
        """Send log records to a dated file in log_path."""
        try:
            self.set_logger(setup_logger(LOGGER_NAME, log_dir=log_path))
        except OSError as e:
            self.logger.error("Failed to create log file in %s: %s", log_path, e)
            return False
        return True

    def process_bundle(self, hook_config_path: str, runtime_args: List[str]) -> bool:
        """
        Inject the hooks from hook_config_path into the bundle named in runtime_args.

        Returns:
            bool: True if the bundle was updated or no bundle was given, False on error
        """
        bundle_config_path = self.parser.find_bundle_config_path(runtime_args)
        if bundle_config_path is None:
            self.logger.info("No bundle in runtime arguments, passing through")
            return True

        self.logger.info("Bundle config: %s", bundle_config_path)
        try:
            merged = self.config_handler.add_hooks(bundle_config_path, hook_config_path)
            self.config_handler.write_config(bundle_config_path, merged)
        except ConfigError as e:
            self.logger.error("Error: %s", e)
            return False

        self.logger.info("Added hooks from %s to %s", hook_config_path, bundle_config_path)
        return True

    def run(self, hook_config_path: str, runtime_path: str, runtime_args: List[str]) -> int:
        """Update the bundle config, then run the runtime with the original arguments."""
        self.logger.info("Hook config path: %s", hook_config_path)
        self.logger.info("Runtime path: %s", runtime_path)
        self.logger.info("Runtime args: %s", runtime_args)

        if not self.process_bundle(hook_config_path, runtime_args):
            return EXIT_CODE_FAILURE

        try:
            return self.supervisor.launch(runtime_path, runtime_args)
        except RuntimeNotFoundError as e:
            self.logger.error("Error: runtime path is wrong: %s", e)
            return EXIT_CODE_FAILURE

    def intercept_command(self, args: List[str]) -> int:
        """Handle a full wrapper command line and return the exit code."""
        try:
            command = self.parser.parse_command(args)
        except UsageError as e:
            self.logger.error("Invalid arguments: %s", e)
            return EXIT_CODE_FAILURE

        if command.show_version:
            return self._print_version()

        if command.log_path is not None and not self._setup_logging(command.log_path):
            return EXIT_CODE_FAILURE

        self.logger.info("Running oci-add-hooks")
        return self.run(command.hook_config_path, command.runtime_path, command.runtime_args)
