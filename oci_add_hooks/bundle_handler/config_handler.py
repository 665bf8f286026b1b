import os
import stat
import logging
import tempfile
from typing import Optional
from oci_add_hooks.bundle_handler.config_document import ConfigDocument
from oci_add_hooks.utils.constants import DEFAULT_CONFIG_MODE
from oci_add_hooks.utils.errors import ConfigIOError
from oci_add_hooks.utils.logging import logger as default_logger

class BundleConfigHandler:
    """Handler for reading, merging and writing bundle config files."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or default_logger

    def read_config(self, config_path: str) -> ConfigDocument:
        """
        Read and parse a config file.

        Args:
            config_path: Path to the JSON config file

        Returns:
            ConfigDocument: Parsed document

        Raises:
            ConfigIOError: If the file cannot be read
            ParseError: If the file is not a JSON object
            TypeMismatchError: If the hooks have the wrong shape
        """
        try:
            with open(config_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise ConfigIOError(f"failed to read {config_path}: {e}") from e
        self.logger.debug("Read %d bytes from %s", len(data), config_path)
        return ConfigDocument.parse(data)

    def _get_target_mode(self, config_path: str) -> int:
        """Return the permission bits of the existing file, or the default for a new one."""
        try:
            return stat.S_IMODE(os.stat(config_path).st_mode)
        except FileNotFoundError:
            self.logger.debug("%s does not exist, using mode %o", config_path, DEFAULT_CONFIG_MODE)
            return DEFAULT_CONFIG_MODE

    def write_config(self, config_path: str, document: ConfigDocument) -> None:
        """
        Write a document to config_path, replacing the file atomically.

        The new file keeps the permission bits of the file it replaces. A
        failure at any point leaves the original file untouched.

        Args:
            config_path: Destination path
            document: Document to serialize

        Raises:
            ConfigIOError: If the file cannot be written
        """
        # Replace the symlink target, not the link
        target = os.path.realpath(config_path)
        try:
            data = document.serialize()
        except ValueError as e:
            raise ConfigIOError(f"failed to serialize {config_path}: {e}") from e

        try:
            mode = self._get_target_mode(target)
            fd, tmp_path = tempfile.mkstemp(
                dir=os.path.dirname(target), prefix=f".{os.path.basename(target)}-", suffix=".tmp"
            )
        except OSError as e:
            raise ConfigIOError(f"failed to write {config_path}: {e}") from e

        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, target)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise ConfigIOError(f"failed to write {config_path}: {e}") from e

        self.logger.info("Wrote %d bytes to %s with mode %o", len(data), target, mode)

    def add_hooks(self, bundle_config_path: str, hook_config_path: str) -> ConfigDocument:
        """
        Merge the hooks from hook_config_path into the bundle config.

        Args:
            bundle_config_path: Path to the bundle's config.json
            hook_config_path: Path to the config holding hooks to inject

        Returns:
            ConfigDocument: The bundle config with injected hooks ahead of its own
        """
        try:
            bundle_config = self.read_config(bundle_config_path)
        except Exception:
            self.logger.error("Failed to read bundle config %s", bundle_config_path)
            raise

        try:
            hook_config = self.read_config(hook_config_path)
        except Exception:
            self.logger.error("Failed to read hook config %s", hook_config_path)
            raise

        bundle_config.merge(hook_config)
        for phase, entries in bundle_config.hooks.phases().items():
            self.logger.debug("Merged %s: %d hook(s)", phase, len(entries))
        return bundle_config
