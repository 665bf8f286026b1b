"""Constants used across the oci-add-hooks codebase."""

import os

# Version
VERSION = "0.1.0"
COMMIT = os.environ.get("OCI_ADD_HOOKS_COMMIT", "unknown")

# Exit codes
EXIT_CODE_SUCCESS = 0
EXIT_CODE_FAILURE = 1

# Shells report a child killed by signal N as 128 + N
SIGNAL_EXIT_CODE_BASE = 128

# Wrapper command line flags
VERSION_FLAG = "--version"
HOOK_CONFIG_PATH_FLAG = "--hook-config-path"
RUNTIME_PATH_FLAG = "--runtime-path"
LOG_PATH_FLAG = "--log-path"

# Runtime flags naming the bundle directory
BUNDLE_FLAGS = ["--bundle", "-b"]

# Bundle config
BUNDLE_CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_MODE = 0o666

# Lifecycle hook phases, in the order they are emitted
HOOK_PHASES = [
    "prestart",
    "createRuntime",
    "createContainer",
    "startContainer",
    "poststart",
    "poststop",
]

# Environment variables
ENV_LOG_LEVEL = "OCI_ADD_HOOKS_LOG_LEVEL"

# Logging
LOGGER_NAME = "oci_add_hooks"
DEFAULT_LOG_LEVEL = "INFO"
LOG_DIR_MODE = 0o755
LOG_FILE_MODE = 0o644
LOG_FILE_DATE_FORMAT = "%Y%m%d"
