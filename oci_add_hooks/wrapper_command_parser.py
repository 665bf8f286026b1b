import os
from typing import List, NamedTuple, Optional
from oci_add_hooks.utils.constants import (
    BUNDLE_CONFIG_FILENAME, BUNDLE_FLAGS, HOOK_CONFIG_PATH_FLAG, LOG_PATH_FLAG, RUNTIME_PATH_FLAG, VERSION_FLAG
)
from oci_add_hooks.utils.errors import UsageError


class WrapperCommand(NamedTuple):
    show_version: bool = False
    hook_config_path: str = ""
    runtime_path: str = ""
    log_path: Optional[str] = None
    runtime_args: Optional[List[str]] = None


class WrapperCommandParser:
    """
    Parser for the wrapper's own command line.

    The wrapper is installed in place of the runtime, so everything after its
    own flags belongs to the runtime and must not be interpreted. Its flags are
    therefore positional:

    - oci-add-hooks --version
    - oci-add-hooks --hook-config-path PATH --runtime-path PATH [--log-path DIR] runtime_args...
    """

    def parse_command(self, args: List[str]) -> WrapperCommand:
        """Parse the full argv (including the program name).

        Raises:
            UsageError: If the arguments do not match either form
        """
        if len(args) == 2 and args[1] == VERSION_FLAG:
            return WrapperCommand(show_version=True, runtime_args=[])

        if len(args) < 6:
            raise UsageError(f"expected at least 5 arguments, got {len(args) - 1}")
        if args[1] != HOOK_CONFIG_PATH_FLAG:
            raise UsageError(f"expected {HOOK_CONFIG_PATH_FLAG} as first argument, got {args[1]}")
        if args[3] != RUNTIME_PATH_FLAG:
            raise UsageError(f"expected {RUNTIME_PATH_FLAG} as third argument, got {args[3]}")

        hook_config_path = args[2]
        runtime_path = args[4]
        if not hook_config_path or not runtime_path:
            raise UsageError("hook config path and runtime path must not be empty")

        runtime_args = list(args[5:])
        log_path = None
        if runtime_args[0] == LOG_PATH_FLAG:
            if len(runtime_args) < 2 or not runtime_args[1]:
                raise UsageError(f"{LOG_PATH_FLAG} requires a directory")
            log_path = runtime_args[1]
            runtime_args = runtime_args[2:]

        return WrapperCommand(
            show_version=False,
            hook_config_path=hook_config_path,
            runtime_path=runtime_path,
            log_path=log_path,
            runtime_args=runtime_args,
        )

    def find_bundle_path(self, runtime_args: List[str]) -> Optional[str]:
        """Return the bundle directory named by the first bundle flag, if any."""
        for i, arg in enumerate(runtime_args):
            if arg in BUNDLE_FLAGS:
                if i + 1 < len(runtime_args):
                    return runtime_args[i + 1]
                continue
            for flag in BUNDLE_FLAGS:
                if arg.startswith(flag + "="):
                    return arg[len(flag) + 1:]
        return None

    def find_bundle_config_path(self, runtime_args: List[str]) -> Optional[str]:
        """Return <bundle>/config.json for the bundle in runtime_args, if any."""
        bundle_path = self.find_bundle_path(runtime_args)
        if bundle_path is None:
            return None
        return os.path.join(bundle_path, BUNDLE_CONFIG_FILENAME)
