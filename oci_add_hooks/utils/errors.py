"""Exceptions raised by oci-add-hooks."""


class OciAddHooksError(Exception):
    """Base class for all oci-add-hooks errors."""


class UsageError(OciAddHooksError):
    """The wrapper was invoked with invalid arguments."""


class ConfigError(OciAddHooksError):
    """Reading, parsing or writing a config document failed."""


class ParseError(ConfigError):
    """Input is not a well-formed JSON object."""


class TypeMismatchError(ConfigError):
    """A known field is present but has the wrong JSON shape."""

    def __init__(self, key: str, expected: str, actual: object):
        self.key = key
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"field '{key}' must be {expected}, got {type(actual).__name__}"
        )


class ConfigIOError(ConfigError):
    """A config file could not be read or written."""


class SupervisorError(OciAddHooksError):
    """Launching or waiting on the runtime failed."""


class RuntimeNotFoundError(SupervisorError):
    """Runtime path does not name an existing regular file."""


class ChildSpawnError(SupervisorError):
    """The runtime process could not be started."""


class ChildWaitError(SupervisorError):
    """The runtime's exit status could not be retrieved."""
