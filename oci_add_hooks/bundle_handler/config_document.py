"""
Lossless JSON documents for OCI bundle configuration.

A document keeps every key of the JSON object it was parsed from in an
ordered mapping, and exposes a small set of known fields as typed attributes.
Serializing starts from that mapping and overlays the current value of each
known field by key, so keys this tool does not understand (vendor extensions,
newer OCI runtime-spec fields) are written back unchanged.

Known fields are declared per class as a tuple of Field descriptors with
explicit decode/encode functions.
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple
from oci_add_hooks.utils.constants import HOOK_PHASES
from oci_add_hooks.bundle_handler.hook_merger import merge_hooks
from oci_add_hooks.utils.errors import ParseError, TypeMismatchError


def reject_constant(name: str):
    """NaN and Infinity are accepted by the json module but are not JSON."""
    raise ParseError(f"config is not valid JSON: {name} is not a JSON value")


class Field:
    """A known field of a lossless document.

    Args:
        key: JSON key of the field
        decode: Converts the raw JSON value into the typed value.
            Raises TypeMismatchError on a wrong shape.
        encode: Converts the typed value back into a raw JSON value
        default: Factory for the value used when the key is absent
        attr: Attribute name on the document, defaults to key
    """

    def __init__(self, key: str, decode: Callable[[str, Any], Any], encode: Callable[[Any], Any],
                 default: Callable[[], Any], attr: Optional[str] = None):
        self.key = key
        self.decode = decode
        self.encode = encode
        self.default = default
        self.attr = attr or key

    def __repr__(self):
        return f"Field({self.key!r})"


class LosslessDocument:
    """JSON object with typed known fields and raw passthrough for everything else."""

    FIELDS: Tuple[Field, ...] = ()

    def __init__(self, extras: Optional[Dict[str, Any]] = None):
        self._extras: Dict[str, Any] = dict(extras or {})
        for field in self.FIELDS:
            setattr(self, field.attr, field.default())

    @property
    def extras(self) -> Dict[str, Any]:
        """Raw values of every key captured at parse time, in input order."""
        return self._extras

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Build a document from an already decoded JSON object."""
        if not isinstance(data, dict):
            raise ParseError(f"expected a JSON object, got {type(data).__name__}")
        document = cls(data)
        for field in cls.FIELDS:
            if field.key in data:
                setattr(document, field.attr, field.decode(field.key, data[field.key]))
        return document

    def to_dict(self) -> Dict[str, Any]:
        """Overlay the known fields onto a copy of the captured mapping."""
        result = dict(self._extras)
        for field in self.FIELDS:
            result[field.key] = field.encode(getattr(self, field.attr))
        return result

    @classmethod
    def parse(cls, data):
        """Parse UTF-8 JSON bytes (or text) into a document.

        Raises:
            ParseError: Input is not a well-formed JSON object
            TypeMismatchError: A known field has the wrong shape
        """
        if isinstance(data, (bytes, bytearray)):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ParseError(f"config is not valid UTF-8: {e}") from e
        try:
            raw = json.loads(data, parse_constant=reject_constant)
        except json.JSONDecodeError as e:
            raise ParseError(f"config is not valid JSON: {e}") from e
        except RecursionError as e:
            raise ParseError("config is nested too deeply") from e
        return cls.from_dict(raw)

    def serialize(self) -> bytes:
        """Serialize the document to UTF-8 JSON bytes.

        Raises:
            ValueError: A value is NaN or infinite, which JSON cannot represent
        """
        return (json.dumps(self.to_dict(), indent=2, ensure_ascii=False, allow_nan=False) + "\n").encode("utf-8")

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}({self.to_dict()!r})"


def decode_hook_list(key: str, value: Any) -> List[Any]:
    """Hook entries stay opaque; only the surrounding array is checked."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeMismatchError(key, "an array", value)
    return list(value)


def encode_hook_list(value: Optional[List[Any]]) -> List[Any]:
    return list(value or [])


class HookSet(LosslessDocument):
    """The `hooks` object of a bundle config: one entry list per lifecycle phase."""

    FIELDS = tuple(
        Field(phase, decode_hook_list, encode_hook_list, list)
        for phase in HOOK_PHASES
    )

    def phases(self) -> Dict[str, List[Any]]:
        """Return the entry list of each phase, keyed by phase name."""
        return {phase: getattr(self, phase) for phase in HOOK_PHASES}


def decode_hook_set(key: str, value: Any) -> HookSet:
    if value is None:
        return HookSet()
    if not isinstance(value, dict):
        raise TypeMismatchError(key, "an object", value)
    return HookSet.from_dict(value)


def encode_hook_set(value: Optional[HookSet]) -> Dict[str, Any]:
    return (value or HookSet()).to_dict()


class ConfigDocument(LosslessDocument):
    """A bundle `config.json` (or hook config file) with a typed `hooks` view."""

    FIELDS = (
        Field("hooks", decode_hook_set, encode_hook_set, HookSet),
    )

    def merge(self, other: Optional["ConfigDocument"]) -> "ConfigDocument":
        """Merge the hooks of other into this document, in place."""
        if other is None:
            return self
        merge_hooks(self.hooks, other.hooks)
        return self
