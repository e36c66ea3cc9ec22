"""Wire encoding of variable values.

The workspace variables API stores every value as a string together with an
``hcl`` flag:

- scalars (bool, int, float, string) are sent as plain values (``hcl=false``)
- collections (list, object) and ``null`` are sent as an HCL expression
  (``hcl=true``) so the remote side parses them into typed values.  JSON text
  is a valid HCL expression, so the canonical JSON serialization is used.

Strings are sent verbatim (no re-quoting); everything else is compact JSON.
"""

from __future__ import annotations

import json
from typing import NamedTuple

from pydantic import JsonValue

from tfvar_export.errors import CodecError

Value = JsonValue


class ValueClass(NamedTuple):
    is_primitive: bool
    is_string: bool

    @property
    def is_hcl(self) -> bool:
        return not self.is_primitive


_STRING = ValueClass(is_primitive=True, is_string=True)
_SCALAR = ValueClass(is_primitive=True, is_string=False)
_STRUCTURED = ValueClass(is_primitive=False, is_string=False)


def classify(value: Value) -> ValueClass:
    """Classify *value* as string, non-string scalar, or structured."""
    match value:
        case str():
            return _STRING
        # bool is a subclass of int, but both are scalars either way.
        case bool() | int() | float():
            return _SCALAR
        case None | list() | dict():
            return _STRUCTURED
        case _:
            raise CodecError(f"Unsupported value type: {type(value).__name__}")


def encode(value: Value) -> str:
    """Return the raw wire text for *value*."""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise CodecError(f"Cannot encode value: {exc}") from exc


def decode(is_hcl: bool, is_string: bool, raw_value: str) -> Value:
    """Rebuild the original value from its wire pair.

    Raises:
        CodecError: If a JSON decode is expected and *raw_value* is not valid JSON.
    """
    if is_string:
        return raw_value
    try:
        return json.loads(raw_value)
    except (TypeError, ValueError) as exc:
        kind = "HCL" if is_hcl else "scalar"
        raise CodecError(f"Cannot decode {kind} value {raw_value!r}: {exc}") from exc
