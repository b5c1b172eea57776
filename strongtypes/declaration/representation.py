"""Representations and Capabilities

Two closed vocabularies:
- Representation: the underlying value type a strong type wraps
- Capability: the optional behaviors and adapters a declaration can request

Each representation states which capabilities it can support. The resolver
rejects any declaration that asks for more.
"""
from __future__ import annotations

import math
import uuid
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable


class Capability(str, Enum):
    SERIALIZE = "serialize"      # JSON encode adapter
    DESERIALIZE = "deserialize"  # JSON decode adapter + pydantic validation hook
    PERSISTENCE = "persistence"  # SQLAlchemy column type
    DISPLAY = "display"          # str() renders the inner value
    ORDERING = "ordering"        # <, <=, >, >=
    HASHING = "hashing"          # __hash__
    PARSE = "parse"              # from_str
    SENSITIVE = "sensitive"      # redact values in errors, repr and display

    @classmethod
    def names(cls) -> list[str]: return [c.value for c in cls]


_ALL = frozenset(Capability)
_NOT_JSON = frozenset({Capability.SERIALIZE, Capability.DESERIALIZE, Capability.PARSE})

_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


def _parse_bool(text: str) -> bool:
    word = text.strip().lower()
    if word in _TRUE_WORDS: return True
    if word in _FALSE_WORDS: return False
    raise ValueError(f"invalid boolean literal {text!r}")


def _is_finite(value: float | Decimal) -> bool:
    return value.is_finite() if isinstance(value, Decimal) else math.isfinite(value)


def _parse_decimal(text: str) -> Decimal:
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"invalid decimal literal {text!r}") from e


class Representation(str, Enum):
    """Underlying value type of a strong type."""
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    BYTES = "bytes"
    UUID = "uuid"

    @property
    def python_type(self) -> type: return _PYTHON_TYPES[self]

    @property
    def supported_capabilities(self) -> frozenset[Capability]:
        return _ALL - _NOT_JSON if self is Representation.BYTES else _ALL

    def supports(self, capability: Capability) -> bool: return capability in self.supported_capabilities

    @property
    def strict_decode(self) -> bool:
        """Whether JSON decoding refuses type coercion.

        Text, integers, booleans and floats must arrive as the matching JSON type
        (a JSON integer is still a valid float). Decimals and UUIDs accept their
        string forms.
        """
        return self not in (Representation.DECIMAL, Representation.UUID)

    def accepts(self, value: Any) -> bool:
        """Exact-type check used by the validating constructor.

        bool is never an int here. NaN and infinities are refused for floats and
        decimals: they break equality and have no JSON form.
        """
        if isinstance(value, bool) and self is not Representation.BOOLEAN: return False
        if not isinstance(value, self.python_type): return False
        if self in (Representation.FLOAT, Representation.DECIMAL): return _is_finite(value)
        return True

    def from_text(self, text: str) -> Any:
        """Convert text to this representation. Raises ValueError on malformed input."""
        return _TEXT_PARSERS[self](text)

    @classmethod
    def parse(cls, raw: Any) -> Representation | None:
        """Look up a representation by member, alias or Python type. None if unknown."""
        if isinstance(raw, Representation): return raw
        if isinstance(raw, type):
            return next((rep for rep, py in _PYTHON_TYPES.items() if py is raw), None)
        if isinstance(raw, str): return _ALIASES.get(raw.strip().lower())
        return None

    @classmethod
    def aliases(cls) -> list[str]: return sorted(_ALIASES)


_PYTHON_TYPES: dict[Representation, type] = {
    Representation.TEXT: str,
    Representation.INTEGER: int,
    Representation.FLOAT: float,
    Representation.DECIMAL: Decimal,
    Representation.BOOLEAN: bool,
    Representation.BYTES: bytes,
    Representation.UUID: uuid.UUID,
}

_ALIASES: dict[str, Representation] = {
    "str": Representation.TEXT,
    "text": Representation.TEXT,
    "string": Representation.TEXT,
    "int": Representation.INTEGER,
    "integer": Representation.INTEGER,
    "float": Representation.FLOAT,
    "decimal": Representation.DECIMAL,
    "bool": Representation.BOOLEAN,
    "boolean": Representation.BOOLEAN,
    "bytes": Representation.BYTES,
    "uuid": Representation.UUID,
}


def _reject_bytes(text: str) -> bytes:
    raise ValueError("bytes values cannot be parsed from text")


_TEXT_PARSERS: dict[Representation, Callable[[str], Any]] = {
    Representation.TEXT: str,
    Representation.INTEGER: int,
    Representation.FLOAT: float,
    Representation.DECIMAL: _parse_decimal,
    Representation.BOOLEAN: _parse_bool,
    Representation.BYTES: _reject_bytes,
    Representation.UUID: uuid.UUID,
}
