"""Atomic Rules

Leaf predicates: length bounds, exact length, non-empty, trimmed,
pattern membership, character-set membership, numeric range and opaque
custom predicates.

Every atomic rule is total: a value of a type the rule cannot inspect
simply fails. Parameter consistency (``min <= max``, compilable regex) is
checked eagerly at construction and reported as ValueError.
"""
from __future__ import annotations

import re
import string
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, ClassVar

from .base import Rule

_SIZED = (str, bytes)
_NUMERIC = (int, float, Decimal)
# ASCII whitespace as trimmed: space, tab, LF, FF, CR (no vertical tab)
_ASCII_WHITESPACE = " \t\n\x0c\r"

CHARACTER_CLASSES: dict[str, str] = {
    "alpha": string.ascii_letters,
    "lower": string.ascii_lowercase,
    "upper": string.ascii_uppercase,
    "digit": string.digits,
    "alnum": string.ascii_letters + string.digits,
    "hex": string.hexdigits,
    "underscore": "_",
    "hyphen": "-",
    "dot": ".",
    "space": " ",
}


def _is_numeric(value: Any) -> bool:
    return isinstance(value, _NUMERIC) and not isinstance(value, bool)


def _check_bounds(low: Any, high: Any, what: str) -> None:
    if low is not None and high is not None and low > high:
        raise ValueError(f"{what}: min ({low}) is greater than max ({high})")


# ============================================================================
# Length Rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class Length(Rule):
    """Inclusive length bounds. Counts characters for str and bytes for bytes."""
    kind: ClassVar[str] = "length"
    accepts: ClassVar[tuple[type, ...]] = _SIZED

    min: int | None = None
    max: int | None = None
    label: str | None = None

    def __post_init__(self) -> None:
        if self.min is None and self.max is None:
            raise ValueError("length: at least one of min/max is required")
        for bound in (self.min, self.max):
            if bound is not None and (isinstance(bound, bool) or not isinstance(bound, int) or bound < 0):
                raise ValueError(f"length: bounds must be non-negative integers, got {bound!r}")
        _check_bounds(self.min, self.max, "length")

    @property
    def constraint(self) -> str:
        if self.min is not None and self.max is not None:
            return f"length[{self.min},{self.max}]"
        if self.min is not None:
            return f"min_length[{self.min}]"
        return f"max_length[{self.max}]"

    def evaluate(self, value: Any) -> bool:
        if not isinstance(value, _SIZED): return False
        n = len(value)
        if self.min is not None and n < self.min: return False
        return self.max is None or n <= self.max

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {}
        if self.min is not None: schema["minLength"] = self.min
        if self.max is not None: schema["maxLength"] = self.max
        return schema


@dataclass(frozen=True, slots=True)
class ExactLength(Rule):
    kind: ClassVar[str] = "exact_length"
    accepts: ClassVar[tuple[type, ...]] = _SIZED

    length: int
    label: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.length, bool) or not isinstance(self.length, int) or self.length < 0:
            raise ValueError(f"exact_length: length must be a non-negative integer, got {self.length!r}")

    @property
    def constraint(self) -> str: return f"exact_length[{self.length}]"

    def evaluate(self, value: Any) -> bool:
        return isinstance(value, _SIZED) and len(value) == self.length

    def json_schema(self) -> dict[str, Any]:
        return {"minLength": self.length, "maxLength": self.length}


@dataclass(frozen=True, slots=True)
class NonEmpty(Rule):
    kind: ClassVar[str] = "non_empty"
    accepts: ClassVar[tuple[type, ...]] = _SIZED

    label: str | None = None

    @property
    def constraint(self) -> str: return "non_empty"

    def evaluate(self, value: Any) -> bool:
        return isinstance(value, _SIZED) and len(value) > 0

    def json_schema(self) -> dict[str, Any]: return {"minLength": 1}


@dataclass(frozen=True, slots=True)
class Trimmed(Rule):
    """No leading or trailing ASCII whitespace. Other Unicode spaces are content."""
    kind: ClassVar[str] = "trimmed"
    accepts: ClassVar[tuple[type, ...]] = _SIZED

    label: str | None = None

    @property
    def constraint(self) -> str: return "trimmed"

    def evaluate(self, value: Any) -> bool:
        if isinstance(value, bytes): return value == value.strip(_ASCII_WHITESPACE.encode())
        return isinstance(value, str) and value == value.strip(_ASCII_WHITESPACE)


# ============================================================================
# Membership Rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class Pattern(Rule):
    """Regex membership. Uses fullmatch unless ``full_match`` is False (then search)."""
    kind: ClassVar[str] = "pattern"
    accepts: ClassVar[tuple[type, ...]] = (str,)

    regex: str
    full_match: bool = True
    flags: int = 0
    label: str | None = None
    _compiled: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            compiled = re.compile(self.regex, self.flags)
        except re.error as e:
            raise ValueError(f"pattern: invalid regex {self.regex!r}: {e}") from e
        object.__setattr__(self, "_compiled", compiled)

    @property
    def constraint(self) -> str: return f"pattern[{self.regex}]"

    def evaluate(self, value: Any) -> bool:
        if not isinstance(value, str): return False
        match = self._compiled.fullmatch(value) if self.full_match else self._compiled.search(value)
        return match is not None

    def json_schema(self) -> dict[str, Any]:
        return {"pattern": f"^(?:{self.regex})$" if self.full_match else self.regex}


@dataclass(frozen=True, slots=True)
class CharSet(Rule):
    """Every character must belong to the allowed set.

    The set is the union of ``allowed`` (literal characters) and any named
    ``classes`` (see CHARACTER_CLASSES). The empty string passes.

    Usage:
        CharSet(classes=("alnum", "underscore"))
        CharSet("abc")
    """
    kind: ClassVar[str] = "charset"
    accepts: ClassVar[tuple[type, ...]] = (str,)

    allowed: str = ""
    classes: tuple[str, ...] = ()
    label: str | None = None
    _members: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "classes", tuple(self.classes))
        unknown = [c for c in self.classes if c not in CHARACTER_CLASSES]
        if unknown:
            raise ValueError(f"charset: unknown character classes {unknown}; valid: {sorted(CHARACTER_CLASSES)}")
        members = set(self.allowed)
        for name in self.classes:
            members.update(CHARACTER_CLASSES[name])
        if not members:
            raise ValueError("charset: allowed set is empty")
        object.__setattr__(self, "_members", frozenset(members))

    @property
    def constraint(self) -> str:
        parts = list(self.classes)
        if self.allowed: parts.append(repr(self.allowed))
        return f"charset[{'+'.join(parts)}]"

    def evaluate(self, value: Any) -> bool:
        return isinstance(value, str) and all(ch in self._members for ch in value)

    def json_schema(self) -> dict[str, Any]:
        chars = "".join(re.escape(ch) for ch in sorted(self._members))
        return {"pattern": f"^[{chars}]*$"}


# ============================================================================
# Numeric Rules
# ============================================================================

@dataclass(frozen=True, slots=True)
class Range(Rule):
    """Numeric range. Bounds are inclusive unless marked exclusive."""
    kind: ClassVar[str] = "range"
    accepts: ClassVar[tuple[type, ...]] = _NUMERIC

    min: int | float | Decimal | None = None
    max: int | float | Decimal | None = None
    exclusive_min: bool = False
    exclusive_max: bool = False
    label: str | None = None

    def __post_init__(self) -> None:
        if self.min is None and self.max is None:
            raise ValueError("range: at least one of min/max is required")
        for bound in (self.min, self.max):
            if bound is not None and not _is_numeric(bound):
                raise ValueError(f"range: bounds must be numbers, got {bound!r}")
        _check_bounds(self.min, self.max, "range")

    @property
    def constraint(self) -> str:
        lo = "(" if self.exclusive_min else "["
        hi = ")" if self.exclusive_max else "]"
        low = "-inf" if self.min is None else self.min
        high = "inf" if self.max is None else self.max
        return f"range{lo}{low},{high}{hi}"

    def evaluate(self, value: Any) -> bool:
        if not _is_numeric(value): return False
        try:
            if self.min is not None:
                if self.exclusive_min and not value > self.min: return False
                if not self.exclusive_min and not value >= self.min: return False
            if self.max is not None:
                if self.exclusive_max and not value < self.max: return False
                if not self.exclusive_max and not value <= self.max: return False
        except (TypeError, ArithmeticError):
            return False
        return True

    def json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {}
        if self.min is not None:
            schema["exclusiveMinimum" if self.exclusive_min else "minimum"] = self.min
        if self.max is not None:
            schema["exclusiveMaximum" if self.exclusive_max else "maximum"] = self.max
        return schema


# ============================================================================
# Custom Predicates
# ============================================================================

@dataclass(frozen=True, slots=True)
class Predicate(Rule):
    """Opaque caller-supplied boolean function.

    An exception raised by ``fn`` counts as a rejection, keeping evaluate total.

    Usage:
        is_even = Predicate(lambda n: n % 2 == 0, "even")
    """
    kind: ClassVar[str] = "predicate"

    fn: Callable[[Any], bool]
    name: str | None = None
    label: str | None = None

    def __post_init__(self) -> None:
        if not callable(self.fn):
            raise ValueError(f"predicate: {self.fn!r} is not callable")
        if self.name is None:
            object.__setattr__(self, "name", getattr(self.fn, "__name__", "predicate"))

    @property
    def constraint(self) -> str: return f"predicate[{self.name}]"

    def evaluate(self, value: Any) -> bool:
        try:
            return bool(self.fn(value))
        except Exception:
            return False


def predicate(name: str | None = None) -> Callable[[Callable[[Any], bool]], Predicate]:
    """Decorator turning a plain function into a Predicate rule.

    Usage:
        @predicate("even")
        def is_even(n: int) -> bool:
            return n % 2 == 0
    """
    def decorator(fn: Callable[[Any], bool]) -> Predicate:
        return Predicate(fn, name or fn.__name__)
    return decorator
