"""Construction & Behavior Generator

Builds the wrapper class for a TypeDescriptor. Members are emitted in a
fixed order, each group only when the descriptor asks for it:

1. __init__ / new            validating constructor (always)
2. new_unchecked             bypass constructor (allow_unchecked + global switch)
3. inner / into_inner        accessors (always); as_str for text only
4. __eq__                    equality (always; same class only)
5. __lt__ .. __ge__          ordering capability
6. __hash__                  hashing capability; unhashable otherwise
7. __repr__ / __str__        display / sensitive capabilities
8. from_str                  parse capability

Generation is deterministic: the same descriptor always yields a class with
the same members.
"""
from __future__ import annotations

from typing import Any, Callable

from strongtypes.core.config import get_settings
from strongtypes.core.errors import Err, ErrorCode, Ok, Result
from strongtypes.core.logging import generator_logger
from strongtypes.declaration import Capability, Representation, TypeDescriptor
from strongtypes.errors import ValidationError

from .base import StrongType

log = generator_logger()

REPRESENTATION_RULE = "representation"


# ============================================================================
# Validation
# ============================================================================

def check_value(descriptor: TypeDescriptor, value: Any) -> ValidationError | None:
    """Run the type check then the root rule. Returns the first failure, if any."""
    rep = descriptor.representation
    if not rep.accepts(value):
        expected = rep.python_type.__name__
        if type(value) is rep.python_type: return representation_error(descriptor, value, f"expected finite {expected}")
        return representation_error(descriptor, value, f"expected {expected}, got {type(value).__name__}")
    if (failure := descriptor.root.explain(value)) is None: return None
    return ValidationError(
        descriptor.name,
        rule_path=failure.path,
        rule_kind=failure.kind,
        rule_label=failure.label,
        constraint=failure.constraint,
        value=value,
        redacted=descriptor.sensitive,
    )


def representation_error(descriptor: TypeDescriptor, value: Any, reason: str) -> ValidationError:
    return ValidationError(
        descriptor.name,
        rule_kind=REPRESENTATION_RULE,
        constraint=f"type[{descriptor.representation.value}]",
        value=value,
        redacted=descriptor.sensitive,
        code=ErrorCode.E2002_REPRESENTATION_MISMATCH,
        reason=reason,
    )


# ============================================================================
# Wrapper Builder
# ============================================================================

class WrapperBuilder:
    """Assembles the class namespace for one descriptor."""

    def __init__(self, descriptor: TypeDescriptor, module: str | None = None):
        self.descriptor = descriptor
        self.module = module or "strongtypes.generated"
        self.namespace: dict[str, Any] = {}
        self._settings = get_settings()

    def build(self) -> type[StrongType]:
        d = self.descriptor
        self.namespace.update({
            "__slots__": (),
            "__module__": self.module,
            "__qualname__": d.name,
            "__doc__": d.doc or self._default_doc(),
            "__descriptor__": d,
            "__match_args__": ("inner",),
        })
        self._emit_constructors()
        self._emit_unchecked()
        self._emit_accessors()
        self._emit_equality()
        self._emit_ordering()
        self._emit_hashing()
        self._emit_rendering()
        self._emit_parsing()
        wrapper = type(d.name, (StrongType,), self.namespace)
        log.info("wrapper_generated", name=d.name, members=self.members())
        return wrapper

    def members(self) -> list[str]:
        """Generated member names, in emission order."""
        return [k for k in self.namespace if not (k.startswith("__") and k.endswith("__")) or k in _DUNDER_MEMBERS]

    def _default_doc(self) -> str:
        d = self.descriptor
        return f"Strong type over {d.representation.value} ({d.root.constraint})."

    # ------------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------------

    def _emit_constructors(self) -> None:
        descriptor = self.descriptor

        def __init__(self: StrongType, value: Any) -> None:
            if (error := check_value(descriptor, value)) is not None: raise error
            object.__setattr__(self, "_inner", value)

        def new(cls: type[StrongType], value: Any) -> Result[StrongType, ValidationError]:
            """Validating constructor. Returns Ok(instance) or Err(ValidationError)."""
            if (error := check_value(descriptor, value)) is not None: return Err(error)
            instance = cls.__new__(cls)
            object.__setattr__(instance, "_inner", value)
            return Ok(instance)

        def is_valid(cls: type[StrongType], value: Any) -> bool:
            return check_value(descriptor, value) is None

        self.namespace["__init__"] = __init__
        self.namespace["new"] = classmethod(new)
        self.namespace["is_valid"] = classmethod(is_valid)

    def _emit_unchecked(self) -> None:
        if not (self.descriptor.allow_unchecked and self._settings.ALLOW_UNCHECKED): return

        def new_unchecked(cls: type[StrongType], value: Any) -> StrongType:
            """Construct without validation. The caller vouches for the value."""
            instance = cls.__new__(cls)
            object.__setattr__(instance, "_inner", value)
            return instance

        self.namespace["new_unchecked"] = classmethod(new_unchecked)

    # ------------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------------

    def _emit_accessors(self) -> None:
        def inner(self: StrongType) -> Any: return self._inner

        def into_inner(self: StrongType) -> Any: return self._inner

        self.namespace["inner"] = property(inner, doc="The wrapped value (read-only).")
        self.namespace["into_inner"] = into_inner
        if self.descriptor.representation is Representation.TEXT:
            def as_str(self: StrongType) -> str: return self._inner
            self.namespace["as_str"] = as_str

    # ------------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------------

    def _emit_equality(self) -> None:
        def __eq__(self: StrongType, other: object) -> bool:
            if type(other) is not type(self): return NotImplemented
            return self._inner == other._inner  # type: ignore[attr-defined]

        self.namespace["__eq__"] = __eq__

    def _emit_ordering(self) -> None:
        if not self.descriptor.has(Capability.ORDERING): return
        for name, compare in _ORDERINGS.items():
            self.namespace[name] = _make_comparison(name, compare)

    def _emit_hashing(self) -> None:
        if not self.descriptor.has(Capability.HASHING):
            self.namespace["__hash__"] = None
            return
        qualname = self.descriptor.name

        def __hash__(self: StrongType) -> int: return hash((qualname, self._inner))

        self.namespace["__hash__"] = __hash__

    # ------------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------------

    def _emit_rendering(self) -> None:
        name = self.descriptor.name
        placeholder = self._settings.REDACTION_PLACEHOLDER

        if self.descriptor.sensitive:
            def __repr__(self: StrongType) -> str: return f"{name}({placeholder})"
            def __str__(self: StrongType) -> str: return placeholder
            def __format__(self: StrongType, spec: str) -> str: return format(placeholder, spec)
        elif self.descriptor.has(Capability.DISPLAY):
            def __repr__(self: StrongType) -> str: return f"{name}({self._inner!r})"
            def __str__(self: StrongType) -> str: return str(self._inner)
            def __format__(self: StrongType, spec: str) -> str: return format(self._inner, spec)
        else:
            def __repr__(self: StrongType) -> str: return f"{name}({self._inner!r})"
            self.namespace["__repr__"] = __repr__
            return

        self.namespace["__repr__"] = __repr__
        self.namespace["__str__"] = __str__
        self.namespace["__format__"] = __format__

    # ------------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------------

    def _emit_parsing(self) -> None:
        if not self.descriptor.has(Capability.PARSE): return
        descriptor = self.descriptor

        def from_str(cls: type[StrongType], text: str) -> Result[StrongType, ValidationError]:
            """Parse text into the representation, then validate."""
            if not isinstance(text, str):
                return Err(representation_error(descriptor, text, f"expected str to parse, got {type(text).__name__}"))
            try:
                value = descriptor.representation.from_text(text)
            except ValueError as e:
                reason = f"cannot parse as {descriptor.representation.value}"
                # Parser messages quote the input
                if not descriptor.sensitive: reason = f"{reason}: {e}"
                return Err(representation_error(descriptor, text, reason))
            return cls.new(value)

        self.namespace["from_str"] = classmethod(from_str)


_ORDERINGS: dict[str, Callable[[Any, Any], bool]] = {
    "__lt__": lambda a, b: a < b,
    "__le__": lambda a, b: a <= b,
    "__gt__": lambda a, b: a > b,
    "__ge__": lambda a, b: a >= b,
}

_DUNDER_MEMBERS = frozenset({
    "__init__", "__eq__", "__hash__", "__repr__", "__str__", "__format__", *_ORDERINGS,
})


def _make_comparison(name: str, compare: Callable[[Any, Any], bool]) -> Callable[[StrongType, object], bool]:
    def comparison(self: StrongType, other: object) -> bool:
        if type(other) is not type(self): return NotImplemented
        return compare(self._inner, other._inner)  # type: ignore[attr-defined]
    comparison.__name__ = name
    return comparison


def generate_wrapper(descriptor: TypeDescriptor, module: str | None = None) -> type[StrongType]:
    """Build the wrapper class for a resolved descriptor.

    ``module`` becomes the class's ``__module__``; pass the defining module's
    ``__name__`` so instances pickle by reference.
    """
    return WrapperBuilder(descriptor, module).build()
