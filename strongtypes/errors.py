"""Strong Type Error System

Three error families, each with a distinct propagation policy:

- DeclarationError: raised/returned while resolving a declaration. Terminal;
  no wrapper is generated once one surfaces.
- ValidationError: returned by the validating constructor. Identifies the
  first failing rule node (path, kind, label) and, unless the type is
  sensitive, the offending value.
- DecodeError: returned by decode adapters. Wraps either a ValidationError
  or a format-level failure of the underlying library.

All three carry an ErrorCode and convert to AppError for structured reporting.
"""
from __future__ import annotations

from typing import Any, ClassVar, Sequence

from strongtypes.core.config import get_settings
from strongtypes.core.errors import AppError, ErrorCode, ErrorContext


def _echo(value: Any) -> str:
    """repr() of an offending value, truncated for messages."""
    limit = get_settings().MAX_ECHO_LENGTH
    text = repr(value)
    return text[:limit] + "..." if len(text) > limit else text


class StrongTypeError(Exception):
    """Base class for all strongtypes errors."""

    code: ClassVar[ErrorCode] = ErrorCode.E9000_INTERNAL_GENERIC

    def __init__(self, message: str, *, type_name: str | None = None):
        self.message = message
        self.type_name = type_name
        super().__init__(message)

    @property
    def metadata(self) -> dict[str, Any]:
        """Structured context for reporting. Subclasses extend this."""
        return {"type_name": self.type_name} if self.type_name else {}

    def to_app_error(self, origin: str = "") -> AppError:
        """Convert to AppError for the structured error view."""
        return AppError(
            code=self.code,
            message=self.message,
            context=ErrorContext(origin=origin or self.code.category),
            metadata=self.metadata,
            cause=self,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.name, "message": self.message, **self.metadata}


# ============================================================================
# Declaration Errors (E1xxx)
# ============================================================================

class DeclarationError(StrongTypeError):
    """Base class for resolution-time errors."""
    code = ErrorCode.E1000_DECLARATION_GENERIC

    def __init__(self, message: str, *, type_name: str | None = None):
        prefix = f"{type_name}: " if type_name else ""
        super().__init__(f"{prefix}{message}", type_name=type_name)


class MalformedDeclarationError(DeclarationError):
    """Raised when a declaration or one of its rule specs is structurally invalid."""
    code = ErrorCode.E1001_MALFORMED_DECLARATION

    def __init__(self, message: str, *, type_name: str | None = None, details: Sequence[str] = ()):
        self.details = tuple(details)
        if self.details:
            message = f"{message} ({'; '.join(self.details)})"
        super().__init__(message, type_name=type_name)

    @property
    def metadata(self) -> dict[str, Any]:
        return {**super().metadata, "details": list(self.details)}


class InvalidTypeNameError(DeclarationError):
    code = ErrorCode.E1002_INVALID_TYPE_NAME

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' is not a valid type name (must be a Python identifier)")


class DuplicateTypeNameError(DeclarationError):
    code = ErrorCode.E1003_DUPLICATE_TYPE_NAME

    def __init__(self, name: str):
        self.name = name
        super().__init__("type is declared more than once in the same generation unit", type_name=name)


class UnknownRepresentationError(DeclarationError):
    code = ErrorCode.E1010_UNKNOWN_REPRESENTATION

    def __init__(self, representation: Any, *, type_name: str | None = None, valid: Sequence[str] = ()):
        self.representation = representation
        hint = f"; valid: {', '.join(valid)}" if valid else ""
        super().__init__(f"unknown representation {representation!r}{hint}", type_name=type_name)

    @property
    def metadata(self) -> dict[str, Any]:
        return {**super().metadata, "representation": str(self.representation)}


class RuleRepresentationMismatchError(DeclarationError):
    """Raised when a rule cannot inspect values of the declared representation."""
    code = ErrorCode.E1011_RULE_REPRESENTATION_MISMATCH

    def __init__(self, rule_kind: str, representation: str, *, type_name: str | None = None):
        self.rule_kind, self.representation = rule_kind, representation
        super().__init__(f"rule '{rule_kind}' cannot be applied to a {representation} representation",
            type_name=type_name)

    @property
    def metadata(self) -> dict[str, Any]:
        return {**super().metadata, "rule_kind": self.rule_kind, "representation": self.representation}


class UnknownRuleReferenceError(DeclarationError):
    code = ErrorCode.E1012_UNKNOWN_RULE_REFERENCE

    def __init__(self, ref: str, *, type_name: str | None = None, available: Sequence[str] = ()):
        self.ref = ref
        hint = f"; catalog has: {', '.join(sorted(available))}" if available else "; catalog is empty"
        super().__init__(f"rule reference '{ref}' not found{hint}", type_name=type_name)


class UnknownCapabilityError(DeclarationError):
    code = ErrorCode.E1020_UNKNOWN_CAPABILITY

    def __init__(self, capability: str, *, type_name: str | None = None, valid: Sequence[str] = ()):
        self.capability = capability
        super().__init__(f"unknown capability '{capability}'; valid: {', '.join(valid)}", type_name=type_name)


class DuplicateCapabilityError(DeclarationError):
    code = ErrorCode.E1021_DUPLICATE_CAPABILITY

    def __init__(self, capability: str, *, type_name: str | None = None):
        self.capability = capability
        super().__init__(f"capability '{capability}' requested more than once", type_name=type_name)


class CapabilityRepresentationMismatchError(DeclarationError):
    """Raised when the representation cannot support a requested capability."""
    code = ErrorCode.E1022_CAPABILITY_REPRESENTATION_MISMATCH

    def __init__(self, capability: str, representation: str, *, type_name: str | None = None):
        self.capability, self.representation = capability, representation
        super().__init__(f"capability '{capability}' is not supported by a {representation} representation",
            type_name=type_name)

    @property
    def metadata(self) -> dict[str, Any]:
        return {**super().metadata, "capability": self.capability, "representation": self.representation}


# ============================================================================
# Validation Errors (E2xxx)
# ============================================================================

class ValidationError(StrongTypeError):
    """A value was rejected by a strong type's validating constructor.

    Carries sufficient context for callers to explain the rejection:
    - rule_path: child indices from the root rule to the failing node
    - rule_kind: kind of the failing node (e.g. "length", "pattern")
    - rule_label: declaration-given name of the failing node, if any
    - constraint: human-readable constraint (e.g. "length[3,16]")
    - value: the offending value, None when redacted
    """

    def __init__(
        self,
        type_name: str,
        *,
        rule_path: tuple[int, ...] = (),
        rule_kind: str,
        rule_label: str | None = None,
        constraint: str,
        value: Any = None,
        redacted: bool = False,
        code: ErrorCode = ErrorCode.E2001_RULE_VIOLATED,
        reason: str | None = None,
    ):
        self.rule_path = tuple(rule_path)
        self.rule_kind = rule_kind
        self.rule_label = rule_label
        self.constraint = constraint
        self.value = None if redacted else value
        self.redacted = redacted
        self.code = code  # type: ignore[misc]
        self.reason = reason
        rule = rule_label or rule_kind
        message = f"{type_name}: {reason}" if reason else f"{type_name}: value violates rule '{rule}' ({constraint})"
        if not redacted:
            message = f"{message}; got {_echo(value)}"
        super().__init__(message, type_name=type_name)

    @property
    def metadata(self) -> dict[str, Any]:
        meta: dict[str, Any] = {
            **super().metadata,
            "rule_path": list(self.rule_path),
            "rule_kind": self.rule_kind,
            "constraint": self.constraint,
            "redacted": self.redacted,
        }
        if self.rule_label:
            meta["rule_label"] = self.rule_label
        if not self.redacted:
            meta["value"] = self.value
        return meta

    def __repr__(self) -> str:
        return f"ValidationError({self.type_name}, rule_path={self.rule_path}, rule_kind={self.rule_kind!r})"


# ============================================================================
# Decode Errors (E3xxx)
# ============================================================================

class DecodeError(StrongTypeError):
    """Raised/returned by decode adapters.

    `cause` is either the ValidationError produced by the validating
    constructor, or the format-level exception raised by the underlying
    serialization/persistence library.
    """

    def __init__(self, type_name: str, *, source: str, cause: Exception, detail: str | None = None):
        self.source = source
        self.cause = cause
        self.code = (ErrorCode.E3001_DECODE_INVALID_VALUE if isinstance(cause, ValidationError)  # type: ignore[misc]
            else ErrorCode.E3002_DECODE_MALFORMED_INPUT)
        what = "invalid value" if isinstance(cause, ValidationError) else "malformed input"
        super().__init__(f"{type_name}: cannot decode from {source}: {what}: {detail or cause}", type_name=type_name)
        self.__cause__ = cause

    @property
    def validation_error(self) -> ValidationError | None:
        return self.cause if isinstance(self.cause, ValidationError) else None

    @property
    def metadata(self) -> dict[str, Any]:
        meta: dict[str, Any] = {**super().metadata, "source": self.source}
        if (verr := self.validation_error) is not None:
            meta["validation"] = verr.metadata
        else:
            meta["cause"] = type(self.cause).__name__
        return meta
