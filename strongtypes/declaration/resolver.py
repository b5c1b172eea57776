"""Type Descriptor Resolver

Validates a declaration and normalizes it into a TypeDescriptor:

1. Parse the declaration (pydantic) -> MalformedDeclarationError
2. Check the type name -> InvalidTypeNameError
3. Resolve the representation -> UnknownRepresentationError
4. Build the rule tree, resolving catalog references and checking each
   leaf against the representation -> Malformed / Mismatch / UnknownRuleReference
5. Parse capabilities and check them against the representation
   -> UnknownCapability / DuplicateCapability / CapabilityRepresentationMismatch

Resolution is deterministic and has no side effects other than logging.
Internally each step raises; ``resolve`` maps the first DeclarationError to Err
at the boundary.

Usage:
    match resolve({"name": "Port", "representation": "int",
                   "rules": [{"kind": "range", "min": 1, "max": 65535}]}):
        case Ok(descriptor): ...
        case Err(error): ...
"""
from __future__ import annotations

import keyword
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from strongtypes.core.errors import Err, Ok, Result
from strongtypes.core.logging import resolver_logger
from strongtypes.errors import (
    CapabilityRepresentationMismatchError,
    DeclarationError,
    DuplicateCapabilityError,
    DuplicateTypeNameError,
    InvalidTypeNameError,
    MalformedDeclarationError,
    RuleRepresentationMismatchError,
    UnknownCapabilityError,
    UnknownRepresentationError,
    UnknownRuleReferenceError,
)
from strongtypes.rules import (
    EMPTY_CATALOG,
    AllOf,
    AnyOf,
    CharSet,
    ExactLength,
    Length,
    NonEmpty,
    Not,
    Pattern,
    Predicate,
    Range,
    Rule,
    RuleCatalog,
    Trimmed,
)

from .descriptor import TypeDescriptor
from .models import Declaration, RuleSpec
from .representation import Capability, Representation

log = resolver_logger()

DeclarationInput = Declaration | Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class _Scope:
    """What a rule tree is being built against."""
    type_name: str
    representation: Representation
    catalog: Mapping[str, Rule]


# ============================================================================
# Public API
# ============================================================================

def resolve(declaration: DeclarationInput, catalog: Mapping[str, Rule] | None = None) -> Result[TypeDescriptor, DeclarationError]:
    """Resolve one declaration into a TypeDescriptor."""
    try:
        descriptor = _resolve(declaration, EMPTY_CATALOG if catalog is None else catalog)
    except DeclarationError as e:
        log.warning("declaration_rejected", code=e.code.name, error=e.message)
        return Err(e)
    log.info("type_resolved", **descriptor.summary())
    return Ok(descriptor)


def resolve_all(
    declarations: Iterable[DeclarationInput], catalog: Mapping[str, Rule] | None = None
) -> Result[list[TypeDescriptor], DeclarationError]:
    """Resolve a generation unit. Names must be unique; fails fast on the first error."""
    descriptors: list[TypeDescriptor] = []
    seen: set[str] = set()
    for declaration in declarations:
        match resolve(declaration, catalog):
            case Ok(descriptor):
                if descriptor.name in seen:
                    error = DuplicateTypeNameError(descriptor.name)
                    log.warning("declaration_rejected", code=error.code.name, error=error.message)
                    return Err(error)
                seen.add(descriptor.name)
                descriptors.append(descriptor)
            case Err(e):
                return Err(e)
    return Ok(descriptors)


def parse_declaration(declaration: DeclarationInput) -> Declaration:
    """Validate a mapping into a Declaration. Raises MalformedDeclarationError."""
    if isinstance(declaration, Declaration): return declaration
    if not isinstance(declaration, Mapping):
        raise MalformedDeclarationError(f"expected a mapping or Declaration, got {type(declaration).__name__}")
    try:
        return Declaration.model_validate(dict(declaration))
    except PydanticValidationError as e:
        name = declaration.get("name") if isinstance(declaration.get("name"), str) else None
        details = [f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()]
        raise MalformedDeclarationError("declaration does not match the schema", type_name=name, details=details) from e


# ============================================================================
# Resolution Steps
# ============================================================================

def _resolve(declaration: DeclarationInput, catalog: Mapping[str, Rule]) -> TypeDescriptor:
    decl = parse_declaration(declaration)

    if not _is_type_name(decl.name): raise InvalidTypeNameError(decl.name)

    representation = Representation.parse(decl.representation)
    if representation is None:
        raise UnknownRepresentationError(decl.representation, type_name=decl.name, valid=Representation.aliases())

    scope = _Scope(type_name=decl.name, representation=representation, catalog=catalog)
    children = tuple(_build_rule(item, scope) for item in decl.rules)

    return TypeDescriptor(
        name=decl.name,
        representation=representation,
        root=AllOf(*children),
        capabilities=_resolve_capabilities(decl.capabilities, scope),
        allow_unchecked=decl.allow_unchecked,
        doc=decl.doc,
    )


def _is_type_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name) and not name.startswith("__")


def _resolve_capabilities(raw: Iterable[Capability | str], scope: _Scope) -> tuple[Capability, ...]:
    capabilities: list[Capability] = []
    for item in raw:
        name = item.value if isinstance(item, Enum) else str(item)
        try:
            capability = Capability(name.strip().lower())
        except ValueError:
            raise UnknownCapabilityError(name, type_name=scope.type_name, valid=Capability.names()) from None
        if capability in capabilities:
            raise DuplicateCapabilityError(capability.value, type_name=scope.type_name)
        if not scope.representation.supports(capability):
            raise CapabilityRepresentationMismatchError(
                capability.value, scope.representation.value, type_name=scope.type_name)
        capabilities.append(capability)
    return tuple(capabilities)


# ============================================================================
# Rule Tree Construction
# ============================================================================

def _build_rule(item: RuleSpec | Rule, scope: _Scope) -> Rule:
    if isinstance(item, Rule):
        _check_applicable(item, scope)
        return item
    try:
        rule = _build_spec(item, scope)
    except (ValueError, TypeError) as e:
        raise MalformedDeclarationError(f"invalid '{item.kind}' rule: {e}", type_name=scope.type_name) from e
    return rule


def _build_spec(spec: RuleSpec, scope: _Scope) -> Rule:
    match spec.kind:
        case "all" | "any":
            children = [_build_rule(child, scope) for child in spec.rules]
            combinator = AllOf if spec.kind == "all" else AnyOf
            return combinator(*children, label=spec.label)
        case "not":
            if len(spec.rules) != 1:
                raise ValueError(f"'not' wraps exactly one rule, got {len(spec.rules)}")
            return Not(_build_rule(spec.rules[0], scope), label=spec.label)
        case "ref":
            return _lookup_ref(spec, scope)

    rule = _build_atomic(spec)
    _check_applicable(rule, scope)
    return rule


def _build_atomic(spec: RuleSpec) -> Rule:
    match spec.kind:
        case "length":
            return Length(_as_int(spec.min, "min"), _as_int(spec.max, "max"), label=spec.label)
        case "exact_length":
            if spec.length is None: raise ValueError("'length' is required")
            return ExactLength(spec.length, label=spec.label)
        case "non_empty":
            return NonEmpty(label=spec.label)
        case "trimmed":
            return Trimmed(label=spec.label)
        case "pattern":
            if spec.regex is None: raise ValueError("'regex' is required")
            flags = re.IGNORECASE if spec.ignore_case else 0
            return Pattern(spec.regex, full_match=spec.full_match, flags=flags, label=spec.label)
        case "charset":
            return CharSet(spec.allowed, tuple(spec.classes), label=spec.label)
        case "range":
            return Range(spec.min, spec.max, spec.exclusive_min, spec.exclusive_max, label=spec.label)
        case "predicate":
            if spec.fn is None: raise ValueError("'fn' is required")
            return Predicate(spec.fn, spec.name, label=spec.label)
    raise ValueError(f"unsupported rule kind '{spec.kind}'")


def _as_int(bound: Any, what: str) -> int | None:
    if bound is None or isinstance(bound, int): return bound
    if isinstance(bound, float) and bound.is_integer(): return int(bound)
    raise ValueError(f"length '{what}' must be an integer, got {bound!r}")


def _lookup_ref(spec: RuleSpec, scope: _Scope) -> Rule:
    if not spec.name: raise ValueError("'name' is required")
    if spec.name not in scope.catalog:
        raise UnknownRuleReferenceError(spec.name, type_name=scope.type_name, available=list(scope.catalog))
    rule = scope.catalog[spec.name]
    _check_applicable(rule, scope)
    if spec.label is None: return rule
    # Labelling a shared rule wraps it so the catalog entry stays untouched
    return AllOf(rule, label=spec.label)


def _check_applicable(rule: Rule, scope: _Scope) -> None:
    """Raise for the first leaf (in tree order) that cannot inspect the representation."""
    match rule:
        case AllOf(children=children) | AnyOf(children=children):
            for child in children: _check_applicable(child, scope)
        case Not(child=child):
            _check_applicable(child, scope)
        case _ if not rule.applies_to(scope.representation.python_type):
            raise RuleRepresentationMismatchError(rule.kind, scope.representation.value, type_name=scope.type_name)
