"""Rule Primitives

Atomic predicates and AND/OR/NOT combinators. This package knows nothing
about strong types or generation.

Usage:
    from strongtypes.rules import Length, CharSet

    username = Length(3, 16) & CharSet(classes=("alnum", "underscore"))
    username.evaluate("valid_user1")      # True
    username.explain("bad name!").path    # (1,)
"""
from .base import Rule, RuleFailure
from .atomic import (
    CHARACTER_CLASSES,
    CharSet,
    ExactLength,
    Length,
    NonEmpty,
    Pattern,
    Predicate,
    Range,
    Trimmed,
    predicate,
)
from .combinators import AllOf, AnyOf, Not
from .catalog import EMPTY_CATALOG, RuleCatalog

__all__ = [
    "Rule",
    "RuleFailure",
    "Length",
    "ExactLength",
    "NonEmpty",
    "Trimmed",
    "Pattern",
    "CharSet",
    "CHARACTER_CLASSES",
    "Range",
    "Predicate",
    "predicate",
    "AllOf",
    "AnyOf",
    "Not",
    "RuleCatalog",
    "EMPTY_CATALOG",
]
