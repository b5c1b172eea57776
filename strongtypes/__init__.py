"""strongtypes

Declare a strong type once (representation, rules, capabilities) and get
the whole wrapper generated: validated construction, accessors, comparison,
rendering, and opt-in JSON and SQLAlchemy adapters.
"""
__version__ = "0.1.0"

from strongtypes.core.errors import Err, Ok, Result
from strongtypes.declaration import (
    Capability,
    Declaration,
    Representation,
    RuleSpec,
    TypeDescriptor,
    load_declarations,
    resolve,
    resolve_all,
)
from strongtypes.define import build, define, define_all, define_from_file
from strongtypes.errors import (
    DeclarationError,
    DecodeError,
    StrongTypeError,
    ValidationError,
)
from strongtypes.generation import StrongType, generate_wrapper
from strongtypes.adapters import emit_adapters
from strongtypes.rules import (
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

__all__ = [
    "__version__",
    "Ok",
    "Err",
    "Result",
    "Capability",
    "Declaration",
    "Representation",
    "RuleSpec",
    "TypeDescriptor",
    "load_declarations",
    "resolve",
    "resolve_all",
    "build",
    "define",
    "define_all",
    "define_from_file",
    "StrongTypeError",
    "DeclarationError",
    "ValidationError",
    "DecodeError",
    "StrongType",
    "generate_wrapper",
    "emit_adapters",
    "Rule",
    "Length",
    "ExactLength",
    "NonEmpty",
    "Trimmed",
    "Pattern",
    "CharSet",
    "Range",
    "Predicate",
    "AllOf",
    "AnyOf",
    "Not",
    "RuleCatalog",
]
