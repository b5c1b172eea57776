"""Declaration Schema

Pydantic models describing a strong type declaration as data. Declarations
arrive either as these models, as plain mappings (validated here) or from a
YAML/JSON document (see loader).

Example:
    Declaration(
        name="Username",
        representation="text",
        rules=[
            RuleSpec(kind="length", min=3, max=16),
            RuleSpec(kind="charset", classes=["alnum", "underscore"]),
        ],
        capabilities=["serialize", "deserialize", "display"],
    )
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from strongtypes.rules import Rule

from .representation import Capability

RuleKind = Literal[
    "length", "exact_length", "non_empty", "trimmed", "pattern", "charset",
    "range", "predicate", "all", "any", "not", "ref",
]


class RuleSpec(BaseModel):
    """One node of a declared rule tree.

    Parameters by kind:
    - length: min, max
    - exact_length: length
    - pattern: regex, full_match, ignore_case
    - charset: allowed, classes
    - range: min, max, exclusive_min, exclusive_max
    - predicate: fn, name
    - all / any: rules
    - not: rules (exactly one)
    - ref: name (looked up in the rule catalog)
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: RuleKind
    label: str | None = None

    min: int | float | Decimal | None = None
    max: int | float | Decimal | None = None
    exclusive_min: bool = False
    exclusive_max: bool = False
    length: int | None = None

    regex: str | None = None
    full_match: bool = True
    ignore_case: bool = False

    allowed: str = ""
    classes: list[str] = Field(default_factory=list)

    fn: Callable[[Any], bool] | None = None
    name: str | None = None

    rules: list[RuleSpec] = Field(default_factory=list)


class Declaration(BaseModel):
    """A named strong type: representation, rules and requested capabilities.

    ``rules`` accepts RuleSpec nodes (or their mapping form) and ready-made
    Rule objects interchangeably. Top-level rules are implicitly AND-ed in
    declaration order.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    name: str
    representation: Any
    rules: list[Union[RuleSpec, Rule]] = Field(default_factory=list)
    capabilities: list[Union[Capability, str]] = Field(default_factory=list)
    allow_unchecked: bool = False
    doc: str | None = None
