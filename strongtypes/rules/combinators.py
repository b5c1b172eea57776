"""Rule Combinators

AllOf, AnyOf and Not compose rules into trees. Evaluation order matters only
for error reporting: children are inspected in declaration order and the
first failing child is the one explained.

Identities:
- AllOf() is always true
- AnyOf() is always false
- Not(Not(r)) evaluates exactly like r
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .base import Rule, RuleFailure

_LOWER_BOUNDS = ("minLength", "minimum", "exclusiveMinimum")
_UPPER_BOUNDS = ("maxLength", "maximum", "exclusiveMaximum")


@dataclass(frozen=True, slots=True)
class AllOf(Rule):
    """All children must pass. Explains via the first failing child, lending it this label."""
    kind: ClassVar[str] = "all"

    children: tuple[Rule, ...]
    label: str | None

    def __init__(self, *children: Rule, label: str | None = None):
        for child in children:
            if not isinstance(child, Rule):
                raise TypeError(f"all: expected Rule, got {type(child).__name__}")
        object.__setattr__(self, "children", tuple(children))
        object.__setattr__(self, "label", label)

    @property
    def constraint(self) -> str:
        return f"all_of[{', '.join(c.constraint for c in self.children)}]"

    def evaluate(self, value: Any) -> bool:
        return all(child.evaluate(value) for child in self.children)

    def explain(self, value: Any) -> RuleFailure | None:
        for index, child in enumerate(self.children):
            if (failure := child.explain(value)) is not None: return failure.under(index, self.label)
        return None

    def applies_to(self, python_type: type) -> bool:
        return all(child.applies_to(python_type) for child in self.children)

    def json_schema(self) -> dict[str, Any]:
        """Merge child keywords, tightening numeric bounds; conflicts fall back to allOf."""
        merged: dict[str, Any] = {}
        extra: list[dict[str, Any]] = []
        for child in self.children:
            if not (schema := child.json_schema()): continue
            for key, val in schema.items():
                if key not in merged: merged[key] = val
                elif key in _LOWER_BOUNDS: merged[key] = max(merged[key], val)
                elif key in _UPPER_BOUNDS: merged[key] = min(merged[key], val)
                elif merged[key] != val: extra.append({key: val})
        if extra:
            merged["allOf"] = extra
        return merged


@dataclass(frozen=True, slots=True)
class AnyOf(Rule):
    """At least one child must pass. On failure the AnyOf node itself is reported."""
    kind: ClassVar[str] = "any"

    children: tuple[Rule, ...]
    label: str | None

    def __init__(self, *children: Rule, label: str | None = None):
        for child in children:
            if not isinstance(child, Rule):
                raise TypeError(f"any: expected Rule, got {type(child).__name__}")
        object.__setattr__(self, "children", tuple(children))
        object.__setattr__(self, "label", label)

    @property
    def constraint(self) -> str:
        return f"any_of[{', '.join(c.constraint for c in self.children)}]"

    def evaluate(self, value: Any) -> bool:
        return any(child.evaluate(value) for child in self.children)

    def applies_to(self, python_type: type) -> bool:
        return all(child.applies_to(python_type) for child in self.children)

    def json_schema(self) -> dict[str, Any]:
        schemas = [child.json_schema() for child in self.children]
        if not schemas or not all(schemas): return {}
        return {"anyOf": schemas}


@dataclass(frozen=True, slots=True)
class Not(Rule):
    """Negates exactly one child. On failure the Not node itself is reported."""
    kind: ClassVar[str] = "not"

    child: Rule
    label: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.child, Rule):
            raise TypeError(f"not: expected Rule, got {type(self.child).__name__}")

    @property
    def constraint(self) -> str: return f"not[{self.child.constraint}]"

    def evaluate(self, value: Any) -> bool: return not self.child.evaluate(value)

    def applies_to(self, python_type: type) -> bool: return self.child.applies_to(python_type)

    def json_schema(self) -> dict[str, Any]:
        return {"not": schema} if (schema := self.child.json_schema()) else {}
