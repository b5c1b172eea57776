"""Rule Base Types

Rules are immutable, pure predicates over a single candidate value. Every
rule answers two questions:

- evaluate(value): does the value satisfy the rule? Total: never raises.
- explain(value): if not, which node in the tree failed first, and where?

The two are always consistent: ``rule.evaluate(v) is (rule.explain(v) is None)``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .combinators import AllOf, AnyOf, Not


@dataclass(frozen=True, slots=True)
class RuleFailure:
    """The first failing node of a rule tree.

    ``path`` holds the child indices walked from the root to ``rule``;
    the root itself has the empty path. An unlabelled failing rule takes
    the label of its nearest labelled ancestor.
    """
    path: tuple[int, ...]
    rule: Rule
    inherited_label: str | None = None

    @property
    def kind(self) -> str: return self.rule.kind

    @property
    def label(self) -> str | None: return self.rule.label or self.inherited_label

    @property
    def constraint(self) -> str: return self.rule.constraint

    def under(self, index: int, label: str | None = None) -> RuleFailure:
        """Re-root this failure beneath child ``index`` of a parent combinator labelled ``label``."""
        return RuleFailure(path=(index, *self.path), rule=self.rule, inherited_label=self.inherited_label or label)


class Rule(ABC):
    """Base class for all rule nodes.

    Rules compose via operators:
    - a & b: AllOf(a, b)
    - a | b: AnyOf(a, b)
    - ~a: Not(a)
    """
    __slots__ = ()

    kind: ClassVar[str] = "rule"
    # Python types this rule knows how to inspect. Empty means any type.
    accepts: ClassVar[tuple[type, ...]] = ()

    label: str | None

    @abstractmethod
    def evaluate(self, value: Any) -> bool:
        """Return True iff ``value`` satisfies this rule. Never raises."""

    @property
    @abstractmethod
    def constraint(self) -> str:
        """Human-readable constraint for error messages, e.g. ``length[3,16]``."""

    def explain(self, value: Any) -> RuleFailure | None:
        """Return the first failing node, or None when the value passes."""
        return None if self.evaluate(value) else RuleFailure(path=(), rule=self)

    def applies_to(self, python_type: type) -> bool:
        """Whether values of ``python_type`` can be inspected by this rule."""
        if not self.accepts: return True
        if python_type is bool and bool not in self.accepts: return False
        return issubclass(python_type, self.accepts)

    def json_schema(self) -> dict[str, Any]:
        """JSON-schema keywords describing this rule. Empty if not expressible."""
        return {}

    def __call__(self, value: Any) -> bool: return self.evaluate(value)

    def __and__(self, other: Rule) -> AllOf:
        from .combinators import AllOf
        return AllOf(self, other)

    def __or__(self, other: Rule) -> AnyOf:
        from .combinators import AnyOf
        return AnyOf(self, other)

    def __invert__(self) -> Not:
        from .combinators import Not
        return Not(self)
