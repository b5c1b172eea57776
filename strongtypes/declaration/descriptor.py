"""Type Descriptor

The normalized, validated form of a declaration. Created once by the
resolver, read-only afterward, and owned by the generated class as
``__descriptor__``.
"""
from __future__ import annotations

from dataclasses import dataclass

from strongtypes.rules import AllOf, ExactLength, Length

from .representation import Capability, Representation


@dataclass(frozen=True, slots=True)
class TypeDescriptor:
    name: str
    representation: Representation
    root: AllOf
    capabilities: tuple[Capability, ...] = ()
    allow_unchecked: bool = False
    doc: str | None = None

    def has(self, capability: Capability) -> bool: return capability in self.capabilities

    @property
    def sensitive(self) -> bool: return Capability.SENSITIVE in self.capabilities

    @property
    def max_length(self) -> int | None:
        """Tightest upper length bound among the top-level rules, if any."""
        bounds = [r.max for r in self.root.children if isinstance(r, Length) and r.max is not None]
        bounds += [r.length for r in self.root.children if isinstance(r, ExactLength)]
        return min(bounds) if bounds else None

    def summary(self) -> dict:
        """Compact structured view for logging."""
        return {
            "name": self.name,
            "representation": self.representation.value,
            "rules": len(self.root.children),
            "capabilities": [c.value for c in self.capabilities],
            "allow_unchecked": self.allow_unchecked,
        }
