"""Shared Rule Catalog

An immutable name -> Rule mapping that declarations can reference with
``{"kind": "ref", "name": ...}``. Catalogs are passed explicitly to the
resolver; there is no process-wide registry.

Usage:
    catalog = RuleCatalog(slug=Pattern(r"[a-z0-9-]+"))
    catalog = catalog.extend(short=Length(max=32))
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from .base import Rule


class RuleCatalog(Mapping[str, Rule]):
    __slots__ = ("_rules",)

    def __init__(self, rules: Mapping[str, Rule] | None = None, **named: Rule):
        merged = {**(rules or {}), **named}
        for name, rule in merged.items():
            if not isinstance(name, str) or not name:
                raise ValueError(f"rule catalog names must be non-empty strings, got {name!r}")
            if not isinstance(rule, Rule):
                raise TypeError(f"rule catalog entry '{name}' is not a Rule: {type(rule).__name__}")
        self._rules = MappingProxyType(merged)

    def __getitem__(self, name: str) -> Rule: return self._rules[name]

    def __iter__(self) -> Iterator[str]: return iter(self._rules)

    def __len__(self) -> int: return len(self._rules)

    def __repr__(self) -> str: return f"RuleCatalog({', '.join(self._rules)})"

    def extend(self, rules: Mapping[str, Rule] | None = None, **named: Rule) -> RuleCatalog:
        """Return a new catalog with additional (or replaced) entries."""
        return RuleCatalog({**self._rules, **(rules or {}), **named})


EMPTY_CATALOG = RuleCatalog()
