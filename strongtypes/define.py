"""Definition Facade

One call from declaration to finished wrapper: resolve, generate, emit.
Declaration problems raise DeclarationError here, at definition time,
before any wrapper exists.

Usage:
    Username = define({
        "name": "Username",
        "representation": "text",
        "rules": [{"kind": "length", "min": 3, "max": 16},
                  {"kind": "charset", "classes": ["alnum", "underscore"]}],
        "capabilities": ["serialize", "deserialize", "display"],
    })
"""
from __future__ import annotations

import sys
from collections.abc import Iterable, Mapping
from pathlib import Path

from strongtypes.adapters import emit_adapters
from strongtypes.declaration import TypeDescriptor, load_declarations, resolve, resolve_all
from strongtypes.declaration.resolver import DeclarationInput
from strongtypes.generation import StrongType, generate_wrapper
from strongtypes.rules import Rule


def _caller_module(depth: int = 2) -> str | None:
    # Same trick as collections.namedtuple: wrappers pickle by reference to the defining module
    try:
        return sys._getframe(depth).f_globals.get("__name__")
    except (AttributeError, ValueError):
        return None


def build(descriptor: TypeDescriptor, module: str | None = None) -> type[StrongType]:
    """Generate the wrapper for an already-resolved descriptor and emit its adapters."""
    wrapper = generate_wrapper(descriptor, module)
    emit_adapters(descriptor, wrapper)
    return wrapper


def define(
    declaration: DeclarationInput, catalog: Mapping[str, Rule] | None = None, *, module: str | None = None
) -> type[StrongType]:
    """Define one strong type. Raises DeclarationError."""
    descriptor = resolve(declaration, catalog).unwrap()
    return build(descriptor, module or _caller_module())


def define_all(
    declarations: Iterable[DeclarationInput], catalog: Mapping[str, Rule] | None = None, *, module: str | None = None
) -> dict[str, type[StrongType]]:
    """Define a generation unit. Nothing is generated unless every declaration resolves."""
    descriptors = resolve_all(declarations, catalog).unwrap()
    module = module or _caller_module()
    return {d.name: build(d, module) for d in descriptors}


def define_from_file(
    path: str | Path, catalog: Mapping[str, Rule] | None = None, *, module: str | None = None
) -> dict[str, type[StrongType]]:
    """Load a YAML/JSON declaration document and define every type in it."""
    return define_all(load_declarations(path), catalog, module=module or _caller_module())
