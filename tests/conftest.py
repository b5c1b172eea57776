"""Shared declaration fixtures."""

from __future__ import annotations

from typing import Any

import pytest


def username_declaration(**overrides: Any) -> dict[str, Any]:
    declaration: dict[str, Any] = {
        "name": "Username",
        "representation": "text",
        "rules": [
            {"kind": "length", "min": 3, "max": 16},
            {"kind": "charset", "classes": ["alnum", "underscore"]},
        ],
        "capabilities": ["serialize", "deserialize", "display"],
    }
    declaration.update(overrides)
    return declaration


def port_declaration(**overrides: Any) -> dict[str, Any]:
    declaration: dict[str, Any] = {
        "name": "Port",
        "representation": "int",
        "rules": [{"kind": "range", "min": 1, "max": 65535}],
    }
    declaration.update(overrides)
    return declaration


@pytest.fixture
def username_decl() -> dict[str, Any]:
    return username_declaration()


@pytest.fixture
def port_decl() -> dict[str, Any]:
    return port_declaration()
