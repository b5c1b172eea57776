"""Declaration Documents

Load declarations from YAML or JSON. A document is either a list of
declarations or a mapping with a top-level ``types`` list:

    types:
      - name: Username
        representation: text
        rules:
          - {kind: length, min: 3, max: 16}
          - {kind: charset, classes: [alnum, underscore]}
        capabilities: [serialize, deserialize, display]

Predicates cannot be expressed in a document; reference them from a rule
catalog with ``{kind: ref, name: ...}`` instead.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from strongtypes.errors import MalformedDeclarationError

from .models import Declaration
from .resolver import parse_declaration


def load_declarations(path: str | Path) -> list[Declaration]:
    """Read and validate a declaration document. Raises MalformedDeclarationError."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise MalformedDeclarationError(f"cannot read declaration file {path}: {e}") from e
    try:
        document = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise MalformedDeclarationError(f"cannot parse declaration file {path}: {e}") from e
    return parse_document(document)


def parse_document(document: Any) -> list[Declaration]:
    """Validate an already-parsed declaration document."""
    if isinstance(document, dict):
        if "types" not in document:
            raise MalformedDeclarationError("declaration document has no top-level 'types' list")
        document = document["types"]
    if document is None: return []
    if not isinstance(document, list):
        raise MalformedDeclarationError(f"expected a list of declarations, got {type(document).__name__}")
    return [parse_declaration(item) for item in document]
