"""Type Descriptor Resolver

Declaration schema, representation/capability vocabularies, and the
resolver that turns declarations into TypeDescriptors.
"""
from .representation import Capability, Representation
from .models import Declaration, RuleSpec
from .descriptor import TypeDescriptor
from .resolver import parse_declaration, resolve, resolve_all
from .loader import load_declarations, parse_document

__all__ = [
    "Capability",
    "Representation",
    "Declaration",
    "RuleSpec",
    "TypeDescriptor",
    "resolve",
    "resolve_all",
    "parse_declaration",
    "load_declarations",
    "parse_document",
]
