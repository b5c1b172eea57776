"""Capability Adapter Emitter

Only the emitter is imported eagerly. Adapter implementations live in
``serialization`` (pydantic) and ``persistence`` (SQLAlchemy) and are
loaded the first time a declaration requests them.
"""
from .base import Adapter
from .emitter import ADAPTER_REGISTRY, emit_adapters

__all__ = ["Adapter", "ADAPTER_REGISTRY", "emit_adapters"]
