"""Capability Adapter Emitter

Emits exactly the adapters a descriptor requests, in capability order.
Adapter modules are imported on demand, so a type that never asks for
persistence never imports SQLAlchemy.
"""
from __future__ import annotations

import importlib
from types import MappingProxyType
from typing import Mapping

from strongtypes.core.logging import adapter_logger
from strongtypes.declaration import Capability, TypeDescriptor
from strongtypes.generation import StrongType

from .base import Adapter

log = adapter_logger()

ADAPTER_REGISTRY: dict[Capability, tuple[str, str]] = {
    Capability.SERIALIZE: ("strongtypes.adapters.serialization", "JsonEncodeAdapter"),
    Capability.DESERIALIZE: ("strongtypes.adapters.serialization", "JsonDecodeAdapter"),
    Capability.PERSISTENCE: ("strongtypes.adapters.persistence", "SqlAlchemyAdapter"),
}

_PYDANTIC_CAPABILITIES = frozenset({Capability.SERIALIZE, Capability.DESERIALIZE})


def _load(capability: Capability) -> type[Adapter]:
    module_name, class_name = ADAPTER_REGISTRY[capability]
    return getattr(importlib.import_module(module_name), class_name)


def emit_adapters(descriptor: TypeDescriptor, wrapper: type[StrongType]) -> Mapping[Capability, Adapter]:
    """Create and attach the requested adapters. Returns them keyed by capability."""
    adapters: dict[Capability, Adapter] = {}
    for capability in descriptor.capabilities:
        if capability not in ADAPTER_REGISTRY: continue
        adapter_cls = _load(capability)
        adapter = adapter_cls(descriptor, wrapper)
        setattr(wrapper, adapter_cls.attribute, adapter)
        adapters[capability] = adapter
        log.info("adapter_emitted", name=descriptor.name, capability=capability.value, adapter=adapter_cls.__name__)

    if _PYDANTIC_CAPABILITIES.intersection(descriptor.capabilities):
        from .serialization import install_pydantic_hooks
        install_pydantic_hooks(descriptor, wrapper)

    wrapper.__adapters__ = MappingProxyType(adapters)
    return wrapper.__adapters__
