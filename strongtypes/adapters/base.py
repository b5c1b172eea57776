"""Adapter Base

An adapter bridges one generated wrapper to one external ecosystem. It is
created once per (wrapper, capability) at definition time and attached to
the wrapper class under ``attribute``.
"""
from __future__ import annotations

from abc import ABC
from typing import ClassVar

from strongtypes.declaration import Capability, TypeDescriptor
from strongtypes.generation import StrongType


class Adapter(ABC):
    capability: ClassVar[Capability]
    attribute: ClassVar[str]

    def __init__(self, descriptor: TypeDescriptor, wrapper: type[StrongType]):
        self.descriptor = descriptor
        self.wrapper = wrapper

    @property
    def type_name(self) -> str: return self.descriptor.name

    def _require_instance(self, instance: object) -> StrongType:
        if not isinstance(instance, self.wrapper):
            raise TypeError(f"{self.attribute} for {self.type_name} expects a {self.type_name} instance, "
                f"got {type(instance).__name__}")
        return instance

    def __repr__(self) -> str: return f"{type(self).__name__}({self.type_name})"
