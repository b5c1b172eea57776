"""Strong Type Base Class

Every generated wrapper derives from StrongType. The base fixes the
instance layout (exactly one slot, ``_inner``) and the immutability and
copy/pickle semantics shared by all wrappers. Everything that depends on
the declaration is added by the generator.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Mapping

if TYPE_CHECKING:
    from strongtypes.declaration import Capability, TypeDescriptor


class StrongType:
    """Immutable wrapper around a single validated inner value."""
    __slots__ = ("_inner",)

    __descriptor__: ClassVar[TypeDescriptor]
    __adapters__: ClassVar[Mapping[Capability, Any]] = {}

    _inner: Any

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __copy__(self) -> StrongType: return self

    def __deepcopy__(self, memo: dict) -> StrongType: return self

    def __reduce__(self) -> tuple:
        # Unpickling goes back through the validating constructor
        return (type(self), (self._inner,))

    @classmethod
    def capabilities(cls) -> tuple[Capability, ...]: return cls.__descriptor__.capabilities
