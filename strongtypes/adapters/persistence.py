"""SQLAlchemy Persistence Adapter

Generates a TypeDecorator per wrapper so columns can be declared with the
strong type directly:

    class Account(Base):
        __tablename__ = "accounts"
        username: Mapped[Username] = mapped_column(Username.persistence.column_type())

Binding accepts wrapper instances only; loading goes back through the
validating constructor, so a corrupted row surfaces as DecodeError.
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import BigInteger, Boolean, Float, Integer, LargeBinary, Numeric, String, Text, Uuid
from sqlalchemy.types import TypeDecorator, TypeEngine

from strongtypes.core.errors import Err, Ok, Result
from strongtypes.declaration import Capability, Representation, TypeDescriptor
from strongtypes.errors import DecodeError
from strongtypes.generation import StrongType
from strongtypes.rules import Range

from .base import Adapter

SOURCE = "db"

_INT32 = (-(2 ** 31), 2 ** 31 - 1)


def _integer_impl(descriptor: TypeDescriptor) -> TypeEngine:
    """Integer when a top-level range fits in 32 bits, BigInteger otherwise."""
    for rule in descriptor.root.children:
        if isinstance(rule, Range) and rule.min is not None and rule.max is not None:
            if _INT32[0] <= rule.min and rule.max <= _INT32[1]: return Integer()
    return BigInteger()


def impl_for(descriptor: TypeDescriptor) -> TypeEngine:
    """Choose the underlying column type from the representation."""
    match descriptor.representation:
        case Representation.TEXT:
            return String(n) if (n := descriptor.max_length) is not None else Text()
        case Representation.INTEGER:
            return _integer_impl(descriptor)
        case Representation.FLOAT:
            return Float()
        case Representation.DECIMAL:
            return Numeric(asdecimal=True)
        case Representation.BOOLEAN:
            return Boolean()
        case Representation.BYTES:
            return LargeBinary(descriptor.max_length)
        case Representation.UUID:
            return Uuid(as_uuid=True)
    raise ValueError(f"no column type for {descriptor.representation}")


class StrongTypeColumn(TypeDecorator):
    """Base for generated column types. Subclasses set ``adapter`` and ``impl``."""
    impl = Text
    cache_ok = True

    adapter: SqlAlchemyAdapter

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(impl_for(self.adapter.descriptor))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        return self.adapter.encode(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        match self.adapter.decode(value):
            case Ok(instance):
                return instance
            case Err(error):
                raise error

    @property
    def python_type(self) -> type:
        return self.adapter.wrapper


class SqlAlchemyAdapter(Adapter):
    capability = Capability.PERSISTENCE
    attribute = "persistence"

    def __init__(self, descriptor: TypeDescriptor, wrapper: type[StrongType]):
        super().__init__(descriptor, wrapper)
        self.column_class: type[StrongTypeColumn] = type(
            f"{descriptor.name}Column",
            (StrongTypeColumn,),
            {"impl": type(impl_for(descriptor)), "cache_ok": True, "adapter": self, "__module__": wrapper.__module__},
        )

    def column_type(self) -> StrongTypeColumn:
        """A fresh TypeDecorator instance for mapped_column / Column."""
        return self.column_class()

    def encode(self, instance: Any) -> Any:
        """Unwrap for binding. Raw values are refused."""
        return self._require_instance(instance).inner

    def decode(self, db_value: Any) -> Result[StrongType, DecodeError]:
        """Rebuild a wrapper from a loaded column value, re-validating it."""
        match self.wrapper.new(db_value):
            case Ok(instance):
                return Ok(instance)
            case Err(error):
                return Err(DecodeError(self.type_name, source=SOURCE, cause=error))
