"""JSON Serialization Adapters

Bridges wrappers to pydantic:
- JsonEncodeAdapter: wrapper -> JSON-compatible value / JSON text
- JsonDecodeAdapter: JSON value / text -> Result[wrapper, DecodeError]
- install_pydantic_hooks: lets wrappers be used as pydantic model fields

Encoding never re-validates: a wrapper instance is valid by construction.
Decoding always goes through the validating constructor.
"""
from __future__ import annotations

from typing import Any, Callable

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import CoreSchema, PydanticCustomError, core_schema, from_json, to_json, to_jsonable_python

from strongtypes.core.errors import Err, Ok, Result
from strongtypes.declaration import Capability, Representation, TypeDescriptor
from strongtypes.errors import DecodeError
from strongtypes.generation import StrongType

from .base import Adapter

SOURCE = "json"

_INNER_SCHEMAS: dict[Representation, Callable[[], CoreSchema]] = {
    Representation.TEXT: lambda: core_schema.str_schema(strict=True),
    Representation.INTEGER: lambda: core_schema.int_schema(strict=True),
    Representation.FLOAT: lambda: core_schema.float_schema(strict=True),
    Representation.DECIMAL: lambda: core_schema.decimal_schema(),
    Representation.BOOLEAN: lambda: core_schema.bool_schema(strict=True),
    Representation.UUID: lambda: core_schema.uuid_schema(),
}


def inner_schema(representation: Representation) -> CoreSchema:
    """Core schema for the inner value. Strictness follows Representation.strict_decode."""
    return _INNER_SCHEMAS[representation]()


class JsonEncodeAdapter(Adapter):
    capability = Capability.SERIALIZE
    attribute = "json_encoder"

    def encode(self, instance: StrongType) -> Any:
        """Return the JSON-compatible form of the inner value."""
        return to_jsonable_python(self._require_instance(instance).inner)

    def dumps(self, instance: StrongType) -> str:
        return to_json(self._require_instance(instance).inner).decode()


class JsonDecodeAdapter(Adapter):
    capability = Capability.DESERIALIZE
    attribute = "json_decoder"

    def __init__(self, descriptor: TypeDescriptor, wrapper: type[StrongType]):
        super().__init__(descriptor, wrapper)
        self._strict = descriptor.representation.strict_decode
        self._type_adapter = TypeAdapter(descriptor.representation.python_type)

    def decode(self, data: Any) -> Result[StrongType, DecodeError]:
        """Decode a JSON-compatible value (as produced by ``json.loads``)."""
        try:
            value = self._type_adapter.validate_python(data, strict=self._strict)
        except PydanticValidationError as e:
            return Err(DecodeError(self.type_name, source=SOURCE, cause=e,
                detail=f"expected {self.descriptor.representation.value}"))
        match self.wrapper.new(value):
            case Ok(instance):
                return Ok(instance)
            case Err(error):
                return Err(DecodeError(self.type_name, source=SOURCE, cause=error))

    def loads(self, text: str | bytes) -> Result[StrongType, DecodeError]:
        """Decode JSON text."""
        try:
            data = from_json(text)
        except ValueError as e:
            return Err(DecodeError(self.type_name, source=SOURCE, cause=e))
        return self.decode(data)


# ============================================================================
# Pydantic Integration
# ============================================================================

def install_pydantic_hooks(descriptor: TypeDescriptor, wrapper: type[StrongType]) -> None:
    """Attach __get_pydantic_core_schema__ / __get_pydantic_json_schema__ to the wrapper.

    - deserialize: raw inner values validate through the constructor
    - serialize: instances dump as their inner value
    Without deserialize, fields only accept existing instances.

    Sensitive types validate in a single step and report a redacted message,
    so each failure yields exactly one error. Pydantic still records the raw
    input on that error; models holding sensitive strong types should set
    ``hide_input_in_errors=True``.
    """
    validates = descriptor.has(Capability.DESERIALIZE)
    serializes = descriptor.has(Capability.SERIALIZE)

    def _construct(value: Any) -> StrongType:
        match wrapper.new(value):
            case Ok(instance):
                return instance
            case Err(error):
                raise ValueError(error.message)

    def _construct_redacted(value: Any) -> StrongType:
        match wrapper.new(value):
            case Ok(instance):
                return instance
            case Err(error):
                raise PydanticCustomError("strong_type_violation", "{reason}", {"reason": error.message})

    def _accept_redacted(value: Any) -> StrongType:
        return value if isinstance(value, wrapper) else _construct_redacted(value)

    def _validation_schemas(instance_schema: CoreSchema) -> tuple[CoreSchema, CoreSchema]:
        """(json, python) validation schemas for a type that accepts raw values."""
        if descriptor.sensitive:
            return (
                core_schema.chain_schema([
                    inner_schema(descriptor.representation),
                    core_schema.no_info_plain_validator_function(_construct_redacted),
                ]),
                core_schema.no_info_plain_validator_function(_accept_redacted),
            )
        from_inner = core_schema.no_info_after_validator_function(_construct, inner_schema(descriptor.representation))
        return from_inner, core_schema.union_schema([instance_schema, from_inner])

    def __get_pydantic_core_schema__(cls: type[StrongType], source_type: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        instance_schema = core_schema.is_instance_schema(cls)
        serialization = (core_schema.plain_serializer_function_ser_schema(
            lambda v: v.inner, return_schema=inner_schema(descriptor.representation)) if serializes else None)
        if not validates:
            return core_schema.json_or_python_schema(
                json_schema=instance_schema, python_schema=instance_schema, serialization=serialization)
        json_schema, python_schema = _validation_schemas(instance_schema)
        return core_schema.json_or_python_schema(
            json_schema=json_schema,
            python_schema=python_schema,
            serialization=serialization,
        )

    def __get_pydantic_json_schema__(cls: type[StrongType], schema: CoreSchema, handler: GetJsonSchemaHandler) -> JsonSchemaValue:
        json_schema = {**handler(inner_schema(descriptor.representation)), **descriptor.root.json_schema()}
        json_schema["title"] = descriptor.name
        if descriptor.doc: json_schema["description"] = descriptor.doc
        return json_schema

    wrapper.__get_pydantic_core_schema__ = classmethod(__get_pydantic_core_schema__)  # type: ignore[attr-defined]
    wrapper.__get_pydantic_json_schema__ = classmethod(__get_pydantic_json_schema__)  # type: ignore[attr-defined]
