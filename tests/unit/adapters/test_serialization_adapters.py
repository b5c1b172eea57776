"""Unit tests for JSON adapters and pydantic model integration."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from strongtypes.core.errors import Err, ErrorCode, Ok
from strongtypes.declaration import Capability
from strongtypes.define import define
from strongtypes.errors import DecodeError
from tests.conftest import port_declaration, username_declaration

Username = define(username_declaration())
Port = define(port_declaration())
Amount = define({"name": "Amount", "representation": "decimal",
    "rules": [{"kind": "range", "min": 0}], "capabilities": ["serialize", "deserialize"]})
Ratio = define({"name": "Ratio", "representation": "float",
    "rules": [{"kind": "range", "min": 0, "max": 1}], "capabilities": ["serialize", "deserialize"]})
Ident = define({"name": "Ident", "representation": "uuid", "capabilities": ["serialize", "deserialize"]})
Label = define({"name": "Label", "representation": "text",
    "rules": [{"kind": "non_empty"}], "capabilities": ["serialize"]})
Measure = define({"name": "Measure", "representation": "float", "capabilities": ["serialize", "deserialize"]})
Passphrase = define({"name": "Passphrase", "representation": "text",
    "rules": [{"kind": "length", "min": 12}], "capabilities": ["sensitive", "deserialize"]})


class Account(BaseModel):
    username: Username
    label: Label | None = None


class Credentials(BaseModel):
    model_config = ConfigDict(hide_input_in_errors=True)

    passphrase: Passphrase


def test_adapters_emitted_only_when_requested() -> None:
    assert set(Username.__adapters__) == {Capability.SERIALIZE, Capability.DESERIALIZE}
    assert len(Port.__adapters__) == 0
    assert not hasattr(Port, "json_encoder")
    assert not hasattr(Port, "json_decoder")
    assert not hasattr(Port, "__get_pydantic_core_schema__")
    assert not hasattr(Label, "json_decoder")


def test_encode_and_dumps() -> None:
    user = Username("valid_user1")
    assert Username.json_encoder.encode(user) == "valid_user1"
    assert Username.json_encoder.dumps(user) == '"valid_user1"'
    assert Amount.json_encoder.encode(Amount(Decimal("12.50"))) == "12.50"
    assert Ident.json_encoder.encode(Ident(UUID(int=5))) == str(UUID(int=5))


def test_encode_refuses_raw_values() -> None:
    with pytest.raises(TypeError):
        Username.json_encoder.encode("valid_user1")


def test_decode_routes_through_validating_constructor() -> None:
    error = Username.json_decoder.decode("bad name!").unwrap_err()
    assert isinstance(error, DecodeError)
    assert error.code is ErrorCode.E3001_DECODE_INVALID_VALUE
    assert error.validation_error is not None
    assert error.validation_error.rule_kind == "charset"


def test_decode_rejects_wrong_json_type() -> None:
    error = Username.json_decoder.decode(12345).unwrap_err()
    assert error.code is ErrorCode.E3002_DECODE_MALFORMED_INPUT
    assert error.validation_error is None
    assert error.to_dict()["source"] == "json"


def test_loads_rejects_malformed_json() -> None:
    error = Username.json_decoder.loads('{"unterminated"').unwrap_err()
    assert error.code is ErrorCode.E3002_DECODE_MALFORMED_INPUT


def test_lax_representations_accept_json_forms() -> None:
    assert Amount.json_decoder.decode("12.50").unwrap() == Amount(Decimal("12.50"))
    assert Ratio.json_decoder.decode(1).unwrap() == Ratio(1.0)
    assert Ident.json_decoder.loads(f'"{UUID(int=9)}"').unwrap() == Ident(UUID(int=9))
    assert Amount.json_decoder.decode("-1").is_err()


@given(st.decimals(min_value=0, max_value=10**6, places=2, allow_nan=False, allow_infinity=False))
def test_decimal_round_trip(value: Decimal) -> None:
    amount = Amount(value)
    assert Amount.json_decoder.loads(Amount.json_encoder.dumps(amount)).unwrap() == amount


@given(st.floats(min_value=0, max_value=1, allow_nan=False))
def test_float_round_trip(value: float) -> None:
    ratio = Ratio(value)
    assert Ratio.json_decoder.decode(Ratio.json_encoder.encode(ratio)).unwrap() == ratio


def test_pydantic_model_field_validates_and_serializes() -> None:
    account = Account(username="valid_user1")
    assert account.username == Username("valid_user1")
    assert account.model_dump() == {"username": "valid_user1", "label": None}
    assert Account.model_validate_json(account.model_dump_json()) == account

    with pytest.raises(PydanticValidationError):
        Account(username="ab")
    with pytest.raises(PydanticValidationError):
        Account(username=42)


def test_pydantic_field_accepts_existing_instances() -> None:
    account = Account(username=Username("valid_user1"), label=Label("staff"))
    assert account.label == Label("staff")
    assert account.model_dump()["label"] == "staff"


def test_serialize_only_field_rejects_raw_values() -> None:
    with pytest.raises(PydanticValidationError):
        Account(username="valid_user1", label="staff")


def test_json_schema_carries_rule_constraints() -> None:
    schema = Account.model_json_schema()
    username = schema["properties"]["username"]
    assert username["type"] == "string"
    assert username["minLength"] == 3
    assert username["maxLength"] == 16


def test_float_decoding_refuses_booleans_and_strings() -> None:
    assert Ratio.json_decoder.decode(True).is_err()
    assert Ratio.json_decoder.decode("0.5").is_err()
    assert Ratio.json_decoder.loads("true").unwrap_err().code is ErrorCode.E3002_DECODE_MALFORMED_INPUT
    assert Ratio.json_decoder.loads("0.25").unwrap() == Ratio(0.25)


@given(st.floats())
def test_unbounded_float_round_trip(value: float) -> None:
    match Measure.new(value):
        case Ok(measure):
            assert Measure.json_decoder.decode(Measure.json_encoder.encode(measure)) == Ok(measure)
        case Err(error):
            assert error.code is ErrorCode.E2002_REPRESENTATION_MISMATCH
            assert value != value or value in (float("inf"), float("-inf"))


def test_sensitive_field_errors_do_not_echo_input() -> None:
    with pytest.raises(PydanticValidationError) as exc_info:
        Credentials(passphrase="hunter2-pw")
    assert "hunter2-pw" not in str(exc_info.value)
    errors = exc_info.value.errors()
    assert len(errors) == 1
    assert errors[0]["type"] == "strong_type_violation"
    assert "hunter2-pw" not in errors[0]["msg"]

    with pytest.raises(PydanticValidationError) as exc_info:
        Credentials.model_validate_json('{"passphrase": "hunter2-pw"}')
    assert "hunter2-pw" not in str(exc_info.value)


def test_sensitive_field_accepts_valid_values() -> None:
    assert Credentials(passphrase="correct-horse-battery").passphrase == Passphrase("correct-horse-battery")
    existing = Passphrase("correct-horse-battery")
    assert Credentials(passphrase=existing).passphrase is existing
    loaded = Credentials.model_validate_json('{"passphrase": "correct-horse-battery"}')
    assert loaded.passphrase == existing
