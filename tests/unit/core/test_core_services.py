"""Unit tests for ambient core services: Result monad, error taxonomy, settings, logging."""

from __future__ import annotations

import logging

import pytest
import structlog

from strongtypes.core.config import Settings
from strongtypes.core.errors import AppError, Err, ErrorCode, Ok
from strongtypes.core.logging import (
    LoggerRegistry,
    _add_library_info,
    _censor_sensitive_keys,
    configure_logging,
)
from strongtypes.define import define
from strongtypes.errors import DecodeError, ValidationError
from tests.conftest import port_declaration


def _validation_error(**overrides: object) -> ValidationError:
    kwargs: dict = {"rule_kind": "length", "constraint": "length[3,16]", "value": "ab", "rule_path": (0,)}
    kwargs.update(overrides)
    return ValidationError("Username", **kwargs)


def test_result_combinators() -> None:
    assert Ok(2).map(lambda v: v * 2) == Ok(4)
    assert Err("x").map(lambda v: v * 2) == Err("x")
    assert Ok(2).and_then(lambda v: Err(f"bad {v}")) == Err("bad 2")
    assert Err("x").map_err(str.upper) == Err("X")
    assert Ok(1).unwrap_or(5) == 1
    assert Err("x").unwrap_or(5) == 5
    assert Ok(3).match(ok=lambda v: v + 1, err=lambda e: -1) == 4


def test_err_unwrap_reraises_exceptions() -> None:
    error = _validation_error()
    with pytest.raises(ValidationError) as exc_info:
        Err(error).unwrap()
    assert exc_info.value is error
    with pytest.raises(ValueError):
        Err("plain").unwrap()
    with pytest.raises(ValueError):
        Ok(1).unwrap_err()


@pytest.mark.parametrize(
    ("code", "category", "recoverable"),
    [
        (ErrorCode.E1001_MALFORMED_DECLARATION, "declaration", False),
        (ErrorCode.E2001_RULE_VIOLATED, "validation", True),
        (ErrorCode.E3002_DECODE_MALFORMED_INPUT, "decode", True),
        (ErrorCode.E9000_INTERNAL_GENERIC, "internal", False),
    ],
)
def test_error_code_taxonomy(code: ErrorCode, category: str, recoverable: bool) -> None:
    assert code.category == category
    assert code.recoverable is recoverable


def test_validation_error_structured_views() -> None:
    error = _validation_error(rule_label="MinLen")
    assert error.to_dict() == {
        "code": "E2001_RULE_VIOLATED",
        "message": error.message,
        "type_name": "Username",
        "rule_path": [0],
        "rule_kind": "length",
        "constraint": "length[3,16]",
        "redacted": False,
        "rule_label": "MinLen",
        "value": "ab",
    }
    assert "MinLen" in error.message
    app_error = error.to_app_error()
    assert isinstance(app_error, AppError)
    assert app_error.cause is error
    assert app_error.to_dict()["error"]["category"] == "validation"
    assert app_error.with_metadata(request="r1").metadata["request"] == "r1"


def test_decode_error_wraps_cause() -> None:
    cause = _validation_error()
    error = DecodeError("Username", source="json", cause=cause)
    assert error.code is ErrorCode.E3001_DECODE_INVALID_VALUE
    assert error.__cause__ is cause
    assert error.to_dict()["validation"]["rule_kind"] == "length"

    malformed = DecodeError("Username", source="db", cause=ValueError("boom"))
    assert malformed.code is ErrorCode.E3002_DECODE_MALFORMED_INPUT
    assert malformed.to_dict()["cause"] == "ValueError"


def test_settings_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STRONGTYPES_ALLOW_UNCHECKED", "false")
    monkeypatch.setenv("STRONGTYPES_REDACTION_PLACEHOLDER", "***")
    monkeypatch.setenv("STRONGTYPES_MAX_ECHO_LENGTH", "10")
    settings = Settings()
    assert settings.ALLOW_UNCHECKED is False
    assert settings.REDACTION_PLACEHOLDER == "***"
    assert settings.MAX_ECHO_LENGTH == 10
    assert settings.LOG_LEVEL == "INFO"


def test_censor_processor_redacts_nested_sensitive_keys() -> None:
    event = {"event": "x", "value": "secret", "context": {"token": "t", "name": "Port"}, "items": [{"inner": 1}]}
    censored = _censor_sensitive_keys(None, "info", event)  # type: ignore[arg-type]
    assert censored["value"] == "[REDACTED]"
    assert censored["context"] == {"token": "[REDACTED]", "name": "Port"}
    assert censored["items"] == [{"inner": "[REDACTED]"}]
    assert censored["event"] == "x"


def test_library_info_processor() -> None:
    event = _add_library_info(None, "info", {"event": "x"})  # type: ignore[arg-type]
    assert event["library"] == "strongtypes"
    assert event["version"]


def test_logger_registry_caches_domain_loggers() -> None:
    assert LoggerRegistry.get("resolver") is LoggerRegistry.get("resolver")


def test_configure_logging_installs_library_handler() -> None:
    library_logger = logging.getLogger("strongtypes")
    saved = (list(library_logger.handlers), library_logger.level, library_logger.propagate)
    try:
        configure_logging("DEBUG", json_logs=True)
        assert len(library_logger.handlers) == 1
        assert library_logger.level == logging.DEBUG
        assert library_logger.propagate is False
    finally:
        library_logger.handlers, library_logger.level, library_logger.propagate = saved
        structlog.reset_defaults()


def test_definitions_are_silent_until_logging_is_configured(capsys: pytest.CaptureFixture[str]) -> None:
    define(port_declaration(name="QuietPort", capabilities=["serialize"]))
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
