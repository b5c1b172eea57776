"""Monadic Error Handling System

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Structured error view with full context
- ErrorCode: Hierarchical error code taxonomy

Usage:
    from strongtypes.core.errors import Ok, Err, Result

    match Username.new(raw):
        case Ok(username):
            greet(username)
        case Err(error):
            report(error.to_dict())
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
]
