"""Construction & Behavior Generator

Usage:
    from strongtypes.declaration import resolve
    from strongtypes.generation import generate_wrapper

    Port = generate_wrapper(resolve(decl).unwrap())
    Port(8080).inner  # 8080
"""
from .base import StrongType
from .generator import WrapperBuilder, check_value, generate_wrapper

__all__ = ["StrongType", "WrapperBuilder", "check_value", "generate_wrapper"]
