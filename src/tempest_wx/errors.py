"""
tempest-wx error types.

Decode failures are local and recoverable: ``classify_and_decode`` returns
them as values, ``decode`` raises them.
"""

from typing import Any, Optional


class TempestError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class DecodeError(TempestError):
    """Base for every envelope decode failure."""

    def __init__(self, code: str, message: str, path: Optional[str] = None):
        super().__init__(code, message, {"path": path} if path else None)

    @property
    def path(self) -> Optional[str]:
        return (self.details or {}).get("path")


class Malformed(DecodeError):
    def __init__(self, reason: str):
        super().__init__("malformed", f"malformed envelope: {reason}")
        self.reason = reason


class MissingDiscriminator(DecodeError):
    def __init__(self) -> None:
        super().__init__("missing_discriminator", "envelope has no 'type' field")


class MissingField(DecodeError):
    def __init__(self, name: str, path: Optional[str] = None):
        super().__init__("missing_field", f"missing required field '{name}'", path)
        self.name = name


class TypeMismatch(DecodeError):
    def __init__(self, name: str, expected: str, actual: str, path: Optional[str] = None):
        super().__init__("type_mismatch", f"field '{name}': expected {expected}, got {actual}", path)
        self.name = name
        self.expected = expected
        self.actual = actual


class ArityTooSmall(DecodeError):
    def __init__(self, minimum: int, actual: int, path: Optional[str] = None):
        where = f" in '{path}'" if path else ""
        super().__init__("arity_too_small", f"array{where} has {actual} elements, needs at least {minimum}", path)
        self.minimum = minimum
        self.actual = actual


class TransportError(TempestError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("transport_error", message, details)
