"""Exceptions raised while planning a feature selection."""

from __future__ import annotations


class DocfeatError(Exception):
    """Base exception for all docfeat errors."""

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class InvalidPatternError(DocfeatError, ValueError):
    """Raised when a regular expression pattern does not compile."""

    def __init__(self, pattern: str, reason: str | None = None):
        message = f"invalid regex pattern {pattern!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message, hint="use match_mode='fixed' to match the string literally")
        self.pattern = pattern


class UnsupportedTypeError(DocfeatError, TypeError):
    """Raised when a matrix or pattern source has an unrecognized shape."""

    def __init__(self, value: object, operation: str, expected: str | None = None):
        type_name = type(value).__name__
        super().__init__(
            f"{operation} does not accept an object of type {type_name}",
            hint=f"expected {expected}" if expected else None,
        )
        self.type_name = type_name
        self.operation = operation


class ConflictingArgumentError(DocfeatError, ValueError):
    """Raised when mutually exclusive options are supplied together."""

    def __init__(self, argument: str, operation: str):
        super().__init__(f"{operation}() cannot include the {argument!r} argument")
        self.argument = argument
        self.operation = operation
