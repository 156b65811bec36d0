from __future__ import annotations

from pathlib import Path
from typing import Any


class StoredDataError(Exception):
    """Base class for every error raised by stored_data."""


class SchemaDefinitionError(StoredDataError):
    """The schema definition itself is malformed (independent of any data)."""


class ParseError(StoredDataError):
    """The file content is not valid JSON."""

    def __init__(self, path: Path | str, message: str):
        super().__init__(f"Invalid JSON in file: {path}. {message}")
        self.path = str(path)


class ValidationError(StoredDataError):
    """
    A value does not conform to its schema.

    Attributes mirror the message so callers can react without parsing text:
      - path:     dotted/bracketed field path ("" for the root)
      - expected: schema base type ("string", "object", ...)
      - actual:   runtime type name of the offending value
      - value:    the offending value itself
    """

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        expected: str | None = None,
        actual: str | None = None,
        value: Any = None,
    ):
        super().__init__(message)
        self.path = path
        self.expected = expected
        self.actual = actual
        self.value = value

    def with_context(self, prefix: str) -> "ValidationError":
        return ValidationError(
            f"{prefix}: {self}",
            path=self.path,
            expected=self.expected,
            actual=self.actual,
            value=self.value,
        )
