"""Errors raised while converting between validation and generation schemas."""

from __future__ import annotations


class SchemaBridgeError(Exception):
    """Base class for schema conversion failures.

    ``path`` points at the offending node, e.g. ``$.questions[].choices``.
    """

    def __init__(self, message: str, path: str = "$") -> None:
        super().__init__(f"{message} (at {path})")
        self.path = path


class UnsupportedSchemaError(SchemaBridgeError):
    """Node kind or keyword outside the supported schema subset."""

    pass


class MalformedWrappingError(SchemaBridgeError):
    """Optional/nullable used somewhere other than a field or array element."""

    pass


class SchemaConsistencyError(SchemaBridgeError):
    """Schema contradicts itself (unknown required name, const of wrong type...)."""

    pass
