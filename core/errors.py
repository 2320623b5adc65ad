"""
Errors raised by the vocabulary core.
"""

from __future__ import annotations


class VocabularyError(Exception):
    """Base class for vocabulary store failures."""


class SchemaVersionMismatch(VocabularyError, ValueError):
    """A serialized card carries a version tag this build cannot read."""

    def __init__(self, version: object, supported: int):
        self.version = version
        self.supported = supported
        super().__init__(
            f"unknown card serialization version: {version!r} (supported: {supported})"
        )


class DuplicateItem(VocabularyError, LookupError):
    """An item with the same text already exists."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"word already exists: {text}")


class ItemNotFound(VocabularyError, LookupError):
    """No item with the given text exists."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"word not found: {text}")
