"""Typed failures surfaced by AI extraction services."""

from __future__ import annotations


class LabelExtractError(Exception):
    """Base class for every extraction failure."""


class ConfigurationError(LabelExtractError):
    """A required setting (the API key) is missing; raised before any network call."""


class ServiceError(LabelExtractError):
    """The inference provider failed at the transport or service level."""

    def __init__(self, message: str, *, cause: BaseException) -> None:
        super().__init__(message)
        self.cause = cause


class ResponseFormatError(LabelExtractError):
    """The provider answered, but the text is not valid JSON of the expected shape."""

    def __init__(self, message: str, *, raw_text: str) -> None:
        super().__init__(message)
        self.raw_text = raw_text
