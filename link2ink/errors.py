# -*- coding: utf-8 -*-
"""Exception hierarchy for Link2Ink.

Every asynchronous failure is caught by the component that issued the call:

- ProbeError: capability check unreachable, gate degrades to LOCKED
- GenerationError: surfaced verbatim as a short inline message
- AuthorizationError: a GenerationError that also re-locks the session gate
- StorageError: caught at the history store boundary and logged
- InputValidationError: request never dispatched
"""


class Link2InkError(Exception):
    """Base class for all Link2Ink errors."""


class ProbeError(Link2InkError):
    """The capability probe could not be reached or failed."""


class GenerationError(Link2InkError):
    """The generation service failed. The message is user-facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(GenerationError):
    """The generation service rejected the current credentials."""


class StorageError(Link2InkError):
    """A storage backend read or write failed (including quota exceeded)."""


class InputValidationError(Link2InkError):
    """A required form field is missing or empty."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.message = message
        self.field = field


class GateTransitionError(Link2InkError):
    """An invalid session gate transition was requested."""


class ExportError(Link2InkError):
    """Saving artifacts to disk failed, or there was nothing to save."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
