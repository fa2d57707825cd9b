"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses used by the card pipeline to represent its failure
modes: configuration and user input problems, recoverable row-level issues,
fatal render failures, and composition or archive failures. Using a
centralized hierarchy makes error handling and testing consistent.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'RENDER_ERROR'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging.
    transient : bool, optional
        Whether the error is temporary and may be retried.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.
    transient : bool
        True if the error is transient.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'}, transient=True)
    >>> e.code
    'CODE'
    """

    __slots__ = ("code", "message", "context", "transient")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing configuration or required assets."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(
            "CONFIGURATION_ERROR", message, context=context, transient=False
        )


class UserInputError(AppError):
    """Raised when user input (files, paths, session ids) is invalid."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("USER_INPUT_ERROR", message, context=context, transient=False)


class RowSkippedError(AppError):
    """Describes a single row that cannot be rendered.

    Never propagated out of a batch: the row is logged and skipped so the
    remaining rows still render.
    """

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("ROW_SKIPPED", message, context=context, transient=False)


class RenderError(AppError):
    """Raised when the rendering engine fails; aborts the remaining batch."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("RENDER_ERROR", message, context=context, transient=False)


class CompositionError(AppError):
    """Raised when the journal cannot be written."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        code: str = "COMPOSITION_ERROR",
    ) -> None:
        super().__init__(code, message, context=context, transient=False)


class CompositionInputError(CompositionError):
    """Raised when the working directory cannot be composed (no cards, bad asset)."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="COMPOSITION_INPUT_ERROR")


class ArchiveError(AppError):
    """Raised when the card archive cannot be built."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__("ARCHIVE_ERROR", message, context=context, transient=False)
