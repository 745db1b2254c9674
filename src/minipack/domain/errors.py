from __future__ import annotations

"""
Resolution Error Taxonomy.

Defines the exception hierarchy raised by the resolution engine. Each
class maps to one failure policy. Incomplete assets are downgraded to
warnings by their callers; every other error aborts the run.
"""

from typing import Optional


class MiniPackError(Exception):
    """
    Base class for every error raised by the resolution engine.

    Attributes:
        path: Offending filesystem path, when one is known.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigurationError(MiniPackError):
    """Entry or host document is missing or cannot be parsed."""


class IncompleteAssetError(MiniPackError):
    """
    A page or component lacks the companion files it requires.

    Recoverable: callers log a warning and drop the offending unit.

    Attributes:
        found: Companion files that do exist.
    """

    def __init__(self, message: str, path: Optional[str] = None, found: Optional[list] = None) -> None:
        super().__init__(message, path)
        self.found = list(found or [])


class InvariantViolationError(MiniPackError):
    """A caller broke the contract of a registry or classifier."""


class ResolutionFailure(MiniPackError):
    """
    The module resolver could not locate a requested file.

    Attributes:
        context: Directory the request was issued from.
        request: Raw request specifier.
    """

    def __init__(self, context: str, request: str, reason: str = "") -> None:
        message = f"Cannot resolve '{request}' from '{context}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, path=context)
        self.context = context
        self.request = request
