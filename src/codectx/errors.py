"""Exception hierarchy for codectx."""

from __future__ import annotations


class CodeContextError(Exception):
    """Base class for codectx errors."""


class ContextBuildError(CodeContextError):
    """Context assembly could not run at all."""


class FileReadError(CodeContextError, OSError):
    """A referenced file exists but its content could not be read."""
