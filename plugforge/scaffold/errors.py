"""Errors raised by the scaffolding pipeline.

Filesystem failures are not wrapped: they surface as the ``OSError`` raised by
the failing call, which already carries the offending path.
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for scaffolding failures."""


class PreconditionError(ScaffoldError, ValueError):
    """Raised before any mutation when the requested operation cannot start."""


class InstallError(ScaffoldError):
    """The dependency installation command failed or timed out."""

    def __init__(self, message: str, returncode: int | None = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output
