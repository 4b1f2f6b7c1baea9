"""
errors.py — Error taxonomy for the pipeline.

Fatal conditions raise a GapdataError subclass and abort the run.
Non-fatal conditions are warnings: they are issued with warnings.warn
(so callers and tests can observe them) and the run continues with the
condition reflected in the data.
"""

from __future__ import annotations

from pathlib import Path


class GapdataError(Exception):
    """Base class for errors that abort a pipeline run."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class SourceReadError(GapdataError):
    """A source table is missing, unreadable or structurally malformed."""


class ExportWriteError(GapdataError):
    """The export destination cannot be created or written."""


class ResolutionGap(UserWarning):
    """One or more countries could not be placed on a continent."""


class JoinCardinalityWarning(UserWarning):
    """A right-hand join table has duplicate (country, year) keys."""
