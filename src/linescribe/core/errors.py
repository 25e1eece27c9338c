#!/usr/bin/env python3
"""
LINESCRIBE ERRORS
-----------------
Exception taxonomy for the scanners.

ScriptError and its children are reportable: they point at a line the
script author can fix. UnrecoverableError means a defect inside LineScribe
itself; only the CLI decides to turn it into a process exit.

Author: LineScribe Team
Date: 2026-10-19
"""

from typing import Optional


class ScriptError(Exception):
    """Base class for every error a script author can act on."""
    pass


class ScriptResourceNotFound(ScriptError, FileNotFoundError):
    """An included or referenced file/object does not exist."""

    def __init__(self, reference: str, state: Optional[str] = None):
        self.reference = reference
        self.state = state
        message = f"Resource not found: '{reference}'"
        if state:
            message += f" (referenced from {state})"
        super().__init__(message)


class ScannerStateError(ScriptError):
    """The cursor was asked for a line it does not have."""
    pass


class MacroError(ScriptError):
    """Raised by a macro evaluator; the scanners never interpret it."""
    pass


class PropertiesFormatError(ScriptError):
    """A record in a properties file is not a key=value pair."""
    pass


class UnrecoverableError(Exception):
    """A defect in LineScribe (e.g. a malformed internal pattern)."""
    pass


class BuiltinMismatchError(UnrecoverableError):
    """A line classified as a built-in failed to re-match when executed."""
    pass
