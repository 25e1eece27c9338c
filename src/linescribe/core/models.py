#!/usr/bin/env python3
"""
LINESCRIBE CORE MODELS
----------------------
Defines the fundamental data structures used across the LineScribe scanners.
These models represent the lowest level of script abstraction.

Author: LineScribe Team
Date: 2026-10-19
"""

from dataclasses import dataclass
from enum import Enum

# Reserved registry labels
GLOBAL_VARIABLES = "GLOBAL.VARIABLES"
SYSTEM_ENV = "System.env"


@dataclass(frozen=True)
class Line:
    """
    The atomic unit of a script.

    A Line is a single cleaned, non-empty, non-comment line that survived
    ingestion, tagged with where it came from in the raw text.
    """
    line_no: int    # The original 1-based line number in the source
    text: str       # The cleaned text (comments stripped, optionally trimmed)


@dataclass
class ScanOptions:
    """
    Ingestion flags shared by a scanner and every scanner it spawns.
    """
    trim: bool = True       # Strip leading/trailing whitespace (fatal for YAML bodies)
    compress: bool = True   # Replace runs of whitespace with a single space
    verbose: bool = False   # Per-line DEBUG tracing


class CommandType(Enum):
    """The closed set of command variants the BatchGrammar can assign to a line."""
    MAKE_NEW_ROOT = "makeNewRoot"
    BATCH = "batch"
    FOREACH = "foreach"
    END = "end"
    PROPERTIES = "properties"
    SET_PROPERTY = "setProperty"
    PRINT = "print"
    SAVE_TO = "saveTo"
    USE_AS_INPUT = "useAsInput"
    SLEEP = "sleep"
    ORDINARY = "ordinary"
