#!/usr/bin/env python3
"""
LINESCRIBE GRAMMAR PATTERNS - The Rulebook
------------------------------------------
The single regex table shared by the executing scanners (which run and hide
built-ins) and the BatchGrammar (which only classifies lines).

Group layout is part of the contract: group 1 is always the first payload,
group 2 (where present) the right-hand side of a 'k=v' form.

Author: LineScribe Team
Date: 2026-10-19
"""

import re
from typing import Pattern, Tuple

from linescribe.core.errors import UnrecoverableError


def compile_pattern(expression: str, flags: int = 0) -> Pattern:
    """
    Compiles an internal pattern. A failure here is a LineScribe bug, never
    a user mistake, so it surfaces as UnrecoverableError.
    """
    try:
        return re.compile(expression, flags)
    except re.error as e:
        raise UnrecoverableError(f"Internal pattern is malformed: {expression!r} ({e})") from e


# --- Building blocks ---
NAME_PREFIX_CHARS = r"a-zA-Z0-9$_/\."
NAME_SUFFIX = r"[${}@%a-zA-Z0-9\.,:_/+-]"
NAME = rf"[{NAME_PREFIX_CHARS}]{NAME_SUFFIX}*"

# [?][@!]name  ->  '?' = ok if missing, '@' = file, '!' = in-memory object
OBJECT_REFERENCE = rf"[?]?[@!]{NAME}"
# Same, but the '@'/'!' marker is optional (plain paths are files)
FILE_REFERENCE = rf"[?]?[@!]?{NAME}"
INLINE_VALUE = r"""['" ${}@%a-zA-Z0-9\[\]\.,:_/+-]+"""

# --- Line forms ---
ECHO = compile_pattern(r"^\s*echo\s+(\S.*\S)\s*$")
INCLUDE = compile_pattern(rf"^\s*include\s+({OBJECT_REFERENCE})\s*$")
PRINT = compile_pattern(r"^\s*print\s+(\S.*\S|\S)\s*$")
SLEEP = compile_pattern(r"^\s*sleep\s+(\d+)\s*$")
SET_PROPERTY = compile_pattern(rf"^\s*setProperty\s+([?]?{NAME})=({INLINE_VALUE})\s*$")
PROPERTIES = compile_pattern(rf"^\s*properties\s+({NAME})=({FILE_REFERENCE})\s*$")
MAKE_NEW_ROOT = compile_pattern(rf"^\s*makeNewRoot\s+({NAME})\s*$")
BATCH = compile_pattern(rf"^\s*batch\s+({FILE_REFERENCE})\s*$")
FOREACH = compile_pattern(r"^\s*foreach\s*$", re.IGNORECASE)
END = compile_pattern(r"^\s*end\s*$", re.IGNORECASE)
SAVE_TO = compile_pattern(rf"^\s*saveTo\s+({OBJECT_REFERENCE})\s*$")
USE_AS_INPUT = compile_pattern(rf"^\s*useAsInput\s+({OBJECT_REFERENCE}|{INLINE_VALUE})\s*$")

# Properties files: key=value, key = "value", key='value', key=
KV_PAIR = compile_pattern(r"""^\s*([${}@%a-zA-Z0-9\.,:()_/|+-]+)\s*=\s*(?:"(.*)"|'(.*)'|(.*?))\s*$""")

PRINT_PREVIOUS_OUTPUT = "-"
NEWLINE_MARKER = "\\n"


def remove_echo_prefix(line: str) -> Tuple[bool, str]:
    """'echo foo bar' -> (True, 'foo bar'); anything else is returned as-is."""
    match = ECHO.match(line)
    if match:
        return True, match.group(1)
    return False, line


def split_ok_if_missing(reference: str) -> Tuple[bool, str]:
    """'?@file' -> (True, '@file')"""
    if reference.startswith("?"):
        return True, reference[1:]
    return False, reference
