#!/usr/bin/env python3
"""
LINESCRIBE INGESTION - The Line Store Builder
---------------------------------------------
Turns a raw source (file, '@file' reference, '!object' reference, inline
text or stream) into the Line Store: an ordered list of cleaned Lines,
each tagged with its original line number.

Blank lines, whole-line comments ('#', '//', '--') and trailing comments
('#', '//') never survive ingestion.

Author: LineScribe Team
Date: 2026-10-19
"""

import io
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Pattern, Tuple, Union

from linescribe.core.errors import ScriptError, ScriptResourceNotFound
from linescribe.core.models import Line
from linescribe.grammar.patterns import compile_pattern

logger = logging.getLogger("linescribe.ingest")

Source = Union[str, Path, bytes, bytearray, io.IOBase]
ObjectResolver = Callable[[str], Optional[str]]

EMPTY_LINE = compile_pattern(r"^\s*$")
WHOLE_LINE_COMMENT = compile_pattern(r"^(#|//|--)")
WHITESPACE_RUN = compile_pattern(r"\s\s+")
TRAILING_COMMENT_MARKERS = ("#", "//")


def read_source(source: Source, object_resolver: Optional[ObjectResolver] = None) -> Tuple[str, str]:
    """
    Resolves a source into (display_name, raw_text).

    Strings are '@path' (a file), '!name' (an object handed out by the
    caller's resolver) or literal inline content.
    """
    if isinstance(source, Path):
        return str(source), _read_file(source, str(source))

    if isinstance(source, (bytes, bytearray)):
        return "<bytes>", bytes(source).decode("utf-8-sig")

    if hasattr(source, "read"):
        data = source.read()
        if isinstance(data, bytes):
            data = data.decode("utf-8-sig")
        return getattr(source, "name", "<stream>"), data

    if isinstance(source, str):
        if source.startswith("@"):
            return source, _read_file(Path(source[1:]), source)
        if source.startswith("!"):
            text = object_resolver(source[1:]) if object_resolver else None
            if text is None:
                raise ScriptResourceNotFound(source)
            return source, text
        # What looked like a filename is inline content to parse
        return source, source

    raise TypeError(f"Unsupported source type: {type(source).__name__}")


def _read_file(path: Path, reference: str) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
        raise ScriptResourceNotFound(reference) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptError(f"Failure to read file [{reference}]: {e}") from e


class LineIngestor:
    """
    Cleans raw text into Lines.

    Quote-aware: a '#' or '//' inside a closed pair of single or double
    quotes is data. Anywhere else the marker ends the line, so quote URLs
    that must keep their '//'. A lone apostrophe (don't) opens nothing.
    """

    def __init__(self, trim: bool = True, compress: bool = True,
                 delimiter: Optional[Pattern] = None, verbose: bool = False):
        self.trim = trim
        self.compress = compress
        self.delimiter = delimiter
        self.verbose = verbose

    def _clean_artifacts(self, text: str) -> str:
        """Removes a UTF-8 BOM and normalizes line endings."""
        text = text.lstrip('\ufeff')
        return text.replace('\r\n', '\n')

    def _find_comment_split(self, text: str) -> int:
        """Index where a trailing comment starts, or -1."""
        quote = None
        escaped = False
        for i, char in enumerate(text):
            if escaped:
                escaped = False
                continue
            if char == '\\':
                escaped = True
                continue
            if quote:
                if char == quote:
                    quote = None
                continue
            # A quote only opens a span when it is closed later on the line
            if char in ('"', "'") and text.find(char, i + 1) != -1:
                quote = char
                continue
            if text.startswith(TRAILING_COMMENT_MARKERS, i):
                return i
        return -1

    def clean_line(self, line: str) -> Optional[str]:
        """Returns the cleaned text, or None if nothing of substance is left."""
        if self.compress:
            line = WHITESPACE_RUN.sub(" ", line)

        if EMPTY_LINE.match(line) or WHOLE_LINE_COMMENT.match(line):
            return None

        split_idx = self._find_comment_split(line)
        if split_idx != -1:
            line = line[:split_idx].rstrip()

        if EMPTY_LINE.match(line):
            return None

        return line.strip() if self.trim else line

    def ingest(self, raw_text: str) -> List[Line]:
        lines: List[Line] = []
        for line_no, raw_line in enumerate(self._clean_artifacts(raw_text).split('\n'), 1):
            records = self.delimiter.split(raw_line) if self.delimiter else [raw_line]
            for record in records:
                cleaned = self.clean_line(record)
                if cleaned is None:
                    continue
                if self.verbose:
                    logger.debug(f"line# {line_no}: AS-IS=[{record}] CLEANED=[{cleaned}]")
                lines.append(Line(line_no=line_no, text=cleaned))
        return lines


def ingest_text(raw_text: str, trim: bool = True, compress: bool = True,
                delimiter: Optional[Pattern] = None) -> List[Line]:
    """Ingests already-read text (no source resolution)."""
    return LineIngestor(trim=trim, compress=compress, delimiter=delimiter).ingest(raw_text)


def open_lines(source: Any, trim: bool = True, compress: bool = True,
               delimiter: Optional[Pattern] = None,
               object_resolver: Optional[ObjectResolver] = None,
               verbose: bool = False) -> Tuple[str, List[Line]]:
    """read_source + ingest: returns (display_name, line_store)."""
    name, raw_text = read_source(source, object_resolver)
    ingestor = LineIngestor(trim=trim, compress=compress, delimiter=delimiter, verbose=verbose)
    lines = ingestor.ingest(raw_text)
    if verbose:
        logger.debug(f"Opened [{name}]: {len(lines)} command line(s)")
    return name, lines
