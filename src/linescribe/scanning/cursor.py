#!/usr/bin/env python3
"""
LINESCRIBE CURSOR - The Line Walker
-----------------------------------
ConfigScanner mimics a line-at-a-time scanner (has_next_line / next_line)
over an ingested Line Store, with peek, rewind, re-reading of the current
line and a human-readable state string for error messages.

Positions are 1-based like every text editor: 0 means 'not started',
-1 means 'reset / nothing opened'.

Author: LineScribe Team
Date: 2026-10-19
"""

import copy
import itertools
import logging
from typing import Iterator, List, Optional, Pattern

from linescribe.core.errors import ScannerStateError
from linescribe.core.models import Line, ScanOptions
from linescribe.scanning.ingest import ObjectResolver, Source, open_lines

logger = logging.getLogger("linescribe.scanner")


class ConfigScanner:
    """
    Rewindable, forward-only cursor over a Line Store.

    Subclasses hook into _reset_flags_for_each_line() to drop whatever
    they derived from the previous line.
    """

    # Extra record separator applied during ingestion (None = line breaks only)
    delimiter: Optional[Pattern] = None

    def __init__(self, options: Optional[ScanOptions] = None,
                 object_resolver: Optional[ObjectResolver] = None):
        self.options = copy.copy(options) if options is not None else ScanOptions()
        self.object_resolver = object_resolver
        self.reset()

    @property
    def verbose(self) -> bool:
        return self.options.verbose

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self):
        """Draconian: as if open_source() was never called."""
        self.file_name: Optional[str] = None
        self.lines: List[Line] = []
        self._iterator: Optional[Iterator[Line]] = None
        self._position = -1
        self._reset_flags_for_each_line()

    def rewind(self):
        """Back to position 0 with a fresh iterator; the Line Store is kept."""
        self._iterator = iter(self.lines)
        self._position = 0
        self._reset_flags_for_each_line()

    def _reset_flags_for_each_line(self):
        pass

    def open_source(self, source: Source, trim: Optional[bool] = None,
                    compress: Optional[bool] = None) -> bool:
        """
        Ingests source into a fresh Line Store and rewinds to its start.

        Raises ScriptResourceNotFound for a missing file and ScriptError for
        other read failures; the caller decides whether that is fatal.
        """
        self.reset()
        if trim is not None:
            self.options.trim = trim
        if compress is not None:
            self.options.compress = compress

        self.file_name, self.lines = open_lines(
            source,
            trim=self.options.trim,
            compress=self.options.compress,
            delimiter=self.delimiter,
            object_resolver=self.object_resolver,
            verbose=self.verbose,
        )
        self.rewind()
        return True

    # ------------------------------------------------------------------
    # Cursor protocol
    # ------------------------------------------------------------------
    def has_next_line(self) -> bool:
        if self._iterator is None:
            self.rewind()
        return self._position < len(self.lines)

    def _advance(self) -> Optional[Line]:
        """Moves to the next stored line. Position is left alone at the end."""
        if not ConfigScanner.has_next_line(self):
            return None
        line = next(self._iterator)
        self._position += 1
        self._reset_flags_for_each_line()
        if self.verbose:
            logger.debug(f"next_line(): {self._own_state()}")
        return line

    def next_line(self) -> str:
        if self._advance() is None:
            raise ScannerStateError(
                f"next_line(): no more lines (line# {self._position}). State: {self.get_state()}")
        return self.current_line()

    def next_line_or_none(self) -> Optional[str]:
        if self._advance() is None:
            return None
        return self.current_line_or_none()

    def current_line(self) -> str:
        text = self.current_line_or_none()
        if text is None:
            raise ScannerStateError(
                f"current_line(): invalid line# {self._position}. State: {self.get_state()}")
        return text

    def current_line_or_none(self) -> Optional[str]:
        return self._raw_current_line()

    def _raw_current_line(self) -> Optional[str]:
        if 0 < self._position <= len(self.lines):
            return self.lines[self._position - 1].text
        return None

    def peek_next_line(self) -> Optional[str]:
        """The line after the current one, without moving. None at the end."""
        if self._position < 0:
            return None
        if self._position < len(self.lines):
            return self.lines[self._position].text
        return None

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------
    def get_file_name(self) -> Optional[str]:
        return self.file_name

    def get_line_num(self) -> int:
        return self._position

    def get_command_count(self) -> int:
        """Number of non-comment, non-empty lines ingested."""
        return len(self.lines)

    def get_orig_line_num(self) -> Optional[int]:
        if 0 < self._position <= len(self.lines):
            return self.lines[self._position - 1].line_no
        return None

    def _own_state(self) -> str:
        if self.file_name is None or self._position <= 0 or self._position > len(self.lines):
            return f"ConfigFile [{self.file_name}] is in invalid state"
        return (f"ConfigFile=[{self.file_name}] @ line# {self.get_orig_line_num()}"
                f" = [{self._raw_current_line()}]")

    def get_state(self) -> str:
        """e.g. ConfigFile=[@batch1.txt] @ line# 2 = [print hello]"""
        return self._own_state()

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def duplicate(self) -> "ConfigScanner":
        """
        Independent scanner at the same logical position. Iterators cannot
        be copied, so the new one is rebuilt by skipping 'position' lines.
        """
        clone = copy.copy(self)
        clone.options = copy.copy(self.options)
        clone.lines = list(self.lines)
        if self._iterator is None:
            clone._iterator = None
        else:
            clone._iterator = itertools.islice(iter(clone.lines), max(self._position, 0), None)
        return clone
