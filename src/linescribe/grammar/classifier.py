#!/usr/bin/env python3
"""
LINESCRIBE GRAMMAR CLASSIFIER - The Sorting Hat
-----------------------------------------------
BatchGrammar walks a script exactly like ConfigScanner does, but instead of
executing built-ins it labels every line with one CommandType and exposes
the parsed payload. The batch executor decides what to do with it
(foreach/end looping, saveTo, useAsInput ...).

No includes, no macro evaluation: what you see is what the file says,
minus comments and the 'echo' prefix.

Author: LineScribe Team
Date: 2026-10-19
"""

import logging
from typing import List, Optional, Pattern, Tuple

from linescribe.core.models import CommandType, Line
from linescribe.grammar import patterns
from linescribe.scanning.cursor import ConfigScanner

logger = logging.getLogger("linescribe.grammar")

# First match wins; FOREACH/END are whole-line keywords
PRECEDENCE: List[Tuple[CommandType, Pattern]] = [
    (CommandType.MAKE_NEW_ROOT, patterns.MAKE_NEW_ROOT),
    (CommandType.BATCH, patterns.BATCH),
    (CommandType.FOREACH, patterns.FOREACH),
    (CommandType.END, patterns.END),
    (CommandType.PROPERTIES, patterns.PROPERTIES),
    (CommandType.SET_PROPERTY, patterns.SET_PROPERTY),
    (CommandType.PRINT, patterns.PRINT),
    (CommandType.SAVE_TO, patterns.SAVE_TO),
    (CommandType.USE_AS_INPUT, patterns.USE_AS_INPUT),
    (CommandType.SLEEP, patterns.SLEEP),
]


class BatchGrammar(ConfigScanner):
    """
    Classifying cursor. After every advance exactly one accessor returns a
    value; the rest return None (or False).
    """

    def _reset_flags_for_each_line(self):
        self._cmd_type = CommandType.ORDINARY
        self._echoed = False
        self._match = None

    def _advance(self) -> Optional[Line]:
        line = super()._advance()
        if line is not None:
            self.determine_cmd_type(line.text)
        return line

    def determine_cmd_type(self, text: str):
        self._echoed, text = patterns.remove_echo_prefix(text)

        for cmd_type, pattern in PRECEDENCE:
            match = pattern.match(text)
            if match:
                self._cmd_type = cmd_type
                self._match = match
                break

        if self.verbose:
            logger.debug(f"determine_cmd_type(): line# {self._position} [{text}] -> {self._cmd_type.name}")

    def current_line_or_none(self) -> Optional[str]:
        raw = self._raw_current_line()
        if raw is None:
            return None
        return patterns.remove_echo_prefix(raw)[1]

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def _payload(self, *cmd_types: CommandType, group: int = 1) -> Optional[str]:
        if self._cmd_type not in cmd_types or self._match is None:
            return None
        return self._match.group(group)

    def get_cmd_type(self) -> CommandType:
        return self._cmd_type

    def is_line_echoed(self) -> bool:
        return self._echoed

    def get_property_kv(self) -> Optional[Tuple[str, str]]:
        """(key, value) for 'properties' and 'setProperty' lines."""
        key = self._payload(CommandType.PROPERTIES, CommandType.SET_PROPERTY)
        if key is None:
            return None
        return key, self._payload(CommandType.PROPERTIES, CommandType.SET_PROPERTY, group=2)

    def get_print_expr(self) -> Optional[str]:
        return self._payload(CommandType.PRINT)

    def get_save_to(self) -> Optional[str]:
        return self._payload(CommandType.SAVE_TO)

    def get_use_as_input(self) -> Optional[str]:
        return self._payload(CommandType.USE_AS_INPUT)

    def get_make_new_root(self) -> Optional[str]:
        return self._payload(CommandType.MAKE_NEW_ROOT)

    def get_sub_batch_file(self) -> Optional[str]:
        return self._payload(CommandType.BATCH)

    def get_sleep_duration(self) -> Optional[int]:
        """Milliseconds; the script states seconds."""
        seconds = self._payload(CommandType.SLEEP)
        return int(seconds) * 1000 if seconds is not None else None

    def is_foreach_line(self) -> bool:
        return self._cmd_type is CommandType.FOREACH

    def is_end_line(self) -> bool:
        return self._cmd_type is CommandType.END

    def get_command(self) -> Optional[str]:
        """
        First word of an ORDINARY line ('yaml', 'aws' ...). None for every
        recognized command, since those words are keywords, not commands.
        """
        if self._cmd_type is not CommandType.ORDINARY:
            return None
        text = self.current_line_or_none()
        if not text:
            return None
        return text.split(None, 1)[0]
