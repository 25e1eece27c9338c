#!/usr/bin/env python3
"""
LINESCRIBE BUILT-IN PROCESSOR - The Quiet Butler
------------------------------------------------
BuiltinScanner sits on the cursor and changes what the caller sees:
'print' and 'include' lines are executed and never surfaced, 'echo'
prefixes are stripped (and announced), and every surfaced line has its
${...} macros resolved against the shared Property Registry.

'include' is modeled by composition: the scanner holds at most one active
nested scanner, which may hold its own, giving a depth-first walk through
nested files in file order. Every cursor operation delegates to the nested
scanner first.

    Idle -> Peeked -> Builtin  -> Executed -> (loop)
                   -> Ordinary -> Surfaced (has_next_line() is True)

Author: LineScribe Team
Date: 2026-10-19
"""

import copy
import logging
import sys
from typing import Any, Callable, Dict, Optional, TextIO

from linescribe.core.errors import BuiltinMismatchError, ScannerStateError, ScriptResourceNotFound
from linescribe.core.models import ScanOptions
from linescribe.core.registry import PropertyRegistry
from linescribe.grammar import patterns
from linescribe.macros.evaluator import MacroEvaluator
from linescribe.scanning.cursor import ConfigScanner
from linescribe.scanning.ingest import ObjectResolver

logger = logging.getLogger("linescribe.builtins")

STATE_SEPARATOR = " .. --> .. "


class BuiltinScanner(ConfigScanner):
    """
    Cursor that transparently executes 'print' / 'include' lines.

    Args:
        options: ingestion flags, inherited by included scanners.
        registry: the shared Property Registry (never copied).
        evaluator: anything with evaluate(verbose, text, registry).
        output: stream for 'print' and echo diagnostics (stdout if None).
        object_resolver: maps '!name' references to text.
        replay_output: executor callback for 'print -'.
    """

    def __init__(self, options: Optional[ScanOptions] = None,
                 registry: Optional[PropertyRegistry] = None,
                 evaluator: Optional[Any] = None,
                 output: Optional[TextIO] = None,
                 object_resolver: Optional[ObjectResolver] = None,
                 replay_output: Optional[Callable[[], None]] = None):
        self.included_scanner: Optional["BuiltinScanner"] = None
        self.registry = registry if registry is not None else PropertyRegistry()
        self.evaluator = evaluator or MacroEvaluator()
        self.output = output
        self.replay_output = replay_output
        self._echoed = False
        self._print_output_requested = False
        super().__init__(options, object_resolver)

    def _spawn_kwargs(self) -> Dict[str, Any]:
        """Everything a nested scanner shares with (or inherits from) this one."""
        return {
            "options": copy.copy(self.options),
            "registry": self.registry,
            "evaluator": self.evaluator,
            "output": self.output,
            "object_resolver": self.object_resolver,
            "replay_output": self.replay_output,
        }

    def create(self) -> "BuiltinScanner":
        """A fresh scanner of the same family, used for 'include'."""
        return type(self)(**self._spawn_kwargs())

    # ------------------------------------------------------------------
    # Lifecycle & per-line flags
    # ------------------------------------------------------------------
    def reset(self):
        super().reset()
        self.included_scanner = None

    def _reset_flags_for_each_line(self):
        self._echoed = False
        self._print_output_requested = False

    def is_line_echoed(self) -> bool:
        if self.included_scanner is not None:
            return self.included_scanner.is_line_echoed()
        return self._echoed

    def is_print_output_requested(self) -> bool:
        """True after a 'print -' line: the executor should replay its last output."""
        if self.included_scanner is not None:
            return self.included_scanner.is_print_output_requested()
        return self._print_output_requested

    # ------------------------------------------------------------------
    # Cursor protocol (include-aware)
    # ------------------------------------------------------------------
    def has_next_line(self) -> bool:
        if self.included_scanner is not None:
            if self.included_scanner.has_next_line():
                return True
            self.included_scanner = None  # done with the included file

        while ConfigScanner.has_next_line(self):
            upcoming = ConfigScanner.peek_next_line(self)
            if not self.is_builtin_command(upcoming):
                return True

            if self.verbose:
                logger.debug(f"has_next_line(): quietly executing [{upcoming}]")
            self._advance_own()
            if not self.exec_builtin_command():
                raise BuiltinMismatchError(
                    f"Line was peeked as a built-in but did not re-match: {self.get_state()}")

            if self.included_scanner is not None:
                if self.included_scanner.has_next_line():
                    return True
                self.included_scanner = None  # empty include, keep scanning this file

        return False

    def next_line(self) -> str:
        line = self.next_line_or_none()
        if line is None:
            raise ScannerStateError(f"next_line(): has_next_line() is False. State: {self.get_state()}")
        return line

    def next_line_or_none(self) -> Optional[str]:
        if not self.has_next_line():
            return None
        if self.included_scanner is not None:
            self._reset_flags_for_each_line()
            return self.included_scanner.next_line_or_none()
        return self._advance_own()

    def _advance_own(self) -> Optional[str]:
        """Moves this scanner's own cursor, then strips echo and resolves macros."""
        line = self._advance()
        if line is None:
            return None
        self._echoed, text = patterns.remove_echo_prefix(line.text)
        return self._evaluate_and_echo(text)

    def current_line(self) -> str:
        if self.included_scanner is not None:
            return self.included_scanner.current_line()
        text = self.current_line_or_none()
        if text is None:
            raise ScannerStateError(f"current_line(): invalid line# {self._position}. State: {self.get_state()}")
        return text

    def current_line_or_none(self) -> Optional[str]:
        if self.included_scanner is not None:
            return self.included_scanner.current_line_or_none()
        raw = self._raw_current_line()
        if raw is None:
            return None
        return self.evaluate(patterns.remove_echo_prefix(raw)[1])

    def peek_next_line(self) -> Optional[str]:
        if self.included_scanner is not None:
            peeked = self.included_scanner.peek_next_line()
            if peeked is not None:
                return peeked
        return ConfigScanner.peek_next_line(self)

    def get_state(self) -> str:
        """The include chain, outermost file first."""
        if self.included_scanner is None:
            return self._own_state()
        return self._own_state() + STATE_SEPARATOR + self.included_scanner.get_state()

    # ------------------------------------------------------------------
    # Macros & echo
    # ------------------------------------------------------------------
    def evaluate(self, text: Optional[str]) -> Optional[str]:
        return self.evaluator.evaluate(self.verbose, text, self.registry)

    def _evaluate_and_echo(self, as_is: str) -> str:
        substituted = self.evaluate(as_is)
        if self._echoed:
            self._write(f"\tEcho (As-Is): {as_is}\n")
            self._write(f"\tEcho (Macros-substituted): {substituted}\n")
        return substituted

    def _write(self, text: str):
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text)
        stream.flush()

    # ------------------------------------------------------------------
    # Built-ins
    # ------------------------------------------------------------------
    def _line_without_echo(self, line: Optional[str]) -> Optional[str]:
        if line is None:
            return None
        return patterns.remove_echo_prefix(line)[1]

    def is_builtin_command(self, line: Optional[str]) -> bool:
        """Pure classification, no side effects."""
        stripped = self._line_without_echo(line)
        if stripped is None:
            return False
        return bool(patterns.PRINT.match(stripped) or patterns.INCLUDE.match(stripped))

    def exec_builtin_command(self) -> bool:
        """
        Executes the current line if it is one of this layer's built-ins.
        Returns False when the line belongs to nobody here.
        """
        line = self._line_without_echo(self._raw_current_line())
        if line is None or not line.strip():
            raise BuiltinMismatchError(f"No current line to execute. State: {self.get_state()}")

        match = patterns.INCLUDE.match(line)
        if match:
            self.on_include(self.evaluate(match.group(1)))
            return True

        match = patterns.PRINT.match(line)
        if match:
            self.on_print(self.evaluate(match.group(1)))
            return True

        return False

    def on_include(self, reference: str):
        ok_if_missing, reference = patterns.split_ok_if_missing(reference)
        nested = self.create()
        try:
            nested.open_source(reference)
        except ScriptResourceNotFound as e:
            if not ok_if_missing:
                raise ScriptResourceNotFound(reference, self.get_state()) from e
            logger.debug(f"Optional include '{reference}' is missing; skipping")
        if self.verbose:
            logger.debug(f"include {reference}: {nested.get_command_count()} line(s)")
        self.included_scanner = nested

    def on_print(self, expression: str):
        if expression == patterns.PRINT_PREVIOUS_OUTPUT:
            self._print_output_requested = True
            if self.replay_output is not None:
                self.replay_output()
            return

        if expression.endswith(patterns.NEWLINE_MARKER):
            self._write(expression[:-len(patterns.NEWLINE_MARKER)] + "\n")
        else:
            self._write(expression + " ")

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def duplicate(self) -> "BuiltinScanner":
        clone = super().duplicate()
        if self.included_scanner is not None:
            clone.included_scanner = self.included_scanner.duplicate()
        return clone
