#!/usr/bin/env python3
"""
LINESCRIBE PROPERTIES LOADER
----------------------------
Reads a flat key=value file into a dict, with the full script built-in set
still available inside it (include, print, setProperty, nested
'properties'), ${...} macros resolved against the shared registry, and ';'
accepted as an extra record separator so a whole table fits on one
command-line argument:

    host=db.local; port=5432; home = "${APP_ROOT}/conf"

Macros see the registry only. Keys from the file being loaded are not
visible to later lines of the same file until the whole table is merged.

Author: LineScribe Team
Date: 2026-10-19
"""

import logging
from typing import Any, Dict, Optional, TextIO

from linescribe.core.errors import PropertiesFormatError
from linescribe.core.models import ScanOptions
from linescribe.core.registry import PropertyRegistry
from linescribe.grammar import patterns
from linescribe.grammar.patterns import compile_pattern
from linescribe.scanning.ingest import ObjectResolver, Source
from linescribe.scanning.script import ScriptScanner

logger = logging.getLogger("linescribe.properties")


class _PropertiesScanner(ScriptScanner):
    """ScriptScanner whose extra built-in is the key=value record."""

    delimiter = compile_pattern(";")

    def __init__(self, options: Optional[ScanOptions] = None,
                 registry: Optional[PropertyRegistry] = None,
                 target: Optional[Dict[str, str]] = None, **kwargs):
        # Included files write into the same table as the including file
        self.target: Dict[str, str] = target if target is not None else {}
        super().__init__(options, registry=registry, **kwargs)

    def _spawn_kwargs(self) -> Dict[str, Any]:
        kwargs = super()._spawn_kwargs()
        kwargs["target"] = self.target
        return kwargs

    def is_builtin_command(self, line: Optional[str]) -> bool:
        if super().is_builtin_command(line):
            return True
        stripped = self._line_without_echo(line)
        return stripped is not None and bool(patterns.KV_PAIR.match(stripped))

    def exec_builtin_command(self) -> bool:
        if super().exec_builtin_command():
            return True

        match = patterns.KV_PAIR.match(self._line_without_echo(self._raw_current_line()))
        if not match:
            return False

        key = self.evaluate(match.group(1))
        raw_value = next((g for g in match.group(2, 3, 4) if g is not None), "")
        value = self.evaluate(raw_value)
        self.target[key] = value
        if self.verbose:
            logger.debug(f"Added KV-Pair: {key} = {value}")
        return True


class PropertiesLoader:
    """
    Loads one properties source into a plain dict.

    Args:
        registry: tables visible to ${...} macros inside the file (and the
            target of any setProperty lines it holds).
        evaluator: macro evaluator shared with the calling scanner.
        object_resolver: resolves '!name' references.
        output: stream for 'print' and echo diagnostics.
        verbose: per-line debug logging.
    """

    def __init__(self, registry: Optional[PropertyRegistry] = None,
                 evaluator: Optional[Any] = None,
                 object_resolver: Optional[ObjectResolver] = None,
                 output: Optional[TextIO] = None,
                 verbose: bool = False):
        self.registry = registry if registry is not None else PropertyRegistry.with_globals()
        self.evaluator = evaluator
        self.object_resolver = object_resolver
        self.output = output
        self.verbose = verbose

    def load(self, source: Source) -> Dict[str, str]:
        """
        Parses source and returns its key=value table in file order.

        Raises ScriptResourceNotFound when the source (or a non-optional
        include inside it) is missing, and PropertiesFormatError on the
        first line that is neither a record nor a built-in.
        """
        scanner = _PropertiesScanner(
            ScanOptions(trim=True, compress=True, verbose=self.verbose),
            registry=self.registry,
            evaluator=self.evaluator,
            output=self.output,
            object_resolver=self.object_resolver,
        )
        scanner.open_source(source)

        if scanner.has_next_line():
            scanner.next_line()
            raise PropertiesFormatError(f"Not a valid KV-Pair: {scanner.get_state()}")

        logger.debug(f"Loaded {len(scanner.target)} entries from [{scanner.get_file_name()}]")
        return scanner.target
