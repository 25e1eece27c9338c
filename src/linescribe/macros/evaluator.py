#!/usr/bin/env python3
"""
LINESCRIBE MACRO EVALUATOR
--------------------------
Default implementation of evaluate(verbose, text, registry) -> text.

Resolves ${name} references against the Property Registry: the first
table (in registry order) defining 'name' wins. Innermost references are
expanded first and passes repeat until nothing changes, so ${a${b}}
works. Unknown references are left verbatim; the function never fails
and never writes to the registry.

Scanners accept any object with an 'evaluate' method, so a batch executor
can plug in its own macro language.

Author: LineScribe Team
Date: 2026-10-19
"""

import logging
from typing import Mapping, Match, Optional

from linescribe.core.errors import MacroError
from linescribe.grammar.patterns import compile_pattern

logger = logging.getLogger("linescribe.macros")

MACRO_REFERENCE = compile_pattern(r"\$\{([^${}]+)\}")


class MacroEvaluator:

    # Bound for self-referencing definitions like a=${a}
    max_passes = 16

    def evaluate(self, verbose: bool, text: Optional[str],
                 registry: Optional[Mapping[str, Mapping[str, str]]]) -> Optional[str]:
        if text is None:
            return None

        result = text
        for _ in range(self.max_passes):
            expanded = MACRO_REFERENCE.sub(lambda m: self._resolve(m, registry), result)
            if expanded == result:
                break
            result = expanded

        if verbose and result != text:
            logger.debug(f"evaluate(): [{text}] -> [{result}]")
        return result

    def _resolve(self, match: Match, registry) -> str:
        name = match.group(1)
        value = self.lookup(name, registry)
        if value is None:
            return self.on_unresolved(match)
        return str(value)

    def lookup(self, name: str, registry) -> Optional[str]:
        if not registry:
            return None
        for table in registry.values():
            if name in table:
                return table[name]
        return None

    def on_unresolved(self, match: Match) -> str:
        return match.group(0)


class StrictMacroEvaluator(MacroEvaluator):
    """Treats an unknown ${name} as an error instead of leaving it in place."""

    def on_unresolved(self, match: Match) -> str:
        raise MacroError(f"Undefined macro reference '{match.group(0)}'")
