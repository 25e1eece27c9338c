#!/usr/bin/env python3
"""
LINESCRIBE SCRIPT SCANNER - Script Extensions
---------------------------------------------
Adds three more quietly-executed built-ins on top of print/include:

    sleep <seconds>
    setProperty [?]key=value          -> GLOBAL.VARIABLES
    properties label=[?][@!]fileRef   -> registry[label]

A leading '?' on a setProperty key keeps an existing value; on a file
reference it means 'ok if missing'.

Author: LineScribe Team
Date: 2026-10-19
"""

import logging
import os
import time
from typing import Dict, Optional

from linescribe.core.errors import ScriptResourceNotFound
from linescribe.core.models import GLOBAL_VARIABLES, SYSTEM_ENV, ScanOptions
from linescribe.core.registry import PropertyRegistry
from linescribe.grammar import patterns
from linescribe.scanning.builtins import BuiltinScanner

logger = logging.getLogger("linescribe.script")


class ScriptScanner(BuiltinScanner):
    """BuiltinScanner plus sleep / setProperty / properties."""

    def __init__(self, options: Optional[ScanOptions] = None,
                 registry: Optional[PropertyRegistry] = None, **kwargs):
        if registry is None:
            registry = PropertyRegistry.with_globals()
        else:
            registry.ensure(GLOBAL_VARIABLES)
        super().__init__(options, registry=registry, **kwargs)

    def is_builtin_command(self, line: Optional[str]) -> bool:
        if super().is_builtin_command(line):
            return True
        stripped = self._line_without_echo(line)
        if stripped is None:
            return False
        return bool(patterns.SLEEP.match(stripped)
                    or patterns.SET_PROPERTY.match(stripped)
                    or patterns.PROPERTIES.match(stripped))

    def exec_builtin_command(self) -> bool:
        if super().exec_builtin_command():
            return True

        line = self._line_without_echo(self._raw_current_line())

        match = patterns.SLEEP.match(line)
        if match:
            self.on_sleep(int(match.group(1)))
            return True

        match = patterns.SET_PROPERTY.match(line)
        if match:
            self.on_set_property(match.group(1), match.group(2))
            return True

        match = patterns.PROPERTIES.match(line)
        if match:
            self.on_properties(match.group(1), match.group(2))
            return True

        return False

    def on_sleep(self, seconds: int):
        logger.info(f"sleeping for (seconds) {seconds}")
        time.sleep(seconds)

    def on_set_property(self, key: str, value: str):
        guarded, key = patterns.split_ok_if_missing(key)
        key = self.evaluate(key)
        value = self.evaluate(value.strip())
        if self.verbose:
            logger.debug(f"setProperty {'?' if guarded else ''}{key}={value}")
        self.registry.set_global(key, value, override=not guarded)

    def on_properties(self, label: str, reference: str):
        label = self.evaluate(label)
        ok_if_missing, reference = patterns.split_ok_if_missing(self.evaluate(reference))
        source = reference if reference.startswith(("@", "!")) else "@" + reference
        try:
            values = self.load_properties(source)
        except ScriptResourceNotFound as e:
            if e.reference != source:
                # A missing include inside the file is never covered by '?'
                raise
            if not ok_if_missing:
                raise ScriptResourceNotFound(reference, self.get_state()) from e
            logger.debug(f"Optional properties file '{reference}' is missing; label '{label}' gets nothing")
            values = {}
        self.registry.merge(label, values)
        if self.verbose:
            logger.debug(f"properties label=[{label}] file=[{reference}]: {len(values)} entries")

    def load_properties(self, reference: str) -> Dict[str, str]:
        # Imported here: the loader is itself a ScriptScanner subclass
        from linescribe.scanning.properties import PropertiesLoader

        if not reference.startswith(("@", "!")):
            reference = "@" + reference  # plain paths in 'properties' are files
        loader = PropertiesLoader(
            registry=self.registry,
            evaluator=self.evaluator,
            object_resolver=self.object_resolver,
            output=self.output,
            verbose=self.verbose,
        )
        return loader.load(reference)


class EnvScriptScanner(ScriptScanner):
    """ScriptScanner whose registry also exposes the OS environment as System.env."""

    def __init__(self, options: Optional[ScanOptions] = None,
                 registry: Optional[PropertyRegistry] = None, **kwargs):
        super().__init__(options, registry=registry, **kwargs)
        self.init_properties(self.registry)

    @staticmethod
    def init_properties(registry: Optional[PropertyRegistry] = None) -> PropertyRegistry:
        """Seeds System.env (once) and GLOBAL.VARIABLES; returns the registry."""
        if registry is None:
            registry = PropertyRegistry.with_globals()
        if SYSTEM_ENV not in registry:
            registry[SYSTEM_ENV] = dict(os.environ)
        return registry
