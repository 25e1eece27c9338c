#!/usr/bin/env python3
"""
LINESCRIBE PROPERTY REGISTRY
----------------------------
An ordered mapping of label -> {key: value} tables. One registry is shared
by reference between a scanner, every scanner it spawns through 'include',
and every duplicate made for loop re-execution.

The core never removes a label. Only 'setProperty' and 'properties'
write into it.

Author: LineScribe Team
Date: 2026-10-19
"""

import copy
import logging
from typing import Dict, Mapping, Optional

from linescribe.core.models import GLOBAL_VARIABLES

logger = logging.getLogger("linescribe.registry")


class PropertyRegistry(dict):
    """
    Insertion-ordered label -> table mapping.

    Subclasses dict so evaluators and callers can iterate it like the plain
    mapping it is; the helpers below hold the merge rules.
    """

    @classmethod
    def with_globals(cls) -> "PropertyRegistry":
        """A fresh registry holding an empty GLOBAL.VARIABLES table."""
        registry = cls()
        registry.ensure(GLOBAL_VARIABLES)
        return registry

    def ensure(self, label: str) -> Dict[str, str]:
        """Returns the table under label, creating an empty one if absent."""
        if label not in self:
            self[label] = {}
        return self[label]

    def table(self, label: str) -> Optional[Dict[str, str]]:
        return self.get(label)

    def merge(self, label: str, values: Mapping[str, str]) -> Dict[str, str]:
        """
        Loads values under label. A new label is inserted at the end; an
        existing table keeps its keys and only the supplied ones change.
        """
        if label in self:
            logger.debug(f"Merging {len(values)} entries into existing table '{label}'")
            self[label].update(values)
        else:
            self[label] = dict(values)
        return self[label]

    def set_global(self, key: str, value: str, override: bool = True) -> bool:
        """
        Writes one script variable. Returns False when the key already
        existed and override is False (first write wins).
        """
        variables = self.ensure(GLOBAL_VARIABLES)
        if key in variables:
            if not override:
                logger.debug(f"Keeping existing value for '{key}' (guarded setProperty)")
                return False
            logger.warning(f"setProperty is overriding '{key}': '{variables[key]}' -> '{value}'")
        variables[key] = value
        return True

    def snapshot(self) -> "PropertyRegistry":
        """Explicit deep copy; include/duplicate never call this."""
        return PropertyRegistry(copy.deepcopy(dict(self)))
