#!/usr/bin/env python3
"""
LINESCRIBE EXPORTER - Registry Snapshot as YAML
-----------------------------------------------
Author: LineScribe Team
Date: 2026-10-19
"""

import io
from typing import Iterable, Mapping, Optional

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap


class RegistryExporter:
    """
    Dumps a Property Registry (label -> table) as a YAML document, labels and
    keys in registry order.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096

    def _to_map(self, registry: Mapping[str, Mapping[str, str]],
                exclude: Iterable[str]) -> CommentedMap:
        skipped = set(exclude)
        document = CommentedMap()
        for label, table in registry.items():
            if label in skipped:
                continue
            section = CommentedMap()
            for key, value in table.items():
                section[key] = value
            document[label] = section
        return document

    def export(self, registry: Mapping[str, Mapping[str, str]],
               exclude: Optional[Iterable[str]] = None) -> str:
        """Returns the YAML text; labels listed in exclude are left out."""
        stream = io.StringIO()
        self.yaml.dump(self._to_map(registry, exclude or ()), stream)
        return stream.getvalue()
