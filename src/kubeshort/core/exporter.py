#!/usr/bin/env python3
"""
KUBESHORT EXPORTER - Document Load & Canonical Output
-----------------------------------------------------
Reads short-form YAML/JSON documents into plain Python objects and writes
encoded PersistentVolumes back out, with a stable, readable key order.

Author: KubeShort Team
Date: 2026-01-16
"""

import io
import json
from typing import Any, Dict, List

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from kubeshort.codec.resource import VOL_ID_KEY, VOL_TYPE_KEY, WRAPPER_KEY


def load_documents(text: str) -> List[Any]:
    """
    Parses every YAML document in the text (JSON is a YAML subset).
    Empty documents are dropped.
    """
    yaml_parser = YAML(typ='safe')
    return [doc for doc in yaml_parser.load_all(text) if doc is not None]


class ShortExporter:
    """
    The Reconstructor: converts encoded flat maps into YAML or JSON text.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        # Identity first, then the volume selector, then everything else
        self.preferred_order = ["name", "namespace", "version", "cluster", VOL_TYPE_KEY, VOL_ID_KEY]

    def _get_sorted_map(self, data: Any) -> Any:
        """Recursively orders keys; unknown keys keep their relative position."""
        if not isinstance(data, dict):
            return data

        keys = list(data.keys())

        def sort_logic(key):
            if key in self.preferred_order:
                return self.preferred_order.index(key)
            return len(self.preferred_order) + keys.index(key)

        sorted_map = CommentedMap()
        for key in sorted(keys, key=sort_logic):
            value = data[key]
            if isinstance(value, dict):
                value = self._get_sorted_map(value)
            elif isinstance(value, list):
                value = [self._get_sorted_map(item) for item in value]
            sorted_map[key] = value

        return sorted_map

    def _order_document(self, doc: Dict[str, Any]) -> Any:
        if set(doc.keys()) == {WRAPPER_KEY}:
            wrapped = CommentedMap()
            wrapped[WRAPPER_KEY] = self._get_sorted_map(doc[WRAPPER_KEY])
            return wrapped
        return self._get_sorted_map(doc)

    def export(self, docs: List[Dict[str, Any]], as_json: bool = False) -> str:
        """
        Exports encoded documents into a single string. Multi-document YAML
        gets explicit separators; JSON output is one object per line.
        """
        ordered = [self._order_document(doc) for doc in docs if doc]

        if as_json:
            return "".join(json.dumps(doc, ensure_ascii=False) + "\n" for doc in ordered)

        stream = io.StringIO()
        for i, doc in enumerate(ordered):
            if i > 0:
                stream.write("---\n")
            self.yaml.dump(doc, stream)

        return stream.getvalue()
