"""
Configuration for reference graph validation.

The underlying data model leaves a few well-formedness rules open (self
adjacencies, repeated adjacencies, junctions without an explicit adjacency).
They are exposed here as options instead of being hard-coded.

Author: Kevin R. Roy
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict
import logging

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphOptions:
    """Validation switches for a ReferenceGraph.

    Attributes:
        allow_self_adjacency: Accept adjacencies whose two ends lie on the
            same Block (including a Side joined to itself)
        reject_duplicate_adjacencies: Raise DuplicateAdjacency when an
            adjacency between the same two Sides is added twice, instead of
            ignoring the repeat
        allow_virtual_junctions: Let build_thread join two DirectedBlocks
            whose exit and entry Sides are identical without an Adjacency
    """
    allow_self_adjacency: bool = True
    reject_duplicate_adjacencies: bool = False
    allow_virtual_junctions: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'GraphOptions':
        """Create from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown graph option(s): {', '.join(sorted(unknown))}")

        values = {}
        for key, value in d.items():
            if not isinstance(value, bool):
                raise ValueError(f"Graph option '{key}' must be true or false, got {value!r}")
            values[key] = value
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path) -> 'GraphOptions':
        """Load options from a YAML file.

        Options may sit under an 'options' key (as in a graph document) or
        at the top level of a dedicated options file. A graph document
        without an 'options' key yields the defaults.
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if 'options' in data or 'blocks' in data:
            data = data.get('options') or {}

        options = cls.from_dict(data)
        logger.debug(f"Loaded graph options from {path}: {options}")
        return options

    def to_dict(self) -> Dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_OPTIONS = GraphOptions()
