"""Extraction engine for Blue Prism export files."""

from bpax.parser.dependencies import VBO_NAME_PATTERNS, DependencyExtractor
from bpax.parser.elements import ElementExtractor, build_element_tree, flatten_element_tree
from bpax.parser.indexer import StageIndex
from bpax.parser.release import ReleaseAggregator
from bpax.parser.vbo import ActionExtractor

__all__ = [
    "VBO_NAME_PATTERNS",
    "ActionExtractor",
    "DependencyExtractor",
    "ElementExtractor",
    "ReleaseAggregator",
    "StageIndex",
    "build_element_tree",
    "flatten_element_tree",
]
