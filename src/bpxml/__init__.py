"""Standalone XML-to-tree parser.

This package turns an XML document into a generic attributed tree with no
knowledge of the format it carries, designed for reuse across projects.

Basic usage:
    from bpxml import parse_xml

    root = parse_xml(Path("export.bprelease").read_bytes())
    print(root.tag)                     # "bpr:release"
    for child in root.children:
        print(child.tag, child.attributes)
"""

from .__version__ import __version__, __author__, __description__
from .models import XmlNode
from .parser import XmlParseError, XmlTreeParser, parse_xml
from .utils import XmlUtils

# Public API
__all__ = [
    '__version__',
    '__author__',
    '__description__',
    'XmlNode',
    'XmlTreeParser',
    'XmlParseError',
    'XmlUtils',
    'parse_xml',
]
