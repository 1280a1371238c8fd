"""bpax - Blue Prism export analysis.

bpax reads Blue Prism .bpprocess, .bpobject and .bprelease exports and
extracts stage/subsheet counts, VBO dependency graphs with usage statistics,
action definitions and Application Modeller element hierarchies.
"""

__version__ = "0.1.0"
__author__ = "bpax"
__description__ = "Dependency and metadata analysis for Blue Prism exports"

from bpax.analyzer import (
    Analyzer,
    analyze_document,
    analyze_process,
    analyze_release,
    analyze_vbo,
)
from bpax.config import BpaxConfig
from bpax.errors import BpaxError, FileRejectedError, MalformedXmlError, UnrecognizedFormatError

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "Analyzer",
    "BpaxConfig",
    "BpaxError",
    "FileRejectedError",
    "MalformedXmlError",
    "UnrecognizedFormatError",
    "analyze_document",
    "analyze_process",
    "analyze_release",
    "analyze_vbo",
]
