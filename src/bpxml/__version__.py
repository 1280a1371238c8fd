"""Version information for bpxml."""

__version__ = "0.1.0"
__author__ = "bpax"
__description__ = "Generic attributed-tree XML parser preserving namespace prefixes"
