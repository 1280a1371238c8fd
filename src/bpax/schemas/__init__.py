"""JSON Schema generation for bpax analysis records."""

from .generator import SchemaGenerator

__all__ = [
    "SchemaGenerator",
]
