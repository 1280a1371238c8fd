"""JSON Schema generation from Pydantic models for bpax analysis records."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from ..models.analysis import ProcessAnalysis, ReleaseAnalysis, VBOAnalysis

logger = logging.getLogger(__name__)

SCHEMA_BASE_URI = "https://bpax.dev/schemas"


class SchemaGenerator:
    """Generates JSON schemas for the analysis records consumers persist."""

    def __init__(self):
        self.schemas: dict[str, dict[str, Any]] = {}

    def generate_all_schemas(self) -> dict[str, dict[str, Any]]:
        """Generate JSON schemas for all analysis record types.

        Returns:
            Dictionary mapping record names to JSON schemas
        """
        logger.info("Generating JSON schemas for bpax analysis records")

        self.schemas = {
            "process_analysis": self._model_to_schema(
                ProcessAnalysis,
                "bpax-process-analysis-v1",
                "Analysis record of a Blue Prism .bpprocess file",
                f"{SCHEMA_BASE_URI}/process-analysis.v1.schema.json",
            ),
            "vbo_analysis": self._model_to_schema(
                VBOAnalysis,
                "bpax-vbo-analysis-v1",
                "Analysis record of a Blue Prism .bpobject file",
                f"{SCHEMA_BASE_URI}/vbo-analysis.v1.schema.json",
            ),
            "release_analysis": self._model_to_schema(
                ReleaseAnalysis,
                "bpax-release-analysis-v1",
                "Analysis record of a Blue Prism .bprelease bundle",
                f"{SCHEMA_BASE_URI}/release-analysis.v1.schema.json",
            ),
        }

        logger.info(f"Generated {len(self.schemas)} JSON schemas")
        return self.schemas

    def save_schemas(self, output_dir: Path) -> dict[str, Path]:
        """Save generated schemas to files.

        Args:
            output_dir: Directory to save schema files

        Returns:
            Dictionary mapping schema names to file paths
        """
        if not self.schemas:
            self.generate_all_schemas()

        output_dir.mkdir(parents=True, exist_ok=True)
        schema_files = {}

        for schema_name, schema in self.schemas.items():
            schema_file = output_dir / f"{schema_name}.schema.json"

            with open(schema_file, "w", encoding="utf-8") as f:
                json.dump(schema, f, indent=2, ensure_ascii=False)

            schema_files[schema_name] = schema_file
            logger.debug(f"Saved schema: {schema_file}")

        return schema_files

    def _model_to_schema(self, model: type[BaseModel], title: str, description: str, schema_id: str) -> dict[str, Any]:
        """Convert a model to a standalone draft 2020-12 schema (by-alias field names)."""
        schema = model.model_json_schema(by_alias=True, mode="serialization")
        return {
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "$id": schema_id,
            **schema,
            "title": title,
            "description": description,
        }
