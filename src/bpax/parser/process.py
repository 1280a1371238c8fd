"""Process definition extraction shared by standalone and release analyses."""

import logging
from dataclasses import dataclass, field

from bpxml import XmlNode

from bpax.diagnostics import NoteCollector
from bpax.models.analysis import VBODependency
from bpax.parser.dependencies import DependencyExtractor
from bpax.parser.indexer import StageIndex

logger = logging.getLogger(__name__)


@dataclass
class ProcessDefinition:
    """Counts and dependencies of one process definition."""
    name: str
    version: str
    narrative: str
    total_stages: int
    subsheet_count: int
    dependencies: list[VBODependency] = field(default_factory=list)

    @property
    def vbo_count(self) -> int:
        return len(self.dependencies)

    @property
    def action_count(self) -> int:
        return sum(len(dep.actions) for dep in self.dependencies)


def extract_process_definition(
    process: XmlNode,
    extractor: DependencyExtractor | None = None,
    notes: NoteCollector | None = None,
) -> ProcessDefinition:
    """Index a ``<process>`` node and extract its VBO dependencies.

    Args:
        process: The process definition node
        extractor: Configured dependency extractor (defaults when None)
        notes: Collector for data-quality notes

    Returns:
        ProcessDefinition with defaults applied to missing metadata
    """
    extractor = extractor or DependencyExtractor()
    index = StageIndex.from_process(process)
    definition = ProcessDefinition(
        name=process.get("name") or "Unknown Process",
        version=process.get("version") or "1.0",
        narrative=process.get("narrative") or "",
        total_stages=index.total_stages,
        subsheet_count=index.subsheet_count,
        dependencies=extractor.extract(index, notes),
    )
    logger.debug(
        f"Process {definition.name!r}: {definition.total_stages} stages, "
        f"{definition.vbo_count} VBOs, {definition.action_count} actions"
    )
    return definition
