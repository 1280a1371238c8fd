"""Release bundle aggregation.

A ``.bprelease`` wraps process and object definitions inside
``<bpr:contents>``. Each embedded process is analysed exactly like a
standalone process file; each embedded object like a standalone VBO. Objects
that are only referenced (no inner definition) become explicit stubs.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field

from bpxml import XmlNode

from bpax.diagnostics import NoteCollector
from bpax.models.analysis import STUB_VBO_NARRATIVE, ReleaseProcess, ReleaseVBO
from bpax.parser.dependencies import DependencyExtractor
from bpax.parser.process import extract_process_definition
from bpax.parser.vbo import extract_object_definition

logger = logging.getLogger(__name__)

RELEASE_ROOT_TAG = "bpr:release"
RELEASE_NAMESPACE = "http://www.blueprism.co.uk/product/release"


def is_release_root(node: XmlNode) -> bool:
    """True for ``bpr:release``, or a ``release`` element in the release namespace."""
    if node.tag == RELEASE_ROOT_TAG:
        return True
    return node.local_name == "release" and node.namespace == RELEASE_NAMESPACE


def _definition_of(entry: XmlNode) -> XmlNode | None:
    """Inner ``<process>`` definition of a contents entry, if embedded."""
    inner = entry.find("process")
    if inner is not None:
        return inner
    # Some exports inline the stages directly in the entry
    if entry.find("stage") is not None:
        return entry
    return None


@dataclass
class ReleaseContents:
    """Release metadata, embedded records and rolled-up totals."""
    name: str
    package_name: str
    created: str = ""
    created_by: str = ""
    release_notes: str = ""
    processes: list[ReleaseProcess] = field(default_factory=list)
    vbos: list[ReleaseVBO] = field(default_factory=list)

    @property
    def process_count(self) -> int:
        return len(self.processes)

    @property
    def vbo_count(self) -> int:
        return len(self.vbos)

    @property
    def total_action_count(self) -> int:
        process_actions = sum(p.action_count for p in self.processes)
        vbo_actions = sum(len(v.actions) for v in self.vbos)
        return process_actions + vbo_actions

    @property
    def total_element_count(self) -> int:
        return sum(len(v.elements) for v in self.vbos)


class ReleaseAggregator:
    """Builds ReleaseContents from a parsed ``bpr:release`` tree."""

    def __init__(self, extractor: DependencyExtractor | None = None, notes: NoteCollector | None = None):
        self.extractor = extractor or DependencyExtractor()
        self.notes = notes or NoteCollector()

    def aggregate(self, root: XmlNode) -> ReleaseContents:
        """Aggregate all embedded processes and VBOs.

        Args:
            root: The ``bpr:release`` node

        Returns:
            ReleaseContents with defaults for missing metadata
        """
        contents = ReleaseContents(
            name=self._field(root, "name") or "Unknown Release",
            package_name=self._field(root, "package-name") or "Unknown Package",
            created=self._field(root, "created") or "",
            created_by=self._field(root, "user-created-by") or "",
            release_notes=self._field(root, "release-notes") or "",
        )

        container = root.find_local("contents")
        if container is None:
            self.notes.warn("release", "Release has no contents section")
            return contents

        skipped: Counter = Counter()
        for position, entry in enumerate(container.children):
            kind = entry.local_name
            if kind == "process":
                contents.processes.append(self._process(entry, position))
            elif kind == "object":
                contents.vbos.append(self._object(entry, position))
            else:
                skipped[kind] += 1

        if skipped:
            logger.debug(f"Ignored release content kinds: {dict(skipped)}")
        logger.debug(
            f"Release {contents.name!r}: {contents.process_count} processes, {contents.vbo_count} VBOs"
        )
        return contents

    def _field(self, root: XmlNode, local_name: str) -> str | None:
        node = root.find_local(local_name)
        return node.text if node is not None else None

    def _process(self, entry: XmlNode, position: int) -> ReleaseProcess:
        entry_id = entry.get("id") or f"process-{position}"
        definition_node = _definition_of(entry)
        if definition_node is None:
            self.notes.warn("release", f"Process entry {entry_id!r} has no embedded definition",
                            name=entry.get("name"))
            return ReleaseProcess(
                id=entry_id,
                name=entry.get("name") or "Unknown Process",
                version="1.0",
                total_stages=0,
                subsheet_count=0,
                vbo_count=0,
                action_count=0,
            )

        definition = extract_process_definition(definition_node, self.extractor, self.notes)
        return ReleaseProcess(
            id=entry_id,
            name=entry.get("name") or definition.name,
            version=definition.version,
            narrative=definition.narrative,
            total_stages=definition.total_stages,
            subsheet_count=definition.subsheet_count,
            vbo_count=definition.vbo_count,
            action_count=definition.action_count,
            dependencies=definition.dependencies,
        )

    def _object(self, entry: XmlNode, position: int) -> ReleaseVBO:
        entry_id = entry.get("id") or f"object-{position}"
        definition_node = _definition_of(entry)
        if definition_node is None:
            self.notes.info("release", f"VBO {entry.get('name') or entry_id!r} referenced but not included",
                            id=entry_id)
            return ReleaseVBO(
                id=entry_id,
                name=entry.get("name") or "Unknown VBO",
                version="1.0",
                narrative=STUB_VBO_NARRATIVE,
                included=False,
            )

        definition = extract_object_definition(definition_node, self.notes)
        return ReleaseVBO(
            id=entry_id,
            name=entry.get("name") or definition.name,
            version=definition.version,
            narrative=definition.narrative,
            included=True,
            actions=definition.actions,
            elements=definition.elements,
        )
