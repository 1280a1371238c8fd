"""Analysis entry points for Blue Prism export files.

Each analysis is one synchronous pipeline (parse -> index -> extract ->
aggregate) that owns all of its intermediate state and returns a frozen
result record.
"""

import logging
import time
from enum import Enum
from pathlib import PurePath

from bpxml import XmlNode, XmlParseError, XmlTreeParser

from bpax.config import BpaxConfig, create_default_config
from bpax.diagnostics import NoteCollector
from bpax.errors import MalformedXmlError, UnrecognizedFormatError
from bpax.models.analysis import AnalysisResult, ProcessAnalysis, ReleaseAnalysis, VBOAnalysis
from bpax.parser.dependencies import DependencyExtractor
from bpax.parser.process import extract_process_definition
from bpax.parser.release import RELEASE_ROOT_TAG, ReleaseAggregator, is_release_root
from bpax.parser.vbo import extract_object_definition

logger = logging.getLogger(__name__)

PROCESS_ROOT_TAG = "process"


class FileKind(str, Enum):
    """Blue Prism export kinds."""
    PROCESS = "process"
    VBO = "vbo"
    RELEASE = "release"


EXTENSION_KINDS: dict[str, FileKind] = {
    ".bpprocess": FileKind.PROCESS,
    ".bpobject": FileKind.VBO,
    ".bprelease": FileKind.RELEASE,
}


def detect_file_kind(file_name: str, root: XmlNode | None = None) -> FileKind | None:
    """Determine the export kind from the extension, then from the root marker.

    Args:
        file_name: Original file name
        root: Parsed root, consulted when the extension is not recognised

    Returns:
        FileKind, or None when neither signal is conclusive
    """
    kind = EXTENSION_KINDS.get(PurePath(file_name).suffix.lower())
    if kind is not None or root is None:
        return kind
    if is_release_root(root):
        return FileKind.RELEASE
    if root.local_name == PROCESS_ROOT_TAG:
        return FileKind.VBO if root.get("type") == "object" else FileKind.PROCESS
    return None


def _byte_size(content: str | bytes) -> int:
    return len(content.encode("utf-8")) if isinstance(content, str) else len(content)


class Analyzer:
    """Runs process, VBO and release analyses with one configuration."""

    def __init__(self, config: BpaxConfig | None = None):
        self.config = config or create_default_config()

    def _extractor(self) -> DependencyExtractor:
        analysis = self.config.analysis
        return DependencyExtractor(
            pattern_fallback=analysis.pattern_fallback,
            main_location=analysis.main_location,
            unknown_subsheet=analysis.unknown_subsheet,
        )

    def _parse(self, content: str | bytes, file_name: str) -> XmlNode:
        try:
            return XmlTreeParser().parse(content)
        except XmlParseError as e:
            raise MalformedXmlError(file_name, str(e)) from e

    def _require_process_root(self, root: XmlNode, file_name: str) -> None:
        if root.local_name != PROCESS_ROOT_TAG:
            raise UnrecognizedFormatError(file_name, PROCESS_ROOT_TAG, root.tag)

    def analyze(self, content: str | bytes, file_name: str, file_size: int | None = None) -> AnalysisResult:
        """Analyse a document, dispatching on its extension or root marker.

        Raises:
            MalformedXmlError: If the content is not XML
            UnrecognizedFormatError: If the root matches no Blue Prism export kind
        """
        root = self._parse(content, file_name)
        kind = detect_file_kind(file_name, root)
        if kind is None:
            raise UnrecognizedFormatError(file_name, f"{PROCESS_ROOT_TAG}> or <{RELEASE_ROOT_TAG}", root.tag)

        size = _byte_size(content) if file_size is None else file_size
        if kind is FileKind.RELEASE:
            return self._release(root, file_name, size)
        if kind is FileKind.VBO:
            return self._vbo(root, file_name, size)
        return self._process(root, file_name, size)

    def analyze_process(self, content: str | bytes, file_name: str, file_size: int | None = None) -> ProcessAnalysis:
        """Analyse a .bpprocess document."""
        root = self._parse(content, file_name)
        return self._process(root, file_name, _byte_size(content) if file_size is None else file_size)

    def analyze_vbo(self, content: str | bytes, file_name: str, file_size: int | None = None) -> VBOAnalysis:
        """Analyse a .bpobject document."""
        root = self._parse(content, file_name)
        return self._vbo(root, file_name, _byte_size(content) if file_size is None else file_size)

    def analyze_release(self, content: str | bytes, file_name: str, file_size: int | None = None) -> ReleaseAnalysis:
        """Analyse a .bprelease document."""
        root = self._parse(content, file_name)
        return self._release(root, file_name, _byte_size(content) if file_size is None else file_size)

    def _process(self, root: XmlNode, file_name: str, file_size: int) -> ProcessAnalysis:
        self._require_process_root(root, file_name)
        start_time = time.time()
        notes = NoteCollector(file_name)

        definition = extract_process_definition(root, self._extractor(), notes)
        result = ProcessAnalysis(
            file_name=file_name,
            file_size=file_size,
            process_name=definition.name,
            version=definition.version,
            narrative=definition.narrative,
            total_stages=definition.total_stages,
            vbo_count=definition.vbo_count,
            action_count=definition.action_count,
            subsheet_count=definition.subsheet_count,
            dependencies=definition.dependencies,
            notes=notes.snapshot(),
        )
        logger.info(f"Analysed process {file_name} in {(time.time() - start_time) * 1000:.1f}ms")
        return result

    def _vbo(self, root: XmlNode, file_name: str, file_size: int) -> VBOAnalysis:
        self._require_process_root(root, file_name)
        start_time = time.time()
        notes = NoteCollector(file_name)

        definition = extract_object_definition(root, notes)
        result = VBOAnalysis(
            file_name=file_name,
            file_size=file_size,
            vbo_name=definition.name,
            version=definition.version,
            narrative=definition.narrative,
            action_count=len(definition.actions),
            element_count=len(definition.elements),
            actions=definition.actions,
            elements=definition.elements,
            notes=notes.snapshot(),
        )
        logger.info(f"Analysed VBO {file_name} in {(time.time() - start_time) * 1000:.1f}ms")
        return result

    def _release(self, root: XmlNode, file_name: str, file_size: int) -> ReleaseAnalysis:
        if not is_release_root(root):
            raise UnrecognizedFormatError(file_name, RELEASE_ROOT_TAG, root.tag)
        start_time = time.time()
        notes = NoteCollector(file_name)

        contents = ReleaseAggregator(self._extractor(), notes).aggregate(root)
        result = ReleaseAnalysis(
            file_name=file_name,
            file_size=file_size,
            release_name=contents.name,
            package_name=contents.package_name,
            created=contents.created,
            created_by=contents.created_by,
            release_notes=contents.release_notes,
            process_count=contents.process_count,
            vbo_count=contents.vbo_count,
            total_action_count=contents.total_action_count,
            total_element_count=contents.total_element_count,
            processes=contents.processes,
            vbos=contents.vbos,
            notes=notes.snapshot(),
        )
        logger.info(f"Analysed release {file_name} in {(time.time() - start_time) * 1000:.1f}ms")
        return result


def analyze_document(content: str | bytes, file_name: str, file_size: int | None = None,
                     config: BpaxConfig | None = None) -> AnalysisResult:
    """Convenience function dispatching on file kind."""
    return Analyzer(config).analyze(content, file_name, file_size)


def analyze_process(content: str | bytes, file_name: str, file_size: int | None = None,
                    config: BpaxConfig | None = None) -> ProcessAnalysis:
    """Convenience function for .bpprocess content."""
    return Analyzer(config).analyze_process(content, file_name, file_size)


def analyze_vbo(content: str | bytes, file_name: str, file_size: int | None = None,
                config: BpaxConfig | None = None) -> VBOAnalysis:
    """Convenience function for .bpobject content."""
    return Analyzer(config).analyze_vbo(content, file_name, file_size)


def analyze_release(content: str | bytes, file_name: str, file_size: int | None = None,
                    config: BpaxConfig | None = None) -> ReleaseAnalysis:
    """Convenience function for .bprelease content."""
    return Analyzer(config).analyze_release(content, file_name, file_size)
