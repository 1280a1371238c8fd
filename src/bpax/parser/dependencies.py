"""VBO dependency extraction for Blue Prism processes.

Walks the stages of a process location by location (main page first, then
each subsheet) and folds every VBO invocation into a deduplicated,
usage-counted dependency model.

Two signals identify an invocation:

1. the nested ``<resource object=".." action=".."/>`` descriptor, which is
   authoritative whenever it is complete;
2. otherwise, the stage name matched against ``VBO_NAME_PATTERNS``. The list
   is ordered and the first match wins, so its order is part of the contract.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator

from bpax.diagnostics import NoteCollector
from bpax.models.analysis import VBOAction, VBODependency
from bpax.models.stage import Stage
from bpax.parser.indexer import StageIndex

logger = logging.getLogger(__name__)

# Ordered (matcher, canonical VBO name) pairs; first match wins.
VBO_NAME_PATTERNS: tuple[tuple[re.Pattern, str], ...] = (
    (re.compile(r"Excel", re.IGNORECASE), "MS Excel VBO"),
    (re.compile(r"Email", re.IGNORECASE), "Email - POP3/SMTP"),
    (re.compile(r"Collection", re.IGNORECASE), "Utility - Collection Manipulation"),
    (re.compile(r"File", re.IGNORECASE), "Utility - File Management"),
    (re.compile(r"String", re.IGNORECASE), "Utility - Strings"),
    (re.compile(r"Date", re.IGNORECASE), "Utility - Date and Time"),
    (re.compile(r"Math", re.IGNORECASE), "Utility - Math"),
    (re.compile(r"Environment", re.IGNORECASE), "Utility - Environment"),
    (re.compile(r"SAP", re.IGNORECASE), "SAP Application Server"),
    (re.compile(r"Web", re.IGNORECASE), "Web API"),
    (re.compile(r"Database", re.IGNORECASE), "Database"),
)

_LEADING_TAG = re.compile(r"^\[.*?\]\s*")


def match_vbo_pattern(stage_name: str) -> str | None:
    """Return the canonical VBO name for a stage name, or None."""
    for pattern, vbo_name in VBO_NAME_PATTERNS:
        if pattern.search(stage_name):
            return vbo_name
    return None


def strip_action_tag(stage_name: str) -> str:
    """Derive an action name by dropping a leading ``[...]`` tag.

    "[Excel] Open Workbook" -> "Open Workbook"; when nothing is left the
    original stage name is returned unchanged.
    """
    cleaned = _LEADING_TAG.sub("", stage_name).strip()
    return cleaned or stage_name


@dataclass
class _Tally:
    """Mutable usage counter with an insertion-ordered location set."""
    name: str
    usage_count: int = 0
    locations: dict[str, None] = field(default_factory=dict)

    def record(self, location: str) -> None:
        self.usage_count += 1
        self.locations.setdefault(location, None)


@dataclass
class _VboTally(_Tally):
    actions: dict[str, _Tally] = field(default_factory=dict)

    def record_action(self, action_name: str, location: str) -> None:
        self.record(location)
        action = self.actions.get(action_name)
        if action is None:
            action = self.actions[action_name] = _Tally(action_name)
        action.record(location)

    def freeze(self) -> VBODependency:
        return VBODependency(
            id=self.name,
            name=self.name,
            usage_count=self.usage_count,
            locations=list(self.locations),
            description=f"Visual Business Object: {self.name}",
            actions=[
                VBOAction(
                    id=f"{self.name}::{action.name}",
                    name=action.name,
                    usage_count=action.usage_count,
                    locations=list(action.locations),
                    description=f"Action: {action.name}",
                )
                for action in self.actions.values()
            ],
        )


class DependencyExtractor:
    """Builds the deduplicated VBO dependency list of one process.

    The extractor itself is stateless; every call to :meth:`extract` owns its
    own accumulator.
    """

    def __init__(
        self,
        pattern_fallback: bool = True,
        main_location: str = "Main Process",
        unknown_subsheet: str = "Unknown Subsheet",
    ):
        self.pattern_fallback = pattern_fallback
        self.main_location = main_location
        self.unknown_subsheet = unknown_subsheet

    def resolve_invocation(self, stage: Stage) -> tuple[str, str] | None:
        """Identify the (VBO name, action name) a stage invokes.

        Args:
            stage: Stage to inspect

        Returns:
            Tuple of VBO and action name, or None when the stage is not a VBO call
        """
        if not stage.has_name:
            return None

        if stage.resource is not None:
            return stage.resource.object, stage.resource.action

        if not self.pattern_fallback:
            return None

        vbo_name = match_vbo_pattern(stage.name)
        if vbo_name is None:
            return None
        return vbo_name, strip_action_tag(stage.name.strip())

    def iter_locations(
        self, index: StageIndex, notes: NoteCollector | None = None
    ) -> Iterator[tuple[str, list[Stage]]]:
        """Yield (location label, stages) pairs, main page first.

        A repeated subsheet id is visited once; the repeat is noted.
        """
        notes = notes or NoteCollector()
        yield self.main_location, index.main_stages()

        seen: set[str] = set()
        for subsheet in index.subsheets:
            if not subsheet.id:
                continue
            if subsheet.id in seen:
                notes.warn("dependencies", f"Duplicate subsheet id {subsheet.id!r} ignored",
                           subsheet_id=subsheet.id, name=subsheet.name)
                continue
            seen.add(subsheet.id)
            yield subsheet.name or self.unknown_subsheet, index.stages_of(subsheet.id)

    def extract(self, index: StageIndex, notes: NoteCollector | None = None) -> list[VBODependency]:
        """Extract VBO dependencies in first-seen order.

        Args:
            index: Stage index of the process
            notes: Collector for data-quality notes raised while walking

        Returns:
            One VBODependency per distinct VBO name
        """
        vbos: dict[str, _VboTally] = {}

        for location, stages in self.iter_locations(index, notes):
            for stage in stages:
                invocation = self.resolve_invocation(stage)
                if invocation is None:
                    continue
                vbo_name, action_name = invocation
                tally = vbos.get(vbo_name)
                if tally is None:
                    tally = vbos[vbo_name] = _VboTally(vbo_name)
                tally.record_action(action_name, location)

        dependencies = [tally.freeze() for tally in vbos.values()]
        logger.debug(
            f"Extracted {len(dependencies)} VBO dependencies "
            f"({sum(len(d.actions) for d in dependencies)} distinct actions)"
        )
        return dependencies
