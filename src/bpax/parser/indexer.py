"""Stage and subsheet indexing for Blue Prism process/object definitions.

Pure grouping step: turns the ``<process>`` tree into flat stage and subsheet
lists plus a subsheet-id lookup. No stage semantics are interpreted here.
"""

import logging
from collections import defaultdict

from bpxml import XmlNode

from bpax.models.stage import ResourceRef, Stage, StageParam, Subsheet

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_params(node: XmlNode, kind: str) -> tuple[StageParam, ...]:
    """Read ``input``/``output`` parameter nodes from a stage.

    Parameters sit either directly below the stage or inside an
    ``<inputs>``/``<outputs>`` container depending on the export version.

    Args:
        node: Stage node
        kind: "input" or "output"
    """
    candidates = list(node.find_all(kind))
    container = node.find(f"{kind}s")
    if container is not None:
        candidates.extend(container.find_all(kind))

    params = []
    for param in candidates:
        params.append(StageParam(
            name=param.get("name") or "",
            type=param.get("type") or "text",
            description=_clean(param.get("description")) or _clean(param.get("narrative")),
        ))
    return tuple(params)


def parse_resource(node: XmlNode) -> ResourceRef | None:
    """Read the nested resource descriptor of a stage.

    A descriptor missing either ``object`` or ``action`` is treated as absent.
    """
    resource = node.find("resource")
    if resource is None:
        return None
    obj = _clean(resource.get("object"))
    action = _clean(resource.get("action"))
    if obj is None or action is None:
        logger.debug(f"Ignoring incomplete resource descriptor on stage {node.get('stageid')!r}")
        return None
    return ResourceRef(object=obj, action=action)


def parse_stage(node: XmlNode) -> Stage:
    """Build a Stage from a ``<stage>`` node."""
    subsheet_id = _clean(node.get("subsheetid")) or _clean(node.child_text("subsheetid"))
    return Stage(
        id=node.get("stageid") or "",
        name=node.get("name") or "",
        type=node.get("type") or "",
        subsheet_id=subsheet_id,
        resource=parse_resource(node),
        narrative=_clean(node.child_text("narrative")),
        inputs=parse_params(node, "input"),
        outputs=parse_params(node, "output"),
    )


def parse_subsheet(node: XmlNode) -> Subsheet:
    """Build a Subsheet from a ``<subsheet>`` node."""
    return Subsheet(
        id=node.get("subsheetid") or "",
        name=_clean(node.child_text("name")) or _clean(node.get("name")),
        type=node.get("type"),
    )


class StageIndex:
    """Stages and subsheets of one process/object definition."""

    def __init__(self, stages: list[Stage], subsheets: list[Subsheet]):
        self.stages = stages
        self.subsheets = subsheets
        self._by_subsheet: dict[str, list[Stage]] = defaultdict(list)
        for stage in stages:
            if stage.subsheet_id:
                self._by_subsheet[stage.subsheet_id].append(stage)
        self._subsheet_ids = {subsheet.id for subsheet in subsheets if subsheet.id}

    @classmethod
    def from_process(cls, process: XmlNode) -> "StageIndex":
        """Index the direct ``stage`` and ``subsheet`` children of a process root.

        Args:
            process: The ``<process>`` node

        Returns:
            StageIndex with stages and subsheets in document order
        """
        stages = [parse_stage(node) for node in process.find_all("stage")]
        subsheets = [parse_subsheet(node) for node in process.find_all("subsheet")]
        logger.debug(f"Indexed {len(stages)} stages across {len(subsheets)} subsheets")
        return cls(stages, subsheets)

    def stages_of(self, subsheet_id: str) -> list[Stage]:
        """All stages whose subsheet id equals the given id."""
        return list(self._by_subsheet.get(subsheet_id, []))

    def main_stages(self) -> list[Stage]:
        """Stages not owned by any known subsheet (the main page)."""
        return [
            stage for stage in self.stages
            if not stage.subsheet_id or stage.subsheet_id not in self._subsheet_ids
        ]

    def stages_of_type(self, stage_type: str) -> list[Stage]:
        return [stage for stage in self.stages if stage.type == stage_type]

    @property
    def total_stages(self) -> int:
        return len(self.stages)

    @property
    def subsheet_count(self) -> int:
        return len(self.subsheets)
