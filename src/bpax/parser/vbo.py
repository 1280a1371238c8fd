"""Action definition extraction for Blue Prism business objects (VBOs).

Each ``SubSheetInfo`` stage of an object definition describes one externally
callable action. Parameters are declared on the stage itself in some exports;
in most Blue Prism versions they live on the Start (inputs) and End (outputs)
stages of the action's page, so those are consulted when the stage has none.
"""

import logging
from dataclasses import dataclass, field

from bpxml import XmlNode

from bpax.diagnostics import NoteCollector
from bpax.models.analysis import Param, VBOActionDef, VBOElement
from bpax.models.stage import Stage, StageParam
from bpax.parser.elements import ElementExtractor
from bpax.parser.indexer import StageIndex

logger = logging.getLogger(__name__)

ACTION_STAGE_TYPE = "SubSheetInfo"


def _to_params(params: tuple[StageParam, ...]) -> list[Param] | None:
    """Convert stage params; None (omitted) when there are none."""
    if not params:
        return None
    return [Param(name=p.name, type=p.type, description=p.description) for p in params]


class ActionExtractor:
    """Extracts VBOActionDef entries from an indexed object definition."""

    def extract(self, index: StageIndex) -> list[VBOActionDef]:
        """One action per SubSheetInfo stage, in document order.

        Args:
            index: Stage index of the object definition

        Returns:
            Action definitions keyed by their own stage id
        """
        actions = []
        for stage in index.stages_of_type(ACTION_STAGE_TYPE):
            if not stage.has_name or not stage.id:
                logger.debug(f"Skipping unnamed or id-less {ACTION_STAGE_TYPE} stage")
                continue

            inputs, outputs = self._parameters(stage, index)
            actions.append(VBOActionDef(
                id=stage.id,
                name=stage.name,
                type=ACTION_STAGE_TYPE,
                description=stage.narrative,
                inputs=_to_params(inputs),
                outputs=_to_params(outputs),
            ))

        logger.debug(f"Extracted {len(actions)} action definitions")
        return actions

    def _parameters(self, stage: Stage, index: StageIndex) -> tuple[tuple[StageParam, ...], tuple[StageParam, ...]]:
        inputs, outputs = stage.inputs, stage.outputs
        if (inputs and outputs) or not stage.subsheet_id:
            return inputs, outputs

        page = index.stages_of(stage.subsheet_id)
        if not inputs:
            inputs = next((s.inputs for s in page if s.type == "Start" and s.inputs), ())
        if not outputs:
            outputs = next((s.outputs for s in page if s.type == "End" and s.outputs), ())
        return inputs, outputs


@dataclass
class ObjectDefinition:
    """Actions and elements extracted from one object definition."""
    name: str
    version: str
    narrative: str
    actions: list[VBOActionDef] = field(default_factory=list)
    elements: list[VBOElement] = field(default_factory=list)


def find_appdef(process: XmlNode) -> XmlNode | None:
    """Locate the application definition, preferring a direct child."""
    appdef = process.find("appdef")
    if appdef is None:
        appdef = next(process.iter("appdef"), None)
    return appdef


def extract_object_definition(process: XmlNode, notes: NoteCollector | None = None) -> ObjectDefinition:
    """Extract action definitions and Application Modeller elements.

    Args:
        process: The object's ``<process>`` node
        notes: Collector for data-quality notes

    Returns:
        ObjectDefinition with defaults applied to missing metadata
    """
    notes = notes or NoteCollector()
    index = StageIndex.from_process(process)
    return ObjectDefinition(
        name=process.get("name") or "Unknown VBO",
        version=process.get("version") or "1.0",
        narrative=process.get("narrative") or "",
        actions=ActionExtractor().extract(index),
        elements=ElementExtractor(notes).extract(find_appdef(process)),
    )
