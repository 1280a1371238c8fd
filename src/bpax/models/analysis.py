"""Pydantic models for analysis results.

Every record is frozen once built and serialises with camelCase aliases so
the JSON handed to persistence or presentation layers keeps the field names
those layers expect (``usageCount``, ``parentId``, ...).
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from bpax.diagnostics import DataQualityNote

STUB_VBO_NARRATIVE = "Referenced VBO (not included in release)"


class _Record(BaseModel):
    """Common configuration for result records."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Plain nested dict for JSON output; absent optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VBOAction(_Record):
    """Usage of one action of a VBO, aggregated across a process."""
    id: str
    name: str
    usage_count: int = Field(alias="usageCount")
    locations: list[str] = Field(default_factory=list)  # Distinct, first-seen order
    description: str | None = None


class VBODependency(_Record):
    """Usage of one VBO, aggregated across a process."""
    id: str
    name: str
    usage_count: int = Field(alias="usageCount")
    locations: list[str] = Field(default_factory=list)
    actions: list[VBOAction] = Field(default_factory=list)
    description: str | None = None


class Param(_Record):
    """Action parameter definition."""
    name: str
    type: str = "text"
    description: str | None = None


class VBOActionDef(_Record):
    """Externally callable action defined by a VBO (one per SubSheetInfo stage)."""
    id: str
    name: str
    type: str = "SubSheetInfo"
    description: str | None = None
    inputs: list[Param] | None = None
    outputs: list[Param] | None = None


class ElementAttribute(_Record):
    """Application Modeller attribute with a value descriptor."""
    datatype: str | None = None
    value: str | None = None
    inuse: bool = False


class VBOElement(_Record):
    """Application Modeller element or group."""
    id: str
    name: str
    type: str
    parent_id: str | None = Field(alias="parentId", default=None)
    path: str
    attributes: dict[str, ElementAttribute] | None = None
    children: list["VBOElement"] | None = None


class ReleaseProcess(_Record):
    """Process embedded in a release bundle."""
    id: str
    name: str
    version: str
    narrative: str = ""
    total_stages: int = Field(alias="totalStages")
    subsheet_count: int = Field(alias="subsheetCount")
    vbo_count: int = Field(alias="vboCount")
    action_count: int = Field(alias="actionCount")
    dependencies: list[VBODependency] = Field(default_factory=list)


class ReleaseVBO(_Record):
    """VBO embedded in, or only referenced by, a release bundle."""
    id: str
    name: str
    version: str
    narrative: str = ""
    included: bool = True  # False for a reference-only stub
    actions: list[VBOActionDef] = Field(default_factory=list)
    elements: list[VBOElement] = Field(default_factory=list)

    @property
    def is_stub(self) -> bool:
        return not self.included


class ProcessAnalysis(_Record):
    """Analysis of a .bpprocess file."""
    kind: Literal["process"] = "process"
    file_name: str = Field(alias="fileName")
    file_size: int = Field(alias="fileSize")
    process_name: str = Field(alias="processName")
    version: str
    narrative: str = ""
    total_stages: int = Field(alias="totalStages")
    vbo_count: int = Field(alias="vboCount")
    action_count: int = Field(alias="actionCount")
    subsheet_count: int = Field(alias="subsheetCount")
    dependencies: list[VBODependency] = Field(default_factory=list)
    notes: list[DataQualityNote] = Field(default_factory=list)


class VBOAnalysis(_Record):
    """Analysis of a .bpobject file."""
    kind: Literal["vbo"] = "vbo"
    file_name: str = Field(alias="fileName")
    file_size: int = Field(alias="fileSize")
    vbo_name: str = Field(alias="vboName")
    version: str
    narrative: str = ""
    action_count: int = Field(alias="actionCount")
    element_count: int = Field(alias="elementCount")
    actions: list[VBOActionDef] = Field(default_factory=list)
    elements: list[VBOElement] = Field(default_factory=list)
    notes: list[DataQualityNote] = Field(default_factory=list)


class ReleaseAnalysis(_Record):
    """Analysis of a .bprelease bundle."""
    kind: Literal["release"] = "release"
    file_name: str = Field(alias="fileName")
    file_size: int = Field(alias="fileSize")
    release_name: str = Field(alias="releaseName")
    package_name: str = Field(alias="packageName")
    created: str = ""
    created_by: str = Field(alias="createdBy", default="")
    release_notes: str = Field(alias="releaseNotes", default="")
    process_count: int = Field(alias="processCount")
    vbo_count: int = Field(alias="vboCount")
    total_action_count: int = Field(alias="totalActionCount")
    total_element_count: int = Field(alias="totalElementCount")
    processes: list[ReleaseProcess] = Field(default_factory=list)
    vbos: list[ReleaseVBO] = Field(default_factory=list)
    notes: list[DataQualityNote] = Field(default_factory=list)


AnalysisResult = ProcessAnalysis | VBOAnalysis | ReleaseAnalysis
