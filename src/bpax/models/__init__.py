"""Data models for Blue Prism stages and analysis results."""

from bpax.models.analysis import (
    STUB_VBO_NARRATIVE,
    AnalysisResult,
    ElementAttribute,
    Param,
    ProcessAnalysis,
    ReleaseAnalysis,
    ReleaseProcess,
    ReleaseVBO,
    VBOAction,
    VBOActionDef,
    VBOAnalysis,
    VBODependency,
    VBOElement,
)
from bpax.models.stage import ResourceRef, Stage, StageParam, Subsheet

__all__ = [
    "STUB_VBO_NARRATIVE",
    "AnalysisResult",
    "ElementAttribute",
    "Param",
    "ProcessAnalysis",
    "ReleaseAnalysis",
    "ReleaseProcess",
    "ReleaseVBO",
    "ResourceRef",
    "Stage",
    "StageParam",
    "Subsheet",
    "VBOAction",
    "VBOActionDef",
    "VBOAnalysis",
    "VBODependency",
    "VBOElement",
]
