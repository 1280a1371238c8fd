"""Data models for Blue Prism diagram stages and subsheets.

These are the internal, per-analysis view of a process or object definition.
They are built once from the XML tree and never modified afterwards.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ResourceRef:
    """VBO/action pair a stage invokes (``<resource object=".." action=".."/>``)."""
    object: str
    action: str


@dataclass(frozen=True)
class StageParam:
    """Input or output parameter declared on a stage."""
    name: str
    type: str = "text"
    description: str | None = None


@dataclass(frozen=True)
class Stage:
    """One designer-canvas element of a process or object."""
    id: str  # stageid, unique within the file
    name: str  # Display name, may repeat
    type: str  # Action, SubSheet, SubSheetInfo, Start, End, Decision, ...
    subsheet_id: str | None = None  # Owning subsheet, None = main page
    resource: ResourceRef | None = None
    narrative: str | None = None
    inputs: tuple[StageParam, ...] = field(default_factory=tuple)
    outputs: tuple[StageParam, ...] = field(default_factory=tuple)

    @property
    def has_name(self) -> bool:
        return bool(self.name and self.name.strip())


@dataclass(frozen=True)
class Subsheet:
    """Named page of a process diagram."""
    id: str
    name: str | None = None  # None when the export omits it
    type: str | None = None  # Normal, Main, CleanUp
