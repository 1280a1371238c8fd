"""Per-analysis data-quality note collection.

Blue Prism exports routinely contain nodes the engine has to skip or repair.
Those conditions are not failures; they are logged and recorded as notes on
the analysis result so callers can see what was dropped.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class NoteSeverity(str, Enum):
    """Note severity levels."""
    WARNING = "warning"   # Data dropped or repaired
    INFO = "info"         # Notable but harmless format variant


class DataQualityNote(BaseModel):
    """Single data-quality observation made during one analysis."""
    severity: NoteSeverity
    component: str                    # e.g. "elements", "release"
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, use_enum_values=True)


def count_by_severity(notes: List[DataQualityNote]) -> Dict[str, int]:
    """Tally notes per severity, in first-seen order."""
    counts: Dict[str, int] = {}
    for note in notes:
        counts[note.severity] = counts.get(note.severity, 0) + 1
    return counts


class NoteCollector:
    """Collects data-quality notes for a single analysis run.

    One collector is created per analysis; it is never shared between
    concurrent analyses.
    """

    def __init__(self, source: Optional[str] = None):
        self.source = source
        self.notes: List[DataQualityNote] = []

    def warn(self, component: str, message: str, **context: Any) -> None:
        """Record a warning-level note and log it."""
        self._add(NoteSeverity.WARNING, component, message, context)
        logger.warning(f"{self._prefix()}{component}: {message}")

    def info(self, component: str, message: str, **context: Any) -> None:
        """Record an info-level note and log it at debug level."""
        self._add(NoteSeverity.INFO, component, message, context)
        logger.debug(f"{self._prefix()}{component}: {message}")

    def snapshot(self) -> List[DataQualityNote]:
        """Return a copy of the notes gathered so far."""
        return list(self.notes)

    def count_by_severity(self) -> Dict[str, int]:
        return count_by_severity(self.notes)

    def _add(self, severity: NoteSeverity, component: str, message: str, context: Dict[str, Any]) -> None:
        self.notes.append(DataQualityNote(
            severity=severity,
            component=component,
            message=message,
            context=context,
        ))

    def _prefix(self) -> str:
        return f"[{self.source}] " if self.source else ""
