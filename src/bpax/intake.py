"""File intake checks applied before analysis.

The engine trusts its input; these boundary rules (extension allow-list,
maximum size) run here, where files are read.
"""

import logging
from pathlib import Path

from bpax.config import IntakeConfig
from bpax.errors import FileRejectedError

logger = logging.getLogger(__name__)


def check_export(path: Path, intake: IntakeConfig) -> int:
    """Validate a file against intake rules.

    Args:
        path: File to check
        intake: Intake configuration

    Returns:
        File size in bytes

    Raises:
        FileRejectedError: If the file is missing, too large or of a disallowed type
    """
    if not path.exists() or not path.is_file():
        raise FileRejectedError(f"File not found: {path}")

    if path.suffix.lower() not in intake.allowed_extensions:
        allowed = ", ".join(intake.allowed_extensions)
        raise FileRejectedError(f"Unsupported file type '{path.suffix or path.name}'; allowed: {allowed}")

    size = path.stat().st_size
    if size > intake.max_file_size_bytes:
        raise FileRejectedError(
            f"File {path.name} is {size} bytes; limit is {intake.max_file_size_mb} MB"
        )
    return size


def read_export(path: Path, intake: IntakeConfig) -> tuple[bytes, int]:
    """Check and read a Blue Prism export.

    Returns:
        (raw bytes, size in bytes)
    """
    size = check_export(path, intake)
    logger.debug(f"Reading {path} ({size} bytes)")
    try:
        return path.read_bytes(), size
    except OSError as e:
        raise FileRejectedError(f"Cannot read {path}: {e}") from e
