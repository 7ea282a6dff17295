"""Run persistence: the versioned JSON interchange document.

Imports are all-or-nothing: data is fully validated into a fresh Run
before anything is returned, so a failed import never leaves a partially
populated run behind.
"""

import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from ..models import Run

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class RunParseError(Exception):
    """Interchange data is malformed, truncated or invalid."""


class RunDocument(BaseModel):
    """Top-level interchange document wrapping a run.

    Attributes:
        format_version: Version of the document layout.
        run: The exported run.
    """

    format_version: Literal[1] = Field(default=FORMAT_VERSION, description="Document version")
    run: Run


def export_run(run: Run) -> str:
    """Serialize a run to the interchange format.

    Args:
        run: Run to export

    Returns:
        Indented JSON document
    """
    return RunDocument(run=run).model_dump_json(indent=2)


def import_run(data: str | bytes) -> Run:
    """Parse a run from the interchange format.

    Args:
        data: JSON document as produced by export_run

    Returns:
        A new Run

    Raises:
        RunParseError: If the data cannot be parsed into a valid run
    """
    try:
        document = RunDocument.model_validate_json(data)
    except ValidationError as e:
        raise RunParseError(f"Cannot parse run: {e.error_count()} error(s)\n{e}") from e
    return document.run


def save_run(run: Run, path: Path) -> None:
    """Write a run to disk, replacing the file atomically.

    Args:
        run: Run to save
        path: Destination file
    """
    tmp_path = path.with_name(path.name + ".tmp")
    tmp_path.write_text(export_run(run))
    os.replace(tmp_path, path)
    logger.debug("Saved run to %s", path)


def load_run(path: Path) -> Run:
    """Load a run from disk.

    Raises:
        RunParseError: If the file contents are not a valid run
        OSError: If the file cannot be read
    """
    return import_run(path.read_bytes())
