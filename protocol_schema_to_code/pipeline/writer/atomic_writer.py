"""
Atomic file writer for safe code generation.

Ensures that file writes are atomic to prevent data corruption
from interrupted operations.
"""

from __future__ import annotations

import ast
import logging
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..config import OutputConfig, OutputMode
from ..errors import GeneratedCodeError

logger = logging.getLogger(__name__)


def validate_python(content: str) -> None:
    """Raise GeneratedCodeError if the content does not parse as Python."""
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise GeneratedCodeError(f"Generated Python code is not valid: {e}") from e


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file

    An interrupted or rejected write never leaves the target file in an
    incomplete state.
    """

    def __init__(self, validate: Callable[[str], None] | None = None):
        """Initialize the atomic writer.

        Args:
            validate: Validation function, defaults to parsing as Python
        """
        self._validate = validate or validate_python

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            GeneratedCodeError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self._validate(content)

            temp_path.replace(path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

        logger.debug("Wrote %d bytes to %s", len(content), path)

    def write_output(self, path: Path, content: str, config: OutputConfig) -> None:
        """Write content honoring the configured output mode.

        Args:
            path: Target file path
            content: Content to write
            config: Output configuration

        Raises:
            FileExistsError: If the file exists and the mode is ERROR_IF_EXISTS
            GeneratedCodeError: If validation fails
        """
        if path.exists() and config.mode == OutputMode.ERROR_IF_EXISTS:
            raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")

        if config.atomic_write:
            self.write(path, content, validate=config.validate_before_write)
            return

        if config.validate_before_write:
            self._validate(content)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
