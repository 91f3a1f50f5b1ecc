"""
Output writer — puts GeneratedFile objects on disk.
"""

from __future__ import annotations

import logging
from pathlib import Path

from viewforge.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)


class OutputExistsError(FileExistsError):
    """A generated file would replace an existing one."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"File already exists: {path} (use overwrite to replace)")


def write_generated_file(root: Path, file: GeneratedFile) -> Path:
    """Write a GeneratedFile under ``root``.

    Returns:
        The absolute path written.

    Raises:
        OutputExistsError: If the target exists and ``file.overwrite`` is
            false. The existing file is left untouched.
        ValueError: If the file has no path.
    """
    if not file.path:
        raise ValueError("Generated file has no path")

    target = root / file.path
    if target.exists() and not file.overwrite:
        raise OutputExistsError(target)

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(file.content, encoding="utf-8")
    logger.info("Wrote generated file: %s%s", target, f" ({file.reason})" if file.reason else "")
    return target.resolve()
