"""
Generated file model — used by every writer in the pipeline.
"""

from __future__ import annotations

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file produced by a generation step.

    Attributes:
        path:      Path relative to the output root.
        content:   Full file content.
        overwrite: Whether to replace an existing file at ``path``.
        reason:    Why this file was generated.
    """

    path: str
    content: str
    overwrite: bool = False
    reason: str = ""
