"""Request and response bodies for the diff API."""

from typing import List

from pydantic import BaseModel, Field

from diffview.models import DiffResult, DiffSummary, ViewMode
from diffview.rendering import RenderedDiff


class RenderRequest(BaseModel):
    """A diff payload to lay out."""
    results: List[DiffResult] = Field(default_factory=list)
    view_mode: ViewMode = ViewMode.UNIFIED
    show_line_numbers: bool = True


class RenderedDiffSet(BaseModel):
    """Rendered files plus their aggregate numbers."""
    files: List[RenderedDiff]
    summary: DiffSummary
