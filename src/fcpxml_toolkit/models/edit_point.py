"""
Edit point models.

An edit point is the boundary between two consecutive clips on a spine.
These values are derived on every detection call and never stored back
into a document.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field

from .rational_time import RationalTime


class EditType(str, Enum):
    """What separates two adjacent clips."""
    HARD_CUT = "hard_cut"
    TRANSITION = "transition"
    GAP = "gap"


class SourceRelationship(str, Enum):
    """Whether both sides of a cut come from the same resource."""
    SAME_CLIP = "same_clip"
    DIFFERENT_CLIPS = "different_clips"


class EditPoint(BaseModel):
    """Boundary between an outgoing and an incoming clip."""
    index: int = Field(..., ge=0, description="Position of the edit among all edit points")
    position: RationalTime = Field(..., description="Start of the incoming clip on the spine")
    timeline_offset: str = Field(..., description="Incoming clip offset as written in the document")
    edit_type: EditType = Field(..., description="Cut, transition or gap")
    source_relationship: SourceRelationship = Field(..., description="Same or different source")
    transition_name: Optional[str] = Field(None, description="Transition name for TRANSITION edits")

    outgoing_clip_name: Optional[str] = Field(None, description="Name of the clip before the edit")
    incoming_clip_name: Optional[str] = Field(None, description="Name of the clip after the edit")
    outgoing_clip_ref: Optional[str] = Field(None, description="Resource id of the clip before the edit")
    incoming_clip_ref: Optional[str] = Field(None, description="Resource id of the clip after the edit")

    @property
    def is_hard_cut(self) -> bool:
        return self.edit_type == EditType.HARD_CUT

    def __str__(self) -> str:
        kind = self.edit_type.value
        if self.edit_type == EditType.TRANSITION and self.transition_name:
            kind = f"{kind} ({self.transition_name})"
        return (
            f"#{self.index} at {self.timeline_offset}: {kind}, "
            f"{self.source_relationship.value} "
            f"[{self.outgoing_clip_name or '?'} -> {self.incoming_clip_name or '?'}]"
        )


class CutDetectionResult(BaseModel):
    """All edit points on one spine plus aggregate counts."""
    edit_points: List[EditPoint] = Field(default_factory=list, description="Edit points in spine order")

    @property
    def total_edit_points(self) -> int:
        return len(self.edit_points)

    def _count_type(self, edit_type: EditType) -> int:
        return sum(1 for point in self.edit_points if point.edit_type == edit_type)

    def _count_relationship(self, relationship: SourceRelationship) -> int:
        return sum(1 for point in self.edit_points if point.source_relationship == relationship)

    @property
    def hard_cut_count(self) -> int:
        return self._count_type(EditType.HARD_CUT)

    @property
    def transition_count(self) -> int:
        return self._count_type(EditType.TRANSITION)

    @property
    def gap_cut_count(self) -> int:
        return self._count_type(EditType.GAP)

    @property
    def same_clip_cut_count(self) -> int:
        return self._count_relationship(SourceRelationship.SAME_CLIP)

    @property
    def different_clips_cut_count(self) -> int:
        return self._count_relationship(SourceRelationship.DIFFERENT_CLIPS)

    @property
    def summary(self) -> str:
        return (
            f"{self.total_edit_points} edit point(s): {self.hard_cut_count} hard cut(s), "
            f"{self.transition_count} transition(s), {self.gap_cut_count} gap(s); "
            f"{self.same_clip_cut_count} same-clip, {self.different_clips_cut_count} different-clip"
        )
