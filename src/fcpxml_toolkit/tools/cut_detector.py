"""
Edit point detection.

Walks the children of a spine, pairs up consecutive clip-like elements
and classifies what lies between each pair: a transition, a gap, or
nothing (a hard cut). Each edit is also tagged with whether both sides
come from the same source resource.
"""

import logging
from typing import List, Optional

from ..document.tree import Document
from ..interfaces import CutDetectorInterface
from ..models.edit_point import CutDetectionResult, EditPoint, EditType, SourceRelationship
from ..models.rational_time import RationalTime


logger = logging.getLogger(__name__)

# Containers whose source lives on a child rather than on the element itself
CONTAINER_CLIPS = ("clip", "sync-clip", "audition")


class CutDetector(CutDetectorInterface):
    """Classifies the boundaries between adjacent clips on a spine."""

    def find_primary_spine(self, document: Document) -> Optional[int]:
        """Spine of the first project's sequence, in document order."""
        project = document.find_first("project")
        if project is None:
            return None
        sequence = document.first_child(project, "sequence")
        if sequence is None:
            return None
        return document.first_child(sequence, "spine")

    def source_ref(self, document: Document, index: int) -> Optional[str]:
        """Resource id behind a story element, None when it isn't clip-like."""
        ref = document.get(index, "ref")
        if ref:
            return ref
        if document.tag(index) in CONTAINER_CLIPS:
            for child in document.children(index):
                child_ref = document.get(child, "ref")
                if child_ref:
                    return child_ref
        return None

    def detect_cuts(self, document: Document) -> CutDetectionResult:
        """Detect edit points on the first project's primary spine.

        Returns:
            Edit points, empty when the document has no project spine
        """
        spine = self.find_primary_spine(document)
        if spine is None:
            logger.debug("No project spine found; no edit points")
            return CutDetectionResult()
        return self.detect_cuts_in_spine(document, spine)

    def detect_cuts_in_spine(self, document: Document, spine: int) -> CutDetectionResult:
        """Detect edit points among the direct children of ``spine``.

        Args:
            document: Document holding the spine
            spine: Node index of the spine element

        Returns:
            One edit point per pair of consecutive clip-like children
        """
        children = document.children(spine)
        clips = []
        for position, index in enumerate(children):
            ref = self.source_ref(document, index)
            if ref is not None:
                clips.append((position, index, ref))

        edit_points: List[EditPoint] = []
        for (out_position, out_index, out_ref), (in_position, in_index, in_ref) in zip(clips, clips[1:]):
            between = children[out_position + 1:in_position]
            edit_type, transition_name = self._classify(document, between)

            raw_offset = document.get(in_index, "offset") or "0s"
            relationship = (
                SourceRelationship.SAME_CLIP if out_ref == in_ref
                else SourceRelationship.DIFFERENT_CLIPS
            )
            edit_points.append(EditPoint(
                index=len(edit_points),
                position=RationalTime.parse(raw_offset),
                timeline_offset=raw_offset,
                edit_type=edit_type,
                source_relationship=relationship,
                transition_name=transition_name,
                outgoing_clip_name=document.get(out_index, "name"),
                incoming_clip_name=document.get(in_index, "name"),
                outgoing_clip_ref=out_ref,
                incoming_clip_ref=in_ref,
            ))

        result = CutDetectionResult(edit_points=edit_points)
        logger.info(f"Cut detection: {result.summary}")
        return result

    def _classify(self, document: Document, between: List[int]):
        # A transition wins over a gap when both separate the clips
        for index in between:
            if document.tag(index) == "transition":
                return EditType.TRANSITION, document.get(index, "name")
        for index in between:
            if document.tag(index) == "gap":
                return EditType.GAP, None
        return EditType.HARD_CUT, None

    async def detect_cuts_async(self, document: Document) -> CutDetectionResult:
        return self.detect_cuts(document)

    async def detect_cuts_in_spine_async(self, document: Document, spine: int) -> CutDetectionResult:
        return self.detect_cuts_in_spine(document, spine)
