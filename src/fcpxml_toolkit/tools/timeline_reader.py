"""
Build an editable Timeline from a document spine.

Spine items with a source become lane 0 clips. Clips anchored to a spine
item (those carrying a ``lane`` attribute) become connected clips; their
timeline offset is the parent's offset plus the child's offset measured
from the parent's start:

    timeline_offset = parent.offset + (child.offset - parent.start)
"""

import logging
from typing import List, Optional

from pydantic import ValidationError

from ..config import Settings, settings as default_settings
from ..document.tree import Document
from ..models.annotations import ChapterMarker, Keyword, Marker, Metadata, Rating, RatingValue
from ..models.rational_time import RationalTime
from ..models.timeline import Timeline, TimelineClip, TimelineFormat
from .cut_detector import CutDetector


logger = logging.getLogger(__name__)


class TimelineReader:
    """Reads spines into Timeline models."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._detector = CutDetector()

    def _time(self, document: Document, index: int, name: str, default: str = "0s") -> RationalTime:
        raw = document.get(index, name)
        if raw is None:
            raw = default
        return RationalTime.parse(raw, strict=self.settings.strict_time_parsing)

    def read(self, document: Document, spine: Optional[int] = None) -> Timeline:
        """Read the spine at ``spine`` (default: first project's primary spine).

        Returns:
            A Timeline, empty when no spine is found
        """
        if spine is None:
            spine = self._detector.find_primary_spine(document)
        if spine is None:
            logger.debug("No spine to read; returning empty timeline")
            return Timeline()

        name = "Untitled"
        timeline_format = None
        metadata = Metadata()
        for ancestor in document.ancestors(spine):
            tag = document.tag(ancestor)
            if tag == "sequence":
                timeline_format = self._read_format(document, document.get(ancestor, "format"))
                metadata_node = document.first_child(ancestor, "metadata")
                if metadata_node is not None:
                    metadata = self._read_metadata(document, metadata_node)
            elif tag == "project":
                name = document.get(ancestor, "name") or name
                break

        clips: List[TimelineClip] = []
        markers: List[Marker] = []
        for item in document.children(spine):
            ref = self._detector.source_ref(document, item)
            if ref is not None:
                self._add_clip(clips, document, item, ref, lane=0, offset=self._time(document, item, "offset"))
            elif document.tag(item) == "gap":
                markers.extend(self._read_markers(document, item))
            clips.extend(self._read_connected(document, item))

        timeline = Timeline(
            name=name,
            format=timeline_format,
            clips=clips,
            markers=markers,
            metadata=metadata,
        )
        logger.info(f"Read timeline {name!r} with {timeline.clip_count} clip(s)")
        return timeline

    def _read_connected(self, document: Document, parent: int) -> List[TimelineClip]:
        """Clips anchored to ``parent``, including secondary storylines."""
        parent_offset = self._time(document, parent, "offset")
        parent_start = self._time(document, parent, "start")
        connected: List[TimelineClip] = []

        for child in document.children(parent):
            lane_text = document.get(child, "lane")
            if lane_text is None:
                continue
            try:
                lane = int(lane_text)
            except ValueError:
                logger.warning(f"Ignoring anchored <{document.tag(child)}> with lane {lane_text!r}")
                continue

            if document.tag(child) == "spine":
                # Storyline items share the parent's local time
                for item in document.children(child):
                    ref = self._detector.source_ref(document, item)
                    if ref is None:
                        continue
                    offset = parent_offset + (self._time(document, item, "offset") - parent_start)
                    self._add_clip(connected, document, item, ref, lane=lane, offset=offset)
                continue

            ref = self._detector.source_ref(document, child)
            if ref is None:
                continue
            offset = parent_offset + (self._time(document, child, "offset") - parent_start)
            self._add_clip(connected, document, child, ref, lane=lane, offset=offset)

        return connected

    def _add_clip(
        self,
        clips: List[TimelineClip],
        document: Document,
        index: int,
        ref: str,
        lane: int,
        offset: RationalTime,
    ) -> None:
        """Append the clip at ``index``, skipping it when the model rejects its values."""
        try:
            clips.append(self._read_clip(document, index, ref, lane=lane, offset=offset))
        except ValidationError as e:
            logger.warning(
                f"Skipping <{document.tag(index)}> referencing {ref!r}: "
                f"{e.errors()[0]['msg']}"
            )

    def _read_clip(self, document: Document, index: int, ref: str, lane: int, offset: RationalTime) -> TimelineClip:
        metadata_node = document.first_child(index, "metadata")
        return TimelineClip(
            name=document.get(index, "name"),
            asset_ref=ref,
            offset=offset,
            duration=self._time(document, index, "duration"),
            start=self._time(document, index, "start"),
            lane=lane,
            is_video_disabled=document.get(index, "srcEnable") == "audio",
            markers=self._read_markers(document, index),
            chapter_markers=[
                ChapterMarker(
                    start=self._time(document, child, "start"),
                    duration=self._time(document, child, "duration", "1/24s"),
                    value=document.get(child, "value", ""),
                    note=document.get(child, "note"),
                    poster_offset=(
                        self._time(document, child, "posterOffset")
                        if document.get(child, "posterOffset") is not None else None
                    ),
                )
                for child in document.child_elements(index, "chapter-marker")
            ],
            keywords=[
                Keyword(
                    start=self._time(document, child, "start"),
                    duration=self._time(document, child, "duration"),
                    value=document.get(child, "value", ""),
                    note=document.get(child, "note"),
                )
                for child in document.child_elements(index, "keyword")
            ],
            ratings=self._read_ratings(document, index),
            metadata=self._read_metadata(document, metadata_node) if metadata_node is not None else Metadata(),
        )

    def _read_markers(self, document: Document, index: int) -> List[Marker]:
        markers = []
        for child in document.child_elements(index, "marker"):
            completed = document.get(child, "completed")
            markers.append(Marker(
                start=self._time(document, child, "start"),
                duration=self._time(document, child, "duration", "1/24s"),
                value=document.get(child, "value", ""),
                note=document.get(child, "note"),
                completed=None if completed is None else completed == "1",
            ))
        return markers

    def _read_ratings(self, document: Document, index: int) -> List[Rating]:
        ratings = []
        for child in document.child_elements(index, "rating"):
            value = document.get(child, "value")
            try:
                rating_value = RatingValue(value)
            except ValueError:
                logger.warning(f"Skipping rating with unknown value {value!r}")
                continue
            ratings.append(Rating(
                start=self._time(document, child, "start"),
                duration=self._time(document, child, "duration"),
                value=rating_value,
                note=document.get(child, "note"),
            ))
        return ratings

    def _read_metadata(self, document: Document, index: int) -> Metadata:
        metadata = Metadata()
        for md in document.child_elements(index, "md"):
            key = document.get(md, "key")
            value = document.get(md, "value")
            if key and value is not None:
                metadata.set(key, value)
        return metadata

    def _read_format(self, document: Document, format_id: Optional[str]) -> Optional[TimelineFormat]:
        if not format_id:
            return None
        for index in document.find_all("format"):
            if document.get(index, "id") != format_id:
                continue
            width = document.get(index, "width")
            height = document.get(index, "height")
            frame_duration = document.get(index, "frameDuration")
            if not (width and height and frame_duration):
                return None
            try:
                return TimelineFormat(
                    width=int(width),
                    height=int(height),
                    frame_duration=RationalTime.parse(frame_duration, strict=self.settings.strict_time_parsing),
                    color_space=document.get(index, "colorSpace"),
                    name=document.get(index, "name"),
                )
            except ValueError as e:
                logger.warning(f"Ignoring unusable format {format_id!r}: {e}")
                return None
        return None


def read_timeline(document: Document, spine_index: Optional[int] = None, settings: Optional[Settings] = None) -> Timeline:
    """Convenience wrapper around ``TimelineReader.read``."""
    return TimelineReader(settings).read(document, spine_index)
