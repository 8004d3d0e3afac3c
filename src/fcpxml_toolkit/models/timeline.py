"""
Timeline data models.

A Timeline is an ordered list of lane-placed clips plus timeline-level
annotations. Storage order is insertion order; ``sorted_clips`` gives the
time-ordered view. Lane 0 is the primary storyline, positive lanes sit
above it and negative lanes below.

Clip ranges are half-open, ``[offset, offset + duration)``. Two clips on a
lane collide only when ``a.start < b.end and a.end > b.start``, so a clip
that ends exactly where the next begins does not overlap it.

Only the documented edit operations mutate a timeline. Every mutating
call refreshes ``modified_at``; ``created_at`` never changes, including in
the copies returned by the pure ``inserting_*`` variants.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterator, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator

from ..config import settings
from .annotations import ChapterMarker, Keyword, Marker, Metadata, Rating
from .rational_time import RationalTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ranges_overlap(
    a_start: RationalTime,
    a_duration: RationalTime,
    b_start: RationalTime,
    b_duration: RationalTime,
) -> bool:
    """Half-open interval overlap: ``[a_start, a_end)`` against ``[b_start, b_end)``.

    Ranges that only share a boundary point (one ends where the other
    begins) do not overlap.
    """
    return a_start < b_start + b_duration and a_start + a_duration > b_start


class NoAvailableLaneError(Exception):
    """Raised when a clip cannot be placed without colliding on its lane."""

    def __init__(self, offset: RationalTime, duration: RationalTime, lane: Optional[int] = None):
        self.offset = offset
        self.duration = duration
        self.lane = lane
        where = f" on lane {lane}" if lane is not None else ""
        super().__init__(
            f"No available lane{where} for clip at {offset.to_fcpxml()} "
            f"lasting {duration.to_fcpxml()}"
        )


class TimelineFormat(BaseModel):
    """Video format of a timeline."""
    width: int = Field(..., gt=0, description="Frame width in pixels")
    height: int = Field(..., gt=0, description="Frame height in pixels")
    frame_duration: RationalTime = Field(..., description="Duration of one frame")
    color_space: Optional[str] = Field(None, description="e.g. 1-1-1 (Rec. 709)")
    name: Optional[str] = Field(None, description="FCPXML format name, e.g. FFVideoFormat1080p2398")

    @classmethod
    def hd1080p(cls, frame_duration: Optional[RationalTime] = None, color_space: str = "1-1-1 (Rec. 709)") -> "TimelineFormat":
        """1920x1080, 23.976 fps unless given."""
        return cls(
            width=1920,
            height=1080,
            frame_duration=frame_duration or RationalTime(1001, 24000),
            color_space=color_space,
        )

    @classmethod
    def uhd4k(cls, frame_duration: Optional[RationalTime] = None, color_space: str = "1-1-1 (Rec. 709)") -> "TimelineFormat":
        """3840x2160, 23.976 fps unless given."""
        return cls(
            width=3840,
            height=2160,
            frame_duration=frame_duration or RationalTime(1001, 24000),
            color_space=color_space,
        )

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


def _remove_first(items: List[Any], item: Any) -> bool:
    for index, existing in enumerate(items):
        if existing == item:
            del items[index]
            return True
    return False


class TimelineClip(BaseModel):
    """A clip placed on a timeline lane."""
    name: Optional[str] = Field(None, description="Display name")
    asset_ref: str = Field(..., description="Resource id of the source media")
    offset: RationalTime = Field(default_factory=RationalTime.zero, description="Position on the timeline")
    duration: RationalTime = Field(..., description="Length on the timeline")
    start: RationalTime = Field(default_factory=RationalTime.zero, description="In point within the source")
    lane: int = Field(0, description="0 = primary storyline")
    is_video_disabled: bool = Field(False, description="Audio-only use of a video source")

    markers: List[Marker] = Field(default_factory=list)
    chapter_markers: List[ChapterMarker] = Field(default_factory=list)
    keywords: List[Keyword] = Field(default_factory=list)
    ratings: List[Rating] = Field(default_factory=list)
    metadata: Metadata = Field(default_factory=Metadata)

    @field_validator('duration')
    @classmethod
    def validate_duration(cls, v):
        if v.is_negative:
            raise ValueError(f'duration must not be negative, got {v.to_fcpxml()}')
        return v

    @property
    def end_time(self) -> RationalTime:
        """Timeline time where the clip ends (exclusive)."""
        return self.offset + self.duration

    def overlaps(self, offset: RationalTime, duration: RationalTime) -> bool:
        return ranges_overlap(self.offset, self.duration, offset, duration)

    def placed(self, offset: RationalTime, lane: int) -> "TimelineClip":
        """Copy of this clip at a new position."""
        return self.model_copy(update={"offset": offset, "lane": lane}, deep=True)

    def add_marker(self, marker: Marker) -> None:
        self.markers.append(marker)

    def remove_marker(self, marker: Marker) -> bool:
        return _remove_first(self.markers, marker)

    def add_chapter_marker(self, marker: ChapterMarker) -> None:
        self.chapter_markers.append(marker)

    def remove_chapter_marker(self, marker: ChapterMarker) -> bool:
        return _remove_first(self.chapter_markers, marker)

    def add_keyword(self, keyword: Keyword) -> None:
        self.keywords.append(keyword)

    def remove_keyword(self, keyword: Keyword) -> bool:
        return _remove_first(self.keywords, keyword)

    def add_rating(self, rating: Rating) -> None:
        self.ratings.append(rating)

    def remove_rating(self, rating: Rating) -> bool:
        return _remove_first(self.ratings, rating)


@dataclass(frozen=True)
class RippleLanes:
    """Which lanes a ripple insert shifts.

    Build with ``primary_only()``, ``single(lane)``, ``range(low, high)``
    (inclusive) or ``all()``.
    """
    low: Optional[int] = None
    high: Optional[int] = None

    @classmethod
    def primary_only(cls) -> "RippleLanes":
        return cls(0, 0)

    @classmethod
    def single(cls, lane: int) -> "RippleLanes":
        return cls(lane, lane)

    @classmethod
    def range(cls, low: int, high: int) -> "RippleLanes":
        if low > high:
            low, high = high, low
        return cls(low, high)

    @classmethod
    def all(cls) -> "RippleLanes":
        return cls(None, None)

    @classmethod
    def from_setting(cls, scope: str) -> "RippleLanes":
        """``"all"`` or ``"primary"``, as used by ``ripple_default_scope``."""
        if scope.lower() == "primary":
            return cls.primary_only()
        return cls.all()

    def contains(self, lane: int) -> bool:
        if self.low is None or self.high is None:
            return True
        return self.low <= lane <= self.high


class ClipShift(BaseModel):
    """One clip moved by a ripple insert."""
    clip_index: int = Field(..., ge=0, description="Index of the clip in Timeline.clips")
    original_offset: RationalTime = Field(..., description="Offset before the insert")
    new_offset: RationalTime = Field(..., description="Offset after the insert")

    @property
    def delta(self) -> RationalTime:
        return self.new_offset - self.original_offset


class RippleInsertResult(BaseModel):
    """Outcome of a ripple insert."""
    inserted_clip: TimelineClip = Field(..., description="The clip as placed")
    shifted_clips: List[ClipShift] = Field(default_factory=list, description="Clips moved later")


class ClipPlacement(BaseModel):
    """A clip paired with its resolved interval on the timeline."""
    clip_index: int = Field(..., ge=0, description="Index of the clip in Timeline.clips")
    clip: TimelineClip = Field(..., description="The placed clip")
    lane: int = Field(..., description="Lane the clip occupies")
    offset: RationalTime = Field(..., description="Interval start")
    duration: RationalTime = Field(..., description="Interval length")

    @property
    def end_time(self) -> RationalTime:
        return self.offset + self.duration


def _lane_probe_order(preferred: int, max_distance: int) -> Iterator[int]:
    # preferred, +1, -1, +2, -2, ...
    yield preferred
    for distance in range(1, max_distance + 1):
        yield preferred + distance
        yield preferred - distance


class Timeline(BaseModel):
    """An editable multi-lane timeline."""
    name: str = Field("Untitled", description="Project or sequence name")
    format: Optional[TimelineFormat] = Field(None, description="Video format")
    clips: List[TimelineClip] = Field(default_factory=list, description="Clips in insertion order")

    markers: List[Marker] = Field(default_factory=list)
    chapter_markers: List[ChapterMarker] = Field(default_factory=list)
    keywords: List[Keyword] = Field(default_factory=list)
    ratings: List[Rating] = Field(default_factory=list)
    metadata: Metadata = Field(default_factory=Metadata)

    created_at: datetime = Field(default_factory=_utcnow, frozen=True, description="Construction time")
    modified_at: datetime = Field(default_factory=_utcnow, description="Last mutation time")

    def model_post_init(self, __context: Any) -> None:
        if "modified_at" not in self.model_fields_set:
            self.modified_at = self.created_at

    def _touch(self) -> None:
        """Record a mutation; modified_at strictly increases."""
        now = _utcnow()
        if now <= self.modified_at:
            now = self.modified_at + timedelta(microseconds=1)
        self.modified_at = now

    # Derived values

    @property
    def duration(self) -> RationalTime:
        """End of the last primary-storyline clip; other lanes don't count."""
        ends = [clip.end_time for clip in self.clips if clip.lane == 0]
        return max(ends) if ends else RationalTime.zero()

    @property
    def sorted_clips(self) -> List[TimelineClip]:
        return sorted(self.clips, key=lambda clip: (clip.offset, clip.lane))

    @property
    def is_empty(self) -> bool:
        return not self.clips

    @property
    def clip_count(self) -> int:
        return len(self.clips)

    # Editing

    def add_clip(self, clip: TimelineClip) -> None:
        """Append a clip as-is, without ripple or lane checks."""
        self.clips.append(clip)
        self._touch()

    def insert_clip_with_ripple(
        self,
        clip: TimelineClip,
        at: RationalTime,
        lane: Optional[int] = None,
        ripple_lanes: Optional[RippleLanes] = None,
    ) -> RippleInsertResult:
        """Insert ``clip`` at ``at``, pushing later clips right.

        Every existing clip within ``ripple_lanes`` whose offset is at or
        after ``at`` moves later by the inserted clip's duration. Clips that
        start earlier stay put even when they span past ``at``.

        Args:
            clip: Clip to insert; its offset is replaced by ``at``
            at: Insertion time
            lane: Lane for the new clip, defaults to ``clip.lane``
            ripple_lanes: Lanes to shift, defaults to the configured scope

        Returns:
            The placed clip and one ClipShift per moved clip
        """
        target_lane = clip.lane if lane is None else lane
        scope = ripple_lanes or RippleLanes.from_setting(settings.ripple_default_scope)

        shifts: List[ClipShift] = []
        if not clip.duration.is_zero:
            for index, existing in enumerate(self.clips):
                if not scope.contains(existing.lane) or existing.offset < at:
                    continue
                new_offset = existing.offset + clip.duration
                shifts.append(ClipShift(
                    clip_index=index,
                    original_offset=existing.offset,
                    new_offset=new_offset,
                ))
                existing.offset = new_offset

        placed = clip.placed(at, target_lane)
        self.clips.append(placed)
        self._touch()
        return RippleInsertResult(inserted_clip=placed, shifted_clips=shifts)

    def inserting_clip_with_ripple(
        self,
        clip: TimelineClip,
        at: RationalTime,
        lane: Optional[int] = None,
        ripple_lanes: Optional[RippleLanes] = None,
    ) -> Tuple["Timeline", RippleInsertResult]:
        """Pure form of ``insert_clip_with_ripple``; this timeline is untouched."""
        copy = self.model_copy(deep=True)
        result = copy.insert_clip_with_ripple(clip, at, lane=lane, ripple_lanes=ripple_lanes)
        return copy, result

    def is_lane_free(self, lane: int, at: RationalTime, duration: RationalTime) -> bool:
        return not any(
            existing.lane == lane and existing.overlaps(at, duration)
            for existing in self.clips
        )

    def find_available_lane(
        self,
        at: RationalTime,
        duration: RationalTime,
        starting_from: int = 0,
        max_search: Optional[int] = None,
    ) -> Optional[int]:
        """Nearest lane to ``starting_from`` with room for the interval.

        Probes the starting lane, then alternates outward (+1, -1, +2, -2...)
        up to ``max_search`` lanes away.
        """
        limit = settings.max_lane_search if max_search is None else max_search
        for lane in _lane_probe_order(starting_from, limit):
            if self.is_lane_free(lane, at, duration):
                return lane
        return None

    def insert_clip_auto_lane(
        self,
        clip: TimelineClip,
        at: RationalTime,
        preferred_lane: Optional[int] = None,
        auto_assign_lane: bool = True,
    ) -> ClipPlacement:
        """Place ``clip`` at ``at`` on the first lane where it fits.

        Args:
            clip: Clip to place; its offset and lane are replaced
            at: Placement time
            preferred_lane: Lane to try first, defaults to ``clip.lane``
            auto_assign_lane: Search other lanes when the preferred one collides

        Returns:
            Placement of the new clip

        Raises:
            NoAvailableLaneError: On a collision with auto assignment off, or
                when no lane within range is free. The timeline is unchanged.
        """
        preferred = clip.lane if preferred_lane is None else preferred_lane

        if self.is_lane_free(preferred, at, clip.duration):
            lane = preferred
        elif not auto_assign_lane:
            raise NoAvailableLaneError(at, clip.duration, lane=preferred)
        else:
            lane = self.find_available_lane(at, clip.duration, starting_from=preferred)
            if lane is None:
                raise NoAvailableLaneError(at, clip.duration)

        placed = clip.placed(at, lane)
        self.clips.append(placed)
        self._touch()
        return self._placement(len(self.clips) - 1)

    def inserting_clip_auto_lane(
        self,
        clip: TimelineClip,
        at: RationalTime,
        preferred_lane: Optional[int] = None,
        auto_assign_lane: bool = True,
    ) -> Tuple["Timeline", ClipPlacement]:
        """Pure form of ``insert_clip_auto_lane``; this timeline is untouched."""
        copy = self.model_copy(deep=True)
        placement = copy.insert_clip_auto_lane(
            clip, at, preferred_lane=preferred_lane, auto_assign_lane=auto_assign_lane
        )
        return copy, placement

    # Queries

    def clips_on_lane(self, lane: int) -> List[TimelineClip]:
        return sorted(
            (clip for clip in self.clips if clip.lane == lane),
            key=lambda clip: clip.offset,
        )

    def clips_in_range(self, start: RationalTime, end: RationalTime) -> List[TimelineClip]:
        """Clips overlapping ``[start, end)``, time ordered."""
        duration = end - start
        return [clip for clip in self.sorted_clips if clip.overlaps(start, duration)]

    def clips_with_asset_ref(self, asset_ref: str) -> List[TimelineClip]:
        return [clip for clip in self.sorted_clips if clip.asset_ref == asset_ref]

    @property
    def lane_range(self) -> Optional[Tuple[int, int]]:
        """(lowest, highest) lane in use, None when empty."""
        if not self.clips:
            return None
        lanes = [clip.lane for clip in self.clips]
        return min(lanes), max(lanes)

    def _placement(self, index: int) -> ClipPlacement:
        clip = self.clips[index]
        return ClipPlacement(
            clip_index=index,
            clip=clip,
            lane=clip.lane,
            offset=clip.offset,
            duration=clip.duration,
        )

    def all_placements(self) -> List[ClipPlacement]:
        placements = [self._placement(index) for index in range(len(self.clips))]
        return sorted(placements, key=lambda placement: (placement.offset, placement.lane))

    def placements_on_lane(self, lane: int) -> List[ClipPlacement]:
        return [placement for placement in self.all_placements() if placement.lane == lane]

    def placements_in_range(self, start: RationalTime, end: RationalTime) -> List[ClipPlacement]:
        duration = end - start
        return [
            placement for placement in self.all_placements()
            if ranges_overlap(placement.offset, placement.duration, start, duration)
        ]

    # Annotations

    def _add_annotation(self, items: List[Any], item: Any) -> bool:
        if item in items:
            return False
        items.append(item)
        self._touch()
        return True

    def _remove_annotation(self, items: List[Any], item: Any) -> bool:
        removed = _remove_first(items, item)
        if removed:
            self._touch()
        return removed

    def add_marker(self, marker: Marker) -> bool:
        """Add a marker; False when an identical one exists."""
        return self._add_annotation(self.markers, marker)

    def remove_marker(self, marker: Marker) -> bool:
        return self._remove_annotation(self.markers, marker)

    def add_chapter_marker(self, marker: ChapterMarker) -> bool:
        return self._add_annotation(self.chapter_markers, marker)

    def remove_chapter_marker(self, marker: ChapterMarker) -> bool:
        return self._remove_annotation(self.chapter_markers, marker)

    def add_keyword(self, keyword: Keyword) -> bool:
        return self._add_annotation(self.keywords, keyword)

    def remove_keyword(self, keyword: Keyword) -> bool:
        return self._remove_annotation(self.keywords, keyword)

    def add_rating(self, rating: Rating) -> bool:
        return self._add_annotation(self.ratings, rating)

    def remove_rating(self, rating: Rating) -> bool:
        return self._remove_annotation(self.ratings, rating)

    def set_metadata(self, key, value: Optional[str]) -> None:
        """Set or clear (value None) a metadata entry."""
        self.metadata.set(key, value)
        self._touch()

    @property
    def sorted_markers(self) -> List[Marker]:
        return sorted(self.markers, key=lambda marker: marker.start)

    @property
    def sorted_chapter_markers(self) -> List[ChapterMarker]:
        return sorted(self.chapter_markers, key=lambda marker: marker.start)

    @property
    def sorted_keywords(self) -> List[Keyword]:
        return sorted(self.keywords, key=lambda keyword: keyword.start)

    @property
    def sorted_ratings(self) -> List[Rating]:
        return sorted(self.ratings, key=lambda rating: rating.start)
