"""
Data models for the FCPXML toolkit.

Exact rational time, timecode, schema versions, validation results,
edit points and the editable timeline.
"""

from .rational_time import RationalTime, TimeParseError, parse_time
from .timecode import (
    FrameRate,
    Timecode,
    conform,
    frame_aligned,
    aligned,
    timecode_from_time,
    time_from_timecode,
    time_from_components,
    counter_string,
)
from .version import SchemaVersion
from .validation import (
    ValidationErrorType,
    ValidationWarningType,
    ValidationError,
    ValidationWarning,
    ValidationResult,
    DocumentValidationReport,
)
from .edit_point import (
    EditType,
    SourceRelationship,
    EditPoint,
    CutDetectionResult,
)
from .annotations import (
    Marker,
    ChapterMarker,
    Keyword,
    Rating,
    RatingValue,
    Metadata,
    MetadataKey,
)
from .timeline import (
    Timeline,
    TimelineClip,
    TimelineFormat,
    RippleLanes,
    ClipShift,
    RippleInsertResult,
    ClipPlacement,
    NoAvailableLaneError,
    ranges_overlap,
)

__all__ = [
    # Time
    "RationalTime",
    "TimeParseError",
    "parse_time",
    "FrameRate",
    "Timecode",
    "conform",
    "frame_aligned",
    "aligned",
    "timecode_from_time",
    "time_from_timecode",
    "time_from_components",
    "counter_string",
    # Versions and validation
    "SchemaVersion",
    "ValidationErrorType",
    "ValidationWarningType",
    "ValidationError",
    "ValidationWarning",
    "ValidationResult",
    "DocumentValidationReport",
    # Edit points
    "EditType",
    "SourceRelationship",
    "EditPoint",
    "CutDetectionResult",
    # Annotations
    "Marker",
    "ChapterMarker",
    "Keyword",
    "Rating",
    "RatingValue",
    "Metadata",
    "MetadataKey",
    # Timeline
    "Timeline",
    "TimelineClip",
    "TimelineFormat",
    "RippleLanes",
    "ClipShift",
    "RippleInsertResult",
    "ClipPlacement",
    "NoAvailableLaneError",
    "ranges_overlap",
]
