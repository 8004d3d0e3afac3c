"""
FCPXML toolkit.

Exact rational time, reference and DTD validation across FCPXML 1.5 to
1.14, edit point detection, version conversion and a lane-based timeline
edit engine.
"""

from .config import Settings, settings
from .document import Document, DocumentParseError, load_document, load_document_async, save_document, save_document_async
from .models import (
    RationalTime,
    TimeParseError,
    SchemaVersion,
    ValidationResult,
    DocumentValidationReport,
    EditPoint,
    CutDetectionResult,
    Timeline,
    TimelineClip,
    RippleLanes,
    NoAvailableLaneError,
)
from .tools import (
    ReferenceGraphValidator,
    SchemaValidator,
    DocumentValidator,
    CutDetector,
    ConversionResult,
    VersionConversionError,
    VersionConverter,
    read_timeline,
)

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "settings",
    "Document",
    "DocumentParseError",
    "load_document",
    "load_document_async",
    "save_document",
    "save_document_async",
    "RationalTime",
    "TimeParseError",
    "SchemaVersion",
    "ValidationResult",
    "DocumentValidationReport",
    "EditPoint",
    "CutDetectionResult",
    "Timeline",
    "TimelineClip",
    "RippleLanes",
    "NoAvailableLaneError",
    "ReferenceGraphValidator",
    "SchemaValidator",
    "DocumentValidator",
    "CutDetector",
    "ConversionResult",
    "VersionConversionError",
    "VersionConverter",
    "read_timeline",
]
