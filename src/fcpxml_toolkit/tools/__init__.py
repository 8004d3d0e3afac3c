"""Validation, cut detection, conversion and timeline reading tools."""

from .semantic_validator import ReferenceGraphValidator
from .schema_validator import SchemaAllowlist, SchemaValidator
from .document_validator import DocumentValidator
from .cut_detector import CutDetector
from .version_converter import ConversionResult, VersionConversionError, VersionConverter
from .timeline_reader import TimelineReader, read_timeline

__all__ = [
    "ReferenceGraphValidator",
    "SchemaAllowlist",
    "SchemaValidator",
    "DocumentValidator",
    "CutDetector",
    "ConversionResult",
    "VersionConversionError",
    "VersionConverter",
    "TimelineReader",
    "read_timeline",
]
