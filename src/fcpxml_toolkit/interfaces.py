"""Abstract interfaces for the FCPXML toolkit.

Each concern gets its own narrow interface so callers compose only the
pieces they need.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from .document.tree import Document
from .models.edit_point import CutDetectionResult
from .models.validation import ValidationResult
from .models.version import SchemaVersion

if TYPE_CHECKING:
    from .tools.schema_validator import SchemaAllowlist
    from .tools.version_converter import ConversionResult


class SemanticValidatorInterface(ABC):
    """Checks a document's reference graph and time attributes."""

    @abstractmethod
    def validate(self, document: Document) -> ValidationResult:
        """Validate structure and references.

        Args:
            document: Document to inspect, not modified

        Returns:
            Errors and warnings found; never raises for document problems
        """
        pass


class SchemaValidatorInterface(ABC):
    """Checks a document against a versioned grammar."""

    @abstractmethod
    def validate(self, document: Document, version: SchemaVersion) -> ValidationResult:
        """Validate against the grammar of ``version``.

        Args:
            document: Document to inspect, not modified
            version: Grammar to validate against

        Returns:
            One error per grammar violation
        """
        pass

    @abstractmethod
    def validate_declared(self, document: Document) -> ValidationResult:
        """Validate against the version the document declares.

        Returns:
            Grammar errors, or an ``invalid_version`` error when the
            declared version is absent or unsupported
        """
        pass


class SchemaGrammarInterface(ABC):
    """Answers questions about what a grammar version allows."""

    @abstractmethod
    def allowlist(self, version: SchemaVersion) -> Optional["SchemaAllowlist"]:
        """Elements and attributes declared by ``version``.

        Returns:
            The allowlist, or None when the grammar is unavailable
        """
        pass

    @abstractmethod
    def required_attributes(self, version: SchemaVersion) -> Dict[str, Set[str]]:
        """Element name to attributes declared ``#REQUIRED``."""
        pass

    @abstractmethod
    def required_children(self, version: SchemaVersion) -> Dict[str, List[str]]:
        """Element name to child elements its content model requires."""
        pass


class CutDetectorInterface(ABC):
    """Finds edit points on a spine."""

    @abstractmethod
    def detect_cuts(self, document: Document) -> CutDetectionResult:
        """Detect edit points on the first project's primary spine."""
        pass

    @abstractmethod
    def detect_cuts_in_spine(self, document: Document, spine: int) -> CutDetectionResult:
        """Detect edit points on the spine at node index ``spine``."""
        pass


class VersionConverterInterface(ABC):
    """Rewrites documents between grammar versions."""

    @abstractmethod
    def convert(self, document: Document, target: SchemaVersion) -> "ConversionResult":
        """Produce a new document at ``target``; the input is never modified."""
        pass

