"""
DTD validation against the bundled per-version grammars.

Grammars are loaded with lxml and cached per file. Besides validating,
the loaded declarations are introspected to tell the version converter
which elements and attributes a version allows and which ones it
requires.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Set

from lxml import etree

from ..config import Settings, settings as default_settings
from ..document.tree import Document
from ..interfaces import SchemaGrammarInterface, SchemaValidatorInterface
from ..models.validation import ValidationError, ValidationErrorType, ValidationResult
from ..models.version import SchemaVersion


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaAllowlist:
    """Elements a grammar declares, each with its declared attributes."""
    version: SchemaVersion
    attributes: Dict[str, FrozenSet[str]]

    @property
    def elements(self) -> FrozenSet[str]:
        return frozenset(self.attributes)

    def allows_element(self, tag: str) -> bool:
        return tag in self.attributes

    def allows_attribute(self, tag: str, name: str) -> bool:
        return name in self.attributes.get(tag, frozenset())


@lru_cache(maxsize=32)
def _load_dtd(path: str) -> Optional[etree.DTD]:
    grammar = Path(path)
    if not grammar.exists():
        logger.warning(f"DTD grammar not found: {grammar}")
        return None
    try:
        dtd = etree.DTD(file=str(grammar))
    except etree.DTDParseError as e:
        logger.error(f"Failed to parse DTD {grammar.name}: {e}")
        return None
    logger.debug(f"Loaded DTD {grammar.name}")
    return dtd


def _required_child_names(content) -> List[str]:
    """Element names a content model requires at least once.

    Only sequences of once/plus particles are followed; choices and
    optional or repeated groups require nothing.
    """
    if content is None or content.occur in ("opt", "mult"):
        return []
    if content.type == "element":
        return [content.name]
    if content.type == "seq":
        return _required_child_names(content.left) + _required_child_names(content.right)
    return []


class SchemaValidator(SchemaValidatorInterface, SchemaGrammarInterface):
    """Validates documents against versioned FCPXML DTDs."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the validator.

        Args:
            settings: Toolkit settings; ``dtd_directory`` selects the grammars
        """
        self.settings = settings or default_settings

    def grammar_path(self, version: SchemaVersion) -> Path:
        return self.settings.get_dtd_directory() / f"{version.dtd_resource_name}.dtd"

    def load_dtd(self, version: SchemaVersion) -> Optional[etree.DTD]:
        """Loaded grammar for ``version``, or None when unavailable."""
        return _load_dtd(str(self.grammar_path(version)))

    def is_available(self, version: SchemaVersion) -> bool:
        return self.load_dtd(version) is not None

    def validate(self, document: Document, version: SchemaVersion) -> ValidationResult:
        """Validate ``document`` against the grammar for ``version``.

        Args:
            document: Document to validate
            version: Grammar version

        Returns:
            One ``dtd_validation`` error per grammar violation, or a single
            ``schema_unavailable`` error when the grammar can't be loaded
        """
        dtd = self.load_dtd(version)
        if dtd is None:
            return ValidationResult.of_error(
                ValidationErrorType.SCHEMA_UNAVAILABLE,
                f"No DTD grammar available for FCPXML {version.value}",
                {"version": version.value, "path": str(self.grammar_path(version))},
            )

        if document.root is None:
            return ValidationResult.of_error(
                ValidationErrorType.MISSING_REQUIRED_ELEMENT,
                "Document has no root element",
                {"element": "fcpxml"},
            )

        # Round trip through text so error lines point into the serialized document
        serialized = document.to_string(pretty=True, doctype=False).encode("utf-8")
        element = etree.fromstring(serialized, parser=etree.XMLParser(resolve_entities=False, no_network=True))

        if dtd.validate(element):
            logger.info(f"DTD validation against {version.value} passed")
            return ValidationResult.success()

        errors = [
            ValidationError(
                type=ValidationErrorType.DTD_VALIDATION,
                message=entry.message,
                context={"version": version.value, "line": str(entry.line)},
            )
            for entry in dtd.error_log.filter_from_errors()
        ]
        if not errors:
            errors.append(ValidationError(
                type=ValidationErrorType.DTD_VALIDATION,
                message=f"Document does not conform to FCPXML {version.value}",
                context={"version": version.value},
            ))
        logger.info(f"DTD validation against {version.value} failed with {len(errors)} error(s)")
        return ValidationResult(errors=errors)

    def validate_declared(self, document: Document) -> ValidationResult:
        """Validate against the version in the root ``version`` attribute."""
        if document.root is None:
            return ValidationResult.of_error(
                ValidationErrorType.MISSING_REQUIRED_ELEMENT,
                "Document has no root element",
                {"element": "fcpxml"},
            )

        declared = document.version
        if declared is None:
            return ValidationResult.of_error(
                ValidationErrorType.INVALID_VERSION,
                "Root element has no version attribute",
                {"element": document.root_tag or ""},
            )

        version = SchemaVersion.from_string(declared)
        if version is None:
            return ValidationResult.of_error(
                ValidationErrorType.INVALID_VERSION,
                f"Unsupported FCPXML version {declared!r}",
                {"version": declared},
            )
        return self.validate(document, version)

    # Grammar introspection

    def allowlist(self, version: SchemaVersion) -> Optional[SchemaAllowlist]:
        dtd = self.load_dtd(version)
        if dtd is None:
            return None
        attributes = {
            declaration.name: frozenset(attribute.name for attribute in declaration.iterattributes())
            for declaration in dtd.iterelements()
        }
        return SchemaAllowlist(version=version, attributes=attributes)

    def required_attributes(self, version: SchemaVersion) -> Dict[str, Set[str]]:
        dtd = self.load_dtd(version)
        if dtd is None:
            return {}
        required: Dict[str, Set[str]] = {}
        for declaration in dtd.iterelements():
            names = {
                attribute.name for attribute in declaration.iterattributes()
                if attribute.default == "required"
            }
            if names:
                required[declaration.name] = names
        return required

    def required_children(self, version: SchemaVersion) -> Dict[str, List[str]]:
        dtd = self.load_dtd(version)
        if dtd is None:
            return {}
        required: Dict[str, List[str]] = {}
        for declaration in dtd.iterelements():
            names = _required_child_names(declaration.content)
            if names:
                required[declaration.name] = names
        return required
