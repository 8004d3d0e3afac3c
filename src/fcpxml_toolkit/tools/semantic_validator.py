"""
Reference graph validation.

Walks the whole document once, collecting every ``id`` and every ``ref``.
A ``ref`` is resolved against ids anywhere in the document, not only in
``resources``; nested definitions such as ``text-style-def`` count too.
Time attributes are checked on the same pass.
"""

import logging
from typing import List, Optional, Set, Tuple

from ..config import Settings, settings as default_settings
from ..document.tree import Document
from ..interfaces import SemanticValidatorInterface
from ..models.rational_time import RationalTime
from ..models.validation import (
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    ValidationWarning,
    ValidationWarningType,
)


logger = logging.getLogger(__name__)

TIME_ATTRIBUTES = ("duration", "offset", "start")


class ReferenceGraphValidator(SemanticValidatorInterface):
    """Checks structure, reference integrity and time attributes."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings

    def validate(self, document: Document) -> ValidationResult:
        """Validate a document's structure and references.

        A missing root (or a root that isn't ``fcpxml``) stops validation.
        A missing ``resources`` element is reported and the walk continues
        so dangling references are still enumerated.

        Args:
            document: Document to inspect

        Returns:
            ValidationResult with one ``missing_asset_reference`` error per
            dangling ``ref`` occurrence
        """
        if document.root is None:
            return ValidationResult.of_error(
                ValidationErrorType.MISSING_REQUIRED_ELEMENT,
                "Document has no root element",
                {"element": "fcpxml"},
            )
        if document.root_tag != "fcpxml":
            return ValidationResult.of_error(
                ValidationErrorType.MISSING_REQUIRED_ELEMENT,
                f"Root element is <{document.root_tag}>, expected <fcpxml>",
                {"element": "fcpxml", "found": document.root_tag},
            )

        errors: List[ValidationError] = []
        warnings: List[ValidationWarning] = []

        if document.first_child(document.root, "resources") is None:
            errors.append(ValidationError(
                type=ValidationErrorType.MISSING_REQUIRED_ELEMENT,
                message="Document has no <resources> element",
                context={"element": "resources"},
            ))

        ids: Set[str] = set()
        refs: List[Tuple[str, int]] = []
        for index in document.iter():
            attributes = document.attributes(index)
            node_id = attributes.get("id")
            if node_id:
                ids.add(node_id)
            ref = attributes.get("ref")
            if ref:
                refs.append((ref, index))
            self._check_times(document, index, errors, warnings)

        for ref, index in refs:
            if ref in ids:
                continue
            tag = document.tag(index)
            logger.debug(f"Dangling ref {ref!r} on <{tag}>")
            errors.append(ValidationError(
                type=ValidationErrorType.MISSING_ASSET_REFERENCE,
                message=f"<{tag}> references missing resource {ref!r}",
                context={"ref": ref, "element": tag},
            ))

        result = ValidationResult(errors=errors, warnings=warnings)
        logger.info(
            f"Semantic validation: {len(ids)} id(s), {len(refs)} ref(s), "
            f"{len(errors)} error(s), {len(warnings)} warning(s)"
        )
        return result

    def _check_times(
        self,
        document: Document,
        index: int,
        errors: List[ValidationError],
        warnings: List[ValidationWarning],
    ) -> None:
        tag = document.tag(index)
        for name in TIME_ATTRIBUTES:
            raw = document.get(index, name)
            if raw is None:
                continue
            context = {"attribute": name, "element": tag, "value": raw}

            if not RationalTime.is_valid_string(raw):
                message = f"<{tag}> has malformed {name} {raw!r}"
                if self.settings.strict_time_parsing:
                    errors.append(ValidationError(
                        type=ValidationErrorType.INVALID_TIME_VALUE, message=message, context=context,
                    ))
                else:
                    warnings.append(ValidationWarning(
                        type=ValidationWarningType.INVALID_TIME_VALUE, message=message, context=context,
                    ))
                continue

            if RationalTime.parse(raw).is_negative:
                warnings.append(ValidationWarning(
                    type=ValidationWarningType.NEGATIVE_TIME_ATTRIBUTE,
                    message=f"<{tag}> has negative {name} {raw}",
                    context=context,
                ))
