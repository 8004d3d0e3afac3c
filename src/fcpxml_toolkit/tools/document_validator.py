"""Combined semantic and DTD validation."""

import logging
from typing import Optional

from ..config import Settings, settings as default_settings
from ..document.tree import Document
from ..interfaces import SchemaValidatorInterface, SemanticValidatorInterface
from ..models.validation import DocumentValidationReport
from ..models.version import SchemaVersion
from .schema_validator import SchemaValidator
from .semantic_validator import ReferenceGraphValidator


logger = logging.getLogger(__name__)


class DocumentValidator:
    """Runs both validation passes and reports them side by side."""

    def __init__(
        self,
        semantic: Optional[SemanticValidatorInterface] = None,
        schema: Optional[SchemaValidatorInterface] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize with the two passes to compose.

        Args:
            semantic: Reference graph validator, default ReferenceGraphValidator
            schema: Grammar validator, default SchemaValidator
            settings: Settings for the default validators
        """
        settings = settings or default_settings
        self.semantic = semantic or ReferenceGraphValidator(settings)
        self.schema = schema or SchemaValidator(settings)

    def validate(self, document: Document) -> DocumentValidationReport:
        """Validate semantics and the grammar of the declared version."""
        report = DocumentValidationReport(
            semantic=self.semantic.validate(document),
            dtd=self.schema.validate_declared(document),
        )
        logger.info(report.summary)
        return report

    def validate_against(self, document: Document, version: SchemaVersion) -> DocumentValidationReport:
        """Validate semantics and the grammar of an explicit version."""
        report = DocumentValidationReport(
            semantic=self.semantic.validate(document),
            dtd=self.schema.validate(document, version),
        )
        logger.info(report.summary)
        return report

    async def validate_async(self, document: Document) -> DocumentValidationReport:
        return self.validate(document)

    async def validate_against_async(self, document: Document, version: SchemaVersion) -> DocumentValidationReport:
        return self.validate_against(document, version)
